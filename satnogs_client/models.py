"""Data models and constants for the SatNOGS DB client."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import DecodeError

API_BASE = "https://db.satnogs.org/api"
REQUEST_TIMEOUT = 10.0  # seconds, deadline for the whole call
TELEMETRY_ENDPOINT = "/telemetry/"


class Telemetry(BaseModel):
    """One decoded telemetry frame."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    sat_id: str
    norad_cat_id: int
    transmitter: str = ""
    app_source: str = ""
    decoded: str = ""
    frame: str = ""
    observer: str = ""
    timestamp: datetime
    version: str = ""
    observation_id: int | None = None
    station_id: int | None = None

    @field_validator(
        "transmitter", "app_source", "decoded", "frame", "observer", "version",
        mode="before",
    )
    @classmethod
    def _null_to_empty(cls, value):
        return "" if value is None else value


class TelemetryPage(BaseModel):
    """A page of telemetry results plus the server's navigation links.

    ``next`` and ``prev`` are opaque absolute URLs supplied by the server.
    An absent, null or empty link all mean there is no page in that direction.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    next: str | None = None
    prev: str | None = None
    results: tuple[Telemetry, ...]

    @field_validator("next", "prev", mode="before")
    @classmethod
    def _empty_to_none(cls, value):
        return value or None

    @property
    def has_next(self) -> bool:
        return bool(self.next)

    @property
    def has_prev(self) -> bool:
        return bool(self.prev)

    @classmethod
    def from_json(cls, raw: bytes | str) -> "TelemetryPage":
        """Decode a full response body, raising DecodeError on any mismatch."""
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise DecodeError(f"Malformed telemetry page: {e}") from e
