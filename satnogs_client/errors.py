"""Exceptions raised by the SatNOGS DB client."""


class SatnogsError(Exception):
    """Base class for every error the client raises."""


class UrlError(SatnogsError):
    """Request URL could not be composed or is not absolute."""


class NetworkError(SatnogsError):
    """Transport-level failure, including the request timeout."""


class DecodeError(SatnogsError):
    """Response body is not JSON or does not match the expected shape."""


class ApiError(SatnogsError):
    """Server answered with a non-2xx status."""

    def __init__(self, status_code: int, url: str, detail=None):
        self.status_code = status_code
        self.url = url
        self.detail = detail
        super().__init__(f"SatNOGS API error {status_code} for {url}")
