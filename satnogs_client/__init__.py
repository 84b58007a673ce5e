"""Read-only client for the SatNOGS DB telemetry API.

Fetches telemetry pages for a satellite and walks the server's next/prev
pagination links.
"""

from .cli import main
from .client import SatnogsClient, client_from_settings
from .errors import ApiError, DecodeError, NetworkError, SatnogsError, UrlError
from .models import Telemetry, TelemetryPage

__all__ = [
    "main",
    "SatnogsClient",
    "client_from_settings",
    "Telemetry",
    "TelemetryPage",
    "SatnogsError",
    "UrlError",
    "NetworkError",
    "DecodeError",
    "ApiError",
]

if __name__ == "__main__":
    main()
