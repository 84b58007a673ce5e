"""SatNOGS DB REST API client using httpx."""

import time
from collections.abc import Iterator, Sequence

import httpx

from .errors import ApiError, NetworkError, UrlError
from .models import API_BASE, REQUEST_TIMEOUT, TELEMETRY_ENDPOINT, Telemetry, TelemetryPage
from .settings import get_settings


class SatnogsClient:
    """Thin read-only client for the SatNOGS DB API.

    Configuration is fixed at construction. Every call performs exactly one
    HTTP round trip; nothing is cached or retried.
    """

    def __init__(self, api_key: str = "", base_url: str = API_BASE):
        self._api_key = api_key or ""
        self._base_url = base_url
        self._client = httpx.Client(timeout=REQUEST_TIMEOUT)

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return REQUEST_TIMEOUT

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            return {}
        return {"Authorization": f"Token {self._api_key}"}

    def _send(self, url: httpx.URL, params: Sequence[tuple[str, str]] | None = None) -> httpx.Response:
        try:
            request = self._client.build_request(
                "GET", url, params=list(params) if params else None, headers=self._headers()
            )
        except httpx.InvalidURL as e:
            raise UrlError(f"Invalid request URL {url}: {e}") from e

        # One deadline for the whole call; httpx timeouts only bound each step
        deadline = time.monotonic() + REQUEST_TIMEOUT
        try:
            response = self._client.send(request, stream=True)
        except httpx.UnsupportedProtocol as e:
            raise UrlError(f"Unsupported request URL {url}: {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(f"GET {url} failed: {e}") from e

        try:
            return _read_before(response, deadline)
        except httpx.RequestError as e:
            raise NetworkError(f"GET {url} failed: {e}") from e
        finally:
            response.close()

    def get(self, endpoint: str, params: Sequence[tuple[str, str]] = ()) -> httpx.Response:
        """Make a GET call against an endpoint relative to the base URL.

        Args:
            endpoint: API path appended verbatim, e.g. "/telemetry/"
            params: Ordered (key, value) pairs; duplicates are all sent

        Returns:
            The raw httpx.Response. Status codes are not checked here and
            the caller is responsible for closing the response.
        """
        try:
            url = httpx.URL(self._base_url + endpoint)
        except httpx.InvalidURL as e:
            raise UrlError(f"Invalid URL {self._base_url + endpoint!r}: {e}") from e
        return self._send(url, params)

    def get_url(self, url: str) -> httpx.Response:
        """GET an absolute URL exactly as given, query string included."""
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise UrlError(f"Invalid URL {url!r}: {e}") from e
        if not parsed.is_absolute_url:
            raise UrlError(f"Expected an absolute URL, got {url!r}")
        return self._send(parsed)

    def get_telemetry_page(self, satellite_id: str) -> TelemetryPage:
        """Fetch the first page of telemetry for a satellite."""
        # format=json is always explicit; the API may default to a browsable renderer
        resp = self.get(TELEMETRY_ENDPOINT, [("sat_id", satellite_id), ("format", "json")])
        return _decode_page(resp)

    def get_telemetry(self, satellite_id: str) -> list[Telemetry]:
        """Fetch telemetry records for a satellite.

        Only the first page is returned. Use get_telemetry_page() with
        next_page() or iter_telemetry_pages() to walk the rest.
        """
        return list(self.get_telemetry_page(satellite_id).results)

    def next_page(self, page: TelemetryPage) -> TelemetryPage | None:
        """Fetch the page after ``page``, or None when there is none."""
        if not page.next:
            return None
        return _decode_page(self.get_url(page.next))

    def prev_page(self, page: TelemetryPage) -> TelemetryPage | None:
        """Fetch the page before ``page``, or None when there is none."""
        if not page.prev:
            return None
        return _decode_page(self.get_url(page.prev))

    def iter_telemetry_pages(self, satellite_id: str, max_pages: int | None = None) -> Iterator[TelemetryPage]:
        """Yield telemetry pages from the first one until the server stops linking."""
        if max_pages is not None and max_pages < 1:
            raise ValueError(f"max_pages must be at least 1, got {max_pages}")
        page = self.get_telemetry_page(satellite_id)
        count = 0
        while page is not None:
            yield page
            count += 1
            if max_pages is not None and count >= max_pages:
                return
            page = self.next_page(page)

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def client_from_settings() -> SatnogsClient:
    """Create a SatnogsClient configured from environment / .env settings."""
    return SatnogsClient(api_key=get_settings().satnogs_api_key)


def _read_before(response: httpx.Response, deadline: float) -> httpx.Response:
    """Read the raw body, giving up once the deadline passes.

    Returns a loaded copy of the response; content decoding happens there.
    """
    chunks = []
    for chunk in response.iter_raw():
        _check_deadline(response, deadline)
        chunks.append(chunk)
    _check_deadline(response, deadline)
    return httpx.Response(
        response.status_code,
        headers=response.headers,
        content=b"".join(chunks),
        request=response.request,
        extensions=response.extensions,
    )


def _check_deadline(response: httpx.Response, deadline: float):
    if time.monotonic() > deadline:
        raise httpx.ReadTimeout(
            f"Response not complete within {REQUEST_TIMEOUT:g}s", request=response.request
        )


def _decode_page(resp: httpx.Response) -> TelemetryPage:
    try:
        if not resp.is_success:
            raise ApiError(resp.status_code, str(resp.request.url), _error_detail(resp))
        return TelemetryPage.from_json(resp.content)
    finally:
        resp.close()


def _error_detail(resp: httpx.Response):
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text
