"""
MapQuest Geocoder — Client
===========================
Thin synchronous wrapper around the MapQuest Geocoding Web Service.

Each call builds one GET request, sends it through a ``requests.Session``,
and reshapes the JSON response into flat location dicts.  The address
text the service echoes back (``providedLocation.location``) is copied
into every location so a result can be used without knowing which query
produced it.

Classes:
    GeocoderConfig      Immutable client settings.
    LocationQuery       One address, optionally restricted to a country.
    MapquestGeocoder    The client.

Usage::

    from mapquest_geocoder import MapquestGeocoder

    geocoder = MapquestGeocoder("Your API key")
    location = geocoder.geocode("Hollywood and Highland, Los Angeles, CA")
    every_match = geocoder.geocode_all("Springfield", country="US")
    groups = geocoder.batch_geocode(["Times Square, NY", "Fenway Park, Boston"])

Failures (non-success status, no connection, malformed body) come back as
empty results.  Build the client with ``strict=True`` to get
:class:`~mapquest_geocoder.exceptions.ServiceError` and
:class:`~mapquest_geocoder.exceptions.ResponseParseError` instead.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Union
from urllib.parse import unquote

import requests

from mapquest_geocoder import __version__
from mapquest_geocoder.exceptions import (
    ConfigError,
    ResponseParseError,
    ServiceError,
)
from mapquest_geocoder.log import configure_logging
from mapquest_geocoder.log import logger as package_logger
from mapquest_geocoder.validators import Validators

logger = logging.getLogger("mapquest_geocoder.client")
http_logger = logging.getLogger("mapquest_geocoder.http")

SERVICE_HOST = "www.mapquestapi.com"
ADDRESS_PATH = "/geocoding/v1/address"
BATCH_PATH = "/geocoding/v1/batch"

#: Maximum number of locations the batch endpoint accepts per request.
MAX_BATCH_LOCATIONS = 100

USER_AGENT = f"mapquest-geocoder/{__version__}"

LocationResult = dict[str, Any]
Query = Union[str, "LocationQuery", Mapping[str, Any], None]


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GeocoderConfig:
    """Immutable settings for a :class:`MapquestGeocoder`.

    Attributes:
        api_key: The service key, already URL-decoded.
        https: Send requests over HTTPS instead of HTTP.
        debug: Log every request and response in full.
        timeout: Seconds passed through to ``Session.get``; ``None`` waits
                 forever.
        strict: Raise on service and parse failures instead of returning
                empty results.
    """

    api_key: str
    https: bool = False
    debug: bool = False
    timeout: float | None = None
    strict: bool = False

    @property
    def scheme(self) -> str:
        return "https" if self.https else "http"

    def url_for(self, path: str) -> str:
        return f"{self.scheme}://{SERVICE_HOST}{path}"


@dataclass(frozen=True)
class LocationQuery:
    """A single address to geocode.

    Attributes:
        location: Free-text address.
        country: Optional country code, sent as ``adminArea1``.
    """

    location: str
    country: str | None = None

    @classmethod
    def coerce(cls, query: Query, country: str | None = None) -> "LocationQuery":
        """Build a query from a bare string, a mapping, or another query.

        An explicit *country* overrides the one carried by *query*.
        """
        if isinstance(query, LocationQuery):
            location, query_country = query.location, query.country
        elif isinstance(query, Mapping):
            location, query_country = query.get("location"), query.get("country")
        else:
            location, query_country = query, None
        return cls(location=location or "", country=country or query_country)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class MapquestGeocoder:
    """Client for the MapQuest Geocoding Web Service.

    Args:
        api_key: Service key, as issued.  MapQuest hands out keys that are
                 already URL-encoded; pass it unchanged and it is decoded
                 once here.  May be given positionally.
        https: Use HTTPS.  Requires TLS support in the session.
        session: A ``requests.Session`` to send requests through.  Defaults
                 to a new session identifying itself as
                 ``mapquest-geocoder/<version>``.
        debug: Log every request and response in full to stderr.
        timeout: Request timeout in seconds, passed to ``Session.get``.
        strict: Raise :class:`ServiceError` / :class:`ResponseParseError`
                instead of returning empty results.

    Raises:
        ConfigError: If no key is given, *session* is not a
            ``requests.Session``, or HTTPS is requested without TLS.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        https: bool = False,
        session: requests.Session | None = None,
        debug: bool = False,
        timeout: float | None = None,
        strict: bool = False,
    ) -> None:
        if not api_key:
            raise ConfigError("'api_key' is required")

        self.config: GeocoderConfig = GeocoderConfig(
            api_key=unquote(api_key),
            https=https,
            debug=debug,
            timeout=timeout,
            strict=strict,
        )

        owns_session = session is None
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
        self._session: requests.Session | None = None
        self.session = session
        self._owns_session = owns_session

    @classmethod
    def from_config(cls, options: Mapping[str, Any]) -> "MapquestGeocoder":
        """Build a client from a mapping of options.

        Recognised keys: ``api_key`` (or ``apikey``), ``https``,
        ``session`` (or ``ua``), ``debug``, ``timeout``, ``strict``.
        """
        return cls(
            options.get("api_key") or options.get("apikey"),
            https=bool(options.get("https", False)),
            session=options.get("session") or options.get("ua"),
            debug=bool(options.get("debug", False)),
            timeout=options.get("timeout"),
            strict=bool(options.get("strict", False)),
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @property
    def session(self) -> requests.Session:
        """The ``requests.Session`` every request is sent through."""
        return self._session

    @session.setter
    def session(self, session: requests.Session) -> None:
        if not isinstance(session, requests.Session):
            raise ConfigError(
                "'session' must be (or derive from) requests.Session, "
                f"got {type(session).__name__}"
            )
        if self.config.https:
            _check_tls(session)
        if self._session is not None and self._session is not session:
            _remove_debug_hook(self._session)
        if self.config.debug:
            _install_debug_hook(session)
        self._session = session
        self._owns_session = False

    def close(self) -> None:
        """Close the session if this client created it.

        A session passed in by the caller is left open, but the debug hook
        this client added to it is removed.
        """
        if self._owns_session:
            self._session.close()
        else:
            _remove_debug_hook(self._session)

    def __enter__(self) -> "MapquestGeocoder":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def geocode(self, query: Query, country: str | None = None) -> LocationResult | None:
        """Geocode one address and return its best match.

        Args:
            query: Address string, :class:`LocationQuery`, or a mapping
                   with ``location`` and optional ``country``.
            country: Country code restricting the search (``adminArea1``).

        Returns:
            The first location dict, or ``None`` when the address is empty,
            nothing matched, or the request failed.
        """
        locations = self.geocode_all(query, country)
        return locations[0] if locations else None

    def geocode_all(self, query: Query, country: str | None = None) -> list[LocationResult]:
        """Geocode one address and return every candidate match, in the
        order the service ranks them.

        Each location dict is flat: it carries a ``providedLocation`` key
        holding the address text the service echoed back.
        """
        request = LocationQuery.coerce(query, country)
        if not request.location:
            return []

        params: dict[str, Any] = {
            "key": self.config.api_key,
            "location": request.location.encode("utf-8"),
        }
        if request.country:
            params["adminArea1"] = request.country

        data = self._get(ADDRESS_PATH, params)
        if data is None:
            return []

        results = _results_of(data)
        return _flatten_result(results[0]) if results else []

    def batch_geocode(
        self, locations: Sequence[str | LocationQuery] | Mapping[str, Any] | None
    ) -> list[list[LocationResult]]:
        """Geocode up to 100 addresses in a single request.

        Args:
            locations: Addresses as strings or :class:`LocationQuery`
                       objects, or a mapping with a ``locations`` key.
                       Countries are ignored; the batch endpoint has no
                       per-location country filter.

        Returns:
            One list of location dicts per result group, in the order the
            service returned them.  ``[]`` for empty input or on failure.

        Raises:
            TooManyLocationsError: If more than 100 locations are given.
                Checked before any request is sent.
        """
        if isinstance(locations, Mapping):
            locations = locations.get("locations")
        if not locations:
            return []
        if isinstance(locations, (str, LocationQuery)):
            locations = [locations]

        Validators.assert_batch_size(len(locations), MAX_BATCH_LOCATIONS)

        params = {
            "key": self.config.api_key,
            "location": [
                LocationQuery.coerce(item).location.encode("utf-8")
                for item in locations
            ],
        }

        data = self._get(BATCH_PATH, params)
        if data is None:
            return []

        groups = [_flatten_result(result) for result in _results_of(data)]
        logger.debug(
            "Batch of %d locations returned %d result groups.", len(locations), len(groups)
        )
        return groups

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get(self, path: str, params: Mapping[str, Any]) -> dict[str, Any] | None:
        """Send one GET and decode the JSON object it returns.

        Returns ``None`` on any failure unless the client is strict.
        """
        url = self.config.url_for(path)
        session = self._session
        try:
            request = session.prepare_request(requests.Request("GET", url, params=params))
            if self.config.debug:
                _dump_request(request)
            settings = session.merge_environment_settings(request.url, {}, None, None, None)
            response = session.send(request, timeout=self.config.timeout, **settings)
        except requests.RequestException as exc:
            return self._fail(ServiceError(url, None, str(exc)))

        if not response.ok:
            return self._fail(ServiceError(response.url, response.status_code, response.reason or ""))

        try:
            data = json.loads(_decode_body(response))
        except ValueError as exc:
            return self._fail(ResponseParseError(f"Response is not valid JSON: {exc}"))

        if not isinstance(data, dict):
            return self._fail(
                ResponseParseError(f"Expected a JSON object, got {type(data).__name__}")
            )
        return data

    def _fail(self, error: ServiceError | ResponseParseError) -> None:
        if self.config.strict:
            raise error
        logger.warning("%s Returning no results.", error.message)
        return None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"https={self.config.https!r}, "
            f"debug={self.config.debug!r}, "
            f"strict={self.config.strict!r})"
        )


# ---------------------------------------------------------------------------
# Module helpers
# ---------------------------------------------------------------------------


def _results_of(data: Mapping[str, Any]) -> list[Any]:
    results = data.get("results")
    return results if isinstance(results, list) else []


def _flatten_result(result: Mapping[str, Any]) -> list[LocationResult]:
    """Copy a result group's echoed address into each of its locations."""
    if not isinstance(result, Mapping):
        return []
    locations = [
        dict(location)
        for location in result.get("locations") or []
        if isinstance(location, Mapping)
    ]
    echo = result.get("providedLocation")
    provided = echo.get("location") if isinstance(echo, Mapping) else None
    for location in locations:
        location["providedLocation"] = provided
    return locations


def _decode_body(response: requests.Response) -> str:
    """Decode the body as text.

    The service labels its payload ``application/json``; the declared
    charset is used when there is one, otherwise the detected encoding.
    """
    content_type = response.headers.get("Content-Type", "")
    encoding = None
    if "charset" in content_type.lower():
        encoding = requests.utils.get_encoding_from_headers(response.headers)
    encoding = encoding or response.apparent_encoding or "utf-8"
    return response.content.decode(encoding, errors="replace")


def _check_tls(session: requests.Session) -> None:
    """Raise :class:`ConfigError` unless *session* can speak HTTPS."""
    try:
        import ssl  # noqa: F401, PLC0415

        session.get_adapter(f"https://{SERVICE_HOST}/")
    except (ImportError, requests.exceptions.InvalidSchema) as exc:
        raise ConfigError("https requires a TLS-capable transport") from exc


def _install_debug_hook(session: requests.Session) -> None:
    """Log every response received through *session* in full.

    Requests are logged by the client before they are sent, so requests
    that never get a response still show up.
    """
    if not package_logger.handlers:
        configure_logging()
    http_logger.setLevel(logging.DEBUG)

    hooks = session.hooks.setdefault("response", [])
    if _dump_response not in hooks:
        hooks.append(_dump_response)


def _remove_debug_hook(session: requests.Session) -> None:
    hooks = session.hooks.get("response", [])
    if _dump_response in hooks:
        hooks.remove(_dump_response)


def _dump_request(request: requests.PreparedRequest) -> None:
    """Log *request* in full before it is sent."""
    body = request.body
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    http_logger.debug(
        "%s %s\n%s\n\n%s",
        request.method,
        request.url,
        _format_headers(request.headers),
        body or "",
    )


def _dump_response(response: requests.Response, *args: Any, **kwargs: Any) -> None:
    http_logger.debug(
        "HTTP %s %s\n%s\n\n%s",
        response.status_code,
        response.reason,
        _format_headers(response.headers),
        response.content.decode("utf-8", errors="replace"),
    )


def _format_headers(headers: Mapping[str, str]) -> str:
    return "\n".join(f"{name}: {value}" for name, value in headers.items())
