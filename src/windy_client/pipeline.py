"""Request lifecycle for the Windy point-forecast and webcam endpoints."""

from __future__ import annotations

import copy
import logging
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import UTC, datetime
from typing import Any, Callable, Mapping, TypeVar

import requests

from .cache import CacheAdapter
from .coordinates import validate_coordinates
from .errors import ProviderRejected, TransportFailure, WindyClientError
from .forecast import (
    DEFAULT_LEVELS,
    DEFAULT_MODEL,
    DEFAULT_PARAMETERS,
    PointForecast,
    PointForecastParams,
    derive_wind_fields,
)
from .transport import ResponseProtocol, TransportProtocol, call_with_deadline
from .webcams import DEFAULT_LIMIT, DEFAULT_RADIUS, Webcam, WebcamParams, normalize_webcams

LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")

DEFAULT_BASE_URL = "https://api.windy.com/api"
DEFAULT_TIMEOUT_MS = 10_000
FORECAST_ENDPOINT = "point-forecast/v2"
WEBCAMS_ENDPOINT = "webcams/v2"

_JSON_HEADERS = {"Content-Type": "application/json"}


class FetchPipeline:
    """Validate, consult the cache, call the provider and normalize the result.

    Cached values are kept JSON-compatible (the forecast payload mapping and a
    list of webcam mappings) so networked adapters can store them; hits are
    rehydrated into the same domain types a fresh call returns. Cache backend
    errors are logged and treated as a miss or a skipped write.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        cache: CacheAdapter | None = None,
        cache_ttl: float | None = None,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
        transport: TransportProtocol | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._cache = cache
        self._cache_ttl = cache_ttl
        self._timeout_seconds = float(timeout_ms) / 1000.0
        self._transport = transport
        self._now = now or (lambda: datetime.now(tz=UTC))
        self._session: requests.Session | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def point_forecast(self, params: PointForecastParams) -> PointForecast:
        """Return the forecast for ``params``, served from the cache when possible.

        The cache key covers coordinates and model only, so requests that differ
        only in ``parameters`` or ``levels`` share one cached payload.
        """

        coords = validate_coordinates(params.lat, params.lon)
        model = params.model or DEFAULT_MODEL

        cache_key = f"forecast:{coords.lat!r}:{coords.lon!r}:{model}"
        cached = self._cache_get(cache_key, _rehydrate_forecast)
        if cached is not None:
            return cached

        body = {
            "lat": coords.lat,
            "lon": coords.lon,
            "model": model,
            "parameters": list(params.parameters or DEFAULT_PARAMETERS),
            "levels": list(params.levels or DEFAULT_LEVELS),
            "key": self._api_key,
        }
        payload = self._post_json(FORECAST_ENDPOINT, body)
        if not isinstance(payload, Mapping):
            raise _malformed_payload(TypeError(f"expected a JSON object, got {type(payload).__name__}"))

        try:
            transformed = derive_wind_fields(payload)
        except (TypeError, ValueError) as exc:
            raise _malformed_payload(exc) from exc
        self._cache_set(cache_key, copy.deepcopy(transformed))
        return PointForecast(payload=transformed)

    def webcams(self, params: WebcamParams) -> list[Webcam]:
        coords = validate_coordinates(params.lat, params.lon)
        radius = params.radius or DEFAULT_RADIUS
        limit = params.limit or DEFAULT_LIMIT

        cache_key = f"webcams:{coords.lat!r}:{coords.lon!r}:{float(radius)!r}:{int(limit)}"
        cached = self._cache_get(cache_key, _rehydrate_webcams)
        if cached is not None:
            return cached

        body = {
            "lat": coords.lat,
            "lon": coords.lon,
            "radius": radius,
            "limit": limit,
            "key": self._api_key,
        }
        payload = self._post_json(WEBCAMS_ENDPOINT, body)
        if not isinstance(payload, Mapping):
            payload = {}

        try:
            webcams = normalize_webcams(payload, called_at=self._now())
        except (AttributeError, TypeError, ValueError) as exc:
            raise _malformed_payload(exc) from exc
        self._cache_set(cache_key, [webcam.to_dict() for webcam in webcams])
        return webcams

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _cache_get(self, key: str, rehydrate: Callable[[Any], _T]) -> _T | None:
        if self._cache is None:
            return None
        try:
            cached = self._cache.get(key)
        except Exception as exc:
            LOGGER.warning("Cache read for '%s' failed, treating as a miss: %s", key, exc)
            return None
        LOGGER.debug("Cache %s for '%s'", "hit" if cached is not None else "miss", key)
        if cached is None:
            return None
        try:
            return rehydrate(cached)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            LOGGER.warning("Discarding unreadable cache entry '%s': %s", key, exc)
            return None

    def _cache_set(self, key: str, value: Any) -> None:
        if self._cache is None or not self._cache_ttl or self._cache_ttl <= 0:
            return
        try:
            self._cache.set(key, value, self._cache_ttl)
        except Exception as exc:
            LOGGER.warning("Cache write for '%s' failed, result not cached: %s", key, exc)

    def _post_json(self, endpoint: str, body: Mapping[str, Any]) -> Any:
        url = f"{self.base_url}/{endpoint}"
        transport = self._transport or self._get_session()
        timeout = self._timeout_seconds

        def _send() -> ResponseProtocol:
            return transport.request(
                "POST",
                url,
                headers=_JSON_HEADERS,
                json=dict(body),
                timeout=timeout,
            )

        LOGGER.debug("POST %s (deadline %.3fs)", url, timeout)
        try:
            response = call_with_deadline(_send, timeout)
        except (FutureTimeoutError, requests.Timeout) as exc:
            LOGGER.warning("Request to '%s' timed out after %.3fs", endpoint, timeout)
            raise WindyClientError(
                TransportFailure(message="Request timeout", cause=exc, timed_out=True)
            ) from exc
        except Exception as exc:
            LOGGER.warning("Request to '%s' failed: %s", endpoint, exc)
            raise WindyClientError(
                TransportFailure(message=f"Network request failed: {exc}", cause=exc)
            ) from exc

        status = response.status_code
        if not 200 <= status < 300:
            body_text = response.text
            LOGGER.warning("Windy API returned status %s for endpoint '%s'", status, endpoint)
            raise WindyClientError(
                ProviderRejected(
                    message=f"API request failed: {response.reason or status}",
                    status_code=status,
                    body=body_text,
                )
            )

        try:
            return response.json()
        except ValueError as exc:
            raise _malformed_payload(exc) from exc

    def _get_session(self) -> requests.Session:
        if self._session is None:
            session = requests.Session()
            session.headers.update(_JSON_HEADERS)
            self._session = session
        return self._session


def _rehydrate_forecast(cached: Any) -> PointForecast:
    if not isinstance(cached, Mapping):
        raise TypeError(f"expected a mapping, got {type(cached).__name__}")
    return PointForecast(payload=copy.deepcopy(dict(cached)))


def _rehydrate_webcams(cached: Any) -> list[Webcam]:
    return [Webcam.from_dict(item) for item in cached]


def _malformed_payload(exc: Exception) -> WindyClientError:
    LOGGER.warning("Windy API returned a malformed payload: %s", exc)
    return WindyClientError(
        TransportFailure(message=f"Malformed provider payload: {exc}", cause=exc)
    )


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_MS",
    "FORECAST_ENDPOINT",
    "FetchPipeline",
    "WEBCAMS_ENDPOINT",
]
