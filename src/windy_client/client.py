"""Public client facade combining quota, cache and fetch pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Mapping, TypeVar

from .cache import CacheAdapter, DEFAULT_TTL_SECONDS, RedisCache
from .config import DEFAULT_RATE_LIMIT_PER_DAY, ClientConfig
from .errors import validation_error
from .forecast import PointForecast, PointForecastParams
from .maps import MapLinkParams, generate_map_link
from .pipeline import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS, FetchPipeline
from .quota import DEFAULT_WINDOW_SECONDS, QuotaStatus, QuotaTracker
from .transport import TransportProtocol
from .webcams import Webcam, WebcamParams

_P = TypeVar("_P")


class WindyClient:
    """Client for the Windy point-forecast and webcam APIs.

    Every provider call is charged against the client-side quota before the
    cache is consulted, so cache hits still consume a request slot.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        cache: CacheAdapter | None = None,
        default_cache_ttl: float | None = DEFAULT_TTL_SECONDS,
        rate_limit_per_day: int = DEFAULT_RATE_LIMIT_PER_DAY,
        timeout: float = DEFAULT_TIMEOUT_MS,
        quota_window_seconds: float = DEFAULT_WINDOW_SECONDS,
        transport: TransportProtocol | None = None,
        now: Callable[[], float] | None = None,
        utcnow: Callable[[], datetime] | None = None,
    ) -> None:
        if not api_key:
            raise validation_error("API key is required")

        self._quota = QuotaTracker(
            rate_limit_per_day,
            window_seconds=quota_window_seconds,
            now=now,
        )
        self._pipeline = FetchPipeline(
            api_key=api_key,
            base_url=base_url or DEFAULT_BASE_URL,
            cache=cache,
            cache_ttl=default_cache_ttl,
            timeout_ms=timeout,
            transport=transport,
            now=utcnow,
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **overrides: Any) -> "WindyClient":
        """Build a client from :class:`ClientConfig`; ``overrides`` win."""

        options: dict[str, Any] = {
            "base_url": config.base_url,
            "default_cache_ttl": config.default_cache_ttl,
            "rate_limit_per_day": config.rate_limit_per_day,
            "timeout": config.timeout_ms,
            "quota_window_seconds": config.quota_window_seconds,
        }
        if config.redis_url:
            options["cache"] = RedisCache.from_url(config.redis_url)
        options.update(overrides)
        api_key = options.pop("api_key", config.api_key)
        return cls(api_key, **options)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get_point_forecast(
        self, params: PointForecastParams | None = None, /, **kwargs: Any
    ) -> PointForecast:
        """Return the point forecast for the given coordinates."""

        request = _build_params(PointForecastParams, params, kwargs)
        self._quota.check_limit()
        return self._pipeline.point_forecast(request)

    def get_webcams(self, params: WebcamParams | None = None, /, **kwargs: Any) -> list[Webcam]:
        """Return webcams near the given coordinates in provider order."""

        request = _build_params(WebcamParams, params, kwargs)
        self._quota.check_limit()
        return self._pipeline.webcams(request)

    def generate_map_link(self, params: MapLinkParams | None = None, /, **kwargs: Any) -> str:
        """Return a windy.com map URL; no API call and no quota charge."""

        request = _build_params(MapLinkParams, params, kwargs)
        return generate_map_link(request)

    def get_remaining_quota(self) -> QuotaStatus:
        return self._quota.get_remaining_quota()

    def close(self) -> None:
        self._pipeline.close()

    def __enter__(self) -> "WindyClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _build_params(factory: type[_P], params: _P | None, kwargs: Mapping[str, Any]) -> _P:
    if params is not None:
        if kwargs:
            raise validation_error(
                f"Pass either a {factory.__name__} or keyword arguments, not both"
            )
        return params
    try:
        return factory(**kwargs)
    except TypeError as exc:
        raise validation_error(f"Invalid {factory.__name__} arguments: {exc}") from exc


__all__ = ["WindyClient"]
