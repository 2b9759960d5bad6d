"""Client for Windy point forecasts, webcams and map links."""

from .cache import CacheAdapter, InMemoryCache, RedisCache
from .client import WindyClient
from .config import ClientConfig, ConfigError, load_config
from .coordinates import Coordinates
from .errors import (
    Failure,
    FailureKind,
    ProviderRejected,
    QuotaExceeded,
    TransportFailure,
    ValidationFailure,
    WindyClientError,
)
from .forecast import PointForecast, PointForecastParams
from .maps import MapLinkParams, generate_map_link
from .quota import QuotaStatus, QuotaTracker
from .webcams import Webcam, WebcamLocation, WebcamParams

__all__ = [
    "CacheAdapter",
    "ClientConfig",
    "ConfigError",
    "Coordinates",
    "Failure",
    "FailureKind",
    "InMemoryCache",
    "MapLinkParams",
    "PointForecast",
    "PointForecastParams",
    "ProviderRejected",
    "QuotaExceeded",
    "QuotaStatus",
    "QuotaTracker",
    "RedisCache",
    "TransportFailure",
    "ValidationFailure",
    "Webcam",
    "WebcamLocation",
    "WebcamParams",
    "WindyClient",
    "WindyClientError",
    "generate_map_link",
    "load_config",
]
