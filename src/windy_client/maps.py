"""Shareable windy.com map links. Pure string building, no API call."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import quote

MAP_BASE_URL = "https://www.windy.com"
DEFAULT_LAYER = "wind"
DEFAULT_ZOOM = 10
MIN_ZOOM = 3
MAX_ZOOM = 17

LAYERS: tuple[str, ...] = ("wind", "gust", "rain", "temp", "pressure", "clouds", "waves", "swell")

# Extra characters left unescaped in the timestamp query value.
_QUERY_SAFE = "!*'()"


@dataclass(frozen=True)
class MapLinkParams:
    lat: float
    lon: float
    zoom: int | None = None
    layer: str | None = None
    timestamp: datetime | str | None = None
    menu: bool = True


def generate_map_link(params: MapLinkParams) -> str:
    """Return ``https://www.windy.com/{layer}/{lat}/{lon}/{zoom}`` plus query flags."""

    zoom = DEFAULT_ZOOM if params.zoom is None else max(MIN_ZOOM, min(MAX_ZOOM, int(params.zoom)))
    layer = params.layer or DEFAULT_LAYER

    url = f"{MAP_BASE_URL}/{layer}/{params.lat:.3f}/{params.lon:.3f}/{zoom}"

    if params.timestamp:
        url += f"?timestamp={quote(_format_timestamp(params.timestamp), safe=_QUERY_SAFE)}"

    if not params.menu:
        url += ("&" if "?" in url else "?") + "menu=false"

    return url


def _format_timestamp(value: datetime | str) -> str:
    if isinstance(value, datetime):
        as_utc = value.astimezone(UTC) if value.tzinfo is not None else value.replace(tzinfo=UTC)
        return as_utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return str(value)


__all__ = [
    "DEFAULT_LAYER",
    "DEFAULT_ZOOM",
    "LAYERS",
    "MAX_ZOOM",
    "MIN_ZOOM",
    "MapLinkParams",
    "generate_map_link",
]
