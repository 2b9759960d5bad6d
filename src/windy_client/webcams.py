"""Webcam request parameters and normalization of provider records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Mapping

LOGGER = logging.getLogger(__name__)

DEFAULT_RADIUS = 50
DEFAULT_LIMIT = 10
DEFAULT_STATUS = "active"


@dataclass(frozen=True)
class WebcamParams:
    lat: float
    lon: float
    radius: float | None = None  # kilometres
    limit: int | None = None


@dataclass(frozen=True)
class WebcamLocation:
    lat: float
    lon: float
    city: str | None = None
    country: str | None = None


@dataclass(frozen=True)
class Webcam:
    """Normalized webcam record."""

    id: str
    title: str
    url: str
    thumbnail_url: str
    location: WebcamLocation
    last_updated: datetime
    status: str = DEFAULT_STATUS

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible mapping understood by :meth:`from_dict`."""

        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "thumbnailUrl": self.thumbnail_url,
            "location": {
                "lat": self.location.lat,
                "lon": self.location.lon,
                "city": self.location.city,
                "country": self.location.country,
            },
            "lastUpdated": _format_instant(self.last_updated),
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Webcam":
        location = data["location"]
        return cls(
            id=data["id"],
            title=data["title"],
            url=data["url"],
            thumbnail_url=data["thumbnailUrl"],
            location=WebcamLocation(
                lat=location["lat"],
                lon=location["lon"],
                city=location.get("city"),
                country=location.get("country"),
            ),
            last_updated=_parse_instant(data["lastUpdated"]) or datetime.fromtimestamp(0, tz=UTC),
            status=data.get("status", DEFAULT_STATUS),
        )


def normalize_webcams(payload: Mapping[str, Any], called_at: datetime) -> list[Webcam]:
    """Map the provider ``webcams`` array into :class:`Webcam` records.

    Provider order is preserved and no record is dropped; missing optional
    fields fall back to their aliases and then to defaults.
    """

    records = payload.get("webcams") or []
    return [_normalize_webcam(item, called_at) for item in records]


def _normalize_webcam(item: Mapping[str, Any], called_at: datetime) -> Webcam:
    nested = item.get("location") or {}

    raw_updated = _first_present(item.get("lastUpdated"), item.get("updated"))
    last_updated = _parse_instant(raw_updated) if raw_updated is not None else None
    if last_updated is None:
        if raw_updated is not None:
            LOGGER.debug("Unparseable webcam timestamp %r for id=%s", raw_updated, item.get("id"))
        last_updated = called_at

    return Webcam(
        id=_as_str(item.get("id")),
        title=_as_str(item.get("title")),
        url=_as_str(item.get("url")),
        thumbnail_url=_as_str(item.get("thumbnail") or item.get("thumbnailUrl")),
        location=WebcamLocation(
            lat=_as_float(_first_present(nested.get("lat"), item.get("lat"))),
            lon=_as_float(_first_present(nested.get("lon"), item.get("lon"))),
            city=nested.get("city"),
            country=nested.get("country"),
        ),
        last_updated=last_updated,
        status=item.get("status") or DEFAULT_STATUS,
    )


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_float(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _parse_instant(raw: Any) -> datetime | None:
    """Parse ISO-8601 strings or epoch milliseconds into an aware UTC datetime."""

    if raw in (None, ""):
        return None

    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            return datetime.fromtimestamp(raw / 1000.0, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        text = str(raw)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _format_instant(value: datetime) -> str:
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


__all__ = [
    "DEFAULT_LIMIT",
    "DEFAULT_RADIUS",
    "Webcam",
    "WebcamLocation",
    "WebcamParams",
    "normalize_webcams",
]
