"""Latitude/longitude container and range checks."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import validation_error


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


def validate_coordinates(lat: float, lon: float) -> Coordinates:
    """Return ``Coordinates`` for ``lat``/``lon`` or raise a validation failure."""

    latitude = _as_float(lat, "Latitude")
    longitude = _as_float(lon, "Longitude")

    if math.isnan(latitude) or not -90.0 <= latitude <= 90.0:
        raise validation_error("Latitude must be between -90 and 90")
    if math.isnan(longitude) or not -180.0 <= longitude <= 180.0:
        raise validation_error("Longitude must be between -180 and 180")

    return Coordinates(lat=latitude, lon=longitude)


def _as_float(value: float, label: str) -> float:
    if isinstance(value, bool):
        raise validation_error(f"{label} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise validation_error(f"{label} must be a number") from exc


__all__ = ["Coordinates", "validate_coordinates"]
