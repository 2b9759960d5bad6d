"""Point forecast request parameters, result type and wind derivation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np
import pandas as pd

DEFAULT_MODEL = "gfs"
DEFAULT_PARAMETERS: tuple[str, ...] = ("wind", "temp", "precip")
DEFAULT_LEVELS: tuple[str, ...] = ("surface",)

MODELS: tuple[str, ...] = ("gfs", "ecmwf", "iconEu", "namConus", "namHawaii", "namAlaska")
PARAMETERS: tuple[str, ...] = (
    "wind",
    "windGust",
    "temp",
    "dewpoint",
    "rh",
    "pressure",
    "clouds",
    "precip",
    "waves",
    "swell1",
    "swell2",
)

WIND_U_KEY = "wind_u-surface"
WIND_V_KEY = "wind_v-surface"
WIND_SPEED_KEY = "windSpeed"
WIND_DIRECTION_KEY = "windDirection"


@dataclass(frozen=True)
class PointForecastParams:
    lat: float
    lon: float
    model: str | None = None
    parameters: Sequence[str] | None = None
    levels: Sequence[str] | None = None


@dataclass(frozen=True)
class PointForecast:
    """Provider forecast payload with the derived wind channels merged in.

    ``payload`` holds the provider response as-is (``ts``, ``units`` and one
    array per channel such as ``temp`` or ``wind_u-surface``) plus
    ``windSpeed``/``windDirection`` when both wind components were present.
    """

    payload: Mapping[str, Any]

    @property
    def timestamps(self) -> list[Any]:
        return list(self.payload.get("ts") or [])

    @property
    def units(self) -> Mapping[str, str]:
        return self.payload.get("units") or {}

    @property
    def wind_speed(self) -> list[float | None] | None:
        return self.payload.get(WIND_SPEED_KEY)

    @property
    def wind_direction(self) -> list[float | None] | None:
        return self.payload.get(WIND_DIRECTION_KEY)

    def channel(self, name: str) -> list[Any] | None:
        """Return the series stored under ``name`` or ``None``."""

        value = self.payload.get(name)
        if value is None:
            return None
        return list(value)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.payload)

    def to_frame(self) -> pd.DataFrame:
        """Return the forecast as a frame indexed by UTC timestamps.

        Only channels whose length matches ``ts`` become columns.
        """

        timestamps = self.timestamps
        index = pd.DatetimeIndex(pd.to_datetime(timestamps, unit="ms", utc=True), name="ts")
        columns = {
            name: values
            for name, values in self.payload.items()
            if name not in {"ts", "units"}
            and isinstance(values, (list, tuple))
            and len(values) == len(timestamps)
        }
        return pd.DataFrame(columns, index=index)


def derive_wind_fields(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``payload`` with wind speed and direction appended.

    Speed is the Euclidean norm of ``(u, v)``. Direction is
    ``atan2(u, v)`` in degrees, shifted into ``[0, 360)``; note the argument
    order, which the provider integration has always used. Nothing is added
    unless both components are present with equal lengths. ``None`` entries in
    either component produce ``None`` at the same index.
    """

    result = dict(payload)
    u_values = payload.get(WIND_U_KEY)
    v_values = payload.get(WIND_V_KEY)
    if u_values is None or v_values is None:
        return result
    if len(u_values) != len(v_values):
        return result

    u = np.asarray(u_values, dtype=float)
    v = np.asarray(v_values, dtype=float)

    speed = np.sqrt(u * u + v * v)
    direction = np.arctan2(u, v) * 180.0 / np.pi
    direction = np.where(direction < 0, direction + 360.0, direction)
    # Tiny negative angles round up to exactly 360.0 after the shift.
    direction = np.where(direction >= 360.0, 0.0, direction)

    result[WIND_SPEED_KEY] = _to_list(speed)
    result[WIND_DIRECTION_KEY] = _to_list(direction)
    return result


def _to_list(values: np.ndarray) -> list[float | None]:
    return [None if np.isnan(value) else float(value) for value in values]


__all__ = [
    "DEFAULT_LEVELS",
    "DEFAULT_MODEL",
    "DEFAULT_PARAMETERS",
    "MODELS",
    "PARAMETERS",
    "PointForecast",
    "PointForecastParams",
    "derive_wind_fields",
]
