"""Command-line interface for quick forecast, webcam and map-link lookups."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import typer

from windy_client.client import WindyClient
from windy_client.config import load_config
from windy_client.errors import WindyClientError
from windy_client.forecast import PointForecastParams
from windy_client.logging_setup import setup_logging
from windy_client.maps import MapLinkParams, generate_map_link
from windy_client.webcams import WebcamParams


app = typer.Typer(help="Query the Windy point-forecast and webcam APIs.")


def _build_client(config: Optional[Path], api_key: Optional[str]) -> WindyClient:
    config_obj = load_config(config)
    overrides: dict[str, Any] = {}
    if api_key:
        overrides["api_key"] = api_key
    try:
        return WindyClient.from_config(config_obj, **overrides)
    except WindyClientError as exc:
        raise typer.BadParameter(exc.message, param_hint="--api-key") from exc


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise typer.BadParameter(f"Could not parse timestamp '{value}'.") from exc


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, sort_keys=True, default=str))


def _fail(exc: WindyClientError) -> NoReturn:
    typer.echo(f"Error ({exc.kind.value}): {exc.message}", err=True)
    raise typer.Exit(code=1)


_CONFIG_OPTION = typer.Option(
    None, "--config", help="Path to configuration YAML.", exists=True, dir_okay=False
)
_API_KEY_OPTION = typer.Option(
    None, "--api-key", help="Windy API key (overrides config and WINDY__API_KEY)."
)


@app.command()
def forecast(
    lat: float = typer.Argument(..., help="Latitude in degrees."),
    lon: float = typer.Argument(..., help="Longitude in degrees."),
    model: Optional[str] = typer.Option(None, help="Forecast model, e.g. gfs or ecmwf."),
    parameter: Optional[List[str]] = typer.Option(
        None, "--parameter", "-p", help="Weather parameter to request; repeatable."
    ),
    level: Optional[List[str]] = typer.Option(
        None, "--level", "-l", help="Level to request, e.g. surface or 850h; repeatable."
    ),
    config: Optional[Path] = _CONFIG_OPTION,
    api_key: Optional[str] = _API_KEY_OPTION,
) -> None:
    """Print the point forecast for LAT LON as JSON."""

    setup_logging()
    with _build_client(config, api_key) as client:
        try:
            result = client.get_point_forecast(
                PointForecastParams(
                    lat=lat,
                    lon=lon,
                    model=model,
                    parameters=parameter or None,
                    levels=level or None,
                )
            )
        except WindyClientError as exc:
            _fail(exc)
        _echo_json(result.to_dict())


@app.command()
def webcams(
    lat: float = typer.Argument(..., help="Latitude in degrees."),
    lon: float = typer.Argument(..., help="Longitude in degrees."),
    radius: Optional[float] = typer.Option(None, help="Search radius in km (default 50)."),
    limit: Optional[int] = typer.Option(None, help="Maximum number of webcams (default 10)."),
    config: Optional[Path] = _CONFIG_OPTION,
    api_key: Optional[str] = _API_KEY_OPTION,
) -> None:
    """Print webcams near LAT LON as JSON."""

    setup_logging()
    with _build_client(config, api_key) as client:
        try:
            result = client.get_webcams(WebcamParams(lat=lat, lon=lon, radius=radius, limit=limit))
        except WindyClientError as exc:
            _fail(exc)
        _echo_json([webcam.to_dict() for webcam in result])


@app.command("map-link")
def map_link(
    lat: float = typer.Argument(..., help="Latitude in degrees."),
    lon: float = typer.Argument(..., help="Longitude in degrees."),
    zoom: Optional[int] = typer.Option(None, help="Zoom level, clamped to 3-17 (default 10)."),
    layer: Optional[str] = typer.Option(None, help="Map layer (default wind)."),
    timestamp: Optional[str] = typer.Option(None, help="Forecast time (ISO 8601)."),
    menu: bool = typer.Option(True, "--menu/--no-menu", help="Show the windy.com menu."),
) -> None:
    """Print a windy.com map URL. Needs no API key."""

    url = generate_map_link(
        MapLinkParams(
            lat=lat,
            lon=lon,
            zoom=zoom,
            layer=layer,
            timestamp=_parse_timestamp(timestamp),
            menu=menu,
        )
    )
    typer.echo(url)


def main() -> None:  # pragma: no cover - entry point
    app()


__all__ = ["app", "main"]
