from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from windy_client.maps import MapLinkParams, generate_map_link


def test_basic_link_uses_defaults() -> None:
    url = generate_map_link(MapLinkParams(lat=45.5, lon=-122.6))
    assert url == "https://www.windy.com/wind/45.500/-122.600/10"


@pytest.mark.parametrize(("zoom", "expected"), [(1, 3), (3, 3), (12, 12), (17, 17), (20, 17)])
def test_zoom_is_clamped(zoom: int, expected: int) -> None:
    url = generate_map_link(MapLinkParams(lat=0, lon=0, zoom=zoom))
    assert url.endswith(f"/{expected}")


def test_coordinates_are_rounded_to_three_decimals() -> None:
    url = generate_map_link(MapLinkParams(lat=12.34567, lon=-0.0004, layer="rain"))
    assert url == "https://www.windy.com/rain/12.346/-0.000/10"


def test_timestamp_is_encoded_as_iso_8601() -> None:
    url = generate_map_link(
        MapLinkParams(lat=45.5, lon=-122.6, timestamp=datetime(2023, 12, 17, 12, 0, tzinfo=UTC))
    )
    assert url == "https://www.windy.com/wind/45.500/-122.600/10?timestamp=2023-12-17T12%3A00%3A00.000Z"


def test_timestamp_is_converted_to_utc() -> None:
    local = datetime(2023, 12, 17, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    url = generate_map_link(MapLinkParams(lat=0, lon=0, timestamp=local))
    assert "timestamp=2023-12-17T12%3A00%3A00.000Z" in url


def test_menu_false_uses_question_mark_without_other_query() -> None:
    url = generate_map_link(MapLinkParams(lat=45.5, lon=-122.6, menu=False))
    assert url == "https://www.windy.com/wind/45.500/-122.600/10?menu=false"


def test_menu_false_uses_ampersand_after_timestamp() -> None:
    url = generate_map_link(
        MapLinkParams(lat=45.5, lon=-122.6, timestamp="2023-12-17T12:00:00Z", menu=False)
    )
    assert url.endswith("?timestamp=2023-12-17T12%3A00%3A00Z&menu=false")


def test_menu_shown_by_default() -> None:
    assert "menu" not in generate_map_link(MapLinkParams(lat=1, lon=2))
