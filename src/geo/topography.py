import math
from dataclasses import dataclass

from shared.constants import (
    MERCATOR_MAX_LAT_DEG,
    WORLD_LNG_HALF_SPAN_DEG,
    WORLD_LNG_SPAN_DEG,
)


@dataclass(frozen=True)
class TileCoordinate:
    """Индексы тайла в схеме slippy map."""

    x: int
    y: int
    z: int


def _clamp_tile_index(value: int, zoom: int) -> int:
    return min(max(value, 0), 2**zoom - 1)


def lon_to_tile_x(lon_deg: float, zoom: int) -> int:
    """Номер столбца тайла для долготы WGS84."""
    x = math.floor((lon_deg + WORLD_LNG_HALF_SPAN_DEG) / WORLD_LNG_SPAN_DEG * 2**zoom)
    # lon = 180 даёт 2**zoom, а это уже следующий виток мира
    return _clamp_tile_index(x, zoom)


def lat_to_tile_y(lat_deg: float, zoom: int) -> int:
    """Номер строки тайла для широты WGS84 (Web Mercator)."""
    # За пределами ±85.0511° проекция уходит в бесконечность
    lat = min(max(lat_deg, -MERCATOR_MAX_LAT_DEG), MERCATOR_MAX_LAT_DEG)
    lat_rad = math.radians(lat)
    merc = math.log(math.tan(lat_rad) + 1 / math.cos(lat_rad))
    y = math.floor((1 - merc / math.pi) / 2 * 2**zoom)
    return _clamp_tile_index(y, zoom)


def latlng_to_tile(lat_deg: float, lon_deg: float, zoom: int) -> TileCoordinate:
    """Преобразует WGS84 (lat, lng) в индексы тайла на заданном зуме."""
    return TileCoordinate(
        x=lon_to_tile_x(lon_deg, zoom),
        y=lat_to_tile_y(lat_deg, zoom),
        z=zoom,
    )
