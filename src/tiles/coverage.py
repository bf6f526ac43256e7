from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from geo.topography import latlng_to_tile
from shared.constants import TILE_URL_TEMPLATE

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True)
class TileGrid:
    """Inclusive rectangle of tile indices at one zoom level."""

    min_x: int
    max_x: int
    min_y: int
    max_y: int
    zoom: int

    @property
    def cols(self) -> int:
        return max(0, self.max_x - self.min_x + 1)

    @property
    def rows(self) -> int:
        return max(0, self.max_y - self.min_y + 1)

    @property
    def tile_count(self) -> int:
        return self.cols * self.rows

    def iter_cells(self) -> Iterator[tuple[int, int]]:
        """Yield (x, y) for every cell, column by column."""
        for x in range(self.min_x, self.max_x + 1):
            for y in range(self.min_y, self.max_y + 1):
                yield x, y


def plan_grid(
    lat_min: float,
    lon_min: float,
    lat_max: float,
    lon_max: float,
    zoom: int,
) -> TileGrid:
    """
    Tile rectangle covering a bounding box.

    Corners may be given in any order; the result is normalized so that
    min <= max on both axes.
    """
    a = latlng_to_tile(lat_min, lon_min, zoom)
    b = latlng_to_tile(lat_max, lon_max, zoom)
    return TileGrid(
        min_x=min(a.x, b.x),
        max_x=max(a.x, b.x),
        min_y=min(a.y, b.y),
        max_y=max(a.y, b.y),
        zoom=zoom,
    )


def tile_url(base_url: str, zoom: int, x: int, y: int) -> str:
    return TILE_URL_TEMPLATE.format(base_url=base_url, z=zoom, x=x, y=y)


def iter_tile_requests(grid: TileGrid, base_url: str) -> Iterator[tuple[int, int, str]]:
    """Yield ``(x, y, url)`` for every cell of ``grid``."""
    for x, y in grid.iter_cells():
        yield x, y, tile_url(base_url, grid.zoom, x, y)
