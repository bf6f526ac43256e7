"""Mosaic context - shared state for one mosaic run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from imaging.composer import MosaicCanvas
    from settings import MosaicSettings
    from tiles.coverage import TileGrid
    from tiles.fetcher import FetchResult


@dataclass
class MosaicContext:
    """
    State passed between the stages of a mosaic run.

    The canvas is owned by the run: it is filled once per tile and encoded
    exactly once at the end.
    """

    settings: MosaicSettings
    grid: TileGrid

    tiles: list[FetchResult] = field(default_factory=list)

    # Размер одного тайла (px), берётся из первого загруженного тайла
    tile_w: int = 0
    tile_h: int = 0

    canvas: MosaicCanvas | None = None

    @property
    def output_path(self) -> Path:
        return Path(self.settings.output_path)

    @property
    def canvas_size(self) -> tuple[int, int]:
        return self.tile_w * self.grid.cols, self.tile_h * self.grid.rows
