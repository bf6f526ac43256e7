"""Tests for the tile grid planner."""

from tiles.coverage import TileGrid, iter_tile_requests, plan_grid, tile_url


class TestPlanGrid:
    """Tests for plan_grid."""

    def test_corner_order_does_not_matter(self):
        a = plan_grid(45.069040, 0.865393, 44.150070, 2.340308, 12)
        b = plan_grid(44.150070, 2.340308, 45.069040, 0.865393, 12)
        c = plan_grid(45.069040, 2.340308, 44.150070, 0.865393, 12)
        assert a == b == c

    def test_normalized(self):
        grid = plan_grid(45.069040, 0.865393, 44.150070, 2.340308, 12)
        assert grid.min_x <= grid.max_x
        assert grid.min_y <= grid.max_y
        assert grid.zoom == 12

    def test_single_tile(self):
        """A degenerate box collapses to a 1x1 grid."""
        grid = plan_grid(44.0, 1.0, 44.0, 1.0, 10)
        assert grid.cols == 1
        assert grid.rows == 1
        assert grid.tile_count == 1
        assert (grid.min_x, grid.min_y) == (514, 372)

    def test_zoom_zero_is_whole_world(self):
        grid = plan_grid(-80.0, -179.0, 80.0, 179.0, 0)
        assert grid.tile_count == 1


class TestTileGrid:
    """Tests for TileGrid."""

    def test_dimensions(self):
        grid = TileGrid(min_x=3, max_x=5, min_y=10, max_y=11, zoom=4)
        assert grid.cols == 3
        assert grid.rows == 2
        assert grid.tile_count == 6

    def test_iter_cells_column_major(self):
        grid = TileGrid(min_x=0, max_x=1, min_y=0, max_y=1, zoom=1)
        assert list(grid.iter_cells()) == [(0, 0), (0, 1), (1, 0), (1, 1)]

    def test_empty_grid(self):
        grid = TileGrid(min_x=1, max_x=0, min_y=0, max_y=0, zoom=1)
        assert grid.tile_count == 0
        assert list(grid.iter_cells()) == []


class TestTileUrl:
    def test_format(self):
        url = tile_url('https://tile.openstreetmap.org/', 17, 66034, 47322)
        assert url == 'https://tile.openstreetmap.org/17/66034/47322.png'

    def test_iter_tile_requests(self):
        grid = TileGrid(min_x=7, max_x=8, min_y=3, max_y=3, zoom=4)
        requests = list(iter_tile_requests(grid, 'https://t/'))
        assert requests == [
            (7, 3, 'https://t/4/7/3.png'),
            (8, 3, 'https://t/4/8/3.png'),
        ]
