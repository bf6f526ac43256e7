"""Tests for image_io module."""

from io import BytesIO

import pytest
from PIL import Image

from imaging.composer import TileRect, composite_tile, new_canvas
from imaging.io import (
    build_save_kwargs,
    decode_tile_rgba,
    read_tile_size,
    save_canvas,
    save_jpeg,
)


def png_bytes(size=(4, 3), color=(10, 20, 30), mode='RGB') -> bytes:
    buf = BytesIO()
    Image.new(mode, size, color).save(buf, format='PNG')
    return buf.getvalue()


class TestBuildSaveKwargs:
    """Tests for build_save_kwargs function."""

    def test_default_quality(self):
        """Default quality should be 95."""
        kwargs = build_save_kwargs()
        assert kwargs['quality'] == 95

    def test_quality_clamped(self):
        assert build_save_kwargs(quality=5)['quality'] == 10
        assert build_save_kwargs(quality=150)['quality'] == 100

    def test_format_is_jpeg(self):
        """Format should always be JPEG."""
        kwargs = build_save_kwargs()
        assert kwargs['format'] == 'JPEG'
        assert kwargs['subsampling'] == 0


class TestReadTileSize:
    def test_from_path(self, tmp_path):
        path = tmp_path / 'tile.png'
        path.write_bytes(png_bytes(size=(7, 5)))
        assert read_tile_size(path) == (7, 5)

    def test_from_bytes(self):
        assert read_tile_size(png_bytes(size=(256, 256))) == (256, 256)

    def test_not_an_image(self, tmp_path):
        path = tmp_path / 'junk.png'
        path.write_bytes(b'<html>rate limited</html>')
        with pytest.raises(OSError):
            read_tile_size(path)


class TestDecodeTileRgba:
    def test_rgb_gets_opaque_alpha(self, tmp_path):
        path = tmp_path / 'tile.png'
        path.write_bytes(png_bytes(size=(2, 2), color=(1, 2, 3)))

        tile = decode_tile_rgba(path)

        assert (tile.width, tile.height) == (2, 2)
        assert tile.pixels == bytes((1, 2, 3, 255)) * 4

    def test_rgba_kept(self):
        data = png_bytes(size=(1, 1), color=(9, 8, 7, 6), mode='RGBA')
        assert decode_tile_rgba(data).pixels == bytes((9, 8, 7, 6))

    def test_palette_image(self):
        data = png_bytes(size=(3, 1), color=0, mode='P')
        tile = decode_tile_rgba(data)
        assert len(tile.pixels) == 3 * 4


class TestSaveCanvas:
    def test_png_round_trip(self, tmp_path):
        canvas = new_canvas(4, 2)
        composite_tile(canvas, bytes((200, 100, 50, 255)) * 4, TileRect(x=0, y=0, w=2, h=2))

        out = save_canvas(canvas, tmp_path / 'map.png')

        with Image.open(out) as img:
            assert img.format == 'PNG'
            assert img.mode == 'RGBA'
            assert img.size == (4, 2)
            assert img.getpixel((0, 0)) == (200, 100, 50, 255)
            assert img.getpixel((3, 1)) == (255, 255, 255, 255)

    def test_accepts_str_path(self, tmp_path):
        out = save_canvas(new_canvas(1, 1), str(tmp_path / 'one.png'))
        assert out == tmp_path / 'one.png'
        assert out.exists()

    @pytest.mark.parametrize('name', ['map.jpg', 'map.JPEG'])
    def test_jpeg_is_rgb(self, tmp_path, name):
        out = save_canvas(new_canvas(8, 8), tmp_path / name)
        with Image.open(out) as img:
            assert img.format == 'JPEG'
            assert img.mode == 'RGB'
            assert img.size == (8, 8)

    def test_jpeg_quality_applied(self, tmp_path):
        canvas = new_canvas(64, 64)
        for i in range(64):
            composite_tile(
                canvas,
                bytes(((i * 37) % 256, (i * 11) % 256, i * 4, 255)) * 64,
                TileRect(x=0, y=i, w=64, h=1),
            )
        low = save_canvas(canvas, tmp_path / 'low.jpg', quality=10)
        high = save_canvas(canvas, tmp_path / 'high.jpg', quality=100)
        assert low.stat().st_size < high.stat().st_size

    def test_png_ignores_quality(self, tmp_path):
        a = save_canvas(new_canvas(4, 4), tmp_path / 'a.png', quality=10)
        b = save_canvas(new_canvas(4, 4), tmp_path / 'b.png')
        assert a.read_bytes() == b.read_bytes()


class TestSaveJpeg:
    def test_converts_rgba(self, tmp_path):
        out = tmp_path / 'x.jpg'
        with Image.new('RGBA', (3, 3), (0, 0, 255, 255)) as img:
            save_jpeg(img, out, build_save_kwargs())
        with Image.open(out) as saved:
            assert saved.mode == 'RGB'
