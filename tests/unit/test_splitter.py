"""
Unit tests for the Tile Splitter
"""

import pytest
import tempfile
from pathlib import Path
import numpy as np
from PIL import Image

from atropos.tiling import (
    TileSplitter,
    TilingConfig,
    split_image,
    DecodeError,
    ImageTooSmallError,
    InputNotFoundError,
    InvalidTileSizeError,
    WriteError
)

OPAQUE = (200, 30, 30, 255)
CLEAR = (0, 0, 0, 0)


def make_image(path: Path, size, color=OPAQUE, mode="RGBA") -> Path:
    """Write a solid image to path"""
    if mode == "RGB":
        color = color[:3]
    Image.new(mode, size, color).save(path)
    return path


class TestTileSplitter:
    """Test Tile Splitter functionality"""

    @pytest.fixture
    def temp_dir(self):
        """Create temporary directory for testing"""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    @pytest.fixture
    def out_dir(self, temp_dir):
        """Create output directory"""
        path = temp_dir / "tiles"
        path.mkdir()
        return path

    @pytest.fixture
    def sparse_sheet(self, temp_dir):
        """64x64 sheet with only the top-left and bottom-right tiles painted"""
        img = Image.new("RGBA", (64, 64), CLEAR)
        img.paste(Image.new("RGBA", (32, 32), OPAQUE), (0, 0))
        img.paste(Image.new("RGBA", (32, 32), (10, 200, 10, 128)), (32, 32))
        path = temp_dir / "sparse.png"
        img.save(path)
        return path

    def test_split_exact_grid(self, temp_dir, out_dir):
        """Test 64x64 image with 32px tiles"""
        image_path = make_image(temp_dir / "sheet.png", (64, 64))
        result = TileSplitter(TilingConfig(tile_size=32)).split(image_path, out_dir)

        assert result.grid.columns == 2
        assert result.grid.rows == 2
        assert result.dimensions.width == 64
        assert result.dimensions.height == 64
        assert result.files == [
            "tile_r00_c00.png",
            "tile_r00_c01.png",
            "tile_r01_c00.png",
            "tile_r01_c01.png"
        ]
        assert result.tiles_saved == 4
        assert result.tiles_skipped == 0
        assert sorted(p.name for p in out_dir.iterdir()) == result.files

    def test_partial_strip_discarded(self, temp_dir, out_dir):
        """Test 50x50 image yields a single 32px tile"""
        image_path = make_image(temp_dir / "sheet.png", (50, 50))
        result = TileSplitter(TilingConfig(tile_size=32)).split(image_path, out_dir)

        assert (result.grid.columns, result.grid.rows) == (1, 1)
        assert result.files == ["tile_r00_c00.png"]
        with Image.open(out_dir / "tile_r00_c00.png") as tile:
            assert tile.size == (32, 32)

    def test_image_too_small(self, temp_dir, out_dir):
        """Test 16x16 image with 32px tiles fails without writing"""
        image_path = make_image(temp_dir / "sheet.png", (16, 16))

        with pytest.raises(ImageTooSmallError) as exc_info:
            TileSplitter(TilingConfig(tile_size=32)).split(image_path, out_dir)

        assert exc_info.value.width == 16
        assert exc_info.value.height == 16
        assert exc_info.value.tile_size == 32
        assert "16x16" in str(exc_info.value)
        assert list(out_dir.iterdir()) == []

    def test_one_dimension_too_small(self, temp_dir, out_dir):
        """Test wide but short image fails"""
        image_path = make_image(temp_dir / "strip.png", (256, 8))

        with pytest.raises(ImageTooSmallError):
            TileSplitter(TilingConfig(tile_size=16)).split(image_path, out_dir)

    def test_skip_empty(self, sparse_sheet, out_dir):
        """Test fully transparent tiles are skipped"""
        result = TileSplitter(TilingConfig(tile_size=32)).split(sparse_sheet, out_dir)

        assert result.files == ["tile_r00_c00.png", "tile_r01_c01.png"]
        assert result.tiles_saved == 2
        assert result.tiles_skipped == 2
        assert result.total_tiles == result.grid.total_cells

    def test_keep_empty(self, sparse_sheet, out_dir):
        """Test fully transparent tiles are written when not skipping"""
        config = TilingConfig(tile_size=32, skip_empty=False)
        result = TileSplitter(config).split(sparse_sheet, out_dir)

        assert result.tiles_saved == 4
        assert result.tiles_skipped == 0
        assert (out_dir / "tile_r00_c01.png").exists()

    def test_single_visible_pixel_is_kept(self, temp_dir, out_dir):
        """Test one pixel with alpha 1 makes a tile non-empty"""
        img = Image.new("RGBA", (32, 32), CLEAR)
        img.putpixel((31, 31), (0, 0, 0, 1))
        image_path = temp_dir / "faint.png"
        img.save(image_path)

        result = TileSplitter(TilingConfig(tile_size=32)).split(image_path, out_dir)
        assert result.files == ["tile_r00_c00.png"]

    def test_transparent_colored_pixels_are_empty(self, temp_dir, out_dir):
        """Test emptiness depends on alpha only"""
        image_path = make_image(temp_dir / "ghost.png", (32, 32), color=(255, 255, 255, 0))

        result = TileSplitter(TilingConfig(tile_size=32)).split(image_path, out_dir)
        assert result.tiles_saved == 0
        assert result.tiles_skipped == 1
        assert result.files == []

    def test_rgb_source_never_empty(self, temp_dir, out_dir):
        """Test images without alpha decode as opaque"""
        image_path = make_image(temp_dir / "photo.png", (40, 40), mode="RGB")

        result = TileSplitter(TilingConfig(tile_size=20)).split(image_path, out_dir)
        assert result.tiles_saved == 4
        with Image.open(out_dir / "tile_r00_c00.png") as tile:
            assert tile.mode == "RGBA"

    def test_tile_pixels_are_exact(self, temp_dir, out_dir):
        """Test crops are pixel-exact"""
        pixels = np.arange(48 * 32 * 4, dtype=np.uint32).reshape(32, 48, 4) % 256
        pixels[..., 3] = 255
        image_path = temp_dir / "gradient.png"
        Image.fromarray(pixels.astype(np.uint8)).save(image_path)

        TileSplitter(TilingConfig(tile_size=16)).split(image_path, out_dir)

        with Image.open(out_dir / "tile_r01_c02.png") as tile:
            written = np.asarray(tile.convert("RGBA"))
        assert np.array_equal(written, pixels[16:32, 32:48].astype(np.uint8))

    def test_prefix(self, temp_dir, out_dir):
        """Test custom filename prefix"""
        image_path = make_image(temp_dir / "sheet.png", (32, 16))
        config = TilingConfig(tile_size=16, prefix="sprite")

        result = TileSplitter(config).split(image_path, out_dir)
        assert result.files == ["sprite_r00_c00.png", "sprite_r00_c01.png"]

    def test_idempotent(self, sparse_sheet, temp_dir):
        """Test repeated runs give identical results and bytes"""
        first_dir = temp_dir / "first"
        second_dir = temp_dir / "second"
        first_dir.mkdir()
        second_dir.mkdir()
        splitter = TileSplitter(TilingConfig(tile_size=16))

        first = splitter.split(sparse_sheet, first_dir)
        second = splitter.split(sparse_sheet, second_dir)

        assert first.model_dump(exclude={"output_dir"}) == second.model_dump(exclude={"output_dir"})
        for name in first.files:
            assert (first_dir / name).read_bytes() == (second_dir / name).read_bytes()

    def test_input_not_found(self, temp_dir, out_dir):
        """Test missing input image"""
        with pytest.raises(InputNotFoundError):
            TileSplitter().split(temp_dir / "missing.png", out_dir)

    def test_decode_error(self, temp_dir, out_dir):
        """Test corrupt input image"""
        image_path = temp_dir / "broken.png"
        image_path.write_bytes(b"definitely not an image")

        with pytest.raises(DecodeError) as exc_info:
            TileSplitter().split(image_path, out_dir)
        assert exc_info.value.path == str(image_path)

    def test_write_error(self, temp_dir):
        """Test unwritable output directory aborts the run"""
        image_path = make_image(temp_dir / "sheet.png", (32, 32))

        with pytest.raises(WriteError) as exc_info:
            TileSplitter().split(image_path, temp_dir / "does" / "not" / "exist")
        assert exc_info.value.path.endswith("tile_r00_c00.png")

    def test_is_empty(self):
        """Test alpha extrema classification"""
        splitter = TileSplitter()
        tile = np.zeros((4, 4, 4), dtype=np.uint8)
        assert splitter.is_empty(tile)

        tile[2, 3, 3] = 7
        assert not splitter.is_empty(tile)
        assert splitter.alpha_extrema(tile) == (0, 7)


class TestSplitImage:
    """Test split_image convenience function"""

    @pytest.fixture
    def temp_dir(self):
        """Create temporary directory for testing"""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    @pytest.mark.parametrize("tile_size", [0, 5000, "abc"])
    def test_invalid_tile_size_before_decode(self, temp_dir, tile_size):
        """Test invalid tile size fails before the image is read"""
        with pytest.raises(InvalidTileSizeError):
            split_image(temp_dir / "missing.png", tile_size, temp_dir)

    def test_split_image(self, temp_dir):
        """Test splitting with plain arguments"""
        image_path = make_image(temp_dir / "sheet.png", (64, 32))

        result = split_image(image_path, 32, temp_dir, prefix="t", skip_empty=False)
        assert result.files == ["t_r00_c00.png", "t_r00_c01.png"]
        assert result.tile_size == 32
