"""
Tiling Engine - Core tile splitting functionality
"""

import logging
import time
from pathlib import Path
from typing import Any, Optional, Tuple, Union
import numpy as np
from PIL import Image, UnidentifiedImageError
from tqdm import tqdm

from .errors import DecodeError, ImageTooSmallError, InputNotFoundError, WriteError
from .schemas import (
    ImageDimensions,
    SplitResult,
    TileBounds,
    TileCell,
    TileGrid,
    TilingConfig
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class TileSplitter:
    """
    Splits an image into a uniform grid of square tiles
    Fully transparent tiles can be skipped
    """

    def __init__(self, config: Optional[TilingConfig] = None, show_progress: bool = False):
        """
        Initialize tile splitter

        Args:
            config: Tiling configuration
            show_progress: Show a tqdm progress bar while tiling
        """
        self.config = config or TilingConfig()
        self.show_progress = show_progress

    def load_image(self, image_path: PathLike) -> np.ndarray:
        """
        Decode an image into an RGBA pixel array

        Only the first frame of multi-frame images is used.

        Args:
            image_path: Path to input image

        Returns:
            uint8 array of shape (height, width, 4)
        """
        path = Path(image_path)
        if not path.is_file():
            raise InputNotFoundError(str(path))

        try:
            with Image.open(path) as img:
                rgba = img.convert("RGBA")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise DecodeError(str(path), str(e)) from e

        return np.asarray(rgba, dtype=np.uint8)

    def calculate_grid(self, width: int, height: int) -> TileGrid:
        """
        Calculate the tile grid for an image

        Args:
            width: Image width in pixels
            height: Image height in pixels

        Returns:
            TileGrid

        Raises:
            ImageTooSmallError: If the grid has no columns or no rows
        """
        grid = TileGrid.from_dimensions(width, height, self.config.tile_size)
        if not grid.is_valid:
            raise ImageTooSmallError(width, height, self.config.tile_size)
        return grid

    @staticmethod
    def crop_tile(pixels: np.ndarray, bounds: TileBounds) -> np.ndarray:
        """Pixel-exact crop of one cell"""
        return pixels[bounds.top:bounds.bottom, bounds.left:bounds.right]

    @staticmethod
    def alpha_extrema(tile: np.ndarray) -> Tuple[int, int]:
        """Minimum and maximum alpha over the tile"""
        alpha = tile[..., 3]
        return int(alpha.min()), int(alpha.max())

    def is_empty(self, tile: np.ndarray) -> bool:
        """Check if every pixel of the tile is fully transparent"""
        return self.alpha_extrema(tile) == (0, 0)

    def _save_tile(self, tile: np.ndarray, output_path: Path):
        """
        Save tile to disk as PNG

        Args:
            tile: RGBA tile array
            output_path: Output file path
        """
        try:
            Image.fromarray(np.ascontiguousarray(tile)).save(output_path, format="PNG")
        except (OSError, ValueError) as e:
            raise WriteError(str(output_path), str(e)) from e

    def _process_cell(
        self,
        pixels: np.ndarray,
        cell: TileCell,
        out_dir: Path,
        result: SplitResult
    ):
        tile = self.crop_tile(pixels, cell.bounds)

        if self.config.skip_empty and self.is_empty(tile):
            logger.debug(f"Skipping transparent tile {cell.position.to_string()}")
            result.record_skipped()
            return

        filename = cell.filename(self.config.prefix)
        self._save_tile(tile, out_dir / filename)
        result.record_saved(filename)

    def split(self, image_path: PathLike, output_dir: PathLike) -> SplitResult:
        """
        Split an image into tiles

        Tiles are visited in row-major order and written as
        ``{prefix}_r{row:02d}_c{col:02d}.png`` into output_dir, which must
        already exist.

        Args:
            image_path: Path to input image
            output_dir: Directory for output tiles

        Returns:
            SplitResult object
        """
        start_time = time.time()
        out_dir = Path(output_dir)

        pixels = self.load_image(image_path)
        height, width = pixels.shape[:2]
        grid = self.calculate_grid(width, height)

        logger.info(
            f"Tiling {image_path} ({width}x{height}) into "
            f"{grid.columns}x{grid.rows} grid ({grid.total_cells} tiles)"
        )

        result = SplitResult(
            input_path=str(image_path),
            output_dir=str(output_dir),
            tile_size=self.config.tile_size,
            dimensions=ImageDimensions(width=width, height=height),
            grid=grid
        )

        with tqdm(total=grid.total_cells, desc="Tiling", disable=not self.show_progress) as pbar:
            for cell in grid.cells():
                self._process_cell(pixels, cell, out_dir, result)
                pbar.update(1)

        processing_time = time.time() - start_time
        logger.info(
            f"Tiling completed: {result.tiles_saved} saved, "
            f"{result.tiles_skipped} skipped in {processing_time:.2f} seconds"
        )

        return result


def split_image(
    image_path: PathLike,
    tile_size: Any,
    output_dir: PathLike,
    prefix: str = "tile",
    skip_empty: bool = True
) -> SplitResult:
    """
    Split an image into tiles with a one-off configuration

    Args:
        image_path: Path to input image
        tile_size: Tile edge length, 1-4096
        output_dir: Existing directory for output tiles
        prefix: Filename prefix
        skip_empty: Skip fully transparent tiles

    Returns:
        SplitResult object
    """
    config = TilingConfig.from_options(tile_size, prefix=prefix, skip_empty=skip_empty)
    return TileSplitter(config).split(image_path, output_dir)
