"""
Schemas for tiling module
"""

from typing import Any, Dict, Generator, List, Tuple
from pydantic import BaseModel, Field, validator

from .errors import InvalidTileSizeError

MIN_TILE_SIZE = 1
MAX_TILE_SIZE = 4096


def validate_tile_size(value: Any) -> int:
    """
    Parse and range-check a tile size

    Args:
        value: Tile size as an int or a decimal string

    Returns:
        Tile size as int

    Raises:
        InvalidTileSizeError: If value is non-numeric or outside 1-4096
    """
    if isinstance(value, bool):
        raise InvalidTileSizeError(value)
    if isinstance(value, str):
        try:
            size = int(value.strip())
        except ValueError:
            raise InvalidTileSizeError(value) from None
    elif isinstance(value, int):
        size = value
    else:
        raise InvalidTileSizeError(value)

    if not MIN_TILE_SIZE <= size <= MAX_TILE_SIZE:
        raise InvalidTileSizeError(value)
    return size


class TilePosition(BaseModel):
    """Position of tile in the grid"""
    row: int
    col: int

    def to_string(self) -> str:
        """Convert to string format for naming"""
        return f"r{self.row:02d}_c{self.col:02d}"


class TileBounds(BaseModel):
    """Tile boundary information"""
    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        """Get tile width in pixels"""
        return self.right - self.left

    @property
    def height(self) -> int:
        """Get tile height in pixels"""
        return self.bottom - self.top

    def as_box(self) -> Tuple[int, int, int, int]:
        """Bounds as a (left, top, right, bottom) box"""
        return self.left, self.top, self.right, self.bottom


class TileCell(BaseModel):
    """One cell of the grid"""
    position: TilePosition
    bounds: TileBounds

    def filename(self, prefix: str) -> str:
        """Output filename for this cell"""
        return f"{prefix}_{self.position.to_string()}.png"


class ImageDimensions(BaseModel):
    """Source image size in pixels"""
    width: int
    height: int


class TileGrid(BaseModel):
    """Uniform grid of square tiles laid over an image"""
    columns: int
    rows: int
    tile_size: int

    @classmethod
    def from_dimensions(cls, width: int, height: int, tile_size: int) -> "TileGrid":
        """
        Calculate grid dimensions for an image

        Trailing strips narrower than one tile are dropped.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            tile_size: Tile edge length in pixels

        Returns:
            TileGrid
        """
        return cls(
            columns=width // tile_size,
            rows=height // tile_size,
            tile_size=tile_size
        )

    @property
    def is_valid(self) -> bool:
        """Grid holds at least one tile"""
        return self.columns >= 1 and self.rows >= 1

    @property
    def total_cells(self) -> int:
        return self.columns * self.rows

    def cells(self) -> Generator[TileCell, None, None]:
        """
        Generate grid cells in row-major order

        Yields:
            TileCell for each (row, col)
        """
        size = self.tile_size
        for row in range(self.rows):
            for col in range(self.columns):
                left = col * size
                top = row * size
                yield TileCell(
                    position=TilePosition(row=row, col=col),
                    bounds=TileBounds(
                        left=left,
                        top=top,
                        right=left + size,
                        bottom=top + size
                    )
                )


class TilingConfig(BaseModel):
    """Configuration for tiling operation"""
    tile_size: int = Field(default=32, description="Tile size in pixels")
    prefix: str = Field(default="tile", description="Filename prefix for every tile")
    skip_empty: bool = Field(default=True, description="Skip fully transparent tiles")

    @validator('tile_size')
    def check_tile_size(cls, v):
        """Validate tile size"""
        return validate_tile_size(v)

    @classmethod
    def from_options(
        cls,
        tile_size: Any,
        prefix: str = "tile",
        skip_empty: bool = True,
        keep_empty: bool = False
    ) -> "TilingConfig":
        """
        Build a config from user-facing options

        keep_empty takes precedence over skip_empty.

        Raises:
            InvalidTileSizeError: If tile_size is invalid
        """
        return cls(
            tile_size=validate_tile_size(tile_size),
            prefix=prefix,
            skip_empty=False if keep_empty else skip_empty
        )


class SplitResult(BaseModel):
    """Result of tiling operation"""
    input_path: str
    output_dir: str
    tile_size: int
    dimensions: ImageDimensions
    grid: TileGrid
    tiles_saved: int = 0
    tiles_skipped: int = 0
    files: List[str] = Field(default_factory=list)

    @property
    def total_tiles(self) -> int:
        return self.tiles_saved + self.tiles_skipped

    def record_saved(self, filename: str):
        """Register a written tile"""
        self.files.append(filename)
        self.tiles_saved += 1

    def record_skipped(self):
        """Register a skipped empty tile"""
        self.tiles_skipped += 1

    def to_report(self) -> Dict[str, Any]:
        """Structured report, as emitted by --json"""
        return {
            "input": self.input_path,
            "outputDir": self.output_dir,
            "tileSize": self.tile_size,
            "dimensions": {
                "width": self.dimensions.width,
                "height": self.dimensions.height
            },
            "grid": {
                "columns": self.grid.columns,
                "rows": self.grid.rows
            },
            "tilesSaved": self.tiles_saved,
            "tilesSkipped": self.tiles_skipped,
            "files": list(self.files)
        }

    def summary(self) -> str:
        """Human readable summary"""
        return "\n".join([
            "Atropos - Split Complete",
            "",
            f"Input:      {self.input_path}",
            f"Output:     {self.output_dir}",
            f"Tile size:  {self.tile_size}x{self.tile_size}",
            f"Image:      {self.dimensions.width}x{self.dimensions.height}",
            f"Grid:       {self.grid.columns} cols x {self.grid.rows} rows",
            "",
            f"Tiles saved:   {self.tiles_saved}",
            f"Tiles skipped: {self.tiles_skipped} (transparent)",
        ])
