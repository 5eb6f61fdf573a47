"""
Tiling Module
Splits a source image into a grid of square tiles
"""

from .engine import TileSplitter, split_image
from .errors import (
    TilingError,
    InputNotFoundError,
    InvalidTileSizeError,
    DecodeError,
    ImageTooSmallError,
    WriteError
)
from .schemas import SplitResult, TileGrid, TilingConfig

__all__ = [
    "TileSplitter",
    "split_image",
    "SplitResult",
    "TileGrid",
    "TilingConfig",
    "TilingError",
    "InputNotFoundError",
    "InvalidTileSizeError",
    "DecodeError",
    "ImageTooSmallError",
    "WriteError"
]
