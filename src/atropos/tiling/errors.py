"""
Error types raised by the tiling module
"""

from typing import Any


class TilingError(Exception):
    """Base class for all terminal tiling failures"""

    exit_code = 1


class InputNotFoundError(TilingError, FileNotFoundError):
    """Input image path does not exist"""

    exit_code = 3

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File not found: {path}")


class InvalidTileSizeError(TilingError, ValueError):
    """Tile size is non-numeric or outside 1-4096"""

    exit_code = 4

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid tile size: {value}. Must be 1-4096.")


class DecodeError(TilingError):
    """Image could not be read or decoded"""

    exit_code = 6

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot decode image {path}: {reason}")


class ImageTooSmallError(TilingError):
    """Grid would have zero columns or zero rows"""

    exit_code = 5

    def __init__(self, width: int, height: int, tile_size: int):
        self.width = width
        self.height = height
        self.tile_size = tile_size
        super().__init__(
            f"Image {width}x{height} is smaller than tile size {tile_size}x{tile_size}"
        )


class WriteError(TilingError):
    """Output directory or tile file could not be written"""

    exit_code = 7

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")
