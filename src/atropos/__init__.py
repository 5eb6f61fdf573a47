"""
Atropos - Image Tile Splitter
Splits images into uniform tile grids for game assets and sprite sheets
"""

__version__ = "1.0.0"
