"""
Configuration management for Atropos
"""

import logging
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings"""

    # Tiling
    tile_size: int = Field(
        default=32,
        description="Default tile size in pixels"
    )
    prefix: str = Field(
        default="tile",
        description="Default filename prefix"
    )
    skip_empty: bool = Field(
        default=True,
        description="Skip fully transparent tiles by default"
    )

    # Output
    show_progress: bool = Field(
        default=True,
        description="Show a progress bar while tiling"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Logging format"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Log file path"
    )

    class Config:
        env_prefix = "ATROPOS_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure root logging

    Args:
        level: Level name, defaults to settings.log_level
        log_file: Optional file to log to in addition to stderr

    Returns:
        Package logger
    """
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    handlers = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=settings.log_format,
        handlers=handlers,
        force=True
    )

    return logging.getLogger("atropos")


# Create global settings instance
settings = Settings()
