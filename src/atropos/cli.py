"""
Command line interface for Atropos
"""

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .common.config import settings, setup_logging
from .tiling import TileSplitter, TilingConfig, TilingError, InputNotFoundError, WriteError
from .tiling.schemas import validate_tile_size

logger = logging.getLogger(__name__)

EPILOG = """
Examples:
  atropos sprite.png
  atropos tileset.png --size 16 --output ./my-tiles
  atropos game.png -s 64 -p sprite --keep-empty
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="atropos",
        description=f"Atropos v{__version__} - Image Tile Splitter",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'input',
        nargs='?',
        help='Input image'
    )

    parser.add_argument(
        '-s', '--size',
        default=str(settings.tile_size),
        help=f'Tile size in pixels (default: {settings.tile_size})'
    )

    parser.add_argument(
        '-o', '--output',
        default=None,
        help='Output directory (default: <input>_tiles/)'
    )

    parser.add_argument(
        '-p', '--prefix',
        default=settings.prefix,
        help=f'Filename prefix (default: {settings.prefix})'
    )

    parser.add_argument(
        '--skip-empty',
        action='store_true',
        default=settings.skip_empty,
        help='Skip fully transparent tiles (default)'
    )

    parser.add_argument(
        '--keep-empty',
        action='store_true',
        help='Keep fully transparent tiles'
    )

    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Suppress output except errors'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Output results as JSON'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Verbose logging'
    )

    parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'atropos v{__version__}'
    )

    return parser


def resolve_path(raw: str) -> Path:
    """Resolve a user supplied path against the working directory"""
    return Path(raw).expanduser().absolute()


def default_output_dir(input_path: Path) -> Path:
    """<input dir>/<input stem>_tiles, whitespace in the stem replaced by _"""
    stem = re.sub(r"\s+", "_", input_path.stem)
    return input_path.parent / f"{stem}_tiles"


def prepare_output_dir(raw: Optional[str], input_path: Path) -> Path:
    output_dir = resolve_path(raw) if raw else default_output_dir(input_path)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(str(output_dir), str(e)) from e
    return output_dir


def run(args: argparse.Namespace) -> int:
    """
    Execute one split from parsed arguments

    Raises:
        TilingError: On any terminal failure
    """
    input_path = resolve_path(args.input)
    if not input_path.is_file():
        raise InputNotFoundError(str(input_path))

    config = TilingConfig.from_options(
        validate_tile_size(args.size),
        prefix=args.prefix,
        skip_empty=args.skip_empty,
        keep_empty=args.keep_empty
    )
    output_dir = prepare_output_dir(args.output, input_path)

    show_progress = settings.show_progress and not (args.quiet or args.json)
    splitter = TileSplitter(config, show_progress=show_progress)
    result = splitter.split(input_path, output_dir)

    if args.json:
        print(json.dumps(result.to_report(), indent=2))
    elif not args.quiet:
        print(f"\n{result.summary()}\n")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point, returns the process exit code"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.input is None:
        parser.print_help()
        return 0

    if args.verbose:
        level = "DEBUG"
    elif args.quiet or args.json:
        level = "ERROR"
    else:
        level = None
    setup_logging(level)

    try:
        return run(args)
    except TilingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except Exception as e:
        logger.error(f"Unexpected failure: {e}")
        raise


if __name__ == "__main__":
    sys.exit(main())
