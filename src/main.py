"""Command line entry point: build one map mosaic from a bounding box."""

from __future__ import annotations

import argparse
import asyncio
import logging
import math
import sys
from typing import NoReturn

from pydantic import ValidationError

from services.map_download_service import download_mosaic
from settings import MosaicSettings
from shared.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_OUTPUT_PATH,
    JPEG_QUALITY_DEFAULT,
    LOG_FORMAT,
    MAX_ZOOM,
    TILE_CACHE_DIR,
    ExitCode,
)

logger = logging.getLogger(__name__)

USAGE_EXAMPLE = 'Ex: tile-mosaic 44.466051 1.393995 44.436990 1.476352 14'


class MosaicArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports malformed options with the full help text."""

    def error(self, message: str) -> NoReturn:
        sys.stderr.write(f'{message}\n')
        self.print_help(sys.stderr)
        self.exit(ExitCode.INVALID_OPTION)


def build_parser() -> argparse.ArgumentParser:
    parser = MosaicArgumentParser(
        prog='tile-mosaic',
        usage='%(prog)s [options] latMin lonMin latMax lonMax zoom',
        description=(
            'Download slippy map tiles covering a bounding box and stitch them '
            'into one image.'
        ),
        epilog=USAGE_EXAMPLE,
    )
    parser.add_argument(
        'coords',
        nargs='*',
        metavar='COORD',
        help=(
            'latMin lonMin latMax lonMax zoom. lat/lon: numbers between -180 and 180; '
            f'zoom: whole number between 0 and {MAX_ZOOM} '
            '(see zoom by map on openstreetmap website)'
        ),
    )
    parser.add_argument(
        '-o',
        '--output',
        default=DEFAULT_OUTPUT_PATH,
        help=f'output path (default is ./{DEFAULT_OUTPUT_PATH})',
    )
    parser.add_argument(
        '-u',
        '--baseUrl',
        dest='base_url',
        default=DEFAULT_BASE_URL,
        help=(
            f'base URL to download pictures (default is {DEFAULT_BASE_URL}), see '
            'https://wiki.openstreetmap.org/wiki/Featured_tile_layers'
        ),
    )
    parser.add_argument(
        '-q',
        '--quality',
        type=int,
        default=JPEG_QUALITY_DEFAULT,
        help=f'JPEG quality for .jpg outputs (default is {JPEG_QUALITY_DEFAULT})',
    )
    parser.add_argument(
        '--cache-dir',
        default=TILE_CACHE_DIR,
        help=f'tile cache directory (default is ./{TILE_CACHE_DIR})',
    )
    parser.add_argument('--verbose', action='store_true', help='show debug logs')
    return parser


def setup_logging(*, verbose: bool = False) -> None:
    """Configure application logging to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def _usage_failure(
    parser: argparse.ArgumentParser, message: str, code: ExitCode
) -> NoReturn:
    sys.stderr.write(f'{message}\n')
    parser.print_help(sys.stderr)
    raise SystemExit(code)


def parse_settings(argv: list[str] | None = None) -> MosaicSettings:
    """Parse the command line into validated settings.

    Exits with the matching ExitCode and the help text on bad input.
    """
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)

    if len(args.coords) != 5:
        _usage_failure(
            parser,
            'Please give latitude min, longitude min, latitude max, longitude max '
            f'and zoom between 0 and {MAX_ZOOM}',
            ExitCode.MISSING_ARGUMENTS,
        )

    try:
        lat_min, lon_min, lat_max, lon_max = (float(v) for v in args.coords[:4])
        zoom_value = float(args.coords[4])
    except ValueError:
        _usage_failure(
            parser, 'lat and lon and zoom must be numbers', ExitCode.INVALID_NUMBER
        )
    if any(math.isnan(v) for v in (lat_min, lon_min, lat_max, lon_max, zoom_value)):
        _usage_failure(
            parser, 'lat and lon and zoom must be numbers', ExitCode.INVALID_NUMBER
        )
    # 14 и 14.0 допустимы, 14.5 нет
    if not zoom_value.is_integer():
        _usage_failure(parser, 'zoom must be a whole number', ExitCode.INVALID_NUMBER)
    zoom = int(zoom_value)

    try:
        return MosaicSettings(
            lat_min=lat_min,
            lon_min=lon_min,
            lat_max=lat_max,
            lon_max=lon_max,
            zoom=zoom,
            base_url=args.base_url,
            output_path=args.output,
            jpeg_quality=args.quality,
            cache_dir=args.cache_dir,
            verbose=args.verbose,
        )
    except ValidationError as e:
        details = '; '.join(err['msg'] for err in e.errors())
        _usage_failure(parser, f'Invalid arguments: {details}', ExitCode.INVALID_NUMBER)


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    settings = parse_settings(argv)
    setup_logging(verbose=settings.verbose)
    logger.debug('Starting mosaic run: %s', settings)

    try:
        output = asyncio.run(download_mosaic(settings))
    except Exception as e:
        logger.debug('Mosaic run failed', exc_info=True)
        print(f'Error: {e}', file=sys.stderr)
        return ExitCode.RUN_FAILED

    print(f'Map generated: {output}')
    return ExitCode.OK


if __name__ == '__main__':
    sys.exit(main())
