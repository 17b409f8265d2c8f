"""
Terminal front end for browsing a WMTS tile pyramid.

Reads one key name per line from stdin (``w``, ``q``, ``a``, ``s``/``r`` to
zoom into a quadrant, ``up``/``down``/``left``/``right`` to pan, ``space``
or ``-`` to zoom out) and prints the address of the tile under the cursor
after every move.
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from .config import NavigatorConfig
from .coordinator import TileCoordinator
from .errors import ConfigurationError, DecodeError, FetchError, NavigationError, ParseError
from .keymap import command_for_key, quadrant_for_key
from .logging_config import setup_logging
from .ogc.wmts import load_capabilities
from .tiles import decode_tile
from .types import Format
from .typing import TileFetcher

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tilenav",
        description="Map tile navigator: step through a WMTS tile pyramid from the terminal.",
    )
    parser.add_argument(
        "--wmts-url",
        default=None,
        help="URL or path of the WMTS capabilities document (default: $WMTS_URL)",
    )
    parser.add_argument("--timeout", type=int, default=None, help="HTTP timeout in seconds")
    parser.add_argument("--retries", type=int, default=None, help="Retries per tile request")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument(
        "--format",
        default=None,
        choices=[fmt.value for fmt in Format],
        help="Tile media type to request (default: server choice)",
    )
    parser.add_argument(
        "--no-fetch",
        action="store_true",
        help="Only print tile addresses, do not download tiles",
    )
    return parser


def _show_tile(
    coordinator: TileCoordinator,
    fetcher: Optional[TileFetcher],
    out: TextIO,
) -> None:
    address = coordinator.current_address()
    cursor = coordinator.cursor
    x, y = coordinator.matrix.tile_origin(cursor.row, cursor.column)
    logger.debug(
        "Tile %s/%d/%d starts at (%.2f, %.2f)", cursor.matrix_id, cursor.row, cursor.column, x, y
    )
    if fetcher is None:
        print(f"{cursor.matrix_id}/{cursor.row}/{cursor.column} {address}", file=out)
        return

    try:
        image = coordinator.load(fetcher, decode_tile)
    except (FetchError, DecodeError) as exc:
        print(f"{cursor.matrix_id}/{cursor.row}/{cursor.column} {address} ! {exc}", file=out)
        return

    size = f"{image.width}x{image.height}" if image is not None else "stale"
    print(f"{cursor.matrix_id}/{cursor.row}/{cursor.column} {address} [{size}]", file=out)


def run(
    coordinator: TileCoordinator,
    fetcher: Optional[TileFetcher],
    lines: TextIO,
    out: TextIO,
) -> None:
    """Drive the coordinator from key names read line by line."""
    _show_tile(coordinator, fetcher, out)

    for line in lines:
        key = line.rstrip("\r\n")
        if not key.strip() and key != " ":
            continue

        command = command_for_key(key)
        if command is None:
            print(f"Unbound key: {key.strip()}", file=out)
            continue

        quadrant = quadrant_for_key(key)
        if quadrant is not None:
            matrix = coordinator.matrix
            logger.debug(
                "Zooming into %s quadrant %s",
                quadrant.value, quadrant.focus_rect(matrix.tile_width, matrix.tile_height),
            )

        try:
            coordinator.apply(command)
        except NavigationError as exc:
            print(f"Cannot move: {exc}", file=out)
            continue

        _show_tile(coordinator, fetcher, out)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = NavigatorConfig.from_env(
            capabilities_url=args.wmts_url,
            timeout=args.timeout,
            retries=args.retries,
            log_level=args.log_level,
            output_format=args.format,
        )
    except ConfigurationError as exc:
        print(f"tilenav: {exc}", file=sys.stderr)
        return 2

    setup_logging(config.log_level, args.log_file)

    try:
        capabilities = load_capabilities(
            config.capabilities_url, timeout=config.timeout, headers=config.headers
        )
        coordinator = TileCoordinator.from_capabilities(capabilities)
    except (ParseError, FetchError, ConfigurationError) as exc:
        logger.error("Unable to load capabilities: %s", exc)
        print(f"tilenav: {exc}", file=sys.stderr)
        return 2

    for error in capabilities.errors:
        print(f"tilenav: skipped tile matrix ({error})", file=sys.stderr)

    fetcher = None if args.no_fetch else config.build_fetcher()
    run(coordinator, fetcher, sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
