#!/usr/bin/env python3
"""
png2ico - Command Line Interface

Usage:
    png2ico --in input.png --out output.ico [--sizes 16,24,32,48,64,128,256]
    png2ico --list output.ico

Exit status is 0 on success and 1 on any error, argument errors included.
"""

from __future__ import annotations

import argparse
import logging
import sys
from io import BytesIO
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

from PIL import Image
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from png2ico import __version__, config
from png2ico.codec import PNG_SIGNATURE
from png2ico.container import DirectoryRecord, read_entries, read_payload
from png2ico.converter import convert_file
from png2ico.errors import Png2IcoError, SourceUnavailable
from png2ico.log import disable_console, enable_console, log_error, log_warning

# =============================================================================
# CONSTANTS
# =============================================================================

DESCRIPTION = "png2ico - Convert PNG to ICO (multi-size)"

EPILOG = """\
Notes:
  - Output ICO embeds PNG frames (Vista+ compatible; works in modern Windows & browsers).
  - Transparency is preserved.
  - Non-square images are scaled to fit and centered on a transparent square.

Examples:
  png2ico -i logo.png -o favicon.ico
  png2ico -i logo.png -o app.ico --sizes 16,32,48,256
  png2ico --list app.ico
"""

console: Console = Console()
err_console: Console = Console(stderr=True)


class UsageError(Png2IcoError):
    """Invalid command-line arguments."""


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

def _size_list(raw: str) -> List[int]:
    try:
        return config.parse_size_list(raw)
    except Png2IcoError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = _ArgumentParser(
        prog="png2ico",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-i", "--in", dest="input", metavar="INPUT",
                        help="Input PNG path (required unless --list)")
    parser.add_argument("-o", "--out", dest="output", metavar="OUTPUT",
                        help="Output ICO path (required unless --list)")
    parser.add_argument("--sizes", type=_size_list, metavar="LIST",
                        help="Comma-separated list of sizes (default: %s)"
                             % ",".join(str(s) for s in config.DEFAULT_SIZES))
    parser.add_argument("--workers", type=int, metavar="N",
                        help=f"Threads used to build frames (default: {config.WORKERS})")
    parser.add_argument("--list", dest="list_path", metavar="ICO",
                        help="Show the directory of an existing ICO file and exit")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print progress logs to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    """Parse argv and check that the required paths are present."""
    args = build_parser().parse_args(argv)

    if args.list_path:
        if args.input or args.output:
            raise UsageError("--list cannot be combined with --in/--out")
        return args

    if not args.input:
        raise UsageError("Missing --in / -i")
    if not args.output:
        raise UsageError("Missing --out / -o")
    return args


# =============================================================================
# COMMANDS
# =============================================================================

def describe_payload(payload: bytes, record: DirectoryRecord) -> str:
    """Name a payload's format, flagging PNGs whose size disagrees with the directory."""
    if not payload.startswith(PNG_SIGNATURE):
        return "BMP"

    try:
        with Image.open(BytesIO(payload)) as img:
            actual = img.size
    except (OSError, ValueError) as e:
        log_warning(f"{record.width}x{record.height} entry has an unreadable PNG payload: {e}")
        return "PNG (unreadable)"

    if actual != (record.width, record.height):
        log_warning(
            f"{record.width}x{record.height} entry holds a {actual[0]}x{actual[1]} PNG payload"
        )
        return f"PNG ({actual[0]}x{actual[1]})"
    return "PNG"


def list_icon(path: str) -> None:
    """Print the directory of an existing icon container."""
    ico = Path(path)
    try:
        data = ico.read_bytes()
    except OSError as e:
        raise SourceUnavailable(f"Could not read {ico}: {e}") from e

    table = Table(title=escape(str(ico)))
    table.add_column("Size", justify="right")
    table.add_column("Bits", justify="right")
    table.add_column("Format")
    table.add_column("Bytes", justify="right")
    table.add_column("Offset", justify="right")
    for record in read_entries(data):
        table.add_row(
            f"{record.width}x{record.height}",
            str(record.bit_count),
            describe_payload(read_payload(data, record), record),
            str(record.payload_size),
            str(record.payload_offset),
        )
    console.print(table)


def run(args: argparse.Namespace) -> None:
    """Execute the parsed command."""
    if args.list_path:
        list_icon(args.list_path)
        return

    sizes = args.sizes if args.sizes is not None else config.DEFAULT_SIZES
    convert_file(args.input, args.output, sizes=sizes, workers=args.workers)
    console.print(
        f"OK: '{args.input}' -> '{args.output}' (sizes: {','.join(str(s) for s in sizes)})",
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:]).

    Returns:
        Process exit status: 0 on success, 1 on any error.
    """
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)

    if not argv:
        parser.print_help()
        return 0

    try:
        args = parse_args(argv)
    except SystemExit as e:
        # --help and --version exit through argparse
        return e.code if isinstance(e.code, int) else 0
    except Png2IcoError as e:
        err_console.print(f"ERROR: {e}", markup=False, highlight=False, soft_wrap=True)
        return 1

    if args.verbose:
        enable_console(logging.DEBUG)

    try:
        run(args)
    except Png2IcoError as e:
        log_error(str(e))
        err_console.print(f"ERROR: {e}", markup=False, highlight=False, soft_wrap=True)
        return 1
    except Exception as e:
        log_error(f"Unexpected failure: {e!r}")
        err_console.print(f"ERROR: {e}", markup=False, highlight=False, soft_wrap=True)
        return 1
    finally:
        if args.verbose:
            disable_console()

    return 0
