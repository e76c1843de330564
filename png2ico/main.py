#!/usr/bin/env python3
"""
png2ico - Entry Point

Converts a PNG into a multi-size Windows icon.
This module serves as the application entry point.

Usage:
    python -m png2ico.main --in logo.png --out app.ico
"""

import sys

from png2ico.cli import main as cli_main


def main() -> None:
    """Launch png2ico and exit with its status code."""
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
