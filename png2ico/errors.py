#!/usr/bin/env python3
"""
png2ico - Error Types

Every failure the conversion pipeline can raise derives from Png2IcoError,
so the CLI can report any of them with a single handler. None of these are
retried: each one ends the current conversion.
"""

from __future__ import annotations


class Png2IcoError(Exception):
    """Base class for all png2ico failures."""


# =============================================================================
# FRAME BUILDING
# =============================================================================

class InvalidSize(Png2IcoError, ValueError):
    """A requested edge length is outside 1..256."""

    def __init__(self, size: object) -> None:
        super().__init__(f"Sizes must be 1..256 (got {size!r}).")
        self.size = size


class EncodeFailure(Png2IcoError):
    """The codec could not produce a payload for a canvas."""


class Cancelled(Png2IcoError):
    """The conversion was cancelled between per-size builds."""


# =============================================================================
# CONTAINER WRITING
# =============================================================================

class ContainerError(Png2IcoError):
    """Base class for icon container layout problems."""


class NoFrames(ContainerError):
    """A container needs at least one frame."""


class TooManyFrames(ContainerError):
    """The 16-bit directory count cannot hold this many frames."""


class SizeOverflow(ContainerError):
    """A payload size or offset does not fit in an unsigned 32-bit field."""


class ContainerFormatError(ContainerError):
    """Bytes being parsed are not a well-formed icon container."""


# =============================================================================
# STORAGE AND CONFIGURATION
# =============================================================================

class SourceUnavailable(Png2IcoError):
    """The source image could not be read or decoded."""


class DestinationUnwritable(Png2IcoError):
    """The output file could not be written."""


class ConfigError(Png2IcoError, ValueError):
    """A size list or other setting could not be parsed."""
