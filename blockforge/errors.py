"""Exception types raised by the blockforge pipeline.

Argument problems (bad settings, wrong array shapes) are reported with the
builtin ``ValueError``/``TypeError``. The classes below describe failures of a
single pipeline invocation; each one is terminal for that call.
"""
from __future__ import annotations


class BlockforgeError(Exception):
    """Base class for pipeline failures."""


class DecodeError(BlockforgeError):
    """Source bytes could not be interpreted as an image."""


class ProcessingError(BlockforgeError):
    """The output buffer could not be obtained or filled."""


class EncodeError(BlockforgeError):
    """The result buffer could not be serialized."""


__all__ = ["BlockforgeError", "DecodeError", "ProcessingError", "EncodeError"]
