"""Last-write-wins sequencing for the live preview.

Each preview request takes a ticket from a monotonically increasing counter.
When a computation finishes, its result is applied only if its ticket is
still the newest one; superseded results are dropped. The engine itself
cannot be interrupted, so cancellation is advisory.
"""
from __future__ import annotations

import threading
from typing import Any, Callable

import numpy as np

from .settings import PixelSettings
from .utils.pixelate import pixelate


class PreviewGate:
    """Ticket counter deciding which completed preview may be shown."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest = 0

    @property
    def latest(self) -> int:
        with self._lock:
            return self._latest

    def next_ticket(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._latest

    def apply(self, ticket: int, fn: Callable[..., Any], *args: Any) -> bool:
        """Call ``fn(*args)`` if ``ticket`` is current; return whether it ran."""
        if not self.is_current(ticket):
            return False
        fn(*args)
        return True


def render_preview(source: np.ndarray, settings: PixelSettings) -> np.ndarray:
    """Pixelate the pristine ``source`` at native size; ``source`` is left intact."""
    return pixelate(source, settings)


__all__ = ["PreviewGate", "render_preview"]
