"""Cooperative cancellation and progress reporting."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from .exceptions import MiningCancelled

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, Optional[str]], None]


class ExecutionMonitor:
    """Cancellation flag plus progress sink handed to the miners.

    Parameters
    ----------
    progress : callable, optional
        Called as ``progress(fraction, message)`` on every progress update.
    verbose : int, default=0
        If > 0, print progress messages to standard output.

    Examples
    --------
    >>> monitor = ExecutionMonitor(verbose=1)
    >>> monitor.set_progress(0.5, "half way")  # doctest: +SKIP
    [12:00:00] half way
    """

    def __init__(self, progress: ProgressCallback | None = None, verbose: int = 0) -> None:
        self._progress = progress
        self.verbose = verbose
        self._cancelled = threading.Event()
        self._parent: ExecutionMonitor | None = None
        self._offset = 0.0
        self._weight = 1.0
        self._fraction = 0.0
        self._reserved = 0.0

    @property
    def fraction(self) -> float:
        return self._fraction

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Request cancellation; safe to call from another thread."""
        self._cancelled.set()

    def check_canceled(self) -> None:
        """Raise :class:`MiningCancelled` if cancellation was requested."""
        if self._parent is not None:
            self._parent.check_canceled()
            return
        if self._cancelled.is_set():
            raise MiningCancelled("Execution canceled")

    def begin(self, message: str | None = None) -> None:
        """Start a new run: forget earlier sub-monitors and report 0."""
        self._reserved = 0.0
        self.set_progress(0.0, message)

    def set_progress(self, fraction: float, message: str | None = None) -> None:
        fraction = min(max(float(fraction), 0.0), 1.0)
        self._fraction = fraction
        if self._parent is not None:
            self._parent.set_progress(self._offset + self._weight * fraction, message)
            return

        if message:
            logger.debug("%3.0f%% %s", fraction * 100, message)
            if self.verbose:
                print(f"[{time.strftime('%X')}] {message}")
        if self._progress is not None:
            self._progress(fraction, message)

    def create_sub_progress(self, weight: float) -> ExecutionMonitor:
        """Return a monitor reporting into the next ``weight`` share of this one.

        Sub-monitors are laid out one after another in creation order and
        share the cancellation flag with their parent.
        """
        child = ExecutionMonitor()
        child._cancelled = self._cancelled
        child._parent = self
        child._offset = self._reserved
        child._weight = max(0.0, min(float(weight), 1.0 - self._reserved))
        self._reserved += child._weight
        return child


def default_monitor(monitor: ExecutionMonitor | None) -> ExecutionMonitor:
    return monitor if monitor is not None else ExecutionMonitor()
