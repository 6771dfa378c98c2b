"""Debounced search runner with a stale-response guard.

Typing in a search box issues a query per keystroke. ``DebouncedQuery``
waits ``delay`` seconds after the last submission before running, and
every run is tagged with a sequence number so a slow, older response never
overwrites a newer one.
"""

from __future__ import annotations

import os
import threading
from typing import Callable, Generic, Optional, TypeVar

from ..utils.logging import fields, get_logger

LOGGER = get_logger("services.debounce")

DEFAULT_DELAY = int(os.getenv("SEARCH_DEBOUNCE_MS", "300")) / 1000.0

C = TypeVar("C")
T = TypeVar("T")


class QuerySequencer:
    """Hands out increasing sequence numbers and answers "is this still current?"."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest = 0

    def next(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    @property
    def latest(self) -> int:
        with self._lock:
            return self._latest

    def is_current(self, sequence: int) -> bool:
        with self._lock:
            return sequence == self._latest


class DebouncedQuery(Generic[C, T]):
    def __init__(
        self,
        run: Callable[[C], T],
        on_result: Callable[[T], None],
        delay: float = DEFAULT_DELAY,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        self.run = run
        self.on_result = on_result
        self.on_error = on_error
        self.delay = delay
        self.sequencer = QuerySequencer()
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[C] = None

    def submit(self, criteria: C) -> None:
        """Schedule ``criteria``, superseding anything not yet started."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = criteria
            # Bump now so a run already in flight is stale once it returns.
            sequence = self.sequencer.next()
            self._timer = threading.Timer(self.delay, self._fire, args=(sequence,))
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Run the pending query now on the calling thread."""
        with self._lock:
            if self._timer is None:
                return
            self._timer.cancel()
            sequence = self.sequencer.latest
        self._fire(sequence)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None
            self.sequencer.next()

    def _fire(self, sequence: int) -> None:
        with self._lock:
            if not self.sequencer.is_current(sequence) or self._pending is None:
                return
            criteria = self._pending
            self._pending = None
            self._timer = None
        try:
            result = self.run(criteria)
        except Exception as exc:
            if not self.sequencer.is_current(sequence):
                return
            if self.on_error is None:
                raise
            self.on_error(exc)
            return
        if self.sequencer.is_current(sequence):
            self.on_result(result)
        else:
            LOGGER.debug(fields("stale_result_dropped", sequence=sequence, latest=self.sequencer.latest))


__all__ = ["QuerySequencer", "DebouncedQuery", "DEFAULT_DELAY"]
