"""Trigger gating: per-kind debounce and the single-flight submit guard."""

from __future__ import annotations

import logging
import time
from typing import Callable

from models import TriggerKind

logger = logging.getLogger(__name__)

DEBOUNCE_WINDOW_S = 1.0

Clock = Callable[[], float]


class DebounceGate:
    """Lets each trigger kind through at most once per cool-down window.

    A rejected trigger still moves the stored timestamp to the rejection time,
    so a steady burst keeps the window closed until input goes quiet for a
    full window. An accepted trigger leaves the timestamp untouched; the
    caller records it with :meth:`mark_completed` once its work is done.
    """

    def __init__(self, clock: Clock = time.monotonic, window_s: float = DEBOUNCE_WINDOW_S) -> None:
        self._clock = clock
        self._window_s = window_s
        started = clock()
        self._last = {kind: started for kind in TriggerKind}

    def now(self) -> float:
        return self._clock()

    def last(self, kind: TriggerKind) -> float:
        return self._last[kind]

    def should_proceed(self, kind: TriggerKind, now: float | None = None) -> bool:
        if now is None:
            now = self._clock()
        if now - self._last[kind] < self._window_s:
            self._last[kind] = now
            logger.debug("Suppressed %s trigger inside debounce window", kind.value)
            return False
        return True

    def mark_completed(self, kind: TriggerKind, now: float | None = None) -> None:
        self._last[kind] = self._clock() if now is None else now


class SingleFlightGuard:
    """Allows one submit per clipboard image.

    Only :meth:`reset` (driven by a refresh trigger) releases the guard;
    request completion does not.
    """

    def __init__(self) -> None:
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def reset(self) -> None:
        self._count = 0

    def try_acquire(self) -> bool:
        if self._count != 0:
            logger.debug("Ignored submit: a request was already sent for this image")
            return False
        self._count = 1
        return True
