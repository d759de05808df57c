"""Restartable one-shot timers that drive the protocol's time-based events."""

from __future__ import annotations

import threading
from typing import Callable, Optional


class Timer:
    """A one-shot timer that can be re-armed, cancelled and waited on.

    ``mod`` arms or re-arms the timer. ``delete`` disarms it. ``delete_sync``
    also waits for a running expiration to finish. An expiration runs only
    while the timer is pending, and running it clears the pending state first.
    """

    def __init__(self, expiration: Callable[[], object]) -> None:
        self._expiration = expiration
        self._modifying = threading.Lock()
        self._running = threading.Lock()
        self._pending = False
        self._generation = 0
        self._timer: Optional[threading.Timer] = None

    def _fire(self, generation: int) -> None:
        with self._running:
            with self._modifying:
                if not self._pending or generation != self._generation:
                    return
                self._pending = False
            self._expiration()

    def mod(self, delay: float) -> None:
        """Arm the timer to expire ``delay`` seconds from now."""
        with self._modifying:
            self._pending = True
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(delay, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def delete(self) -> None:
        """Disarm the timer without waiting for a running expiration."""
        with self._modifying:
            self._pending = False
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def delete_sync(self) -> None:
        """Disarm the timer and wait for any running expiration to return."""
        self.delete()
        with self._running:
            self.delete()

    def is_pending(self) -> bool:
        """Return True while the timer is armed and has not yet expired."""
        with self._modifying:
            return self._pending