from __future__ import annotations

"""Periodic tick source consumed by the timer engine."""

from typing import Callable, Optional, Protocol

from PyQt6.QtCore import QObject, QTimer


class ClockSource(Protocol):
    @property
    def active(self) -> bool: ...

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class QtClockSource:
    """Repeating QTimer wrapper.

    Each ``start`` builds a fresh QTimer. ``cancel`` stops it, drops the
    connection and schedules deletion, so a timeout already sitting in the event
    queue has nothing left to call.
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent
        self._timer: Optional[QTimer] = None

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.cancel()
        timer = QTimer(self._parent)
        timer.setInterval(interval_ms)
        timer.timeout.connect(callback)
        timer.start()
        self._timer = timer

    def cancel(self) -> None:
        timer, self._timer = self._timer, None
        if timer is None:
            return
        timer.stop()
        timer.timeout.disconnect()
        timer.deleteLater()


__all__ = ["ClockSource", "QtClockSource"]
