from __future__ import annotations

"""Countdown timer engine with history logging and crash recovery.

Design:
 - One TimerState per engine: idle -> running <-> paused -> idle.
 - A ClockSource calls back once per second while running; every start/cancel
   bumps a generation counter so a stale callback can never mutate state.
 - Snapshot written on every transition and on each whole-minute boundary.
 - History appended when a session completes or is interrupted (stop, or a
   new start while one is active). Interrupted sessions record the planned
   duration, not the elapsed time.
 - Storage write failures never roll back the in-memory transition. They are
   logged, emitted on ``storage_error`` and re-raised once the command is done.
 - Emits Qt signals for the presentation layer.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .clock import ClockSource, QtClockSource
from .config import PomidorConfig
from .errors import StorageError, StorageWriteError, UsageError
from .formatting import status_text
from .history_store import HistoryStore
from .models import ActiveTimer, NoActiveTimer, Session, Snapshot, TimerPhase, TimerState
from .snapshot_store import SnapshotStore

TimeProvider = Callable[[], datetime]
COMPLETE_MESSAGE = "Timer Complete!"

_log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    message: str = COMPLETE_MESSAGE
    severity: str = "info"
    timeout_ms: int = 10_000


class TimerEngine(QObject):
    tick_update = pyqtSignal(int, str)  # remaining seconds, label
    session_completed = pyqtSignal(str, int)  # label, duration minutes
    session_interrupted = pyqtSignal(str, int)  # label, planned minutes
    notification = pyqtSignal(object)  # Notification
    status_changed = pyqtSignal(str)  # "" clears the status line
    display_changed = pyqtSignal(bool)
    phase_changed = pyqtSignal(str)
    storage_error = pyqtSignal(str)

    def __init__(
        self,
        history: HistoryStore,
        snapshots: SnapshotStore,
        config: PomidorConfig,
        clock: Optional[ClockSource] = None,
        time_provider: Optional[TimeProvider] = None,
    ) -> None:
        super().__init__()
        self._history = history
        self._snapshots = snapshots
        self._config = config
        self._clock: ClockSource = clock if clock is not None else QtClockSource(self)
        self._time_provider: TimeProvider = time_provider or datetime.now
        self._state = TimerState()
        self._phase: str = TimerPhase.IDLE
        self._generation = 0
        self._pending_error: Optional[StorageError] = None

    # --- Properties -----------------------------------------------------
    @property
    def state(self) -> TimerState:
        return self._state.copy()

    @property
    def phase(self) -> str:
        return self._state.phase

    def snapshot(self) -> Snapshot:
        s = self._state
        if s.phase == TimerPhase.IDLE:
            return NoActiveTimer()
        return ActiveTimer(
            remaining_time=s.remaining_seconds,
            label=s.label,
            initial_duration=s.initial_duration,
            display_enabled=s.display_enabled,
            paused=not s.is_running,
        )

    # --- Public API -----------------------------------------------------
    def start(self, minutes: int, label: Optional[str] = None) -> None:
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
            raise UsageError(f"minutes must be a positive integer, got {minutes!r}")
        self._pending_error = None
        label = label.strip() if label else ""
        interrupted: Optional[Session] = None
        if self._state.phase != TimerPhase.IDLE:
            interrupted = self._record_session(completed=False)
            self._cancel_clock()

        s = self._state
        s.remaining_seconds = minutes * 60
        s.initial_duration = minutes
        s.label = label or self._config.default_label
        s.is_running = True
        self._start_clock()
        self._update_status()
        self._write_snapshot()
        self._sync_phase()
        _log.info("timer started", extra={"_json_minutes": minutes, "_json_label": s.label})
        self._finish(interrupted)

    def tick(self) -> None:
        s = self._state
        if not s.is_running:
            return
        if s.remaining_seconds > 0:
            s.remaining_seconds -= 1
            self.tick_update.emit(s.remaining_seconds, s.label)
            self._update_status()
            if s.remaining_seconds and s.remaining_seconds % self._config.checkpoint_seconds == 0:
                self._write_snapshot()
        if s.remaining_seconds == 0:
            self._complete()
        # Ticks come from the event loop; failures were already reported
        self._pending_error = None

    def stop(self) -> None:
        if self._state.phase == TimerPhase.IDLE:
            return
        self._pending_error = None
        self._cancel_clock()
        s = self._state
        s.is_running = False
        session = self._record_session(completed=False)
        s.remaining_seconds = 0
        s.initial_duration = 0
        self._clear_status()
        self._write_snapshot()
        self._sync_phase()
        _log.info("timer stopped", extra={"_json_label": s.label})
        self._finish(session)

    def toggle(self) -> None:
        s = self._state
        phase = s.phase
        if phase == TimerPhase.IDLE:
            return
        self._pending_error = None
        if phase == TimerPhase.RUNNING:
            self._cancel_clock()
            s.is_running = False
            _log.info("timer paused", extra={"_json_remaining": s.remaining_seconds})
        else:
            s.is_running = True
            self._start_clock()
            self._update_status()
            _log.info("timer resumed", extra={"_json_remaining": s.remaining_seconds})
        self._write_snapshot()
        self._sync_phase()
        self._raise_pending()

    def toggle_display(self) -> None:
        self._pending_error = None
        s = self._state
        s.display_enabled = not s.display_enabled
        if s.display_enabled:
            self._update_status()
        else:
            self.status_changed.emit("")
        self.display_changed.emit(s.display_enabled)
        self._write_snapshot()
        self._raise_pending()

    def recover_on_startup(self) -> bool:
        """Resume the timer recorded in the snapshot. Returns True if one was resumed.

        The remaining time is rounded up to whole minutes, so a recovered timer
        may run up to 59 seconds longer than the one that was interrupted.
        Raises StorageError if the snapshot exists but is unreadable, and
        StorageWriteError if the resumed timer could not be saved back (the
        timer is running regardless).
        """
        snap = self._snapshots.read()
        if isinstance(snap, NoActiveTimer):
            return False
        minutes = math.ceil(snap.remaining_time / 60)
        if minutes <= 0:
            _log.info("snapshot had no time left; clearing")
            self._snapshots.write(NoActiveTimer())
            return False
        self._state.display_enabled = snap.display_enabled
        err: Optional[StorageWriteError] = None
        try:
            self.start(minutes, snap.label or None)
        except StorageWriteError as exc:
            err = exc
        if snap.paused:
            try:
                self.toggle()
            except StorageWriteError as exc:
                err = err or exc
        _log.info(
            "timer recovered",
            extra={"_json_minutes": minutes, "_json_paused": snap.paused, "_json_label": snap.label},
        )
        if err is not None:
            raise err
        return True

    # --- Internal -------------------------------------------------------
    def _complete(self) -> None:
        s = self._state
        s.is_running = False
        self._cancel_clock()
        session = self._record_session(completed=True)
        s.initial_duration = 0
        self._clear_status()
        self._write_snapshot()
        self._sync_phase()
        _log.info("timer completed", extra={"_json_minutes": session.duration, "_json_label": session.label})
        # Listeners may issue new commands, so they run on settled state
        self._pending_error = None
        self.session_completed.emit(session.label, session.duration)
        self.notification.emit(Notification(title=session.label, timeout_ms=self._config.notification_timeout_ms))

    def _record_session(self, *, completed: bool) -> Session:
        s = self._state
        now = self._time_provider()
        session = Session(
            date=now.strftime("%Y-%m-%d"),
            time=now.strftime("%H:%M"),
            duration=s.initial_duration,
            label=s.label,
            completed=completed,
        )
        try:
            self._history.append(session)
        except StorageError as exc:
            self._report(exc)
        return session

    def _finish(self, interrupted: Optional[Session]) -> None:
        # State and snapshot are settled; a listener may start a new timer here
        err, self._pending_error = self._pending_error, None
        if interrupted is not None:
            self.session_interrupted.emit(interrupted.label, interrupted.duration)
        if err is not None:
            raise err

    def _write_snapshot(self) -> None:
        try:
            self._snapshots.write(self.snapshot())
        except StorageError as exc:
            self._report(exc)

    def _report(self, exc: StorageError) -> None:
        _log.warning("storage write failed: %s", exc, extra={"_json_path": str(exc.path)})
        if self._pending_error is None:
            self._pending_error = exc
        self.storage_error.emit(str(exc))

    def _raise_pending(self) -> None:
        err, self._pending_error = self._pending_error, None
        if err is not None:
            raise err

    def _start_clock(self) -> None:
        self._generation += 1
        generation = self._generation
        self._clock.start(self._config.tick_interval_ms, lambda: self._on_clock(generation))

    def _cancel_clock(self) -> None:
        self._generation += 1
        self._clock.cancel()

    def _on_clock(self, generation: int) -> None:
        if generation != self._generation:
            return
        self.tick()

    def _update_status(self) -> None:
        s = self._state
        if s.is_running and s.display_enabled:
            self.status_changed.emit(status_text(s.label, s.remaining_seconds))

    def _clear_status(self) -> None:
        self.status_changed.emit("")

    def _sync_phase(self) -> None:
        phase = self._state.phase
        if phase != self._phase:
            self._phase = phase
            self.phase_changed.emit(phase)


__all__ = ["TimerEngine", "Notification", "TimeProvider"]
