from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from PyQt6.QtCore import QCoreApplication, QObject, QSocketNotifier

from .commands import CommandDispatcher
from .config import PomidorConfig
from .errors import StorageError, StorageWriteError
from .history_store import HistoryStore
from .logging_setup import configure_logging
from .snapshot_store import SnapshotStore
from .timer_engine import Notification, TimerEngine

APP_NAME = "Pomidor"
EXIT_COMMANDS = {"quit", "exit"}

_log = logging.getLogger(__name__)


@dataclass(slots=True)
class AppState:
    config: PomidorConfig
    history: HistoryStore
    snapshots: SnapshotStore
    engine: TimerEngine
    dispatcher: CommandDispatcher


def get_app_state(config: Optional[PomidorConfig] = None) -> AppState:
    """Wire stores, engine and dispatcher, then load history and recover state.

    Raises StorageError if the history file is corrupt; an unreadable snapshot
    only costs the in-flight timer and is logged.
    """
    config = config or PomidorConfig.from_env()
    history = HistoryStore(config.history_path)
    snapshots = SnapshotStore(config.state_path)
    engine = TimerEngine(history, snapshots, config)
    dispatcher = CommandDispatcher(engine, history)
    history.load_all()
    try:
        engine.recover_on_startup()
    except StorageWriteError as exc:
        _log.warning("timer recovered but its snapshot was not saved: %s", exc)
    except StorageError as exc:
        _log.error("could not recover timer: %s", exc)
    return AppState(
        config=config,
        history=history,
        snapshots=snapshots,
        engine=engine,
        dispatcher=dispatcher,
    )


class ConsolePresenter(QObject):  # pragma: no cover - terminal I/O
    """Reads commands from stdin and echoes engine signals to the terminal."""

    def __init__(self, app: QCoreApplication, state: AppState, out: TextIO = sys.stdout) -> None:
        super().__init__()
        self._app = app
        self._state = state
        self._out = out
        engine = state.engine
        engine.status_changed.connect(self._show_status)
        engine.notification.connect(self._show_notification)
        engine.session_interrupted.connect(
            lambda label, minutes: self._print(f"⏹️ {label} interrupted ({minutes} minutes)")
        )
        engine.storage_error.connect(lambda msg: self._print(f"Storage error: {msg}"))
        self._notifier = QSocketNotifier(sys.stdin.fileno(), QSocketNotifier.Type.Read, self)
        self._notifier.activated.connect(self._read_command)

    def _read_command(self) -> None:
        line = sys.stdin.readline()
        if not line or line.strip().lower() in EXIT_COMMANDS:
            self._notifier.setEnabled(False)
            self._app.quit()
            return
        result = self._state.dispatcher.dispatch(line)
        for text in result.lines:
            self._print(text)

    def _show_status(self, text: str) -> None:
        self._out.write("\r\033[K" + text)
        self._out.flush()

    def _show_notification(self, note: Notification) -> None:
        self._print(f"[{note.severity}] {note.title}: 🍅 {note.message}")

    def _print(self, text: str) -> None:
        self._out.write("\r\033[K" + text + "\n")
        self._out.flush()


def init_logging(config: PomidorConfig) -> Path:
    """File-only logging; ConsolePresenter owns the terminal."""
    return configure_logging(config.data_dir, config.log_level, console=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pomidor", description="Countdown timer with session history")
    parser.add_argument("--data-dir", help="directory for history, state and logs")
    parser.add_argument("--log-level", help="logging level (default INFO)")
    return parser.parse_args(argv)


def run(argv: Optional[list[str]] = None) -> int:  # pragma: no cover - event loop
    if argv is None:
        argv = sys.argv
    opts = _parse_args(argv[1:])
    config = PomidorConfig.from_env()
    if opts.data_dir:
        config.data_dir = Path(opts.data_dir).expanduser()
    if opts.log_level:
        level = logging.getLevelName(opts.log_level.upper())
        if isinstance(level, int):
            config.log_level = level
    init_logging(config)
    app = QCoreApplication(argv[:1])
    app.setApplicationName(APP_NAME)
    try:
        state = get_app_state(config)
    except StorageError as exc:
        _log.error("history unreadable; refusing to start: %s", exc)
        print(f"Cannot read session history: {exc}", file=sys.stderr)
        return 2
    presenter = ConsolePresenter(app, state)  # noqa: F841 - must outlive the event loop
    print("Commands: start <minutes> [label], stop, toggle, display, history, quit")
    code = app.exec()
    return code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(run())
