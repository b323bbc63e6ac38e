from __future__ import annotations

"""Command parsing and dispatch between the presentation layer and the engine."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .errors import PomidorError, UsageError
from .formatting import render_history
from .history_store import HistoryStore
from .timer_engine import TimerEngine

START_USAGE = "Usage: PomidorStart <minutes> [label]"

_log = logging.getLogger(__name__)


def parse_start_args(args: str) -> Tuple[int, Optional[str]]:
    parts = args.split()
    if not parts:
        raise UsageError(START_USAGE)
    try:
        minutes = int(parts[0])
    except ValueError:
        raise UsageError(START_USAGE) from None
    if minutes <= 0:
        raise UsageError(START_USAGE)
    label = " ".join(parts[1:]) or None
    return minutes, label


@dataclass(slots=True)
class CommandResult:
    ok: bool
    lines: List[str] = field(default_factory=list)


class CommandDispatcher:
    ALIASES = {
        "pomidorstart": "start",
        "pomidorstop": "stop",
        "pomidortoggle": "toggle",
        "pomidordisplay": "display",
        "pomidorhistory": "history",
    }

    def __init__(self, engine: TimerEngine, history: HistoryStore) -> None:
        self._engine = engine
        self._history = history
        self._handlers: Dict[str, Callable[[str], List[str]]] = {
            "start": self._start,
            "stop": self._stop,
            "toggle": self._toggle,
            "display": self._display,
            "history": self._show_history,
        }

    @property
    def commands(self) -> List[str]:
        return sorted(self._handlers)

    def dispatch(self, line: str) -> CommandResult:
        line = line.strip()
        if not line:
            return CommandResult(ok=True)
        name, _, args = line.partition(" ")
        key = name.lower()
        key = self.ALIASES.get(key, key)
        handler = self._handlers.get(key)
        try:
            if handler is None:
                raise UsageError(f"Unknown command {name!r}. Commands: {', '.join(self.commands)}")
            return CommandResult(ok=True, lines=handler(args))
        except PomidorError as exc:
            _log.warning("command failed", extra={"_json_command": key, "_json_error": str(exc)})
            return CommandResult(ok=False, lines=[str(exc)])

    # --- Handlers -------------------------------------------------------
    def _start(self, args: str) -> List[str]:
        minutes, label = parse_start_args(args)
        self._engine.start(minutes, label)
        return []

    def _stop(self, args: str) -> List[str]:
        self._engine.stop()
        return []

    def _toggle(self, args: str) -> List[str]:
        self._engine.toggle()
        return []

    def _display(self, args: str) -> List[str]:
        self._engine.toggle_display()
        return []

    def _show_history(self, args: str) -> List[str]:
        return render_history(self._history.grouped_by_date_descending())


__all__ = ["CommandDispatcher", "CommandResult", "parse_start_args", "START_USAGE"]
