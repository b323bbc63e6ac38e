from __future__ import annotations

"""Dataclass models for sessions, live timer state and persisted snapshots."""

from dataclasses import dataclass, field
from typing import Any, Dict, Union

from .errors import StorageError

SNAPSHOT_VERSION = 1


class TimerPhase:
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class Session:
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    duration: int  # minutes
    label: str
    completed: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "time": self.time,
            "duration": self.duration,
            "label": self.label,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Session":
        if not isinstance(data, dict):
            raise ValueError(f"session record must be an object, got {type(data).__name__}")
        try:
            date = data["date"]
            time = data["time"]
            duration = data["duration"]
            label = data["label"]
            completed = data["completed"]
        except KeyError as exc:
            raise ValueError(f"session record missing field {exc.args[0]!r}") from None
        if not isinstance(date, str) or not isinstance(time, str) or not isinstance(label, str):
            raise ValueError("session date, time and label must be strings")
        if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
            raise ValueError(f"session duration must be a positive integer, got {duration!r}")
        if not isinstance(completed, bool):
            raise ValueError(f"session completed must be true or false, got {completed!r}")
        return cls(date=date, time=time, duration=duration, label=label, completed=completed)


@dataclass(slots=True)
class TimerState:
    remaining_seconds: int = 0
    initial_duration: int = 0  # minutes, 0 while idle
    label: str = ""
    is_running: bool = False
    display_enabled: bool = True

    @property
    def phase(self) -> str:
        if self.is_running:
            return TimerPhase.RUNNING
        if self.remaining_seconds > 0:
            return TimerPhase.PAUSED
        return TimerPhase.IDLE

    def copy(self) -> "TimerState":
        return TimerState(
            remaining_seconds=self.remaining_seconds,
            initial_duration=self.initial_duration,
            label=self.label,
            is_running=self.is_running,
            display_enabled=self.display_enabled,
        )


# --- Snapshot variants ---------------------------------------------------


@dataclass(frozen=True, slots=True)
class NoActiveTimer:
    def to_dict(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True, slots=True)
class ActiveTimer:
    remaining_time: int  # seconds
    label: str
    initial_duration: int  # minutes
    display_enabled: bool = True
    paused: bool = False
    version: int = field(default=SNAPSHOT_VERSION)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "remaining_time": self.remaining_time,
            "label": self.label,
            "initial_duration": self.initial_duration,
            "display_enabled": self.display_enabled,
            "paused": self.paused,
        }


Snapshot = Union[NoActiveTimer, ActiveTimer]


def snapshot_from_dict(data: Any, *, path=None) -> Snapshot:
    """Decode a persisted snapshot object.

    ``{}`` is the explicit "no active timer" marker. Objects written before the
    schema was versioned carry no ``version``/``paused`` keys and are accepted.
    """
    if not isinstance(data, dict):
        raise StorageError("snapshot must be a JSON object", path=path)
    if not data:
        return NoActiveTimer()
    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise StorageError(f"unsupported snapshot version {version!r}", path=path)
    remaining = data.get("remaining_time")
    if isinstance(remaining, bool) or not isinstance(remaining, (int, float)) or remaining < 0:
        raise StorageError("snapshot has no valid remaining_time", path=path)
    label = data.get("label")
    initial = data.get("initial_duration")
    if isinstance(initial, bool) or not isinstance(initial, (int, float)):
        initial = 0
    display = data.get("display_enabled")
    return ActiveTimer(
        remaining_time=int(remaining),
        label=label if isinstance(label, str) else "",
        initial_duration=int(initial),
        # A missing flag means the display was never switched off
        display_enabled=True if display is None else bool(display),
        paused=bool(data.get("paused", False)),
    )


__all__ = [
    "Session",
    "TimerState",
    "TimerPhase",
    "NoActiveTimer",
    "ActiveTimer",
    "Snapshot",
    "snapshot_from_dict",
    "SNAPSHOT_VERSION",
]
