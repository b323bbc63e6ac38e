from __future__ import annotations

"""Text helpers for the status line and the history view."""

from typing import Iterable, List, Sequence, Tuple

from .models import Session

HISTORY_TITLE = "🍅 Pomidor Session History"
COMPLETED_MARK = "✅"
INTERRUPTED_MARK = "⏹️"


def format_time(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def status_text(label: str, remaining_seconds: int) -> str:
    return f"🍅 {label}: {format_time(remaining_seconds)}"


def session_line(session: Session) -> str:
    mark = COMPLETED_MARK if session.completed else INTERRUPTED_MARK
    return f"  {mark} {session.time} - {session.duration} minutes: {session.label}"


def render_history(groups: Iterable[Tuple[str, Sequence[Session]]]) -> List[str]:
    lines = [HISTORY_TITLE, ""]
    for date, sessions in groups:
        lines.append(f"📅 {date}")
        lines.extend(session_line(s) for s in sessions)
        lines.append("")
    return lines


__all__ = ["format_time", "status_text", "session_line", "render_history"]
