from __future__ import annotations

"""HistoryStore keeps the append-only session log and mirrors it to JSON.

The backing file holds a single JSON array of session objects. Every append
rewrites the whole array through a temp file + ``os.replace`` so a reader never
observes a half-written log. A file that exists but does not parse raises
``StorageError``; it is never replaced by an empty list.
"""

import logging
from pathlib import Path
from typing import List, Tuple

from PyQt6.QtCore import QObject, pyqtSignal

from .errors import StorageError
from .models import Session
from .storage import read_json, write_json

_log = logging.getLogger(__name__)


class HistoryStore(QObject):
    changed = pyqtSignal()

    def __init__(self, path: Path) -> None:
        super().__init__()
        self._path = path
        self._sessions: List[Session] = []
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._path

    # --- Loading --------------------------------------------------------
    def load_all(self) -> List[Session]:
        try:
            raw = read_json(self._path)
        except FileNotFoundError:
            _log.info("history file missing; creating", extra={"_json_path": str(self._path)})
            write_json(self._path, [])
            raw = []
        if not isinstance(raw, list):
            raise StorageError("history must be a JSON array", path=self._path)
        sessions: List[Session] = []
        for idx, item in enumerate(raw):
            try:
                sessions.append(Session.from_dict(item))
            except ValueError as exc:
                raise StorageError(f"history record {idx} is invalid: {exc}", path=self._path) from exc
        self._sessions = sessions
        self._loaded = True
        _log.info("history loaded", extra={"_json_count": len(sessions)})
        self.changed.emit()
        return list(self._sessions)

    # --- Mutation -------------------------------------------------------
    def append(self, session: Session) -> None:
        if not self._loaded:
            self.load_all()
        self._sessions.append(session)
        self.changed.emit()
        self._persist()

    def _persist(self) -> None:
        write_json(self._path, [s.to_dict() for s in self._sessions])

    # --- Access ---------------------------------------------------------
    def sessions(self) -> List[Session]:
        if not self._loaded:
            self.load_all()
        return list(self._sessions)

    def grouped_by_date_descending(self) -> List[Tuple[str, List[Session]]]:
        groups: dict[str, List[Session]] = {}
        for s in self.sessions():
            groups.setdefault(s.date, []).append(s)
        return [(d, groups[d]) for d in sorted(groups, reverse=True)]


__all__ = ["HistoryStore"]
