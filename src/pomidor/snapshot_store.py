from __future__ import annotations

"""Single-slot persisted snapshot of the in-flight timer."""

import logging
from pathlib import Path

from .models import NoActiveTimer, Snapshot, snapshot_from_dict
from .storage import parse_json, read_text, write_json

_log = logging.getLogger(__name__)


class SnapshotStore:
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, snapshot: Snapshot) -> None:
        # Last write wins
        write_json(self._path, snapshot.to_dict())
        _log.debug("snapshot written", extra={"_json_kind": type(snapshot).__name__})

    def read(self) -> Snapshot:
        try:
            content = read_text(self._path)
        except FileNotFoundError:
            return NoActiveTimer()
        if not content.strip():
            return NoActiveTimer()
        return snapshot_from_dict(parse_json(content, self._path), path=self._path)


__all__ = ["SnapshotStore"]
