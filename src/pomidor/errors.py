from __future__ import annotations

"""Exception taxonomy shared by the stores, the engine and the command layer."""

from pathlib import Path
from typing import Optional


class PomidorError(Exception):
    pass


class UsageError(PomidorError):
    """Rejected command arguments. Raised before any state is touched."""


class StorageError(PomidorError):
    """A persisted resource exists but cannot be read back."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


class StorageWriteError(StorageError):
    """Writing a persisted resource failed; in-memory state is already updated."""


__all__ = ["PomidorError", "UsageError", "StorageError", "StorageWriteError"]
