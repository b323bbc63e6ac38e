from __future__ import annotations

"""Small JSON file helpers with all-or-nothing writes."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from .errors import StorageError, StorageWriteError


def atomic_write_text(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` so readers see old or new, never partial."""
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise StorageWriteError(f"could not write: {exc.strerror or exc}", path=path) from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass


def write_json(path: Path, payload: Any) -> None:
    atomic_write_text(path, json.dumps(payload, ensure_ascii=False, indent=2))


def read_text(path: Path) -> str:
    """Return the file content. FileNotFoundError passes through untouched."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exc:
        raise StorageError(f"could not read: {exc.strerror or exc}", path=path) from exc


def parse_json(content: str, path: Path) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise StorageError(f"invalid JSON at line {exc.lineno}", path=path) from exc


def read_json(path: Path) -> Any:
    """Parse ``path``. Raises FileNotFoundError when absent, StorageError when corrupt."""
    return parse_json(read_text(path), path)


__all__ = ["atomic_write_text", "write_json", "read_text", "parse_json", "read_json"]
