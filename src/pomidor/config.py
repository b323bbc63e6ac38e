from __future__ import annotations

"""Runtime configuration: file locations, defaults and cadence."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

APP_DIR_NAME = "pomidor"


def default_data_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    override = env.get("POMIDOR_DATA_DIR")
    if override:
        return Path(override).expanduser()
    xdg = env.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg).expanduser() / APP_DIR_NAME
    return Path.home() / ".local" / "share" / APP_DIR_NAME


@dataclass(slots=True)
class PomidorConfig:
    data_dir: Path
    history_filename: str = "pomidor_history.json"
    state_filename: str = "pomidor_state.json"
    default_label: str = "Pomidor"
    tick_interval_ms: int = 1000
    checkpoint_seconds: int = 60
    notification_timeout_ms: int = 10_000
    log_level: int = logging.INFO

    @property
    def history_path(self) -> Path:
        return self.data_dir / self.history_filename

    @property
    def state_path(self) -> Path:
        return self.data_dir / self.state_filename

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PomidorConfig":
        env = os.environ if environ is None else environ
        cfg = cls(data_dir=default_data_dir(env))
        level_name = env.get("POMIDOR_LOG_LEVEL", "").strip().upper()
        if level_name:
            level = logging.getLevelName(level_name)
            if isinstance(level, int):
                cfg.log_level = level
        label = env.get("POMIDOR_DEFAULT_LABEL", "").strip()
        if label:
            cfg.default_label = label
        return cfg


__all__ = ["PomidorConfig", "default_data_dir"]
