from datetime import datetime, timedelta
from pathlib import Path
import logging
import os
import sys
import pytest

# Run Qt headless so the suite works without a display server
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Ensure src/ is on sys.path for direct test invocation without an editable install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from pomidor.config import PomidorConfig
from pomidor.history_store import HistoryStore
from pomidor.snapshot_store import SnapshotStore
from pomidor.timer_engine import TimerEngine


class FakeClock:
    """Stands in for the QTimer-backed clock; ticks are fired by hand."""

    def __init__(self):
        self.callback = None
        self.interval_ms = None
        self.starts = 0
        self.cancels = 0

    @property
    def active(self) -> bool:
        return self.callback is not None

    def start(self, interval_ms, callback):
        self.interval_ms = interval_ms
        self.callback = callback
        self.starts += 1

    def cancel(self):
        self.callback = None
        self.cancels += 1

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self.callback is None:
                return
            self.callback()


class FakeNow:
    def __init__(self, start: datetime):
        self.now = start

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def config(tmp_path: Path) -> PomidorConfig:
    return PomidorConfig(data_dir=tmp_path / "data")


@pytest.fixture()
def history_store(config):
    store = HistoryStore(config.history_path)
    store.load_all()
    return store


@pytest.fixture()
def snapshot_store(config):
    return SnapshotStore(config.state_path)


@pytest.fixture()
def fake_clock():
    return FakeClock()


@pytest.fixture()
def fake_now():
    return FakeNow(datetime(2024, 1, 2, 9, 30, 0))


@pytest.fixture()
def engine(qtbot, config, history_store, snapshot_store, fake_clock, fake_now):
    return TimerEngine(history_store, snapshot_store, config, clock=fake_clock, time_provider=fake_now)


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
