import pytest

from pomidor.commands import CommandDispatcher, START_USAGE, parse_start_args
from pomidor.errors import UsageError
from pomidor.formatting import HISTORY_TITLE
from pomidor.models import TimerPhase


@pytest.fixture()
def dispatcher(engine, history_store):
    return CommandDispatcher(engine, history_store)


def test_parse_start_args():
    assert parse_start_args("25 Deep  work") == (25, "Deep work")
    assert parse_start_args("5") == (5, None)


@pytest.mark.parametrize("args", ["", "abc", "0", "-2", "2.5 tea"])
def test_parse_start_args_rejects(args):
    with pytest.raises(UsageError):
        parse_start_args(args)


def test_start_stop_through_dispatcher(dispatcher, engine, history_store):
    assert dispatcher.dispatch("start 1 Read a book").ok
    assert engine.state.label == "Read a book"
    assert dispatcher.dispatch("PomidorToggle").ok
    assert engine.phase == TimerPhase.PAUSED
    assert dispatcher.dispatch("toggle").ok
    assert dispatcher.dispatch("PomidorStop").ok
    assert engine.phase == TimerPhase.IDLE
    assert len(history_store.sessions()) == 1


def test_bad_start_reports_usage(dispatcher, engine):
    result = dispatcher.dispatch("PomidorStart soon")
    assert not result.ok
    assert result.lines == [START_USAGE]
    assert engine.phase == TimerPhase.IDLE


def test_unknown_command(dispatcher):
    result = dispatcher.dispatch("snooze")
    assert not result.ok
    assert "history" in result.lines[0]


def test_display_command(dispatcher, engine):
    dispatcher.dispatch("display")
    assert engine.state.display_enabled is False


def test_history_command_renders_groups(dispatcher, engine):
    dispatcher.dispatch("start 2 Plan")
    dispatcher.dispatch("stop")
    result = dispatcher.dispatch("history")
    assert result.lines == [
        HISTORY_TITLE,
        "",
        "📅 2024-01-02",
        "  ⏹️ 09:30 - 2 minutes: Plan",
        "",
    ]


def test_blank_line_is_ignored(dispatcher):
    assert dispatcher.dispatch("   ").ok
