from pomidor.formatting import format_time, render_history, status_text
from pomidor.models import Session


def test_format_time():
    assert format_time(0) == "00:00"
    assert format_time(125) == "02:05"
    assert format_time(6000) == "100:00"


def test_status_text():
    assert status_text("Read", 61) == "🍅 Read: 01:01"


def test_render_history():
    done = Session(date="2024-01-02", time="09:00", duration=25, label="Write", completed=True)
    cut = Session(date="2024-01-01", time="14:10", duration=10, label="Mail", completed=False)
    lines = render_history([("2024-01-02", [done]), ("2024-01-01", [cut])])
    assert lines == [
        "🍅 Pomidor Session History",
        "",
        "📅 2024-01-02",
        "  ✅ 09:00 - 25 minutes: Write",
        "",
        "📅 2024-01-01",
        "  ⏹️ 14:10 - 10 minutes: Mail",
        "",
    ]
