from datetime import datetime, timedelta, timezone

import pytest

from gamenight.library.logs import (
    LogNotFoundError,
    SessionLog,
    format_date_played,
    format_duration,
    format_players,
)

NOW = datetime(2024, 3, 15, 20, 0, tzinfo=timezone.utc)


def test_log_game_cleans_players():
    log = SessionLog()
    entry = log.log_game(" Azul ", " Ann ", ["Ann", " ", "Bo "], duration_minutes=40, notes="")

    assert entry.game_name == "Azul"
    assert entry.winner == "Ann"
    assert entry.players == ("Ann", "Bo")
    assert entry.notes is None
    assert len(log) == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"game_name": " ", "winner": "Ann"},
        {"game_name": "Azul", "winner": ""},
        {"game_name": "Azul", "winner": "Ann", "duration_minutes": -5},
    ],
)
def test_log_game_validation(kwargs):
    with pytest.raises(ValueError):
        SessionLog().log_game(players=["Ann"], **kwargs)


def test_entries_newest_first():
    log = SessionLog()
    log.log_game("Azul", "Ann", ["Ann"], played_at=NOW - timedelta(days=2))
    log.log_game("Root", "Bo", ["Bo"], played_at=NOW)
    assert [e.game_name for e in log.entries] == ["Root", "Azul"]


def test_delete():
    log = SessionLog()
    entry = log.log_game("Azul", "Ann", ["Ann"])
    assert log.delete(entry.id) == entry
    with pytest.raises(LogNotFoundError):
        log.delete(entry.id)


def test_logs_start_empty_and_independent():
    first, second = SessionLog(), SessionLog()
    first.log_game("Azul", "Ann", ["Ann"])
    assert len(second) == 0

    with pytest.raises(TypeError):
        SessionLog(_entries={})


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (None, "Duration not recorded"),
        (0, "Duration not recorded"),
        (45, "45 min"),
        (120, "2 hr"),
        (90, "1 hr 30 min"),
    ],
)
def test_format_duration(minutes, expected):
    assert format_duration(minutes) == expected


@pytest.mark.parametrize(
    "players, expected",
    [
        (["Ann"], "Ann"),
        (["Ann", "Bo"], "Ann & Bo"),
        (["Ann", "Bo", "Cy"], "Ann, Bo & Cy"),
    ],
)
def test_format_players(players, expected):
    assert format_players(players) == expected


@pytest.mark.parametrize(
    "age, expected",
    [
        (timedelta(hours=3), "Today"),
        (timedelta(days=1, hours=2), "Yesterday"),
        (timedelta(days=4), "4 days ago"),
        (timedelta(days=10), "2024-03-05"),
    ],
)
def test_format_date_played(age, expected):
    assert format_date_played(NOW - age, now=NOW) == expected
