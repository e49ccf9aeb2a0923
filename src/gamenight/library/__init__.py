"""Game library and play log."""

from gamenight.library.games import (
    DuplicateGameError,
    Game,
    GameLibrary,
    GameNotFoundError,
    LibraryError,
)
from gamenight.library.logs import (
    GameLog,
    LogNotFoundError,
    SessionLog,
    format_date_played,
    format_duration,
    format_players,
)

__all__ = [
    "DuplicateGameError",
    "Game",
    "GameLibrary",
    "GameNotFoundError",
    "LibraryError",
    "GameLog",
    "LogNotFoundError",
    "SessionLog",
    "format_date_played",
    "format_duration",
    "format_players",
]
