"""Play log: who played what, who won, and for how long."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
import logging
import uuid

from gamenight.library.games import LibraryError

logger = logging.getLogger(__name__)


class LogNotFoundError(LibraryError):
    """No log entry with the given id."""

    def __init__(self, log_id: str) -> None:
        super().__init__(f"No game log with id {log_id}")
        self.log_id = log_id


@dataclass(frozen=True)
class GameLog:
    """Outcome of one play session."""

    id: str
    game_name: str
    winner: str
    players: tuple[str, ...]
    played_at: datetime
    duration_minutes: Optional[int] = None
    notes: Optional[str] = None


class SessionLog:
    """In-memory play history, newest first."""

    def __init__(self) -> None:
        self._entries: Dict[str, GameLog] = {}

    @property
    def entries(self) -> List[GameLog]:
        return sorted(self._entries.values(), key=lambda e: e.played_at, reverse=True)

    def __len__(self) -> int:
        return len(self._entries)

    def log_game(
        self,
        game_name: str,
        winner: str,
        players: Sequence[str],
        duration_minutes: Optional[int] = None,
        notes: Optional[str] = None,
        played_at: Optional[datetime] = None,
    ) -> GameLog:
        """Record a finished game.

        Raises:
            ValueError: If the game name or winner is blank, or the duration is negative
        """
        if not game_name.strip():
            raise ValueError("Game name must not be empty")
        if not winner.strip():
            raise ValueError("Winner must not be empty")
        if duration_minutes is not None and duration_minutes < 0:
            raise ValueError("Duration must not be negative")

        entry = GameLog(
            id=str(uuid.uuid4()),
            game_name=game_name.strip(),
            winner=winner.strip(),
            players=tuple(p.strip() for p in players if p.strip()),
            played_at=played_at or datetime.now(timezone.utc),
            duration_minutes=duration_minutes,
            notes=notes or None,
        )
        self._entries[entry.id] = entry
        logger.info(f"Logged {entry.game_name}: winner {entry.winner}")
        return entry

    def delete(self, log_id: str) -> GameLog:
        entry = self._entries.pop(log_id, None)
        if entry is None:
            raise LogNotFoundError(log_id)
        logger.info(f"Deleted log for {entry.game_name}")
        return entry


def format_duration(minutes: Optional[int]) -> str:
    """'45 min', '2 hr', '1 hr 30 min'."""
    if not minutes:
        return "Duration not recorded"
    if minutes < 60:
        return f"{minutes} min"

    hours, remaining = divmod(minutes, 60)
    if remaining == 0:
        return f"{hours} hr"
    return f"{hours} hr {remaining} min"


def format_players(players: Sequence[str]) -> str:
    """'Ann & Bo' for two players, 'Ann, Bo & Cy' for more."""
    if len(players) <= 2:
        return " & ".join(players)
    return f"{', '.join(players[:-1])} & {players[-1]}"


def format_date_played(played_at: datetime, now: Optional[datetime] = None) -> str:
    """Relative day label for the log list."""
    if now is None:
        now = datetime.now(played_at.tzinfo)
    days = (now - played_at).days

    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    return played_at.date().isoformat()
