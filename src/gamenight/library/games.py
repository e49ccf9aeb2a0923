"""In-memory game library: the item source that feeds the wheel.

The library keeps the shared list of games the group can pick from,
ordered by name, and tells subscribers whenever the list changes so
the host can reconfigure the wheel.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional
import logging
import uuid

from gamenight.wheel.models import Item

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    """Base error for library operations."""


class DuplicateGameError(LibraryError):
    """A game with the same name is already in the library."""

    def __init__(self, name: str) -> None:
        super().__init__(f'"{name}" is already in the game library')
        self.name = name


class GameNotFoundError(LibraryError):
    """No game with the given id."""

    def __init__(self, game_id: str) -> None:
        super().__init__(f"No game with id {game_id}")
        self.game_id = game_id


@dataclass(frozen=True)
class Game:
    """A game available for selection."""

    id: str
    name: str
    image: Optional[str] = None
    bgg_id: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_item(self) -> Item:
        return Item(id=self.id, display_name=self.name, image_ref=self.image)


LibraryListener = Callable[[List[Game]], None]


class GameLibrary:
    """Shared list of games, with change notification."""

    def __init__(self) -> None:
        self._games: Dict[str, Game] = {}
        self._listeners: List[LibraryListener] = []
        self._current_selection: Optional[Item] = None

    @property
    def games(self) -> List[Game]:
        """All games, ordered by name (case-insensitive)."""
        return sorted(self._games.values(), key=lambda g: g.name.casefold())

    @property
    def current_selection(self) -> Optional[Item]:
        """The last item chosen by the wheel, if any."""
        return self._current_selection

    def __len__(self) -> int:
        return len(self._games)

    def __contains__(self, name: str) -> bool:
        return self._find_by_name(name) is not None

    def as_items(self) -> List[Item]:
        """Games converted to wheel items, in library order."""
        return [game.to_item() for game in self.games]

    def get(self, game_id: str) -> Game:
        try:
            return self._games[game_id]
        except KeyError:
            raise GameNotFoundError(game_id) from None

    def add_game(
        self,
        name: str,
        image: Optional[str] = None,
        bgg_id: Optional[str] = None,
    ) -> Game:
        """Add a game.

        Raises:
            ValueError: If name is blank
            DuplicateGameError: If a game with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValueError("Game name must not be empty")
        if self._find_by_name(name) is not None:
            raise DuplicateGameError(name)

        game = Game(id=str(uuid.uuid4()), name=name, image=image, bgg_id=bgg_id)
        self._games[game.id] = game
        logger.info(f"Game added: {name}")
        self._notify()
        return game

    def remove_game(self, game_id: str) -> Game:
        """Remove a game by id.

        Raises:
            GameNotFoundError: If no game has this id
        """
        game = self._games.pop(game_id, None)
        if game is None:
            raise GameNotFoundError(game_id)

        if self._current_selection is not None and self._current_selection.id == game_id:
            self._current_selection = None

        logger.info(f"Game removed: {game.name}")
        self._notify()
        return game

    def clear(self) -> int:
        """Remove every game. Returns how many were removed."""
        count = len(self._games)
        self._games.clear()
        self._current_selection = None
        logger.info(f"Library cleared ({count} games)")
        self._notify()
        return count

    def select(self, item: Item) -> None:
        """Record the wheel's choice. Usable directly as a selection sink."""
        self._current_selection = item
        logger.info(f"Current selection: {item.display_name}")

    def clear_selection(self) -> None:
        self._current_selection = None

    def subscribe(self, listener: LibraryListener) -> Callable[[], None]:
        """
        Call listener with the full game list after every change.

        Returns:
            Unsubscribe function
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _find_by_name(self, name: str) -> Optional[Game]:
        key = name.strip().casefold()
        for game in self._games.values():
            if game.name.casefold() == key:
                return game
        return None

    def _notify(self) -> None:
        games = self.games
        for listener in list(self._listeners):
            try:
                listener(games)
            except Exception as e:
                logger.error(f"Error in library listener: {e}")
