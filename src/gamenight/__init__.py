"""Game Night: a shared board-game list with a spinning selection wheel."""

__version__ = "0.1.0"
