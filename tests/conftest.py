"""
Pytest configuration and shared fixtures.
"""
import pytest

from minefield.board import Board
from minefield.placement import FixedMinePlacer
from minefield.session import GameSession

# 9x9 layout whose cell (1, 1) touches exactly three mines
KNOWN_MINES = [(0, 0), (0, 1), (1, 0), (5, 5), (8, 8)]


@pytest.fixture
def known_board() -> Board:
    """A 9x9 board with 5 mines at fixed coordinates."""
    board = Board(9, 9, len(KNOWN_MINES))
    board.place_mines(FixedMinePlacer(KNOWN_MINES))
    return board


@pytest.fixture
def empty_board() -> Board:
    """A 5x5 board without mines, for cascade tests."""
    board = Board(5, 5, 0)
    board.place_mines()
    return board


@pytest.fixture
def known_session() -> GameSession:
    """A session on the fixed 9x9 layout."""
    return GameSession(9, 9, len(KNOWN_MINES), placer=FixedMinePlacer(KNOWN_MINES))


@pytest.fixture
def open_session() -> GameSession:
    """A 3x3 session without mines."""
    return GameSession(3, 3, 0)
