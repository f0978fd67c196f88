"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path
from typing import Callable

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import Board, Difficulty, Game, TileState, BEGINNER


# ============================================================================
# Helpers
# ============================================================================

def _true_neighbor_count(board: Board, pos) -> int:
    tiles = board.get_tiles()
    return sum(
        1 for row, col in board.neighbor_coords(pos)
        if (row, col) != pos and tiles[row][col].is_mine
    )


def check_board_invariants(board: Board) -> None:
    """Assert that counters and neighbor counts agree with the grids."""
    tiles = board.get_tiles()
    states = board.get_tilestates()
    mines = flagged = safe_hidden = 0
    for row, col in board.positions():
        tile = tiles[row][col]
        state = states[row][col]
        if tile.is_mine:
            mines += 1
        else:
            assert tile.adjacent_mines == _true_neighbor_count(board, (row, col))
            if state != TileState.UNCOVERED:
                safe_hidden += 1
        if state == TileState.FLAGGED:
            flagged += 1

    assert mines == board.mine_count
    assert board.get_safe_squares_left() == safe_hidden
    assert board.get_flags_left() == mines - flagged


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def check_invariants() -> Callable[[Board], None]:
    """Invariant checker for any board state."""
    return check_board_invariants


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def beginner_board(rng: random.Random) -> Board:
    """Create a seeded beginner board."""
    return BEGINNER.new_game(rng=rng)


@pytest.fixture
def empty_board() -> Board:
    """Create a 5x5 board with no mines for cascade testing."""
    return Board.make_empty((5, 5))


@pytest.fixture
def center_mine_board() -> Board:
    """Create a 3x3 board with a single mine in the centre."""
    board = Board.make_empty((3, 3))
    board.place_mine((1, 1))
    return board


@pytest.fixture
def corner_mines_board() -> Board:
    """
    Create a 3x3 board with mines at (0, 0) and (0, 1).

    Layout:
        * * 1
        2 2 1
        0 0 0
    """
    board = Board.make_empty((3, 3))
    board.place_mine((0, 0))
    board.place_mine((0, 1))
    return board


# ============================================================================
# Game Fixtures
# ============================================================================

class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def game(rng: random.Random, clock: FakeClock) -> Game:
    """Create a seeded beginner game with a fake clock."""
    return Game(BEGINNER, rng=rng, clock=clock)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def custom_difficulty() -> Difficulty:
    """Small custom difficulty."""
    return Difficulty((8, 10), 12)
