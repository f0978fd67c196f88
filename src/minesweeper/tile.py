"""
Tile module for Minesweeper game.

Represents the content of a board position (mine or safe count) and
its visual state (hidden/flagged/question mark/uncovered).
"""
from enum import Enum, auto
from dataclasses import dataclass
from typing import Tuple


Position = Tuple[int, int]


# ============================================================================
# Constants
# ============================================================================

class TileState(Enum):
    """Possible visual states of a tile."""

    HIDDEN = auto()
    FLAGGED = auto()
    QUESTION_MARK = auto()
    UNCOVERED = auto()


# ============================================================================
# Tile Data Class
# ============================================================================

@dataclass(frozen=True)
class Tile:
    """
    Content of a single board position.

    A tile is either a mine or a safe tile carrying the number of mines
    in its neighborhood.

    Attributes:
        is_mine: Whether this tile contains a mine.
        adjacent_mines: Count of mines in neighboring tiles (0-8).
            Always 0 for a mine.
    """

    is_mine: bool = False
    adjacent_mines: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.adjacent_mines <= 8:
            raise ValueError(
                f"Adjacent mine count must be in [0, 8], got {self.adjacent_mines}"
            )
        if self.is_mine and self.adjacent_mines:
            raise ValueError("A mine does not carry an adjacent mine count")

    @classmethod
    def mine(cls) -> "Tile":
        """Create a mine tile."""
        return cls(is_mine=True)

    @classmethod
    def safe(cls, adjacent_mines: int = 0) -> "Tile":
        """Create a safe tile with the given neighbor count."""
        return cls(adjacent_mines=adjacent_mines)

    @property
    def is_safe(self) -> bool:
        """Check if tile is safe."""
        return not self.is_mine

    @property
    def is_zero(self) -> bool:
        """Check if tile is safe with no adjacent mines."""
        return not self.is_mine and self.adjacent_mines == 0

    def to_observation(self, state: TileState) -> int:
        """
        Convert tile to observation value given its state.

        Returns:
            -1: Hidden tile
            -2: Flagged tile
            -3: Question-marked tile
            0-8: Uncovered safe tile with adjacent mine count
            9: Uncovered mine
        """
        if state == TileState.HIDDEN:
            return -1
        if state == TileState.FLAGGED:
            return -2
        if state == TileState.QUESTION_MARK:
            return -3
        if self.is_mine:
            return 9
        return self.adjacent_mines

    def __repr__(self) -> str:
        if self.is_mine:
            return "Tile.mine()"
        return f"Tile.safe({self.adjacent_mines})"


MINE = Tile.mine()
SAFE_ZERO = Tile.safe(0)
