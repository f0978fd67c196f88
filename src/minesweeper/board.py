"""
Board module for Minesweeper game.

Implements the board engine: mine placement and relocation with a safe
first move, the zero-tile reveal cascade, chording and the flag cycle.
"""
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .tile import MINE, SAFE_ZERO, Position, Tile, TileState


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

MIN_HEIGHT = 1
MIN_WIDTH = 7
MAX_HEIGHT = 50
MAX_WIDTH = 50
MAX_DENSITY = 0.5

SAFE_TILES = tuple(Tile.safe(count) for count in range(9))
REVEALABLE = (TileState.HIDDEN, TileState.QUESTION_MARK)


class BoardConfigError(ValueError):
    """Raised when a board size or mine count cannot be played."""


def validate_config(size: Position, mine_count: int) -> None:
    """
    Ensure a board size and mine count describe a playable board.

    Mine density is capped at 50% so that rejection sampling always finds
    a free tile quickly and a safe start can always be made.

    Raises:
        BoardConfigError: If the size or mine count is out of bounds.
    """
    height, width = size
    if height < MIN_HEIGHT or width < MIN_WIDTH:
        raise BoardConfigError(
            f"Board size must be at least {MIN_WIDTH}x{MIN_HEIGHT}"
        )
    if height > MAX_HEIGHT or width > MAX_WIDTH:
        raise BoardConfigError(
            f"Board size may not be greater than {MAX_WIDTH}x{MAX_HEIGHT}"
        )
    if mine_count <= 0 or mine_count > (height * width) // 2:
        raise BoardConfigError(
            "Mine density must be greater than 0% and no more than 50%"
        )


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.floor(value + 0.5))


# ============================================================================
# Difficulty
# ============================================================================

@dataclass(frozen=True)
class Difficulty:
    """
    Board dimensions and mine count for a new game.

    Attributes:
        size: (height, width) of the board.
        mine_count: Total mines to place.
    """

    size: Position = (9, 9)
    mine_count: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        validate_config(self.size, self.mine_count)

    @property
    def height(self) -> int:
        return self.size[0]

    @property
    def width(self) -> int:
        return self.size[1]

    @property
    def density(self) -> float:
        """Fraction of the board covered by mines."""
        return self.mine_count / (self.height * self.width)

    @classmethod
    def with_density(cls, size: Position, density: float) -> "Difficulty":
        """
        Create a difficulty whose mine count is a fraction of the board area.

        Args:
            size: (height, width) of the board.
            density: Fraction of tiles holding a mine, in (0.0, 0.5].

        Returns:
            Difficulty with mine_count = round(height * width * density).
        """
        if not 0.0 < density <= MAX_DENSITY:
            raise BoardConfigError(
                "Mine density must be a decimal number greater than 0.0 "
                f"and no more than {MAX_DENSITY}"
            )
        height, width = size
        return cls(size, round_half_up(height * width * density))

    def new_game(self, rng: Optional[random.Random] = None) -> "Board":
        """Make a new random board for this difficulty."""
        return Board.make_random(self.size, self.mine_count, rng=rng)


# Preset difficulty levels
BEGINNER = Difficulty((9, 9), 10)
INTERMEDIATE = Difficulty((16, 16), 40)
EXPERT = Difficulty((16, 30), 99)


# ============================================================================
# Board Class
# ============================================================================

@dataclass(eq=False)
class Board:
    """
    Minesweeper game board.

    Holds a grid of tiles (mines and neighbor counts) and a parallel grid
    of tile states, plus two counters kept in step with every change:

    - flags_left: mines placed minus tiles flagged (may go negative).
    - safe_squares_left: safe tiles not yet uncovered. Reaching 0 during
      play means the game is won.

    The board is mutated only through click dispatch once a game starts.
    Positions are (row, col) tuples; passing a position outside the board
    raises IndexError.
    """

    size: Position
    rng: Optional[random.Random] = field(default=None, repr=False)
    _tiles: List[List[Tile]] = field(default_factory=list, repr=False)
    _tilestates: List[List[TileState]] = field(default_factory=list, repr=False)
    _mine_count: int = 0
    _flags_left: int = 0
    _safe_squares_left: int = 0

    def __post_init__(self) -> None:
        """Initialize the grids after dataclass creation."""
        height, width = self.size
        if height < 1 or width < 1:
            raise BoardConfigError("Board dimensions must be positive")
        self.size = (height, width)
        if self.rng is None:
            self.rng = random.Random()
        self._init_grid()

    # ========================================================================
    # Construction
    # ========================================================================

    @classmethod
    def make_empty(
        cls, size: Position, rng: Optional[random.Random] = None
    ) -> "Board":
        """Make a board of the given size with no mines, all tiles hidden."""
        return cls(size, rng)

    @classmethod
    def make_random(
        cls,
        size: Position,
        mine_count: int,
        rng: Optional[random.Random] = None,
    ) -> "Board":
        """
        Make a board with mines placed uniformly at random.

        Args:
            size: (height, width) of the board.
            mine_count: Number of mines, at most half of the board area.
            rng: Random source; a fresh one is used if omitted.

        Raises:
            BoardConfigError: If the size or mine count is not playable.
        """
        validate_config(size, mine_count)
        board = cls.make_empty(size, rng)
        for _ in range(mine_count):
            board.place_mine()
        logger.debug(
            "Placed %d mines on a %dx%d board", mine_count, size[0], size[1]
        )
        return board

    def _init_grid(self) -> None:
        """Create empty grids: every tile Safe(0) and hidden."""
        height, width = self.size
        self._tiles = [[SAFE_ZERO] * width for _ in range(height)]
        self._tilestates = [[TileState.HIDDEN] * width for _ in range(height)]
        self._mine_count = 0
        self._flags_left = 0
        self._safe_squares_left = height * width

    # ========================================================================
    # Grid Utilities (Low-level)
    # ========================================================================

    def _check_position(self, pos: Position) -> None:
        row, col = pos
        height, width = self.size
        if not (0 <= row < height and 0 <= col < width):
            raise IndexError(
                f"Position {pos} is outside the {height}x{width} board"
            )

    def _tile(self, pos: Position) -> Tile:
        return self._tiles[pos[0]][pos[1]]

    def _set_tile(self, pos: Position, tile: Tile) -> None:
        self._tiles[pos[0]][pos[1]] = tile

    def _state(self, pos: Position) -> TileState:
        return self._tilestates[pos[0]][pos[1]]

    def _set_state(self, pos: Position, state: TileState) -> None:
        self._tilestates[pos[0]][pos[1]] = state

    def neighbor_coords(self, pos: Position) -> Iterator[Position]:
        """
        Yield the positions of the 3x3 box centred on a tile.

        The box is clipped at the board edges and includes the centre.
        Positions come in row-major order and are generated lazily.
        """
        row, col = pos
        height, width = self.size
        for neighbor_row in range(max(row - 1, 0), min(row + 2, height)):
            for neighbor_col in range(max(col - 1, 0), min(col + 2, width)):
                yield neighbor_row, neighbor_col

    def positions(self) -> Iterator[Position]:
        """Yield every position on the board in row-major order."""
        height, width = self.size
        for row in range(height):
            for col in range(width):
                yield row, col

    # ========================================================================
    # Mine Placement (Mid-level)
    # ========================================================================

    def place_mine(self, pos: Optional[Position] = None) -> Position:
        """
        Place a mine and update the neighbor counts around it.

        Without a position, tiles are drawn uniformly at random until a
        safe one is found. This relies on the board keeping spare safe
        tiles, which the 50% density cap guarantees.

        Args:
            pos: Exact position for the mine; must currently be safe.

        Returns:
            The position the mine was placed on.
        """
        if pos is None:
            pos = self._random_safe_position()
        else:
            self._check_position(pos)
            if self._tile(pos).is_mine:
                raise ValueError(f"Position {pos} already holds a mine")

        self._set_tile(pos, MINE)
        for neighbor in self.neighbor_coords(pos):
            tile = self._tile(neighbor)
            if tile.is_safe:
                self._set_tile(neighbor, SAFE_TILES[tile.adjacent_mines + 1])

        self._mine_count += 1
        self._flags_left += 1
        if self._state(pos) != TileState.UNCOVERED:
            self._safe_squares_left -= 1
        return pos

    def _random_safe_position(self) -> Position:
        """Draw random positions until one holds a safe tile."""
        height, width = self.size
        if self._mine_count >= height * width:
            raise ValueError("No safe tile left to place a mine on")
        while True:
            pos = (self.rng.randrange(height), self.rng.randrange(width))
            if self._tile(pos).is_safe:
                return pos

    def remove_mine(self, pos: Position) -> bool:
        """
        Remove a mine and update the neighbor counts around it.

        Returns:
            True if a mine was removed, False if the tile was already safe.
        """
        self._check_position(pos)
        if self._tile(pos).is_safe:
            return False

        # Placeholder so the centre of the box can be decremented with the
        # rest of the neighbors without dropping below zero.
        self._set_tile(pos, SAFE_TILES[8])
        mine_count = 0
        for neighbor in self.neighbor_coords(pos):
            tile = self._tile(neighbor)
            if tile.is_mine:
                mine_count += 1
            else:
                self._set_tile(neighbor, SAFE_TILES[tile.adjacent_mines - 1])
        self._set_tile(pos, SAFE_TILES[mine_count])

        self._mine_count -= 1
        self._flags_left -= 1
        if self._state(pos) != TileState.UNCOVERED:
            self._safe_squares_left += 1
        return True

    def relocate_mine(self, pos: Position) -> bool:
        """
        Move a mine to a random position (possibly the same one).

        Returns:
            True if there was a mine to move, False otherwise.
        """
        if not self.remove_mine(pos):
            return False
        self.place_mine()
        return True

    def ensure_safe_start(self, start: Position) -> None:
        """
        Make sure a starting position is safe with no adjacent mines.

        Mines in the 3x3 box around the start are relocated until the
        start holds Safe(0). A relocated mine may land back in the box,
        so passes repeat until none does.
        """
        self._check_position(start)
        passes = 0
        while self._tile(start) != SAFE_ZERO:
            passes += 1
            for pos in self.neighbor_coords(start):
                self.relocate_mine(pos)
        logger.debug(
            "Safe start at %s after %d relocation pass(es)", start, passes
        )

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def _uncover(self, pos: Position) -> None:
        self._set_state(pos, TileState.UNCOVERED)
        if self._tile(pos).is_safe:
            self._safe_squares_left -= 1

    def reveal(self, pos: Position) -> List[Position]:
        """
        Uncover a tile, cascading through tiles with no adjacent mines.

        Flagged and uncovered tiles are left alone. When a Safe(0) tile
        is uncovered, its hidden neighbors are uncovered too; neighbors
        showing a question mark stop the cascade.

        The cascade keeps a stack of neighbor iterators instead of
        recursing, visiting tiles depth-first in row-major order. The
        UNCOVERED state marks visited tiles.

        Returns:
            Positions that changed state, in the order they were uncovered.
        """
        self._check_position(pos)
        if self._state(pos) not in REVEALABLE:
            return []

        self._uncover(pos)
        changed = [pos]
        pending = []
        if self._tile(pos).is_zero:
            pending.append(self.neighbor_coords(pos))

        while pending:
            for neighbor in pending[-1]:
                if self._state(neighbor) == TileState.HIDDEN:
                    self._uncover(neighbor)
                    changed.append(neighbor)
                    if self._tile(neighbor).is_zero:
                        pending.append(self.neighbor_coords(neighbor))
                    break
            else:
                pending.pop()

        return changed

    def reveal_adjacent(self, pos: Position) -> List[Position]:
        """
        Chord: uncover every unflagged neighbor of an uncovered number.

        Only applies when the tile is uncovered and safe and the number
        of flagged neighbors equals its count. Hidden and question-marked
        neighbors are revealed (cascading as usual).

        Returns:
            Positions that changed state, including cascades.
        """
        self._check_position(pos)
        if self._state(pos) != TileState.UNCOVERED:
            return []
        tile = self._tile(pos)
        if tile.is_mine:
            return []

        flags = self._count_adjacent_flags(pos)
        if flags != tile.adjacent_mines:
            return []

        changed: List[Position] = []
        for neighbor in self.neighbor_coords(pos):
            if self._state(neighbor) in REVEALABLE:
                changed.extend(self.reveal(neighbor))
        return changed

    def _count_adjacent_flags(self, pos: Position) -> int:
        """Count flagged tiles adjacent to position."""
        return sum(
            1 for neighbor in self.neighbor_coords(pos)
            if self._state(neighbor) == TileState.FLAGGED
        )

    def cycle_flag(self, pos: Position) -> List[Position]:
        """
        Cycle a tile through hidden, flagged and question mark.

        flags_left is only a display counter: it goes down on flagging and
        back up when the flag turns into a question mark, and never blocks
        the cycle.

        Returns:
            [pos] if the tile changed, [] if it is already uncovered.
        """
        self._check_position(pos)
        state = self._state(pos)
        if state == TileState.HIDDEN:
            self._flags_left -= 1
            self._set_state(pos, TileState.FLAGGED)
        elif state == TileState.FLAGGED:
            self._flags_left += 1
            self._set_state(pos, TileState.QUESTION_MARK)
        elif state == TileState.QUESTION_MARK:
            self._set_state(pos, TileState.HIDDEN)
        else:
            return []
        return [pos]

    def left_click(self, pos: Position) -> List[Position]:
        """
        Handle a left click on a tile.

        Hidden and question-marked tiles are revealed, flagged tiles are
        ignored and uncovered tiles are chorded.

        Returns:
            Positions that changed state as a result.
        """
        self._check_position(pos)
        state = self._state(pos)
        if state == TileState.FLAGGED:
            return []
        if state == TileState.UNCOVERED:
            return self.reveal_adjacent(pos)
        return self.reveal(pos)

    def right_click(self, pos: Position) -> List[Position]:
        """Handle a right click on a tile by cycling its flag."""
        return self.cycle_flag(pos)

    def reveal_all(self) -> None:
        """Uncover every tile. Display only: the counters are left as-is."""
        height, width = self.size
        self._tilestates = [[TileState.UNCOVERED] * width for _ in range(height)]

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    def get_size(self) -> Position:
        """Get board size as (height, width)."""
        return self.size

    def get_tiles(self) -> Tuple[Tuple[Tile, ...], ...]:
        """Get a read-only copy of the tile grid."""
        return tuple(tuple(row) for row in self._tiles)

    def get_tilestates(self) -> Tuple[Tuple[TileState, ...], ...]:
        """Get a read-only copy of the tile state grid."""
        return tuple(tuple(row) for row in self._tilestates)

    def get_tile(self, pos: Position) -> Tile:
        self._check_position(pos)
        return self._tile(pos)

    def get_tilestate(self, pos: Position) -> TileState:
        self._check_position(pos)
        return self._state(pos)

    def get_flags_left(self) -> int:
        """Get mines placed minus flags set (may be negative)."""
        return self._flags_left

    def get_safe_squares_left(self) -> int:
        """Get the number of safe tiles not yet uncovered."""
        return self._safe_squares_left

    @property
    def mine_count(self) -> int:
        """Get the number of mines on the board."""
        return self._mine_count

    def get_observation(self) -> np.ndarray:
        """
        Get the visible board as a numpy array.

        Returns:
            2D int8 array where:
                -1 = hidden
                -2 = flagged
                -3 = question mark
                0-8 = uncovered with adjacent count
                9 = uncovered mine
        """
        obs = np.zeros(self.size, dtype=np.int8)
        for row, col in self.positions():
            tile = self._tiles[row][col]
            obs[row, col] = tile.to_observation(self._tilestates[row][col])
        return obs
