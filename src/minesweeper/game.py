"""
Game session for Minesweeper.

Drives a Board through one game at a time: safe first click, loss and
win detection, the timer, and resetting to a fresh board.
"""
import logging
import random
import time
from enum import Enum, auto
from typing import Callable, List, Optional

from .board import BEGINNER, Board, Difficulty
from .tile import Position, TileState


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

MAX_DISPLAY_SECONDS = 999


class GameStage(Enum):
    """Possible stages of a game."""

    PRE = auto()
    PLAYING = auto()
    EXPLODED = auto()
    COMPLETE = auto()


# ============================================================================
# Game Class
# ============================================================================

class Game:
    """
    One game of Minesweeper on a board built from a Difficulty.

    The first left click makes its tile a safe start and starts the timer.
    Any click that uncovers a mine ends the game and reveals the board;
    uncovering the last safe tile wins it.
    """

    def __init__(
        self,
        difficulty: Difficulty = BEGINNER,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the game.

        Args:
            difficulty: Board size and mine count.
            rng: Random source shared by every board of this game.
            clock: Monotonic time source in seconds.
        """
        self.difficulty = difficulty
        self.rng = rng or random.Random()
        self._clock = clock
        self.reset()

    def reset(self) -> None:
        """Replace the board with a fresh one and wait for a first click."""
        self.board: Board = self.difficulty.new_game(rng=self.rng)
        self.stage = GameStage.PRE
        self.exploded_at: Optional[Position] = None
        self._started_at: Optional[float] = None
        self._finished_at: Optional[float] = None

    # ========================================================================
    # Clicks
    # ========================================================================

    @property
    def is_active(self) -> bool:
        """Check if clicks are still accepted."""
        return self.stage in (GameStage.PRE, GameStage.PLAYING)

    def left_click(self, pos: Position) -> List[Position]:
        """
        Left-click a tile.

        Returns:
            Positions that changed state, or [] once the game is over.
        """
        if not self.is_active:
            return []
        if self.stage == GameStage.PRE:
            self.board.ensure_safe_start(pos)
            self.stage = GameStage.PLAYING
            self._started_at = self._clock()

        changed = self.board.left_click(pos)
        self._update_stage(changed)
        return changed

    def right_click(self, pos: Position) -> List[Position]:
        """Right-click a tile to cycle its flag."""
        if not self.is_active:
            return []
        return self.board.right_click(pos)

    def _update_stage(self, changed: List[Position]) -> None:
        """Check the changed tiles for a mine, then check for a win."""
        for pos in changed:
            if (
                self.board.get_tile(pos).is_mine
                and self.board.get_tilestate(pos) == TileState.UNCOVERED
            ):
                self._finish(GameStage.EXPLODED)
                self.exploded_at = pos
                self.board.reveal_all()
                logger.info(
                    "Mine uncovered at %s after %ds", pos, self.elapsed_seconds
                )
                return

        if self.board.get_safe_squares_left() == 0:
            self._finish(GameStage.COMPLETE)
            logger.info("Board cleared in %ds", self.elapsed_seconds)

    def _finish(self, stage: GameStage) -> None:
        self.stage = stage
        self._finished_at = self._clock()

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def is_won(self) -> bool:
        return self.stage == GameStage.COMPLETE

    @property
    def is_lost(self) -> bool:
        return self.stage == GameStage.EXPLODED

    @property
    def flags_left(self) -> int:
        return self.board.get_flags_left()

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds since the first click, stopped when the game ends."""
        if self._started_at is None:
            return 0
        end = self._finished_at if self._finished_at is not None else self._clock()
        return min(int(end - self._started_at), MAX_DISPLAY_SECONDS)
