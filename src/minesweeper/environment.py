"""
Gymnasium environment wrapper for Minesweeper.

Exposes a Game through the standard Gymnasium step/reset interface so
scripts can drive the board with left and right clicks.
"""
import random
from typing import Any, Dict, List, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import BEGINNER, Difficulty
from .game import Game
from .render import render_game
from .tile import Position, TileState


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = hidden tile
        - -2 = flagged tile
        - -3 = question-marked tile
        - 0-8 = uncovered tile with adjacent mine count
        - 9 = uncovered mine

    Actions:
        Discrete action space of size 2 * width * height.
        Action i < area left-clicks tile (i // width, i % width);
        action i >= area right-clicks tile i - area.

    Rewards:
        - +1 for each safe tile uncovered
        - +10 for winning the game
        - -10 for uncovering a mine
        - -0.1 for an action that changes nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        difficulty: Optional[Difficulty] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            difficulty: Board size and mines (default: beginner).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.difficulty = difficulty or BEGINNER
        self.render_mode = render_mode
        self.game = Game(self.difficulty)

        height, width = self.difficulty.size
        self._area = height * width

        self.observation_space = spaces.Box(
            low=-3,
            high=9,
            shape=(height, width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(2 * self._area)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new game.

        Args:
            seed: Random seed for reproducible mine placement.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng = random.Random(seed)
        self.game.reset()
        self._steps = 0

        return self.game.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one click in the environment.

        Args:
            action: Tile index to left-click, or area + index to right-click.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        pos, is_right_click = self._action_to_click(action)
        self._steps += 1

        if is_right_click:
            changed = self.game.right_click(pos)
        else:
            changed = self.game.left_click(pos)

        reward = self._calculate_reward(changed, is_right_click)
        observation = self.game.board.get_observation()
        terminated = not self.game.is_active
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def _action_to_click(self, action: int) -> Tuple[Position, bool]:
        """Convert flat action index to ((row, col), is_right_click)."""
        is_right_click = action >= self._area
        index = action - self._area if is_right_click else action
        width = self.difficulty.width
        return (index // width, index % width), is_right_click

    def _calculate_reward(
        self, changed: List[Position], is_right_click: bool
    ) -> float:
        """
        Calculate reward for the tiles changed by one click.

        Args:
            changed: Positions changed by the click.
            is_right_click: Whether the click cycled a flag.

        Returns:
            Reward value.
        """
        if not changed:
            return -0.1
        if self.game.is_lost:
            return -10.0
        if is_right_click:
            return 0.0

        reward = float(len(changed))
        if self.game.is_won:
            reward += 10.0
        return reward

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        board = self.game.board
        return {
            "steps": self._steps,
            "safe_left": board.get_safe_squares_left(),
            "flags_left": board.get_flags_left(),
            "game_stage": self.game.stage.name,
        }

    def render(self) -> Optional[str]:
        """Render the current game state."""
        if self.render_mode == "ansi":
            return render_game(self.game)
        if self.render_mode == "human":
            print(render_game(self.game))
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that reveal or flag a covered tile.

        Left clicks on uncovered numbers are always masked, even when
        the flags around them would let the click chord.

        Returns:
            Boolean array where True = allowed action. Left clicks are
            marked for hidden and question-marked tiles, right clicks for
            any tile not yet uncovered.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if not self.game.is_active:
            return mask

        width = self.difficulty.width
        for row, states in enumerate(self.game.board.get_tilestates()):
            for col, state in enumerate(states):
                index = row * width + col
                if state in (TileState.HIDDEN, TileState.QUESTION_MARK):
                    mask[index] = True
                if state != TileState.UNCOVERED:
                    mask[self._area + index] = True
        return mask
