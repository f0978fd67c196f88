"""
Minesweeper game package.

Provides the board engine (mine placement, reveal cascade, chording,
flag cycle), a game session, a text renderer and a Gymnasium wrapper.
"""
from .tile import Position, Tile, TileState
from .board import (
    Board,
    BoardConfigError,
    Difficulty,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
)
from .game import Game, GameStage
from .environment import MinesweeperEnv

__all__ = [
    "Position",
    "Tile",
    "TileState",
    "Board",
    "BoardConfigError",
    "Difficulty",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "Game",
    "GameStage",
    "MinesweeperEnv",
]
