"""
Text rendering for Minesweeper boards and games.
"""
from typing import List, Optional

from .board import Board
from .game import Game
from .tile import Position, Tile, TileState


HIDDEN = "."
FLAG = "F"
QUESTION_MARK = "?"
MINE = "*"
EXPLODED_MINE = "X"
EMPTY = " "


def tile_symbol(
    tile: Tile,
    state: TileState,
    exploded: bool = False,
) -> str:
    """
    Get the character shown for one tile.

    Args:
        tile: Tile content.
        state: Tile state.
        exploded: Whether this tile is the mine that lost the game.
    """
    if state == TileState.HIDDEN:
        return HIDDEN
    if state == TileState.FLAGGED:
        return FLAG
    if state == TileState.QUESTION_MARK:
        return QUESTION_MARK
    if tile.is_mine:
        return EXPLODED_MINE if exploded else MINE
    if tile.adjacent_mines == 0:
        return EMPTY
    return str(tile.adjacent_mines)


def render_board(
    board: Board,
    exploded_at: Optional[Position] = None,
) -> str:
    """
    Render a board as text with row and column indices.

    Returns:
        One line per row, columns separated by single spaces.
    """
    height, width = board.get_size()
    tiles = board.get_tiles()
    tilestates = board.get_tilestates()
    label_width = len(str(height - 1))
    column_width = len(str(width - 1))

    header = " " * (label_width + 1) + " ".join(
        str(col).rjust(column_width) for col in range(width)
    )
    lines: List[str] = [header]
    for row in range(height):
        symbols = [
            tile_symbol(
                tiles[row][col],
                tilestates[row][col],
                exploded=(row, col) == exploded_at,
            ).rjust(column_width)
            for col in range(width)
        ]
        lines.append(str(row).rjust(label_width) + " " + " ".join(symbols))

    return "\n".join(lines)


def render_status(game: Game) -> str:
    """Render the counter line: flags left, stage and timer."""
    if game.is_won:
        face = "WIN"
    elif game.is_lost:
        face = "LOST"
    else:
        face = "..."
    return f"Mines: {game.flags_left:>4}  [{face}]  Time: {game.elapsed_seconds:>3}"


def render_game(game: Game) -> str:
    """Render the status line followed by the board."""
    board = render_board(game.board, game.exploded_at)
    return render_status(game) + "\n" + board
