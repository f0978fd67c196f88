"""
Command line interface for Minesweeper.

Usage:
    minesweeper -1                 # beginner, 9x9 with 10 mines
    minesweeper -3 -m 120          # expert size with 120 mines
    minesweeper -x 20 -d 0.15      # 20x20 with 15% mines

Board size and mine count/density must be specified. Any of the three
preset difficulties specifies both; these can be overridden manually or
specified outright using the other arguments. If width is given but not
height (or vice versa), the board is assumed to be square.
"""
import argparse
import logging
from typing import Callable, List, Optional

from .board import BEGINNER, EXPERT, INTERMEDIATE, BoardConfigError, Difficulty
from .game import Game
from .render import render_game
from .tile import Position


logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  r ROW COL   reveal a tile (chords an uncovered number)
  f ROW COL   cycle flag / question mark on a tile
  n           start a new game
  q           quit"""


class UsageError(Exception):
    """Raised when command line options do not describe a board."""


# ============================================================================
# Option Parsing
# ============================================================================

def positive_int(value: str) -> int:
    """Argparse type for a positive integer."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a positive integer")
    if number < 1:
        raise argparse.ArgumentTypeError(f"{value!r} is not a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="minesweeper",
        description="Play Minesweeper in the terminal",
        epilog=(
            "The three difficulties (-1, -2 and -3) are mutually exclusive. "
            "Mine count and mine density are mutually exclusive. If width is "
            "specified but not height (or vice versa), the board is assumed "
            "to be square."
        ),
    )

    presets = parser.add_mutually_exclusive_group()
    presets.add_argument(
        "-1", "--beginner", dest="preset", action="store_const",
        const=BEGINNER, help="play at BEGINNER difficulty (9x9 with 10 mines)",
    )
    presets.add_argument(
        "-2", "--intermediate", dest="preset", action="store_const",
        const=INTERMEDIATE,
        help="play at INTERMEDIATE difficulty (16x16 with 40 mines)",
    )
    presets.add_argument(
        "-3", "--expert", dest="preset", action="store_const",
        const=EXPERT, help="play at EXPERT difficulty (16x30 with 99 mines)",
    )

    parser.add_argument(
        "-x", "--width", type=positive_int, metavar="WIDTH",
        help="play with a custom board width",
    )
    parser.add_argument(
        "-y", "--height", type=positive_int, metavar="HEIGHT",
        help="play with a custom board height",
    )

    mines = parser.add_mutually_exclusive_group()
    mines.add_argument(
        "-m", "--mines", type=positive_int, metavar="MINE_COUNT",
        help="play with a custom number of mines",
    )
    mines.add_argument(
        "-d", "--density", type=float, metavar="MINE_DENSITY",
        help="play with a custom mine density (0.0 < d <= 0.5)",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    return parser


def difficulty_from_args(args: argparse.Namespace) -> Difficulty:
    """
    Build a Difficulty from parsed options.

    Raises:
        UsageError: If the size or mine count is missing.
        BoardConfigError: If the board described is not playable.
    """
    height: Optional[int] = args.height
    width: Optional[int] = args.width
    mines: Optional[int] = args.mines

    preset: Optional[Difficulty] = args.preset
    if preset is not None:
        height = height if height is not None else preset.height
        width = width if width is not None else preset.width
        if mines is None:
            mines = preset.mine_count
    elif height is None:
        height = width
    elif width is None:
        width = height

    if height is None or width is None:
        raise UsageError("A board size is required (use -1, -2, -3, -x, or -y)")

    if args.density is not None:
        if mines is not None:
            raise UsageError("Mine count and mine density are mutually exclusive")
        return Difficulty.with_density((height, width), args.density)
    if mines is None:
        raise UsageError("A number or density of mines is required (use -m or -d)")
    return Difficulty((height, width), mines)


# ============================================================================
# Interactive Loop
# ============================================================================

def parse_position(words: List[str], game: Game) -> Optional[Position]:
    """Parse 'ROW COL' words into a position on the game's board."""
    if len(words) != 2:
        return None
    try:
        row, col = int(words[0]), int(words[1])
    except ValueError:
        return None
    height, width = game.board.get_size()
    if not (0 <= row < height and 0 <= col < width):
        return None
    return row, col


def play(
    difficulty: Difficulty,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
    game: Optional[Game] = None,
) -> Game:
    """
    Run an interactive game until the player quits or input runs out.

    Args:
        difficulty: Board size and mine count.
        input_fn: Reads one command line given a prompt.
        output_fn: Writes one block of text.
        game: Existing game to continue (default: a new one).

    Returns:
        The game in its final state.
    """
    game = game or Game(difficulty)
    output_fn(HELP_TEXT)
    output_fn(render_game(game))

    while True:
        try:
            line = input_fn("> ")
        except EOFError:
            break

        words = line.split()
        if not words:
            continue
        command, rest = words[0].lower(), words[1:]

        if command == "q":
            break
        if command == "n":
            game.reset()
        elif command in ("r", "f"):
            pos = parse_position(rest, game)
            if pos is None:
                output_fn("Expected a position: ROW COL inside the board")
                continue
            if command == "r":
                game.left_click(pos)
            else:
                game.right_click(pos)
        else:
            output_fn(HELP_TEXT)
            continue

        output_fn(render_game(game))
        if game.is_won:
            output_fn("You win! Type n for a new game or q to quit.")
        elif game.is_lost:
            output_fn("Boom! Type n for a new game or q to quit.")

    return game


def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments and play."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        difficulty = difficulty_from_args(args)
    except (UsageError, BoardConfigError) as error:
        parser.error(f"Could not start game: {error}")

    logger.debug(
        "Starting %dx%d game with %d mines",
        difficulty.height, difficulty.width, difficulty.mine_count,
    )
    play(difficulty)


if __name__ == "__main__":
    main()
