"""
Unit tests for Game class.

Tests the safe first click, win/loss detection, timer and reset.
"""
import logging

import pytest
from minesweeper import Board, Game, GameStage, Tile, TileState


def hidden_mine(game: Game):
    """Find a mine that is still hidden."""
    board = game.board
    for pos in board.positions():
        if board.get_tile(pos).is_mine and board.get_tilestate(pos) == TileState.HIDDEN:
            return pos
    raise AssertionError("no hidden mine")


def clear_board(game: Game) -> None:
    """Left-click every safe tile that is not uncovered yet."""
    board = game.board
    for pos in board.positions():
        if board.get_tile(pos).is_safe and board.get_tilestate(pos) != TileState.UNCOVERED:
            game.left_click(pos)


# ============================================================================
# First Click Tests
# ============================================================================

class TestFirstClick:
    """Test the first left click of a game."""

    def test_new_game_waits_for_first_click(self, game: Game) -> None:
        assert game.stage == GameStage.PRE
        assert game.is_active is True
        assert game.elapsed_seconds == 0

    def test_first_click_starts_game(self, game: Game) -> None:
        changed = game.left_click((4, 4))
        assert game.stage == GameStage.PLAYING
        assert (4, 4) in changed

    @pytest.mark.parametrize("pos", [(0, 0), (4, 4), (8, 0), (3, 7)])
    def test_first_click_is_safe_zero(self, game: Game, pos) -> None:
        game.left_click(pos)
        assert game.board.get_tile(pos) == Tile.safe(0)
        assert game.board.get_tilestate(pos) == TileState.UNCOVERED
        assert game.board.mine_count == 10

    def test_first_click_never_loses(self) -> None:
        for _ in range(50):
            game = Game()
            game.left_click((4, 4))
            assert game.is_lost is False

    def test_right_click_before_start(self, game: Game) -> None:
        """Flags can be placed before the first reveal."""
        assert game.right_click((0, 0)) == [(0, 0)]
        assert game.stage == GameStage.PRE
        assert game.flags_left == 9


# ============================================================================
# Game End Tests
# ============================================================================

class TestGameEnd:
    """Test win and loss detection."""

    def test_uncovering_mine_loses(self, game: Game) -> None:
        game.left_click((4, 4))
        mine = hidden_mine(game)
        game.left_click(mine)
        assert game.stage == GameStage.EXPLODED
        assert game.is_lost is True
        assert game.exploded_at == mine

    def test_loss_reveals_board(self, game: Game) -> None:
        game.left_click((4, 4))
        game.left_click(hidden_mine(game))
        for row in game.board.get_tilestates():
            assert all(state == TileState.UNCOVERED for state in row)

    def test_clicks_ignored_after_loss(self, game: Game) -> None:
        game.left_click((4, 4))
        game.left_click(hidden_mine(game))
        assert game.left_click((0, 0)) == []
        assert game.right_click((0, 0)) == []

    def test_clearing_board_wins(self, game: Game) -> None:
        game.left_click((4, 4))
        clear_board(game)
        assert game.stage == GameStage.COMPLETE
        assert game.is_won is True
        assert game.board.get_safe_squares_left() == 0
        assert game.left_click((0, 0)) == []

    def test_chord_onto_mine_loses(self, game: Game) -> None:
        """A chord with a misplaced flag ends the game."""
        board = Board.make_empty((3, 7))
        board.place_mine((0, 0))
        game.board = board
        game.stage = GameStage.PLAYING
        game.left_click((1, 0))
        game.right_click((0, 1))
        game.left_click((1, 0))
        assert game.is_lost is True
        assert game.exploded_at == (0, 0)

    def test_chord_can_win(self, game: Game) -> None:
        board = Board.make_empty((3, 7))
        board.place_mine((0, 0))
        game.board = board
        game.stage = GameStage.PLAYING
        game.left_click((1, 0))
        game.right_click((0, 0))
        game.left_click((1, 0))
        assert game.is_won is True

    def test_loss_is_logged(self, game: Game, caplog) -> None:
        game.left_click((4, 4))
        mine = hidden_mine(game)
        with caplog.at_level(logging.INFO, logger="minesweeper.game"):
            game.left_click(mine)
        assert [record.levelno for record in caplog.records] == [logging.INFO]
        assert f"Mine uncovered at {mine}" in caplog.text

    def test_win_is_logged(self, game: Game, caplog) -> None:
        game.left_click((4, 4))
        with caplog.at_level(logging.INFO, logger="minesweeper.game"):
            clear_board(game)
        assert [record.levelno for record in caplog.records] == [logging.INFO]
        assert "Board cleared in 0s" in caplog.text


# ============================================================================
# Timer Tests
# ============================================================================

class TestTimer:
    """Test elapsed time."""

    def test_timer_starts_on_first_click(self, game: Game, clock) -> None:
        clock.now = 50.0
        assert game.elapsed_seconds == 0
        game.left_click((4, 4))
        clock.now = 57.9
        assert game.elapsed_seconds == 7

    def test_timer_stops_when_game_ends(self, game: Game, clock) -> None:
        game.left_click((4, 4))
        clock.now += 12
        game.left_click(hidden_mine(game))
        clock.now += 100
        assert game.elapsed_seconds == 12

    def test_timer_is_capped(self, game: Game, clock) -> None:
        game.left_click((4, 4))
        clock.now += 5000
        assert game.elapsed_seconds == 999


# ============================================================================
# Reset Tests
# ============================================================================

class TestReset:
    """Test starting over."""

    def test_reset_restores_pre_stage(self, game: Game, clock) -> None:
        game.left_click((4, 4))
        game.left_click(hidden_mine(game))
        game.reset()
        assert game.stage == GameStage.PRE
        assert game.exploded_at is None
        assert game.elapsed_seconds == 0

    def test_reset_replaces_board(self, game: Game) -> None:
        old_board = game.board
        game.left_click((4, 4))
        game.reset()
        assert game.board is not old_board
        assert game.board.mine_count == 10
        assert game.board.get_safe_squares_left() == 71
        assert game.flags_left == 10
