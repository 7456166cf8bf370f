import random

import numpy as np
import pytest

from termtris.game.pieces import Color, Piece, Point, Shape
from termtris.game.tetris import Action, TetrisGame


@pytest.fixture
def game():
    return TetrisGame(rng=random.Random(1234))


def _use(game, shape, color=Color.RED):
    """Replace the active piece with a known one at the spawn origin."""
    assert game.spawn_piece(Piece(color, shape))
    return game.current_piece


def test_new_game_spawns_at_top_centre(game):
    assert game.origin == Point(5, 0)
    assert not game.game_over
    assert not game.board.grid.any()


def test_same_seed_same_game():
    a = TetrisGame(rng=random.Random(9))
    b = TetrisGame(rng=random.Random(9))
    assert a.current_piece == b.current_piece
    for _ in range(30):
        a.hard_drop()
        b.hard_drop()
    np.testing.assert_array_equal(a.board.grid, b.board.grid)


def test_narrow_board_rejected():
    with pytest.raises(ValueError):
        TetrisGame(board_width=6)


class TestMove:
    def test_move_commits_when_clear(self, game):
        _use(game, Shape.O)
        assert game.move(1, 0)
        assert game.origin == Point(6, 0)
        assert game.move(0, 1)
        assert game.origin == Point(6, 1)

    def test_move_blocked_by_wall(self, game):
        _use(game, Shape.O)
        for _ in range(5):
            assert game.move(-1, 0)
        assert game.origin == Point(0, 0)
        assert not game.move(-1, 0)
        assert game.origin == Point(0, 0)

    def test_move_blocked_by_locked_cell(self, game):
        _use(game, Shape.O)
        game.board.grid[0, 7] = int(Color.BLUE)
        assert not game.move(1, 0)
        assert game.origin == Point(5, 0)


class TestRotate:
    def test_rotate_in_place(self, game):
        _use(game, Shape.T_UP, Color.PURPLE)
        assert game.rotate()
        assert game.current_piece == Piece(Color.PURPLE, Shape.T_RIGHT)
        assert game.origin == Point(5, 0)

    def test_rotate_blocked_at_floor(self, game):
        _use(game, Shape.I_HORIZONTAL)
        while game.move(0, 1):
            pass
        assert game.origin == Point(5, 19)
        assert not game.rotate()
        assert game.current_piece.shape == Shape.I_HORIZONTAL

    def test_rotate_blocked_at_wall_has_no_kick(self, game):
        _use(game, Shape.I_VERTICAL)
        while game.move(1, 0):
            pass
        assert game.origin == Point(9, 0)
        assert not game.rotate()
        assert game.origin == Point(9, 0)

    def test_o_rotates_to_itself(self, game):
        piece = _use(game, Shape.O)
        assert game.rotate()
        assert game.current_piece == piece


class TestStep:
    def test_step_moves_down(self, game):
        _use(game, Shape.O)
        assert game.step()
        assert game.origin == Point(5, 1)
        assert not game.board.grid.any()

    def test_piece_locks_at_bottom_and_next_spawns(self, game):
        _use(game, Shape.O, Color.GREEN)
        for _ in range(18):
            assert game.step()
        assert game.origin == Point(5, 18)
        expected_next = game.bag.peek()

        assert game.step()

        for x, y in [(5, 18), (6, 18), (5, 19), (6, 19)]:
            assert game.board.cell(x, y) == Color.GREEN
        assert int(np.count_nonzero(game.board.grid)) == 4
        assert game.origin == Point(5, 0)
        assert game.current_piece == expected_next
        assert game.pieces_locked == 1


class TestHardDrop:
    def test_lands_on_floor(self, game):
        _use(game, Shape.I_HORIZONTAL, Color.BLUE)
        assert game.hard_drop()
        np.testing.assert_array_equal(game.board.grid[19, 5:9], [int(Color.BLUE)] * 4)
        assert int(np.count_nonzero(game.board.grid)) == 4
        assert game.origin == Point(5, 0)

    def test_lands_on_stack(self, game):
        game.board.grid[15, 6] = int(Color.RED)
        _use(game, Shape.I_HORIZONTAL, Color.BLUE)
        game.hard_drop()
        np.testing.assert_array_equal(game.board.grid[14, 5:9], [int(Color.BLUE)] * 4)

    def test_completes_and_clears_a_line(self, game):
        game.board.grid[19, :5] = int(Color.RED)
        game.board.grid[19, 9] = int(Color.RED)
        game.board.grid[18, 0] = int(Color.YELLOW)
        _use(game, Shape.I_HORIZONTAL)
        assert game.hard_drop()
        assert game.lines_cleared == 1
        assert game.total_lines == 1
        assert game.board.cell(0, 19) == Color.YELLOW
        assert int(np.count_nonzero(game.board.grid)) == 1


class TestGameOver:
    @pytest.fixture
    def blocked(self, game):
        _use(game, Shape.O)
        game.board.grid[1:4, 5:9] = int(Color.BROWN)
        return game

    def test_step_reports_game_over_when_spawn_collides(self, blocked):
        assert not blocked.step()
        assert blocked.game_over

    def test_everything_is_a_no_op_after_game_over(self, blocked):
        blocked.step()
        origin = blocked.origin
        piece = blocked.current_piece
        grid = blocked.board.get_grid()

        assert not blocked.move(-1, 0)
        assert not blocked.rotate()
        assert not blocked.step()
        assert not blocked.hard_drop()
        for action in Action:
            assert not blocked.handle(action)

        assert blocked.origin == origin
        assert blocked.current_piece == piece
        np.testing.assert_array_equal(blocked.board.grid, grid)

    def test_final_frame_shows_only_the_board(self, blocked):
        blocked.step()
        np.testing.assert_array_equal(blocked.render(), blocked.board.grid)

    def test_reset_starts_over(self, blocked):
        blocked.step()
        state = blocked.reset()
        assert not state["game_over"]
        assert not state["board_grid"].any()
        assert blocked.origin == Point(5, 0)


class TestHandle:
    def test_dispatch(self, game):
        _use(game, Shape.T_UP)
        assert game.handle(Action.LEFT)
        assert game.origin == Point(4, 0)
        assert game.handle(Action.RIGHT)
        assert game.origin == Point(5, 0)
        assert game.handle(Action.TICK)
        assert game.origin == Point(5, 1)
        assert game.handle(Action.ROTATE_CW)
        assert game.current_piece.shape == Shape.T_RIGHT
        assert game.handle(Action.HARD_DROP)
        assert game.pieces_locked == 1

    def test_quit_is_ignored_by_engine(self, game):
        before = game.get_state()
        assert game.handle(Action.QUIT)
        after = game.get_state()
        assert after["origin"] == before["origin"]
        assert after["current_piece"] == before["current_piece"]


def test_render_overlays_active_piece(game):
    _use(game, Shape.O, Color.BLUE)
    game.board.grid[19, 0] = int(Color.RED)
    snapshot = game.render()
    assert snapshot.shape == (20, 10)
    for x, y in [(5, 0), (6, 0), (5, 1), (6, 1)]:
        assert snapshot[y, x] == int(Color.BLUE)
    assert snapshot[19, 0] == int(Color.RED)
    assert int(np.count_nonzero(snapshot)) == 5
    # the board itself is untouched
    assert int(np.count_nonzero(game.board.grid)) == 1


def test_get_state(game):
    state = game.get_state()
    assert set(state) == {
        "board_grid",
        "current_piece",
        "origin",
        "next_piece",
        "game_over",
        "lines_cleared",
        "total_lines",
        "pieces_locked",
    }
    assert state["next_piece"] == game.bag.peek()
