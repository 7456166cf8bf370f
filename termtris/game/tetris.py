"""
Game orchestrator: active piece, spawning, movement, rotation and drops.

This module ties the Board, the piece catalog and the PieceBag together into
the falling-piece state machine. Every operation either fully commits or
leaves the state untouched; illegal moves and rotations are reported with a
False return, never with an exception.

Rotation is strictly in place (no wall kicks). A piece that can no longer
fall is locked on the next step, full rows are cleared, and the next piece
from the bag is spawned at the top centre. If that spawn collides the game
is over and every further operation is a no-op.
"""

from __future__ import annotations

import enum
import random
from typing import Any

import numpy as np

from termtris.game.bag import PieceBag
from termtris.game.board import BOARD_HEIGHT, BOARD_WIDTH, Board
from termtris.game.pieces import Piece, Point


class Action(enum.IntEnum):
    """Abstract input events the engine consumes."""
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    HARD_DROP = 3
    TICK = 4
    QUIT = 5


class TetrisGame:
    """Falling-block game state machine.

    Attributes:
        board: The game board.
        bag: Supply of upcoming pieces.
        current_piece: Currently active piece.
        origin: Board position of the active piece's top-left offset.
        game_over: Whether a spawn has failed.
        lines_cleared: Lines cleared by the most recent lock.
        total_lines: Total lines cleared since the last reset.
        pieces_locked: Number of pieces locked since the last reset.
    """

    def __init__(
        self,
        board_width: int = BOARD_WIDTH,
        board_height: int = BOARD_HEIGHT,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize a new game and spawn the first piece.

        Args:
            board_width: Board width in columns.
            board_height: Board height in rows.
            rng: Random source for the bag. Pass a seeded instance for
                reproducible games.

        Raises:
            ValueError: If the board is too narrow to spawn every shape.
        """
        # The widest shape spans 4 columns starting at the centre column.
        if board_width // 2 + 4 > board_width:
            raise ValueError(f"Board width {board_width} is too narrow to spawn pieces")
        self.board = Board(board_width, board_height)
        self._rng = rng if rng is not None else random.Random()
        self.bag = PieceBag(self._rng)
        self.current_piece: Piece = self.bag.peek()
        self.origin: Point = self.spawn_origin
        self.game_over: bool = False
        self.lines_cleared: int = 0
        self.total_lines: int = 0
        self.pieces_locked: int = 0
        self.reset()

    @property
    def spawn_origin(self) -> Point:
        """Top row, horizontally centred."""
        return Point(self.board.width // 2, 0)

    def reset(self) -> dict[str, Any]:
        """Reset the game to its initial state.

        Clears the board, refills the bag and spawns the first piece.

        Returns:
            Initial game state dict (same format as get_state()).
        """
        self.board.reset()
        self.bag.fill()
        self.game_over = False
        self.lines_cleared = 0
        self.total_lines = 0
        self.pieces_locked = 0
        self.origin = self.spawn_origin
        self.spawn_piece(self.bag.pop())
        return self.get_state()

    def spawn_piece(self, piece: Piece) -> bool:
        """Make ``piece`` the active piece at the spawn origin.

        Returns:
            True if the piece fits, False if it collides (game over). On
            failure the origin is left where it was and render() stops
            drawing the piece.
        """
        self.current_piece = piece
        origin = self.spawn_origin
        if self.board.collision(piece, origin):
            self.game_over = True
            return False
        self.origin = origin
        return True

    def move(self, dx: int, dy: int) -> bool:
        """Try to move the current piece by (dx, dy).

        Args:
            dx: Column offset (positive = right).
            dy: Row offset (positive = down).

        Returns:
            True if the move succeeded, False if blocked.
        """
        if self.game_over:
            return False
        candidate = self.origin.offset(dx, dy)
        if self.board.collision(self.current_piece, candidate):
            return False
        self.origin = candidate
        return True

    def rotate(self) -> bool:
        """Try to rotate the current piece clockwise in place.

        Returns:
            True if the rotated piece fits at the current origin.
        """
        if self.game_over:
            return False
        rotated = self.current_piece.rotated()
        if self.board.collision(rotated, self.origin):
            return False
        self.current_piece = rotated
        return True

    def step(self) -> bool:
        """Advance the active piece by one row, locking it if it has landed.

        When the piece can't move down it is locked into the board, full
        rows are cleared and the next piece from the bag is spawned.

        Returns:
            False if the game is over (the new piece couldn't spawn),
            True otherwise.
        """
        if self.game_over:
            return False
        if self.move(0, 1):
            return True

        self.board.lock_piece(self.current_piece, self.origin)
        self.pieces_locked += 1
        self.lines_cleared = self.board.clear_lines()
        self.total_lines += self.lines_cleared
        return self.spawn_piece(self.bag.pop())

    def hard_drop(self) -> bool:
        """Drop the piece as far as it goes, then lock it with one step.

        Returns:
            Same as step().
        """
        if self.game_over:
            return False
        while self.move(0, 1):
            pass
        return self.step()

    def handle(self, action: Action) -> bool:
        """Apply one abstract action to the game.

        QUIT is a control-loop concern and is ignored here.

        Returns:
            True while the game is still running, False once it is over.
        """
        if action == Action.LEFT:
            self.move(-1, 0)
        elif action == Action.RIGHT:
            self.move(1, 0)
        elif action == Action.ROTATE_CW:
            self.rotate()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.TICK:
            self.step()
        return not self.game_over

    def render(self) -> np.ndarray:
        """Return a snapshot of the board with the active piece drawn in.

        Once the game is over there is no active piece: the piece that
        failed to spawn is never placed, so only the board is returned.

        Returns:
            int8 array of shape (height, width). 0 is empty, otherwise the
            Color value of the active piece or of a locked cell.
        """
        snapshot = self.board.get_grid()
        if self.game_over:
            return snapshot
        for cell in self.current_piece.cells_at(self.origin):
            if 0 <= cell.x < self.board.width and 0 <= cell.y < self.board.height:
                snapshot[cell.y, cell.x] = int(self.current_piece.color)
        return snapshot

    def get_state(self) -> dict[str, Any]:
        """Return a dict describing the full observable game state.

        Returns:
            Dict with keys:
              - board_grid: np.ndarray (height x width, int8), locked cells only
              - current_piece: Piece
              - origin: Point
              - next_piece: Piece
              - game_over: bool
              - lines_cleared: int (lines cleared by the LAST lock)
              - total_lines: int
              - pieces_locked: int
        """
        return {
            "board_grid": self.board.get_grid(),
            "current_piece": self.current_piece,
            "origin": self.origin,
            "next_piece": self.bag.peek(),
            "game_over": self.game_over,
            "lines_cleared": self.lines_cleared,
            "total_lines": self.total_lines,
            "pieces_locked": self.pieces_locked,
        }
