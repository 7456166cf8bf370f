"""
Board logic for a 10x20 Tetris grid.

The board is a 2D numpy array (height x width) of int8 values:
  - 0 = empty cell
  - 1-7 = Color value of a locked cell

The board never validates writes on its own. The game controller calls
collision() before every lock_piece().
"""

from __future__ import annotations

import numpy as np

from termtris.game.pieces import Color, Piece, Point

BOARD_WIDTH = 10
BOARD_HEIGHT = 20

EMPTY = 0


class Board:
    """Tetris board with collision detection, locking and line clearing.

    Attributes:
        width: Number of columns (default 10).
        height: Number of rows (default 20).
        grid: 2D numpy array of shape (height, width), dtype int8.
    """

    def __init__(self, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> None:
        """Initialize an empty board.

        Args:
            width: Number of columns.
            height: Number of rows.
        """
        if width < 4 or height < 4:
            raise ValueError(f"Board must be at least 4x4, got {width}x{height}")
        self.width = width
        self.height = height
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def collision(self, piece: Piece, origin: Point) -> bool:
        """Check whether a piece anchored at ``origin`` overlaps anything.

        A placement collides if any of the piece's 4 cells:
          - Lies outside the board (x < 0, x >= width, y < 0 or y >= height).
          - Overlaps a locked cell.

        Args:
            piece: The piece to test.
            origin: Board coordinate of the piece's top-left offset.

        Returns:
            True if the placement is illegal, False if it fits.
        """
        for cell in piece.cells_at(origin):
            if cell.x < 0 or cell.x >= self.width:
                return True
            if cell.y < 0 or cell.y >= self.height:
                return True
            if self.grid[cell.y, cell.x] != EMPTY:
                return True
        return False

    def lock_piece(self, piece: Piece, origin: Point) -> None:
        """Write the piece's color into the grid at each of its cells.

        Does NOT check validity first; caller must ensure the placement
        doesn't collide.
        """
        for cell in piece.cells_at(origin):
            self.grid[cell.y, cell.x] = int(piece.color)

    def clear_lines(self) -> int:
        """Remove all full rows and shift everything above them down.

        Full rows need not be adjacent. All of them are dropped in a single
        pass, the remaining rows keep their relative order, and one empty row
        is added at the top for each removed row.

        Returns:
            The number of rows cleared.
        """
        full = np.all(self.grid != EMPTY, axis=1)
        lines_cleared = int(full.sum())
        if lines_cleared == 0:
            return 0

        remaining = self.grid[~full]
        empty_rows = np.zeros((lines_cleared, self.width), dtype=np.int8)
        self.grid = np.vstack([empty_rows, remaining])
        return lines_cleared

    def is_row_full(self, y: int) -> bool:
        return bool(np.all(self.grid[y] != EMPTY))

    def cell(self, x: int, y: int) -> Color | None:
        """Return the color locked at (x, y), or None if the cell is empty."""
        value = int(self.grid[y, x])
        return Color(value) if value != EMPTY else None

    def get_grid(self) -> np.ndarray:
        """Return a copy of the board grid.

        Returns:
            A numpy array of shape (height, width), dtype int8.
        """
        return self.grid.copy()

    def reset(self) -> None:
        """Clear the entire board, setting all cells to 0."""
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)
