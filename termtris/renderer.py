"""
Terminal renderer for the Tetris game.

Turns the game's grid snapshot into a text frame and writes it to the
terminal. Each cell is two columns wide. Rows are placed with explicit
cursor-position escapes, so the output doesn't depend on how the terminal
translates line endings in raw mode.

Frame layout (10 columns):

    |                    |
    |      🟥🟥🟥        |
    ...
    ----------------------
"""

from __future__ import annotations

import sys
from typing import TextIO

import numpy as np

from termtris.game.pieces import Color
from termtris.game.tetris import TetrisGame


# ── Escape sequences ─────────────────────────────────────────────────────
CLEAR_SCREEN = "\x1b[2J\x1b[H"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
RESET_STYLE = "\x1b[0m"

BLANK_CELL = "  "
BORDER = "|"

# ── Color -> cell text, per style ────────────────────────────────────────
EMOJI_CELLS: dict[Color, str] = {
    Color.RED: "\U0001F7E5",
    Color.ORANGE: "\U0001F7E7",
    Color.YELLOW: "\U0001F7E8",
    Color.GREEN: "\U0001F7E9",
    Color.BLUE: "\U0001F7E6",
    Color.PURPLE: "\U0001F7EA",
    Color.BROWN: "\U0001F7EB",
}

# Background colors; orange and brown come from the 256-color palette.
_ANSI_BACKGROUNDS: dict[Color, str] = {
    Color.RED: "41",
    Color.ORANGE: "48;5;208",
    Color.YELLOW: "43",
    Color.GREEN: "42",
    Color.BLUE: "44",
    Color.PURPLE: "45",
    Color.BROWN: "48;5;94",
}

ANSI_CELLS: dict[Color, str] = {
    color: f"\x1b[{code}m{BLANK_CELL}{RESET_STYLE}"
    for color, code in _ANSI_BACKGROUNDS.items()
}

STYLES: dict[str, dict[Color, str]] = {
    "emoji": EMOJI_CELLS,
    "ansi": ANSI_CELLS,
}


def move_cursor(row: int, col: int = 0) -> str:
    """Escape sequence moving the cursor to a 0-based (row, col)."""
    return f"\x1b[{row + 1};{col + 1}H"


def cell_text(value: int, style: str = "emoji") -> str:
    """Text for one grid cell: 0 is blank, 1-7 is a Color value.

    Raises:
        ValueError: If the style is unknown.
    """
    if style not in STYLES:
        raise ValueError(f"Unknown render style: {style!r} (choose from {sorted(STYLES)})")
    if value == 0:
        return BLANK_CELL
    return STYLES[style][Color(value)]


def format_rows(grid: np.ndarray, style: str = "emoji") -> list[str]:
    """Render each grid row as ``|cells|`` plus the dashed footer line."""
    rows = [
        BORDER + "".join(cell_text(int(v), style) for v in row) + BORDER
        for row in grid
    ]
    width = grid.shape[1]
    rows.append("-" * (len(BLANK_CELL) * width + 2 * len(BORDER)))
    return rows


def format_frame(grid: np.ndarray, style: str = "emoji") -> str:
    """Build a complete frame: clear screen, then every row at its position."""
    parts = [CLEAR_SCREEN]
    for i, line in enumerate(format_rows(grid, style)):
        parts.append(move_cursor(i))
        parts.append(line)
    return "".join(parts)


class TetrisRenderer:
    """Writes frames of a TetrisGame to a terminal stream.

    Attributes:
        game: Reference to the TetrisGame being rendered.
        style: Cell style, one of STYLES.
        stream: Text stream the frames are written to.
    """

    def __init__(
        self,
        game: TetrisGame,
        style: str = "emoji",
        stream: TextIO | None = None,
    ) -> None:
        if style not in STYLES:
            raise ValueError(f"Unknown render style: {style!r} (choose from {sorted(STYLES)})")
        self.game = game
        self.style = style
        self.stream = stream if stream is not None else sys.stdout
        self._initialized = False

    def render(self) -> None:
        """Draw the current game state, hiding the cursor on the first call."""
        if not self._initialized:
            self.stream.write(HIDE_CURSOR)
            self._initialized = True
        self.stream.write(format_frame(self.game.render(), self.style))
        self.stream.flush()

    def render_game_over(self) -> None:
        """Write a GAME OVER banner under the footer of the last frame."""
        row = self.game.board.height + 1
        self.stream.write(move_cursor(row) + "GAME OVER")
        self.stream.flush()

    def close(self) -> None:
        """Restore the cursor and leave it below the board."""
        if not self._initialized:
            return
        row = self.game.board.height + 2
        self.stream.write(RESET_STYLE + SHOW_CURSOR + move_cursor(row))
        self.stream.flush()
        self._initialized = False
