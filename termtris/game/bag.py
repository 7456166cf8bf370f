"""Shuffled piece supply.

A full bag holds one piece for every rotation state in the catalog (19
pieces), not one per tetromino identity. Colors are picked independently of
the shape.
"""

from __future__ import annotations

import random
from collections import deque

from termtris.game.pieces import COLORS, Piece, Shape


class PieceBag:
    """Queue of upcoming pieces that refills itself when it runs out."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._pieces: deque[Piece] = deque()
        self.fill()

    def fill(self) -> None:
        """Replace the queue with every catalog shape in shuffled order."""
        shapes = list(Shape)
        self._rng.shuffle(shapes)
        self._pieces = deque(
            Piece(color=self._rng.choice(COLORS), shape=shape) for shape in shapes
        )

    def pop(self) -> Piece:
        """Remove and return the next piece, refilling if the bag is now empty.

        Raises:
            IndexError: If called on an empty bag.
        """
        if not self._pieces:
            raise IndexError("No next piece in the bag")
        piece = self._pieces.popleft()
        if not self._pieces:
            self.fill()
        return piece

    def peek(self) -> Piece:
        if not self._pieces:
            raise IndexError("No next piece in the bag")
        return self._pieces[0]

    def __len__(self) -> int:
        return len(self._pieces)
