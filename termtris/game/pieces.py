"""
Piece catalog: the 7 colors, the 19 rotation states and their successors.

Every rotation state reachable by turning a tetromino 90 degrees clockwise is
its own catalog entry. Symmetric identities collapse: I, S and Z have two
distinct states, O has one, and T, J and L have four.

Coordinate convention:
  - Offsets are (x, y) pairs relative to the piece's origin, the top-left
    corner of its 4x4 bounding box.
  - On the board, y = 0 is the top row and y increases downward.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


class Color(enum.IntEnum):
    """Piece colors. Values start at 1 because 0 marks an empty board cell."""
    RED = 1
    ORANGE = 2
    YELLOW = 3
    GREEN = 4
    BLUE = 5
    PURPLE = 6
    BROWN = 7


COLORS: tuple[Color, ...] = tuple(Color)


class Shape(enum.IntEnum):
    """One rotation state of a tetromino, in catalog order."""
    I_HORIZONTAL = 0
    I_VERTICAL = 1
    Z_HORIZONTAL = 2
    Z_VERTICAL = 3
    S_HORIZONTAL = 4
    S_VERTICAL = 5
    O = 6
    T_UP = 7
    T_RIGHT = 8
    T_DOWN = 9
    T_LEFT = 10
    J_UP = 11
    J_RIGHT = 12
    J_DOWN = 13
    J_LEFT = 14
    L_UP = 15
    L_RIGHT = 16
    L_DOWN = 17
    L_LEFT = 18


# =============================================================================
# Cell offsets
# =============================================================================
# Four (x, y) offsets per shape, each coordinate in 0..3.

_CELLS: dict[Shape, tuple[tuple[int, int], ...]] = {
    # I
    Shape.I_HORIZONTAL: ((0, 0), (1, 0), (2, 0), (3, 0)),
    Shape.I_VERTICAL:   ((0, 0), (0, 1), (0, 2), (0, 3)),
    # Z
    Shape.Z_HORIZONTAL: ((0, 0), (1, 0), (1, 1), (2, 1)),
    Shape.Z_VERTICAL:   ((1, 0), (0, 1), (1, 1), (0, 2)),
    # S
    Shape.S_HORIZONTAL: ((1, 0), (2, 0), (0, 1), (1, 1)),
    Shape.S_VERTICAL:   ((0, 0), (0, 1), (1, 1), (1, 2)),
    # O
    Shape.O:            ((0, 0), (1, 0), (0, 1), (1, 1)),
    # T
    Shape.T_UP:         ((1, 0), (0, 1), (1, 1), (2, 1)),
    Shape.T_RIGHT:      ((1, 0), (1, 1), (2, 1), (1, 2)),
    Shape.T_DOWN:       ((0, 1), (1, 1), (2, 1), (1, 2)),
    Shape.T_LEFT:       ((1, 0), (0, 1), (1, 1), (1, 2)),
    # J
    Shape.J_UP:         ((1, 0), (1, 1), (0, 2), (1, 2)),
    Shape.J_RIGHT:      ((0, 1), (1, 1), (2, 1), (2, 2)),
    Shape.J_DOWN:       ((1, 0), (2, 0), (1, 1), (1, 2)),
    Shape.J_LEFT:       ((0, 0), (0, 1), (1, 1), (2, 1)),
    # L
    Shape.L_UP:         ((1, 0), (1, 1), (1, 2), (2, 2)),
    Shape.L_RIGHT:      ((0, 1), (1, 1), (2, 1), (0, 2)),
    Shape.L_DOWN:       ((0, 0), (1, 0), (1, 1), (1, 2)),
    Shape.L_LEFT:       ((2, 0), (0, 1), (1, 1), (2, 1)),
}

SHAPE_CELLS: Mapping[Shape, tuple[tuple[int, int], ...]] = MappingProxyType(_CELLS)


# =============================================================================
# Rotation successors
# =============================================================================
# Each identity's states are chained clockwise into a cycle.

_ROTATION_CYCLES: tuple[tuple[Shape, ...], ...] = (
    (Shape.I_HORIZONTAL, Shape.I_VERTICAL),
    (Shape.Z_HORIZONTAL, Shape.Z_VERTICAL),
    (Shape.S_HORIZONTAL, Shape.S_VERTICAL),
    (Shape.O,),
    (Shape.T_UP, Shape.T_RIGHT, Shape.T_DOWN, Shape.T_LEFT),
    (Shape.J_UP, Shape.J_RIGHT, Shape.J_DOWN, Shape.J_LEFT),
    (Shape.L_UP, Shape.L_RIGHT, Shape.L_DOWN, Shape.L_LEFT),
)

ROTATE_CW: Mapping[Shape, Shape] = MappingProxyType({
    shape: cycle[(i + 1) % len(cycle)]
    for cycle in _ROTATION_CYCLES
    for i, shape in enumerate(cycle)
})

_IDENTITY: Mapping[Shape, str] = MappingProxyType({
    shape: shape.name[0]
    for cycle in _ROTATION_CYCLES
    for shape in cycle
})

_CYCLE_LENGTH: Mapping[Shape, int] = MappingProxyType({
    shape: len(cycle)
    for cycle in _ROTATION_CYCLES
    for shape in cycle
})


def shape_cells(shape: int) -> tuple[tuple[int, int], ...]:
    """Return the 4 (x, y) offsets occupied by a shape.

    Args:
        shape: A Shape member or its integer code.

    Returns:
        Tuple of four (x, y) pairs relative to the piece origin.

    Raises:
        ValueError: If the code is not in the catalog.
    """
    return SHAPE_CELLS[Shape(shape)]


def rotate_shape(shape: int) -> Shape:
    """Return the clockwise rotation successor of a shape.

    Raises:
        ValueError: If the code is not in the catalog.
    """
    return ROTATE_CW[Shape(shape)]


def piece_identity(shape: int) -> str:
    """Return the tetromino letter (I, O, T, S, Z, J or L) of a shape."""
    return _IDENTITY[Shape(shape)]


def cycle_length(shape: int) -> int:
    """Number of clockwise rotations that bring a shape back to itself."""
    return _CYCLE_LENGTH[Shape(shape)]


# =============================================================================
# Point / Piece value types
# =============================================================================

@dataclass(frozen=True)
class Point:
    """Board coordinate. Origin is the top-left cell, y grows downward."""
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> Point:
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Piece:
    """An immutable (color, shape) pair.

    Rotation returns a new Piece with the same color and the successor shape.
    """
    color: Color
    shape: Shape

    def cells(self) -> tuple[tuple[int, int], ...]:
        return shape_cells(self.shape)

    def cells_at(self, origin: Point) -> list[Point]:
        """Absolute board cells of this piece anchored at ``origin``."""
        return [Point(origin.x + dx, origin.y + dy) for dx, dy in self.cells()]

    def rotated(self) -> Piece:
        return Piece(self.color, rotate_shape(self.shape))
