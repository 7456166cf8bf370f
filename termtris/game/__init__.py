"""Game logic: piece catalog, board, piece bag, and game orchestrator."""

from termtris.game.pieces import Color, Piece, Point, Shape, rotate_shape, shape_cells
from termtris.game.board import Board
from termtris.game.bag import PieceBag
from termtris.game.tetris import TetrisGame, Action

__all__ = [
    "Color",
    "Piece",
    "Point",
    "Shape",
    "rotate_shape",
    "shape_cells",
    "Board",
    "PieceBag",
    "TetrisGame",
    "Action",
]
