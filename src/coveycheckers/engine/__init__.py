"""Checkers rules engine: board model, move generation, move application."""

from .board import (
    BOARD_SIZE,
    COLORS,
    KING_ROW,
    Board,
    Piece,
    Pos,
    Tile,
    create_board,
    opponent,
    to_snapshot,
)
from .errors import InvalidMoveError, MalformedSnapshotError
from .moves import (
    Hop,
    Move,
    MoveTable,
    apply_move,
    compute_moves,
    has_any_move,
    is_game_over,
    piece_moves,
    resolve_move,
    table_to_wire,
)

__all__ = [
    "BOARD_SIZE",
    "COLORS",
    "KING_ROW",
    "Board",
    "Hop",
    "InvalidMoveError",
    "MalformedSnapshotError",
    "Move",
    "MoveTable",
    "Piece",
    "Pos",
    "Tile",
    "apply_move",
    "compute_moves",
    "create_board",
    "has_any_move",
    "is_game_over",
    "opponent",
    "piece_moves",
    "resolve_move",
    "table_to_wire",
    "to_snapshot",
]
