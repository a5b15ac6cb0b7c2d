"""Checkers board model: 8×8 grid of shaded tiles.

Dark squares: (row + col) % 2 == 1. Pieces only ever stand on dark squares.

Red starts on rows 0-2 and moves DOWN the board (increasing row).
Black starts on rows 5-7 and moves UP the board (decreasing row).
Red is kinged on row 7, black on row 0.

Snapshot encoding (the shape sent over the wire):
  {"shade": "dark", "piece": {"color": "red", "isKing": false}}
  {"shade": "light", "piece": null}
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import MalformedSnapshotError

BOARD_SIZE = 8
COLORS = ("red", "black")
KING_ROW = {"red": BOARD_SIZE - 1, "black": 0}


@dataclass(frozen=True)
class Pos:
    """A square on the board."""

    row: int
    col: int

    def in_bounds(self) -> bool:
        return 0 <= self.row < BOARD_SIZE and 0 <= self.col < BOARD_SIZE

    def offset(self, dr: int, dc: int) -> Pos:
        return Pos(self.row + dr, self.col + dc)

    def to_dict(self) -> dict:
        return {"row": self.row, "col": self.col}

    @classmethod
    def from_dict(cls, data: dict) -> Pos:
        return cls(row=data["row"], col=data["col"])


@dataclass(frozen=True)
class Piece:
    color: str
    is_king: bool = False

    def promoted(self) -> Piece:
        return Piece(self.color, True)

    def to_dict(self) -> dict:
        return {"color": self.color, "isKing": self.is_king}


@dataclass
class Tile:
    shade: str
    piece: Piece | None = None

    def to_dict(self) -> dict:
        return {
            "shade": self.shade,
            "piece": self.piece.to_dict() if self.piece else None,
        }


def shade_of(row: int, col: int) -> str:
    return "dark" if (row + col) % 2 == 1 else "light"


def opponent(color: str) -> str:
    return "black" if color == "red" else "red"


@dataclass
class Board:
    """The 8×8 tile grid. Mutated in place by move application."""

    tiles: list[list[Tile]] = field(default_factory=list)

    @classmethod
    def empty(cls) -> Board:
        """Board with correctly shaded tiles and no pieces."""
        return cls(
            [
                [Tile(shade_of(r, c)) for c in range(BOARD_SIZE)]
                for r in range(BOARD_SIZE)
            ]
        )

    @classmethod
    def standard(cls) -> Board:
        """Board with both sides in their starting positions."""
        board = cls.empty()
        for r in range(BOARD_SIZE):
            for c in range(BOARD_SIZE):
                if shade_of(r, c) != "dark":
                    continue
                if r < 3:
                    board.tiles[r][c].piece = Piece("red")
                elif r >= 5:
                    board.tiles[r][c].piece = Piece("black")
        return board

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def tile(self, pos: Pos) -> Tile:
        return self.tiles[pos.row][pos.col]

    def piece_at(self, pos: Pos) -> Piece | None:
        return self.tiles[pos.row][pos.col].piece

    def color_at(self, pos: Pos) -> str | None:
        """Return 'red' or 'black' for an occupied square, None for empty."""
        piece = self.piece_at(pos)
        return piece.color if piece else None

    def pieces(self, color: str | None = None):
        """Yield (pos, piece) for every piece, optionally of one color."""
        for r, row in enumerate(self.tiles):
            for c, tile in enumerate(row):
                if tile.piece is None:
                    continue
                if color is None or tile.piece.color == color:
                    yield Pos(r, c), tile.piece

    def count_pieces(self) -> dict[str, int]:
        """Count remaining pieces for each side, straight from the tiles."""
        counts = {color: 0 for color in COLORS}
        for _, piece in self.pieces():
            if piece.color in counts:
                counts[piece.color] += 1
        return counts

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def place(self, pos: Pos, piece: Piece | None) -> None:
        self.tiles[pos.row][pos.col].piece = piece

    def set_piece(self, pos: Pos, color: str, is_king: bool = False) -> None:
        """Put a fresh piece on *pos*, replacing whatever was there."""
        self.place(pos, Piece(color, is_king))

    def remove(self, pos: Pos) -> Piece | None:
        piece = self.piece_at(pos)
        self.place(pos, None)
        return piece

    def clear(self) -> None:
        """Remove every piece, keeping the tile shades."""
        for row in self.tiles:
            for tile in row:
                tile.piece = None

    def copy(self) -> Board:
        # Pieces are immutable, so sharing them between copies is safe.
        return Board([[Tile(t.shade, t.piece) for t in row] for row in self.tiles])

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_snapshot(self) -> list[list[dict]]:
        return [[tile.to_dict() for tile in row] for row in self.tiles]

    @classmethod
    def from_snapshot(cls, snapshot, *, validate: bool = False) -> Board:
        """Build a Board from a row-major 8×8 grid of tile dicts (or Tiles).

        The grid shape and tile structure are always checked. With
        *validate* the board is also checked for legality: shades must
        follow the checkerboard pattern, piece colors must be red or
        black, and no piece may stand on a light tile.
        """
        if not isinstance(snapshot, list) or len(snapshot) != BOARD_SIZE:
            raise MalformedSnapshotError(
                f"Snapshot must have {BOARD_SIZE} rows"
            )
        tiles: list[list[Tile]] = []
        for r, row in enumerate(snapshot):
            if not isinstance(row, list) or len(row) != BOARD_SIZE:
                raise MalformedSnapshotError(
                    f"Row {r} must have {BOARD_SIZE} tiles"
                )
            tiles.append([_parse_tile(raw, r, c) for c, raw in enumerate(row)])

        board = cls(tiles)
        if validate:
            _check_legal(board)
        return board


def _parse_tile(raw, row: int, col: int) -> Tile:
    if isinstance(raw, Tile):
        return Tile(raw.shade, raw.piece)
    if not isinstance(raw, dict) or "shade" not in raw:
        raise MalformedSnapshotError(f"Tile ({row},{col}) is missing a shade")

    raw_piece = raw.get("piece")
    if raw_piece is None:
        return Tile(raw["shade"])
    if isinstance(raw_piece, Piece):
        return Tile(raw["shade"], raw_piece)
    if not isinstance(raw_piece, dict) or "color" not in raw_piece:
        raise MalformedSnapshotError(f"Piece at ({row},{col}) has no color")
    is_king = raw_piece.get("isKing", False)
    if not isinstance(is_king, bool):
        raise MalformedSnapshotError(
            f"Piece at ({row},{col}) has non-boolean isKing {is_king!r}"
        )
    return Tile(raw["shade"], Piece(raw_piece["color"], is_king))


def _check_legal(board: Board) -> None:
    for r, row in enumerate(board.tiles):
        for c, tile in enumerate(row):
            expected = shade_of(r, c)
            if tile.shade != expected:
                raise MalformedSnapshotError(
                    f"Tile ({r},{c}) should be {expected}, got {tile.shade!r}"
                )
            if tile.piece is None:
                continue
            if tile.piece.color not in COLORS:
                raise MalformedSnapshotError(
                    f"Unknown piece color {tile.piece.color!r} at ({r},{c})"
                )
            if expected != "dark":
                raise MalformedSnapshotError(
                    f"Piece on light tile ({r},{c})"
                )


# ── Public helpers ───────────────────────────────────────────────


def create_board(snapshot=None, *, validate: bool = False) -> Board:
    """Return a fresh standard board, or wrap a transported snapshot."""
    if snapshot is None:
        return Board.standard()
    return Board.from_snapshot(snapshot, validate=validate)


def to_snapshot(board: Board) -> list[list[dict]]:
    """Return the transportable grid for *board*."""
    return board.to_snapshot()
