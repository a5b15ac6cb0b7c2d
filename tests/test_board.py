"""Tests for the board model and snapshots."""

import pytest

from coveycheckers.engine import (
    Board,
    MalformedSnapshotError,
    Piece,
    Pos,
    Tile,
    create_board,
    opponent,
    to_snapshot,
)
from coveycheckers.engine.board import shade_of


# ------------------------------------------------------------------
# Standard setup
# ------------------------------------------------------------------

class TestStandardSetup:
    def test_dimensions(self, board):
        assert len(board.tiles) == 8
        assert all(len(row) == 8 for row in board.tiles)

    def test_shades_alternate(self, board):
        for r in range(8):
            for c in range(8):
                expected = "dark" if (r + c) % 2 == 1 else "light"
                assert board.tiles[r][c].shade == expected

    def test_red_on_rows_0_to_2(self, board):
        for r in range(3):
            for c in range(8):
                if (r + c) % 2 == 1:
                    assert board.tiles[r][c].piece == Piece("red")
                else:
                    assert board.tiles[r][c].piece is None

    def test_black_on_rows_5_to_7(self, board):
        for r in range(5, 8):
            for c in range(8):
                if (r + c) % 2 == 1:
                    assert board.tiles[r][c].piece == Piece("black")
                else:
                    assert board.tiles[r][c].piece is None

    def test_middle_rows_empty(self, board):
        for r in (3, 4):
            assert all(tile.piece is None for tile in board.tiles[r])

    def test_twelve_pieces_each(self, board):
        assert board.count_pieces() == {"red": 12, "black": 12}

    def test_no_kings(self, board):
        assert not any(piece.is_king for _, piece in board.pieces())

    def test_pieces_filtered_by_color(self, board):
        reds = list(board.pieces("red"))
        assert len(reds) == 12
        assert all(pos.row < 3 for pos, _ in reds)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

class TestHelpers:
    def test_shade_of(self):
        assert shade_of(0, 1) == "dark"
        assert shade_of(0, 0) == "light"
        assert shade_of(7, 7) == "light"

    def test_opponent(self):
        assert opponent("red") == "black"
        assert opponent("black") == "red"

    def test_pos_bounds(self):
        assert Pos(0, 0).in_bounds()
        assert Pos(7, 7).in_bounds()
        assert not Pos(-1, 0).in_bounds()
        assert not Pos(0, 8).in_bounds()

    def test_pos_dict(self):
        assert Pos(3, 4).to_dict() == {"row": 3, "col": 4}
        assert Pos.from_dict({"row": 3, "col": 4}) == Pos(3, 4)

    def test_empty_board_has_no_pieces(self, empty_board):
        assert empty_board.count_pieces() == {"red": 0, "black": 0}

    def test_set_and_remove(self):
        b = Board.empty()
        b.set_piece(Pos(3, 2), "black", is_king=True)
        assert b.piece_at(Pos(3, 2)) == Piece("black", True)
        assert b.color_at(Pos(3, 2)) == "black"
        assert b.remove(Pos(3, 2)) == Piece("black", True)
        assert b.piece_at(Pos(3, 2)) is None

    def test_clear_keeps_shades(self, board):
        board.clear()
        assert board.count_pieces() == {"red": 0, "black": 0}
        assert board.tiles[0][1].shade == "dark"

    def test_copy_is_independent(self, board):
        clone = board.copy()
        clone.remove(Pos(2, 1))
        assert board.piece_at(Pos(2, 1)) == Piece("red")


# ------------------------------------------------------------------
# Snapshots
# ------------------------------------------------------------------

class TestSnapshots:
    def test_tile_encoding(self, board):
        snap = to_snapshot(board)
        assert snap[0][0] == {"shade": "light", "piece": None}
        assert snap[0][1] == {
            "shade": "dark",
            "piece": {"color": "red", "isKing": False},
        }

    def test_snapshot_reconstructs_board(self, board):
        board.set_piece(Pos(3, 2), "black", is_king=True)
        rebuilt = create_board(to_snapshot(board))
        assert rebuilt.to_snapshot() == board.to_snapshot()
        assert rebuilt.piece_at(Pos(3, 2)) == Piece("black", True)

    def test_snapshot_does_not_share_tiles(self, board):
        rebuilt = create_board(board.tiles)
        rebuilt.remove(Pos(0, 1))
        assert board.piece_at(Pos(0, 1)) == Piece("red")

    def test_accepts_tile_objects(self):
        grid = [[Tile(shade_of(r, c)) for c in range(8)] for r in range(8)]
        grid[3][2] = Tile("dark", Piece("red"))
        assert create_board(grid).piece_at(Pos(3, 2)) == Piece("red")

    def test_missing_is_king_defaults_false(self):
        snap = Board.empty().to_snapshot()
        snap[3][2]["piece"] = {"color": "red"}
        assert create_board(snap).piece_at(Pos(3, 2)) == Piece("red", False)

    def test_wrong_row_count(self):
        with pytest.raises(MalformedSnapshotError, match="8 rows"):
            create_board(Board.empty().to_snapshot()[:7])

    def test_wrong_column_count(self):
        snap = Board.empty().to_snapshot()
        snap[4] = snap[4][:5]
        with pytest.raises(MalformedSnapshotError, match="Row 4"):
            create_board(snap)

    def test_not_a_list(self):
        with pytest.raises(MalformedSnapshotError):
            create_board({"tiles": []})

    def test_tile_without_shade(self):
        snap = Board.empty().to_snapshot()
        snap[0][0] = {"piece": None}
        with pytest.raises(MalformedSnapshotError, match="shade"):
            create_board(snap)

    def test_piece_without_color(self):
        snap = Board.empty().to_snapshot()
        snap[3][2]["piece"] = {"isKing": True}
        with pytest.raises(MalformedSnapshotError, match="color"):
            create_board(snap)

    def test_non_boolean_is_king_rejected(self):
        snap = Board.empty().to_snapshot()
        snap[3][2]["piece"] = {"color": "red", "isKing": "false"}
        with pytest.raises(MalformedSnapshotError, match="isKing"):
            create_board(snap)

    def test_malformed_snapshot_is_value_error(self):
        with pytest.raises(ValueError):
            create_board([])


class TestSnapshotValidation:
    def test_standard_board_is_legal(self, board):
        create_board(board.to_snapshot(), validate=True)

    def test_wrong_shade_rejected(self):
        snap = Board.empty().to_snapshot()
        snap[0][0]["shade"] = "dark"
        with pytest.raises(MalformedSnapshotError, match="should be light"):
            create_board(snap, validate=True)

    def test_piece_on_light_tile_rejected(self):
        snap = Board.empty().to_snapshot()
        snap[0][0]["piece"] = {"color": "red", "isKing": False}
        with pytest.raises(MalformedSnapshotError, match="light tile"):
            create_board(snap, validate=True)

    def test_unknown_color_rejected(self):
        snap = Board.empty().to_snapshot()
        snap[3][2]["piece"] = {"color": "green", "isKing": False}
        with pytest.raises(MalformedSnapshotError, match="green"):
            create_board(snap, validate=True)

    def test_unvalidated_accepts_odd_boards(self):
        snap = Board.empty().to_snapshot()
        snap[0][0]["piece"] = {"color": "red", "isKing": False}
        b = create_board(snap)
        assert b.piece_at(Pos(0, 0)) == Piece("red")
