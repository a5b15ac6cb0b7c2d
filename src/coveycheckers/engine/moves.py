"""Checkers move generation and move application.

Move generation builds, for every piece of the side to move, one entry per
diagonal direction that leads somewhere: either a simple one-step move or a
tree of capture hops. Hops are searched recursively with a per-branch
frozenset of already-captured pieces, so sibling forks never see each
other's captures.

Capture rules:
  - a hop jumps an adjacent opposing piece that has not been captured
    earlier in the same chain
  - the landing square must be empty, or be the chain's own origin square
  - a piece reaching its king row mid-chain continues as a king
Captured pieces stay on the board until the move is applied, so a chain can
never land on a square it has just cleared. Landing squares may repeat.

Captures are NOT mandatory: simple moves are listed even when a capture is
available.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .board import COLORS, KING_ROW, Board, Pos
from .errors import InvalidMoveError

logger = logging.getLogger(__name__)

MoveTable = list[list[list[list[Pos]]]]

# Order matters: it fixes the order of paths in the move table.
_UP_LEFT, _UP_RIGHT, _DOWN_LEFT, _DOWN_RIGHT = (-1, -1), (-1, 1), (1, -1), (1, 1)
_KING_DIRECTIONS = (_UP_LEFT, _UP_RIGHT, _DOWN_LEFT, _DOWN_RIGHT)
_FORWARD_DIRECTIONS = {
    "black": (_UP_LEFT, _UP_RIGHT),
    "red": (_DOWN_LEFT, _DOWN_RIGHT),
}


@dataclass(frozen=True)
class Hop:
    """One capture hop and every hop that can follow it."""

    landing: Pos
    captured: Pos
    is_king: bool  # king status after landing
    continuations: tuple[Hop, ...] = ()

    def flatten(self) -> list[Pos]:
        """Landing squares of this subtree in depth-first order."""
        path = [self.landing]
        for nxt in self.continuations:
            path.extend(nxt.flatten())
        return path

    def chains(self):
        """Yield every hop sequence that starts with this hop."""
        yield (self,)
        for nxt in self.continuations:
            for chain in nxt.chains():
                yield (self, *chain)


@dataclass
class Move:
    """A resolved move, as applied to the board."""

    start: Pos
    end: Pos
    path: list[Pos] = field(default_factory=list)  # landings, including end
    captures: list[Pos] = field(default_factory=list)
    promoted: bool = False

    @property
    def is_capture(self) -> bool:
        return bool(self.captures)


def _directions(color: str, is_king: bool) -> tuple[tuple[int, int], ...]:
    if is_king:
        return _KING_DIRECTIONS
    return _FORWARD_DIRECTIONS.get(color, ())


def _check_color(color: str) -> None:
    if color not in COLORS:
        raise InvalidMoveError(f"Unknown color {color!r}. Use 'red' or 'black'.")


# ── Move generation ──────────────────────────────────────────────


def _hop(
    board: Board,
    origin: Pos,
    pos: Pos,
    color: str,
    is_king: bool,
    captured: frozenset[Pos],
    direction: tuple[int, int],
) -> Hop | None:
    """Try to hop from *pos* in *direction*, searching on from the landing."""
    dr, dc = direction
    mid = pos.offset(dr, dc)
    land = pos.offset(dr * 2, dc * 2)
    if not land.in_bounds():
        return None

    mid_color = board.color_at(mid)
    if mid_color is None or mid_color == color:
        return None
    if mid in captured:
        return None  # already jumped in this chain
    if board.color_at(land) is not None and land != origin:
        return None

    king_now = is_king or land.row == KING_ROW[color]
    continuations = _hops_from(board, origin, land, color, king_now, captured | {mid})
    return Hop(landing=land, captured=mid, is_king=king_now, continuations=continuations)


def _hops_from(
    board: Board,
    origin: Pos,
    pos: Pos,
    color: str,
    is_king: bool,
    captured: frozenset[Pos],
) -> tuple[Hop, ...]:
    hops = []
    for direction in _directions(color, is_king):
        hop = _hop(board, origin, pos, color, is_king, captured, direction)
        if hop is not None:
            hops.append(hop)
    return tuple(hops)


def _piece_options(board: Board, pos: Pos, color: str) -> list[Pos | Hop]:
    """One option per productive direction: a step square or a hop tree."""
    piece = board.piece_at(pos)
    if piece is None or piece.color != color:
        return []

    options: list[Pos | Hop] = []
    for dr, dc in _directions(color, piece.is_king):
        step = pos.offset(dr, dc)
        if step.in_bounds() and board.color_at(step) is None:
            options.append(step)
            continue
        hop = _hop(board, pos, pos, color, piece.is_king, frozenset(), (dr, dc))
        if hop is not None:
            options.append(hop)
    return options


def _as_path(option: Pos | Hop) -> list[Pos]:
    if isinstance(option, Hop):
        return option.flatten()
    return [option]


def piece_moves(board: Board, pos: Pos, color: str) -> list[list[Pos]]:
    """Return the move-paths for the *color* piece on *pos* (empty if none)."""
    return [_as_path(option) for option in _piece_options(board, pos, color)]


def compute_moves(board: Board, color: str) -> MoveTable:
    """Return the 8×8 move table for *color*. Does not modify *board*."""
    _check_color(color)
    return [
        [piece_moves(board, Pos(r, c), color) for c in range(len(row))]
        for r, row in enumerate(board.tiles)
    ]


def has_any_move(board: Board, color: str) -> bool:
    """True if any piece of *color* has at least one move-path."""
    _check_color(color)
    return any(_piece_options(board, pos, color) for pos, _ in board.pieces(color))


def table_to_wire(table: MoveTable) -> list:
    """Convert a move table to nested lists of {"row", "col"} dicts."""
    return [
        [[[p.to_dict() for p in path] for path in paths] for paths in row]
        for row in table
    ]


# ── Move resolution ──────────────────────────────────────────────


def _longest_chain(options: list[Pos | Hop], end: Pos) -> tuple[Hop, ...] | None:
    """Return the hop chain with the most hops that lands last on *end*."""
    best: tuple[Hop, ...] | None = None
    for option in options:
        if not isinstance(option, Hop):
            continue
        for chain in option.chains():
            if chain[-1].landing != end:
                continue
            if best is None or len(chain) > len(best):
                best = chain
    return best


def resolve_move(board: Board, start: Pos, end: Pos, color: str) -> Move:
    """Work out exactly what moving *start* → *end* does. Never mutates.

    Raises InvalidMoveError if *end* is not reachable from *start* for
    *color*.
    """
    if color not in COLORS:
        raise InvalidMoveError(f"Unknown color {color!r}")
    if not (start.in_bounds() and end.in_bounds()):
        raise InvalidMoveError(
            f"Position out of bounds: {start.to_dict()} -> {end.to_dict()}"
        )

    piece = board.piece_at(start)
    options = _piece_options(board, start, color)
    if not any(end in _as_path(option) for option in options):
        raise InvalidMoveError(
            f"No valid move for {color} from ({start.row},{start.col}) "
            f"to ({end.row},{end.col})"
        )

    if end in options:
        return Move(
            start=start,
            end=end,
            path=[end],
            promoted=not piece.is_king and end.row == KING_ROW[color],
        )

    chain = _longest_chain(options, end)
    return Move(
        start=start,
        end=end,
        path=[hop.landing for hop in chain],
        captures=[hop.captured for hop in chain],
        promoted=not piece.is_king and chain[-1].is_king,
    )


def apply_move(board: Board, start: Pos, end: Pos, color: str) -> Move:
    """Move the *color* piece on *start* to *end*, in place.

    Removes every captured piece along the chosen chain and promotes the
    piece if it reached its king row at any point. Validation happens
    before any mutation; an InvalidMoveError leaves *board* unchanged.
    """
    try:
        move = resolve_move(board, start, end, color)
    except InvalidMoveError as exc:
        logger.debug("Rejected move: %s", exc)
        raise

    piece = board.remove(start)
    for pos in move.captures:
        board.remove(pos)
    board.place(end, piece.promoted() if move.promoted else piece)

    if move.captures:
        logger.debug(
            "%s (%d,%d)->(%d,%d) captured %d piece(s)",
            color, start.row, start.col, end.row, end.col, len(move.captures),
        )
    if move.promoted:
        logger.debug("%s piece promoted at (%d,%d)", color, end.row, end.col)
    return move


# ── Game-over detection ──────────────────────────────────────────


def is_game_over(board: Board) -> str:
    """Return the winning color, or 'none' while both sides have pieces.

    Counts are taken from the board every call. A board with no pieces at
    all is reported as 'none'.
    """
    counts = board.count_pieces()
    if counts["black"] == 0 and counts["red"] > 0:
        return "red"
    if counts["red"] == 0 and counts["black"] > 0:
        return "black"
    return "none"
