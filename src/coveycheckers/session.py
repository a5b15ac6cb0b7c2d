"""Checkers sessions: one game between two seated players.

A session owns its board and serializes every read-modify-write of it behind
a per-session lock, so a move-table computation and the move that follows
it are never interleaved with another mutation of the same board. The
engine itself does no locking.

Turn flow:
  validate_action()  -> ValidationResult, never mutates
  apply_action()     -> applies, checks game over, switches turns, returns
                        the move response (board, next side's move table,
                        optional winner id)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from coveycheckers.config import CheckersConfig
from coveycheckers.core.parser import MoveRequest, validate_snapshot_payload
from coveycheckers.core.telemetry import GameLogger, MoveRecord
from coveycheckers.engine import (
    Board,
    InvalidMoveError,
    apply_move,
    compute_moves,
    create_board,
    has_any_move,
    is_game_over,
    opponent,
    resolve_move,
    table_to_wire,
)

__all__ = ["CheckersSession", "SessionRegistry", "ValidationResult"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a player's move request against game rules."""

    legal: bool
    reason: str | None = None


class CheckersSession:
    """A single checkers game with two seats."""

    def __init__(
        self,
        session_id: str,
        config: CheckersConfig | None = None,
        board: Board | None = None,
        game_logger: GameLogger | None = None,
    ) -> None:
        self.session_id = session_id
        self._config = config or CheckersConfig()
        self._board = board if board is not None else create_board()
        self._lock = threading.Lock()

        self._current_color = self._config.session.first_color
        self._player_one_id: str | None = None
        self._player_two_id: str | None = None
        self._color_map: dict[str, str] = {}

        self._winner_color: str | None = None
        self._end_reason: str | None = None
        self._turn_number = 0
        self._last_move: dict | None = None

        if game_logger is None and self._config.telemetry.output_dir:
            game_logger = GameLogger(self._config.telemetry.output_dir, session_id)
        self._game_logger = game_logger

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def board(self) -> Board:
        return self._board

    @property
    def current_color(self) -> str:
        return self._current_color

    @property
    def player_one_id(self) -> str | None:
        return self._player_one_id

    @property
    def player_two_id(self) -> str | None:
        return self._player_two_id

    @property
    def is_player_one_turn(self) -> bool:
        return self._current_color == self._config.session.player_one_color

    @property
    def turn_number(self) -> int:
        return self._turn_number

    @property
    def last_move(self) -> dict | None:
        return self._last_move

    @property
    def winner_color(self) -> str | None:
        return self._winner_color

    @property
    def winner_id(self) -> str | None:
        if self._winner_color is None:
            return None
        return self._player_for_color(self._winner_color)

    @property
    def end_reason(self) -> str | None:
        return self._end_reason

    def is_terminal(self) -> bool:
        return self._winner_color is not None

    def color_of(self, player_id: str) -> str | None:
        return self._color_map.get(player_id)

    # ------------------------------------------------------------------
    # Seats
    # ------------------------------------------------------------------

    def join(self, player_id: str) -> str:
        """Seat *player_id* and return the color they play."""
        with self._lock:
            if player_id in self._color_map:
                return self._color_map[player_id]

            one_color = self._config.session.player_one_color
            if self._player_one_id is None:
                self._player_one_id = player_id
                color = one_color
            elif self._player_two_id is None:
                self._player_two_id = player_id
                color = opponent(one_color)
            else:
                raise ValueError(f"Session {self.session_id} already has two players")

            self._color_map[player_id] = color
            logger.info("%s joined %s as %s", player_id, self.session_id, color)
            return color

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def validate_action(self, player_id: str, request: MoveRequest) -> ValidationResult:
        with self._lock:
            return self._validate(player_id, request)

    def apply_action(self, player_id: str, request: MoveRequest) -> dict:
        """Apply a move request and return the move response.

        Raises InvalidMoveError (board untouched) if the request is not
        legal for this player right now.
        """
        with self._lock:
            result = self._validate(player_id, request)
            if not result.legal:
                logger.warning(
                    "Rejected move from %s in %s: %s",
                    player_id, self.session_id, result.reason,
                )
                raise InvalidMoveError(result.reason)

            color = self._current_color
            move = apply_move(self._board, request.source, request.dest, color)
            self._turn_number += 1
            self._last_move = {
                "from": move.start.to_dict(),
                "to": move.end.to_dict(),
                "path": [p.to_dict() for p in move.path],
                "captures": [p.to_dict() for p in move.captures],
                "promoted": move.promoted,
            }
            logger.info(
                "%s (%s) moved %s -> %s in %s",
                player_id, color, self._last_move["from"], self._last_move["to"],
                self.session_id,
            )
            if self._game_logger:
                self._game_logger.log_move(
                    MoveRecord(
                        turn_number=self._turn_number,
                        player_id=player_id,
                        color=color,
                        source=self._last_move["from"],
                        dest=self._last_move["to"],
                        path=self._last_move["path"],
                        captures=self._last_move["captures"],
                        promoted=move.promoted,
                        pieces_remaining=self._board.count_pieces(),
                    )
                )

            self._check_game_end(opponent(color))
            return self._to_model()

    def resign(self, player_id: str) -> str | None:
        """Concede the game. Returns the winner's player id."""
        with self._lock:
            color = self._color_map.get(player_id)
            if color is None:
                raise ValueError(f"{player_id} is not seated in {self.session_id}")
            if not self.is_terminal():
                self._finish(opponent(color), "resigned")
            return self.winner_id

    def load_snapshot(self, snapshot: list) -> None:
        """Replace the board with a transported snapshot."""
        validate = self._config.engine.validate_snapshots
        if validate:
            validate_snapshot_payload(snapshot)
        board = create_board(snapshot, validate=validate)
        with self._lock:
            self._board = board
            self._winner_color = None
            self._end_reason = None
            self._last_move = None
            self._check_game_end(self._current_color)

    # ------------------------------------------------------------------
    # Wire model
    # ------------------------------------------------------------------

    def moves_for(self, color: str) -> list:
        """Wire move table for *color*, e.g. for rendering move hints."""
        with self._lock:
            return table_to_wire(compute_moves(self._board, color))

    def to_model(self) -> dict:
        with self._lock:
            return self._to_model()

    def _to_model(self) -> dict:
        model = {
            "id": self.session_id,
            "board": self._board.to_snapshot(),
            "playerOneID": self._player_one_id,
            "playerTwoID": self._player_two_id,
            "isPlayerOneTurn": self.is_player_one_turn,
            "preBoard": table_to_wire(compute_moves(self._board, self._current_color)),
        }
        if self.winner_id is not None:
            model["winnerID"] = self.winner_id
        return model

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validate(self, player_id: str, request: MoveRequest) -> ValidationResult:
        if self.is_terminal():
            return ValidationResult(legal=False, reason="Game is over.")

        color = self._color_map.get(player_id)
        if color is None:
            return ValidationResult(
                legal=False, reason="Player is not seated in this session."
            )
        if color != self._current_color:
            return ValidationResult(legal=False, reason="Not your turn.")
        if request.current_color != color:
            return ValidationResult(
                legal=False,
                reason=f"Request is for {request.current_color}, but you play {color}.",
            )

        try:
            resolve_move(self._board, request.source, request.dest, color)
        except InvalidMoveError as e:
            return ValidationResult(legal=False, reason=str(e))
        return ValidationResult(legal=True)

    def _check_game_end(self, to_move: str) -> None:
        """Finish the game if it is decided, else hand the turn to *to_move*."""
        winner = is_game_over(self._board)
        if winner != "none":
            self._finish(winner, "no_pieces")
            return

        if not has_any_move(self._board, to_move):
            self._finish(opponent(to_move), "no_moves")
            return
        self._current_color = to_move

    def _finish(self, winner_color: str, reason: str) -> None:
        self._winner_color = winner_color
        self._end_reason = reason
        logger.info(
            "Game %s over: %s wins (%s)", self.session_id, winner_color, reason
        )
        if self._game_logger:
            self._game_logger.finalize_game(
                winner_color,
                self.winner_id,
                reason,
                extra={
                    "turns": self._turn_number,
                    "pieces_remaining": self._board.count_pieces(),
                    "players": {
                        "playerOneID": self._player_one_id,
                        "playerTwoID": self._player_two_id,
                    },
                },
            )

    def _player_for_color(self, color: str) -> str | None:
        for pid, c in self._color_map.items():
            if c == color:
                return pid
        return None


class SessionRegistry:
    """Thread-safe map of session id to CheckersSession."""

    def __init__(self, config: CheckersConfig | None = None) -> None:
        self._config = config or CheckersConfig()
        self._sessions: dict[str, CheckersSession] = {}
        self._lock = threading.Lock()

    def create(self, session_id: str, board: Board | None = None) -> CheckersSession:
        with self._lock:
            if session_id in self._sessions:
                raise ValueError(f"Session {session_id} already exists")
            session = CheckersSession(session_id, self._config, board=board)
            self._sessions[session_id] = session
            return session

    def get(self, session_id: str) -> CheckersSession:
        with self._lock:
            try:
                return self._sessions[session_id]
            except KeyError:
                raise KeyError(f"Unknown session {session_id}") from None

    def remove(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
