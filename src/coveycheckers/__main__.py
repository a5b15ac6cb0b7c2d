"""CLI entry point: python -m coveycheckers {moves,replay} ..."""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv

from coveycheckers.config import CheckersConfig, load_config
from coveycheckers.core.parser import validate_snapshot_payload
from coveycheckers.engine import (
    COLORS,
    InvalidMoveError,
    Pos,
    apply_move,
    compute_moves,
    create_board,
    is_game_over,
    table_to_wire,
)


def _load_board(snapshot_path: Path | None, config: CheckersConfig):
    if snapshot_path is None:
        return create_board()
    with open(snapshot_path) as f:
        snapshot = json.load(f)
    validate = config.engine.validate_snapshots
    if validate:
        validate_snapshot_payload(snapshot)
    return create_board(snapshot, validate=validate)


def _pos(value) -> Pos:
    try:
        row, col = value
        return Pos(int(row), int(col))
    except (TypeError, ValueError):
        raise ValueError(f"Bad position {value!r}, expected [row, col]") from None


def _cmd_moves(args, config: CheckersConfig) -> None:
    board = _load_board(args.snapshot, config)
    print(json.dumps(table_to_wire(compute_moves(board, args.color))))


def _cmd_replay(args, config: CheckersConfig) -> None:
    """Apply a recorded sequence of moves and print the final position."""
    with open(args.game) as f:
        game = yaml.safe_load(f) or {}

    snapshot = game.get("snapshot")
    if snapshot is not None:
        snapshot = Path(snapshot)
        if not snapshot.is_absolute():
            snapshot = args.game.parent / snapshot
    board = _load_board(snapshot, config)

    applied = 0
    for i, entry in enumerate(game.get("moves") or [], 1):
        try:
            apply_move(board, _pos(entry["source"]), _pos(entry["dest"]), entry["color"])
        except InvalidMoveError as e:
            raise InvalidMoveError(f"move {i}: {e}") from e
        applied += 1

    print(json.dumps({
        "board": board.to_snapshot(),
        "winner": is_game_over(board),
        "moves_applied": applied,
    }))


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="coveycheckers",
        description="Checkers move engine",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=os.environ.get("COVEYCHECKERS_CONFIG"),
        help="Path to YAML config file (default: $COVEYCHECKERS_CONFIG)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    moves = sub.add_parser("moves", help="Print the move table for one side")
    moves.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="Board snapshot JSON (default: standard setup)",
    )
    moves.add_argument("--color", choices=COLORS, required=True)
    moves.set_defaults(func=_cmd_moves)

    replay = sub.add_parser("replay", help="Apply a recorded game file")
    replay.add_argument("game", type=Path, help="YAML game file")
    replay.set_defaults(func=_cmd_replay)

    args = parser.parse_args(argv)

    if args.config is not None:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        try:
            config = load_config(config_path)
        except (ValueError, yaml.YAMLError) as e:
            print(f"Error: invalid config {config_path}: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        config = CheckersConfig()

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # InvalidMoveError and MalformedSnapshotError are ValueErrors
    try:
        args.func(args, config)
    except (OSError, ValueError, KeyError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
