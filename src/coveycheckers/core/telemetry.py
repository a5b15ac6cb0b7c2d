"""GameLogger: JSONL game logging.

One logger per game. Writes one JSONL line per applied move plus a game
summary as the final line. All entries include schema version and game ID.
"""

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path

import coveycheckers

_SCHEMA_VERSION = "1.0.0"


@dataclass
class MoveRecord:
    """One applied move."""

    turn_number: int
    player_id: str | None
    color: str
    source: dict
    dest: dict
    path: list[dict]
    captures: list[dict]
    promoted: bool
    pieces_remaining: dict[str, int]


class GameLogger:
    """Writes JSONL telemetry for a single game."""

    def __init__(self, output_dir: Path, game_id: str):
        self._output_dir = Path(output_dir)
        self._game_id = game_id
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._output_dir / f"{game_id}.jsonl"

    @property
    def file_path(self) -> Path:
        return self._file_path

    def log_move(self, record: MoveRecord) -> None:
        entry = asdict(record)
        entry["schema_version"] = _SCHEMA_VERSION
        entry["record_type"] = "move"
        entry["game_id"] = self._game_id
        entry["timestamp"] = datetime.now(timezone.utc).isoformat()
        self._append(entry)

    def finalize_game(
        self,
        winner_color: str,
        winner_id: str | None,
        reason: str,
        extra: dict | None = None,
    ) -> None:
        entry = {
            "schema_version": _SCHEMA_VERSION,
            "record_type": "game_summary",
            "game_id": self._game_id,
            "winner_color": winner_color,
            "winner_id": winner_id,
            "reason": reason,
            "engine_version": coveycheckers.__version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if extra:
            entry.update(extra)
        self._append(entry)

    def _append(self, entry: dict) -> None:
        with open(self._file_path, "a") as f:
            f.write(json.dumps(entry, default=str) + "\n")
