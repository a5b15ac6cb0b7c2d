"""Wire parsing: move requests and board snapshots.

Incoming payloads are validated against the JSON Schemas bundled in
``coveycheckers/schemas`` before anything reaches the engine. Move requests
never raise on bad input; the caller gets a ParseResult with the reason.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache

import jsonschema

from coveycheckers.core.schemas import load_schema, schema_path
from coveycheckers.engine import MalformedSnapshotError, Pos


@lru_cache(maxsize=None)
def _schema(name: str) -> dict:
    return load_schema(schema_path(name))


@dataclass(frozen=True)
class MoveRequest:
    """A request to move the piece on *source* to *dest*."""

    source: Pos
    dest: Pos
    current_color: str

    def to_dict(self) -> dict:
        return {
            "source": self.source.to_dict(),
            "dest": self.dest.to_dict(),
            "currentColor": self.current_color,
        }


@dataclass(frozen=True)
class ParseResult:
    """Result of parsing a move request payload."""

    success: bool
    request: MoveRequest | None
    error: str | None


class MoveRequestParser:
    """Turn a raw move-request payload (dict or JSON text) into a MoveRequest."""

    def __init__(self, schema: dict | None = None) -> None:
        self._schema = schema or _schema("move_request")

    def parse(self, payload) -> ParseResult:
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as e:
                return ParseResult(False, None, f"JSON parse error: {e}")

        if not isinstance(payload, dict):
            return ParseResult(False, None, "Move request is not an object")

        try:
            jsonschema.validate(payload, self._schema)
        except jsonschema.ValidationError as e:
            return ParseResult(False, None, f"Schema validation: {e.message}")

        request = MoveRequest(
            source=Pos.from_dict(payload["source"]),
            dest=Pos.from_dict(payload["dest"]),
            current_color=payload["currentColor"],
        )
        return ParseResult(True, request, None)


def validate_snapshot_payload(payload) -> None:
    """Check a raw snapshot against the board schema.

    Raises MalformedSnapshotError with the schema's message on failure.
    """
    try:
        jsonschema.validate(payload, _schema("board_snapshot"))
    except jsonschema.ValidationError as e:
        raise MalformedSnapshotError(f"Schema validation: {e.message}") from e
