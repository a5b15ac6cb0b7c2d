"""Checkers service configuration loader."""

import yaml
from dataclasses import dataclass, field
from pathlib import Path

from coveycheckers.engine import COLORS


@dataclass
class EngineConfig:
    validate_snapshots: bool = True  # legality checks on transported boards


@dataclass
class SessionConfig:
    first_color: str = "black"        # side that moves first
    player_one_color: str = "black"   # color of the first seat


@dataclass
class TelemetryConfig:
    output_dir: Path | None = None    # None disables JSONL game logs


@dataclass
class CheckersConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    log_level: str = "INFO"


def _color(value: str, key: str) -> str:
    if value not in COLORS:
        raise ValueError(f"Invalid {key} {value!r}. Must be 'red' or 'black'.")
    return value


def _flag(value, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Invalid {key} {value!r}. Must be true or false.")
    return value


def load_config(path: Path) -> CheckersConfig:
    """Load service config from YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    engine = raw.get("engine") or {}
    session = raw.get("session") or {}
    telemetry = raw.get("telemetry") or {}
    logging_cfg = raw.get("logging") or {}

    output_dir = telemetry.get("output_dir")

    return CheckersConfig(
        engine=EngineConfig(
            validate_snapshots=_flag(
                engine.get("validate_snapshots", True), "validate_snapshots"
            ),
        ),
        session=SessionConfig(
            first_color=_color(
                session.get("first_color", "black"), "first_color"
            ),
            player_one_color=_color(
                session.get("player_one_color", "black"), "player_one_color"
            ),
        ),
        telemetry=TelemetryConfig(
            output_dir=Path(output_dir) if output_dir else None,
        ),
        log_level=str(logging_cfg.get("level", "INFO")).upper(),
    )
