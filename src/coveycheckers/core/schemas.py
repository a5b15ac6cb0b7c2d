"""Schema loading utility."""

import json
from pathlib import Path

SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"


def load_schema(path: Path) -> dict:
    """Load a JSON Schema file and return as dict."""
    with open(path) as f:
        return json.load(f)


def schema_path(name: str) -> Path:
    """Path of a schema bundled with the package, e.g. 'move_request'."""
    return SCHEMAS_DIR / f"{name}.json"
