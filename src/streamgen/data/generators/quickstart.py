"""Bundled quickstart schemas."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from streamgen.common.exceptions import InvalidConfigurationError
from streamgen.data.generators.avro_generator import AvroRandomGenerator

QUICKSTART_DIR = Path(__file__).resolve().parent.parent / "quickstart"

# Default key field for each quickstart schema
QUICKSTART_KEYS = {
    "clickstream": "_time",
    "orders": "orderid",
    "pageviews": "viewtime",
    "users": "userid",
}


def list_quickstart_schemas() -> List[str]:
    return sorted(p.stem for p in QUICKSTART_DIR.glob("*.avsc"))


def load_quickstart_schema(name: str) -> Dict[str, Any]:
    """Load a bundled schema by name (e.g. "clickstream").

    Raises:
        InvalidConfigurationError: If no schema has that name.
    """
    path = QUICKSTART_DIR / f"{name.lower()}.avsc"
    if not path.exists():
        raise InvalidConfigurationError(
            f"Unknown quickstart schema '{name}', expected one of {list_quickstart_schemas()}"
        )
    with open(path, "r") as f:
        return json.load(f)


def quickstart_generator(name: str, seed: Optional[int] = None) -> AvroRandomGenerator:
    return AvroRandomGenerator(load_quickstart_schema(name), seed=seed)
