"""Random record generator driven by an Avro schema.

Generation is steered by the `arg.properties` annotation on a type:

    {"type": "string", "arg.properties": {"options": ["a", "b"]}}
    {"type": "int", "arg.properties": {"range": {"min": 1, "max": 40}}}
    {"type": "long", "arg.properties": {"iteration": {"start": 1, "step": 10}}}
    {"type": "string", "arg.properties": {"length": {"min": 4, "max": 8}}}
    {"type": "array", "items": "int", "arg.properties": {"length": 3}}

`range.max` is exclusive. Types without annotations get uniformly random
values of the right shape.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from streamgen.common.constants import FieldTags, GeneratorConstants
from streamgen.common.exceptions import InvalidConfigurationError
from streamgen.data.converters.avro import (
    register_named_types,
    resolve_type,
    validate_avro_schema,
)
from streamgen.data.generators.base_generator import BaseGenerator

logger = logging.getLogger(__name__)

NUMERIC_BOUNDS = {
    "int": (GeneratorConstants.INT_MIN, GeneratorConstants.INT_MAX),
    "long": (GeneratorConstants.LONG_MIN, GeneratorConstants.LONG_MAX),
    "float": (0.0, 1.0),
    "double": (0.0, 1.0),
}


class AvroRandomGenerator(BaseGenerator):
    """Generates dict records matching an Avro record schema."""

    def __init__(self, schema: Dict[str, Any], seed: Optional[int] = None):
        super().__init__(seed=seed)
        validate_avro_schema(schema)
        if not isinstance(schema, dict) or schema.get("type") != "record":
            raise InvalidConfigurationError("Top-level Avro schema must be a record")
        self._schema = schema
        self._names = register_named_types(schema, {})
        self._iterations: Dict[str, Union[int, float]] = {}

    @classmethod
    def from_file(cls, path: Union[str, Path], seed: Optional[int] = None) -> "AvroRandomGenerator":
        """Load a schema from a `.avsc` / `.avro` JSON file."""
        path = Path(path)
        if not path.exists():
            raise InvalidConfigurationError(f"Schema file not found: {path}")
        with open(path, "r") as f:
            try:
                schema = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidConfigurationError(f"Schema file is not valid JSON: {path}: {e}") from e
        return cls(schema, seed=seed)

    def reset(self):
        super().reset()
        self._iterations = {}

    def schema(self) -> Dict[str, Any]:
        return copy.deepcopy(self._schema)

    def generate(self) -> Dict[str, Any]:
        self._record_counter += 1
        return self._generate(self._schema, "")

    # ------------------------------------------------------------------

    def _generate(self, schema: Any, path: str) -> Any:
        schema = resolve_type(schema, self._names)

        if isinstance(schema, list):
            return self._generate(self._random_choice(schema), path)

        kind = schema if isinstance(schema, str) else schema.get("type")
        props = {}
        if isinstance(schema, dict):
            props = schema.get(FieldTags.ARG_PROPERTIES) or {}

        if "options" in props:
            return self._random_choice(props["options"])

        if kind == "null":
            return None
        if kind == "boolean":
            return self._random_bool()
        if kind in NUMERIC_BOUNDS:
            return self._generate_number(kind, props, path)
        if kind == "string":
            return self._random_string(self._length(props, GeneratorConstants.STRING_LENGTH_MIN,
                                                    GeneratorConstants.STRING_LENGTH_MAX))
        if kind == "bytes":
            return self._random_bytes(self._length(props, GeneratorConstants.STRING_LENGTH_MIN,
                                                   GeneratorConstants.STRING_LENGTH_MAX))
        if kind == "fixed":
            return self._random_bytes(schema["size"])
        if kind == "enum":
            return self._random_choice(schema["symbols"])
        if kind == "array":
            length = self._length(props, GeneratorConstants.COLLECTION_LENGTH_MIN,
                                  GeneratorConstants.COLLECTION_LENGTH_MAX)
            return [self._generate(schema["items"], f"{path}[]") for _ in range(length)]
        if kind == "map":
            length = self._length(props, GeneratorConstants.COLLECTION_LENGTH_MIN,
                                  GeneratorConstants.COLLECTION_LENGTH_MAX)
            return {
                self._random_string(GeneratorConstants.STRING_LENGTH_MIN): self._generate(
                    schema["values"], f"{path}{{}}"
                )
                for _ in range(length)
            }
        if kind in ("record", "error"):
            return {
                f["name"]: self._generate(f["type"], f"{path}.{f['name']}" if path else f["name"])
                for f in schema.get("fields", [])
            }

        raise InvalidConfigurationError(f"Cannot generate values for type '{kind}' at '{path}'")

    def _generate_number(self, kind: str, props: Dict[str, Any], path: str) -> Union[int, float]:
        integral = kind in ("int", "long")

        iteration = props.get("iteration")
        if isinstance(iteration, dict):
            step = iteration.get("step", 1)
            if path not in self._iterations:
                self._iterations[path] = iteration.get("start", 0)
            else:
                self._iterations[path] += step
            return self._iterations[path]

        low, high = NUMERIC_BOUNDS[kind]
        value_range = props.get("range")
        if isinstance(value_range, dict):
            low = value_range.get("min", 0 if "max" in value_range else low)
            high = value_range.get("max", high)
            if low >= high:
                raise InvalidConfigurationError(
                    f"Empty range at '{path}': min={low}, max={high}", field_name=path
                )

        if integral:
            return self._random_int(int(low), int(high))
        return self._random_float(float(low), float(high))

    def _length(self, props: Dict[str, Any], default_min: int, default_max: int) -> int:
        length = props.get("length")
        if isinstance(length, int) and not isinstance(length, bool):
            return length
        if isinstance(length, dict):
            low = length.get("min", default_min)
            high = length.get("max", low + 1)
            return self._random_int(low, max(high, low + 1))
        return self._random_int(default_min, default_max + 1)
