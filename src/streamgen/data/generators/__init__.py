"""Synthetic record generators."""

from streamgen.data.generators.base_generator import BaseGenerator
from streamgen.data.generators.avro_generator import AvroRandomGenerator
from streamgen.data.generators.quickstart import (
    QUICKSTART_KEYS,
    list_quickstart_schemas,
    load_quickstart_schema,
    quickstart_generator,
)

__all__ = [
    "BaseGenerator",
    "AvroRandomGenerator",
    "QUICKSTART_KEYS",
    "list_quickstart_schemas",
    "load_quickstart_schema",
    "quickstart_generator",
]
