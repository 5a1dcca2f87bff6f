"""Schema conversion - Avro to internal row schema."""

from streamgen.data.converters.avro import (
    validate_avro_schema,
    register_named_types,
    resolve_type,
    to_row_schema,
    make_optional,
    optional_value,
    row_schema_to_avro,
)

__all__ = [
    "validate_avro_schema",
    "register_named_types",
    "resolve_type",
    "to_row_schema",
    "make_optional",
    "optional_value",
    "row_schema_to_avro",
]
