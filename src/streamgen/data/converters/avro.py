"""Avro schema conversion.

Maps Avro schemas (as parsed JSON) onto the internal row schema, widens row
schemas so every level is nullable, and converts generated values into the
row representation: records become dicts, arrays lists, maps dicts and enums
strings.
"""

from typing import Any, Dict, Optional

from fastavro import parse_schema
from fastavro.schema import SchemaParseException, UnknownType

from streamgen.common.exceptions import GeneratorContractViolation, InvalidConfigurationError
from streamgen.data.schemas.row_schema import RowField, RowSchema, RowType

AVRO_PRIMITIVES: Dict[str, RowType] = {
    "boolean": RowType.BOOLEAN,
    "int": RowType.INT32,
    "long": RowType.INT64,
    "float": RowType.FLOAT32,
    "double": RowType.FLOAT64,
    "string": RowType.STRING,
    "bytes": RowType.BYTES,
}

ROW_TO_AVRO: Dict[RowType, str] = {v: k for k, v in AVRO_PRIMITIVES.items()}

# Types that survive nullable widening unchanged apart from the optional flag.
WIDENABLE_PRIMITIVES = frozenset({
    RowType.BOOLEAN,
    RowType.INT32,
    RowType.INT64,
    RowType.FLOAT32,
    RowType.FLOAT64,
    RowType.STRING,
})


def validate_avro_schema(schema: Any) -> None:
    """Validate an Avro schema with fastavro.

    Raises:
        InvalidConfigurationError: If the schema is not valid Avro.
    """
    try:
        parse_schema(schema)
    except (SchemaParseException, UnknownType, TypeError, ValueError, KeyError) as e:
        raise InvalidConfigurationError(f"Invalid Avro schema: {e}") from e


def _full_name(schema: Dict[str, Any], namespace: Optional[str]) -> str:
    name = schema["name"]
    if "." in name:
        return name
    ns = schema.get("namespace", namespace)
    return f"{ns}.{name}" if ns else name


def register_named_types(
    schema: Any,
    names: Dict[str, Dict[str, Any]],
    namespace: Optional[str] = None,
) -> Dict[str, Dict[str, Any]]:
    """Collect record, enum and fixed definitions by short and full name."""
    if isinstance(schema, list):
        for branch in schema:
            register_named_types(branch, names, namespace)
    elif isinstance(schema, dict):
        kind = schema.get("type")
        if isinstance(kind, (dict, list)):
            register_named_types(kind, names, namespace)
        elif kind in ("record", "error", "enum", "fixed"):
            full = _full_name(schema, namespace)
            names[full] = schema
            names.setdefault(schema["name"].split(".")[-1], schema)
            inner_ns = full.rsplit(".", 1)[0] if "." in full else None
            for f in schema.get("fields", []):
                register_named_types(f["type"], names, inner_ns)
        elif kind == "array":
            register_named_types(schema.get("items"), names, namespace)
        elif kind == "map":
            register_named_types(schema.get("values"), names, namespace)
    return names


def resolve_type(schema: Any, names: Dict[str, Dict[str, Any]]) -> Any:
    """Dereference a named-type reference; other schemas are returned as is."""
    if isinstance(schema, str) and schema not in AVRO_PRIMITIVES and schema != "null":
        if schema not in names:
            raise InvalidConfigurationError(f"Unknown Avro type: {schema}")
        return names[schema]
    if isinstance(schema, dict) and isinstance(schema.get("type"), (dict, list, str)):
        inner = schema["type"]
        if isinstance(inner, (dict, list)):
            return resolve_type(inner, names)
    return schema


def to_row_schema(
    schema: Any,
    names: Optional[Dict[str, Dict[str, Any]]] = None,
    path: str = "",
) -> RowSchema:
    """Convert an Avro schema into a RowSchema.

    Unions of `null` and one other type become an optional schema of that
    type. Other unions, and a bare `null`, are rejected.

    Raises:
        InvalidConfigurationError: For types with no row equivalent.
    """
    if names is None:
        names = register_named_types(schema, {})

    schema = resolve_type(schema, names)

    if isinstance(schema, list):
        branches = [b for b in schema if b != "null"]
        if len(branches) != 1:
            raise InvalidConfigurationError(
                f"Unsupported union at '{path}': {schema}", field_name=path or None
            )
        inner = to_row_schema(branches[0], names, path)
        return inner.model_copy(update={"optional": "null" in schema})

    kind = schema if isinstance(schema, str) else schema.get("type")

    if kind in AVRO_PRIMITIVES:
        return RowSchema(type=AVRO_PRIMITIVES[kind])
    if kind in ("record", "error"):
        fields = []
        for f in schema.get("fields", []):
            child_path = f"{path}.{f['name']}" if path else f["name"]
            fields.append(RowField(name=f["name"], field_schema=to_row_schema(f["type"], names, child_path)))
        return RowSchema(type=RowType.STRUCT, name=schema.get("name"), fields=fields)
    if kind == "enum":
        return RowSchema(type=RowType.STRING)
    if kind == "fixed":
        return RowSchema(type=RowType.BYTES)
    if kind == "array":
        return RowSchema(
            type=RowType.ARRAY,
            value_schema=to_row_schema(schema["items"], names, f"{path}[]"),
        )
    if kind == "map":
        return RowSchema(
            type=RowType.MAP,
            key_schema=RowSchema(type=RowType.STRING),
            value_schema=to_row_schema(schema["values"], names, f"{path}{{}}"),
        )

    raise InvalidConfigurationError(
        f"Unsupported type at '{path}': {kind}", field_name=path or None
    )


def make_optional(schema: RowSchema, path: str = "") -> RowSchema:
    """Widen a schema so it, and every nested level, is optional.

    Field names, nesting depth and record names are preserved.

    Raises:
        InvalidConfigurationError: If a type cannot be widened.
    """
    if schema.type in WIDENABLE_PRIMITIVES:
        return RowSchema(type=schema.type, optional=True)
    if schema.type == RowType.ARRAY:
        return RowSchema(
            type=RowType.ARRAY,
            optional=True,
            value_schema=make_optional(schema.value_schema, f"{path}[]"),
        )
    if schema.type == RowType.MAP:
        return RowSchema(
            type=RowType.MAP,
            optional=True,
            key_schema=make_optional(schema.key_schema, path),
            value_schema=make_optional(schema.value_schema, f"{path}{{}}"),
        )
    if schema.type == RowType.STRUCT:
        fields = [
            RowField(
                name=f.name,
                field_schema=make_optional(f.field_schema, f"{path}.{f.name}" if path else f.name),
            )
            for f in schema.fields
        ]
        return RowSchema(type=RowType.STRUCT, optional=True, name=schema.name, fields=fields)

    raise InvalidConfigurationError(
        f"Unsupported type: {schema.type.value} at '{path}'", field_name=path or None
    )


def optional_value(schema: RowSchema, value: Any) -> Any:
    """Convert a generated value into the row representation for `schema`.

    Raises:
        GeneratorContractViolation: If the value does not fit the schema shape.
    """
    if value is None or schema.is_primitive:
        return value
    if schema.type == RowType.ARRAY:
        if not isinstance(value, (list, tuple)):
            raise GeneratorContractViolation(
                f"Expected a list for ARRAY value, found {type(value).__name__}",
                returned_type=type(value).__name__,
            )
        return [optional_value(schema.value_schema, item) for item in value]
    if schema.type == RowType.MAP:
        if not isinstance(value, dict):
            raise GeneratorContractViolation(
                f"Expected a dict for MAP value, found {type(value).__name__}",
                returned_type=type(value).__name__,
            )
        return {
            optional_value(schema.key_schema, k): optional_value(schema.value_schema, v)
            for k, v in value.items()
        }
    # STRUCT
    if not isinstance(value, dict):
        raise GeneratorContractViolation(
            f"Expected a dict for STRUCT value, found {type(value).__name__}",
            returned_type=type(value).__name__,
        )
    return {
        f.name: optional_value(f.field_schema, value.get(f.name))
        for f in schema.fields
    }


def row_schema_to_avro(schema: RowSchema, name: str = "Row") -> Any:
    """Render a row schema back to Avro, with optional levels as `["null", T]` unions."""
    counter = [0]

    def render(s: RowSchema, record_name: str) -> Any:
        if s.is_primitive:
            avro: Any = ROW_TO_AVRO[s.type]
        elif s.type == RowType.ARRAY:
            avro = {"type": "array", "items": render(s.value_schema, f"{record_name}_item")}
        elif s.type == RowType.MAP:
            avro = {"type": "map", "values": render(s.value_schema, f"{record_name}_value")}
        else:
            counter[0] += 1
            unique = record_name if counter[0] == 1 else f"{record_name}_{counter[0]}"
            avro = {
                "type": "record",
                "name": unique,
                "fields": [
                    {
                        "name": f.name,
                        "type": render(f.field_schema, f"{unique}_{f.name}"),
                        **({"default": None} if f.field_schema.optional else {}),
                    }
                    for f in s.fields
                ],
            }
        return ["null", avro] if s.optional else avro

    rendered = render(schema, name)
    # the top-level record itself must not be a union
    if isinstance(rendered, list):
        return rendered[1]
    return rendered
