"""Unit tests for Avro schema conversion and nullable widening."""

import pytest
from fastavro import parse_schema

from streamgen.common.exceptions import GeneratorContractViolation, InvalidConfigurationError
from streamgen.data.converters.avro import (
    make_optional,
    optional_value,
    register_named_types,
    row_schema_to_avro,
    to_row_schema,
    validate_avro_schema,
)
from streamgen.data.schemas.row_schema import RowSchema, RowType


def leaves(schema: RowSchema, path=""):
    """Yield (path, schema) for every level of a row schema."""
    yield path, schema
    if schema.type == RowType.STRUCT:
        for f in schema.fields:
            yield from leaves(f.field_schema, f"{path}.{f.name}")
    if schema.key_schema is not None:
        yield from leaves(schema.key_schema, f"{path}<key>")
    if schema.value_schema is not None:
        yield from leaves(schema.value_schema, f"{path}<value>")


class TestValidateAvroSchema:
    def test_valid(self, nested_schema):
        validate_avro_schema(nested_schema)

    @pytest.mark.parametrize("schema", [
        {"type": "record", "name": "r", "fields": [{"name": "a", "type": "nope"}]},
        {"type": "record", "fields": []},
    ])
    def test_invalid(self, schema):
        with pytest.raises(InvalidConfigurationError):
            validate_avro_schema(schema)


class TestToRowSchema:
    """Tests for to_row_schema."""

    @pytest.mark.parametrize("avro,row_type", [
        ("boolean", RowType.BOOLEAN),
        ("int", RowType.INT32),
        ("long", RowType.INT64),
        ("float", RowType.FLOAT32),
        ("double", RowType.FLOAT64),
        ("string", RowType.STRING),
        ("bytes", RowType.BYTES),
        ({"type": "enum", "name": "E", "symbols": ["A"]}, RowType.STRING),
        ({"type": "fixed", "name": "F", "size": 4}, RowType.BYTES),
    ])
    def test_scalar_types(self, avro, row_type):
        assert to_row_schema(avro).type == row_type

    def test_nullable_union(self):
        schema = to_row_schema(["null", "long"])

        assert schema.type == RowType.INT64
        assert schema.optional is True

    @pytest.mark.parametrize("union", [["int", "string"], ["null", "int", "string"], ["null"]])
    def test_unsupported_unions(self, union):
        with pytest.raises(InvalidConfigurationError):
            to_row_schema(union)

    def test_nested_structure(self, nested_schema):
        schema = to_row_schema(nested_schema)

        assert schema.type == RowType.STRUCT
        assert schema.name == "orders"
        assert schema.field_names == ["orderid", "address", "tags", "counts", "note"]
        assert schema.field("address").field_schema.field_names == ["city", "zipcode"]
        assert schema.field("tags").field_schema.value_schema.type == RowType.STRING
        counts = schema.field("counts").field_schema
        assert counts.key_schema.type == RowType.STRING
        assert counts.value_schema.type == RowType.INT64
        assert schema.field("note").field_schema.optional is True

    def test_named_type_reference(self):
        schema = {
            "type": "record",
            "name": "outer",
            "namespace": "ns",
            "fields": [
                {"name": "a", "type": {"type": "record", "name": "Point", "fields": [{"name": "x", "type": "int"}]}},
                {"name": "b", "type": "Point"},
                {"name": "c", "type": "ns.Point"},
            ],
        }
        names = register_named_types(schema, {})

        row = to_row_schema(schema, names)

        assert "ns.Point" in names and "Point" in names
        assert row.field("b").field_schema == row.field("a").field_schema
        assert row.field("c").field_schema.field_names == ["x"]


class TestMakeOptional:
    """Tests for nullable widening."""

    def test_every_level_is_optional(self, nested_schema):
        widened = make_optional(to_row_schema(nested_schema))

        assert all(s.optional for _, s in leaves(widened))

    def test_names_and_depth_preserved(self, nested_schema):
        original = to_row_schema(nested_schema)
        widened = make_optional(original)

        assert [p for p, _ in leaves(widened)] == [p for p, _ in leaves(original)]
        assert [s.type for _, s in leaves(widened)] == [s.type for _, s in leaves(original)]
        assert widened.name == original.name

    def test_bytes_cannot_be_widened(self):
        schema = to_row_schema({
            "type": "record",
            "name": "r",
            "fields": [{"name": "blob", "type": {"type": "array", "items": "bytes"}}],
        })

        with pytest.raises(InvalidConfigurationError) as exc_info:
            make_optional(schema)

        assert "Unsupported type: BYTES" in exc_info.value.message
        assert exc_info.value.details["field_name"] == "blob[]"


class TestOptionalValue:
    """Tests for value conversion."""

    def test_nested_values(self, nested_schema):
        schema = make_optional(to_row_schema(nested_schema))
        value = {
            "orderid": 1,
            "address": {"city": "Lima"},
            "tags": ("a",),
            "counts": {},
            "note": "hi",
        }

        assert optional_value(schema, value) == {
            "orderid": 1,
            "address": {"city": "Lima", "zipcode": None},
            "tags": ["a"],
            "counts": {},
            "note": "hi",
        }

    def test_none_passes_through(self, nested_schema):
        assert optional_value(to_row_schema(nested_schema), None) is None

    @pytest.mark.parametrize("avro,value", [
        ({"type": "array", "items": "int"}, 5),
        ({"type": "map", "values": "int"}, [1]),
        ({"type": "record", "name": "R", "fields": []}, "x"),
    ])
    def test_shape_mismatch(self, avro, value):
        with pytest.raises(GeneratorContractViolation):
            optional_value(to_row_schema(avro), value)


class TestRowSchemaToAvro:
    """Tests for rendering a row schema back to Avro."""

    def test_renders_parseable_nullable_schema(self, nested_schema):
        avro = row_schema_to_avro(make_optional(to_row_schema(nested_schema)), name="orders")

        parse_schema(avro)
        assert avro["type"] == "record"
        assert avro["name"] == "orders"
        fields = {f["name"]: f for f in avro["fields"]}
        assert fields["orderid"]["type"] == ["null", "long"]
        assert fields["orderid"]["default"] is None
        assert fields["tags"]["type"][1]["items"] == ["null", "string"]

    def test_nested_record_names_are_unique(self):
        schema = to_row_schema({
            "type": "record",
            "name": "r",
            "fields": [
                {"name": "a", "type": {"type": "record", "name": "In", "fields": [{"name": "x", "type": "int"}]}},
                {"name": "b", "type": "In"},
            ],
        })

        avro = row_schema_to_avro(make_optional(schema))

        parse_schema(avro)
        names = [f["type"][1]["name"] for f in avro["fields"]]
        assert len(set(names)) == 2
