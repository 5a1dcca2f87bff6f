"""Unit tests for AvroRandomGenerator."""

import json

import pytest

from streamgen.common.exceptions import InvalidConfigurationError
from streamgen.data.generators.avro_generator import AvroRandomGenerator


def record(*fields):
    return {"type": "record", "name": "r", "fields": list(fields)}


def field(name, type_schema):
    return {"name": name, "type": type_schema}


class TestAvroRandomGeneratorInit:
    """Test construction and loading."""

    def test_requires_record(self):
        with pytest.raises(InvalidConfigurationError):
            AvroRandomGenerator({"type": "array", "items": "int"})

    def test_invalid_schema(self):
        with pytest.raises(InvalidConfigurationError):
            AvroRandomGenerator(record(field("a", "nope")))

    def test_from_file(self, tmp_path, nested_schema):
        path = tmp_path / "orders.avsc"
        path.write_text(json.dumps(nested_schema))

        generator = AvroRandomGenerator.from_file(path, seed=1)

        assert generator.schema() == nested_schema

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(InvalidConfigurationError):
            AvroRandomGenerator.from_file(tmp_path / "missing.avsc")

    def test_from_bad_json(self, tmp_path):
        path = tmp_path / "bad.avsc"
        path.write_text("{not json")

        with pytest.raises(InvalidConfigurationError):
            AvroRandomGenerator.from_file(path)

    def test_schema_is_a_copy(self, nested_schema):
        generator = AvroRandomGenerator(nested_schema)

        generator.schema()["fields"].clear()

        assert len(generator.schema()["fields"]) == 5


class TestGenerate:
    """Test generated values."""

    def test_shapes(self, nested_schema):
        generator = AvroRandomGenerator(nested_schema, seed=5)

        for _ in range(20):
            value = generator.generate()
            assert isinstance(value["orderid"], int)
            assert set(value["address"]) == {"city", "zipcode"}
            assert isinstance(value["tags"], list)
            assert all(isinstance(t, str) for t in value["tags"])
            assert all(isinstance(k, str) and isinstance(v, int) for k, v in value["counts"].items())
            assert value["note"] is None or isinstance(value["note"], str)

        assert generator.records_generated == 20

    def test_seed_is_reproducible(self, nested_schema):
        first = AvroRandomGenerator(nested_schema, seed=9)
        second = AvroRandomGenerator(nested_schema, seed=9)

        assert [first.generate() for _ in range(5)] == [second.generate() for _ in range(5)]

    def test_options(self):
        generator = AvroRandomGenerator(record(
            field("s", {"type": "string", "arg.properties": {"options": ["x", "y"]}}),
        ), seed=1)

        assert {generator.generate()["s"] for _ in range(50)} == {"x", "y"}

    def test_range_is_half_open(self):
        generator = AvroRandomGenerator(record(
            field("n", {"type": "int", "arg.properties": {"range": {"min": 1, "max": 4}}}),
        ), seed=1)

        assert {generator.generate()["n"] for _ in range(200)} == {1, 2, 3}

    def test_range_max_only_starts_at_zero(self):
        generator = AvroRandomGenerator(record(
            field("n", {"type": "long", "arg.properties": {"range": {"max": 2}}}),
        ), seed=1)

        assert {generator.generate()["n"] for _ in range(100)} == {0, 1}

    def test_float_range(self):
        generator = AvroRandomGenerator(record(
            field("f", {"type": "double", "arg.properties": {"range": {"min": 5, "max": 6}}}),
        ), seed=1)

        assert all(5 <= generator.generate()["f"] <= 6 for _ in range(50))

    def test_empty_range(self):
        generator = AvroRandomGenerator(record(
            field("n", {"type": "int", "arg.properties": {"range": {"min": 3, "max": 3}}}),
        ))

        with pytest.raises(InvalidConfigurationError):
            generator.generate()

    def test_iteration(self):
        generator = AvroRandomGenerator(record(
            field("n", {"type": "long", "arg.properties": {"iteration": {"start": 1, "step": 10}}}),
        ))

        assert [generator.generate()["n"] for _ in range(3)] == [1, 11, 21]

        generator.reset()
        assert generator.generate()["n"] == 1

    def test_length(self):
        generator = AvroRandomGenerator(record(
            field("s", {"type": "string", "arg.properties": {"length": 3}}),
            field("a", {"type": "array", "items": "int", "arg.properties": {"length": {"min": 2, "max": 4}}}),
        ), seed=2)

        for _ in range(20):
            value = generator.generate()
            assert len(value["s"]) == 3
            assert 2 <= len(value["a"]) < 4

    def test_enum_fixed_and_union(self):
        generator = AvroRandomGenerator(record(
            field("e", {"type": "enum", "name": "Color", "symbols": ["RED", "BLUE"]}),
            field("f", {"type": "fixed", "name": "Four", "size": 4}),
            field("u", ["null", "int"]),
            field("b", "boolean"),
        ), seed=3)

        values = [generator.generate() for _ in range(30)]

        assert {v["e"] for v in values} <= {"RED", "BLUE"}
        assert all(isinstance(v["f"], bytes) and len(v["f"]) == 4 for v in values)
        assert {type(v["u"]) for v in values} == {type(None), int}
        assert {v["b"] for v in values} == {True, False}
