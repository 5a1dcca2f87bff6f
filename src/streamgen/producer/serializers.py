"""Row serializers for the supported value formats."""

import csv
import io
import json
from abc import ABC, abstractmethod
from typing import Any, Dict

from fastavro import parse_schema, schemaless_writer

from streamgen.common.exceptions import InvalidConfigurationError
from streamgen.core.types import GenericRow, ValueFormat
from streamgen.data.converters.avro import row_schema_to_avro
from streamgen.data.schemas.row_schema import RowSchema


class RowSerializer(ABC):
    """Encodes a GenericRow as message bytes."""

    is_binary = False

    def __init__(self, row_schema: RowSchema):
        self.row_schema = row_schema
        self.field_names = row_schema.field_names

    def as_record(self, row: GenericRow) -> Dict[str, Any]:
        return dict(zip(self.field_names, row.columns))

    @abstractmethod
    def serialize(self, row: GenericRow) -> bytes:
        pass


class JsonRowSerializer(RowSerializer):
    """One JSON object per row, keyed by field name."""

    def serialize(self, row: GenericRow) -> bytes:
        return json.dumps(self.as_record(row), default=str).encode("utf-8")


class DelimitedRowSerializer(RowSerializer):
    """Comma-separated columns. Nested types are not supported."""

    def __init__(self, row_schema: RowSchema, delimiter: str = ","):
        super().__init__(row_schema)
        nested = [f.name for f in row_schema.fields if not f.field_schema.is_primitive]
        if nested:
            raise InvalidConfigurationError(
                f"DELIMITED format does not support nested fields: {nested}",
                field_name=nested[0],
            )
        self.delimiter = delimiter

    def serialize(self, row: GenericRow) -> bytes:
        buf = io.StringIO()
        writer = csv.writer(buf, delimiter=self.delimiter, lineterminator="")
        writer.writerow(["" if c is None else c for c in row.columns])
        return buf.getvalue().encode("utf-8")


class AvroRowSerializer(RowSerializer):
    """Schemaless Avro binary against the nullable row schema."""

    is_binary = True

    def __init__(self, row_schema: RowSchema, record_name: str = "Row"):
        super().__init__(row_schema)
        self.avro_schema = row_schema_to_avro(row_schema, name=record_name)
        self._parsed = parse_schema(self.avro_schema)

    def serialize(self, row: GenericRow) -> bytes:
        buf = io.BytesIO()
        schemaless_writer(buf, self._parsed, self.as_record(row))
        return buf.getvalue()


def get_serializer(value_format: ValueFormat, row_schema: RowSchema, topic: str = "Row") -> RowSerializer:
    """Create the serializer for a value format.

    Raises:
        InvalidConfigurationError: If the schema cannot be written in that format.
    """
    value_format = ValueFormat(value_format)
    if value_format == ValueFormat.JSON:
        return JsonRowSerializer(row_schema)
    if value_format == ValueFormat.DELIMITED:
        return DelimitedRowSerializer(row_schema)
    return AvroRowSerializer(row_schema, record_name=_avro_name(topic))


def _avro_name(topic: str) -> str:
    name = "".join(ch if ch.isalnum() or ch == "_" else "_" for ch in topic) or "Row"
    return name if not name[0].isdigit() else f"_{name}"
