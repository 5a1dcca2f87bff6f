"""Data layer - row schemas, schema conversion, generators."""

from streamgen.data.schemas import RowType, RowField, RowSchema
from streamgen.data.generators import AvroRandomGenerator, BaseGenerator

__all__ = [
    "RowType",
    "RowField",
    "RowSchema",
    "AvroRandomGenerator",
    "BaseGenerator",
]
