"""Data schemas - internal row schema definitions."""

from streamgen.data.schemas.row_schema import RowType, RowField, RowSchema, PRIMITIVE_TYPES

__all__ = [
    "RowType",
    "RowField",
    "RowSchema",
    "PRIMITIVE_TYPES",
]
