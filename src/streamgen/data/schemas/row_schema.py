"""Row schema - internal schema model for generated rows."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class RowType(str, Enum):
    """Column types of the internal row representation."""
    BOOLEAN = "BOOLEAN"
    INT32 = "INT32"
    INT64 = "INT64"
    FLOAT32 = "FLOAT32"
    FLOAT64 = "FLOAT64"
    STRING = "STRING"
    BYTES = "BYTES"
    ARRAY = "ARRAY"
    MAP = "MAP"
    STRUCT = "STRUCT"


PRIMITIVE_TYPES = frozenset({
    RowType.BOOLEAN,
    RowType.INT32,
    RowType.INT64,
    RowType.FLOAT32,
    RowType.FLOAT64,
    RowType.STRING,
    RowType.BYTES,
})


class RowField(BaseModel):
    """A named column (or nested struct member)."""
    name: str = Field(..., description="Field name, as declared in the source schema")
    field_schema: "RowSchema" = Field(..., description="Schema of the field value")

    model_config = {"frozen": True}


class RowSchema(BaseModel):
    """Schema of a row value.

    STRUCT schemas carry `fields`; ARRAY schemas carry `value_schema`;
    MAP schemas carry both `key_schema` and `value_schema`.
    """
    type: RowType = Field(..., description="Value type")
    optional: bool = Field(default=False, description="Whether null is allowed")
    name: Optional[str] = Field(default=None, description="Source record name for STRUCT")
    fields: List[RowField] = Field(default_factory=list)
    key_schema: Optional["RowSchema"] = None
    value_schema: Optional["RowSchema"] = None

    model_config = {"frozen": True}

    def field(self, name: str) -> Optional[RowField]:
        """Look up a STRUCT member by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def is_primitive(self) -> bool:
        return self.type in PRIMITIVE_TYPES


RowField.model_rebuild()
RowSchema.model_rebuild()
