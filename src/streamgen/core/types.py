"""Core types and enums."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class ValueFormat(str, Enum):
    """Wire formats for row values."""
    JSON = "JSON"
    DELIMITED = "DELIMITED"
    AVRO = "AVRO"


class SinkType(str, Enum):
    """Sink client backends."""
    KAFKA = "kafka"
    KINESIS = "kinesis"
    STDOUT = "stdout"


@dataclass
class GenericRow:
    """One generated row; column values in schema order."""
    columns: List[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.columns)

    def __str__(self) -> str:
        return "[ " + " | ".join(repr(c) for c in self.columns) + " ]"


@dataclass
class DeliveryReport:
    """Outcome of delivering one message to a sink.

    `timestamp` is the sink-assigned delivery time in epoch milliseconds
    when known; `error` is set only for failed deliveries.
    """
    topic: str
    key: str
    row: GenericRow
    success: bool
    timestamp: Optional[int] = None
    error: Optional[Exception] = None
