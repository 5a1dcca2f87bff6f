"""Core types and clock."""

from streamgen.core.types import (
    ValueFormat,
    SinkType,
    GenericRow,
    DeliveryReport,
)
from streamgen.core.clock import Clock, SystemClock, MockClock

__all__ = [
    "ValueFormat",
    "SinkType",
    "GenericRow",
    "DeliveryReport",
    "Clock",
    "SystemClock",
    "MockClock",
]
