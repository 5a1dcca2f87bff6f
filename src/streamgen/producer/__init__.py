"""Producer - row assembly, serialization, sinks and the delivery loop."""

from streamgen.producer.row_builder import RowAssembler, build_row_schema
from streamgen.producer.serializers import (
    RowSerializer,
    JsonRowSerializer,
    DelimitedRowSerializer,
    AvroRowSerializer,
    get_serializer,
)
from streamgen.producer.sinks import (
    Sink,
    KafkaSink,
    KinesisSink,
    StdoutSink,
    create_sink,
    log_delivery,
)
from streamgen.producer.datagen_producer import DataGenProducer, ProduceStats

__all__ = [
    "RowAssembler",
    "build_row_schema",
    "RowSerializer",
    "JsonRowSerializer",
    "DelimitedRowSerializer",
    "AvroRowSerializer",
    "get_serializer",
    "Sink",
    "KafkaSink",
    "KinesisSink",
    "StdoutSink",
    "create_sink",
    "log_delivery",
    "DataGenProducer",
    "ProduceStats",
]
