#!/usr/bin/env python3
"""Produce synthetic streaming data from an Avro schema.

Usage:
    streamgen --quickstart clickstream --sink stdout --iterations 20
    streamgen --schema users.avsc --key userid --topic users --max-sessions 5

Fields tagged `session` keep recurring session ids; see SessionManager.
"""

import argparse
import signal
import sys
import threading
from dataclasses import replace
from typing import List, Optional

from streamgen.common.config.settings import Config, LogLevel
from streamgen.common.exceptions import InvalidConfigurationError, StreamgenException
from streamgen.common.logging.logger import get_logger
from streamgen.core.types import SinkType, ValueFormat
from streamgen.data.generators.avro_generator import AvroRandomGenerator
from streamgen.data.generators.quickstart import (
    QUICKSTART_KEYS,
    list_quickstart_schemas,
    quickstart_generator,
)
from streamgen.producer.datagen_producer import DataGenProducer
from streamgen.producer.row_builder import build_row_schema
from streamgen.producer.serializers import get_serializer
from streamgen.producer.sinks import create_sink
from streamgen.sessions.manager import SessionManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="streamgen",
        description="Produce synthetic rows with simulated session affinity",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--schema", type=str, help="Path to an Avro schema file")
    source.add_argument(
        "--quickstart",
        type=str,
        choices=list_quickstart_schemas(),
        help="Use a bundled schema",
    )
    parser.add_argument("--topic", type=str, default=None, help="Destination topic / stream")
    parser.add_argument("--key", type=str, default=None, help="Field used as the message key")
    parser.add_argument("--iterations", type=int, default=None, help="Number of messages")
    parser.add_argument(
        "--max-interval",
        type=int,
        default=None,
        help="Max milliseconds between messages (negative for the default)",
    )
    parser.add_argument("--max-sessions", type=int, default=None, help="Max concurrent sessions")
    parser.add_argument(
        "--session-duration",
        type=int,
        default=None,
        help="Max session duration in seconds",
    )
    parser.add_argument(
        "--format",
        type=str.upper,
        choices=[f.value for f in ValueFormat],
        default=None,
        help="Value format",
    )
    parser.add_argument(
        "--sink",
        type=str.lower,
        choices=[s.value for s in SinkType],
        default=None,
        help="Sink backend",
    )
    parser.add_argument("--bootstrap-servers", type=str, default=None, help="Kafka bootstrap servers")
    parser.add_argument("--properties-file", type=str, default=None, help="YAML producer properties")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=[level.value for level in LogLevel],
        default=None,
        help="Log level",
    )
    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Layer command line flags over the environment-derived config."""
    overrides = {
        "topic": args.topic,
        "key": args.key,
        "iterations": args.iterations,
        "max_interval_ms": args.max_interval,
        "max_sessions": args.max_sessions,
        "session_duration_seconds": args.session_duration,
        "value_format": ValueFormat(args.format) if args.format else None,
        "sink_type": SinkType(args.sink) if args.sink else None,
        "bootstrap_servers": args.bootstrap_servers,
        "properties_file": args.properties_file,
        "seed": args.seed,
        "log_level": LogLevel(args.log_level) if args.log_level else None,
    }
    if args.quickstart:
        if overrides["topic"] is None and config.topic is None:
            overrides["topic"] = args.quickstart
        if overrides["key"] is None and config.key is None:
            overrides["key"] = QUICKSTART_KEYS[args.quickstart]
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = get_logger("streamgen", "INFO")

    try:
        config = apply_overrides(Config(), args)
        logger.setLevel(config.log_level.value)

        if not config.topic:
            raise InvalidConfigurationError("A topic is required (--topic or STREAMGEN_TOPIC)")
        if not config.key:
            raise InvalidConfigurationError("A key field is required (--key or STREAMGEN_KEY)")

        if args.quickstart:
            generator = quickstart_generator(args.quickstart, seed=config.seed)
        else:
            generator = AvroRandomGenerator.from_file(args.schema, seed=config.seed)

        session_manager = SessionManager(
            max_sessions=config.max_sessions,
            max_session_duration_seconds=config.session_duration_seconds,
            seed=config.seed,
        )
        serializer = get_serializer(config.value_format, build_row_schema(generator.schema()), config.topic)
        sink = create_sink(config, serializer)

        stop_event = threading.Event()

        def request_stop(signum, frame):
            logger.info(f"Received signal {signum}, stopping after the current message")
            stop_event.set()

        signal.signal(signal.SIGINT, request_stop)
        signal.signal(signal.SIGTERM, request_stop)

        producer = DataGenProducer(sink, seed=config.seed)
        stats = producer.populate_topic(
            generator,
            topic=config.topic,
            key=config.key,
            message_count=config.iterations,
            max_interval_ms=config.max_interval_ms,
            session_manager=session_manager,
            stop_event=stop_event,
        )
    except StreamgenException as e:
        logger.error(f"{e.code}: {e.message}")
        return 1

    return 0 if stats.failed == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
