"""Sink clients - deliver serialized rows and report outcomes asynchronously.

Every sink accepts `(topic, key, row)` plus a callback that receives one
DeliveryReport per message. `send` never blocks on delivery.
"""

import logging
import queue
import sys
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, TextIO, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from confluent_kafka import KafkaException, Producer, TIMESTAMP_NOT_AVAILABLE

from streamgen.common.config.settings import Config
from streamgen.common.constants import DeliveryConstants, KinesisConstants
from streamgen.common.exceptions import DeliveryError, InvalidConfigurationError
from streamgen.core.types import DeliveryReport, GenericRow, SinkType
from streamgen.producer.serializers import RowSerializer

logger = logging.getLogger(__name__)

DeliveryCallback = Callable[[DeliveryReport], None]


def log_delivery(report: DeliveryReport) -> None:
    """Default delivery callback: one log line per message."""
    if report.success:
        logger.info(f"{report.key} --> ({report.row}) ts:{report.timestamp}")
    else:
        logger.error(
            f"Error when sending message to topic: '{report.topic}', with key: "
            f"'{report.key}', and value: '{report.row}': {report.error}"
        )


class Sink(ABC):
    """Base class for sink clients."""

    def __init__(self, serializer: RowSerializer):
        self.serializer = serializer

    def _failure(self, topic: str, key: str, row: GenericRow, error: Any) -> DeliveryReport:
        return DeliveryReport(
            topic=topic,
            key=key,
            row=row,
            success=False,
            error=DeliveryError(str(error), topic=topic, key=key),
        )

    @abstractmethod
    def send(self, topic: str, key: str, row: GenericRow, callback: DeliveryCallback) -> None:
        """Hand one row to the sink without waiting for delivery."""
        pass

    def flush(self, timeout: Optional[float] = None) -> int:
        """Wait for outstanding deliveries. Returns the number still pending."""
        return 0

    def close(self) -> None:
        pass


class KafkaSink(Sink):
    """Kafka producer sink backed by confluent-kafka."""

    def __init__(
        self,
        serializer: RowSerializer,
        properties: Optional[Dict[str, Any]] = None,
        producer: Optional[Any] = None,
    ):
        super().__init__(serializer)
        self.properties = properties or {}
        self.producer = producer if producer is not None else Producer(self.properties)
        logger.info(f"Initialized KafkaSink: {self.properties.get('bootstrap.servers')}")

    def send(self, topic: str, key: str, row: GenericRow, callback: DeliveryCallback) -> None:
        try:
            value = self.serializer.serialize(row)
        except (ValueError, TypeError) as e:
            callback(self._failure(topic, key, row, f"Serialization failed: {e}"))
            return

        def on_delivery(err, msg):
            if err is not None:
                callback(self._failure(topic, key, row, err))
                return
            ts_type, ts = msg.timestamp()
            callback(DeliveryReport(
                topic=topic,
                key=key,
                row=row,
                success=True,
                timestamp=None if ts_type == TIMESTAMP_NOT_AVAILABLE else ts,
            ))

        encoded_key = key.encode("utf-8")
        try:
            try:
                self.producer.produce(topic, key=encoded_key, value=value, on_delivery=on_delivery)
            except BufferError:
                logger.warning("Local producer queue is full, waiting for deliveries")
                self.producer.poll(DeliveryConstants.BUFFER_FULL_POLL_SECONDS)
                self.producer.produce(topic, key=encoded_key, value=value, on_delivery=on_delivery)
        except (BufferError, KafkaException) as e:
            callback(self._failure(topic, key, row, e))
        self.producer.poll(0)

    def flush(self, timeout: Optional[float] = None) -> int:
        timeout = DeliveryConstants.FLUSH_TIMEOUT_SECONDS if timeout is None else timeout
        remaining = self.producer.flush(timeout)
        if remaining:
            logger.warning(f"{remaining} messages still pending after flush")
        return remaining

    def close(self) -> None:
        self.flush()
        logger.info("KafkaSink closed")


class KinesisSink(Sink):
    """Kinesis sink: put_record calls run on a background writer thread.

    The topic is used as the stream name and the row key as the partition key.
    """

    DEFAULT_REGION = "us-east-1"

    def __init__(
        self,
        serializer: RowSerializer,
        region: Optional[str] = None,
        aws_profile: Optional[str] = None,
        client: Optional[Any] = None,
        max_queue_size: int = KinesisConstants.QUEUE_SIZE,
        shutdown_timeout: float = KinesisConstants.SHUTDOWN_TIMEOUT_SECONDS,
    ):
        super().__init__(serializer)
        self.region = region or self.DEFAULT_REGION
        self.shutdown_timeout = shutdown_timeout

        if client is not None:
            self.client = client
        elif aws_profile:
            session = boto3.Session(profile_name=aws_profile)
            self.client = session.client("kinesis", region_name=self.region)
        else:
            self.client = boto3.client("kinesis", region_name=self.region)

        self._queue: "queue.Queue[Optional[Tuple]]" = queue.Queue(maxsize=max_queue_size)
        self._shutdown_event = threading.Event()
        self._sync_fallback_count = 0
        self._writer_thread = threading.Thread(
            target=self._writer_loop,
            name="KinesisWriter",
            daemon=True,
        )
        self._writer_thread.start()
        logger.info(f"Initialized KinesisSink: region={self.region}")

    def _put(self, item: Tuple) -> None:
        topic, key, row, callback = item
        try:
            value = self.serializer.serialize(row)
        except (ValueError, TypeError) as e:
            callback(self._failure(topic, key, row, f"Serialization failed: {e}"))
            return
        try:
            self.client.put_record(
                StreamName=topic,
                Data=value,
                PartitionKey=key or "-",
            )
        except (ClientError, BotoCoreError) as e:
            callback(self._failure(topic, key, row, e))
            return
        callback(DeliveryReport(
            topic=topic,
            key=key,
            row=row,
            success=True,
            timestamp=int(time.time() * 1000),
        ))

    def _writer_loop(self) -> None:
        while not self._shutdown_event.is_set():
            try:
                item = self._queue.get(timeout=KinesisConstants.QUEUE_GET_TIMEOUT)
            except queue.Empty:
                continue
            try:
                if item is None:
                    break
                self._put(item)
            finally:
                self._queue.task_done()
        self._drain_queue()

    def _drain_queue(self) -> None:
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            try:
                if item is not None:
                    self._put(item)
            finally:
                self._queue.task_done()

    def send(self, topic: str, key: str, row: GenericRow, callback: DeliveryCallback) -> None:
        item = (topic, key, row, callback)
        if self._shutdown_event.is_set():
            self._put(item)
            return
        try:
            self._queue.put_nowait(item)
        except queue.Full:
            self._sync_fallback_count += 1
            logger.warning("Kinesis queue full, writing synchronously")
            self._put(item)

    def flush(self, timeout: Optional[float] = None) -> int:
        timeout = DeliveryConstants.FLUSH_TIMEOUT_SECONDS if timeout is None else timeout
        deadline = time.monotonic() + timeout
        with self._queue.all_tasks_done:
            while self._queue.unfinished_tasks and self._writer_thread.is_alive():
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self._queue.all_tasks_done.wait(min(remaining, KinesisConstants.QUEUE_GET_TIMEOUT))
            pending = self._queue.unfinished_tasks
        if pending:
            logger.warning(f"{pending} records still pending after flush")
        return pending

    def close(self) -> None:
        if self._shutdown_event.is_set():
            return
        self._shutdown_event.set()
        try:
            self._queue.put_nowait(None)
        except queue.Full:
            pass  # writer sees the shutdown event
        if self._writer_thread.is_alive():
            self._writer_thread.join(timeout=self.shutdown_timeout)
            if self._writer_thread.is_alive():
                logger.warning("Kinesis writer did not stop cleanly")
        logger.info(f"KinesisSink closed. Sync fallbacks: {self._sync_fallback_count}")


class StdoutSink(Sink):
    """Writes `key\tvalue` lines to a stream; delivery is immediate."""

    def __init__(self, serializer: RowSerializer, stream: Optional[TextIO] = None):
        super().__init__(serializer)
        self.stream = stream or sys.stdout

    def send(self, topic: str, key: str, row: GenericRow, callback: DeliveryCallback) -> None:
        try:
            value = self.serializer.serialize(row)
        except (ValueError, TypeError) as e:
            callback(self._failure(topic, key, row, f"Serialization failed: {e}"))
            return
        text = value.hex() if self.serializer.is_binary else value.decode("utf-8")
        self.stream.write(f"{key}\t{text}\n")
        callback(DeliveryReport(
            topic=topic,
            key=key,
            row=row,
            success=True,
            timestamp=int(time.time() * 1000),
        ))

    def flush(self, timeout: Optional[float] = None) -> int:
        self.stream.flush()
        return 0


def create_sink(config: Config, serializer: RowSerializer) -> Sink:
    """Build the sink selected by `config.sink_type`."""
    if config.sink_type == SinkType.KAFKA:
        return KafkaSink(serializer, properties=config.kafka_properties())
    if config.sink_type == SinkType.KINESIS:
        return KinesisSink(serializer, region=config.aws_region)
    if config.sink_type == SinkType.STDOUT:
        return StdoutSink(serializer)
    raise InvalidConfigurationError(f"Unsupported sink: {config.sink_type}")
