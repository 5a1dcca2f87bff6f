"""Delivery loop - produces generated rows to a sink at randomized intervals."""

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from streamgen.common.constants import DeliveryConstants
from streamgen.core.types import DeliveryReport
from streamgen.data.generators.base_generator import BaseGenerator
from streamgen.producer.row_builder import RowAssembler
from streamgen.producer.sinks import DeliveryCallback, Sink, log_delivery
from streamgen.sessions.manager import SessionManager
from streamgen.sessions.resolver import SessionResolver

logger = logging.getLogger(__name__)


@dataclass
class ProduceStats:
    """Counters for one populate_topic run."""
    produced: int = 0
    delivered: int = 0
    failed: int = 0


class DataGenProducer:
    """Runs the generate → send → sleep loop on the calling thread.

    Only delivery is asynchronous; outcomes reach `on_delivery` through the
    sink. Cancellation via `stop_event` is honored between messages, never
    during the pacing sleep.
    """

    def __init__(
        self,
        sink: Sink,
        on_delivery: Optional[DeliveryCallback] = None,
        sleep: Callable[[float], None] = time.sleep,
        seed: Optional[int] = None,
    ):
        self.sink = sink
        self.on_delivery = on_delivery or log_delivery
        self._sleep = sleep
        self._rng = random.Random(seed)
        self._stats_lock = threading.Lock()

    def _pause(self, interval_ms: float) -> None:
        delay = interval_ms * self._rng.random() / 1000.0
        if delay > 0:
            self._sleep(delay)

    def populate_topic(
        self,
        generator: BaseGenerator,
        topic: str,
        key: str,
        message_count: int,
        max_interval_ms: int = -1,
        session_manager: Optional[SessionManager] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> ProduceStats:
        """Produce `message_count` rows to `topic`, then flush and close the sink.

        Args:
            generator: Record generator.
            topic: Destination topic (stream name for Kinesis).
            key: Name of the field whose generated value keys each message.
            message_count: Number of messages to produce.
            max_interval_ms: Upper bound of the random pause between messages;
                negative means the default ceiling.
            session_manager: Session pool; a default manager when omitted.
            stop_event: Checked before each message to end the run early.

        Returns:
            ProduceStats for the run.

        Raises:
            InvalidConfigurationError, GeneratorContractViolation,
            TokenExhaustionError: Fatal errors stop the run; the sink is
                still flushed and closed.
        """
        stats = ProduceStats()
        interval = (
            DeliveryConstants.INTER_MESSAGE_MAX_INTERVAL_MS if max_interval_ms < 0 else max_interval_ms
        )

        def callback(report: DeliveryReport) -> None:
            with self._stats_lock:
                if report.success:
                    stats.delivered += 1
                else:
                    stats.failed += 1
            self.on_delivery(report)

        try:
            assembler = RowAssembler(generator, key, resolver=SessionResolver(session_manager))
            logger.info(f"Producing {message_count} messages to '{topic}' keyed by '{key}'")

            for _ in range(message_count):
                if stop_event is not None and stop_event.is_set():
                    logger.info(f"Stop requested after {stats.produced} messages")
                    break
                row_key, row = assembler.generate_row()
                self.sink.send(topic, row_key, row, callback)
                stats.produced += 1
                self._pause(interval)
        finally:
            self.sink.flush()
            self.sink.close()

        logger.info(
            f"Finished '{topic}': produced={stats.produced}, "
            f"delivered={stats.delivered}, failed={stats.failed}"
        )
        return stats
