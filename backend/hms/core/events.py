"""
Lifecycle event publishing.

Every successful create/update/delete emits one text token of the form
``<ENTITY>_<ACTION>:<id>`` (e.g. ``PATIENT_CREATED:42``) to the topic of the
owning service. Publishing is fire-and-forget: it runs after the database
transaction has committed, is never retried, and a failure is logged without
undoing the write.
"""
import logging
from typing import List, Optional, Tuple

from hms.config.constants import EntityName, EventAction

logger = logging.getLogger(__name__)


def build_event_token(entity: EntityName, action: EventAction, entity_id: int) -> str:
    return f"{entity.value}_{action.value}:{entity_id}"


class EventPublisher:
    """Publishes lifecycle tokens. Subclasses implement `_send`."""

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    async def publish(self, topic: str, entity: EntityName, action: EventAction, entity_id: int) -> None:
        token = build_event_token(entity, action, entity_id)
        try:
            await self._send(topic, token)
        except Exception:
            # the write is already committed; there is nothing to compensate
            logger.exception(f"Failed to publish event '{token}' to topic '{topic}'")

    async def _send(self, topic: str, token: str) -> None:
        raise NotImplementedError


class KafkaEventPublisher(EventPublisher):
    """Sends tokens through an aiokafka producer without waiting for broker acknowledgement."""

    def __init__(self, bootstrap_servers: str, client_id: str):
        self.bootstrap_servers = bootstrap_servers
        self.client_id = client_id
        self._producer = None

    async def start(self) -> None:
        from aiokafka import AIOKafkaProducer
        from aiokafka.errors import KafkaError

        producer = AIOKafkaProducer(
            bootstrap_servers=self.bootstrap_servers,
            client_id=self.client_id,
            value_serializer=lambda v: v.encode("utf-8"),
        )
        try:
            await producer.start()
        except KafkaError:
            # the service still starts; every publish is logged as failed until restart
            logger.exception(f"Kafka producer could not connect to {self.bootstrap_servers}")
            await producer.stop()
            return
        self._producer = producer
        logger.info(f"Kafka producer connected to {self.bootstrap_servers}")

    async def stop(self) -> None:
        if self._producer is not None:
            await self._producer.stop()
            self._producer = None
            logger.info("Kafka producer stopped")

    async def _send(self, topic: str, token: str) -> None:
        if self._producer is None:
            raise RuntimeError("Kafka producer is not started")
        # send() only enqueues; the returned delivery future is not awaited
        await self._producer.send(topic, token)
        logger.debug(f"Queued event '{token}' for topic '{topic}'")


class LoggingEventPublisher(EventPublisher):
    """Used when no broker is configured; the token only goes to the log."""

    async def _send(self, topic: str, token: str) -> None:
        logger.info(f"Event '{token}' on topic '{topic}' (kafka disabled)")


class InMemoryEventPublisher(EventPublisher):
    """Keeps every published (topic, token) pair; handy for tests and local runs."""

    def __init__(self):
        self.events: List[Tuple[str, str]] = []

    async def _send(self, topic: str, token: str) -> None:
        self.events.append((topic, token))

    def tokens(self, topic: Optional[str] = None) -> List[str]:
        return [token for t, token in self.events if topic is None or t == topic]

    def clear(self) -> None:
        self.events.clear()


def create_event_publisher(settings) -> EventPublisher:
    if settings.kafka_enabled:
        return KafkaEventPublisher(settings.kafka_bootstrap_servers, settings.kafka_client_id)
    return LoggingEventPublisher()
