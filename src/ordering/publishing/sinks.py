"""Delivery sinks used by the background publisher.

A sink is any callable ``sink(topic, key, payload)`` that performs the actual
delivery. It runs on a worker thread and may raise; the publisher logs the
failure and drops the event.
"""

import structlog

logger = structlog.get_logger(__name__)


class LoggingSink:
    """Writes each event to the log. Default outside of a broker deployment."""

    def __call__(self, topic: str, key: str, payload: dict) -> None:
        logger.info("Order event", topic=topic, key=key, event_type=payload.get("type"))


class BrokerSink:
    """Publishes events to a Protean broker stream named after the topic."""

    def __init__(self, broker) -> None:
        self.broker = broker

    @classmethod
    def for_domain(cls, domain, broker_name: str = "default") -> "BrokerSink":
        broker = domain.brokers.get(broker_name)
        if broker is None:
            raise ValueError(f"Broker {broker_name!r} is not configured for domain {domain.name}")
        return cls(broker)

    def __call__(self, topic: str, key: str, payload: dict) -> None:
        self.broker.publish(topic, {"key": key, **payload})
