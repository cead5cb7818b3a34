"""Event publisher factory.

Provides get_publisher() / set_publisher() to swap implementations:
- BackgroundEventPublisher over a LoggingSink by default
- BackgroundEventPublisher over a BrokerSink when wired by the application
- RecordingPublisher for tests
"""

import os

from shared.events.ordering import ORDER_EVENTS_TOPIC

from ordering.publishing.background import BackgroundEventPublisher
from ordering.publishing.port import EventPublisher
from ordering.publishing.sinks import LoggingSink

_current_publisher: EventPublisher | None = None


def order_events_topic() -> str:
    return os.getenv("ORDER_EVENTS_TOPIC", ORDER_EVENTS_TOPIC)


def build_background_publisher(sink=None) -> BackgroundEventPublisher:
    """Background publisher sized from ORDER_EVENTS_WORKERS / ORDER_EVENTS_MAX_PENDING."""
    return BackgroundEventPublisher(
        sink or LoggingSink(),
        max_workers=int(os.getenv("ORDER_EVENTS_WORKERS", "2")),
        max_pending=int(os.getenv("ORDER_EVENTS_MAX_PENDING", "1000")),
    )


def get_publisher() -> EventPublisher:
    """Return the current event publisher. Defaults to a logging background publisher."""
    global _current_publisher
    if _current_publisher is None:
        _current_publisher = build_background_publisher()
    return _current_publisher


def set_publisher(publisher: EventPublisher) -> None:
    """Override the active event publisher (useful for tests)."""
    global _current_publisher
    _current_publisher = publisher


def reset_publisher() -> None:
    """Shut down and forget the active publisher."""
    global _current_publisher
    if _current_publisher is not None:
        _current_publisher.shutdown()
    _current_publisher = None
