"""Recording event publisher for development and testing.

Keeps every published event in memory and can be configured at runtime to
fail, which lets tests prove that a broken channel never affects the order
operation that triggered the notification.
"""

from ordering.publishing.port import EventPublisher


class RecordingPublisher(EventPublisher):
    """Configurable in-memory publisher."""

    def __init__(self) -> None:
        self.should_fail: bool = False
        self.failure_reason: str = "Broker unavailable"
        self.calls: list[dict] = []

    def configure(self, should_fail: bool, failure_reason: str = "Broker unavailable") -> None:
        """Configure publisher behavior at runtime."""
        self.should_fail = should_fail
        self.failure_reason = failure_reason

    def publish(self, topic: str, key: str, payload: dict) -> None:
        if self.should_fail:
            raise ConnectionError(self.failure_reason)
        self.calls.append({"topic": topic, "key": key, "payload": payload})

    def event_types(self, key: str | None = None) -> list[str]:
        """Types of the recorded events, optionally for a single order."""
        return [call["payload"]["type"] for call in self.calls if key is None or call["key"] == key]
