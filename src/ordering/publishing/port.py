"""Event publisher port (abstract interface).

Defines the contract for the outbound notification channel. Publishing is
fire-and-forget: ``publish`` returns without reporting delivery, and
adapters never raise delivery failures back to the caller.
"""

from abc import ABC, abstractmethod


class EventPublisher(ABC):
    """Abstract fire-and-forget event publisher."""

    @abstractmethod
    def publish(self, topic: str, key: str, payload: dict) -> None:
        """Hand ``payload`` to the channel for asynchronous delivery."""
        ...

    def flush(self, timeout: float | None = None) -> None:  # noqa: B027
        """Wait for in-flight deliveries. No-op for synchronous adapters."""

    def shutdown(self) -> None:  # noqa: B027
        """Release any resources held by the adapter."""
