"""Background event publisher: a bounded worker channel.

Each ``publish`` call is handed to a small thread pool and returns at once.
A bounded semaphore caps how many events may be queued or in flight; when
the channel is full the event is dropped with a warning rather than making
the caller wait on a slow sink. Delivery failures are logged and dropped.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, wait

import structlog

from ordering.publishing.port import EventPublisher

logger = structlog.get_logger(__name__)


class BackgroundEventPublisher(EventPublisher):
    def __init__(self, sink, max_workers: int = 2, max_pending: int = 1000) -> None:
        self.sink = sink
        self.max_pending = max_pending
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="order_events")
        self._slots = threading.BoundedSemaphore(max_pending)
        self._futures = set()
        self._lock = threading.Lock()
        self.dropped = 0

    def publish(self, topic: str, key: str, payload: dict) -> None:
        if not self._slots.acquire(blocking=False):
            with self._lock:
                self.dropped += 1
            logger.warning(
                "Event channel full, dropping event",
                topic=topic,
                key=key,
                event_type=payload.get("type"),
                max_pending=self.max_pending,
            )
            return

        try:
            future = self._executor.submit(self._deliver, topic, key, payload)
        except RuntimeError:
            # Executor already shut down
            self._slots.release()
            logger.warning("Event publisher is shut down, dropping event", topic=topic, key=key)
            return

        with self._lock:
            self._futures.add(future)
        future.add_done_callback(self._forget)

    def _deliver(self, topic, key, payload):
        try:
            self.sink(topic, key, payload)
            logger.debug("Published event", topic=topic, key=key, event_type=payload.get("type"))
        except Exception as exc:
            logger.error(
                "Failed to publish event",
                topic=topic,
                key=key,
                event_type=payload.get("type"),
                error=str(exc),
            )
        finally:
            self._slots.release()

    def _forget(self, future):
        with self._lock:
            self._futures.discard(future)

    def flush(self, timeout: float | None = None) -> None:
        with self._lock:
            pending = list(self._futures)
        wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
