"""
Fan-out of tournament snapshots to Server-Sent Events observers.
"""
import json
import logging
import queue
import threading

logger = logging.getLogger(__name__)


class LiveBroadcaster:
    """Delivers every published snapshot to each subscriber's own queue."""

    def __init__(self, queue_size: int = 16):
        self.queue_size = queue_size
        self._subscribers = []
        self._lock = threading.Lock()

    def subscribe(self) -> queue.Queue:
        subscriber = queue.Queue(maxsize=self.queue_size)
        with self._lock:
            self._subscribers.append(subscriber)
        logger.debug(f'Observer subscribed ({len(self._subscribers)} connected)')
        return subscriber

    def unsubscribe(self, subscriber: queue.Queue):
        with self._lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)
        logger.debug(f'Observer unsubscribed ({len(self._subscribers)} connected)')

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, snapshot: dict):
        """Queue ``snapshot`` for every subscriber without ever blocking."""
        with self._lock:
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            try:
                subscriber.put_nowait(snapshot)
            except queue.Full:
                # Slow observer: it skips this snapshot and catches up on the next one
                logger.warning('Observer queue full, dropping snapshot')


def format_event(event: str, data) -> str:
    """Encode one SSE frame."""
    if not isinstance(data, str):
        data = json.dumps(data)
    return f"event: {event}\ndata: {data}\n\n"


def generate_live_events(broadcaster: LiveBroadcaster, service, heartbeat: float = 15.0):
    """
    Yield SSE frames for one observer.

    Sends ``connected``, then the current state, then one ``state`` frame per
    published snapshot. A heartbeat comment goes out after ``heartbeat``
    idle seconds to keep proxies from closing the connection.
    """
    subscriber = broadcaster.subscribe()
    try:
        yield format_event('connected', 'ok')
        yield format_event('state', service.snapshot())
        while True:
            try:
                snapshot = subscriber.get(timeout=heartbeat)
            except queue.Empty:
                yield ": heartbeat\n\n"
                continue
            yield format_event('state', snapshot)
    finally:
        broadcaster.unsubscribe(subscriber)
