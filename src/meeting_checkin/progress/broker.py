"""In-process fan-out of progress events to open server-sent-event streams."""
from __future__ import annotations

import json
import logging
import queue
import threading
from typing import Any, Iterator

logger = logging.getLogger(__name__)

KEEPALIVE = ": keepalive\n\n"


def format_event(payload: Any) -> str:
    return f"data: {json.dumps(payload, default=str)}\n\n"


class ProgressBroker:
    def __init__(self, *, keepalive_seconds: float = 15.0, max_queued: int = 100):
        self._lock = threading.Lock()
        self._clients: set[queue.Queue] = set()
        self._keepalive_seconds = keepalive_seconds
        self._max_queued = max_queued

    @property
    def client_count(self) -> int:
        with self._lock:
            return len(self._clients)

    def subscribe(self) -> queue.Queue:
        q: queue.Queue = queue.Queue(maxsize=self._max_queued)
        with self._lock:
            self._clients.add(q)
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._clients.discard(q)

    def publish(self, payload: Any) -> int:
        """Queue ``payload`` for every open stream; returns how many received it."""

        message = format_event(payload)
        with self._lock:
            clients = list(self._clients)

        delivered = 0
        for q in clients:
            try:
                q.put_nowait(message)
                delivered += 1
            except queue.Full:
                logger.warning("Dropping progress event for a stalled stream")
        return delivered

    def stream(self) -> Iterator[str]:
        """Yield queued events for one client, with keepalives while idle.

        The client is registered on the first iteration and removed when the
        generator is closed, so a response that is never iterated leaves
        nothing behind.
        """

        q = self.subscribe()
        try:
            while True:
                try:
                    yield q.get(timeout=self._keepalive_seconds)
                except queue.Empty:
                    yield KEEPALIVE
        finally:
            self.unsubscribe(q)
