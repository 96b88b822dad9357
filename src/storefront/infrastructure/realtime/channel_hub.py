"""In-process real-time channels, one per connected recipient.

The transport that drains a channel (websocket, SSE, ...) lives outside
this package; it calls ``subscribe()`` when a recipient connects and
``unsubscribe()`` when they leave.
"""

from __future__ import annotations

import queue
import threading
from typing import Any

import structlog

from storefront.application.notifications import Notifier

logger = structlog.get_logger(__name__)


class ChannelHub(Notifier):

    def __init__(self, max_pending: int = 100) -> None:
        self._max_pending = max_pending
        self._channels: dict[str, list[queue.Queue]] = {}
        self._lock = threading.Lock()

    def subscribe(self, recipient_id: str) -> queue.Queue:
        channel: queue.Queue = queue.Queue(maxsize=self._max_pending)
        with self._lock:
            self._channels.setdefault(recipient_id, []).append(channel)
        return channel

    def unsubscribe(self, recipient_id: str, channel: queue.Queue) -> None:
        with self._lock:
            channels = self._channels.get(recipient_id, [])
            if channel in channels:
                channels.remove(channel)
            if not channels:
                self._channels.pop(recipient_id, None)

    def is_connected(self, recipient_id: str) -> bool:
        with self._lock:
            return bool(self._channels.get(recipient_id))

    def publish(self, recipient_id: str, event: dict[str, Any]) -> None:
        with self._lock:
            channels = list(self._channels.get(recipient_id, ()))
        for channel in channels:
            try:
                channel.put_nowait(event)
            except queue.Full:
                logger.warning("channel_full_event_dropped", recipient_id=recipient_id)
