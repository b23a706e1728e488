import logging
import threading

from checkgate.model.enum.check_status_enum import CheckStatus
from checkgate.util.pubsub.base import PubSub
from checkgate.util.pubsub.pubsub_topic import PubSubTopic
from checkgate.util.status_listener import StatusChangeListener, StatusChangeSource


class CheckStatusSubscriber(StatusChangeSource):
    """
    Fans statuses published on CHECK_STATUS out to registered listeners.

    Statuses are delivered one at a time in arrival order. Delivery holds the
    listener lock, so after remove_status_listener returns the removed listener
    gets nothing more; a delivery already running finishes first.
    """

    def __init__(self, pubsub: PubSub):
        self.pubsub = pubsub
        self._listeners: list[StatusChangeListener] = []
        self._lock = threading.RLock()
        self.logger = logging.getLogger(__class__.__name__)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def add_status_listener(self, listener: StatusChangeListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self.logger.warning(f"[STATUS] Listener {listener!r} already registered, skip")
                return
            self._listeners.append(listener)

    def remove_status_listener(self, listener: StatusChangeListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    async def run(self):
        async for status in self.pubsub.subscribe(PubSubTopic.CHECK_STATUS):
            self.deliver(status)

    def deliver(self, status: CheckStatus | str) -> None:
        # Values are passed through as-is; listeners own validation
        with self._lock:
            for listener in list(self._listeners):
                if listener not in self._listeners:
                    continue
                try:
                    listener.on_status_changed(status)
                except Exception as e:
                    self.logger.error(f"[STATUS] Listener {listener!r} failed on {status!r}: {e}")
