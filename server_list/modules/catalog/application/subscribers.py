"""Update subscribers of the catalog cache."""

import threading
from collections.abc import Callable

from loguru import logger

from server_list.core.infrastructure.logging import BusinessEvents

UpdateCallback = Callable[[], None]


class SubscriberRegistry:
    """Append-only, ordered list of zero-argument update callbacks.

    Appends copy the tuple under a lock; notify iterates the tuple it read,
    so registration may happen from any thread while a refresh is running.
    """

    def __init__(self) -> None:
        self._callbacks: tuple[UpdateCallback, ...] = ()
        self._lock = threading.Lock()

    def add(self, callback: UpdateCallback) -> None:
        with self._lock:
            self._callbacks = (*self._callbacks, callback)

    def notify(self) -> int:
        """Invoke every callback in registration order.

        Returns:
            Number of callbacks that raised.
        """
        failures = 0
        for callback in self._callbacks:
            try:
                callback()
            except Exception as e:
                failures += 1
                name = getattr(callback, "__qualname__", repr(callback))
                logger.exception(f"Catalog update subscriber {name} failed: {e}")
                BusinessEvents.subscriber_failed(subscriber=name, error=str(e))
        return failures

    def __len__(self) -> int:
        return len(self._callbacks)
