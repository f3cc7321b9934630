"""In-process event bus.

Subscribers register per event type (or for ``DomainEvent`` to receive
everything). A failing subscriber is logged and skipped so one broken
report cannot break a stock operation that already happened.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Callable

from stockflow.domain.events import DomainEvent, EventPublisher

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


class InMemoryEventBus(EventPublisher):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: dict[type[DomainEvent], list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> Callable[[], None]:
        """Register *handler*; returns a callable that unsubscribes it."""
        with self._lock:
            self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers[event_type]:
                    self._handlers[event_type].remove(handler)

        return unsubscribe

    def publish(self, event: DomainEvent) -> None:
        with self._lock:
            handlers = [
                handler
                for event_type, registered in self._handlers.items()
                if isinstance(event, event_type)
                for handler in registered
            ]
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Subscriber %r failed on %s", handler, type(event).__name__)
