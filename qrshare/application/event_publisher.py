"""
Event Publisher

In-process dispatch of domain events (uploads, deletions, orphaned blobs)
to subscribed handlers. Publishing is synchronous and never fails the
operation that raised the event.
"""

import logging
from collections import defaultdict
from threading import Lock
from typing import Callable, DefaultDict, List, Type

from qrshare.domain.events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class EventPublisher:
    """
    Dispatches a domain event to the handlers of its class and of every base
    class up to DomainEvent, most specific first.
    """

    def __init__(self):
        self._handlers: DefaultDict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)
        self._lock = Lock()

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Register a handler for an event class and its subclasses.

        Example:
            publisher.subscribe(OrphanedBlobEvent, reconciler.enqueue)
        """
        with self._lock:
            self._handlers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        with self._lock:
            handlers = [
                handler
                for cls in type(event).__mro__
                for handler in self._handlers.get(cls, ())
            ]

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    f"Event handler {getattr(handler, '__name__', handler)!r} failed "
                    f"on {type(event).__name__} for {event.aggregate_id}"
                )
