"""
Dependency Injection Container

Holds the process-wide service graph built by the application factory and
hands services to API resources via current_app.container.resolve().
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from qrshare.application.event_publisher import EventPublisher
from qrshare.domain.events import DomainEvent

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ServiceNotRegisteredError(LookupError):
    """Raised when resolving a type nothing was registered for."""
    pass


class DependencyContainer:
    """
    Registry of shared service instances keyed by their interface type.

    Every service in qrshare is a singleton for the life of the app: the
    stores, the link registry and the three application services. Tests can
    swap any of them with override() without rebuilding the graph.
    """

    def __init__(self):
        self._services: Dict[Type, Any] = {}
        self._overrides: Dict[Type, Any] = {}
        self._lock = threading.RLock()

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        """
        Register the shared instance for an interface.

        Args:
            interface: Abstract or concrete type used as the lookup key
            implementation: Instance returned by resolve()

        Raises:
            TypeError: If implementation is not an instance of interface
        """
        if not isinstance(implementation, interface):
            raise TypeError(
                f"{type(implementation).__name__} does not implement {interface.__name__}"
            )
        with self._lock:
            if interface in self._services:
                logger.warning(f"Replacing registered service: {interface.__name__}")
            self._services[interface] = implementation
        logger.debug(f"Registered service: {interface.__name__}")

    def resolve(self, interface: Type[T]) -> T:
        """
        Look up the instance registered for an interface.

        Raises:
            ServiceNotRegisteredError: If nothing is registered for it
        """
        with self._lock:
            if interface in self._overrides:
                return self._overrides[interface]
            try:
                return self._services[interface]
            except KeyError:
                raise ServiceNotRegisteredError(
                    f"No service registered for {interface.__name__}"
                ) from None

    def override(self, interface: Type[T], implementation: T) -> None:
        """Shadow a registration until clear_overrides() is called."""
        with self._lock:
            self._overrides[interface] = implementation

    def clear_overrides(self) -> None:
        with self._lock:
            self._overrides.clear()

    def is_registered(self, interface: Type) -> bool:
        with self._lock:
            return interface in self._services or interface in self._overrides

    def registered_types(self) -> List[str]:
        """Names of all registered interfaces, for start-up logging."""
        with self._lock:
            return sorted(t.__name__ for t in self._services)

    def setup_event_handlers(
        self,
        event_publisher: EventPublisher,
        handlers: Optional[Iterable[Any]] = None,
    ) -> None:
        """
        Subscribe event handlers to every domain event.

        Each handler must expose handle(event). A handler that cannot be
        subscribed is logged and skipped; start-up continues.

        Args:
            event_publisher: Publisher the application services emit through
            handlers: Handler instances; defaults to a LoggingEventHandler on
                the 'qrshare' logger
        """
        if handlers is None:
            from qrshare.infrastructure.event_handlers.logging_handler import LoggingEventHandler

            handlers = [LoggingEventHandler(logging.getLogger("qrshare"))]

        for handler in handlers:
            name = type(handler).__name__
            handle = getattr(handler, "handle", None)
            if not callable(handle):
                logger.error(f"Event handler {name} has no handle() method, skipping")
                continue
            event_publisher.subscribe(DomainEvent, handle)
            logger.debug(f"Subscribed event handler: {name}")
