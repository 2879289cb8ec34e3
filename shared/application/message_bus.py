"""
Message Bus

Routes the commands of the housing core to their single handler and the
domain events published after a commit to every subscriber.

Event subscriptions follow the event class hierarchy: a handler registered
for DomainEvent sees every event, one registered for ApplicationApproved
only that event.
"""

from time import perf_counter
from typing import Any, Callable, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent
from shared.domain.exceptions import HousingError

logger = logging.getLogger(__name__)


class MessageBus:
    """
    Commands: exactly one handler per command type
    Events: any number of subscribers per event type or base type
    """

    def __init__(self):
        self._command_handlers: Dict[Type, Callable[[Any], Any]] = {}
        self._subscribers: Dict[Type[DomainEvent], List[Callable[[DomainEvent], None]]] = {}

    @property
    def command_types(self) -> List[Type]:
        return list(self._command_handlers)

    def register_command_handler(self, command_type: Type, handler: Callable[[Any], Any]):
        if command_type in self._command_handlers:
            raise ValueError(f"{command_type.__name__} already has a handler")
        self._command_handlers[command_type] = handler
        logger.debug(f"Registered command handler for {command_type.__name__}")

    def register_event_handler(self, event_type: Type[DomainEvent], handler: Callable[[DomainEvent], None]):
        self._subscribers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed {getattr(handler, '__name__', handler)} to {event_type.__name__}")

    def handle_command(self, command: Any) -> Any:
        """
        Run the handler of ``command`` and return its result

        HousingError failures are expected outcomes of a command (a full
        room, an unauthorized manager) and are logged as warnings; anything
        else is logged as an error. Both propagate to the caller.
        """
        name = type(command).__name__
        handler = self._command_handlers.get(type(command))
        if handler is None:
            raise ValueError(f"No handler registered for command {name}")

        started = perf_counter()
        try:
            result = handler(command)
        except HousingError as e:
            logger.warning(f"{name} refused: {e}")
            raise
        except Exception:
            logger.exception(f"{name} failed")
            raise

        logger.info(f"{name} handled in {(perf_counter() - started) * 1000:.1f} ms")
        return result

    def subscribers_for(self, event: DomainEvent) -> List[Callable[[DomainEvent], None]]:
        """Handlers for the event's class and each of its DomainEvent bases, most specific first"""
        handlers = []
        for klass in type(event).__mro__:
            handlers.extend(self._subscribers.get(klass, ()))
            if klass is DomainEvent:
                break
        return handlers

    def publish_events(self, events: Iterable[DomainEvent]):
        """
        Deliver committed events

        The state they describe is already committed, so a failing
        subscriber is logged and the remaining subscribers still run.
        """
        for event in events:
            for handler in self.subscribers_for(event):
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        f"Subscriber {getattr(handler, '__name__', handler)} failed "
                        f"on {type(event).__name__} ({event.event_id})"
                    )
