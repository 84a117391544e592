"""
Event system for level and turn events.

This module provides an event bus so that collaborators outside the map
systems (combat, messages, rendering) can react to what happened during a
turn without the systems knowing about them.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class Event(Enum):
    """Event types emitted by the level and turn systems."""

    # Level lifecycle
    LEVEL_START = auto()  # kwargs: depth
    LEVEL_END = auto()  # kwargs: depth

    # Movement
    ENTITY_MOVED = auto()  # kwargs: entity_id, x, y

    # Monster behaviour
    PLAYER_SPOTTED = auto()  # kwargs: entity_id, name
    MELEE_INTENT = auto()  # kwargs: attacker_id, target_id

    # Debug
    MAP_REVEALED = auto()


@dataclass
class EventData:
    """Container for event data passed to handlers."""

    event: Event
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        if self.kwargs:
            kwargs_str = ", ".join(f"{k}={v}" for k, v in self.kwargs.items())
            return f"EventData({self.event.name}, {kwargs_str})"
        return f"EventData({self.event.name})"


# Event handler signature: takes event data, returns nothing
EventHandler = Callable[[EventData], None]


class EventBus:
    """
    Publish/subscribe hub for turn events.

    Handlers run synchronously, in subscription order, inside ``emit``.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Event, List[EventHandler]] = {}
        self._debug: bool = False

    def set_debug(self, debug: bool) -> None:
        """In debug mode every event is logged and handler errors propagate."""
        self._debug = debug

    def subscribe(self, event: Event, handler: EventHandler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def unsubscribe(self, event: Event, handler: EventHandler) -> None:
        """
        Remove a handler.

        Raises:
            ValueError: If handler was not subscribed to this event
        """
        if handler not in self._handlers.get(event, []):
            raise ValueError(f"Handler not subscribed to event {event}")
        self._handlers[event].remove(handler)

    def emit(self, event: Event, **kwargs: Any) -> None:
        """
        Emit an event, triggering all subscribed handlers.

        A failing handler is logged and the remaining handlers still run,
        unless the bus is in debug mode.
        """
        event_data = EventData(event=event, kwargs=kwargs)

        if self._debug:
            logger.debug("Emitting %r", event_data)

        for handler in list(self._handlers.get(event, [])):
            try:
                handler(event_data)
            except Exception:
                logger.exception("Handler error for %s", event.name)
                if self._debug:
                    raise

    def clear(self) -> None:
        self._handlers.clear()

    def handler_count(self, event: Optional[Event] = None) -> int:
        """Handlers for one event, or across all events if none is given."""
        if event is not None:
            return len(self._handlers.get(event, []))
        return sum(len(handlers) for handlers in self._handlers.values())
