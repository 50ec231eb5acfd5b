"""
Event bus for tile map and world changes.

The engine does not own the game loop or the screen. Collaborators that do
(renderers, the turn loop, sound) subscribe here to learn when a tile was
replaced or an actor moved, instead of polling the tile map.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class Event(Enum):
    """Things that can happen to a level after it has been generated."""

    LEVEL_GENERATED = auto()  # kwargs: room_count, requested_rooms

    # Tile map
    TILE_CHANGED = auto()  # kwargs: position, tile
    DOOR_OPENED = auto()  # kwargs: position
    DOOR_CLOSED = auto()  # kwargs: position
    ITEM_DROPPED = auto()  # kwargs: position, item
    ITEMS_PICKED_UP = auto()  # kwargs: position, items

    # Actors
    ACTOR_ADDED = auto()  # kwargs: actor_id
    ACTOR_REMOVED = auto()  # kwargs: actor_id
    ACTOR_MOVED = auto()  # kwargs: actor_id, source, destination


@dataclass
class EventData:
    """What a handler receives."""

    event: Event
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        if self.kwargs:
            kwargs_str = ", ".join(f"{k}={v}" for k, v in self.kwargs.items())
            return f"EventData({self.event.name}, {kwargs_str})"
        return f"EventData({self.event.name})"


EventHandler = Callable[[EventData], None]


class EventBus:
    """
    Synchronous publish/subscribe.

    Handlers run in subscription order, inside emit(). A handler that raises
    is logged and skipped so the others still run; in debug mode the
    exception propagates instead.
    """

    def __init__(self, debug: bool = False) -> None:
        self._handlers: Dict[Event, List[EventHandler]] = {}
        self.debug = debug

    def subscribe(self, event: Event, handler: EventHandler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def unsubscribe(self, event: Event, handler: EventHandler) -> None:
        """
        Remove a handler.

        Raises:
            ValueError: If the handler was not subscribed to this event
        """
        handlers = self._handlers.get(event, [])
        if handler not in handlers:
            raise ValueError(f"Handler not subscribed to event {event.name}")
        handlers.remove(handler)

    def emit(self, event: Event, **kwargs: Any) -> None:
        event_data = EventData(event=event, kwargs=kwargs)
        if self.debug:
            logger.debug("emitting %r", event_data)

        for handler in list(self._handlers.get(event, [])):
            try:
                handler(event_data)
            except Exception:
                logger.exception("handler failed for %s", event.name)
                if self.debug:
                    raise

    def clear(self) -> None:
        self._handlers.clear()

    def handler_count(self, event: Optional[Event] = None) -> int:
        """Count handlers for one event, or across all events when event is None."""
        if event is not None:
            return len(self._handlers.get(event, []))
        return sum(len(handlers) for handlers in self._handlers.values())
