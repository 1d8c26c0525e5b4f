"""Ledger events for the event system."""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of ledger events."""

    # Session flow
    SESSION_OPENED = auto()
    SESSION_SETTLED = auto()

    # Card events
    CARD_DEALT = auto()

    # Player actions
    PLAYER_HIT = auto()
    PLAYER_STANDS = auto()
    PLAYER_BUSTS = auto()

    # Dealer events
    DEALER_THRESHOLD = auto()
    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()

    # House funds
    HOUSE_DEPOSIT = auto()
    HOUSE_WITHDRAWAL = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable ledger event.

    Events are how the core reports what happened to the outer shell
    (logging, archiving, push notifications).
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Event emitter for ledger events.

    Allows subscribing to specific event types or all events. Only the most
    recent ``history_size`` events are kept.
    """

    def __init__(self, history_size: int = 1000) -> None:
        """Initialize the event emitter."""
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: list[GameEvent] = []
        self._history_size = history_size
        self._lock = threading.Lock()

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> bool:
        """
        Unsubscribe from events.

        Returns:
            True if the handler was registered
        """
        with self._lock:
            handlers = self._handlers.get(event_type, [])
            if handler not in handlers:
                return False
            handlers.remove(handler)
            return True

    def emit(self, event: GameEvent) -> None:
        """
        Emit an event to all subscribers.

        Type-specific handlers run before catch-all handlers.
        """
        with self._lock:
            self._event_history.append(event)
            del self._event_history[: -self._history_size]
            handlers = list(self._handlers.get(event.event_type, []))
            handlers += self._handlers.get(None, [])

        for handler in handlers:
            handler(event)

    def emit_new(
        self,
        event_type: EventType,
        **data: Any,
    ) -> GameEvent:
        """
        Create and emit a new event.

        Returns:
            The created event
        """
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Return the event history."""
        with self._lock:
            return self._event_history.copy()

    def clear_history(self) -> None:
        """Clear the event history."""
        with self._lock:
            self._event_history.clear()
