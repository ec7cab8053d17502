"""
event_manager.py
----------------
Event-driven messaging between the loading sequence and whoever presents it.
The state machine never touches UI objects; it dispatches the events below
and the display layer (or the caller) subscribes to the ones it cares about.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Type
from loadscreen.core.debug.debug_logger import DebugLogger


# ===========================================================
# Event Definitions
# ===========================================================

@dataclass(frozen=True)
class BaseEvent:
    """Base class for all events."""
    pass


@dataclass(frozen=True)
class LoadingStartedEvent(BaseEvent):
    """Dispatched once per session, right before the Loading phase is entered."""
    pass


@dataclass(frozen=True)
class LoadingEndedEvent(BaseEvent):
    """Dispatched once per session, after the screen has fully faded out."""
    pass


@dataclass(frozen=True)
class ScreenResetEvent(BaseEvent):
    """Dispatched when the screen returns to idle: hide instantly, stop blocking input."""
    pass


@dataclass(frozen=True)
class TextChangedEvent(BaseEvent):
    """Dispatched to replace a text field (title, description, status, countdown, hint)."""
    field: str
    text: str


@dataclass(frozen=True)
class ProgressChangedEvent(BaseEvent):
    """Dispatched to move a bar (progress, countdown)."""
    field: str
    value: float
    maximum: float = 1.0


@dataclass(frozen=True)
class SpinnerToggledEvent(BaseEvent):
    """Dispatched to show or hide the busy indicator."""
    visible: bool


@dataclass(frozen=True)
class AnimatorFlagEvent(BaseEvent):
    """
    Edge signal for an external animation player.

    target is one of "screen", "background", "hint"; flag is "active" or
    "continue". The player owns the actual interpolation.
    """
    target: str
    flag: str
    value: bool


@dataclass(frozen=True)
class BackgroundChangedEvent(BaseEvent):
    """Dispatched when the background rotator swaps images (None clears it)."""
    image: Any


# ===========================================================
# Event Manager
# ===========================================================

class EventManager:
    """Central event dispatcher using pub-sub pattern."""

    def __init__(self):
        self._subscribers: Dict[Type[BaseEvent], List[Callable]] = {}
        DebugLogger.init("EventManager initialized", category="event_manager")

    # ===========================================================
    # Subscription
    # ===========================================================

    def subscribe(self, event_type: Type[BaseEvent], callback: Callable) -> None:
        """
        Register a callback for an event type.

        Args:
            event_type: Event class to listen for
            callback: Function to call when event fires
        """
        subscribers = self._subscribers.setdefault(event_type, [])
        if callback in subscribers:
            return

        subscribers.append(callback)
        callback_name = getattr(callback, '__name__', repr(callback))
        DebugLogger.system(
            f"Subscribed '{callback_name}' to '{event_type.__name__}'",
            category="event_manager"
        )

    def unsubscribe(self, event_type: Type[BaseEvent], callback: Callable) -> None:
        """Remove a callback from an event type."""
        if event_type in self._subscribers:
            try:
                self._subscribers[event_type].remove(callback)
            except ValueError:
                pass

    def unsubscribe_all(self, callback: Callable) -> None:
        """Remove a callback from all event types."""
        for subscribers in self._subscribers.values():
            try:
                subscribers.remove(callback)
            except ValueError:
                pass

    # ===========================================================
    # Dispatch
    # ===========================================================

    def dispatch(self, event: BaseEvent) -> None:
        """
        Send event to all registered callbacks.

        A callback that raises is logged and skipped so one faulty
        listener cannot stall the loading sequence.

        Args:
            event: Event instance to dispatch
        """
        event_type = type(event)

        if event_type not in self._subscribers:
            return

        for callback in list(self._subscribers[event_type]):
            try:
                callback(event)
            except Exception as e:
                callback_name = getattr(callback, '__name__', repr(callback))
                DebugLogger.warn(f"Error in event callback {callback_name}: {e}")

    # ===========================================================
    # Lifecycle
    # ===========================================================

    def clear_all(self) -> None:
        """Remove all subscribers."""
        self._subscribers.clear()

    def get_subscriber_count(self, event_type: Type[BaseEvent] = None) -> int:
        """
        Get count of subscribers.

        Args:
            event_type: Specific event type, or None for total
        """
        if event_type:
            return len(self._subscribers.get(event_type, []))
        return sum(len(subs) for subs in self._subscribers.values())


# ===========================================================
# Singleton Access
# ===========================================================

_EVENTS = None


def get_events() -> EventManager:
    """Get or create the event manager singleton."""
    global _EVENTS
    if _EVENTS is None:
        _EVENTS = EventManager()
    return _EVENTS


def reset_events() -> None:
    """Reset the singleton. Use for testing or full restart."""
    global _EVENTS
    _EVENTS = None
