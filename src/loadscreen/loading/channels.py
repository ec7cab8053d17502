"""
channels.py
-----------
Turns rotator outcomes into display events for one target ("background" or "hint").
"""

from typing import Any, Callable, Optional, Sequence

from loadscreen.core.services.event_manager import (
    AnimatorFlagEvent,
    BackgroundChangedEvent,
    EventManager,
    TextChangedEvent,
)
from loadscreen.loading.rotator import FADE_OUT_REQUESTED, ItemChanged, RotatorEvent, TimedRotator


class RotatorChannel:
    """
    Drives one display target from a TimedRotator.

    Attributes:
        target: Animator target name the fade flags are addressed to
        rotator: The rotator deciding when content changes
        present: Builds the content event for an item (None clears the target)
    """

    def __init__(self, target: str, rotator: TimedRotator, events: EventManager,
                 present: Callable[[Optional[Any]], Any]):
        self.target = target
        self.rotator = rotator
        self.events = events
        self.present = present

    def configure(self, items: Optional[Sequence[Any]], default_duration: Optional[float] = None):
        """Load a new item list and put its first item on display."""
        self.rotator.configure(items, default_duration)
        self._show(self.rotator.current)

    def clear(self):
        """Drop all items and blank the target."""
        self.configure(None)

    def advance(self, dt: float) -> RotatorEvent:
        event = self.rotator.advance(dt)

        if event is FADE_OUT_REQUESTED:
            self.events.dispatch(AnimatorFlagEvent(self.target, "active", False))
        elif isinstance(event, ItemChanged):
            self._show(event.item)

        return event

    def _show(self, item):
        self.events.dispatch(self.present(item))
        self.events.dispatch(AnimatorFlagEvent(self.target, "active", item is not None))


# ===========================================================
# Channel Factories
# ===========================================================

def background_channel(rotator: TimedRotator, events: EventManager) -> RotatorChannel:
    return RotatorChannel("background", rotator, events, BackgroundChangedEvent)


def hint_channel(rotator: TimedRotator, events: EventManager) -> RotatorChannel:
    return RotatorChannel(
        "hint", rotator, events,
        lambda hint: TextChangedEvent("hint", hint.text if hint is not None else ""),
    )
