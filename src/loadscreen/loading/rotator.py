"""
rotator.py
----------
Generic timed content rotation shared by the background and hint displays.

Each item stays visible for its display duration. `fade_offset` seconds
before the duration runs out a fade-out is requested (once), and when the
duration has fully elapsed the next item takes over. Items no longer than
the offset instead fade out when their duration ends and hand over once
the offset has passed as well. The content only changes while the
previous item is already faded out, so the rotator never needs to know how
the fade itself is animated.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar, Union

from loadscreen.core.debug.debug_logger import DebugLogger

T = TypeVar("T")


# ===========================================================
# Rotator Events
# ===========================================================

class RotatorSignal(Enum):
    """Payload-free outcomes of a rotator tick."""
    NO_OP = "no_op"
    FADE_OUT_REQUESTED = "fade_out_requested"


NO_OP = RotatorSignal.NO_OP
FADE_OUT_REQUESTED = RotatorSignal.FADE_OUT_REQUESTED


@dataclass(frozen=True)
class ItemChanged(Generic[T]):
    """The next item is now current; the caller should fade it in."""
    item: T


RotatorEvent = Union[RotatorSignal, ItemChanged]


# ===========================================================
# Timed Rotator
# ===========================================================

class TimedRotator(Generic[T]):
    """
    Cycles through items on a per-item timer.

    Args:
        name: Label used in logs
        duration_of: Returns an item's own display duration; None or 0 means
            "use the default"
        default_duration: Display duration for items without their own
        fade_offset: Seconds reserved at the end of each item for the fade-out
    """

    def __init__(self, name: str,
                 duration_of: Optional[Callable[[T], Optional[float]]] = None,
                 default_duration: float = 15.0,
                 fade_offset: float = 2.0):
        self.name = name
        self.duration_of = duration_of
        self.default_duration = default_duration
        self.fade_offset = fade_offset

        self._items: List[T] = []
        self._cursor = 0
        self._elapsed = 0.0
        self._fade_at = 0.0
        self._switch_at = 0.0
        self._fade_requested = False

    # ===========================================================
    # Configuration
    # ===========================================================

    def configure(self, items: Optional[Sequence[T]], default_duration: Optional[float] = None):
        """
        Replace the item list and restart from the first item.

        Args:
            items: Items in display order (empty or None clears the display)
            default_duration: Override for items without their own duration
        """
        if default_duration is not None:
            self.default_duration = default_duration

        self._items = list(items) if items else []
        self._cursor = 0
        self._elapsed = 0.0
        self._fade_requested = False
        if self._items:
            self._fade_at, self._switch_at = self._schedule(self._items[0])
        else:
            self._fade_at, self._switch_at = 0.0, 0.0

        DebugLogger.trace(
            f"[{self.name}] configured with {len(self._items)} item(s), "
            f"first switch at {self._switch_at:.2f}s"
        )

    # ===========================================================
    # Tick
    # ===========================================================

    def advance(self, dt: float) -> RotatorEvent:
        """
        Move the timer forward by dt seconds.

        Returns:
            NO_OP, FADE_OUT_REQUESTED (edge-triggered, once per item) or
            ItemChanged carrying the new current item.
        """
        if not self._items:
            return NO_OP

        if self._cursor >= len(self._items):
            self._cursor = 0

        self._elapsed += max(dt, 0.0)

        if self._elapsed >= self._switch_at:
            self._cursor = (self._cursor + 1) % len(self._items)
            self._elapsed = 0.0
            self._fade_requested = False
            item = self._items[self._cursor]
            self._fade_at, self._switch_at = self._schedule(item)
            DebugLogger.trace(f"[{self.name}] switched to item {self._cursor}")
            return ItemChanged(item)

        if not self._fade_requested and self._elapsed >= self._fade_at:
            self._fade_requested = True
            DebugLogger.trace(f"[{self.name}] fade-out at {self._elapsed:.2f}s")
            return FADE_OUT_REQUESTED

        return NO_OP

    # ===========================================================
    # Accessors
    # ===========================================================

    @property
    def current(self) -> Optional[T]:
        """Item currently on display, or None when empty."""
        if not self._items:
            return None
        if self._cursor >= len(self._items):
            self._cursor = 0
        return self._items[self._cursor]

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def items(self) -> List[Any]:
        return list(self._items)

    @property
    def fade_requested(self) -> bool:
        return self._fade_requested

    def _display_duration(self, item: T) -> float:
        """Own duration when positive, default otherwise."""
        own = self.duration_of(item) if self.duration_of else None
        return own if own and own > 0 else self.default_duration

    def _schedule(self, item: T):
        """
        Fade-out and switch times for an item.

        Items shorter than the fade offset fade out after their full duration
        and switch once the offset has also passed, so they are never hidden
        on arrival.
        """
        duration = self._display_duration(item)
        if duration > self.fade_offset:
            return duration - self.fade_offset, duration
        return duration, duration + self.fade_offset


# ===========================================================
# Concrete Rotators
# ===========================================================

def image_rotator(fade_offset: float = 2.0, change_speed: float = 15.0) -> TimedRotator:
    """Background rotator: every image shares the session's change speed."""
    return TimedRotator("background", default_duration=change_speed, fade_offset=fade_offset)


def hint_rotator(fade_offset: float = 2.0, default_duration: float = 15.0) -> TimedRotator:
    """Hint rotator: each hint may set its own read time."""
    return TimedRotator(
        "hint",
        duration_of=lambda hint: hint.read_time,
        default_duration=default_duration,
        fade_offset=fade_offset,
    )
