"""
session.py
----------
Immutable description of one load-and-display cycle.

A new LoadingSession is built for every load request; nothing mutates it
afterwards. Sequences passed in are frozen to tuples.
"""

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, Optional, Tuple

from loadscreen.core.runtime.loading_settings import Loading
from loadscreen.loading.errors import InvalidConfiguration


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


# ===========================================================
# Hint
# ===========================================================

@dataclass(frozen=True)
class Hint:
    """A hint line and how long it should stay readable (0 = rotator default)."""
    text: str
    read_time: float = 0

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise InvalidConfiguration(f"Hint text must be a string, got {type(self.text).__name__}")
        if not _is_number(self.read_time) or self.read_time < 0:
            raise InvalidConfiguration(f"Hint read_time must be >= 0, got {self.read_time!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Hint":
        """Build from a config mapping; accepts 'text' or 'hint' for the message."""
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"Hint entry must be a mapping, got {data!r}")
        text = data.get("text", data.get("hint"))
        return cls(text=text, read_time=data.get("read_time", 0))


# ===========================================================
# Loading Session
# ===========================================================

@dataclass(frozen=True)
class LoadingSession:
    """
    Configuration snapshot for a single load operation.

    Attributes:
        target_id: Identifier handed to the load source
        title: Optional heading shown while loading
        description: Optional body text shown while loading
        continue_wait: Countdown seconds before auto-continue (0 skips the prompt)
        minimum_wait: Floor on seconds spent loading, regardless of progress
        images: Background images, in display order
        image_change_speed: Seconds each background image stays visible
        hints: Hint lines, in display order
    """
    target_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    continue_wait: int = Loading.CONTINUE_WAIT
    minimum_wait: int = Loading.MINIMUM_WAIT
    images: Tuple[Any, ...] = field(default_factory=tuple)
    image_change_speed: int = Loading.IMAGE_CHANGE_SPEED
    hints: Tuple[Hint, ...] = field(default_factory=tuple)

    def __post_init__(self):
        images = () if self.images is None else self.images
        hints = () if self.hints is None else self.hints
        if isinstance(images, (str, bytes)) or not hasattr(images, "__iter__"):
            raise InvalidConfiguration(f"images must be a sequence, got {images!r}")
        if isinstance(hints, (str, bytes)) or not hasattr(hints, "__iter__"):
            raise InvalidConfiguration(f"hints must be a sequence, got {hints!r}")

        hints = tuple(Hint.from_dict(h) if isinstance(h, dict) else h for h in hints)
        object.__setattr__(self, "images", tuple(images))
        object.__setattr__(self, "hints", hints)
        self.validate()

    # ===========================================================
    # Validation
    # ===========================================================

    def validate(self) -> None:
        """Raise InvalidConfiguration if any field is out of range."""
        if not isinstance(self.target_id, str) or not self.target_id:
            raise InvalidConfiguration("target_id must be a non-empty string")

        for name in ("title", "description"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise InvalidConfiguration(f"{name} must be a string or None")

        for name in ("continue_wait", "minimum_wait"):
            value = getattr(self, name)
            if not _is_number(value) or value < 0:
                raise InvalidConfiguration(f"{name} must be >= 0, got {value!r}")

        if not _is_number(self.image_change_speed) or self.image_change_speed <= 0:
            raise InvalidConfiguration(
                f"image_change_speed must be > 0, got {self.image_change_speed!r}"
            )

        for hint in self.hints:
            if not isinstance(hint, Hint):
                raise InvalidConfiguration(f"hints must contain Hint entries, got {hint!r}")

    @property
    def show_continue(self) -> bool:
        return self.continue_wait > 0

    # ===========================================================
    # Construction Helpers
    # ===========================================================

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoadingSession":
        """Build a session from a plain mapping (unknown keys are rejected)."""
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"Session config must be a mapping, got {data!r}")
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise InvalidConfiguration(f"Unknown session keys: {sorted(unknown)}")
        if "target_id" not in data:
            raise InvalidConfiguration("Session config is missing 'target_id'")
        return cls(**data)
