"""
load_source.py
--------------
Interface to whatever performs the actual asynchronous load, plus a
tick-driven simulation used by the demo and tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from loadscreen.core.debug.debug_logger import DebugLogger


class LoadSource(ABC):
    """External load operation the state machine polls."""

    @abstractmethod
    def start(self, target_id: str):
        """
        Begin loading target_id.

        Returns:
            An opaque handle, or None if the target cannot be loaded
        """
        pass

    @abstractmethod
    def progress(self, handle) -> float:
        """Non-blocking read of the load fraction in [0, 1]."""
        pass

    @abstractmethod
    def allow_completion(self, handle, value: bool) -> None:
        """Permit (or withhold) the final activation step."""
        pass


# ===========================================================
# Simulated Source
# ===========================================================

# Engine-style async loads park here until activation is allowed.
ACTIVATION_GATE = 0.9


@dataclass
class LoadHandle:
    """Bookkeeping for one simulated load."""
    target_id: str
    duration: float
    elapsed: float = 0.0
    completion_allowed: bool = False
    activated: bool = False


class SimulatedLoadSource(LoadSource):
    """
    Fakes an asynchronous load that takes a fixed time per target.

    Progress rises linearly to 0.9 over the target's duration and stays
    there until allow_completion(True); the next update then activates the
    target and reports 1.0. One load runs at a time: starting a new
    target drops any load that has not activated yet.

    Args:
        durations: Seconds per target id
        default_duration: Seconds for targets not in durations
        known_targets: If given, start() refuses anything outside it
        on_activated: Called with the target id when a load activates
    """

    def __init__(self, durations: Optional[Dict[str, float]] = None,
                 default_duration: float = 3.0,
                 known_targets: Optional[Iterable[str]] = None,
                 on_activated: Optional[Callable[[str], None]] = None):
        self.durations = dict(durations or {})
        self.default_duration = default_duration
        self.known_targets = set(known_targets) if known_targets is not None else None
        self.on_activated = on_activated
        self.active: list = []

    def start(self, target_id: str):
        if self.known_targets is not None and target_id not in self.known_targets:
            DebugLogger.warn(f"Unknown load target '{target_id}'", category="load_source")
            return None

        for stale in self.active:
            DebugLogger.warn(
                f"Dropping superseded load '{stale.target_id}'", category="load_source"
            )
        handle = LoadHandle(target_id, self.durations.get(target_id, self.default_duration))
        self.active = [handle]
        DebugLogger.system(
            f"Started loading '{target_id}' ({handle.duration:.1f}s)", category="load_source"
        )
        return handle

    def progress(self, handle) -> float:
        if handle.activated:
            return 1.0
        if handle.duration <= 0:
            return ACTIVATION_GATE
        return min(handle.elapsed / handle.duration, 1.0) * ACTIVATION_GATE

    def allow_completion(self, handle, value: bool) -> None:
        handle.completion_allowed = value

    def update(self, dt: float) -> None:
        """Advance every running load by dt seconds."""
        for handle in list(self.active):
            handle.elapsed += dt
            if handle.completion_allowed and handle.elapsed >= handle.duration:
                handle.activated = True
                self.active.remove(handle)
                DebugLogger.action(f"Activated '{handle.target_id}'", category="load_source")
                if self.on_activated:
                    self.on_activated(handle.target_id)
