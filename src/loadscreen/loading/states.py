"""
states.py
---------
The five phases of a loading sequence.

Each state gets enter/update/exit hooks with the owning state machine as
context. The set is closed: Idle -> Loading -> PostLoadWait ->
(Continue) -> Ending -> Idle.
"""

from abc import ABC, abstractmethod
from enum import Enum

from loadscreen.core.debug.debug_logger import DebugLogger
from loadscreen.core.services.event_manager import (
    AnimatorFlagEvent,
    ProgressChangedEvent,
    ScreenResetEvent,
    SpinnerToggledEvent,
    TextChangedEvent,
)


class LoadingPhase(Enum):
    """Lifecycle phases of the loading screen."""
    IDLE = "idle"
    LOADING = "loading"
    POST_LOAD_WAIT = "post_load_wait"
    CONTINUE = "continue"
    ENDING = "ending"


class BaseLoadingState(ABC):
    """Base interface for loading phases."""

    phase: LoadingPhase

    def enter(self, machine):
        pass

    @abstractmethod
    def update(self, machine, dt: float, any_input: bool):
        """
        Per-tick guard.

        Args:
            machine: Owning LoadingStateMachine
            dt: Unscaled seconds since the previous tick
            any_input: True if any key/button went down this tick
        """
        pass

    def exit(self, machine):
        pass


# ===========================================================
# Idle
# ===========================================================

class IdleState(BaseLoadingState):
    """Hidden, blank, waiting for request_load()."""

    phase = LoadingPhase.IDLE

    def enter(self, machine):
        events = machine.events
        events.dispatch(SpinnerToggledEvent(False))
        events.dispatch(ScreenResetEvent())
        events.dispatch(TextChangedEvent("status", ""))
        events.dispatch(ProgressChangedEvent("progress", 0.0))
        events.dispatch(TextChangedEvent("countdown", ""))
        events.dispatch(ProgressChangedEvent("countdown", 0.0, 0.0))
        events.dispatch(TextChangedEvent("title", ""))
        events.dispatch(TextChangedEvent("description", ""))
        machine.background.clear()
        machine.hints.clear()

    def update(self, machine, dt, any_input):
        pass


# ===========================================================
# Loading
# ===========================================================

class LoadingState(BaseLoadingState):
    """Polls the load source until progress crosses the threshold."""

    phase = LoadingPhase.LOADING

    def enter(self, machine):
        machine.reset_loading_time()
        session = machine.session
        events = machine.events

        events.dispatch(SpinnerToggledEvent(True))
        events.dispatch(AnimatorFlagEvent("screen", "active", True))

        if session.title:
            events.dispatch(TextChangedEvent("title", session.title))
        if session.description:
            events.dispatch(TextChangedEvent("description", session.description))

        events.dispatch(ProgressChangedEvent(
            "countdown", float(session.continue_wait), float(session.continue_wait)
        ))

        machine.background.configure(session.images, session.image_change_speed)
        machine.hints.configure(session.hints)

    def update(self, machine, dt, any_input):
        machine.accumulate_loading_time(dt)
        progress = machine.poll_progress()

        machine.events.dispatch(TextChangedEvent("status", f"{round(progress * 100)}%"))
        machine.events.dispatch(ProgressChangedEvent("progress", progress))

        if progress < machine.config.progress_threshold:
            return

        machine.set_state(PostLoadWaitState())


# ===========================================================
# Post-Load Wait
# ===========================================================

class PostLoadWaitState(BaseLoadingState):
    """Holds the screen until the session's minimum wait has passed."""

    phase = LoadingPhase.POST_LOAD_WAIT

    def __init__(self):
        self.baseline = 0.0

    def enter(self, machine):
        self.baseline = machine.loading_time

    def update(self, machine, dt, any_input):
        machine.accumulate_loading_time(dt)

        session = machine.session
        if machine.loading_time < session.minimum_wait:
            return

        machine.set_state(ContinueState() if session.show_continue else EndingState())

    def exit(self, machine):
        DebugLogger.trace(
            f"Load finished at {self.baseline:.2f}s, held until {machine.loading_time:.2f}s",
            category="loading"
        )
        machine.events.dispatch(SpinnerToggledEvent(False))


# ===========================================================
# Continue
# ===========================================================

class ContinueState(BaseLoadingState):
    """Countdown that any input can cut short."""

    phase = LoadingPhase.CONTINUE

    def __init__(self):
        self.timer = 0.0

    def enter(self, machine):
        self.timer = float(machine.session.continue_wait)
        machine.events.dispatch(AnimatorFlagEvent("screen", "continue", True))

    def update(self, machine, dt, any_input):
        if self.timer > 0:
            self.timer -= dt

        remaining = max(self.timer, 0.0)
        events = machine.events
        events.dispatch(ProgressChangedEvent(
            "countdown", remaining, float(machine.session.continue_wait)
        ))
        events.dispatch(TextChangedEvent("countdown", str(round(remaining))))

        if any_input or self.timer <= 0:
            machine.set_state(EndingState())

    def exit(self, machine):
        machine.events.dispatch(AnimatorFlagEvent("screen", "continue", False))


# ===========================================================
# Ending
# ===========================================================

class EndingState(BaseLoadingState):
    """Lets the load activate and waits for the screen to fade out."""

    phase = LoadingPhase.ENDING

    def enter(self, machine):
        machine.events.dispatch(AnimatorFlagEvent("screen", "active", False))
        machine.allow_completion(True)

    def update(self, machine, dt, any_input):
        if machine.visibility() > 0:
            return

        machine.set_state(IdleState())
        machine.end_loading()
