"""
state_machine.py
----------------
Sequences one loading screen: start the load, keep the display alive while
it runs, hold for the minimum wait and the optional continue prompt, then
fade out and hand control back.

Responsibilities
----------------
- Own the current phase and the active LoadingSession.
- Start and poll the external load source.
- Drive the background and hint rotators from the same tick.
- Report LoadingStarted / LoadingEnded through the event bus.
"""

from typing import Callable, Optional

from loadscreen.core.debug.debug_logger import DebugLogger
from loadscreen.core.services.event_manager import (
    EventManager,
    LoadingEndedEvent,
    LoadingStartedEvent,
    get_events,
)
from loadscreen.loading.channels import background_channel, hint_channel
from loadscreen.loading.config import LoadingConfig
from loadscreen.loading.errors import InvalidConfiguration, TargetLoadUnavailable
from loadscreen.loading.load_source import LoadSource
from loadscreen.loading.rotator import hint_rotator, image_rotator
from loadscreen.loading.session import LoadingSession
from loadscreen.loading.states import (
    BaseLoadingState,
    IdleState,
    LoadingPhase,
    LoadingState,
)


class LoadingStateMachine:
    """Runs the Idle -> Loading -> PostLoadWait -> Continue -> Ending cycle."""

    # ===========================================================
    # Initialization
    # ===========================================================

    def __init__(self, load_source: LoadSource,
                 events: Optional[EventManager] = None,
                 config: Optional[LoadingConfig] = None,
                 visibility: Optional[Callable[[], float]] = None):
        """
        Args:
            load_source: Performs the actual load
            events: Bus for display commands and lifecycle events
            config: Timing overrides (defaults from loading_settings)
            visibility: Current opacity of the screen as drawn by the display
                layer; Ending waits for it to reach 0. Without a display
                layer the screen counts as already hidden.
        """
        self.load_source = load_source
        self.events = events or get_events()
        self.config = config or LoadingConfig()
        self.visibility = visibility or (lambda: 0.0)

        self.background = background_channel(
            image_rotator(fade_offset=self.config.background_fade_offset), self.events
        )
        self.hints = hint_channel(
            hint_rotator(
                fade_offset=self.config.hint_fade_offset,
                default_duration=self.config.default_hint_duration,
            ),
            self.events,
        )

        self._session: Optional[LoadingSession] = None
        self._load_handle = None
        self._loading_time = 0.0
        self._state: Optional[BaseLoadingState] = None

        self.set_state(IdleState())
        DebugLogger.init("LoadingStateMachine ready", category="loading")

    # ===========================================================
    # Public API
    # ===========================================================

    def request_load(self, session: LoadingSession) -> None:
        """
        Start a loading sequence for session.

        Raises:
            InvalidConfiguration: session is malformed; nothing changes
            TargetLoadUnavailable: the load source refused the target;
                the machine stays Idle and LoadingStarted is not sent
        """
        if not isinstance(session, LoadingSession):
            raise InvalidConfiguration(f"Expected a LoadingSession, got {type(session).__name__}")
        session.validate()

        if self.phase is not LoadingPhase.IDLE:
            DebugLogger.warn(
                f"request_load('{session.target_id}') while {self.phase.value}; "
                f"replacing the active session",
                category="loading"
            )

        handle = self.load_source.start(session.target_id)
        if handle is None:
            DebugLogger.fail(f"Unable to load target: {session.target_id}", category="loading")
            if self.phase is not LoadingPhase.IDLE:
                self._discard_session()
                self.set_state(IdleState())
            raise TargetLoadUnavailable(session.target_id)

        self._session = session
        self._load_handle = handle
        self.allow_completion(False)

        self.events.dispatch(LoadingStartedEvent())
        self.set_state(LoadingState())

    def advance(self, dt: float, any_input: bool = False) -> None:
        """
        Run one tick.

        Args:
            dt: Unscaled seconds since the previous tick
            any_input: True if any key/button went down this tick
        """
        dt = max(dt, 0.0)
        state = self._state
        state.update(self, dt, any_input)

        # A phase entered mid-tick gets its guard checked with no extra time
        for _ in range(2 * len(LoadingPhase)):
            if self._state is state:
                break
            state = self._state
            state.update(self, 0.0, False)

        if self._session is not None:
            self.background.advance(dt)
            self.hints.advance(dt)

    def set_state(self, state: BaseLoadingState) -> None:
        """Exit the current phase and enter state."""
        previous = self._state
        if previous is not None:
            previous.exit(self)
            DebugLogger.state(f"{previous.phase.value} → {state.phase.value}")

        self._state = state
        state.enter(self)

    # ===========================================================
    # Accessors
    # ===========================================================

    @property
    def phase(self) -> LoadingPhase:
        return self._state.phase

    @property
    def state(self) -> BaseLoadingState:
        return self._state

    @property
    def session(self) -> Optional[LoadingSession]:
        return self._session

    @property
    def loading_time(self) -> float:
        """Seconds spent in Loading and PostLoadWait for the current (or last) session."""
        return self._loading_time

    @property
    def is_active(self) -> bool:
        return self.phase is not LoadingPhase.IDLE

    # ===========================================================
    # State Hooks
    # ===========================================================

    def reset_loading_time(self) -> None:
        self._loading_time = 0.0

    def accumulate_loading_time(self, dt: float) -> None:
        self._loading_time += dt

    def poll_progress(self) -> float:
        """Current load fraction clamped to [0, 1]."""
        progress = self.load_source.progress(self._load_handle)
        return min(max(float(progress), 0.0), 1.0)

    def allow_completion(self, value: bool) -> None:
        self.load_source.allow_completion(self._load_handle, value)

    def end_loading(self) -> None:
        """Drop the finished session and notify the caller."""
        target = self._session.target_id if self._session else "?"
        self._discard_session()
        DebugLogger.action(
            f"Finished loading '{target}' after {self._loading_time:.2f}s", category="loading"
        )
        self.events.dispatch(LoadingEndedEvent())

    def _discard_session(self) -> None:
        self._session = None
        self._load_handle = None


# ===========================================================
# Process-wide Access
# ===========================================================

_LOADING_SCREEN = None


def init_loading_screen(load_source: LoadSource, **kwargs) -> LoadingStateMachine:
    """
    Create the process-wide loading screen once.

    Later calls return the existing instance unchanged; call
    reset_loading_screen() first to rebuild it.
    """
    global _LOADING_SCREEN
    if _LOADING_SCREEN is None:
        _LOADING_SCREEN = LoadingStateMachine(load_source, **kwargs)
    return _LOADING_SCREEN


def get_loading_screen() -> LoadingStateMachine:
    """Return the process-wide loading screen."""
    if _LOADING_SCREEN is None:
        raise RuntimeError("Loading screen not initialized; call init_loading_screen() first")
    return _LOADING_SCREEN


def reset_loading_screen() -> None:
    """Drop the process-wide instance. Use for testing or full restart."""
    global _LOADING_SCREEN
    _LOADING_SCREEN = None
