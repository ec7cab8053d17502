"""
view.py
-------
Display-side model of the loading screen.

LoadingView listens to the display events on the bus and keeps what
should currently be shown, plus the opacity fades those events ask for.
It has no pygame dependency; LoadingOverlay draws it.
"""

from typing import Any, Dict, Optional

from loadscreen.core.runtime.loading_settings import Fades
from loadscreen.core.services.event_manager import (
    AnimatorFlagEvent,
    BackgroundChangedEvent,
    EventManager,
    ProgressChangedEvent,
    ScreenResetEvent,
    SpinnerToggledEvent,
    TextChangedEvent,
)


class FadeChannel:
    """Opacity in [0, 1] easing linearly toward its target."""

    def __init__(self, fade_time: float = Fades.CONTENT):
        self.fade_time = fade_time
        self.alpha = 0.0
        self._target = 0.0

    def set_active(self, active: bool):
        self._target = 1.0 if active else 0.0

    def snap(self, alpha: float):
        """Jump straight to alpha and stay there."""
        self.alpha = alpha
        self._target = alpha

    def update(self, dt: float):
        if self.fade_time <= 0:
            self.alpha = self._target
            return

        step = dt / self.fade_time
        if self.alpha < self._target:
            self.alpha = min(self.alpha + step, self._target)
        elif self.alpha > self._target:
            self.alpha = max(self.alpha - step, self._target)

    @property
    def active(self) -> bool:
        return self._target > 0

    @property
    def is_visible(self) -> bool:
        return self.alpha > 0


class LoadingView:
    """Current texts, bars, content and fades of the loading screen."""

    TEXT_FIELDS = ("title", "description", "status", "countdown", "hint")

    def __init__(self, screen_fade: float = Fades.SCREEN,
                 content_fade: float = Fades.CONTENT,
                 prompt_fade: float = Fades.CONTINUE_PROMPT):
        self.texts: Dict[str, str] = {name: "" for name in self.TEXT_FIELDS}
        self.progress = 0.0
        self.countdown = 0.0
        self.countdown_max = 0.0
        self.spinner_visible = False
        self.background_image: Optional[Any] = None
        self.interactive = False

        self.fades: Dict[str, FadeChannel] = {
            "screen": FadeChannel(screen_fade),
            "background": FadeChannel(content_fade),
            "hint": FadeChannel(content_fade),
            "continue": FadeChannel(prompt_fade),
        }

        self._events: Optional[EventManager] = None

    # ===========================================================
    # Bus Wiring
    # ===========================================================

    def attach(self, events: EventManager):
        """Start listening to display events on events."""
        self._events = events
        events.subscribe(ScreenResetEvent, self._on_reset)
        events.subscribe(TextChangedEvent, self._on_text)
        events.subscribe(ProgressChangedEvent, self._on_progress)
        events.subscribe(SpinnerToggledEvent, self._on_spinner)
        events.subscribe(AnimatorFlagEvent, self._on_flag)
        events.subscribe(BackgroundChangedEvent, self._on_background)

    def detach(self):
        if self._events is not None:
            for callback in (self._on_reset, self._on_text, self._on_progress,
                             self._on_spinner, self._on_flag, self._on_background):
                self._events.unsubscribe_all(callback)
            self._events = None

    # ===========================================================
    # Event Handlers
    # ===========================================================

    def _on_reset(self, event: ScreenResetEvent):
        self.fades["screen"].snap(0.0)
        self.interactive = False

    def _on_text(self, event: TextChangedEvent):
        self.texts[event.field] = event.text

    def _on_progress(self, event: ProgressChangedEvent):
        if event.field == "countdown":
            self.countdown = event.value
            self.countdown_max = event.maximum
        else:
            self.progress = event.value

    def _on_spinner(self, event: SpinnerToggledEvent):
        self.spinner_visible = event.visible

    def _on_flag(self, event: AnimatorFlagEvent):
        if event.flag == "continue":
            self.fades["continue"].set_active(event.value)
            return

        fade = self.fades.get(event.target)
        if fade is None:
            return
        fade.set_active(event.value)
        if event.target == "screen":
            self.interactive = event.value

    def _on_background(self, event: BackgroundChangedEvent):
        self.background_image = event.image

    # ===========================================================
    # Playback
    # ===========================================================

    def update(self, dt: float):
        """Advance all fades by unscaled dt."""
        for fade in self.fades.values():
            fade.update(dt)

    def visibility(self) -> float:
        """Opacity of the whole screen; the state machine's Ending guard reads this."""
        return self.fades["screen"].alpha

    def alpha(self, name: str) -> float:
        return self.fades[name].alpha
