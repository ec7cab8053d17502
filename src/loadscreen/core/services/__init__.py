"""
Core services exports.

Provides the event bus and configuration loading.
"""

from loadscreen.core.services.config_manager import load_config
from loadscreen.core.services.event_manager import (
    get_events,
    reset_events,
    EventManager,
    BaseEvent,
    LoadingStartedEvent,
    LoadingEndedEvent,
    ScreenResetEvent,
    TextChangedEvent,
    ProgressChangedEvent,
    SpinnerToggledEvent,
    AnimatorFlagEvent,
    BackgroundChangedEvent,
)

__all__ = [
    # Config
    'load_config',
    # Events
    'get_events',
    'reset_events',
    'EventManager',
    'BaseEvent',
    'LoadingStartedEvent',
    'LoadingEndedEvent',
    'ScreenResetEvent',
    'TextChangedEvent',
    'ProgressChangedEvent',
    'SpinnerToggledEvent',
    'AnimatorFlagEvent',
    'BackgroundChangedEvent',
]
