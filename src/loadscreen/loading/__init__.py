"""
Loading sequence exports.

State machine, rotators, session data and the display model.
"""

from loadscreen.loading.config import LoadingConfig, load_loading_config
from loadscreen.loading.errors import InvalidConfiguration, LoadingScreenError, TargetLoadUnavailable
from loadscreen.loading.load_source import LoadSource, SimulatedLoadSource
from loadscreen.loading.rotator import FADE_OUT_REQUESTED, NO_OP, ItemChanged, TimedRotator
from loadscreen.loading.scene_info import SceneInfo, SceneInfoLoader
from loadscreen.loading.session import Hint, LoadingSession
from loadscreen.loading.state_machine import (
    LoadingStateMachine,
    get_loading_screen,
    init_loading_screen,
    reset_loading_screen,
)
from loadscreen.loading.states import LoadingPhase
from loadscreen.loading.view import FadeChannel, LoadingView

__all__ = [
    'FADE_OUT_REQUESTED',
    'FadeChannel',
    'Hint',
    'InvalidConfiguration',
    'ItemChanged',
    'LoadSource',
    'LoadingConfig',
    'LoadingPhase',
    'LoadingScreenError',
    'LoadingSession',
    'LoadingStateMachine',
    'LoadingView',
    'NO_OP',
    'SceneInfo',
    'SceneInfoLoader',
    'SimulatedLoadSource',
    'TargetLoadUnavailable',
    'TimedRotator',
    'get_loading_screen',
    'init_loading_screen',
    'load_loading_config',
    'reset_loading_screen',
]
