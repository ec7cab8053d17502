"""
config.py
---------
Tunable timing for a loading screen instance, with optional file overrides.
"""

from dataclasses import dataclass

from loadscreen.core.runtime.loading_settings import Fades, Loading, Rotators
from loadscreen.core.services.config_manager import load_config
from loadscreen.loading.errors import InvalidConfiguration

CONFIG_FILE = "loading_screen.json"


@dataclass(frozen=True)
class LoadingConfig:
    """Per-instance timing; fade offsets are independent per rotator."""
    background_fade_offset: float = Rotators.BACKGROUND_FADE_OFFSET
    hint_fade_offset: float = Rotators.HINT_FADE_OFFSET
    default_hint_duration: float = Rotators.DEFAULT_HINT_DURATION
    progress_threshold: float = Loading.PROGRESS_THRESHOLD
    screen_fade_time: float = Fades.SCREEN
    content_fade_time: float = Fades.CONTENT

    def __post_init__(self):
        for name in ("background_fade_offset", "hint_fade_offset", "screen_fade_time",
                     "content_fade_time"):
            if getattr(self, name) < 0:
                raise InvalidConfiguration(f"{name} must be >= 0")
        if self.default_hint_duration <= 0:
            raise InvalidConfiguration("default_hint_duration must be > 0")
        if self.default_hint_duration <= self.hint_fade_offset:
            raise InvalidConfiguration("default_hint_duration must exceed hint_fade_offset")
        if not 0.0 < self.progress_threshold <= 1.0:
            raise InvalidConfiguration("progress_threshold must be in (0, 1]")


def defaults_dict() -> dict:
    """Defaults in the nested layout used by loading_screen.json."""
    return {
        "rotators": {
            "background_fade_offset": Rotators.BACKGROUND_FADE_OFFSET,
            "hint_fade_offset": Rotators.HINT_FADE_OFFSET,
            "default_hint_duration": Rotators.DEFAULT_HINT_DURATION,
        },
        "loading": {
            "progress_threshold": Loading.PROGRESS_THRESHOLD,
        },
        "fades": {
            "screen": Fades.SCREEN,
            "content": Fades.CONTENT,
        },
    }


def load_loading_config(filename: str = CONFIG_FILE, strict: bool = False) -> LoadingConfig:
    """
    Build a LoadingConfig from constants merged with a config file.

    Args:
        filename: JSON or .py config resolved through the config index
        strict: Raise FileNotFoundError instead of falling back to defaults
    """
    data = load_config(filename, defaults_dict(), strict=strict)
    rotators = data["rotators"]
    return LoadingConfig(
        background_fade_offset=float(rotators["background_fade_offset"]),
        hint_fade_offset=float(rotators["hint_fade_offset"]),
        default_hint_duration=float(rotators["default_hint_duration"]),
        progress_threshold=float(data["loading"]["progress_threshold"]),
        screen_fade_time=float(data["fades"]["screen"]),
        content_fade_time=float(data["fades"]["content"]),
    )
