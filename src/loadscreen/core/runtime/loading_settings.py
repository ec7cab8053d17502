"""
loading_settings.py
-------------------
Centralized constants for the loading screen and its demo window.
"""


# ===========================================================
# Loading Sequence
# ===========================================================

class Loading:
    """Session defaults and phase guards."""
    CONTINUE_WAIT: int = 10
    MINIMUM_WAIT: int = 0
    IMAGE_CHANGE_SPEED: int = 15
    PROGRESS_THRESHOLD: float = 0.9


# ===========================================================
# Content Rotators
# ===========================================================

class Rotators:
    """Timing for the background and hint rotators (seconds)."""
    BACKGROUND_FADE_OFFSET: float = 2.0
    HINT_FADE_OFFSET: float = 2.0
    DEFAULT_HINT_DURATION: float = 15.0


# ===========================================================
# Fade Playback
# ===========================================================

class Fades:
    """Opacity animation lengths used by the display layer (seconds)."""
    SCREEN: float = 0.5
    CONTENT: float = 1.0
    CONTINUE_PROMPT: float = 0.35


# ===========================================================
# Demo Window
# ===========================================================

class Display:
    """Window configuration for the pygame demo driver."""
    WIDTH: int = 1280
    HEIGHT: int = 720
    FPS: int = 60
    CAPTION: str = "Loading Screen"
    BACKGROUND_COLOR = (6, 10, 20)
    TEXT_COLOR = (220, 230, 240)
    ACCENT_COLOR = (180, 220, 255)
