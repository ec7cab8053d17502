"""
errors.py
---------
Failures the loading sequence reports to its caller.
"""


class LoadingScreenError(Exception):
    """Base class for loading-screen failures."""


class TargetLoadUnavailable(LoadingScreenError):
    """The load source refused to start loading the requested target."""

    def __init__(self, target_id: str):
        super().__init__(f"Unable to load target: {target_id}")
        self.target_id = target_id


class InvalidConfiguration(LoadingScreenError, ValueError):
    """A session or scene description carries invalid values."""
