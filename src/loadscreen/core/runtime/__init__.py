"""
Runtime configuration exports.

Lightweight class constants with no initialization overhead.
"""

from loadscreen.core.runtime.loading_settings import Display, Fades, Loading, Rotators

__all__ = [
    'Display',
    'Fades',
    'Loading',
    'Rotators',
]
