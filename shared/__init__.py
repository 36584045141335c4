"""
Option types shared by the idle timer runtime and its hosts.
"""

from .options import (  # noqa: F401
    ActivitySource,
    ActivitySources,
    ConfigurationError,
    IdleTimerOptions,
    KeyboardEvents,
)
