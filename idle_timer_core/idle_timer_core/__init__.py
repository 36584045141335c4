"""
idle_timer_core package.

Runtime support for the idle timer demo application.
"""

__all__ = [
    "logger",
]
