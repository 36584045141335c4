"""
Idle detection engine and its Qt integration.
"""

from .idle_engine import IdleEngine, IdleTimerSnapshot, Phase  # noqa: F401
from .scheduler import AsyncioScheduler, QtScheduler, Scheduler  # noqa: F401
