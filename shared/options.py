"""
Idle timer options and validation shared by the core runtime and the demo.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Callable, Optional


class ConfigurationError(ValueError):
    """Raised when idle timer options are missing required data or are inconsistent."""


class ActivitySource(Enum):
    TOUCH = "touch"
    KEYBOARD_SHOW = "keyboard_show"
    KEYBOARD_HIDE = "keyboard_hide"


class KeyboardEvents(Enum):
    """Which on-screen keyboard transitions count as user activity."""

    HIDE = "hide"
    SHOW = "show"
    BOTH = "both"
    DISABLED = "disabled"

    @classmethod
    def parse(cls, value) -> "KeyboardEvents":
        if isinstance(value, cls):
            return value
        if value is False or value is None:
            return cls.DISABLED
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ConfigurationError(
            f"Unsupported keyboard events setting {value!r}. "
            f"Expected one of: {', '.join(member.value for member in cls)}."
        )


@dataclass(frozen=True)
class ActivitySources:
    touch: bool = True
    keyboard: KeyboardEvents = KeyboardEvents.HIDE

    def __post_init__(self) -> None:
        object.__setattr__(self, "keyboard", KeyboardEvents.parse(self.keyboard))

    def accepts(self, source: ActivitySource) -> bool:
        if source is ActivitySource.TOUCH:
            return self.touch
        if source is ActivitySource.KEYBOARD_SHOW:
            return self.keyboard in (KeyboardEvents.SHOW, KeyboardEvents.BOTH)
        if source is ActivitySource.KEYBOARD_HIDE:
            return self.keyboard in (KeyboardEvents.HIDE, KeyboardEvents.BOTH)
        return False


@dataclass(frozen=True)
class IdleTimerOptions:
    """
    Immutable configuration for a single idle timer.

    Durations are milliseconds. ``prompt_before_idle_ms`` of ``0`` disables the
    prompting phase entirely; otherwise it must be strictly less than
    ``timeout_ms``. Validation happens on construction so an invalid
    combination never reaches an engine.
    """

    timeout_ms: float
    prompt_before_idle_ms: float = 0
    on_idle: Optional[Callable[[], None]] = None
    on_active: Optional[Callable[[], None]] = None
    on_prompt: Optional[Callable[[], None]] = None
    events: ActivitySources = field(default_factory=ActivitySources)
    start_on_mount: bool = True
    initially_paused: bool = False
    debug: bool = False

    def __post_init__(self) -> None:
        timeout = _require_duration(self.timeout_ms, field="timeout_ms")
        prompt = _require_duration(self.prompt_before_idle_ms, field="prompt_before_idle_ms")

        if timeout <= 0:
            raise ConfigurationError(f"timeout_ms must be positive, got {timeout}.")
        if prompt < 0:
            raise ConfigurationError(f"prompt_before_idle_ms must not be negative, got {prompt}.")
        if prompt >= timeout:
            raise ConfigurationError(
                f"prompt_before_idle_ms ({prompt}) must be less than timeout_ms ({timeout})."
            )

        for name in ("on_idle", "on_active", "on_prompt"):
            callback = getattr(self, name)
            if callback is not None and not callable(callback):
                raise ConfigurationError(f"{name} must be callable, got {type(callback).__name__}.")

        if not isinstance(self.events, ActivitySources):
            raise ConfigurationError("events must be an ActivitySources instance.")

    @property
    def prompt_enabled(self) -> bool:
        return self.prompt_before_idle_ms > 0


def _require_duration(value, *, field: str) -> float:
    # bool is a Real subclass.
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ConfigurationError(f"{field} must be a number of milliseconds, got {value!r}.")
    if not math.isfinite(value):
        raise ConfigurationError(f"{field} must be finite, got {value!r}.")
    return value
