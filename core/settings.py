"""
Registry-backed configuration for the idle timer runtime.

Values live as DWORDs under ``HKCU\\Software\\IdleTimer``. Environment
variables override the registry, and hosts without ``winreg`` fall back to
defaults plus environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Callable, Mapping, Optional

from idle_timer_core.idle_timer_core import logger as app_logger
from shared.options import ActivitySources, IdleTimerOptions, KeyboardEvents

try:
    import winreg
except ModuleNotFoundError:  # pragma: no cover - non-Windows environments
    winreg = None

_LOGGER = app_logger.get_logger()

_BASE_SUBKEY = r"Software\IdleTimer"
_MIN_TIMEOUT_MS = 1_000
_MAX_TIMEOUT_MS = 24 * 60 * 60 * 1_000

DEFAULT_TIMEOUT_MS = 15_000
DEFAULT_PROMPT_BEFORE_IDLE_MS = 5_000

ENV_TIMEOUT_MS = "IDLE_TIMER_TIMEOUT_MS"
ENV_PROMPT_BEFORE_IDLE_MS = "IDLE_TIMER_PROMPT_BEFORE_IDLE_MS"

KEYBOARD_EVENT_CODES = {
    0: KeyboardEvents.DISABLED,
    1: KeyboardEvents.HIDE,
    2: KeyboardEvents.SHOW,
    3: KeyboardEvents.BOTH,
}


@dataclass(eq=True)
class IdleTimerSettings:
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    prompt_before_idle_ms: int = DEFAULT_PROMPT_BEFORE_IDLE_MS
    track_touch: bool = True
    keyboard_events: KeyboardEvents = KeyboardEvents.HIDE
    start_on_mount: bool = True
    initially_paused: bool = False
    debug: bool = False

    def to_options(
        self,
        *,
        on_idle: Optional[Callable[[], None]] = None,
        on_active: Optional[Callable[[], None]] = None,
        on_prompt: Optional[Callable[[], None]] = None,
    ) -> IdleTimerOptions:
        return IdleTimerOptions(
            timeout_ms=self.timeout_ms,
            prompt_before_idle_ms=self.prompt_before_idle_ms,
            on_idle=on_idle,
            on_active=on_active,
            on_prompt=on_prompt,
            events=ActivitySources(touch=self.track_touch, keyboard=self.keyboard_events),
            start_on_mount=self.start_on_mount,
            initially_paused=self.initially_paused,
            debug=self.debug,
        )


class IdleTimerSettingsManager:
    """Loads persisted settings from HKCU and the environment, clamping invalid data."""

    def __init__(
        self,
        *,
        hive: Optional[int] = None,
        winreg_module=winreg,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._winreg = winreg_module
        if hive is None and winreg_module is not None:
            hive = winreg_module.HKEY_CURRENT_USER
        self.hive = hive
        self._environ = os.environ if environ is None else environ

    def read_settings(self) -> IdleTimerSettings:
        return self._apply_environment(self._read_registry())

    def _read_registry(self) -> IdleTimerSettings:
        key = self._open_key()
        if key is None:
            return IdleTimerSettings()

        try:
            timeout_ms = self._read_timeout(key)
            prompt_raw = self._read_dword(key, "PromptBeforeIdleMs")
            prompt_ms = DEFAULT_PROMPT_BEFORE_IDLE_MS if prompt_raw is None else prompt_raw
            return IdleTimerSettings(
                timeout_ms=timeout_ms,
                prompt_before_idle_ms=_sanitize_prompt(prompt_ms, timeout_ms),
                track_touch=self._read_bool(key, "TrackTouch", True),
                keyboard_events=self._read_keyboard_events(key),
                start_on_mount=self._read_bool(key, "StartOnMount", True),
                initially_paused=self._read_bool(key, "InitiallyPaused", False),
                debug=self._read_bool(key, "Debug", False),
            )
        finally:
            self._winreg.CloseKey(key)

    def _apply_environment(self, settings: IdleTimerSettings) -> IdleTimerSettings:
        timeout_ms = self._read_env_int(ENV_TIMEOUT_MS)
        prompt_ms = self._read_env_int(ENV_PROMPT_BEFORE_IDLE_MS)
        if timeout_ms is None and prompt_ms is None:
            return settings

        if timeout_ms is None:
            timeout_ms = settings.timeout_ms
        else:
            timeout_ms = _clamp_timeout(timeout_ms)
        if prompt_ms is None:
            prompt_ms = settings.prompt_before_idle_ms
        return replace(
            settings,
            timeout_ms=timeout_ms,
            prompt_before_idle_ms=_sanitize_prompt(prompt_ms, timeout_ms),
        )

    def _open_key(self):
        if self._winreg is None:
            return None
        try:
            return self._winreg.OpenKey(self.hive, _BASE_SUBKEY, 0, self._winreg.KEY_READ)
        except FileNotFoundError:
            return None

    def _read_bool(self, key, name: str, default: bool) -> bool:
        raw = self._read_dword(key, name)
        if raw is None:
            return default
        return bool(raw)

    def _read_timeout(self, key) -> int:
        raw = self._read_dword(key, "TimeoutMs")
        if raw is None:
            return DEFAULT_TIMEOUT_MS
        return _clamp_timeout(raw)

    def _read_keyboard_events(self, key) -> KeyboardEvents:
        raw = self._read_dword(key, "KeyboardEvents")
        if raw is None:
            return KeyboardEvents.HIDE
        try:
            return KEYBOARD_EVENT_CODES[raw]
        except KeyError:
            _LOGGER.warning("Unknown KeyboardEvents value {} in registry. Using 'hide'.", raw)
            return KeyboardEvents.HIDE

    def _read_dword(self, key, name: str) -> Optional[int]:
        try:
            value, value_type = self._winreg.QueryValueEx(key, name)
        except FileNotFoundError:
            return None
        if value_type != self._winreg.REG_DWORD:
            _LOGGER.warning("Registry value {} has unexpected type {}.", name, value_type)
            return None
        return int(value)

    def _read_env_int(self, name: str) -> Optional[int]:
        raw = self._environ.get(name)
        if raw is None or not raw.strip():
            return None
        try:
            return int(raw)
        except ValueError:
            _LOGGER.warning("Ignoring non-integer {}={!r}.", name, raw)
            return None


def _clamp_timeout(raw: int) -> int:
    if raw < _MIN_TIMEOUT_MS or raw > _MAX_TIMEOUT_MS:
        _LOGGER.warning(
            "Invalid timeout {} ms. Clamping to safe bounds.",
            raw,
        )
    return max(_MIN_TIMEOUT_MS, min(_MAX_TIMEOUT_MS, raw))


def _sanitize_prompt(prompt_ms: int, timeout_ms: int) -> int:
    if prompt_ms < 0 or prompt_ms >= timeout_ms:
        _LOGGER.warning(
            "Prompt lead {} ms is outside [0, {}). Disabling the prompt.",
            prompt_ms,
            timeout_ms,
        )
        return 0
    return prompt_ms
