"""
Main demo window showing idle timer state, countdown and controls.
"""

from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from core.idle_engine import IdleTimerSnapshot, Phase

PHASE_COLORS = {
    Phase.ACTIVE: "#4CAF50",
    Phase.PROMPTING: "#FF9800",
    Phase.IDLE: "#F44336",
    Phase.PAUSED: "#9E9E9E",
}

PHASE_LABELS = {
    Phase.ACTIVE: "Active",
    Phase.PROMPTING: "Warning!",
    Phase.IDLE: "Idle",
    Phase.PAUSED: "Paused",
}


class StatusWindow(QWidget):
    resetRequested = Signal()
    pauseRequested = Signal()
    resumeRequested = Signal()

    def __init__(self, timeout_ms: float, prompt_before_idle_ms: float, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Idle Timer Demo")
        self.setMinimumWidth(360)

        title = QLabel("Idle Timer Demo")
        title.setStyleSheet("font-weight: bold; font-size: 20px;")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._state_label = QLabel()
        self._state_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._state_label.setMinimumHeight(40)

        timer_caption = QLabel("Time until idle:")
        timer_caption.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._remaining_label = QLabel()
        self._remaining_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._remaining_label.setStyleSheet("font-size: 36px; font-weight: bold;")

        self._last_active_label = QLabel()
        self._last_idle_label = QLabel()
        config_label = QLabel(
            f"Timeout: {timeout_ms / 1000:g}s, prompt {prompt_before_idle_ms / 1000:g}s before idle"
        )
        config_label.setStyleSheet("color: #666666;")

        reset_button = QPushButton("Reset")
        pause_button = QPushButton("Pause")
        resume_button = QPushButton("Resume")
        reset_button.clicked.connect(self.resetRequested)  # type: ignore[arg-type]
        pause_button.clicked.connect(self.pauseRequested)  # type: ignore[arg-type]
        resume_button.clicked.connect(self.resumeRequested)  # type: ignore[arg-type]

        buttons = QHBoxLayout()
        for button in (reset_button, pause_button, resume_button):
            button.setMinimumHeight(32)
            buttons.addWidget(button)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(10)
        layout.addWidget(title)
        layout.addWidget(self._state_label)
        layout.addWidget(timer_caption)
        layout.addWidget(self._remaining_label)
        layout.addWidget(self._last_active_label)
        layout.addWidget(self._last_idle_label)
        layout.addWidget(config_label)
        layout.addLayout(buttons)

    def show_snapshot(self, snapshot: IdleTimerSnapshot, last_active_text: str, last_idle_text: str) -> None:
        color = PHASE_COLORS.get(snapshot.phase, "#000000")
        self._state_label.setText(PHASE_LABELS.get(snapshot.phase, snapshot.phase.value))
        self._state_label.setStyleSheet(
            f"background-color: {color}; color: white; border-radius: 8px;"
            " font-size: 18px; font-weight: bold;"
        )
        self._remaining_label.setText(f"{snapshot.remaining_sec}s")
        self._last_active_label.setText(f"Last active: {last_active_text}")
        self._last_idle_label.setText(f"Last idle: {last_idle_text}")
