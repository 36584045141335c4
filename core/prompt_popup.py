"""
Popup card shown while the idle timer is prompting or idle.
"""

from __future__ import annotations

from enum import Enum

from PySide6.QtCore import QPoint, QSize, Qt, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QApplication,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QStyle,
    QVBoxLayout,
    QWidget,
)


class PopupMode(Enum):
    HIDDEN = "hidden"
    PROMPT = "prompt"
    IDLE = "idle"


class PromptPopup(QWidget):
    """
    Frameless card in the bottom-right corner.

    In prompt mode it asks "Are you still there?" with a live countdown; in
    idle mode it reports the timeout. Either button emits ``stayActive``.
    """

    stayActive = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        flags = Qt.WindowType.Tool | Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint
        super().__init__(parent)
        self.setWindowFlags(flags)
        self.setObjectName("PromptPopup")
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setWindowOpacity(0.95)

        self._mode = PopupMode.HIDDEN

        self._container = QWidget(self)
        self._container.setObjectName("PopupCard")
        shadow = QGraphicsDropShadowEffect(self._container)
        shadow.setBlurRadius(24)
        shadow.setColor(QColor(0, 0, 0, 140))
        shadow.setOffset(0, 10)
        self._container.setGraphicsEffect(shadow)

        self._icon_label = QLabel()
        self._icon_label.setFixedSize(48, 48)
        self._icon_label.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)

        self._title_label = QLabel()
        self._title_label.setObjectName("PopupTitle")
        self._title_label.setStyleSheet("font-weight: bold; font-size: 14px;")

        self._countdown_label = QLabel()
        self._countdown_label.setObjectName("PopupCountdown")
        self._countdown_label.setStyleSheet("font-size: 28px; font-weight: bold;")

        self._message_label = QLabel()
        self._message_label.setWordWrap(True)
        self._message_label.setObjectName("PopupMessage")
        self._message_label.setMaximumWidth(320)

        self._action_button = QPushButton()
        self._action_button.setCursor(Qt.CursorShape.PointingHandCursor)
        self._action_button.setMinimumHeight(34)
        self._action_button.setIconSize(QSize(18, 18))
        self._action_button.clicked.connect(self.stayActive)  # type: ignore[arg-type]

        actions_row = QHBoxLayout()
        actions_row.setContentsMargins(0, 6, 0, 0)
        actions_row.addStretch()
        actions_row.addWidget(self._action_button)

        text_layout = QVBoxLayout()
        text_layout.setSpacing(4)
        text_layout.addWidget(self._title_label)
        text_layout.addWidget(self._countdown_label)
        text_layout.addWidget(self._message_label)
        text_layout.addLayout(actions_row)

        base_layout = QHBoxLayout(self)
        base_layout.setContentsMargins(0, 0, 0, 0)
        base_layout.addWidget(self._container)

        layout = QHBoxLayout(self._container)
        layout.addWidget(self._icon_label, alignment=Qt.AlignmentFlag.AlignTop)
        layout.addLayout(text_layout)
        layout.setContentsMargins(12, 10, 12, 12)
        layout.setSpacing(10)
        self.setMinimumWidth(320)
        self.setMaximumWidth(420)

        self.setStyleSheet(
            """
            QWidget#PopupCard {
                background-color: rgba(24, 24, 28, 0.85);
                color: white;
                border-radius: 12px;
                border: 1px solid rgba(255, 255, 255, 0.10);
            }
            QWidget#PopupCard QLabel {
                color: white;
            }
            QWidget#PopupCard QLabel#PopupMessage {
                color: rgba(255, 255, 255, 0.85);
            }
            QWidget#PopupCard QPushButton {
                padding: 0 14px;
                border-radius: 8px;
                background-color: rgba(255, 255, 255, 0.16);
                color: white;
            }
            QWidget#PopupCard QPushButton:hover {
                background-color: rgba(255, 255, 255, 0.26);
            }
            """
        )

    @property
    def mode(self) -> PopupMode:
        return self._mode

    def show_prompt(self, remaining_sec: int) -> None:
        self._mode = PopupMode.PROMPT
        self._set_icon(QStyle.StandardPixmap.SP_MessageBoxWarning)
        self._title_label.setText("Are you still there?")
        self._message_label.setText("Move the mouse, press a key or use the button to stay active.")
        self._action_button.setText("I'm here!")
        self._countdown_label.setVisible(True)
        self.update_countdown(remaining_sec)
        self._present()

    def show_idle(self) -> None:
        self._mode = PopupMode.IDLE
        self._set_icon(QStyle.StandardPixmap.SP_MessageBoxCritical)
        self._title_label.setText("Session Timed Out")
        self._message_label.setText("You've been idle. Press Resume to continue.")
        self._action_button.setText("Resume")
        self._countdown_label.setVisible(False)
        self._present()

    def update_countdown(self, remaining_sec: int) -> None:
        self._countdown_label.setText(f"{remaining_sec}s")

    def dismiss(self) -> None:
        self._mode = PopupMode.HIDDEN
        self.hide()

    def _set_icon(self, standard_icon: QStyle.StandardPixmap) -> None:
        self._icon_label.setPixmap(self.style().standardIcon(standard_icon).pixmap(48, 48))

    def _present(self) -> None:
        self.adjustSize()
        self._position_bottom_right()
        self.show()

    def _position_bottom_right(self) -> None:
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geometry = screen.availableGeometry()
        x = geometry.right() - self.width() - 20
        y = geometry.bottom() - self.height() - 20
        self.move(QPoint(x, y))
