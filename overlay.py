"""Floating transcript panel with a record button."""

from __future__ import annotations

from typing import Callable, Optional

try:
    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import QApplication, QLabel, QPushButton, QVBoxLayout, QWidget
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QApplication = None  # type: ignore
    QLabel = object  # type: ignore
    QPushButton = object  # type: ignore
    QVBoxLayout = object  # type: ignore
    QWidget = object  # type: ignore

_TEXT_STYLE = (
    "color: white; font-size: 18px; padding: 16px;"
    "background: rgba(0,0,0,190); border-radius: 12px;"
)
_ERROR_STYLE = (
    "color: #FF6B6B; font-size: 18px; padding: 16px;"
    "background: rgba(0,0,0,210); border-radius: 12px;"
)
ERROR_PREFIX = "[Error]"


class TranscriptOverlay(QWidget):
    """Qt rendering of ``VoiceUIController`` output. Must be used on the Qt thread."""

    def __init__(self) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowFlags(Qt.WindowStaysOnTopHint | Qt.FramelessWindowHint | Qt.Tool)
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setFixedWidth(600)

        self._label = QLabel("")
        self._label.setWordWrap(True)
        self._label.setStyleSheet(_TEXT_STYLE)
        self._button = QPushButton("Record")
        self._on_toggle: Optional[Callable[[], None]] = None
        self._button.clicked.connect(self._handle_click)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._label)
        layout.addWidget(self._button)
        self.setLayout(layout)

    def set_toggle_handler(self, handler: Callable[[], None]) -> None:
        self._on_toggle = handler

    def set_text(self, text: str) -> None:
        style = _ERROR_STYLE if text.startswith(ERROR_PREFIX) else _TEXT_STYLE
        self._label.setStyleSheet(style)
        self._label.setText(text)
        self._center_top()
        self.show()

    def set_button_label(self, label: str) -> None:
        self._button.setText(label)

    def _handle_click(self) -> None:
        if self._on_toggle is not None:
            self._on_toggle()

    def _center_top(self) -> None:
        """Position the window at the top center of the primary screen."""
        if QApplication is None:
            return
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geom = screen.availableGeometry()
        self.adjustSize()
        x = geom.x() + (geom.width() - self.width()) // 2
        y = geom.y() + 40
        self.move(x, y)
