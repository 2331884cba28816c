"""Application entrypoint."""

from __future__ import annotations

import logging
import sys

from config import JsonConfigStore
from hotkey import GlobalHotkeyAdapter
from overlay import TranscriptOverlay
from recorder import SoundDeviceRecorder
from transcription_client import TranscriptionClient
from uploader import HttpTranscriptUploader
from voice_ui import VoiceUIController

try:
    from PySide6.QtCore import QObject, QSize, Signal
    from PySide6.QtGui import QAction, QBrush, QColor, QIcon, QPainter, QPixmap
    from PySide6.QtWidgets import QApplication, QInputDialog, QMenu, QMessageBox, QSystemTrayIcon
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def _create_icon(color: str = "#888888", size: int = 22) -> QIcon:
    """Generate a simple circular tray icon with the given color."""
    pixmap = QPixmap(QSize(size, size))
    pixmap.fill(QColor(0, 0, 0, 0))
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setBrush(QBrush(QColor(color)))
    painter.setPen(QColor(color))
    painter.drawEllipse(2, 2, size - 4, size - 4)
    painter.end()
    return QIcon(pixmap)


ICON_IDLE = "#888888"
ICON_RECORDING = "#FF4444"


class UIBridge(QObject):
    transcript_signal = Signal(str)
    error_signal = Signal(str, str)  # code, message
    toggle_signal = Signal()


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.app.setQuitOnLastWindowClosed(False)
        self.config_store = JsonConfigStore()
        configure_logging(self.config_store.get_log_level())

        log_requests = self.config_store.get_log_requests()
        self.client = TranscriptionClient(
            recorder=SoundDeviceRecorder(),
            uploader=HttpTranscriptUploader(
                url=self.config_store.get_endpoint_url(),
                timeout_s=self.config_store.get_request_timeout_s(),
                log_requests=log_requests,
            ),
            device=self.config_store.get_microphone_device(),
            sample_rate=self.config_store.get_sample_rate_hz(),
            max_record_seconds=self.config_store.get_max_record_seconds(),
            log_requests=log_requests,
        )

        self.overlay = TranscriptOverlay()
        self.controller = VoiceUIController(self.client, view=self.overlay)
        self.overlay.set_toggle_handler(self._toggle)
        self.overlay.set_button_label(self.controller.start_label)

        # Client events arrive on submission threads; queue them onto the Qt thread.
        self.ui = UIBridge()
        self.ui.transcript_signal.connect(self._on_transcript_ui)
        self.ui.error_signal.connect(self._on_error_ui)
        self.ui.toggle_signal.connect(self._toggle)
        self.client.add_transcript_listener(self.ui.transcript_signal.emit)
        self.client.add_error_listener(self.ui.error_signal.emit)

        self.hotkey = GlobalHotkeyAdapter(hotkey_name=self.config_store.get_hotkey())

        self.tray = QSystemTrayIcon()
        self.tray.setIcon(_create_icon(ICON_IDLE))
        self.tray.setToolTip("Voice Transcriber: Ready")
        self._setup_menu()
        self.tray.show()

    def _setup_menu(self) -> None:
        menu = QMenu()

        url_action = QAction("Set Endpoint URL", menu)
        url_action.triggered.connect(self._set_endpoint_url)
        menu.addAction(url_action)

        mic_action = QAction("Select Microphone", menu)
        mic_action.triggered.connect(self._select_microphone)
        menu.addAction(mic_action)

        hotkey_action = QAction("Set Hotkey", menu)
        hotkey_action.triggered.connect(self._set_hotkey)
        menu.addAction(hotkey_action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit)
        menu.addAction(quit_action)

        self.tray.setContextMenu(menu)

    def _set_endpoint_url(self) -> None:
        value, ok = QInputDialog.getText(None, "Endpoint", "Transcription endpoint URL")
        if not ok:
            return
        self.config_store.set_endpoint_url(value)
        QMessageBox.information(None, "Saved", "Endpoint saved. Restart app to apply.")

    def _select_microphone(self) -> None:
        devices = SoundDeviceRecorder.list_input_devices()
        names = ["default"] + [f"{d['id']}: {d['name']}" for d in devices]
        value, ok = QInputDialog.getItem(None, "Microphone", "Input device", names, 0, False)
        if not ok:
            return
        device = "" if value == "default" else value.split(":", 1)[0]
        self.config_store.set_microphone_device(device)
        QMessageBox.information(None, "Saved", "Microphone saved. Restart app to apply.")

    def _set_hotkey(self) -> None:
        value, ok = QInputDialog.getText(
            None, "Hotkey", "Use pynput key format, e.g. Key.f9"
        )
        if not ok or not value:
            return
        self.config_store.set_hotkey(value)
        QMessageBox.information(None, "Saved", "Hotkey saved. Restart app to apply.")

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _toggle(self) -> None:
        self.controller.toggle_recording()
        self._refresh_tray()

    def _on_transcript_ui(self, text: str) -> None:
        self.controller.on_transcript(text)
        self._refresh_tray()

    def _on_error_ui(self, code: str, message: str) -> None:
        self.controller.on_error(code, message)
        self._refresh_tray()

    def _refresh_tray(self) -> None:
        if self.client.is_recording:
            self.tray.setIcon(_create_icon(ICON_RECORDING))
            self.tray.setToolTip("Voice Transcriber: Recording...")
        else:
            self.tray.setIcon(_create_icon(ICON_IDLE))
            self.tray.setToolTip("Voice Transcriber: Ready")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        self.overlay.set_text("Press the hotkey or Record to start.")
        try:
            self.hotkey.start(on_toggle=self.ui.toggle_signal.emit)
        except Exception as exc:
            logger.warning("Hotkey disabled: %s", exc)
            self.overlay.set_text(f"[Error] Hotkey disabled: {exc}")
        return self.app.exec()

    def quit(self) -> None:
        self.hotkey.stop()
        self.client.close()
        self.app.quit()


def main() -> int:
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
