"""Application entrypoint."""

from __future__ import annotations

import logging
import sys
from typing import Callable

from clipboard import SystemClipboard
from config import DEFAULT_HOTKEYS, JsonConfigStore, configure_logging
from executor import RecognitionExecutor
from hotkey import GlobalHotkeyAdapter, build_bindings
from models import TriggerKind
from preferences import PreferencesDialog
from recognizer import build_recognizer
from renderer import MathRenderer
from request_controller import RequestController
from result_window import ResultWindow

try:
    from PySide6.QtCore import QObject, QSize, Signal
    from PySide6.QtGui import QAction, QBrush, QColor, QIcon, QPainter, QPixmap
    from PySide6.QtWidgets import QApplication, QMenu, QSystemTrayIcon
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = logging.getLogger(__name__)

ICON_COLOR = "#63c956"


def _create_icon(color: str = ICON_COLOR, size: int = 22) -> QIcon:
    """Generate a simple circular tray icon with the given color."""
    pixmap = QPixmap(QSize(size, size))
    pixmap.fill(QColor(0, 0, 0, 0))  # transparent background
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setBrush(QBrush(QColor(color)))
    painter.setPen(QColor(color))
    painter.drawEllipse(2, 2, size - 4, size - 4)
    painter.end()
    return QIcon(pixmap)


class UIBridge(QObject):
    trigger_signal = Signal(str)  # TriggerKind value
    deliver_signal = Signal(object)  # zero-arg callable to run on the UI thread


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.app.setQuitOnLastWindowClosed(False)
        self.config_store = JsonConfigStore()
        self.clipboard = SystemClipboard()

        self.ui = UIBridge()
        self.ui.trigger_signal.connect(self._on_trigger_ui)
        self.ui.deliver_signal.connect(self._on_deliver_ui)

        self.window = ResultWindow(on_trigger=self._on_trigger, on_copy=self.clipboard.write_text)
        self.preferences = PreferencesDialog(self.config_store, on_saved=self._on_preferences_saved)
        self.executor = RecognitionExecutor(
            recognizer=build_recognizer(self.config_store),
            dispatch=self._post_to_ui,
        )
        self.controller = RequestController(
            clipboard=self.clipboard,
            executor=self.executor,
            sink=self.window,
            renderer=MathRenderer(),
            preferences=self.preferences,
        )
        self.hotkey = self._create_hotkey()

        self.tray = QSystemTrayIcon()
        self.tray.setIcon(_create_icon())
        self.tray.setToolTip("Clipboard OCR")
        self._setup_menu()
        self.tray.show()

    def _create_hotkey(self) -> GlobalHotkeyAdapter:
        hotkeys = {kind: self.config_store.get_hotkey(kind.value) for kind in TriggerKind}
        try:
            bindings = build_bindings(hotkeys)
        except ValueError as exc:
            logger.warning("Invalid hotkey config, using defaults: %s", exc)
            bindings = build_bindings({kind: DEFAULT_HOTKEYS[kind.value] for kind in TriggerKind})
        return GlobalHotkeyAdapter(bindings)

    def _setup_menu(self) -> None:
        menu = QMenu()

        show_action = QAction("Show Window", menu)
        show_action.triggered.connect(self._show_window)
        menu.addAction(show_action)

        prefs_action = QAction("Preferences", menu)
        prefs_action.triggered.connect(lambda: self.preferences.show_section())
        menu.addAction(prefs_action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit)
        menu.addAction(quit_action)

        self.tray.setContextMenu(menu)

    def _show_window(self) -> None:
        self.window.show()
        self.window.raise_()
        self.window.activateWindow()

    def _on_preferences_saved(self) -> None:
        # Hot-swap recognizer with the new settings
        self.controller.replace_recognizer(build_recognizer(self.config_store))
        self.hotkey.stop()
        self.hotkey = self._create_hotkey()
        self._start_hotkey()

    # ------------------------------------------------------------------
    # Callbacks (may be called from worker threads → emit signals for UI thread)
    # ------------------------------------------------------------------

    def _on_trigger(self, kind: TriggerKind) -> None:
        self.ui.trigger_signal.emit(kind.value)

    def _post_to_ui(self, callback: Callable[[], None]) -> None:
        self.ui.deliver_signal.emit(callback)

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _on_trigger_ui(self, kind: str) -> None:
        self.controller.handle_trigger(TriggerKind(kind))

    def _on_deliver_ui(self, callback: Callable[[], None]) -> None:
        callback()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _start_hotkey(self) -> None:
        try:
            self.hotkey.start(on_trigger=self._on_trigger)
        except Exception as exc:
            logger.warning("Global hotkeys unavailable: %s", exc)
            self.window.show_error(f"Hotkey disabled: {exc}")

    def run(self) -> int:
        self._start_hotkey()
        self.controller.show_clipboard_image()
        self._show_window()
        return self.app.exec()

    def quit(self) -> None:
        self.hotkey.stop()
        self.executor.shutdown()
        self.app.quit()


def main() -> int:
    configure_logging()
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
