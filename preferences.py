"""Preferences dialog: general, API credentials and proxy tabs."""

from __future__ import annotations

import logging
from typing import Callable

from config import BACKENDS
from hotkey import build_bindings
from interfaces import ConfigStore
from models import ProxySettings, TriggerKind

try:
    from PySide6.QtWidgets import (
        QCheckBox,
        QComboBox,
        QDialog,
        QDialogButtonBox,
        QFormLayout,
        QLineEdit,
        QMessageBox,
        QSpinBox,
        QTabWidget,
        QVBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    QCheckBox = None  # type: ignore
    QComboBox = None  # type: ignore
    QDialog = object  # type: ignore
    QDialogButtonBox = None  # type: ignore
    QFormLayout = None  # type: ignore
    QLineEdit = None  # type: ignore
    QMessageBox = None  # type: ignore
    QSpinBox = None  # type: ignore
    QTabWidget = None  # type: ignore
    QVBoxLayout = None  # type: ignore
    QWidget = None  # type: ignore

logger = logging.getLogger(__name__)

GENERAL_TAB = 0


class PreferencesDialog(QDialog):
    def __init__(self, store: ConfigStore, on_saved: Callable[[], None]) -> None:
        if QTabWidget is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowTitle("Preferences")
        self._store = store
        self._on_saved = on_saved

        self._tabs = QTabWidget()
        self._tabs.addTab(self._general_tab(), "General")
        self._tabs.addTab(self._api_tab(), "API Credentials")
        self._tabs.addTab(self._proxy_tab(), "Proxy")

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._save)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout()
        layout.addWidget(self._tabs)
        layout.addWidget(buttons)
        self.setLayout(layout)

    def _general_tab(self) -> QWidget:
        tab = QWidget()
        form = QFormLayout(tab)
        self._backend = QComboBox()
        self._backend.addItems(list(BACKENDS))
        self._refresh_hotkey = QLineEdit()
        self._submit_hotkey = QLineEdit()
        form.addRow("Recognition backend", self._backend)
        form.addRow("Refresh hotkey", self._refresh_hotkey)
        form.addRow("Submit hotkey", self._submit_hotkey)
        return tab

    def _api_tab(self) -> QWidget:
        tab = QWidget()
        form = QFormLayout(tab)
        self._app_id = QLineEdit()
        self._app_key = QLineEdit()
        self._app_key.setEchoMode(QLineEdit.Password)
        self._api_key = QLineEdit()
        self._api_key.setEchoMode(QLineEdit.Password)
        form.addRow("Mathpix App ID", self._app_id)
        form.addRow("Mathpix App Key", self._app_key)
        form.addRow("DashScope API Key", self._api_key)
        return tab

    def _proxy_tab(self) -> QWidget:
        tab = QWidget()
        form = QFormLayout(tab)
        self._proxy_enabled = QCheckBox("Use proxy")
        self._proxy_host = QLineEdit()
        self._proxy_port = QSpinBox()
        self._proxy_port.setRange(0, 65535)
        form.addRow(self._proxy_enabled)
        form.addRow("Host", self._proxy_host)
        form.addRow("Port", self._proxy_port)
        return tab

    def show_section(self, section: int = GENERAL_TAB) -> None:
        """Show the dialog with the given tab selected."""
        self._load()
        self._tabs.setCurrentIndex(section)
        self.show()
        self.raise_()
        self.activateWindow()

    def _load(self) -> None:
        self._backend.setCurrentText(self._store.get_backend())
        self._refresh_hotkey.setText(self._store.get_hotkey(TriggerKind.REFRESH.value))
        self._submit_hotkey.setText(self._store.get_hotkey(TriggerKind.SUBMIT.value))
        app_id, app_key = self._store.get_mathpix_credentials()
        self._app_id.setText(app_id)
        self._app_key.setText(app_key)
        self._api_key.setText(self._store.get_api_key())
        proxy = self._store.get_proxy()
        self._proxy_enabled.setChecked(proxy.enabled)
        self._proxy_host.setText(proxy.host)
        self._proxy_port.setValue(proxy.port)

    def _save(self) -> None:
        hotkeys = {
            TriggerKind.REFRESH: self._refresh_hotkey.text().strip(),
            TriggerKind.SUBMIT: self._submit_hotkey.text().strip(),
        }
        try:
            build_bindings(hotkeys)
        except ValueError as exc:
            self._tabs.setCurrentIndex(GENERAL_TAB)
            QMessageBox.warning(self, "Preferences", str(exc))
            return

        self._store.set_backend(self._backend.currentText())
        for kind, key in hotkeys.items():
            self._store.set_hotkey(kind.value, key)
        self._store.set_mathpix_credentials(self._app_id.text(), self._app_key.text())
        self._store.set_api_key(self._api_key.text())
        self._store.set_proxy(
            ProxySettings(
                enabled=self._proxy_enabled.isChecked(),
                host=self._proxy_host.text().strip(),
                port=self._proxy_port.value(),
            )
        )
        logger.info("Preferences saved")
        self._on_saved()
        self.accept()
