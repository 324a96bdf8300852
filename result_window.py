"""Main window: clipboard preview, rendered equation, candidates and confidence."""

from __future__ import annotations

from typing import Callable, Optional

from models import ConfidenceBand, TriggerKind

try:
    from PySide6.QtCore import Qt, QTimer
    from PySide6.QtGui import QPixmap
    from PySide6.QtWidgets import (
        QGridLayout,
        QHBoxLayout,
        QLabel,
        QLineEdit,
        QProgressBar,
        QPushButton,
        QVBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QTimer = None  # type: ignore
    QPixmap = None  # type: ignore
    QGridLayout = object  # type: ignore
    QHBoxLayout = object  # type: ignore
    QLabel = object  # type: ignore
    QLineEdit = object  # type: ignore
    QProgressBar = object  # type: ignore
    QPushButton = object  # type: ignore
    QVBoxLayout = object  # type: ignore
    QWidget = object  # type: ignore

PREFERRED_WIDTH = 300
PREFERRED_HEIGHT = 100
MARGIN = 10

# red under 20%, yellow up to 60%, green above
BAND_COLORS = {
    ConfidenceBand.LOW: "#ec4d3d",
    ConfidenceBand.MEDIUM: "#f8cd46",
    ConfidenceBand.HIGH: "#63c956",
}

_BORDER_STYLE = "border: 1px solid #e5e6eb; background: white;"

TriggerCallback = Callable[[TriggerKind], None]
CopyCallback = Callable[[str], None]


def _trigger_keys() -> dict[int, TriggerKind]:
    return {
        Qt.Key_Space: TriggerKind.REFRESH,
        Qt.Key_Backspace: TriggerKind.REFRESH,
        Qt.Key_Insert: TriggerKind.REFRESH,
        Qt.Key_Return: TriggerKind.SUBMIT,
        Qt.Key_Enter: TriggerKind.SUBMIT,
        Qt.Key_Delete: TriggerKind.SUBMIT,
    }


class ResultWindow(QWidget):
    def __init__(self, on_trigger: TriggerCallback, on_copy: CopyCallback) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowTitle("Clipboard OCR")
        self.setFocusPolicy(Qt.StrongFocus)
        self._on_trigger = on_trigger
        self._on_copy = on_copy
        self._key_map = _trigger_keys()
        self._mathml = ""
        self._tsv = ""
        self._error_timer: QTimer | None = None

        layout = QVBoxLayout()
        layout.setContentsMargins(MARGIN, MARGIN, MARGIN, MARGIN)

        header = QHBoxLayout()
        header.addWidget(QLabel("Clipboard Image"))
        header.addStretch()
        self._waiting_label = QLabel("Waiting...")
        self._waiting_label.setStyleSheet("color: #63c956; font-weight: bold;")
        self._waiting_label.setVisible(False)
        header.addWidget(self._waiting_label)
        layout.addLayout(header)

        self._source_view = self._image_view()
        layout.addWidget(self._source_view)
        layout.addWidget(QLabel("Rendered Equation"))
        self._rendered_view = self._image_view()
        layout.addWidget(self._rendered_view)

        grid = QGridLayout()
        self._fields: list[QLineEdit] = []
        self._copy_buttons: list[QPushButton] = []
        self._copied_labels: list[QLabel] = []
        for row in range(3):
            field = QLineEdit()
            field.setReadOnly(True)
            field.setFocusPolicy(Qt.NoFocus)
            button = QPushButton("Copy")
            button.setFocusPolicy(Qt.NoFocus)
            button.clicked.connect(lambda _checked=False, index=row: self._copy_candidate(index))
            copied = QLabel("Copied")
            copied.setStyleSheet("color: #63c956;")
            copied.setVisible(False)
            grid.addWidget(field, row, 0)
            grid.addWidget(button, row, 1)
            grid.addWidget(copied, row, 2)
            self._fields.append(field)
            self._copy_buttons.append(button)
            self._copied_labels.append(copied)
        layout.addLayout(grid)

        actions = QHBoxLayout()
        self._mathml_button = QPushButton("Copy MathML")
        self._mathml_button.setFocusPolicy(Qt.NoFocus)
        self._mathml_button.clicked.connect(lambda: self._copy_extra(self._mathml))
        self._tsv_button = QPushButton("Copy TSV")
        self._tsv_button.setFocusPolicy(Qt.NoFocus)
        self._tsv_button.clicked.connect(lambda: self._copy_extra(self._tsv))
        actions.addWidget(self._mathml_button)
        actions.addWidget(self._tsv_button)
        actions.addStretch()
        layout.addLayout(actions)
        self.set_extra_actions(None, None)

        layout.addWidget(QLabel("Confidence"))
        self._confidence_bar = QProgressBar()
        self._confidence_bar.setRange(0, 100)
        self._confidence_bar.setTextVisible(False)
        self._confidence_bar.setFixedHeight(20)
        layout.addWidget(self._confidence_bar)
        self.set_confidence(0.0, ConfidenceBand.LOW)

        self._error_label = QLabel("")
        self._error_label.setWordWrap(True)
        self._error_label.setStyleSheet("color: #FF6B6B;")
        self._error_label.setVisible(False)
        layout.addWidget(self._error_label)

        self.setLayout(layout)

    def _image_view(self) -> QLabel:
        view = QLabel()
        view.setAlignment(Qt.AlignCenter)
        view.setFixedSize(PREFERRED_WIDTH, PREFERRED_HEIGHT + MARGIN)
        view.setStyleSheet(_BORDER_STYLE)
        return view

    # ------------------------------------------------------------------
    # PresentationSink
    # ------------------------------------------------------------------

    def show_source_image(self, image: Optional[bytes]) -> None:
        self._set_image(self._source_view, image)

    def show_rendered_image(self, image: Optional[bytes]) -> None:
        self._set_image(self._rendered_view, image)

    def set_candidate(self, index: int, text: str, enabled: bool) -> None:
        field = self._fields[index]
        field.setText(text)
        field.setCursorPosition(0)
        field.setEnabled(enabled)
        self._copy_buttons[index].setEnabled(enabled)

    def set_copied_marker(self, visible: bool) -> None:
        for index, label in enumerate(self._copied_labels):
            label.setVisible(visible and index == 0)

    def set_extra_actions(self, mathml: Optional[str], tsv: Optional[str]) -> None:
        self._mathml = mathml or ""
        self._tsv = tsv or ""
        self._mathml_button.setVisible(mathml is not None)
        self._tsv_button.setVisible(tsv is not None)

    def set_confidence(self, value: float, band: ConfidenceBand) -> None:
        self._confidence_bar.setValue(round(value * 100))
        self._confidence_bar.setStyleSheet(
            f"QProgressBar::chunk {{ background-color: {BAND_COLORS[band]}; }}"
        )

    def set_waiting(self, visible: bool) -> None:
        self._waiting_label.setVisible(visible)

    def show_error(self, message: str, hide_after_ms: int = 4000) -> None:
        """Show an error message under the confidence bar and auto-hide it."""
        self._cancel_error_timer()
        self._error_label.setText(f"⚠️ {message}")
        self._error_label.setVisible(True)
        self._error_timer = QTimer()
        self._error_timer.setSingleShot(True)
        self._error_timer.timeout.connect(lambda: self._error_label.setVisible(False))
        self._error_timer.start(hide_after_ms)

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def keyReleaseEvent(self, event) -> None:  # noqa: ANN001, N802
        kind = self._key_map.get(event.key())
        if kind is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self._on_trigger(kind)

    def _set_image(self, view: QLabel, image: Optional[bytes]) -> None:
        if not image:
            view.clear()
            return
        pixmap = QPixmap()
        if not pixmap.loadFromData(image, "PNG"):
            view.clear()
            return
        if pixmap.width() > PREFERRED_WIDTH or pixmap.height() > PREFERRED_HEIGHT:
            pixmap = pixmap.scaled(PREFERRED_WIDTH, PREFERRED_HEIGHT, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        view.setPixmap(pixmap)

    def _copy_candidate(self, index: int) -> None:
        text = self._fields[index].text()
        if not text:
            return
        self._on_copy(text)
        for row, label in enumerate(self._copied_labels):
            label.setVisible(row == index)

    def _copy_extra(self, value: str) -> None:
        if value:
            self._on_copy(value)
        self.set_copied_marker(False)

    def _cancel_error_timer(self) -> None:
        if self._error_timer is not None:
            self._error_timer.stop()
            self._error_timer = None
