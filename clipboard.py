"""System clipboard access: images through Qt, text through pyperclip."""

from __future__ import annotations

import logging
from typing import Optional

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore

try:
    from PySide6.QtCore import QBuffer, QIODevice
    from PySide6.QtGui import QGuiApplication
except Exception:  # pragma: no cover
    QBuffer = None  # type: ignore
    QIODevice = None  # type: ignore
    QGuiApplication = None  # type: ignore

logger = logging.getLogger(__name__)


class SystemClipboard:
    def read_image(self) -> Optional[bytes]:
        """Current clipboard image as PNG bytes, or None when there is none."""
        if QGuiApplication is None:
            raise RuntimeError("PySide6 is not installed")
        clipboard = QGuiApplication.clipboard()
        if clipboard is None:
            return None
        image = clipboard.image()
        if image.isNull():
            return None
        buffer = QBuffer()
        buffer.open(QIODevice.WriteOnly)
        try:
            if not image.save(buffer, "PNG"):
                logger.warning("Failed to encode clipboard image")
                return None
            return bytes(buffer.data())
        finally:
            buffer.close()

    def write_text(self, text: str) -> bool:
        if pyperclip is None:
            logger.error("pyperclip is not installed, cannot write to clipboard")
            return False
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            logger.error("Failed to copy text to clipboard: %s", exc)
            return False
        return True
