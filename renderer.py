"""Equation preview rendering through matplotlib mathtext."""

from __future__ import annotations

import io
import logging
import re
from typing import Optional

from errors import RENDER_ERROR_TEXT
from latex_format import strip_math_delimiters

try:
    from matplotlib import mathtext
except Exception:  # pragma: no cover
    mathtext = None  # type: ignore

logger = logging.getLogger(__name__)

# mathtext does not know these; they only affect spacing and sizing
_UNSUPPORTED_COMMANDS = re.compile(r"\\(?:displaystyle|textstyle)(?![A-Za-z])|\\(?:begin|end)\{aligned\}")


def _sanitize(latex: str) -> str:
    cleaned = strip_math_delimiters(latex)
    cleaned = _UNSUPPORTED_COMMANDS.sub("", cleaned)
    return " ".join(cleaned.split())


class MathRenderer:
    def __init__(self, dpi: int = 160) -> None:
        self._dpi = dpi
        self._placeholder: Optional[bytes] = None

    @property
    def placeholder(self) -> bytes:
        if self._placeholder is None:
            self._placeholder = self._to_png(RENDER_ERROR_TEXT) or b""
        return self._placeholder

    def render(self, text: str) -> Optional[bytes]:
        latex = _sanitize(text)
        if not latex:
            return None
        return self._to_png(f"${latex}$")

    def _to_png(self, expression: str) -> Optional[bytes]:
        if mathtext is None:
            logger.warning("matplotlib is not installed, equation preview disabled")
            return None
        buf = io.BytesIO()
        try:
            mathtext.math_to_image(expression, buf, dpi=self._dpi, format="png")
        except ValueError as exc:
            logger.info("Could not render %r: %s", expression, exc)
            return None
        return buf.getvalue()
