"""Text helpers for Mathpix "text" output.

Mathpix wraps inline math in ``\\( ... \\)`` and display math in
``\\[ ... \\]``. The helpers here derive the alternate readings offered to the
user and decide whether a result is a single math block worth rendering.
"""

from __future__ import annotations

import re

from errors import EXCEPTION_MARK

INLINE_OPEN, INLINE_CLOSE = "\\(", "\\)"
DISPLAY_OPEN, DISPLAY_CLOSE = "\\[", "\\]"

_DELIMITERS = (INLINE_OPEN, INLINE_CLOSE, DISPLAY_OPEN, DISPLAY_CLOSE)
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def derive_secondary(text: str) -> str:
    """Dollar-sign flavour: ``\\( x \\)`` -> ``$ x $``, ``\\[ x \\]`` -> ``$$ x $$``."""
    result = text.replace(DISPLAY_OPEN, "$$").replace(DISPLAY_CLOSE, "$$")
    return result.replace(INLINE_OPEN, "$").replace(INLINE_CLOSE, "$")


def derive_third(text: str) -> str:
    """Bare LaTeX with every math delimiter removed."""
    result = text
    for delimiter in _DELIMITERS:
        result = result.replace(delimiter, "")
    return " ".join(line.strip() for line in result.splitlines() if line.strip())


def is_fully_delimited_math(text: str) -> bool:
    """True when the whole text is exactly one inline or one display math block."""
    stripped = text.strip()
    for opening, closing in ((INLINE_OPEN, INLINE_CLOSE), (DISPLAY_OPEN, DISPLAY_CLOSE)):
        if not (stripped.startswith(opening) and stripped.endswith(closing)):
            continue
        if len(stripped) <= len(opening) + len(closing):
            return False
        return stripped.count(opening) == 1 and stripped.count(closing) == 1
    return False


def strip_math_delimiters(text: str) -> str:
    stripped = text.strip()
    for opening, closing in ((INLINE_OPEN, INLINE_CLOSE), (DISPLAY_OPEN, DISPLAY_CLOSE)):
        if stripped.startswith(opening) and stripped.endswith(closing):
            return stripped[len(opening):-len(closing)].strip()
    return stripped


def format_exception(error: str) -> str:
    """Make ``[exception] ConnectTimeout: detail`` readable as ``Connect timeout: detail``."""
    body = error.split(EXCEPTION_MARK, 1)[-1].strip()
    name, sep, detail = body.partition(":")
    if not sep or " " in name.strip():
        return body
    words = _CAMEL_BOUNDARY.sub(" ", name.strip()).split()
    if not words:
        return body
    title = " ".join([words[0]] + [word.lower() for word in words[1:]])
    detail = detail.strip()
    return f"{title}: {detail}" if detail else title
