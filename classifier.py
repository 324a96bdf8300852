"""Maps a delivered recognition result to an Outcome."""

from __future__ import annotations

from typing import Optional

from errors import (
    EXCEPTION_MARK,
    INVALID_CREDENTIALS_ERROR,
    INVALID_PROXY_CONFIG_ERROR,
    UNEXPECTED_ERROR,
)
from latex_format import format_exception
from models import ErrorCategory, Outcome, RecognitionResult

CREDENTIALS_SECTION = 1
PROXY_SECTION = 2

# Checked in order; the first marker found in the error wins.
_MARKERS = (
    (INVALID_CREDENTIALS_ERROR, ErrorCategory.INVALID_CREDENTIALS),
    (INVALID_PROXY_CONFIG_ERROR, ErrorCategory.INVALID_PROXY_CONFIG),
    (EXCEPTION_MARK, ErrorCategory.EXCEPTION),
)


def classify_error(error: str) -> ErrorCategory:
    for marker, category in _MARKERS:
        if marker in error:
            return category
    return ErrorCategory.GENERIC


def classify(result: Optional[RecognitionResult]) -> Outcome:
    if result is None:
        return Outcome(
            category=ErrorCategory.NO_RESPONSE,
            message=UNEXPECTED_ERROR,
            clears_results=True,
        )
    if result.error is None:
        return Outcome(result=result)

    category = classify_error(result.error)
    if category is ErrorCategory.INVALID_CREDENTIALS:
        return Outcome(category=category, message=result.error, settings_section=CREDENTIALS_SECTION)
    if category is ErrorCategory.INVALID_PROXY_CONFIG:
        return Outcome(category=category, message=result.error, settings_section=PROXY_SECTION)
    if category is ErrorCategory.EXCEPTION:
        return Outcome(category=category, message=format_exception(result.error))
    return Outcome(category=category, message=result.error, clears_results=True)
