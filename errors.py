"""Shared error sentinels and user-facing messages."""

from __future__ import annotations

NO_IMAGE_FOUND_IN_THE_CLIPBOARD_ERROR = "No image found in the clipboard."
INVALID_CREDENTIALS_ERROR = "Invalid credentials, please check your API keys."
INVALID_PROXY_CONFIG_ERROR = "Invalid proxy config, please check your proxy settings."
UNEXPECTED_ERROR = "Unexpected error occurred, please retry."

# Prefix put in front of "<ExceptionClass>: <detail>" by the recognizers.
EXCEPTION_MARK = "[exception] "

RENDER_ERROR_TEXT = r"$\mathrm{Render\ error}$"
