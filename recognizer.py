"""Remote OCR adapters: Mathpix v3/text and DashScope Qwen-VL OCR.

Both adapters turn the service reply into a ``RecognitionResult``. Known
failures (credentials, proxy, transport) come back as a result with
``error`` set; anything unexpected, such as an unparseable body, is raised
and the executor reports it as a missing response.
"""

from __future__ import annotations

import base64
import logging
import math
import os
from typing import Any, Optional

import requests

from config import BACKEND_QWEN
from errors import EXCEPTION_MARK, INVALID_CREDENTIALS_ERROR, INVALID_PROXY_CONFIG_ERROR
from interfaces import ConfigStore, Recognizer
from models import ProxySettings, RecognitionResult

try:
    import dashscope
except Exception:  # pragma: no cover
    dashscope = None  # type: ignore

logger = logging.getLogger(__name__)

MATHPIX_ENDPOINT = "https://api.mathpix.com/v3/text"
QWEN_OCR_PROMPT = (
    "Read all text in the image. Write mathematical expressions as LaTeX, "
    "wrapping inline math in \\( \\) and display math in \\[ \\]. "
    "Return only the transcription."
)


def _image_data_url(image: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(image).decode("ascii")


def _exception_error(exc: Exception) -> RecognitionResult:
    return RecognitionResult(error=f"{EXCEPTION_MARK}{type(exc).__name__}: {exc}")


class MathpixRecognizer:
    def __init__(
        self,
        app_id: str,
        app_key: str,
        proxy: Optional[ProxySettings] = None,
        endpoint: str = MATHPIX_ENDPOINT,
        request_timeout_s: float = 20.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._app_id = app_id
        self._app_key = app_key
        self._proxy = proxy or ProxySettings()
        self._endpoint = endpoint
        self._request_timeout_s = request_timeout_s
        self._session = session or requests.Session()

    def recognize(self, image: bytes) -> RecognitionResult:
        app_id = self._app_id or os.getenv("MATHPIX_APP_ID", "")
        app_key = self._app_key or os.getenv("MATHPIX_APP_KEY", "")
        if not app_id or not app_key:
            return RecognitionResult(error=INVALID_CREDENTIALS_ERROR)

        proxies = None
        if self._proxy.enabled:
            if not self._proxy.is_valid:
                return RecognitionResult(error=INVALID_PROXY_CONFIG_ERROR)
            proxies = {"http": self._proxy.url, "https": self._proxy.url}

        payload = {
            "src": _image_data_url(image),
            "formats": ["text", "data"],
            "data_options": {"include_mathml": True, "include_tsv": True},
        }
        headers = {"app_id": app_id, "app_key": app_key, "Content-Type": "application/json"}
        try:
            response = self._session.post(
                self._endpoint,
                json=payload,
                headers=headers,
                proxies=proxies,
                timeout=self._request_timeout_s,
            )
        except requests.exceptions.ProxyError as exc:
            logger.warning("Mathpix request failed through proxy: %s", exc)
            return RecognitionResult(error=INVALID_PROXY_CONFIG_ERROR)
        except requests.RequestException as exc:
            logger.warning("Mathpix request failed: %s", exc)
            return _exception_error(exc)

        if response.status_code == 401:
            return RecognitionResult(error=INVALID_CREDENTIALS_ERROR)
        return self._parse(response.json())

    def _parse(self, body: dict[str, Any]) -> RecognitionResult:
        error = body.get("error")
        if error:
            error_id = str((body.get("error_info") or {}).get("id", ""))
            if error_id in ("http_unauthorized", "unauthorized"):
                return RecognitionResult(error=INVALID_CREDENTIALS_ERROR)
            return RecognitionResult(error=str(error))

        formats: dict[str, str] = {}
        for item in body.get("data") or []:
            if isinstance(item, dict) and item.get("type") in ("mathml", "tsv"):
                formats.setdefault(str(item["type"]), str(item.get("value", "")))

        confidence = body.get("confidence", 0.0)
        if not isinstance(confidence, (int, float)) or not math.isfinite(confidence):
            confidence = 0.0
        return RecognitionResult(
            text=str(body.get("text", "")),
            mathml=formats.get("mathml", ""),
            tsv=formats.get("tsv", ""),
            confidence=float(confidence),
        )


class DashscopeRecognizer:
    """Text-only backend: no MathML/TSV and no per-request confidence."""

    def __init__(self, api_key: str, model: str = "qwen-vl-ocr", request_timeout_s: float = 30.0) -> None:
        self._api_key = api_key
        self._model = model
        self._request_timeout_s = request_timeout_s

    def recognize(self, image: bytes) -> RecognitionResult:
        if dashscope is None:
            return RecognitionResult(error="dashscope is not installed")

        api_key = self._api_key or os.getenv("DASHSCOPE_API_KEY", "")
        if not api_key:
            return RecognitionResult(error=INVALID_CREDENTIALS_ERROR)

        try:
            response = dashscope.MultiModalConversation.call(
                api_key=api_key,
                model=self._model,
                messages=[
                    {
                        "role": "user",
                        "content": [{"image": _image_data_url(image)}, {"text": QWEN_OCR_PROMPT}],
                    }
                ],
                timeout=self._request_timeout_s,
            )
        except Exception as exc:
            logger.warning("DashScope request failed: %s", exc)
            return self._to_error_result(exc)

        status = getattr(response, "status_code", None)
        if status != 200:
            code = str(getattr(response, "code", "") or "")
            if status == 401 or code == "InvalidApiKey":
                return RecognitionResult(error=INVALID_CREDENTIALS_ERROR)
            message = getattr(response, "message", "") or "DashScope request failed"
            return RecognitionResult(error=f"{code}: {message}" if code else str(message))

        text = self._extract_text(response).strip()
        return RecognitionResult(text=text, confidence=1.0 if text else 0.0)

    def _extract_text(self, response: object) -> str:
        """Pull text from a dashscope response dict."""
        if isinstance(response, dict):
            output = response.get("output") or {}
            choices = output.get("choices", [])
            if not choices:
                return ""
            message = choices[0].get("message", {})
            content = message.get("content", [])
            for value in content:
                if isinstance(value, dict) and "text" in value:
                    return str(value["text"])
        return ""

    def _to_error_result(self, exc: Exception) -> RecognitionResult:
        """Map an SDK/network exception to a result error."""
        low = str(exc).lower()
        if "401" in low or "api key" in low or "apikey" in low:
            return RecognitionResult(error=INVALID_CREDENTIALS_ERROR)
        if "proxy" in low:
            return RecognitionResult(error=INVALID_PROXY_CONFIG_ERROR)
        return _exception_error(exc)


def build_recognizer(store: ConfigStore) -> Recognizer:
    if store.get_backend() == BACKEND_QWEN:
        return DashscopeRecognizer(api_key=store.get_api_key())
    app_id, app_key = store.get_mathpix_credentials()
    return MathpixRecognizer(app_id=app_id, app_key=app_key, proxy=store.get_proxy())
