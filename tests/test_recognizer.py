"""Tests for the Mathpix and DashScope recognizers."""

from __future__ import annotations

import base64
from unittest.mock import MagicMock, patch

import pytest
import requests

from config import BACKEND_MATHPIX, BACKEND_QWEN, JsonConfigStore
from errors import EXCEPTION_MARK, INVALID_CREDENTIALS_ERROR, INVALID_PROXY_CONFIG_ERROR
from models import ProxySettings
from recognizer import DashscopeRecognizer, MathpixRecognizer, build_recognizer

IMAGE = b"\x89PNG\r\n"


# ---------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------

def _response(status: int = 200, body: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.json.return_value = body or {}
    return response


def _mathpix(session: MagicMock, proxy: ProxySettings | None = None) -> MathpixRecognizer:
    return MathpixRecognizer(app_id="id", app_key="key", proxy=proxy, session=session)


# ---------------------------------------------------------------
# Mathpix
# ---------------------------------------------------------------

def test_mathpix_success_parses_text_formats_and_confidence() -> None:
    session = MagicMock()
    session.post.return_value = _response(
        body={
            "text": "\\( x \\)",
            "confidence": 0.87,
            "data": [
                {"type": "mathml", "value": "<math><mi>x</mi></math>"},
                {"type": "asciimath", "value": "x"},
            ],
        }
    )

    result = _mathpix(session).recognize(IMAGE)

    assert result.error is None
    assert result.text == "\\( x \\)"
    assert result.mathml == "<math><mi>x</mi></math>"
    assert result.tsv == ""
    assert result.confidence == pytest.approx(0.87)

    _, kwargs = session.post.call_args
    assert kwargs["headers"]["app_id"] == "id"
    assert kwargs["headers"]["app_key"] == "key"
    assert kwargs["proxies"] is None
    src = kwargs["json"]["src"]
    assert src.startswith("data:image/png;base64,")
    assert base64.b64decode(src.split(",", 1)[1]) == IMAGE


@patch.dict("os.environ", {"MATHPIX_APP_ID": "", "MATHPIX_APP_KEY": ""}, clear=False)
def test_mathpix_missing_credentials_skips_request() -> None:
    session = MagicMock()

    result = MathpixRecognizer(app_id="", app_key="", session=session).recognize(IMAGE)

    assert result.error == INVALID_CREDENTIALS_ERROR
    session.post.assert_not_called()


def test_mathpix_unauthorized_status_is_credentials_error() -> None:
    session = MagicMock()
    session.post.return_value = _response(status=401)

    assert _mathpix(session).recognize(IMAGE).error == INVALID_CREDENTIALS_ERROR


def test_mathpix_unauthorized_error_body_is_credentials_error() -> None:
    session = MagicMock()
    session.post.return_value = _response(
        body={"error": "Invalid app_key", "error_info": {"id": "http_unauthorized"}}
    )

    assert _mathpix(session).recognize(IMAGE).error == INVALID_CREDENTIALS_ERROR


def test_mathpix_service_error_is_passed_through() -> None:
    session = MagicMock()
    session.post.return_value = _response(body={"error": "Image too large", "error_info": {"id": "image_max_size"}})

    assert _mathpix(session).recognize(IMAGE).error == "Image too large"


def test_mathpix_invalid_proxy_is_rejected_before_request() -> None:
    session = MagicMock()
    proxy = ProxySettings(enabled=True, host="", port=8080)

    result = _mathpix(session, proxy).recognize(IMAGE)

    assert result.error == INVALID_PROXY_CONFIG_ERROR
    session.post.assert_not_called()


def test_mathpix_uses_configured_proxy() -> None:
    session = MagicMock()
    session.post.return_value = _response(body={"text": "a", "confidence": 1})
    proxy = ProxySettings(enabled=True, host="127.0.0.1", port=7890)

    _mathpix(session, proxy).recognize(IMAGE)

    _, kwargs = session.post.call_args
    assert kwargs["proxies"] == {"http": "http://127.0.0.1:7890", "https": "http://127.0.0.1:7890"}


def test_mathpix_proxy_error_maps_to_proxy_config_error() -> None:
    session = MagicMock()
    session.post.side_effect = requests.exceptions.ProxyError("cannot connect to proxy")

    assert _mathpix(session).recognize(IMAGE).error == INVALID_PROXY_CONFIG_ERROR


def test_mathpix_transport_error_is_marked_as_exception() -> None:
    session = MagicMock()
    session.post.side_effect = requests.exceptions.ConnectTimeout("timed out")

    error = _mathpix(session).recognize(IMAGE).error

    assert error is not None
    assert error.startswith(EXCEPTION_MARK)
    assert "ConnectTimeout: timed out" in error


@pytest.mark.parametrize("confidence", [float("nan"), float("inf"), "0.9", None])
def test_mathpix_unusable_confidence_becomes_zero(confidence) -> None:  # noqa: ANN001
    session = MagicMock()
    session.post.return_value = _response(body={"text": "x", "confidence": confidence})

    result = _mathpix(session).recognize(IMAGE)

    assert result.text == "x"
    assert result.confidence == 0.0


def test_mathpix_unparseable_body_raises() -> None:
    session = MagicMock()
    response = _response()
    response.json.side_effect = ValueError("no json")
    session.post.return_value = response

    with pytest.raises(ValueError):
        _mathpix(session).recognize(IMAGE)


# ---------------------------------------------------------------
# DashScope
# ---------------------------------------------------------------

class _StatusDict(dict):
    """Dict with attribute access, like dashscope's response objects."""

    def __init__(self, data: dict, status_code: int, code: str = "", message: str = "") -> None:
        super().__init__(data)
        self.status_code = status_code
        self.code = code
        self.message = message


@patch("recognizer.dashscope")
def test_dashscope_success_returns_text(mock_ds: MagicMock) -> None:
    mock_ds.MultiModalConversation.call.return_value = _StatusDict(
        {"output": {"choices": [{"message": {"content": [{"text": " E = mc^2 "}]}}]}},
        status_code=200,
    )

    result = DashscopeRecognizer(api_key="k").recognize(IMAGE)

    assert result.error is None
    assert result.text == "E = mc^2"
    assert result.mathml == ""
    assert result.tsv == ""
    assert result.confidence == 1.0
    _, kwargs = mock_ds.MultiModalConversation.call.call_args
    assert kwargs["api_key"] == "k"
    assert kwargs["model"] == "qwen-vl-ocr"


@patch("recognizer.dashscope")
def test_dashscope_empty_reading_has_zero_confidence(mock_ds: MagicMock) -> None:
    mock_ds.MultiModalConversation.call.return_value = _StatusDict(
        {"output": {"choices": []}}, status_code=200
    )

    result = DashscopeRecognizer(api_key="k").recognize(IMAGE)

    assert result.text == ""
    assert result.confidence == 0.0


@patch("recognizer.dashscope", MagicMock())
@patch.dict("os.environ", {"DASHSCOPE_API_KEY": ""}, clear=False)
def test_dashscope_missing_key_is_credentials_error() -> None:
    assert DashscopeRecognizer(api_key="").recognize(IMAGE).error == INVALID_CREDENTIALS_ERROR


@patch("recognizer.dashscope")
def test_dashscope_invalid_key_status(mock_ds: MagicMock) -> None:
    mock_ds.MultiModalConversation.call.return_value = _StatusDict(
        {}, status_code=401, code="InvalidApiKey", message="Invalid API-key provided."
    )

    assert DashscopeRecognizer(api_key="k").recognize(IMAGE).error == INVALID_CREDENTIALS_ERROR


@patch("recognizer.dashscope")
def test_dashscope_service_error_includes_code(mock_ds: MagicMock) -> None:
    mock_ds.MultiModalConversation.call.return_value = _StatusDict(
        {}, status_code=400, code="InvalidParameter", message="image format not supported"
    )

    error = DashscopeRecognizer(api_key="k").recognize(IMAGE).error

    assert error == "InvalidParameter: image format not supported"


@patch("recognizer.dashscope")
def test_dashscope_sdk_exception_is_mapped(mock_ds: MagicMock) -> None:
    mock_ds.MultiModalConversation.call.side_effect = ConnectionError("connection refused")

    error = DashscopeRecognizer(api_key="k").recognize(IMAGE).error

    assert error == f"{EXCEPTION_MARK}ConnectionError: connection refused"


@patch("recognizer.dashscope", None)
def test_dashscope_not_installed() -> None:
    assert DashscopeRecognizer(api_key="k").recognize(IMAGE).error == "dashscope is not installed"


# ---------------------------------------------------------------
# build_recognizer
# ---------------------------------------------------------------

def test_build_recognizer_follows_backend(tmp_path) -> None:  # noqa: ANN001
    store = JsonConfigStore(path=tmp_path / "config.json")
    assert store.get_backend() == BACKEND_MATHPIX
    assert isinstance(build_recognizer(store), MathpixRecognizer)

    store.set_backend(BACKEND_QWEN)
    assert isinstance(build_recognizer(store), DashscopeRecognizer)
