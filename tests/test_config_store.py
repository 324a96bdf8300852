from __future__ import annotations

from pathlib import Path

import pytest

from config import BACKEND_MATHPIX, BACKEND_QWEN, JsonConfigStore
from models import ProxySettings, TriggerKind


def test_config_read_write(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    store = JsonConfigStore(path=path)

    assert store.get_backend() == BACKEND_MATHPIX
    assert store.get_mathpix_credentials() == ("", "")
    assert store.get_api_key() == ""
    assert store.get_proxy() == ProxySettings()
    assert store.get_hotkey(TriggerKind.REFRESH.value) == "Key.f8"
    assert store.get_hotkey(TriggerKind.SUBMIT.value) == "Key.f9"

    store.set_backend(BACKEND_QWEN)
    store.set_mathpix_credentials(" id ", "key")
    store.set_api_key("abc")
    store.set_proxy(ProxySettings(enabled=True, host="127.0.0.1", port=1080))
    store.set_hotkey(TriggerKind.SUBMIT.value, "Key.f10")

    reloaded = JsonConfigStore(path=path)
    assert reloaded.get_backend() == BACKEND_QWEN
    assert reloaded.get_mathpix_credentials() == ("id", "key")
    assert reloaded.get_api_key() == "abc"
    assert reloaded.get_proxy() == ProxySettings(enabled=True, host="127.0.0.1", port=1080)
    assert reloaded.get_hotkey(TriggerKind.SUBMIT.value) == "Key.f10"
    assert reloaded.get_hotkey(TriggerKind.REFRESH.value) == "Key.f8"


def test_config_invalid_json_fallback(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{invalid", encoding="utf-8")

    store = JsonConfigStore(path=path)
    assert store.get_api_key() == ""
    assert store.get_backend() == BACKEND_MATHPIX


def test_config_bad_values_fallback(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"backend": "tesseract", "proxy": {"enabled": true, "port": "x"}}', encoding="utf-8")

    store = JsonConfigStore(path=path)
    assert store.get_backend() == BACKEND_MATHPIX
    assert store.get_proxy() == ProxySettings(enabled=True, host="", port=0)
    assert store.get_proxy().is_valid is False


def test_config_rejects_unknown_backend(tmp_path: Path) -> None:
    store = JsonConfigStore(path=tmp_path / "config.json")

    with pytest.raises(ValueError):
        store.set_backend("tesseract")
