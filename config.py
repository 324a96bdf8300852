"""Simple JSON-based config store."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from models import ProxySettings, TriggerKind

BACKEND_MATHPIX = "mathpix"
BACKEND_QWEN = "qwen"
BACKENDS = (BACKEND_MATHPIX, BACKEND_QWEN)

DEFAULT_HOTKEYS = {
    TriggerKind.REFRESH.value: "Key.f8",
    TriggerKind.SUBMIT.value: "Key.f9",
}

DEFAULT_LOG_LEVEL = logging.INFO


def configure_logging(level: int = DEFAULT_LOG_LEVEL) -> None:
    """Configure the root logger for the application."""
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "clipocr" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_backend(self) -> str:
        value = str(self._read_all().get("backend", BACKEND_MATHPIX))
        return value if value in BACKENDS else BACKEND_MATHPIX

    def set_backend(self, backend: str) -> None:
        if backend not in BACKENDS:
            raise ValueError(f"unknown backend: {backend}")
        self._update(backend=backend)

    def get_mathpix_credentials(self) -> tuple[str, str]:
        data = self._read_all()
        return str(data.get("mathpix_app_id", "")), str(data.get("mathpix_app_key", ""))

    def set_mathpix_credentials(self, app_id: str, app_key: str) -> None:
        self._update(mathpix_app_id=app_id.strip(), mathpix_app_key=app_key.strip())

    def get_api_key(self) -> str:
        return str(self._read_all().get("dashscope_api_key", ""))

    def set_api_key(self, key: str) -> None:
        self._update(dashscope_api_key=key.strip())

    def get_proxy(self) -> ProxySettings:
        raw = self._read_all().get("proxy", {})
        if not isinstance(raw, dict):
            return ProxySettings()
        try:
            port = int(raw.get("port", 0))
        except (TypeError, ValueError):
            port = 0
        return ProxySettings(
            enabled=bool(raw.get("enabled", False)),
            host=str(raw.get("host", "")),
            port=port,
        )

    def set_proxy(self, proxy: ProxySettings) -> None:
        self._update(proxy={"enabled": proxy.enabled, "host": proxy.host, "port": proxy.port})

    def get_hotkey(self, kind: str) -> str:
        default = DEFAULT_HOTKEYS[kind]
        return str(self._read_all().get(f"{kind}_hotkey", default))

    def set_hotkey(self, kind: str, hotkey: str) -> None:
        if kind not in DEFAULT_HOTKEYS:
            raise ValueError(f"unknown trigger kind: {kind}")
        self._update(**{f"{kind}_hotkey": hotkey})

    def _update(self, **values: object) -> None:
        data = self._read_all()
        data.update(values)
        self._write_all(data)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logging.getLogger(__name__).warning("Ignoring unreadable config file %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
