"""Protocol interfaces used by RequestController."""

from __future__ import annotations

from typing import Optional, Protocol

from models import ConfidenceBand, ProxySettings, RecognitionResult


class Clipboard(Protocol):
    def read_image(self) -> Optional[bytes]: ...

    def write_text(self, text: str) -> bool: ...


class Recognizer(Protocol):
    def recognize(self, image: bytes) -> RecognitionResult: ...


class Renderer(Protocol):
    @property
    def placeholder(self) -> bytes: ...

    def render(self, text: str) -> Optional[bytes]: ...


class PreferencesOpener(Protocol):
    def show_section(self, section: int) -> None: ...


class PresentationSink(Protocol):
    def show_source_image(self, image: Optional[bytes]) -> None: ...

    def show_rendered_image(self, image: Optional[bytes]) -> None: ...

    def set_candidate(self, index: int, text: str, enabled: bool) -> None: ...

    def set_copied_marker(self, visible: bool) -> None: ...

    def set_extra_actions(self, mathml: Optional[str], tsv: Optional[str]) -> None: ...

    def set_confidence(self, value: float, band: ConfidenceBand) -> None: ...

    def set_waiting(self, visible: bool) -> None: ...

    def show_error(self, message: str) -> None: ...


class ConfigStore(Protocol):
    def get_backend(self) -> str: ...

    def set_backend(self, backend: str) -> None: ...

    def get_mathpix_credentials(self) -> tuple[str, str]: ...

    def set_mathpix_credentials(self, app_id: str, app_key: str) -> None: ...

    def get_api_key(self) -> str: ...

    def set_api_key(self, key: str) -> None: ...

    def get_proxy(self) -> ProxySettings: ...

    def set_proxy(self, proxy: ProxySettings) -> None: ...

    def get_hotkey(self, kind: str) -> str: ...

    def set_hotkey(self, kind: str, hotkey: str) -> None: ...
