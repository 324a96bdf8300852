"""Core data models for the app."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TriggerKind(str, Enum):
    REFRESH = "refresh"
    SUBMIT = "submit"


class ErrorCategory(str, Enum):
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_PROXY_CONFIG = "INVALID_PROXY_CONFIG"
    EXCEPTION = "EXCEPTION"
    GENERIC = "GENERIC"
    NO_RESPONSE = "NO_RESPONSE"


class ConfidenceBand(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class RecognitionRequest:
    image: bytes
    submitted_at: float = 0.0


@dataclass
class RecognitionResult:
    text: str = ""
    error: Optional[str] = None
    mathml: str = ""
    tsv: str = ""
    confidence: float = 0.0


@dataclass
class Outcome:
    """Classified result. ``category`` is None for a successful recognition."""

    category: Optional[ErrorCategory] = None
    message: str = ""
    settings_section: Optional[int] = None
    clears_results: bool = False
    result: Optional[RecognitionResult] = None

    @property
    def is_success(self) -> bool:
        return self.category is None


@dataclass
class CandidateSet:
    primary: str
    secondary: str
    tertiary: str


@dataclass
class CandidateSlot:
    text: str = ""
    enabled: bool = True


@dataclass
class ProxySettings:
    enabled: bool = False
    host: str = ""
    port: int = 0
    scheme: str = "http"

    @property
    def is_valid(self) -> bool:
        return bool(self.host.strip()) and 0 < self.port < 65536

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host.strip()}:{self.port}"
