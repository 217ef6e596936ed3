from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional


class ProviderError(Exception):
    """Raised by a translator on any transport, quota or parse problem."""

    def __init__(self, message: str, provider: str = None, status_code: int = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code

    def __str__(self):
        prefix = f"[{self.provider}] " if self.provider else ""
        suffix = f" (HTTP {self.status_code})" if self.status_code else ""
        return f"{prefix}{super().__str__()}{suffix}"


@dataclass(frozen=True)
class TranslationResult:
    text: str


@dataclass(frozen=True)
class ProxyRoute:
    """Where outgoing translation requests should be tunnelled."""
    url: str

    def as_requests_proxies(self) -> Dict[str, str]:
        return {"http": self.url, "https": self.url}


class Translator(ABC):
    """
    The single capability the engine needs from a translation backend.
    Implementations must be safe to call from several worker threads.
    """
    name = "base"

    @abstractmethod
    def translate(self, text: str, from_lang: str, to_lang: str,
                  routing: Optional[ProxyRoute] = None) -> TranslationResult:
        ...
