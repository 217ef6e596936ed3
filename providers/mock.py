from typing import Optional

from providers.base import ProxyRoute, TranslationResult, Translator


class MockTranslator(Translator):
    """Network-free translator for dry runs: echoes the text with a prefix."""
    name = "mock"

    def __init__(self, prefix: str = "[Mock] "):
        self.prefix = prefix

    def translate(self, text: str, from_lang: str, to_lang: str,
                  routing: Optional[ProxyRoute] = None) -> TranslationResult:
        return TranslationResult(text=f"{self.prefix}{text.strip()}")
