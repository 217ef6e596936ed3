from typing import Optional

import requests

from core.logger import get_logger
from providers.base import ProviderError, ProxyRoute, TranslationResult, Translator

logger = get_logger(__name__)

GOOGLE_TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"
DEFAULT_TIMEOUT = 20


class GoogleTranslator(Translator):
    """Translates text through the public Google Translate endpoint."""
    name = "google"

    def __init__(self, endpoint: str = GOOGLE_TRANSLATE_URL, timeout: float = DEFAULT_TIMEOUT):
        self.endpoint = endpoint or GOOGLE_TRANSLATE_URL
        self.timeout = timeout

    def translate(self, text: str, from_lang: str, to_lang: str,
                  routing: Optional[ProxyRoute] = None) -> TranslationResult:
        params = {
            "client": "gtx",
            "sl": from_lang,
            "tl": to_lang,
            "dt": "t",
            "q": text,
        }
        proxies = routing.as_requests_proxies() if routing else None

        try:
            resp = requests.get(
                self.endpoint,
                params=params,
                proxies=proxies,
                headers={"User-Agent": "Mozilla/5.0 (xlf-auto-translate)"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"Request failed: {e}", provider=self.name) from e

        if resp.status_code == 429:
            raise ProviderError("Rate limited / quota exceeded", provider=self.name, status_code=429)
        if resp.status_code != 200:
            raise ProviderError(
                f"Unexpected response: {resp.text[:200]}",
                provider=self.name,
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
            # [[["Bonjour","Hello",...], ...], ...]
            translated = "".join(seg[0] for seg in data[0] if seg and seg[0])
        except (ValueError, TypeError, IndexError, KeyError) as e:
            raise ProviderError(f"Could not parse response: {resp.text[:100]}", provider=self.name) from e

        if not translated and text.strip():
            raise ProviderError("Empty translation returned", provider=self.name)

        logger.debug(f"google {from_lang}->{to_lang}: {text!r} -> {translated!r}")
        return TranslationResult(text=translated)
