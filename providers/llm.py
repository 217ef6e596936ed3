import os
import threading
from typing import Dict, Optional

import openai
from openai import DefaultHttpxClient, OpenAI

from core.logger import get_logger
from providers.base import ProviderError, ProxyRoute, TranslationResult, Translator
from providers.prompts import TRANSLATION_SYSTEM_PROMPT, TRANSLATION_USER_PROMPT_TEMPLATE

logger = get_logger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


class LLMTranslator(Translator):
    """
    Translates one leaf per chat completion against any OpenAI-compatible API.
    """
    name = "llm"

    def __init__(self, api_key: str = None, base_url: str = None, model: str = DEFAULT_MODEL,
                 timeout: float = 30.0, temperature: float = 0.3):
        self.api_key = api_key or os.getenv("LLM_API_KEY")
        self.base_url = base_url or os.getenv("LLM_BASE_URL")
        self.model = model or DEFAULT_MODEL
        self.timeout = timeout
        self.temperature = temperature

        # One SDK client per proxy route; worker threads share them
        self._clients: Dict[Optional[str], OpenAI] = {}
        self._lock = threading.Lock()

    def _client_for(self, routing: Optional[ProxyRoute]) -> OpenAI:
        key = routing.url if routing else None
        with self._lock:
            client = self._clients.get(key)
            if client is None:
                kwargs = {"api_key": self.api_key, "base_url": self.base_url, "timeout": self.timeout}
                if key:
                    kwargs["http_client"] = DefaultHttpxClient(proxy=key)
                client = OpenAI(**kwargs)
                self._clients[key] = client
        return client

    def translate(self, text: str, from_lang: str, to_lang: str,
                  routing: Optional[ProxyRoute] = None) -> TranslationResult:
        if not self.api_key:
            raise ProviderError("No API key configured (set LLM_API_KEY or store one in settings)",
                                provider=self.name)

        messages = [
            {"role": "system", "content": TRANSLATION_SYSTEM_PROMPT},
            {"role": "user", "content": TRANSLATION_USER_PROMPT_TEMPLATE.format(
                source_lang=from_lang, target_lang=to_lang, text=text)},
        ]

        try:
            response = self._client_for(routing).chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
            )
        except openai.OpenAIError as e:
            raise ProviderError(f"Completion failed: {e}", provider=self.name,
                                status_code=getattr(e, "status_code", None)) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise ProviderError("Malformed completion response", provider=self.name) from e

        content = _strip_code_fence((content or "").strip())
        if not content:
            raise ProviderError("Empty translation returned", provider=self.name)

        return TranslationResult(text=content)


def _strip_code_fence(text: str) -> str:
    # Some models wrap the answer in ``` despite the instructions
    if text.startswith("```"):
        lines = text.split("\n")
        text = "\n".join(lines[1:-1]) if len(lines) > 2 else text.strip("`")
    return text.strip()
