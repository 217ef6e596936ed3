from typing import Optional

from core.settings_manager import SettingsManager
from providers.base import Translator
from providers.google import GoogleTranslator
from providers.llm import LLMTranslator
from providers.mock import MockTranslator

PROVIDERS = ("google", "llm", "mock")
# Backends that read an API key from the settings
KEYED_PROVIDERS = ("llm",)


def build_translator(provider: str, settings: Optional[SettingsManager] = None) -> Translator:
    """Creates the translator named on the command line / in the config file."""
    settings = settings or SettingsManager()
    provider = (provider or settings.get_active_provider()).lower()
    conf = settings.get_provider_config(provider)

    if provider == "google":
        return GoogleTranslator(endpoint=conf.get("endpoint"), timeout=settings.request_timeout)
    if provider == "llm":
        return LLMTranslator(
            api_key=settings.get_api_key("llm"),
            base_url=conf.get("base_url"),
            model=conf.get("model"),
            timeout=settings.request_timeout,
        )
    if provider == "mock":
        return MockTranslator()
    raise ValueError(f"Unsupported translation provider: {provider} (choose from {', '.join(PROVIDERS)})")
