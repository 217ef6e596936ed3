from typing import Optional

from core.logger import get_logger
from core.options import AUTO_PROXY_URL, FAILURE_MARKER
from core.xliff_obj import Job
from providers.base import ProxyRoute, Translator

logger = get_logger(__name__)


def resolve_proxy_route(proxy: Optional[str] = None, auto_proxy: bool = False) -> Optional[ProxyRoute]:
    """Explicit proxy URL first, then the local auto-proxy tunnel, else direct."""
    if proxy:
        return ProxyRoute(proxy)
    if auto_proxy:
        return ProxyRoute(AUTO_PROXY_URL)
    return None


def repair_whitespace(original: str, translated: str) -> str:
    """
    Translation backends trim their input. Put back a single leading and/or
    trailing space when the original had one and the result lost it.
    """
    if original.startswith(" ") and not translated.startswith(" "):
        translated = " " + translated
    if original.endswith(" ") and not translated.endswith(" "):
        translated = translated + " "
    return translated


class TranslationInvoker:
    """Translates one Job's leaf in place. Never raises."""

    def __init__(self, translator: Translator, routing: Optional[ProxyRoute] = None):
        self.translator = translator
        self.routing = routing

    def invoke(self, job: Job):
        original = job.original_text
        try:
            result = self.translator.translate(original, job.source_lang, job.target_lang, self.routing)
            translated = repair_whitespace(original, result.text)
            job.leaf.text = translated
            job.translated_text = translated
            logger.info(f"Translating '{original}' -> '{translated}'")
        except Exception as e:
            job.leaf.text = FAILURE_MARKER
            job.error = str(e) or e.__class__.__name__
            logger.error(f"Failed to translate '{original}' (unit {job.unit_id}): {e!r}", exc_info=True)
        finally:
            job.done = True
