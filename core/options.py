from dataclasses import dataclass, field
from typing import Optional, Tuple

from core.xliff_inline_tags import DEFAULT_PLACEHOLDER_PATTERNS, PLURAL_MARKERS

SKIP_MARKER = "[INFO] Add your translation here"
FAILURE_MARKER = "[WARN] Failed to translate"

# Local tunnel used by --auto-proxy
AUTO_PROXY_URL = "http://127.0.0.1:9000"

# State values
STATE_NEW = "new"
STATE_INITIAL = "initial"
STATE_TRANSLATED = "translated"
STATE_FINAL = "final"
STATE_NEEDS_TRANSLATION = "needs-translation"

NEW_STATES = (STATE_NEW, STATE_INITIAL)


@dataclass
class TranslateOptions:
    """Everything one run needs besides the document and the translator."""
    source_lang: str
    target_lang: str
    min_interval_ms: int = 500
    max_concurrent: int = 4
    proxy: Optional[str] = None
    auto_proxy: bool = False
    skip: bool = False
    clear_state: bool = False
    add_approved_to_state_final: bool = False
    placeholder_patterns: Tuple[str, ...] = DEFAULT_PLACEHOLDER_PATTERNS
    plural_markers: Tuple[str, ...] = field(default=PLURAL_MARKERS)

    def __post_init__(self):
        if not self.source_lang or not self.target_lang:
            raise ValueError("Both source and target language codes are required")
        if self.max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {self.max_concurrent}")
        if self.min_interval_ms < 0:
            self.min_interval_ms = 0
