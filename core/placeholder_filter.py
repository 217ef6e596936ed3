import re
from typing import Iterable, Optional

from core.xliff_inline_tags import PLACEHOLDER_REGEX


class PlaceholderFilter:
    """
    Decides whether a text leaf carries anything a translator could work on.

    A leaf is placeholder-only when, after every interpolation / format
    directive has been cut out, no alphabetic character is left. Punctuation,
    digits and whitespace alone never need translating.
    """

    def __init__(self, patterns: Optional[Iterable[str]] = None):
        if patterns is None:
            self.pattern = PLACEHOLDER_REGEX
        else:
            patterns = list(patterns)
            # An empty set means "nothing is a placeholder"
            joined = "|".join(f"(?:{p})" for p in patterns)
            self.pattern = re.compile(joined, re.DOTALL) if patterns else None

    def strip(self, text: str) -> str:
        """Returns text with all recognized placeholders removed."""
        text = text or ""
        if self.pattern is None:
            return text
        return self.pattern.sub("", text)

    def is_placeholder_only(self, text: str) -> bool:
        remaining = self.strip(text)
        return not any(ch.isalpha() for ch in remaining)


_default_filter = PlaceholderFilter()


def is_placeholder_only(text: str) -> bool:
    """Module-level shortcut using the default marker patterns."""
    return _default_filter.is_placeholder_only(text)
