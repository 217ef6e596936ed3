from dataclasses import dataclass, field
from typing import Optional

from lxml import etree


@dataclass(eq=False)
class TextLeaf:
    """
    One text slot of the lxml tree.

    lxml keeps character data on elements (`.text` before the first child,
    `.tail` after the element) instead of as separate nodes, so a leaf is
    the pair (element, slot).
    """
    element: etree._Element
    slot: str = "text"  # "text" | "tail"

    @property
    def text(self) -> str:
        return getattr(self.element, self.slot) or ""

    @text.setter
    def text(self, value: str):
        setattr(self.element, self.slot, value)

    def __repr__(self):
        return f"TextLeaf({etree.QName(self.element).localname}.{self.slot}={self.text!r})"


@dataclass(eq=False)
class Job:
    """
    Exclusive claim on one text leaf awaiting translation.
    Created by the entry selector, consumed once by the dispatcher.
    """
    leaf: TextLeaf
    source_lang: str
    target_lang: str
    unit_id: Optional[str] = None

    # Filled in by the invocation step
    original_text: str = ""
    translated_text: Optional[str] = None
    error: Optional[str] = None
    done: bool = field(default=False, repr=False)

    def __post_init__(self):
        if not self.original_text:
            self.original_text = self.leaf.text

    @property
    def failed(self) -> bool:
        return self.error is not None
