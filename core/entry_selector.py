from dataclasses import dataclass
from typing import List, Optional

from core.document import (
    XliffVersion, all_text, clone_as_target, is_empty, refill_from_source, text_leaves,
)
from core.logger import get_logger
from core.options import (
    NEW_STATES, SKIP_MARKER, STATE_FINAL, STATE_NEEDS_TRANSLATION, STATE_TRANSLATED,
    TranslateOptions,
)
from core.placeholder_filter import PlaceholderFilter
from core.xliff_obj import Job

logger = get_logger(__name__)


@dataclass
class Entry:
    """
    One source/target pair as seen by the selector.

    v1: the <trans-unit> itself; state lives on <target>.
    v2: one <segment> of a <unit>; state lives on the segment.
    """
    version: XliffVersion
    unit: object
    container: object  # parent of <source>/<target>
    source: Optional[object]
    target: Optional[object]

    @property
    def unit_id(self) -> Optional[str]:
        return self.unit.get("id")

    def state_holder(self, target=None):
        if self.version == XliffVersion.V2:
            return self.container
        return target if target is not None else self.target

    def state(self) -> Optional[str]:
        holder = self.state_holder()
        return holder.get("state") if holder is not None else None

    def attach(self, target):
        # Directly after <source>, where both schemas expect it
        self.source.addnext(target)
        self.target = target


class EntrySelector:
    """
    Decides per entry whether translation is needed, prepares the <target>
    and turns its translatable text leaves into Jobs.
    """

    def __init__(self, options: TranslateOptions, placeholder_filter: PlaceholderFilter = None):
        self.options = options
        self.placeholder_filter = placeholder_filter or PlaceholderFilter(options.placeholder_patterns)
        # Leaves overwritten with the boilerplate marker in skip mode
        self.filled = 0

    def select(self, entry: Entry) -> List[Job]:
        if entry.source is None:
            logger.debug(f"Unit {entry.unit_id} has no <source>, skipped")
            return []

        target = entry.target
        if target is not None and entry.state() not in NEW_STATES:
            self._mark_approved(entry)
            return []

        if target is None:
            target = clone_as_target(entry.source, self.options.target_lang)
            entry.attach(target)
        elif is_empty(target):
            refill_from_source(target, entry.source)

        holder = entry.state_holder(target)

        if self._has_plural(target):
            logger.info(f"Unit {entry.unit_id} contains a plural expression, left for a human")
            self._flag_untranslatable(holder)
            return []

        leaves = text_leaves(target)
        if not any(leaf.text.strip() for leaf in leaves):
            logger.debug(f"Unit {entry.unit_id} has no text to translate")
            self._flag_untranslatable(holder)
            return []

        jobs = []
        touched = False
        for leaf in leaves:
            if self.placeholder_filter.is_placeholder_only(leaf.text):
                continue
            touched = True
            if self.options.skip:
                leaf.text = SKIP_MARKER
                self.filled += 1
            else:
                jobs.append(Job(leaf, self.options.source_lang, self.options.target_lang,
                                unit_id=entry.unit_id))

        if touched and self.options.clear_state:
            holder.set("state", STATE_TRANSLATED)

        return jobs

    def _has_plural(self, target) -> bool:
        text = all_text(target)
        return any(marker in text for marker in self.options.plural_markers)

    def _flag_untranslatable(self, holder):
        if self.options.clear_state:
            holder.set("state", STATE_NEEDS_TRANSLATION)

    def _mark_approved(self, entry: Entry):
        if (self.options.add_approved_to_state_final
                and entry.version == XliffVersion.V1
                and entry.state() == STATE_FINAL):
            entry.unit.set("approved", "yes")
