from collections import deque
from datetime import datetime, timezone
from typing import Callable, Dict, List

from core.document import NodeKind, XliffVersion, detect_version, find_child, find_children, node_kind
from core.entry_selector import Entry, EntrySelector
from core.logger import get_logger
from core.options import TranslateOptions
from core.xliff_obj import Job

logger = get_logger(__name__)


def generation_date() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class TraversalWalker:
    """
    Breadth-first walk over the document with an explicit queue.

    Handlers are looked up by (format version, node kind). A handler returns
    True when the walker should continue into the node's children; unit
    handlers return False because the selector has already dealt with the
    whole unit subtree.
    """

    def __init__(self, options: TranslateOptions, selector: EntrySelector = None,
                 date_provider: Callable[[], str] = generation_date):
        self.options = options
        self.selector = selector or EntrySelector(options)
        self.date_provider = date_provider
        self.version = None
        self.units_seen = 0

    def walk(self, tree) -> List[Job]:
        root = tree.getroot() if hasattr(tree, "getroot") else tree

        # Fixed once for the whole run
        self.version = detect_version(root)
        handlers = HANDLERS[self.version]
        logger.debug(f"Walking XLIFF {self.version.value}.x document")

        jobs: List[Job] = []
        queue = deque([root])
        while queue:
            node = queue.popleft()
            handler = handlers.get(node_kind(node, self.version))
            if handler is None or handler(self, node, jobs):
                queue.extend(node)

        logger.info(f"Visited {self.units_seen} units, queued {len(jobs)} text leaves")
        return jobs

    # --- v1 ---

    def _stamp_file_v1(self, node, jobs) -> bool:
        node.set("target-language", self.options.target_lang)
        node.set("date", self.date_provider())
        return True

    def _visit_trans_unit(self, node, jobs) -> bool:
        self.units_seen += 1
        entry = Entry(
            version=XliffVersion.V1,
            unit=node,
            container=node,
            source=find_child(node, "source"),
            target=find_child(node, "target"),
        )
        jobs.extend(self.selector.select(entry))
        return False

    # --- v2 ---

    def _stamp_xliff_v2(self, node, jobs) -> bool:
        node.set("trgLang", self.options.target_lang)
        node.set("date", self.date_provider())
        return True

    def _visit_unit(self, node, jobs) -> bool:
        self.units_seen += 1
        for segment in find_children(node, "segment"):
            entry = Entry(
                version=XliffVersion.V2,
                unit=node,
                container=segment,
                source=find_child(segment, "source"),
                target=find_child(segment, "target"),
            )
            jobs.extend(self.selector.select(entry))
        return False


HANDLERS: Dict[XliffVersion, Dict[NodeKind, Callable]] = {
    XliffVersion.V1: {
        NodeKind.FILE: TraversalWalker._stamp_file_v1,
        NodeKind.UNIT: TraversalWalker._visit_trans_unit,
    },
    XliffVersion.V2: {
        NodeKind.FILE: TraversalWalker._stamp_xliff_v2,
        NodeKind.UNIT: TraversalWalker._visit_unit,
    },
}
