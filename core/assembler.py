from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from lxml import etree

from core.dispatcher import RateLimitedDispatcher
from core.document import load, parse, save, serialize
from core.entry_selector import EntrySelector
from core.invocation import TranslationInvoker, resolve_proxy_route
from core.logger import get_logger
from core.options import TranslateOptions
from core.walker import TraversalWalker, generation_date
from core.xliff_obj import Job
from providers.base import Translator

logger = get_logger(__name__)


@dataclass
class TranslationOutcome:
    tree: etree._ElementTree
    jobs: List[Job] = field(default_factory=list)
    translated: int = 0
    failed: int = 0
    filled: int = 0  # skip mode boilerplate

    @property
    def number_of_translated(self) -> int:
        return self.translated + self.filled

    @property
    def xml(self) -> bytes:
        return serialize(self.tree)


def translate_tree(tree: etree._ElementTree, options: TranslateOptions,
                   translator: Optional[Translator] = None,
                   date_provider: Callable[[], str] = generation_date) -> TranslationOutcome:
    """
    Phase 1 walks the tree and queues jobs; phase 2 dispatches them. The tree
    is only returned once every job has settled.
    """
    selector = EntrySelector(options)
    walker = TraversalWalker(options, selector=selector, date_provider=date_provider)
    jobs = walker.walk(tree)

    outcome = TranslationOutcome(tree=tree, jobs=jobs, filled=selector.filled)
    if not jobs:
        return outcome

    if translator is None:
        raise ValueError("A translator is required unless skip mode is enabled")

    invoker = TranslationInvoker(translator, resolve_proxy_route(options.proxy, options.auto_proxy))
    dispatcher = RateLimitedDispatcher(options.max_concurrent, options.min_interval_ms)
    dispatcher.run_all(jobs, invoker.invoke)

    outcome.failed = sum(1 for job in jobs if job.failed)
    outcome.translated = len(jobs) - outcome.failed
    if outcome.failed:
        logger.warning(f"{outcome.failed} of {len(jobs)} leaves could not be translated")
    return outcome


def translate_document(data: Union[bytes, str], options: TranslateOptions,
                       translator: Optional[Translator] = None,
                       date_provider: Callable[[], str] = generation_date) -> TranslationOutcome:
    """Parses XLIFF content and fills in missing translations."""
    tree = parse(data)
    return translate_tree(tree, options, translator, date_provider)


def translate_file(input_path: str, output_path: str, options: TranslateOptions,
                   translator: Optional[Translator] = None) -> TranslationOutcome:
    outcome = translate_tree(load(input_path), options, translator)
    # Only written after every job has settled
    save(outcome.tree, output_path)
    return outcome
