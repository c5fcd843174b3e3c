from __future__ import annotations
import threading
from typing import Iterable, List, Type

import structlog

from .parser_base import FeedParser
from .model import NoParserAvailable

logger = structlog.get_logger(__name__)

SNIFF_BYTES = 2000   # detection never looks further into a document


class ParserRegistry:
    """Ordered set of feed formats used for detection.

    The order of formats is owned by each registry. Schemas are not: they
    live on the format classes, so ``add_common_*`` changes every registry
    (and every direct ``parse``) that uses those classes.
    """

    def __init__(self, parsers: Iterable[Type[FeedParser]] = ()) -> None:
        self._lock = threading.Lock()
        self._parsers: List[Type[FeedParser]] = list(parsers)   # priority order

    @classmethod
    def with_builtins(cls) -> "ParserRegistry":
        from ..parsers import BUILTIN_PARSERS
        return cls(BUILTIN_PARSERS)

    @property
    def parsers(self) -> tuple[Type[FeedParser], ...]:
        with self._lock:
            return tuple(self._parsers)

    def register(self, parser_cls: Type[FeedParser]) -> None:
        """Add a parser ahead of everything registered so far."""
        with self._lock:
            self._parsers.insert(0, parser_cls)
        logger.debug("registry.registered", parser=parser_cls.__name__)

    # --- detection ---
    def detect(self, document: bytes | str) -> Type[FeedParser] | None:
        if isinstance(document, str):
            document = document.encode("utf-8")
        prefix = document[:SNIFF_BYTES]
        for p in self.parsers:
            if p.able_to_parse(prefix):
                return p
        return None

    def choose(self, document: bytes | str, source: str | None = None) -> Type[FeedParser]:
        parser = self.detect(document)
        if parser is None:
            raise NoParserAvailable(source)
        return parser

    # --- schema extension across every registered format ---
    def add_common_feed_element(self, tag: str, **options) -> None:
        for p in self.parsers:
            p.element(tag, **options)

    def add_common_feed_elements(self, tag: str, **options) -> None:
        for p in self.parsers:
            p.elements(tag, **options)

    def add_common_feed_entry_element(self, tag: str, **options) -> None:
        for entry_cls in self._entry_classes():
            entry_cls.element(tag, **options)

    def add_common_feed_entry_elements(self, tag: str, **options) -> None:
        for entry_cls in self._entry_classes():
            entry_cls.elements(tag, **options)

    def _entry_classes(self) -> list[type]:
        seen: list[type] = []
        for p in self.parsers:
            for entry_cls in p.entry_classes():
                if entry_cls not in seen:
                    seen.append(entry_cls)
        return seen
