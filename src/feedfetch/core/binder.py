"""Declarative XML-to-object binding on top of lxml.

A ``Document`` subclass declares which tags it consumes::

    class Item(Document):
        pass
    Item.element("title")
    Item.element("link", as_="url")

    class Channel(Document):
        pass
    Channel.element("title")
    Channel.elements("item", as_="entries", class_=Item)

Tags are matched by their qualified name as written in the document
(``"dc:creator"``), so prefixed extension elements can be declared without
knowing their namespace URI. An ``elements(..., class_=X)`` collection owns
the whole subtree of each matching node; everything else is searched at any
depth below the document root.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Iterator, Mapping

from lxml import etree

from .model import ParseError

_XML_PARSER = etree.XMLParser(recover=True, resolve_entities=False, no_network=True, huge_tree=True)


def _accessor_for(tag: str) -> str:
    return re.sub(r"\W", "_", tag)


def qualified_name(node) -> str:
    local = etree.QName(node).localname
    return f"{node.prefix}:{local}" if node.prefix else local


def _node_text(node) -> str | None:
    text = "".join(node.itertext()).strip()
    return text or None


@dataclass(frozen=True, slots=True)
class ElementConfig:
    tag: str
    as_: str
    value: str | None = None                   # attribute to read; None reads text
    with_: tuple[tuple[str, str], ...] = ()    # required attribute values
    coerce: Callable[[str], Any] | None = None
    collection: bool = False
    class_: type | None = None                 # nested Document for collections

    @property
    def key(self) -> tuple:
        return (self.tag, self.as_, self.with_, self.collection)

    def matches(self, name: str, node) -> bool:
        if name != self.tag:
            return False
        return all(node.get(attr) == wanted for attr, wanted in self.with_)

    def extract(self, node) -> Any:
        raw = node.get(self.value) if self.value else _node_text(node)
        if raw is None or self.coerce is None:
            return raw
        try:
            return self.coerce(raw)
        except (ValueError, TypeError, OverflowError) as e:
            raise ParseError(f"Bad value for <{self.tag}>: {raw!r}") from e


class SchemaConfig:
    """Ordered set of element configs for one Document class."""

    def __init__(self, configs: list[ElementConfig] | None = None) -> None:
        self._configs: list[ElementConfig] = list(configs or [])

    def copy(self) -> "SchemaConfig":
        return SchemaConfig(self._configs)

    def add(self, config: ElementConfig) -> None:
        # re-declaring the same mapping replaces it in place
        for i, existing in enumerate(self._configs):
            if existing.key == config.key:
                self._configs[i] = config
                return
        self._configs.append(config)

    def matching(self, name: str, node) -> Iterator[ElementConfig]:
        return (c for c in self._configs if c.matches(name, node))

    def nested(self, name: str, node) -> ElementConfig | None:
        for c in self._configs:
            if c.class_ is not None and c.matches(name, node):
                return c
        return None

    def __iter__(self) -> Iterator[ElementConfig]:
        return iter(list(self._configs))

    def __len__(self) -> int:
        return len(self._configs)


class Document:
    """Base for objects materialised from an XML tree."""

    _schema: ClassVar[SchemaConfig] = SchemaConfig()

    def __init_subclass__(cls, **kw):
        super().__init_subclass__(**kw)
        # each class gets its own copy so extending a child never leaks upward
        cls._schema = cls._schema.copy()

    def __init__(self) -> None:
        for config in self._schema:
            if not hasattr(self, config.as_):
                setattr(self, config.as_, [] if config.collection else None)

    # --- schema declaration ---
    @classmethod
    def element(cls, tag: str, *, as_: str | None = None, value: str | None = None,
                with_: Mapping[str, str] | None = None,
                coerce: Callable[[str], Any] | None = None) -> None:
        cls._schema.add(ElementConfig(
            tag=tag, as_=as_ or _accessor_for(tag), value=value,
            with_=tuple(sorted((with_ or {}).items())), coerce=coerce,
        ))

    @classmethod
    def elements(cls, tag: str, *, as_: str | None = None, value: str | None = None,
                 with_: Mapping[str, str] | None = None, class_: type | None = None) -> None:
        cls._schema.add(ElementConfig(
            tag=tag, as_=as_ or f"{_accessor_for(tag)}s", value=value,
            with_=tuple(sorted((with_ or {}).items())), collection=True, class_=class_,
        ))

    @classmethod
    def extend_schema(cls, tag: str, *, collection: bool = False, **options) -> None:
        """Make this class consume one more tag."""
        if collection:
            cls.elements(tag, **options)
        else:
            cls.element(tag, **options)

    @classmethod
    def accessors(cls) -> list[str]:
        seen: list[str] = []
        for config in cls._schema:
            if config.class_ is None and config.as_ not in seen:
                seen.append(config.as_)
        return seen

    # --- binding ---
    @classmethod
    def parse(cls, document: bytes | str):
        """Materialise an instance of ``cls`` from a whole XML document."""
        root = parse_xml(document)
        obj = cls()
        obj._apply(qualified_name(root), root)
        obj._bind(root)
        obj._finish()
        return obj

    def _apply(self, name: str, node) -> None:
        for config in self._schema.matching(name, node):
            if config.class_ is not None:
                continue
            value = config.extract(node)
            if value is None:
                continue
            if config.collection:
                getattr(self, config.as_).append(value)
            elif getattr(self, config.as_, None) is None:
                setattr(self, config.as_, value)

    def _bind(self, node) -> None:
        for child in node.iterchildren(tag=etree.Element):
            name = qualified_name(child)
            nested = self._schema.nested(name, child)
            if nested is not None:
                item = nested.class_()
                item._bind(child)
                item._finish()
                getattr(self, nested.as_).append(item)
                continue
            self._apply(name, child)
            self._bind(child)

    def _finish(self) -> None:
        """Hook run once binding is complete."""

    def fields(self) -> dict[str, Any]:
        return {name: getattr(self, name, None) for name in self.accessors()}


def parse_xml(document: bytes | str):
    if isinstance(document, str):
        document = document.encode("utf-8")
    try:
        root = etree.fromstring(document, parser=_XML_PARSER)
    except etree.XMLSyntaxError as e:
        raise ParseError(f"Invalid XML: {e}") from e
    if root is None:
        raise ParseError("Invalid XML: document is empty")
    return root
