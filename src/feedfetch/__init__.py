"""feedfetch - fetch syndication feeds concurrently and parse them into one model."""

__version__ = "0.1.0"

from .core.model import (                                             # re-export
    USER_AGENT, FetchOptions, FeedFetchError, NoParserAvailable,
    HttpError, FetchTimeoutError, ParseError,
)
from .core.parser_base import FeedParser, FeedEntry
from .core.registry import ParserRegistry, SNIFF_BYTES
from .fetch import FeedFetcher
from .io import etag_from_header, last_modified_from_header, decode_content

# default registry and fetcher used by the module-level helpers
_REGISTRY = ParserRegistry.with_builtins()
_FETCHER = FeedFetcher(registry=_REGISTRY)


def parse_with(parser_cls, document):
    """Parse ``document`` with an explicit parser class."""
    return parser_cls.parse(document)


def parse(document, *, registry: ParserRegistry | None = None):
    """Detect the format of a raw document and parse it."""
    parser_cls = (registry or _REGISTRY).choose(document)
    return parse_with(parser_cls, document)


def determine_feed_parser(document):
    return _REGISTRY.detect(document)


def register_parser(parser_cls) -> None:
    """Make ``parser_cls`` the first format tried by the default registry."""
    _REGISTRY.register(parser_cls)


def add_common_feed_element(tag: str, **options) -> None:
    _REGISTRY.add_common_feed_element(tag, **options)


def add_common_feed_elements(tag: str, **options) -> None:
    _REGISTRY.add_common_feed_elements(tag, **options)


def add_common_feed_entry_element(tag: str, **options) -> None:
    _REGISTRY.add_common_feed_entry_element(tag, **options)


def add_common_feed_entry_elements(tag: str, **options) -> None:
    _REGISTRY.add_common_feed_entry_elements(tag, **options)


def fetch_raw(url: str, **options) -> bytes:
    return _FETCHER.fetch_raw(url, FetchOptions.from_mapping(options))


def fetch_raw_many(urls, *, return_exceptions: bool = False, **options):
    return _FETCHER.fetch_raw_many(urls, FetchOptions.from_mapping(options),
                                   return_exceptions=return_exceptions)


def fetch_and_parse(url: str, **options):
    return _FETCHER.fetch_and_parse(url, FetchOptions.from_mapping(options))


def fetch_and_parse_many(urls, *, return_exceptions: bool = False, **options):
    return _FETCHER.fetch_and_parse_many(urls, FetchOptions.from_mapping(options),
                                         return_exceptions=return_exceptions)


def update(feed, **options):
    return _FETCHER.update(feed, FetchOptions.from_mapping(options))


def update_many(feeds, *, return_exceptions: bool = False, **options):
    return _FETCHER.update_many(feeds, FetchOptions.from_mapping(options),
                                return_exceptions=return_exceptions)


__all__ = [
    "parse", "parse_with", "determine_feed_parser", "register_parser",
    "add_common_feed_element", "add_common_feed_elements",
    "add_common_feed_entry_element", "add_common_feed_entry_elements",
    "fetch_raw", "fetch_raw_many", "fetch_and_parse", "fetch_and_parse_many",
    "update", "update_many",
    "FeedFetcher", "FetchOptions", "ParserRegistry", "FeedParser", "FeedEntry",
    "FeedFetchError", "NoParserAvailable", "HttpError", "FetchTimeoutError", "ParseError",
    "etag_from_header", "last_modified_from_header", "decode_content",
    "USER_AGENT", "SNIFF_BYTES",
]
