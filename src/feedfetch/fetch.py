"""Concurrent fetch engine, fetch-parse pipeline and update/merge pipeline."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

import structlog

from .core.model import FeedFetchError, FetchOptions, FetchTimeoutError, HttpError
from .core.parser_base import FeedParser
from .core.registry import ParserRegistry
from .io import open_transport
from .io.base import Transport, TransportRequest, TransportResponse
from .io.decode import decode_content
from .io.headers import etag_from_header, last_modified_from_header

logger = structlog.get_logger(__name__)

NOT_MODIFIED = 304

Handler = Callable[[str, TransportResponse], Any]


class FeedFetcher:
    """Fetch feeds in batches and turn them into parsed ``Feed`` objects.

    Every ``*_many`` call is one batch: all requests are queued on the
    transport and the call blocks until they have completed. By default the
    first timeout, non-2xx status or unparsable body aborts the whole batch
    and the error propagates; results that had already arrived are dropped.
    Pass ``return_exceptions=True`` to keep going and get the error stored
    under its URL instead.
    """

    def __init__(self, registry: Optional[ParserRegistry] = None,
                 transport: Optional[Transport] = None,
                 options: Optional[FetchOptions] = None):
        self.registry = registry or ParserRegistry.with_builtins()
        self._transport = transport
        self.options = options or FetchOptions()

    def _transport_for_batch(self) -> Transport:
        return self._transport if self._transport is not None else open_transport()

    # ------------------------------------------------------------------ #
    def _run_batch(self, urls: Iterable[str], options: Optional[FetchOptions],
                   on_success: Handler, return_exceptions: bool,
                   not_modified_ok: bool = False) -> Dict[str, Any]:
        opts = options or self.options
        headers = opts.headers()
        transport = self._transport_for_batch()
        responses: Dict[str, Any] = {}

        for url in urls:
            def on_complete(response: TransportResponse, url: str = url) -> None:
                try:
                    responses[url] = self._classify(url, response, on_success, not_modified_ok)
                except FeedFetchError as e:
                    if e.url is None:
                        e.url = url
                    logger.info("fetch.failed", url=url, error=str(e))
                    if not return_exceptions:
                        raise
                    responses[url] = e

            transport.queue(TransportRequest(url, dict(headers), opts), on_complete)

        # blocks until every request has completed or a handler has raised
        transport.run()
        return responses

    @staticmethod
    def _classify(url: str, response: TransportResponse, on_success: Handler,
                  not_modified_ok: bool = False) -> Any:
        if response.success or (not_modified_ok and response.status == NOT_MODIFIED):
            logger.debug("fetch.completed", url=url, status=response.status)
            return on_success(url, response)
        if response.timed_out:
            raise FetchTimeoutError(url)
        raise HttpError(url, response.status)

    # ------------------------------------------------------------------ #
    @staticmethod
    def _raw(url: str, response: TransportResponse) -> bytes:
        return decode_content(response.body, response.content_type)

    def _parse_response(self, url: str, response: TransportResponse) -> FeedParser:
        document = decode_content(response.body, response.content_type)
        parser_cls = self.registry.choose(document, url)
        feed = parser_cls.parse(document)
        feed.source_url = url
        feed.etag = etag_from_header(response.header_blob)
        feed.last_modified = last_modified_from_header(response.header_blob)
        return feed

    def _parse_or_not_modified(self, url: str, response: TransportResponse) -> Optional[FeedParser]:
        if response.status == NOT_MODIFIED:
            return None
        return self._parse_response(url, response)

    # --- raw ---
    def fetch_raw(self, url: str, options: Optional[FetchOptions] = None) -> bytes:
        """Fetch one URL and return its decoded body."""
        return self.fetch_raw_many([url], options)[url]

    def fetch_raw_many(self, urls: Iterable[str], options: Optional[FetchOptions] = None,
                       *, return_exceptions: bool = False) -> Dict[str, bytes]:
        """Fetch many URLs concurrently; map each URL to its decoded body."""
        return self._run_batch(urls, options, self._raw, return_exceptions)

    # --- parsed ---
    def fetch_and_parse(self, url: str, options: Optional[FetchOptions] = None) -> FeedParser:
        """Fetch and parse one feed."""
        return self.fetch_and_parse_many([url], options)[url]

    def fetch_and_parse_many(self, urls: Iterable[str], options: Optional[FetchOptions] = None,
                             *, return_exceptions: bool = False) -> Dict[str, FeedParser]:
        """Fetch and parse many feeds concurrently, keyed by requested URL."""
        return self._run_batch(urls, options, self._parse_response, return_exceptions)

    # --- update ---
    def update(self, feed: Optional[FeedParser], options: Optional[FetchOptions] = None) -> Optional[FeedParser]:
        """Re-fetch a feed and merge new content into it in place.

        Unlike the fetch calls, a ``304 Not Modified`` reply is not an
        ``HttpError`` here: the feed comes back untouched with
        ``updated`` set to False.
        """
        if feed is None or not feed.source_url:
            return None
        return self.update_many([feed], options)[feed.source_url]

    def update_many(self, feeds: Iterable[Optional[FeedParser]], options: Optional[FetchOptions] = None,
                    *, return_exceptions: bool = False) -> Dict[str, FeedParser]:
        """Refresh many feeds concurrently; map source URL to the updated feed.

        Feeds sharing a ``source_url`` are fetched once and all merged from
        that response; the map holds the first of them. A 304 leaves a feed
        untouched, as in :meth:`update`.
        """
        by_url: Dict[str, List[FeedParser]] = {}
        for feed in feeds:
            if feed is None or not feed.source_url:
                continue
            same = by_url.setdefault(feed.source_url, [])
            if same:
                logger.info("fetch.duplicate_source", url=feed.source_url, feeds=len(same) + 1)
            same.append(feed)

        def merge(url: str, response: TransportResponse) -> FeedParser:
            for original in by_url[url]:
                # parse per object so merged feeds never share entry objects
                fresh = self._parse_or_not_modified(url, response)
                if fresh is None:
                    original.updated = False
                    continue
                original.update_from_feed(fresh)
                logger.debug("fetch.merged", url=url, new_entries=len(original.new_entries))
            return by_url[url][0]

        return self._run_batch(list(by_url), options, merge, return_exceptions,
                               not_modified_ok=True)
