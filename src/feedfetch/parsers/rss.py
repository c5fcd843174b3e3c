"""RSS 0.9x / 2.0 and RDF (RSS 1.0) feeds, plus the FeedBurner flavour."""

from __future__ import annotations

import re
from typing import ClassVar

from ..core.parser_base import FeedEntry, FeedParser, date_element

_RSS_RE = re.compile(rb"<rss|<rdf")


class RSSEntry(FeedEntry):
    pass


RSSEntry.element("title")
RSSEntry.element("link", as_="url")
RSSEntry.element("dc:creator", as_="author")
RSSEntry.element("author", as_="author")
RSSEntry.element("content:encoded", as_="content")
RSSEntry.element("description", as_="summary")
RSSEntry.element("media:content", as_="image", value="url")
RSSEntry.element("enclosure", as_="image", value="url")
date_element(RSSEntry, "pubDate", "published")
date_element(RSSEntry, "pubdate", "published")
date_element(RSSEntry, "dc:date", "published")
date_element(RSSEntry, "dc:Date", "published")
date_element(RSSEntry, "dcterms:created", "published")
date_element(RSSEntry, "issued", "published")
date_element(RSSEntry, "dcterms:modified", "updated")
RSSEntry.elements("category", as_="categories")
RSSEntry.element("guid", as_="entry_id")


class RSS(FeedParser):
    format_name: ClassVar[str] = "rss"

    @classmethod
    def able_to_parse(cls, prefix: bytes) -> bool:
        return _RSS_RE.search(prefix) is not None


RSS.element("rss", as_="version", value="version")
RSS.element("title")
RSS.element("description")
RSS.element("link", as_="url")
RSS.element("language")
date_element(RSS, "lastBuildDate", "updated_at")
RSS.elements("item", as_="entries", class_=RSSEntry)


class RSSFeedBurnerEntry(RSSEntry):
    def _finish(self) -> None:
        if self.origin_link:
            self.url = self.origin_link


RSSFeedBurnerEntry.element("feedburner:origLink", as_="origin_link")


class RSSFeedBurner(RSS):
    format_name: ClassVar[str] = "rss_feedburner"

    @classmethod
    def able_to_parse(cls, prefix: bytes) -> bool:
        return _RSS_RE.search(prefix) is not None and b"feedburner" in prefix


RSSFeedBurner.elements("item", as_="entries", class_=RSSFeedBurnerEntry)
