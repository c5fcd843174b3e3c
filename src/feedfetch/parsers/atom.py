"""Atom 1.0 / 0.3 feeds, plus the FeedBurner flavour."""

from __future__ import annotations

import re
from typing import ClassVar

from ..core.parser_base import FeedEntry, FeedParser, date_element

_ATOM_FEED_RE = re.compile(
    rb"<feed[^>]+xmlns\s?=\s?[\"'](http://www\.w3\.org/2005/Atom|http://purl\.org/atom/ns#)[\"'][^>]*>"
)
_ATOM_NS_RE = re.compile(rb"http://www\.w3\.org/2005/Atom|http://purl\.org/atom/ns#")


class AtomEntry(FeedEntry):
    def _finish(self) -> None:
        if self.url is None and self.links:
            self.url = self.links[0]


AtomEntry.element("title")
AtomEntry.element("link", as_="url", value="href", with_={"rel": "alternate"})
AtomEntry.element("name", as_="author")
AtomEntry.element("content")
AtomEntry.element("summary")
AtomEntry.element("media:content", as_="image", value="url")
AtomEntry.element("enclosure", as_="image", value="href")
AtomEntry.element("id", as_="entry_id")
date_element(AtomEntry, "published", "published")
date_element(AtomEntry, "created", "published")
date_element(AtomEntry, "issued", "published")
date_element(AtomEntry, "updated", "updated")
date_element(AtomEntry, "modified", "updated")
AtomEntry.elements("category", as_="categories", value="term")
AtomEntry.elements("link", as_="links", value="href")


class Atom(FeedParser):
    format_name: ClassVar[str] = "atom"

    @classmethod
    def able_to_parse(cls, prefix: bytes) -> bool:
        return _ATOM_FEED_RE.search(prefix) is not None

    def _finish(self) -> None:
        if self.url is None:
            others = [link for link in self.links if link != self.feed_url]
            self.url = others[-1] if others else (self.links[-1] if self.links else None)


Atom.element("title")
Atom.element("subtitle", as_="description")
Atom.element("link", as_="url", value="href", with_={"rel": "alternate"})
Atom.element("link", as_="feed_url", value="href", with_={"rel": "self"})
Atom.element("id", as_="feed_id")
date_element(Atom, "updated", "updated_at")
Atom.elements("link", as_="links", value="href")
Atom.elements("entry", as_="entries", class_=AtomEntry)


class AtomFeedBurnerEntry(AtomEntry):
    def _finish(self) -> None:
        if self.origin_link:
            self.url = self.origin_link
        super()._finish()


AtomFeedBurnerEntry.element("feedburner:origLink", as_="origin_link")


class AtomFeedBurner(Atom):
    format_name: ClassVar[str] = "atom_feedburner"

    @classmethod
    def able_to_parse(cls, prefix: bytes) -> bool:
        return _ATOM_NS_RE.search(prefix) is not None and b"feedburner" in prefix


AtomFeedBurner.elements("entry", as_="entries", class_=AtomFeedBurnerEntry)
