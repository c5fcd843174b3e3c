"""Podcast feeds: RSS 2.0 carrying the iTunes namespace."""

from __future__ import annotations

import re
from typing import ClassVar

from .rss import RSS, RSSEntry

_ITUNES_NS_RE = re.compile(rb"xmlns:itunes\s?=\s?[\"']http://www\.itunes\.com/dtds/podcast-1\.0\.dtd[\"']", re.IGNORECASE)


class ITunesRSSItem(RSSEntry):
    pass


ITunesRSSItem.element("itunes:author", as_="itunes_author")
ITunesRSSItem.element("itunes:subtitle", as_="itunes_subtitle")
ITunesRSSItem.element("itunes:summary", as_="itunes_summary")
ITunesRSSItem.element("itunes:duration", as_="duration")
ITunesRSSItem.element("itunes:explicit", as_="explicit")
ITunesRSSItem.element("itunes:keywords", as_="keywords")
ITunesRSSItem.element("enclosure", as_="enclosure_url", value="url")
ITunesRSSItem.element("enclosure", as_="enclosure_type", value="type")
ITunesRSSItem.element("enclosure", as_="enclosure_length", value="length")


class ITunesRSS(RSS):
    format_name: ClassVar[str] = "itunes_rss"

    @classmethod
    def able_to_parse(cls, prefix: bytes) -> bool:
        return _ITUNES_NS_RE.search(prefix) is not None


ITunesRSS.element("copyright")
ITunesRSS.element("itunes:author", as_="itunes_author")
ITunesRSS.element("itunes:subtitle", as_="itunes_subtitle")
ITunesRSS.element("itunes:summary", as_="itunes_summary")
ITunesRSS.element("itunes:explicit", as_="explicit")
ITunesRSS.element("itunes:keywords", as_="keywords")
ITunesRSS.element("itunes:image", as_="itunes_image", value="href")
ITunesRSS.elements("itunes:category", as_="itunes_categories", value="text")
ITunesRSS.element("itunes:name", as_="owner_name")
ITunesRSS.element("itunes:email", as_="owner_email")
ITunesRSS.elements("item", as_="entries", class_=ITunesRSSItem)
