from datetime import datetime, timezone

import pytest

from feedfetch.core.model import ParseError
from feedfetch.parsers import (
    Atom, AtomFeedBurner, GoogleDocsAtom, ITunesRSS, RSS, RSSFeedBurner,
)


class TestAtom:
    def test_feed_fields(self, sample):
        feed = Atom.parse(sample("atom.xml"))
        assert feed.title == "Example Atom Feed"
        assert feed.description == "Notes from the example desk"
        assert feed.url == "http://example.org/"
        assert feed.feed_url == "http://example.org/feed.atom"
        assert feed.updated_at == datetime(2009, 1, 22, 15, 50, 22, tzinfo=timezone.utc)
        assert feed.updated is False
        assert len(feed.entries) == 2

    def test_entry_fields(self, sample):
        entry = Atom.parse(sample("atom.xml")).entries[0]
        assert entry.title == "Second post"
        assert entry.url == "http://example.org/2009/01/second"
        assert entry.entry_id == "tag:example.org,2009:second"
        assert entry.author == "Paul Dix"
        assert entry.summary == "The second post."
        assert entry.categories == ["ruby", "feeds"]
        assert entry.published == datetime(2009, 1, 22, 15, 50, 22, tzinfo=timezone.utc)

    def test_entry_url_falls_back_to_first_link(self, sample):
        entry = Atom.parse(sample("atom.xml")).entries[1]
        assert entry.url == "http://example.org/2009/01/first"
        assert entry.content == "<p>The first post.</p>"

    def test_feedburner_original_link(self, sample):
        feed = AtomFeedBurner.parse(sample("atom_feedburner.xml"))
        assert feed.title == "Paul Dix Explains Nothing"
        assert feed.entries[0].url == "http://www.pauldix.net/2009/01/marshal.html"

    def test_google_docs(self, sample):
        feed = GoogleDocsAtom.parse(sample("google_docs.xml"))
        assert feed.total_results == 1
        entry = feed.entries[0]
        assert entry.checksum == "2b01142f7481c7b056c4b410d28f33cf"
        assert entry.original_filename == "report.pdf"
        assert entry.url == "https://docs.google.com/document/d/12345/edit"

    def test_google_docs_bad_total_results(self, sample):
        document = sample("google_docs.xml").replace(
            b"<openSearch:totalResults>1<", b"<openSearch:totalResults>n/a<"
        )
        with pytest.raises(ParseError, match="openSearch:totalResults"):
            GoogleDocsAtom.parse(document)


class TestRSS:
    def test_feed_fields(self, sample):
        feed = RSS.parse(sample("rss.xml"))
        assert feed.version == "2.0"
        assert feed.title == "Trotter Cashion's Home"
        assert feed.url == "http://trottercashion.com"
        assert feed.description == "Thoughts on code"
        assert feed.language == "en-us"

    def test_last_build_date_is_kept_apart_from_merge_flag(self):
        feed = RSS.parse(
            b'<rss version="2.0"><channel><title>t</title>'
            b"<lastBuildDate>Thu, 22 Jan 2009 15:50:22 GMT</lastBuildDate>"
            b"</channel></rss>"
        )
        assert feed.updated_at == datetime(2009, 1, 22, 15, 50, 22, tzinfo=timezone.utc)
        assert feed.updated is False

    def test_entry_fields(self, sample):
        entry = RSS.parse(sample("rss.xml")).entries[0]
        assert entry.title == "Eliminating Repetitive Code"
        assert entry.url == "http://trottercashion.com/2009/01/eliminating"
        assert entry.entry_id == "post-42"
        assert entry.author == "Trotter Cashion"
        assert entry.summary == "Short summary"
        assert entry.content == "<p>Longer body</p>"
        assert entry.categories == ["ruby", "refactoring"]
        assert entry.published == datetime(2009, 1, 20, 8, 0, tzinfo=timezone.utc)

    def test_rdf(self, sample):
        feed = RSS.parse(sample("rdf.xml"))
        assert feed.title == "HREF Considered Harmful"
        assert [e.title for e in feed.entries] == ["One", "Two"]
        assert feed.entries[0].published == datetime(2009, 1, 18, 12, 0, tzinfo=timezone.utc)
        assert feed.entries[1].published is None

    def test_feedburner_original_link(self, sample):
        entry = RSSFeedBurner.parse(sample("rss_feedburner.xml")).entries[0]
        assert entry.url == "http://techcrunch.com/2009/01/21/something/"

    def test_itunes(self, sample):
        feed = ITunesRSS.parse(sample("itunes.xml"))
        assert feed.itunes_author == "John Doe"
        assert feed.owner_email == "john.doe@example.com"
        assert feed.itunes_image == "http://example.com/podcasts/everything/AllAboutEverything.jpg"
        assert feed.itunes_categories == ["Technology", "TV & Film"]
        item = feed.entries[0]
        assert item.duration == "7:04"
        assert item.enclosure_type == "audio/x-m4a"
        assert item.enclosure_length == "8727310"
