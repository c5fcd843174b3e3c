from __future__ import annotations
from datetime import datetime
from typing import ClassVar

from .binder import Document
from .util import parse_datetime


class FeedEntry(Document):
    """One item of a feed. Concrete entry types declare their own tags."""

    def __init__(self) -> None:
        super().__init__()
        for name in ("entry_id", "url", "title"):
            if not hasattr(self, name):
                setattr(self, name, None)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.entry_id or self.url!r}>"


class FeedParser(Document):
    """A feed format: sniff predicate, parser and the resulting feed type.

    The class is the format descriptor; its instances are parsed feeds.
    """

    # --- required by subclasses ---
    format_name: ClassVar[str]

    # fields the merge compares and copies over from a refreshed feed
    UPDATABLE_ATTRIBUTES: ClassVar[tuple[str, ...]] = (
        "title", "url", "feed_url", "source_url", "etag", "last_modified",
    )

    def __init__(self) -> None:
        super().__init__()
        self.source_url: str | None = None
        self.etag: str | None = None
        self.last_modified: datetime | None = None
        self.new_entries: list[FeedEntry] = []
        self.updated = False
        if not hasattr(self, "entries"):
            self.entries = []

    # --- descriptor contract ---
    @classmethod
    def able_to_parse(cls, prefix: bytes) -> bool:
        raise NotImplementedError

    @classmethod
    def entry_classes(cls) -> list[type[Document]]:
        """Nested entry types this format produces."""
        return [c.class_ for c in cls._schema
                if c.collection and c.class_ is not None and c.as_ == "entries"]

    # --- merge ---
    def find_new_entries_for(self, feed: "FeedParser") -> list[FeedEntry]:
        # Feeds list newest first, and not every entry carries a date, so walk
        # the fresh entries until we reach the newest one we already hold.
        if not self.entries:
            return list(feed.entries)
        latest = self.entries[0]
        found = []
        for entry in feed.entries:
            if entry.entry_id is None and latest.entry_id is None:
                if entry.url == latest.url:
                    break
            elif entry.entry_id == latest.entry_id or (entry.url is not None and entry.url == latest.url):
                break
            found.append(entry)
        return found

    def update_from_feed(self, feed: "FeedParser") -> None:
        """Fold a freshly parsed copy of this feed into this object."""
        fresh = self.find_new_entries_for(feed)
        self.new_entries.extend(fresh)
        self.entries[0:0] = fresh
        self.updated = False
        for name in self.UPDATABLE_ATTRIBUTES:
            if self._update_attribute(feed, name):
                self.updated = True

    def _update_attribute(self, feed: "FeedParser", name: str) -> bool:
        new_value = getattr(feed, name, None)
        if new_value is None or new_value == getattr(self, name, None):
            return False
        setattr(self, name, new_value)
        return True

    @property
    def has_new_entries(self) -> bool:
        return bool(self.new_entries)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.source_url or getattr(self, 'title', None)!r}>"


def date_element(cls: type[Document], tag: str, as_: str) -> None:
    """Declare a tag whose text is a timestamp."""
    cls.element(tag, as_=as_, coerce=parse_datetime)
