"""Built-in feed formats for feedfetch."""

from .atom import Atom, AtomEntry, AtomFeedBurner, AtomFeedBurnerEntry
from .google_docs import GoogleDocsAtom, GoogleDocsAtomEntry
from .itunes import ITunesRSS, ITunesRSSItem
from .rss import RSS, RSSEntry, RSSFeedBurner, RSSFeedBurnerEntry

# most specific first: a FeedBurner Atom feed is also a plain Atom feed
BUILTIN_PARSERS = (
    RSSFeedBurner,
    GoogleDocsAtom,
    AtomFeedBurner,
    Atom,
    ITunesRSS,
    RSS,
)
