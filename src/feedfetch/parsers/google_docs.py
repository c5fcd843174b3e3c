"""Google Docs document-list feeds (Atom with a docs.google.com id)."""

from __future__ import annotations

import re
from typing import ClassVar

from .atom import Atom, AtomEntry

_DOCS_ID_RE = re.compile(rb"<id>https?://docs\.google\.com/.*</id>")


class GoogleDocsAtomEntry(AtomEntry):
    pass


GoogleDocsAtomEntry.element("docs:md5Checksum", as_="checksum")
GoogleDocsAtomEntry.element("docs:filename", as_="original_filename")
GoogleDocsAtomEntry.element("docs:suggestedFilename", as_="suggested_filename")


class GoogleDocsAtom(Atom):
    format_name: ClassVar[str] = "google_docs_atom"

    @classmethod
    def able_to_parse(cls, prefix: bytes) -> bool:
        return _DOCS_ID_RE.search(prefix) is not None


GoogleDocsAtom.element("openSearch:totalResults", as_="total_results", coerce=int)
GoogleDocsAtom.elements("entry", as_="entries", class_=GoogleDocsAtomEntry)
