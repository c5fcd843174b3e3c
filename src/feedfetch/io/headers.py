"""Pull revalidation metadata out of a raw response header blob."""

import re
from datetime import datetime
from typing import Optional

from ..core.util import parse_http_date

_ETAG_RE = re.compile(r"^ETag:[ \t]*(.*?)\r?\n", re.MULTILINE)
_LAST_MODIFIED_RE = re.compile(r"^Last-Modified:[ \t]*(.*?)\r?\n", re.MULTILINE)


def etag_from_header(header: Optional[str]) -> Optional[str]:
    """Return the ETag value, or None if the blob has no ETag line."""
    if not header:
        return None
    match = _ETAG_RE.search(header)
    return match.group(1) if match else None


def last_modified_from_header(header: Optional[str]) -> Optional[datetime]:
    """Return Last-Modified as an aware datetime, or None if absent or unparsable."""
    if not header:
        return None
    match = _LAST_MODIFIED_RE.search(header)
    if not match:
        return None
    return parse_http_date(match.group(1))


def header_blob(status_line: str, items) -> str:
    """Render ``(name, value)`` pairs the way they arrived on the wire."""
    lines = [status_line]
    lines.extend(f"{name}: {value}" for name, value in items)
    return "\r\n".join(lines) + "\r\n\r\n"
