from __future__ import annotations
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Any, Dict, Iterable

from dateutil import parser as dateutil_parser


def http_date(value: datetime | str) -> str:
    """Render a timestamp as an RFC 7231 HTTP date (strings pass through)."""
    if isinstance(value, str):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def parse_http_date(value: str | None) -> datetime | None:
    """Parse an HTTP date header value; None on anything unparsable."""
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError, IndexError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_datetime(value: str | None) -> datetime | None:
    """Lenient date parsing for feed fields (RFC 822, ISO 8601 and friends)."""
    if not value:
        return None
    parsed = parse_http_date(value)
    if parsed is not None:
        return parsed
    try:
        parsed = dateutil_parser.parse(value)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def entry_asdict(entry) -> Dict[str, Any]:
    return {k: _jsonable(v) for k, v in entry.fields().items() if v not in (None, [])}


def feed_asdict(feed, *, fields: Iterable[str] | None = None) -> Dict[str, Any]:
    """Return a JSON-serialisable dict of a feed (skip None) optionally filtered."""
    payload = {k: _jsonable(v) for k, v in feed.fields().items() if v not in (None, [])}
    payload["entries"] = [entry_asdict(e) for e in feed.entries]
    payload["format"] = feed.format_name
    payload["source_url"] = feed.source_url
    payload["etag"] = feed.etag
    payload["last_modified"] = _jsonable(feed.last_modified)
    payload = {k: v for k, v in payload.items() if v is not None}
    if fields:
        wanted = set(fields)
        payload = {k: v for k, v in payload.items() if k in wanted}
    payload["success"] = True
    return payload
