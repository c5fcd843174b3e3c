from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping

USER_AGENT = "feedfetch/0.1 (+https://github.com/feedfetch/feedfetch)"


class FeedFetchError(RuntimeError):
    """Base class for every error raised while fetching or parsing feeds."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class NoParserAvailable(FeedFetchError):
    """Raised when no registered parser accepts a document."""

    def __init__(self, url: str | None = None):
        if url:
            message = f"Can't determine a parser for {url}"
        else:
            message = "No valid parser for XML."
        super().__init__(message, url)


class HttpError(FeedFetchError):
    """Raised when a request completes with a non-2xx status."""

    def __init__(self, url: str, status: int):
        super().__init__(f"HTTP request failed for {url}: {status}", url)
        self.status = status


class FetchTimeoutError(FeedFetchError, TimeoutError):
    """Raised when the transport gives up waiting on a request."""

    def __init__(self, url: str):
        super().__init__(f"Got a time out for {url}", url)


class ParseError(FeedFetchError):
    """Raised when a document cannot be read as XML at all."""
    pass


@dataclass(slots=True)
class FetchOptions:
    user_agent: str = USER_AGENT
    if_modified_since: datetime | str | None = None
    if_none_match: str | None = None
    compress: bool = False
    language: str | None = None
    # --- forwarded to the transport untouched ---
    timeout: float | None = None
    max_redirects: int | None = None
    follow_redirects: bool = True
    cookies: Dict[str, str] | None = None
    auth: tuple[str, str] | None = None
    extra_headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "FetchOptions":
        """Build options from a plain dict, ignoring unknown keys."""
        if not values:
            return cls()
        known = {k: v for k, v in values.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    def headers(self) -> Dict[str, str]:
        """Render the outbound request headers."""
        from .util import http_date

        hdrs = dict(self.extra_headers)
        hdrs["User-Agent"] = self.user_agent or USER_AGENT
        if self.if_modified_since is not None:
            hdrs["If-Modified-Since"] = http_date(self.if_modified_since)
        if self.if_none_match is not None:
            hdrs["If-None-Match"] = self.if_none_match
        if self.compress:
            hdrs["Accept-Encoding"] = "gzip, deflate"
        if self.language:
            hdrs["Accept-Language"] = self.language
        return hdrs
