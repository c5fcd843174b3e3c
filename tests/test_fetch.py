import gzip
from datetime import datetime, timezone

import httpx
import pytest

from feedfetch import USER_AGENT, FetchOptions
from feedfetch.core.model import FetchTimeoutError, HttpError, NoParserAvailable, ParseError
from feedfetch.parsers import Atom, RSS

PAUL = "http://feeds.feedburner.com/PaulDixExplainsNothing"
TROTTER = "http://feeds2.feedburner.com/trottercashion"


def reply(status, content=b"", headers=None):
    """Route that builds a fresh response for every request."""
    return lambda request: httpx.Response(status, content=content, headers=headers)


class Recorder:
    """httpx.MockTransport handler dispatching on the request URL."""

    def __init__(self, routes):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.routes[str(request.url)](request)


class TestFetchRaw:
    def test_default_user_agent(self, mock_fetcher, sample):
        handler = Recorder({PAUL: reply(200, sample("atom.xml"))})
        body = mock_fetcher(handler).fetch_raw(PAUL)
        assert body.startswith(b'<?xml version="1.0" encoding="utf-8"?>')
        assert handler.requests[0].headers["User-Agent"] == USER_AGENT

    def test_request_headers_from_options(self, mock_fetcher, sample):
        handler = Recorder({PAUL: reply(200, sample("atom.xml"))})
        options = FetchOptions(
            user_agent="Custom Useragent",
            if_modified_since=datetime(2009, 1, 28, 4, 10, 32, tzinfo=timezone.utc),
            if_none_match="ziEyTl4q9GH04BR4jgkImd0GvSE",
            compress=True,
            language="en",
        )
        mock_fetcher(handler).fetch_raw(PAUL, options)
        headers = handler.requests[0].headers
        assert headers["User-Agent"] == "Custom Useragent"
        assert headers["If-Modified-Since"] == "Wed, 28 Jan 2009 04:10:32 GMT"
        assert headers["If-None-Match"] == "ziEyTl4q9GH04BR4jgkImd0GvSE"
        assert headers["Accept-Encoding"] == "gzip, deflate"
        assert headers["Accept-Language"] == "en"

    def test_many_returns_map(self, mock_fetcher, sample):
        handler = Recorder({
            PAUL: reply(200, sample("atom_feedburner.xml")),
            TROTTER: reply(200, sample("rss.xml")),
        })
        results = mock_fetcher(handler).fetch_raw_many([PAUL, TROTTER])
        assert set(results) == {PAUL, TROTTER}
        assert b"Paul Dix" in results[PAUL]
        assert b"Trotter Cashion" in results[TROTTER]

    def test_many_with_one_url_is_still_a_map(self, mock_fetcher, sample):
        handler = Recorder({PAUL: reply(200, sample("atom.xml"))})
        results = mock_fetcher(handler).fetch_raw_many([PAUL])
        assert isinstance(results, dict)
        assert list(results) == [PAUL]

    def test_gzip_content_type_is_decoded(self, mock_fetcher, sample):
        xml = sample("rss.xml")
        handler = Recorder({PAUL: reply(200, gzip.compress(xml), {"Content-Type": "application/x-gzip"})})
        assert mock_fetcher(handler).fetch_raw(PAUL) == xml

    def test_http_error(self, mock_fetcher):
        handler = Recorder({PAUL: reply(404, b"Not Found")})
        with pytest.raises(HttpError, match="HTTP request failed for") as exc:
            mock_fetcher(handler).fetch_raw(PAUL)
        assert exc.value.status == 404
        assert exc.value.url == PAUL

    def test_timeout(self, mock_fetcher):
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(FetchTimeoutError) as exc:
            mock_fetcher(Recorder({PAUL: slow})).fetch_raw(PAUL)
        assert exc.value.url == PAUL
        assert isinstance(exc.value, TimeoutError)

    def test_connection_error_is_status_zero(self, mock_fetcher):
        def refused(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(HttpError) as exc:
            mock_fetcher(Recorder({PAUL: refused})).fetch_raw(PAUL)
        assert exc.value.status == 0


class TestFetchAndParse:
    def test_stamps_provenance(self, mock_fetcher, sample):
        handler = Recorder({PAUL: reply(200, sample("atom.xml"), headers={
            "ETag": "fkkhayM81rgbWEltwTKzn08uElg",
            "Last-Modified": "Thu, 22 Jan 2009 15:50:22 GMT",
        })})
        feed = mock_fetcher(handler).fetch_and_parse(PAUL)
        assert isinstance(feed, Atom)
        assert feed.source_url == PAUL
        assert feed.etag == "fkkhayM81rgbWEltwTKzn08uElg"
        assert feed.last_modified == datetime(2009, 1, 22, 15, 50, 22, tzinfo=timezone.utc)

    def test_missing_revalidation_headers(self, mock_fetcher, sample):
        handler = Recorder({PAUL: reply(200, sample("rss.xml"))})
        feed = mock_fetcher(handler).fetch_and_parse(PAUL)
        assert isinstance(feed, RSS)
        assert feed.etag is None
        assert feed.last_modified is None

    def test_many(self, mock_fetcher, sample):
        handler = Recorder({
            PAUL: reply(200, sample("atom_feedburner.xml")),
            TROTTER: reply(200, sample("rss.xml")),
        })
        feeds = mock_fetcher(handler).fetch_and_parse_many([PAUL, TROTTER])
        assert feeds[PAUL].title == "Paul Dix Explains Nothing"
        assert feeds[TROTTER].title == "Trotter Cashion's Home"
        assert {f.source_url for f in feeds.values()} == {PAUL, TROTTER}

    def test_no_parser_available(self, mock_fetcher):
        handler = Recorder({PAUL: reply(200, b"This feed is invalid")})
        with pytest.raises(NoParserAvailable) as exc:
            mock_fetcher(handler).fetch_and_parse(PAUL)
        assert exc.value.url == PAUL

    def test_http_error(self, mock_fetcher):
        handler = Recorder({PAUL: reply(500, b"Sorry, something broke")})
        with pytest.raises(HttpError):
            mock_fetcher(handler).fetch_and_parse(PAUL)

    def test_not_modified_is_an_error_outside_update(self, mock_fetcher):
        handler = Recorder({PAUL: reply(304)})
        with pytest.raises(HttpError) as exc:
            mock_fetcher(handler).fetch_and_parse(PAUL)
        assert exc.value.status == 304


class TestBatchFailure:
    """A failing request aborts its batch unless errors are collected."""

    def _routes(self, sample):
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        return {PAUL: slow, TROTTER: reply(200, sample("rss.xml"))}

    def test_timeout_aborts_batch(self, mock_fetcher, sample):
        fetcher = mock_fetcher(Recorder(self._routes(sample)))
        with pytest.raises(FetchTimeoutError):
            fetcher.fetch_and_parse_many([PAUL, TROTTER])

    def test_return_exceptions_collects_per_url(self, mock_fetcher, sample):
        fetcher = mock_fetcher(Recorder(self._routes(sample)))
        results = fetcher.fetch_and_parse_many([PAUL, TROTTER], return_exceptions=True)
        assert set(results) == {PAUL, TROTTER}
        assert isinstance(results[PAUL], FetchTimeoutError)
        assert results[TROTTER].title == "Trotter Cashion's Home"

    def test_fetcher_is_reusable_after_failure(self, mock_fetcher, sample):
        fetcher = mock_fetcher(Recorder(self._routes(sample)))
        with pytest.raises(FetchTimeoutError):
            fetcher.fetch_raw_many([PAUL, TROTTER])
        assert b"Trotter" in fetcher.fetch_raw(TROTTER)

    def test_bad_element_value_is_collected_per_url(self, mock_fetcher, sample):
        broken = sample("google_docs.xml").replace(
            b"<openSearch:totalResults>1<", b"<openSearch:totalResults>n/a<"
        )
        handler = Recorder({PAUL: reply(200, broken), TROTTER: reply(200, sample("rss.xml"))})
        results = mock_fetcher(handler).fetch_and_parse_many([PAUL, TROTTER], return_exceptions=True)
        assert isinstance(results[PAUL], ParseError)
        assert results[PAUL].url == PAUL
        assert results[TROTTER].title == "Trotter Cashion's Home"
