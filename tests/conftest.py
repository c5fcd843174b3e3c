from pathlib import Path

import httpx
import pytest

from feedfetch import FeedFetcher, ParserRegistry
from feedfetch.io.http_async import AsyncTransport

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample():
    """Return a loader for the sample feeds in tests/fixtures."""
    def load(name: str) -> bytes:
        return (FIXTURES / name).read_bytes()
    return load


@pytest.fixture
def mock_fetcher():
    """Build a FeedFetcher whose network is an httpx.MockTransport handler."""
    def build(handler, **kwargs):
        transport = AsyncTransport(httpx.MockTransport(handler))
        return FeedFetcher(registry=ParserRegistry.with_builtins(), transport=transport, **kwargs)
    return build
