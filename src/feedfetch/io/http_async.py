"""Concurrent HTTP transport: one asyncio loop, one httpx AsyncClient."""

import asyncio
from typing import List, Optional, Tuple

import httpx
import structlog

from .base import CompletionHandler, TransportRequest, TransportResponse
from .headers import header_blob

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


def _client_kwargs(request: TransportRequest) -> dict:
    opts = request.options
    kwargs = {
        "follow_redirects": opts.follow_redirects,
        "timeout": opts.timeout if opts.timeout is not None else DEFAULT_TIMEOUT,
    }
    if opts.max_redirects is not None:
        kwargs["max_redirects"] = opts.max_redirects
    if opts.cookies:
        kwargs["cookies"] = opts.cookies
    if opts.auth:
        kwargs["auth"] = opts.auth
    return kwargs


def _to_response(url: str, response: httpx.Response) -> TransportResponse:
    # keep the server's header casing; the extractors match it exactly
    items = [(k.decode("latin-1"), v.decode("latin-1")) for k, v in response.headers.raw]
    status_line = f"{response.http_version} {response.status_code} {response.reason_phrase}"
    return TransportResponse(
        url=url,
        status=response.status_code,
        body=response.content,
        headers=dict(items),
        header_blob=header_blob(status_line, items),
    )


class AsyncTransport:
    """Run a batch of GETs concurrently and call handlers in completion order."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        # an explicit httpx transport (e.g. httpx.MockTransport) replaces the network
        self._transport = transport
        self._queue: List[Tuple[TransportRequest, CompletionHandler]] = []

    def queue(self, request: TransportRequest, on_complete: CompletionHandler) -> None:
        self._queue.append((request, on_complete))

    def run(self) -> None:
        """Block until every queued request has completed."""
        asyncio.run(self.run_async())

    async def run_async(self) -> None:
        batch, self._queue = self._queue, []
        if not batch:
            return
        # options are shared by the whole batch, so one client serves it
        kwargs = _client_kwargs(batch[0][0])
        if self._transport is not None:
            kwargs["transport"] = self._transport
        async with httpx.AsyncClient(**kwargs) as client:
            tasks = [asyncio.ensure_future(self._perform(client, req, cb)) for req, cb in batch]
            try:
                for next_done in asyncio.as_completed(tasks):
                    response, on_complete = await next_done
                    on_complete(response)
            finally:
                for task in tasks:
                    if not task.done():
                        task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)

    async def _perform(self, client: httpx.AsyncClient, request: TransportRequest,
                       on_complete: CompletionHandler) -> Tuple[TransportResponse, CompletionHandler]:
        logger.debug("fetch.queued", url=request.url)
        try:
            response = await client.get(request.url, headers=request.headers)
        except httpx.TimeoutException as e:
            return TransportResponse(url=request.url, status=0, timed_out=True, error=str(e)), on_complete
        except httpx.HTTPError as e:
            return TransportResponse(url=request.url, status=0, error=str(e)), on_complete
        return _to_response(request.url, response), on_complete
