"""Sequential HTTP transport using requests."""

from typing import List, Optional, Tuple

import requests
import structlog

from .base import CompletionHandler, TransportRequest, TransportResponse
from .headers import header_blob

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


def _to_response(url: str, response: requests.Response) -> TransportResponse:
    items = list(response.headers.items())
    status_line = f"HTTP/1.1 {response.status_code} {response.reason or ''}".rstrip()
    return TransportResponse(
        url=url,
        status=response.status_code,
        body=response.content,
        headers=dict(items),
        header_blob=header_blob(status_line, items),
    )


class SyncTransport:
    """Perform queued requests one at a time on the calling thread."""

    def __init__(self, session: Optional[requests.Session] = None):
        self._session = session
        self._queue: List[Tuple[TransportRequest, CompletionHandler]] = []

    def queue(self, request: TransportRequest, on_complete: CompletionHandler) -> None:
        self._queue.append((request, on_complete))

    def run(self) -> None:
        batch, self._queue = self._queue, []
        session = self._session or requests.Session()
        try:
            for request, on_complete in batch:
                on_complete(self._perform(session, request))
        finally:
            if self._session is None:
                session.close()

    def _perform(self, session: requests.Session, request: TransportRequest) -> TransportResponse:
        opts = request.options
        if opts.max_redirects is not None:
            session.max_redirects = opts.max_redirects
        logger.debug("fetch.queued", url=request.url)
        try:
            response = session.get(
                request.url,
                headers=request.headers,
                timeout=opts.timeout if opts.timeout is not None else DEFAULT_TIMEOUT,
                allow_redirects=opts.follow_redirects,
                cookies=opts.cookies,
                auth=opts.auth,
            )
        except requests.Timeout as e:
            return TransportResponse(url=request.url, status=0, timed_out=True, error=str(e))
        except requests.RequestException as e:
            return TransportResponse(url=request.url, status=0, error=str(e))
        return _to_response(request.url, response)
