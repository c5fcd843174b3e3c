"""Base protocols and shared types for the transport layer."""

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional, Protocol, runtime_checkable

from ..core.model import FetchOptions


@dataclass(slots=True)
class TransportRequest:
    url: str
    headers: Dict[str, str]
    options: FetchOptions = field(default_factory=FetchOptions)


@dataclass(slots=True)
class TransportResponse:
    """What a completion handler sees once a request is done."""

    url: str
    status: int                   # 0 when no HTTP response was received
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)
    header_blob: str = ""
    timed_out: bool = False
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> Optional[str]:
        for name, value in self.headers.items():
            if name.lower() == "content-type":
                return value
        return None


CompletionHandler = Callable[[TransportResponse], None]


@runtime_checkable
class Transport(Protocol):
    """Protocol for batch transports.

    ``queue`` registers a request with its completion handler; ``run`` blocks
    until every queued request has completed. An exception raised by a
    handler stops the batch and propagates out of ``run``.
    """

    def queue(self, request: TransportRequest, on_complete: CompletionHandler) -> None:
        ...

    def run(self) -> None:
        ...
