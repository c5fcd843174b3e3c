"""Transport layer for feedfetch - moves bytes, classifies nothing."""

# Re-export these for import convenience
from .base import Transport, TransportRequest, TransportResponse
from .decode import decode_content
from .headers import etag_from_header, last_modified_from_header
from .http_async import AsyncTransport
from .http_sync import SyncTransport


def open_transport(sync: bool = False) -> Transport:
    """Factory function to create the transport for a batch."""
    if sync:
        return SyncTransport()
    return AsyncTransport()
