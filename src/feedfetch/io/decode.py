"""Reverse transport compression declared in a response's Content-Type."""

import gzip
import zlib
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


def _inflate(body: bytes) -> bytes:
    try:
        return zlib.decompress(body)
    except zlib.error:
        # some servers send raw deflate without the zlib wrapper
        return zlib.decompress(body, -zlib.MAX_WBITS)


def decode_content(body: bytes, content_type: Optional[str]) -> bytes:
    """Return ``body`` decompressed according to ``content_type``.

    A body that fails to decompress is returned unchanged: the declared
    encoding is often wrong, and the raw bytes are the best we have.
    """
    encoding = (content_type or "").lower()
    if "gzip" in encoding:
        try:
            return gzip.decompress(body)
        except (OSError, EOFError, zlib.error) as e:
            logger.warning("decode.fallback", codec="gzip", error=str(e))
            return body
    if "deflate" in encoding:
        try:
            return _inflate(body)
        except zlib.error as e:
            logger.warning("decode.fallback", codec="deflate", error=str(e))
            return body
    return body
