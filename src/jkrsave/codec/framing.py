"""Framing — raw-deflate compression of the save text.

Save files are the UTF-8 Lua literal deflated without any zlib or gzip
header or checksum.
"""

from __future__ import annotations

import logging
import zlib

from jkrsave.util.constants import DEFAULT_COMPRESSION_LEVEL, RAW_DEFLATE_WBITS
from jkrsave.util.errors import FramingError

log = logging.getLogger(__name__)


def decompress(data: bytes) -> str:
    """Inflate raw-deflate bytes into text.

    Raises:
        FramingError: if the data is not a complete raw-deflate stream or
            does not decode as UTF-8.
    """
    inflater = zlib.decompressobj(wbits=RAW_DEFLATE_WBITS)
    try:
        raw = inflater.decompress(bytes(data)) + inflater.flush()
    except zlib.error as exc:
        raise FramingError(f"Not valid raw-deflate data: {exc}") from exc
    if not inflater.eof:
        raise FramingError("Raw-deflate stream is truncated")
    if inflater.unused_data:
        log.warning("Ignoring %d bytes after the end of the deflate stream",
                    len(inflater.unused_data))
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FramingError(f"Decompressed data is not valid UTF-8: {exc}") from exc
    log.debug("Inflated %d bytes into %d characters", len(data), len(text))
    return text


def compress(text: str, level: int = DEFAULT_COMPRESSION_LEVEL) -> bytes:
    """Deflate text into a raw-deflate buffer with no framing bytes."""
    try:
        deflater = zlib.compressobj(level, zlib.DEFLATED, RAW_DEFLATE_WBITS)
    except (TypeError, ValueError, zlib.error) as exc:
        raise FramingError(f"Invalid compression level {level!r}: {exc}") from exc
    payload = deflater.compress(text.encode("utf-8")) + deflater.flush()
    log.debug("Deflated %d characters into %d bytes", len(text), len(payload))
    return payload
