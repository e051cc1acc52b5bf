"""
Canonical CBOR encoding of CSPF transport records.

Canonical mode sorts map keys length-first and writes floats at the
smallest width that keeps their value, so equal playlists always encode to
equal bytes. Calendar dates use the RFC 8943 date tags.
"""
from __future__ import annotations

import logging
from datetime import timezone
from io import BytesIO
from typing import Any, Optional, Union

import cbor2

from .config import CodecSettings

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


def encode_record(record: Any, settings: Optional[CodecSettings] = None) -> bytes:
    settings = settings or CodecSettings()
    return cbor2.dumps(
        record,
        canonical=settings.canonical,
        date_as_datetime=settings.date_as_datetime,
        timezone=timezone.utc if settings.assume_utc else None,
    )


def decode_record(data: BytesLike) -> Any:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"CSPF payload must be bytes-like, not {type(data).__name__}")
    decoder = cbor2.CBORDecoder(BytesIO(data))
    value = decoder.decode()
    # a payload is exactly one data item
    try:
        decoder.decode()
    except cbor2.CBORDecodeEOF:
        return value
    except cbor2.CBORDecodeError:
        pass
    logger.debug("Rejecting CSPF payload with trailing data")
    raise cbor2.CBORDecodeError("unexpected trailing data after CSPF payload")
