"""
ISO 2709 framing for MARC 21 exchange files.

A MARC file is a plain concatenation of records. Each record declares its
own length in its first five bytes and ends with the record terminator, so
records can be pulled off a stream one at a time without any lookahead.

Example:
    >>> import io
    >>> length, data = read_record(io.BytesIO(raw_bytes))
    >>> data[-1] == RECORD_TERMINATOR
    True
"""

import logging
from typing import BinaryIO, List, Optional, Tuple, Union

from .errors import InvalidLength, MarcError, MissingTerminator, TruncatedStream

logger = logging.getLogger(__name__)

DELIMITER = 0x1F
FIELD_TERMINATOR = 0x1E
RECORD_TERMINATOR = 0x1D

LEADER_SIZE = 24
LENGTH_SIZE = 5
# leader + directory terminator + record terminator
MIN_RECORD_SIZE = LEADER_SIZE + 2
MAX_RECORD_SIZE = 99999


def decode_decimal(digits: Union[bytes, bytearray, memoryview, str]) -> int:
    """Decode an unsigned run of ASCII decimal digits.

    Leading zeros are permitted and do not change the value.

    Args:
        digits: The digit characters, as bytes or str.

    Returns:
        The integer value.

    Raises:
        ValueError: If ``digits`` is empty or contains anything but '0'-'9'.

    Example:
        >>> decode_decimal(b"03245")
        3245
        >>> decode_decimal("0")
        0
    """
    if isinstance(digits, str):
        digits = digits.encode("latin-1", errors="replace")
    digits = bytes(digits)
    if not digits.isdigit():
        raise ValueError(f"not a decimal number: {digits!r}")
    return int(digits)


def _read_exactly(stream: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, looping over short reads until EOF."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_record(stream: BinaryIO) -> Optional[Tuple[int, bytes]]:
    """Read the next complete record from a binary stream.

    Args:
        stream: Any object with a ``read(n)`` method returning bytes.

    Returns:
        ``(length, data)`` where ``data`` is the exact record including its
        terminator, or ``None`` when the stream is exhausted before a new
        record starts.

    Raises:
        InvalidLength: If the length prefix is not digits or lies outside
            [26, 99999].
        TruncatedStream: If the stream ends inside the record body.
        MissingTerminator: If the last byte is not 0x1D.
    """
    prefix = _read_exactly(stream, LENGTH_SIZE)
    if not prefix:
        return None
    if len(prefix) < LENGTH_SIZE:
        logger.warning("Discarding %d trailing bytes at end of stream", len(prefix))
        return None

    try:
        length = decode_decimal(prefix)
    except ValueError:
        raise InvalidLength(f"record length {prefix!r} is not a decimal number")
    if length < MIN_RECORD_SIZE or length > MAX_RECORD_SIZE:
        raise InvalidLength(f"record length {length} outside [{MIN_RECORD_SIZE}, {MAX_RECORD_SIZE}]", length)

    body = _read_exactly(stream, length - LENGTH_SIZE)
    if len(body) < length - LENGTH_SIZE:
        raise TruncatedStream(length, LENGTH_SIZE + len(body))

    data = prefix + body
    if data[-1] != RECORD_TERMINATOR:
        raise MissingTerminator(f"record of length {length} does not end in 0x1D", length, data)

    return length, data


class RecordBoundaryScanner:
    """Locate record boundaries in a buffer by their record terminators.

    Unlike :func:`read_record` the scanner does not trust declared lengths,
    which makes it usable for resynchronising after a corrupt record and
    for splitting a buffer into independent units of work.
    """

    def scan(self, buffer: Union[bytes, bytearray]) -> List[Tuple[int, int]]:
        """Return ``(offset, length)`` for every terminated record.

        The length includes the terminator. Bytes after the last terminator
        are not reported.

        Raises:
            MarcError: If the buffer is empty or holds no terminator at all.
        """
        return self._scan(buffer, None)

    def scan_limited(self, buffer: Union[bytes, bytearray], limit: int) -> List[Tuple[int, int]]:
        """Like :meth:`scan` but stop after ``limit`` boundaries."""
        if limit < 0:
            raise ValueError("limit must be non-negative")
        return self._scan(buffer, limit)

    def _scan(self, buffer, limit):
        if not buffer:
            raise MarcError("cannot scan an empty buffer")

        boundaries = []
        start = 0
        while limit is None or len(boundaries) < limit:
            end = buffer.find(RECORD_TERMINATOR, start)
            if end < 0:
                break
            boundaries.append((start, end + 1 - start))
            start = end + 1

        if not boundaries and limit != 0:
            raise MarcError("no record terminator found in buffer")
        return boundaries
