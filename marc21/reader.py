"""
Streaming reader yielding one :class:`~marc21.record.Record` per ISO 2709 record.
"""

import io
import logging
from typing import Any, BinaryIO, Optional, Union

from .errors import InvalidLength, MarcError, MissingTerminator, TruncatedStream
from .iso2709 import read_record
from .record import Record

logger = logging.getLogger(__name__)


class MARCReader:
    """Iterate over the records of a binary MARC stream.

    Args:
        file_obj: A binary file-like object, or the raw bytes of a file.
        permissive: Yield None instead of raising for a record that is
            framed correctly but cannot be decoded. The error and the raw
            record are kept in ``current_exception`` and ``current_chunk``.
            Errors that lose the stream position (bad length prefix,
            truncated stream) are raised regardless.
        owns_file: Close ``file_obj`` when the reader is closed.
        **record_options: Passed to :class:`~marc21.record.Record`
            (``validate_leader``, ``unknown_encoding``, ...).

    ``offset`` is the stream position after the last framed record and
    ``record_offset`` is where that record started.

    Example:
        >>> with open('records.mrc', 'rb') as f:
        ...     for record in MARCReader(f):
        ...         print(record.title())
    """

    def __init__(
        self,
        file_obj: Union[BinaryIO, bytes, bytearray],
        *,
        permissive: bool = False,
        owns_file: bool = False,
        **record_options: Any,
    ):
        if isinstance(file_obj, (bytes, bytearray)):
            file_obj = io.BytesIO(file_obj)
        self._file = file_obj
        self._permissive = permissive
        self._record_options = record_options
        self._owns_file = owns_file
        self._eof = False
        self.offset = 0
        self.record_offset = 0
        self.current_exception: Optional[MarcError] = None
        self.current_chunk: Optional[bytes] = None

    def __iter__(self):
        """Iterate over records."""
        return self

    def __next__(self) -> Optional[Record]:
        """Get next record; None for a skipped record in permissive mode."""
        if self._eof:
            raise StopIteration

        self.current_exception = None
        self.current_chunk = None
        self.record_offset = self.offset
        try:
            framed = read_record(self._file)
        except (InvalidLength, TruncatedStream):
            self._eof = True
            raise
        except MissingTerminator as e:
            # The declared length was consumed, so the stream is still
            # positioned where the next record should start.
            start = self.offset
            self.offset += e.length or 0
            self.current_chunk = e.data
            return self._skip(e, start)

        if framed is None:
            self._eof = True
            raise StopIteration

        length, data = framed
        start = self.offset
        self.offset += length
        self.current_chunk = data
        logger.debug("Framed %d-byte record at offset %d", length, start)

        try:
            return Record(data, **self._record_options)
        except MarcError as e:
            return self._skip(e, start)

    def _skip(self, error: MarcError, start: Optional[int]) -> None:
        if not self._permissive:
            raise error
        self.current_exception = error
        logger.warning("Skipping record at offset %s: %s", start, error)
        return None

    def read_record(self) -> Optional[Record]:
        """Read next record (pymarc compatibility); None only at end of stream.

        In permissive mode undecodable records are passed over, each one
        logged as it is skipped.
        """
        for record in self:
            if record is not None:
                return record
        return None

    def close(self) -> None:
        """Close the underlying file if this reader owns it."""
        if self._owns_file:
            self._file.close()
        self._eof = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
