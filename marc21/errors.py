"""
Exceptions raised while framing, validating and querying MARC 21 records.

Every error derives from :class:`MarcError`, itself a ``ValueError``, so
callers that only care about "bad data" can catch a single class.
"""

from typing import Optional


class MarcError(ValueError):
    """Base class for all MARC 21 decoding errors."""


class InvalidLength(MarcError):
    """Declared record length is not a 5-digit decimal in [26, 99999]."""

    def __init__(self, message: str, length: Optional[int] = None):
        super().__init__(message)
        self.length = length


class MissingTerminator(MarcError):
    """The final byte of a record is not the record terminator (0x1D)."""

    def __init__(self, message: str, length: Optional[int] = None, data: Optional[bytes] = None):
        super().__init__(message)
        self.length = length
        self.data = data


class TruncatedStream(MarcError):
    """The stream ended after a record length was read but before the record did."""

    def __init__(self, expected: int, received: int):
        super().__init__(
            f"stream ended mid-record: expected {expected} bytes, got {received}"
        )
        self.expected = expected
        self.received = received


class InvalidLeader(MarcError):
    """A leader position holds a character outside its permitted set."""

    def __init__(self, position: int, expected: str, found: str):
        super().__init__(
            f"leader position {position}: expected one of {expected!r}, found {found!r}"
        )
        self.position = position
        self.expected = expected
        self.found = found


class UnknownCharacterEncoding(MarcError):
    """Leader byte 8 names neither MARC-8 (' ') nor UTF-8 ('a')."""

    def __init__(self, value: str):
        super().__init__(f"unknown character encoding {value!r}")
        self.value = value


class NotAControlField(MarcError):
    """A control-field query was made with a data-field tag."""

    def __init__(self, tag: str):
        super().__init__(f"{tag!r} is not a control field tag")
        self.tag = tag


class NotADataField(MarcError):
    """A data-field query was made with a control-field tag."""

    def __init__(self, tag: str):
        super().__init__(f"{tag!r} is not a data field tag")
        self.tag = tag


class DuplicateControlField(MarcError):
    """A control field occurs more than once in a record."""

    def __init__(self, tag: str, count: int):
        super().__init__(f"control field {tag!r} occurs {count} times")
        self.tag = tag
        self.count = count


class CorruptDirectory(MarcError):
    """A directory entry is unreadable or points outside the record."""

    def __init__(self, message: str, tag: Optional[str] = None, index: Optional[int] = None):
        super().__init__(message)
        self.tag = tag
        self.index = index
