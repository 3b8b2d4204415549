"""
Selection of the bytes -> text function for a record.

Leader byte 8 declares how field data is encoded: a blank means MARC-8,
``'a'`` means UTF-8. MARC-8 conversion is delegated to pymarc; any
callable taking bytes and returning str can be plugged in instead.
"""

import enum
import functools
import logging
from typing import Callable, Optional

from pymarc import marc8_to_unicode

from .errors import UnknownCharacterEncoding

logger = logging.getLogger(__name__)

Transcoder = Callable[[bytes], str]


class CharacterEncoding(enum.Enum):
    """Encodings a record can declare in leader byte 8."""

    MARC8 = " "
    UTF8 = "a"
    UNKNOWN = None

    @classmethod
    def from_leader_byte(cls, value: str) -> "CharacterEncoding":
        if value == cls.MARC8.value:
            return cls.MARC8
        if value == cls.UTF8.value:
            return cls.UTF8
        return cls.UNKNOWN


class UnknownEncodingPolicy(enum.Enum):
    """What to do with a record whose encoding byte is unrecognized."""

    REJECT = "reject"
    FALLBACK_UTF8 = "utf8"


def utf8_transcoder(data: bytes, errors: str = "strict") -> str:
    """Interpret ``data`` directly as UTF-8."""
    return bytes(data).decode("utf-8", errors)


def marc8_transcoder(data: bytes) -> str:
    """Convert MARC-8 bytes to Unicode using pymarc's character tables."""
    return marc8_to_unicode(bytes(data), hide_utf8_warnings=True)


def identity_transcoder(data: bytes) -> str:
    """Map every byte to the code point of the same value."""
    return bytes(data).decode("latin-1")


def select_transcoder(
    value: str,
    *,
    unknown_encoding: UnknownEncodingPolicy = UnknownEncodingPolicy.REJECT,
    legacy_transcoder: Optional[Transcoder] = None,
    utf8_handling: str = "strict",
) -> Transcoder:
    """Pick the transcoder for a leader encoding byte.

    Args:
        value: Leader byte 8 as a one-character string.
        unknown_encoding: Policy for values other than ' ' and 'a'.
        legacy_transcoder: Replacement for the MARC-8 transcoder.
        utf8_handling: Codec error handler used for UTF-8 text.

    Returns:
        A function from raw field bytes to text.

    Raises:
        UnknownCharacterEncoding: If ``value`` is unrecognized and the policy
            is REJECT.
    """
    utf8 = functools.partial(utf8_transcoder, errors=utf8_handling)
    encoding = CharacterEncoding.from_leader_byte(value)

    if encoding is CharacterEncoding.MARC8:
        return legacy_transcoder or marc8_transcoder
    if encoding is CharacterEncoding.UTF8:
        return utf8

    if UnknownEncodingPolicy(unknown_encoding) is UnknownEncodingPolicy.FALLBACK_UTF8:
        logger.warning("Unknown character encoding %r, falling back to UTF-8", value)
        return utf8
    raise UnknownCharacterEncoding(value)
