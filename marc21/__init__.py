"""
marc21: a reader for MARC 21 bibliographic records in ISO 2709 form.

Records are framed off a byte stream, their leader is checked against the
MARC 21 value table, and the directory is decoded into a tag index. Field
and subfield values are extracted lazily, with text produced by the
transcoder the leader's encoding byte selects (MARC-8 through pymarc, or
UTF-8).

The reading API follows pymarc where the two overlap.

Example:
    >>> import marc21
    >>> for record in marc21.read("records.mrc"):
    ...     print(record.raw_field("245").nth_subfield("a"))
"""

import os
from typing import Any, Optional, Union

from .directory import Location, decode_directory
from .errors import (
    CorruptDirectory,
    DuplicateControlField,
    InvalidLeader,
    InvalidLength,
    MarcError,
    MissingTerminator,
    NotAControlField,
    NotADataField,
    TruncatedStream,
    UnknownCharacterEncoding,
)
from .iso2709 import (
    DELIMITER,
    FIELD_TERMINATOR,
    RECORD_TERMINATOR,
    RecordBoundaryScanner,
    decode_decimal,
    read_record,
)
from .leader import LEADER_RULES, Leader, LeaderViolation, check_leader, is_valid_leader
from .parser_pool import parse_batch_parallel, parse_batch_parallel_limited
from .reader import MARCReader
from .record import Indicators, Record, Subfield, VariableField
from .transcoding import (
    CharacterEncoding,
    UnknownEncodingPolicy,
    identity_transcoder,
    marc8_transcoder,
    select_transcoder,
    utf8_transcoder,
)

__version__ = "0.1.0"


def get_leader_valid_values(position: int) -> Optional[dict]:
    """Get valid values for a specific leader position (MARC 21 reference).

    Module-level alias of Leader.get_valid_values(position).

    Returns:
        A dictionary mapping values to descriptions, or None for positions
        with no coded values.
    """
    return Leader.get_valid_values(position)


def get_leader_value_description(position: int, value: str) -> Optional[str]:
    """Get the description of a value at a leader position, or None."""
    return Leader.describe_value(position, value)


def get_leader_is_valid_value(position: int, value: str) -> bool:
    """Check if a value is valid for a specific leader position.

    Positions without defined valid values accept any value.
    """
    return Leader.is_valid_value(position, value)


def read(path: Union[str, Any], format: Optional[str] = None, **options: Any) -> MARCReader:
    """Read MARC records from a file, detecting the format from the extension.

    Args:
        path: File path (str or pathlib.Path) to read from.
        format: Optional format override. Supported values:
            - "marc" or "mrc": ISO 2709 binary MARC
        **options: Passed to MARCReader (``permissive``, ``validate_leader``, ...).

    Returns:
        A MARCReader over the records in the file.

    Raises:
        ValueError: If format cannot be determined or is unsupported.
        FileNotFoundError: If the file does not exist.

    Example:
        >>> for record in marc21.read("data.mrc"):
        ...     print(record.title())
    """
    from .formats import marc

    path = os.fspath(path)

    if format is None:
        _, ext = os.path.splitext(path)
        ext = ext.lower().lstrip('.')

        extension_map = {
            'mrc': 'marc',
            'marc': 'marc',
        }

        format = extension_map.get(ext)
        if format is None:
            raise ValueError(
                f"Cannot determine format from extension '.{ext}'. "
                f"Supported extensions: {', '.join(sorted(extension_map.keys()))}. "
                f"Use format= parameter to specify explicitly."
            )

    format = format.lower()
    format_aliases = {
        'mrc': 'marc',
    }
    format = format_aliases.get(format, format)

    if format == 'marc':
        return marc.read(path, **options)
    raise ValueError(
        f"Unsupported format '{format}'. Supported formats: marc"
    )


__all__ = [
    # Core classes
    "Leader",
    "Indicators",
    "Subfield",
    "VariableField",
    "Record",
    "MARCReader",
    "RecordBoundaryScanner",
    "Location",
    "LeaderViolation",
    "CharacterEncoding",
    "UnknownEncodingPolicy",
    # Errors
    "MarcError",
    "InvalidLength",
    "MissingTerminator",
    "TruncatedStream",
    "InvalidLeader",
    "UnknownCharacterEncoding",
    "NotAControlField",
    "NotADataField",
    "DuplicateControlField",
    "CorruptDirectory",
    # Constants
    "DELIMITER",
    "FIELD_TERMINATOR",
    "RECORD_TERMINATOR",
    "LEADER_RULES",
    # Functions
    "decode_decimal",
    "read_record",
    "check_leader",
    "is_valid_leader",
    "decode_directory",
    "select_transcoder",
    "utf8_transcoder",
    "marc8_transcoder",
    "identity_transcoder",
    "parse_batch_parallel",
    "parse_batch_parallel_limited",
    "get_leader_valid_values",
    "get_leader_value_description",
    "get_leader_is_valid_value",
    # Format-agnostic helpers
    "read",
]
