"""
Decoding of the record directory.

The directory starts right after the leader and is a run of 12-byte
entries (3-byte tag, 4-digit field length, 5-digit start offset relative
to the base address), closed by a field terminator.
"""

from typing import Dict, List, NamedTuple, Union

from .errors import CorruptDirectory
from .iso2709 import FIELD_TERMINATOR, LEADER_SIZE, RECORD_TERMINATOR, decode_decimal

ENTRY_SIZE = 12


class Location(NamedTuple):
    """Absolute byte range ``[offset, offset + length)`` of one field occurrence."""

    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


def decode_base_address(data: Union[bytes, bytearray]) -> int:
    """Decode the 5-digit base address at leader offset 12."""
    try:
        return decode_decimal(data[12:17])
    except ValueError:
        raise CorruptDirectory(f"base address {bytes(data[12:17])!r} is not a decimal number")


def decode_directory(data: Union[bytes, bytearray]) -> Dict[str, List[Location]]:
    """Build the tag -> occurrences index of a record.

    Occurrences of a tag keep the order the directory lists them in. The
    locations are not checked against the record size here; see
    :func:`check_locations`.

    Raises:
        CorruptDirectory: If the base address or an entry is not numeric, or
            the directory runs off the end of the record.
    """
    base_address = decode_base_address(data)
    directory: Dict[str, List[Location]] = {}

    position = LEADER_SIZE
    while True:
        if position >= len(data):
            raise CorruptDirectory("directory is not terminated")
        if data[position] == FIELD_TERMINATOR:
            break
        entry = bytes(data[position:position + ENTRY_SIZE])
        if len(entry) < ENTRY_SIZE:
            raise CorruptDirectory(f"short directory entry at byte {position}")

        tag = entry[0:3].decode("latin-1")
        try:
            length = decode_decimal(entry[3:7])
            start = decode_decimal(entry[7:12])
        except ValueError:
            raise CorruptDirectory(f"malformed directory entry {entry!r} at byte {position}", tag)

        directory.setdefault(tag, []).append(Location(base_address + start, length))
        position += ENTRY_SIZE

    return directory


def check_location(data: Union[bytes, bytearray], tag: str, index: int, location: Location) -> None:
    """Raise CorruptDirectory unless ``location`` is a terminated range inside ``data``."""
    if location.length < 1 or location.end > len(data):
        raise CorruptDirectory(
            f"field {tag}[{index}] at {location.offset}+{location.length} "
            f"lies outside the {len(data)}-byte record",
            tag, index,
        )
    if data[location.end - 1] not in (FIELD_TERMINATOR, RECORD_TERMINATOR):
        raise CorruptDirectory(f"field {tag}[{index}] is not terminated", tag, index)


def check_locations(data: Union[bytes, bytearray], directory: Dict[str, List[Location]]) -> None:
    """Validate every location of ``directory`` eagerly."""
    for tag, locations in directory.items():
        for index, location in enumerate(locations):
            check_location(data, tag, index, location)
