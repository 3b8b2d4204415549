"""
The decoded MARC 21 record and the field views it hands out.

A :class:`Record` is built once from the complete bytes of one record and is
never modified afterwards, so it can be shared between threads freely.
Field lookups are offset computations against the directory built at
construction time; a :class:`VariableField` is a view holding a reference to
the record's bytes plus the locations of the requested occurrences.
Nothing is copied until a value is asked for.
"""

import logging
from types import MappingProxyType
from typing import Any, Iterator, List, Mapping, NamedTuple, Optional, Tuple, Union

from .directory import Location, check_locations, decode_directory
from .errors import (
    CorruptDirectory,
    DuplicateControlField,
    InvalidLeader,
    InvalidLength,
    MissingTerminator,
    NotAControlField,
    NotADataField,
)
from .iso2709 import (
    DELIMITER,
    FIELD_TERMINATOR,
    LEADER_SIZE,
    MAX_RECORD_SIZE,
    MIN_RECORD_SIZE,
    RECORD_TERMINATOR,
    decode_decimal,
)
from .leader import Leader, check_leader
from .transcoding import Transcoder, UnknownEncodingPolicy, select_transcoder

logger = logging.getLogger(__name__)

BLANK_INDICATOR = "#"


def is_control_tag(tag: str) -> bool:
    """Control field tags start with "00"."""
    return tag[:2] == "00"


class Subfield(NamedTuple):
    """A decoded subfield: one-character code and its text."""

    code: str
    value: str


class Indicators:
    """Tuple-like pair of field indicators (pymarc compatibility)."""

    def __init__(self, ind1: str, ind2: str):
        self.ind1 = ind1
        self.ind2 = ind2

    def __getitem__(self, index: int) -> str:
        """Get indicator by index (0 or 1)."""
        if index == 0:
            return self.ind1
        elif index == 1:
            return self.ind2
        else:
            raise IndexError("Indicator index must be 0 or 1")

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Indicators):
            return self.ind1 == other.ind1 and self.ind2 == other.ind2
        elif isinstance(other, (tuple, list)) and len(other) == 2:
            return self.ind1 == other[0] and self.ind2 == other[1]
        return False

    def __repr__(self) -> str:
        return f"Indicators('{self.ind1}', '{self.ind2}')"

    def __hash__(self) -> int:
        return hash((self.ind1, self.ind2))

    def __iter__(self):
        """Allow unpacking like a tuple."""
        return iter([self.ind1, self.ind2])


def _subfield_code_byte(code: str) -> int:
    if not code:
        raise ValueError("subfield code must not be empty")
    return ord(code[0])


class VariableField:
    """All occurrences of one tag within a record.

    The view keeps a reference to the owning record's bytes rather than
    copying them; it is only meaningful together with that record.

    Occurrences are addressed by ``index`` (0-based, directory order). Every
    accessor raises :class:`~marc21.errors.CorruptDirectory` if the
    directory points an occurrence outside the record. Subfield lookups on
    a missing occurrence give the empty result; :meth:`raw_value` and the
    indicator accessors raise ``IndexError``.
    """

    def __init__(self, tag: str, data: bytes, locations: Tuple[Location, ...], transcoder: Transcoder):
        self._tag = tag
        self._data = data
        self._locations = locations
        self._transcoder = transcoder

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def locations(self) -> Tuple[Location, ...]:
        return self._locations

    def value_count(self) -> int:
        """Number of occurrences of the tag in the record."""
        return len(self._locations)

    def __len__(self) -> int:
        return len(self._locations)

    def __bool__(self) -> bool:
        return bool(self._locations)

    def is_control_field(self) -> bool:
        return is_control_tag(self._tag)

    def _span(self, index: int) -> Tuple[int, int]:
        location = self._locations[index]
        if location.end > len(self._data):
            raise CorruptDirectory(
                f"field {self._tag}[{index}] at {location.offset}+{location.length} "
                f"lies outside the {len(self._data)}-byte record",
                self._tag, index,
            )
        return location.offset, location.end

    def raw_value(self, index: int = 0) -> bytes:
        """The bytes of one occurrence, field terminator included."""
        start, end = self._span(index)
        return self._data[start:end]

    def value(self, index: int = 0) -> str:
        """Text of one occurrence.

        For a control field this is the whole body without its terminator.
        For a data field the subfield values are joined with spaces.
        """
        if self.is_control_field():
            start, end = self._span(index)
            if end > start and self._data[end - 1] in (FIELD_TERMINATOR, RECORD_TERMINATOR):
                end -= 1
            return self._transcoder(self._data[start:end])
        return " ".join(subfield.value for subfield in self.subfields(index))

    def _runs(self, index: int) -> Iterator[Tuple[int, int, int]]:
        """Yield ``(code, start, end)`` for each subfield run of an occurrence.

        The scan begins past the two indicator bytes and stops at the field
        terminator, at any byte that does not open a run, or at a run with no
        terminator inside the occurrence.
        """
        if not 0 <= index < len(self._locations):
            return
        start, end = self._span(index)
        data = self._data
        position = start + 2
        while position + 1 < end and data[position] == DELIMITER:
            code = data[position + 1]
            run_start = position + 2
            stops = [
                found for found in (
                    data.find(DELIMITER, run_start, end),
                    data.find(FIELD_TERMINATOR, run_start, end),
                ) if found >= 0
            ]
            if not stops:
                return
            run_end = min(stops)
            yield code, run_start, run_end
            position = run_end

    def indicators(self, index: int = 0) -> str:
        """The two indicator characters, blanks shown as '#'."""
        start, end = self._span(index)
        raw = self._data[start:min(start + 2, end)].decode("latin-1")
        return raw.replace(" ", BLANK_INDICATOR)

    def indicator_pair(self, index: int = 0) -> Indicators:
        """The indicators as an :class:`Indicators` pair, blanks kept as spaces."""
        start, end = self._span(index)
        raw = self._data[start:min(start + 2, end)].decode("latin-1").ljust(2)
        return Indicators(raw[0], raw[1])

    def subfield_codes(self, index: int = 0) -> List[str]:
        """Sorted codes of every subfield in an occurrence, repeats included."""
        return sorted(chr(code) for code, _, _ in self._runs(index))

    def nth_raw_subfield(self, code: str, index: int = 0, n: int = 0) -> Optional[bytes]:
        """Raw bytes of the ``n``-th subfield ``code`` in occurrence ``index``.

        Args:
            code: Subfield code; only its first character is used.
            index: Occurrence of the tag.
            n: Which match to return, counting from 0 left to right.

        Returns:
            The subfield data without delimiter or code, or None if there are
            fewer than ``n + 1`` matches.
        """
        wanted = _subfield_code_byte(code)
        seen = 0
        for found, start, end in self._runs(index):
            if found != wanted:
                continue
            if seen == n:
                return self._data[start:end]
            seen += 1
        return None

    def nth_subfield(self, code: str, index: int = 0, n: int = 0) -> str:
        """Transcoded text of :meth:`nth_raw_subfield`; empty when absent."""
        raw = self.nth_raw_subfield(code, index, n)
        if raw is None:
            return ""
        return self._transcoder(raw)

    def subfields(self, index: int = 0) -> List[Subfield]:
        """Every subfield of an occurrence, in field order."""
        return [
            Subfield(chr(code), self._transcoder(self._data[start:end]))
            for code, start, end in self._runs(index)
        ]

    def get(self, code: str, default: Optional[str] = None, index: int = 0) -> Optional[str]:
        """First subfield ``code`` of an occurrence, or ``default``."""
        raw = self.nth_raw_subfield(code, index)
        if raw is None:
            return default
        return self._transcoder(raw)

    def get_subfields(self, *codes: str, index: int = 0) -> List[str]:
        """Values of all subfields with any of ``codes``, in field order.

        Example:
            field.get_subfields('a', 'b')
        """
        wanted = {_subfield_code_byte(code) for code in codes}
        return [
            self._transcoder(self._data[start:end])
            for code, start, end in self._runs(index)
            if code in wanted
        ]

    def __contains__(self, code: str) -> bool:
        """True if the first occurrence has a subfield ``code``."""
        return self.nth_raw_subfield(code) is not None

    def __repr__(self) -> str:
        return f"VariableField(tag='{self._tag}', occurrences={len(self._locations)})"


class Record:
    """One decoded MARC 21 record.

    Args:
        data: The complete record bytes, leader to record terminator.
        validate_leader: Check the leader against the MARC 21 value table.
            Real-world records often break the rules, so this can be turned
            off at the cost of trusting whatever the leader holds.
        verbose: Log every leader violation before raising.
        unknown_encoding: Policy for an unrecognized leader byte 8.
        strict_directory: Check every directory location at construction
            instead of when the field is queried.
        legacy_transcoder: Replacement MARC-8 -> Unicode function.
        utf8_handling: Codec error handler for UTF-8 records.

    Raises:
        InvalidLength: The declared length is out of range or disagrees
            with ``len(data)``.
        MissingTerminator: ``data`` does not end in 0x1D.
        InvalidLeader: Leader validation failed.
        UnknownCharacterEncoding: See ``unknown_encoding``.
        CorruptDirectory: The directory cannot be decoded (or, with
            ``strict_directory``, points outside the record).

    Example:
        >>> record = Record(data)
        >>> record.raw_field('245').nth_subfield('a')
        'Garden exhibition /'
    """

    def __init__(
        self,
        data: Union[bytes, bytearray, memoryview],
        *,
        validate_leader: bool = True,
        verbose: bool = False,
        unknown_encoding: UnknownEncodingPolicy = UnknownEncodingPolicy.REJECT,
        strict_directory: bool = False,
        legacy_transcoder: Optional[Transcoder] = None,
        utf8_handling: str = "strict",
    ):
        data = bytes(data)
        declared = self._check_framing(data)

        if validate_leader:
            violations = check_leader(data, verbose=verbose)
            if violations:
                first = violations[0]
                raise InvalidLeader(first.position, first.expected, first.found)

        self._data = data
        self._leader = Leader(data)
        self._transcoder = select_transcoder(
            self._leader.character_encoding,
            unknown_encoding=unknown_encoding,
            legacy_transcoder=legacy_transcoder,
            utf8_handling=utf8_handling,
        )

        directory = decode_directory(data)
        if strict_directory:
            check_locations(data, directory)
        self._directory = MappingProxyType(
            {tag: tuple(locations) for tag, locations in directory.items()}
        )
        logger.debug("Decoded %d-byte record with %d tags", declared, len(self._directory))

    @staticmethod
    def _check_framing(data: bytes) -> int:
        try:
            declared = decode_decimal(data[:5])
        except ValueError:
            raise InvalidLength(f"record length {data[:5]!r} is not a decimal number")
        if declared < MIN_RECORD_SIZE or declared > MAX_RECORD_SIZE:
            raise InvalidLength(
                f"record length {declared} outside [{MIN_RECORD_SIZE}, {MAX_RECORD_SIZE}]", declared
            )
        if data[-1] != RECORD_TERMINATOR:
            raise MissingTerminator("record does not end in 0x1D", declared, data)
        if declared != len(data):
            raise InvalidLength(f"record declares {declared} bytes but has {len(data)}", declared)
        return declared

    @property
    def raw(self) -> bytes:
        """The exact bytes the record was built from."""
        return self._data

    @property
    def leader(self) -> Leader:
        return self._leader

    @property
    def directory(self) -> Mapping[str, Tuple[Location, ...]]:
        """Read-only map of tag to occurrence locations, in directory order."""
        return self._directory

    @property
    def status(self) -> str:
        return self._leader.record_status

    @property
    def record_type(self) -> str:
        return self._leader.record_type

    @property
    def bib_level(self) -> str:
        return self._leader.bibliographic_level

    @property
    def character_encoding(self) -> str:
        return self._leader.character_encoding

    @property
    def encoding_level(self) -> str:
        return self._leader.encoding_level

    @property
    def cataloging_form(self) -> str:
        return self._leader.cataloging_form

    @property
    def multipart_level(self) -> str:
        return self._leader.multipart_level

    def leader_text(self) -> str:
        """The 24 leader bytes as text, untranscoded."""
        return self._data[:LEADER_SIZE].decode("latin-1")

    def field_tags(self) -> List[str]:
        """Distinct tags present in the record, sorted."""
        return sorted(self._directory)

    def raw_field(self, tag: str) -> VariableField:
        """All occurrences of ``tag``; an absent tag gives an empty field."""
        return VariableField(tag, self._data, self._directory.get(tag, ()), self._transcoder)

    def control_field(self, tag: str) -> str:
        """Text of control field ``tag``, or "" when the record lacks it.

        Raises:
            NotAControlField: If ``tag`` does not start with "00".
            DuplicateControlField: If the tag occurs more than once.
        """
        if not is_control_tag(tag):
            raise NotAControlField(tag)
        field = self.raw_field(tag)
        if field.value_count() == 0:
            return ""
        if field.value_count() > 1:
            raise DuplicateControlField(tag, field.value_count())
        return field.value(0)

    def data_field(self, tag: str) -> VariableField:
        """All occurrences of data field ``tag``.

        Raises:
            NotADataField: If ``tag`` starts with "00".
        """
        if is_control_tag(tag):
            raise NotADataField(tag)
        return self.raw_field(tag)

    def fields(self) -> List[VariableField]:
        """One view per distinct tag, in order of first directory appearance."""
        return [self.raw_field(tag) for tag in self._directory]

    def __contains__(self, tag: str) -> bool:
        return tag in self._directory

    def __getitem__(self, tag: str) -> VariableField:
        return self.raw_field(tag)

    def _first_subfield(self, tags, code: str) -> Optional[str]:
        for tag in tags:
            field = self.raw_field(tag)
            if field:
                return field.get(code)
        return None

    def title(self) -> Optional[str]:
        """Get title from 245 $a."""
        return self._first_subfield(("245",), "a")

    def author(self) -> Optional[str]:
        """Get author from 100/110/111 $a."""
        return self._first_subfield(("100", "110", "111"), "a")

    def isbn(self) -> Optional[str]:
        """Get ISBN from 020 $a."""
        return self._first_subfield(("020",), "a")

    def subjects(self) -> List[str]:
        """Get $a of every 6XX occurrence."""
        result = []
        for tag in self.field_tags():
            if not tag.startswith("6"):
                continue
            field = self.raw_field(tag)
            for index in range(field.value_count()):
                value = field.get("a", index=index)
                if value:
                    result.append(value)
        return result

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Record):
            return False
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def __repr__(self) -> str:
        return f"Record(leader='{self.leader_text()}', tags={len(self._directory)})"
