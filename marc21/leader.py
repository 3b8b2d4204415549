"""
MARC 21 leader: validation rules and a read-only view of the 24 leader bytes.
"""

import logging
from typing import List, NamedTuple, Optional, Union

from .iso2709 import LEADER_SIZE, decode_decimal

logger = logging.getLogger(__name__)


class LeaderRule(NamedTuple):
    position: int
    allowed: str


# Positions 0-4 (record length) and 12-16 (base address) are numeric and
# checked by the framer and directory decoder instead.
LEADER_RULES = (
    LeaderRule(5, "acdnp"),
    LeaderRule(6, "acdefgijkmoprt"),
    LeaderRule(7, "abcdims"),
    LeaderRule(8, " a"),
    LeaderRule(9, " a"),
    LeaderRule(10, "2"),
    LeaderRule(11, "2"),
    LeaderRule(17, " 1234578uz"),
    LeaderRule(18, " aciu"),
    LeaderRule(19, " abc"),
    LeaderRule(20, "4"),
    LeaderRule(21, "5"),
    LeaderRule(22, "0"),
    LeaderRule(23, "0"),
)


class LeaderViolation(NamedTuple):
    """One failed leader rule."""

    position: int
    expected: str
    found: str


def check_leader(data: Union[bytes, bytearray], verbose: bool = False) -> List[LeaderViolation]:
    """Check the leader of ``data`` against :data:`LEADER_RULES`.

    Args:
        data: The full record, or at least its first 24 bytes.
        verbose: Log every violation at DEBUG level.

    Returns:
        The violations in position order; empty when the leader is valid.
    """
    violations = []
    for rule in LEADER_RULES:
        found = chr(data[rule.position]) if rule.position < len(data) else ""
        if not found or found not in rule.allowed:
            violations.append(LeaderViolation(rule.position, rule.allowed, found))

    if verbose:
        for violation in violations:
            logger.debug(
                "Leader position %d: expected one of %r, found %r",
                violation.position, violation.expected, violation.found,
            )
    return violations


def is_valid_leader(data: Union[bytes, bytearray]) -> bool:
    """Return True when every leader rule passes."""
    return not check_leader(data)


class Leader:
    """Read-only view of a record leader with MARC 21 reference information.

    Indexing and slicing work on the 24-character leader text:

        leader[5]       # record status
        leader[0:5]     # record length digits
    """

    # MARC 21 Reference: Position 5 - Record Status
    RECORD_STATUS_VALUES = {
        'a': 'Increase in encoding level',
        'c': 'Corrected or revised',
        'd': 'Deleted',
        'n': 'New',
        'p': 'Increase in encoding level from prepublication',
    }

    # MARC 21 Reference: Position 6 - Type of record
    RECORD_TYPE_VALUES = {
        'a': 'Language material',
        'c': 'Notated music',
        'd': 'Manuscript notated music',
        'e': 'Cartographic material',
        'f': 'Manuscript cartographic material',
        'g': 'Projected medium',
        'i': 'Nonmusical sound recording',
        'j': 'Musical sound recording',
        'k': 'Two-dimensional nonprojectable graphic',
        'm': 'Computer file',
        'o': 'Kit',
        'p': 'Mixed materials',
        'r': 'Three-dimensional artifact or naturally occurring object',
        't': 'Manuscript language material',
    }

    # MARC 21 Reference: Position 7 - Bibliographic level
    BIBLIOGRAPHIC_LEVEL_VALUES = {
        'a': 'Monographic component part',
        'b': 'Serial component part',
        'c': 'Collection',
        'd': 'Subunit',
        'i': 'Integrating resource',
        'm': 'Monograph',
        's': 'Serial',
    }

    # Position 8 - Character encoding, as read by this library
    CHARACTER_ENCODING_VALUES = {
        ' ': 'MARC-8',
        'a': 'UCS/Unicode',
    }

    # MARC 21 Reference: Position 17 - Encoding level
    ENCODING_LEVEL_VALUES = {
        ' ': 'Full level',
        '1': 'Full level, material not examined',
        '2': 'Less-than-full level, material not examined',
        '3': 'Abbreviated level',
        '4': 'Core level',
        '5': 'Partial (preliminary) level',
        '7': 'Minimal level',
        '8': 'Prepublication level',
        'u': 'Unknown',
        'z': 'Not applicable',
    }

    # MARC 21 Reference: Position 18 - Descriptive cataloging form
    CATALOGING_FORM_VALUES = {
        ' ': 'Non-ISBD',
        'a': 'AACR 2',
        'c': 'ISBD punctuation omitted',
        'i': 'ISBD punctuation included',
        'u': 'Unknown',
    }

    # MARC 21 Reference: Position 19 - Multipart resource record level
    MULTIPART_LEVEL_VALUES = {
        ' ': 'Not specified or not applicable',
        'a': 'Set',
        'b': 'Part with independent title',
        'c': 'Part with dependent title',
    }

    def __init__(self, data: Union[bytes, bytearray]):
        """Create a view over the first 24 bytes of ``data``."""
        if len(data) < LEADER_SIZE:
            raise ValueError(f"Leader must be {LEADER_SIZE} bytes, got {len(data)}")
        self._text = bytes(data[:LEADER_SIZE]).decode("latin-1")

    @classmethod
    def get_valid_values(cls, position: int) -> Optional[dict]:
        """Get the dictionary of defined values for a leader position.

        Args:
            position: Leader position (0-23)

        Returns:
            Dictionary mapping values to descriptions, or None if the position
            has no coded values.

        Example:
            >>> Leader.get_valid_values(5)['n']
            'New'
            >>> Leader.get_valid_values(0) is None
            True
        """
        position_map = {
            5: cls.RECORD_STATUS_VALUES,
            6: cls.RECORD_TYPE_VALUES,
            7: cls.BIBLIOGRAPHIC_LEVEL_VALUES,
            8: cls.CHARACTER_ENCODING_VALUES,
            17: cls.ENCODING_LEVEL_VALUES,
            18: cls.CATALOGING_FORM_VALUES,
            19: cls.MULTIPART_LEVEL_VALUES,
        }
        return position_map.get(position)

    @classmethod
    def is_valid_value(cls, position: int, value: str) -> bool:
        """Check if a value is defined for a leader position.

        Positions without coded values accept any single character.
        """
        valid_values = cls.get_valid_values(position)
        if valid_values is None:
            return True
        return value in valid_values

    @classmethod
    def describe_value(cls, position: int, value: str) -> Optional[str]:
        """Get the description of a leader value, or None if undefined."""
        valid_values = cls.get_valid_values(position)
        if valid_values is None:
            return None
        return valid_values.get(value)

    @property
    def record_length(self) -> int:
        return decode_decimal(self._text[0:5])

    @property
    def record_status(self) -> str:
        return self._text[5]

    @property
    def record_type(self) -> str:
        return self._text[6]

    @property
    def bibliographic_level(self) -> str:
        return self._text[7]

    @property
    def character_encoding(self) -> str:
        return self._text[8]

    @property
    def base_address(self) -> int:
        return decode_decimal(self._text[12:17])

    @property
    def encoding_level(self) -> str:
        return self._text[17]

    @property
    def cataloging_form(self) -> str:
        return self._text[18]

    @property
    def multipart_level(self) -> str:
        return self._text[19]

    def __getitem__(self, index: Union[int, slice]) -> str:
        return self._text[index]

    def __len__(self) -> int:
        return LEADER_SIZE

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Leader({self._text!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, Leader):
            return self._text == other._text
        if isinstance(other, str):
            return self._text == other
        return False

    def __hash__(self) -> int:
        return hash(self._text)
