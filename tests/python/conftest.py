"""
Pytest configuration and fixtures for the marc21 test suite.
"""

import io

import pytest

FIELD_TERMINATOR = b'\x1e'
SUBFIELD_DELIMITER = b'\x1f'
RECORD_TERMINATOR = b'\x1d'

# Extracted from the Harvard Library Open Metadata
# http://openmetadata.lib.harvard.edu/bibdata
FULL_RECORD = (
    b"00458nam a22001577u 4500"
    b"001001200000005001700012008004100029035001600070245005400086"
    b"260004100140300003500181650003100216710003300247988001300280"
    b"906000700293\x1e"
    b"000000002-7\x1e"
    b"20120831093346.0\x1e"
    b"821202|1937    |||||||  |||| |0||||eng|d\x1e"
    b"0 \x1faocm83544809\x1e"
    b"00\x1faGarden exhibition /\x1fcSan Francisco Museum of Art.\x1e"
    b"0 \x1faSan Francisco :\x1fbThe Museum,\x1fc[1937]\x1e"
    b"  \x1fa1 folded sheet (4p.) ;\x1fc14 cm.\x1e"
    b" 0\x1faHorticultural exhibitions.\x1e"
    b"2 \x1faSan Francisco Museum of Art.\x1e"
    b"  \x1fa20020608\x1e"
    b"  \x1f0MH\x1e"
    b"\x1d"
)

TITLE_STATEMENT = b"00\x1faGarden exhibition /\x1fcSan Francisco Museum of Art.\x1e"


def make_control_field(tag, value):
    """Build a (tag, body) pair for a control field."""
    if isinstance(value, str):
        value = value.encode('utf-8')
    return tag, value + FIELD_TERMINATOR


def make_data_field(tag, indicators, *subfields):
    """Build a (tag, body) pair for a data field.

    Args:
        tag: 3-character tag.
        indicators: 2-character indicator string.
        subfields: Alternating codes and values, e.g. 'a', 'Title', 'c', 'Author'.
    """
    body = indicators.encode('ascii')
    for code, value in zip(subfields[::2], subfields[1::2]):
        if isinstance(value, str):
            value = value.encode('utf-8')
        body += SUBFIELD_DELIMITER + code.encode('ascii') + value
    return tag, body + FIELD_TERMINATOR


def build_leader(record_length, base_address, encoding=' ', record_type='a', bib_level='m'):
    """Build a 24-byte MARC leader."""
    leader = bytearray()
    leader.extend(f'{record_length:05d}'.encode('ascii'))      # 0-4: record length
    leader.append(ord('n'))                                     # 5: status
    leader.append(ord(record_type))                             # 6: record type
    leader.append(ord(bib_level))                               # 7: bibliographic level
    leader.append(ord(encoding))                                # 8: character encoding
    leader.append(ord('a'))                                     # 9
    leader.append(ord('2'))                                     # 10: indicator count
    leader.append(ord('2'))                                     # 11: subfield code count
    leader.extend(f'{base_address:05d}'.encode('ascii'))        # 12-16: base address
    leader.append(ord(' '))                                     # 17: encoding level
    leader.append(ord(' '))                                     # 18: cataloging form
    leader.append(ord(' '))                                     # 19: multipart level
    leader.extend(b'4500')                                      # 20-23: entry map
    return bytes(leader)


def build_marc_record(fields, encoding=' ', **leader_options):
    """Build a complete MARC record.

    Args:
        fields: List of (tag, body) pairs, kept in the given order so
            repeated and unsorted tags can be produced.
        encoding: Leader byte 8.
    """
    data_area = b''
    directory = b''
    for tag, body in fields:
        directory += tag.encode('ascii')
        directory += f'{len(body):04d}'.encode('ascii')
        directory += f'{len(data_area):05d}'.encode('ascii')
        data_area += body
    directory += FIELD_TERMINATOR

    base_address = 24 + len(directory)
    record_length = base_address + len(data_area) + 1
    leader = build_leader(record_length, base_address, encoding, **leader_options)
    return leader + directory + data_area + RECORD_TERMINATOR


def with_leader_byte(data, position, value):
    """Return a copy of ``data`` with one leader byte replaced."""
    return data[:position] + value.encode('latin-1') + data[position + 1:]


@pytest.fixture(scope="session")
def full_record():
    """The reference record, MARC-8 encoded (leader byte 8 is blank)."""
    return FULL_RECORD


@pytest.fixture(scope="session")
def full_record_utf8():
    """The reference record with leader byte 8 set to 'a' (UTF-8)."""
    return with_leader_byte(FULL_RECORD, 8, 'a')


@pytest.fixture(scope="session")
def simple_book():
    """A small UTF-8 book record."""
    return build_marc_record([
        make_control_field('001', 'ocm00001'),
        make_data_field('100', '1 ', 'a', 'Fitzgerald, F. Scott'),
        make_data_field('245', '14', 'a', 'The Great Gatsby /', 'c', 'F. Scott Fitzgerald.'),
        make_data_field('650', ' 0', 'a', 'American fiction'),
        make_data_field('650', ' 0', 'a', 'Rich people', 'z', 'New York (State)'),
    ], encoding='a')


@pytest.fixture(scope="session")
def multi_records(full_record, simple_book):
    """Three concatenated records."""
    return full_record + simple_book + full_record


@pytest.fixture
def multi_records_io(multi_records):
    """Return the multi-record buffer as a file-like object."""
    return io.BytesIO(multi_records)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow (deselect with '-m \"not slow\"')"
    )
