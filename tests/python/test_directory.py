"""
Directory decoding tests.
"""

import pytest

from marc21 import CorruptDirectory, Location, Record, decode_directory

from conftest import build_marc_record, make_control_field, make_data_field


class TestDecodeDirectory:
    """Test the tag -> occurrences index."""

    def test_reference_record_has_eleven_tags(self, full_record):
        directory = decode_directory(full_record)
        assert len(directory) == 11

    def test_locations_are_absolute(self, full_record):
        directory = decode_directory(full_record)

        # base address 157, 245 starts 86 bytes into the data area
        assert directory['245'] == [Location(157 + 86, 54)]
        assert directory['001'] == [Location(157, 12)]

    def test_directory_order_is_preserved(self, full_record):
        directory = decode_directory(full_record)
        assert list(directory)[-2:] == ['988', '906']

    def test_repeated_tags_keep_order(self):
        data = build_marc_record([
            make_control_field('001', '1'),
            make_data_field('650', ' 0', 'a', 'First'),
            make_data_field('245', '00', 'a', 'Title'),
            make_data_field('650', ' 0', 'a', 'Second'),
        ])
        directory = decode_directory(data)

        first, second = directory['650']
        assert first.offset < second.offset
        assert data[first.offset:first.end].endswith(b'First\x1e')
        assert data[second.offset:second.end].endswith(b'Second\x1e')

    def test_empty_directory(self):
        data = build_marc_record([])
        assert decode_directory(data) == {}

    def test_unterminated_directory(self, full_record):
        # drop the directory terminator and everything after it
        with pytest.raises(CorruptDirectory):
            decode_directory(full_record[:24 + 12 * 3])

    def test_non_numeric_entry(self, full_record):
        corrupt = full_record[:27] + b'00x2' + full_record[31:]
        with pytest.raises(CorruptDirectory) as exc_info:
            decode_directory(corrupt)
        assert exc_info.value.tag == '001'

    def test_non_numeric_base_address(self, full_record):
        corrupt = full_record[:12] + b'0a157'[:5] + full_record[17:]
        with pytest.raises(CorruptDirectory):
            decode_directory(corrupt)


class TestOutOfRangeLocations:
    """Out-of-range directory entries fail the query, not the record."""

    @pytest.fixture
    def bad_offset_record(self, full_record):
        # point 650 (length 31) at start offset 99000
        index = full_record.index(b'650003100216')
        return full_record[:index] + b'650003199000' + full_record[index + 12:]

    def test_record_still_constructs(self, bad_offset_record):
        record = Record(bad_offset_record)
        assert '650' in record.field_tags()
        assert record.raw_field('245').nth_subfield('a') == 'Garden exhibition /'

    def test_query_raises_corrupt_directory(self, bad_offset_record):
        record = Record(bad_offset_record)
        field = record.raw_field('650')

        assert field.value_count() == 1
        with pytest.raises(CorruptDirectory) as exc_info:
            field.nth_subfield('a')
        assert exc_info.value.tag == '650'
        assert exc_info.value.index == 0

    def test_strict_mode_rejects_at_construction(self, bad_offset_record):
        with pytest.raises(CorruptDirectory):
            Record(bad_offset_record, strict_directory=True)

    def test_strict_mode_rejects_unterminated_field(self, full_record):
        # shorten 245 by one byte so it no longer ends on its terminator
        index = full_record.index(b'245005400086')
        corrupt = full_record[:index] + b'245005300086' + full_record[index + 12:]

        Record(corrupt)
        with pytest.raises(CorruptDirectory):
            Record(corrupt, strict_directory=True)

    def test_strict_mode_accepts_valid_record(self, full_record):
        record = Record(full_record, strict_directory=True)
        assert len(record.field_tags()) == 11
