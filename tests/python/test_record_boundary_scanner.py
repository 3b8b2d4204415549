"""
Record Boundary Scanner Tests

Tests RecordBoundaryScanner boundary detection using 0x1D (record
terminator) delimiters:

- Correct identification of record boundaries
- Proper length calculation (including terminator)
- Batch limiting functionality
- Agreement with the length-prefixed framer
"""

import io

import pytest

from marc21 import MarcError, RecordBoundaryScanner, read_record


class TestBoundaryScannerBasics:
    """Test basic boundary scanner functionality."""

    def test_scan_single_record(self):
        """Scan a single record with terminator."""
        data = bytes([1, 2, 3, 0x1D])
        boundaries = RecordBoundaryScanner().scan(data)

        assert boundaries == [(0, 4)]

    def test_scan_multiple_records(self):
        """Scan multiple records with distinct boundaries."""
        data = bytes([1, 2, 0x1D, 3, 4, 0x1D, 5, 0x1D])
        boundaries = RecordBoundaryScanner().scan(data)

        assert boundaries == [(0, 3), (3, 3), (6, 2)]

    def test_trailing_bytes_ignored(self):
        data = bytes([1, 0x1D, 2, 3])
        assert RecordBoundaryScanner().scan(data) == [(0, 2)]

    def test_scan_empty_buffer(self):
        """Empty buffer should raise error."""
        with pytest.raises(MarcError):
            RecordBoundaryScanner().scan(b"")

    def test_scan_no_terminators(self):
        """Buffer with no record terminators should raise error."""
        with pytest.raises(MarcError):
            RecordBoundaryScanner().scan(bytes([1, 2, 3, 4]))

    def test_accepts_bytearray(self):
        assert RecordBoundaryScanner().scan(bytearray(b"ab\x1d")) == [(0, 3)]


class TestBoundaryScannerRealData:
    """Test boundary scanner with MARC records."""

    def test_matches_framer(self, multi_records):
        """Scanner boundaries agree with the lengths the framer reports."""
        boundaries = RecordBoundaryScanner().scan(multi_records)

        stream = io.BytesIO(multi_records)
        offset = 0
        for boundary in boundaries:
            length, _ = read_record(stream)
            assert boundary == (offset, length)
            offset += length
        assert read_record(stream) is None

    def test_boundaries_end_in_terminator(self, multi_records):
        for offset, length in RecordBoundaryScanner().scan(multi_records):
            record_bytes = multi_records[offset:offset + length]
            assert record_bytes[-1] == 0x1D
            assert offset + length <= len(multi_records)

    def test_resynchronise_after_garbage(self, full_record):
        """Garbage before a record ends up in its own boundary."""
        data = b"garbage\x1d" + full_record
        boundaries = RecordBoundaryScanner().scan(data)

        assert len(boundaries) == 2
        offset, length = boundaries[1]
        assert data[offset:offset + length] == full_record


class TestBoundaryScannerLimiting:
    """Test boundary scanner limiting functionality."""

    def test_scan_limited(self, multi_records):
        scanner = RecordBoundaryScanner()
        assert scanner.scan_limited(multi_records, 2) == scanner.scan(multi_records)[:2]

    def test_limit_larger_than_count(self, multi_records):
        assert len(RecordBoundaryScanner().scan_limited(multi_records, 100)) == 3

    def test_limit_zero(self, multi_records):
        assert RecordBoundaryScanner().scan_limited(multi_records, 0) == []

    def test_negative_limit(self, multi_records):
        with pytest.raises(ValueError):
            RecordBoundaryScanner().scan_limited(multi_records, -1)
