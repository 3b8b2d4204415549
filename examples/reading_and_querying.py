#!/usr/bin/env python3
"""
Reading MARC records and querying fields

This example reads a binary MARC file and shows the three levels of
access a record offers: the leader and directory, per-tag field views,
and the pymarc-style convenience methods.

    python examples/reading_and_querying.py records.mrc
"""

import sys

from marc21 import Leader, MARCReader, NotAControlField


def leader_and_directory(record):
    """Show what the leader and directory say about a record."""
    print("=== Leader and Directory ===\n")

    leader = record.leader
    print(f"Leader:        {record.leader_text()}")
    print(f"Record type:   {leader.record_type} "
          f"({Leader.describe_value(6, leader.record_type)})")
    print(f"Encoding:      {Leader.describe_value(8, leader.character_encoding)}")
    print(f"Base address:  {leader.base_address}")

    print(f"\nTags: {' '.join(record.field_tags())}")
    for tag, locations in record.directory.items():
        spans = ", ".join(f"{loc.offset}+{loc.length}" for loc in locations)
        print(f"  {tag}: {spans}")
    print()


def field_access(record):
    """Query control fields, indicators and subfields."""
    print("=== Field Access ===\n")

    try:
        print(f"Control number: {record.control_field('001')}")
    except NotAControlField as e:
        print(f"Unexpected: {e}")

    title = record.raw_field('245')
    if title:
        print(f"Title indicators: {title.indicators()}")
        print(f"Title ($a):       {title.nth_subfield('a')}")
        print(f"Responsibility:   {title.nth_subfield('c')}")
        print(f"Subfield codes:   {', '.join(title.subfield_codes())}")

    subjects = record.raw_field('650')
    print(f"\nSubject headings ({subjects.value_count()} found):")
    for i in range(subjects.value_count()):
        print(f"  - {' -- '.join(subjects.get_subfields('a', 'x', 'z', index=i))}")
    print()


def convenience_methods(record):
    """pymarc-style helpers."""
    print("=== Convenience Methods ===\n")
    print(f"title():    {record.title()}")
    print(f"author():   {record.author()}")
    print(f"isbn():     {record.isbn()}")
    print(f"subjects(): {record.subjects()}")
    print()


def main():
    if len(sys.argv) != 2:
        print(f"Usage: {sys.argv[0]} FILE.mrc")
        return 1

    with open(sys.argv[1], 'rb') as f:
        reader = MARCReader(f, permissive=True)
        for record in reader:
            if record is None:
                print(f"Skipped record at offset {reader.record_offset}: "
                      f"{reader.current_exception}\n")
                continue
            leader_and_directory(record)
            field_access(record)
            convenience_methods(record)
    return 0


if __name__ == '__main__':
    sys.exit(main())
