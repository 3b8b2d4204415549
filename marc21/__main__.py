"""
Print the records of a MARC file in MRK text form.

    python -m marc21 records.mrc
    python -m marc21 records.mrc --tag 245 --tag 650 --permissive

Control fields print as ``=001  value``, data fields as
``=245  10$aTitle$cAuthor`` with blank indicators shown as ``\\``.
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from .errors import MarcError
from .reader import MARCReader
from .record import Record
from .transcoding import UnknownEncodingPolicy

logger = logging.getLogger("marc21")


def format_record(record: Record, tags: Optional[List[str]] = None) -> List[str]:
    """Render one record as MRK lines."""
    lines = [f"=LDR  {record.leader_text()}"]
    for field in record.fields():
        if tags and field.tag not in tags:
            continue
        for index in range(field.value_count()):
            if field.is_control_field():
                lines.append(f"={field.tag}  {field.value(index)}")
                continue
            indicators = "".join("\\" if ind == " " else ind for ind in field.indicator_pair(index))
            subfields = "".join(f"${sf.code}{sf.value}" for sf in field.subfields(index))
            lines.append(f"={field.tag}  {indicators}{subfields}")
    return lines


def dump(reader: MARCReader, out: TextIO, tags: Optional[List[str]] = None) -> int:
    """Write every record from ``reader`` to ``out``; return the count written."""
    count = 0
    for record in reader:
        if record is None:
            continue
        out.write("\n".join(format_record(record, tags)))
        out.write("\n\n")
        count += 1
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="marc21",
        description="Print MARC 21 records in MRK text form",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('path', help='ISO 2709 file to read')
    parser.add_argument(
        '--tag',
        action='append',
        dest='tags',
        help='Only print fields with this tag (repeatable)',
    )
    parser.add_argument(
        '--no-validate',
        action='store_false',
        dest='validate_leader',
        help='Skip leader validation',
    )
    parser.add_argument(
        '--permissive',
        action='store_true',
        help='Skip records that cannot be decoded instead of stopping',
    )
    parser.add_argument(
        '--unknown-encoding',
        choices=[policy.value for policy in UnknownEncodingPolicy],
        default=UnknownEncodingPolicy.REJECT.value,
        help='What to do with an unrecognized leader encoding byte',
    )
    parser.add_argument(
        '--strict-directory',
        action='store_true',
        help='Reject records whose directory points outside the record',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        with open(args.path, 'rb') as f:
            reader = MARCReader(
                f,
                permissive=args.permissive,
                validate_leader=args.validate_leader,
                verbose=args.verbose,
                unknown_encoding=UnknownEncodingPolicy(args.unknown_encoding),
                strict_directory=args.strict_directory,
            )
            count = dump(reader, sys.stdout, args.tags)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (MarcError, UnicodeDecodeError) as e:
        print(f"Error at offset {reader.record_offset}: {e}", file=sys.stderr)
        return 1

    logger.debug("Printed %d records", count)
    return 0


if __name__ == '__main__':
    sys.exit(main())
