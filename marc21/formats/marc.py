"""ISO 2709 binary MARC format support.

This is the baseline MARC format defined by ISO 2709, the standard
interchange format for bibliographic records between library systems.

Examples
--------
Read records from a MARC file:

>>> from marc21.formats import marc
>>> for record in marc.read("records.mrc"):
...     print(record.title())

Read from a file-like object, skipping undecodable records:

>>> with open("records.mrc", "rb") as f:
...     for record in marc.read(f, permissive=True):
...         if record is not None:
...             process(record)
"""

import os

from ..reader import MARCReader

__all__ = ["MARCReader", "read"]


def read(source, **options):
    """Read MARC records from an ISO 2709 file or file-like object.

    Args:
        source: File path (str or os.PathLike) or a file-like object opened
            in binary mode.
        **options: Passed to MARCReader.

    Returns:
        A MARCReader over the records. When ``source`` is a path the reader
        owns the file and closes it on ``close()`` or context exit.
    """
    if isinstance(source, (str, os.PathLike)):
        return MARCReader(open(source, "rb"), owns_file=True, **options)
    return MARCReader(source, **options)
