"""Format-specific modules for reading MARC records.

Formats
-------
- **marc**: ISO 2709 binary MARC (standard interchange format)

Quick Start
-----------
>>> from marc21.formats import marc
>>> for record in marc.read("records.mrc"):
...     print(record.title())
"""

from . import marc

__all__ = [
    "marc",
]
