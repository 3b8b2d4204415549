"""
Parser Pool - Parallel MARC record parsing.

Records are independent of each other and a :class:`~marc21.record.Record`
is immutable once built, so a buffer can be split into record boundaries
and each slice decoded by a separate worker with no coordination.

# Example Usage

```python
from marc21 import RecordBoundaryScanner
from marc21.parser_pool import parse_batch_parallel

with open('records.mrc', 'rb') as f:
    buffer = f.read()

boundaries = RecordBoundaryScanner().scan(buffer)
records = parse_batch_parallel(boundaries, buffer)

for record in records:
    print(record.title())
```

# Thread Configuration

The pool size comes from the `MARC21_NUM_THREADS` environment variable,
defaulting to the CPU count:

```bash
MARC21_NUM_THREADS=4 python my_script.py
```
"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Tuple, Union

from .record import Record

__all__ = ["parse_batch_parallel", "parse_batch_parallel_limited"]

NUM_THREADS_ENV = "MARC21_NUM_THREADS"


def _worker_count() -> int:
    configured = os.environ.get(NUM_THREADS_ENV)
    if configured:
        try:
            count = int(configured)
        except ValueError:
            raise ValueError(f"{NUM_THREADS_ENV} must be an integer, got {configured!r}")
        if count < 1:
            raise ValueError(f"{NUM_THREADS_ENV} must be at least 1, got {count}")
        return count
    return os.cpu_count() or 1


def _parse(boundaries, buffer, limit: Optional[int], record_options) -> List[Record]:
    if limit is not None:
        boundaries = boundaries[:limit]

    view = memoryview(buffer)
    for offset, length in boundaries:
        if offset < 0 or length < 0 or offset + length > len(buffer):
            raise ValueError(
                f"boundary ({offset}, {length}) exceeds buffer of {len(buffer)} bytes"
            )

    def parse_one(boundary: Tuple[int, int]) -> Record:
        offset, length = boundary
        return Record(view[offset:offset + length], **record_options)

    with ThreadPoolExecutor(max_workers=_worker_count()) as executor:
        return list(executor.map(parse_one, boundaries))


def parse_batch_parallel(
    boundaries: List[Tuple[int, int]], buffer: Union[bytes, bytearray], **record_options: Any
) -> List[Record]:
    """Parse a batch of MARC record boundaries in parallel.

    # Arguments

    - `boundaries`: List of (offset, length) tuples identifying record boundaries.
                    These are typically obtained from RecordBoundaryScanner.scan().
    - `buffer`: The complete binary buffer containing all records.
    - `record_options`: Keyword options passed to every Record.

    # Returns

    A list of Record objects, one for each boundary, in the same order.

    # Raises

    - `ValueError`: If any boundary exceeds the buffer size.
    - `MarcError`: The first error raised while decoding a record.
    """
    return _parse(boundaries, buffer, None, record_options)


def parse_batch_parallel_limited(
    boundaries: List[Tuple[int, int]], buffer: Union[bytes, bytearray], limit: int, **record_options: Any
) -> List[Record]:
    """Parse at most `limit` records in parallel.

    Like parse_batch_parallel(), but only the first `limit` boundaries are
    parsed. Useful for pipeline stages that control their batch size.
    """
    if limit < 0:
        raise ValueError("limit must be non-negative")
    return _parse(boundaries, buffer, limit, record_options)
