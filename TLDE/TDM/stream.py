# =============================================================================
# stream.py — Byte cursor helpers
# =============================================================================
#
# The whole .trk file is held in memory and walked with an io.BytesIO.
# read_exact() either returns exactly n bytes or raises the caller's error
# type at the offset where the short read began; it never returns a partial
# span.
# =============================================================================

from __future__ import annotations
import io

from .errors import DecodeError


def as_cursor(data) -> io.BytesIO:
    """Wrap bytes-like input in a BytesIO (an existing BytesIO is returned as is)."""
    if isinstance(data, io.BytesIO):
        return data
    return io.BytesIO(bytes(data))  # accept memoryview, bytearray, etc.


def remaining(cursor: io.BytesIO) -> int:
    """Bytes left between the cursor position and end of buffer."""
    with cursor.getbuffer() as view:
        total = view.nbytes
    return max(total - cursor.tell(), 0)


def read_exact(
    cursor: io.BytesIO,
    n: int,
    error: type[DecodeError],
    what: str,
) -> bytes:
    """Read exactly n bytes or raise `error` at the current offset."""
    start = cursor.tell()
    left = remaining(cursor)
    if left < n:
        raise error(f"{what} needs {n} bytes, only {left} remain", offset=start)
    return cursor.read(n)
