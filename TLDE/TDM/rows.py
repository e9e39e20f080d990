# =============================================================================
# rows.py — .trk Row Decoder
# =============================================================================
#
# A row is one field per descriptor, back to back, in header order:
#
#   | var 0 (w0 bytes) | var 1 (w1 bytes) | ... | var n-1 |
#
# Field width is the intrinsic width of the descriptor's type tag, NOT the
# declared size from the header.  Every value is widened to float so that
# all columns share one storage type.
#
# Each field is read into a span sized to that field alone.  A field whose
# type has no codec is rejected before any of its bytes are consumed:
# guessing a width would shift every following field in the stream.
# =============================================================================

from __future__ import annotations
import io
from typing import Mapping, Sequence

from .errors import TruncatedRow, UnsupportedType
from .header import VariableDescriptor
from .primitives import PrimitiveCodec, DEFAULT_CODECS
from .stream import read_exact


def field_codec(
    descriptor: VariableDescriptor,
    codecs: Mapping = DEFAULT_CODECS,
    offset: int | None = None,
) -> tuple[PrimitiveCodec, int]:
    """Return (codec, width) for one descriptor or raise UnsupportedType."""
    codec = codecs.get(descriptor.type_tag)
    if codec is None:
        raise UnsupportedType(
            f"{descriptor.name!r}: type {descriptor.type_tag.c_name!r} "
            f"(id {descriptor.type_id}) has no row decoder",
            type_tag=descriptor.type_tag,
            offset=offset,
        )
    width = descriptor.width if codec.width is None else codec.width
    if width <= 0:
        raise UnsupportedType(
            f"{descriptor.name!r}: {descriptor.type_tag.c_name} declares "
            f"size {descriptor.declared_width}, cannot size the field",
            type_tag=descriptor.type_tag,
            offset=offset,
        )
    return codec, width


def row_size(
    descriptors: Sequence[VariableDescriptor],
    codecs: Mapping = DEFAULT_CODECS,
) -> int:
    """Byte length of one complete row."""
    return sum(field_codec(d, codecs)[1] for d in descriptors)


def read_row(
    cursor: io.BytesIO,
    descriptors: Sequence[VariableDescriptor],
    codecs: Mapping = DEFAULT_CODECS,
) -> list[float]:
    """
    Decode exactly one row at the cursor.

    Returns one float per descriptor, same order.  The cursor ends on the
    first byte of the next row.

    Raises
    ------
    TruncatedRow     fewer bytes remain than the current field needs
    UnsupportedType  a descriptor's type is not wired up in `codecs`
    """
    values = []
    for descriptor in descriptors:
        offset = cursor.tell()
        codec, width = field_codec(descriptor, codecs, offset)
        span = read_exact(cursor, width, TruncatedRow, f"field {descriptor.name!r}")
        values.append(codec.decode(span))
    return values
