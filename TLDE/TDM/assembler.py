# =============================================================================
# assembler.py — .trk Log Assembler
# =============================================================================
#
# header → rows → columns
#
#   1. read_header() once; the cursor is left on the first row.
#   2. While at least one byte remains, decode one row and append each value
#      to the column with the same index.  End of input is only checked
#      BETWEEN rows; running out inside a row is a TruncatedRow.
#   3. Freeze the columns as float64 arrays in a LogDataset.
#
# Vectorised path
# ---------------
# When every field has a numpy dtype exactly as wide as its codec reads
# (everything except bit-fields, with the default codecs), the whole row
# region is a packed array of records and is decoded with a single
# np.frombuffer() call.  If the region is not a whole number of rows the
# cursor is moved to the start of the incomplete row and the scalar decoder
# raises the TruncatedRow, so both paths fail at the same byte offset.
# =============================================================================

from __future__ import annotations
import io
from dataclasses import dataclass
from typing import Mapping, Sequence

import numpy as np

from TLDE.TMM.types import TypeTag, TypeRegistry, DEFAULT_REGISTRY
from .errors import TruncatedRow
from .header import FormatVersion, VariableDescriptor, read_header
from .primitives import DEFAULT_CODECS
from .rows import read_row, row_size
from .stream import as_cursor, remaining


@dataclass(frozen=True)
class LogDataset:
    """
    Decoded log: descriptors plus one float64 column per descriptor.

    columns[i] belongs to descriptors[i]; every column has the same length
    (one sample per decoded row, in file order).
    """

    version:     FormatVersion
    descriptors: tuple[VariableDescriptor, ...]
    columns:     tuple[np.ndarray, ...]

    def __post_init__(self) -> None:
        if len(self.columns) != len(self.descriptors):
            raise ValueError(
                f"{len(self.columns)} columns for {len(self.descriptors)} descriptors"
            )
        lengths = {len(c) for c in self.columns}
        if len(lengths) > 1:
            raise ValueError(f"columns have unequal lengths: {sorted(lengths)}")

    @property
    def row_count(self) -> int:
        return len(self.columns[0]) if self.columns else 0

    def names(self) -> list[str]:
        return [d.name for d in self.descriptors]

    def index_of(self, name: str) -> int:
        """Index of the first variable called `name`; KeyError if absent."""
        for i, d in enumerate(self.descriptors):
            if d.name == name:
                return i
        raise KeyError(f"no variable named {name!r} in log")

    def descriptor(self, name: str) -> VariableDescriptor:
        return self.descriptors[self.index_of(name)]

    def column(self, name: str) -> np.ndarray:
        return self.columns[self.index_of(name)]

    def series(self, x_name: str, y_name: str) -> tuple[np.ndarray, np.ndarray]:
        """Two equal-length columns, for plotting y against x."""
        return self.column(x_name), self.column(y_name)

    def as_dict(self) -> dict[str, list[float]]:
        return {d.name: c.tolist() for d, c in zip(self.descriptors, self.columns)}


# ── Row region decoders ────────────────────────────────────────────────────────

def _frozen(column: np.ndarray) -> np.ndarray:
    column = np.ascontiguousarray(column, dtype=np.float64)
    column.setflags(write=False)
    return column


def _record_dtype(descriptors: Sequence[VariableDescriptor], codecs: Mapping):
    """
    Packed numpy record type for one row, or None if any field lacks a dtype
    or its dtype is not exactly as wide as the codec reads.
    """
    fields = []
    for i, d in enumerate(descriptors):
        codec = codecs.get(d.type_tag)
        if codec is None or codec.dtype is None:
            return None
        dtype = np.dtype(codec.dtype)
        if dtype.itemsize != codec.width:
            return None
        fields.append((f"f{i}", dtype))
    return np.dtype(fields)


def _decode_rows_scalar(
    cursor: io.BytesIO,
    descriptors: Sequence[VariableDescriptor],
    codecs: Mapping,
) -> list[np.ndarray]:
    n = len(descriptors)
    data: list[list[float]] = [[] for _ in range(n)]

    while remaining(cursor) > 0:
        row = read_row(cursor, descriptors, codecs)
        for i in range(n):
            data[i].append(row[i])

    return [_frozen(np.array(col, dtype=np.float64)) for col in data]


def _decode_rows_vectorized(
    cursor: io.BytesIO,
    descriptors: Sequence[VariableDescriptor],
    codecs: Mapping,
    record: np.dtype,
) -> list[np.ndarray]:
    start = cursor.tell()
    size  = row_size(descriptors, codecs)
    n_rows, tail = divmod(remaining(cursor), size)

    if tail:
        # Let the scalar decoder report exactly which field ran short.
        cursor.seek(start + n_rows * size)
        read_row(cursor, descriptors, codecs)

    rows = np.frombuffer(cursor.getvalue(), dtype=record, count=n_rows, offset=start)
    cursor.seek(start + n_rows * size)

    columns = []
    for i, d in enumerate(descriptors):
        raw = rows[f"f{i}"]
        if d.type_tag is TypeTag.BOOL:
            raw = raw != 0
        columns.append(_frozen(raw.astype(np.float64)))
    return columns


# ── Public API ─────────────────────────────────────────────────────────────────

def decode_log(
    data,
    registry: TypeRegistry = DEFAULT_REGISTRY,
    codecs: Mapping = DEFAULT_CODECS,
    vectorized: bool = True,
) -> LogDataset:
    """
    Decode a complete in-memory .trk file.

    Parameters
    ----------
    data       : bytes-like or io.BytesIO — the whole file
    registry   : type identifier table used by the header reader
    codecs     : TypeTag → PrimitiveCodec table used by the row decoder
    vectorized : allow the single-call numpy path when every field has a dtype

    Returns
    -------
    LogDataset

    Raises
    ------
    DecodeError (TruncatedHeader, UnknownType, InvalidText, TruncatedRow,
    UnsupportedType).  Nothing partial is ever returned.
    """
    cursor = as_cursor(data)
    version, descriptors = read_header(cursor, registry)

    if not descriptors:
        if remaining(cursor):
            raise TruncatedRow(
                f"{remaining(cursor)} bytes of row data but the header declares no variables",
                offset=cursor.tell(),
            )
        return LogDataset(version=version, descriptors=(), columns=())

    record = _record_dtype(descriptors, codecs) if vectorized else None
    if record is not None and remaining(cursor):
        columns = _decode_rows_vectorized(cursor, descriptors, codecs, record)
    else:
        columns = _decode_rows_scalar(cursor, descriptors, codecs)

    return LogDataset(
        version=version,
        descriptors=tuple(descriptors),
        columns=tuple(columns),
    )
