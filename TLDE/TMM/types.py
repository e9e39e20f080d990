# =============================================================================
# types.py — Trick Type Registry
# =============================================================================
#
# Maps the small integer type identifier stored in each .trk descriptor to a
# primitive type tag.  The table is fixed:
#
#    1 char                 8 long                 14 long long
#    2 unsigned char        9 unsigned long        15 unsigned long long
#    4 short               10 float                17 bool
#    5 unsigned short      11 double
#    6 int                 12 bit field
#    7 unsigned int        13 unsigned bit field
#
# Identifiers 3 and 16 are not assigned.  An identifier outside the table
# makes the whole file undecodable: the width of every later field in a row
# depends on knowing the width of this one.
# =============================================================================

from __future__ import annotations
import enum
from types import MappingProxyType
from typing import Mapping


class TypeTag(enum.Enum):
    """Primitive type of one logged variable.

    Value = (C type name, intrinsic width in bytes, numpy dtype string).
    Bit-field tags carry no intrinsic width; it comes from the descriptor.
    """

    INT8               = ("char",               1,    "<i1")
    UINT8              = ("unsigned char",      1,    "<u1")
    INT16              = ("short",              2,    "<i2")
    UINT16             = ("unsigned short",     2,    "<u2")
    INT32              = ("int",                4,    "<i4")
    UINT32             = ("unsigned int",       4,    "<u4")
    INT64              = ("long",               8,    "<i8")
    UINT64             = ("unsigned long",      8,    "<u8")
    FLOAT32            = ("float",              4,    "<f4")
    FLOAT64            = ("double",             8,    "<f8")
    BIT_FIELD          = ("bit field",          None, None)
    UNSIGNED_BIT_FIELD = ("unsigned bit field", None, None)
    LONG_LONG          = ("long long",          8,    "<i8")
    ULONG_LONG         = ("unsigned long long", 8,    "<u8")
    BOOL               = ("bool",               1,    "u1")   # raw byte; non-zero = True

    @property
    def c_name(self) -> str:
        return self.value[0]

    @property
    def width(self) -> int | None:
        return self.value[1]

    @property
    def dtype(self) -> str | None:
        return self.value[2]

    @property
    def is_bitfield(self) -> bool:
        return self.width is None

    def __str__(self) -> str:
        return self.c_name


TRICK_TYPE_IDS = {
    1:  TypeTag.INT8,
    2:  TypeTag.UINT8,
    4:  TypeTag.INT16,
    5:  TypeTag.UINT16,
    6:  TypeTag.INT32,
    7:  TypeTag.UINT32,
    8:  TypeTag.INT64,
    9:  TypeTag.UINT64,
    10: TypeTag.FLOAT32,
    11: TypeTag.FLOAT64,
    12: TypeTag.BIT_FIELD,
    13: TypeTag.UNSIGNED_BIT_FIELD,
    14: TypeTag.LONG_LONG,
    15: TypeTag.ULONG_LONG,
    17: TypeTag.BOOL,
}

# Reverse lookup for writers: tag -> identifier
TYPE_TAG_TO_ID = {tag: ident for ident, tag in TRICK_TYPE_IDS.items()}


class TypeRegistry:
    """
    Immutable identifier → TypeTag lookup.

    Pass a custom table to restrict or extend what a decoder accepts; the
    default instance is safe to share between threads.
    """

    def __init__(self, table: Mapping[int, TypeTag] = TRICK_TYPE_IDS) -> None:
        self._table = MappingProxyType(dict(table))

    def lookup(self, identifier: int) -> TypeTag | None:
        return self._table.get(identifier)

    def identifiers(self) -> list[int]:
        return sorted(self._table)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"TypeRegistry({self.identifiers()})"


DEFAULT_REGISTRY = TypeRegistry()
