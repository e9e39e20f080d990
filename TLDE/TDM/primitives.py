# =============================================================================
# primitives.py — Little-endian Primitive Decoders
# =============================================================================
#
# Pure functions: fixed-size byte span in, one Python number out.  Each
# decoder insists on an exact-length span; a short or long span means the
# caller's cursor has drifted from the file layout, which is a structural
# error, not something to paper over.
#
# PrimitiveCodec ties a TypeTag to its width, its scalar decoder and its
# numpy dtype (used by the vectorised row path in assembler.py).
# DEFAULT_CODECS wires up every tag in the registry.  Callers may pass a
# reduced table; any tag missing from it is reported as UnsupportedType by
# the row decoder instead of being guessed at.
# =============================================================================

from __future__ import annotations
import struct
from types import MappingProxyType
from typing import Callable, Mapping, NamedTuple

from TLDE.TMM.constants import BITFIELD_MAX_WIDTH
from TLDE.TMM.types import TypeTag
from .errors import InvalidText

_I8  = struct.Struct("<b")
_U8  = struct.Struct("<B")
_I16 = struct.Struct("<h")
_U16 = struct.Struct("<H")
_I32 = struct.Struct("<i")
_U32 = struct.Struct("<I")
_I64 = struct.Struct("<q")
_U64 = struct.Struct("<Q")
_F32 = struct.Struct("<f")
_F64 = struct.Struct("<d")
_BOOL = struct.Struct("<B")


def _exact(fmt: struct.Struct, data: bytes, label: str):
    if len(data) != fmt.size:
        raise ValueError(f"{label} needs exactly {fmt.size} bytes, got {len(data)}")
    return fmt.unpack(data)[0]


# ── Integers ───────────────────────────────────────────────────────────────────

def i8_from_bytes(data: bytes) -> int:
    return _exact(_I8, data, "char")


def u8_from_bytes(data: bytes) -> int:
    return _exact(_U8, data, "unsigned char")


def i16_from_bytes(data: bytes) -> int:
    return _exact(_I16, data, "short")


def u16_from_bytes(data: bytes) -> int:
    return _exact(_U16, data, "unsigned short")


def i32_from_bytes(data: bytes) -> int:
    return _exact(_I32, data, "int")


def u32_from_bytes(data: bytes) -> int:
    return _exact(_U32, data, "unsigned int")


def i64_from_bytes(data: bytes) -> int:
    return _exact(_I64, data, "long")


def u64_from_bytes(data: bytes) -> int:
    return _exact(_U64, data, "unsigned long")


# ── Floats / bool ──────────────────────────────────────────────────────────────

def f32_from_bytes(data: bytes) -> float:
    return _exact(_F32, data, "float")


def f64_from_bytes(data: bytes) -> float:
    return _exact(_F64, data, "double")


def bool_from_bytes(data: bytes) -> bool:
    """Any non-zero byte is True."""
    return _exact(_BOOL, data, "bool") != 0


# ── Bit fields ─────────────────────────────────────────────────────────────────

def bitfield_width(declared_width: int) -> int:
    """Storage width of a bit-field: the declared size, clamped to 4 bytes."""
    return min(declared_width, BITFIELD_MAX_WIDTH)


def bitfield_from_bytes(data: bytes, signed: bool) -> int:
    """
    Decode the storage unit holding a bit-field (1–4 bytes, little-endian).

    The whole storage unit is returned; bit offsets within it are not
    recorded in the .trk header.
    """
    if not 1 <= len(data) <= BITFIELD_MAX_WIDTH:
        raise ValueError(
            f"bit field storage must be 1-{BITFIELD_MAX_WIDTH} bytes, got {len(data)}"
        )
    return int.from_bytes(data, "little", signed=signed)


# ── Strings ────────────────────────────────────────────────────────────────────

def c_string(data: bytes) -> str:
    """
    Return the text before the first NUL byte (or the whole span if there is
    none).  Raises InvalidText if that prefix is not valid UTF-8.
    """
    data = bytes(data)
    nul = data.find(b"\x00")
    if nul >= 0:
        data = data[:nul]
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidText(f"invalid UTF-8 in string field: {exc.reason}") from exc


# ── Codec table ────────────────────────────────────────────────────────────────

class PrimitiveCodec(NamedTuple):
    width:  int | None                  # None = take it from the descriptor
    decode: Callable[[bytes], float]    # exact-width span -> widened float
    dtype:  str | None                  # numpy dtype for whole-column decoding


def _widen(fn: Callable[[bytes], object]) -> Callable[[bytes], float]:
    def decode(data: bytes) -> float:
        return float(fn(data))
    decode.__name__ = fn.__name__
    return decode


def _signed_bitfield(data: bytes) -> int:
    return bitfield_from_bytes(data, signed=True)


def _unsigned_bitfield(data: bytes) -> int:
    return bitfield_from_bytes(data, signed=False)


DEFAULT_CODECS: Mapping[TypeTag, PrimitiveCodec] = MappingProxyType({
    TypeTag.INT8:               PrimitiveCodec(1, _widen(i8_from_bytes),   TypeTag.INT8.dtype),
    TypeTag.UINT8:              PrimitiveCodec(1, _widen(u8_from_bytes),   TypeTag.UINT8.dtype),
    TypeTag.INT16:              PrimitiveCodec(2, _widen(i16_from_bytes),  TypeTag.INT16.dtype),
    TypeTag.UINT16:             PrimitiveCodec(2, _widen(u16_from_bytes),  TypeTag.UINT16.dtype),
    TypeTag.INT32:              PrimitiveCodec(4, _widen(i32_from_bytes),  TypeTag.INT32.dtype),
    TypeTag.UINT32:             PrimitiveCodec(4, _widen(u32_from_bytes),  TypeTag.UINT32.dtype),
    TypeTag.INT64:              PrimitiveCodec(8, _widen(i64_from_bytes),  TypeTag.INT64.dtype),
    TypeTag.UINT64:             PrimitiveCodec(8, _widen(u64_from_bytes),  TypeTag.UINT64.dtype),
    TypeTag.FLOAT32:            PrimitiveCodec(4, _widen(f32_from_bytes),  TypeTag.FLOAT32.dtype),
    TypeTag.FLOAT64:            PrimitiveCodec(8, _widen(f64_from_bytes),  TypeTag.FLOAT64.dtype),
    TypeTag.BIT_FIELD:          PrimitiveCodec(None, _widen(_signed_bitfield),   None),
    TypeTag.UNSIGNED_BIT_FIELD: PrimitiveCodec(None, _widen(_unsigned_bitfield), None),
    TypeTag.LONG_LONG:          PrimitiveCodec(8, _widen(i64_from_bytes),  TypeTag.LONG_LONG.dtype),
    TypeTag.ULONG_LONG:         PrimitiveCodec(8, _widen(u64_from_bytes),  TypeTag.ULONG_LONG.dtype),
    TypeTag.BOOL:               PrimitiveCodec(1, _widen(bool_from_bytes), TypeTag.BOOL.dtype),
})
