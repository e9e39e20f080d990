# =============================================================================
# trk_writer.py — .trk Log Writer
# =============================================================================
#
# Inverse of TDM: builds .trk bytes from variable specs and row values.
# Used to make synthetic fixtures for the decoder, the self-validation suite
# and the inspector's --demo mode.
#
# Wire format (all little-endian):
#   [format tag 10 B]                        padded / cut to exactly 10 bytes
#   [num_params u32]
#   per variable:
#     [name_len u32][name bytes + NUL]       NUL counted in name_len
#     [unit_len u32][unit bytes + NUL]
#     [type_id u32][declared size u32]
#   rows: one field per variable, intrinsic width, no padding
#
# Main API:
#   build_trk(specs, rows, format_tag=DEFAULT_FORMAT_TAG) -> bytes
#   write_trk(path, specs, rows, format_tag=DEFAULT_FORMAT_TAG) -> int
# =============================================================================

from __future__ import annotations
import math
import struct
from typing import Iterable, NamedTuple, Sequence

from TLDE.TMM.constants import FORMAT_TAG_SIZE, DEFAULT_FORMAT_TAG, BITFIELD_MAX_WIDTH
from TLDE.TMM.types import TypeTag, TRICK_TYPE_IDS

_PACK_FORMATS = {
    TypeTag.INT8:       "<b",
    TypeTag.UINT8:      "<B",
    TypeTag.INT16:      "<h",
    TypeTag.UINT16:     "<H",
    TypeTag.INT32:      "<i",
    TypeTag.UINT32:     "<I",
    TypeTag.INT64:      "<q",
    TypeTag.UINT64:     "<Q",
    TypeTag.FLOAT32:    "<f",
    TypeTag.FLOAT64:    "<d",
    TypeTag.LONG_LONG:  "<q",
    TypeTag.ULONG_LONG: "<Q",
    TypeTag.BOOL:       "<?",
}


class VarSpec(NamedTuple):
    """A variable to write.  declared_width=None → the type's own width."""

    name:           str
    unit:           str
    type_id:        int
    declared_width: int | None = None

    @property
    def type_tag(self) -> TypeTag:
        try:
            return TRICK_TYPE_IDS[self.type_id]
        except KeyError:
            raise ValueError(f"{self.name!r}: unknown type id {self.type_id}") from None

    @property
    def header_width(self) -> int:
        if self.declared_width is not None:
            return self.declared_width
        return self.type_tag.width or BITFIELD_MAX_WIDTH

    @property
    def row_width(self) -> int:
        tag = self.type_tag
        if tag.is_bitfield:
            return min(self.header_width, BITFIELD_MAX_WIDTH)
        return tag.width


def _u32(v: int) -> bytes:
    """Pack one unsigned 32-bit int, little-endian."""
    return struct.pack("<I", v)


def _cstr(s: str) -> bytes:
    """Length-prefixed, NUL-terminated UTF-8 string."""
    b = s.encode("utf-8") + b"\x00"
    return _u32(len(b)) + b


def encode_format_tag(tag: bytes = DEFAULT_FORMAT_TAG) -> bytes:
    return bytes(tag[:FORMAT_TAG_SIZE]).ljust(FORMAT_TAG_SIZE, b"\x00")


def encode_header(specs: Sequence[VarSpec], format_tag: bytes = DEFAULT_FORMAT_TAG) -> bytes:
    out = bytearray()
    out += encode_format_tag(format_tag)
    out += _u32(len(specs))
    for spec in specs:
        out += _cstr(spec.name)
        out += _cstr(spec.unit)
        out += _u32(spec.type_id)
        out += _u32(spec.header_width)
    return bytes(out)


def encode_value(spec: VarSpec, value) -> bytes:
    """Pack one field at its intrinsic row width."""
    tag = spec.type_tag
    if tag.is_bitfield:
        signed = tag is TypeTag.BIT_FIELD
        return int(value).to_bytes(spec.row_width, "little", signed=signed)
    fmt = _PACK_FORMATS[tag]
    if tag in (TypeTag.FLOAT32, TypeTag.FLOAT64):
        return struct.pack(fmt, float(value))
    if tag is TypeTag.BOOL:
        return struct.pack(fmt, bool(value))
    return struct.pack(fmt, int(value))


def encode_row(specs: Sequence[VarSpec], values: Sequence) -> bytes:
    if len(values) != len(specs):
        raise ValueError(f"row has {len(values)} values for {len(specs)} variables")
    return b"".join(encode_value(s, v) for s, v in zip(specs, values))


def build_trk(
    specs: Sequence[VarSpec],
    rows: Iterable[Sequence],
    format_tag: bytes = DEFAULT_FORMAT_TAG,
) -> bytes:
    """Complete .trk file: header followed by every row."""
    out = bytearray(encode_header(specs, format_tag))
    for row in rows:
        out += encode_row(specs, row)
    return bytes(out)


def write_trk(
    path: str,
    specs: Sequence[VarSpec],
    rows: Iterable[Sequence],
    format_tag: bytes = DEFAULT_FORMAT_TAG,
) -> int:
    """Write a .trk file; returns the number of bytes written."""
    data = build_trk(specs, rows, format_tag)
    with open(path, "wb") as f:
        f.write(data)
    return len(data)


# ── Demo fixture ───────────────────────────────────────────────────────────────

CANNON_SPECS = [
    VarSpec("sys.exec.out.time", "s", 11),
    VarSpec("dyn.cannon.pos[0]", "m", 11),
    VarSpec("dyn.cannon.pos[1]", "m", 11),
]


def cannon_rows(n: int = 50, dt: float = 0.1, speed: float = 50.0, angle_deg: float = 30.0):
    """Ballistic trajectory rows (time, x, y) for the demo fixture."""
    vx = speed * math.cos(math.radians(angle_deg))
    vy = speed * math.sin(math.radians(angle_deg))
    for i in range(n):
        t = i * dt
        yield (t, vx * t, vy * t - 0.5 * 9.81 * t * t)
