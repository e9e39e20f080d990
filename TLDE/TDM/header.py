# =============================================================================
# header.py — .trk Descriptor Reader
# =============================================================================
#
# Parses the self-describing front of a .trk file:
#
#   format tag     10 B    opaque, e.g. b"Trick-10-L" (kept, not interpreted)
#   num_params     u32
#   per variable:
#     name_len     u32     then name_len bytes, NUL-terminated UTF-8
#     unit_len     u32     then unit_len bytes, NUL-terminated UTF-8
#     type_id      u32     resolved through the TypeRegistry
#     size         u32     declared byte width (informational only)
#
# On success the cursor is left on the first byte of the first row.
# =============================================================================

from __future__ import annotations
import io
from dataclasses import dataclass

from TLDE.TMM.constants import FORMAT_TAG_SIZE, COUNT_SIZE
from TLDE.TMM.types import TypeTag, TypeRegistry, DEFAULT_REGISTRY
from .errors import TruncatedHeader, UnknownType, InvalidText
from .primitives import u32_from_bytes, c_string, bitfield_width
from .stream import read_exact


@dataclass(frozen=True)
class FormatVersion:
    raw: bytes

    @property
    def text(self) -> str:
        """Printable form of the tag (undecodable bytes replaced)."""
        return self.raw.split(b"\x00", 1)[0].decode("ascii", errors="replace")

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class VariableDescriptor:
    """One logged variable.  Order in the header = order within every row."""

    name:           str
    unit:           str
    type_id:        int
    type_tag:       TypeTag
    declared_width: int

    @property
    def width(self) -> int:
        """Bytes this variable occupies in a row (from the type, not the header)."""
        if self.type_tag.is_bitfield:
            return bitfield_width(self.declared_width)
        return self.type_tag.width

    @property
    def width_mismatch(self) -> bool:
        return self.declared_width != self.width


def _read_u32(cursor: io.BytesIO, what: str) -> int:
    return u32_from_bytes(read_exact(cursor, COUNT_SIZE, TruncatedHeader, what))


def _read_text(cursor: io.BytesIO, what: str) -> str:
    length = _read_u32(cursor, f"{what} length")
    start  = cursor.tell()
    raw    = read_exact(cursor, length, TruncatedHeader, what)
    try:
        return c_string(raw)
    except InvalidText as exc:
        raise exc.at(start)


def read_variable_descriptor(
    cursor: io.BytesIO,
    registry: TypeRegistry = DEFAULT_REGISTRY,
) -> VariableDescriptor:
    """Read one descriptor record starting at the cursor."""
    name_start = cursor.tell()
    name = _read_text(cursor, "variable name")
    if not name:
        raise InvalidText("variable name is empty", offset=name_start)
    unit = _read_text(cursor, f"unit of {name!r}")

    id_offset = cursor.tell()
    type_id   = _read_u32(cursor, f"type id of {name!r}")
    type_tag  = registry.lookup(type_id)
    if type_tag is None:
        raise UnknownType(type_id, offset=id_offset)

    declared_width = _read_u32(cursor, f"size of {name!r}")

    return VariableDescriptor(
        name=name,
        unit=unit,
        type_id=type_id,
        type_tag=type_tag,
        declared_width=declared_width,
    )


def read_header(
    cursor: io.BytesIO,
    registry: TypeRegistry = DEFAULT_REGISTRY,
) -> tuple[FormatVersion, list[VariableDescriptor]]:
    """
    Parse the header region.

    Returns
    -------
    version     : FormatVersion
    descriptors : list[VariableDescriptor] — exactly num_params, in file order

    Raises
    ------
    TruncatedHeader  if the input ends before num_params records are read
    UnknownType      if a type identifier is not in `registry`
    InvalidText      if a name or unit is not valid UTF-8 (or a name is empty)
    """
    version = FormatVersion(read_exact(cursor, FORMAT_TAG_SIZE, TruncatedHeader, "format tag"))
    num_params = _read_u32(cursor, "parameter count")

    descriptors = []
    for _ in range(num_params):
        descriptors.append(read_variable_descriptor(cursor, registry))

    return version, descriptors
