#!/usr/bin/env python3
# =============================================================================
# validate.py — TLDE Self-Validation Suite
# =============================================================================
#
# Run directly:  python -m TLDE.TVM.validate
#
# Tests:
#   1. Type registry     — fixed table, reserved ids absent, widths
#   2. Primitives        — little-endian decoding, exact-width enforcement
#   3. Header            — descriptor count, cursor lands on first row
#   4. Rows / assembler  — cannon scenario, truncation, unknown / unsupported
#   5. Round trip        — writer → decoder, every type; vectorised vs scalar
# =============================================================================

import io
import operator
import struct
import sys

import numpy as np

from TLDE.TMM.types import TypeTag, DEFAULT_REGISTRY, TRICK_TYPE_IDS
from TLDE.TDM import primitives as prim
from TLDE.TDM.errors import (
    DecodeError, TruncatedHeader, UnknownType, TruncatedRow, UnsupportedType, InvalidText,
)
from TLDE.TDM.header import read_header
from TLDE.TDM.rows import row_size
from TLDE.TDM.assembler import decode_log, _record_dtype
from TLDE.TGM.trk_writer import VarSpec, CANNON_SPECS, build_trk, encode_header, encode_row

PASS = "[PASS]"
FAIL = "[FAIL]"
INFO = "[INFO]"

failures = 0


def check(label: str, condition: bool, detail: str = "") -> bool:
    global failures
    if condition:
        print(f"  {PASS} {label}")
    else:
        print(f"  {FAIL} {label}{(' -- ' + detail) if detail else ''}")
        failures += 1
    return condition


def raises(exc_type, fn, *args, **kwargs):
    """Return the exception if fn raises exc_type, else None."""
    try:
        fn(*args, **kwargs)
    except exc_type as e:
        return e
    return None


def section(title: str) -> None:
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def main() -> int:
    # =========================================================================
    # TEST 1 — Type Registry
    # =========================================================================
    section("TEST 1 — Type Registry")

    check("15 identifiers in the table", len(DEFAULT_REGISTRY) == 15,
          f"got {len(DEFAULT_REGISTRY)}")
    check("ids 3 and 16 are unassigned",
          DEFAULT_REGISTRY.lookup(3) is None and DEFAULT_REGISTRY.lookup(16) is None)
    check("11 -> double", DEFAULT_REGISTRY.lookup(11) is TypeTag.FLOAT64)
    check("17 -> bool", DEFAULT_REGISTRY.lookup(17) is TypeTag.BOOL)
    check("14 / 15 are 64-bit", TypeTag.LONG_LONG.width == 8 and TypeTag.ULONG_LONG.width == 8)
    check("bit fields have no intrinsic width",
          TypeTag.BIT_FIELD.width is None and TypeTag.UNSIGNED_BIT_FIELD.width is None)
    check("registry table is read-only",
          raises(TypeError, operator.setitem, DEFAULT_REGISTRY._table, 3, TypeTag.INT8) is not None)

    # =========================================================================
    # TEST 2 — Primitive Decoders
    # =========================================================================
    section("TEST 2 — Primitive Decoders")

    check("i8 0xFF = -1", prim.i8_from_bytes(b"\xff") == -1)
    check("u16 little-endian", prim.u16_from_bytes(b"\x34\x12") == 0x1234)
    check("i32 -2", prim.i32_from_bytes(struct.pack("<i", -2)) == -2)
    check("u64 max", prim.u64_from_bytes(b"\xff" * 8) == 2**64 - 1)
    check("f64 exact", prim.f64_from_bytes(struct.pack("<d", 0.1)) == 0.1)
    check("bool any non-zero byte", prim.bool_from_bytes(b"\x02") is True)
    check("short span rejected", raises(ValueError, prim.f64_from_bytes, b"\x00" * 4) is not None)
    check("c_string stops at NUL", prim.c_string(b"abc\x00def") == "abc")
    check("c_string without NUL", prim.c_string(b"abc") == "abc")
    check("c_string invalid UTF-8", raises(InvalidText, prim.c_string, b"\xff\xfe") is not None)
    check("bit field clamped to 4", prim.bitfield_width(8) == 4)
    check("every tag has a codec", set(prim.DEFAULT_CODECS) == set(TypeTag))

    # =========================================================================
    # TEST 3 — Header
    # =========================================================================
    section("TEST 3 — Header")

    header = encode_header(CANNON_SPECS)
    cursor = io.BytesIO(header + b"\x00" * 24)
    version, descs = read_header(cursor)
    check("3 descriptors", len(descs) == 3, f"got {len(descs)}")
    check("names in file order",
          [d.name for d in descs] == ["sys.exec.out.time", "dyn.cannon.pos[0]", "dyn.cannon.pos[1]"])
    check("units", [d.unit for d in descs] == ["s", "m", "m"])
    check("cursor on first row byte", cursor.tell() == len(header),
          f"tell={cursor.tell()} header={len(header)}")
    check("format tag kept", version.text == "Trick-10-L", repr(version.text))

    for cut in (0, 5, 12, len(header) - 1):
        check(f"truncated header at {cut} bytes -> TruncatedHeader",
              raises(TruncatedHeader, read_header, io.BytesIO(header[:cut])) is not None)

    # =========================================================================
    # TEST 4 — Rows / Assembler
    # =========================================================================
    section("TEST 4 — Rows / Assembler")

    trk = build_trk(CANNON_SPECS, [(0.0, 0.0, 0.0), (0.1, 1.2, 0.4)])
    ds = decode_log(trk)
    check("cannon: 2 rows", ds.row_count == 2)
    check("cannon: time column", ds.columns[0].tolist() == [0.0, 0.1])
    check("cannon: pos[0] column", ds.columns[1].tolist() == [0.0, 1.2])
    check("cannon: pos[1] column", ds.columns[2].tolist() == [0.0, 0.4])

    err = raises(TruncatedRow, decode_log, trk[:-3])
    check("mid-row cut -> TruncatedRow", err is not None)
    if err is not None:
        check("TruncatedRow offset = start of short field",
              err.offset == len(trk) - 8, f"offset={err.offset}")

    bad = bytearray(encode_header([VarSpec("x", "", 11)]))
    struct.pack_into("<I", bad, len(bad) - 8, 3)   # type id -> reserved 3
    check("unknown type id -> UnknownType",
          isinstance(raises(DecodeError, decode_log, bytes(bad) + b"\x00" * 8), UnknownType))

    mismatched = build_trk([VarSpec("t", "s", 11, declared_width=4),
                            VarSpec("n", "", 6, declared_width=8)], [(1.5, 7), (2.5, -7)])
    ds = decode_log(mismatched)
    check("declared width ignored for row layout",
          ds.columns[0].tolist() == [1.5, 2.5] and ds.columns[1].tolist() == [7.0, -7.0])

    no_ints = {t: c for t, c in prim.DEFAULT_CODECS.items() if t is not TypeTag.INT32}
    err = raises(UnsupportedType, decode_log, mismatched, codecs=no_ints)
    check("unwired type -> UnsupportedType", err is not None)

    # =========================================================================
    # TEST 5 — Round trip
    # =========================================================================
    section("TEST 5 — Round trip")

    specs = [VarSpec(f"v{ident}", "--", ident) for ident in sorted(TRICK_TYPE_IDS)]
    rng = np.random.default_rng(7)
    rows = []
    for _ in range(64):
        row = []
        for s in specs:
            tag = s.type_tag
            if tag in (TypeTag.FLOAT32, TypeTag.FLOAT64):
                row.append(float(rng.normal()))
            elif tag is TypeTag.BOOL:
                row.append(bool(rng.integers(0, 2)))
            elif tag.is_bitfield:
                lo = -(2**31) if tag is TypeTag.BIT_FIELD else 0
                hi = 2**31 if tag is TypeTag.BIT_FIELD else 2**32
                row.append(int(rng.integers(lo, hi)))
            else:
                info = np.iinfo(np.dtype(tag.dtype))
                row.append(int(rng.integers(info.min, info.max, endpoint=True, dtype=np.dtype(tag.dtype))))
        rows.append(row)

    trk = build_trk(specs, rows)
    fast = decode_log(trk)
    slow = decode_log(trk, vectorized=False)
    check("all 15 types decode: 64 rows", fast.row_count == 64 and slow.row_count == 64)
    check("with bit fields: default == scalar",
          all(np.array_equal(a, b) for a, b in zip(fast.columns, slow.columns)))

    # Bit fields have no dtype, so only the other 13 types take the numpy path.
    keep = [i for i, s in enumerate(specs) if not s.type_tag.is_bitfield]
    flat_specs = [specs[i] for i in keep]
    flat_trk = build_trk(flat_specs, [[r[i] for i in keep] for r in rows])
    flat_descs = read_header(io.BytesIO(flat_trk))[1]
    check("13 non-bit-field types take the vectorised path",
          _record_dtype(flat_descs, prim.DEFAULT_CODECS) is not None)
    flat_fast = decode_log(flat_trk)
    flat_slow = decode_log(flat_trk, vectorized=False)
    check("vectorised == scalar",
          flat_fast.row_count == 64
          and all(np.array_equal(a, b) for a, b in zip(flat_fast.columns, flat_slow.columns)))

    f32_idx = [s.type_tag for s in specs].index(TypeTag.FLOAT32)
    expected_f32 = [float(np.float32(r[f32_idx])) for r in rows]
    check("float32 widened exactly", fast.columns[f32_idx].tolist() == expected_f32)
    check("row size = sum of intrinsic widths",
          row_size(fast.descriptors) == len(encode_row(specs, rows[0])))

    # =========================================================================
    # Summary
    # =========================================================================
    print("\n" + "=" * 60)
    if failures == 0:
        print(f"  ALL TESTS PASSED")
    else:
        print(f"  {failures} TEST(S) FAILED")
    print("=" * 60 + "\n")
    return 0 if failures == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
