"""Tests for the little-endian primitive decoders."""

import struct

import pytest

from TLDE.TMM.types import TypeTag
from TLDE.TDM import primitives as prim
from TLDE.TDM.errors import InvalidText


class TestIntegers:

    @pytest.mark.parametrize("fn,fmt,value", [
        (prim.i8_from_bytes, "<b", -128),
        (prim.u8_from_bytes, "<B", 255),
        (prim.i16_from_bytes, "<h", -12345),
        (prim.u16_from_bytes, "<H", 65535),
        (prim.i32_from_bytes, "<i", -2**31),
        (prim.u32_from_bytes, "<I", 2**32 - 1),
        (prim.i64_from_bytes, "<q", -2**63),
        (prim.u64_from_bytes, "<Q", 2**64 - 1),
    ])
    def test_decode(self, fn, fmt, value):
        assert fn(struct.pack(fmt, value)) == value

    def test_little_endian(self):
        assert prim.u32_from_bytes(b"\x01\x00\x00\x00") == 1
        assert prim.i16_from_bytes(b"\x00\x80") == -32768

    @pytest.mark.parametrize("fn,size", [
        (prim.i8_from_bytes, 1),
        (prim.u16_from_bytes, 2),
        (prim.i32_from_bytes, 4),
        (prim.u64_from_bytes, 8),
        (prim.f64_from_bytes, 8),
    ])
    def test_wrong_length_rejected(self, fn, size):
        with pytest.raises(ValueError):
            fn(b"\x00" * (size - 1))
        with pytest.raises(ValueError):
            fn(b"\x00" * (size + 1))


class TestFloatsAndBool:

    def test_f64(self):
        assert prim.f64_from_bytes(struct.pack("<d", 1.2)) == 1.2

    def test_f32_widening_is_exact(self):
        raw = struct.pack("<f", 0.1)
        assert prim.f32_from_bytes(raw) == struct.unpack("<f", raw)[0]

    def test_bool(self):
        assert prim.bool_from_bytes(b"\x00") is False
        assert prim.bool_from_bytes(b"\x01") is True
        assert prim.bool_from_bytes(b"\x80") is True


class TestBitFields:

    def test_width_clamped(self):
        assert prim.bitfield_width(1) == 1
        assert prim.bitfield_width(4) == 4
        assert prim.bitfield_width(8) == 4

    def test_signed_and_unsigned(self):
        assert prim.bitfield_from_bytes(b"\xff\xff", signed=True) == -1
        assert prim.bitfield_from_bytes(b"\xff\xff", signed=False) == 0xFFFF
        assert prim.bitfield_from_bytes(b"\x01\x02\x03", signed=False) == 0x030201

    def test_bad_width(self):
        with pytest.raises(ValueError):
            prim.bitfield_from_bytes(b"", signed=False)
        with pytest.raises(ValueError):
            prim.bitfield_from_bytes(b"\x00" * 5, signed=False)


class TestCString:

    def test_stops_at_first_nul(self):
        assert prim.c_string(b"sys.exec.out.time\x00\x00junk") == "sys.exec.out.time"

    def test_whole_span_without_nul(self):
        assert prim.c_string(b"m") == "m"

    def test_empty(self):
        assert prim.c_string(b"\x00") == ""
        assert prim.c_string(b"") == ""

    def test_utf8(self):
        assert prim.c_string("µs".encode("utf-8") + b"\x00") == "µs"

    def test_invalid_text(self):
        with pytest.raises(InvalidText):
            prim.c_string(b"\xc3\x28\x00")


class TestCodecTable:

    def test_every_tag_wired(self):
        assert set(prim.DEFAULT_CODECS) == set(TypeTag)

    def test_codecs_widen_to_float(self):
        codec = prim.DEFAULT_CODECS[TypeTag.INT16]
        value = codec.decode(struct.pack("<h", -5))
        assert value == -5.0 and isinstance(value, float)
        assert prim.DEFAULT_CODECS[TypeTag.BOOL].decode(b"\x07") == 1.0

    def test_widths_match_tags(self):
        for tag, codec in prim.DEFAULT_CODECS.items():
            assert codec.width == tag.width
