"""Tests for the log assembler and LogDataset."""

import io
import struct

import numpy as np
import pytest

from TLDE.TMM.types import TypeTag
from TLDE.TDM.assembler import LogDataset, decode_log, _record_dtype
from TLDE.TDM.errors import DecodeError, TruncatedRow, UnknownType, UnsupportedType, TruncatedHeader
from TLDE.TDM.header import read_header
from TLDE.TDM.primitives import DEFAULT_CODECS, PrimitiveCodec
from TLDE.TGM.trk_writer import VarSpec, build_trk, encode_header


MIXED_ROWS = [
    (-128, 255, -32768, 65535, -2**31, 2**32 - 1, -2**63, 2**64 - 1, 0.5, -1.25, 2**62, 2**63, True),
    (127, 0, 32767, 0, 2**31 - 1, 0, 2**63 - 1, 0, -0.125, 3.0e300, -1, 1, False),
    (0, 1, -1, 1, -1, 1, -1, 1, 1.0, 0.1, 0, 0, True),
]


class TestCannonScenario:

    def test_columns(self, cannon_trk):
        ds = decode_log(cannon_trk)
        assert ds.row_count == 2
        assert ds.names() == ["sys.exec.out.time", "dyn.cannon.pos[0]", "dyn.cannon.pos[1]"]
        assert ds.columns[0].tolist() == [0.0, 0.1]
        assert ds.columns[1].tolist() == [0.0, 1.2]
        assert ds.columns[2].tolist() == [0.0, 0.4]

    def test_header_only(self, cannon_header):
        ds = decode_log(cannon_header)
        assert ds.row_count == 0
        assert len(ds.descriptors) == 3
        assert all(len(c) == 0 for c in ds.columns)

    def test_accepts_bytesio(self, cannon_trk):
        ds = decode_log(io.BytesIO(cannon_trk))
        assert ds.row_count == 2

    @pytest.mark.parametrize("vectorized", [True, False])
    def test_mid_row_cut(self, cannon_trk, vectorized):
        with pytest.raises(TruncatedRow) as exc:
            decode_log(cannon_trk[:-3], vectorized=vectorized)
        assert exc.value.offset == len(cannon_trk) - 8

    @pytest.mark.parametrize("vectorized", [True, False])
    def test_cut_inside_first_field(self, cannon_header, cannon_trk, vectorized):
        with pytest.raises(TruncatedRow) as exc:
            decode_log(cannon_trk[:len(cannon_header) + 1], vectorized=vectorized)
        assert exc.value.offset == len(cannon_header)

    def test_truncated_header_is_not_a_row_error(self, cannon_header):
        with pytest.raises(TruncatedHeader):
            decode_log(cannon_header[:-1])

    def test_unknown_type_in_header(self):
        bad = bytearray(encode_header([VarSpec("x", "", 11)]))
        struct.pack_into("<I", bad, len(bad) - 8, 3)
        with pytest.raises(UnknownType):
            decode_log(bytes(bad) + b"\x00" * 8)

    def test_errors_share_base(self, cannon_trk):
        with pytest.raises(DecodeError):
            decode_log(cannon_trk[:-1])
        with pytest.raises(ValueError):
            decode_log(cannon_trk[:-1])


class TestTypesAndLayout:

    @pytest.mark.parametrize("vectorized", [True, False])
    def test_every_width(self, mixed_specs, vectorized):
        ds = decode_log(build_trk(mixed_specs, MIXED_ROWS), vectorized=vectorized)
        assert ds.row_count == 3
        for i in range(len(mixed_specs)):
            expected = [float(r[i]) for r in MIXED_ROWS]
            if mixed_specs[i].type_tag is TypeTag.FLOAT32:
                expected = [float(np.float32(v)) for v in expected]
            assert ds.columns[i].tolist() == expected, mixed_specs[i].name

    def test_vectorized_matches_scalar(self, mixed_specs):
        trk = build_trk(mixed_specs, MIXED_ROWS * 20)
        fast = decode_log(trk)
        slow = decode_log(trk, vectorized=False)
        assert fast.names() == slow.names()
        for a, b in zip(fast.columns, slow.columns):
            assert np.array_equal(a, b)

    def test_bool_non_zero_byte(self):
        specs = [VarSpec("b", "", 17)]
        trk = encode_header(specs) + b"\x00\x01\x02\xff"
        assert decode_log(trk).columns[0].tolist() == [0.0, 1.0, 1.0, 1.0]
        assert decode_log(trk, vectorized=False).columns[0].tolist() == [0.0, 1.0, 1.0, 1.0]

    def test_declared_width_mismatch(self):
        specs = [VarSpec("t", "s", 11, declared_width=4), VarSpec("n", "", 6, declared_width=8)]
        ds = decode_log(build_trk(specs, [(1.5, 7), (2.5, -7)]))
        assert ds.columns[0].tolist() == [1.5, 2.5]
        assert ds.columns[1].tolist() == [7.0, -7.0]
        assert ds.descriptors[0].width_mismatch

    def test_bitfields(self):
        specs = [
            VarSpec("t", "s", 11),
            VarSpec("sb", "", 12, declared_width=1),
            VarSpec("ub", "", 13, declared_width=2),
        ]
        ds = decode_log(build_trk(specs, [(0.0, -1, 65535), (1.0, 5, 3)]))
        assert ds.columns[1].tolist() == [-1.0, 5.0]
        assert ds.columns[2].tolist() == [65535.0, 3.0]

    def test_unwired_type(self):
        specs = [VarSpec("t", "s", 11), VarSpec("n", "", 6)]
        codecs = {t: c for t, c in DEFAULT_CODECS.items() if t is not TypeTag.INT32}
        with pytest.raises(UnsupportedType) as exc:
            decode_log(build_trk(specs, [(0.0, 1)]), codecs=codecs)
        assert exc.value.type_tag is TypeTag.INT32

    def test_codec_dtype_width_mismatch_uses_scalar_path(self, cannon_header, cannon_trk):
        codecs = dict(DEFAULT_CODECS)
        f64 = DEFAULT_CODECS[TypeTag.FLOAT64]
        codecs[TypeTag.FLOAT64] = PrimitiveCodec(f64.width, f64.decode, "<f4")
        _, descs = read_header(io.BytesIO(cannon_header))
        assert _record_dtype(descs, codecs) is None
        ds = decode_log(cannon_trk, codecs=codecs)
        assert ds.columns[1].tolist() == [0.0, 1.2]
        assert ds.columns[2].tolist() == [0.0, 0.4]

    def test_record_dtype_is_packed(self, mixed_specs):
        _, descs = read_header(io.BytesIO(encode_header(mixed_specs)))
        record = _record_dtype(descs, DEFAULT_CODECS)
        assert record.itemsize == sum(d.width for d in descs)

    def test_zero_descriptors(self):
        empty = encode_header([])
        ds = decode_log(empty)
        assert ds.row_count == 0
        assert ds.descriptors == ()
        with pytest.raises(TruncatedRow) as exc:
            decode_log(empty + b"\x00")
        assert exc.value.offset == len(empty)


class TestLogDataset:

    @pytest.fixture
    def ds(self, cannon_trk):
        return decode_log(cannon_trk)

    def test_lookup_by_name(self, ds):
        assert ds.index_of("dyn.cannon.pos[0]") == 1
        assert ds.descriptor("dyn.cannon.pos[1]").unit == "m"
        assert ds.column("sys.exec.out.time").tolist() == [0.0, 0.1]

    def test_unknown_name(self, ds):
        with pytest.raises(KeyError):
            ds.column("nope")

    def test_series(self, ds):
        x, y = ds.series("dyn.cannon.pos[0]", "dyn.cannon.pos[1]")
        assert len(x) == len(y) == 2
        assert y.tolist() == [0.0, 0.4]

    def test_duplicate_names_first_wins(self):
        specs = [VarSpec("a", "", 11), VarSpec("a", "", 6)]
        ds = decode_log(build_trk(specs, [(2.5, 9)]))
        assert ds.column("a").tolist() == [2.5]

    def test_as_dict(self, ds):
        assert ds.as_dict()["dyn.cannon.pos[0]"] == [0.0, 1.2]

    def test_columns_read_only(self, ds):
        assert ds.columns[0].dtype == np.float64
        with pytest.raises(ValueError):
            ds.columns[0][0] = 1.0

    def test_rejects_unequal_columns(self, ds):
        with pytest.raises(ValueError):
            LogDataset(ds.version, ds.descriptors, (np.zeros(2), np.zeros(2), np.zeros(3)))
        with pytest.raises(ValueError):
            LogDataset(ds.version, ds.descriptors, (np.zeros(2),))
