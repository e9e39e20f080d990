import pytest

from TLDE.TGM.trk_writer import VarSpec, CANNON_SPECS, build_trk, encode_header


@pytest.fixture
def cannon_specs():
    return list(CANNON_SPECS)


@pytest.fixture
def cannon_rows():
    return [(0.0, 0.0, 0.0), (0.1, 1.2, 0.4)]


@pytest.fixture
def cannon_trk(cannon_specs, cannon_rows):
    return build_trk(cannon_specs, cannon_rows)


@pytest.fixture
def cannon_header(cannon_specs):
    return encode_header(cannon_specs)


@pytest.fixture
def mixed_specs():
    """One variable of every integer / float / bool width."""
    return [
        VarSpec("c", "", 1),
        VarSpec("uc", "", 2),
        VarSpec("s", "", 4),
        VarSpec("us", "", 5),
        VarSpec("i", "", 6),
        VarSpec("ui", "", 7),
        VarSpec("l", "", 8),
        VarSpec("ul", "", 9),
        VarSpec("f", "", 10),
        VarSpec("d", "", 11),
        VarSpec("ll", "", 14),
        VarSpec("ull", "", 15),
        VarSpec("b", "", 17),
    ]
