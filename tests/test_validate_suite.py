from TLDE.TVM import validate


def test_self_validation_passes(capsys):
    assert validate.main() == 0
    assert "ALL TESTS PASSED" in capsys.readouterr().out
