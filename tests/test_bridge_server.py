"""Tests for the Flask bridge in tools/."""

import io
import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "tools"))

from trk_bridge_server import create_app  # noqa: E402
from TLDE.TGM.trk_writer import VarSpec, build_trk  # noqa: E402


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def _reject_constant(token):
    raise ValueError(f"non-standard JSON token {token}")


def _post(client, trk, **form):
    data = {"trk": (io.BytesIO(trk), "log_cannon.trk")}
    data.update(form)
    return client.post("/trk-bridge/decode", data=data, content_type="multipart/form-data")


class TestBridge:

    def test_health(self, client):
        resp = client.get("/trk-bridge/health")
        assert resp.status_code == 200
        assert resp.get_json() == {"status": "ok"}

    def test_summary(self, client, cannon_trk):
        resp = _post(client, cannon_trk)
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["row_count"] == 2
        assert [v["name"] for v in body["variables"]][0] == "sys.exec.out.time"
        assert "points" not in body

    def test_points(self, client, cannon_trk):
        resp = _post(client, cannon_trk, x="sys.exec.out.time", y="dyn.cannon.pos[1]")
        assert resp.status_code == 200
        assert resp.get_json()["points"] == [[0.0, 0.0], [0.1, 0.4]]

    def test_missing_field(self, client):
        resp = client.post("/trk-bridge/decode", data={}, content_type="multipart/form-data")
        assert resp.status_code == 400

    def test_decode_error(self, client, cannon_trk):
        resp = _post(client, cannon_trk[:-3])
        assert resp.status_code == 422
        body = resp.get_json()
        assert body["kind"] == "TruncatedRow"
        assert body["offset"] == len(cannon_trk) - 8

    def test_unknown_variable(self, client, cannon_trk):
        resp = _post(client, cannon_trk, x="sys.exec.out.time", y="nope")
        assert resp.status_code == 404
        assert resp.get_json()["kind"] == "UnknownVariable"

    def test_non_finite_samples_are_strict_json(self, client):
        specs = [VarSpec("t", "s", 11), VarSpec("y", "", 11)]
        trk = build_trk(specs, [(0.0, float("nan")), (1.0, 2.0)])
        resp = _post(client, trk, x="t", y="y")
        assert resp.status_code == 200
        body = json.loads(resp.get_data(as_text=True), parse_constant=_reject_constant)
        assert body["points"] == [[0.0, None], [1.0, 2.0]]
