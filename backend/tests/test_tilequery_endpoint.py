from __future__ import annotations

import base64

from fastapi.testclient import TestClient

from main import app
from tile_fixtures import feature, make_tile


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def test_health():
    client = TestClient(app)
    assert client.get("/health").json() == {"ok": True}


def test_tilequery_endpoint_returns_feature_collection():
    buf = make_tile({"poi": [feature("POINT(2048 2048)", {"name": "center"})]}, compress=True)
    client = TestClient(app)
    resp = client.post(
        "/tilequery",
        json={
            "tiles": [{"buffer": _b64(buf), "z": 0, "x": 0, "y": 0}],
            "lnglat": [0.0, 0.0],
            "options": {"limit": 1, "geometry": "point"},
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["type"] == "FeatureCollection"
    (f,) = data["features"]
    assert f["properties"]["name"] == "center"
    assert f["properties"]["tilequery"] == {"distance": 0.0, "geometry": "point", "layer": "poi"}


def test_tilequery_endpoint_rejects_bad_options():
    buf = make_tile({"poi": [feature("POINT(2048 2048)", {"name": "center"})]})
    client = TestClient(app)
    resp = client.post(
        "/tilequery",
        json={
            "tiles": [{"buffer": _b64(buf), "z": 0, "x": 0, "y": 0}],
            "lnglat": [0.0, 0.0],
            "options": {"limit": 5000},
        },
    )
    assert resp.status_code == 422
    assert resp.json()["detail"] == "'limit' must be 1000 or less"


def test_tilequery_endpoint_reports_broken_tiles():
    client = TestClient(app)
    resp = client.post(
        "/tilequery",
        json={
            "tiles": [{"buffer": _b64(b"\x1f\x8bbroken"), "z": 0, "x": 0, "y": 0}],
            "lnglat": [0.0, 0.0],
        },
    )
    assert resp.status_code == 400
    assert "failed to decompress tile 0/0/0" in resp.json()["detail"]
