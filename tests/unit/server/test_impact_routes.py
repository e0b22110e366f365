# tests/unit/server/test_impact_routes.py
"""Tests for stateless impact endpoints."""

import pytest
from fastapi.testclient import TestClient

from impactsim.server import create_app
from impactsim.server.body_cache import body_cache

SMALL = {"diameter": 10.0, "velocity": 11.0, "angle": 45.0}


@pytest.fixture
def client():
    body_cache.clear()
    return TestClient(create_app())


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["sites"] == 0
    assert data["body_cache"] == {"entries": 0, "hits": 0, "misses": 0}


def test_impact_defaults(client):
    """POST /impact with an empty body uses the reference impactor."""
    response = client.post("/impact", json={})
    assert response.status_code == 200
    data = response.json()
    assert data["parameters"]["density"] == 3000.0
    assert data["result"]["energy_megatons"] == pytest.approx(75.09, rel=1e-3)
    assert data["severity"]["level"] == "high"
    assert data["entry"]["fragments"] is True
    assert data["fireball"]["luminosity"] == "bright"
    assert data["ejecta"]["max_throw_m"] > 0.0


def test_impact_composition_sets_density(client):
    response = client.post("/impact", json={**SMALL, "composition": "iron"})
    assert response.status_code == 200
    assert response.json()["parameters"]["density"] == 7800.0


def test_impact_rejects_invalid_values(client):
    """Physical validation failures come back as 422 with every error."""
    response = client.post("/impact", json={**SMALL, "diameter": -5.0, "angle": 95.0})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert len(detail) == 2


def test_impact_rejects_unknown_composition(client):
    response = client.post("/impact", json={**SMALL, "composition": "cheese"})
    assert response.status_code == 422


def test_body_is_reproducible(client):
    first = client.post("/body", json=SMALL)
    assert first.status_code == 200
    second = client.post("/body", json=SMALL)
    assert first.json() == second.json()
    data = first.json()
    assert 20 <= len(data["body"]["vertex_ring"]) <= 50
    assert set(data["recipe"]["hashes"]) == {"recipe", "body"}
    assert len(body_cache) == 1
    assert body_cache.stats() == {"entries": 1, "hits": 1, "misses": 1}
    assert client.get("/health").json()["body_cache"]["hits"] == 1


def test_body_with_crater(client):
    response = client.post("/body", json={**SMALL, "include_crater": True, "base_radius": 40.0})
    assert response.status_code == 200
    data = response.json()
    assert data["body"]["base_radius"] == 40.0
    assert "crater" in data
    assert data["recipe"]["crater_seed"] == data["crater"]["seed"]
    assert "crater" in data["recipe"]["hashes"]


def test_timeline(client):
    response = client.post("/timeline", json=SMALL)
    assert response.status_code == 200
    data = response.json()
    assert data["total_duration_s"] == 18.0
    assert [p["duration_s"] for p in data["phases"]] == [3.0, 2.0, 1.0, 4.0, 8.0]


def test_timeline_rejects_invalid(client):
    response = client.post("/timeline", json={**SMALL, "velocity": 0.0})
    assert response.status_code == 422


@pytest.mark.parametrize(
    "overrides",
    [
        {"velocity": 1e160},
        {"diameter": 1e100},
        {"diameter": 1e104},
        {"population_density": 1e9},
    ],
)
def test_impact_rejects_overflowing_inputs(client, overrides):
    """Inputs whose energy or casualty count would overflow are a 422, not a 500."""
    for path in ("/impact", "/timeline", "/body"):
        response = client.post(path, json={**SMALL, **overrides})
        assert response.status_code == 422
        assert response.json()["detail"]
