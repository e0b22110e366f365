# tests/unit/server/test_site_routes.py
"""Tests for impact site endpoints."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from impactsim.config import SimConfig
from impactsim.server import create_app
from impactsim.sites import SiteRegistry

LAUNCH = {
    "impact": {"diameter": 10.0, "velocity": 11.0, "angle": 45.0},
    "location": {"lat": 40.7, "lng": -74.0, "address": "New York"},
}


@pytest.fixture
def registry():
    return SiteRegistry(SimConfig(seed=1))


@pytest.fixture
def client(registry):
    return TestClient(create_app(registry=registry))


def test_launch_site(client, registry):
    """POST /sites launches and activates a site."""
    response = client.post("/sites", json=LAUNCH)
    assert response.status_code == 200
    data = response.json()
    assert data["active"] is True
    assert data["location"]["address"] == "New York"
    assert data["result"]["crater_diameter_m"] > 0.0
    assert registry.active_id == data["site_id"]


def test_launch_rejects_invalid_impact(client, registry):
    bad = {**LAUNCH, "impact": {**LAUNCH["impact"], "angle": -10.0}}
    response = client.post("/sites", json=bad)
    assert response.status_code == 422
    assert len(registry) == 0


def test_launch_rejects_invalid_location(client):
    bad = {**LAUNCH, "location": {"lat": 120.0, "lng": 0.0}}
    response = client.post("/sites", json=bad)
    assert response.status_code == 422


def test_list_and_get_sites(client):
    first = client.post("/sites", json=LAUNCH).json()
    second = client.post("/sites", json=LAUNCH).json()

    response = client.get("/sites")
    assert response.status_code == 200
    data = response.json()
    assert data["active_id"] == second["site_id"]
    assert [s["site_id"] for s in data["sites"]] == [first["site_id"], second["site_id"]]
    assert [s["active"] for s in data["sites"]] == [False, True]

    response = client.get(f"/sites/{first['site_id']}")
    assert response.status_code == 200
    assert response.json()["site_id"] == first["site_id"]


def test_get_unknown_site(client):
    response = client.get("/sites/impact-missing")
    assert response.status_code == 404


def test_clear_site(client):
    site = client.post("/sites", json=LAUNCH).json()
    response = client.delete(f"/sites/{site['site_id']}")
    assert response.status_code == 200
    assert response.json() == {"cleared": site["site_id"]}
    assert client.get(f"/sites/{site['site_id']}").status_code == 404
    assert client.delete(f"/sites/{site['site_id']}").status_code == 404


def test_clear_all_sites(client):
    for _ in range(3):
        client.post("/sites", json=LAUNCH)
    response = client.delete("/sites")
    assert response.status_code == 200
    assert response.json() == {"cleared": 3}
    data = client.get("/sites").json()
    assert data["sites"] == []
    assert data["active_id"] is None
    assert client.get("/health").json()["sites"] == 0


def test_run_frames(client):
    site = client.post("/sites", json=LAUNCH).json()
    response = client.post(f"/sites/{site['site_id']}/frames", json={"every": 120, "include_particles": False})
    assert response.status_code == 200
    data = response.json()
    assert data["duration_s"] == 18.0
    assert data["every"] == 120
    frames = data["frames"]
    assert len(frames) == 9
    assert all("particles" not in f for f in frames)
    assert frames[0]["phase"] == "atmospheric_entry"
    assert frames[0]["particle_count"] > 0
    assert frames[-1]["phase"] == "thermal_effects"


def test_run_frames_with_particles(client):
    site = client.post("/sites", json=LAUNCH).json()
    response = client.post(f"/sites/{site['site_id']}/frames", json={"every": 600})
    assert response.status_code == 200
    frames = response.json()["frames"]
    assert frames[0]["particles"]
    assert set(frames[0]["particles"][0]) == {"x", "y", "alpha", "rotation", "size", "kind"}


def test_run_frames_restart(client):
    site = client.post("/sites", json=LAUNCH).json()
    url = f"/sites/{site['site_id']}/frames"
    first = client.post(url, json={"every": 300, "include_particles": False}).json()
    again = client.post(url, json={"every": 300, "include_particles": False, "restart": True}).json()
    assert len(first["frames"]) == len(again["frames"])
    assert first["frames"][0]["tick"] == again["frames"][0]["tick"] == 300


def test_run_frames_unknown_site(client):
    response = client.post("/sites/impact-missing/frames", json={})
    assert response.status_code == 404


def test_concurrent_frame_requests_are_serialized(client):
    site = client.post("/sites", json=LAUNCH).json()
    url = f"/sites/{site['site_id']}/frames"

    def fetch(restart):
        response = client.post(url, json={"every": 60, "include_particles": False, "restart": restart})
        assert response.status_code == 200
        return [f["tick"] for f in response.json()["frames"]]

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(fetch, [True, True, False, True]))

    assert results == [list(range(60, 1081, 60))] * 4


def test_launch_rejects_overflowing_impact(client, registry):
    bad = {**LAUNCH, "impact": {**LAUNCH["impact"], "diameter": 1e104}}
    response = client.post("/sites", json=bad)
    assert response.status_code == 422
    assert len(registry) == 0
