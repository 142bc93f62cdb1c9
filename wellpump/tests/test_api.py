"""API tests for the pump catalog and selection routes (FastAPI TestClient).

Tests cover:
- GET filters and their precedence, parameter validation
- POST / PUT / DELETE status codes and bodies
- {"error": ...} bodies for 400/404/409/500
- Selection, filter and total head routes
- Health check
"""

import inspect
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from wellpump.api.app import create_app
from wellpump.api.routes.selection import filter_pumps, select_pumps

from conftest import SEED_FLOWS


@pytest.fixture
def client(db_manager, seeded_catalog):
    app = create_app(db_manager=db_manager, pump_catalog=seeded_catalog)
    return TestClient(app)


def _flows(response):
    return [p["gpm_value"] for p in response.json()["pumps"]]


def _id_of(client, name):
    pumps = client.get("/api/pumps", params={"search": name}).json()["pumps"]
    return next(p["id"] for p in pumps if p["name"] == name)


# ── Tests: GET /api/pumps ─────────────────────────────────────────────────


class TestListPumps:

    def test_all_sorted(self, client):
        response = client.get("/api/pumps")
        assert response.status_code == 200
        assert _flows(response) == SEED_FLOWS

    def test_gpm_range(self, client):
        response = client.get("/api/pumps", params={"minGPM": 7, "maxGPM": 13})
        assert _flows(response) == [7, 10, 13]

    def test_efficiency_range(self, client):
        response = client.get("/api/pumps", params={"minEfficiency": 185, "maxEfficiency": 495})
        assert _flows(response) == [5, 7, 10, 13]

    def test_search(self, client):
        response = client.get("/api/pumps", params={"search": "18"})
        assert [p["name"] for p in response.json()["pumps"]] == ["18gpm"]

    def test_search_takes_precedence(self, client):
        response = client.get("/api/pumps", params={"search": "25", "minGPM": 0, "maxGPM": 10})
        assert _flows(response) == [25]

    def test_half_pair_is_400(self, client):
        response = client.get("/api/pumps", params={"minGPM": 5})
        assert response.status_code == 400
        assert "minGPM" in response.json()["error"]

    def test_non_numeric_is_400(self, client):
        response = client.get("/api/pumps", params={"minGPM": "lots", "maxGPM": 10})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_pump_shape(self, client):
        pump = client.get("/api/pumps").json()["pumps"][0]
        assert set(pump) == {
            "id", "name", "gpm_value", "efficiency_min", "efficiency_max",
            "image_path", "head_ft", "created_at", "updated_at",
        }


# ── Tests: POST /api/pumps ────────────────────────────────────────────────


class TestCreatePump:

    def test_create(self, client):
        response = client.post("/api/pumps", json={
            "name": "40gpm",
            "gpm_value": 40,
            "efficiency_min": 90,
            "efficiency_max": 310,
        })

        assert response.status_code == 201
        pump = response.json()["pump"]
        assert pump["name"] == "40gpm"
        assert pump["image_path"] == ""
        assert isinstance(pump["id"], int)
        assert _flows(client.get("/api/pumps")) == SEED_FLOWS + [40]

    def test_duplicate_name_is_409(self, client):
        response = client.post("/api/pumps", json={
            "name": "18gpm",
            "gpm_value": 19,
            "efficiency_min": 90,
            "efficiency_max": 310,
        })

        assert response.status_code == 409
        assert "already exists" in response.json()["error"]
        assert _flows(client.get("/api/pumps")) == SEED_FLOWS

    def test_missing_field_is_400(self, client):
        response = client.post("/api/pumps", json={"name": "x", "gpm_value": 3})
        assert response.status_code == 400
        assert "efficiency_min" in response.json()["error"]

    def test_negative_gpm_is_400(self, client):
        response = client.post("/api/pumps", json={
            "name": "neg", "gpm_value": -1, "efficiency_min": 1, "efficiency_max": 2,
        })
        assert response.status_code == 400


# ── Tests: PUT /api/pumps ─────────────────────────────────────────────────


class TestUpdatePump:

    def test_partial_update(self, client):
        pump_id = _id_of(client, "13gpm")

        response = client.put("/api/pumps", json={"id": pump_id, "image_path": "/pumps/new.png"})

        assert response.status_code == 200
        pump = response.json()["pump"]
        assert pump["id"] == pump_id
        assert pump["image_path"] == "/pumps/new.png"
        assert pump["name"] == "13gpm"

    def test_unknown_id_is_404(self, client):
        before = client.get("/api/pumps").json()

        response = client.put("/api/pumps", json={"id": 9999, "name": "ghost"})

        assert response.status_code == 404
        assert response.json() == {"error": "Pump not found"}
        assert client.get("/api/pumps").json() == before

    def test_missing_id_is_400(self, client):
        response = client.put("/api/pumps", json={"name": "ghost"})
        assert response.status_code == 400
        assert response.json()["error"] == "Pump ID is required"

    def test_no_fields_is_400(self, client):
        response = client.put("/api/pumps", json={"id": _id_of(client, "13gpm")})
        assert response.status_code == 400

    def test_unknown_field_is_400(self, client):
        response = client.put("/api/pumps", json={"id": _id_of(client, "13gpm"), "created_at": "x"})
        assert response.status_code == 400

    def test_duplicate_name_is_409(self, client):
        response = client.put("/api/pumps", json={"id": _id_of(client, "13gpm"), "name": "18gpm"})
        assert response.status_code == 409


# ── Tests: DELETE /api/pumps ──────────────────────────────────────────────


class TestDeletePump:

    def test_delete(self, client):
        pump_id = _id_of(client, "7gpm")

        response = client.delete("/api/pumps", params={"id": pump_id})

        assert response.status_code == 200
        assert response.json() == {"message": "Pump deleted successfully"}
        assert 7 not in _flows(client.get("/api/pumps"))

    def test_delete_twice_is_404(self, client):
        pump_id = _id_of(client, "7gpm")
        client.delete("/api/pumps", params={"id": pump_id})

        response = client.delete("/api/pumps", params={"id": pump_id})

        assert response.status_code == 404
        assert response.json() == {"error": "Pump not found"}

    def test_missing_id_is_400(self, client):
        response = client.delete("/api/pumps")
        assert response.status_code == 400
        assert response.json() == {"error": "Pump ID is required"}


# ── Tests: Unexpected Failures ────────────────────────────────────────────


class TestServerErrors:

    @pytest.fixture
    def broken_client(self):
        catalog = MagicMock()
        catalog.get_all_pumps.side_effect = RuntimeError("disk on fire")
        catalog.insert_pump.side_effect = RuntimeError("disk on fire")
        catalog.update_pump.side_effect = RuntimeError("disk on fire")
        catalog.delete_pump.side_effect = RuntimeError("disk on fire")
        app = create_app(db_manager=MagicMock(), pump_catalog=catalog)
        return TestClient(app)

    def test_get_500(self, broken_client):
        response = broken_client.get("/api/pumps")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch pumps"}

    def test_post_500(self, broken_client):
        response = broken_client.post("/api/pumps", json={
            "name": "x", "gpm_value": 1, "efficiency_min": 1, "efficiency_max": 2,
        })
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create pump"}

    def test_put_500(self, broken_client):
        response = broken_client.put("/api/pumps", json={"id": 1, "name": "y"})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to update pump"}

    def test_delete_500(self, broken_client):
        response = broken_client.delete("/api/pumps", params={"id": 1})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to delete pump"}

    def test_health_degraded(self, broken_client):
        broken_client.app.state.pump_catalog.count_pumps.side_effect = RuntimeError("down")
        body = broken_client.get("/api/health").json()
        assert body["status"] == "degraded"
        assert body["pumps"] is None


# ── Tests: Selection Routes ───────────────────────────────────────────────


class TestSelectionRoutes:

    def test_total_head(self, client):
        response = client.get("/api/selection/head", params={
            "pressure": 60, "static_water_level": 100, "pump_setting_depth": 7,
        })
        assert response.status_code == 200
        assert response.json()["total_head"] == pytest.approx(245.6)

    def test_total_head_missing_param_is_400(self, client):
        response = client.get("/api/selection/head", params={"pressure": 60})
        assert response.status_code == 400

    def test_select_bracket(self, client):
        response = client.post("/api/selection", json={"target_gpm": 20, "recommend": False})

        body = response.json()
        assert response.status_code == 200
        assert [p["name"] for p in body["pumps"]] == ["18gpm", "25gpm"]
        assert body["total_head"] == pytest.approx(245.6)
        assert body["recommendation"] is None
        assert body["recommendation_error"] is None

    def test_select_without_llm_reports_reason(self, client):
        body = client.post("/api/selection", json={"target_gpm": 18}).json()

        assert [p["gpm_value"] for p in body["pumps"]] == [18, 25]
        assert body["recommendation"] is None
        assert "credential" in body["recommendation_error"]

    def test_select_requires_gpm(self, client):
        response = client.post("/api/selection", json={"pressure": 60})
        assert response.status_code == 400

    def test_select_full_hydraulic_body(self, client):
        response = client.post("/api/selection", json={
            "pressure": 50,
            "static_water_level": 80,
            "pump_setting_depth": 10,
            "target_gpm": 10,
            "recommend": False,
        })

        body = response.json()
        assert response.status_code == 200
        assert body["total_head"] == pytest.approx(205.5)
        assert [p["gpm_value"] for p in body["pumps"]] == [10, 13]

    def test_select_unknown_field_is_400(self, client):
        response = client.post("/api/selection", json={"gpm": 20})
        assert response.status_code == 400
        assert "gpm" in response.json()["error"]

    def test_select_runs_off_the_event_loop(self):
        assert not inspect.iscoroutinefunction(select_pumps)
        assert not inspect.iscoroutinefunction(filter_pumps)

    def test_filter(self, client):
        response = client.post("/api/selection/filter", json={"target_gpm": 13, "show_images": False})

        body = response.json()
        assert [p["gpm_value"] for p in body["pumps"]] == [10, 13, 18]
        assert body["show_images"] is False

    def test_filter_by_gpm_range_and_text(self, client):
        response = client.post("/api/selection/filter", json={"gpm_min": 7, "gpm_max": 13})
        assert [p["gpm_value"] for p in response.json()["pumps"]] == [7, 10, 13]

        response = client.post("/api/selection/filter", json={
            "gpm_min": 7, "gpm_max": 13, "search_text": "zzz",
        })
        assert response.status_code == 200
        assert response.json()["pumps"] == []

    def test_filter_by_efficiency_and_head(self, client):
        response = client.post("/api/selection/filter", json={
            "efficiency_min": 185, "efficiency_max": 495,
        })
        assert [p["gpm_value"] for p in response.json()["pumps"]] == [5, 7, 10, 13]

        response = client.post("/api/selection/filter", json={"target_head": 260})
        assert [p["gpm_value"] for p in response.json()["pumps"]] == [25]

    def test_filter_unknown_field_is_400(self, client):
        response = client.post("/api/selection/filter", json={"min_gpm": 7, "max_gpm": 13})
        assert response.status_code == 400
        assert "min_gpm" in response.json()["error"]

    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "ok"
        assert body["pumps"] == len(SEED_FLOWS)
        assert body["llm"] is None
