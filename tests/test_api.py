"""Tests for FastAPI endpoints."""

import sys
import os
import math
from datetime import date
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from rnpv.database import Base, get_db
from rnpv.lookups import PlaceholderLoeSource, RecordLoeSource, StaticTrialSource, get_loe_source, get_trial_source
from rnpv.main import app


V2_STUDY = {
    "protocolSection": {
        "statusModule": {"startDateStruct": {"date": "2023-04"}},
        "sponsorCollaboratorsModule": {"leadSponsor": {"name": "Acme Bio"}},
        "designModule": {"phases": ["PHASE2", "PHASE3"]},
    }
}

PAYLOAD = {
    "phase": "Phase II",
    "peak_sales": 400,
    "launch_year": 2030,
    "loe_year": 2035,
    "discount_rate": 0.0,
    "tax_rate": 0.2,
    "cogs_fraction": 0.0,
    "commercial_spend_fraction": 0.0,
    "working_capital_fraction": 0.0,
    "royalty_min_pct": 10,
    "royalty_max_pct": 10,
    "royalty_ramp_years": 0,
}


@pytest.fixture
def client(tmp_path):
    """Create a test client with a file-based temp database and static lookups."""
    db_path = tmp_path / "test.db"
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(bind=engine)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_loe_source] = lambda: RecordLoeSource(
        {"drugx": [{"patentExpiry": "2039-02-01"}, {"exclusivityExpiry": "2041-06-30"}]}
    )
    app.dependency_overrides[get_trial_source] = lambda: StaticTrialSource({"NCT01234567": V2_STUDY})
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def saved(client):
    resp = client.post("/api/valuations", json={
        "inputs": PAYLOAD, "nct_id": "NCT01234567", "current_year": 2030,
    })
    assert resp.status_code == 201
    return resp.json()


class TestHealthEndpoints:
    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["name"] == "rNPV Valuator API"

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"


class TestComputeEndpoints:
    def test_compute(self, client):
        resp = client.post("/api/valuation/compute?current_year=2030", json=PAYLOAD)
        assert resp.status_code == 200
        data = resp.json()
        assert data["outputs"]["owner_pv"] == pytest.approx(800)
        assert data["outputs"]["roi"] == 54
        assert data["warnings"] == []
        assert data["cashflows"] is None

    def test_compute_with_cashflows(self, client):
        resp = client.post(
            "/api/valuation/compute",
            params={"current_year": 2030, "include_cashflows": True},
            json=PAYLOAD,
        )
        rows = resp.json()["cashflows"]
        assert [r["year"] for r in rows] == [2030, 2031, 2032, 2033, 2034]
        assert sum(r["owner_pv"] for r in rows) == pytest.approx(800)

    def test_compute_defaults_to_this_year(self, client):
        resp = client.post("/api/valuation/compute", json=PAYLOAD)
        assert resp.json()["outputs"]["current_year"] == date.today().year

    def test_compute_absorbs_bad_config(self, client):
        payload = dict(PAYLOAD, launch_year=2036, phase="Phase X")
        resp = client.post("/api/valuation/compute", json=payload)
        assert resp.status_code == 200
        data = resp.json()
        assert data["outputs"]["owner_pv"] == 0
        assert data["outputs"]["rnpv"] == 0
        assert {w["code"] for w in data["warnings"]} == {"empty_horizon", "unknown_phase"}

    def test_validate(self, client):
        resp = client.post("/api/valuation/validate", json=dict(PAYLOAD, cogs_fraction=1.2))
        codes = [w["code"] for w in resp.json()]
        assert "fraction_out_of_range" in codes
        assert "negative_margin" in codes

    def test_missing_years_rejected(self, client):
        resp = client.post("/api/valuation/compute", json={"phase": "Phase II"})
        assert resp.status_code == 422

    def test_compute_keeps_infinite_pv(self, client):
        resp = client.post("/api/valuation/compute?current_year=2030", json=dict(PAYLOAD, discount_rate=-1.0))
        assert resp.status_code == 200
        assert math.isinf(resp.json()["outputs"]["owner_pv"])
        assert "degenerate_discount_rate" in {w["code"] for w in resp.json()["warnings"]}


class TestValuationEndpoints:
    def test_save_returns_outputs(self, saved):
        assert saved["outputs"]["rnpv"] == pytest.approx(800 * 0.14 * 1.1 - 80)
        assert saved["share_slug"]

    def test_get_by_id_and_slug(self, client, saved):
        by_id = client.get(f"/api/valuation/{saved['id']}")
        by_slug = client.get(f"/api/valuation/{saved['share_slug']}")
        assert by_id.status_code == 200
        assert by_id.json() == by_slug.json()
        assert by_id.json()["nct_id"] == "NCT01234567"

    def test_share_link(self, client, saved):
        resp = client.get(f"/api/valuation/share/{saved['share_slug']}")
        assert resp.status_code == 200
        assert resp.json()["inputs"]["phase"] == "Phase II"

    def test_not_found(self, client):
        assert client.get("/api/valuation/9999").status_code == 404
        assert client.get("/api/valuation/share/missing").status_code == 404

    def test_list(self, client, saved):
        resp = client.get("/api/valuations")
        assert resp.status_code == 200
        assert [v["id"] for v in resp.json()] == [saved["id"]]

    def test_list_filters(self, client, saved):
        licensor = dict(PAYLOAD, role="LICENSOR", phase="Phase III")
        resp = client.post("/api/valuations", json={"inputs": licensor, "current_year": 2030})
        other_id = resp.json()["id"]
        assert [v["id"] for v in client.get("/api/valuations?role=LICENSOR").json()] == [other_id]
        assert [v["id"] for v in client.get("/api/valuations?phase=Phase II").json()] == [saved["id"]]
        assert client.get("/api/valuations?role=OWNER&phase=Phase III").json() == []
        assert client.get("/api/valuations?role=BROKER").status_code == 422

    def test_degenerate_discount_rate_saves_and_reloads(self, client):
        payload = dict(PAYLOAD, discount_rate=-1.0)
        resp = client.post("/api/valuations", json={"inputs": payload, "current_year": 2030})
        assert resp.status_code == 201
        assert math.isinf(resp.json()["outputs"]["owner_pv"])
        fetched = client.get(f"/api/valuation/{resp.json()['share_slug']}")
        assert fetched.status_code == 200
        assert math.isinf(fetched.json()["outputs"]["rnpv"])
        assert fetched.json()["inputs"]["discount_rate"] == -1.0

    def test_delete(self, client, saved):
        assert client.delete(f"/api/valuation/{saved['id']}").status_code == 200
        assert client.get(f"/api/valuation/{saved['id']}").status_code == 404


class TestLookupEndpoints:
    def test_loe(self, client):
        resp = client.get("/api/loe/DrugX")
        assert resp.status_code == 200
        assert resp.json()["loe_year"] == 2041

    def test_loe_unknown(self, client):
        assert client.get("/api/loe/unknown").status_code == 404

    def test_loe_placeholder(self, client):
        app.dependency_overrides[get_loe_source] = lambda: PlaceholderLoeSource(today=lambda: date(2026, 1, 1))
        resp = client.get("/api/loe/anything")
        assert resp.json() == {"drug_name": "anything", "loe_year": 2036, "source": "placeholder"}

    def test_trial(self, client):
        resp = client.get("/api/trial/nct01234567")
        assert resp.status_code == 200
        data = resp.json()
        assert data["mapped_phase"] == "Phase III"
        assert data["sponsor"] == "Acme Bio"

    def test_trial_invalid_id(self, client):
        assert client.get("/api/trial/ABC").status_code == 400

    def test_trial_not_found(self, client):
        assert client.get("/api/trial/NCT07654321").status_code == 404


class TestExportEndpoints:
    def test_csv(self, client):
        resp = client.post("/api/export/csv", json={"inputs": PAYLOAD, "current_year": 2030})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.text.splitlines()[0].startswith("timestamp,role,phase")

    def test_json(self, client):
        resp = client.post("/api/export/json", json={"inputs": PAYLOAD, "current_year": 2030})
        assert resp.json()["outputs"]["roi"] == 54

    def test_excel(self, client):
        resp = client.post("/api/export/excel", json={"inputs": PAYLOAD, "current_year": 2030})
        assert resp.status_code == 200
        assert resp.content[:2] == b"PK"

    def test_saved_csv(self, client, saved):
        resp = client.get(f"/api/export/csv/{saved['share_slug']}")
        assert resp.status_code == 200
        assert len(resp.text.strip().splitlines()) == 2

    def test_saved_excel_not_found(self, client):
        assert client.get("/api/export/excel/missing").status_code == 404
