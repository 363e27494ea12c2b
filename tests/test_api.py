import copy
import logging
import os
import sys
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from expert_pricing.api.main import app
from expert_pricing.api.state import get_calculator, set_config
from expert_pricing.config.loader import load_pricing_config


@pytest.fixture(scope="module")
def client():
    reference = load_pricing_config()
    set_config(reference)
    yield TestClient(app)
    set_config(reference)


def test_root(client):
    assert client.get("/").json()["status"] == "online"


def test_quote(client):
    response = client.post("/quote", json={
        "tier_id": "standard",
        "urgency_id": "48h",
        "complexity_id": "hard",
        "mode": "pages",
        "pages": 5,
    })

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["breakdown"]["total_price"] == pytest.approx(195.0)
    assert data["breakdown"]["executor_payout"] == pytest.approx(126.75)
    assert data["breakdown"]["reviewer_commission"] == pytest.approx(29.25)
    assert data["breakdown"]["platform_fee"] == pytest.approx(39.0)


def test_quote_with_empty_quantity_is_not_computable(client):
    response = client.post("/quote", json={
        "tier_id": "standard",
        "urgency_id": "standard",
        "complexity_id": "medium",
        "mode": "pages",
        "pages": "",
    })

    assert response.status_code == 200
    assert response.json()["status"] == "not_computable"
    assert response.json()["breakdown"] is None


def test_quote_with_unknown_tier(client):
    response = client.post("/quote", json={
        "tier_id": "unknown-id",
        "urgency_id": "standard",
        "complexity_id": "medium",
        "mode": "pages",
        "pages": 5,
    })

    assert response.status_code == 422
    assert response.json()["detail"]["invalid_fields"] == ["tier"]


def test_quote_urgency_from_deadline(client):
    deadline = (datetime.now() + timedelta(hours=30)).isoformat()
    response = client.post("/quote", json={
        "tier_id": "standard",
        "complexity_id": "easy",
        "mode": "words",
        "words": 2500,
        "deadline": deadline,
    })

    assert response.status_code == 200
    breakdown = response.json()["breakdown"]
    assert breakdown["urgency_multiplier"] == pytest.approx(1.3)
    assert breakdown["total_price"] == pytest.approx(260.0)


def test_quote_without_urgency_or_deadline(client):
    response = client.post("/quote", json={
        "tier_id": "standard",
        "complexity_id": "easy",
        "mode": "words",
        "words": 2500,
    })

    assert response.status_code == 422
    assert response.json()["detail"]["invalid_fields"] == ["urgency"]


def test_custom_quote(client):
    response = client.post("/quote/custom", json={"quoted_price": 300})

    data = response.json()
    assert data["status"] == "ok"
    assert data["breakdown"]["executor_payout"] == pytest.approx(195.0)
    assert data["breakdown"]["reviewer_commission"] == pytest.approx(45.0)
    assert data["breakdown"]["platform_fee"] == pytest.approx(60.0)


def test_pricing_guide(client):
    rows = client.get("/pricing-guide", params={"mode": "words", "count": 2500}).json()

    assert len(rows) == 3 * 4 * 3
    row = next(r for r in rows if (r["Tier"], r["Urgency"], r["Complexity"]) == ("standard", "standard", "easy"))
    assert row["Total"] == pytest.approx(200.0)


def test_config_endpoint(client):
    data = client.get("/config").json()

    assert set(data["tiers"]) == {"basic", "standard", "premium"}
    assert data["executor_percentage"] == 65


def test_validate_config(client):
    data = client.get("/config").json()

    assert client.post("/config/validate", json=data).json()["valid"] is True

    data["reviewer_percentage"] = 30
    report = client.post("/config/validate", json=data).json()
    assert report["valid"] is False
    assert any("sum to 100" in err for err in report["errors"])


def test_system_status(client):
    data = client.get("/system/status").json()

    assert data["engine_active"] is True
    assert data["tiers"] == 3
    assert data["commission_split"] == [65, 15, 20]


@pytest.mark.parametrize("examples", [None, 5, "thesis"])
def test_validate_config_with_malformed_examples(client, examples):
    data = client.get("/config").json()
    data["complexity"]["easy"]["examples"] = examples

    response = client.post("/config/validate", json=data)

    assert response.status_code == 200
    report = response.json()
    assert report["valid"] is False
    assert any("examples must be a list" in err for err in report["errors"])


def test_validate_config_does_not_log_warnings(client, caplog):
    data = client.get("/config").json()
    data["tiers"]["basic"].update(base_price_per_page=0, base_price_per_word=0)

    with caplog.at_level(logging.WARNING):
        report = client.post("/config/validate", json=data).json()

    assert report["valid"] is True
    assert report["warnings"] == ["Tier 'basic' prices every job at zero"]
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_replace_config(client, caplog):
    original = client.get("/config").json()
    updated = copy.deepcopy(original)
    updated["tiers"]["standard"]["base_price_per_page"] = 40
    updated["tiers"]["basic"].update(base_price_per_page=0, base_price_per_word=0)

    try:
        with caplog.at_level(logging.WARNING, logger="expert_pricing.api.main"):
            response = client.put("/config", json=updated)
        assert response.status_code == 200
        assert response.json()["tiers"]["standard"]["base_price_per_page"] == 40
        assert "prices every job at zero" in caplog.text

        assert get_calculator().config.get_tier("standard").base_price_per_page == 40
        quote = client.post("/quote", json={
            "tier_id": "standard",
            "urgency_id": "48h",
            "complexity_id": "hard",
            "mode": "pages",
            "pages": 5,
        }).json()
        assert quote["breakdown"]["total_price"] == pytest.approx(390.0)
    finally:
        client.put("/config", json=original)

    assert client.get("/config").json() == original


def test_replace_config_rejects_invalid_table(client):
    original = client.get("/config").json()
    data = copy.deepcopy(original)
    data["executor_percentage"] = 90

    response = client.put("/config", json=data)

    assert response.status_code == 422
    assert any("sum to 100" in err for err in response.json()["detail"]["errors"])
    assert client.get("/config").json() == original
