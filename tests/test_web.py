from decimal import Decimal

import pytest

from loan_amortisation.data_models import Schedule
from loan_amortisation.engine import compute_schedule
from loan_amortisation_web import app as web_app


@pytest.fixture
def client():
    application = web_app.create_app({"TESTING": True})
    return application.test_client()


@pytest.fixture
def payload():
    return {
        "principal": "15000",
        "annual_rate": "8.9",
        "num_payments": 36,
        "disbursal_date": "2023-01-10",
        "first_payment_date": "2023-03-01",
        "first_capitalisation_date": "2023-02-01",
        "interest_method": "ActualActual",
        "interest_type": "Simple",
    }


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_amortise_returns_schedule(client, payload, fixture_terms):
    response = client.post("/api/amortise", json=payload)
    assert response.status_code == 200
    data = response.get_json()
    assert len(data["payments"]) == 36
    assert Decimal(data["payments"][-1]["balance"]) == 0
    assert data == compute_schedule(fixture_terms).to_dict()


def test_numeric_json_values_are_accepted(client, payload):
    payload.update(principal=15000, annual_rate=8.9)
    response = client.post("/api/amortise", json=payload)
    assert response.status_code == 200
    assert response.get_json()["meta"]["annual_rate"] == "0.089"


def test_fixed_payment(client, payload):
    payload["fixed_payment"] = "500"
    response = client.post("/api/amortise", json=payload)
    assert response.status_code == 200
    data = response.get_json()
    assert {p["payment"] for p in data["payments"]} == {"500"}
    assert Decimal(data["payments"][-1]["balance"]) < 0


def test_defaults_for_method_and_type(client, payload):
    del payload["interest_method"]
    del payload["interest_type"]
    response = client.post("/api/amortise", json=payload)
    assert response.status_code == 200


def test_unknown_token(client, payload):
    payload["interest_method"] = "Actual/365"
    response = client.post("/api/amortise", json=payload)
    assert response.status_code == 400
    assert "InterestMethod" in response.get_json()["error"]


def test_missing_field(client, payload):
    del payload["disbursal_date"]
    response = client.post("/api/amortise", json=payload)
    assert response.status_code == 400
    assert "disbursal_date" in response.get_json()["error"]


def test_invalid_terms(client, payload):
    payload["first_payment_date"] = "2022-12-01"
    response = client.post("/api/amortise", json=payload)
    assert response.status_code == 400


def test_body_must_be_json_object(client):
    response = client.post("/api/amortise", data="not json", content_type="text/plain")
    assert response.status_code == 400


def test_non_convergence(client, payload, monkeypatch):
    monkeypatch.setattr(web_app, "compute_schedule", lambda terms: Schedule.empty())
    response = client.post("/api/amortise", json=payload)
    assert response.status_code == 422
    assert response.get_json() == {"error": "payment solver did not converge"}
