"""Integration tests for API endpoints"""

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient

TODAY = date(2026, 10, 17)


@pytest.fixture
def snapshot_payload() -> dict:
    """Snapshot with steady grocery spend, a credit card and a renewing subscription"""
    return {
        "today": TODAY.isoformat(),
        "horizon_days": 10,
        "monthly_income": 60000,
        "monthly_expenses": 40000,
        "accounts": [{"id": "acc_bank", "name": "Savings", "type": "bank", "balance": 10000}],
        "expenses": [
            {
                "id": f"groceries_{i}",
                "amount": 2000,
                "category": "Groceries",
                "date": (TODAY - timedelta(days=i * 10)).isoformat(),
            }
            for i in range(6)
        ],
        "recurring": [
            {
                "id": "sub_netflix",
                "type": "expense",
                "amount": 649,
                "frequency": "monthly",
                "start_date": "2026-01-18",
                "kind": "subscription",
                "description": "Netflix",
                "cancellation": {"policy": "end_of_cycle", "grace_days": 0},
            }
        ],
        "liabilities": [
            {
                "id": "cc_1",
                "name": "Credit Card",
                "principal": 50000,
                "outstanding": 40000,
                "interest_rate": 36,
                "kind": "credit_card",
            }
        ],
        "goals": [
            {
                "id": "goal_laptop",
                "name": "Laptop",
                "target_amount": 120000,
                "target_date": "2027-04-17",
                "monthly_contribution": 5000,
            }
        ],
    }


def test_health_endpoint(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "finhub-engine"}


def test_metrics_endpoint(client: TestClient):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "finhub_directive_total" in response.text


def test_request_id_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]


def test_forecast_endpoint(client: TestClient, snapshot_payload: dict):
    """Subscription renews Oct 18 inside the 10-day horizon"""
    response = client.post("/v1/forecast", json=snapshot_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["days"] == 10
    assert data["daily_burn_total"] == 2000
    assert data["fixed_commitments"] == 649
    assert data["projected_balance"] == 10000 - 2000 - 649
    assert data["risk_level"] == "low"


def test_stress_score_endpoint(client: TestClient, snapshot_payload: dict):
    response = client.post("/v1/stress-score", json=snapshot_payload)

    assert response.status_code == 200
    data = response.json()
    assert 0 <= data["score"] <= 100
    assert data["level"] in ("low", "moderate", "high", "critical")
    assert set(data["factors"]) == {"emi_load", "commitment_ratio", "volatility", "cash_runway", "goal_drift"}


def test_goals_analysis_endpoint(client: TestClient, snapshot_payload: dict):
    response = client.post("/v1/goals/analysis", json=snapshot_payload)

    assert response.status_code == 200
    [goal] = response.json()
    assert goal["goal_id"] == "goal_laptop"
    assert goal["required_rate"] == 20000
    assert goal["is_behind"] is True
    assert goal["adjustments"]["extend_deadline"]["new_date"] == "2028-10-17"


def test_subscription_strategy_endpoint(client: TestClient, snapshot_payload: dict):
    response = client.post("/v1/subscriptions/strategy", json=snapshot_payload)

    assert response.status_code == 200
    [advice] = response.json()
    assert advice["subscription_id"] == "sub_netflix"
    assert advice["strategy"]["action_type"] == "cancel_now"
    assert advice["strategy"]["urgency"] == "high"
    assert advice["roi"]["is_poor_roi"] is True


def test_architect_endpoint(client: TestClient, snapshot_payload: dict):
    response = client.post("/v1/architect", json=snapshot_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["priority"] == 0
    assert data["tier"] == "high_interest_debt"
    assert "safety_breach" in [t["id"] for t in data["triggers"]]


def test_advisory_endpoint(client: TestClient, snapshot_payload: dict):
    response = client.post("/v1/advisory", json=snapshot_payload)

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"forecast", "stress", "goals", "subscriptions", "architect"}
    assert data["forecast"]["days"] == 10
    assert data["architect"]["tier"] == "high_interest_debt"


def test_empty_snapshot_is_valid(client: TestClient):
    response = client.post("/v1/advisory", json={"today": TODAY.isoformat()})

    assert response.status_code == 200
    assert response.json()["forecast"]["projected_balance"] == 0


def test_negative_amount_rejected(client: TestClient, snapshot_payload: dict):
    snapshot_payload["expenses"][0]["amount"] = -5

    response = client.post("/v1/forecast", json=snapshot_payload)

    assert response.status_code == 422


def test_zero_custom_interval_rejected(client: TestClient, snapshot_payload: dict):
    snapshot_payload["recurring"][0].update(frequency="custom", custom_interval_days=0)

    response = client.post("/v1/forecast", json=snapshot_payload)

    assert response.status_code == 422


def test_nth_week_without_weekday_rejected(client: TestClient, snapshot_payload: dict):
    snapshot_payload["recurring"][0]["nth_week"] = 2

    response = client.post("/v1/advisory", json=snapshot_payload)

    assert response.status_code == 422
    assert "sub_netflix" in response.json()["detail"]


def test_duplicate_goal_ids_rejected(client: TestClient, snapshot_payload: dict):
    snapshot_payload["goals"].append(dict(snapshot_payload["goals"][0]))

    response = client.post("/v1/goals/analysis", json=snapshot_payload)

    assert response.status_code == 422
    assert "goal_laptop" in response.json()["detail"]


def test_loan_details_endpoint(client: TestClient):
    response = client.post("/v1/loans/details", json={"principal": 100000, "annual_rate": 12, "tenure_months": 12})

    assert response.status_code == 200
    data = response.json()
    assert data["emi"] == 8884.88
    assert data["total_interest"] == 6618.56
    assert data["closure_date"] is None


def test_loan_details_degenerate_principal(client: TestClient):
    response = client.post("/v1/loans/details", json={"principal": -1, "annual_rate": 12, "tenure_months": 12})

    assert response.status_code == 200
    assert response.json()["emi"] == 0


def test_loan_tenure_limit(client: TestClient):
    response = client.post("/v1/loans/details", json={"principal": 1000, "annual_rate": 12, "tenure_months": 5000})

    assert response.status_code == 422


def test_investment_details_endpoint(client: TestClient):
    response = client.post(
        "/v1/investments/details", json={"principal": 100000, "annual_rate": 12, "tenure_months": 12}
    )

    assert response.status_code == 200
    assert response.json() == {"monthly_yield": 1000, "total_returns": 12000, "maturity_value": 112000}


def test_implied_rate_endpoint(client: TestClient):
    response = client.post("/v1/loans/implied-rate", json={"principal": 100000, "emi": 8884.88, "tenure_months": 12})

    assert response.status_code == 200
    assert response.json()["annual_rate"] == pytest.approx(12, abs=0.05)


def test_payoff_tenure_endpoint(client: TestClient):
    response = client.post("/v1/loans/tenure", json={"principal": 100000, "emi": 8884.88, "annual_rate": 12})

    assert response.status_code == 200
    assert response.json() == {"tenure_months": 12}


def test_payoff_tenure_payment_below_interest(client: TestClient):
    response = client.post("/v1/loans/tenure", json={"principal": 100000, "emi": 500, "annual_rate": 12})

    assert response.status_code == 200
    assert response.json() == {"tenure_months": 0}
