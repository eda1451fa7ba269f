"""Pytest fixtures for testing"""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from finhub_engine.api.main import create_app
from finhub_engine.domain.models import (
    Account,
    CancellationPolicy,
    Expense,
    FinancialSnapshot,
    Goal,
    Liability,
    RecurringCommitment,
)

TODAY = date(2026, 10, 17)


@pytest.fixture
def today() -> date:
    """Fixed reference date so date-relative results are reproducible"""
    return TODAY


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def grocery_expenses(today: date) -> list[Expense]:
    """12000 of essential spend spread over the last 60 days"""
    return [
        Expense(
            id=f"groceries_{i}",
            amount=2000,
            category="Groceries",
            date=today - timedelta(days=i * 10),
            description="Supermarket",
        )
        for i in range(6)
    ]


@pytest.fixture
def netflix(today: date) -> RecurringCommitment:
    """Monthly subscription billed on the 18th (tomorrow)"""
    return RecurringCommitment(
        id="sub_netflix",
        type="expense",
        amount=649,
        frequency="monthly",
        start_date=date(2026, 1, 18),
        kind="subscription",
        description="Netflix",
        category="Entertainment",
        cancellation=CancellationPolicy(policy="end_of_cycle", grace_days=0),
    )


@pytest.fixture
def credit_card() -> Liability:
    return Liability(
        id="cc_1",
        name="Credit Card",
        principal=50000,
        outstanding=40000,
        interest_rate=36,
        emi_amount=5000,
        kind="credit_card",
    )


@pytest.fixture
def healthy_snapshot(today: date) -> FinancialSnapshot:
    """Insured, well-buffered user with no debt"""
    return FinancialSnapshot(
        accounts=[
            Account(id="acc_bank", name="Savings", type="bank", balance=150000),
            Account(id="acc_inv", name="Brokerage", type="investment", balance=100000),
        ],
        expenses=[
            Expense(
                id="ins_1",
                amount=1500,
                category="Insurance",
                date=today - timedelta(days=5),
                description="Health insurance premium",
            ),
        ],
        goals=[
            Goal(
                id="goal_house",
                name="House",
                target_amount=1_000_000,
                current_amount=200_000,
                target_date=date(2030, 1, 1),
                monthly_contribution=20000,
            )
        ],
        monthly_income=80000,
        monthly_expenses=30000,
        today=today,
    )
