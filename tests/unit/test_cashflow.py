"""Unit tests for cash flow forecasting"""

import pytest
from datetime import date, timedelta

from finhub_engine.domain.cashflow import (
    classify_risk,
    daily_essential_burn,
    generate_forecast,
    project_fixed_commitments,
)
from finhub_engine.domain.models import Expense, Liability, RecurringCommitment


def test_forecast_from_burn_rate(grocery_expenses, today):
    """12000 essential spend over 60 days burns 200/day; 10 days from 10000 leaves 8000"""
    forecast = generate_forecast(10000, grocery_expenses, [], [], 10, today=today)

    assert forecast.days == 10
    assert forecast.daily_burn_total == 2000
    assert forecast.fixed_commitments == 0
    assert forecast.expected_income == 0
    assert forecast.projected_balance == 8000
    assert forecast.risk_level == "low"


def test_burn_ignores_transfers_and_old_spend(grocery_expenses, today):
    noise = [
        Expense(id="tr", amount=50000, category="Groceries", date=today, description="Transfer to savings"),
        Expense(id="old", amount=50000, category="Groceries", date=today - timedelta(days=61)),
        Expense(id="fun", amount=50000, category="Entertainment", date=today),
    ]

    assert daily_essential_burn(grocery_expenses + noise, today) == pytest.approx(200)


def test_burn_category_match_is_case_insensitive(today):
    expenses = [Expense(id="e1", amount=600, category="groceries", date=today)]

    assert daily_essential_burn(expenses, today) == pytest.approx(10)


def test_burn_uses_configured_categories(today):
    expenses = [Expense(id="e1", amount=600, category="Rent", date=today)]

    assert daily_essential_burn(expenses, today) == 0
    assert daily_essential_burn(expenses, today, categories=["Rent"]) == pytest.approx(10)


def test_recurring_inflows_and_outflows(today):
    recurring = [
        RecurringCommitment(id="rent", type="expense", amount=15000, frequency="monthly", start_date=date(2026, 1, 1)),
        RecurringCommitment(id="salary", type="income", amount=50000, frequency="monthly", start_date=date(2026, 1, 30)),
        RecurringCommitment(
            id="gym",
            type="expense",
            amount=2000,
            frequency="monthly",
            start_date=date(2026, 1, 20),
            status="cancelled",
        ),
    ]

    outflows, inflows = project_fixed_commitments(recurring, [], 30, today)

    assert outflows == 15000
    assert inflows == 50000


def test_emi_charged_per_started_block(today):
    loan = Liability(id="loan", name="Car Loan", principal=500000, outstanding=300000, interest_rate=9, emi_amount=5000)

    assert project_fixed_commitments([], [loan], 30, today) == (5000, 0)
    assert project_fixed_commitments([], [loan], 45, today) == (10000, 0)
    assert project_fixed_commitments([], [loan], 0, today) == (0, 0)


def test_closed_liability_not_charged(today):
    loan = Liability(
        id="loan", name="Car Loan", principal=500000, outstanding=0, interest_rate=9, emi_amount=5000, status="closed"
    )

    assert project_fixed_commitments([], [loan], 30, today) == (0, 0)


def test_linked_installment_not_double_counted(credit_card, today):
    installment = RecurringCommitment(
        id="cc_emi",
        type="expense",
        amount=5000,
        frequency="monthly",
        start_date=date(2026, 1, 20),
        linked_liability_id=credit_card.id,
    )

    outflows, _ = project_fixed_commitments([installment], [credit_card], 30, today)

    assert outflows == 5000


def test_malformed_rule_is_skipped(today):
    broken = RecurringCommitment(
        id="broken", type="expense", amount=999, frequency="custom", start_date=date(2026, 1, 1), custom_interval_days=0
    )

    assert project_fixed_commitments([broken], [], 30, today) == (0, 0)


def test_forecast_high_risk_when_negative(grocery_expenses, credit_card, today):
    forecast = generate_forecast(3000, grocery_expenses, [], [credit_card], 30, today=today)

    assert forecast.projected_balance == 3000 - 5000 - 6000
    assert forecast.risk_level == "high"


@pytest.mark.parametrize(
    "projected,current,expected",
    [(-1, 1000, "high"), (199, 1000, "medium"), (200, 1000, "low"), (0, 0, "low")],
)
def test_classify_risk(projected, current, expected):
    assert classify_risk(projected, current) == expected
