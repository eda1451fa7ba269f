"""Unit tests for loan and investment math"""

import pytest
from datetime import date

from finhub_engine.domain.amortization import (
    closure_date,
    investment_details,
    loan_details,
    solve_annual_rate,
    tenure_for_payment,
)


def test_loan_details_reducing_balance():
    details = loan_details(100000, 12, 12)

    assert details.emi == 8884.88
    assert details.total_interest == 6618.56
    assert details.total_payment == 106618.56
    assert details.outstanding == 100000
    assert details.closure_date is None


def test_loan_details_zero_rate_is_linear():
    details = loan_details(120000, 0, 12)

    assert details.emi == 10000
    assert details.total_payment == 120000
    assert details.total_interest == 0


@pytest.mark.parametrize("principal,tenure", [(0, 12), (-5000, 12), (100000, 0)])
def test_loan_details_degenerate_inputs(principal, tenure):
    details = loan_details(principal, 12, tenure)

    assert (details.emi, details.total_interest, details.total_payment, details.outstanding) == (0, 0, 0, 0)


def test_outstanding_after_six_months_zero_rate():
    details = loan_details(120000, 0, 12, start_date=date(2026, 4, 17), today=date(2026, 10, 17))

    assert details.outstanding == 60000
    assert details.closure_date == date(2027, 4, 17)


def test_outstanding_declines_with_interest():
    fresh = loan_details(100000, 12, 12, start_date=date(2026, 10, 1), today=date(2026, 10, 17))
    halfway = loan_details(100000, 12, 12, start_date=date(2026, 4, 1), today=date(2026, 10, 17))
    finished = loan_details(100000, 12, 12, start_date=date(2025, 1, 1), today=date(2026, 10, 17))

    assert fresh.outstanding == 100000
    assert 0 < halfway.outstanding < 100000
    # Interest front-loads the schedule: more than half the principal remains
    assert halfway.outstanding > 50000
    assert finished.outstanding == 0


def test_future_start_keeps_full_principal():
    details = loan_details(100000, 12, 12, start_date=date(2027, 1, 1), today=date(2026, 10, 17))

    assert details.outstanding == 100000


def test_closure_date_clamps_month_end():
    assert closure_date(date(2026, 1, 31), 1) == date(2026, 2, 28)


def test_investment_details():
    details = investment_details(100000, 12, 12)

    assert details.monthly_yield == 1000
    assert details.total_returns == 12000
    assert details.maturity_value == 112000


def test_solve_annual_rate_recovers_rate():
    assert solve_annual_rate(100000, 8884.88, 12) == pytest.approx(12, abs=0.05)


def test_solve_annual_rate_without_interest():
    assert solve_annual_rate(120000, 10000, 12) == 0


def test_tenure_for_payment():
    assert tenure_for_payment(100000, 8884.88, 12) == 12
    assert tenure_for_payment(120000, 10000, 0) == 12


def test_tenure_for_payment_below_interest():
    # 1% monthly on 100000 is 1000; a 500 payment never amortizes
    assert tenure_for_payment(100000, 500, 12) == 0
