"""Loan and investment math shared by forms, the forecaster and the architect"""

import math
from datetime import date
from typing import Optional

from finhub_engine.domain.models import InvestmentDetails, LoanDetails
from finhub_engine.utils.date_utils import add_months, whole_months_elapsed


def _monthly_rate(annual_rate_percent: float) -> float:
    return annual_rate_percent / 12 / 100


def closure_date(start_date: date, tenure_months: int) -> date:
    """Date of the last installment"""
    if tenure_months <= 0:
        return start_date
    return add_months(start_date, tenure_months)


def loan_details(
    principal: float,
    annual_rate_percent: float,
    tenure_months: int,
    start_date: Optional[date] = None,
    today: Optional[date] = None,
) -> LoanDetails:
    """
    EMI, total interest, total payment and outstanding balance of a loan.

    Uses the reducing-balance method:
        EMI = P * r * (1 + r)^n / ((1 + r)^n - 1),  r = monthly rate

    Totals are computed from the EMI rounded to 2 decimals (what is actually
    charged). A zero rate degrades to linear amortization (EMI = P / n) with no
    interest. Non-positive principal or tenure yields an all-zero result.

    Example:
        loan_details(100000, 12, 12) -> EMI 8884.88, total interest 6618.56
    """
    if principal <= 0 or tenure_months <= 0:
        return LoanDetails(emi=0.0, total_interest=0.0, total_payment=0.0, outstanding=0.0)

    r = _monthly_rate(annual_rate_percent)
    n = tenure_months

    if r == 0:
        emi = principal / n
        total_payment = principal
        total_interest = 0.0
    else:
        growth = (1 + r) ** n
        emi = round(principal * r * growth / (growth - 1), 2)
        total_payment = emi * n
        total_interest = total_payment - principal

    outstanding = principal
    if start_date is not None:
        today = today or date.today()
        if start_date <= today:
            paid = max(0, min(whole_months_elapsed(start_date, today), n))
            if r == 0:
                outstanding = principal - (principal / n) * paid
            else:
                growth = (1 + r) ** n
                outstanding = principal * (growth - (1 + r) ** paid) / (growth - 1)

    return LoanDetails(
        emi=round(emi, 2),
        total_interest=round(total_interest, 2),
        total_payment=round(total_payment, 2),
        outstanding=round(max(0.0, outstanding), 2),
        closure_date=closure_date(start_date, n) if start_date else None,
    )


def investment_details(principal: float, annual_rate_percent: float, tenure_months: int) -> InvestmentDetails:
    """Simple monthly yield (P * annual_rate / 12), total returns and maturity value"""
    if principal <= 0 or tenure_months <= 0:
        return InvestmentDetails(monthly_yield=0.0, total_returns=0.0, maturity_value=0.0)

    monthly_yield = principal * (annual_rate_percent / 100) / 12
    total_returns = monthly_yield * tenure_months

    return InvestmentDetails(
        monthly_yield=round(monthly_yield, 2),
        total_returns=round(total_returns, 2),
        maturity_value=round(principal + total_returns, 2),
    )


def solve_annual_rate(principal: float, emi: float, tenure_months: int) -> float:
    """
    Annual rate (percent) implied by a principal, EMI and tenure.

    Newton-Raphson on f(r) = EMI * ((1+r)^n - 1) - P * r * (1+r)^n,
    starting from 10% p.a. Returns 0 when the EMI does not exceed P / n.
    """
    if principal <= 0 or emi <= 0 or tenure_months <= 0 or emi * tenure_months <= principal:
        return 0.0

    n = tenure_months
    r = 0.1 / 12
    for _ in range(20):
        pow_term = (1 + r) ** n
        pow_prev = (1 + r) ** (n - 1)
        f = emi * (pow_term - 1) - principal * r * pow_term
        df = emi * n * pow_prev - principal * (pow_term + r * n * pow_prev)
        if df == 0:
            break
        new_r = r - f / df
        if abs(new_r - r) < 1e-6:
            r = new_r
            break
        r = new_r

    return round(r * 12 * 100, 2)


def tenure_for_payment(principal: float, emi: float, annual_rate_percent: float) -> int:
    """
    Months needed to repay principal with a fixed payment.

    n = log(EMI / (EMI - P*r)) / log(1 + r). Returns 0 when the payment
    does not even cover the monthly interest.
    """
    if principal <= 0 or emi <= 0 or annual_rate_percent < 0:
        return 0
    r = _monthly_rate(annual_rate_percent)
    if r == 0:
        return math.ceil(principal / emi)
    if emi <= principal * r:
        return 0
    return math.ceil(math.log(emi / (emi - principal * r)) / math.log(1 + r))
