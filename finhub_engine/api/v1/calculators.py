"""POST /v1/loans/details, /v1/loans/implied-rate, /v1/loans/tenure and /v1/investments/details
- amortization calculators"""

from fastapi import APIRouter

from finhub_engine.api.v1.schemas import (
    ImpliedRateRequest,
    ImpliedRateResponse,
    InvestmentRequest,
    LoanRequest,
    PayoffTenureRequest,
    PayoffTenureResponse,
)
from finhub_engine.domain.amortization import investment_details, loan_details, solve_annual_rate, tenure_for_payment
from finhub_engine.domain.models import InvestmentDetails, LoanDetails

router = APIRouter()


@router.post("/loans/details", response_model=LoanDetails)
def loan_calculator(request_body: LoanRequest):
    """
    EMI, total interest and outstanding balance for a fixed-rate loan.

    Non-positive principal or tenure yields all-zero details.
    """
    return loan_details(
        request_body.principal,
        request_body.annual_rate,
        request_body.tenure_months,
        start_date=request_body.start_date,
        today=request_body.today,
    )


@router.post("/investments/details", response_model=InvestmentDetails)
def investment_calculator(request_body: InvestmentRequest):
    return investment_details(
        request_body.principal,
        request_body.annual_rate,
        request_body.tenure_months,
    )


@router.post("/loans/implied-rate", response_model=ImpliedRateResponse)
def implied_rate(request_body: ImpliedRateRequest):
    """Annual rate implied by a principal, EMI and tenure"""
    rate = solve_annual_rate(request_body.principal, request_body.emi, request_body.tenure_months)
    return ImpliedRateResponse(annual_rate=rate)


@router.post("/loans/tenure", response_model=PayoffTenureResponse)
def payoff_tenure(request_body: PayoffTenureRequest):
    months = tenure_for_payment(request_body.principal, request_body.emi, request_body.annual_rate)
    return PayoffTenureResponse(tenure_months=months)
