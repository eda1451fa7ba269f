"""Pydantic schemas for API request validation"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from finhub_engine.config import settings
from finhub_engine.domain.models import (
    Account,
    CancellationPolicy,
    Debt,
    Expense,
    FinancialSnapshot,
    Goal,
    Income,
    Investment,
    Liability,
    RecurringCommitment,
)


class ExpenseSchema(BaseModel):
    id: str
    amount: float = Field(..., ge=0)
    category: str
    date: dt.date
    account_id: str = ""
    description: str = ""
    tags: List[str] = []
    goal_id: Optional[str] = None
    recurring_id: Optional[str] = None
    is_recurring: bool = False
    is_internal_transfer: bool = False

    def to_domain(self) -> Expense:
        return Expense(**self.model_dump(exclude={"tags"}), tags=tuple(self.tags))


class IncomeSchema(BaseModel):
    id: str
    amount: float = Field(..., ge=0)
    date: dt.date
    account_id: str = ""
    source: str = ""
    category: str = "Income"
    tags: List[str] = []
    is_recurring: bool = False
    is_internal_transfer: bool = False

    def to_domain(self) -> Income:
        return Income(**self.model_dump(exclude={"tags"}), tags=tuple(self.tags))


class CancellationPolicySchema(BaseModel):
    policy: str = "end_of_cycle"
    grace_days: int = Field(0, ge=0)


class RecurringSchema(BaseModel):
    """Recurring commitment; custom frequency needs custom_interval_days"""

    id: str
    type: Literal["expense", "income"]
    amount: float = Field(..., ge=0)
    frequency: Literal["daily", "weekly", "monthly", "yearly", "custom"]
    start_date: dt.date
    end_date: Optional[dt.date] = None
    custom_interval_days: Optional[int] = Field(None, gt=0)
    interval: int = Field(1, ge=1)
    day_of_month: Optional[int] = Field(None, ge=1, le=31)
    nth_week: Optional[int] = Field(None, ge=-5, le=5)
    weekday: Optional[int] = Field(None, ge=0, le=6)
    kind: str = "other"
    description: str = ""
    category: str = ""
    status: Literal["active", "cancellation_pending", "cancelled"] = "active"
    cancellation: Optional[CancellationPolicySchema] = None
    linked_liability_id: Optional[str] = None
    manual_usage_count: int = Field(0, ge=0)
    last_used_at: Optional[dt.date] = None

    def to_domain(self) -> RecurringCommitment:
        data = self.model_dump(exclude={"cancellation"})
        cancellation = CancellationPolicy(**self.cancellation.model_dump()) if self.cancellation else None
        return RecurringCommitment(**data, cancellation=cancellation)


class LiabilitySchema(BaseModel):
    id: str
    name: str
    principal: float = Field(..., ge=0)
    outstanding: float = Field(..., ge=0)
    interest_rate: float = Field(..., ge=0)
    emi_amount: float = Field(0, ge=0)
    tenure_months: int = Field(0, ge=0)
    start_date: Optional[dt.date] = None
    effective_rate: Optional[float] = Field(None, ge=0)
    penalty_applied: bool = False
    min_payment: float = Field(0, ge=0)
    kind: str = "loan"
    status: str = "active"

    def to_domain(self) -> Liability:
        return Liability(**self.model_dump())


class GoalSchema(BaseModel):
    id: str
    name: str
    target_amount: float = Field(..., ge=0)
    current_amount: float = Field(0, ge=0)
    target_date: Optional[dt.date] = None
    monthly_contribution: Optional[float] = Field(None, ge=0)
    is_discretionary: bool = False
    status: Literal["active", "completed", "leaking"] = "active"
    tags: List[str] = []

    def to_domain(self) -> Goal:
        return Goal(**self.model_dump(exclude={"tags"}), tags=tuple(self.tags))


class AccountSchema(BaseModel):
    id: str
    name: str
    type: Literal["bank", "cash", "credit_card", "investment"]
    balance: float

    def to_domain(self) -> Account:
        return Account(**self.model_dump())


class DebtSchema(BaseModel):
    id: str
    person_name: str
    amount: float = Field(..., ge=0)
    type: Literal["borrowed", "lent"]
    status: Literal["pending", "settled"] = "pending"

    def to_domain(self) -> Debt:
        return Debt(**self.model_dump())


class InvestmentSchema(BaseModel):
    id: str
    name: str
    type: str
    quantity: float = Field(..., ge=0)
    buy_price: float = Field(..., ge=0)
    current_price: Optional[float] = Field(None, ge=0)
    expected_return: Optional[float] = None

    def to_domain(self) -> Investment:
        return Investment(**self.model_dump())


class SnapshotRequest(BaseModel):
    """Request body shared by every advisory endpoint"""

    accounts: List[AccountSchema] = []
    expenses: List[ExpenseSchema] = []
    incomes: List[IncomeSchema] = []
    debts: List[DebtSchema] = []
    goals: List[GoalSchema] = []
    liabilities: List[LiabilitySchema] = []
    recurring: List[RecurringSchema] = []
    investments: List[InvestmentSchema] = []
    monthly_income: float = Field(0, ge=0)
    monthly_expenses: float = Field(0, ge=0)
    health_score: Optional[float] = Field(None, ge=0, le=100)
    currency: str = Field(default_factory=lambda: settings.default_currency)
    today: Optional[dt.date] = None
    horizon_days: int = Field(default_factory=lambda: settings.forecast_horizon_days, ge=1, le=3650)

    def to_domain(self) -> FinancialSnapshot:
        return FinancialSnapshot(
            accounts=[a.to_domain() for a in self.accounts],
            expenses=[e.to_domain() for e in self.expenses],
            incomes=[i.to_domain() for i in self.incomes],
            debts=[d.to_domain() for d in self.debts],
            goals=[g.to_domain() for g in self.goals],
            liabilities=[l.to_domain() for l in self.liabilities],
            recurring=[r.to_domain() for r in self.recurring],
            investments=[i.to_domain() for i in self.investments],
            monthly_income=self.monthly_income,
            monthly_expenses=self.monthly_expenses,
            health_score=self.health_score,
            currency=self.currency,
            today=self.today or dt.date.today(),
        )


class LoanRequest(BaseModel):
    """Request body for POST /v1/loans/details"""

    principal: float
    annual_rate: float = Field(..., ge=0, le=100, description="Nominal annual rate in percent")
    tenure_months: int = Field(..., le=1200)
    start_date: Optional[dt.date] = None
    today: Optional[dt.date] = None


class InvestmentRequest(BaseModel):
    """Request body for POST /v1/investments/details"""

    principal: float
    annual_rate: float = Field(..., ge=0, le=100, description="Annual yield in percent")
    tenure_months: int = Field(..., le=1200)


class ImpliedRateRequest(BaseModel):
    """Request body for POST /v1/loans/implied-rate"""

    principal: float
    emi: float
    tenure_months: int = Field(..., le=1200)


class ImpliedRateResponse(BaseModel):
    annual_rate: float = Field(..., description="Annual rate in percent; 0 when the EMI carries no interest")


class PayoffTenureRequest(BaseModel):
    """Request body for POST /v1/loans/tenure"""

    principal: float
    emi: float
    annual_rate: float = Field(..., ge=0, le=100)


class PayoffTenureResponse(BaseModel):
    tenure_months: int = Field(..., description="Months to repay; 0 when the EMI never covers interest")
