"""Snapshot-derived values shared by the priority waterfall and trigger detectors"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from finhub_engine.domain.models import Debt, FinancialSnapshot, Goal, Liability


@dataclass(frozen=True)
class ArchitectPolicy:
    """Thresholds and assumptions behind the priority directives"""

    inflation_rate: float = 0.06
    growth_cagr: float = 0.12
    high_interest_threshold: float = 0.10
    fallback_monthly_expense: float = 20_000
    fallback_monthly_income: float = 50_000
    priority_share: float = 0.8
    buffer_target_months: float = 3
    shield_min: float = 500
    shield_max: float = 1_000
    closer_surplus: float = 5_000
    closer_progress: float = 0.9
    windfall_ratio: float = 0.5
    idle_cash_months: float = 1.5
    min_hedged_share: float = 0.25
    spike_liability_count: int = 5
    recent_expense_window: int = 10
    low_rate_percent: float = 8
    default_investment_return: float = 0.08
    insurance_keyword: str = "insurance"
    insurance_categories: frozenset = frozenset({"insurance"})
    health_categories: frozenset = frozenset({"healthcare"})
    hedge_asset_types: frozenset = frozenset({"stock", "mutual_fund", "sip", "crypto", "physical_asset"})
    liquid_account_types: frozenset = frozenset({"bank", "cash"})


DEFAULT_POLICY = ArchitectPolicy()


@dataclass(frozen=True)
class ArchitectContext:
    """Computed once per analysis so tiers and triggers read identical numbers"""

    snapshot: FinancialSnapshot
    policy: ArchitectPolicy
    today: date
    surplus: float
    priority_allocation: float
    liquidity: float
    invested_value: float
    avg_monthly_expense: float
    avg_monthly_income: float
    high_interest_debts: List[Liability]
    annual_debt_cost: float
    expected_investment_gain: float
    pending_borrowed: List[Debt]
    insurance_goal: Optional[Goal]
    has_insurance_expense: bool
    has_health_expense: bool

    @property
    def buffer_months(self) -> float:
        """Emergency-fund coverage: health score / 10 when scored, else liquidity / monthly spend"""
        if self.snapshot.health_score is not None:
            return self.snapshot.health_score / 10
        if self.avg_monthly_expense <= 0:
            return 0.0
        return self.liquidity / self.avg_monthly_expense

    @property
    def insurance_funded(self) -> bool:
        goal = self.insurance_goal
        return goal is not None and goal.current_amount >= goal.target_amount


def _mentions(text: str, keyword: str) -> bool:
    return keyword in (text or "").lower()


def build_context(
    snapshot: FinancialSnapshot,
    policy: ArchitectPolicy = DEFAULT_POLICY,
) -> ArchitectContext:
    """Derive every shared intermediate value from the snapshot"""
    today = snapshot.today or date.today()

    surplus = max(0.0, snapshot.monthly_income - snapshot.monthly_expenses)

    liquidity = sum(a.balance for a in snapshot.accounts if a.type in policy.liquid_account_types)
    invested_accounts = sum(a.balance for a in snapshot.accounts if a.type == "investment")
    hedged_holdings = sum(i.market_value for i in snapshot.investments if i.type in policy.hedge_asset_types)

    active_liabilities = [l for l in snapshot.liabilities if l.status != "closed"]
    high_interest = sorted(
        (
            l
            for l in active_liabilities
            if l.annual_rate >= policy.high_interest_threshold
            or l.interest_rate >= policy.high_interest_threshold * 100
        ),
        key=lambda l: l.annual_rate,
        reverse=True,
    )

    pending_borrowed = sorted(
        (d for d in snapshot.debts if d.type == "borrowed" and d.status == "pending"),
        key=lambda d: d.amount,
        reverse=True,
    )

    keyword = policy.insurance_keyword
    insurance_goal = next(
        (
            g
            for g in snapshot.goals
            if _mentions(g.name, keyword) or any(_mentions(t, keyword) for t in g.tags)
        ),
        None,
    )
    has_insurance_expense = any(
        e.category.lower() in policy.insurance_categories
        or _mentions(e.description, keyword)
        or any(_mentions(t, keyword) for t in e.tags)
        for e in snapshot.expenses
    )
    has_health_expense = any(e.category.lower() in policy.health_categories for e in snapshot.expenses)

    return ArchitectContext(
        snapshot=snapshot,
        policy=policy,
        today=today,
        surplus=surplus,
        priority_allocation=surplus * policy.priority_share,
        liquidity=liquidity,
        invested_value=invested_accounts + hedged_holdings,
        avg_monthly_expense=snapshot.monthly_expenses or policy.fallback_monthly_expense,
        avg_monthly_income=snapshot.monthly_income or policy.fallback_monthly_income,
        high_interest_debts=high_interest,
        annual_debt_cost=sum(l.outstanding * l.annual_rate for l in active_liabilities),
        expected_investment_gain=sum(
            i.market_value * (i.expected_return or policy.default_investment_return) for i in snapshot.investments
        ),
        pending_borrowed=pending_borrowed,
        insurance_goal=insurance_goal,
        has_insurance_expense=has_insurance_expense,
        has_health_expense=has_health_expense,
    )
