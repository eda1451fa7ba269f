"""Priority architect - tiered waterfall choosing the one thing that matters most right now"""

from dataclasses import dataclass
from typing import Callable, List, Tuple

from finhub_engine.domain.context import DEFAULT_POLICY, ArchitectContext, ArchitectPolicy, build_context
from finhub_engine.domain.models import (
    Allocation,
    ArchitectAnalysis,
    FinancialSnapshot,
    RealReturn,
    TradeOff,
)
from finhub_engine.domain.triggers import detect_triggers

DEBT_FALLBACK_PAYMENT = 1_000
MAX_PAYOFF_MONTHS = 1_200  # 100 years
GROWTH_MESSAGE = "Survival protocols are nominal. It's time to aggressively scale your income-generating assets."


@dataclass(frozen=True)
class Tier:
    """One rung of the waterfall: the first tier whose predicate holds builds the directive"""

    name: str
    priority: int
    predicate: Callable[[ArchitectContext], bool]
    build: Callable[[ArchitectContext], ArchitectAnalysis]


def real_return(nominal: float, inflation: float) -> float:
    """Fisher real rate: (1 + nominal) / (1 + inflation) - 1"""
    return (1 + nominal) / (1 + inflation) - 1


def classify_state(ctx: ArchitectContext) -> Tuple[str, List[str]]:
    """
    Balance-sheet state and the pivot steps that go with it.

    - leakage: annual debt cost beats expected investment gains and liquidity
      is below the starter shield
    - inversion: high-interest debt coexists with discretionary goal
      contributions or prepayment of low-rate loans
    - normal: anything else

    Pivot actions (freeze / swap / shield) are only produced while
    high-interest debt is active.
    """
    policy = ctx.policy
    snapshot = ctx.snapshot
    high_interest_active = bool(ctx.high_interest_debts)

    state = "normal"
    if ctx.annual_debt_cost > ctx.expected_investment_gain and ctx.liquidity < policy.shield_min:
        state = "leakage"
    elif high_interest_active and (
        any(g.is_discretionary and (g.monthly_contribution or 0) > 0 for g in snapshot.goals)
        or any(
            l.interest_rate < policy.low_rate_percent and l.emi_amount > (l.min_payment or 0)
            for l in snapshot.liabilities
            if l.status != "closed"
        )
    ):
        state = "inversion"

    pivot_actions: List[str] = []
    if high_interest_active:
        top = ctx.high_interest_debts[0]
        pivot_actions.append("FREEZE: Pausing discretionary goals for 2 billing cycles.")
        pivot_actions.append(f"SWAP: Redirecting surplus toward {top.name} ({top.annual_rate * 100:.1f}% eff. rate).")
        if ctx.liquidity < policy.shield_min:
            pivot_actions.append(
                f"SHIELD: Allocating portion to rebuild {policy.shield_min:,.0f} Starter Shield "
                f"(Target: {policy.shield_max:,.0f})."
            )
        else:
            pivot_actions.append(f"SHIELD: Survival buffer verified at {ctx.liquidity:,.0f}.")

    return state, pivot_actions


# ---------------------------------------------------------------------------
# Tier 0: personal trust
# ---------------------------------------------------------------------------


def _owes_personal_debt(ctx: ArchitectContext) -> bool:
    return bool(ctx.pending_borrowed) and not ctx.high_interest_debts


def _build_personal_trust(ctx: ArchitectContext) -> ArchitectAnalysis:
    largest = ctx.pending_borrowed[0]
    return ArchitectAnalysis(
        priority=0,
        tier="personal_trust",
        title="Priority 0: Honor Personal Trust",
        message=(
            f"You still owe {largest.person_name} {largest.amount:,.0f}. Settling personal IOUs first "
            "protects relationships and clears the way for every other goal."
        ),
        allocation=Allocation(),
        next_milestone=f"Settle IOU with {largest.person_name}",
    )


# ---------------------------------------------------------------------------
# Tier 0': high-interest debt
# ---------------------------------------------------------------------------


def _has_high_interest_debt(ctx: ArchitectContext) -> bool:
    return bool(ctx.high_interest_debts)


def _build_high_interest_debt(ctx: ArchitectContext) -> ArchitectAnalysis:
    """
    Direct the surplus at the highest-rate liability.

    Trade-off compares payoff time with and without the 80% surplus
    allocation, and what that allocation would have grown to at the growth
    CAGR over the unboosted payoff period.
    """
    top = ctx.high_interest_debts[0]
    rate = top.annual_rate
    rate_percent = rate * 100
    allocation = ctx.priority_allocation

    base_payment = top.emi_amount if top.emi_amount > 0 else DEBT_FALLBACK_PAYMENT
    months_without_surplus = top.outstanding / base_payment
    boosted_payment = (top.emi_amount or 0) + allocation
    months_with_surplus = top.outstanding / boosted_payment if boosted_payment > 0 else months_without_surplus
    time_saved = max(0.0, months_without_surplus - months_with_surplus)

    monthly_growth = ctx.policy.growth_cagr / 12
    growth_months = min(months_without_surplus, MAX_PAYOFF_MONTHS)
    if monthly_growth > 0:
        potential_growth = allocation * ((1 + monthly_growth) ** growth_months - 1) / monthly_growth
    else:
        potential_growth = allocation * growth_months
    interest_saved = top.outstanding * rate * (time_saved / 12)

    state, _ = classify_state(ctx)
    title = "CRITICAL: Wealth Leakage" if state == "leakage" else "Priority 0: Plug the Leak"

    return ArchitectAnalysis(
        priority=0,
        tier="high_interest_debt",
        title=title,
        message=(
            f"Your {top.name} is at {rate_percent:.1f}%. Killing this debt is a GUARANTEED "
            f"{rate_percent:.1f}% return on your money."
        ),
        allocation=Allocation(),
        next_milestone=f"Liquidate {top.name}",
        trade_off=TradeOff(
            time_saved_months=round(time_saved),
            potential_growth_amount=round(potential_growth),
            comparison_message=(
                f"Every 1 invested loses to {rate_percent / 12:.2f} in monthly interest friction. "
                f"Plugging this saves approximately {interest_saved:,.0f} in pure interest."
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Tier 1: insurance
# ---------------------------------------------------------------------------


def _missing_insurance(ctx: ArchitectContext) -> bool:
    return ctx.insurance_goal is None and not ctx.has_insurance_expense and not ctx.has_health_expense


def _build_insurance(ctx: ArchitectContext) -> ArchitectAnalysis:
    return ArchitectAnalysis(
        priority=1,
        tier="insurance",
        title="Priority 1: Secure Survival",
        message="You lack visible health or term insurance. One health crisis can reset your progress to zero.",
        allocation=Allocation(),
        next_milestone="Establish Health & Term Insurance",
    )


# ---------------------------------------------------------------------------
# Tier 2: emergency buffer
# ---------------------------------------------------------------------------


def _thin_buffer(ctx: ArchitectContext) -> bool:
    return ctx.buffer_months < ctx.policy.buffer_target_months


def _build_buffer(ctx: ArchitectContext) -> ArchitectAnalysis:
    target = ctx.policy.buffer_target_months
    months = ctx.buffer_months
    needed_amount = ctx.avg_monthly_expense * (target - months)
    time_to_build = needed_amount / (ctx.priority_allocation or 1)

    return ArchitectAnalysis(
        priority=2,
        tier="emergency_buffer",
        title="Priority 2: Build the Buffer",
        message=(
            f"Your current liquid buffer is at {months:.1f} months. "
            f"We need {target:g} months for absolute stability."
        ),
        allocation=Allocation(),
        next_milestone=f"{target:g}-Month Emergency Fund",
        trade_off=TradeOff(
            time_saved_months=round(time_to_build * 0.5),
            potential_growth_amount=round(needed_amount * 0.05),
            comparison_message="Peace of mind is an unquantifiable asset. Build the buffer first.",
        ),
    )


# ---------------------------------------------------------------------------
# Tier 3: growth
# ---------------------------------------------------------------------------


def _build_growth(ctx: ArchitectContext) -> ArchitectAnalysis:
    policy = ctx.policy
    real = real_return(policy.growth_cagr, policy.inflation_rate)
    analysis = ArchitectAnalysis(
        priority=3,
        tier="growth",
        title="Priority 3: Accelerate Freedom",
        message=GROWTH_MESSAGE,
        allocation=Allocation(),
        next_milestone="Diversified Asset Growth",
        real_return=RealReturn(
            value=real,
            message=f"Your wealth is outrunning the cost of living by {real * 100:.1f}%.",
        ),
    )

    goals = ctx.snapshot.goals
    active_goal = next((g for g in goals if g.status == "active"), goals[0] if goals else None)
    if active_goal is not None:
        remaining = active_goal.target_amount - active_goal.current_amount
        time_saved = (
            ctx.priority_allocation / active_goal.target_amount * 12
            if remaining > 0 and active_goal.target_amount > 0
            else 0
        )
        analysis.trade_off = TradeOff(
            time_saved_months=round(time_saved),
            potential_growth_amount=round(max(0.0, remaining) * policy.growth_cagr),
            comparison_message="You are in the Growth Zone. Compounding is your greatest ally now.",
        )
    return analysis


TIERS: List[Tier] = [
    Tier("personal_trust", 0, _owes_personal_debt, _build_personal_trust),
    Tier("high_interest_debt", 0, _has_high_interest_debt, _build_high_interest_debt),
    Tier("insurance", 1, _missing_insurance, _build_insurance),
    Tier("emergency_buffer", 2, _thin_buffer, _build_buffer),
    Tier("growth", 3, lambda ctx: True, _build_growth),
]


def select_directive(ctx: ArchitectContext, tiers: List[Tier] = TIERS) -> ArchitectAnalysis:
    """Evaluate tiers in order and build the first one whose predicate holds"""
    for tier in tiers:
        if tier.predicate(ctx):
            return tier.build(ctx)
    return _build_growth(ctx)


def analyze_financial_freedom(
    snapshot: FinancialSnapshot,
    policy: ArchitectPolicy = DEFAULT_POLICY,
) -> ArchitectAnalysis:
    """
    Main entry point: primary directive plus independently detected triggers.

    Tiers (first match wins):
    0  personal trust - pending borrowed IOUs and no high-interest debt
    0' high-interest debt - any liability at 10%+ effective or nominal
    1  insurance - no insurance goal and no insurance/health spend
    2  emergency buffer - under 3 months of buffer
    3  growth - everything else
    """
    ctx = build_context(snapshot, policy)

    analysis = select_directive(ctx)
    analysis.triggers = detect_triggers(ctx)
    analysis.state, analysis.pivot_actions = classify_state(ctx)
    return analysis
