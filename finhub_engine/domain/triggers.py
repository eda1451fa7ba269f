"""Trigger detection - advisory annotations evaluated independently of the primary directive"""

from typing import Callable, List

from finhub_engine.domain.context import ArchitectContext
from finhub_engine.domain.models import Trigger


def detect_safety_breach(ctx: ArchitectContext) -> List[Trigger]:
    """Liquid buffer below 3 months of spend"""
    threshold = ctx.avg_monthly_expense * ctx.policy.buffer_target_months
    if ctx.liquidity >= threshold:
        return []
    return [
        Trigger(
            id="safety_breach",
            type="breach",
            title="Safety Breach Detected",
            message="Liquid buffer is below 3-month survival threshold. Emergency protocols initiated.",
            action_label="Pause Optional Goals",
            severity="critical",
            explanation=(
                f"Your liquidity ({ctx.liquidity:,.0f}) is below the 3x monthly expense threshold "
                f"({threshold:,.0f}). High risk of emergency fund depletion."
            ),
        )
    ]


def detect_windfall(ctx: ArchitectContext) -> List[Trigger]:
    """One-off income larger than half the usual monthly income"""
    floor = ctx.avg_monthly_income * ctx.policy.windfall_ratio
    candidates = [i for i in ctx.snapshot.incomes if i.amount > floor and not i.is_recurring]
    if not candidates:
        return []
    largest = max(candidates, key=lambda i: i.amount)
    return [
        Trigger(
            id="windfall_alert",
            type="windfall",
            title="Windfall Detected",
            message=(
                f"A significant credit of {largest.amount:,.0f} was detected. "
                "This is a massive opportunity for tier-skipping."
            ),
            action_label="Calculate Strategic Split",
            severity="success",
            explanation=(
                "This large surplus is a rare opportunity to bypass multiple tiers of financial growth. "
                "Reinvesting it instead of spending it could accelerate your freedom by months."
            ),
        )
    ]


def detect_debt_spike(ctx: ArchitectContext) -> List[Trigger]:
    """Recent EMI/loan expense, or too many high-interest liabilities at once"""
    recent = sorted(ctx.snapshot.expenses, key=lambda e: e.date, reverse=True)[: ctx.policy.recent_expense_window]
    new_debt = any(e.category.upper() == "EMI" or "loan" in (e.description or "").lower() for e in recent)
    too_many = len(ctx.high_interest_debts) > ctx.policy.spike_liability_count
    if not (new_debt or too_many):
        return []
    return [
        Trigger(
            id="debt_spike",
            type="spike",
            title="Red Alert: Debt Spike",
            message="New liability detected or interest burden increased. Priority shifted to aggressive liquidation.",
            action_label="Freeze Credit Spending",
            severity="critical",
            explanation=(
                f"Detected {len(ctx.high_interest_debts)} high-interest liabilities. Interest rates above 10% "
                "compound faster than average market growth, effectively reversing your wealth progress."
            ),
        )
    ]


def detect_idle_cash(ctx: ArchitectContext) -> List[Trigger]:
    """Cash well above monthly needs with little of it shielded from inflation"""
    policy = ctx.policy
    if ctx.liquidity <= ctx.avg_monthly_expense * policy.idle_cash_months:
        return []
    if ctx.invested_value >= ctx.liquidity * policy.min_hedged_share:
        return []
    annual_decay = ctx.liquidity * policy.inflation_rate
    return [
        Trigger(
            id="inflation_alert",
            type="spike",
            title="Inflation Alert: Purchasing Power Decay",
            message="Significant idle liquidity detected with low inflation protection.",
            action_label="Shield Wealth",
            severity="warning",
            explanation=(
                f"Your liquid cash of {ctx.liquidity:,.0f} is losing purchasing power at "
                f"~{policy.inflation_rate:.0%} annually. Without hedging, you lose approximately "
                f"{annual_decay:,.0f} in real value every year."
            ),
        )
    ]


def detect_deadline_closer(ctx: ArchitectContext) -> List[Trigger]:
    """A goal past 90% with enough surplus to finish it"""
    if ctx.surplus <= ctx.policy.closer_surplus:
        return []
    goal = next(
        (
            g
            for g in ctx.snapshot.goals
            if g.target_amount > 0
            and g.current_amount / g.target_amount >= ctx.policy.closer_progress
            and g.current_amount < g.target_amount
        ),
        None,
    )
    if goal is None:
        return []
    return [
        Trigger(
            id="deadline_closer",
            type="closer",
            title="Deadline Closer",
            message=f'"{goal.name}" is 90% complete. A focused sprint could finish this goal this month.',
            action_label="Execute Sprint",
            severity="info",
            explanation=(
                "You've crossed the 90% threshold. A temporary increase in allocation now "
                "yields disproportionate momentum."
            ),
        )
    ]


def detect_insurance_milestone(ctx: ArchitectContext) -> List[Trigger]:
    """Protection tier satisfied by a funded insurance goal or a paid premium"""
    if not (ctx.insurance_funded or ctx.has_insurance_expense):
        return []
    return [
        Trigger(
            id="milestone_shift",
            type="milestone",
            title="Survival Protocol: Nominal",
            message="Tier 1 (Protection) is verified. You are now authorized for more aggressive Freedom Tier strategies.",
            action_label="View Growth Strategies",
            severity="success",
            explanation=(
                "Lower tiers (Protection) are now fully secured. Strategy can move from defense to "
                "offense, prioritizing high-yield assets over survival buffers."
            ),
        )
    ]


def detect_penalties(ctx: ArchitectContext) -> List[Trigger]:
    """One trigger per liability carrying a penalty"""
    triggers = []
    for liability in ctx.snapshot.liabilities:
        if not liability.penalty_applied:
            continue
        effective = (liability.effective_rate or 0) * 100
        triggers.append(
            Trigger(
                id=f"penalty_{liability.id}",
                type="spike",
                title="Interest Spike: Penalty Detected",
                message=f"A penalty has been applied to {liability.name}. Effective rate is now {effective:.1f}%.",
                action_label="Freeze Card" if liability.kind == "credit_card" else "Immediate Settlement",
                severity="critical",
                explanation="Penalties trigger high-friction wealth decay. Stopping this leak is Priority #1.",
            )
        )
    return triggers


TRIGGER_DETECTORS: List[Callable[[ArchitectContext], List[Trigger]]] = [
    detect_safety_breach,
    detect_windfall,
    detect_debt_spike,
    detect_idle_cash,
    detect_deadline_closer,
    detect_insurance_milestone,
    detect_penalties,
]


def detect_triggers(ctx: ArchitectContext) -> List[Trigger]:
    """Run every detector; order of the result follows TRIGGER_DETECTORS"""
    triggers: List[Trigger] = []
    for detector in TRIGGER_DETECTORS:
        triggers.extend(detector(ctx))
    return triggers
