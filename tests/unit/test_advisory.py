"""Unit tests for the advisory bundle"""

from dataclasses import replace
from datetime import date

from finhub_engine.domain.advisory import advise_subscriptions, build_advisory
from finhub_engine.domain.models import Account, RecurringCommitment


def test_total_balance_counts_liquid_accounts_only(healthy_snapshot):
    snapshot = replace(
        healthy_snapshot,
        accounts=healthy_snapshot.accounts + [Account(id="acc_cash", name="Wallet", type="cash", balance=2000)],
    )

    assert snapshot.total_balance == 152000


def test_build_advisory_bundle(healthy_snapshot):
    bundle = build_advisory(healthy_snapshot)

    assert bundle.forecast.days == 30
    # 1500 insurance premium over the 60-day window burns 25/day
    assert bundle.forecast.projected_balance == 149250
    assert 0 <= bundle.stress.score <= 100
    assert [g.goal_id for g in bundle.goals] == ["goal_house"]
    assert bundle.subscriptions == []
    assert bundle.architect.tier == "growth"


def test_build_advisory_custom_horizon(healthy_snapshot):
    bundle = build_advisory(healthy_snapshot, horizon_days=10)

    assert bundle.forecast.days == 10
    assert bundle.forecast.projected_balance == 149750


def test_advise_subscriptions_skips_plain_bills(healthy_snapshot, netflix, today):
    rent = RecurringCommitment(id="rent", type="expense", amount=15000, frequency="monthly", start_date=date(2026, 1, 1))
    snapshot = replace(healthy_snapshot, recurring=[netflix, rent])

    advice = advise_subscriptions(snapshot, today)

    assert [a.subscription_id for a in advice] == ["sub_netflix"]
    assert advice[0].strategy.action_type == "cancel_now"
    assert advice[0].roi.total_usage == 1


def test_advisory_is_deterministic_for_fixed_date(healthy_snapshot, netflix):
    snapshot = replace(healthy_snapshot, recurring=[netflix])

    assert build_advisory(snapshot) == build_advisory(snapshot)
