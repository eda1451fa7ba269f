"""POST /v1/forecast, /v1/stress-score, /v1/goals/analysis, /v1/subscriptions/strategy,
/v1/architect and /v1/advisory - snapshot analysis endpoints"""

import logging
import time
from typing import Callable, List, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request

from finhub_engine.api.dependencies import get_request_id, get_settings
from finhub_engine.api.v1.schemas import SnapshotRequest
from finhub_engine.config import Settings
from finhub_engine.domain.advisory import advise_subscriptions, build_advisory
from finhub_engine.domain.architect import analyze_financial_freedom
from finhub_engine.domain.cashflow import generate_forecast
from finhub_engine.domain.exceptions import DomainException
from finhub_engine.domain.goals import analyze_goals
from finhub_engine.domain.models import (
    AdvisoryBundle,
    ArchitectAnalysis,
    FinancialSnapshot,
    ForecastResult,
    GoalAnalysisResult,
    StressScoreResult,
    SubscriptionAdvice,
)
from finhub_engine.domain.stress import calculate_stress_score
from finhub_engine.domain.validation import validate_snapshot
from finhub_engine.infrastructure.observability.logging import log_advisory
from finhub_engine.infrastructure.observability.metrics import (
    record_directive,
    record_forecast,
    record_stress,
)

router = APIRouter()

T = TypeVar("T")


def _analyze(
    request: Request,
    endpoint: str,
    body: SnapshotRequest,
    analyzer: Callable[[FinancialSnapshot], T],
) -> T:
    """
    Validate the snapshot and run one analyzer with shared error handling.

    Domain validation failures map to 422; anything else is logged and
    surfaced as a generic 500.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        snapshot = body.to_domain()
        validate_snapshot(snapshot)
        result = analyzer(snapshot)

    except DomainException as e:
        logging.warning(f"Rejected snapshot: {e}", extra={"request_id": request_id, "endpoint": endpoint})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "endpoint": endpoint})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    log_advisory(request_id, endpoint, duration_ms)
    return result


@router.post("/forecast", response_model=ForecastResult)
def forecast(
    request_body: SnapshotRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """Project the liquid balance `horizon_days` ahead"""
    result = _analyze(
        request,
        "forecast",
        request_body,
        lambda s: generate_forecast(
            s.total_balance,
            s.expenses,
            s.recurring,
            s.liabilities,
            request_body.horizon_days,
            today=s.today,
            essential_categories=config.essential_categories,
            burn_window_days=config.burn_window_days,
        ),
    )
    record_forecast(result)
    return result


@router.post("/stress-score", response_model=StressScoreResult)
def stress_score(
    request_body: SnapshotRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    result = _analyze(
        request,
        "stress-score",
        request_body,
        lambda s: calculate_stress_score(
            s.total_balance,
            s.monthly_income,
            s.expenses,
            s.recurring,
            s.liabilities,
            s.goals,
            today=s.today,
            essential_categories=config.essential_categories,
            burn_window_days=config.burn_window_days,
        ),
    )
    record_stress(result)
    return result


@router.post("/goals/analysis", response_model=List[GoalAnalysisResult])
def goals_analysis(request_body: SnapshotRequest, request: Request):
    """Drift analysis for every active goal with a deadline"""
    return _analyze(
        request,
        "goals/analysis",
        request_body,
        lambda s: analyze_goals(s.goals, s.expenses, s.today),
    )


@router.post("/subscriptions/strategy", response_model=List[SubscriptionAdvice])
def subscriptions_strategy(request_body: SnapshotRequest, request: Request):
    return _analyze(
        request,
        "subscriptions/strategy",
        request_body,
        lambda s: advise_subscriptions(s, s.today),
    )


@router.post("/architect", response_model=ArchitectAnalysis)
def architect(
    request_body: SnapshotRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """Single highest-priority directive plus situational triggers"""
    result = _analyze(
        request,
        "architect",
        request_body,
        lambda s: analyze_financial_freedom(s, config.architect_policy()),
    )
    record_directive(result)
    return result


@router.post("/advisory", response_model=AdvisoryBundle)
def advisory(
    request_body: SnapshotRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Run every analyzer over one snapshot.

    Flow:
    1. Validate the snapshot (ids, recurrence rules)
    2. Forecast, stress, goals, subscriptions and architect against one reference date
    3. Record metrics per analyzer
    """
    result = _analyze(
        request,
        "advisory",
        request_body,
        lambda s: build_advisory(
            s,
            horizon_days=request_body.horizon_days,
            essential_categories=config.essential_categories,
            burn_window_days=config.burn_window_days,
            policy=config.architect_policy(),
        ),
    )
    record_forecast(result.forecast)
    record_stress(result.stress)
    record_directive(result.architect)
    return result
