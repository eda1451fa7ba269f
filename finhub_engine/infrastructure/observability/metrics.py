"""Prometheus metrics for monitoring directive tiers, stress levels, forecast risk and triggers"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from finhub_engine.domain.models import ArchitectAnalysis, ForecastResult, StressScoreResult, Trigger

# Advisory metrics
directive_counter = Counter(
    "finhub_directive_total",
    "Primary directives issued by the priority architect",
    ["tier"],  # personal_trust | high_interest_debt | insurance | emergency_buffer | growth
)

trigger_counter = Counter(
    "finhub_trigger_total",
    "Advisory triggers fired",
    ["trigger"],
)

stress_level_counter = Counter(
    "finhub_stress_level_total",
    "Stress scores computed by level",
    ["level"],  # low | moderate | high | critical
)

stress_score_histogram = Histogram(
    "finhub_stress_score",
    "Distribution of stress scores",
    buckets=[10, 25, 40, 50, 60, 75, 90, 100],
)

forecast_risk_counter = Counter(
    "finhub_forecast_risk_total",
    "Cash flow forecasts by risk level",
    ["risk"],  # low | medium | high
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def _trigger_family(trigger: Trigger) -> str:
    # Penalty triggers carry the liability id; keep label cardinality bounded
    return "penalty" if trigger.id.startswith("penalty_") else trigger.id


def record_directive(analysis: ArchitectAnalysis) -> None:
    """Record which tier won and which triggers fired"""
    directive_counter.labels(tier=analysis.tier).inc()
    record_triggers(analysis.triggers)


def record_triggers(triggers: Iterable[Trigger]) -> None:
    for trigger in triggers:
        trigger_counter.labels(trigger=_trigger_family(trigger)).inc()


def record_stress(result: StressScoreResult) -> None:
    stress_level_counter.labels(level=result.level).inc()
    stress_score_histogram.observe(result.score)


def record_forecast(result: ForecastResult) -> None:
    forecast_risk_counter.labels(risk=result.risk_level).inc()
