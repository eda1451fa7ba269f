"""Unit tests for logging and metrics helpers"""

import json
import logging

from prometheus_client import REGISTRY

from finhub_engine.domain.models import Allocation, ArchitectAnalysis, Trigger
from finhub_engine.infrastructure.observability.logging import CustomJsonFormatter
from finhub_engine.infrastructure.observability.metrics import record_directive


def make_trigger(trigger_id: str) -> Trigger:
    return Trigger(id=trigger_id, type="spike", title="t", message="m", action_label="a", severity="critical")


def test_json_formatter_adds_service_metadata():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service_name="finhub-test")
    record = logging.LogRecord("finhub", logging.WARNING, __file__, 1, "Skipping rule", None, None)

    payload = json.loads(formatter.format(record))

    assert payload["service"] == "finhub-test"
    assert payload["level"] == "WARNING"
    assert payload["message"] == "Skipping rule"
    assert "timestamp" in payload


def test_record_directive_collapses_penalty_labels():
    analysis = ArchitectAnalysis(
        priority=0,
        tier="high_interest_debt",
        title="t",
        message="m",
        allocation=Allocation(),
        next_milestone="n",
        triggers=[make_trigger("penalty_cc_1"), make_trigger("penalty_loan_2")],
    )
    tier_labels = {"tier": "high_interest_debt"}
    penalty_labels = {"trigger": "penalty"}
    tier_before = REGISTRY.get_sample_value("finhub_directive_total", tier_labels) or 0
    penalty_before = REGISTRY.get_sample_value("finhub_trigger_total", penalty_labels) or 0

    record_directive(analysis)

    assert REGISTRY.get_sample_value("finhub_directive_total", tier_labels) == tier_before + 1
    assert REGISTRY.get_sample_value("finhub_trigger_total", penalty_labels) == penalty_before + 2
