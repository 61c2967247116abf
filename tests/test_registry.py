"""Tests for the evaluator registry."""

import pytest

from posture.consts import CheckName, Probe
from posture.evaluators.registry import EvaluatorRegistry
from posture.models.model_eval import MaintainedSettings, ScoringConfig
from posture.models.model_finding import ActivityCount


def test_registry_has_every_check(registry):
    """Test one evaluator per check name."""
    assert registry.names() == sorted(c.value for c in CheckName)
    assert len(registry.names()) == 26


def test_evaluators_follow_protocol(registry):
    """Test every evaluator exposes a name, probes and evaluate."""
    for name, evaluator in registry.evaluators.items():
        assert callable(evaluator.evaluate)
        assert evaluator.name == name
        assert evaluator.expected_probes


def test_expected_probes_are_cataloged(registry, catalog):
    """Test every expected probe has a catalog definition."""
    for evaluator in registry.evaluators.values():
        for probe in evaluator.expected_probes:
            assert probe.value in catalog


def test_unknown_check_raises(registry, dl):
    """Test an unregistered check name raises KeyError."""
    with pytest.raises(KeyError, match="Unknown check"):
        registry.evaluate("Not-A-Check", [], dl)


def test_evaluate_single(registry, make_finding, dl):
    """Test evaluation is routed to the named evaluator."""
    findings = [
        make_finding(Probe.SBOM_EXISTS, True),
        make_finding(Probe.SBOM_RELEASE_ASSET_EXISTS, False),
    ]
    result = registry.evaluate(CheckName.SBOM.value, findings, dl)
    assert result.name == "SBOM"
    assert result.score == 5


def test_evaluate_error_is_returned(registry, make_finding, dl, caplog):
    """Test evaluator errors come back as results and are logged."""
    result = registry.evaluate(CheckName.LICENSE.value, [make_finding(Probe.ARCHIVED, True)], dl)
    assert result.is_error
    assert "License: internal error: invalid probe results" in caplog.text


def test_evaluate_batch_separates_details(registry, make_finding):
    """Test each check in a batch gets its own details."""
    results = registry.evaluate_batch(
        {
            CheckName.SBOM.value: [
                make_finding(Probe.SBOM_EXISTS, True, "sbom.json"),
                make_finding(Probe.SBOM_RELEASE_ASSET_EXISTS, False, "no asset"),
            ],
            CheckName.PACKAGING.value: [
                make_finding(Probe.PACKAGED_WITH_AUTOMATED_WORKFLOW, True, "publish.yml"),
            ],
        }
    )
    sbom_result, sbom_details = results["SBOM"]
    packaging_result, packaging_details = results["Packaging"]
    assert sbom_result.score == 5
    assert packaging_result.score == 10
    assert [d.message.text for d in sbom_details] == ["sbom.json", "no asset"]
    assert [d.message.text for d in packaging_details] == ["publish.yml"]


def test_config_is_shared(make_finding, dl):
    """Test the registry passes its config to evaluators."""
    config = ScoringConfig(maintained=MaintainedSettings(lookback_days=28))
    registry = EvaluatorRegistry(config=config)
    findings = [
        make_finding(Probe.ARCHIVED, False),
        make_finding(Probe.CREATED_RECENTLY, False),
        make_finding(Probe.HAS_RECENT_COMMITS, True, payload=ActivityCount(count=4)),
        make_finding(Probe.ISSUE_ACTIVITY_BY_PROJECT_MEMBER, True, payload=ActivityCount(count=0)),
    ]
    assert registry.evaluate(CheckName.MAINTAINED.value, findings, dl).score == 10
