"""Tests for the pinned dependencies evaluator."""

import pytest

from posture.consts import Probe
from posture.evaluators.pinned_dependencies import (
    PinnedCount,
    PinnedDependenciesEvaluator,
    is_github_owned_action,
)
from posture.models.model_finding import DependencyRef, DependencyType, Location, Outcome
from posture.models.model_result import DetailLevel, ErrorCode


@pytest.fixture
def dependency(make_finding):
    """Build a pinsDependencies finding for one dependency."""

    def _build(dependency_type, pinned, name=None):
        return make_finding(
            Probe.PINS_DEPENDENCIES,
            pinned,
            payload=DependencyRef(dependency_type=dependency_type, name=name),
            location=Location(path=".github/workflows/ci.yml"),
        )

    return _build


# Helper Tests
def test_is_github_owned_action():
    """Test owner prefixes decide GitHub ownership."""
    assert is_github_owned_action("actions/checkout")
    assert is_github_owned_action("github/codeql-action/init")
    assert not is_github_owned_action("docker/login-action")
    assert not is_github_owned_action("")


def test_pinned_count_empty_is_full_score():
    """Test a category without dependencies is fully pinned."""
    assert PinnedCount().score == 10


def test_pinned_count_ratio():
    """Test category score is the floored pinned share."""
    count = PinnedCount()
    count.add(True)
    count.add(True)
    count.add(False)
    assert count.pinned == 2
    assert count.total == 3
    assert count.score == 6


# Scoring Tests
def test_all_pinned(dependency, dl):
    """Test every dependency pinned scores 10."""
    findings = [
        dependency(DependencyType.GITHUB_ACTION, True, "actions/checkout"),
        dependency(DependencyType.CONTAINER_IMAGE, True, "python:3.12"),
        dependency(DependencyType.PIP_COMMAND, True),
    ]
    result = PinnedDependenciesEvaluator().evaluate(findings, dl)
    assert result.score == 10
    assert result.reason == "all dependencies are pinned"
    assert dl.count(DetailLevel.WARN) == 0


def test_absent_categories_do_not_lower_score(dependency, dl):
    """Test only the category with unpinned dependencies drives the score."""
    findings = [
        dependency(DependencyType.PIP_COMMAND, True),
        dependency(DependencyType.NPM_COMMAND, False),
    ]
    result = PinnedDependenciesEvaluator().evaluate(findings, dl)
    assert result.score == 5
    assert result.reason == "dependency not pinned by hash detected -- score normalized to 5"


def test_third_party_action_weighs_more(dependency, dl):
    """Test an unpinned third-party action costs more than a GitHub-owned one."""
    third_party = PinnedDependenciesEvaluator().evaluate(
        [
            dependency(DependencyType.GITHUB_ACTION, True, "actions/checkout"),
            dependency(DependencyType.GITHUB_ACTION, False, "docker/login-action"),
        ],
        dl,
    )
    github_owned = PinnedDependenciesEvaluator().evaluate(
        [
            dependency(DependencyType.GITHUB_ACTION, False, "actions/checkout"),
            dependency(DependencyType.GITHUB_ACTION, True, "docker/login-action"),
        ],
        dl,
    )
    assert third_party.score == 2
    assert github_owned.score == 8


def test_weakest_category_wins(dependency, dl):
    """Test the overall score is the minimum over categories."""
    findings = [
        dependency(DependencyType.CONTAINER_IMAGE, False, "ubuntu"),
        dependency(DependencyType.CONTAINER_IMAGE, True, "python@sha256:abc"),
        dependency(DependencyType.CONTAINER_IMAGE, True, "node@sha256:def"),
        dependency(DependencyType.PIP_COMMAND, False),
        dependency(DependencyType.PIP_COMMAND, False),
        dependency(DependencyType.PIP_COMMAND, True),
        dependency(DependencyType.PIP_COMMAND, True),
    ]
    result = PinnedDependenciesEvaluator().evaluate(findings, dl)
    assert result.score == 5


def test_download_then_run(dependency, dl):
    """Test unpinned downloads lower the score."""
    findings = [
        dependency(DependencyType.DOWNLOAD_THEN_RUN, False),
        dependency(DependencyType.DOWNLOAD_THEN_RUN, True),
    ]
    result = PinnedDependenciesEvaluator().evaluate(findings, dl)
    assert result.score == 5
    info = dl.texts(DetailLevel.INFO)
    assert not any("dependency downloads found" in text for text in info)


# Detail Tests
def test_unpinned_warnings_carry_remediation(dependency, catalog, dl):
    """Test each unpinned dependency is warned with remediation."""
    findings = [
        dependency(DependencyType.GITHUB_ACTION, False, "docker/login-action"),
        dependency(DependencyType.GITHUB_ACTION, False, "actions/setup-python"),
        dependency(DependencyType.CONTAINER_IMAGE, False, "ubuntu"),
    ]
    PinnedDependenciesEvaluator(catalog).evaluate(findings, dl)
    warnings = [d for d in dl.details if d.level == DetailLevel.WARN]
    assert [w.message.text for w in warnings] == [
        "third-party GitHubAction not pinned by hash",
        "GitHub-owned GitHubAction not pinned by hash",
        "containerImage not pinned by hash",
    ]
    assert all(w.message.remediation == catalog.remediation_for("pinsDependencies") for w in warnings)
    assert warnings[0].message.location.path == ".github/workflows/ci.yml"


def test_action_name_from_snippet(make_finding, dl):
    """Test the action owner falls back to the location snippet."""
    finding = make_finding(
        Probe.PINS_DEPENDENCIES,
        False,
        payload=DependencyRef(dependency_type=DependencyType.GITHUB_ACTION),
        location=Location(snippet="actions/checkout@v4"),
    )
    result = PinnedDependenciesEvaluator().evaluate([finding], dl)
    assert result.score == 8


# Edge Case Tests
def test_no_dependencies_inconclusive(make_finding, dl):
    """Test only not-applicable findings is inconclusive."""
    result = PinnedDependenciesEvaluator().evaluate(
        [make_finding(Probe.PINS_DEPENDENCIES, Outcome.NOT_APPLICABLE, "no dependencies found")],
        dl,
    )
    assert result.is_inconclusive
    assert dl.texts(DetailLevel.DEBUG) == ["no dependencies found"]


def test_missing_dependency_type(make_finding, dl):
    """Test an applicable finding without dependency data is an error."""
    result = PinnedDependenciesEvaluator().evaluate(
        [make_finding(Probe.PINS_DEPENDENCIES, False)], dl
    )
    assert result.is_error
    assert result.error.code == ErrorCode.INVALID_VALUE
    assert result.error.message == "dependency finding without type"


def test_wrong_probe(make_finding, dl):
    """Test findings from another probe are rejected."""
    result = PinnedDependenciesEvaluator().evaluate([make_finding(Probe.ARCHIVED, False)], dl)
    assert result.is_error
    assert result.error.code == ErrorCode.INVALID_PROBE_SET
