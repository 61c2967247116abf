"""Tests for the SAST evaluator."""

import pytest

from posture.consts import Probe
from posture.evaluators.sast import SASTEvaluator
from posture.models.model_finding import Outcome, PullRequestCoverage
from posture.models.model_result import DetailLevel, ErrorCode


@pytest.fixture
def sast_findings(make_finding):
    """Build the full SAST finding set.

    Tools default to not installed. Commit coverage is True only when
    every pull request was analyzed, unless ``coverage`` overrides it.
    """

    def _build(
        analyzed=0,
        total=10,
        coverage=None,
        codeql=False,
        sonar=False,
        snyk=False,
        pysa=False,
        qodana=False,
    ):
        if coverage is None:
            coverage = analyzed == total
        return [
            make_finding(Probe.SAST_TOOL_CODEQL_INSTALLED, codeql, "CodeQL"),
            make_finding(Probe.SAST_TOOL_SONAR_INSTALLED, sonar, "Sonar"),
            make_finding(Probe.SAST_TOOL_SNYK_INSTALLED, snyk, "Snyk"),
            make_finding(Probe.SAST_TOOL_PYSA_INSTALLED, pysa, "Pysa"),
            make_finding(Probe.SAST_TOOL_QODANA_INSTALLED, qodana, "Qodana"),
            make_finding(
                Probe.SAST_TOOL_RUNS_ON_ALL_COMMITS,
                coverage,
                f"{analyzed} commits out of {total} are checked with a SAST tool",
                payload=PullRequestCoverage(analyzed=analyzed, total=total),
            ),
        ]

    return _build


# Tool Detection Tests
def test_sonar_installed(sast_findings, dl):
    """Test Sonar alone earns a full score."""
    result = SASTEvaluator().evaluate(sast_findings(sonar=True), dl)
    assert result.score == 10
    assert result.reason == "SAST tool detected"


def test_snyk_wins_over_pysa(sast_findings, dl):
    """Test the first installed tool names the reason."""
    result = SASTEvaluator().evaluate(sast_findings(snyk=True, pysa=True), dl)
    assert result.score == 10
    assert result.reason == "SAST tool detected: Snyk"
    assert "Pysa" in dl.texts(DetailLevel.INFO)


def test_qodana_installed(sast_findings, dl):
    """Test Qodana alone earns a full score."""
    result = SASTEvaluator().evaluate(sast_findings(qodana=True), dl)
    assert result.reason == "SAST tool detected: Qodana"


# Commit Coverage Tests
def test_all_commits_analyzed(sast_findings, dl):
    """Test full pull request coverage earns a full score."""
    result = SASTEvaluator().evaluate(sast_findings(analyzed=10), dl)
    assert result.score == 10
    assert result.reason == "SAST tool is run on all commits"
    assert dl.texts(DetailLevel.INFO) == ["10 commits out of 10 are checked with a SAST tool"]


def test_partial_coverage(sast_findings, dl):
    """Test partial coverage without CodeQL is normalized."""
    result = SASTEvaluator().evaluate(sast_findings(analyzed=5), dl)
    assert result.score == 5
    assert result.reason == "SAST tool is not run on all commits -- score normalized to 5"
    assert dl.texts(DetailLevel.WARN) == ["5 commits out of 10 are checked with a SAST tool"]


def test_partial_coverage_with_codeql(sast_findings, dl):
    """Test CodeQL is blended 7 to 3 with partial coverage."""
    result = SASTEvaluator().evaluate(sast_findings(analyzed=5, codeql=True), dl)
    # (5 * 3 + 10 * 7) // 10
    assert result.score == 8
    assert result.reason == "SAST tool detected but not run on all commits"


def test_no_merged_pull_requests(sast_findings, dl):
    """Test zero pull requests score 0 rather than failing."""
    result = SASTEvaluator().evaluate(sast_findings(total=0, coverage=False), dl)
    assert result.score == 0
    assert result.reason == "SAST tool is not run on all commits -- score normalized to 0"


# No Coverage Data Tests
def test_codeql_without_coverage(sast_findings, dl):
    """Test CodeQL alone earns a full score when coverage is not applicable."""
    result = SASTEvaluator().evaluate(
        sast_findings(coverage=Outcome.NOT_APPLICABLE, codeql=True), dl
    )
    assert result.score == 10
    assert result.reason == "SAST tool detected: CodeQL"
    assert dl.count(DetailLevel.WARN) == 1


def test_nothing_detected(sast_findings, dl):
    """Test no tools and no coverage data scores 0."""
    result = SASTEvaluator().evaluate(sast_findings(coverage=Outcome.NOT_APPLICABLE), dl)
    assert result.score == 0
    assert result.reason == "no SAST tool detected"


def test_no_conclusive_results(sast_findings, dl):
    """Test unknown CodeQL and no coverage data is an error."""
    result = SASTEvaluator().evaluate(
        sast_findings(coverage=Outcome.NOT_APPLICABLE, codeql=Outcome.NOT_AVAILABLE), dl
    )
    assert result.is_error
    assert result.error.code == ErrorCode.INTERNAL


# Edge Case Tests
def test_missing_coverage_counts(make_finding, sast_findings, dl):
    """Test coverage findings without pull request counts are an error."""
    findings = sast_findings()[:-1] + [make_finding(Probe.SAST_TOOL_RUNS_ON_ALL_COMMITS, False)]
    result = SASTEvaluator().evaluate(findings, dl)
    assert result.is_error
    assert result.error.code == ErrorCode.INVALID_VALUE
    assert result.error.message == "missing analyzed pull request counts"


def test_missing_tool(sast_findings, dl):
    """Test every tool must be reported."""
    findings = [f for f in sast_findings() if f.probe != Probe.SAST_TOOL_QODANA_INSTALLED]
    result = SASTEvaluator().evaluate(findings, dl)
    assert result.is_error
    assert result.error.code == ErrorCode.INVALID_PROBE_SET
