"""Tests for the vulnerabilities evaluator."""

import pytest

from posture.consts import Probe
from posture.evaluators.vulnerabilities import AliasGroups, VulnerabilitiesEvaluator
from posture.models.model_finding import Outcome, VulnerabilityRef
from posture.models.model_result import DetailLevel, ErrorCode


@pytest.fixture
def vuln(make_finding):
    """Build a hasOSVVulnerabilities finding for one vulnerability."""

    def _build(vuln_id, *aliases):
        return make_finding(
            Probe.HAS_OSV_VULNERABILITIES,
            True,
            payload=VulnerabilityRef(id=vuln_id, aliases=list(aliases)),
        )

    return _build


@pytest.fixture
def release(make_finding):
    """Build a release finding: True when the release shipped clean."""

    def _build(clean, message=""):
        return make_finding(Probe.RELEASES_DIRECT_DEPS_ARE_VULN_FREE, clean, message)

    return _build


# Alias Groups Tests
def test_alias_groups_merge_shared_ids():
    """Test IDs joined by an alias form one group."""
    groups = AliasGroups()
    groups.add("GHSA-1", ["CVE-1"])
    groups.add("CVE-1", ["GHSA-1"])
    groups.add("PYSEC-2", [])
    assert groups.groups() == [["CVE-1", "GHSA-1"], ["PYSEC-2"]]


def test_alias_groups_transitive():
    """Test groups merge through a common alias."""
    groups = AliasGroups()
    groups.add("GHSA-1", ["CVE-1"])
    groups.add("OSV-9", ["CVE-1"])
    assert groups.groups() == [["CVE-1", "GHSA-1", "OSV-9"]]


# Classic Scoring Tests
def test_no_vulnerabilities(make_finding, dl):
    """Test a clean project scores 10."""
    result = VulnerabilitiesEvaluator().evaluate(
        [make_finding(Probe.HAS_OSV_VULNERABILITIES, False)], dl
    )
    assert result.score == 10
    assert result.reason == "0 existing vulnerabilities detected"


def test_each_vulnerability_costs_a_point(vuln, dl):
    """Test three distinct vulnerabilities score 7."""
    findings = [vuln("CVE-1"), vuln("CVE-2"), vuln("CVE-3")]
    result = VulnerabilitiesEvaluator().evaluate(findings, dl)
    assert result.score == 7
    assert result.reason == "3 existing vulnerabilities detected"
    assert dl.count(DetailLevel.WARN) == 3


def test_many_vulnerabilities_floor_at_zero(vuln, dl):
    """Test ten or more vulnerabilities score 0."""
    findings = [vuln(f"CVE-{i}") for i in range(12)]
    assert VulnerabilitiesEvaluator().evaluate(findings, dl).score == 0


def test_aliases_count_once(vuln, dl):
    """Test a vulnerability listed under two IDs counts once."""
    findings = [vuln("GHSA-xxxx", "CVE-2024-1"), vuln("CVE-2024-1", "GHSA-xxxx")]
    result = VulnerabilitiesEvaluator().evaluate(findings, dl)
    assert result.score == 9
    assert dl.texts(DetailLevel.WARN) == ["Project is vulnerable to: CVE-2024-1 / GHSA-xxxx"]


# Release History Tests
def test_blended_score(vuln, release, dl):
    """Test current vulnerabilities blend with release history."""
    findings = [
        vuln("CVE-1"),
        vuln("CVE-2"),
        release(True),
        release(True),
        release(True),
        release(False, "v1.0 shipped with vulnerable requests"),
    ]
    result = VulnerabilitiesEvaluator().evaluate(findings, dl)
    # (6 - 2) + 4 * 3 / 4 = 7
    assert result.score == 7
    assert result.reason == (
        "2 current vulnerabilities detected, 3/4 recent releases were free of "
        "vulnerabilities at time of release"
    )
    assert "v1.0 shipped with vulnerable requests" in dl.texts(DetailLevel.WARN)


def test_blended_score_rounds_half_up(vuln, release, dl):
    """Test the blended score rounds .5 up."""
    findings = [vuln("CVE-1"), release(True), *[release(False) for _ in range(7)]]
    # (6 - 1) + 4 * 1 / 8 = 5.5
    assert VulnerabilitiesEvaluator().evaluate(findings, dl).score == 6


def test_blended_score_caps_current_vulnerabilities(vuln, release, dl):
    """Test more than six vulnerabilities leave only release history points."""
    findings = [*[vuln(f"CVE-{i}") for i in range(9)], release(True), release(False)]
    assert VulnerabilitiesEvaluator().evaluate(findings, dl).score == 2


def test_dirty_release_default_message(make_finding, release, dl):
    """Test a dirty release without a message gets a default warning."""
    findings = [make_finding(Probe.HAS_OSV_VULNERABILITIES, False), release(False)]
    VulnerabilitiesEvaluator().evaluate(findings, dl)
    assert dl.texts(DetailLevel.WARN) == ["release shipped with vulnerable direct dependencies"]


# Error Tests
def test_missing_osv_probe(release, dl):
    """Test release findings alone are an error."""
    result = VulnerabilitiesEvaluator().evaluate([release(True)], dl)
    assert result.is_error
    assert result.error.code == ErrorCode.INTERNAL
    assert result.error.message == "missing hasOSVVulnerabilities probe results"


def test_unknown_probe(make_finding, dl):
    """Test findings from an unrelated probe are rejected."""
    findings = [
        make_finding(Probe.HAS_OSV_VULNERABILITIES, False),
        make_finding(Probe.ARCHIVED, False),
    ]
    result = VulnerabilitiesEvaluator().evaluate(findings, dl)
    assert result.is_error
    assert result.error.code == ErrorCode.UNKNOWN_PROBE
    assert result.error.message == "unknown probe: archived"


def test_vulnerability_without_id(make_finding, dl):
    """Test a True finding must carry the vulnerability ID."""
    result = VulnerabilitiesEvaluator().evaluate(
        [make_finding(Probe.HAS_OSV_VULNERABILITIES, Outcome.TRUE)], dl
    )
    assert result.is_error
    assert result.error.code == ErrorCode.INVALID_VALUE
