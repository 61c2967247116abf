"""Tests for the release tag protection evaluator."""

import pytest

from posture.consts import Probe
from posture.evaluators.tag_protection import (
    TagProtectionEvaluator,
    count_protection,
    is_gitlab_repository,
)
from posture.models.model_finding import Outcome, ProtectionLevel, TagRef
from posture.models.model_result import DetailLevel

GITHUB_PROBES = TagProtectionEvaluator.expected_probes


@pytest.fixture
def github_tags(make_finding):
    """Build GitHub findings for two release tags.

    Every probe passes on both tags unless listed in ``failing``, in which
    case it fails on tag v1.1.
    """

    def _build(*failing):
        findings = []
        for probe in GITHUB_PROBES:
            for tag in ("v1.0", "v1.1"):
                passed = not (probe in failing and tag == "v1.1")
                findings.append(make_finding(probe, passed, payload=TagRef(tag_name=tag)))
        return findings

    return _build


@pytest.fixture
def gitlab_ref(make_finding):
    """Build a GitLab finding with a protection level."""

    def _build(probe, level, name="main"):
        outcome = level is not None and level != ProtectionLevel.NONE
        return make_finding(probe, outcome, payload=TagRef(tag_name=name, protection_level=level))

    return _build


# Helper Tests
def test_count_protection_skips_not_applicable(make_finding):
    """Test only applicable findings of the probe are counted."""
    findings = [
        make_finding(Probe.TAGS_ARE_PROTECTED, True),
        make_finding(Probe.TAGS_ARE_PROTECTED, False),
        make_finding(Probe.TAGS_ARE_PROTECTED, Outcome.NOT_APPLICABLE),
        make_finding(Probe.BLOCKS_DELETE_ON_TAGS, True),
    ]
    count = count_protection(findings, Probe.TAGS_ARE_PROTECTED.value)
    assert count.passed == 1
    assert count.total == 2
    assert not count.fully_protected


def test_is_gitlab_repository(make_finding):
    """Test applicable GitLab findings select the GitLab model."""
    assert is_gitlab_repository([make_finding(Probe.GITLAB_RELEASE_TAGS_ARE_PROTECTED, False)])
    assert not is_gitlab_repository(
        [make_finding(Probe.GITLAB_RELEASE_TAGS_ARE_PROTECTED, Outcome.NOT_APPLICABLE)]
    )
    assert not is_gitlab_repository([make_finding(Probe.TAGS_ARE_PROTECTED, True)])


# GitHub Tier Tests
def test_all_tiers_pass(github_tags, dl):
    """Test full protection scores 10."""
    result = TagProtectionEvaluator().evaluate(github_tags(), dl)
    assert result.score == 10
    assert result.reason == "release tag protection -- score normalized to 10"
    assert "Signed tags are required on all release tags" in dl.texts(DetailLevel.INFO)


def test_unprotected_tag_scores_zero(github_tags, dl):
    """Test a single unprotected tag fails the first tier."""
    result = TagProtectionEvaluator().evaluate(github_tags(Probe.TAGS_ARE_PROTECTED), dl)
    assert result.score == 0
    assert result.reason == "not all release tags are protected"
    assert dl.texts(DetailLevel.WARN) == ["Not all release tags are protected"]
    assert dl.texts(DetailLevel.DEBUG) == ["Tag 'v1.1' lacks protection"]


def test_partial_delete_protection_scores_three(github_tags, dl):
    """Test a tier-2 gap keeps only the base tier."""
    result = TagProtectionEvaluator().evaluate(github_tags(Probe.BLOCKS_FORCE_PUSH_ON_TAGS), dl)
    assert result.score == 3
    assert "Tag deletion is blocked on all release tags" in dl.texts(DetailLevel.INFO)
    assert "Not Force push is blocked on all release tags" in dl.texts(DetailLevel.WARN)
    assert "Tag 'v1.1' lacks force-push protection" in dl.texts(DetailLevel.DEBUG)


def test_update_gap_scores_six(github_tags, dl):
    """Test a tier-3 gap keeps tier 2."""
    result = TagProtectionEvaluator().evaluate(github_tags(Probe.BLOCKS_UPDATE_ON_TAGS), dl)
    assert result.score == 6


def test_admin_gap_scores_eight(github_tags, dl):
    """Test a tier-4 gap keeps tier 3."""
    result = TagProtectionEvaluator().evaluate(
        github_tags(Probe.TAG_PROTECTION_APPLIES_TO_ADMINS), dl
    )
    assert result.score == 8


def test_admin_gap_still_reports_signed_tags(github_tags, dl):
    """Test signed tags are reported after a tier-4 gap."""
    findings = github_tags(Probe.TAG_PROTECTION_APPLIES_TO_ADMINS, Probe.REQUIRES_SIGNED_TAGS)
    result = TagProtectionEvaluator().evaluate(findings, dl)
    assert result.score == 8
    assert dl.texts()[-3:] == [
        "Tag 'v1.1' lacks admin enforcement",
        "Tag creation is restricted on all release tags",
        "Signed tags are not required on all release tags (optional security enhancement)",
    ]


def test_update_gap_does_not_report_signed_tags(github_tags, dl):
    """Test signed tags are not reported when tier 3 fails."""
    TagProtectionEvaluator().evaluate(github_tags(Probe.BLOCKS_UPDATE_ON_TAGS), dl)
    assert not any("Signed tags" in text for text in dl.texts())


def test_later_tiers_not_evaluated_after_failure(github_tags, dl):
    """Test later tiers are not logged once a tier fails."""
    TagProtectionEvaluator().evaluate(github_tags(Probe.BLOCKS_DELETE_ON_TAGS), dl)
    texts = dl.texts()
    assert not any("updates" in text for text in texts)
    assert not any("Signed tags" in text for text in texts)


def test_signed_tags_do_not_change_score(github_tags, dl):
    """Test missing signed tags are reported but not scored."""
    result = TagProtectionEvaluator().evaluate(github_tags(Probe.REQUIRES_SIGNED_TAGS), dl)
    assert result.score == 10
    assert any("optional security enhancement" in text for text in dl.texts(DetailLevel.DEBUG))


def test_no_release_tags_inconclusive(make_finding, dl):
    """Test no release tags is inconclusive."""
    findings = [make_finding(probe, Outcome.NOT_APPLICABLE) for probe in GITHUB_PROBES]
    result = TagProtectionEvaluator().evaluate(findings, dl)
    assert result.is_inconclusive
    assert result.reason == "no release tags found"


def test_github_missing_probe(github_tags, dl):
    """Test missing GitHub probes are an invalid probe set."""
    findings = [f for f in github_tags() if f.probe != Probe.RESTRICTS_TAG_CREATION]
    assert TagProtectionEvaluator().evaluate(findings, dl).is_error


# GitLab Tests
def test_gitlab_strongest(gitlab_ref, dl):
    """Test strongest protection everywhere scores 10."""
    findings = [
        gitlab_ref(Probe.TAGS_CANNOT_DUPLICATE_BRANCH_NAMES, ProtectionLevel.STRONGEST),
        gitlab_ref(Probe.GITLAB_RELEASE_TAGS_ARE_PROTECTED, ProtectionLevel.STRONGEST, "v1.0"),
    ]
    result = TagProtectionEvaluator().evaluate(findings, dl)
    assert result.score == 10
    assert result.reason == "GitLab tag protection -- score normalized to 10"
    assert dl.texts(DetailLevel.INFO) == [
        "All branches fully protected from tag shadowing",
        "All release tags fully protected",
    ]


def test_gitlab_strong(gitlab_ref, dl):
    """Test strong protection everywhere scores 5."""
    findings = [
        gitlab_ref(Probe.TAGS_CANNOT_DUPLICATE_BRANCH_NAMES, ProtectionLevel.STRONG),
        gitlab_ref(Probe.GITLAB_RELEASE_TAGS_ARE_PROTECTED, ProtectionLevel.STRONG, "v1.0"),
    ]
    assert TagProtectionEvaluator().evaluate(findings, dl).score == 5


def test_gitlab_mixed_strength(gitlab_ref, dl):
    """Test mixed strongest and strong counts as strong."""
    findings = [
        gitlab_ref(Probe.TAGS_CANNOT_DUPLICATE_BRANCH_NAMES, ProtectionLevel.STRONGEST),
        gitlab_ref(Probe.TAGS_CANNOT_DUPLICATE_BRANCH_NAMES, ProtectionLevel.STRONG, "dev"),
        gitlab_ref(Probe.GITLAB_RELEASE_TAGS_ARE_PROTECTED, ProtectionLevel.STRONGEST, "v1.0"),
    ]
    assert TagProtectionEvaluator().evaluate(findings, dl).score == 9


def test_gitlab_unprotected_branch(gitlab_ref, dl):
    """Test one unprotected branch removes the shadowing points."""
    findings = [
        gitlab_ref(Probe.TAGS_CANNOT_DUPLICATE_BRANCH_NAMES, ProtectionLevel.STRONGEST),
        gitlab_ref(Probe.TAGS_CANNOT_DUPLICATE_BRANCH_NAMES, ProtectionLevel.NONE, "dev"),
        gitlab_ref(Probe.GITLAB_RELEASE_TAGS_ARE_PROTECTED, ProtectionLevel.STRONG, "v1.0"),
    ]
    result = TagProtectionEvaluator().evaluate(findings, dl)
    assert result.score == 4
    assert "1 out of 2 branches have some tag shadowing protection" in dl.texts(DetailLevel.INFO)
    assert "Some branches lack adequate tag shadowing protection" in dl.texts(DetailLevel.WARN)


def test_gitlab_without_release_tags(gitlab_ref, dl):
    """Test GitLab without release tags keeps only shadowing points."""
    findings = [gitlab_ref(Probe.TAGS_CANNOT_DUPLICATE_BRANCH_NAMES, ProtectionLevel.STRONGEST)]
    result = TagProtectionEvaluator().evaluate(findings, dl)
    assert result.score == 2
    assert "No release tags found to evaluate" in dl.texts(DetailLevel.WARN)
