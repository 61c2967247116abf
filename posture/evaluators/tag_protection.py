"""Release tag protection evaluator.

GitHub repositories are scored on tiers, each awarded only when the
previous one is fully satisfied on every release tag:

    1. all release tags protected                          3
    2. deletion AND force push blocked                     6
    3. updates blocked                                     8
    4. applies to admins AND creation restricted           10

Signed tags are reported once tier 3 passes but never change the score.

GitLab repositories are scored on protection strength instead:

    branch shadowing   strongest 2, strong 1, otherwise 0
    release tags       strongest 8, strong 4, otherwise 0
"""

from pydantic import BaseModel

from posture.consts import GITLAB_TAG_PROBES, MAX_RESULT_SCORE, CheckName, Probe
from posture.detail_logger import DetailLogger
from posture.evaluators.aggregation import Tier, proportional_result, tiered_score
from posture.evaluators.probe_set import probe_names, validate_probe_set
from posture.models.model_finding import Finding, Outcome, ProtectionLevel, TagRef
from posture.models.model_result import CheckResult, LogMessage

# (points, [(probe, status text, missing feature)]) for tiers 2-4
GITHUB_TIERS = [
    (
        6,
        [
            (Probe.BLOCKS_DELETE_ON_TAGS, "Tag deletion is blocked", "delete protection"),
            (Probe.BLOCKS_FORCE_PUSH_ON_TAGS, "Force push is blocked", "force-push protection"),
        ],
    ),
    (
        8,
        [
            (Probe.BLOCKS_UPDATE_ON_TAGS, "Tag updates are blocked", "update protection"),
        ],
    ),
    (
        10,
        [
            (
                Probe.TAG_PROTECTION_APPLIES_TO_ADMINS,
                "Tag protection applies to administrators",
                "admin enforcement",
            ),
            (Probe.RESTRICTS_TAG_CREATION, "Tag creation is restricted", "creation restriction"),
        ],
    ),
]

BASE_TIER_POINTS = 3
SIGNED_TAGS_MIN_POINTS = 8  # Signed tags are reported once updates are blocked
SHADOWING_POINTS = {ProtectionLevel.STRONGEST: 2, ProtectionLevel.STRONG: 1}
RELEASE_TAG_POINTS = {ProtectionLevel.STRONGEST: 8, ProtectionLevel.STRONG: 4}


class ProtectionCount(BaseModel):
    """Applicable findings of one probe split by outcome or strength."""

    passed: int = 0
    total: int = 0
    strongest: int = 0
    strong: int = 0

    @property
    def fully_protected(self) -> bool:
        return self.total > 0 and self.passed == self.total


def count_protection(findings: list[Finding], probe: str) -> ProtectionCount:
    """Count applicable findings of a probe. NotApplicable findings are skipped."""
    count = ProtectionCount()
    for finding in findings:
        if finding.probe != probe or finding.outcome == Outcome.NOT_APPLICABLE:
            continue
        count.total += 1
        if finding.outcome != Outcome.TRUE:
            continue
        count.passed += 1
        if isinstance(finding.payload, TagRef):
            if finding.payload.protection_level == ProtectionLevel.STRONGEST:
                count.strongest += 1
            elif finding.payload.protection_level == ProtectionLevel.STRONG:
                count.strong += 1
    return count


def is_gitlab_repository(findings: list[Finding]) -> bool:
    """True when any GitLab-only probe produced an applicable finding."""
    gitlab_probes = probe_names(GITLAB_TAG_PROBES)
    return any(
        f.probe in gitlab_probes and f.outcome != Outcome.NOT_APPLICABLE for f in findings
    )


class TagProtectionEvaluator:
    """Evaluates protection of release tags on GitHub and GitLab."""

    name = CheckName.TAG_PROTECTION.value
    expected_probes = [
        Probe.TAGS_ARE_PROTECTED,
        Probe.BLOCKS_DELETE_ON_TAGS,
        Probe.BLOCKS_FORCE_PUSH_ON_TAGS,
        Probe.BLOCKS_UPDATE_ON_TAGS,
        Probe.TAG_PROTECTION_APPLIES_TO_ADMINS,
        Probe.RESTRICTS_TAG_CREATION,
        Probe.REQUIRES_SIGNED_TAGS,
    ]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Calculate the tag protection score.

        Args:
            findings: One finding per release tag for each GitHub probe, or
                GitLab branch and release tag findings
            dl: Detail logger

        Returns:
            Tag protection check result
        """
        if is_gitlab_repository(findings):
            return self._evaluate_gitlab(findings, dl)
        return self._evaluate_github(findings, dl)

    def _evaluate_github(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        gitlab_probes = probe_names(GITLAB_TAG_PROBES)
        github_findings = [f for f in findings if f.probe not in gitlab_probes]
        if error := validate_probe_set(self.name, github_findings, self.expected_probes):
            return error

        protected = count_protection(github_findings, Probe.TAGS_ARE_PROTECTED.value)
        if protected.total == 0:
            return CheckResult.inconclusive(self.name, "no release tags found")

        if not protected.fully_protected:
            dl.warn(LogMessage(text="Not all release tags are protected"))
            self._log_unprotected_tags(github_findings, Probe.TAGS_ARE_PROTECTED, "protection", dl)
            return CheckResult.min_score(self.name, "not all release tags are protected")

        dl.info(LogMessage(text="All release tags are protected"))
        tiers = [Tier(points=BASE_TIER_POINTS, passed=True)]
        for points, features in GITHUB_TIERS:
            statuses = [
                self._feature_status(github_findings, probe, text, feature, dl)
                for probe, text, feature in features
            ]
            tiers.append(Tier(points=points, passed=all(statuses)))
            if not tiers[-1].passed:
                break

        score = tiered_score(tiers)
        if score >= SIGNED_TAGS_MIN_POINTS:
            self._log_signed_tags(github_findings, dl)
        return proportional_result(self.name, "release tag protection", score, MAX_RESULT_SCORE)

    def _feature_status(
        self,
        findings: list[Finding],
        probe: Probe,
        text: str,
        feature: str,
        dl: DetailLogger,
    ) -> bool:
        count = count_protection(findings, probe.value)
        if count.fully_protected:
            dl.info(LogMessage(text=f"{text} on all release tags"))
            return True
        if count.total > 0:
            dl.warn(LogMessage(text=f"Not {text} on all release tags"))
        self._log_unprotected_tags(findings, probe, feature, dl)
        return False

    def _log_unprotected_tags(
        self, findings: list[Finding], probe: Probe, feature: str, dl: DetailLogger
    ) -> None:
        for finding in findings:
            if finding.probe != probe or finding.outcome != Outcome.FALSE:
                continue
            tag_name = "unknown"
            if isinstance(finding.payload, TagRef) and finding.payload.tag_name:
                tag_name = finding.payload.tag_name
            dl.debug(LogMessage(text=f"Tag '{tag_name}' lacks {feature}", location=finding.location))

    def _log_signed_tags(self, findings: list[Finding], dl: DetailLogger) -> None:
        signed = count_protection(findings, Probe.REQUIRES_SIGNED_TAGS.value)
        if signed.fully_protected:
            dl.info(LogMessage(text="Signed tags are required on all release tags"))
        elif signed.total > 0:
            dl.debug(
                LogMessage(
                    text="Signed tags are not required on all release tags (optional security enhancement)"
                )
            )

    def _evaluate_gitlab(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        score = self._branch_shadowing_points(findings, dl) + self._release_tag_points(findings, dl)
        return proportional_result(self.name, "GitLab tag protection", score, MAX_RESULT_SCORE)

    def _branch_shadowing_points(self, findings: list[Finding], dl: DetailLogger) -> int:
        count = count_protection(findings, Probe.TAGS_CANNOT_DUPLICATE_BRANCH_NAMES.value)
        if count.total == 0:
            dl.warn(LogMessage(text="No branches found for shadowing evaluation"))
            return 0
        if count.strongest == count.total:
            dl.info(LogMessage(text="All branches fully protected from tag shadowing"))
            return SHADOWING_POINTS[ProtectionLevel.STRONGEST]
        if count.strongest + count.strong == count.total:
            dl.info(LogMessage(text="All branches protected from tag shadowing"))
            return SHADOWING_POINTS[ProtectionLevel.STRONG]

        protected = count.strongest + count.strong
        if protected > 0:
            dl.info(
                LogMessage(
                    text=f"{protected} out of {count.total} branches have some tag shadowing protection"
                )
            )
        dl.warn(LogMessage(text="Some branches lack adequate tag shadowing protection"))
        return 0

    def _release_tag_points(self, findings: list[Finding], dl: DetailLogger) -> int:
        count = count_protection(findings, Probe.GITLAB_RELEASE_TAGS_ARE_PROTECTED.value)
        if count.total == 0:
            dl.warn(LogMessage(text="No release tags found to evaluate"))
            return 0
        if count.strongest == count.total:
            dl.info(LogMessage(text="All release tags fully protected"))
            return RELEASE_TAG_POINTS[ProtectionLevel.STRONGEST]
        if count.strongest + count.strong == count.total:
            dl.info(LogMessage(text="All release tags protected"))
            return RELEASE_TAG_POINTS[ProtectionLevel.STRONG]

        dl.warn(LogMessage(text="Some release tags lack adequate restrictions"))
        return 0
