"""Branch protection evaluator.

Development and release branches are scored on five tiers. A tier counts
only when every earlier tier is complete on all branches, and the first
incomplete tier earns its share of the tier points:

    1. deletion AND force push blocked                       3
    2. approvals, pull requests, up-to-date branches and
       last-push approval required                           3
    3. status checks run before merging                      2
    4. two or more approvals AND code owner review           1
    5. stale reviews dismissed AND rules apply to admins     1

Settings the probes could not read (NotAvailable) are left out of the
tier maximum. Detail messages are only written for branches matching a
protection rule.
"""

import math
from fractions import Fraction

from pydantic import BaseModel

from posture.consts import BRANCH_PROTECTION_PROBES, CheckName, Probe
from posture.detail_logger import DetailLogger, log_finding
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import BranchRef, Finding, Outcome
from posture.models.model_result import (
    CheckError,
    CheckResult,
    DetailLevel,
    ErrorCode,
    LogMessage,
)

MIN_REVIEWS = 2
REVIEWER_WEIGHT = 2

# Points per tier, in evaluation order
TIER_LEVELS = [3, 3, 2, 1, 1]
BASIC, REVIEW, CONTEXT, THOROUGH_REVIEW, ADMIN_THOROUGH_REVIEW = range(len(TIER_LEVELS))

NO_BRANCHES_REASON = "unable to detect any development/release branches"

LOG_WITHOUT_DEBUG = {Outcome.TRUE: DetailLevel.INFO, Outcome.FALSE: DetailLevel.WARN}
LOG_WITH_DEBUG = {**LOG_WITHOUT_DEBUG, Outcome.NOT_AVAILABLE: DetailLevel.DEBUG}


class TierPoints(BaseModel):
    """Points earned and available for one tier, summed over branches."""

    earned: int = 0
    available: int = 0

    def add(self, passed: bool, points: int = 1, counted: bool = True) -> None:
        if counted:
            self.available += points
        if passed:
            self.earned += points

    @property
    def complete(self) -> bool:
        return self.earned >= self.available


def branch_protection_score(tiers: list[TierPoints]) -> int:
    """Sum tier points up to and including the first incomplete tier.

    A tier with nothing available earns its full points.
    """
    score = Fraction(0)
    for level, tier in zip(TIER_LEVELS, tiers):
        if tier.available == 0:
            score += level
        else:
            score += Fraction(tier.earned * level, tier.available)
        if not tier.complete:
            break
    return math.floor(score)


def branch_name_of(finding: Finding) -> str:
    if isinstance(finding.payload, BranchRef):
        return finding.payload.branch_name
    return ""


def required_reviewers(finding: Finding) -> int | None:
    """Approvals required on the branch; unreadable settings count as none."""
    if finding.outcome == Outcome.NOT_AVAILABLE:
        return 0
    if isinstance(finding.payload, BranchRef):
        return finding.payload.required_reviewers
    return None


class BranchProtectionEvaluator:
    """Evaluates protection rules on development and release branches."""

    name = CheckName.BRANCH_PROTECTION.value
    expected_probes = BRANCH_PROTECTION_PROBES

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Calculate the branch protection score.

        Args:
            findings: One finding per branch for each protection setting
            dl: Detail logger

        Returns:
            Branch protection check result
        """
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        protected: dict[str, bool] = {}
        for finding in findings:
            if finding.outcome == Outcome.NOT_APPLICABLE:
                return CheckResult.inconclusive(self.name, NO_BRANCHES_REASON)
            branch = branch_name_of(finding)
            if not branch:
                return CheckResult.runtime_error(
                    self.name,
                    CheckError(
                        code=ErrorCode.INVALID_VALUE,
                        message=f"{finding.probe} finding is missing the branch name",
                    ),
                )
            if finding.probe != Probe.BRANCHES_ARE_PROTECTED:
                continue
            if finding.outcome == Outcome.FALSE:
                protected[branch] = False
                dl.warn(LogMessage(text=f"branch protection not enabled for branch '{branch}'"))
            elif finding.outcome == Outcome.TRUE:
                protected[branch] = True

        tiers = [TierPoints() for _ in TIER_LEVELS]
        for finding in findings:
            logging_enabled = protected.get(branch_name_of(finding), False)
            passed = finding.outcome == Outcome.TRUE
            readable = finding.outcome != Outcome.NOT_AVAILABLE

            if finding.probe in (Probe.BLOCKS_DELETE_ON_BRANCHES, Probe.BLOCKS_FORCE_PUSH_ON_BRANCHES):
                self._log(dl, logging_enabled, finding, LOG_WITHOUT_DEBUG.get(finding.outcome))
                tiers[BASIC].add(passed)

            elif finding.probe in (
                Probe.DISMISSES_STALE_REVIEWS,
                Probe.BRANCH_PROTECTION_APPLIES_TO_ADMINS,
            ):
                self._log(dl, logging_enabled, finding, LOG_WITH_DEBUG.get(finding.outcome))
                tiers[ADMIN_THOROUGH_REVIEW].add(passed, counted=readable)

            elif finding.probe == Probe.REQUIRES_APPROVERS_FOR_PULL_REQUESTS:
                reviewers = required_reviewers(finding)
                if reviewers is None:
                    return CheckResult.runtime_error(
                        self.name,
                        CheckError(code=ErrorCode.INVALID_VALUE, message="unable to get reviewer count"),
                    )
                if passed:
                    level = DetailLevel.INFO if reviewers >= MIN_REVIEWS else DetailLevel.WARN
                    self._log(dl, logging_enabled, finding, level)
                elif finding.outcome == Outcome.FALSE:
                    self._log(dl, logging_enabled, finding, DetailLevel.WARN)
                # Scored twice: any approval for tier 2, enough approvals for tier 4
                tiers[THOROUGH_REVIEW].add(passed and reviewers >= MIN_REVIEWS)
                tiers[REVIEW].add(passed and reviewers > 0, points=REVIEWER_WEIGHT)

            elif finding.probe == Probe.REQUIRES_CODE_OWNERS_REVIEW:
                level = DetailLevel.INFO if passed else DetailLevel.WARN
                self._log(dl, logging_enabled, finding, level)
                tiers[THOROUGH_REVIEW].add(passed)

            elif finding.probe in (
                Probe.REQUIRES_UP_TO_DATE_BRANCHES,
                Probe.REQUIRES_LAST_PUSH_APPROVAL,
                Probe.REQUIRES_PRS_TO_CHANGE_CODE,
            ):
                self._log(dl, logging_enabled, finding, LOG_WITH_DEBUG.get(finding.outcome))
                tiers[REVIEW].add(passed, counted=readable)

            elif finding.probe == Probe.RUNS_STATUS_CHECKS_BEFORE_MERGING:
                level = DetailLevel.INFO if passed else DetailLevel.WARN
                self._log(dl, logging_enabled, finding, level)
                tiers[CONTEXT].add(passed)

        score = branch_protection_score(tiers)
        if score == 0:
            return CheckResult.min_score(
                self.name, "branch protection not enabled on development/release branches"
            )
        if score == 10:
            return CheckResult.max_score(
                self.name, "branch protection is fully enabled on development and all release branches"
            )
        return CheckResult.scored(
            self.name, "branch protection is not maximal on development and all release branches", score
        )

    def _log(
        self, dl: DetailLogger, enabled: bool, finding: Finding, level: DetailLevel | None
    ) -> None:
        if enabled and level is not None:
            log_finding(dl, finding, level)
