"""Signed releases evaluator."""

import logging

from posture.consts import SIGNATURE_EXTENSIONS, CheckName, Probe
from posture.detail_logger import DetailLogger, log_findings
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_eval import ScoringConfig
from posture.models.model_finding import Finding, Outcome, ReleaseRef
from posture.models.model_result import CheckError, CheckResult, ErrorCode, LogMessage

logger = logging.getLogger(__name__)


def has_signature_asset(release: ReleaseRef) -> bool:
    """True when any release asset name ends with a signature extension."""
    return any(
        asset.lower().endswith(extension)
        for asset in release.signature_assets
        for extension in SIGNATURE_EXTENSIONS
    )


def is_signed(finding: Finding) -> bool:
    """Classify a releasesAreSigned finding as signed.

    A release is signed when the probe says so, when it ships a detached
    signature asset, or when it has a transparency log entry.
    """
    if finding.outcome == Outcome.TRUE:
        return True
    release = finding.payload
    if not isinstance(release, ReleaseRef):
        return False
    return has_signature_asset(release) or release.transparency_log_entry


class SignedReleasesEvaluator:
    """Scores the most recent releases on signatures and provenance.

    Each release earns 8 points when signed and 10 when it carries
    provenance. The check score is the floored mean over releases.
    """

    name = CheckName.SIGNED_RELEASES.value
    expected_probes = [Probe.RELEASES_ARE_SIGNED, Probe.RELEASES_HAVE_PROVENANCE]

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.settings = (config or ScoringConfig()).releases

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Calculate the signed releases score.

        Args:
            findings: One finding per release for each of the two probes
            dl: Detail logger

        Returns:
            Signed releases check result
        """
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        # Every probe reports NotApplicable when there are no releases
        logged_releases: set[str] = set()
        for finding in findings:
            if finding.outcome == Outcome.NOT_APPLICABLE:
                return CheckResult.inconclusive(self.name, "no releases found")
            release = finding.payload
            if not isinstance(release, ReleaseRef) or not release.release_name:
                return CheckResult.runtime_error(
                    self.name, CheckError(code=ErrorCode.INVALID_VALUE, message="no release found")
                )
            if release.release_name not in logged_releases:
                logged_releases.add(release.release_name)
                dl.debug(LogMessage(text=f"GitHub release found: {release.release_name}"))

        log_findings(dl, findings)

        release_scores: dict[str, int] = {}
        positives = 0

        for finding in findings:
            release_name = finding.payload.release_name
            release_scores.setdefault(release_name, 0)

            if finding.probe == Probe.RELEASES_ARE_SIGNED:
                if is_signed(finding):
                    positives += 1
                    if release_scores[release_name] == 0:
                        release_scores[release_name] = self.settings.signed_points
            elif finding.probe == Probe.RELEASES_HAVE_PROVENANCE:
                if finding.outcome == Outcome.TRUE:
                    positives += 1
                    release_scores[release_name] = self.settings.provenance_points

        if positives == 0:
            return CheckResult.min_score(
                self.name, "Project has not signed or included provenance with any releases."
            )

        total_releases = len(release_scores)
        if total_releases > self.settings.max_releases:
            logger.warning(
                f"{self.name}: {total_releases} releases exceed the lookback of {self.settings.max_releases}"
            )
            return CheckResult.runtime_error(
                self.name,
                CheckError(code=ErrorCode.INTERNAL, message="too many releases, please report this"),
            )

        score = sum(release_scores.values()) // total_releases
        signed_releases = sum(1 for points in release_scores.values() if points > 0)
        reason = (
            f"{signed_releases} out of the last {total_releases} releases "
            f"have a total of {positives} signed artifacts."
        )
        return CheckResult.scored(self.name, reason, score)
