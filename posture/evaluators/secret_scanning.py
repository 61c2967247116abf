"""Secret scanning evaluator.

GitHub repositories are scored on native secret scanning first. GitLab
repositories, and GitHub repositories whose native status is unknown, use
an additive model:

    Secret Push Protection          +4
    Pipeline Secret Detection       +4
    push rules prevent secrets      +1
    third-party scanner             +1 to +10

Third-party scanners are scored on how often they actually run in CI.
Periodic scanners (shhgit, repo-supervisor) score 10 when they ran in the
last 30 days. Commit-triggered scanners score on the share of the last 100
commits they ran on:

    100%        -> 10
    70-99%      -> 7
    50-69%      -> 5
    25-49%      -> 3
    below 25%   -> 1

A scanner with no CI data scores 1. The best scanner wins.
"""

from posture.consts import MAX_RESULT_SCORE, MIN_RESULT_SCORE, THIRD_PARTY_SECRET_PROBES, CheckName, Probe
from posture.detail_logger import DetailLogger, log_findings
from posture.evaluators.probe_set import probe_names
from posture.models.model_finding import ExecutionPattern, Finding, Outcome, SecretToolRun
from posture.models.model_result import CheckResult

THIRD_PARTY_SCANNER_PRESENT = "; third-party scanner present"
NO_TOOL_DATA_SCORE = 1

# (minimum coverage, score), checked top down
COVERAGE_STAIRCASE = [
    (1.0, 10),
    (0.70, 7),
    (0.50, 5),
    (0.25, 3),
]

# Additive GitLab points: (probe, label, points)
GITLAB_CONTROLS = [
    (Probe.HAS_GITLAB_SECRET_PUSH_PROTECTION, "Secret Push Protection", 4),
    (Probe.HAS_GITLAB_PIPELINE_SECRET_DETECTION, "Pipeline Secret Detection", 4),
    (Probe.HAS_GITLAB_PUSH_RULES_PREVENT_SECRETS, "Push rules prevent_secrets", 1),
]


def score_from_coverage(coverage: float) -> int:
    """Map commit coverage (0.0-1.0) of a commit-triggered scanner to a score."""
    for minimum, score in COVERAGE_STAIRCASE:
        if coverage >= minimum:
            return score
    return NO_TOOL_DATA_SCORE


def score_for_tool(stats: SecretToolRun | None) -> int:
    """Score one scanner from its CI execution statistics."""
    if stats is None or stats.total_commits == 0:
        return NO_TOOL_DATA_SCORE
    if stats.execution_pattern == ExecutionPattern.PERIODIC:
        return MAX_RESULT_SCORE if stats.has_recent_runs else NO_TOOL_DATA_SCORE
    return score_from_coverage(stats.commits_with_run / stats.total_commits)


def format_ci_coverage(tool_runs: list[SecretToolRun]) -> str:
    """Per-tool CI coverage fragment, e.g. " (gitleaks: 70% coverage)"."""
    details = []
    for stats in tool_runs:
        if stats.total_commits == 0:
            continue
        if stats.execution_pattern == ExecutionPattern.PERIODIC:
            status = "ran recently" if stats.has_recent_runs else "no recent runs"
            details.append(f"{stats.tool}: {status}")
        else:
            coverage = stats.commits_with_run / stats.total_commits * 100
            details.append(f"{stats.tool}: {coverage:.0f}% coverage")
    if not details:
        return ""
    return " (" + ", ".join(details) + ")"


class SecretScanningEvaluator:
    """Evaluates secret scanning across platforms and third-party tools.

    Probes are optional by platform, so the probe set is not validated
    against a fixed catalog. Unknown probes are ignored.
    """

    name = CheckName.SECRET_SCANNING.value
    expected_probes = [
        Probe.HAS_GITHUB_SECRET_SCANNING_ENABLED,
        Probe.HAS_GITHUB_PUSH_PROTECTION_ENABLED,
        Probe.HAS_GITLAB_SECRET_PUSH_PROTECTION,
        Probe.HAS_GITLAB_PIPELINE_SECRET_DETECTION,
        Probe.HAS_GITLAB_PUSH_RULES_PREVENT_SECRETS,
        *THIRD_PARTY_SECRET_PROBES,
    ]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Calculate the secret scanning score.

        Args:
            findings: At most one finding per platform probe, plus third-party
                scanner findings carrying CI statistics
            dl: Detail logger

        Returns:
            Secret scanning check result
        """
        log_findings(dl, findings)

        outcomes = {f.probe: f.outcome for f in findings}
        third_party = [
            f
            for f in findings
            if f.probe in probe_names(THIRD_PARTY_SECRET_PROBES) and f.outcome == Outcome.TRUE
        ]
        tool_runs = [f.payload for f in third_party if isinstance(f.payload, SecretToolRun)]
        push_protection = outcomes.get(Probe.HAS_GITHUB_PUSH_PROTECTION_ENABLED.value) == Outcome.TRUE

        native = outcomes.get(Probe.HAS_GITHUB_SECRET_SCANNING_ENABLED.value)
        if native == Outcome.TRUE:
            reason = "GitHub native secret scanning is enabled"
            if push_protection:
                reason += " (push protection enabled)"
            if third_party:
                reason += self._third_party_fragment(third_party)
            return CheckResult.max_score(self.name, reason)

        if native == Outcome.FALSE:
            reason = "GitHub native secret scanning is disabled"
            if push_protection:
                reason += " (push protection enabled)"
            if not third_party:
                return CheckResult.scored(self.name, reason, MIN_RESULT_SCORE)
            reason += self._third_party_fragment(third_party) + format_ci_coverage(tool_runs)
            return CheckResult.scored(self.name, reason, self._third_party_score(tool_runs))

        if native == Outcome.NOT_AVAILABLE:
            reason = "Token has insufficient permissions to get information about native GitHub secret scanning"
            if third_party:
                reason += self._third_party_fragment(third_party) + format_ci_coverage(tool_runs)
            return CheckResult.inconclusive(self.name, reason)

        return self._gitlab_posture(outcomes, third_party, tool_runs)

    def _gitlab_posture(
        self,
        outcomes: dict[str, Outcome],
        third_party: list[Finding],
        tool_runs: list[SecretToolRun],
    ) -> CheckResult:
        score = 0
        bits = []
        for probe, label, points in GITLAB_CONTROLS:
            if outcomes.get(probe.value) == Outcome.TRUE:
                score += points
                bits.append(f"{label}: on")
            else:
                bits.append(f"{label}: off")

        if third_party:
            score += self._third_party_score(tool_runs)
            details = self._third_party_details(third_party)
            bits.append("3rd-party scanner: " + ("; ".join(details) if details else "present"))
            if coverage := format_ci_coverage(tool_runs):
                bits.append("CI stats:" + coverage)
        else:
            bits.append("3rd-party scanner: not found")

        reason = "GitLab secret scanning posture: " + "; ".join(bits)
        return CheckResult.scored(self.name, reason, min(score, MAX_RESULT_SCORE))

    def _third_party_score(self, tool_runs: list[SecretToolRun]) -> int:
        return max((score_for_tool(stats) for stats in tool_runs), default=NO_TOOL_DATA_SCORE)

    def _third_party_details(self, third_party: list[Finding]) -> list[str]:
        return [f.message for f in third_party if f.message]

    def _third_party_fragment(self, third_party: list[Finding]) -> str:
        details = self._third_party_details(third_party)
        if details:
            return "; " + "; ".join(details)
        return THIRD_PARTY_SCANNER_PRESENT
