"""Static analysis (SAST) evaluator."""

from posture.consts import MAX_RESULT_SCORE, MIN_RESULT_SCORE, CheckName, Probe
from posture.detail_logger import DetailLogger, log_finding
from posture.evaluators.aggregation import (
    aggregate_scores_weighted,
    normalize_reason,
    proportional_score,
)
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import Finding, Outcome, PullRequestCoverage
from posture.models.model_result import CheckError, CheckResult, DetailLevel, ErrorCode

SAST_WEIGHT = 3
CODEQL_WEIGHT = 7

# Tools that earn a full score on their own, checked in this order
SHORT_CIRCUIT_TOOLS = [
    (Probe.SAST_TOOL_SONAR_INSTALLED, "SAST tool detected"),
    (Probe.SAST_TOOL_SNYK_INSTALLED, "SAST tool detected: Snyk"),
    (Probe.SAST_TOOL_PYSA_INSTALLED, "SAST tool detected: Pysa"),
    (Probe.SAST_TOOL_QODANA_INSTALLED, "SAST tool detected: Qodana"),
]

NOT_ALL_COMMITS_REASON = "SAST tool is not run on all commits"


def tool_score(finding: Finding) -> int | None:
    """10 when the tool is installed, 0 when it is not, None otherwise."""
    if finding.outcome == Outcome.TRUE:
        return MAX_RESULT_SCORE
    if finding.outcome == Outcome.FALSE:
        return MIN_RESULT_SCORE
    return None


class SASTEvaluator:
    """Scores static analysis on merged pull requests.

    Sonar, Snyk, Pysa or Qodana being installed is enough for a full
    score. Otherwise the score comes from the share of pull requests
    analyzed, blended 3:7 with CodeQL when CodeQL is installed but does
    not cover every pull request.
    """

    name = CheckName.SAST.value
    expected_probes = [
        Probe.SAST_TOOL_CODEQL_INSTALLED,
        Probe.SAST_TOOL_PYSA_INSTALLED,
        Probe.SAST_TOOL_QODANA_INSTALLED,
        Probe.SAST_TOOL_RUNS_ON_ALL_COMMITS,
        Probe.SAST_TOOL_SONAR_INSTALLED,
        Probe.SAST_TOOL_SNYK_INSTALLED,
    ]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        scores: dict[str, int | None] = {probe.value: MIN_RESULT_SCORE for probe in self.expected_probes}
        for finding in findings:
            if finding.probe == Probe.SAST_TOOL_RUNS_ON_ALL_COMMITS:
                if finding.outcome == Outcome.NOT_APPLICABLE:
                    log_finding(dl, finding, DetailLevel.WARN)
                    scores[finding.probe] = None
                    continue
                if finding.outcome == Outcome.TRUE:
                    log_finding(dl, finding, DetailLevel.INFO)
                elif finding.outcome == Outcome.FALSE:
                    log_finding(dl, finding, DetailLevel.WARN)
                coverage = finding.payload
                if not isinstance(coverage, PullRequestCoverage):
                    return CheckResult.runtime_error(
                        self.name,
                        CheckError(
                            code=ErrorCode.INVALID_VALUE,
                            message="missing analyzed pull request counts",
                        ),
                    )
                scores[finding.probe] = proportional_score(coverage.analyzed, coverage.total) or 0
            elif finding.probe == Probe.SAST_TOOL_SONAR_INSTALLED:
                # Sonar keeps 0 for outcomes other than True or False
                if finding.outcome == Outcome.TRUE:
                    log_finding(dl, finding, DetailLevel.INFO)
                    scores[finding.probe] = MAX_RESULT_SCORE
                elif finding.outcome == Outcome.FALSE:
                    scores[finding.probe] = MIN_RESULT_SCORE
            else:
                if finding.outcome == Outcome.TRUE:
                    log_finding(dl, finding, DetailLevel.INFO)
                scores[finding.probe] = tool_score(finding)

        for probe, reason in SHORT_CIRCUIT_TOOLS:
            if scores[probe.value] == MAX_RESULT_SCORE:
                return CheckResult.max_score(self.name, reason)

        sast_score = scores[Probe.SAST_TOOL_RUNS_ON_ALL_COMMITS.value]
        codeql_score = scores[Probe.SAST_TOOL_CODEQL_INSTALLED.value]

        if sast_score is None and codeql_score is None:
            return CheckResult.runtime_error(
                self.name,
                CheckError(code=ErrorCode.INTERNAL, message="no conclusive SAST results"),
            )

        if sast_score is None:
            if codeql_score == MAX_RESULT_SCORE:
                return CheckResult.max_score(self.name, "SAST tool detected: CodeQL")
            return CheckResult.min_score(self.name, "no SAST tool detected")

        if sast_score == MAX_RESULT_SCORE:
            return CheckResult.max_score(self.name, "SAST tool is run on all commits")

        if codeql_score == MAX_RESULT_SCORE:
            score = aggregate_scores_weighted(
                [(sast_score, SAST_WEIGHT), (codeql_score, CODEQL_WEIGHT)]
            )
            return CheckResult.scored(self.name, "SAST tool detected but not run on all commits", score)

        return CheckResult.scored(
            self.name, normalize_reason(NOT_ALL_COMMITS_REASON, sast_score), sast_score
        )
