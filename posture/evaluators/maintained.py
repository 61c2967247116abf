"""Maintained evaluator based on recent project activity."""

from posture.consts import CheckName, Probe
from posture.detail_logger import DetailLogger, log_finding
from posture.evaluators.aggregation import proportional_result
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_eval import ScoringConfig
from posture.models.model_finding import ActivityCount, Finding, Outcome
from posture.models.model_result import CheckError, CheckResult, DetailLevel, ErrorCode


class MaintainedEvaluator:
    """Evaluates whether a project is actively maintained.

    Algorithm:
        archived          -> 0
        created recently  -> 0
        otherwise         -> (commits + issue activity) / expected activity

    Expected activity is one event per week over the lookback window
    (90 days -> 12 events). Both gates run before any ratio math, so an
    archived project cannot average its way back up.
    """

    name = CheckName.MAINTAINED.value
    expected_probes = [
        Probe.ARCHIVED,
        Probe.ISSUE_ACTIVITY_BY_PROJECT_MEMBER,
        Probe.HAS_RECENT_COMMITS,
        Probe.CREATED_RECENTLY,
    ]

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.settings = (config or ScoringConfig()).maintained

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Calculate the maintained score.

        Args:
            findings: Findings from the four activity probes
            dl: Detail logger

        Returns:
            Maintained check result
        """
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        archived = False
        created_recently = False
        commits = 0
        issues = 0

        for finding in findings:
            if finding.outcome == Outcome.TRUE:
                if finding.probe in (Probe.HAS_RECENT_COMMITS, Probe.ISSUE_ACTIVITY_BY_PROJECT_MEMBER):
                    if not isinstance(finding.payload, ActivityCount):
                        return CheckResult.runtime_error(
                            self.name,
                            CheckError(
                                code=ErrorCode.INVALID_VALUE,
                                message=f"{finding.probe} finding has no activity count",
                            ),
                        )
                    if finding.probe == Probe.HAS_RECENT_COMMITS:
                        commits = finding.payload.count
                    else:
                        issues = finding.payload.count
                elif finding.probe == Probe.ARCHIVED:
                    archived = True
                    log_finding(dl, finding, DetailLevel.WARN)
                elif finding.probe == Probe.CREATED_RECENTLY:
                    created_recently = True
                    log_finding(dl, finding, DetailLevel.WARN)
            elif finding.outcome != Outcome.FALSE:
                log_finding(dl, finding, DetailLevel.DEBUG)

        if archived:
            return CheckResult.min_score(self.name, "project is archived")

        lookback = self.settings.lookback_days
        if created_recently:
            return CheckResult.min_score(
                self.name,
                f"project was created in last {lookback} days. please review its contents carefully",
            )

        reason = f"{commits} commit(s) and {issues} issue activity found in the last {lookback} days"
        return proportional_result(
            self.name, reason, commits + issues, self.settings.expected_activity
        )
