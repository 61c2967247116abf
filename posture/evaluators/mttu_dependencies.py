"""Mean time to update dependencies evaluator."""

from posture.consts import CheckName, Probe
from posture.detail_logger import DetailLogger, log_finding
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_eval import ScoringConfig
from posture.models.model_finding import Finding, Outcome, UpdateLag
from posture.models.model_result import CheckError, CheckResult, DetailLevel, ErrorCode

# Score per lag bucket
BUCKET_SCORES = {
    Probe.MTTU_VERY_LOW.value: 10,
    Probe.MTTU_LOW.value: 5,
    Probe.MTTU_HIGH.value: 0,
}


class MTTUDependenciesEvaluator:
    """Maps the mean dependency update lag to a score.

    Exactly one bucket probe is expected to be True:
        very low (< 14 days)   -> 10
        low (14-179 days)      -> 5
        high (>= 180 days)     -> 0
    """

    name = CheckName.MTTU_DEPENDENCIES.value
    expected_probes = [Probe.MTTU_VERY_LOW, Probe.MTTU_LOW, Probe.MTTU_HIGH]

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.settings = (config or ScoringConfig()).update_lag

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        if all(f.outcome == Outcome.NOT_APPLICABLE for f in findings):
            return CheckResult.inconclusive(self.name, "no dependency updates found")

        for finding in findings:
            if finding.outcome != Outcome.TRUE:
                continue
            log_finding(dl, finding, DetailLevel.INFO)
            score = BUCKET_SCORES[finding.probe]
            if isinstance(finding.payload, UpdateLag):
                reason = f"dependencies are updated within {finding.payload.days} days on average"
            else:
                reason = self._bucket_reason(finding.probe)
            return CheckResult.scored(self.name, reason, score)

        return CheckResult.runtime_error(
            self.name, CheckError(code=ErrorCode.INVALID_VALUE, message="no update lag bucket matched")
        )

    def _bucket_reason(self, probe: str) -> str:
        if probe == Probe.MTTU_VERY_LOW:
            return f"dependencies are updated within {self.settings.very_low_days} days on average"
        if probe == Probe.MTTU_LOW:
            return f"dependencies are updated within {self.settings.high_days} days on average"
        return f"dependencies take {self.settings.high_days} days or more to update on average"
