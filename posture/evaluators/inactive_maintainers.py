"""Inactive maintainers evaluator."""

from posture.consts import CheckName, Probe
from posture.detail_logger import DetailLogger
from posture.evaluators.aggregation import normalize_reason, proportional_score
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import Finding, MaintainerRef, Outcome
from posture.models.model_result import CheckResult, LogMessage


class InactiveMaintainersEvaluator:
    """Evaluates the share of maintainers with recent activity.

    One finding per maintainer: False means active, True means inactive.
    """

    name = CheckName.INACTIVE_MAINTAINERS.value
    expected_probes = [Probe.HAS_INACTIVE_MAINTAINERS]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        active = 0
        total = 0
        for finding in findings:
            if finding.outcome not in (Outcome.TRUE, Outcome.FALSE):
                continue
            total += 1
            who = finding.payload.username if isinstance(finding.payload, MaintainerRef) else finding.message
            if finding.outcome == Outcome.FALSE:
                active += 1
                dl.info(LogMessage(text=f"maintainer {who} is active"))
            else:
                dl.warn(LogMessage(text=f"maintainer {who} is inactive"))

        score = proportional_score(active, total)
        if score is None:
            return CheckResult.inconclusive(self.name, "no maintainers found")
        reason = f"{active} out of {total} maintainers are active"
        return CheckResult.scored(self.name, normalize_reason(reason, score), score)
