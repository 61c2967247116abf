"""Code review evaluator based on approved changesets."""

from posture.consts import CheckName, Probe
from posture.detail_logger import DetailLogger, log_finding
from posture.evaluators.aggregation import proportional_result
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import ChangesetCounts, Finding, Outcome
from posture.models.model_result import CheckError, CheckResult, DetailLevel, ErrorCode


class CodeReviewEvaluator:
    """Evaluates how many recent changesets were approved before merge.

    Bot-only history and an empty history are inconclusive rather than 0.
    """

    name = CheckName.CODE_REVIEW.value
    expected_probes = [Probe.CODE_APPROVED]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        for finding in findings:
            if finding.outcome == Outcome.NOT_APPLICABLE:
                log_finding(dl, finding, DetailLevel.DEBUG)
                return CheckResult.inconclusive(self.name, "no changesets found")
            if finding.outcome == Outcome.ERROR:
                return CheckResult.runtime_error(
                    self.name, CheckError(code=ErrorCode.INTERNAL, message=finding.message)
                )
            if finding.outcome == Outcome.TRUE:
                log_finding(dl, finding, DetailLevel.INFO)
                return CheckResult.max_score(self.name, "all changesets reviewed")
            if finding.outcome == Outcome.FALSE:
                if not isinstance(finding.payload, ChangesetCounts):
                    return CheckResult.runtime_error(
                        self.name,
                        CheckError(code=ErrorCode.INVALID_VALUE, message="missing changeset counts"),
                    )
                counts = finding.payload
                if counts.approved > counts.total:
                    return CheckResult.runtime_error(
                        self.name,
                        CheckError(
                            code=ErrorCode.INVALID_VALUE,
                            message=f"approved changesets ({counts.approved}) exceed total ({counts.total})",
                        ),
                    )
                log_finding(dl, finding, DetailLevel.WARN)
                reason = (
                    f"found {counts.total - counts.approved} unreviewed changesets "
                    f"out of {counts.total}"
                )
                return proportional_result(self.name, reason, counts.approved, counts.total)

        return CheckResult.runtime_error(
            self.name, CheckError(code=ErrorCode.INVALID_VALUE, message="unsupported outcome")
        )
