"""OpenSSF best practices badge evaluator."""

from posture.consts import CheckName, Probe
from posture.detail_logger import DetailLogger
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import BadgeLevel, BadgeRef, Finding, Outcome
from posture.models.model_result import CheckError, CheckResult, ErrorCode, LogMessage

# Score awarded per badge level
BADGE_SCORES = {
    BadgeLevel.IN_PROGRESS: 2,
    BadgeLevel.PASSING: 5,
    BadgeLevel.SILVER: 7,
    BadgeLevel.GOLD: 10,
}


class CIIBestPracticesEvaluator:
    """Maps the project's best practices badge level to a score."""

    name = CheckName.CII_BEST_PRACTICES.value
    expected_probes = [Probe.HAS_OPENSSF_BADGE]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        finding = findings[0]
        if finding.outcome == Outcome.FALSE:
            dl.warn(LogMessage(text=finding.message or "no OpenSSF best practices badge found"))
            return CheckResult.min_score(
                self.name, "no effort to earn an OpenSSF best practices badge detected"
            )

        if finding.outcome != Outcome.TRUE or not isinstance(finding.payload, BadgeRef):
            return CheckResult.runtime_error(
                self.name, CheckError(code=ErrorCode.INVALID_VALUE, message="unsupported badge finding")
            )

        level = finding.payload.level
        if level == BadgeLevel.NOT_FOUND:
            return CheckResult.min_score(
                self.name, "no effort to earn an OpenSSF best practices badge detected"
            )
        if level not in BADGE_SCORES:
            return CheckResult.runtime_error(
                self.name,
                CheckError(code=ErrorCode.INVALID_VALUE, message=f"unsupported badge level: {level.value}"),
            )

        dl.info(LogMessage(text=f"badge detected: {level.value}"))
        return CheckResult.scored(self.name, f"badge detected: {level.value}", BADGE_SCORES[level])
