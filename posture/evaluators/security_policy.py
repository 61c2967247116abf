"""Security policy evaluator."""

from posture.consts import CheckName, Probe
from posture.detail_logger import DetailLogger, log_finding
from posture.evaluators.aggregation import ProbeWeights
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import Finding, Outcome
from posture.models.model_result import CheckError, CheckResult, DetailLevel, ErrorCode

LINKS_POINTS = 6
TEXT_POINTS = 3
DISCLOSURE_POINTS = 1


class SecurityPolicyEvaluator:
    """Evaluates the presence and content of a security policy.

    Algorithm:
        policy present is required for any points
        contains links (email or URL)   +6
        contains enough free text       +3
        mentions disclosure terms       +1
    """

    name = CheckName.SECURITY_POLICY.value
    expected_probes = [
        Probe.SECURITY_POLICY_CONTAINS_LINKS,
        Probe.SECURITY_POLICY_CONTAINS_VULNERABILITY_DISCLOSURE,
        Probe.SECURITY_POLICY_CONTAINS_TEXT,
        Probe.SECURITY_POLICY_PRESENT,
    ]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        if all(f.outcome == Outcome.NOT_APPLICABLE for f in findings):
            return CheckResult.inconclusive(self.name, "no security policy evidence found")

        weights = ProbeWeights(
            {
                Probe.SECURITY_POLICY_CONTAINS_LINKS: LINKS_POINTS,
                Probe.SECURITY_POLICY_CONTAINS_TEXT: TEXT_POINTS,
                Probe.SECURITY_POLICY_CONTAINS_VULNERABILITY_DISCLOSURE: DISCLOSURE_POINTS,
            }
        )
        present = False
        for finding in findings:
            if finding.outcome == Outcome.TRUE:
                if finding.probe == Probe.SECURITY_POLICY_PRESENT:
                    present = True
                else:
                    weights.score_once(finding.probe)
                log_finding(dl, finding, DetailLevel.INFO)
            elif finding.outcome == Outcome.FALSE:
                log_finding(dl, finding, DetailLevel.WARN)
            else:
                log_finding(dl, finding, DetailLevel.DEBUG)

        if not present:
            if weights.total > 0:
                return CheckResult.runtime_error(
                    self.name,
                    CheckError(code=ErrorCode.INTERNAL, message="score calculation problem"),
                )
            return CheckResult.min_score(self.name, "security policy file not detected")

        return CheckResult.scored(self.name, "security policy file detected", weights.total)
