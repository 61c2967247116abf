"""Contributors evaluator based on organizational diversity."""

from posture.consts import CheckName, Probe
from posture.detail_logger import DetailLogger
from posture.evaluators.aggregation import normalize_reason, proportional_score
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_eval import ScoringConfig
from posture.models.model_finding import Finding, OrganizationRef, Outcome
from posture.models.model_result import CheckResult, LogMessage


class ContributorsEvaluator:
    """Evaluates how many organizations the project's contributors come from.

    Algorithm:
        score = 10 * organizations / 3, capped at 10
    """

    name = CheckName.CONTRIBUTORS.value
    expected_probes = [Probe.CONTRIBUTORS_FROM_ORG_OR_COMPANY]

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.settings = (config or ScoringConfig()).contributors

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        organizations: list[str] = []
        for finding in findings:
            if finding.outcome != Outcome.TRUE:
                continue
            org = finding.payload.name if isinstance(finding.payload, OrganizationRef) else finding.message
            if org not in organizations:
                organizations.append(org)

        if organizations:
            dl.info(LogMessage(text=f"found contributions from: {', '.join(sorted(organizations))}"))

        target = self.settings.organizations_for_max
        score = proportional_score(len(organizations), target) or 0
        reason = f"{len(organizations)} different organizations found"
        return CheckResult.scored(self.name, normalize_reason(reason, score), score)
