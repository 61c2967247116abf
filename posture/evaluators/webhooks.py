"""Webhooks evaluator based on configured webhook secrets."""

from posture.catalog import ProbeCatalog
from posture.consts import CheckName, Probe
from posture.detail_logger import DetailLogger
from posture.evaluators.aggregation import proportional_result
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import Finding, Outcome
from posture.models.model_result import CheckResult, LogMessage


class WebhooksEvaluator:
    """Evaluates whether repository webhooks are configured with a secret.

    A repository without webhooks has nothing to leak and scores 10.
    """

    name = CheckName.WEBHOOKS.value
    expected_probes = [Probe.WEBHOOKS_USE_SECRETS]

    def __init__(self, catalog: ProbeCatalog | None = None) -> None:
        self.catalog = catalog

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        if len(findings) == 1 and findings[0].outcome == Outcome.NOT_APPLICABLE:
            return CheckResult.max_score(self.name, "project does not have webhook")

        remediation = self.catalog.remediation_for(Probe.WEBHOOKS_USE_SECRETS.value) if self.catalog else None
        total = 0
        without_secret = 0
        for finding in findings:
            if finding.outcome not in (Outcome.TRUE, Outcome.FALSE):
                continue
            total += 1
            if finding.outcome == Outcome.FALSE:
                without_secret += 1
                dl.warn(
                    LogMessage(
                        text=finding.message or "webhook without a secret",
                        location=finding.location,
                        remediation=remediation,
                    )
                )

        if total == 0:
            return CheckResult.max_score(self.name, "project does not have webhook")
        if without_secret == total:
            return CheckResult.min_score(self.name, "no hook(s) have a secret configured")
        if without_secret == 0:
            return CheckResult.max_score(
                self.name, f"All {total} of the projects webhooks are configured with a secret"
            )

        reason = f"{without_secret} out of the projects {total} webhooks are configured without a secret"
        return proportional_result(self.name, reason, total - without_secret, total)
