"""Binary artifacts evaluator."""

from posture.catalog import ProbeCatalog, default_catalog
from posture.consts import MAX_RESULT_SCORE, CheckName, Probe
from posture.detail_logger import DetailLogger
from posture.evaluators.aggregation import clamp_score
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import Finding, Outcome
from posture.models.model_result import CheckResult, LogMessage


class BinaryArtifactsEvaluator:
    """Evaluates unverified binaries checked into the repository.

    Algorithm:
        score = 10 - number of unverified binaries, minimum 0

    Remediation text for each binary comes from the probe catalog handed
    in at construction.
    """

    name = CheckName.BINARY_ARTIFACTS.value
    expected_probes = [Probe.FREE_OF_UNVERIFIED_BINARY_ARTIFACTS]

    def __init__(self, catalog: ProbeCatalog | None = None) -> None:
        self.catalog = catalog or default_catalog()

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        if len(findings) == 1 and findings[0].outcome == Outcome.TRUE:
            return CheckResult.max_score(self.name, "no binaries found in the repo")

        remediation = self.catalog.remediation_for(Probe.FREE_OF_UNVERIFIED_BINARY_ARTIFACTS.value)
        binaries = 0
        for finding in findings:
            if finding.outcome != Outcome.FALSE:
                continue
            binaries += 1
            dl.warn(
                LogMessage(
                    text=finding.message or "binary detected",
                    location=finding.location,
                    remediation=remediation,
                )
            )

        if binaries == 0:
            return CheckResult.max_score(self.name, "no binaries found in the repo")
        score = clamp_score(MAX_RESULT_SCORE - binaries)
        return CheckResult.scored(self.name, "binaries present in source code", score)
