"""SBOM evaluator."""

from posture.consts import CheckName, Probe
from posture.detail_logger import DetailLogger
from posture.evaluators.aggregation import ProbeWeights
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import Finding, Outcome
from posture.models.model_result import CheckResult, LogMessage

SOURCE_SBOM_POINTS = 5
RELEASE_SBOM_POINTS = 5


class SBOMEvaluator:
    """Evaluates SBOM publication.

    Algorithm:
        SBOM in source tree      +5
        SBOM as release asset    +5
    """

    name = CheckName.SBOM.value
    expected_probes = [Probe.SBOM_EXISTS, Probe.SBOM_RELEASE_ASSET_EXISTS]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        weights = ProbeWeights(
            {
                Probe.SBOM_EXISTS: SOURCE_SBOM_POINTS,
                Probe.SBOM_RELEASE_ASSET_EXISTS: RELEASE_SBOM_POINTS,
            }
        )
        for finding in findings:
            if finding.outcome == Outcome.TRUE:
                weights.score_once(finding.probe)
                dl.info(LogMessage(text=finding.message, location=finding.location))
            elif finding.outcome == Outcome.FALSE:
                dl.warn(LogMessage(text=finding.message, location=finding.location))

        reasons = []
        if weights.scored(Probe.SBOM_EXISTS):
            reasons.append("SBOM file found in project")
        if weights.scored(Probe.SBOM_RELEASE_ASSET_EXISTS):
            reasons.append("SBOM file found in release artifacts")

        if not reasons:
            return CheckResult.min_score(self.name, "SBOM file not detected")
        return CheckResult.scored(self.name, ", ".join(reasons), weights.total)
