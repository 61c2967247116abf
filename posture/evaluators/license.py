"""License evaluators: license presence and license permissiveness."""

from posture.consts import CheckName, Probe
from posture.detail_logger import DetailLogger
from posture.evaluators.aggregation import ProbeWeights
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import FileType, Finding, Location, Outcome
from posture.models.model_result import CheckError, CheckResult, ErrorCode, LogMessage

# Points per probe; each probe counts once
LICENSE_FILE_POINTS = 6
TOP_DIR_POINTS = 3
APPROVED_LICENSE_POINTS = 1


def _source_location(path: str) -> Location:
    return Location(type=FileType.SOURCE, path=path, line_start=1)


class LicenseEvaluator:
    """Evaluates license presence, placement and recognition.

    Algorithm:
        license file present      +6
        file at top directory     +3
        FSF or OSI approved       +1

    Without a license file the other two probes are meaningless and the
    check scores 0.
    """

    name = CheckName.LICENSE.value
    expected_probes = [
        Probe.HAS_LICENSE_FILE,
        Probe.HAS_FSF_OR_OSI_APPROVED_LICENSE,
        Probe.HAS_LICENSE_FILE_AT_TOP_DIR,
    ]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Calculate the license score.

        Args:
            findings: Findings from the three license probes
            dl: Detail logger

        Returns:
            License check result
        """
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        weights = ProbeWeights(
            {
                Probe.HAS_LICENSE_FILE: LICENSE_FILE_POINTS,
                Probe.HAS_LICENSE_FILE_AT_TOP_DIR: TOP_DIR_POINTS,
                Probe.HAS_FSF_OR_OSI_APPROVED_LICENSE: APPROVED_LICENSE_POINTS,
            }
        )

        for finding in findings:
            if finding.outcome == Outcome.NOT_APPLICABLE:
                dl.info(LogMessage(text=finding.message, location=_source_location("")))
            elif finding.outcome == Outcome.TRUE:
                if finding.probe == Probe.HAS_FSF_OR_OSI_APPROVED_LICENSE:
                    dl.info(
                        LogMessage(
                            text="FSF or OSI recognized license",
                            location=_source_location(finding.message),
                        )
                    )
                elif finding.probe == Probe.HAS_LICENSE_FILE_AT_TOP_DIR:
                    dl.info(
                        LogMessage(
                            text="License file found in expected location",
                            location=_source_location(finding.message),
                        )
                    )
                elif finding.probe != Probe.HAS_LICENSE_FILE:
                    return CheckResult.runtime_error(
                        self.name,
                        CheckError(code=ErrorCode.UNKNOWN_PROBE, message="unknown probe results"),
                    )
                weights.score_once(finding.probe)
            elif finding.outcome == Outcome.FALSE:
                if finding.probe == Probe.HAS_LICENSE_FILE_AT_TOP_DIR:
                    dl.warn(
                        LogMessage(
                            text="License file found in unexpected location",
                            location=_source_location(finding.message),
                        )
                    )
                elif finding.probe == Probe.HAS_FSF_OR_OSI_APPROVED_LICENSE:
                    dl.warn(LogMessage(text=finding.message, location=_source_location("")))

        if not weights.scored(Probe.HAS_LICENSE_FILE):
            if weights.total > 0:
                return CheckResult.runtime_error(
                    self.name,
                    CheckError(code=ErrorCode.INTERNAL, message="score calculation problem"),
                )
            return CheckResult.min_score(self.name, "license file not detected")

        return CheckResult.scored(self.name, "license file detected", weights.total)


class PermissiveLicenseEvaluator:
    """Evaluates whether the detected license is permissive.

    No license at all is inconclusive: there is nothing to judge.
    """

    name = CheckName.PERMISSIVE_LICENSE.value
    expected_probes = [Probe.HAS_PERMISSIVE_LICENSE]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        permissive = False
        for finding in findings:
            if finding.outcome == Outcome.TRUE:
                permissive = True
                dl.info(LogMessage(text=finding.message, location=finding.location))
            elif finding.outcome == Outcome.FALSE:
                dl.warn(LogMessage(text=finding.message, location=finding.location))
            elif finding.outcome == Outcome.NOT_APPLICABLE:
                dl.debug(LogMessage(text=finding.message))
            else:
                return CheckResult.runtime_error(
                    self.name,
                    CheckError(code=ErrorCode.INVALID_VALUE, message=f"unexpected outcome {finding.outcome.value}"),
                )

        if permissive:
            return CheckResult.max_score(self.name, "permissive license detected")
        if all(f.outcome == Outcome.NOT_APPLICABLE for f in findings):
            return CheckResult.inconclusive(self.name, "no license file detected")
        return CheckResult.min_score(self.name, "license is not permissive")
