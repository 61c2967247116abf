"""All-or-nothing evaluators: one observation decides between 0 and 10.

Covers Dangerous-Workflow, Fuzzing, Dependency-Update-Tool and Packaging.
"""

from posture.catalog import ProbeCatalog
from posture.consts import FUZZING_PROBES, CheckName, Probe
from posture.detail_logger import DetailLogger, log_finding
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import Finding, Outcome
from posture.models.model_result import CheckError, CheckResult, DetailLevel, ErrorCode, LogMessage


class DangerousWorkflowEvaluator:
    """Any dangerous workflow pattern scores 0.

    True means a pattern (script injection, untrusted checkout) was found.
    """

    name = CheckName.DANGEROUS_WORKFLOW.value
    expected_probes = [
        Probe.HAS_DANGEROUS_WORKFLOW_SCRIPT_INJECTION,
        Probe.HAS_DANGEROUS_WORKFLOW_UNTRUSTED_CHECKOUT,
    ]

    def __init__(self, catalog: ProbeCatalog | None = None) -> None:
        self.catalog = catalog

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        dangerous = 0
        for finding in findings:
            if finding.outcome == Outcome.TRUE:
                dangerous += 1
                remediation = self.catalog.remediation_for(finding.probe) if self.catalog else None
                dl.warn(
                    LogMessage(
                        text=finding.message,
                        location=finding.location,
                        remediation=remediation,
                    )
                )
            elif finding.outcome == Outcome.ERROR:
                message = f"unexpected outcome '{finding.outcome.value}' from probe {finding.probe}"
                return CheckResult.runtime_error(
                    self.name, CheckError(code=ErrorCode.INVALID_VALUE, message=message)
                )

        if dangerous:
            return CheckResult.min_score(self.name, "dangerous workflow patterns detected")
        if all(f.outcome == Outcome.NOT_APPLICABLE for f in findings):
            return CheckResult.inconclusive(self.name, "no workflows found")
        return CheckResult.max_score(self.name, "no dangerous workflow patterns detected")


class FuzzingEvaluator:
    """Any fuzzing integration scores 10."""

    name = CheckName.FUZZING.value
    expected_probes = FUZZING_PROBES

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        fuzzed = False
        for finding in findings:
            if finding.outcome == Outcome.TRUE:
                fuzzed = True
                log_finding(dl, finding, DetailLevel.INFO)

        if fuzzed:
            return CheckResult.max_score(self.name, "project is fuzzed")
        dl.warn(LogMessage(text="no fuzzer integrations found"))
        return CheckResult.min_score(self.name, "project is not fuzzed")


class DependencyUpdateToolEvaluator:
    """Any configured dependency update tool scores 10."""

    name = CheckName.DEPENDENCY_UPDATE_TOOL.value
    expected_probes = [
        Probe.TOOL_DEPENDABOT_INSTALLED,
        Probe.TOOL_PYUP_INSTALLED,
        Probe.TOOL_RENOVATE_INSTALLED,
        Probe.TOOL_SONATYPE_LIFT_INSTALLED,
    ]

    def __init__(self, catalog: ProbeCatalog | None = None) -> None:
        self.catalog = catalog

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        installed = False
        for finding in findings:
            if finding.outcome == Outcome.TRUE:
                installed = True
                log_finding(dl, finding, DetailLevel.INFO)

        if installed:
            return CheckResult.max_score(self.name, "update tool detected")
        remediation = (
            self.catalog.remediation_for(Probe.TOOL_DEPENDABOT_INSTALLED.value) if self.catalog else None
        )
        dl.warn(LogMessage(text="no update tool detected", remediation=remediation))
        return CheckResult.min_score(self.name, "no update tool detected")


class PackagingEvaluator:
    """A publishing workflow scores 10; none found is inconclusive."""

    name = CheckName.PACKAGING.value
    expected_probes = [Probe.PACKAGED_WITH_AUTOMATED_WORKFLOW]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        for finding in findings:
            if finding.outcome == Outcome.TRUE:
                log_finding(dl, finding, DetailLevel.INFO)
                return CheckResult.max_score(self.name, "packaging workflow detected")

        for finding in findings:
            log_finding(dl, finding, DetailLevel.DEBUG)
        if all(f.outcome == Outcome.NOT_APPLICABLE for f in findings):
            return CheckResult.inconclusive(self.name, "packaging workflow not detected")
        return CheckResult.min_score(self.name, "no published package detected")
