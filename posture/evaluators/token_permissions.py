"""GitHub workflow token permissions evaluator.

Starts from 10 and deducts for write access granted to the workflow
token. Write-all at the top level of a workflow costs 0.5, or everything
when the same workflow also grants write-all (or leaves permissions
undeclared) at job level. Named top-level write permissions cost:

    checks, statuses                      0.5
    deployments, security-events          1
    contents, packages, actions           10
"""

import math

from pydantic import BaseModel, Field

from posture.consts import MAX_RESULT_SCORE, MIN_RESULT_SCORE, TOKEN_PERMISSION_PROBES, CheckName, Probe
from posture.detail_logger import DetailLogger, log_finding
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import (
    Finding,
    Outcome,
    PermissionLevel,
    PermissionLocation,
    WorkflowPermission,
)
from posture.models.model_result import CheckResult, DetailLevel, LogMessage

WRITE_ALL_TOP_PENALTY = 0.5
UNDECLARED_TOP_PENALTY = 0.5
TOKEN_PENALTIES = {
    "checks": 0.5,
    "statuses": 0.5,
    "deployments": 1.0,
    "security-events": 1.0,
    "contents": float(MAX_RESULT_SCORE),
    "packages": float(MAX_RESULT_SCORE),
    "actions": float(MAX_RESULT_SCORE),
}

EXCESSIVE_REASON = "detected GitHub workflow tokens with excessive permissions"


class WorkflowPaths(BaseModel):
    """Workflow files seen with a given kind of permission, per location."""

    top: set[str] = Field(default_factory=set)
    job: set[str] = Field(default_factory=set)


def permission_of(finding: Finding) -> WorkflowPermission:
    if isinstance(finding.payload, WorkflowPermission):
        return finding.payload
    return WorkflowPermission()


def workflow_path(finding: Finding) -> str:
    return finding.location.path if finding.location else ""


def token_penalty(permission: WorkflowPermission) -> float:
    """Deduction for a named top-level write permission."""
    if permission.level != PermissionLevel.WRITE or permission.token_name is None:
        return 0.0
    return TOKEN_PENALTIES.get(permission.token_name, 0.0)


class TokenPermissionsEvaluator:
    """Evaluates least privilege for GitHub workflow tokens."""

    name = CheckName.TOKEN_PERMISSIONS.value
    expected_probes = TOKEN_PERMISSION_PROBES

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Calculate the token permissions score.

        Args:
            findings: Permission findings, one per workflow or job
            dl: Detail logger

        Returns:
            Token permissions check result
        """
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        score = float(MAX_RESULT_SCORE)
        write = WorkflowPaths()
        undeclared = WorkflowPaths()

        for finding in findings:
            if finding.outcome == Outcome.TRUE and finding.probe in (
                Probe.HAS_WORKFLOW_PERMISSION_NONE,
                Probe.HAS_WORKFLOW_PERMISSION_READ,
            ):
                log_finding(dl, finding, DetailLevel.INFO)

            if finding.probe == Probe.HAS_WORKFLOW_PERMISSION_UNDECLARED:
                if finding.outcome == Outcome.NOT_AVAILABLE:
                    return CheckResult.inconclusive(self.name, "Token permissions are not available")
                if finding.outcome == Outcome.NOT_APPLICABLE:
                    log_finding(dl, finding, DetailLevel.DEBUG)

            if finding.outcome == Outcome.NOT_AVAILABLE:
                return CheckResult.inconclusive(self.name, "No tokens found")
            if finding.outcome != Outcome.FALSE:
                continue

            path = workflow_path(finding)
            permission = permission_of(finding)

            if finding.probe == Probe.HAS_WORKFLOW_PERMISSION_UNDECLARED:
                if permission.location == PermissionLocation.JOB:
                    log_finding(dl, finding, DetailLevel.DEBUG)
                    undeclared.job.add(path)
                    if path in write.top or path in undeclared.top:
                        score = MIN_RESULT_SCORE
                elif permission.location == PermissionLocation.TOP:
                    log_finding(dl, finding, DetailLevel.WARN)
                    undeclared.top.add(path)
                    if path in undeclared.job:
                        score = MIN_RESULT_SCORE
                    else:
                        score -= UNDECLARED_TOP_PENALTY

            elif finding.probe == Probe.HAS_NO_WORKFLOW_PERMISSION_WRITE_ALL_TOP:
                # No top-level permissions means every permission is granted
                log_finding(dl, finding, DetailLevel.WARN)
                write.top.add(path)
                if path in write.job or path in undeclared.job:
                    return CheckResult.min_score(self.name, EXCESSIVE_REASON)
                score -= WRITE_ALL_TOP_PENALTY

            elif finding.probe == Probe.HAS_NO_WORKFLOW_PERMISSION_WRITE_ALL_JOB:
                log_finding(dl, finding, DetailLevel.WARN)
                write.job.add(path)
                if path in write.top:
                    score = MIN_RESULT_SCORE
                elif path in undeclared.top:
                    score -= UNDECLARED_TOP_PENALTY

            elif finding.probe == Probe.JOB_LEVEL_PERMISSIONS:
                if permission.level == PermissionLevel.WRITE:
                    log_finding(dl, finding, DetailLevel.WARN)
                    write.job.add(path)

            elif finding.probe == Probe.HAS_WORKFLOW_PERMISSION_UNKNOWN:
                log_finding(dl, finding, DetailLevel.DEBUG)

            elif finding.probe == Probe.TOP_LEVEL_PERMISSIONS:
                penalty = token_penalty(permission)
                if penalty:
                    log_finding(dl, finding, DetailLevel.WARN)
                    score -= penalty

        score = max(score, MIN_RESULT_SCORE)

        if not write.job:
            dl.info(LogMessage(text="no job write permissions found"))

        if score != MAX_RESULT_SCORE:
            return CheckResult.scored(self.name, EXCESSIVE_REASON, math.floor(score))
        return CheckResult.max_score(
            self.name, "GitHub workflow tokens follow principle of least privilege"
        )
