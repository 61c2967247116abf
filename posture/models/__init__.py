"""Pydantic models for posture-eval."""

from posture.models.model_eval import (
    ContributorSettings,
    MaintainedSettings,
    ReleaseSettings,
    ResponseSettings,
    ScoringConfig,
    UpdateLagSettings,
)
from posture.models.model_finding import (
    ActivityCount,
    BadgeLevel,
    BadgeRef,
    BranchRef,
    ChangesetCounts,
    DependencyRef,
    DependencyType,
    ExecutionPattern,
    FileType,
    Finding,
    IssueResponse,
    Location,
    MaintainerRef,
    OrganizationRef,
    Outcome,
    PermissionLevel,
    PermissionLocation,
    ProbePayload,
    ProtectionLevel,
    PullRequestCoverage,
    ReleaseRef,
    SecretToolRun,
    TagRef,
    UpdateLag,
    VulnerabilityRef,
    WorkflowPermission,
)
from posture.models.model_result import (
    CheckDetail,
    CheckError,
    CheckResult,
    DetailLevel,
    ErrorCode,
    LogMessage,
    ResultKind,
)

__all__ = [
    # Finding models
    "Finding",
    "FileType",
    "Location",
    "Outcome",
    # Payload models
    "ActivityCount",
    "BadgeLevel",
    "BadgeRef",
    "BranchRef",
    "ChangesetCounts",
    "DependencyRef",
    "DependencyType",
    "ExecutionPattern",
    "IssueResponse",
    "MaintainerRef",
    "OrganizationRef",
    "PermissionLevel",
    "PermissionLocation",
    "ProbePayload",
    "ProtectionLevel",
    "PullRequestCoverage",
    "ReleaseRef",
    "SecretToolRun",
    "TagRef",
    "UpdateLag",
    "VulnerabilityRef",
    "WorkflowPermission",
    # Result models
    "CheckDetail",
    "CheckError",
    "CheckResult",
    "DetailLevel",
    "ErrorCode",
    "LogMessage",
    "ResultKind",
    # Configuration models
    "ContributorSettings",
    "MaintainedSettings",
    "ReleaseSettings",
    "ResponseSettings",
    "ScoringConfig",
    "UpdateLagSettings",
]
