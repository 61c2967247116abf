from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class Outcome(str, Enum):
    """Result a probe emits for one observation."""

    TRUE = "true"
    FALSE = "false"
    NOT_APPLICABLE = "not_applicable"
    NOT_AVAILABLE = "not_available"
    NOT_SUPPORTED = "not_supported"
    ERROR = "error"


class FileType(str, Enum):
    """Kind of artifact a location points into."""

    NONE = "none"
    SOURCE = "source"
    BINARY = "binary"
    TEXT = "text"
    URL = "url"


class ProtectionLevel(str, Enum):
    """GitLab protection strength for tags and branches."""

    NONE = "none"
    STRONG = "strong"  # Maintainers and above may act
    STRONGEST = "strongest"  # No one may act


class DependencyType(str, Enum):
    """How a dependency is consumed by the repository."""

    GITHUB_ACTION = "GitHubAction"
    CONTAINER_IMAGE = "containerImage"
    DOWNLOAD_THEN_RUN = "downloadThenRun"
    PIP_COMMAND = "pipCommand"
    NPM_COMMAND = "npmCommand"
    GO_COMMAND = "goCommand"
    CHOCO_COMMAND = "chocoCommand"
    NUGET_COMMAND = "nugetCommand"


class BadgeLevel(str, Enum):
    """OpenSSF best practices badge levels."""

    NOT_FOUND = "not_found"
    IN_PROGRESS = "in_progress"
    PASSING = "passing"
    SILVER = "silver"
    GOLD = "gold"
    UNKNOWN = "unknown"


class ExecutionPattern(str, Enum):
    """How a third-party secret scanner is triggered in CI."""

    COMMIT = "commit"
    PERIODIC = "periodic"


class PermissionLocation(str, Enum):
    """Where a GitHub workflow token permission is declared."""

    TOP = "top"
    JOB = "job"


class PermissionLevel(str, Enum):
    """Access a GitHub workflow token permission grants."""

    NONE = "none"
    READ = "read"
    WRITE = "write"
    UNDECLARED = "undeclared"
    UNKNOWN = "unknown"


class Location(BaseModel):
    """Where in the repository a finding applies."""

    model_config = ConfigDict(frozen=True)

    type: FileType = Field(default=FileType.NONE, description="Kind of artifact")
    path: str = Field(default="", description="File path or URL")
    line_start: int | None = Field(default=None, ge=0)
    line_end: int | None = Field(default=None, ge=0)
    snippet: str | None = Field(default=None, description="Matched text")


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True)


class ActivityCount(_Payload):
    """Number of events seen inside the lookback window."""

    kind: Literal["activity_count"] = "activity_count"
    count: int = Field(ge=0)


class ReleaseRef(_Payload):
    """A release inspected by a release probe."""

    kind: Literal["release"] = "release"
    release_name: str = Field(description="Tag or name of the release")
    signature_assets: list[str] = Field(
        default_factory=list, description="Asset names attached to the release"
    )
    transparency_log_entry: bool = Field(
        default=False, description="Release has a transparency log (Rekor) entry"
    )


class VulnerabilityRef(_Payload):
    """One known vulnerability and the IDs it is also published under."""

    kind: Literal["vulnerability"] = "vulnerability"
    id: str
    aliases: list[str] = Field(default_factory=list)


class IssueResponse(_Payload):
    """Maintainer response data for a single labelled issue."""

    kind: Literal["issue_response"] = "issue_response"
    issue_number: int | None = Field(default=None, gt=0)
    lag_days: int | None = Field(default=None, ge=0, description="Days without maintainer reaction")
    url: str | None = None


class TagRef(_Payload):
    """A release tag (or branch, for shadowing checks) and its protection."""

    kind: Literal["tag"] = "tag"
    tag_name: str = ""
    protection_level: ProtectionLevel | None = None


class DependencyRef(_Payload):
    """A consumed dependency and the way it is consumed."""

    kind: Literal["dependency"] = "dependency"
    dependency_type: DependencyType
    name: str | None = Field(default=None, description="e.g. actions/checkout or python:3.12")


class SecretToolRun(_Payload):
    """CI execution statistics for a third-party secret scanner."""

    kind: Literal["secret_tool"] = "secret_tool"
    tool: str
    execution_pattern: ExecutionPattern = ExecutionPattern.COMMIT
    commits_with_run: int = Field(default=0, ge=0)
    total_commits: int = Field(default=0, ge=0)
    has_recent_runs: bool = False


class BadgeRef(_Payload):
    """OpenSSF best practices badge attached to the project."""

    kind: Literal["badge"] = "badge"
    level: BadgeLevel


class ChangesetCounts(_Payload):
    """Reviewed changesets over all human changesets."""

    kind: Literal["changesets"] = "changesets"
    approved: int = Field(ge=0)
    total: int = Field(ge=0)


class MaintainerRef(_Payload):
    """A maintainer account."""

    kind: Literal["maintainer"] = "maintainer"
    username: str


class OrganizationRef(_Payload):
    """An organization contributors belong to."""

    kind: Literal["organization"] = "organization"
    name: str


class UpdateLag(_Payload):
    """Mean time to update dependencies, in days."""

    kind: Literal["update_lag"] = "update_lag"
    days: int = Field(ge=0)


class BranchRef(_Payload):
    """A development or release branch and its review settings."""

    kind: Literal["branch"] = "branch"
    branch_name: str = ""
    required_reviewers: int | None = Field(
        default=None, ge=0, description="Approvals required before merging"
    )


class PullRequestCoverage(_Payload):
    """Merged pull requests analyzed by a SAST tool."""

    kind: Literal["pr_coverage"] = "pr_coverage"
    analyzed: int = Field(ge=0)
    total: int = Field(ge=0)


class WorkflowPermission(_Payload):
    """A token permission declared (or left undeclared) in a GitHub workflow."""

    kind: Literal["workflow_permission"] = "workflow_permission"
    location: PermissionLocation | None = None
    level: PermissionLevel | None = None
    token_name: str | None = Field(default=None, description="e.g. contents or packages")


ProbePayload = Annotated[
    ActivityCount
    | ReleaseRef
    | VulnerabilityRef
    | IssueResponse
    | TagRef
    | DependencyRef
    | SecretToolRun
    | BadgeRef
    | ChangesetCounts
    | MaintainerRef
    | OrganizationRef
    | UpdateLag
    | BranchRef
    | PullRequestCoverage
    | WorkflowPermission,
    Field(discriminator="kind"),
]


class Finding(BaseModel):
    """One observation produced by a probe.

    Findings are immutable. A probe may produce several findings for one
    repository (one per release, per webhook, per dependency, ...).
    """

    model_config = ConfigDict(frozen=True)

    probe: str = Field(description="Identifier of the probe that produced the finding")
    outcome: Outcome
    message: str = ""
    payload: ProbePayload | None = Field(default=None, description="Probe specific typed data")
    location: Location | None = None

    @property
    def is_applicable(self) -> bool:
        """True when the outcome is a definite True or False."""
        return self.outcome in (Outcome.TRUE, Outcome.FALSE)
