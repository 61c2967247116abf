"""Probe catalog: static metadata for every known probe.

The catalog is built once at start-up and handed to whatever needs it
(the registry, the binary artifacts evaluator, the CLI loader). It is
read-only after construction.
"""

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from posture.consts import (
    BRANCH_PROTECTION_PROBES,
    FUZZING_PROBES,
    GITLAB_TAG_PROBES,
    SAST_TOOL_PROBES,
    THIRD_PARTY_SECRET_PROBES,
    TOKEN_PERMISSION_PROBES,
    CheckName,
    Probe,
)
from posture.models.model_finding import Finding


class ProbeDefinition(BaseModel):
    """Metadata for one probe."""

    model_config = ConfigDict(frozen=True)

    name: str
    check: CheckName
    payload_kind: str | None = Field(default=None, description="Expected payload kind, if any")
    payload_required: bool = Field(default=False, description="Applicable findings must carry it")
    remediation: str | None = None


class ProbeCatalog:
    """Immutable lookup of probe definitions by probe name."""

    def __init__(self, definitions: Iterable[ProbeDefinition]) -> None:
        by_name: dict[str, ProbeDefinition] = {}
        for definition in definitions:
            if definition.name in by_name:
                msg = f"Duplicate probe definition: {definition.name}"
                raise ValueError(msg)
            by_name[definition.name] = definition
        self._definitions = MappingProxyType(by_name)

    def __contains__(self, probe: object) -> bool:
        return probe in self._definitions

    def __iter__(self) -> Iterator[ProbeDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def get(self, probe: str) -> ProbeDefinition | None:
        return self._definitions.get(probe)

    def remediation_for(self, probe: str) -> str | None:
        definition = self._definitions.get(probe)
        return definition.remediation if definition else None

    def probes_for(self, check: CheckName) -> list[str]:
        """Probe names declared for a check, in catalog order."""
        return [d.name for d in self._definitions.values() if d.check == check]

    def validate_payload(self, finding: Finding) -> None:
        """Raise ValueError when a finding carries the wrong payload for its probe.

        Unknown probes are left alone; rejecting them is the job of the
        probe-set validator inside each evaluator.
        """
        definition = self._definitions.get(finding.probe)
        if definition is None:
            return
        if finding.payload is None:
            if definition.payload_required and finding.is_applicable:
                msg = f"Probe {finding.probe} requires a {definition.payload_kind} payload"
                raise ValueError(msg)
            return
        if finding.payload.kind != definition.payload_kind:
            msg = (
                f"Probe {finding.probe} expects payload {definition.payload_kind}, "
                f"got {finding.payload.kind}"
            )
            raise ValueError(msg)


def _defs(check: CheckName, probes: Iterable[Probe], **kwargs) -> list[ProbeDefinition]:
    return [ProbeDefinition(name=probe.value, check=check, **kwargs) for probe in probes]


def default_catalog() -> ProbeCatalog:
    """Build the catalog of all probes known to the evaluators."""
    definitions: list[ProbeDefinition] = []

    definitions += _defs(CheckName.MAINTAINED, [Probe.ARCHIVED, Probe.CREATED_RECENTLY])
    definitions += _defs(
        CheckName.MAINTAINED,
        [Probe.HAS_RECENT_COMMITS, Probe.ISSUE_ACTIVITY_BY_PROJECT_MEMBER],
        payload_kind="activity_count",
        payload_required=True,
    )
    definitions += _defs(
        CheckName.LICENSE,
        [
            Probe.HAS_LICENSE_FILE,
            Probe.HAS_LICENSE_FILE_AT_TOP_DIR,
            Probe.HAS_FSF_OR_OSI_APPROVED_LICENSE,
        ],
        remediation="Add a LICENSE file with an FSF or OSI approved license to the repository root.",
    )
    definitions += _defs(CheckName.PERMISSIVE_LICENSE, [Probe.HAS_PERMISSIVE_LICENSE])
    definitions += _defs(
        CheckName.CODE_REVIEW,
        [Probe.CODE_APPROVED],
        payload_kind="changesets",
        remediation="Require at least one approving review before merging changes.",
    )
    definitions += _defs(CheckName.CI_TESTS, [Probe.TESTS_RUN_IN_CI])
    definitions += _defs(
        CheckName.PINNED_DEPENDENCIES,
        [Probe.PINS_DEPENDENCIES],
        payload_kind="dependency",
        payload_required=True,
        remediation="Pin dependencies by full commit SHA or digest.",
    )
    definitions += _defs(
        CheckName.VULNERABILITIES,
        [Probe.HAS_OSV_VULNERABILITIES],
        payload_kind="vulnerability",
        remediation="Fix the vulnerabilities or update the affected dependencies.",
    )
    definitions += _defs(
        CheckName.VULNERABILITIES,
        [Probe.RELEASES_DIRECT_DEPS_ARE_VULN_FREE],
        payload_kind="release",
    )
    definitions += _defs(
        CheckName.MTTU_DEPENDENCIES,
        [Probe.MTTU_VERY_LOW, Probe.MTTU_LOW, Probe.MTTU_HIGH],
        payload_kind="update_lag",
    )
    definitions += _defs(
        CheckName.DEPENDENCY_UPDATE_TOOL,
        [
            Probe.TOOL_DEPENDABOT_INSTALLED,
            Probe.TOOL_PYUP_INSTALLED,
            Probe.TOOL_RENOVATE_INSTALLED,
            Probe.TOOL_SONATYPE_LIFT_INSTALLED,
        ],
        remediation="Enable an automated dependency update tool such as Dependabot or Renovate.",
    )
    definitions += _defs(
        CheckName.SIGNED_RELEASES,
        [Probe.RELEASES_ARE_SIGNED, Probe.RELEASES_HAVE_PROVENANCE],
        payload_kind="release",
        payload_required=True,
        remediation="Publish signatures and SLSA provenance alongside release artifacts.",
    )
    definitions += _defs(CheckName.SBOM, [Probe.SBOM_EXISTS, Probe.SBOM_RELEASE_ASSET_EXISTS])
    definitions += _defs(CheckName.PACKAGING, [Probe.PACKAGED_WITH_AUTOMATED_WORKFLOW])
    definitions += _defs(
        CheckName.SECRET_SCANNING,
        [
            Probe.HAS_GITHUB_SECRET_SCANNING_ENABLED,
            Probe.HAS_GITHUB_PUSH_PROTECTION_ENABLED,
            Probe.HAS_GITLAB_SECRET_PUSH_PROTECTION,
            Probe.HAS_GITLAB_PIPELINE_SECRET_DETECTION,
            Probe.HAS_GITLAB_PUSH_RULES_PREVENT_SECRETS,
        ],
    )
    definitions += _defs(
        CheckName.SECRET_SCANNING, THIRD_PARTY_SECRET_PROBES, payload_kind="secret_tool"
    )
    definitions += _defs(
        CheckName.TAG_PROTECTION,
        [
            Probe.TAGS_ARE_PROTECTED,
            Probe.BLOCKS_DELETE_ON_TAGS,
            Probe.BLOCKS_FORCE_PUSH_ON_TAGS,
            Probe.BLOCKS_UPDATE_ON_TAGS,
            Probe.TAG_PROTECTION_APPLIES_TO_ADMINS,
            Probe.RESTRICTS_TAG_CREATION,
            Probe.REQUIRES_SIGNED_TAGS,
            *GITLAB_TAG_PROBES,
        ],
        payload_kind="tag",
    )
    definitions += _defs(
        CheckName.DANGEROUS_WORKFLOW,
        [
            Probe.HAS_DANGEROUS_WORKFLOW_SCRIPT_INJECTION,
            Probe.HAS_DANGEROUS_WORKFLOW_UNTRUSTED_CHECKOUT,
        ],
        remediation="Avoid untrusted input in run steps and untrusted checkouts in privileged workflows.",
    )
    definitions += _defs(
        CheckName.BINARY_ARTIFACTS,
        [Probe.FREE_OF_UNVERIFIED_BINARY_ARTIFACTS],
        remediation="Remove generated executable artifacts from the repository or build them from source.",
    )
    definitions += _defs(
        CheckName.WEBHOOKS,
        [Probe.WEBHOOKS_USE_SECRETS],
        remediation="Configure a secret token for every webhook.",
    )
    definitions += _defs(
        CheckName.SECURITY_POLICY,
        [
            Probe.SECURITY_POLICY_PRESENT,
            Probe.SECURITY_POLICY_CONTAINS_LINKS,
            Probe.SECURITY_POLICY_CONTAINS_TEXT,
            Probe.SECURITY_POLICY_CONTAINS_VULNERABILITY_DISCLOSURE,
        ],
        remediation="Add a SECURITY.md describing how to report vulnerabilities.",
    )
    definitions += _defs(
        CheckName.CII_BEST_PRACTICES,
        [Probe.HAS_OPENSSF_BADGE],
        payload_kind="badge",
    )
    definitions += _defs(
        CheckName.CONTRIBUTORS,
        [Probe.CONTRIBUTORS_FROM_ORG_OR_COMPANY],
        payload_kind="organization",
    )
    definitions += _defs(
        CheckName.INACTIVE_MAINTAINERS,
        [Probe.HAS_INACTIVE_MAINTAINERS],
        payload_kind="maintainer",
    )
    definitions += _defs(
        CheckName.MAINTAINER_RESPONSE,
        [Probe.MAINTAINER_RESPONSE],
        payload_kind="issue_response",
    )
    definitions += _defs(
        CheckName.FUZZING,
        FUZZING_PROBES,
        remediation="Integrate the project with a continuous fuzzing service such as OSS-Fuzz.",
    )
    definitions += _defs(
        CheckName.BRANCH_PROTECTION,
        BRANCH_PROTECTION_PROBES,
        payload_kind="branch",
        payload_required=True,
        remediation="Protect the default and release branches and require reviewed pull requests.",
    )
    definitions += _defs(
        CheckName.SAST,
        SAST_TOOL_PROBES,
        remediation="Run a static analysis tool such as CodeQL on every pull request.",
    )
    definitions += _defs(
        CheckName.SAST,
        [Probe.SAST_TOOL_RUNS_ON_ALL_COMMITS],
        payload_kind="pr_coverage",
        payload_required=True,
    )
    definitions += _defs(
        CheckName.TOKEN_PERMISSIONS,
        TOKEN_PERMISSION_PROBES,
        payload_kind="workflow_permission",
        remediation="Declare read-only top-level permissions and grant write access per job.",
    )

    return ProbeCatalog(definitions)
