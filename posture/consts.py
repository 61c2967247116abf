from enum import Enum

# Score bounds shared by every check
MAX_RESULT_SCORE = 10
MIN_RESULT_SCORE = 0
INCONCLUSIVE_RESULT_SCORE = -1  # Legacy sentinel for non-scored results


class CheckName(str, Enum):
    """Top-level checks known to the registry."""

    BINARY_ARTIFACTS = "Binary-Artifacts"
    BRANCH_PROTECTION = "Branch-Protection"
    CI_TESTS = "CI-Tests"
    CII_BEST_PRACTICES = "CII-Best-Practices"
    CODE_REVIEW = "Code-Review"
    CONTRIBUTORS = "Contributors"
    DANGEROUS_WORKFLOW = "Dangerous-Workflow"
    DEPENDENCY_UPDATE_TOOL = "Dependency-Update-Tool"
    FUZZING = "Fuzzing"
    INACTIVE_MAINTAINERS = "Inactive-Maintainers"
    LICENSE = "License"
    MAINTAINED = "Maintained"
    MAINTAINER_RESPONSE = "Maintainer-Response"
    MTTU_DEPENDENCIES = "MTTU-Dependencies"
    PACKAGING = "Packaging"
    PERMISSIVE_LICENSE = "Permissive-License"
    PINNED_DEPENDENCIES = "Pinned-Dependencies"
    SAST = "SAST"
    SBOM = "SBOM"
    SECRET_SCANNING = "Secret-Scanning"
    SECURITY_POLICY = "Security-Policy"
    SIGNED_RELEASES = "Signed-Releases"
    TAG_PROTECTION = "Tag-Protection"
    TOKEN_PERMISSIONS = "Token-Permissions"
    VULNERABILITIES = "Vulnerabilities"
    WEBHOOKS = "Webhooks"


class Probe(str, Enum):
    """Probe identifiers emitted by the upstream probe runner."""

    # Maintained
    ARCHIVED = "archived"
    CREATED_RECENTLY = "createdRecently"
    HAS_RECENT_COMMITS = "hasRecentCommits"
    ISSUE_ACTIVITY_BY_PROJECT_MEMBER = "issueActivityByProjectMember"

    # License
    HAS_LICENSE_FILE = "hasLicenseFile"
    HAS_LICENSE_FILE_AT_TOP_DIR = "hasLicenseFileAtTopDir"
    HAS_FSF_OR_OSI_APPROVED_LICENSE = "hasFSFOrOSIApprovedLicense"
    HAS_PERMISSIVE_LICENSE = "hasPermissiveLicense"

    # Code review and CI
    CODE_APPROVED = "codeApproved"
    TESTS_RUN_IN_CI = "testsRunInCI"

    # Dependencies
    PINS_DEPENDENCIES = "pinsDependencies"
    HAS_OSV_VULNERABILITIES = "hasOSVVulnerabilities"
    RELEASES_DIRECT_DEPS_ARE_VULN_FREE = "releasesDirectDepsAreVulnFree"
    MTTU_VERY_LOW = "mttuDependenciesIsVeryLow"
    MTTU_LOW = "mttuDependenciesIsLow"
    MTTU_HIGH = "mttuDependenciesIsHigh"
    TOOL_DEPENDABOT_INSTALLED = "toolDependabotInstalled"
    TOOL_PYUP_INSTALLED = "toolPyUpInstalled"
    TOOL_RENOVATE_INSTALLED = "toolRenovateInstalled"
    TOOL_SONATYPE_LIFT_INSTALLED = "toolSonatypeLiftInstalled"

    # Releases
    RELEASES_ARE_SIGNED = "releasesAreSigned"
    RELEASES_HAVE_PROVENANCE = "releasesHaveProvenance"
    SBOM_EXISTS = "sbomExists"
    SBOM_RELEASE_ASSET_EXISTS = "sbomReleaseAssetExists"
    PACKAGED_WITH_AUTOMATED_WORKFLOW = "packagedWithAutomatedWorkflow"

    # Secret scanning
    HAS_GITHUB_SECRET_SCANNING_ENABLED = "hasGitHubSecretScanningEnabled"
    HAS_GITHUB_PUSH_PROTECTION_ENABLED = "hasGitHubPushProtectionEnabled"
    HAS_GITLAB_SECRET_PUSH_PROTECTION = "hasGitLabSecretPushProtection"
    HAS_GITLAB_PIPELINE_SECRET_DETECTION = "hasGitLabPipelineSecretDetection"
    HAS_GITLAB_PUSH_RULES_PREVENT_SECRETS = "hasGitLabPushRulesPreventSecrets"
    HAS_THIRD_PARTY_GITLEAKS = "hasThirdPartyGitleaks"
    HAS_THIRD_PARTY_TRUFFLEHOG = "hasThirdPartyTruffleHog"
    HAS_THIRD_PARTY_DETECT_SECRETS = "hasThirdPartyDetectSecrets"
    HAS_THIRD_PARTY_GIT_SECRETS = "hasThirdPartyGitSecrets"
    HAS_THIRD_PARTY_GGSHIELD = "hasThirdPartyGGShield"
    HAS_THIRD_PARTY_SHHGIT = "hasThirdPartyShhGit"
    HAS_THIRD_PARTY_REPO_SUPERVISOR = "hasThirdPartyRepoSupervisor"

    # Tag protection
    TAGS_ARE_PROTECTED = "tagsAreProtected"
    BLOCKS_DELETE_ON_TAGS = "blocksDeleteOnTags"
    BLOCKS_FORCE_PUSH_ON_TAGS = "blocksForcePushOnTags"
    BLOCKS_UPDATE_ON_TAGS = "blocksUpdateOnTags"
    TAG_PROTECTION_APPLIES_TO_ADMINS = "tagProtectionAppliesToAdmins"
    RESTRICTS_TAG_CREATION = "restrictsTagCreation"
    REQUIRES_SIGNED_TAGS = "requiresSignedTags"
    TAGS_CANNOT_DUPLICATE_BRANCH_NAMES = "tagsCannotDuplicateBranchNames"
    GITLAB_RELEASE_TAGS_ARE_PROTECTED = "gitlabReleaseTagsAreProtected"

    # Branch protection
    BLOCKS_DELETE_ON_BRANCHES = "blocksDeleteOnBranches"
    BLOCKS_FORCE_PUSH_ON_BRANCHES = "blocksForcePushOnBranches"
    BRANCHES_ARE_PROTECTED = "branchesAreProtected"
    BRANCH_PROTECTION_APPLIES_TO_ADMINS = "branchProtectionAppliesToAdmins"
    DISMISSES_STALE_REVIEWS = "dismissesStaleReviews"
    REQUIRES_APPROVERS_FOR_PULL_REQUESTS = "requiresApproversForPullRequests"
    REQUIRES_CODE_OWNERS_REVIEW = "requiresCodeOwnersReview"
    REQUIRES_LAST_PUSH_APPROVAL = "requiresLastPushApproval"
    REQUIRES_UP_TO_DATE_BRANCHES = "requiresUpToDateBranches"
    RUNS_STATUS_CHECKS_BEFORE_MERGING = "runsStatusChecksBeforeMerging"
    REQUIRES_PRS_TO_CHANGE_CODE = "requiresPRsToChangeCode"

    # Static analysis
    SAST_TOOL_CODEQL_INSTALLED = "sastToolCodeQLInstalled"
    SAST_TOOL_PYSA_INSTALLED = "sastToolPysaInstalled"
    SAST_TOOL_QODANA_INSTALLED = "sastToolQodanaInstalled"
    SAST_TOOL_SNYK_INSTALLED = "sastToolSnykInstalled"
    SAST_TOOL_SONAR_INSTALLED = "sastToolSonarInstalled"
    SAST_TOOL_RUNS_ON_ALL_COMMITS = "sastToolRunsOnAllCommits"

    # Token permissions
    HAS_NO_WORKFLOW_PERMISSION_WRITE_ALL_TOP = "hasNoGitHubWorkflowPermissionWriteAllTop"
    HAS_NO_WORKFLOW_PERMISSION_WRITE_ALL_JOB = "hasNoGitHubWorkflowPermissionWriteAllJob"
    HAS_WORKFLOW_PERMISSION_NONE = "hasGitHubWorkflowPermissionNone"
    HAS_WORKFLOW_PERMISSION_READ = "hasGitHubWorkflowPermissionRead"
    HAS_WORKFLOW_PERMISSION_UNDECLARED = "hasGitHubWorkflowPermissionUndeclared"
    HAS_WORKFLOW_PERMISSION_UNKNOWN = "hasGitHubWorkflowPermissionUnknown"
    JOB_LEVEL_PERMISSIONS = "jobLevelPermissions"
    TOP_LEVEL_PERMISSIONS = "topLevelPermissions"

    # Workflows and artifacts
    HAS_DANGEROUS_WORKFLOW_SCRIPT_INJECTION = "hasDangerousWorkflowScriptInjection"
    HAS_DANGEROUS_WORKFLOW_UNTRUSTED_CHECKOUT = "hasDangerousWorkflowUntrustedCheckout"
    FREE_OF_UNVERIFIED_BINARY_ARTIFACTS = "freeOfUnverifiedBinaryArtifacts"
    WEBHOOKS_USE_SECRETS = "webhooksUseSecrets"

    # Policy and community
    SECURITY_POLICY_PRESENT = "securityPolicyPresent"
    SECURITY_POLICY_CONTAINS_LINKS = "securityPolicyContainsLinks"
    SECURITY_POLICY_CONTAINS_TEXT = "securityPolicyContainsText"
    SECURITY_POLICY_CONTAINS_VULNERABILITY_DISCLOSURE = "securityPolicyContainsVulnerabilityDisclosure"
    HAS_OPENSSF_BADGE = "hasOpenSSFBadge"
    CONTRIBUTORS_FROM_ORG_OR_COMPANY = "contributorsFromOrgOrCompany"
    HAS_INACTIVE_MAINTAINERS = "hasInactiveMaintainers"
    MAINTAINER_RESPONSE = "maintainerResponse"

    # Fuzzing
    FUZZED_WITH_OSS_FUZZ = "fuzzedWithOSSFuzz"
    FUZZED_WITH_CLUSTERFUZZLITE = "fuzzedWithClusterFuzzLite"
    FUZZED_WITH_ONEFUZZ = "fuzzedWithOneFuzz"
    FUZZED_WITH_GO_NATIVE = "fuzzedWithGoNative"
    FUZZED_WITH_PYTHON_ATHERIS = "fuzzedWithPythonAtheris"
    FUZZED_WITH_C_LIBFUZZER = "fuzzedWithCLibFuzzer"
    FUZZED_WITH_CPP_LIBFUZZER = "fuzzedWithCppLibFuzzer"
    FUZZED_WITH_SWIFT_LIBFUZZER = "fuzzedWithSwiftLibFuzzer"
    FUZZED_WITH_RUST_CARGOFUZZ = "fuzzedWithRustCargofuzz"
    FUZZED_WITH_JAVA_JAZZER = "fuzzedWithJavaJazzerFuzzer"
    FUZZED_WITH_PROPERTY_BASED_HASKELL = "fuzzedWithPropertyBasedHaskell"
    FUZZED_WITH_PROPERTY_BASED_TYPESCRIPT = "fuzzedWithPropertyBasedTypescript"
    FUZZED_WITH_PROPERTY_BASED_JAVASCRIPT = "fuzzedWithPropertyBasedJavascript"


FUZZING_PROBES = [
    Probe.FUZZED_WITH_OSS_FUZZ,
    Probe.FUZZED_WITH_CLUSTERFUZZLITE,
    Probe.FUZZED_WITH_ONEFUZZ,
    Probe.FUZZED_WITH_GO_NATIVE,
    Probe.FUZZED_WITH_PYTHON_ATHERIS,
    Probe.FUZZED_WITH_C_LIBFUZZER,
    Probe.FUZZED_WITH_CPP_LIBFUZZER,
    Probe.FUZZED_WITH_SWIFT_LIBFUZZER,
    Probe.FUZZED_WITH_RUST_CARGOFUZZ,
    Probe.FUZZED_WITH_JAVA_JAZZER,
    Probe.FUZZED_WITH_PROPERTY_BASED_HASKELL,
    Probe.FUZZED_WITH_PROPERTY_BASED_TYPESCRIPT,
    Probe.FUZZED_WITH_PROPERTY_BASED_JAVASCRIPT,
]

THIRD_PARTY_SECRET_PROBES = [
    Probe.HAS_THIRD_PARTY_GITLEAKS,
    Probe.HAS_THIRD_PARTY_TRUFFLEHOG,
    Probe.HAS_THIRD_PARTY_DETECT_SECRETS,
    Probe.HAS_THIRD_PARTY_GIT_SECRETS,
    Probe.HAS_THIRD_PARTY_GGSHIELD,
    Probe.HAS_THIRD_PARTY_SHHGIT,
    Probe.HAS_THIRD_PARTY_REPO_SUPERVISOR,
]

GITLAB_TAG_PROBES = [
    Probe.TAGS_CANNOT_DUPLICATE_BRANCH_NAMES,
    Probe.GITLAB_RELEASE_TAGS_ARE_PROTECTED,
]

BRANCH_PROTECTION_PROBES = [
    Probe.BLOCKS_DELETE_ON_BRANCHES,
    Probe.BLOCKS_FORCE_PUSH_ON_BRANCHES,
    Probe.BRANCHES_ARE_PROTECTED,
    Probe.BRANCH_PROTECTION_APPLIES_TO_ADMINS,
    Probe.DISMISSES_STALE_REVIEWS,
    Probe.REQUIRES_APPROVERS_FOR_PULL_REQUESTS,
    Probe.REQUIRES_CODE_OWNERS_REVIEW,
    Probe.REQUIRES_LAST_PUSH_APPROVAL,
    Probe.REQUIRES_UP_TO_DATE_BRANCHES,
    Probe.RUNS_STATUS_CHECKS_BEFORE_MERGING,
    Probe.REQUIRES_PRS_TO_CHANGE_CODE,
]

SAST_TOOL_PROBES = [
    Probe.SAST_TOOL_CODEQL_INSTALLED,
    Probe.SAST_TOOL_PYSA_INSTALLED,
    Probe.SAST_TOOL_QODANA_INSTALLED,
    Probe.SAST_TOOL_SNYK_INSTALLED,
    Probe.SAST_TOOL_SONAR_INSTALLED,
]

TOKEN_PERMISSION_PROBES = [
    Probe.HAS_NO_WORKFLOW_PERMISSION_WRITE_ALL_TOP,
    Probe.HAS_WORKFLOW_PERMISSION_UNKNOWN,
    Probe.HAS_WORKFLOW_PERMISSION_NONE,
    Probe.HAS_WORKFLOW_PERMISSION_READ,
    Probe.HAS_WORKFLOW_PERMISSION_UNDECLARED,
    Probe.HAS_NO_WORKFLOW_PERMISSION_WRITE_ALL_JOB,
    Probe.JOB_LEVEL_PERMISSIONS,
    Probe.TOP_LEVEL_PERMISSIONS,
]

# Maintained
LOOKBACK_DAYS = 90
ACTIVITY_PER_WEEK = 1

# Releases
RELEASE_LOOKBACK = 5  # Most recent releases the probes inspect
SIGNED_RELEASE_POINTS = 8
PROVENANCE_RELEASE_POINTS = 10
SIGNATURE_EXTENSIONS = [
    ".asc",
    ".minisig",
    ".sig",
    ".sign",
    ".sigstore",
    ".sigstore.json",
    ".intoto.jsonl",
]

# Maintainer response
RESPONSE_THRESHOLD_DAYS = 180
MAX_ISSUES_IN_REASON = 20
RESPONSE_ZERO_SCORE_PERCENT = 40.0
RESPONSE_HALF_SCORE_PERCENT = 20.0

# Contributors
ORGANIZATIONS_FOR_MAX_SCORE = 3

# MTTU buckets (days)
MTTU_VERY_LOW_DAYS = 14
MTTU_HIGH_DAYS = 180

# GitHub Actions owned by GitHub itself
GITHUB_OWNED_ACTION_PREFIXES = ["actions/", "github/"]
