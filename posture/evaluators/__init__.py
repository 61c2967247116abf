"""Evaluators module for scoring repository security checks.

Each check has one evaluator that turns the findings of its probes into a
0-10 score, an inconclusive result, or an error result. Scores are built
from a small set of shapes:
- Proportional (passing items over all items)
- Weighted sum with cap (fixed points per probe)
- Tiered gate (each tier requires the previous one)
- Deductions (start at 10 and subtract per risky setting)
- Weakest link (minimum over independent categories)

All evaluators are pure: findings + detail logger -> CheckResult.
"""

from posture.evaluators.aggregation import (
    ProbeWeights,
    Tier,
    aggregate_scores_weighted,
    clamp_score,
    min_aggregate,
    normalize_reason,
    proportional_result,
    proportional_score,
    round_half_up,
    tiered_score,
)
from posture.evaluators.base import BaseEvaluator
from posture.evaluators.binary_artifacts import BinaryArtifactsEvaluator
from posture.evaluators.branch_protection import BranchProtectionEvaluator
from posture.evaluators.binary_checks import (
    DangerousWorkflowEvaluator,
    DependencyUpdateToolEvaluator,
    FuzzingEvaluator,
    PackagingEvaluator,
)
from posture.evaluators.ci_tests import CITestsEvaluator
from posture.evaluators.cii_best_practices import CIIBestPracticesEvaluator
from posture.evaluators.code_review import CodeReviewEvaluator
from posture.evaluators.contributors import ContributorsEvaluator
from posture.evaluators.inactive_maintainers import InactiveMaintainersEvaluator
from posture.evaluators.license import LicenseEvaluator, PermissiveLicenseEvaluator
from posture.evaluators.maintained import MaintainedEvaluator
from posture.evaluators.maintainer_response import MaintainerResponseEvaluator
from posture.evaluators.mttu_dependencies import MTTUDependenciesEvaluator
from posture.evaluators.pinned_dependencies import PinnedDependenciesEvaluator
from posture.evaluators.probe_set import unique_probes_equal, validate_probe_set
from posture.evaluators.registry import EvaluatorRegistry
from posture.evaluators.sast import SASTEvaluator
from posture.evaluators.sbom import SBOMEvaluator
from posture.evaluators.secret_scanning import SecretScanningEvaluator
from posture.evaluators.security_policy import SecurityPolicyEvaluator
from posture.evaluators.signed_releases import SignedReleasesEvaluator
from posture.evaluators.tag_protection import TagProtectionEvaluator
from posture.evaluators.token_permissions import TokenPermissionsEvaluator
from posture.evaluators.vulnerabilities import VulnerabilitiesEvaluator
from posture.evaluators.webhooks import WebhooksEvaluator

__all__ = [
    # Protocol
    "BaseEvaluator",
    # Individual evaluators
    "BinaryArtifactsEvaluator",
    "BranchProtectionEvaluator",
    "CIIBestPracticesEvaluator",
    "CITestsEvaluator",
    "CodeReviewEvaluator",
    "ContributorsEvaluator",
    "DangerousWorkflowEvaluator",
    "DependencyUpdateToolEvaluator",
    "FuzzingEvaluator",
    "InactiveMaintainersEvaluator",
    "LicenseEvaluator",
    "MaintainedEvaluator",
    "MaintainerResponseEvaluator",
    "MTTUDependenciesEvaluator",
    "PackagingEvaluator",
    "PermissiveLicenseEvaluator",
    "PinnedDependenciesEvaluator",
    "SASTEvaluator",
    "SBOMEvaluator",
    "SecretScanningEvaluator",
    "SecurityPolicyEvaluator",
    "SignedReleasesEvaluator",
    "TagProtectionEvaluator",
    "TokenPermissionsEvaluator",
    "VulnerabilitiesEvaluator",
    "WebhooksEvaluator",
    # Orchestration
    "EvaluatorRegistry",
    # Probe-set validation
    "unique_probes_equal",
    "validate_probe_set",
    # Scoring primitives
    "ProbeWeights",
    "Tier",
    "aggregate_scores_weighted",
    "clamp_score",
    "min_aggregate",
    "normalize_reason",
    "proportional_result",
    "proportional_score",
    "round_half_up",
    "tiered_score",
]
