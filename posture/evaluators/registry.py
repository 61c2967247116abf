"""Evaluator registry for running every check over its findings."""

import logging

from posture.catalog import ProbeCatalog, default_catalog
from posture.detail_logger import DetailLogger, RecordingDetailLogger
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
from posture.evaluators.sast import SASTEvaluator
from posture.evaluators.sbom import SBOMEvaluator
from posture.evaluators.secret_scanning import SecretScanningEvaluator
from posture.evaluators.security_policy import SecurityPolicyEvaluator
from posture.evaluators.signed_releases import SignedReleasesEvaluator
from posture.evaluators.tag_protection import TagProtectionEvaluator
from posture.evaluators.token_permissions import TokenPermissionsEvaluator
from posture.evaluators.vulnerabilities import VulnerabilitiesEvaluator
from posture.evaluators.webhooks import WebhooksEvaluator
from posture.models.model_eval import ScoringConfig
from posture.models.model_finding import Finding
from posture.models.model_result import CheckDetail, CheckResult

logger = logging.getLogger(__name__)


class EvaluatorRegistry:
    """Holds one evaluator per check and runs them over findings.

    Evaluators are built once, sharing the scoring configuration and the
    probe catalog. Evaluation never raises for scoring problems: those come
    back as error results. Only an unknown check name raises.
    """

    def __init__(
        self,
        config: ScoringConfig | None = None,
        catalog: ProbeCatalog | None = None,
    ) -> None:
        """Initialize registry with all evaluators.

        Args:
            config: Scoring thresholds (defaults to the published policy)
            catalog: Probe catalog (defaults to the built-in catalog)
        """
        self.config = config or ScoringConfig()
        self.catalog = catalog or default_catalog()

        evaluators: list[BaseEvaluator] = [
            BinaryArtifactsEvaluator(self.catalog),
            BranchProtectionEvaluator(),
            CITestsEvaluator(),
            CIIBestPracticesEvaluator(),
            CodeReviewEvaluator(),
            ContributorsEvaluator(self.config),
            DangerousWorkflowEvaluator(self.catalog),
            DependencyUpdateToolEvaluator(self.catalog),
            FuzzingEvaluator(),
            InactiveMaintainersEvaluator(),
            LicenseEvaluator(),
            MaintainedEvaluator(self.config),
            MaintainerResponseEvaluator(self.config),
            MTTUDependenciesEvaluator(self.config),
            PackagingEvaluator(),
            PermissiveLicenseEvaluator(),
            PinnedDependenciesEvaluator(self.catalog),
            SASTEvaluator(),
            SBOMEvaluator(),
            SecretScanningEvaluator(),
            SecurityPolicyEvaluator(),
            SignedReleasesEvaluator(self.config),
            TagProtectionEvaluator(),
            TokenPermissionsEvaluator(),
            VulnerabilitiesEvaluator(),
            WebhooksEvaluator(self.catalog),
        ]
        self.evaluators: dict[str, BaseEvaluator] = {e.name: e for e in evaluators}

    def names(self) -> list[str]:
        """Registered check names, sorted."""
        return sorted(self.evaluators)

    def evaluate(self, check: str, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Evaluate one check.

        Args:
            check: Check name, e.g. "Maintained"
            findings: Findings produced for this check
            dl: Detail logger receiving the justifications

        Returns:
            The check result

        Raises:
            KeyError: If no evaluator is registered under the name
        """
        if check not in self.evaluators:
            raise KeyError(f"Unknown check: {check}")

        result = self.evaluators[check].evaluate(findings, dl)
        if result.is_error:
            logger.warning(f"{check}: {result.reason}")
        else:
            logger.info(f"{check}: {result.kind.value} score={result.score}")
        return result

    def evaluate_batch(
        self, findings_by_check: dict[str, list[Finding]]
    ) -> dict[str, tuple[CheckResult, list[CheckDetail]]]:
        """Evaluate several checks, each with its own detail logger.

        Args:
            findings_by_check: Findings keyed by check name

        Returns:
            Result and recorded details keyed by check name
        """
        results = {}
        for check, findings in findings_by_check.items():
            dl = RecordingDetailLogger()
            result = self.evaluate(check, findings, dl)
            results[check] = (result, dl.flush())

        errors = sum(1 for result, _ in results.values() if result.is_error)
        logger.info(f"Evaluated {len(results)} checks ({errors} errors)")
        return results


def main() -> None:
    """Demonstrate evaluation of a few checks."""
    from posture.consts import CheckName, Probe
    from posture.models.model_finding import ActivityCount, Outcome

    print("Evaluator Registry Demo")
    print("=" * 50)

    registry = EvaluatorRegistry()
    findings_by_check = {
        CheckName.MAINTAINED.value: [
            Finding(probe=Probe.ARCHIVED.value, outcome=Outcome.FALSE),
            Finding(probe=Probe.CREATED_RECENTLY.value, outcome=Outcome.FALSE),
            Finding(
                probe=Probe.HAS_RECENT_COMMITS.value,
                outcome=Outcome.TRUE,
                payload=ActivityCount(count=8),
            ),
            Finding(
                probe=Probe.ISSUE_ACTIVITY_BY_PROJECT_MEMBER.value,
                outcome=Outcome.TRUE,
                payload=ActivityCount(count=2),
            ),
        ],
        CheckName.CI_TESTS.value: [
            Finding(probe=Probe.TESTS_RUN_IN_CI.value, outcome=Outcome.TRUE),
            Finding(probe=Probe.TESTS_RUN_IN_CI.value, outcome=Outcome.TRUE),
            Finding(probe=Probe.TESTS_RUN_IN_CI.value, outcome=Outcome.TRUE),
            Finding(probe=Probe.TESTS_RUN_IN_CI.value, outcome=Outcome.FALSE),
        ],
        CheckName.SBOM.value: [
            Finding(probe=Probe.SBOM_EXISTS.value, outcome=Outcome.TRUE, message="SBOM found"),
            Finding(probe=Probe.SBOM_RELEASE_ASSET_EXISTS.value, outcome=Outcome.FALSE),
        ],
    }

    print(f"\nRegistered checks: {len(registry.names())}")
    print("\n## Results")
    for check, (result, details) in registry.evaluate_batch(findings_by_check).items():
        print(f"\n{check}:")
        print(f"  Kind:    {result.kind.value}")
        print(f"  Score:   {result.score}")
        print(f"  Reason:  {result.reason}")
        for detail in details:
            print(f"  [{detail.level.value}] {detail.message.text}")


if __name__ == "__main__":
    main()
