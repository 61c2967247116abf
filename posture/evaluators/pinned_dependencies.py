"""Pinned dependencies evaluator.

Dependencies are grouped into independent categories, each scored as the
share of dependencies pinned by hash:

- GitHub Actions, split into GitHub-owned (weight 2) and third-party (weight 8)
- Dockerfile container images
- download-then-run commands in Dockerfiles
- download-then-run commands in shell scripts
- package manager installs (pip, npm, go, choco, nuget)

The overall score is the weakest category. A category without any
dependency is fully pinned.

Both download-then-run categories read the same counter, so an unpinned
download in a shell script also lowers the Dockerfile download score.
"""

from pydantic import BaseModel

from posture.catalog import ProbeCatalog
from posture.consts import GITHUB_OWNED_ACTION_PREFIXES, MAX_RESULT_SCORE, CheckName, Probe
from posture.detail_logger import DetailLogger, log_finding
from posture.evaluators.aggregation import (
    aggregate_scores_weighted,
    min_aggregate,
    normalize_reason,
    proportional_score,
)
from posture.evaluators.probe_set import validate_probe_set
from posture.models.model_finding import DependencyRef, DependencyType, FileType, Finding, Location, Outcome
from posture.models.model_result import CheckError, CheckResult, DetailLevel, ErrorCode, LogMessage

GITHUB_OWNED_WEIGHT = 2
THIRD_PARTY_WEIGHT = 8

PACKAGE_MANAGER_TYPES = {
    DependencyType.PIP_COMMAND,
    DependencyType.NPM_COMMAND,
    DependencyType.GO_COMMAND,
    DependencyType.CHOCO_COMMAND,
    DependencyType.NUGET_COMMAND,
}


class PinnedCount(BaseModel):
    """Pinned dependencies over all dependencies of one category."""

    pinned: int = 0
    total: int = 0

    def add(self, is_pinned: bool) -> None:
        if is_pinned:
            self.pinned += 1
        self.total += 1

    @property
    def score(self) -> int:
        score = proportional_score(self.pinned, self.total)
        return MAX_RESULT_SCORE if score is None else score


def is_github_owned_action(name: str) -> bool:
    """True for actions published under the actions/ or github/ owners."""
    return any(name.startswith(prefix) for prefix in GITHUB_OWNED_ACTION_PREFIXES)


def _action_name(finding: Finding, dependency: DependencyRef) -> str:
    if dependency.name:
        return dependency.name
    if finding.location and finding.location.snippet:
        return finding.location.snippet
    return ""


class PinnedDependenciesEvaluator:
    """Evaluates whether dependencies are pinned by hash."""

    name = CheckName.PINNED_DEPENDENCIES.value
    expected_probes = [Probe.PINS_DEPENDENCIES]

    def __init__(self, catalog: ProbeCatalog | None = None) -> None:
        self.catalog = catalog

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Calculate the pinned dependencies score.

        Args:
            findings: One pinsDependencies finding per dependency
            dl: Detail logger

        Returns:
            Pinned dependencies check result
        """
        if error := validate_probe_set(self.name, findings, self.expected_probes):
            return error

        if all(f.outcome == Outcome.NOT_APPLICABLE for f in findings):
            for finding in findings:
                log_finding(dl, finding, DetailLevel.DEBUG)
            return CheckResult.inconclusive(self.name, "no dependencies found")

        github_owned = PinnedCount()
        third_party = PinnedCount()
        by_type: dict[DependencyType, PinnedCount] = {}

        for finding in findings:
            if finding.outcome not in (Outcome.TRUE, Outcome.FALSE):
                log_finding(dl, finding, DetailLevel.DEBUG)
                continue
            if not isinstance(finding.payload, DependencyRef):
                return CheckResult.runtime_error(
                    self.name,
                    CheckError(code=ErrorCode.INVALID_VALUE, message="dependency finding without type"),
                )

            dependency = finding.payload
            is_pinned = finding.outcome == Outcome.TRUE
            if dependency.dependency_type == DependencyType.GITHUB_ACTION:
                owned = is_github_owned_action(_action_name(finding, dependency))
                (github_owned if owned else third_party).add(is_pinned)
            else:
                by_type.setdefault(dependency.dependency_type, PinnedCount()).add(is_pinned)

            if not is_pinned:
                dl.warn(
                    LogMessage(
                        text=self._unpinned_text(finding, dependency),
                        location=finding.location,
                        remediation=self._remediation(),
                    )
                )

        package_managers = PinnedCount()
        for dependency_type, count in by_type.items():
            if dependency_type in PACKAGE_MANAGER_TYPES:
                package_managers.pinned += count.pinned
                package_managers.total += count.total

        downloads = by_type.get(DependencyType.DOWNLOAD_THEN_RUN, PinnedCount())
        scores = [
            self._action_score(github_owned, third_party, dl),
            self._category_score(
                by_type.get(DependencyType.CONTAINER_IMAGE, PinnedCount()),
                "Dockerfile dependencies are pinned",
                dl,
            ),
            self._category_score(
                downloads,
                "no insecure (not pinned by hash) dependency downloads found in Dockerfiles",
                dl,
            ),
            self._category_score(
                downloads,
                "no insecure (not pinned by hash) dependency downloads found in shell scripts",
                dl,
            ),
            self._category_score(
                package_managers,
                "package manager installs are pinned",
                dl,
            ),
        ]

        score = min_aggregate(scores)
        if score == MAX_RESULT_SCORE:
            return CheckResult.max_score(self.name, "all dependencies are pinned")
        return CheckResult.scored(
            self.name, normalize_reason("dependency not pinned by hash detected", score), score
        )

    def _unpinned_text(self, finding: Finding, dependency: DependencyRef) -> str:
        dependency_type = dependency.dependency_type.value
        if dependency.dependency_type == DependencyType.GITHUB_ACTION:
            owned = is_github_owned_action(_action_name(finding, dependency))
            owner = "GitHub-owned" if owned else "third-party"
            return f"{owner} {dependency_type} not pinned by hash"
        return f"{dependency_type} not pinned by hash"

    def _remediation(self) -> str | None:
        if self.catalog is None:
            return None
        return self.catalog.remediation_for(Probe.PINS_DEPENDENCIES.value)

    def _action_score(self, github_owned: PinnedCount, third_party: PinnedCount, dl: DetailLogger) -> int:
        owned_score = github_owned.score
        third_party_score = third_party.score
        action_type = DependencyType.GITHUB_ACTION.value
        if owned_score == MAX_RESULT_SCORE:
            dl.info(
                LogMessage(
                    text=f"GitHub-owned {action_type}s are pinned",
                    location=Location(type=FileType.SOURCE),
                )
            )
        if third_party_score == MAX_RESULT_SCORE:
            dl.info(
                LogMessage(
                    text=f"Third-party {action_type}s are pinned",
                    location=Location(type=FileType.SOURCE),
                )
            )
        return aggregate_scores_weighted(
            [(owned_score, GITHUB_OWNED_WEIGHT), (third_party_score, THIRD_PARTY_WEIGHT)]
        )

    def _category_score(self, count: PinnedCount, info_text: str, dl: DetailLogger) -> int:
        score = count.score
        if score == MAX_RESULT_SCORE:
            dl.info(LogMessage(text=info_text))
        return score
