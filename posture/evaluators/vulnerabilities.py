"""Known vulnerabilities evaluator.

Vulnerabilities published under several IDs (a GHSA and its CVE, for
instance) count once: IDs that share an alias are merged with a small
union-find before counting.
"""

import logging

from posture.consts import MAX_RESULT_SCORE, MIN_RESULT_SCORE, CheckName, Probe
from posture.detail_logger import DetailLogger
from posture.evaluators.aggregation import clamp_score, round_half_up
from posture.evaluators.probe_set import probe_names
from posture.models.model_finding import Finding, Outcome, VulnerabilityRef
from posture.models.model_result import CheckError, CheckResult, ErrorCode, LogMessage

logger = logging.getLogger(__name__)

# Blended score: current vulnerabilities weigh 6 points, release history 4
CURRENT_VULNS_POINTS = 6
RELEASE_HISTORY_POINTS = 4


class AliasGroups:
    """Disjoint sets of vulnerability IDs joined through their aliases."""

    def __init__(self) -> None:
        self._parent: dict[str, str] = {}

    def _find(self, item: str) -> str:
        self._parent.setdefault(item, item)
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def add(self, vuln_id: str, aliases: list[str]) -> None:
        """Register an ID and merge it with each of its aliases."""
        root = self._find(vuln_id)
        for alias in aliases:
            alias_root = self._find(alias)
            if alias_root != root:
                self._parent[alias_root] = root

    def groups(self) -> list[list[str]]:
        """Member IDs of each group, sorted for stable output."""
        members: dict[str, list[str]] = {}
        for item in self._parent:
            members.setdefault(self._find(item), []).append(item)
        return sorted(sorted(group) for group in members.values())


class VulnerabilitiesEvaluator:
    """Scores a project by its known, unfixed vulnerabilities.

    Without release history the score drops one point per vulnerability:
    ``max(0, 10 - N)``. When release findings are present the score blends
    current vulnerabilities with the share of recent releases that shipped
    free of known vulnerable direct dependencies:

        round_half_up((6 - min(N, 6)) + 4 * clean / total)
    """

    name = CheckName.VULNERABILITIES.value
    expected_probes = [Probe.HAS_OSV_VULNERABILITIES, Probe.RELEASES_DIRECT_DEPS_ARE_VULN_FREE]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Calculate the vulnerabilities score.

        Args:
            findings: hasOSVVulnerabilities findings, optionally with
                releasesDirectDepsAreVulnFree findings
            dl: Detail logger

        Returns:
            Vulnerabilities check result
        """
        known = probe_names(self.expected_probes)
        present = {f.probe for f in findings}
        if unknown := sorted(present - known):
            logger.warning(f"{self.name}: unknown probes {unknown}")
            return CheckResult.runtime_error(
                self.name,
                CheckError(code=ErrorCode.UNKNOWN_PROBE, message=f"unknown probe: {unknown[0]}"),
            )
        if Probe.HAS_OSV_VULNERABILITIES.value not in present:
            return CheckResult.runtime_error(
                self.name,
                CheckError(
                    code=ErrorCode.INTERNAL, message="missing hasOSVVulnerabilities probe results"
                ),
            )

        aliases = AliasGroups()
        clean_releases = 0
        dirty_releases: list[Finding] = []

        for finding in findings:
            if finding.probe == Probe.HAS_OSV_VULNERABILITIES:
                if finding.outcome != Outcome.TRUE:
                    continue
                if not isinstance(finding.payload, VulnerabilityRef):
                    return CheckResult.runtime_error(
                        self.name,
                        CheckError(
                            code=ErrorCode.INVALID_VALUE,
                            message="vulnerability finding without an ID",
                        ),
                    )
                aliases.add(finding.payload.id, finding.payload.aliases)
            elif finding.outcome == Outcome.TRUE:
                clean_releases += 1
            elif finding.outcome == Outcome.FALSE:
                dirty_releases.append(finding)

        groups = aliases.groups()
        for group in groups:
            dl.warn(LogMessage(text=f"Project is vulnerable to: {' / '.join(group)}"))

        vuln_count = len(groups)
        total_releases = clean_releases + len(dirty_releases)
        if total_releases == 0:
            score = max(MIN_RESULT_SCORE, MAX_RESULT_SCORE - vuln_count)
            return CheckResult.scored(
                self.name, f"{vuln_count} existing vulnerabilities detected", score
            )

        for finding in dirty_releases:
            dl.warn(
                LogMessage(
                    text=finding.message or "release shipped with vulnerable direct dependencies",
                    location=finding.location,
                )
            )

        current = CURRENT_VULNS_POINTS - min(vuln_count, CURRENT_VULNS_POINTS)
        history = RELEASE_HISTORY_POINTS * clean_releases / total_releases
        score = clamp_score(round_half_up(current + history))
        reason = (
            f"{vuln_count} current vulnerabilities detected, "
            f"{clean_releases}/{total_releases} recent releases were free of "
            f"vulnerabilities at time of release"
        )
        return CheckResult.scored(self.name, reason, score)
