"""Maintainer response evaluator.

Each finding is one issue carrying a bug or security label. False means
the label went at least 180 days without any maintainer reaction; True
means a maintainer reacted in time. The score buckets on the share of
violating issues:

    more than 40%   -> 0
    more than 20%   -> 5
    otherwise       -> 10

The reason reads like:

    Evaluated 12 issues with bug/security labels. 9 had activity by a
    maintainer within 180 days (worst 41 days). 25.0% exceeded 180 days
    without response; violating issues: #3, #8, #15

At most 20 violating issues are listed, followed by "... +N more".
"""

import re

from posture.consts import MAX_RESULT_SCORE, MIN_RESULT_SCORE, CheckName, Probe
from posture.detail_logger import DetailLogger
from posture.models.model_eval import ScoringConfig
from posture.models.model_finding import Finding, IssueResponse, Outcome
from posture.models.model_result import CheckResult, LogMessage

HALF_SCORE = 5

_FIRST_INT = re.compile(r"\d+")
_ISSUE_URL = re.compile(r"/issues/(\d+)(?:/|$)")


def first_int(text: str) -> int | None:
    """First run of digits in text, if any."""
    match = _FIRST_INT.search(text)
    return int(match.group()) if match else None


def issue_url(finding: Finding) -> str | None:
    """HTTP(S) URL of the issue, from the payload or the location path."""
    if isinstance(finding.payload, IssueResponse) and finding.payload.url:
        return finding.payload.url
    if finding.location and finding.location.path.startswith(("http://", "https://")):
        return finding.location.path
    return None


def lag_of(finding: Finding) -> int | None:
    """Days without maintainer reaction, falling back to the message text."""
    if isinstance(finding.payload, IssueResponse) and finding.payload.lag_days is not None:
        return finding.payload.lag_days
    return first_int(finding.message)


def issue_number_of(finding: Finding) -> int | None:
    """Issue number from the payload, the issue URL, or the message text."""
    if isinstance(finding.payload, IssueResponse) and finding.payload.issue_number:
        return finding.payload.issue_number
    if url := issue_url(finding):
        if matches := _ISSUE_URL.findall(url):
            return int(matches[-1])
    number = first_int(finding.message)
    return number if number else None


def format_issue_list(numbers: list[int], max_count: int) -> str:
    """Render "#1, #2, ... +N more" with at most max_count numbers."""
    listed = ", ".join(f"#{n}" for n in numbers[:max_count])
    if len(numbers) > max_count:
        return f"{listed}, ... +{len(numbers) - max_count} more"
    return listed


class MaintainerResponseEvaluator:
    """Scores how quickly maintainers react to bug and security issues."""

    name = CheckName.MAINTAINER_RESPONSE.value
    expected_probes = [Probe.MAINTAINER_RESPONSE]

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.settings = (config or ScoringConfig()).response

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Calculate the maintainer response score.

        Args:
            findings: One finding per labelled issue
            dl: Detail logger

        Returns:
            Maintainer response check result, carrying the findings
        """
        threshold = self.settings.threshold_days
        evaluated = 0
        violations = 0
        worst_timely = 0
        violating_issues: list[int] = []

        for finding in findings:
            if finding.outcome == Outcome.FALSE:
                evaluated += 1
                violations += 1
                text = finding.message
                url = issue_url(finding)
                if url and url not in text:
                    text = f"{text} ({url})"
                dl.warn(LogMessage(text=text, location=finding.location))
                if number := issue_number_of(finding):
                    violating_issues.append(number)
            elif finding.outcome == Outcome.TRUE:
                evaluated += 1
                lag = lag_of(finding)
                if lag is not None and lag < threshold:
                    worst_timely = max(worst_timely, lag)

        if evaluated == 0:
            if findings:
                reason = "no issues with bug/security labels found"
            else:
                reason = "no issues found in repository"
            return self._result(reason, MAX_RESULT_SCORE, findings)

        if violations == 0:
            reason = (
                f"Evaluated {evaluated} issues with bug/security labels. "
                f"All {evaluated} had timely maintainer activity "
                f"(no label went ≥{threshold} days without response)"
            )
            return self._result(reason, MAX_RESULT_SCORE, findings)

        percent = violations / evaluated * 100.0
        if percent > self.settings.zero_score_percent:
            score = MIN_RESULT_SCORE
        elif percent > self.settings.half_score_percent:
            score = HALF_SCORE
        else:
            score = MAX_RESULT_SCORE

        reason = (
            f"Evaluated {evaluated} issues with bug/security labels. "
            f"{evaluated - violations} had activity by a maintainer within {threshold} days"
        )
        if worst_timely > 0:
            reason += f" (worst {worst_timely} days)"
        reason += f". {percent:.1f}% exceeded {threshold} days without response"
        if violating_issues:
            listed = format_issue_list(violating_issues, self.settings.max_listed_issues)
            reason += f"; violating issues: {listed}"

        dl.debug(LogMessage(text=f"evaluated issues: {evaluated}; violations: {violations}"))
        if violating_issues:
            numbers = " ".join(str(n) for n in violating_issues)
            dl.debug(LogMessage(text=f"issues exceeding {threshold} days without response: [{numbers}]"))

        return self._result(reason, score, findings)

    def _result(self, reason: str, score: int, findings: list[Finding]) -> CheckResult:
        result = CheckResult.scored(self.name, reason, score)
        result.findings = list(findings)
        return result
