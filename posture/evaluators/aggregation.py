"""Scoring primitives shared by the evaluators.

Every evaluator composes its score from a handful of shapes:

- proportional: success / total mapped linearly onto 0-10
- weighted sum with cap: fixed points per probe, each probe counted once
- tiered gate: ordered tiers, each awarded only when fully satisfied
- aggregation: floor of the (weighted) mean, or the weakest link

Integer scores floor. The only rounding happens in ``round_half_up`` for
the blended vulnerability score.
"""

import math
from collections.abc import Iterable, Mapping

from pydantic import BaseModel, Field

from posture.consts import MAX_RESULT_SCORE, MIN_RESULT_SCORE
from posture.evaluators.probe_set import probe_name
from posture.models.model_result import CheckResult


def clamp_score(score: int) -> int:
    """Clamp a score into [0, 10]."""
    return max(MIN_RESULT_SCORE, min(MAX_RESULT_SCORE, score))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def normalize_reason(reason: str, score: int) -> str:
    """Append the normalization suffix used by proportional results."""
    return f"{reason} -- score normalized to {score}"


def proportional_score(success: int, total: int) -> int | None:
    """Map success / total onto 0-10.

    Args:
        success: Number of passing items
        total: Number of items evaluated

    Returns:
        Floored score, or None when there is nothing to evaluate
    """
    if total == 0:
        return None
    return min(MAX_RESULT_SCORE * success // total, MAX_RESULT_SCORE)


def proportional_result(name: str, reason: str, success: int, total: int) -> CheckResult:
    """Build a scored result from a ratio, or inconclusive on an empty ratio."""
    score = proportional_score(success, total)
    if score is None:
        return CheckResult.inconclusive(name, reason)
    return CheckResult.scored(name, normalize_reason(reason, score), score)


def aggregate_scores_weighted(pairs: Iterable[tuple[int, int]]) -> int:
    """Floor of the weighted mean of (score, weight) pairs."""
    total = 0
    weights = 0
    for score, weight in pairs:
        total += score * weight
        weights += weight
    if weights == 0:
        return MIN_RESULT_SCORE
    return total // weights


def min_aggregate(scores: Iterable[int]) -> int:
    """Weakest-link aggregation; 10 for no scores."""
    return min(scores, default=MAX_RESULT_SCORE)


class ProbeWeights:
    """Weighted sum where each probe contributes its points at most once.

    Repeated True findings for the same probe do not add up, so the score
    does not depend on how many findings a probe emits.
    """

    def __init__(self, points: Mapping[str, int]) -> None:
        self._points = {probe_name(p): value for p, value in points.items()}
        self._seen: set[str] = set()
        self._score = 0

    def score_once(self, probe: str) -> bool:
        """Add the probe's points unless already counted. Returns True if added."""
        name = probe_name(probe)
        if name in self._seen or name not in self._points:
            return False
        self._seen.add(name)
        self._score += self._points[name]
        return True

    def scored(self, probe: str) -> bool:
        return probe_name(probe) in self._seen

    @property
    def total(self) -> int:
        return min(self._score, MAX_RESULT_SCORE)


class Tier(BaseModel):
    """One gate of a tiered score: points awarded when ``passed`` holds."""

    points: int = Field(ge=0, le=MAX_RESULT_SCORE)
    passed: bool


def tiered_score(tiers: Iterable[Tier]) -> int:
    """Points of the last tier reached before the first failing tier.

    Tier points are cumulative totals, not increments: tiers of 3, 6, 8 and
    10 award 6 when the third tier fails.
    """
    score = MIN_RESULT_SCORE
    for tier in tiers:
        if not tier.passed:
            break
        score = tier.points
    return score
