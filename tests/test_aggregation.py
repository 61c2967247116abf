"""Tests for scoring primitives shared by evaluators."""

from posture.consts import Probe
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


# Proportional Tests
def test_proportional_score_floors():
    """Test proportional scores floor rather than round."""
    assert proportional_score(3, 4) == 7
    assert proportional_score(2, 3) == 6
    assert proportional_score(1, 1) == 10


def test_proportional_score_caps_at_max():
    """Test success above total is capped at 10."""
    assert proportional_score(5, 3) == 10


def test_proportional_score_empty_total():
    """Test zero total has no score."""
    assert proportional_score(0, 0) is None


def test_proportional_result_reason():
    """Test proportional result appends normalization suffix."""
    result = proportional_result("CI-Tests", "3 out of 4", 3, 4)
    assert result.score == 7
    assert result.reason == "3 out of 4 -- score normalized to 7"


def test_proportional_result_empty_is_inconclusive():
    """Test empty ratio is inconclusive, not zero."""
    result = proportional_result("CI-Tests", "nothing", 0, 0)
    assert result.is_inconclusive
    assert result.error is None


# Aggregation Tests
def test_aggregate_scores_weighted():
    """Test weighted mean of scores."""
    assert aggregate_scores_weighted([(10, 2), (5, 8)]) == 6
    assert aggregate_scores_weighted([]) == 0


def test_min_aggregate():
    """Test weakest link wins and no scores means 10."""
    assert min_aggregate([10, 3, 7]) == 3
    assert min_aggregate([]) == 10


# Rounding and Clamping Tests
def test_round_half_up():
    """Test .5 rounds away from zero."""
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4) == 2
    assert round_half_up(-2.5) == -3


def test_clamp_score():
    """Test clamping into [0, 10]."""
    assert clamp_score(-4) == 0
    assert clamp_score(14) == 10
    assert clamp_score(6) == 6


def test_normalize_reason():
    """Test normalization suffix."""
    assert normalize_reason("x", 3) == "x -- score normalized to 3"


# Probe Weights Tests
def test_probe_weights_count_once():
    """Test repeated probes do not double count."""
    weights = ProbeWeights({Probe.HAS_LICENSE_FILE: 6, Probe.HAS_LICENSE_FILE_AT_TOP_DIR: 3})
    assert weights.score_once("hasLicenseFile")
    assert not weights.score_once(Probe.HAS_LICENSE_FILE)
    assert weights.total == 6
    assert weights.scored(Probe.HAS_LICENSE_FILE)
    assert not weights.scored("hasLicenseFileAtTopDir")


def test_probe_weights_ignore_unknown():
    """Test probes without points are ignored."""
    weights = ProbeWeights({"a": 4})
    assert not weights.score_once("b")
    assert weights.total == 0


def test_probe_weights_capped():
    """Test total is capped at 10."""
    weights = ProbeWeights({"a": 8, "b": 8})
    weights.score_once("a")
    weights.score_once("b")
    assert weights.total == 10


# Tiered Score Tests
def test_tiered_score_all_pass():
    """Test all tiers passing awards the last tier."""
    tiers = [Tier(points=3, passed=True), Tier(points=6, passed=True), Tier(points=10, passed=True)]
    assert tiered_score(tiers) == 10


def test_tiered_score_stops_at_first_failure():
    """Test later passing tiers do not count after a failure."""
    tiers = [Tier(points=3, passed=True), Tier(points=6, passed=False), Tier(points=10, passed=True)]
    assert tiered_score(tiers) == 3


def test_tiered_score_first_tier_fails():
    """Test a failing first tier scores zero."""
    assert tiered_score([Tier(points=3, passed=False), Tier(points=6, passed=True)]) == 0
