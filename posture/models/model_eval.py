"""Scoring configuration models for evaluators."""

from pydantic import BaseModel, Field, model_validator

from posture import consts


class MaintainedSettings(BaseModel):
    """Activity window used by the Maintained check."""

    lookback_days: int = Field(default=consts.LOOKBACK_DAYS, gt=0, description="Activity window")
    activity_per_week: int = Field(
        default=consts.ACTIVITY_PER_WEEK, gt=0, description="Expected events per week"
    )

    @property
    def expected_activity(self) -> int:
        """Activity needed inside the window for a full score."""
        return self.lookback_days * self.activity_per_week // 7


class ReleaseSettings(BaseModel):
    """Release signing weights and lookback."""

    max_releases: int = Field(default=consts.RELEASE_LOOKBACK, gt=0)
    signed_points: int = Field(default=consts.SIGNED_RELEASE_POINTS, ge=0, le=10)
    provenance_points: int = Field(default=consts.PROVENANCE_RELEASE_POINTS, ge=0, le=10)


class ResponseSettings(BaseModel):
    """Maintainer response thresholds."""

    threshold_days: int = Field(default=consts.RESPONSE_THRESHOLD_DAYS, gt=0)
    max_listed_issues: int = Field(default=consts.MAX_ISSUES_IN_REASON, ge=0)
    zero_score_percent: float = Field(default=consts.RESPONSE_ZERO_SCORE_PERCENT, ge=0.0, le=100.0)
    half_score_percent: float = Field(default=consts.RESPONSE_HALF_SCORE_PERCENT, ge=0.0, le=100.0)

    @model_validator(mode="after")
    def buckets_ordered(self) -> "ResponseSettings":
        """Validate that the half-score bucket sits below the zero-score bucket."""
        if self.half_score_percent >= self.zero_score_percent:
            msg = (
                f"half_score_percent ({self.half_score_percent}) must be below "
                f"zero_score_percent ({self.zero_score_percent})"
            )
            raise ValueError(msg)
        return self


class ContributorSettings(BaseModel):
    """Organization diversity target."""

    organizations_for_max: int = Field(default=consts.ORGANIZATIONS_FOR_MAX_SCORE, gt=0)


class UpdateLagSettings(BaseModel):
    """Bucket edges for mean time to update dependencies (days).

    The probes choose the bucket, so these edges only shape the reason
    text of the MTTU check and never change its score.
    """

    very_low_days: int = Field(default=consts.MTTU_VERY_LOW_DAYS, gt=0)
    high_days: int = Field(default=consts.MTTU_HIGH_DAYS, gt=0)

    @model_validator(mode="after")
    def edges_ordered(self) -> "UpdateLagSettings":
        """Validate that the very-low edge is below the high edge."""
        if self.very_low_days >= self.high_days:
            msg = f"very_low_days ({self.very_low_days}) must be below high_days ({self.high_days})"
            raise ValueError(msg)
        return self


class ScoringConfig(BaseModel):
    """Tunable thresholds for every evaluator. Defaults match the published policy."""

    maintained: MaintainedSettings = Field(default_factory=MaintainedSettings)
    releases: ReleaseSettings = Field(default_factory=ReleaseSettings)
    response: ResponseSettings = Field(default_factory=ResponseSettings)
    contributors: ContributorSettings = Field(default_factory=ContributorSettings)
    update_lag: UpdateLagSettings = Field(default_factory=UpdateLagSettings)
