from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from posture.consts import INCONCLUSIVE_RESULT_SCORE, MAX_RESULT_SCORE, MIN_RESULT_SCORE
from posture.models.model_finding import Finding, Location


class ResultKind(str, Enum):
    """How a check result should be read."""

    SCORED = "scored"
    INCONCLUSIVE = "inconclusive"
    ERROR = "error"


class ErrorCode(str, Enum):
    """Internal contract violations an evaluator can report."""

    INVALID_PROBE_SET = "invalid_probe_set"
    UNKNOWN_PROBE = "unknown_probe"
    INVALID_VALUE = "invalid_value"
    SCORE_OUT_OF_RANGE = "score_out_of_range"
    INTERNAL = "internal"


class CheckError(BaseModel):
    """Error carried inside a result instead of being raised."""

    model_config = ConfigDict(frozen=True)

    code: ErrorCode = ErrorCode.INTERNAL
    message: str

    def __str__(self) -> str:
        return f"internal error: {self.message}"


class DetailLevel(str, Enum):
    """Severity of a detail message."""

    INFO = "info"
    WARN = "warn"
    DEBUG = "debug"


class LogMessage(BaseModel):
    """Human-readable justification written by an evaluator."""

    text: str
    location: Location | None = None
    remediation: str | None = None


class CheckDetail(BaseModel):
    """A detail message together with its severity."""

    level: DetailLevel
    message: LogMessage


class CheckResult(BaseModel):
    """Outcome of evaluating one check.

    The result is tagged by ``kind``:

    - ``scored``: ``score`` is in [0, 10] and ``error`` is None
    - ``inconclusive``: not enough evidence; ``score`` is -1 and ``error`` is None
    - ``error``: internal contract violation; ``score`` is -1 and ``error`` is set
    """

    name: str
    kind: ResultKind
    score: int = Field(ge=INCONCLUSIVE_RESULT_SCORE, le=MAX_RESULT_SCORE)
    reason: str
    error: CheckError | None = None
    findings: list[Finding] = Field(default_factory=list)

    @model_validator(mode="after")
    def kind_matches_fields(self) -> "CheckResult":
        """Validate that score and error agree with the result kind."""
        if self.kind == ResultKind.SCORED:
            if self.error is not None or self.score < MIN_RESULT_SCORE:
                msg = f"Scored result must have a score in [0, 10] and no error, got {self.score}"
                raise ValueError(msg)
        elif self.score != INCONCLUSIVE_RESULT_SCORE:
            msg = f"{self.kind.value} result must have score -1, got {self.score}"
            raise ValueError(msg)
        elif (self.kind == ResultKind.ERROR) != (self.error is not None):
            msg = "Only error results carry an error"
            raise ValueError(msg)
        return self

    @classmethod
    def scored(cls, name: str, reason: str, score: int) -> "CheckResult":
        """Create a scored result; an out-of-range score becomes an error result."""
        if score < MIN_RESULT_SCORE or score > MAX_RESULT_SCORE:
            error = CheckError(
                code=ErrorCode.SCORE_OUT_OF_RANGE,
                message=f"score {score} is outside [{MIN_RESULT_SCORE}, {MAX_RESULT_SCORE}]",
            )
            return cls.runtime_error(name, error)
        return cls(name=name, kind=ResultKind.SCORED, score=score, reason=reason)

    @classmethod
    def max_score(cls, name: str, reason: str) -> "CheckResult":
        return cls.scored(name, reason, MAX_RESULT_SCORE)

    @classmethod
    def min_score(cls, name: str, reason: str) -> "CheckResult":
        return cls.scored(name, reason, MIN_RESULT_SCORE)

    @classmethod
    def inconclusive(cls, name: str, reason: str) -> "CheckResult":
        return cls(
            name=name,
            kind=ResultKind.INCONCLUSIVE,
            score=INCONCLUSIVE_RESULT_SCORE,
            reason=reason,
        )

    @classmethod
    def runtime_error(cls, name: str, error: CheckError) -> "CheckResult":
        return cls(
            name=name,
            kind=ResultKind.ERROR,
            score=INCONCLUSIVE_RESULT_SCORE,
            reason=str(error),
            error=error,
        )

    @property
    def is_error(self) -> bool:
        return self.kind == ResultKind.ERROR

    @property
    def is_inconclusive(self) -> bool:
        return self.kind == ResultKind.INCONCLUSIVE
