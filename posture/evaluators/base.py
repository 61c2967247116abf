"""Base evaluator protocol defining the contract for all evaluators."""

from typing import Protocol

from posture.consts import Probe
from posture.detail_logger import DetailLogger
from posture.models.model_finding import Finding
from posture.models.model_result import CheckResult


class BaseEvaluator(Protocol):
    """Protocol defining the evaluator contract.

    Evaluators are pure functions over a list of findings for one check.
    They write justifications to the detail logger and return a tagged
    CheckResult. Contract violations are returned as error results, never
    raised.

    This stateless design enables:
    - Easy testing with a recording logger
    - Running independent checks side by side
    - Reproducible scoring
    """

    name: str
    expected_probes: list[Probe]

    def evaluate(self, findings: list[Finding], dl: DetailLogger) -> CheckResult:
        """Score one check from its findings.

        Args:
            findings: Findings produced by the probes of this check
            dl: Sink for human-readable detail messages

        Returns:
            Scored, inconclusive or error result
        """
        ...
