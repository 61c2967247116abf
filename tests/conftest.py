"""Pytest configuration and fixtures."""

from collections.abc import Callable

import pytest

from posture.catalog import ProbeCatalog, default_catalog
from posture.consts import Probe
from posture.detail_logger import RecordingDetailLogger
from posture.evaluators.registry import EvaluatorRegistry
from posture.models.model_finding import Finding, Location, Outcome


@pytest.fixture
def dl() -> RecordingDetailLogger:
    """Create a fresh recording detail logger."""
    return RecordingDetailLogger()


@pytest.fixture
def make_finding() -> Callable[..., Finding]:
    """Factory for findings with sensible defaults.

    Accepts a Probe member or a plain probe name and an Outcome, a bool
    (True/False outcome) or an outcome string.
    """

    def _make(
        probe: Probe | str,
        outcome: Outcome | bool | str = Outcome.TRUE,
        message: str = "",
        payload=None,
        location: Location | None = None,
    ) -> Finding:
        if isinstance(outcome, bool):
            outcome = Outcome.TRUE if outcome else Outcome.FALSE
        name = probe.value if isinstance(probe, Probe) else probe
        return Finding(
            probe=name,
            outcome=Outcome(outcome),
            message=message,
            payload=payload,
            location=location,
        )

    return _make


@pytest.fixture
def catalog() -> ProbeCatalog:
    """Create the built-in probe catalog."""
    return default_catalog()


@pytest.fixture
def registry(catalog) -> EvaluatorRegistry:
    """Create a registry with default scoring config."""
    return EvaluatorRegistry(catalog=catalog)
