"""Probe-set validation run before any scoring logic."""

import logging
from collections.abc import Iterable
from enum import Enum

from posture.models.model_finding import Finding
from posture.models.model_result import CheckError, CheckResult, ErrorCode

logger = logging.getLogger(__name__)


def probe_name(probe: str) -> str:
    """Plain string name for a probe given as str or Probe member."""
    return probe.value if isinstance(probe, Enum) else probe


def probe_names(probes: Iterable[str]) -> set[str]:
    return {probe_name(p) for p in probes}


def unique_probes_equal(findings: list[Finding], expected: Iterable[str]) -> bool:
    """Check that the distinct probe names in findings equal the expected set.

    A probe may appear in several findings (one per release, per tag, ...);
    only the set of names is compared.

    Args:
        findings: Findings to inspect
        expected: Probe names the check declares

    Returns:
        True when every expected probe is present and nothing else is
    """
    return {f.probe for f in findings} == probe_names(expected)


def validate_probe_set(
    name: str, findings: list[Finding], expected: Iterable[str]
) -> CheckResult | None:
    """Return an error result when the probe set is wrong, else None."""
    expected_names = probe_names(expected)
    if unique_probes_equal(findings, expected_names):
        return None

    present = {f.probe for f in findings}
    missing = sorted(expected_names - present)
    unexpected = sorted(present - expected_names)
    logger.warning(f"{name}: invalid probe set (missing={missing}, unexpected={unexpected})")
    return CheckResult.runtime_error(
        name, CheckError(code=ErrorCode.INVALID_PROBE_SET, message="invalid probe results")
    )
