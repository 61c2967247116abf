"""Loading and evaluation of findings files.

This module coordinates the steps behind the CLI:
1. Load the scoring configuration (optional JSON file)
2. Load findings grouped by check from a JSON file
3. Validate every finding against the probe catalog
4. Run the requested evaluators
"""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from posture.catalog import ProbeCatalog, default_catalog
from posture.evaluators.registry import EvaluatorRegistry
from posture.models.model_eval import ScoringConfig
from posture.models.model_finding import Finding
from posture.models.model_result import CheckDetail, CheckResult

logger = logging.getLogger(__name__)

_FINDINGS_BY_CHECK = TypeAdapter(dict[str, list[Finding]])


def load_config(path: Path | None = None) -> ScoringConfig:
    """Load scoring configuration from a JSON file.

    Args:
        path: Config file path. Defaults are used if None.

    Returns:
        Validated scoring configuration

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file is not a valid configuration
    """
    if path is None:
        return ScoringConfig()
    config = ScoringConfig.model_validate_json(Path(path).read_text())
    logger.info(f"Loaded scoring config from {path}")
    return config


def load_findings(path: Path, catalog: ProbeCatalog | None = None) -> dict[str, list[Finding]]:
    """Load findings keyed by check name from a JSON file.

    The file holds an object mapping each check name to a list of finding
    objects. Every finding is checked against the catalog so a payload of
    the wrong kind fails here rather than inside an evaluator.

    Args:
        path: Findings file path
        catalog: Probe catalog used for payload validation

    Returns:
        Findings grouped by check name

    Raises:
        OSError: If the file cannot be read
        ValueError: If the JSON or any finding is invalid
    """
    catalog = catalog or default_catalog()
    raw = json.loads(Path(path).read_text())
    findings_by_check = _FINDINGS_BY_CHECK.validate_python(raw)

    for check, findings in findings_by_check.items():
        for finding in findings:
            try:
                catalog.validate_payload(finding)
            except ValueError as e:
                raise ValueError(f"{check}: {e}") from e

    total = sum(len(findings) for findings in findings_by_check.values())
    logger.info(f"Loaded {total} findings for {len(findings_by_check)} checks from {path}")
    return findings_by_check


def evaluate_file(
    path: Path,
    checks: list[str] | None = None,
    config: ScoringConfig | None = None,
    catalog: ProbeCatalog | None = None,
) -> dict[str, tuple[CheckResult, list[CheckDetail]]]:
    """Load a findings file and evaluate it.

    Args:
        path: Findings file path
        checks: Only evaluate these checks. All checks in the file if None.
        config: Scoring configuration
        catalog: Probe catalog

    Returns:
        Result and details keyed by check name

    Raises:
        KeyError: If a requested or listed check is not registered
    """
    catalog = catalog or default_catalog()
    registry = EvaluatorRegistry(config=config, catalog=catalog)
    findings_by_check = load_findings(path, catalog)

    if checks:
        findings_by_check = {check: findings_by_check.get(check, []) for check in checks}

    return registry.evaluate_batch(findings_by_check)
