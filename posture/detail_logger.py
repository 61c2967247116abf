"""Detail message sinks written to by evaluators."""

import logging
from typing import Protocol

from posture.models.model_finding import Finding, Outcome
from posture.models.model_result import CheckDetail, DetailLevel, LogMessage

logger = logging.getLogger(__name__)


class DetailLogger(Protocol):
    """Write-only sink for human-readable justifications.

    Evaluators append messages in order and never read them back.
    """

    def info(self, message: LogMessage) -> None: ...

    def warn(self, message: LogMessage) -> None: ...

    def debug(self, message: LogMessage) -> None: ...


class RecordingDetailLogger:
    """Detail logger that keeps every message in memory.

    Each message is also mirrored to the module logger at DEBUG level so a
    verbose CLI run shows the justification stream as it is produced.
    """

    def __init__(self) -> None:
        self.details: list[CheckDetail] = []

    def _record(self, level: DetailLevel, message: LogMessage) -> None:
        self.details.append(CheckDetail(level=level, message=message))
        logger.debug(f"[{level.value}] {message.text}")

    def info(self, message: LogMessage) -> None:
        self._record(DetailLevel.INFO, message)

    def warn(self, message: LogMessage) -> None:
        self._record(DetailLevel.WARN, message)

    def debug(self, message: LogMessage) -> None:
        self._record(DetailLevel.DEBUG, message)

    def count(self, level: DetailLevel) -> int:
        """Number of recorded messages at the given level."""
        return sum(1 for detail in self.details if detail.level == level)

    def texts(self, level: DetailLevel | None = None) -> list[str]:
        """Recorded message texts, optionally filtered by level."""
        return [d.message.text for d in self.details if level is None or d.level == level]

    def flush(self) -> list[CheckDetail]:
        """Return recorded details and start over with an empty buffer."""
        details, self.details = self.details, []
        return details


def message_from_finding(finding: Finding) -> LogMessage:
    """Build a detail message carrying the finding text and location."""
    return LogMessage(text=finding.message, location=finding.location)


def log_finding(dl: DetailLogger, finding: Finding, level: DetailLevel) -> None:
    """Write one finding to the detail logger at a fixed level."""
    message = message_from_finding(finding)
    if level == DetailLevel.INFO:
        dl.info(message)
    elif level == DetailLevel.WARN:
        dl.warn(message)
    else:
        dl.debug(message)


def log_findings(dl: DetailLogger, findings: list[Finding]) -> None:
    """Write findings at a level derived from the outcome.

    True is logged as info, False as warn and everything else as debug.
    """
    for finding in findings:
        if finding.outcome == Outcome.TRUE:
            log_finding(dl, finding, DetailLevel.INFO)
        elif finding.outcome == Outcome.FALSE:
            log_finding(dl, finding, DetailLevel.WARN)
        else:
            log_finding(dl, finding, DetailLevel.DEBUG)
