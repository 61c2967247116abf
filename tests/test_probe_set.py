"""Tests for probe-set validation."""

from posture.consts import Probe
from posture.evaluators.probe_set import probe_name, unique_probes_equal, validate_probe_set
from posture.models.model_result import ErrorCode

EXPECTED = [Probe.ARCHIVED, Probe.CREATED_RECENTLY]


def test_probe_name_accepts_enum_and_str():
    """Test probe names normalize to plain strings."""
    assert probe_name(Probe.ARCHIVED) == "archived"
    assert probe_name("archived") == "archived"


def test_unique_probes_equal_ignores_order_and_repeats(make_finding):
    """Test repeated probes and ordering do not matter."""
    findings = [
        make_finding(Probe.CREATED_RECENTLY, False),
        make_finding(Probe.ARCHIVED, False),
        make_finding(Probe.ARCHIVED, True),
    ]
    assert unique_probes_equal(findings, EXPECTED)


def test_unique_probes_equal_missing_probe(make_finding):
    """Test a missing probe fails the comparison."""
    assert not unique_probes_equal([make_finding(Probe.ARCHIVED, False)], EXPECTED)


def test_unique_probes_equal_extra_probe(make_finding):
    """Test an unexpected probe fails the comparison."""
    findings = [
        make_finding(Probe.ARCHIVED, False),
        make_finding(Probe.CREATED_RECENTLY, False),
        make_finding("somethingElse", True),
    ]
    assert not unique_probes_equal(findings, EXPECTED)


def test_validate_probe_set_ok(make_finding):
    """Test valid probe set returns None."""
    findings = [make_finding(Probe.ARCHIVED, False), make_finding(Probe.CREATED_RECENTLY, False)]
    assert validate_probe_set("Maintained", findings, EXPECTED) is None


def test_validate_probe_set_error(make_finding, caplog):
    """Test invalid probe set returns an error result and logs a warning."""
    result = validate_probe_set("Maintained", [make_finding(Probe.ARCHIVED, False)], EXPECTED)
    assert result is not None
    assert result.is_error
    assert result.error.code == ErrorCode.INVALID_PROBE_SET
    assert result.error.message == "invalid probe results"
    assert "createdRecently" in caplog.text


def test_validate_probe_set_empty(make_finding):
    """Test no findings at all is an invalid set."""
    result = validate_probe_set("Maintained", [], EXPECTED)
    assert result.is_error
