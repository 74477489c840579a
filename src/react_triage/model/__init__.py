"""Enums shared across the rule engine, collaborators and reports."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Finding severity — ordinal, used for sorting and scoring."""

    CRITICAL = "critical"
    PERFORMANCE = "performance"
    BEST_PRACTICE = "best-practice"
    INFO = "info"


# Sort ordinal: lower sorts first.
SEVERITY_ORDER: dict[Severity, int] = {
    Severity.CRITICAL: 0,
    Severity.PERFORMANCE: 1,
    Severity.BEST_PRACTICE: 2,
    Severity.INFO: 3,
}


class Impact(str, Enum):
    """Informational ranking attached to a rule, independent of severity."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class VulnerabilitySeverity(str, Enum):
    """Advisory severity scale used by the security audit."""

    CRITICAL = "critical"
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


VULNERABILITY_ORDER: dict[VulnerabilitySeverity, int] = {
    VulnerabilitySeverity.CRITICAL: 0,
    VulnerabilitySeverity.HIGH: 1,
    VulnerabilitySeverity.MODERATE: 2,
    VulnerabilitySeverity.LOW: 3,
}


class DependencyIssueKind(str, Enum):
    """Kinds of dependency-health problems."""

    VERSION_MISMATCH = "version-mismatch"
    DEV_IN_PROD = "dev-in-prod"
    DUPLICATE = "duplicate"
    OUTDATED = "outdated"
    UNUSED = "unused"
