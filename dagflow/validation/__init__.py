"""Candidate graph validation, port sanitization and fallback."""

from dagflow.validation.fallback import fallback_graph
from dagflow.validation.sanitizer import (
    PORTS_BY_DIRECTION,
    SanitizationResult,
    ports_for,
    sanitize,
    sanitize_with_report,
)
from dagflow.validation.validator import (
    InvariantReport,
    InvariantViolation,
    RejectionReason,
    ValidationOutcome,
    check_invariants,
    validate,
)

__all__ = [
    "InvariantReport",
    "InvariantViolation",
    "PORTS_BY_DIRECTION",
    "RejectionReason",
    "SanitizationResult",
    "ValidationOutcome",
    "check_invariants",
    "fallback_graph",
    "ports_for",
    "sanitize",
    "sanitize_with_report",
    "validate",
]
