"""Core data models and exceptions for declguard."""

from declguard.core.models import (
    DEFAULT_FILE_PATTERNS,
    DEFAULT_TYPE_SUFFIXES,
    MESSAGE_KEY,
    DeclarationKind,
    DeclarationRecord,
    ExemptionReason,
    MatchResult,
    PolicyConfig,
    PolicyVerdict,
    Verdict,
    ViolationRecord,
)

__all__ = [
    "DEFAULT_FILE_PATTERNS",
    "DEFAULT_TYPE_SUFFIXES",
    "MESSAGE_KEY",
    "DeclarationKind",
    "DeclarationRecord",
    "ExemptionReason",
    "MatchResult",
    "PolicyConfig",
    "PolicyVerdict",
    "Verdict",
    "ViolationRecord",
]
