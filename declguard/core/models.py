"""Core data models for declguard."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from declguard.core.exceptions import ConfigurationError, MalformedDeclarationError

DEFAULT_FILE_PATTERNS: tuple[str, ...] = ("*.d.ts",)
DEFAULT_TYPE_SUFFIXES: tuple[str, ...] = ("Props",)

MESSAGE_KEY = "noExportedType"


# --- Enums ---


class DeclarationKind(str, Enum):
    """Syntactic kind of a type-like declaration."""

    INTERFACE = "interface"
    TYPE_ALIAS = "type-alias"

    @property
    def label(self) -> str:
        """Keyword used for this kind in user-facing messages."""
        return "type" if self is DeclarationKind.TYPE_ALIAS else self.value


class Verdict(str, Enum):
    """Outcome of evaluating one declaration."""

    ALLOWED = "ALLOWED"
    VIOLATION = "VIOLATION"


class ExemptionReason(str, Enum):
    """Why an allowed declaration was let through."""

    NOT_EXPORTED = "NOT_EXPORTED"
    FILE_PATTERN = "FILE_PATTERN"
    SUFFIX = "SUFFIX"


# --- Data Models ---


def _describe_errors(error: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(p) for p in err['loc']) or '*'}: {err['msg']}" for err in error.errors())


class DeclarationRecord(BaseModel):
    """A declaration as extracted by the host traversal.

    Every field is required and unknown keys are rejected, so a host that
    drops or misspells the export flag fails instead of being let through.
    Construction errors surface as :class:`MalformedDeclarationError`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: DeclarationKind
    name: str = Field(min_length=1)
    is_exported: bool = Field(validation_alias=AliasChoices("is_exported", "isExported", "exported"))

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise MalformedDeclarationError(f"Malformed declaration {data!r}: {_describe_errors(e)}") from e

    @field_validator("kind", mode="before")
    @classmethod
    def _accept_type_keyword(cls, value: Any) -> Any:
        # Hosts that mirror the source keyword send "type" for aliases
        if value == "type":
            return DeclarationKind.TYPE_ALIAS
        return value


class ViolationRecord(BaseModel):
    """Structured diagnostic handed to the reporting channel."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message_key: str = Field(default=MESSAGE_KEY, alias="messageKey")
    kind: DeclarationKind
    name: str
    allowed_patterns: str = Field(alias="allowedPatterns")


class PolicyVerdict(BaseModel):
    """Result of evaluating a single declaration."""

    model_config = ConfigDict(frozen=True)

    verdict: Verdict
    kind: DeclarationKind
    name: str
    reason: ExemptionReason | None = None
    matched_patterns: tuple[str, ...] = ()

    @property
    def allowed(self) -> bool:
        return self.verdict == Verdict.ALLOWED

    def to_violation(self) -> ViolationRecord | None:
        """Return the diagnostic record for a violation, or None if allowed."""
        if self.allowed:
            return None
        return ViolationRecord(
            kind=self.kind,
            name=self.name,
            allowed_patterns=", ".join(self.matched_patterns),
        )


class MatchResult(BaseModel):
    """Explanation of a file path decision."""

    model_config = ConfigDict(frozen=True)

    path: str
    allowed: bool
    matched_positive: tuple[str, ...] = ()
    matched_negative: tuple[str, ...] = ()


def _string_list(value: Any, key: str) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{key} must be a list of strings, got {type(value).__name__}")
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{key} must contain only strings, got {item!r}")
    return tuple(value)


class PolicyConfig(BaseModel):
    """Pattern and suffix allow-lists for the exported-type rule."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    allowed_file_patterns: tuple[str, ...] = Field(default=DEFAULT_FILE_PATTERNS, alias="allowedFilePatterns")
    allowed_type_suffixes: tuple[str, ...] = Field(default=DEFAULT_TYPE_SUFFIXES, alias="allowedTypeSuffixes")

    @field_validator("allowed_file_patterns", mode="before")
    @classmethod
    def _check_patterns(cls, value: Any) -> tuple[str, ...]:
        # At least one pattern is always in force
        if value is None or (isinstance(value, (list, tuple)) and not value):
            return DEFAULT_FILE_PATTERNS
        return _string_list(value, "allowedFilePatterns")

    @field_validator("allowed_type_suffixes", mode="before")
    @classmethod
    def _check_suffixes(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return DEFAULT_TYPE_SUFFIXES
        return _string_list(value, "allowedTypeSuffixes")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None, file_path: str | None = None) -> PolicyConfig:
        """Build a config from raw options, raising ConfigurationError on bad shapes."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Options must be a mapping, got {type(data).__name__}", file_path)
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {_describe_errors(e)}", file_path) from e

    @property
    def positive_patterns(self) -> tuple[str, ...]:
        return tuple(p for p in self.allowed_file_patterns if not p.startswith("!"))
