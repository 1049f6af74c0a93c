"""Policy engine for declguard — combines file and suffix allowances into verdicts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from declguard.core.exceptions import MalformedDeclarationError
from declguard.core.models import (
    MESSAGE_KEY,
    DeclarationKind,
    DeclarationRecord,
    ExemptionReason,
    PolicyConfig,
    PolicyVerdict,
    Verdict,
    ViolationRecord,
)
from declguard.engine.classifier import DeclarationClassifier
from declguard.engine.matcher import PatternMatcher

logger = logging.getLogger(__name__)

RULE_NAME = "no-exported-types-outside-dts"
DOCS_URL = "https://declguard.dev/eslint/rules/{name}"

MESSAGE_TEMPLATE = (
    'Exported {kind} "{name}" is not allowed outside files matching {allowedPatterns} '
    "unless it ends with {allowedSuffixes}."
)
MESSAGE_TEMPLATE_NO_SUFFIX = 'Exported {kind} "{name}" is not allowed outside files matching {allowedPatterns}.'

RULE_META: dict[str, Any] = {
    "type": "problem",
    "docs": {
        "description": "Disallow exported types/interfaces outside allowed files unless their name has an allowed suffix",
        "url": DOCS_URL.format(name=RULE_NAME),
    },
    "messages": {MESSAGE_KEY: MESSAGE_TEMPLATE},
}

RECOMMENDED_CONFIG: dict[str, Any] = {
    "plugins": ["declguard"],
    "rules": {f"declguard/{RULE_NAME}": "error"},
}

# Host syntax node types and the declaration kind each one carries
NODE_KINDS: dict[str, DeclarationKind] = {
    "TSInterfaceDeclaration": DeclarationKind.INTERFACE,
    "TSTypeAliasDeclaration": DeclarationKind.TYPE_ALIAS,
}

Reporter = Callable[[ViolationRecord], None]
NodeHandler = Callable[[str, bool], PolicyVerdict]


def render_message(record: ViolationRecord, suffixes: tuple[str, ...] | list[str] = ()) -> str:
    """Render the human-readable message for a violation record."""
    if not suffixes:
        return MESSAGE_TEMPLATE_NO_SUFFIX.format(
            kind=record.kind.label,
            name=record.name,
            allowedPatterns=record.allowed_patterns,
        )
    return MESSAGE_TEMPLATE.format(
        kind=record.kind.label,
        name=record.name,
        allowedPatterns=record.allowed_patterns,
        allowedSuffixes=" or ".join(f'"{s}"' for s in suffixes),
    )


def _coerce_declaration(declaration: DeclarationRecord | Mapping[str, Any]) -> DeclarationRecord:
    if isinstance(declaration, DeclarationRecord):
        record = declaration
    elif isinstance(declaration, Mapping):
        if not all(isinstance(key, str) for key in declaration):
            raise MalformedDeclarationError(f"Declaration keys must be strings, got {dict(declaration)!r}")
        record = DeclarationRecord(**declaration)
    else:
        raise MalformedDeclarationError(f"Expected a declaration record, got {type(declaration).__name__}")
    if not record.name:
        raise MalformedDeclarationError(f"Declaration of kind '{record.kind.value}' has no name")
    return record


class PolicyEngine:
    """Decides whether exported type-like declarations may live in a file.

    The configuration is validated and compiled once, at construction.
    Evaluation holds no mutable state, so one engine can be shared
    across files and threads.
    """

    def __init__(self, config: PolicyConfig | Mapping[str, Any] | None = None):
        if not isinstance(config, PolicyConfig):
            config = PolicyConfig.from_mapping(config)
        self._config = config
        self._matcher = PatternMatcher(config.allowed_file_patterns)
        self._classifier = DeclarationClassifier(config.allowed_type_suffixes)
        logger.debug(
            "PolicyEngine ready with suffixes %s",
            list(config.allowed_type_suffixes),
            extra={"patterns": list(config.allowed_file_patterns)},
        )

    @property
    def config(self) -> PolicyConfig:
        return self._config

    @property
    def matcher(self) -> PatternMatcher:
        return self._matcher

    @property
    def classifier(self) -> DeclarationClassifier:
        return self._classifier

    def is_file_allowed(self, file_path: str) -> bool:
        return self._matcher.is_file_allowed(file_path)

    def evaluate(
        self,
        declaration: DeclarationRecord | Mapping[str, Any],
        file_path: str,
    ) -> PolicyVerdict:
        """Evaluate one declaration found in *file_path*.

        Args:
            declaration: The record extracted by the host, or a mapping
                with ``kind``, ``name`` and ``isExported``.
            file_path: Path of the file containing the declaration.

        Returns:
            An ALLOWED verdict with its exemption reason, or a VIOLATION
            carrying the positive patterns for message rendering.
        """
        record = _coerce_declaration(declaration)
        if not record.is_exported:
            return self._allow(record, ExemptionReason.NOT_EXPORTED)
        return self._judge(record, self._matcher.is_file_allowed(file_path))

    def scope(self, file_path: str) -> FileScope:
        """Return a per-file scope with the file decision computed once."""
        return FileScope(engine=self, file_path=file_path, file_allowed=self._matcher.is_file_allowed(file_path))

    def _judge(self, record: DeclarationRecord, file_allowed: bool) -> PolicyVerdict:
        if file_allowed:
            return self._allow(record, ExemptionReason.FILE_PATTERN)
        if self._classifier.is_exempt(record.name):
            return self._allow(record, ExemptionReason.SUFFIX)
        return PolicyVerdict(
            verdict=Verdict.VIOLATION,
            kind=record.kind,
            name=record.name,
            matched_patterns=self._matcher.positive_patterns,
        )

    @staticmethod
    def _allow(record: DeclarationRecord, reason: ExemptionReason) -> PolicyVerdict:
        return PolicyVerdict(verdict=Verdict.ALLOWED, kind=record.kind, name=record.name, reason=reason)


@dataclass(frozen=True)
class FileScope:
    """Evaluation context for a single file.

    The file-level decision is computed once when the scope is created
    and is read-only afterwards.
    """

    engine: PolicyEngine
    file_path: str
    file_allowed: bool

    def evaluate(self, declaration: DeclarationRecord | Mapping[str, Any]) -> PolicyVerdict:
        record = _coerce_declaration(declaration)
        if not record.is_exported:
            return self.engine._allow(record, ExemptionReason.NOT_EXPORTED)
        return self.engine._judge(record, self.file_allowed)

    def handlers(self, report: Reporter) -> dict[str, NodeHandler]:
        """Build the per-node-type handlers a host traversal dispatches to.

        Each handler takes the identifier name and export status the host
        extracted from the node, and calls *report* once per violation.
        When the whole file is exempt no handlers are returned.
        """
        if self.file_allowed:
            logger.debug("File matches allowed patterns; skipping", extra={"file_path": self.file_path})
            return {}

        def make_handler(kind: DeclarationKind) -> NodeHandler:
            def handle(name: str, is_exported: bool) -> PolicyVerdict:
                verdict = self.evaluate({"kind": kind, "name": name, "is_exported": is_exported})
                violation = verdict.to_violation()
                if violation is not None:
                    logger.debug(
                        "Violation: %s %s",
                        kind.label,
                        name,
                        extra={"file_path": self.file_path, "patterns": list(verdict.matched_patterns)},
                    )
                    report(violation)
                return verdict

            return handle

        return {node_type: make_handler(kind) for node_type, kind in NODE_KINDS.items()}
