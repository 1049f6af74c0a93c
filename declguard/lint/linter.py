"""Config linter — static analysis for declguard pattern and suffix lists."""

from __future__ import annotations

from dataclasses import dataclass

from declguard.core.models import PolicyConfig
from declguard.engine.matcher import NEGATION_PREFIX, PatternMatcher


@dataclass
class LintWarning:
    """A single lint finding."""

    level: str  # ERROR, WARNING, INFO
    target: str  # Offending pattern or suffix (or "*" for global issues)
    check: str  # Name of the check (no_positive_patterns, empty_suffix, ...)
    message: str  # Human-readable description


class ConfigLinter:
    """Static analyzer for declguard configurations.

    Runs a set of checks on a PolicyConfig and returns a list of LintWarning.
    """

    def lint(self, config: PolicyConfig) -> list[LintWarning]:
        """Run all lint checks on a configuration.

        Args:
            config: The PolicyConfig to analyze.

        Returns:
            List of LintWarning findings.
        """
        warnings: list[LintWarning] = []
        warnings.extend(self.check_no_positive_patterns(config))
        warnings.extend(self.check_empty_patterns(config))
        warnings.extend(self.check_duplicate_patterns(config))
        warnings.extend(self.check_unreachable_negations(config))
        warnings.extend(self.check_empty_suffix(config))
        warnings.extend(self.check_duplicate_suffixes(config))
        return warnings

    def check_no_positive_patterns(self, config: PolicyConfig) -> list[LintWarning]:
        """Only negative patterns means no file can ever be exempt."""
        if config.positive_patterns:
            return []
        return [
            LintWarning(
                level="ERROR",
                target="*",
                check="no_positive_patterns",
                message="All file patterns are negations, so no file is ever allowed",
            )
        ]

    def check_empty_patterns(self, config: PolicyConfig) -> list[LintWarning]:
        """Check for '' or a bare '!', which never match anything."""
        warnings: list[LintWarning] = []
        for pattern in config.allowed_file_patterns:
            if pattern in ("", NEGATION_PREFIX):
                warnings.append(
                    LintWarning(
                        level="WARNING",
                        target=pattern,
                        check="empty_pattern",
                        message=f"Pattern {pattern!r} has an empty body and never matches",
                    )
                )
        return warnings

    def check_duplicate_patterns(self, config: PolicyConfig) -> list[LintWarning]:
        warnings: list[LintWarning] = []
        seen: dict[str, int] = {}
        for idx, pattern in enumerate(config.allowed_file_patterns):
            if pattern in seen:
                warnings.append(
                    LintWarning(
                        level="WARNING",
                        target=pattern,
                        check="duplicate_patterns",
                        message=f"Duplicate pattern '{pattern}' (first seen at position {seen[pattern] + 1})",
                    )
                )
            else:
                seen[pattern] = idx
        return warnings

    def check_unreachable_negations(self, config: PolicyConfig) -> list[LintWarning]:
        """Flag literal negations that exclude a path no positive pattern admits.

        Only wildcard-free negations are checked; overlap between two
        wildcard patterns is not decided here.
        """
        positives = config.positive_patterns
        if not positives:
            return []
        matcher = PatternMatcher(positives)
        warnings: list[LintWarning] = []
        for pattern in config.allowed_file_patterns:
            if not pattern.startswith(NEGATION_PREFIX):
                continue
            body = pattern[len(NEGATION_PREFIX) :]
            if not body or "*" in body or "?" in body:
                continue
            if not matcher.explain(body).matched_positive:
                warnings.append(
                    LintWarning(
                        level="INFO",
                        target=pattern,
                        check="unreachable_negation",
                        message=f"Negation '{pattern}' excludes a path no positive pattern allows",
                    )
                )
        return warnings

    def check_empty_suffix(self, config: PolicyConfig) -> list[LintWarning]:
        """An empty suffix exempts every declaration name."""
        if "" not in config.allowed_type_suffixes:
            return []
        return [
            LintWarning(
                level="ERROR",
                target="",
                check="empty_suffix",
                message="Empty suffix '' matches every name, which disables the rule",
            )
        ]

    def check_duplicate_suffixes(self, config: PolicyConfig) -> list[LintWarning]:
        warnings: list[LintWarning] = []
        seen: set[str] = set()
        for suffix in config.allowed_type_suffixes:
            if suffix in seen:
                warnings.append(
                    LintWarning(
                        level="WARNING",
                        target=suffix,
                        check="duplicate_suffixes",
                        message=f"Duplicate suffix '{suffix}'",
                    )
                )
            seen.add(suffix)
        return warnings
