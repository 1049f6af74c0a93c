"""Path pattern matcher for declguard — decides whether a file is allow-listed."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from declguard.core.exceptions import ConfigurationError
from declguard.core.models import MatchResult

logger = logging.getLogger(__name__)

SEPARATOR = "/"
NEGATION_PREFIX = "!"

# Maximum length for a single glob pattern
MAX_PATTERN_LENGTH = 500


def normalize_path(path: str) -> str:
    """Convert native separators to ``/`` so patterns are portable."""
    return path.replace("\\", SEPARATOR)


def basename(path: str) -> str:
    """Return the final segment of a normalized path."""
    return path.rsplit(SEPARATOR, 1)[-1]


def glob_to_regex(glob: str) -> re.Pattern:
    """Compile a flat glob into a regex meant for ``fullmatch``.

    ``*`` matches any run of characters, separators included. ``?``
    matches exactly one character. Everything else is literal.
    """
    parts: list[str] = []
    for char in glob:
        if char == "*":
            if parts and parts[-1] == ".*":
                continue
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


@dataclass(frozen=True)
class CompiledPattern:
    """A configured pattern with its glob pre-compiled."""

    raw: str
    body: str
    negated: bool
    has_separator: bool
    regex: re.Pattern | None = None

    @classmethod
    def from_text(cls, text: str) -> CompiledPattern:
        """Create a CompiledPattern from configured pattern text.

        A leading ``!`` marks an exclusion. A pattern whose body is empty
        (for example a bare ``!``) compiles to a matcher that never matches.
        """
        if not isinstance(text, str):
            raise ConfigurationError(f"Pattern must be a string, got {text!r}")
        if len(text) > MAX_PATTERN_LENGTH:
            raise ConfigurationError(f"Pattern '{text[:40]}...' exceeds {MAX_PATTERN_LENGTH} characters")

        negated = text.startswith(NEGATION_PREFIX)
        body = text[len(NEGATION_PREFIX) :] if negated else text
        return cls(
            raw=text,
            body=body,
            negated=negated,
            has_separator=SEPARATOR in body,
            regex=glob_to_regex(body) if body else None,
        )

    def matches(self, path: str) -> bool:
        """Check a normalized path against this pattern.

        Separator-free patterns also try the basename, so ``*.d.ts``
        claims a declaration file anywhere in the tree.
        """
        if self.regex is None:
            return False
        if self.regex.fullmatch(path):
            return True
        return not self.has_separator and self.regex.fullmatch(basename(path)) is not None


class PatternMatcher:
    """Classifies file paths against positive and negative patterns.

    A path is allowed when at least one positive pattern matches it and
    no negative pattern does. Pattern order only affects reporting.
    """

    def __init__(self, patterns: Iterable[str]):
        if isinstance(patterns, str):
            raise ConfigurationError("Patterns must be a list of strings, not a single string")
        self._patterns = tuple(CompiledPattern.from_text(p) for p in patterns)
        self._positives = tuple(p for p in self._patterns if not p.negated)
        self._negatives = tuple(p for p in self._patterns if p.negated)
        if not self._positives:
            logger.warning("No positive file patterns configured; no file will be exempt")

    @property
    def patterns(self) -> tuple[CompiledPattern, ...]:
        return self._patterns

    @property
    def positive_patterns(self) -> tuple[str, ...]:
        """Positive pattern texts in configured order."""
        return tuple(p.body for p in self._positives)

    def is_file_allowed(self, path: str) -> bool:
        """Return True if the file at *path* is exempt from the rule."""
        subject = normalize_path(path)
        if not any(p.matches(subject) for p in self._positives):
            return False
        return not any(p.matches(subject) for p in self._negatives)

    def explain(self, path: str) -> MatchResult:
        """Report which patterns matched *path* and the resulting decision."""
        subject = normalize_path(path)
        positive = tuple(p.raw for p in self._positives if p.matches(subject))
        negative = tuple(p.raw for p in self._negatives if p.matches(subject))
        return MatchResult(
            path=subject,
            allowed=bool(positive) and not negative,
            matched_positive=positive,
            matched_negative=negative,
        )


def is_file_allowed(path: str, patterns: Iterable[str]) -> bool:
    """One-shot form of :meth:`PatternMatcher.is_file_allowed`."""
    return PatternMatcher(patterns).is_file_allowed(path)
