"""Static checks for declguard configurations."""

from declguard.lint.linter import ConfigLinter, LintWarning

__all__ = ["ConfigLinter", "LintWarning"]
