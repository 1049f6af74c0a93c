"""declguard CLI — validate configs and check declaration manifests."""

from __future__ import annotations

import argparse
import json
import sys

from declguard import __version__
from declguard.config.loader import generate_default_config, load_config
from declguard.core.exceptions import ConfigurationError, DeclGuardError
from declguard.core.models import PolicyConfig
from declguard.engine.policy import PolicyEngine, render_message
from declguard.logging_config import LOG_FORMATS, configure_logging


def app(args: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command-line arguments (defaults to sys.argv).

    Returns:
        Exit code (0 = success, 1 = error or violations found).
    """
    parser = argparse.ArgumentParser(
        prog="declguard",
        description="declguard — keep exported types in the files they belong in",
    )
    parser.add_argument("--version", action="version", version=f"declguard {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log more (-v info, -vv debug)")
    parser.add_argument("--log-format", choices=LOG_FORMATS, help="Log output format (default: text)")

    subparsers = parser.add_subparsers(dest="command")

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a config file")
    validate_parser.add_argument("config", help="Path to declguard YAML config")

    # lint command
    lint_parser = subparsers.add_parser("lint", help="Lint a config file for potential issues")
    lint_parser.add_argument("config", help="Path to declguard YAML config")

    # match command
    match_parser = subparsers.add_parser("match", help="Explain whether a file path is allowed")
    match_parser.add_argument("path", help="File path to classify")
    match_parser.add_argument("--config", help="Path to declguard YAML config")
    match_parser.add_argument(
        "--pattern",
        action="append",
        dest="patterns",
        help="File pattern (repeatable, overrides config patterns)",
    )

    # check command
    check_parser = subparsers.add_parser("check", help="Check a declaration manifest")
    check_parser.add_argument("manifest", help="Path to JSON or YAML declaration manifest")
    check_parser.add_argument("--config", help="Path to declguard YAML config")
    check_parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format")

    # init command
    subparsers.add_parser("init", help="Print a default config file")

    parsed = parser.parse_args(args)
    configure_logging(parsed.verbose, parsed.log_format)

    if parsed.command == "validate":
        return _cmd_validate(parsed.config)
    elif parsed.command == "lint":
        return _cmd_lint(parsed.config)
    elif parsed.command == "match":
        return _cmd_match(parsed)
    elif parsed.command == "check":
        return _cmd_check(parsed)
    elif parsed.command == "init":
        print(generate_default_config(), end="")
        return 0
    else:
        parser.print_help()
        return 1


def main() -> None:
    sys.exit(app())


def _cmd_validate(path: str) -> int:
    """Validate a YAML config file."""
    try:
        config = load_config(path)
        PolicyEngine(config)
    except ConfigurationError as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        return 1

    print(f"✓ Valid: {path}")
    print(f"  Patterns: {len(config.allowed_file_patterns)}")
    for pattern in config.allowed_file_patterns:
        marker = "-" if pattern.startswith("!") else "+"
        print(f"  {marker} {pattern}")
    print(f"  Suffixes: {', '.join(config.allowed_type_suffixes) or '(none)'}")
    return 0


def _cmd_lint(path: str) -> int:
    """Lint a YAML config file for potential issues."""
    from declguard.lint import ConfigLinter

    try:
        config = load_config(path)
    except ConfigurationError as e:
        print(f"✗ Error loading config: {e}", file=sys.stderr)
        return 1

    warnings = ConfigLinter().lint(config)

    if not warnings:
        print("✓ No issues found")
        return 0

    errors = 0
    warning_count = 0
    info_count = 0

    for w in warnings:
        if w.level == "ERROR":
            icon = "✗"
            errors += 1
        elif w.level == "WARNING":
            icon = "⚠"
            warning_count += 1
        else:
            icon = "ℹ"
            info_count += 1
        print(f"{icon} {w.level} [{w.target}] {w.check}: {w.message}")

    parts = []
    if errors:
        parts.append(f"{errors} error{'s' if errors != 1 else ''}")
    if warning_count:
        parts.append(f"{warning_count} warning{'s' if warning_count != 1 else ''}")
    if info_count:
        parts.append(f"{info_count} info")
    print(f"\n{', '.join(parts)}")

    return 1 if errors > 0 else 0


def _resolve_config(config_path: str | None) -> PolicyConfig:
    return load_config(config_path)


def _cmd_match(parsed: argparse.Namespace) -> int:
    """Explain the allow/deny decision for one path."""
    try:
        config = _resolve_config(parsed.config)
        if parsed.patterns:
            config = PolicyConfig(
                allowed_file_patterns=parsed.patterns,
                allowed_type_suffixes=config.allowed_type_suffixes,
            )
        engine = PolicyEngine(config)
    except ConfigurationError as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        return 1

    result = engine.matcher.explain(parsed.path)
    icon = "✓" if result.allowed else "✗"
    status = "allowed" if result.allowed else "not allowed"
    print(f"{icon} {result.path}: {status}")
    print(f"  positive matches: {', '.join(result.matched_positive) or '-'}")
    print(f"  negative matches: {', '.join(result.matched_negative) or '-'}")
    return 0


def _cmd_check(parsed: argparse.Namespace) -> int:
    """Check every declaration in a manifest and report violations."""
    from declguard.runner import check_manifest, load_manifest

    try:
        engine = PolicyEngine(_resolve_config(parsed.config))
        reports = check_manifest(load_manifest(parsed.manifest), engine)
    except DeclGuardError as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        return 1

    violations = [(r.path, v) for r in reports for v in r.violations]

    if parsed.format == "json":
        payload = [{"path": path, **v.model_dump(by_alias=True, mode="json")} for path, v in violations]
        print(json.dumps(payload, indent=2))
        return 1 if violations else 0

    suffixes = engine.config.allowed_type_suffixes
    for path, violation in violations:
        print(f"✗ {path}: {render_message(violation, suffixes)}")

    checked = sum(r.checked for r in reports)
    if not violations:
        print(f"✓ No violations ({len(reports)} files, {checked} declarations)")
        return 0
    print(f"\n{len(violations)} violation{'s' if len(violations) != 1 else ''} in {len(reports)} files")
    return 1
