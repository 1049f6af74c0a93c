"""Manifest runner — checks declarations that an external parser extracted.

A manifest lists files and the type-like declarations found in each::

    files:
      - path: src/models.ts
        declarations:
          - {kind: interface, name: User, exported: true}

Each file gets its own :class:`FileScope`, so the path decision is made
once per file.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from declguard.core.exceptions import MalformedDeclarationError, ManifestError
from declguard.core.models import ViolationRecord
from declguard.engine.policy import PolicyEngine

logger = logging.getLogger(__name__)


@dataclass
class FileReport:
    """Violations found in one file."""

    path: str
    checked: int = 0
    file_allowed: bool = False
    violations: list[ViolationRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


def load_manifest(path: str | Path) -> dict[str, Any]:
    """Read a JSON or YAML manifest from disk."""
    path = Path(path)
    if not path.exists():
        raise ManifestError(f"Manifest not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ManifestError(f"{path}: cannot parse manifest ({e})") from e
    if not isinstance(data, dict):
        raise ManifestError(f"{path}: manifest root must be a mapping")
    return data


def check_file(engine: PolicyEngine, path: str, declarations: list[Any]) -> FileReport:
    """Evaluate every declaration of one file against *engine*."""
    scope = engine.scope(path)
    report = FileReport(path=path, file_allowed=scope.file_allowed)
    if scope.file_allowed:
        logger.debug("File matches allowed patterns", extra={"file_path": path})
    for declaration in declarations:
        try:
            verdict = scope.evaluate(declaration)
        except MalformedDeclarationError as e:
            raise MalformedDeclarationError(f"{path}: {e}") from e
        report.checked += 1
        violation = verdict.to_violation()
        if violation is not None:
            report.violations.append(violation)
    return report


def check_manifest(manifest: Mapping[str, Any], engine: PolicyEngine) -> list[FileReport]:
    """Check all files listed in *manifest*.

    Returns:
        One FileReport per file entry, in manifest order.
    """
    files = manifest.get("files")
    if not isinstance(files, list):
        raise ManifestError("Manifest must contain a 'files' list")

    reports: list[FileReport] = []
    for idx, entry in enumerate(files):
        if not isinstance(entry, Mapping) or not isinstance(entry.get("path"), str):
            raise ManifestError(f"File entry #{idx + 1} must be a mapping with a 'path' string")
        declarations = entry.get("declarations") or []
        if not isinstance(declarations, list):
            raise ManifestError(f"{entry['path']}: 'declarations' must be a list")
        reports.append(check_file(engine, entry["path"], declarations))

    total = sum(len(r.violations) for r in reports)
    logger.info(
        "Checked %d file(s), found %d violation(s)",
        len(reports),
        total,
        extra={"files": len(reports), "violations": total},
    )
    return reports
