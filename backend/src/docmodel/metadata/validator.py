"""
metadata/validator.py — JSON Schema validation for model YAML files.

Usage:
    from docmodel.metadata.validator import validate_metadata_dir, validate_yaml_file

    issues = validate_metadata_dir(Path("metadata"))
    for issue in issues:
        print(issue)

Constraint kinds outside the built-in set are reported as warnings, since
they only work when registered on a ConstraintRegistry at startup.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

_SCHEMAS_DIR = Path(__file__).parent / "schemas"
MODEL_SCHEMA = "model.schema.json"

BUILTIN_CONSTRAINT_KINDS = frozenset(
    {"type", "required", "blank", "choice", "minLength", "maxLength"}
)


@dataclass
class ValidationIssue:
    """A single validation finding for a model YAML file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "constraints/name/choice"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def _load_schema(name: str) -> dict[str, Any]:
    schema_path = _SCHEMAS_DIR / name
    with schema_path.open() as fh:
        return json.load(fh)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _unknown_kind_issues(yaml_path: Path, doc: dict[str, Any]) -> list[ValidationIssue]:
    constraints = doc.get("constraints")
    if not isinstance(constraints, dict):
        return []

    issues = []
    for property_name, field_constraints in constraints.items():
        if not isinstance(field_constraints, dict):
            continue
        for kind in field_constraints:
            if kind not in BUILTIN_CONSTRAINT_KINDS:
                issues.append(
                    ValidationIssue(
                        file=yaml_path,
                        message=f"Constraint '{kind}' is not built in; it must be registered at startup",
                        path=f"constraints/{property_name}/{kind}",
                        severity="warning",
                    )
                )
    return issues


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_yaml_file(yaml_path: Path, schema_name: str = MODEL_SCHEMA) -> list[ValidationIssue]:
    """
    Validate a single YAML file against the named schema.

    Args:
        yaml_path:   Path to the YAML file to validate.
        schema_name: Filename of the schema (defaults to the model schema).

    Returns:
        A list of :class:`ValidationIssue` objects (empty on success).
    """
    try:
        with yaml_path.open() as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [ValidationIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if raw is None:
        return [
            ValidationIssue(file=yaml_path, message="File is empty or contains only whitespace")
        ]

    validator = Draft202012Validator(_load_schema(schema_name))

    issues = [
        ValidationIssue(file=yaml_path, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(raw), key=_json_path)
    ]
    if isinstance(raw, dict):
        issues.extend(_unknown_kind_issues(yaml_path, raw))
    return issues


def validate_metadata_dir(
    metadata_dir: Path,
    *,
    strict: bool = False,
) -> list[ValidationIssue]:
    """
    Validate every ``models/*.yaml`` file under *metadata_dir*.

    Args:
        metadata_dir: Root metadata directory (contains ``models/``).
        strict:       If ``True``, warnings are escalated to errors.

    Returns:
        A flat list of :class:`ValidationIssue` objects across all files.
    """
    if not metadata_dir.is_dir():
        return [
            ValidationIssue(
                file=metadata_dir,
                message=f"Metadata directory does not exist: {metadata_dir}",
            )
        ]

    models_dir = metadata_dir / "models"
    if not models_dir.is_dir():
        logger.warning("No models directory under %s", metadata_dir)
        return []

    all_issues: list[ValidationIssue] = []
    for yaml_file in sorted(models_dir.glob("*.yaml")):
        file_issues = validate_yaml_file(yaml_file)
        if strict:
            for issue in file_issues:
                if issue.severity == "warning":
                    issue.severity = "error"
        all_issues.extend(file_issues)

    return all_issues
