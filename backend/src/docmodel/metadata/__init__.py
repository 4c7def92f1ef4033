"""YAML model metadata: loading and schema validation."""

from docmodel.metadata.loader import ModelDefinition, ModelMetadataLoader
from docmodel.metadata.validator import (
    ValidationIssue,
    validate_metadata_dir,
    validate_yaml_file,
)

__all__ = [
    "ModelDefinition",
    "ModelMetadataLoader",
    "ValidationIssue",
    "validate_metadata_dir",
    "validate_yaml_file",
]
