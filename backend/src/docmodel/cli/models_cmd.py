"""Model metadata CLI commands — validate and list."""

from pathlib import Path

import click

from docmodel.core.config import DocModelConfig
from docmodel.metadata.loader import ModelMetadataLoader
from docmodel.metadata.validator import validate_metadata_dir, validate_yaml_file
from docmodel.models.registry import create_default_registry
from docmodel.validation.types import ModelDefinitionError


def _describe_type(value) -> str:
    if isinstance(value, type):
        return getattr(value, "model_name", value.__name__)
    return str(value)


@click.group()
def models():
    """Model metadata commands."""
    pass


@models.command()
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
@click.option(
    "--path",
    "target_path",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="Validate a single YAML file instead of the whole metadata directory.",
)
def validate(strict: bool, target_path: Path | None):
    """Validate model YAML files against the JSON Schema."""
    config = DocModelConfig.from_env()

    # ── Schema (JSON Schema) validation ─────────────────────────────────────
    if target_path is not None:
        schema_issues = validate_yaml_file(target_path)
        if strict:
            for issue in schema_issues:
                issue.severity = "error"
    else:
        if not config.metadata_path.exists():
            click.echo(f"Error: Metadata directory not found at {config.metadata_path}", err=True)
            raise SystemExit(1)
        schema_issues = validate_metadata_dir(config.metadata_path, strict=strict)

    errors = [i for i in schema_issues if i.severity == "error"]
    warnings = [i for i in schema_issues if i.severity == "warning"]

    for issue in schema_issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} schema error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    if warnings:
        click.echo(click.style(f"{len(warnings)} warning(s) found.", fg="yellow"))

    # ── Semantic (loader) validation ─────────────────────────────────────────
    # Only runs when validating the full directory (target_path is None)
    if target_path is None:
        registry = create_default_registry()
        loader = ModelMetadataLoader(config.metadata_path, registry)
        try:
            loader.load_all()
        except ModelDefinitionError as e:
            click.echo(click.style(f"\nSemantic validation failed: {e}", fg="red"), err=True)
            raise SystemExit(1)

        names = loader.list_models()
        click.echo(f"\nLoaded {len(names)} models:")
        for name in sorted(names):
            definition = loader.get_definition(name)
            field_count = len(definition.constraints) if definition else 0
            click.echo(f"  ✓ {name} ({field_count} fields)")

    click.echo(click.style("\nAll metadata is valid.", fg="green", bold=True))


@models.command("list")
def list_cmd():
    """List declared models and their constraints."""
    config = DocModelConfig.from_env()
    registry = create_default_registry()
    try:
        ModelMetadataLoader(config.metadata_path, registry).load_all()
    except ModelDefinitionError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    for name in registry.list_models():
        model_cls = registry.get(name)
        click.echo(click.style(name, bold=True))
        for property_name, constraints in (model_cls.constraints or {}).items():
            rules = ", ".join(
                f"{kind}={_describe_type(value)}" for kind, value in constraints.items()
            )
            click.echo(f"  {property_name}: {rules}")
