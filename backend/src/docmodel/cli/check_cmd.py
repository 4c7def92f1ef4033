"""Document check command — build a model from a file and report the result."""

import json
from pathlib import Path

import click
import yaml

from docmodel.core.config import DocModelConfig
from docmodel.metadata.loader import ModelMetadataLoader
from docmodel.models.registry import create_default_registry
from docmodel.validation.types import ModelDefinitionError, ModelValidationError


def _read_document(path: Path) -> dict:
    """Read a JSON or YAML document."""
    text = path.read_text()
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} does not contain a mapping", param_hint="DOCUMENT")
    return data


@click.command()
@click.argument("model_name")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--from-storage/--no-from-storage",
    default=True,
    show_default=True,
    help="Rebuild nested models from plain sub-documents.",
)
@click.option("--as-json", is_flag=True, default=False, help="Print the JSON projection on success.")
def check(model_name: str, document: Path, from_storage: bool, as_json: bool):
    """Validate DOCUMENT against the model MODEL_NAME."""
    config = DocModelConfig.from_env()
    registry = create_default_registry()

    try:
        ModelMetadataLoader(config.metadata_path, registry).load_all()
        if not registry.is_registered(model_name):
            click.echo(click.style(f"Error: Unknown model '{model_name}'", fg="red"), err=True)
            raise SystemExit(1)
        model = registry.create(model_name, _read_document(document), from_storage=from_storage)
    except ModelValidationError as e:
        click.echo(click.style(e.message, fg="red"))
        raise SystemExit(1)
    except ModelDefinitionError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(model.to_json(), indent=2, default=str))
    click.echo(click.style(f"{document.name} is a valid {model_name}.", fg="green", bold=True))
