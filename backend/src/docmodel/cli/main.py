"""docmodel CLI entry point."""

import click

from docmodel.core.config import DocModelConfig


@click.group()
def cli():
    """docmodel — document model validation CLI."""
    DocModelConfig.from_env().configure_logging()


# Register subcommand groups
from docmodel.cli.check_cmd import check  # noqa: E402
from docmodel.cli.models_cmd import models  # noqa: E402

cli.add_command(models)
cli.add_command(check)
