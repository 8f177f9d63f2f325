#!/usr/bin/env python3
"""
Main CLI Entry Point for the GoCardless Importer

Provides the command-line interface for signing in, managing bank
requisitions and importing transactions into a Beancount ledger.
"""

import logging
import os

import click

from ..core.config import get_config, reload_config
from ..core.yaml_utils import format_yaml


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Beancount GoCardless Importer

    Import bank transactions from the GoCardless Bank Account Data API into a
    Beancount ledger.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["GOCARDLESS_ENV"] = config_env
        config = reload_config()
    else:
        config = get_config()

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("gocardless_importer").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config

    if verbose:
        click.echo(f"Environment: {config.environment.value}")
        click.echo(f"Token file: {config.gocardless.token_file}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
def version() -> None:
    """Show version information."""
    from gocardless_importer import __author__, __version__

    click.echo(f"beancount-gocardless-importer v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(format_yaml(config_obj.to_dict()), nl=False)


# Import commands
from .bank import (  # noqa: E402
    create_requisition,
    delete_requisition,
    list_institutions,
    list_requisitions,
    list_transactions,
    sign_in,
)
from .ledger import import_command  # noqa: E402

for _command in (
    sign_in,
    list_institutions,
    create_requisition,
    list_requisitions,
    delete_requisition,
    list_transactions,
    import_command,
):
    main.add_command(_command)


if __name__ == "__main__":
    main()
