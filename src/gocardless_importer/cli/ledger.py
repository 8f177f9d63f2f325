#!/usr/bin/env python3
"""
Ledger CLI - Transaction Import

Imports new bank transactions into a Beancount ledger based on the importer
metadata on its open directives:

    2024-01-01 open Assets:Bank:Checking EUR
      importer: "gocardless"
      account_id: "<GoCardless account id>"
"""

from pathlib import Path

import click

from ..core.config import get_config
from ..gocardless import GoCardlessError
from ..importer import import_ledger
from ..ledger import LedgerError
from .bank import DATE_FORMAT, authenticated_client


@click.command("import")
@click.argument("beancount_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Print the new entries without writing them")
@click.option("--since", type=DATE_FORMAT, help="Fetch from this date instead of the last imported one")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def import_command(ctx: click.Context, beancount_path: Path, dry_run: bool, since, verbose: bool) -> None:
    """
    Import transactions based on configuration in the given beancount ledger.

    Examples:
      beancount-gocardless-importer import main.beancount
      beancount-gocardless-importer import main.beancount --dry-run --since 2024-01-01
    """
    verbose = verbose or (ctx.obj or {}).get("verbose", False)
    client = authenticated_client(get_config())

    try:
        result = import_ledger(
            beancount_path,
            client,
            dry_run=dry_run,
            since=since.date() if since else None,
            progress=click.echo,
        )
    except (GoCardlessError, LedgerError) as e:
        raise click.ClickException(f"Import failed: {e}") from e

    if not result.accounts:
        click.echo('No accounts with importer: "gocardless" metadata found.')
        return

    for account in result.accounts:
        line = f"{account.account}: {account.imported} new, {account.duplicates} already imported"
        if verbose:
            start = account.date_from.isoformat() if account.date_from else "full history"
            line += f" (fetched {account.fetched} since {start}, file {account.file})"
        click.echo(line)
        if dry_run and account.text:
            click.echo()
            click.echo(account.text, nl=False)

    mode = "would be imported (dry run)" if dry_run else "imported"
    click.echo(f"Total: {result.total_imported} transactions {mode}")
