#!/usr/bin/env python3
"""
Bank CLI - Authentication, Institutions, Requisitions and Transactions

Commands talking directly to the GoCardless Bank Account Data API.
"""

import click

from ..core.config import Config, get_config
from ..core.yaml_utils import format_yaml
from ..gocardless import GoCardlessClient, GoCardlessError, TokenStore

DATE_FORMAT = click.DateTime(formats=["%Y-%m-%d"])


def build_client(config: Config) -> GoCardlessClient:
    """Create a client without credentials."""
    return GoCardlessClient(config.gocardless.base_url, timeout=config.gocardless.timeout)


def authenticated_client(config: Config) -> GoCardlessClient:
    """
    Create a client carrying a valid access token.

    Raises:
        click.ClickException: If no valid token can be obtained
    """
    client = build_client(config)
    try:
        client.access_token = TokenStore(config.gocardless.token_file).get_access_token(client)
    except GoCardlessError as e:
        raise click.ClickException(
            f"Failed to get the access token, please first run `sign-in` command ({e})"
        ) from e
    return client


@click.command("sign-in")
@click.argument("secret_id")
@click.argument("secret_key")
def sign_in(secret_id: str, secret_key: str) -> None:
    """
    Exchange GoCardless user secrets for API tokens and store them.

    Example:
      beancount-gocardless-importer sign-in <secret-id> <secret-key>
    """
    config = get_config()
    client = build_client(config)
    try:
        tokens = client.obtain_tokens(secret_id, secret_key)
        TokenStore(config.gocardless.token_file).save(tokens)
    except GoCardlessError as e:
        raise click.ClickException(f"Sign-in failed: {e}") from e
    except OSError as e:
        raise click.ClickException(f"Failed to store tokens: {e}") from e
    click.echo("Signed in")


@click.command("list-institutions")
@click.option("--country", help="Two-letter ISO 3166 country code, e.g. GB")
def list_institutions(country: str | None) -> None:
    """List banks supported by GoCardless."""
    client = authenticated_client(get_config())
    try:
        institutions = client.list_institutions(country)
    except GoCardlessError as e:
        raise click.ClickException(str(e)) from e

    click.echo("ID: NAME")
    for institution in institutions:
        click.echo(f"{institution.id}: {institution.name}")


@click.command("create-requisition")
@click.argument("institution_id")
@click.option("--redirect", help="URL the bank redirects to after authorisation")
def create_requisition(institution_id: str, redirect: str | None) -> None:
    """
    Start linking a bank; prints the link to authorise access.

    Example:
      beancount-gocardless-importer create-requisition SANDBOXFINANCE_SFIN0000
    """
    config = get_config()
    client = authenticated_client(config)
    try:
        requisition = client.create_requisition(institution_id, redirect or config.gocardless.redirect_url)
    except GoCardlessError as e:
        raise click.ClickException(str(e)) from e

    click.echo("Follow the link to finish the institution setup:")
    click.echo(requisition.link)


@click.command("list-requisitions")
def list_requisitions() -> None:
    """List requisitions with their status and linked account IDs."""
    client = authenticated_client(get_config())
    try:
        requisitions = client.list_requisitions()
    except GoCardlessError as e:
        raise click.ClickException(str(e)) from e

    for requisition in requisitions:
        click.echo(f"ID: {requisition.id}")
        click.echo(f"Institution ID: {requisition.institution_id}")
        click.echo(f"Agreement: {requisition.agreement}")
        click.echo(f"Status: {requisition.status_description}")
        click.echo(f"Link: {requisition.link}")
        if requisition.accounts:
            click.echo("Accounts:")
            for account_id in requisition.accounts:
                click.echo(f"- {account_id}")
        click.echo()


@click.command("delete-requisition")
@click.argument("requisition_id")
def delete_requisition(requisition_id: str) -> None:
    """Delete a requisition."""
    client = authenticated_client(get_config())
    try:
        client.delete_requisition(requisition_id)
    except GoCardlessError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Deleted requisition {requisition_id}")


@click.command("list-transactions")
@click.argument("account_id")
@click.option("--date-from", type=DATE_FORMAT, help="First booking date (YYYY-MM-DD)")
@click.option("--date-to", type=DATE_FORMAT, help="Last booking date (YYYY-MM-DD)")
def list_transactions(account_id, date_from, date_to) -> None:
    """
    Dump the transactions of an account as YAML.

    The account IDs are shown by the list-requisitions command.
    """
    client = authenticated_client(get_config())
    try:
        raw = client.get_raw_transactions(
            account_id,
            date_from=date_from.date() if date_from else None,
            date_to=date_to.date() if date_to else None,
        )
    except GoCardlessError as e:
        raise click.ClickException(str(e)) from e
    click.echo(format_yaml(raw), nl=False)
