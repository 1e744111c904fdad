"""Flask CLI commands for token maintenance."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from account_api.infra.scheduler import build_collector
from account_api.services._shared.errors import StoreUnavailableError


@click.group("tokens")
def tokens_cli() -> None:
    """Token maintenance commands."""


@tokens_cli.command("sweep")
@with_appcontext
def sweep_command() -> None:
    """Delete every token pair whose refresh window has closed, once."""
    try:
        removed = build_collector().run_once()
    except StoreUnavailableError as exc:
        raise click.ClickException(str(exc)) from exc
    if removed is None:
        raise click.ClickException("Another sweep is running; try again later.")
    click.echo(f"Removed {removed} expired token pair(s).")
