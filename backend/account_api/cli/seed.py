"""Flask CLI commands for the prefecture reference table."""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from account_api.core.extensions import db
from account_api.seeds.prefectures import seed_prefectures


def _seed(verbose: bool) -> None:
    try:
        counts = seed_prefectures(db, verbose=verbose)
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise click.ClickException(f"Could not seed prefectures: {exc}") from exc
    click.echo(f"prefectures: {counts['created']} created, {counts['existing']} already present")


@click.group("seed")
def seed_cli() -> None:
    """Reference data commands."""


@seed_cli.command("run")
@click.option("-v", "--verbose", is_flag=True, help="Log every inserted prefecture.")
@with_appcontext
def run_command(verbose: bool) -> None:
    """Insert the 47 prefectures; rows already present are kept."""
    _seed(verbose)


@seed_cli.command("fresh")
@click.option("-v", "--verbose", is_flag=True, help="Log every inserted prefecture.")
@click.confirmation_option(prompt="Drop every table, accounts and tokens included?")
@with_appcontext
def fresh_command(verbose: bool) -> None:
    """Rebuild the schema from the models, then seed the prefectures.

    Only available when the app runs in debug or testing mode.
    """
    if not (current_app.debug or current_app.testing):
        raise click.ClickException("'seed fresh' is disabled outside debug and testing.")
    db.session.remove()
    db.drop_all()
    db.create_all()
    _seed(verbose)
