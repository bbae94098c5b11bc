"""Command group: database schema management."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from socialgraph.commands._base import SgGroup

if TYPE_CHECKING:
    from socialgraph.commands._context import AppContext


@click.group(
    cls=SgGroup,
    examples="""\
  socialgraph db init
  socialgraph db status
  socialgraph -c prod.toml db upgrade""",
)
def db() -> None:
    """Create and migrate the SQLite database."""


@db.command(examples="  socialgraph db init")
@click.pass_obj
def init(app: AppContext) -> None:
    """Create the database and stamp it at the newest schema revision."""
    from socialgraph.services.migration import MigrationService

    app.emit(MigrationService(app.store).init())


@db.command(examples="  socialgraph --json db status")
@click.pass_obj
def status(app: AppContext) -> None:
    """Show the current and newest schema revisions."""
    from socialgraph.services.migration import MigrationService

    app.emit(MigrationService(app.store).status())


@db.command(examples="  socialgraph db upgrade")
@click.pass_obj
def upgrade(app: AppContext) -> None:
    """Run pending database migrations."""
    from socialgraph.services.migration import MigrationService

    app.emit(MigrationService(app.store).upgrade())
