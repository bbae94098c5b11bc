"""Command group: hobbies."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from socialgraph.commands._base import SgGroup

if TYPE_CHECKING:
    from socialgraph.commands._context import AppContext

_HOBBY_EXAMPLES = """\
  socialgraph hobby attach 3f2a... chess
  socialgraph hobby detach 3f2a... chess
  socialgraph hobby list"""


@click.group(cls=SgGroup, examples=_HOBBY_EXAMPLES)
def hobby() -> None:
    """Attach hobbies to users and browse them."""


@hobby.command(
    examples="""\
  socialgraph hobby attach 3f2a... chess
  socialgraph hobby attach 3f2a... 'rock climbing'"""
)
@click.argument("user_id")
@click.argument("name")
@click.pass_obj
def attach(app: AppContext, user_id: str, name: str) -> None:
    """Give a user the hobby NAME, creating it if new."""
    app.emit(app.graph.attach_hobby(user_id, name))


@hobby.command(examples="  socialgraph hobby detach 3f2a... chess")
@click.argument("user_id")
@click.argument("name")
@click.pass_obj
def detach(app: AppContext, user_id: str, name: str) -> None:
    """Remove the hobby NAME from a user."""
    app.emit(app.graph.detach_hobby(user_id, name))


@hobby.command("list", examples="  socialgraph --json hobby list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List every hobby with how many users have it."""
    app.emit(app.graph.list_hobbies())
