"""Command group: user lifecycle."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from socialgraph.commands._base import SgGroup

if TYPE_CHECKING:
    from socialgraph.commands._context import AppContext

_USER_EXAMPLES = """\
  socialgraph user create alice 30
  socialgraph user get 3f2a...
  socialgraph user update 3f2a... --age 31
  socialgraph --json user list"""


@click.group(cls=SgGroup, examples=_USER_EXAMPLES)
def user() -> None:
    """Create, inspect, and remove users."""


@user.command(
    examples="""\
  socialgraph user create alice 30
  socialgraph -q user create bob 25"""
)
@click.argument("name")
@click.argument("age", type=int)
@click.pass_obj
def create(app: AppContext, name: str, age: int) -> None:
    """Create a user named NAME aged AGE."""
    app.emit(app.graph.create_user(name, age))


@user.command(examples="  socialgraph user get 3f2a...")
@click.argument("user_id")
@click.pass_obj
def get(app: AppContext, user_id: str) -> None:
    """Show a user with friends, hobbies, and popularity score."""
    app.emit(app.graph.get_user(user_id))


@user.command(
    examples="""\
  socialgraph user update 3f2a... --name alicia
  socialgraph user update 3f2a... --age 31"""
)
@click.argument("user_id")
@click.option("--name", default=None, help="New unique name.")
@click.option("--age", type=int, default=None, help="New age.")
@click.pass_obj
def update(app: AppContext, user_id: str, name: str | None, age: int | None) -> None:
    """Change a user's name and/or age."""
    app.emit(app.graph.update_user(user_id, name=name, age=age))


@user.command(examples="  socialgraph user delete 3f2a...")
@click.argument("user_id")
@click.pass_obj
def delete(app: AppContext, user_id: str) -> None:
    """Delete a user that has no friendships."""
    app.emit(app.graph.delete_user(user_id))


@user.command(
    "list",
    examples="""\
  socialgraph user list
  socialgraph -q user list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List every user, newest first."""
    app.emit(app.graph.list_users())
