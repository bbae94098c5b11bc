"""Command group: friendships."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from socialgraph.commands._base import SgGroup

if TYPE_CHECKING:
    from socialgraph.commands._context import AppContext


@click.group(
    cls=SgGroup,
    examples="""\
  socialgraph friend link 3f2a... 9c1b...
  socialgraph friend unlink 9c1b... 3f2a...""",
)
def friend() -> None:
    """Link and unlink users."""


@friend.command(examples="  socialgraph friend link 3f2a... 9c1b...")
@click.argument("user_a")
@click.argument("user_b")
@click.pass_obj
def link(app: AppContext, user_a: str, user_b: str) -> None:
    """Make USER_A and USER_B friends."""
    app.emit(app.graph.link(user_a, user_b))


@friend.command(examples="  socialgraph friend unlink 3f2a... 9c1b...")
@click.argument("user_a")
@click.argument("user_b")
@click.pass_obj
def unlink(app: AppContext, user_a: str, user_b: str) -> None:
    """Remove the friendship between USER_A and USER_B (either order)."""
    app.emit(app.graph.unlink(user_a, user_b))
