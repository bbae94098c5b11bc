"""Subcommand modules for socialgraph.

Provides register_commands() which uses deferred imports to keep
``socialgraph --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every command group on the root CLI group."""
    from socialgraph.commands.db import db
    from socialgraph.commands.friend import friend
    from socialgraph.commands.graph import graph
    from socialgraph.commands.hobby import hobby
    from socialgraph.commands.user import user

    cli.add_command(user)
    cli.add_command(friend)
    cli.add_command(hobby)
    cli.add_command(graph)
    cli.add_command(db)
