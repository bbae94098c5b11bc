"""Command group: whole-graph projections."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from socialgraph.commands._base import SgGroup

if TYPE_CHECKING:
    from socialgraph.commands._context import AppContext


@click.group(cls=SgGroup, examples="  socialgraph --json graph view")
def graph() -> None:
    """Inspect the social graph as a whole."""


@graph.command(
    examples="""\
  socialgraph graph view
  socialgraph --json graph view > graph.json"""
)
@click.pass_obj
def view(app: AppContext) -> None:
    """Every user as a node and every friendship as an edge."""
    app.emit(app.graph.graph_view())
