"""Root CLI group for socialgraph with global flags and command registration."""

from __future__ import annotations

import click

from socialgraph import __version__
from socialgraph.commands import register_commands
from socialgraph.commands._context import AppContext
from socialgraph.config.models import StoreConfig
from socialgraph.config.settings import SocialGraphSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="socialgraph")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (ids only).")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--memory", is_flag=True, help="Use the in-memory store (nothing is persisted).")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    memory: bool,
) -> None:
    """socialgraph: users, friendships, hobbies, and popularity scores."""
    ctx.ensure_object(dict)
    overrides = {"store": StoreConfig(backend="memory")} if memory else {}
    settings = SocialGraphSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        **overrides,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
