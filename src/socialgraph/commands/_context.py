"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Opens the store lazily and centralizes result
emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from socialgraph.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from socialgraph.config.settings import SocialGraphSettings
    from socialgraph.infrastructure.store import GraphStore
    from socialgraph.services.facade import SocialGraph
    from socialgraph.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is opened on first use so ``--help`` and ``--version``
    never touch the database.
    """

    def __init__(self, settings: SocialGraphSettings) -> None:
        self.settings = settings
        self._store: GraphStore | None = None
        self._graph: SocialGraph | None = None

        from socialgraph.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from socialgraph.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> GraphStore:
        """The configured backend (opened lazily on first access)."""
        if self._store is None:
            from socialgraph.config.logging import bind_store_context
            from socialgraph.infrastructure.errors import StoreUnavailableError
            from socialgraph.infrastructure.store import open_store

            try:
                self._store = open_store(self.settings)
            except StoreUnavailableError as exc:
                raise click.ClickException(str(exc)) from exc
            bind_store_context(self._store)
        return self._store

    @property
    def graph(self) -> SocialGraph:
        """The service façade bound to :attr:`store`."""
        if self._graph is None:
            from socialgraph.services.facade import SocialGraph

            self._graph = SocialGraph(self.store)
        return self._graph

    def close(self) -> None:
        """Release the store if one was opened."""
        if self._store is not None:
            self._store.close()
            self._store = None
            self._graph = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they stay out of piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # JSON output already carries the warnings in its payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
