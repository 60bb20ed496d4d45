"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy plugin loading and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from eiplint.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from eiplint.config.settings import LintSettings
    from eiplint.plugins.manager import PluginManager
    from eiplint.services.result import ServiceResult

LOCAL_PLUGIN_DIR = ".eiplint/plugins"


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Plugins are discovered on first use so ``--help`` and ``--version``
    never import third-party plugin code.
    """

    def __init__(self, settings: LintSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None

        from eiplint.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugins(self) -> PluginManager:
        """The plugin manager (loaded lazily on first access)."""
        if self._plugins is None:
            from eiplint.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load(
                local_dir=self.settings.project_root / LOCAL_PLUGIN_DIR,
            )
        return self._plugins

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Lint failures: diagnostics still go to stdout, exit code 1.
        * Other failures: writes to stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        lint_failed = result.error is not None and result.error.code == "LINT_FAILED"

        if result.ok or lint_failed:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)

        if not result.ok:
            raise SystemExit(1)
