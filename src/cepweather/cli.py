"""Root CLI group for cepweather with global flags and command registration."""

from __future__ import annotations

import click

from cepweather import __version__
from cepweather.commands import register_commands
from cepweather.commands._context import AppContext
from cepweather.config.settings import CepWeatherSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="cepweather")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging, including completed spans.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """cepweather — postal code to temperature over two traced HTTP services."""
    settings = CepWeatherSettings.from_cli(
        config_path=config_path,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
