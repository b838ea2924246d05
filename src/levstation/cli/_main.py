import os

import click

from levstation.core.configure_logging import LOG_LEVELS, configure_logging
from levstation.version import __version__

from .cmd_config import cmd_config
from .cmd_lev import cmd_lev
from .cmd_project import cmd_project

early_level = os.getenv("LEVSTATION_LOG_LEVEL", "INFO")
if early_level:
    early_level = early_level.upper()
if early_level in LOG_LEVELS:
    configure_logging(early_level)


@click.group(invoke_without_command=True)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    envvar="LEVSTATION_LOG_LEVEL",
    help="Set logging verbosity (overrides the config's logging.level).",
)
@click.version_option(version=__version__, prog_name="levs")
@click.pass_context
def cli(ctx, log_level: str | None):
    """LEV-Station longevity trajectory command-line interface."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level.upper() if log_level else None

    configure_logging(log_level)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(cmd_project)
cli.add_command(cmd_lev)
cli.add_command(cmd_config)


@cli.command()
def info():
    """Show LEV-Station version information."""
    click.echo(f"LEV-Station version: {__version__}")


if __name__ == "__main__":
    cli()
