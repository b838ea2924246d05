from pathlib import Path

import click
from omegaconf.errors import OmegaConfBaseException

from levstation.core.config import load_config
from levstation.core.configure_logging import configure_logging


def validate_toml(ctx, param, value: Path | None):
    if value is None:
        return None

    if value.suffix == "":
        value = value.with_suffix(".toml")

    if value.suffix.lower() != ".toml":
        raise click.BadParameter("File must have a .toml extension")

    if not value.exists():
        raise click.BadParameter(f"File '{value}' does not exist")

    if not value.is_file():
        raise click.BadParameter(f"'{value}' is not a file")

    return value


def split_case_and_overrides(case: str | None, extra: list[str]) -> tuple[Path | None, list[str]]:
    """
    The optional CASE argument may actually be the first override
    (``levs project scenario.optimism=2``).
    """
    if case is not None and "=" in case:
        return None, [case, *extra]
    if case is None:
        return None, list(extra)
    return validate_toml(None, None, Path(case)), list(extra)


def load_config_or_fail(ctx: click.Context, case_file: Path | None, overrides: list[str]):
    """
    Load configuration, turning config errors into click errors.

    The config's ``logging.level`` takes effect unless --log-level was
    given on the command line.
    """
    try:
        cfg = load_config(case_file, overrides)
        if not (ctx.obj or {}).get("log_level"):
            configure_logging(cfg)
    except (ValueError, KeyError, FileNotFoundError, OmegaConfBaseException) as e:
        raise click.ClickException(str(e)) from e

    return cfg
