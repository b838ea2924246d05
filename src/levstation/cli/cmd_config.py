import click
import toml
from omegaconf import OmegaConf

from .utils import load_config_or_fail, split_case_and_overrides


@click.command(
    name="config",
    context_settings=dict(
        ignore_unknown_options=True,
        allow_extra_args=True,
    ),
)
@click.argument("case", required=False)
@click.option(
    "--toml",
    "as_toml",
    is_flag=True,
    help="Print as a case TOML file instead of YAML.",
)
@click.pass_context
def cmd_config(ctx: click.Context, case: str | None, as_toml: bool):
    """
    Print the resolved configuration (defaults + case file + overrides).

    With --toml the output can be saved and reused as a case file.
    """
    case_file, overrides = split_case_and_overrides(case, ctx.args)
    cfg = load_config_or_fail(ctx, case_file, overrides)

    if not as_toml:
        click.echo(OmegaConf.to_yaml(cfg, resolve=True), nl=False)
        return

    data = OmegaConf.to_container(cfg, resolve=True)
    data.pop("logging", None)
    if not data["life_table"].get("points"):
        data.pop("life_table")
    # TOML has no null; unset keys are omitted
    data["scenario"] = {k: v for k, v in data["scenario"].items() if v is not None}

    click.echo(toml.dumps(data), nl=False)
