# src/levstation/cli/cmd_project.py

import click
from loguru import logger

from levstation.core.config import constants_from_config, life_table_from_config, scenario_from_config
from levstation.core.metrics import lev_year_or_none, metrics_json
from levstation.core.pace import round_half_up
from levstation.core.scenario import ScenarioProjection, project_scenario, snapshot_at_year

from .utils import load_config_or_fail, split_case_and_overrides

# ---------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------


def format_year(year: float | None) -> str:
    if year is None:
        return "never"
    return f"{round_half_up(year)}"


def format_pct(value: float) -> str:
    return f"{value * 100:.1f}%"


def render_summary(projection: ScenarioProjection) -> None:
    s = projection.scenario
    current = projection.current
    protocol = projection.protocol

    click.echo(f"SCENARIO  : {s.name}")
    click.echo("-" * 60)
    click.echo("INPUTS")
    click.echo(f"  Age / sex        : {s.start_age} / {s.sex}")
    click.echo(f"  Longevity score  : {s.current_score} → {s.target_score}")
    click.echo(f"  Optimism         : {int(s.optimism) * 10:+d}% progress speed")
    click.echo(f"  Years            : {s.current_year} (horizon {s.horizon_year})")
    click.echo()

    click.echo("EXPECTANCY (years)")
    click.echo(f"  {'':18}{'life':>8}{'health':>8}")
    click.echo(
        f"  {'Status quo':18}{current.life_expectancy:8.1f}{current.health_expectancy:8.1f}"
    )
    click.echo(
        f"  {'Protocol':18}{protocol.life_expectancy:8.1f}{protocol.health_expectancy:8.1f}"
    )
    if protocol.is_indefinite:
        click.echo("  Protocol trajectory does not terminate (rejuvenation outpaces aging)")
    click.echo()

    click.echo("CONE OF UNCERTAINTY (protocol life expectancy by progress quantile)")
    click.echo("  " + "  ".join(f"p{q}={r.life_expectancy:.1f}" for q, r in projection.fan.items()))
    click.echo()

    click.echo("COMPARISON (protocol life expectancy by score)")
    click.echo(
        "  "
        + "  ".join(
            f"score {score}={r.life_expectancy:.1f}" for score, r in projection.comparison.items()
        )
    )
    click.echo()

    click.echo("LEV")
    click.echo(f"  Median year      : {format_year(lev_year_or_none(projection.lev.median_year))}")
    for score, year in projection.lev_reference_years.items():
        click.echo(f"  Score {score:<2} median   : {format_year(lev_year_or_none(year))}")
    click.echo(f"  P(reach LEV)     : {format_pct(projection.lev_probability)}")
    click.echo(f"  Target for 50%   : score {projection.target_for_50_lev}")


def render_snapshot(snapshot: dict) -> None:
    click.echo()
    click.echo(f"YEAR {snapshot['year']} (age {snapshot['age']})")
    click.echo(f"  {'':12}{'S(a)':>8}{'p(a)':>8}{'bioAge':>8}{'health':>8}{'pace':>8}")

    rows = [("Status quo", snapshot["current"]), ("Protocol", snapshot["protocol"])]
    rows += [(f"  p{q}", values) for q, values in snapshot["fan"].items()]

    for label, v in rows:
        click.echo(
            f"  {label:12}{v['survival']:8.3f}{v['annual_survival']:8.4f}"
            f"{v['bio_age']:8.1f}{v['health']:8.3f}{v['pace']:8.2f}"
        )


# ---------------------------------------------------------------------
# CLI command
# ---------------------------------------------------------------------


@click.command(
    name="project",
    context_settings=dict(
        ignore_unknown_options=True,
        allow_extra_args=True,
    ),
)
@click.argument("case", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print metrics as JSON.")
@click.option("--year", type=int, default=None, help="Also show the readout for a calendar year.")
@click.pass_context
def cmd_project(ctx: click.Context, case: str | None, as_json: bool, year: int | None):
    """
    Project survival, health and LEV odds for a scenario.

    Usage:
      levs project                         → default scenario
      levs project Case.toml               → scenario from a case file
      levs project Case.toml scenario.optimism=2 model.rejuv_tau=8

    Additional arguments are dotted config overrides.
    """
    case_file, overrides = split_case_and_overrides(case, ctx.args)

    logger.debug("Resolved case: {}", case_file)
    logger.debug("Overrides: {}", overrides)

    cfg = load_config_or_fail(ctx, case_file, overrides)

    try:
        scenario = scenario_from_config(cfg)
        constants = constants_from_config(cfg)
        life_table = life_table_from_config(cfg)

        logger.info("Projecting scenario: {}", scenario.name)
        projection = project_scenario(scenario, life_table, constants)

        snapshot = snapshot_at_year(projection, year) if year is not None else None
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(metrics_json(projection))
        return

    render_summary(projection)
    if snapshot is not None:
        render_snapshot(snapshot)
