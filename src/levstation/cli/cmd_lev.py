from datetime import date

import click

from levstation.core.lev import compute_lev_distribution, lev_arrival_year, lev_score_shift

ARRIVAL_PROBABILITIES = (0.05, 0.25, 0.50, 0.75, 0.95)


@click.command(name="lev")
@click.option(
    "--score",
    type=click.IntRange(1, 99),
    default=75,
    show_default=True,
    help="Target longevity score.",
)
@click.option(
    "--optimism",
    type=click.IntRange(-10, 5),
    default=0,
    show_default=True,
    help="Medical progress speed in 10% steps (-10 = no progress).",
)
@click.option("--current-year", type=int, default=None, help="Defaults to this calendar year.")
def cmd_lev(score: int, optimism: int, current_year: int | None):
    """
    Show the LEV arrival distribution for a target score.
    """
    if current_year is None:
        current_year = date.today().year

    lev = compute_lev_distribution(score, optimism, current_year)

    click.echo(f"Target score : {score}")
    click.echo(f"Optimism     : {optimism * 10:+d}%")

    if lev.is_never:
        click.echo("Median year  : never (no medical progress)")
        return

    click.echo(f"Adoption lag : {lev_score_shift(score):.1f} years")
    click.echo(f"Median year  : {lev.median_year:.1f}")
    click.echo("Cumulative arrival:")
    for p in ARRIVAL_PROBABILITIES:
        year = lev_arrival_year(lev, current_year, p)
        click.echo(f"  {p * 100:3.0f}% by {year if year is not None else 'beyond window'}")
