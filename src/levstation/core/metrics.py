import json

from levstation.core.constants import LEV_NEVER_YEAR
from levstation.core.scenario import ScenarioProjection


def lev_year_or_none(year: float) -> float | None:
    """Median LEV year, or None when LEV never arrives."""
    if year >= LEV_NEVER_YEAR:
        return None
    return float(year)


def projection_metrics(projection: ScenarioProjection) -> dict:
    s = projection.scenario
    current = projection.current
    protocol = projection.protocol

    return {
        # metadata
        "schema": "lev.metrics.v1",
        "scenario_name": s.name,
        # inputs
        "start_age": s.start_age,
        "sex": s.sex,
        "current_score": s.current_score,
        "target_score": s.target_score,
        "horizon_year": s.horizon_year,
        "optimism": s.optimism,
        "current_year": s.current_year,
        # status quo
        "life_expectancy_current": current.life_expectancy,
        "health_expectancy_current": current.health_expectancy,
        # protocol (median progress)
        "life_expectancy_protocol": protocol.life_expectancy,
        "health_expectancy_protocol": protocol.health_expectancy,
        "is_indefinite": protocol.is_indefinite,
        # cone of uncertainty
        "life_expectancy_by_quantile": {
            str(q): result.life_expectancy for q, result in projection.fan.items()
        },
        "life_expectancy_by_score": {
            str(score): result.life_expectancy for score, result in projection.comparison.items()
        },
        # LEV
        "lev_median_year": lev_year_or_none(projection.lev.median_year),
        "lev_reference_years": {
            str(score): lev_year_or_none(year)
            for score, year in projection.lev_reference_years.items()
        },
        "lev_probability": projection.lev_probability,
        "target_score_for_50pct_lev": projection.target_for_50_lev,
    }


def metrics_json(projection: ScenarioProjection) -> str:
    return json.dumps(projection_metrics(projection), indent=2, sort_keys=True)
