"""
scenario.py

A user scenario and the bundle of cohorts projected from it.

One scenario produces:
- the status quo (current score, no protocol)
- the protocol trajectory (current -> target score, median progress)
- the cone of uncertainty (protocol at every progress quantile)
- comparison protocols at fixed scores
- LEV timing and the probability of reaching it
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from loguru import logger

from levstation.core.cohort import SimulationResult, simulate_cohort
from levstation.core.constants import DEFAULT_CONSTANTS, QUANTILE_KEYS, ModelConstants
from levstation.core.lev import (
    LevParams,
    calculate_lev_prob,
    compute_lev_distribution,
    target_score_for_lev_probability,
)
from levstation.core.life_table import SAMPLE_POINTS, LifeTable, embed_sample_data

COMPARISON_SCORES = (25, 75, 95)
LEV_REFERENCE_SCORES = (95, 50)

SNAPSHOT_FIELDS = (
    "survival",
    "annual_survival",
    "bio_age",
    "health",
    "alive_healthy",
    "pace",
)


@dataclass(frozen=True)
class Scenario:
    name: str = "default"
    start_age: int = 35
    sex: str = "female"
    current_score: int = 50
    target_score: int = 75
    horizon_year: int = 2050
    optimism: int = 0
    current_year: int = field(default_factory=lambda: date.today().year)

    def validate(self) -> None:
        """
        Enforce the input domain the engine assumes.
        """
        if self.sex not in SAMPLE_POINTS:
            raise ValueError(f"sex must be 'male' or 'female' (got '{self.sex}')")

        scores = {"current_score": self.current_score, "target_score": self.target_score}
        for label, score in scores.items():
            if not 1 <= score <= 99:
                raise ValueError(f"{label} must be in 1..99 (got {score})")

        if int(self.optimism) != self.optimism or not -10 <= self.optimism <= 5:
            raise ValueError(f"optimism must be an integer in -10..5 (got {self.optimism})")

        if self.start_age < 0:
            raise ValueError(f"start_age must be non-negative (got {self.start_age})")

        if self.current_year < 0 or self.horizon_year < 0:
            raise ValueError("current_year and horizon_year must be non-negative")


@dataclass(frozen=True, eq=False)
class ScenarioProjection:
    scenario: Scenario
    current: SimulationResult
    protocol: SimulationResult
    fan: dict[int, SimulationResult]
    comparison: dict[int, SimulationResult]
    lev: LevParams
    lev_probability: float
    lev_reference_years: dict[int, float]
    target_for_50_lev: int


def project_scenario(
    scenario: Scenario,
    life_table: LifeTable | None = None,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> ScenarioProjection:
    """
    Validate a scenario and project every cohort derived from it.
    """
    scenario.validate()

    if life_table is None:
        life_table = embed_sample_data(scenario.sex)

    s = scenario
    logger.debug("Projecting scenario {}: {}", s.name, s)
    logger.debug("Life table: {} ({})", life_table.source, life_table.year)

    def run(start_score, target_score, is_protocol, quantile=50, optimism=s.optimism):
        return simulate_cohort(
            s.start_age,
            start_score,
            target_score,
            s.horizon_year,
            optimism,
            life_table,
            s.current_year,
            is_protocol,
            quantile,
            constants,
        )

    current = run(s.current_score, s.current_score, False)
    fan = {q: run(s.current_score, s.target_score, True, q) for q in QUANTILE_KEYS}
    protocol = fan[50]
    comparison = {score: run(score, score, True) for score in COMPARISON_SCORES}

    lev = compute_lev_distribution(s.target_score, s.optimism, s.current_year, constants)
    lev_probability = calculate_lev_prob(
        s.target_score, s.optimism, s.current_year, protocol.survival, constants
    )
    lev_reference_years = {
        score: compute_lev_distribution(score, s.optimism, s.current_year, constants).median_year
        for score in LEV_REFERENCE_SCORES
    }

    # Default settings: median progress, neutral optimism
    target_for_50_lev = target_score_for_lev_probability(
        lambda score, optimism: run(s.current_score, score, True, 50, optimism).survival,
        s.current_year,
        probability=0.5,
        optimism=0,
        constants=constants,
    )

    logger.debug(
        "Life expectancy: current={:.1f} protocol={:.1f}; P(LEV)={:.3f}",
        current.life_expectancy,
        protocol.life_expectancy,
        lev_probability,
    )

    return ScenarioProjection(
        scenario=scenario,
        current=current,
        protocol=protocol,
        fan=fan,
        comparison=comparison,
        lev=lev,
        lev_probability=lev_probability,
        lev_reference_years=lev_reference_years,
        target_for_50_lev=target_for_50_lev,
    )


# ============================================================
# Year readout
# ============================================================


def _result_at(result: SimulationResult, idx: int) -> dict[str, float]:
    return {name: float(getattr(result, name)[idx]) for name in SNAPSHOT_FIELDS}


def snapshot_at_year(projection: ScenarioProjection, year: int) -> dict:
    """
    Values of the current, protocol and fan cohorts at a calendar year.
    """
    s = projection.scenario
    idx = year - s.current_year

    if not 0 <= idx < len(projection.protocol):
        raise ValueError(
            f"Year {year} outside simulated window "
            f"{s.current_year}..{s.current_year + len(projection.protocol) - 1}"
        )

    return {
        "year": year,
        "age": s.start_age + idx,
        "current": _result_at(projection.current, idx),
        "protocol": _result_at(projection.protocol, idx),
        "fan": {q: _result_at(result, idx) for q, result in projection.fan.items()},
    }
