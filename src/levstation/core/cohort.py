"""
cohort.py

Year-by-year cohort projection.

For each calendar year the cohort's biological age B advances by the pace
of aging, and the baseline hazard is read from the life table at B (not at
chronological age), scaled by frailty and medical progress:

    h(y) = h0(floor(B))·clamp(z(score)·r_q(y), mult_min, mult_max)
    S(y+1) = S(y)·(1 - q(y))
    B(y+1) = B(y) + pace(y)

Under a protocol the score ramps linearly from the start score to the
target score over the first ``protocol_ramp_years`` years, and negative
pace (rejuvenation) further suppresses hazard by exp(coupling·pace).

Output arrays are indexed 0..(max_age_internal - start_age); index 0 is
the start age in the current year.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from levstation.core.constants import DEFAULT_CONSTANTS, ModelConstants
from levstation.core.hazard import (
    bio_age_to_health,
    get_frailty_multiplier,
    get_progress_multiplier,
    h_to_q,
    q_to_h,
)
from levstation.core.lev import compute_lev_distribution
from levstation.core.life_table import LifeTable
from levstation.core.pace import get_pace_of_aging

# ============================================================
# Value types
# ============================================================


@dataclass(frozen=True)
class SimulationParameters:
    start_age: int
    start_score: int
    target_score: int
    horizon_year: int
    optimism: int
    current_year: int
    is_protocol: bool = False
    progress_quantile: int = 50


@dataclass(frozen=True, eq=False)
class SimulationResult:
    survival: np.ndarray  # cumulative S(a)
    annual_survival: np.ndarray  # P(survive a -> a+1)
    bio_age: np.ndarray
    health: np.ndarray
    alive_healthy: np.ndarray  # S(a)·H(a)
    pace: np.ndarray  # pace that drove the transition into index i
    life_expectancy: float
    health_expectancy: float
    is_indefinite: bool = False

    def __len__(self) -> int:
        return len(self.survival)


# ============================================================
# Projection
# ============================================================


def _effective_score(
    year: int,
    start_score: float,
    target_score: float,
    current_year: int,
    is_protocol: bool,
    ramp_years: int,
) -> float:
    if not is_protocol:
        return start_score
    elapsed = year - current_year
    if elapsed < ramp_years:
        return start_score + (target_score - start_score) * (elapsed / ramp_years)
    return target_score


def simulate_cohort(
    start_age: int,
    start_score: int,
    target_score: int,
    horizon_year: int,
    optimism: int,
    life_table: LifeTable,
    current_year: int,
    is_protocol: bool,
    progress_quantile: int = 50,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> SimulationResult:
    """
    Project survival, biological age and health from ``start_age`` up to
    the internal maximum age.

    Without a protocol the cohort keeps its start score and follows the
    median progress trajectory. With a protocol the score ramps to the
    target, the chosen progress quantile drives hazard, and pace is
    pulled negative after the LEV median year of the target score.
    """
    c = constants
    quantile = progress_quantile if is_protocol else 50

    lev_median = 0.0
    if is_protocol:
        lev_median = compute_lev_distribution(target_score, optimism, current_year, c).median_year

    S = 1.0
    B = start_age * get_frailty_multiplier(start_score, c)

    if is_protocol:
        pace0 = get_pace_of_aging(
            current_year,
            target_score,
            progress_quantile,
            optimism,
            horizon_year,
            current_year,
            lev_median,
            c,
        )
    else:
        pace0 = get_frailty_multiplier(start_score, c) * get_progress_multiplier(
            current_year, start_score, 50, optimism, horizon_year, current_year, c
        )

    survival = [S]
    annual_survival = [1.0 - life_table.lookup(start_age, default=0.001)]
    bio_age = [B]
    health = [bio_age_to_health(B, c)]
    alive_healthy = [S * health[0]]
    pace = [pace0]

    for age in range(start_age, c.max_age_internal):
        year = current_year + (age - start_age)

        score = _effective_score(
            year, start_score, target_score, current_year, is_protocol, c.protocol_ramp_years
        )

        # Pace for this year moves B into next year
        if is_protocol:
            p = get_pace_of_aging(
                year, score, progress_quantile, optimism, horizon_year, current_year, lev_median, c
            )
        else:
            p = get_frailty_multiplier(score, c) * get_progress_multiplier(
                year, score, 50, optimism, horizon_year, current_year, c
            )

        # Baseline hazard at biological age
        h0 = q_to_h(life_table.lookup(B, default=0.99), c)

        mult = get_frailty_multiplier(score, c) * get_progress_multiplier(
            year, score, quantile, optimism, horizon_year, current_year, c
        )
        if is_protocol and p < 0:
            mult *= float(np.exp(c.rejuv_hazard_coupling * p))

        h_final = h0 * max(c.hazard_mult_min, min(c.hazard_mult_max, mult))
        q_final = min(c.max_annual_q, h_to_q(h_final))

        S *= 1 - q_final
        B += p

        H = bio_age_to_health(B, c)
        survival.append(S)
        annual_survival.append(1 - q_final)
        bio_age.append(B)
        health.append(H)
        alive_healthy.append(S * H)
        pace.append(p)

    survival_arr = np.asarray(survival)
    health_arr = np.asarray(health)

    life_expectancy = float(np.sum(survival_arr)) - 0.5
    healthy = health_arr >= c.healthspan_threshold
    health_expectancy = float(np.sum(survival_arr[healthy])) - 0.5

    is_indefinite = bool(
        is_protocol and pace[-1] < c.indefinite_pace and survival[-1] > c.indefinite_survival
    )

    return SimulationResult(
        survival=survival_arr,
        annual_survival=np.asarray(annual_survival),
        bio_age=np.asarray(bio_age),
        health=health_arr,
        alive_healthy=np.asarray(alive_healthy),
        pace=np.asarray(pace),
        life_expectancy=life_expectancy,
        health_expectancy=health_expectancy,
        is_indefinite=is_indefinite,
    )


def simulate(
    params: SimulationParameters,
    life_table: LifeTable,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> SimulationResult:
    """Run ``simulate_cohort`` from a parameter object."""
    return simulate_cohort(
        params.start_age,
        params.start_score,
        params.target_score,
        params.horizon_year,
        params.optimism,
        life_table,
        params.current_year,
        params.is_protocol,
        params.progress_quantile,
        constants,
    )
