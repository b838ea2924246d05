"""
lev.py

Longevity Escape Velocity (LEV) arrival distribution and the probability
of living long enough to reach it.

Arrival model:
- The 95th-score individual reaches LEV at ``lev_median_95`` (2040) under
  neutral optimism
- Lower target scores add an adoption lag (9 years at 75, 15 at 50,
  up to 60 at score 1)
- Optimism scales the total delay inversely with progress speed
- Arrival is a logistic distribution around the median year,
  discretised to calendar years
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from levstation.core.constants import DEFAULT_CONSTANTS, LEV_NEVER_YEAR, ModelConstants

# (score at band start, shift at band start, score at band end, shift at band end)
LEV_SHIFT_BANDS: tuple[tuple[float, float, float, float], ...] = (
    (75, 9.0, 95, 0.0),
    (50, 15.0, 75, 9.0),
    (1, 60.0, 50, 15.0),
)


@dataclass(frozen=True, eq=False)
class LevParams:
    """
    LEV arrival distribution.

    ``prob_mass[i]`` is the probability that LEV arrives in calendar year
    ``current_year + i``.
    """

    median_year: float
    prob_mass: np.ndarray

    @property
    def is_never(self) -> bool:
        return self.median_year >= LEV_NEVER_YEAR


def lev_score_shift(target_score: float) -> float:
    """
    Adoption lag (years) behind the 95th-score LEV date.

    Piecewise linear: [95, inf) -> 0, 75 -> 9, 50 -> 15, 1 -> 60.
    Scores below 1 are treated as 1.
    """
    if target_score >= 95:
        return 0.0

    for lo, shift_lo, hi, shift_hi in LEV_SHIFT_BANDS:
        if target_score >= lo:
            t = (target_score - lo) / (hi - lo)
            return shift_lo + (shift_hi - shift_lo) * t

    return LEV_SHIFT_BANDS[-1][1]


def _logistic_cdf(t: np.ndarray, median: float, k: float) -> np.ndarray:
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-k * (t - median)))


def compute_lev_distribution(
    target_score: float,
    optimism: int,
    current_year: int,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> LevParams:
    """
    Median LEV year and year-by-year arrival PMF for a target score.

    With progress disabled (optimism <= -10) LEV never arrives:
    median_year = 9999 and an empty PMF.
    """
    if optimism <= -10:
        return LevParams(median_year=LEV_NEVER_YEAR, prob_mass=np.empty(0))

    shift = lev_score_shift(target_score)

    speed_factor = 1 + 0.1 * optimism
    if speed_factor <= 0.01:
        speed_factor = constants.min_speed_factor

    base_delay_95 = max(0, constants.lev_median_95 - current_year)
    adjusted_delay = (base_delay_95 + shift) / speed_factor

    median = current_year + adjusted_delay

    years = np.arange(current_year, current_year + constants.lev_window_years + 1, dtype=float)
    prob_mass = _logistic_cdf(years, median, constants.lev_k) - _logistic_cdf(
        years - 1, median, constants.lev_k
    )

    return LevParams(median_year=median, prob_mass=prob_mass)


def lev_arrival_year(lev: LevParams, current_year: int, probability: float) -> int | None:
    """
    First calendar year by which LEV has arrived with at least the given
    cumulative probability, or None if the window never reaches it.
    """
    if lev.is_never or lev.prob_mass.size == 0:
        return None

    cumulative = np.cumsum(lev.prob_mass)
    hits = np.nonzero(cumulative >= probability)[0]
    if hits.size == 0:
        return None
    return current_year + int(hits[0])


# ============================================================
# Probability of reaching LEV
# ============================================================


def calculate_lev_prob(
    score: float,
    optimism: int,
    current_year: int,
    ref_survival: Sequence[float],
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Probability of being alive when LEV arrives.

    P = cap · Σ_i S(i)·pmf(i), where index i is years from ``current_year``
    and ``ref_survival[0]`` is survival at the current year. Scores below
    ``low_score_threshold`` are further scaled by (score / threshold)².
    """
    prob_mass = compute_lev_distribution(score, optimism, current_year, constants).prob_mass

    n = min(prob_mass.size, len(ref_survival))
    p_achieve = float(np.dot(np.asarray(ref_survival[:n], dtype=float), prob_mass[:n]))

    p_achieve *= constants.lev_prob_cap

    if score < constants.low_score_threshold:
        p_achieve *= (score / constants.low_score_threshold) ** 2

    return p_achieve


def target_score_for_lev_probability(
    simulate_survival,
    current_year: int,
    probability: float = 0.5,
    optimism: int = 0,
    scores: Sequence[int] = range(1, 100, 2),
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> int:
    """
    Target score whose LEV probability is closest to ``probability``.

    ``simulate_survival(score, optimism)`` must return the protocol
    median survival curve for that target score. Ties keep the lower
    score.
    """
    best_score = 50
    min_diff = 1.0

    for score in scores:
        survival = simulate_survival(score, optimism)
        p = calculate_lev_prob(score, optimism, current_year, survival, constants)
        diff = abs(p - probability)
        if diff < min_diff:
            min_diff = diff
            best_score = score

    return best_score
