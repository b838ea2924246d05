"""
pace.py

Pace of aging with rejuvenation after LEV.

pace(y) = z(score)·r_q(y) - L(y)

L(y) is a "rejuvenation pull" that ramps in exponentially once the LEV
median year is reached:

    L(y) = lambda·(1 - exp(-(y - y_LEV) / tau)),   y >= y_LEV
    lambda = z(score)·r_50(y_LEV) + rejuv_extra

lambda is always taken from the median (50th percentile) progress
trajectory, whichever quantile drives r_q. Rejuvenation onset is keyed to
the median expectation, so all quantile trajectories share the same pull.
"""

from __future__ import annotations

import math

import numpy as np

from levstation.core.constants import DEFAULT_CONSTANTS, ModelConstants
from levstation.core.hazard import get_frailty_multiplier, get_progress_multiplier


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def get_pace_of_aging(
    year: int,
    score: float,
    quantile_key: int,
    optimism: int,
    horizon_year: int,
    current_year: int,
    lev_median_year: float,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Signed annual change of biological age for a calendar year.

    1.0 is normal aging, values below 0 are net rejuvenation. The result
    is clamped to [pace_min, pace_max].
    """
    y_lev = round_half_up(lev_median_year)
    z = get_frailty_multiplier(score, constants)

    r_q = get_progress_multiplier(
        year, score, quantile_key, optimism, horizon_year, current_year, constants
    )
    r_lev_median = get_progress_multiplier(
        y_lev, score, 50, optimism, horizon_year, current_year, constants
    )

    lam = z * r_lev_median + constants.rejuv_extra

    pull = 0.0
    if year >= y_lev and optimism > -10:
        pull = lam * (1 - float(np.exp(-(year - y_lev) / constants.rejuv_tau)))

    pace = z * r_q - pull
    return min(constants.pace_max, max(constants.pace_min, pace))
