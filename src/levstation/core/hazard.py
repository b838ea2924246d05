"""
hazard.py

Hazard-scale building blocks of the LEV trajectory engine.

- qx <-> hazard conversion
- Longevity score -> frailty hazard multiplier
- Medical progress hazard multiplier with quantile uncertainty
- Biological age -> health index

All functions are pure and total over their documented domains.
"""

from __future__ import annotations

import numpy as np

from levstation.core.constants import DEFAULT_CONSTANTS, ModelConstants, z_score_for_centile

# ============================================================
# Utilities
# ============================================================


def sigmoid(x: float) -> float:
    return float(1.0 / (1.0 + np.exp(-x)))


def q_to_h(q: float, constants: ModelConstants = DEFAULT_CONSTANTS) -> float:
    """
    One-year death probability -> constant hazard rate.

    h = -ln(1 - q); q >= 1 maps to a large finite hazard.
    """
    if q >= 1:
        return constants.hazard_cap
    return float(-np.log1p(-q))


def h_to_q(h: float) -> float:
    """Hazard rate -> one-year death probability, q = 1 - exp(-h)."""
    return float(-np.expm1(-h))


# ============================================================
# Frailty
# ============================================================


def get_frailty_multiplier(score: float, constants: ModelConstants = DEFAULT_CONSTANTS) -> float:
    """
    Longevity score (1..99) -> multiplicative hazard adjustment.

    z(score) = exp(A·(0.5 - score/100))

    Score 50 is neutral (1.0); higher scores lower the hazard.
    """
    p = score / 100
    return float(np.exp(constants.frailty_a * (0.5 - p)))


# ============================================================
# Medical progress
# ============================================================


def get_uptake_factor(p: float, constants: ModelConstants = DEFAULT_CONSTANTS) -> float:
    """Personal uptake of medical advances, bounded in (0.6, 1.4)."""
    return 0.6 + 0.8 * sigmoid((p - 0.5) / constants.uptake_sigmoid_width)


def _optimism_limited(optimism: float) -> float:
    return max(-1.0, min(1.0, optimism * 0.1))


def get_progress_multiplier(
    year: int,
    score: float,
    quantile_key: int,
    optimism: int,
    horizon_year: int,
    current_year: int,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Medical progress hazard multiplier r_q(year, score).

    r = exp(mu + z_q·sigma), clamped to [progress_min, progress_max], with
      mu    = -k·t·u(p),   k = base_rate·(1 + 0.1·optimism)
      sigma = sigma0·sqrt(t)·(1 - 0.1·clamp(0.1·optimism, -1, 1))
    where t is the number of years elapsed since ``current_year``,
    frozen at ``horizon_year``.

    Progress stops entirely at optimism <= -10.
    """
    elapsed_years = max(0, min(year, horizon_year) - current_year)

    if elapsed_years <= 0:
        return 1.0

    if optimism <= -10:
        return 1.0

    optimism_factor = optimism * 0.1
    k = constants.progress_rate_base * (1 + optimism_factor)

    u_p = get_uptake_factor(score / 100, constants)
    mu = -k * elapsed_years * u_p

    sigma = (
        constants.progress_sigma0
        * np.sqrt(elapsed_years)
        * (1 - 0.1 * _optimism_limited(optimism))
    )

    z_q = z_score_for_centile(quantile_key)
    r = float(np.exp(mu + z_q * sigma))

    return min(constants.progress_max, max(constants.progress_min, r))


# ============================================================
# Health index
# ============================================================


def bio_age_to_health(bio_age: float, constants: ModelConstants = DEFAULT_CONSTANTS) -> float:
    """Biological age -> robustness index in (0, 1), decreasing with age."""
    return float(
        1.0
        / (1.0 + np.exp((bio_age - constants.health_midpoint_bioage) / constants.health_steepness))
    )
