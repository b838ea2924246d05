"""
constants.py

Named model constants for the LEV trajectory engine.

All tunables live in a single frozen ``ModelConstants`` instance which is
passed to (or defaulted by) every engine function. Nothing here is
mutated at runtime; alternative calibrations are built with
``ModelConstants.from_config`` or ``dataclasses.replace``.

Calibration notes:
- Medical progress reduces hazard log-linearly at ~1.8%/yr at neutral
  optimism, with a Brownian-style uncertainty band (sigma0·sqrt(t))
- The LEV logistic steepness ln(4)/5 puts the 50% -> 95% gap at ~10 years
- Health index is a decreasing sigmoid of biological age centred at 72
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Mapping

# ============================================================
# Quantile z-scores (two-sided normal quantiles)
# ============================================================

# Fixed mapping rather than an inverse CDF: unknown keys fall back to
# the median (z = 0).
Z_SCORES: Mapping[int, float] = MappingProxyType(
    {
        5: -1.644853626,
        25: -0.674489750,
        50: 0.0,
        75: 0.674489750,
        95: 1.644853626,
    }
)

QUANTILE_KEYS: tuple[int, ...] = tuple(Z_SCORES)

# "LEV never arrives" sentinel for the median year.
LEV_NEVER_YEAR = 9999


def z_score_for_centile(centile: int) -> float:
    """Return the z-score for a progress quantile key (0 for unknown keys)."""
    return Z_SCORES.get(centile, 0.0)


# ============================================================
# Model constants
# ============================================================


@dataclass(frozen=True)
class ModelConstants:
    # --- simulation horizon ---
    max_age_internal: int = 200
    lev_window_years: int = 120

    # --- health index ---
    health_midpoint_bioage: float = 72.0
    health_steepness: float = 9.0
    healthspan_threshold: float = 0.70

    # --- medical progress ---
    progress_rate_base: float = 0.018  # 1.8% per year
    progress_sigma0: float = 0.030
    progress_min: float = 0.01
    progress_max: float = 1.20
    uptake_sigmoid_width: float = 0.12

    # --- frailty ---
    frailty_a: float = 0.65

    # --- LEV arrival ---
    lev_k: float = math.log(4) / 5  # ~0.277
    lev_median_95: int = 2040
    min_speed_factor: float = 0.001

    # --- rejuvenation ---
    rejuv_tau: float = 6.0
    rejuv_extra: float = 0.20
    pace_min: float = -0.50
    pace_max: float = 2.00

    # --- cohort hazard ---
    protocol_ramp_years: int = 10
    rejuv_hazard_coupling: float = 2.0
    hazard_mult_min: float = 0.05
    hazard_mult_max: float = 2.5
    max_annual_q: float = 0.999
    hazard_cap: float = 100.0

    # --- indefinite-survival heuristic ---
    indefinite_pace: float = -0.10
    indefinite_survival: float = 0.01

    # --- LEV achievement ---
    lev_prob_cap: float = 0.90
    low_score_threshold: float = 20.0

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any] | None) -> "ModelConstants":
        """
        Build constants from a (possibly partial) mapping, e.g. the
        ``model`` node of the Hydra config.

        Missing keys keep their defaults. Unknown keys, and fractional values
        for whole-number constants, raise ValueError.
        """
        if not cfg:
            return cls()

        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(cfg) - set(known))
        if unknown:
            raise ValueError(f"Unknown model constants: {unknown}. Valid keys: {sorted(known)}")

        values = {}
        for key, value in cfg.items():
            if value is None:
                continue
            if isinstance(getattr(cls, key), int):
                if value != int(value):
                    raise ValueError(
                        f"Model constant '{key}' must be a whole number (got {value})"
                    )
                values[key] = int(value)
            else:
                values[key] = float(value)

        return cls(**values)

    def as_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_CONSTANTS = ModelConstants()
