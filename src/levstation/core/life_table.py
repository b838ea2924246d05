"""
life_table.py

Baseline one-year death probabilities (qx) by integer age.

The engine only calls ``LifeTable.lookup``. This module also provides a
small embedded reference table (approx. US 2021) and the builder used to
expand a handful of reference points into a full 0..150 table:

- ages 0..110: linear interpolation between reference points
- ages 111..150: Gompertz extrapolation, fitting log-hazard through
  ages 90 and 110
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

MAX_TABLE_AGE = 150
INTERPOLATED_MAX_AGE = 110
GOMPERTZ_FIT_AGES = (90, 110)

# ============================================================
# Embedded reference points (age, qx)
# ============================================================

SAMPLE_MALE_QX: tuple[tuple[int, float], ...] = (
    (0, 0.006), (10, 0.0001), (20, 0.0013), (30, 0.0022), (40, 0.0035),
    (50, 0.0068), (60, 0.013), (70, 0.026), (80, 0.055), (90, 0.13),
    (100, 0.28), (110, 0.50),
)  # fmt: skip

SAMPLE_FEMALE_QX: tuple[tuple[int, float], ...] = (
    (0, 0.005), (10, 0.0001), (20, 0.0006), (30, 0.0010), (40, 0.0020),
    (50, 0.0045), (60, 0.008), (70, 0.019), (80, 0.042), (90, 0.10),
    (100, 0.24), (110, 0.48),
)  # fmt: skip

SAMPLE_POINTS = {
    "male": SAMPLE_MALE_QX,
    "female": SAMPLE_FEMALE_QX,
}

SAMPLE_SOURCE = "Embedded Sample (Approx US 2021)"
SAMPLE_YEAR = 2021


# ============================================================
# Table
# ============================================================


@dataclass(frozen=True, eq=False)
class LifeTable:
    ages: np.ndarray
    qx: np.ndarray
    source: str = ""
    year: int = 0

    def __post_init__(self) -> None:
        if len(self.ages) != len(self.qx):
            raise ValueError(
                f"ages ({len(self.ages)}) and qx ({len(self.qx)}) must have the same length"
            )
        if len(self.ages) == 0:
            raise ValueError("Life table must not be empty")
        if not np.all((self.qx >= 0) & (self.qx <= 1)):
            raise ValueError("All qx values must be in [0, 1]")

    @property
    def max_age(self) -> int:
        return int(self.ages[-1])

    def lookup(self, age: float, default: float = 0.99) -> float:
        """
        qx at floor(age), clamped to [0, max_age].

        Positions past the end of the qx array return ``default``.
        """
        idx = min(max(0, int(np.floor(age))), self.max_age)
        if idx >= len(self.qx):
            return default
        return float(self.qx[idx])


# ============================================================
# Builders
# ============================================================


def interpolate_qx(age: float, points: Sequence[tuple[float, float]]) -> float:
    """Piecewise-linear qx between reference points, flat beyond both ends."""
    xs = [a for a, _ in points]
    ys = [q for _, q in points]
    return float(np.interp(age, xs, ys))


def gompertz_fit(points: Sequence[tuple[float, float]]) -> tuple[float, float]:
    """
    Fit h(x) = A·exp(B·x) through the hazards at the two fit ages.

    Returns (A, B).
    """
    x1, x2 = GOMPERTZ_FIT_AGES
    h1 = -np.log1p(-interpolate_qx(x1, points))
    h2 = -np.log1p(-interpolate_qx(x2, points))

    if not (0 < h1 < np.inf and 0 < h2 < np.inf):
        raise ValueError(f"Gompertz fit requires 0 < qx < 1 at ages {x1} and {x2}")

    B = (np.log(h2) - np.log(h1)) / (x2 - x1)
    A = h1 / np.exp(B * x1)
    return float(A), float(B)


def life_table_from_points(
    points: Sequence[tuple[float, float]],
    source: str = "Custom",
    year: int = 0,
) -> LifeTable:
    """
    Expand (age, qx) reference points into a 0..150 table.
    """
    points = sorted((float(a), float(q)) for a, q in points)
    if len(points) < 2:
        raise ValueError("At least two (age, qx) reference points are required")

    ages = np.arange(0, MAX_TABLE_AGE + 1)

    xs = [a for a, _ in points]
    ys = [q for _, q in points]
    qx = np.interp(ages[: INTERPOLATED_MAX_AGE + 1], xs, ys)

    A, B = gompertz_fit(points)
    tail_ages = ages[INTERPOLATED_MAX_AGE + 1 :]
    tail_q = -np.expm1(-A * np.exp(B * tail_ages))

    qx = np.concatenate([qx, np.minimum(0.999, tail_q)])

    return LifeTable(ages=ages, qx=qx, source=source, year=year)


def embed_sample_data(sex: str) -> LifeTable:
    """
    Embedded sample life table for "male" or "female".
    """
    if sex not in SAMPLE_POINTS:
        raise ValueError(f"sex must be 'male' or 'female' (got '{sex}')")

    return life_table_from_points(SAMPLE_POINTS[sex], source=SAMPLE_SOURCE, year=SAMPLE_YEAR)
