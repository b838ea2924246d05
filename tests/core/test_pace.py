import pytest

from levstation.core.constants import QUANTILE_KEYS
from levstation.core.hazard import get_frailty_multiplier, get_progress_multiplier
from levstation.core.lev import compute_lev_distribution
from levstation.core.pace import get_pace_of_aging, round_half_up

CURRENT_YEAR = 2024
HORIZON = 2050


def pace(year, score=75, q=50, optimism=0, lev_median=2049.0):
    return get_pace_of_aging(year, score, q, optimism, HORIZON, CURRENT_YEAR, lev_median)


def base_pace(year, score=75, q=50, optimism=0):
    return get_frailty_multiplier(score) * get_progress_multiplier(
        year, score, q, optimism, HORIZON, CURRENT_YEAR
    )


# ============================================================
# Before LEV
# ============================================================


def test_pace_before_lev_is_frailty_times_progress():
    assert pace(2030) == pytest.approx(base_pace(2030))


def test_no_pull_in_lev_year():
    assert pace(2049) == pytest.approx(base_pace(2049))


def test_median_score_pace_is_one_today():
    assert pace(CURRENT_YEAR, score=50) == pytest.approx(1.0)


def test_no_progress_keeps_frailty_pace():
    for year in (2024, 2060, 2150):
        assert pace(year, score=30, optimism=-10, lev_median=9999) == pytest.approx(
            get_frailty_multiplier(30)
        )


# ============================================================
# After LEV
# ============================================================


def test_rejuvenation_after_lev():
    assert pace(2100, lev_median=2040.0) < 0.0


def test_pull_ramps_in():
    values = [pace(y) for y in range(2049, 2080)]
    assert all(a >= b for a, b in zip(values, values[1:]))


def test_rejuvenation_pull_anchored_to_median_quantile():
    # z·r_q - pace is the pull L(y); it must not depend on q
    lev_median = compute_lev_distribution(75, 0, CURRENT_YEAR).median_year
    pulls = [
        base_pace(2060, q=q) - get_pace_of_aging(2060, 75, q, 0, HORIZON, CURRENT_YEAR, lev_median)
        for q in QUANTILE_KEYS
    ]
    assert all(p == pytest.approx(pulls[0]) for p in pulls)
    assert pulls[0] > 0


def test_lev_year_rounds_half_up():
    assert round_half_up(2040.5) == 2041
    assert round_half_up(2040.4999) == 2040
    # y_LEV = 2041: no pull in 2041, pull in 2042
    assert pace(2041, lev_median=2040.5) == pytest.approx(base_pace(2041))
    assert pace(2042, lev_median=2040.5) < base_pace(2042)


# ============================================================
# Clamp
# ============================================================


def test_pace_clamped():
    for score in (1, 10, 50, 90, 99):
        for q in QUANTILE_KEYS:
            for opt in (-10, -5, 0, 5):
                lev_median = compute_lev_distribution(score, opt, CURRENT_YEAR).median_year
                for year in range(CURRENT_YEAR, CURRENT_YEAR + 180, 7):
                    p = get_pace_of_aging(year, score, q, opt, HORIZON, CURRENT_YEAR, lev_median)
                    assert -0.50 <= p <= 2.00


def test_pace_lower_clamp_reached():
    # Short tau with a large extra pull drives pace to the floor
    from dataclasses import replace

    from levstation.core.constants import DEFAULT_CONSTANTS

    constants = replace(DEFAULT_CONSTANTS, rejuv_extra=2.0)
    p = get_pace_of_aging(2100, 99, 5, 5, HORIZON, CURRENT_YEAR, 2030.0, constants)
    assert p == -0.50
