import numpy as np
import pytest

from levstation.core.cohort import (
    SimulationParameters,
    _effective_score,
    simulate,
    simulate_cohort,
)
from levstation.core.constants import QUANTILE_KEYS
from levstation.core.hazard import bio_age_to_health, get_frailty_multiplier
from levstation.core.life_table import embed_sample_data

CURRENT_YEAR = 2024
HORIZON = 2050


@pytest.fixture(scope="module")
def table():
    return embed_sample_data("female")


def run(table, start_age=35, start=50, target=75, optimism=0, protocol=False, q=50):
    return simulate_cohort(
        start_age, start, target, HORIZON, optimism, table, CURRENT_YEAR, protocol, q
    )


# ============================================================
# Shape and initial state
# ============================================================


def test_output_lengths(table):
    result = run(table, start_age=35)
    assert len(result) == 200 - 35 + 1
    for name in ("survival", "annual_survival", "bio_age", "health", "alive_healthy", "pace"):
        assert getattr(result, name).shape == (166,)


def test_initial_state(table):
    result = run(table, start_age=40, start=20)
    b0 = 40 * get_frailty_multiplier(20)

    assert result.survival[0] == 1.0
    assert result.bio_age[0] == pytest.approx(b0)
    assert result.health[0] == pytest.approx(bio_age_to_health(b0))
    assert result.alive_healthy[0] == pytest.approx(bio_age_to_health(b0))
    assert result.annual_survival[0] == pytest.approx(1 - table.lookup(40))


def test_start_at_internal_max_age(table):
    result = run(table, start_age=200)
    assert len(result) == 1
    assert result.life_expectancy == pytest.approx(0.5)


# ============================================================
# Survival curve
# ============================================================


@pytest.mark.parametrize("protocol", [False, True])
@pytest.mark.parametrize("q", [5, 50, 95])
def test_survival_non_increasing(table, protocol, q):
    result = run(table, start=30, target=90, optimism=3, protocol=protocol, q=q)
    s = result.survival
    assert np.all(np.diff(s) <= 0)
    assert np.all((s >= 0) & (s <= 1))
    assert np.all((result.annual_survival >= 0.001) & (result.annual_survival <= 1))


def test_alive_healthy_is_product(table):
    result = run(table, protocol=True)
    np.testing.assert_allclose(result.alive_healthy, result.survival * result.health)


def test_bio_age_advances_by_pace(table):
    result = run(table, protocol=True)
    np.testing.assert_allclose(np.diff(result.bio_age), result.pace[1:], atol=1e-9)


def test_pace_within_clamp(table):
    for q in QUANTILE_KEYS:
        result = run(table, start=10, target=99, optimism=5, protocol=True, q=q)
        assert np.all((result.pace >= -0.50) & (result.pace <= 2.00))


# ============================================================
# Expectancies
# ============================================================


def test_life_expectancy_is_sum_minus_half(table):
    result = run(table)
    assert result.life_expectancy == pytest.approx(float(np.sum(result.survival)) - 0.5)


def test_health_expectancy_counts_healthy_years(table):
    result = run(table)
    healthy = result.health >= 0.70
    assert result.health_expectancy == pytest.approx(
        float(np.sum(result.survival[healthy])) - 0.5
    )
    assert result.health_expectancy <= result.life_expectancy


def test_higher_score_lives_longer(table):
    low = run(table, start=20, target=20)
    high = run(table, start=80, target=80)
    assert high.life_expectancy > low.life_expectancy
    assert high.health_expectancy > low.health_expectancy


def test_protocol_improves_on_status_quo(table):
    status_quo = run(table, start=50, target=50)
    protocol = run(table, start=50, target=90, protocol=True)
    assert protocol.life_expectancy > status_quo.life_expectancy


# ============================================================
# Protocol behaviour
# ============================================================


def test_protocol_without_progress_matches_status_quo(table):
    status_quo = run(table, start=60, target=60, optimism=-10)
    protocol = run(table, start=60, target=60, optimism=-10, protocol=True, q=95)
    np.testing.assert_allclose(protocol.survival, status_quo.survival)
    np.testing.assert_allclose(protocol.bio_age, status_quo.bio_age)
    assert not protocol.is_indefinite


def test_indefinite_trajectory(table):
    result = run(table, start_age=30, start=95, target=95, optimism=5, protocol=True)
    assert result.pace[-1] < -0.10
    assert result.survival[-1] > 0.01
    assert result.is_indefinite


def test_status_quo_never_indefinite(table):
    result = run(table, start_age=30, start=95, target=95, optimism=5)
    assert not result.is_indefinite


def test_score_ramp():
    assert _effective_score(2024, 50, 90, 2024, True, 10) == 50
    assert _effective_score(2029, 50, 90, 2024, True, 10) == pytest.approx(70)
    assert _effective_score(2034, 50, 90, 2024, True, 10) == 90
    assert _effective_score(2029, 50, 90, 2024, False, 10) == 50


# ============================================================
# Determinism and parameter object
# ============================================================


def test_repeatable(table):
    a = run(table, start=40, target=85, optimism=2, protocol=True, q=25)
    b = run(table, start=40, target=85, optimism=2, protocol=True, q=25)
    assert np.array_equal(a.survival, b.survival)
    assert np.array_equal(a.bio_age, b.bio_age)
    assert a.life_expectancy == b.life_expectancy


def test_simulate_from_parameters(table):
    params = SimulationParameters(
        start_age=45,
        start_score=40,
        target_score=80,
        horizon_year=HORIZON,
        optimism=1,
        current_year=CURRENT_YEAR,
        is_protocol=True,
        progress_quantile=75,
    )
    a = simulate(params, table)
    b = simulate_cohort(45, 40, 80, HORIZON, 1, table, CURRENT_YEAR, True, 75)
    assert np.array_equal(a.survival, b.survival)
    assert a.health_expectancy == b.health_expectancy
