import numpy as np
import pytest

from levstation.core.life_table import (
    SAMPLE_MALE_QX,
    LifeTable,
    embed_sample_data,
    gompertz_fit,
    interpolate_qx,
    life_table_from_points,
)

# ============================================================
# Embedded sample tables
# ============================================================


@pytest.mark.parametrize("sex", ["male", "female"])
def test_sample_table_covers_0_to_150(sex):
    table = embed_sample_data(sex)
    assert table.ages[0] == 0
    assert table.max_age == 150
    assert len(table.qx) == 151
    assert table.year == 2021


def test_invalid_sex_raises():
    with pytest.raises(ValueError):
        embed_sample_data("not-sex")


def test_female_mortality_lower_at_adult_ages():
    male = embed_sample_data("male")
    female = embed_sample_data("female")
    for age in (30, 50, 70, 90):
        assert female.lookup(age) < male.lookup(age)


# ============================================================
# Interpolation and extrapolation
# ============================================================


def test_reference_points_reproduced():
    table = embed_sample_data("male")
    for age, qx in SAMPLE_MALE_QX:
        assert table.qx[age] == pytest.approx(qx)


def test_linear_interpolation_between_points():
    assert interpolate_qx(5, SAMPLE_MALE_QX) == pytest.approx(0.00305)
    assert embed_sample_data("male").qx[85] == pytest.approx((0.055 + 0.13) / 2)


def test_interpolation_flat_beyond_ends():
    assert interpolate_qx(-3, SAMPLE_MALE_QX) == 0.006
    assert interpolate_qx(130, SAMPLE_MALE_QX) == 0.50


def test_gompertz_tail_increasing_and_capped():
    table = embed_sample_data("male")
    tail = table.qx[110:]
    assert np.all(np.diff(tail) >= 0)
    assert table.qx[111] > table.qx[110]
    assert table.qx[150] == 0.999


def test_gompertz_fit_passes_through_fit_ages():
    A, B = gompertz_fit(SAMPLE_MALE_QX)
    assert A * np.exp(B * 90) == pytest.approx(-np.log(1 - 0.13))
    assert A * np.exp(B * 110) == pytest.approx(-np.log(1 - 0.50))


def test_custom_points_need_two():
    with pytest.raises(ValueError):
        life_table_from_points([(50, 0.01)])


def test_custom_points_need_finite_tail_hazard():
    with pytest.raises(ValueError):
        life_table_from_points([(0, 0.01), (90, 0.2), (110, 1.0)])


def test_custom_points_sorted():
    table = life_table_from_points([(110, 0.5), (0, 0.01), (90, 0.1)], source="test")
    assert table.source == "test"
    assert table.qx[0] == pytest.approx(0.01)
    assert table.qx[110] == pytest.approx(0.5)


# ============================================================
# Lookup
# ============================================================


def test_lookup_floors_and_clamps():
    table = embed_sample_data("female")
    assert table.lookup(35.9) == table.qx[35]
    assert table.lookup(-5) == table.qx[0]
    assert table.lookup(500) == table.qx[150]


def test_lookup_default_past_qx():
    table = LifeTable(ages=np.array([0, 1, 2, 100]), qx=np.array([0.01, 0.01, 0.01, 0.5]))
    assert table.lookup(50) == 0.99
    assert table.lookup(50, default=0.001) == 0.001
    assert table.lookup(1) == 0.01


def test_table_validation():
    with pytest.raises(ValueError):
        LifeTable(ages=np.arange(3), qx=np.array([0.1, 0.2]))
    with pytest.raises(ValueError):
        LifeTable(ages=np.arange(2), qx=np.array([0.1, 1.2]))
