import pytest

from levstation.core.override_parser import coerce_value, hydra_overrides_to_dict, reject_sweeps

# ============================================================
# Value coercion
# ============================================================


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("35", 35),
        ("-5", -5),
        ("0.25", 0.25),
        ("1e-3", 0.001),
        ("true", True),
        ("False", False),
        ("null", None),
        ("male", "male"),
    ],
)
def test_coerce_value(raw, expected):
    assert coerce_value(raw) == expected
    assert type(coerce_value(raw)) is type(expected)


# ============================================================
# Nested overrides
# ============================================================


def test_nested_dict():
    result = hydra_overrides_to_dict(
        ["scenario.optimism=2", "scenario.sex=male", "model.rejuv_tau=8.5"]
    )
    assert result == {
        "scenario": {"optimism": 2, "sex": "male"},
        "model": {"rejuv_tau": 8.5},
    }


def test_later_override_wins():
    result = hydra_overrides_to_dict(["scenario.optimism=2", "scenario.optimism=-3"])
    assert result == {"scenario": {"optimism": -3}}


def test_ungrouped_and_malformed_ignored():
    assert hydra_overrides_to_dict(["optimism=2", "scenario.optimism"]) == {}


def test_append_prefix_stripped():
    assert hydra_overrides_to_dict(["+scenario.start_age=60"]) == {"scenario": {"start_age": 60}}


def test_conflicting_override_raises():
    with pytest.raises(ValueError):
        hydra_overrides_to_dict(["scenario.sex=male", "scenario.sex.code=1"])


# ============================================================
# Sweeps
# ============================================================


@pytest.mark.parametrize("tok", ["-m", "--multirun", "scenario.optimism=1,2"])
def test_reject_sweeps(tok):
    with pytest.raises(ValueError):
        reject_sweeps(["scenario.start_age=40", tok])


def test_single_values_accepted():
    reject_sweeps(["scenario.start_age=40", "model.rejuv_tau=6"])
