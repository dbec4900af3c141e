import math

import numpy as np
import pytest

from itc.analysis import bucher
from itc.analysis.bucher import calculate_bucher
from itc.analysis.interpretation import crosses_null
from itc.analysis.models import InvalidEffectEstimateError

CONCRETE = (0.49, 0.38, 0.64, 0.70, 0.55, 0.89)


def test_concrete_borderline_scenario() -> None:
    res = calculate_bucher(*CONCRETE)
    assert 0.65 < res.hr_indirect < 0.75
    assert res.hr_indirect == pytest.approx(0.7, abs=1e-4)
    assert res.ci_lower_95 == pytest.approx(0.491, abs=1e-3)
    assert res.ci_upper_95 == pytest.approx(0.998, abs=1e-3)
    assert res.z_score == pytest.approx(-1.9706, abs=1e-3)
    assert res.p_value == pytest.approx(0.0488, abs=1e-3)
    assert res.is_significant
    assert res.favors == "A"
    assert res.effect_size == pytest.approx(0.3, abs=1e-4)
    assert res.interpretation.startswith(
        "Treatment A shows a 30.0% relative risk reduction compared to Treatment B."
    )
    assert res.interpretation.endswith("(p < 0.05).")


def test_rounding_policy() -> None:
    res = calculate_bucher(*CONCRETE)
    for value in (res.hr_indirect, res.ci_lower_95, res.ci_upper_95, res.z_score, res.effect_size):
        assert value == round(value, 4)
    assert res.p_value == round(res.p_value, 6)


def test_symmetry_under_swap() -> None:
    res = calculate_bucher(*CONCRETE)
    swapped = calculate_bucher(*CONCRETE[3:], *CONCRETE[:3])
    assert swapped.hr_indirect == pytest.approx(1 / res.hr_indirect, rel=1e-3)
    assert swapped.ci_lower_95 == pytest.approx(1 / res.ci_upper_95, rel=1e-3)
    assert swapped.ci_upper_95 == pytest.approx(1 / res.ci_lower_95, rel=1e-3)
    assert swapped.p_value == res.p_value
    assert swapped.z_score == -res.z_score
    assert swapped.favors == "B"


def test_null_case() -> None:
    res = calculate_bucher(0.7, 0.5, 0.9, 0.7, 0.5, 0.9)
    assert res.hr_indirect == 1.0
    assert res.z_score == 0.0
    assert res.p_value == 1.0
    assert not res.is_significant
    assert res.favors is None
    assert res.effect_size == 0.0
    assert "crosses 1.0" in res.interpretation


def test_wider_input_ci_never_narrows_result() -> None:
    base = calculate_bucher(*CONCRETE)
    wider_a = calculate_bucher(0.49, 0.30, 0.80, 0.70, 0.55, 0.89)
    wider_b = calculate_bucher(0.49, 0.38, 0.64, 0.70, 0.45, 1.05)
    base_width = base.ci_upper_95 - base.ci_lower_95
    assert wider_a.ci_upper_95 - wider_a.ci_lower_95 >= base_width
    assert wider_b.ci_upper_95 - wider_b.ci_lower_95 >= base_width


def test_significance_matches_ci_excluding_one() -> None:
    rng = np.random.default_rng(20240601)
    checked = 0
    for _ in range(500):
        hr_a, hr_b = rng.uniform(0.3, 2.0, size=2)
        half_a, half_b = rng.uniform(0.05, 0.8, size=2)
        res = calculate_bucher(
            hr_a, hr_a * math.exp(-half_a), hr_a * math.exp(half_a),
            hr_b, hr_b * math.exp(-half_b), hr_b * math.exp(half_b),
        )
        # 1.96 vs the exact 1.95996 quantile leaves a sliver where the two can disagree
        if abs(abs(res.z_score) - 1.96) < 1e-3:
            continue
        if min(abs(res.ci_lower_95 - 1), abs(res.ci_upper_95 - 1)) < 1e-3:
            continue
        assert res.is_significant == (not crosses_null(res.ci_lower_95, res.ci_upper_95))
        checked += 1
    assert checked > 450


def test_idempotent() -> None:
    assert calculate_bucher(*CONCRETE) == calculate_bucher(*CONCRETE)


def test_zero_width_cis_give_infinite_z() -> None:
    res = calculate_bucher(0.5, 0.5, 0.5, 0.8, 0.8, 0.8)
    assert res.z_score == -math.inf
    assert res.p_value == 0.0
    assert res.is_significant
    assert res.favors == "A"
    assert res.hr_indirect == res.ci_lower_95 == res.ci_upper_95 == pytest.approx(0.625)


def test_identical_zero_width_cis() -> None:
    res = calculate_bucher(0.5, 0.5, 0.5, 0.5, 0.5, 0.5)
    assert res.z_score == 0.0
    assert res.p_value == 1.0
    assert res.favors is None
    assert "No substantial difference" in res.interpretation


class _ExpRoundingToOne:
    """math stand-in whose exp returns exactly 1.0 for near-zero arguments."""

    def __getattr__(self, name):
        return getattr(math, name)

    @staticmethod
    def exp(x: float) -> float:
        return 1.0 if abs(x) < 1e-9 else math.exp(x)


def test_favors_agrees_with_verdict_when_ratio_rounds_to_one(monkeypatch) -> None:
    monkeypatch.setattr(bucher, "math", _ExpRoundingToOne())
    near = 1.0 + 1e-12
    res = calculate_bucher(1.0, 1.0, 1.0, near, near, near)
    assert res.hr_indirect == 1.0
    assert res.favors is None
    assert "No substantial difference" in res.interpretation


def test_favors_b_interpretation() -> None:
    res = calculate_bucher(0.9, 0.8, 1.0, 0.5, 0.4, 0.6)
    assert res.favors == "B"
    assert res.is_significant
    assert res.interpretation.startswith("Treatment B shows a 80.0% relative benefit")


@pytest.mark.parametrize(
    ("args", "field"),
    [
        ((0.0, 0.38, 0.64, 0.70, 0.55, 0.89), "hr_a"),
        ((0.49, 0.38, 0.64, -0.70, 0.55, 0.89), "hr_b"),
        ((0.49, -0.1, 0.64, 0.70, 0.55, 0.89), "ci_a_lower"),
        ((0.49, 0.38, 0.64, 0.70, 0.55, math.inf), "ci_b_upper"),
        ((0.49, 0.38, math.nan, 0.70, 0.55, 0.89), "ci_a_upper"),
    ],
)
def test_invalid_inputs_raise(args: tuple, field: str) -> None:
    with pytest.raises(InvalidEffectEstimateError) as excinfo:
        calculate_bucher(*args)
    assert excinfo.value.field == field
    assert isinstance(excinfo.value, ValueError)
