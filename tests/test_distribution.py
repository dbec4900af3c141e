import math

import pytest

from itc.analysis.distribution import norm_cdf, two_sided_p_value


@pytest.mark.parametrize(
    ("z", "expected"),
    [
        (0.0, 0.5),
        (1.96, 0.9750021048517795),
        (-1.96, 0.024997895148220435),
        (-6.0, 9.865876450376946e-10),
        (6.0, 0.9999999990134123),
    ],
)
def test_norm_cdf_known_values(z: float, expected: float) -> None:
    assert norm_cdf(z) == pytest.approx(expected, rel=1e-6)


def test_norm_cdf_is_total() -> None:
    assert norm_cdf(math.inf) == 1.0
    assert norm_cdf(-math.inf) == 0.0


def test_two_sided_p_value() -> None:
    assert two_sided_p_value(0.0) == pytest.approx(1.0)
    assert two_sided_p_value(1.96) == pytest.approx(0.05, abs=1e-4)
    assert two_sided_p_value(-1.96) == two_sided_p_value(1.96)
    assert two_sided_p_value(math.inf) == 0.0
