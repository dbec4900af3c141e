"""Sensitivity of the indirect comparison to the width of the input CIs."""

from itc.analysis import register
from itc.analysis.bucher import calculate_bucher
from itc.analysis.models import (
    IndirectComparisonResult,
    InvalidEffectEstimateError,
    SensitivityScenario,
)

# Order matters: reports expect the base case first.
SCENARIOS: tuple[tuple[str, float], ...] = (
    ("Base Case", 1.0),
    ("Narrow CI (Conservative)", 0.8),
    ("Wide CI (Liberal)", 1.2),
)

_NOT_ESTIMABLE = "Not estimable: scaled {field} would be {value:.4f}, a CI bound must stay above 0."


def _scale_ci(hr: float, low: float, up: float, multiplier: float) -> tuple[float, float]:
    """Stretch each half-width of the CI by `multiplier`, keeping the point estimate."""
    return hr - (hr - low) * multiplier, hr + (up - hr) * multiplier


def _estimated(name: str, multiplier: float, result: IndirectComparisonResult) -> SensitivityScenario:
    return SensitivityScenario(scenario=name, multiplier=multiplier, **result.model_dump())


def _not_estimable(
    name: str,
    multiplier: float,
    base: IndirectComparisonResult,
    exc: InvalidEffectEstimateError,
) -> SensitivityScenario:
    # The point estimate does not depend on CI width, so it is taken from the base case
    note = _NOT_ESTIMABLE.format(field=exc.field, value=exc.value)
    return SensitivityScenario(
        scenario=name,
        multiplier=multiplier,
        estimable=False,
        hr_indirect=base.hr_indirect,
        ci_lower_95=None,
        ci_upper_95=None,
        z_score=None,
        p_value=None,
        is_significant=None,
        favors=base.favors,
        effect_size=base.effect_size,
        interpretation=note,
        note=note,
    )


def sensitivity_analysis(
    hr_a: float,
    low_a: float,
    up_a: float,
    hr_b: float,
    low_b: float,
    up_b: float,
) -> list[SensitivityScenario]:
    """Re-run the Bucher comparison for each scenario in SCENARIOS, in order.

    Invalid original inputs raise InvalidEffectEstimateError. A scenario whose
    scaled bounds leave the positive range is returned as not estimable.
    """
    base = calculate_bucher(hr_a, low_a, up_a, hr_b, low_b, up_b)
    results = []
    for name, multiplier in SCENARIOS:
        if multiplier == 1.0:
            results.append(_estimated(name, multiplier, base))
            continue
        adj_low_a, adj_up_a = _scale_ci(hr_a, low_a, up_a, multiplier)
        adj_low_b, adj_up_b = _scale_ci(hr_b, low_b, up_b, multiplier)
        try:
            result = calculate_bucher(hr_a, adj_low_a, adj_up_a, hr_b, adj_low_b, adj_up_b)
        except InvalidEffectEstimateError as exc:
            results.append(_not_estimable(name, multiplier, base, exc))
        else:
            results.append(_estimated(name, multiplier, result))
    return results


@register("sensitivity")
def sensitivity(params: dict) -> list[SensitivityScenario]:
    return sensitivity_analysis(
        params["hr_a"], params["low_a"], params["up_a"],
        params["hr_b"], params["low_b"], params["up_b"],
    )
