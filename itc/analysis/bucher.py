"""Bucher adjusted indirect comparison.

Two trials, A vs C and B vs C, each report a hazard ratio with a 95% CI.
The indirect A vs B estimate is the difference of the log hazard ratios,
with variances pooled under independence:

    se       = (ln(upper) - ln(lower)) / 3.92
    ln(HR)   = ln(HR_A) - ln(HR_B)
    se_diff  = sqrt(se_A^2 + se_B^2)
    z        = ln(HR) / se_diff

The standard error back-derivation assumes each CI is symmetric on the log
scale around its point estimate.
"""

import math
from numbers import Real

from itc.analysis import register
from itc.analysis.distribution import two_sided_p_value
from itc.analysis.interpretation import classify, describe, favored_treatment, is_significant
from itc.analysis.models import IndirectComparisonResult, InvalidEffectEstimateError
from itc.analysis.rounding import round_p_value, round_ratio

Z_95 = 1.96
CI_WIDTH_Z = 2 * Z_95  # 3.92


def _log(field: str, value: float) -> float:
    if not isinstance(value, Real) or not math.isfinite(value) or value <= 0:
        raise InvalidEffectEstimateError(field, value)
    return math.log(value)


def _standard_error(lower: float, upper: float, prefix: str) -> float:
    return (_log(f"{prefix}_upper", upper) - _log(f"{prefix}_lower", lower)) / CI_WIDTH_Z


def calculate_bucher(
    hr_a: float,
    low_a: float,
    up_a: float,
    hr_b: float,
    low_b: float,
    up_b: float,
) -> IndirectComparisonResult:
    """Indirect hazard ratio of A vs B through their common comparator.

    Raises InvalidEffectEstimateError if any input is not a finite positive
    number. CI ordering is not checked here.
    """
    ln_hr_a = _log("hr_a", hr_a)
    ln_hr_b = _log("hr_b", hr_b)
    se_a = _standard_error(low_a, up_a, "ci_a")
    se_b = _standard_error(low_b, up_b, "ci_b")

    diff_ln_hr = ln_hr_a - ln_hr_b
    se_diff = math.sqrt(se_a**2 + se_b**2)

    hr_indirect = math.exp(diff_ln_hr)
    ci_lower = math.exp(diff_ln_hr - Z_95 * se_diff)
    ci_upper = math.exp(diff_ln_hr + Z_95 * se_diff)

    if se_diff > 0:
        z_score = diff_ln_hr / se_diff
    elif diff_ln_hr == 0:
        z_score = 0.0
    else:
        # Degenerate zero-width CIs: infinitely precise, non-null estimate
        z_score = math.copysign(math.inf, diff_ln_hr)
    p_value = two_sided_p_value(z_score)

    # Same quantity as the verdict
    favors = favored_treatment(hr_indirect)
    verdict = classify(hr_indirect, ci_lower, ci_upper)

    return IndirectComparisonResult(
        hr_indirect=round_ratio(hr_indirect),
        ci_lower_95=round_ratio(ci_lower),
        ci_upper_95=round_ratio(ci_upper),
        z_score=round_ratio(z_score),
        p_value=round_p_value(p_value),
        is_significant=is_significant(p_value),
        favors=favors,
        effect_size=round_ratio(abs(1 - hr_indirect)),
        interpretation=describe(verdict, p_value),
    )


@register("bucher")
def bucher_analysis(params: dict) -> IndirectComparisonResult:
    return calculate_bucher(
        params["hr_a"], params["low_a"], params["up_a"],
        params["hr_b"], params["low_b"], params["up_b"],
    )
