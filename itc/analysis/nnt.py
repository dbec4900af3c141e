"""Number needed to treat from a hazard ratio."""

import math

from itc.analysis import register
from itc.analysis.models import NNTResult


def calculate_nnt(
    hr: float,
    median_survival_months: float,
    timeframe_months: float = 12,
) -> NNTResult | None:
    """Approximate NNT at `timeframe_months` under an exponential survival model.

    The control hazard is derived from the control-arm median survival
    (S(t) = exp(-lambda * t), S(median) = 0.5); the treated hazard is the
    control hazard scaled by `hr`. Returns None when treatment shows no
    absolute benefit.
    """
    if hr <= 0 or median_survival_months <= 0 or timeframe_months <= 0:
        raise ValueError("hr, median_survival_months and timeframe_months must be > 0")

    lambda_control = math.log(2) / median_survival_months
    lambda_treatment = lambda_control * hr

    survival_control = math.exp(-lambda_control * timeframe_months)
    survival_treatment = math.exp(-lambda_treatment * timeframe_months)
    absolute_risk_reduction = survival_treatment - survival_control

    if absolute_risk_reduction <= 0:
        return None

    nnt = round(1 / absolute_risk_reduction)
    return NNTResult(
        nnt=nnt,
        arr=round(absolute_risk_reduction * 100, 2),
        timeframe=timeframe_months,
        interpretation=(
            f"Approximately {nnt} patients need to be treated for {timeframe_months:g} "
            "months to prevent one additional event."
        ),
    )


@register("nnt")
def nnt_analysis(params: dict) -> NNTResult | None:
    return calculate_nnt(
        params["hazard_ratio"],
        params["median_survival_months"],
        params.get("timeframe_months", 12),
    )
