"""Rounding policy for values leaving the analysis core.

Intermediate math is never rounded; these helpers are applied once, when a
result record is built, so repeated calls (e.g. sensitivity scenarios) do not
compound rounding error.
"""

import math

RATIO_DECIMALS = 4  # hazard ratios, CI bounds, z-scores, effect sizes
P_VALUE_DECIMALS = 6


def round_ratio(value: float) -> float:
    if not math.isfinite(value):
        return value
    return round(value, RATIO_DECIMALS)


def round_p_value(value: float) -> float:
    return round(value, P_VALUE_DECIMALS)
