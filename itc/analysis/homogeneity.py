"""Cross-trial baseline homogeneity check."""

from collections.abc import Mapping
from dataclasses import dataclass

from itc.analysis import register
from itc.analysis.models import BaselineCharacteristicPair, HomogeneityAssessment


@dataclass(frozen=True)
class _Characteristic:
    label: str
    key: str
    threshold: float
    unit: str


CHARACTERISTICS = (
    _Characteristic("Median Age", "median_age_exp", 5, " years"),
    _Characteristic("Male %", "sex_male_percentage_exp", 10, "%"),
    _Characteristic("ECOG 0 %", "ecog_0_percentage_exp", 15, "%"),
)

RECOMMENDATIONS = {
    "ACCEPTABLE": "Populations are sufficiently similar for indirect comparison.",
    "CAUTION": "Notable differences exist. Results should be interpreted with caution.",
}


def _compare(char: _Characteristic, value_a: float, value_b: float) -> BaselineCharacteristicPair:
    difference = abs(value_a - value_b)
    acceptable = difference < char.threshold
    if acceptable:
        comment = "Similar"
    else:
        comment = f"Notable difference (>{char.threshold}{char.unit})"
    return BaselineCharacteristicPair(
        characteristic=char.label,
        value_a=value_a,
        value_b=value_b,
        difference=difference,
        acceptable=acceptable,
        comment=comment,
    )


def assess_homogeneity(
    baseline_a: Mapping[str, float | None],
    baseline_b: Mapping[str, float | None],
) -> HomogeneityAssessment:
    """Compare baseline characteristics reported by both trials.

    A characteristic is only checked when both trials report it. Missing keys
    and None values count as unreported; 0.0 is a real measurement.
    """
    checks: list[BaselineCharacteristicPair] = []
    for char in CHARACTERISTICS:
        value_a = baseline_a.get(char.key)
        value_b = baseline_b.get(char.key)
        if value_a is None or value_b is None:
            continue
        checks.append(_compare(char, float(value_a), float(value_b)))

    overall = "ACCEPTABLE" if all(c.acceptable for c in checks) else "CAUTION"
    return HomogeneityAssessment(
        checks=tuple(checks),
        overall_assessment=overall,
        recommendation=RECOMMENDATIONS[overall],
    )


@register("homogeneity")
def homogeneity_analysis(params: dict) -> HomogeneityAssessment:
    return assess_homogeneity(params.get("baseline_a") or {}, params.get("baseline_b") or {})
