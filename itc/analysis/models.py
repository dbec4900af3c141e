from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class InvalidEffectEstimateError(ValueError):
    """Raised when a hazard ratio or CI bound cannot be log-transformed."""

    def __init__(self, field: str, value: float):
        self.field = field
        self.value = value
        super().__init__(
            f"Invalid effect estimate: {field}={value!r} must be a finite number > 0"
        )


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class EffectEstimate(_Record):
    hazard_ratio: float
    ci_lower: float
    ci_upper: float


class IndirectComparisonResult(_Record):
    hr_indirect: float
    ci_lower_95: float
    ci_upper_95: float
    z_score: float
    p_value: float
    is_significant: bool
    favors: Literal["A", "B"] | None  # None only when the indirect HR is exactly 1
    effect_size: float
    interpretation: str


class SensitivityScenario(_Record):
    """One CI-width scenario.

    When a scaled lower bound falls to 0 or below the scenario cannot be
    estimated: `estimable` is False, the CI, z and p fields are None, and
    `note` names the offending bound. The point estimate is still reported.
    """

    scenario: str
    multiplier: float
    estimable: bool = True
    hr_indirect: float
    ci_lower_95: float | None
    ci_upper_95: float | None
    z_score: float | None
    p_value: float | None
    is_significant: bool | None
    favors: Literal["A", "B"] | None
    effect_size: float
    interpretation: str
    note: str | None = None


class BaselineCharacteristicPair(_Record):
    characteristic: str
    value_a: float
    value_b: float
    difference: float
    acceptable: bool
    comment: str


class HomogeneityAssessment(_Record):
    checks: tuple[BaselineCharacteristicPair, ...] = ()
    overall_assessment: Literal["ACCEPTABLE", "CAUTION"]
    recommendation: str


class VerdictKind(str, Enum):
    CROSSES_NULL = "crosses_null"
    FAVORS_A = "favors_a"
    FAVORS_B = "favors_b"
    NO_DIFFERENCE = "no_difference"


class Verdict(_Record):
    kind: VerdictKind
    percent: float | None = None  # relative reduction (A) or increase (B), 0-100 scale


class EffectMagnitude(str, Enum):
    LARGE = "large"
    MODERATE = "moderate"
    SMALL = "small"


class NNTResult(_Record):
    nnt: int
    arr: float  # absolute risk reduction, percent
    timeframe: float  # months
    interpretation: str
