"""Trial data validation and data-quality checks run before the analysis core."""

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from itc.models import ComparatorValidation, DataQuality, FieldError, SafetyComparison, TrialData

log = logging.getLogger(__name__)

# Control-arm keywords that identify a shared comparator across trials
COMMON_COMPARATOR_TERMS = ("placebo", "standard of care", "soc", "best supportive care", "bsc")

_REQUIRED_BASELINE = ("median_age_exp", "sex_male_percentage_exp", "ecog_0_percentage_exp")

_NARROW_CI_WIDTH = 0.1
_WIDE_CI_WIDTH = 10
_MIN_SAMPLE_SIZE = 50


def field_errors(errors: Iterable[dict], skip: tuple[str, ...] = ()) -> list[FieldError]:
    """Flatten pydantic error dicts to dotted field paths, dropping leading `skip` parts."""
    result = []
    for err in errors:
        loc = list(err["loc"])
        if loc and loc[0] in skip:
            loc = loc[1:]
        result.append(FieldError(field=".".join(str(p) for p in loc), message=err["msg"]))
    return result


def validate_trial_data(data: Any) -> tuple[TrialData | None, list[FieldError]]:
    """Parse raw trial JSON. Returns (trial, []) or (None, errors)."""
    try:
        return TrialData.model_validate(data), []
    except ValidationError as exc:
        errors = field_errors(exc.errors())
        log.warning("Trial data failed validation (%d errors)", len(errors))
        return None, errors


def validate_common_comparator(trial_a: TrialData, trial_b: TrialData) -> ComparatorValidation:
    control_a = trial_a.arms_description.control_arm
    control_b = trial_b.arms_description.control_arm
    a, b = control_a.lower(), control_b.lower()

    has_common_term = any(term in a and term in b for term in COMMON_COMPARATOR_TERMS)
    identical = a == b

    warning = None
    if not has_common_term and not identical:
        warning = "Comparators may not be identical. Results should be interpreted with caution."
    return ComparatorValidation(
        valid=has_common_term or identical,
        control_a=control_a,
        control_b=control_b,
        warning=warning,
    )


def assess_data_quality(trial: TrialData) -> DataQuality:
    quality = DataQuality()

    baseline = trial.baseline_characteristics.model_dump() if trial.baseline_characteristics else {}
    missing = [f for f in _REQUIRED_BASELINE if baseline.get(f) is None]
    if missing:
        quality.score -= 10 * len(missing)
        quality.warnings.append(f"Missing baseline characteristics: {', '.join(missing)}")

    ep = trial.primary_endpoint
    if ep.ci_lower_95 >= ep.hazard_ratio or ep.ci_upper_95 <= ep.hazard_ratio:
        quality.score -= 30
        quality.issues.append("Invalid confidence interval: HR not within CI bounds")

    ci_width = ep.ci_upper_95 - ep.ci_lower_95
    if ci_width < _NARROW_CI_WIDTH:
        quality.warnings.append("Unusually narrow confidence interval detected")
    elif ci_width > _WIDE_CI_WIDTH:
        quality.warnings.append("Very wide confidence interval suggests high uncertainty")

    arms = trial.arms_description
    if arms.n_experimental + arms.n_control < _MIN_SAMPLE_SIZE:
        quality.score -= 20
        quality.warnings.append("Small sample size (n < 50) may limit reliability")

    return quality


def compare_safety(trial_a: TrialData, trial_b: TrialData) -> SafetyComparison:
    """Experimental-arm safety differences, trial A minus trial B (missing rates count as 0)."""

    def rate(trial: TrialData, field: str) -> float:
        if trial.safety_toxicity is None:
            return 0.0
        return getattr(trial.safety_toxicity, field) or 0.0

    return SafetyComparison(
        grade_3_5_ae_difference=(
            rate(trial_a, "any_grade_3_5_ae_rate_exp") - rate(trial_b, "any_grade_3_5_ae_rate_exp")
        ),
        discontinuation_difference=(
            rate(trial_a, "discontinuation_rate_exp") - rate(trial_b, "discontinuation_rate_exp")
        ),
    )
