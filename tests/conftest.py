import copy

import pytest

_BASE_TRIAL = {
    "trial_metadata": {"trial_name": "KEYNOTE-A", "nct_id": "NCT00000001", "phase": "III"},
    "arms_description": {
        "experimental_arm": "Drug A",
        "control_arm": "Placebo",
        "n_experimental": 300,
        "n_control": 300,
    },
    "baseline_characteristics": {
        "median_age_exp": 62.0,
        "sex_male_percentage_exp": 55.0,
        "ecog_0_percentage_exp": 45.0,
    },
    "efficacy_outcomes": {
        "primary_endpoint_data": {
            "endpoint_name": "Overall Survival",
            "hazard_ratio": 0.49,
            "ci_lower_95": 0.38,
            "ci_upper_95": 0.64,
            "p_value": "<0.001",
        },
    },
    "safety_toxicity": {
        "any_grade_3_5_ae_rate_exp": 30.0,
        "discontinuation_rate_exp": 10.0,
    },
}


def _merge(base: dict, overrides: dict) -> dict:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


@pytest.fixture
def make_trial():
    """Build raw trial JSON, deep-merging `overrides` into a valid default."""

    def factory(**overrides) -> dict:
        return _merge(copy.deepcopy(_BASE_TRIAL), overrides)

    return factory


@pytest.fixture
def trial_pair(make_trial) -> tuple[dict, dict]:
    trial_a = make_trial()
    trial_b = make_trial(
        trial_metadata={"trial_name": "CHECKMATE-B"},
        arms_description={"experimental_arm": "Drug B", "control_arm": "placebo + BSC"},
        baseline_characteristics={"median_age_exp": 64.0, "sex_male_percentage_exp": 60.0},
        efficacy_outcomes={
            "primary_endpoint_data": {"hazard_ratio": 0.70, "ci_lower_95": 0.55, "ci_upper_95": 0.89}
        },
        safety_toxicity={"any_grade_3_5_ae_rate_exp": 12.0, "discontinuation_rate_exp": 8.0},
    )
    return trial_a, trial_b
