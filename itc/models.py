from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from itc.analysis.models import (
    HomogeneityAssessment,
    IndirectComparisonResult,
    NNTResult,
    SensitivityScenario,
)

# ── Trial data schema ──


class _TrialSection(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TrialMetadata(_TrialSection):
    trial_name: str
    nct_id: str | None = None
    publication_year: int | None = None
    indication: str | None = None
    phase: str | None = None


class ArmsDescription(_TrialSection):
    experimental_arm: str
    control_arm: str
    n_experimental: PositiveInt
    n_control: PositiveInt


class BaselineCharacteristics(_TrialSection):
    median_age_exp: float | None = Field(None, ge=0, le=120)
    median_age_ctrl: float | None = Field(None, ge=0, le=120)
    sex_male_percentage_exp: float | None = Field(None, ge=0, le=100)
    sex_male_percentage_ctrl: float | None = Field(None, ge=0, le=100)
    ecog_0_percentage_exp: float | None = Field(None, ge=0, le=100)
    ecog_0_percentage_ctrl: float | None = Field(None, ge=0, le=100)


class PrimaryEndpointData(_TrialSection):
    endpoint_name: str = "Primary Endpoint"
    hazard_ratio: float = Field(gt=0, allow_inf_nan=False)
    ci_lower_95: float = Field(gt=0, allow_inf_nan=False)
    ci_upper_95: float = Field(gt=0, allow_inf_nan=False)
    # Publications often report p-values as text, e.g. "<0.001"
    p_value: Annotated[float, Field(ge=0, le=1)] | str = 0.05
    median_exp_months: float = Field(24.0, gt=0)
    median_ctrl_months: float = Field(18.0, gt=0)


class EfficacyOutcomes(_TrialSection):
    primary_endpoint_data: PrimaryEndpointData
    secondary_endpoints: list | None = None
    primary_endpoint_type: str | None = None


class SafetyToxicity(_TrialSection):
    any_grade_3_5_ae_rate_exp: float | None = Field(None, ge=0, le=100)
    any_grade_3_5_ae_rate_ctrl: float | None = Field(None, ge=0, le=100)
    discontinuation_rate_exp: float | None = Field(None, ge=0, le=100)
    discontinuation_rate_ctrl: float | None = Field(None, ge=0, le=100)
    serious_ae_rate_exp: float | None = Field(None, ge=0, le=100)
    serious_ae_rate_ctrl: float | None = Field(None, ge=0, le=100)


class TrialData(_TrialSection):
    trial_metadata: TrialMetadata
    arms_description: ArmsDescription
    baseline_characteristics: BaselineCharacteristics | None = None
    efficacy_outcomes: EfficacyOutcomes
    safety_toxicity: SafetyToxicity | None = None

    @property
    def primary_endpoint(self) -> PrimaryEndpointData:
        return self.efficacy_outcomes.primary_endpoint_data


# ── Validation / quality ──


class FieldError(BaseModel):
    field: str
    message: str


class DataQuality(BaseModel):
    score: int = 100
    issues: list[str] = []
    warnings: list[str] = []


class ComparatorValidation(BaseModel):
    valid: bool
    control_a: str
    control_b: str
    warning: str | None = None


class SafetyComparison(BaseModel):
    grade_3_5_ae_difference: float
    discontinuation_difference: float


# ── Narratives ──


class NarrativeSection(BaseModel):
    title: str
    content: str


class Narrative(BaseModel):
    title: str
    sections: list[NarrativeSection] = []


class NarrativeExplanations(BaseModel):
    language: str
    bucher_results: Narrative
    homogeneity: str
    safety: str


# ── API requests / responses ──


class CompareRequest(BaseModel):
    # Kept as raw dicts so per-field validation errors can be reported per trial
    trial_a: dict | None = None
    trial_b: dict | None = None


class ValidateRequest(BaseModel):
    trial_data: dict | None = None


class NNTRequest(BaseModel):
    hazard_ratio: float = Field(gt=0)
    median_survival_months: float = Field(gt=0)
    timeframe_months: float = Field(12, gt=0)


class TrialQuality(BaseModel):
    trial_a: DataQuality
    trial_b: DataQuality


class AnalysisResponse(BaseModel):
    success: bool = True
    timestamp: str
    trial_a: TrialData
    trial_b: TrialData
    comparison_result: IndirectComparisonResult
    homogeneity_assessment: HomogeneityAssessment
    sensitivity_analysis: list[SensitivityScenario]
    data_quality: TrialQuality
    comparator_validation: ComparatorValidation
    warnings: list[str] = []
    narrative_explanations: NarrativeExplanations


class ValidateResponse(BaseModel):
    success: bool = True
    valid: bool
    errors: list[FieldError] = []
    data: TrialData | None = None
    data_quality: DataQuality | None = None


class NNTResponse(BaseModel):
    success: bool = True
    result: NNTResult | None = None
