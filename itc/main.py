import logging
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from itc.analysis import available_analyses, run_analysis
from itc.analysis.models import InvalidEffectEstimateError
from itc.config import settings
from itc.models import (
    AnalysisResponse,
    CompareRequest,
    NarrativeExplanations,
    NNTRequest,
    NNTResponse,
    TrialData,
    TrialQuality,
    ValidateRequest,
    ValidateResponse,
)
from itc.narrative import SUPPORTED_LANGUAGES, explain_bucher_results, explain_homogeneity, explain_safety
from itc.validation import (
    assess_data_quality,
    compare_safety,
    field_errors,
    validate_common_comparator,
    validate_trial_data,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(title=settings.api.title, version=settings.api.version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _effect_params(trial_a: TrialData, trial_b: TrialData) -> dict:
    ep_a, ep_b = trial_a.primary_endpoint, trial_b.primary_endpoint
    return {
        "hr_a": ep_a.hazard_ratio,
        "low_a": ep_a.ci_lower_95,
        "up_a": ep_a.ci_upper_95,
        "hr_b": ep_b.hazard_ratio,
        "low_b": ep_b.ci_lower_95,
        "up_b": ep_b.ci_upper_95,
    }


def _parse_trial(raw: dict, label: str) -> TrialData:
    trial, errors = validate_trial_data(raw)
    if trial is None:
        log.warning("Trial %s validation failed: %s", label, [e.model_dump() for e in errors])
        raise HTTPException(
            status_code=400,
            detail={
                "error": f"Invalid trial {label} data",
                "details": [e.model_dump() for e in errors],
                "hint": "Please check that all required fields are present and properly formatted",
            },
        )
    return trial


@app.middleware("http")
async def log_requests(request: Request, call_next):
    log.info("%s %s", request.method, request.url.path)
    return await call_next(request)


def _error_response(status_code: int, error: str, details=None, **extra) -> JSONResponse:
    """Every error body has the same shape: success, error, details (plus optional hint)."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "details": details, **extra},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        extra = dict(exc.detail)
        error = extra.pop("error", "Request failed")
        details = extra.pop("details", None)
        return _error_response(exc.status_code, error, details, **extra)
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = field_errors(exc.errors(), skip=("body", "query"))
    log.warning("Invalid request to %s: %s", request.url.path, [e.model_dump() for e in errors])
    return _error_response(400, "Invalid request", [e.model_dump() for e in errors])


@app.exception_handler(InvalidEffectEstimateError)
async def invalid_effect_estimate_handler(request: Request, exc: InvalidEffectEstimateError):
    log.warning("Rejected effect estimate on %s: %s", request.url.path, exc)
    return _error_response(400, str(exc), [{"field": exc.field, "message": str(exc)}])


@app.get("/")
async def index():
    return {
        "name": settings.api.title,
        "version": settings.api.version,
        "description": "Clinical Trial Indirect Treatment Comparison Analysis Platform",
        "endpoints": {
            "health": "GET /api/analysis/health",
            "compare": "POST /api/analysis/compare",
            "validate": "POST /api/analysis/validate",
            "nnt": "POST /api/analysis/nnt",
        },
    }


@app.get("/api/analysis/health")
async def health():
    return {
        "success": True,
        "status": "healthy",
        "timestamp": _now(),
        "version": settings.api.version,
        "analyses": available_analyses(),
    }


@app.post("/api/analysis/compare", response_model=AnalysisResponse)
async def compare(req: CompareRequest, lang: str | None = None):
    if not req.trial_a or not req.trial_b:
        raise HTTPException(
            status_code=400,
            detail={"error": "Both trial_a and trial_b data are required"},
        )

    trial_a = _parse_trial(req.trial_a, "A")
    trial_b = _parse_trial(req.trial_b, "B")

    comparator = validate_common_comparator(trial_a, trial_b)
    if not comparator.valid:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Trials do not share a common comparator",
                "details": comparator.model_dump(),
            },
        )

    quality_a = assess_data_quality(trial_a)
    quality_b = assess_data_quality(trial_b)

    params = _effect_params(trial_a, trial_b)
    comparison = run_analysis("bucher", params)
    sensitivity = run_analysis("sensitivity", params)
    homogeneity = run_analysis(
        "homogeneity",
        {
            "baseline_a": trial_a.baseline_characteristics.model_dump()
            if trial_a.baseline_characteristics else {},
            "baseline_b": trial_b.baseline_characteristics.model_dump()
            if trial_b.baseline_characteristics else {},
        },
    )

    language = lang if lang in SUPPORTED_LANGUAGES else settings.default_language
    safety = compare_safety(trial_a, trial_b)
    narratives = NarrativeExplanations(
        language=language,
        bucher_results=explain_bucher_results(comparison, trial_a, trial_b, language),
        homogeneity=explain_homogeneity(homogeneity, language),
        safety=explain_safety(safety, language),
    )

    warnings = [comparator.warning] if comparator.warning else []
    warnings += quality_a.warnings + quality_b.warnings
    warnings += [
        f"Sensitivity scenario '{s.scenario}': {s.note}" for s in sensitivity if not s.estimable
    ]

    return AnalysisResponse(
        timestamp=_now(),
        trial_a=trial_a,
        trial_b=trial_b,
        comparison_result=comparison,
        homogeneity_assessment=homogeneity,
        sensitivity_analysis=sensitivity,
        data_quality=TrialQuality(trial_a=quality_a, trial_b=quality_b),
        comparator_validation=comparator,
        warnings=warnings,
        narrative_explanations=narratives,
    )


@app.post("/api/analysis/validate", response_model=ValidateResponse)
async def validate(req: ValidateRequest):
    if not req.trial_data:
        raise HTTPException(
            status_code=400,
            detail={"error": "trial_data is required"},
        )
    trial, errors = validate_trial_data(req.trial_data)
    if trial is None:
        return ValidateResponse(valid=False, errors=errors)
    return ValidateResponse(valid=True, data=trial, data_quality=assess_data_quality(trial))


@app.post("/api/analysis/nnt", response_model=NNTResponse)
async def nnt(req: NNTRequest):
    return NNTResponse(result=run_analysis("nnt", req.model_dump()))


def run() -> None:
    import uvicorn

    log.info("Starting %s on %s:%d", settings.api.title, settings.api.host, settings.api.port)
    uvicorn.run(app, host=settings.api.host, port=settings.api.port)


if __name__ == "__main__":
    run()
