"""Qualitative labels derived from an indirect comparison.

Everything here is a pure function of numbers already computed by the
Bucher comparator. Text rendering is kept separate from classification so
narratives in other languages can reuse the same verdicts.
"""

from typing import Literal

from itc.analysis.models import EffectMagnitude, Verdict, VerdictKind

SIGNIFICANCE_LEVEL = 0.05

# Used for any language without its own text table
DEFAULT_LANGUAGE = "en"

# Symmetric around 1.0 on the ratio scale (1/0.7 ~ 1.43, 1/0.85 ~ 1.18)
_LARGE_BELOW, _LARGE_ABOVE = 0.7, 1.43
_MODERATE_BELOW, _MODERATE_ABOVE = 0.85, 1.18


def is_significant(p_value: float) -> bool:
    return p_value < SIGNIFICANCE_LEVEL


def favored_treatment(hr: float) -> Literal["A", "B"] | None:
    """Treatment with the lower hazard, or None when the ratio is exactly 1."""
    if hr < 1:
        return "A"
    if hr > 1:
        return "B"
    return None


def crosses_null(ci_lower: float, ci_upper: float) -> bool:
    """True when the CI straddles 1.0, i.e. the direction of effect is uncertain."""
    return ci_lower < 1 and ci_upper > 1


def effect_magnitude(hr: float) -> EffectMagnitude:
    if hr < _LARGE_BELOW or hr > _LARGE_ABOVE:
        return EffectMagnitude.LARGE
    if hr < _MODERATE_BELOW or hr > _MODERATE_ABOVE:
        return EffectMagnitude.MODERATE
    return EffectMagnitude.SMALL


def classify(hr: float, ci_lower: float, ci_upper: float) -> Verdict:
    if crosses_null(ci_lower, ci_upper):
        return Verdict(kind=VerdictKind.CROSSES_NULL)
    if hr < 1:
        return Verdict(kind=VerdictKind.FAVORS_A, percent=(1 - hr) * 100)
    if hr > 1:
        return Verdict(kind=VerdictKind.FAVORS_B, percent=(hr - 1) * 100)
    return Verdict(kind=VerdictKind.NO_DIFFERENCE)


_TEXT = {
    "en": {
        VerdictKind.CROSSES_NULL: (
            "No statistically significant difference detected. The confidence interval "
            "crosses 1.0, indicating uncertainty in the direction of effect."
        ),
        VerdictKind.FAVORS_A: (
            "Treatment A shows a {pct:.1f}% relative risk reduction compared to Treatment B. "
        ),
        VerdictKind.FAVORS_B: (
            "Treatment B shows a {pct:.1f}% relative benefit compared to Treatment A. "
        ),
        VerdictKind.NO_DIFFERENCE: (
            "No substantial difference between Treatment A and Treatment B."
        ),
        "significant": "This difference is statistically significant (p < 0.05).",
        "not_significant": "However, this difference is not statistically significant.",
    },
    "es": {
        VerdictKind.CROSSES_NULL: (
            "No se detectó una diferencia estadísticamente significativa. El intervalo de "
            "confianza cruza 1.0, lo que indica incertidumbre en la dirección del efecto."
        ),
        VerdictKind.FAVORS_A: (
            "El Tratamiento A muestra una reducción relativa del riesgo del {pct:.1f}% "
            "comparado con el Tratamiento B. "
        ),
        VerdictKind.FAVORS_B: (
            "El Tratamiento B muestra un beneficio relativo del {pct:.1f}% "
            "comparado con el Tratamiento A. "
        ),
        VerdictKind.NO_DIFFERENCE: (
            "No hay diferencia sustancial entre el Tratamiento A y el Tratamiento B."
        ),
        "significant": "Esta diferencia es estadísticamente significativa (p < 0.05).",
        "not_significant": "Sin embargo, esta diferencia no es estadísticamente significativa.",
    },
}

SUPPORTED_LANGUAGES = tuple(_TEXT)


def describe(verdict: Verdict, p_value: float, language: str = DEFAULT_LANGUAGE) -> str:
    """Render a verdict as a one- or two-sentence interpretation.

    Unknown languages fall back to DEFAULT_LANGUAGE.
    """
    text = _TEXT.get(language, _TEXT[DEFAULT_LANGUAGE])
    if verdict.kind in (VerdictKind.CROSSES_NULL, VerdictKind.NO_DIFFERENCE):
        return text[verdict.kind]
    sentence = text[verdict.kind].format(pct=verdict.percent)
    return sentence + text["significant" if is_significant(p_value) else "not_significant"]
