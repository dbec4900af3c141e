import pytest

from itc.analysis.interpretation import (
    classify,
    crosses_null,
    describe,
    effect_magnitude,
    favored_treatment,
    is_significant,
)
from itc.analysis.models import EffectMagnitude, Verdict, VerdictKind


@pytest.mark.parametrize(
    ("hr", "expected"),
    [
        (0.69, EffectMagnitude.LARGE),
        (0.7, EffectMagnitude.MODERATE),
        (0.84, EffectMagnitude.MODERATE),
        (0.85, EffectMagnitude.SMALL),
        (1.0, EffectMagnitude.SMALL),
        (1.18, EffectMagnitude.SMALL),
        (1.19, EffectMagnitude.MODERATE),
        (1.43, EffectMagnitude.MODERATE),
        (1.44, EffectMagnitude.LARGE),
    ],
)
def test_effect_magnitude_thresholds(hr: float, expected: EffectMagnitude) -> None:
    assert effect_magnitude(hr) is expected


def test_is_significant_is_strict() -> None:
    assert is_significant(0.049999)
    assert not is_significant(0.05)


@pytest.mark.parametrize(
    ("lo", "up", "expected"),
    [(0.9, 1.1, True), (0.5, 1.0, False), (1.0, 1.5, False), (0.4, 0.8, False)],
)
def test_crosses_null(lo: float, up: float, expected: bool) -> None:
    assert crosses_null(lo, up) is expected


def test_classify_variants() -> None:
    assert classify(0.95, 0.8, 1.1).kind is VerdictKind.CROSSES_NULL
    favors_a = classify(0.8, 0.6, 0.95)
    assert favors_a.kind is VerdictKind.FAVORS_A
    assert favors_a.percent == pytest.approx(20.0)
    favors_b = classify(1.5, 1.2, 1.9)
    assert favors_b.kind is VerdictKind.FAVORS_B
    assert favors_b.percent == pytest.approx(50.0)
    assert classify(1.0, 1.0, 1.0).kind is VerdictKind.NO_DIFFERENCE


def test_describe_mentions_non_significance() -> None:
    text = describe(Verdict(kind=VerdictKind.FAVORS_A, percent=12.34), p_value=0.2)
    assert text == (
        "Treatment A shows a 12.3% relative risk reduction compared to Treatment B. "
        "However, this difference is not statistically significant."
    )


def test_describe_in_spanish() -> None:
    text = describe(Verdict(kind=VerdictKind.FAVORS_B, percent=25.0), p_value=0.01, language="es")
    assert "El Tratamiento B muestra un beneficio relativo del 25.0%" in text
    assert text.endswith("estadísticamente significativa (p < 0.05).")


def test_describe_unknown_language_falls_back_to_english() -> None:
    text = describe(Verdict(kind=VerdictKind.CROSSES_NULL), p_value=0.5, language="fr")
    assert text.startswith("No statistically significant difference detected.")


@pytest.mark.parametrize(("hr", "expected"), [(0.9999, "A"), (1.0, None), (1.0001, "B")])
def test_favored_treatment(hr: float, expected: str | None) -> None:
    assert favored_treatment(hr) == expected
