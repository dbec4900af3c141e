"""Plain-language narratives for analysis results (English and Spanish).

Narratives only read core results; they never recompute or alter them.
"""

import logging

from itc.analysis.interpretation import DEFAULT_LANGUAGE, crosses_null, effect_magnitude
from itc.analysis.models import EffectMagnitude, HomogeneityAssessment, IndirectComparisonResult
from itc.models import Narrative, NarrativeSection, SafetyComparison, TrialData

log = logging.getLogger(__name__)

_T = {
    "en": {
        "title": "Adjusted Indirect Comparison (Bucher Method)",
        "main_finding": "Main Finding",
        "significance": "Statistical Significance",
        "effect_size": "Effect Size",
        "ci": "Confidence Interval Interpretation",
        # hazard ratio
        "hr_intro": "The indirect comparison between {a} and {b} yields a hazard ratio (HR) of {hr:.3f}. ",
        "hr_lower": (
            "This means {a} is associated with a **{pct:.1f}% reduction** in the risk of death "
            "(or progression) compared to {b}. In other words, patients treated with {a} are "
            "approximately {pct:.1f}% less likely to experience the event compared to those "
            "treated with {b}."
        ),
        "hr_higher": (
            "This means {a} is associated with a **{pct:.1f}% increase** in risk compared to {b}. "
            "Patients with {a} are {pct:.1f}% more likely to experience the event than those with {b}."
        ),
        "hr_equal": "This suggests no substantial difference between the two treatments in terms of efficacy.",
        # significance
        "p_intro": "The p-value for this comparison is {p}. ",
        "p_significant": (
            "Since this value is **less than 0.05**, the result is **statistically significant**. "
            "This means it's very unlikely (less than 5% chance) that the observed difference is "
            "simply due to chance. We have sufficient statistical evidence to conclude there is a "
            "real difference between treatments."
        ),
        "p_not_significant": (
            "Since this value is **greater than 0.05**, the result is **not statistically "
            "significant**. This means we cannot rule out that the observed difference is simply "
            "due to chance. We do not have sufficient statistical evidence to conclude there is a "
            "real difference between treatments."
        ),
        # effect size
        EffectMagnitude.LARGE: (
            "The effect size is **large**. An HR of {hr:.3f} represents a clinically substantial "
            "difference between treatments. This magnitude of effect is generally considered "
            "clinically relevant and could have an important impact on medical practice."
        ),
        EffectMagnitude.MODERATE: (
            "The effect size is **moderate**. An HR of {hr:.3f} represents an appreciable clinical "
            "difference between treatments. This magnitude of effect may be relevant in clinical "
            "decision-making, though other factors like toxicity and cost should also be considered."
        ),
        EffectMagnitude.SMALL: (
            "The effect size is **small**. An HR of {hr:.3f} represents a modest clinical difference "
            "between treatments. While it may be statistically significant, its clinical relevance "
            "should be carefully evaluated considering other factors like safety profile and cost."
        ),
        # confidence interval
        "ci_intro": "The 95% confidence interval ranges from {lo:.3f} to {up:.3f}. ",
        "ci_crosses": (
            "**Important**: This interval crosses 1.0, meaning the true effect could favor either "
            "treatment. This indicates uncertainty about which treatment is superior and suggests "
            "results should be interpreted cautiously."
        ),
        "ci_below": (
            "This interval is entirely below 1.0, indicating that **with 95% confidence**, the "
            "first treatment is superior to the second. The width of the interval ({w:.3f}) "
            "reflects the precision of our estimate."
        ),
        "ci_above": (
            "This interval is entirely above 1.0, indicating that **with 95% confidence**, the "
            "second treatment is superior to the first. The width of the interval ({w:.3f}) "
            "reflects the precision of our estimate."
        ),
        "ci_reminder": (
            "\n\nRemember: A 95% confidence interval means that if we repeated this analysis many "
            "times with different samples, we would expect 95% of the calculated intervals to "
            "contain the true effect value."
        ),
        # homogeneity
        "homog_similar": (
            "The baseline characteristics of the two trials are **very similar**. This strengthens "
            "the validity of the indirect comparison, as we are comparing similar patient "
            "populations."
        ),
        "homog_unreported": (
            "No baseline characteristic was reported by both trials, so population similarity "
            "could not be verified."
        ),
        "homog_different": (
            "There are **important differences** in baseline characteristics between trials. "
            "This weakens the validity of the indirect comparison, as we are comparing potentially "
            "different populations.\n\nImportant differences:\n"
        ),
        "homog_item": "- {name}: difference of {diff:.1f} units\n",
        "homog_caution": (
            "\n**Results should be interpreted with great caution** due to these differences in "
            "study populations."
        ),
        # safety
        "safety_title": "Safety Comparison:\n\n",
        "safety_similar": (
            "The safety profiles are **similar** between both treatments. The difference in grade "
            "3-5 adverse events is small ({d:.1f}%), suggesting both treatments have comparable "
            "toxicities."
        ),
        "safety_moderate": (
            "There is a **moderate difference** in the safety profile. {safer} shows approximately "
            "{d:.1f}% fewer serious adverse events. This difference should be considered alongside "
            "efficacy when making treatment decisions."
        ),
        "safety_large": (
            "There is a **significant difference** in the safety profile. {safer} shows {d:.1f}% "
            "fewer serious adverse events. This substantial difference in toxicity is an important "
            "factor to consider in treatment selection."
        ),
        "first": "The first treatment",
        "second": "The second treatment",
        "disc_intro": "\n\nThe discontinuation rate differs by {d:.1f}%, ",
        "disc_first": "suggesting the first treatment may be harder to tolerate long-term.",
        "disc_second": "suggesting the second treatment may be harder to tolerate long-term.",
        "disc_small": "which is a small difference and likely not clinically relevant.",
    },
    "es": {
        "title": "Comparación Indirecta Ajustada (Método de Bucher)",
        "main_finding": "Hallazgo Principal",
        "significance": "Significancia Estadística",
        "effect_size": "Magnitud del Efecto",
        "ci": "Interpretación del Intervalo de Confianza",
        "hr_intro": "La comparación indirecta entre {a} y {b} resulta en un hazard ratio (HR) de {hr:.3f}. ",
        "hr_lower": (
            "Esto significa que {a} está asociado con una **reducción del {pct:.1f}%** en el riesgo "
            "de muerte (o progresión) comparado con {b}. En otras palabras, los pacientes tratados "
            "con {a} tienen aproximadamente {pct:.1f}% menos probabilidad de experimentar el evento "
            "comparado con aquellos tratados con {b}."
        ),
        "hr_higher": (
            "Esto significa que {a} está asociado con un **aumento del {pct:.1f}%** en el riesgo "
            "comparado con {b}. Los pacientes con {a} tienen {pct:.1f}% más probabilidad de "
            "experimentar el evento que aquellos con {b}."
        ),
        "hr_equal": "Esto sugiere que no hay diferencia sustancial entre ambos tratamientos en términos de eficacia.",
        "p_intro": "El valor p de esta comparación es {p}. ",
        "p_significant": (
            "Como este valor es **menor que 0.05**, el resultado es **estadísticamente "
            "significativo**. Esto significa que es muy poco probable (menos del 5%) que la "
            "diferencia observada sea simplemente debido al azar. Tenemos evidencia estadística "
            "suficiente para concluir que existe una diferencia real entre los tratamientos."
        ),
        "p_not_significant": (
            "Como este valor es **mayor que 0.05**, el resultado **no es estadísticamente "
            "significativo**. Esto significa que no podemos descartar que la diferencia observada "
            "sea simplemente debido al azar. No tenemos evidencia estadística suficiente para "
            "concluir que existe una diferencia real entre los tratamientos."
        ),
        EffectMagnitude.LARGE: (
            "La magnitud del efecto es **grande**. Un HR de {hr:.3f} representa una diferencia "
            "clínicamente sustancial entre los tratamientos. Esta magnitud de efecto generalmente "
            "se considera relevante desde el punto de vista clínico y podría tener un impacto "
            "importante en la práctica médica."
        ),
        EffectMagnitude.MODERATE: (
            "La magnitud del efecto es **moderada**. Un HR de {hr:.3f} representa una diferencia "
            "clínica apreciable entre los tratamientos. Esta magnitud de efecto puede ser relevante "
            "en la toma de decisiones clínicas, aunque otros factores como la toxicidad y el coste "
            "también deben considerarse."
        ),
        EffectMagnitude.SMALL: (
            "La magnitud del efecto es **pequeña**. Un HR de {hr:.3f} representa una diferencia "
            "clínica modesta entre los tratamientos. Aunque puede ser estadísticamente "
            "significativa, su relevancia clínica debe evaluarse cuidadosamente considerando otros "
            "factores como el perfil de seguridad y el coste."
        ),
        "ci_intro": "El intervalo de confianza del 95% va desde {lo:.3f} hasta {up:.3f}. ",
        "ci_crosses": (
            "**Importante**: Este intervalo cruza el valor 1.0, lo que significa que el verdadero "
            "efecto podría favorecer a cualquiera de los dos tratamientos. Esto indica "
            "incertidumbre sobre cuál tratamiento es superior y sugiere que los resultados deben "
            "interpretarse con precaución."
        ),
        "ci_below": (
            "Este intervalo está completamente por debajo de 1.0, lo que indica que **con 95% de "
            "confianza**, el primer tratamiento es superior al segundo. La amplitud del intervalo "
            "({w:.3f}) refleja el nivel de precisión de nuestra estimación."
        ),
        "ci_above": (
            "Este intervalo está completamente por encima de 1.0, lo que indica que **con 95% de "
            "confianza**, el segundo tratamiento es superior al primero. La amplitud del intervalo "
            "({w:.3f}) refleja el nivel de precisión de nuestra estimación."
        ),
        "ci_reminder": (
            "\n\nRecuerde: Un intervalo de confianza del 95% significa que si repitiéramos este "
            "análisis muchas veces con diferentes muestras, esperaríamos que el 95% de los "
            "intervalos calculados contengan el verdadero valor del efecto."
        ),
        "homog_similar": (
            "Las características basales de los dos ensayos son **muy similares**. Esto fortalece "
            "la validez de la comparación indirecta, ya que estamos comparando poblaciones de "
            "pacientes parecidas."
        ),
        "homog_unreported": (
            "Ninguna característica basal fue reportada por ambos ensayos, por lo que no se pudo "
            "verificar la similitud de las poblaciones."
        ),
        "homog_different": (
            "Existen **diferencias importantes** en las características basales entre los ensayos. "
            "Esto debilita la validez de la comparación indirecta, ya que estamos comparando "
            "poblaciones potencialmente diferentes.\n\nDiferencias importantes:\n"
        ),
        "homog_item": "- {name}: diferencia de {diff:.1f} unidades\n",
        "homog_caution": (
            "\n**Los resultados deben interpretarse con mucha precaución** debido a estas "
            "diferencias en las poblaciones de estudio."
        ),
        "safety_title": "Comparación de Seguridad:\n\n",
        "safety_similar": (
            "Los perfiles de seguridad son **similares** entre ambos tratamientos. La diferencia en "
            "eventos adversos de grado 3-5 es pequeña ({d:.1f}%), lo que sugiere que ambos "
            "tratamientos tienen toxicidades comparables."
        ),
        "safety_moderate": (
            "Existe una **diferencia moderada** en el perfil de seguridad. {safer} presenta "
            "aproximadamente {d:.1f}% menos eventos adversos graves. Esta diferencia debe "
            "considerarse junto con la eficacia al tomar decisiones de tratamiento."
        ),
        "safety_large": (
            "Existe una **diferencia significativa** en el perfil de seguridad. {safer} presenta "
            "{d:.1f}% menos eventos adversos graves. Esta diferencia sustancial en toxicidad es un "
            "factor importante a considerar en la selección del tratamiento."
        ),
        "first": "El primer tratamiento",
        "second": "El segundo tratamiento",
        "disc_intro": "\n\nLa tasa de discontinuación difiere en {d:.1f}%, ",
        "disc_first": "sugiriendo que el primer tratamiento puede ser más difícil de tolerar a largo plazo.",
        "disc_second": "sugiriendo que el segundo tratamiento puede ser más difícil de tolerar a largo plazo.",
        "disc_small": "lo cual es una diferencia pequeña y probablemente no clínicamente relevante.",
    },
}

SUPPORTED_LANGUAGES = tuple(_T)


def _strings(language: str) -> dict:
    if language not in _T:
        log.warning("Unsupported narrative language %r, using %s", language, DEFAULT_LANGUAGE)
    return _T.get(language, _T[DEFAULT_LANGUAGE])


def _format_p(p_value: float) -> str:
    return "<0.0001" if p_value < 0.0001 else f"{p_value:.4f}"


def explain_bucher_results(
    result: IndirectComparisonResult,
    trial_a: TrialData,
    trial_b: TrialData,
    language: str = DEFAULT_LANGUAGE,
) -> Narrative:
    t = _strings(language)
    hr, lo, up = result.hr_indirect, result.ci_lower_95, result.ci_upper_95
    exp_a = trial_a.arms_description.experimental_arm
    exp_b = trial_b.arms_description.experimental_arm

    main = t["hr_intro"].format(a=exp_a, b=exp_b, hr=hr)
    if hr < 1:
        main += t["hr_lower"].format(a=exp_a, b=exp_b, pct=(1 - hr) * 100)
    elif hr > 1:
        main += t["hr_higher"].format(a=exp_a, b=exp_b, pct=(hr - 1) * 100)
    else:
        main += t["hr_equal"]

    significance = t["p_intro"].format(p=_format_p(result.p_value))
    significance += t["p_significant" if result.is_significant else "p_not_significant"]

    effect = t[effect_magnitude(hr)].format(hr=hr)

    ci = t["ci_intro"].format(lo=lo, up=up)
    if crosses_null(lo, up):
        ci += t["ci_crosses"]
    elif up < 1:
        ci += t["ci_below"].format(w=up - lo)
    else:
        ci += t["ci_above"].format(w=up - lo)
    ci += t["ci_reminder"]

    return Narrative(
        title=t["title"],
        sections=[
            NarrativeSection(title=t["main_finding"], content=main),
            NarrativeSection(title=t["significance"], content=significance),
            NarrativeSection(title=t["effect_size"], content=effect),
            NarrativeSection(title=t["ci"], content=ci),
        ],
    )


def explain_homogeneity(assessment: HomogeneityAssessment, language: str = DEFAULT_LANGUAGE) -> str:
    t = _strings(language)
    if not assessment.checks:
        return t["homog_unreported"]
    if assessment.overall_assessment == "ACCEPTABLE":
        return t["homog_similar"]

    text = t["homog_different"]
    for check in assessment.checks:
        if not check.acceptable:
            text += t["homog_item"].format(name=check.characteristic, diff=check.difference)
    return text + t["homog_caution"]


def explain_safety(safety: SafetyComparison, language: str = DEFAULT_LANGUAGE) -> str:
    t = _strings(language)
    ae_diff = safety.grade_3_5_ae_difference
    disc_diff = safety.discontinuation_difference
    # Positive difference: trial A has more grade 3-5 events, so B is safer
    safer = t["second"] if ae_diff > 0 else t["first"]

    text = t["safety_title"]
    if abs(ae_diff) < 5:
        text += t["safety_similar"].format(d=abs(ae_diff))
    elif abs(ae_diff) < 15:
        text += t["safety_moderate"].format(safer=safer, d=abs(ae_diff))
    else:
        text += t["safety_large"].format(safer=safer, d=abs(ae_diff))

    text += t["disc_intro"].format(d=abs(disc_diff))
    # Positive difference: trial A discontinues more often
    if disc_diff > 5:
        text += t["disc_first"]
    elif disc_diff < -5:
        text += t["disc_second"]
    else:
        text += t["disc_small"]
    return text
