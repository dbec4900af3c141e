"""Standard normal distribution helpers."""

from scipy import stats


def norm_cdf(z: float) -> float:
    """Cumulative distribution function of N(0, 1) evaluated at z.

    Defined for every real z, including +/-inf.
    """
    return float(stats.norm.cdf(z))


def two_sided_p_value(z: float) -> float:
    """Two-sided Wald p-value: 2 * (1 - Phi(|z|))."""
    return 2 * (1 - norm_cdf(abs(z)))
