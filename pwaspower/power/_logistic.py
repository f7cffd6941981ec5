"""Power calculations for logistic regression (odds ratios).

Cohort and cross-sectional designs use Hsieh's variance for a continuous
predictor, ``1 / (n * p * (1 - p))``. Case-control designs use
``1/cases + 1/controls``.

Validates against: Hsieh, Bloch & Larsen (1998).
"""

from __future__ import annotations

import math

from pwaspower.power._common import (
    _exp_effect,
    _is_probability,
    _sanitize_r2,
    _wald_power,
    _z_sum,
)


def logistic_se(sample_size: float, prevalence: float, covariate_r2: float = 0.0) -> float:
    """SE of log(OR) from total sample size and outcome prevalence."""
    if sample_size <= 0 or not _is_probability(prevalence):
        return math.inf
    r2 = _sanitize_r2(covariate_r2)
    return 1.0 / math.sqrt(sample_size * prevalence * (1.0 - prevalence) * (1.0 - r2))


def logistic_case_control_se(cases: float, controls: float, covariate_r2: float = 0.0) -> float:
    """SE of log(OR) from case and control counts."""
    if cases <= 0 or controls <= 0:
        return math.inf
    r2 = _sanitize_r2(covariate_r2)
    return math.sqrt((1.0 / cases + 1.0 / controls) / (1.0 - r2))


def _logistic_design_se(
    sample_size: float,
    prevalence: float,
    cases: float | None,
    controls: float | None,
    covariate_r2: float,
) -> float:
    if cases is not None and controls is not None:
        return logistic_case_control_se(cases, controls, covariate_r2)
    return logistic_se(sample_size, prevalence, covariate_r2)


def logistic_power(
    odds_ratio: float,
    sample_size: float,
    prevalence: float,
    alpha: float,
    *,
    cases: float | None = None,
    controls: float | None = None,
    covariate_r2: float = 0.0,
) -> float:
    """Two-sided power to detect ``odds_ratio``.

    Parameters
    ----------
    odds_ratio : float
        OR per 1 SD of protein level. 1.0 is the null.
    sample_size, prevalence : float
        Cohort/cross-sectional parameters. Ignored when both ``cases`` and
        ``controls`` are given.
    alpha : float
        Per-test significance level.
    cases, controls : float, optional
        Case-control counts.
    covariate_r2 : float
        R^2 of protein ~ adjustment covariates.

    Returns
    -------
    float
        Power in [0, 1]; 0 for invalid inputs.
    """
    if odds_ratio <= 0 or not _is_probability(alpha):
        return 0.0
    se = _logistic_design_se(sample_size, prevalence, cases, controls, covariate_r2)
    if math.isinf(se):
        return 0.0
    return _wald_power(abs(math.log(odds_ratio)) / se, alpha)


def logistic_min_effect(
    target_power: float,
    sample_size: float,
    prevalence: float,
    alpha: float,
    *,
    cases: float | None = None,
    controls: float | None = None,
    covariate_r2: float = 0.0,
) -> float:
    """Minimum detectable OR (> 1). ``inf`` for invalid inputs."""
    if not _is_probability(alpha) or not _is_probability(target_power):
        return math.inf
    se = _logistic_design_se(sample_size, prevalence, cases, controls, covariate_r2)
    if math.isinf(se):
        return math.inf
    return _exp_effect(_z_sum(alpha, target_power) * se)


def logistic_required_n(
    odds_ratio: float,
    target_power: float,
    prevalence: float,
    alpha: float,
    covariate_r2: float = 0.0,
) -> float:
    """Total sample size for a cohort/cross-sectional design.

    ``n = ((z_{1-alpha/2} + z_power) / |log OR|)^2 / (p (1 - p) (1 - R^2))``,
    rounded up. ``inf`` when ``odds_ratio <= 1``.
    """
    if (
        odds_ratio <= 1.0
        or not _is_probability(prevalence)
        or not _is_probability(target_power)
        or not _is_probability(alpha)
    ):
        return math.inf
    r2 = _sanitize_r2(covariate_r2)
    ratio = _z_sum(alpha, target_power) / abs(math.log(odds_ratio))
    return math.ceil(ratio * ratio / (prevalence * (1.0 - prevalence) * (1.0 - r2)))


def logistic_required_cases(
    odds_ratio: float,
    target_power: float,
    alpha: float,
    controls_per_case: float = 1.0,
    covariate_r2: float = 0.0,
) -> float:
    """Cases needed in a case-control design with ``k`` controls per case.

    Inverts the case-control SE:
    ``cases = ((z_{1-alpha/2} + z_power) / |log OR|)^2 * (1 + 1/k) / (1 - R^2)``.
    The control count is ``k * cases``.
    """
    if (
        odds_ratio <= 1.0
        or controls_per_case <= 0
        or not _is_probability(target_power)
        or not _is_probability(alpha)
    ):
        return math.inf
    r2 = _sanitize_r2(covariate_r2)
    ratio = _z_sum(alpha, target_power) / abs(math.log(odds_ratio))
    return math.ceil(ratio * ratio * (1.0 + 1.0 / controls_per_case) / (1.0 - r2))
