"""Power calculations for modified Poisson regression (relative risks).

Robust (sandwich) variance approximation ``Var(log RR) = 1 / (n * p)``.

Validates against: Zou (2004).
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


def poisson_se(sample_size: float, prevalence: float, covariate_r2: float = 0.0) -> float:
    """SE of log(RR). ``inf`` when ``n <= 0`` or prevalence outside (0, 1)."""
    if sample_size <= 0 or not _is_probability(prevalence):
        return math.inf
    r2 = _sanitize_r2(covariate_r2)
    return math.sqrt(1.0 / (sample_size * prevalence * (1.0 - r2)))


def poisson_power(
    relative_risk: float,
    sample_size: float,
    prevalence: float,
    alpha: float,
    covariate_r2: float = 0.0,
) -> float:
    """Two-sided power to detect ``relative_risk``; 0 for invalid inputs."""
    if (
        relative_risk <= 0
        or sample_size <= 0
        or not _is_probability(prevalence)
        or not _is_probability(alpha)
    ):
        return 0.0
    se = poisson_se(sample_size, prevalence, covariate_r2)
    return _wald_power(abs(math.log(relative_risk)) / se, alpha)


def poisson_min_effect(
    target_power: float,
    sample_size: float,
    prevalence: float,
    alpha: float,
    covariate_r2: float = 0.0,
) -> float:
    """Minimum detectable RR (> 1); ``inf`` for invalid inputs."""
    if (
        sample_size <= 0
        or not _is_probability(prevalence)
        or not _is_probability(alpha)
        or not _is_probability(target_power)
    ):
        return math.inf
    se = poisson_se(sample_size, prevalence, covariate_r2)
    return _exp_effect(_z_sum(alpha, target_power) * se)


def poisson_required_n(
    relative_risk: float,
    target_power: float,
    prevalence: float,
    alpha: float,
    covariate_r2: float = 0.0,
) -> float:
    """Total sample size: ``((z_{1-alpha/2} + z_power) / |log RR|)^2 / (p (1 - R^2))``.

    ``inf`` when ``relative_risk <= 1``.
    """
    if (
        relative_risk <= 1.0
        or not _is_probability(prevalence)
        or not _is_probability(target_power)
        or not _is_probability(alpha)
    ):
        return math.inf
    r2 = _sanitize_r2(covariate_r2)
    ratio = _z_sum(alpha, target_power) / abs(math.log(relative_risk))
    return math.ceil(ratio * ratio / (prevalence * (1.0 - r2)))
