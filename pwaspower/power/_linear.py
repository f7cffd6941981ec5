"""Power calculations for linear regression on a standardized protein.

``SE(beta) = sigma_resid / sqrt((n - 2) * (1 - R^2))``, tested with a
large-sample Wald test.
"""

from __future__ import annotations

import math

from pwaspower.power._common import (
    _is_probability,
    _sanitize_r2,
    _wald_power,
    _z_crit,
    _z_sum,
)
from pwaspower.power._normal import normal_cdf


def linear_se(sample_size: float, residual_sd: float, covariate_r2: float = 0.0) -> float:
    """SE of the protein coefficient. ``inf`` when ``n <= 2`` or ``residual_sd <= 0``."""
    if sample_size <= 2 or residual_sd <= 0:
        return math.inf
    r2 = _sanitize_r2(covariate_r2)
    return residual_sd / math.sqrt((sample_size - 2.0) * (1.0 - r2))


def linear_power(
    beta: float,
    sample_size: float,
    residual_sd: float,
    alpha: float,
    covariate_r2: float = 0.0,
) -> float:
    """Two-sided power for testing ``beta != 0``.

    Parameters
    ----------
    beta : float
        Change in outcome per 1 SD of protein level. 0.0 is the null.
    sample_size : float
        Total sample size.
    residual_sd : float
        Residual standard deviation of the outcome.
    alpha : float
        Per-test significance level.
    covariate_r2 : float
        R^2 of protein ~ adjustment covariates.

    Returns
    -------
    float
        Power in [0, 1]; 0 for invalid inputs.
    """
    if sample_size <= 2 or residual_sd <= 0 or not _is_probability(alpha):
        return 0.0
    se = linear_se(sample_size, residual_sd, covariate_r2)
    return _wald_power(abs(beta) / se, alpha)


def linear_power_from_r2(r2: float, sample_size: float, alpha: float) -> float:
    """Power from the variance explained by the protein alone.

    Uses Cohen's ``f^2 = r2 / (1 - r2)`` and noncentrality ``f^2 * n``
    with a one-tail normal approximation.
    """
    if sample_size <= 2 or not _is_probability(r2) or not _is_probability(alpha):
        return 0.0
    f2 = r2 / (1.0 - r2)
    pwr = normal_cdf(math.sqrt(f2 * sample_size) - _z_crit(alpha))
    return min(max(pwr, 0.0), 1.0)


def linear_min_effect(
    target_power: float,
    sample_size: float,
    residual_sd: float,
    alpha: float,
    covariate_r2: float = 0.0,
) -> float:
    """Minimum detectable ``|beta|``: ``(z_{1-alpha/2} + z_power) * SE``."""
    if (
        sample_size <= 2
        or residual_sd <= 0
        or not _is_probability(alpha)
        or not _is_probability(target_power)
    ):
        return math.inf
    return _z_sum(alpha, target_power) * linear_se(sample_size, residual_sd, covariate_r2)


def linear_required_n(
    beta: float,
    target_power: float,
    residual_sd: float,
    alpha: float,
    covariate_r2: float = 0.0,
) -> float:
    """Total sample size needed to detect ``beta``.

    ``n = ((z_{1-alpha/2} + z_power) * sigma / |beta|)^2 / (1 - R^2) + 2``,
    rounded up. ``inf`` when ``beta == 0``.

    Examples
    --------
    >>> linear_required_n(0.2, 0.80, 1.0, 0.05)
    199
    """
    if (
        beta == 0
        or residual_sd <= 0
        or not _is_probability(target_power)
        or not _is_probability(alpha)
    ):
        return math.inf
    r2 = _sanitize_r2(covariate_r2)
    n = (_z_sum(alpha, target_power) * residual_sd / abs(beta)) ** 2 / (1.0 - r2) + 2.0
    return math.ceil(n)
