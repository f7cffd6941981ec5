"""Power calculations for GEE / mixed-effects models on clustered data.

Clustering inflates the linear-regression variance by the design effect
``DE = 1 + (m - 1) * ICC`` where ``m`` is the cluster size.
"""

from __future__ import annotations

import math

from pwaspower.power._common import (
    _is_probability,
    _sanitize_r2,
    _wald_power,
    _z_sum,
)
from pwaspower.power._linear import linear_se


def design_effect(cluster_size: float, icc: float) -> float:
    """``1 + (cluster_size - 1) * icc``; 1 (no inflation) for invalid inputs.

    Examples
    --------
    >>> design_effect(5, 0.1)
    1.4
    """
    if cluster_size <= 0 or not (0.0 <= icc <= 1.0):
        return 1.0
    return 1.0 + (cluster_size - 1.0) * icc


def effective_sample_size(total_observations: float, cluster_size: float, icc: float) -> float:
    """Independent-observation equivalent of ``total_observations``."""
    return total_observations / design_effect(cluster_size, icc)


def gee_se(
    total_observations: float,
    cluster_size: float,
    icc: float,
    residual_sd: float,
    covariate_r2: float = 0.0,
) -> float:
    """``linear_se * sqrt(DE)``."""
    if total_observations <= 2 or cluster_size <= 0:
        return math.inf
    se = linear_se(total_observations, residual_sd, covariate_r2)
    return se * math.sqrt(design_effect(cluster_size, icc))


def _valid_cluster_args(cluster_size: float, icc: float, residual_sd: float) -> bool:
    return cluster_size > 0 and residual_sd > 0 and 0.0 <= icc <= 1.0


def gee_power(
    beta: float,
    total_observations: float,
    cluster_size: float,
    icc: float,
    residual_sd: float,
    alpha: float,
    covariate_r2: float = 0.0,
) -> float:
    """Two-sided power for a clustered-data coefficient.

    Parameters
    ----------
    beta : float
        Coefficient per 1 SD of protein level. 0.0 is the null.
    total_observations : float
        Observations across all clusters.
    cluster_size : float
        Average observations per cluster.
    icc : float
        Intraclass correlation in [0, 1].
    residual_sd : float
        Residual standard deviation.
    alpha : float
        Per-test significance level.
    covariate_r2 : float
        R^2 of protein ~ adjustment covariates.

    Returns
    -------
    float
        Power in [0, 1]; 0 for invalid inputs.
    """
    if (
        total_observations <= 2
        or not _valid_cluster_args(cluster_size, icc, residual_sd)
        or not _is_probability(alpha)
    ):
        return 0.0
    se = gee_se(total_observations, cluster_size, icc, residual_sd, covariate_r2)
    if math.isinf(se):
        return 0.0
    return _wald_power(abs(beta) / se, alpha)


def gee_min_effect(
    target_power: float,
    total_observations: float,
    cluster_size: float,
    icc: float,
    residual_sd: float,
    alpha: float,
    covariate_r2: float = 0.0,
) -> float:
    """Minimum detectable ``|beta|``; ``inf`` for invalid inputs."""
    if (
        total_observations <= 2
        or not _valid_cluster_args(cluster_size, icc, residual_sd)
        or not _is_probability(alpha)
        or not _is_probability(target_power)
    ):
        return math.inf
    se = gee_se(total_observations, cluster_size, icc, residual_sd, covariate_r2)
    if math.isinf(se):
        return math.inf
    return _z_sum(alpha, target_power) * se


def gee_required_n(
    beta: float,
    target_power: float,
    cluster_size: float,
    icc: float,
    residual_sd: float,
    alpha: float,
    covariate_r2: float = 0.0,
) -> float:
    """Total observations needed to detect ``beta``.

    The independent-sample requirement
    ``((z_{1-alpha/2} + z_power) * sigma / |beta|)^2 / (1 - R^2) + 2`` is
    multiplied by DE and rounded up. ``inf`` when ``beta == 0``.
    """
    if (
        beta == 0
        or not _valid_cluster_args(cluster_size, icc, residual_sd)
        or not _is_probability(target_power)
        or not _is_probability(alpha)
    ):
        return math.inf
    r2 = _sanitize_r2(covariate_r2)
    n_eff = (_z_sum(alpha, target_power) * residual_sd / abs(beta)) ** 2 / (1.0 - r2) + 2.0
    return math.ceil(n_eff * design_effect(cluster_size, icc))


def gee_required_clusters(
    beta: float,
    target_power: float,
    cluster_size: float,
    icc: float,
    residual_sd: float,
    alpha: float,
    covariate_r2: float = 0.0,
) -> float:
    """Number of clusters: ``ceil(gee_required_n / cluster_size)``."""
    total = gee_required_n(beta, target_power, cluster_size, icc, residual_sd, alpha, covariate_r2)
    if math.isinf(total):
        return math.inf
    return math.ceil(total / cluster_size)
