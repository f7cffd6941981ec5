"""Effect-size conversions between model scales."""

from __future__ import annotations

import math


def or_to_rr(odds_ratio: float, baseline_prevalence: float) -> float:
    """Approximate RR from an OR: ``OR / (1 - p0 + p0 * OR)`` (Zhang & Yu 1998).

    ``inf`` when the denominator is not positive.
    """
    denom = 1.0 - baseline_prevalence + baseline_prevalence * odds_ratio
    if denom <= 0:
        return math.inf
    return odds_ratio / denom


def rr_to_or(relative_risk: float, baseline_prevalence: float) -> float:
    """Inverse of :func:`or_to_rr`.

    ``inf`` once ``rr * p0 >= 1``, where the exposed risk would reach 1.
    """
    denom = 1.0 - relative_risk * baseline_prevalence
    if denom <= 0:
        return math.inf
    return relative_risk * (1.0 - baseline_prevalence) / denom


def beta_to_cohen_d(beta: float, residual_sd: float) -> float:
    if residual_sd <= 0:
        return math.inf
    return beta / residual_sd


def r2_to_f2(r2: float) -> float:
    """Cohen's ``f^2 = R^2 / (1 - R^2)``; ``inf`` at ``R^2 >= 1``."""
    if r2 >= 1.0:
        return math.inf
    return r2 / (1.0 - r2)


def effect_inflation(min_effect_single: float, min_effect_multi: float) -> float:
    """Percent increase of the multiple-testing minimum ratio effect over the single-test one.

    Returns 0 when either effect is at or below the null.

    Examples
    --------
    >>> round(effect_inflation(1.25, 1.5), 1)
    20.0
    """
    if min_effect_single <= 1.0 or min_effect_multi <= 1.0:
        return 0.0
    return (min_effect_multi / min_effect_single - 1.0) * 100.0
