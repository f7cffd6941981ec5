"""Power calculations for Cox proportional hazards regression.

All formulas assume a standardized protein level (variance 1), so the
hazard ratio is per 1 SD increase and ``SE(log HR) = 1 / sqrt(d)``.

Validates against: Schoenfeld (1983), Hsieh & Lavori (2000),
Barlow (1994) case-cohort weighting.
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


# ---------------------------------------------------------------------------
# Standard errors, one per study design
# ---------------------------------------------------------------------------

def cox_se(events: float, covariate_r2: float = 0.0) -> float:
    """SE of log(HR) in a full cohort: ``1 / sqrt(d * (1 - R^2))``.

    Returns ``inf`` when ``events <= 0``.
    """
    if events <= 0:
        return math.inf
    r2 = _sanitize_r2(covariate_r2)
    return 1.0 / math.sqrt(events * (1.0 - r2))


def case_cohort_vif(subcohort_size: float, total_cohort: float) -> float:
    """Variance inflation of a case-cohort sample.

    ``VIF = 1 + (1 - f) / f`` with sampling fraction
    ``f = subcohort_size / total_cohort`` (capped at 1). Returns ``inf``
    for non-positive sizes.

    Examples
    --------
    >>> case_cohort_vif(100, 1000)
    10.0
    """
    if subcohort_size <= 0 or total_cohort <= 0:
        return math.inf
    f = min(subcohort_size / total_cohort, 1.0)
    return 1.0 + (1.0 - f) / f


def cox_case_cohort_se(
    events: float,
    subcohort_size: float,
    total_cohort: float,
    covariate_r2: float = 0.0,
) -> float:
    """SE of log(HR) in a case-cohort design: ``sqrt(VIF) * cox_se``."""
    if events <= 0:
        return math.inf
    vif = case_cohort_vif(subcohort_size, total_cohort)
    if math.isinf(vif):
        return math.inf
    return math.sqrt(vif) * cox_se(events, covariate_r2)


def cox_nested_case_control_se(
    events: float,
    matching_ratio: float,
    covariate_r2: float = 0.0,
) -> float:
    """SE of log(HR) with ``m`` matched controls per case: ``cox_se * sqrt(1 + 1/m)``."""
    if events <= 0 or matching_ratio <= 0:
        return math.inf
    return cox_se(events, covariate_r2) * math.sqrt(1.0 + 1.0 / matching_ratio)


def _design_inflation(
    subcohort_size: float | None,
    total_cohort: float | None,
    matching_ratio: float | None,
) -> float:
    """Variance multiplier over the cohort SE for the design implied by the arguments."""
    if subcohort_size is not None and total_cohort is not None:
        return case_cohort_vif(subcohort_size, total_cohort)
    if matching_ratio is not None:
        if matching_ratio <= 0:
            return math.inf
        return 1.0 + 1.0 / matching_ratio
    return 1.0


def _cox_design_se(
    events: float,
    subcohort_size: float | None,
    total_cohort: float | None,
    matching_ratio: float | None,
    covariate_r2: float,
) -> float:
    if subcohort_size is not None and total_cohort is not None:
        return cox_case_cohort_se(events, subcohort_size, total_cohort, covariate_r2)
    if matching_ratio is not None:
        return cox_nested_case_control_se(events, matching_ratio, covariate_r2)
    return cox_se(events, covariate_r2)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def cox_power(
    hazard_ratio: float,
    events: float,
    alpha: float,
    *,
    subcohort_size: float | None = None,
    total_cohort: float | None = None,
    matching_ratio: float | None = None,
    covariate_r2: float = 0.0,
) -> float:
    """Two-sided power to detect ``hazard_ratio`` with ``events`` events.

    ``Power = Phi(|log HR|/SE - z) + Phi(-|log HR|/SE - z)`` with
    ``z = z_{1 - alpha/2}``.

    Parameters
    ----------
    hazard_ratio : float
        HR per 1 SD of protein level. 1.0 is the null.
    events : float
        Number of outcome events.
    alpha : float
        Per-test significance level (already corrected for multiple testing).
    subcohort_size, total_cohort : float, optional
        Both given -> case-cohort SE.
    matching_ratio : float, optional
        Controls per case -> nested case-control SE.
    covariate_r2 : float
        R^2 of protein ~ adjustment covariates.

    Returns
    -------
    float
        Power in [0, 1]; 0 for invalid inputs.

    Examples
    --------
    >>> round(cox_power(1.5, 100, 0.05), 4)
    0.9819
    """
    if hazard_ratio <= 0 or events <= 0 or not _is_probability(alpha):
        return 0.0
    se = _cox_design_se(events, subcohort_size, total_cohort, matching_ratio, covariate_r2)
    if math.isinf(se):
        return 0.0
    return _wald_power(abs(math.log(hazard_ratio)) / se, alpha)


def cox_min_effect(
    target_power: float,
    events: float,
    alpha: float,
    *,
    subcohort_size: float | None = None,
    total_cohort: float | None = None,
    matching_ratio: float | None = None,
    covariate_r2: float = 0.0,
) -> float:
    """Minimum detectable HR (> 1): ``exp((z_{1-alpha/2} + z_power) * SE)``.

    Returns ``inf`` for invalid inputs.

    Examples
    --------
    >>> round(cox_min_effect(0.80, 100, 0.05), 3)
    1.323
    """
    if events <= 0 or not _is_probability(alpha) or not _is_probability(target_power):
        return math.inf
    se = _cox_design_se(events, subcohort_size, total_cohort, matching_ratio, covariate_r2)
    if math.isinf(se):
        return math.inf
    return _exp_effect(_z_sum(alpha, target_power) * se)


def cox_required_events(
    hazard_ratio: float,
    target_power: float,
    alpha: float,
    *,
    subcohort_size: float | None = None,
    total_cohort: float | None = None,
    matching_ratio: float | None = None,
    covariate_r2: float = 0.0,
) -> float:
    """Events needed to detect ``hazard_ratio`` with ``target_power``.

    ``d = ((z_{1-alpha/2} + z_power) / |log HR|)^2 / (1 - R^2)``, times the
    case-cohort VIF or ``1 + 1/m`` for sampled designs, rounded up.

    Returns ``inf`` when ``hazard_ratio <= 1`` or inputs are invalid.
    """
    if (
        hazard_ratio <= 1.0
        or not _is_probability(target_power)
        or not _is_probability(alpha)
    ):
        return math.inf
    inflation = _design_inflation(subcohort_size, total_cohort, matching_ratio)
    if math.isinf(inflation):
        return math.inf
    r2 = _sanitize_r2(covariate_r2)
    sqrt_d = _z_sum(alpha, target_power) / abs(math.log(hazard_ratio))
    return math.ceil(sqrt_d * sqrt_d * inflation / (1.0 - r2))
