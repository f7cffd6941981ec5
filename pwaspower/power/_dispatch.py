"""Route a parameter bundle to the matching per-model calculator.

One row per analysis type in each table; the sample variant decides which
design-specific SE its model function uses.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pwaspower.power._cox import cox_min_effect, cox_power, cox_required_events
from pwaspower.power._gee import gee_min_effect, gee_power, gee_required_n
from pwaspower.power._linear import linear_min_effect, linear_power, linear_required_n
from pwaspower.power._logistic import (
    logistic_min_effect,
    logistic_power,
    logistic_required_cases,
    logistic_required_n,
)
from pwaspower.power._params import (
    AnalysisType,
    CoxSample,
    GEESample,
    LinearSample,
    LogisticSample,
    PoissonSample,
    PowerParams,
    Sample,
)
from pwaspower.power._poisson import poisson_min_effect, poisson_power, poisson_required_n


# ---------------------------------------------------------------------------
# Power
# ---------------------------------------------------------------------------

def _cox_power(s: CoxSample, effect: float, alpha: float) -> float:
    return cox_power(effect, s.events, alpha, **s.design_kwargs())


def _linear_power(s: LinearSample, effect: float, alpha: float) -> float:
    return linear_power(effect, s.sample_size, s.residual_sd, alpha, s.covariate_r2)


def _logistic_power(s: LogisticSample, effect: float, alpha: float) -> float:
    return logistic_power(effect, s.sample_size, s.prevalence, alpha, **s.design_kwargs())


def _poisson_power(s: PoissonSample, effect: float, alpha: float) -> float:
    return poisson_power(effect, s.sample_size, s.prevalence, alpha, s.covariate_r2)


def _gee_power(s: GEESample, effect: float, alpha: float) -> float:
    return gee_power(
        effect, s.sample_size, s.cluster_size, s.icc, s.residual_sd, alpha, s.covariate_r2,
    )


# ---------------------------------------------------------------------------
# Minimum detectable effect
# ---------------------------------------------------------------------------

def _cox_min_effect(s: CoxSample, target_power: float, alpha: float) -> float:
    return cox_min_effect(target_power, s.events, alpha, **s.design_kwargs())


def _linear_min_effect(s: LinearSample, target_power: float, alpha: float) -> float:
    return linear_min_effect(target_power, s.sample_size, s.residual_sd, alpha, s.covariate_r2)


def _logistic_min_effect(s: LogisticSample, target_power: float, alpha: float) -> float:
    return logistic_min_effect(
        target_power, s.sample_size, s.prevalence, alpha, **s.design_kwargs(),
    )


def _poisson_min_effect(s: PoissonSample, target_power: float, alpha: float) -> float:
    return poisson_min_effect(target_power, s.sample_size, s.prevalence, alpha, s.covariate_r2)


def _gee_min_effect(s: GEESample, target_power: float, alpha: float) -> float:
    return gee_min_effect(
        target_power, s.sample_size, s.cluster_size, s.icc, s.residual_sd, alpha,
        s.covariate_r2,
    )


# ---------------------------------------------------------------------------
# Required sample size
# ---------------------------------------------------------------------------

def _cox_required(s: CoxSample, effect: float, target_power: float, alpha: float) -> float:
    return cox_required_events(effect, target_power, alpha, **s.design_kwargs())


def _linear_required(s: LinearSample, effect: float, target_power: float, alpha: float) -> float:
    return linear_required_n(effect, target_power, s.residual_sd, alpha, s.covariate_r2)


def _logistic_required(
    s: LogisticSample, effect: float, target_power: float, alpha: float,
) -> float:
    if s.uses_case_control:
        assert s.cases is not None and s.controls is not None
        return logistic_required_cases(
            effect, target_power, alpha, s.controls / s.cases, s.covariate_r2,
        )
    return logistic_required_n(effect, target_power, s.prevalence, alpha, s.covariate_r2)


def _poisson_required(s: PoissonSample, effect: float, target_power: float, alpha: float) -> float:
    return poisson_required_n(effect, target_power, s.prevalence, alpha, s.covariate_r2)


def _gee_required(s: GEESample, effect: float, target_power: float, alpha: float) -> float:
    return gee_required_n(
        effect, target_power, s.cluster_size, s.icc, s.residual_sd, alpha, s.covariate_r2,
    )


_POWER_FUNCS: dict[AnalysisType, Callable[[Any, float, float], float]] = {
    AnalysisType.COX: _cox_power,
    AnalysisType.LINEAR: _linear_power,
    AnalysisType.LOGISTIC: _logistic_power,
    AnalysisType.POISSON: _poisson_power,
    AnalysisType.GEE: _gee_power,
}

_MIN_EFFECT_FUNCS: dict[AnalysisType, Callable[[Any, float, float], float]] = {
    AnalysisType.COX: _cox_min_effect,
    AnalysisType.LINEAR: _linear_min_effect,
    AnalysisType.LOGISTIC: _logistic_min_effect,
    AnalysisType.POISSON: _poisson_min_effect,
    AnalysisType.GEE: _gee_min_effect,
}

_REQUIRED_FUNCS: dict[AnalysisType, Callable[[Any, float, float, float], float]] = {
    AnalysisType.COX: _cox_required,
    AnalysisType.LINEAR: _linear_required,
    AnalysisType.LOGISTIC: _logistic_required,
    AnalysisType.POISSON: _poisson_required,
    AnalysisType.GEE: _gee_required,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def calculate_power(params: PowerParams) -> float:
    """Power for ``params.effect_size`` at ``params.alpha``.

    Examples
    --------
    >>> p = PowerParams(CoxSample(events=100), effect_size=1.5, alpha=0.05)
    >>> round(calculate_power(p), 4)
    0.9819
    """
    return _POWER_FUNCS[params.analysis_type](params.sample, params.effect_size, params.alpha)


def calculate_min_effect(sample: Sample, target_power: float, alpha: float) -> float:
    """Minimum detectable effect on the model's own scale (HR/OR/RR or beta)."""
    return _MIN_EFFECT_FUNCS[sample.analysis_type](sample, target_power, alpha)


def calculate_required_n(params: PowerParams, target_power: float) -> float:
    """Sample size needed to reach ``target_power`` for ``params.effect_size``.

    The unit depends on the model: events for Cox, cases for case-control
    logistic designs (at the sample's control-to-case ratio), total
    observations for GEE, total subjects otherwise.
    """
    func = _REQUIRED_FUNCS[params.analysis_type]
    return func(params.sample, params.effect_size, target_power, params.alpha)
