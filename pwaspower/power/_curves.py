"""Power curves, power tables, scenario grids and sample-size searches.

Everything here evaluates the dispatch layer on a grid; no formulas live
in this module.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from pwaspower.power._alpha import CorrectionMethod, effective_alpha
from pwaspower.power._common import _search_min_integer
from pwaspower.power._dispatch import (
    calculate_min_effect,
    calculate_power,
    calculate_required_n,
)
from pwaspower.power._params import CoxSample, PowerParams, Sample

logger = logging.getLogger(__name__)

DEFAULT_TABLE_EFFECTS = (1.0, 1.2, 1.4, 1.6, 1.8, 2.0, 2.2, 2.4, 2.6, 2.8, 3.0)
DEFAULT_PROTEIN_COUNTS = (1, 5, 10, 25, 50, 100, 200, 500, 1000, 3000, 5000)


@dataclass(frozen=True)
class PowerCurve:
    """Power evaluated along a grid of effect sizes."""

    effect: NDArray[np.floating]
    power: NDArray[np.floating]
    alpha: float


@dataclass(frozen=True)
class PowerTable:
    """Power at a single-test alpha and a multiple-testing alpha."""

    effect: NDArray[np.floating]
    power_single: NDArray[np.floating]
    power_multi: NDArray[np.floating]
    alpha_single: float
    alpha_multi: float


@dataclass(frozen=True)
class ProteinPowerGrid:
    """Power for every (protein count, effect size) pair."""

    protein_counts: NDArray[np.integer]
    effects: NDArray[np.floating]
    alpha: NDArray[np.floating]  # shape (n_counts,)
    power: NDArray[np.floating]  # shape (n_counts, n_effects)


@dataclass(frozen=True)
class ScenarioTable:
    """One row per protein count: corrected alpha, MDE, power and required N."""

    protein_counts: NDArray[np.integer]
    alpha: NDArray[np.floating]
    min_effect: NDArray[np.floating]
    power: NDArray[np.floating]
    required_n: NDArray[np.floating]
    effect_size: float
    target_power: float


def _power_at(sample: Sample, effect: float, alpha: float) -> float:
    return calculate_power(PowerParams(sample, effect, alpha))


# ---------------------------------------------------------------------------
# Grids
# ---------------------------------------------------------------------------

def generate_power_curve(
    sample: Sample,
    alpha: float,
    effect_min: float = 1.0,
    effect_max: float = 3.0,
    num_points: int = 100,
) -> PowerCurve:
    """Power at ``num_points`` evenly spaced effect sizes.

    Examples
    --------
    >>> curve = generate_power_curve(CoxSample(events=200), alpha=1e-5)
    >>> curve.effect.shape
    (100,)
    """
    if num_points < 1:
        raise ValueError(f"num_points must be >= 1, got {num_points}")
    effects = np.linspace(effect_min, effect_max, num_points)
    power = np.array([_power_at(sample, float(e), alpha) for e in effects])
    return PowerCurve(effect=effects, power=power, alpha=alpha)


def generate_table_data(
    sample: Sample,
    alpha_single: float,
    alpha_multi: float,
    effects: Sequence[float] = DEFAULT_TABLE_EFFECTS,
) -> PowerTable:
    """Power at each effect for an unadjusted and an adjusted alpha."""
    eff = np.asarray(effects, dtype=float)
    return PowerTable(
        effect=eff,
        power_single=np.array([_power_at(sample, float(e), alpha_single) for e in eff]),
        power_multi=np.array([_power_at(sample, float(e), alpha_multi) for e in eff]),
        alpha_single=alpha_single,
        alpha_multi=alpha_multi,
    )


def power_by_proteins(
    sample: Sample,
    effects: Sequence[float],
    protein_counts: Sequence[int] = DEFAULT_PROTEIN_COUNTS,
    threshold: float = 0.05,
    method: CorrectionMethod | str = CorrectionMethod.FDR,
) -> ProteinPowerGrid:
    """Power as the number of proteins tested grows.

    Each protein count gets its own corrected alpha; each row of ``power``
    holds the power for every effect at that alpha.
    """
    counts = np.asarray(protein_counts, dtype=int)
    eff = np.asarray(effects, dtype=float)
    alphas = np.array([effective_alpha(threshold, int(m), method) for m in counts])
    power = np.empty((counts.size, eff.size))
    for i, a in enumerate(alphas):
        for j, e in enumerate(eff):
            power[i, j] = _power_at(sample, float(e), float(a))
    return ProteinPowerGrid(protein_counts=counts, effects=eff, alpha=alphas, power=power)


def evaluate_scenarios(
    sample: Sample,
    protein_counts: Sequence[int],
    effect_size: float,
    target_power: float = 0.80,
    threshold: float = 0.05,
    method: CorrectionMethod | str = CorrectionMethod.FDR,
) -> ScenarioTable:
    """Corrected alpha, minimum detectable effect, power and required N per protein count.

    ``required_n`` is in the unit of :func:`calculate_required_n` for the
    sample's model and may contain ``inf``.
    """
    counts = np.asarray(protein_counts, dtype=int)
    alphas = np.array([effective_alpha(threshold, int(m), method) for m in counts])
    min_effect = np.empty(counts.size)
    power = np.empty(counts.size)
    required = np.empty(counts.size)
    for i, a in enumerate(alphas):
        params = PowerParams(sample, effect_size, float(a))
        min_effect[i] = calculate_min_effect(sample, target_power, float(a))
        power[i] = calculate_power(params)
        required[i] = calculate_required_n(params, target_power)
    return ScenarioTable(
        protein_counts=counts,
        alpha=alphas,
        min_effect=min_effect,
        power=power,
        required_n=required,
        effect_size=effect_size,
        target_power=target_power,
    )


# ---------------------------------------------------------------------------
# Searches
# ---------------------------------------------------------------------------

def find_events_required(
    hazard_ratio: float,
    alpha: float,
    target_power: float = 0.80,
    sample: CoxSample | None = None,
    *,
    low: int = 1,
    high: int = 100_000,
    max_iter: int = 50,
) -> float:
    """Smallest event count whose Cox power reaches ``target_power``.

    Binary search over events, keeping every other field of ``sample``
    (design, covariate R^2). Returns ``inf`` if ``high`` events are not
    enough.
    """
    base = sample if sample is not None else CoxSample(events=1)

    def _power(events: int) -> float:
        return _power_at(dataclasses.replace(base, events=events), hazard_ratio, alpha)

    return _search_min_integer(_power, target_power, low, high, max_iter=max_iter)


def find_sample_size_required(
    sample: Sample,
    effect_size: float,
    alpha: float,
    target_power: float = 0.80,
    *,
    low: int = 3,
    high: int = 1_000_000,
    max_iter: int = 50,
) -> float:
    """Smallest sample size whose power reaches ``target_power``.

    The study is re-scaled with ``sample.with_sample_size``. Returns ``inf``
    if ``high`` subjects are not enough.

    Raises
    ------
    ValueError
        For a Cox sample without ``event_rate`` (its power does not depend
        on the number of subjects; use :func:`find_events_required`).
    """
    if isinstance(sample, CoxSample) and sample.event_rate is None:
        raise ValueError(
            "Cox sample needs event_rate to search over subjects; "
            "use find_events_required instead"
        )

    def _power(n: int) -> float:
        return _power_at(sample.with_sample_size(n), effect_size, alpha)

    result = _search_min_integer(_power, target_power, low, high, max_iter=max_iter)
    logger.debug(
        "%s sample size for effect %.4g at alpha %.3g: %s",
        sample.analysis_type.value, effect_size, alpha, result,
    )
    return result
