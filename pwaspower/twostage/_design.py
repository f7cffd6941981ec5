"""Two-stage discovery/validation design power.

Stage 1 screens all proteins at an FDR-corrected alpha; proteins that pass
are re-tested in an independent stage-2 sample at a Bonferroni alpha over
the expected number advancing. A true association succeeds only if it
passes both stages.

Validates against: Skol et al. (2006), Satagopan & Elston (2003).
"""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Sequence

import numpy as np

from pwaspower.power import PowerParams, Sample, calculate_power, effective_alpha
from pwaspower.twostage._common import OptimalFDRResult, TwoStageParams, TwoStageResult

logger = logging.getLogger(__name__)

DEFAULT_FDR_GRID = (0.05, 0.10, 0.15, 0.20, 0.25, 0.30, 0.40, 0.50)

# Family-wise alpha of the equivalent single-stage proteome-wide study.
_SINGLE_STAGE_ALPHA = 0.05

# Stage-2 information lost per unit of overlap with stage 1.
_OVERLAP_PENALTY = 0.5


def stage1_alpha(stage1_fdr: float, stage1_proteins: int) -> float:
    """Per-protein alpha in the discovery stage."""
    return effective_alpha(stage1_fdr, stage1_proteins)


def two_stage_power(
    effect_size: float,
    sample: Sample,
    params: TwoStageParams,
) -> TwoStageResult:
    """Joint power of a two-stage design.

    Parameters
    ----------
    effect_size : float
        Effect on the model's scale (HR/OR/RR or beta).
    sample : Sample
        Study description (model, design, prevalence, ...). Each stage is
        evaluated on ``sample.with_sample_size(stage_n)``.
    params : TwoStageParams
        Stage sizes and thresholds.

    Returns
    -------
    TwoStageResult

    Notes
    -----
    Expected advancing proteins are ``hits * power1 + nulls * alpha1``,
    using the per-test stage-1 alpha as each null's rejection probability.
    Joint power assumes independent stage outcomes. Cost efficiency is
    joint power over the power of one study of the same total size at
    ``0.05 / stage1_proteins`` (1 when that power is 0).
    """
    overlap = min(max(params.sample_overlap, 0.0), 1.0)
    alpha1 = stage1_alpha(params.stage1_fdr, params.stage1_proteins)

    stage1 = sample.with_sample_size(params.stage1_sample_size)
    power1 = calculate_power(PowerParams(stage1, effect_size, alpha1))

    hits = max(params.expected_hits, 0.0)
    null_proteins = max(params.stage1_proteins - hits, 0.0)
    advancing = hits * power1 + null_proteins * alpha1

    if advancing > 1:
        alpha2 = params.stage2_alpha / math.ceil(advancing)
    else:
        alpha2 = params.stage2_alpha

    stage2_n = params.stage2_sample_size
    if overlap > 0:
        stage2_n = stage2_n * (1.0 - overlap * _OVERLAP_PENALTY)
    stage2 = sample.with_sample_size(stage2_n)
    power2 = calculate_power(PowerParams(stage2, effect_size, alpha2))

    joint = power1 * power2

    total = params.stage1_sample_size + params.stage2_sample_size * (1.0 - overlap)

    single_alpha = effective_alpha(_SINGLE_STAGE_ALPHA, params.stage1_proteins)
    single = sample.with_sample_size(total)
    single_power = calculate_power(PowerParams(single, effect_size, single_alpha))
    efficiency = joint / single_power if single_power > 0 else 1.0

    return TwoStageResult(
        stage1_power=power1,
        stage1_alpha=alpha1,
        stage2_power=power2,
        joint_power=joint,
        expected_advancing=advancing,
        stage2_per_protein_alpha=alpha2,
        cost_efficiency=efficiency,
        total_sample_size=math.ceil(total),
    )


def find_optimal_stage1_fdr(
    effect_size: float,
    sample: Sample,
    params: TwoStageParams,
    fdr_grid: Sequence[float] = DEFAULT_FDR_GRID,
) -> OptimalFDRResult:
    """Stage-1 FDR threshold on ``fdr_grid`` that maximizes joint power.

    ``params.stage1_fdr`` is replaced by each grid value in turn. Ties go
    to the first grid value reaching the maximum.

    Raises
    ------
    ValueError
        If ``fdr_grid`` is empty.
    """
    if len(fdr_grid) == 0:
        raise ValueError("fdr_grid must contain at least one threshold")

    fdr = np.asarray(fdr_grid, dtype=float)
    joint = np.array([
        two_stage_power(
            effect_size, sample, dataclasses.replace(params, stage1_fdr=float(q)),
        ).joint_power
        for q in fdr
    ])
    best = int(np.argmax(joint))
    logger.debug("joint power over FDR grid %s: %s", fdr, joint)
    return OptimalFDRResult(
        optimal_fdr=float(fdr[best]),
        max_joint_power=float(joint[best]),
        fdr=fdr,
        joint_power=joint,
    )


def required_stage2_size(
    effect_size: float,
    sample: Sample,
    target_joint_power: float,
    params: TwoStageParams,
    *,
    low: int = 50,
    high: int = 10_000,
    max_iter: int = 50,
    tol: float = 0.005,
) -> int:
    """Stage-2 sample size giving ``target_joint_power``.

    Binary search over integers in ``[low, high]``; stops as soon as joint
    power is within ``tol`` of the target, otherwise returns the midpoint of
    the final bracket, kept inside ``[low, high]``.
    ``params.stage2_sample_size`` is ignored. Assumes joint power increases
    with stage-2 size; a result at either bound usually means the target is
    not attainable in that range.

    Raises
    ------
    ValueError
        If ``low > high`` or ``max_iter < 1``.
    """
    if low > high:
        raise ValueError(f"low must be <= high, got low={low}, high={high}")
    if max_iter < 1:
        raise ValueError(f"max_iter must be >= 1, got {max_iter}")

    lower, upper = low, high
    for i in range(max_iter):
        if low > high:
            break
        mid = (low + high) // 2
        joint = two_stage_power(
            effect_size, sample, dataclasses.replace(params, stage2_sample_size=mid),
        ).joint_power
        if abs(joint - target_joint_power) < tol:
            logger.debug("stage-2 size %d reached joint power %.4f after %d steps", mid, joint, i + 1)
            return mid
        if joint < target_joint_power:
            low = mid + 1
        else:
            high = mid - 1
    else:
        logger.warning(
            "stage-2 size search did not reach joint power %.4f within %d iterations",
            target_joint_power, max_iter,
        )

    return min(max(math.ceil((low + high) / 2), lower), upper)
