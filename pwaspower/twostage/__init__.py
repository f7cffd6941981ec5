"""
Two-stage (discovery + validation) proteomics study designs.

Joint power, expected number of proteins advancing to validation, cost
efficiency against a single-stage study, and searches over the stage-1 FDR
threshold and the stage-2 sample size.
"""

from pwaspower.twostage._common import OptimalFDRResult, TwoStageParams, TwoStageResult
from pwaspower.twostage._design import (
    DEFAULT_FDR_GRID,
    stage1_alpha,
    two_stage_power,
    find_optimal_stage1_fdr,
    required_stage2_size,
)

__all__ = [
    "TwoStageParams",
    "TwoStageResult",
    "OptimalFDRResult",
    "DEFAULT_FDR_GRID",
    "stage1_alpha",
    "two_stage_power",
    "find_optimal_stage1_fdr",
    "required_stage2_size",
]
