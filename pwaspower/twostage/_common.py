"""Parameter and result types for two-stage (discovery + validation) designs."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class TwoStageParams:
    """Inputs of a discovery/validation design.

    ``sample_overlap`` is the fraction of the stage-2 sample that also
    took part in stage 1 (0 for independent samples).
    """

    stage1_proteins: int
    stage1_sample_size: float
    stage2_sample_size: float
    stage1_fdr: float
    stage2_alpha: float = 0.05
    expected_hits: float = 10.0
    sample_overlap: float = 0.0


@dataclass(frozen=True)
class TwoStageResult:
    """Result of a two-stage power calculation."""

    stage1_power: float
    stage1_alpha: float
    stage2_power: float
    joint_power: float
    expected_advancing: float
    stage2_per_protein_alpha: float
    cost_efficiency: float
    total_sample_size: int

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            "Two-stage design power calculation",
            "",
            f"   stage 1 alpha = {self.stage1_alpha:.3g}",
            f"   stage 1 power = {self.stage1_power:.6f}",
            f"       advancing = {self.expected_advancing:.1f}",
            f"   stage 2 alpha = {self.stage2_per_protein_alpha:.3g}",
            f"   stage 2 power = {self.stage2_power:.6f}",
            f"     joint power = {self.joint_power:.6f}",
            f"         total n = {self.total_sample_size}",
            f" cost efficiency = {self.cost_efficiency:.2f}",
        ]
        return "\n".join(lines)


@dataclass(frozen=True)
class OptimalFDRResult:
    """Grid search over the stage-1 FDR threshold."""

    optimal_fdr: float
    max_joint_power: float
    fdr: NDArray[np.floating]
    joint_power: NDArray[np.floating]
