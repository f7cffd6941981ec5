"""Tests for two-stage discovery/validation designs."""

import math

import numpy as np
import pytest

from pwaspower.power import CoxSample, LinearSample, cox_power, linear_power
from pwaspower.twostage import (
    DEFAULT_FDR_GRID,
    TwoStageParams,
    find_optimal_stage1_fdr,
    required_stage2_size,
    stage1_alpha,
    two_stage_power,
)


def _params(**overrides):
    base = dict(
        stage1_proteins=5000,
        stage1_sample_size=500,
        stage2_sample_size=1000,
        stage1_fdr=0.10,
        stage2_alpha=0.05,
        expected_hits=10,
    )
    base.update(overrides)
    return TwoStageParams(**base)


class TestStage1Alpha:
    def test_fdr_over_proteins(self):
        assert stage1_alpha(0.10, 5000) == pytest.approx(2e-5)

    def test_no_proteins(self):
        """No tests: the threshold is used unchanged."""
        assert stage1_alpha(0.10, 0) == 0.10


class TestTwoStagePower:
    def test_cox_with_event_rate(self):
        sample = CoxSample(events=0, event_rate=0.1)
        r = two_stage_power(1.8, sample, _params())
        assert r.stage1_alpha == pytest.approx(2e-5)
        assert r.stage1_power == pytest.approx(cox_power(1.8, 50, 2e-5))
        assert r.joint_power == pytest.approx(r.stage1_power * r.stage2_power)
        assert r.joint_power <= min(r.stage1_power, r.stage2_power)
        assert r.total_sample_size == 1500

    def test_stage2_alpha_bonferroni_over_advancing(self):
        r = two_stage_power(1.8, CoxSample(events=0, event_rate=0.1), _params())
        expected = 10 * r.stage1_power + 4990 * 2e-5
        assert r.expected_advancing == pytest.approx(expected)
        assert r.stage2_per_protein_alpha == pytest.approx(0.05 / math.ceil(expected))

    def test_cox_without_event_rate_keeps_events(self):
        """Stage sizes cannot change a fixed event count."""
        r = two_stage_power(1.5, CoxSample(events=200), _params())
        assert r.stage1_power == pytest.approx(cox_power(1.5, 200, 2e-5))

    def test_few_advancing_keeps_stage2_alpha(self):
        r = two_stage_power(0.2, LinearSample(100), _params(stage1_proteins=10, expected_hits=0))
        assert r.expected_advancing < 1
        assert r.stage2_per_protein_alpha == 0.05

    def test_hits_exceed_proteins(self):
        """Null count never goes negative."""
        r = two_stage_power(0.2, LinearSample(100), _params(stage1_proteins=5, expected_hits=10))
        assert r.expected_advancing == pytest.approx(10 * r.stage1_power)

    def test_overlap_reduces_total_and_stage2_power(self):
        sample = LinearSample(100)
        indep = two_stage_power(0.1, sample, _params())
        shared = two_stage_power(0.1, sample, _params(sample_overlap=0.5))
        assert shared.total_sample_size == 1000
        assert shared.stage1_power == pytest.approx(indep.stage1_power)
        assert shared.stage2_power < indep.stage2_power

    def test_overlap_is_clamped(self):
        r = two_stage_power(0.1, LinearSample(100), _params(sample_overlap=3.0))
        assert r.total_sample_size == 500

    def test_cost_efficiency(self):
        r = two_stage_power(0.1, LinearSample(100), _params())
        single = linear_power(0.1, 1500, 1.0, 0.05 / 5000)
        assert r.cost_efficiency == pytest.approx(r.joint_power / single)

    def test_cost_efficiency_zero_single_power(self):
        r = two_stage_power(0.1, LinearSample(100), _params(stage1_sample_size=1, stage2_sample_size=1))
        assert r.cost_efficiency == 1.0

    def test_summary(self):
        r = two_stage_power(0.2, LinearSample(100), _params())
        assert "joint power" in r.summary()


class TestOptimalFDR:
    def test_grid_search(self):
        r = find_optimal_stage1_fdr(0.2, LinearSample(100), _params())
        assert r.optimal_fdr in DEFAULT_FDR_GRID
        assert r.max_joint_power == pytest.approx(r.joint_power.max())
        assert len(r.fdr) == len(DEFAULT_FDR_GRID)

    def test_matches_direct_evaluation(self):
        r = find_optimal_stage1_fdr(0.2, LinearSample(100), _params(), fdr_grid=[0.05, 0.3])
        direct = [two_stage_power(0.2, LinearSample(100), _params(stage1_fdr=q)).joint_power
                  for q in (0.05, 0.3)]
        np.testing.assert_allclose(r.joint_power, direct)

    def test_tie_goes_to_first(self):
        """Saturated power everywhere picks the first grid value."""
        r = find_optimal_stage1_fdr(5.0, LinearSample(500), _params())
        assert r.optimal_fdr == 0.05
        assert r.max_joint_power == pytest.approx(1.0)

    def test_empty_grid_raises(self):
        with pytest.raises(ValueError, match="fdr_grid"):
            find_optimal_stage1_fdr(0.2, LinearSample(100), _params(), fdr_grid=[])


class TestRequiredStage2Size:
    def test_reaches_target(self):
        n2 = required_stage2_size(0.3, LinearSample(100), 0.8, _params())
        r = two_stage_power(0.3, LinearSample(100), _params(stage2_sample_size=n2))
        assert 50 <= n2 <= 10_000
        assert abs(r.joint_power - 0.8) < 0.01

    def test_unattainable_returns_upper_bound(self):
        assert required_stage2_size(0.01, LinearSample(100), 0.8, _params()) == 10_000

    def test_already_met_returns_lower_bound(self):
        assert required_stage2_size(5.0, LinearSample(100), 0.5, _params()) == 50

    def test_bad_bounds(self):
        with pytest.raises(ValueError, match="low"):
            required_stage2_size(0.3, LinearSample(100), 0.8, _params(), low=100, high=50)
