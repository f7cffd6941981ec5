"""Tests for the GEE / mixed-effects calculators."""

import math

import pytest

from pwaspower.power import (
    design_effect,
    effective_sample_size,
    gee_min_effect,
    gee_power,
    gee_required_clusters,
    gee_required_n,
    gee_se,
    linear_power,
    linear_required_n,
    linear_se,
)


class TestDesignEffect:
    """DE = 1 + (m - 1) * ICC."""

    def test_basic(self):
        assert design_effect(5, 0.1) == pytest.approx(1.4)

    def test_no_clustering(self):
        assert design_effect(1, 0.5) == pytest.approx(1.0)
        assert design_effect(10, 0.0) == pytest.approx(1.0)

    @pytest.mark.parametrize("m, icc", [(0, 0.1), (-2, 0.1), (5, -0.1), (5, 1.5)])
    def test_invalid_no_inflation(self, m, icc):
        assert design_effect(m, icc) == 1.0

    def test_effective_sample_size(self):
        assert effective_sample_size(1400, 5, 0.1) == pytest.approx(1000.0)


class TestGEEPower:
    """Power for clustered outcomes."""

    def test_se_reduces_to_linear(self):
        assert gee_se(300, 1, 0.0, 1.3) == pytest.approx(linear_se(300, 1.3))

    def test_se_inflated_by_sqrt_de(self):
        assert gee_se(300, 5, 0.1, 1.0) == pytest.approx(linear_se(300, 1.0) * math.sqrt(1.4))

    def test_icc_zero_matches_linear(self):
        assert gee_power(0.2, 400, 4, 0.0, 1.0, 0.05) == pytest.approx(
            linear_power(0.2, 400, 1.0, 0.05),
        )

    def test_higher_icc_less_power(self):
        assert gee_power(0.2, 400, 4, 0.3, 1.0, 0.05) < gee_power(0.2, 400, 4, 0.05, 1.0, 0.05)

    def test_null(self):
        assert gee_power(0.0, 400, 4, 0.2, 1.0, 0.05) == pytest.approx(0.05, abs=1e-3)

    def test_invalid(self):
        assert gee_power(0.2, 2, 4, 0.1, 1.0, 0.05) == 0.0
        assert gee_power(0.2, 400, 0, 0.1, 1.0, 0.05) == 0.0
        assert gee_power(0.2, 400, 4, 1.5, 1.0, 0.05) == 0.0
        assert gee_power(0.2, 400, 4, 0.1, 0.0, 0.05) == 0.0


class TestGEEInverse:
    """Minimum effect, required observations and clusters."""

    def test_min_effect_roundtrip(self):
        beta = gee_min_effect(0.80, 600, 3, 0.2, 1.0, 1e-4)
        assert gee_power(beta, 600, 3, 0.2, 1.0, 1e-4) == pytest.approx(0.80, abs=1e-3)

    def test_required_n_no_clustering_matches_linear(self):
        assert gee_required_n(0.2, 0.80, 1, 0.0, 1.0, 0.05) == linear_required_n(0.2, 0.80, 1.0, 0.05)

    def test_required_n_scaled_by_de(self):
        """198.2 independent-sample equivalents x DE 1.4 -> 278."""
        assert gee_required_n(0.2, 0.80, 5, 0.1, 1.0, 0.05) == 278

    def test_required_n_reaches_target(self):
        n = gee_required_n(0.15, 0.90, 8, 0.05, 1.0, 1e-3)
        assert gee_power(0.15, n, 8, 0.05, 1.0, 1e-3) >= 0.90

    def test_required_clusters(self):
        assert gee_required_clusters(0.2, 0.80, 5, 0.1, 1.0, 0.05) == 56

    def test_zero_beta(self):
        assert math.isinf(gee_required_n(0.0, 0.80, 5, 0.1, 1.0, 0.05))
        assert math.isinf(gee_required_clusters(0.0, 0.80, 5, 0.1, 1.0, 0.05))
