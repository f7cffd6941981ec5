"""
Invariants shared by every model.

Null power equals alpha, power is monotone in effect, size and alpha,
symmetric in effect direction, bounded, and the inverse relations agree
with the power formula.
"""

import math

import pytest

from pwaspower.power import (
    CoxSample,
    GEESample,
    LinearSample,
    LogisticSample,
    PoissonSample,
    PowerParams,
    calculate_min_effect,
    calculate_power,
    calculate_required_n,
)

# name -> (sample built from a size, null effect, non-null effect, is_ratio)
MODELS = {
    "cox": (lambda n: CoxSample(events=n), 1.0, 1.5, True),
    "cox_case_cohort": (
        lambda n: CoxSample(n, "case-cohort", subcohort_size=400, total_cohort=2000), 1.0, 1.5, True,
    ),
    "cox_nested": (lambda n: CoxSample(n, "nested-case-control", matching_ratio=2), 1.0, 1.5, True),
    "linear": (lambda n: LinearSample(n, residual_sd=1.0), 0.0, 0.2, False),
    "logistic": (lambda n: LogisticSample(n, prevalence=0.5), 1.0, 1.5, True),
    "logistic_case_control": (
        lambda n: LogisticSample(cases=n, controls=2 * n, study_design="case-control"), 1.0, 1.5, True,
    ),
    "poisson": (lambda n: PoissonSample(n, prevalence=0.1), 1.0, 1.5, True),
    "gee": (lambda n: GEESample(n, cluster_size=4, icc=0.1), 0.0, 0.2, False),
}

# Models whose closed-form required N is exactly the power formula's inverse.
TIGHT_MODELS = [
    "cox", "cox_case_cohort", "cox_nested", "linear", "logistic", "logistic_case_control", "poisson",
]


def _power(sample, effect, alpha):
    return calculate_power(PowerParams(sample, effect, alpha))


@pytest.fixture(params=sorted(MODELS))
def model(request):
    return MODELS[request.param]


class TestNullPower:
    """Power at the null equals alpha."""

    @pytest.mark.parametrize("alpha", [0.05, 0.01, 1e-5])
    def test_null_equals_alpha(self, model, alpha):
        make, null, _, _ = model
        assert _power(make(500), null, alpha) == pytest.approx(alpha, abs=1e-3)


class TestMonotonicity:
    """Power never decreases with effect magnitude, sample size or alpha."""

    def test_effect_magnitude(self, model):
        make, null, effect, is_ratio = model
        if is_ratio:
            effects = [null, 1.1, 1.2, 1.4, effect, 2.0]
        else:
            effects = [null, 0.05, 0.1, 0.15, effect, 0.4]
        powers = [_power(make(300), e, 1e-3) for e in effects]
        assert all(a <= b for a, b in zip(powers, powers[1:])), powers

    def test_sample_size(self, model):
        make, _, effect, _ = model
        powers = [_power(make(n), effect, 1e-4) for n in [20, 50, 100, 200, 500, 1000]]
        assert all(a <= b for a, b in zip(powers, powers[1:])), powers

    def test_alpha(self, model):
        make, _, effect, _ = model
        powers = [_power(make(200), effect, a) for a in [5e-8, 1e-5, 1e-3, 0.01, 0.05, 0.2]]
        assert all(a <= b for a, b in zip(powers, powers[1:])), powers


class TestSymmetry:
    """Effect direction does not change power."""

    def test_direction(self, model):
        make, _, effect, is_ratio = model
        opposite = 1.0 / effect if is_ratio else -effect
        assert _power(make(250), effect, 0.01) == pytest.approx(
            _power(make(250), opposite, 0.01), abs=1e-10,
        )


class TestBoundedness:
    """Power stays in [0, 1] at extreme inputs."""

    @pytest.mark.parametrize("alpha", [5e-8, 0.5])
    @pytest.mark.parametrize("n", [3, 10000])
    def test_bounded(self, model, alpha, n):
        make, _, _, is_ratio = model
        for effect in ([0.01, 1.0, 100.0] if is_ratio else [-5.0, 0.0, 5.0]):
            assert 0.0 <= _power(make(n), effect, alpha) <= 1.0

    @pytest.mark.parametrize("prevalence", [0.01, 0.99])
    def test_extreme_prevalence(self, prevalence):
        for sample in (LogisticSample(10000, prevalence), PoissonSample(10000, prevalence)):
            assert 0.0 <= _power(sample, 1.5, 5e-8) <= 1.0

    def test_smallest_subnormal_alpha(self, model):
        """Half of the smallest positive float underflows; power stays defined."""
        make, _, effect, _ = model
        alpha = 5e-324
        assert 0.0 <= _power(make(100), effect, alpha) <= 1.0
        assert math.isfinite(calculate_min_effect(make(100), 0.8, alpha))


class TestInverseConsistency:
    """Minimum effect and required N invert the power formula."""

    @pytest.mark.parametrize("target", [0.5, 0.8, 0.95])
    def test_min_effect(self, model, target):
        make, _, _, _ = model
        sample = make(400)
        effect = calculate_min_effect(sample, target, 1e-4)
        assert _power(sample, effect, 1e-4) == pytest.approx(target, abs=1e-3)

    @pytest.mark.parametrize("name", TIGHT_MODELS)
    def test_required_n_tight(self, name):
        make, _, effect, _ = MODELS[name]
        n = calculate_required_n(PowerParams(make(1), effect, 0.05), 0.80)
        assert _power(make(n), effect, 0.05) >= 0.80
        assert _power(make(n - 1), effect, 0.05) < 0.80

    def test_required_n_gee_reaches_target(self):
        make, _, effect, _ = MODELS["gee"]
        n = calculate_required_n(PowerParams(make(1), effect, 0.05), 0.80)
        assert _power(make(n), effect, 0.05) >= 0.80

    def test_required_n_null_is_inf(self, model):
        make, null, _, _ = model
        assert calculate_required_n(PowerParams(make(1), null, 0.05), 0.80) == float("inf")
