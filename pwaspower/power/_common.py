"""Shared helpers for the per-model power calculators."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from pwaspower.power._normal import normal_cdf, normal_quantile

logger = logging.getLogger(__name__)

# math.exp overflows just above this
_MAX_LOG = 709.0


# ---------------------------------------------------------------------------
# Shared validation
# ---------------------------------------------------------------------------

def _sanitize_r2(covariate_r2: float) -> float:
    """Covariate R^2 outside [0, 1) means no adjustment."""
    if not (0.0 <= covariate_r2 < 1.0):
        return 0.0
    return covariate_r2


def _is_probability(x: float) -> bool:
    """True if ``x`` lies strictly inside (0, 1)."""
    return 0.0 < x < 1.0


# ---------------------------------------------------------------------------
# Shared Wald-test arithmetic
# ---------------------------------------------------------------------------

def _z_crit(alpha: float) -> float:
    """Two-sided critical value ``z_{1 - alpha/2}``.

    Computed as ``-Phi^{-1}(alpha/2)`` so that proteome-wide alphas far
    below machine epsilon do not round ``1 - alpha/2`` up to 1. ``alpha/2``
    is floored at the smallest subnormal so it never underflows to 0.
    """
    return -normal_quantile(max(alpha / 2.0, math.ulp(0.0)))


def _z_sum(alpha: float, power: float) -> float:
    """``z_{1 - alpha/2} + z_{power}``."""
    return _z_crit(alpha) + normal_quantile(power)


def _wald_power(ncp: float, alpha: float) -> float:
    """Two-sided Wald-test power for noncentrality ``|effect| / SE``.

    Keeps the opposite-direction tail so that power at the null equals
    alpha.
    """
    z = _z_crit(alpha)
    pwr = normal_cdf(ncp - z) + normal_cdf(-ncp - z)
    return min(max(pwr, 0.0), 1.0)


def _exp_effect(log_effect: float) -> float:
    """``exp`` that saturates to ``inf`` instead of raising OverflowError."""
    if log_effect > _MAX_LOG:
        return math.inf
    return math.exp(log_effect)


# ---------------------------------------------------------------------------
# Shared integer search
# ---------------------------------------------------------------------------

def _search_min_integer(
    func: Callable[[int], float],
    target: float,
    low: int,
    high: int,
    *,
    max_iter: int = 50,
) -> float:
    """Smallest integer ``x`` in ``[low, high]`` with ``func(x) >= target``.

    Bisection assuming ``func`` is non-decreasing. Returns ``math.inf``
    when ``func(high)`` is still below target. If the iteration budget
    runs out first, the upper end of the final bracket is returned.

    Raises
    ------
    ValueError
        If ``low > high`` or ``max_iter < 1``.
    """
    if low > high:
        raise ValueError(f"low must be <= high, got low={low}, high={high}")
    if max_iter < 1:
        raise ValueError(f"max_iter must be >= 1, got {max_iter}")

    if func(high) < target:
        logger.debug("target %.4f not reached at upper bound %d", target, high)
        return math.inf
    if func(low) >= target:
        return low

    # invariant: func(low) < target <= func(high)
    for _ in range(max_iter):
        if high - low <= 1:
            return high
        mid = (low + high) // 2
        if func(mid) >= target:
            high = mid
        else:
            low = mid

    if high - low <= 1:
        return high
    logger.warning(
        "search for target %.4f did not converge in %d iterations; "
        "returning %d (bracket width %d)",
        target, max_iter, high, high - low,
    )
    return high
