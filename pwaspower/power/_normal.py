"""Standard normal CDF and quantile function.

Thin wrappers over ``scipy.stats.norm`` that return plain floats and fail
fast at the boundary of the quantile's domain instead of returning
``inf``/``nan`` into downstream formulas.
"""

from __future__ import annotations

import math

from scipy.stats import norm


class DomainError(ValueError):
    """Raised when a probability lies outside the open interval (0, 1)."""


def normal_cdf(z: float) -> float:
    """Standard normal CDF, ``Phi(z) = P(Z <= z)`` for ``Z ~ N(0, 1)``."""
    return float(norm.cdf(z))


def normal_quantile(p: float) -> float:
    """Inverse standard normal CDF.

    Parameters
    ----------
    p : float
        Probability, strictly inside (0, 1).

    Returns
    -------
    float
        ``z`` such that ``Phi(z) == p``.

    Raises
    ------
    DomainError
        If ``p <= 0``, ``p >= 1`` or ``p`` is NaN.
    """
    if math.isnan(p) or not (0.0 < p < 1.0):
        raise DomainError(f"p must be in (0, 1), got {p}")
    return float(norm.ppf(p))
