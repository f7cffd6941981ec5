"""Per-test significance level after multiple-testing correction."""

from __future__ import annotations

from enum import Enum


class CorrectionMethod(str, Enum):
    """Family-wise threshold interpretation."""

    FDR = "fdr"
    BONFERRONI = "bonferroni"


def _coerce_method(method: CorrectionMethod | str) -> CorrectionMethod:
    try:
        return CorrectionMethod(method)
    except ValueError:
        valid = tuple(m.value for m in CorrectionMethod)
        raise ValueError(f"method must be one of {valid}, got {method!r}") from None


def effective_alpha(
    threshold: float,
    num_tests: int,
    method: CorrectionMethod | str = CorrectionMethod.FDR,
) -> float:
    """Per-test alpha for ``num_tests`` simultaneous tests.

    Both methods divide the threshold by the number of tests. For
    Bonferroni the threshold is the family-wise alpha and the result is
    exact. For FDR the threshold is the Benjamini-Hochberg q-value and
    ``q / m`` is the rejection boundary of the smallest p-value, a
    conservative stand-in for the full step-up procedure.

    Parameters
    ----------
    threshold : float
        FDR q-value or family-wise alpha.
    num_tests : int
        Number of proteins tested. ``num_tests <= 0`` is treated as a
        single test and returns ``threshold`` unchanged.
    method : str
        ``'fdr'`` or ``'bonferroni'``.

    Examples
    --------
    >>> effective_alpha(0.05, 5000)
    1e-05
    """
    _coerce_method(method)
    if num_tests <= 0:
        return threshold
    return threshold / num_tests
