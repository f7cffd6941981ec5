"""
PWASPower: statistical power for proteome-wide association studies.

Closed-form power, minimum detectable effect and sample size for Cox,
linear, logistic, modified Poisson and GEE models across cohort,
case-control, cross-sectional, case-cohort and nested case-control
designs, with FDR/Bonferroni correction and two-stage designs.

Usage:
    from pwaspower import power, twostage
"""

__version__ = "0.1.0"

from pwaspower import power
from pwaspower import twostage

__all__ = [
    "__version__",
    "power",
    "twostage",
]
