"""
Power, minimum detectable effect and sample size for protein association tests.

One Wald-test formula family per regression framework (Cox, linear,
logistic, modified Poisson, GEE), each with design-specific standard errors,
plus multiple-testing alpha adjustment and a dispatch layer that routes a
parameter bundle to the right model.

Validates against: Schoenfeld (1983), Hsieh et al. (1998), Zou (2004),
Benjamini & Hochberg (1995).
"""

from pwaspower.power._normal import DomainError, normal_cdf, normal_quantile
from pwaspower.power._alpha import CorrectionMethod, effective_alpha
from pwaspower.power._cox import (
    case_cohort_vif,
    cox_se,
    cox_case_cohort_se,
    cox_nested_case_control_se,
    cox_power,
    cox_min_effect,
    cox_required_events,
)
from pwaspower.power._linear import (
    linear_se,
    linear_power,
    linear_power_from_r2,
    linear_min_effect,
    linear_required_n,
)
from pwaspower.power._logistic import (
    logistic_se,
    logistic_case_control_se,
    logistic_power,
    logistic_min_effect,
    logistic_required_n,
    logistic_required_cases,
)
from pwaspower.power._poisson import (
    poisson_se,
    poisson_power,
    poisson_min_effect,
    poisson_required_n,
)
from pwaspower.power._gee import (
    design_effect,
    effective_sample_size,
    gee_se,
    gee_power,
    gee_min_effect,
    gee_required_n,
    gee_required_clusters,
)
from pwaspower.power._params import (
    AnalysisType,
    StudyDesign,
    CoxSample,
    LinearSample,
    LogisticSample,
    PoissonSample,
    GEESample,
    Sample,
    PowerParams,
    make_sample,
)
from pwaspower.power._dispatch import (
    calculate_power,
    calculate_min_effect,
    calculate_required_n,
)
from pwaspower.power._curves import (
    PowerCurve,
    PowerTable,
    ProteinPowerGrid,
    ScenarioTable,
    generate_power_curve,
    generate_table_data,
    power_by_proteins,
    evaluate_scenarios,
    find_events_required,
    find_sample_size_required,
)
from pwaspower.power._convert import (
    or_to_rr,
    rr_to_or,
    beta_to_cohen_d,
    r2_to_f2,
    effect_inflation,
)

__all__ = [
    "DomainError",
    "normal_cdf",
    "normal_quantile",
    "CorrectionMethod",
    "effective_alpha",
    "case_cohort_vif",
    "cox_se",
    "cox_case_cohort_se",
    "cox_nested_case_control_se",
    "cox_power",
    "cox_min_effect",
    "cox_required_events",
    "linear_se",
    "linear_power",
    "linear_power_from_r2",
    "linear_min_effect",
    "linear_required_n",
    "logistic_se",
    "logistic_case_control_se",
    "logistic_power",
    "logistic_min_effect",
    "logistic_required_n",
    "logistic_required_cases",
    "poisson_se",
    "poisson_power",
    "poisson_min_effect",
    "poisson_required_n",
    "design_effect",
    "effective_sample_size",
    "gee_se",
    "gee_power",
    "gee_min_effect",
    "gee_required_n",
    "gee_required_clusters",
    "AnalysisType",
    "StudyDesign",
    "CoxSample",
    "LinearSample",
    "LogisticSample",
    "PoissonSample",
    "GEESample",
    "Sample",
    "PowerParams",
    "make_sample",
    "calculate_power",
    "calculate_min_effect",
    "calculate_required_n",
    "PowerCurve",
    "PowerTable",
    "ProteinPowerGrid",
    "ScenarioTable",
    "generate_power_curve",
    "generate_table_data",
    "power_by_proteins",
    "evaluate_scenarios",
    "find_events_required",
    "find_sample_size_required",
    "or_to_rr",
    "rr_to_or",
    "beta_to_cohen_d",
    "r2_to_f2",
    "effect_inflation",
]
