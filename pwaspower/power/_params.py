"""Analysis types, study designs and per-model parameter bundles.

Each analysis type has its own frozen sample dataclass carrying exactly the
fields its standard-error formula reads. ``PowerParams`` pairs one of them
with an effect size and a per-test alpha.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union


class AnalysisType(str, Enum):
    """Regression framework used for each protein."""

    COX = "cox"
    LINEAR = "linear"
    LOGISTIC = "logistic"
    POISSON = "poisson"
    GEE = "gee"


class StudyDesign(str, Enum):
    """Sampling design of the study."""

    COHORT = "cohort"
    CASE_CONTROL = "case-control"
    CROSS_SECTIONAL = "cross-sectional"
    CASE_COHORT = "case-cohort"
    NESTED_CASE_CONTROL = "nested-case-control"


def _coerce(enum_cls: type[Enum], value: Any, name: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        valid = tuple(m.value for m in enum_cls)
        raise ValueError(f"{name} must be one of {valid}, got {value!r}") from None


def _present(*values: float | None) -> bool:
    """True if every design field is set and positive; zero counts mean not yet entered."""
    return all(v is not None and v > 0 for v in values)


# ---------------------------------------------------------------------------
# Sample variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CoxSample:
    """Time-to-event study analysed with Cox regression.

    ``subcohort_size``/``total_cohort`` are read for case-cohort designs and
    ``matching_ratio`` (controls per case) for nested case-control designs;
    missing or non-positive values fall back to the cohort SE.
    ``event_rate`` (events per subject) lets the study be re-scaled to a
    different number of subjects.
    """

    analysis_type: ClassVar[AnalysisType] = AnalysisType.COX

    events: float
    study_design: StudyDesign = StudyDesign.COHORT
    subcohort_size: float | None = None
    total_cohort: float | None = None
    matching_ratio: float | None = None
    event_rate: float | None = None
    covariate_r2: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "study_design", _coerce(StudyDesign, self.study_design, "study_design"),
        )

    def design_kwargs(self) -> dict[str, float | None]:
        """Keyword arguments that select the design-specific SE."""
        kwargs: dict[str, float | None] = {"covariate_r2": self.covariate_r2}
        if self.study_design is StudyDesign.CASE_COHORT:
            if _present(self.subcohort_size, self.total_cohort):
                kwargs["subcohort_size"] = self.subcohort_size
                kwargs["total_cohort"] = self.total_cohort
        elif self.study_design is StudyDesign.NESTED_CASE_CONTROL:
            if _present(self.matching_ratio):
                kwargs["matching_ratio"] = self.matching_ratio
        return kwargs

    def with_sample_size(self, n: float) -> CoxSample:
        """Study with ``n`` subjects; events are unchanged without an event rate."""
        if self.event_rate is None:
            return self
        return dataclasses.replace(self, events=n * self.event_rate)


@dataclass(frozen=True)
class LinearSample:
    """Continuous outcome analysed with linear regression."""

    analysis_type: ClassVar[AnalysisType] = AnalysisType.LINEAR

    sample_size: float
    residual_sd: float = 1.0
    study_design: StudyDesign = StudyDesign.COHORT
    covariate_r2: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "study_design", _coerce(StudyDesign, self.study_design, "study_design"),
        )

    def with_sample_size(self, n: float) -> LinearSample:
        return dataclasses.replace(self, sample_size=n)


@dataclass(frozen=True)
class LogisticSample:
    """Binary outcome analysed with logistic regression.

    Case-control and nested case-control designs read ``cases`` and
    ``controls`` when both are positive; otherwise, and for the other
    designs, ``sample_size`` and ``prevalence`` are used.
    """

    analysis_type: ClassVar[AnalysisType] = AnalysisType.LOGISTIC

    sample_size: float = 0.0
    prevalence: float = 0.1
    cases: float | None = None
    controls: float | None = None
    study_design: StudyDesign = StudyDesign.COHORT
    covariate_r2: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "study_design", _coerce(StudyDesign, self.study_design, "study_design"),
        )

    @property
    def uses_case_control(self) -> bool:
        """True when the cases/controls SE applies."""
        return (
            self.study_design in (StudyDesign.CASE_CONTROL, StudyDesign.NESTED_CASE_CONTROL)
            and _present(self.cases, self.controls)
        )

    def design_kwargs(self) -> dict[str, float | None]:
        kwargs: dict[str, float | None] = {"covariate_r2": self.covariate_r2}
        if self.uses_case_control:
            kwargs["cases"] = self.cases
            kwargs["controls"] = self.controls
        return kwargs

    def with_sample_size(self, n: float) -> LogisticSample:
        """Study with ``n`` subjects; case-control counts keep their ratio."""
        if self.uses_case_control:
            assert self.cases is not None and self.controls is not None
            total = self.cases + self.controls
            if total > 0:
                factor = n / total
                return dataclasses.replace(
                    self,
                    sample_size=n,
                    cases=self.cases * factor,
                    controls=self.controls * factor,
                )
        return dataclasses.replace(self, sample_size=n)


@dataclass(frozen=True)
class PoissonSample:
    """Binary outcome analysed with modified Poisson regression."""

    analysis_type: ClassVar[AnalysisType] = AnalysisType.POISSON

    sample_size: float
    prevalence: float = 0.1
    study_design: StudyDesign = StudyDesign.COHORT
    covariate_r2: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "study_design", _coerce(StudyDesign, self.study_design, "study_design"),
        )

    def with_sample_size(self, n: float) -> PoissonSample:
        return dataclasses.replace(self, sample_size=n)


@dataclass(frozen=True)
class GEESample:
    """Clustered or longitudinal outcome analysed with GEE / mixed models."""

    analysis_type: ClassVar[AnalysisType] = AnalysisType.GEE

    sample_size: float
    cluster_size: float = 1.0
    icc: float = 0.0
    residual_sd: float = 1.0
    study_design: StudyDesign = StudyDesign.COHORT
    covariate_r2: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "study_design", _coerce(StudyDesign, self.study_design, "study_design"),
        )

    def with_sample_size(self, n: float) -> GEESample:
        return dataclasses.replace(self, sample_size=n)


Sample = Union[CoxSample, LinearSample, LogisticSample, PoissonSample, GEESample]

_SAMPLE_TYPES: dict[AnalysisType, type] = {
    AnalysisType.COX: CoxSample,
    AnalysisType.LINEAR: LinearSample,
    AnalysisType.LOGISTIC: LogisticSample,
    AnalysisType.POISSON: PoissonSample,
    AnalysisType.GEE: GEESample,
}

# Required fields that default to 0 when a flat mapping omits them.
_ZERO_DEFAULTS = ("events", "sample_size")


@dataclass(frozen=True)
class PowerParams:
    """Effect size and per-test alpha for one study."""

    sample: Sample
    effect_size: float
    alpha: float

    @property
    def analysis_type(self) -> AnalysisType:
        return self.sample.analysis_type

    @property
    def study_design(self) -> StudyDesign:
        return self.sample.study_design


def make_sample(
    analysis_type: AnalysisType | str,
    study_design: StudyDesign | str = StudyDesign.COHORT,
    **fields: Any,
) -> Sample:
    """Build the sample variant for ``analysis_type`` from flat fields.

    Fields the variant does not carry are ignored; fields it carries but
    that are missing or ``None`` take their defaults (``residual_sd=1``,
    ``prevalence=0.1``, ``cluster_size=1``, ``icc=0``, counts 0).

    Raises
    ------
    ValueError
        For an unknown analysis type or study design.
    """
    kind = _coerce(AnalysisType, analysis_type, "analysis_type")
    design = _coerce(StudyDesign, study_design, "study_design")
    cls = _SAMPLE_TYPES[kind]

    kwargs: dict[str, Any] = {"study_design": design}
    for f in dataclasses.fields(cls):
        if f.name == "study_design":
            continue
        value = fields.get(f.name)
        if value is not None:
            kwargs[f.name] = value
        elif f.name in _ZERO_DEFAULTS and f.default is dataclasses.MISSING:
            kwargs[f.name] = 0.0
    return cls(**kwargs)
