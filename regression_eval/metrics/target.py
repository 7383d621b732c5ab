"""Metric targets: which output a metric is computed for."""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from regression_eval.entities.prediction import OutputDimension


class Average(StrEnum):
    MACRO = "macro"


@dataclass(frozen=True)
class MetricTarget:
    """Either one specific output dimension or an averaging request.

    Exactly one of `dimension` / `average` is set. Equality and hashing are
    structural, so two targets built independently for the same dimension
    collapse to one key in a metric set.

    Usage:
        MetricTarget.for_dimension("price")
        MetricTarget.macro()
    """

    dimension: OutputDimension | None = None
    average: Average | None = None

    def __post_init__(self) -> None:
        if (self.dimension is None) == (self.average is None):
            raise ValueError("MetricTarget needs exactly one of dimension or average")
        if self.dimension is not None:
            object.__setattr__(self, "dimension", OutputDimension.coerce(self.dimension))
        if self.average is not None:
            object.__setattr__(self, "average", Average(self.average))

    @classmethod
    def for_dimension(cls, dimension: OutputDimension | str) -> "MetricTarget":
        return cls(dimension=OutputDimension.coerce(dimension))

    @classmethod
    def macro(cls) -> "MetricTarget":
        return cls(average=Average.MACRO)

    @property
    def is_macro(self) -> bool:
        return self.average is Average.MACRO

    def __str__(self) -> str:
        if self.dimension is not None:
            return self.dimension.name
        return str(self.average)
