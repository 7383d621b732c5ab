"""Boundary with the model that produced the predictions."""
from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from regression_eval.entities.prediction import OutputDimension


@runtime_checkable
class Predictor(Protocol):
    """Anything that declares an ordered output domain.

    The evaluator only reads `output_domain`; it never runs inference.
    """

    @property
    def output_domain(self) -> Sequence[OutputDimension | str]: ...
