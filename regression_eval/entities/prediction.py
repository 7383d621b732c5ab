from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from regression_eval.errors import DimensionMismatchError

DEFAULT_DIMENSION_PREFIX = "DIM-"


@dataclass(frozen=True, order=True)
class OutputDimension:
    """One scalar component of a multi-output regression target."""
    name: str

    def __str__(self) -> str:
        return self.name

    @classmethod
    def coerce(cls, value: "OutputDimension | str") -> "OutputDimension":
        if isinstance(value, OutputDimension):
            return value
        if isinstance(value, str):
            return cls(value)
        raise TypeError(f"expected OutputDimension or str, got {type(value).__name__}")


def default_domain(num_dimensions: int) -> tuple[OutputDimension, ...]:
    """Column-ordered dimensions named DIM-0, DIM-1, ..."""
    return tuple(OutputDimension(f"{DEFAULT_DIMENSION_PREFIX}{i}") for i in range(num_dimensions))


@dataclass(frozen=True)
class PredictionRecord:
    """Ground truth and model output for one evaluated example.

    `weight` is only read when the evaluator runs with example weights enabled.
    `meta` is caller data (ids, timestamps) carried along untouched; the
    evaluator never reads it and it does not take part in equality.
    """
    actual: tuple[float, ...]
    predicted: tuple[float, ...]
    weight: float = 1.0
    meta: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "actual", tuple(float(v) for v in self.actual))
        object.__setattr__(self, "predicted", tuple(float(v) for v in self.predicted))
        object.__setattr__(self, "weight", float(self.weight))
        if len(self.actual) != len(self.predicted):
            raise DimensionMismatchError(
                f"actual has {len(self.actual)} dimensions but predicted has {len(self.predicted)}"
            )

    @property
    def num_dimensions(self) -> int:
        return len(self.actual)


def records_from_arrays(
    y_true: Any,
    y_pred: Any,
    sample_weight: Any = None,
) -> list[PredictionRecord]:
    """Build prediction records from array-likes.

    Accepts 1-D arrays (single output) or 2-D arrays shaped
    (n_examples, n_outputs). `sample_weight` is 1-D with one entry per example.
    """
    actual = np.asarray(y_true, dtype=np.float64)
    predicted = np.asarray(y_pred, dtype=np.float64)
    if actual.ndim == 1:
        actual = actual.reshape(-1, 1)
    if predicted.ndim == 1:
        predicted = predicted.reshape(-1, 1)
    if actual.ndim != 2 or predicted.ndim != 2:
        raise DimensionMismatchError(
            f"expected 1-D or 2-D arrays, got y_true.ndim={actual.ndim}, y_pred.ndim={predicted.ndim}"
        )
    if actual.shape != predicted.shape:
        raise DimensionMismatchError(
            f"y_true shape {actual.shape} does not match y_pred shape {predicted.shape}"
        )

    if sample_weight is None:
        weights = np.ones(actual.shape[0], dtype=np.float64)
    else:
        weights = np.asarray(sample_weight, dtype=np.float64).reshape(-1)
        if weights.shape[0] != actual.shape[0]:
            raise DimensionMismatchError(
                f"sample_weight has {weights.shape[0]} entries for {actual.shape[0]} examples"
            )

    return [
        PredictionRecord(actual=tuple(a), predicted=tuple(p), weight=float(w))
        for a, p, w in zip(actual.tolist(), predicted.tolist(), weights.tolist())
    ]
