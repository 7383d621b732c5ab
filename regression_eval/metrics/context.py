"""Evaluation context: sufficient statistics shared by every regression metric."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from regression_eval.entities.prediction import OutputDimension, PredictionRecord, default_domain
from regression_eval.errors import DimensionMismatchError, EmptyBatchError, InvalidTargetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DegeneratePolicy:
    """Scores reported for R2 / explained variance when the actual values have zero variance.

    `perfect_fit` is used when the residual term is also zero, `imperfect_fit`
    otherwise.
    """

    perfect_fit: float = 0.0
    imperfect_fit: float = float("-inf")

    def explained_fraction(self, residual_term: float, total_term: float) -> float:
        """Return 1 - residual_term / total_term, resolving total_term == 0 by policy."""
        if math.isnan(residual_term) or math.isnan(total_term):
            return float("nan")
        if total_term == 0.0:
            return self.perfect_fit if residual_term == 0.0 else self.imperfect_fit
        return 1.0 - residual_term / total_term


@dataclass(frozen=True)
class DimensionStats:
    """Aggregates for a single output dimension."""

    dimension: OutputDimension
    total_weight: float
    sum_actual: float
    mean_actual: float
    sum_predicted: float
    sum_squared_deviation: float
    sum_squared_residual: float
    sum_absolute_residual: float
    sum_residual: float
    mean_residual: float
    sum_squared_residual_deviation: float


def _read_only(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def _constant_columns(values: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """True for columns whose rows selected by `mask` all hold the same value."""
    selected = values[mask]
    if selected.shape[0] == 0:
        return np.ones(values.shape[1], dtype=bool)
    return np.all(selected == selected[0], axis=0)


@dataclass(frozen=True, eq=False)
class EvaluationContext:
    """Statistics for one evaluation run, computed eagerly and never mutated.

    Built once per (model, batch, weighting mode) and shared by every metric
    evaluated on that batch. All per-dimension aggregates are float64 arrays
    of shape (num_dimensions,), indexed in `domain` order.
    """

    domain: tuple[OutputDimension, ...]
    actual: np.ndarray
    predicted: np.ndarray
    weights: np.ndarray
    use_example_weights: bool
    degenerate: DegeneratePolicy
    total_weight: float
    sum_actual: np.ndarray
    mean_actual: np.ndarray
    sum_predicted: np.ndarray
    sum_squared_deviation: np.ndarray
    sum_squared_residual: np.ndarray
    sum_absolute_residual: np.ndarray
    sum_residual: np.ndarray
    mean_residual: np.ndarray
    sum_squared_residual_deviation: np.ndarray
    _index: dict[OutputDimension, int] = field(repr=False, default_factory=dict)

    @classmethod
    def build(
        cls,
        records: Sequence[PredictionRecord],
        domain: Sequence[OutputDimension | str] | None = None,
        use_example_weights: bool = False,
        degenerate: DegeneratePolicy | None = None,
    ) -> "EvaluationContext":
        """Validate the batch and compute every aggregate in one pass over the records."""
        records = list(records)
        if not records:
            raise EmptyBatchError("cannot build an evaluation context from an empty batch")

        num_dims = len(records[0].actual)
        for i, record in enumerate(records):
            if len(record.actual) != num_dims or len(record.predicted) != num_dims:
                raise DimensionMismatchError(
                    f"record {i} has {len(record.actual)} actual / {len(record.predicted)} "
                    f"predicted values, expected {num_dims}"
                )

        if domain is None:
            dims = default_domain(num_dims)
        else:
            dims = tuple(OutputDimension.coerce(d) for d in domain)
            if len(dims) != num_dims:
                raise DimensionMismatchError(
                    f"output domain declares {len(dims)} dimensions but records have {num_dims}"
                )
            if len(set(dims)) != len(dims):
                raise ValueError(f"output domain contains duplicate dimensions: {dims}")

        actual = np.array([r.actual for r in records], dtype=np.float64).reshape(len(records), num_dims)
        predicted = np.array([r.predicted for r in records], dtype=np.float64).reshape(len(records), num_dims)
        if use_example_weights:
            weights = np.array([r.weight for r in records], dtype=np.float64)
        else:
            weights = np.ones(len(records), dtype=np.float64)

        total_weight = float(weights.sum())
        with np.errstate(invalid="ignore"):
            residual = actual - predicted

        # Zero-weight rows are left out of every sum, so non-finite values there cannot leak in
        contributing = weights != 0.0
        rows = contributing[:, None]
        actual_in = np.where(rows, actual, 0.0)
        predicted_in = np.where(rows, predicted, 0.0)
        residual_in = np.where(rows, residual, 0.0)

        with np.errstate(divide="ignore", invalid="ignore"):
            sum_actual = weights @ actual_in
            mean_actual = sum_actual / total_weight
            sum_residual = weights @ residual_in
            mean_residual = sum_residual / total_weight
            # Second pass over centred values keeps the variance terms stable
            sum_squared_deviation = weights @ np.where(rows, np.square(actual_in - mean_actual), 0.0)
            sum_squared_residual_deviation = weights @ np.where(
                rows, np.square(residual_in - mean_residual), 0.0
            )
            sum_squared_residual = weights @ np.square(residual_in)
            sum_absolute_residual = weights @ np.abs(residual_in)
            sum_predicted = weights @ predicted_in

        # A constant column has exactly zero spread; rounding in the mean must not hide that
        if total_weight != 0.0:
            sum_squared_deviation = np.where(
                _constant_columns(actual, contributing), 0.0, sum_squared_deviation
            )
            sum_squared_residual_deviation = np.where(
                _constant_columns(residual, contributing), 0.0, sum_squared_residual_deviation
            )

        logger.debug(
            "Built evaluation context: %d examples, %d dimensions, weighted=%s, total_weight=%.6g",
            len(records), num_dims, use_example_weights, total_weight,
        )

        return cls(
            domain=dims,
            actual=_read_only(actual),
            predicted=_read_only(predicted),
            weights=_read_only(weights),
            use_example_weights=use_example_weights,
            degenerate=degenerate or DegeneratePolicy(),
            total_weight=total_weight,
            sum_actual=_read_only(sum_actual),
            mean_actual=_read_only(mean_actual),
            sum_predicted=_read_only(sum_predicted),
            sum_squared_deviation=_read_only(sum_squared_deviation),
            sum_squared_residual=_read_only(sum_squared_residual),
            sum_absolute_residual=_read_only(sum_absolute_residual),
            sum_residual=_read_only(sum_residual),
            mean_residual=_read_only(mean_residual),
            sum_squared_residual_deviation=_read_only(sum_squared_residual_deviation),
            _index={d: i for i, d in enumerate(dims)},
        )

    @property
    def num_examples(self) -> int:
        return int(self.actual.shape[0])

    @property
    def num_dimensions(self) -> int:
        return len(self.domain)

    def index_of(self, dimension: OutputDimension | str) -> int:
        """Column index of `dimension`, raising InvalidTargetError if it is not in the domain."""
        try:
            return self._index[OutputDimension.coerce(dimension)]
        except KeyError:
            raise InvalidTargetError(
                f"dimension {str(dimension)!r} is not in the output domain "
                f"{[d.name for d in self.domain]}"
            ) from None

    def dimension_stats(self, dimension: OutputDimension | str) -> DimensionStats:
        i = self.index_of(dimension)
        return DimensionStats(
            dimension=self.domain[i],
            total_weight=self.total_weight,
            sum_actual=float(self.sum_actual[i]),
            mean_actual=float(self.mean_actual[i]),
            sum_predicted=float(self.sum_predicted[i]),
            sum_squared_deviation=float(self.sum_squared_deviation[i]),
            sum_squared_residual=float(self.sum_squared_residual[i]),
            sum_absolute_residual=float(self.sum_absolute_residual[i]),
            sum_residual=float(self.sum_residual[i]),
            mean_residual=float(self.mean_residual[i]),
            sum_squared_residual_deviation=float(self.sum_squared_residual_deviation[i]),
        )

    @staticmethod
    def macro_average(values: Sequence[float] | np.ndarray) -> float:
        """Unweighted mean across dimensions; every dimension counts once regardless of scale."""
        values = np.asarray(values, dtype=np.float64)
        if values.size == 0:
            return float("nan")
        with np.errstate(invalid="ignore"):
            return float(np.mean(values))
