"""Built-in regression metric implementations for the metrics registry.

Each function follows the signature:
    fn(context: EvaluationContext, target: MetricTarget) → float

Every metric is first computed per output dimension from the context's
aggregates; a macro target then takes the unweighted mean over dimensions.
A batch whose total weight is zero scores NaN for every metric.
"""
from __future__ import annotations

import numpy as np

from regression_eval.metrics.context import EvaluationContext
from regression_eval.metrics.target import MetricTarget


# ── Helpers ──


def _resolve(context: EvaluationContext, target: MetricTarget, per_dimension: np.ndarray) -> float:
    """Pick the target's dimension out of `per_dimension`, or macro-average it."""
    if target.is_macro:
        return context.macro_average(per_dimension)
    return float(per_dimension[context.index_of(target.dimension)])


def _no_weight(context: EvaluationContext) -> np.ndarray:
    return np.full(context.num_dimensions, np.nan)


def _explained(context: EvaluationContext, residual_terms: np.ndarray) -> np.ndarray:
    policy = context.degenerate
    return np.array(
        [
            policy.explained_fraction(float(res), float(tot))
            for res, tot in zip(residual_terms, context.sum_squared_deviation)
        ],
        dtype=np.float64,
    )


# ── Per-dimension vectors ──


def r2_per_dimension(context: EvaluationContext) -> np.ndarray:
    """1 - SSres / SStot for every dimension."""
    if context.total_weight == 0.0:
        return _no_weight(context)
    return _explained(context, context.sum_squared_residual)


def rmse_per_dimension(context: EvaluationContext) -> np.ndarray:
    if context.total_weight == 0.0:
        return _no_weight(context)
    return np.sqrt(context.sum_squared_residual / context.total_weight)


def mae_per_dimension(context: EvaluationContext) -> np.ndarray:
    if context.total_weight == 0.0:
        return _no_weight(context)
    return context.sum_absolute_residual / context.total_weight


def explained_variance_per_dimension(context: EvaluationContext) -> np.ndarray:
    """1 - Var(residual) / Var(actual) for every dimension.

    The residual variance is centred on the mean residual, so a constant bias
    in the predictions does not lower the score (unlike R2).
    """
    if context.total_weight == 0.0:
        return _no_weight(context)
    # Both variances share the 1 / total_weight normaliser, which cancels
    return _explained(context, context.sum_squared_residual_deviation)


# ── Metric functions ──


def compute_r2(context: EvaluationContext, target: MetricTarget) -> float:
    """Coefficient of determination."""
    return _resolve(context, target, r2_per_dimension(context))


def compute_rmse(context: EvaluationContext, target: MetricTarget) -> float:
    """Root mean squared error. The macro value averages per-dimension RMSEs, it does not pool residuals."""
    return _resolve(context, target, rmse_per_dimension(context))


def compute_mae(context: EvaluationContext, target: MetricTarget) -> float:
    """Mean absolute error."""
    return _resolve(context, target, mae_per_dimension(context))


def compute_explained_variance(context: EvaluationContext, target: MetricTarget) -> float:
    """Explained variance."""
    return _resolve(context, target, explained_variance_per_dimension(context))
