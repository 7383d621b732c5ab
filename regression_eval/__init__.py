"""regression-eval: multi-output regression metrics over a shared evaluation context.

Example usage:
    from regression_eval import PredictionRecord, RegressionEvaluator

    evaluator = RegressionEvaluator(use_example_weights=False)
    result = evaluator.evaluate(["price", "demand"], records)

    result.r2("price")     # one dimension
    result.rmse()          # macro average
"""
from regression_eval.config.runtime import EvaluatorSettings
from regression_eval.contracts import Predictor
from regression_eval.entities.prediction import OutputDimension, PredictionRecord, records_from_arrays
from regression_eval.errors import (
    DimensionMismatchError,
    EmptyBatchError,
    EvaluationError,
    InvalidTargetError,
)
from regression_eval.evaluation.evaluator import RegressionEvaluator
from regression_eval.evaluation.result import EvaluationResult
from regression_eval.metrics.context import DegeneratePolicy, EvaluationContext
from regression_eval.metrics.registry import (
    MetricIdentity,
    MetricKind,
    MetricsRegistry,
    RegressionMetric,
    get_default_registry,
)
from regression_eval.metrics.target import Average, MetricTarget
from regression_eval.schemas.provenance import EvaluationProvenance

__version__ = "0.1.0"

__all__ = [
    # Entities
    "OutputDimension",
    "PredictionRecord",
    "records_from_arrays",
    # Metrics
    "Average",
    "MetricTarget",
    "MetricKind",
    "MetricIdentity",
    "RegressionMetric",
    "MetricsRegistry",
    "get_default_registry",
    "DegeneratePolicy",
    "EvaluationContext",
    # Evaluation
    "RegressionEvaluator",
    "EvaluationResult",
    "EvaluationProvenance",
    "EvaluatorSettings",
    "Predictor",
    # Errors
    "EvaluationError",
    "EmptyBatchError",
    "DimensionMismatchError",
    "InvalidTargetError",
    "__version__",
]
