from regression_eval.metrics.context import DegeneratePolicy, DimensionStats, EvaluationContext
from regression_eval.metrics.registry import (
    MetricIdentity,
    MetricKind,
    MetricsRegistry,
    RegressionMetric,
    get_default_registry,
)
from regression_eval.metrics.target import Average, MetricTarget

__all__ = [
    "Average",
    "DegeneratePolicy",
    "DimensionStats",
    "EvaluationContext",
    "MetricIdentity",
    "MetricKind",
    "MetricTarget",
    "MetricsRegistry",
    "RegressionMetric",
    "get_default_registry",
]
