"""Metrics registry: regression metric kinds and the functions that compute them."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Iterable

from regression_eval.metrics.context import EvaluationContext
from regression_eval.metrics.target import MetricTarget

logger = logging.getLogger(__name__)

# Metric function signature:
#   fn(context: EvaluationContext, target: MetricTarget) → float
MetricFn = Callable[[EvaluationContext, MetricTarget], float]


class MetricKind(StrEnum):
    R2 = "r2"
    RMSE = "rmse"
    MAE = "mae"
    EV = "ev"


def _as_kind(kind: str) -> str:
    """Built-in kind names become MetricKind members; custom names stay plain strings."""
    try:
        return MetricKind(kind)
    except ValueError:
        return str(kind)


@dataclass(frozen=True)
class MetricIdentity:
    """(kind, target) pair keying a score in an evaluation result."""

    kind: str
    target: MetricTarget

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", _as_kind(self.kind))

    def __str__(self) -> str:
        return f"{self.kind}/{self.target}"


@dataclass(frozen=True)
class RegressionMetric:
    """A metric kind bound to a target. Carries no per-call state, so one
    instance is reused for every batch evaluated against the same model."""

    kind: str
    target: MetricTarget

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", _as_kind(self.kind))

    @property
    def identity(self) -> MetricIdentity:
        return MetricIdentity(kind=self.kind, target=self.target)

    def compute(self, context: EvaluationContext, registry: "MetricsRegistry") -> float:
        """Score with `registry`, normally the one the owning evaluator was built with."""
        return registry.compute_one(self, context)


class MetricsRegistry:
    """Registry of named regression metric functions.

    Usage:
        registry = MetricsRegistry()
        registry.register("r2", compute_r2)

        results = registry.compute(
            metrics=[RegressionMetric("r2", MetricTarget.macro())],
            context=ctx,
        )
        # → {MetricIdentity("r2", MetricTarget.macro()): 0.75}
    """

    def __init__(self) -> None:
        self._metrics: dict[str, MetricFn] = {}

    def register(self, name: str, fn: MetricFn) -> None:
        """Register a metric function by name."""
        self._metrics[str(name)] = fn
        logger.debug("registered metric %r", str(name))

    def get(self, name: str) -> MetricFn | None:
        """Get a metric function by name."""
        return self._metrics.get(str(name))

    def available(self) -> list[str]:
        """List all registered metric names in registration order."""
        return list(self._metrics.keys())

    def compute_one(self, metric: RegressionMetric, context: EvaluationContext) -> float:
        fn = self._metrics.get(str(metric.kind))
        if fn is None:
            raise KeyError(f"metric {str(metric.kind)!r} not registered")
        return float(fn(context, metric.target))

    def compute(
        self,
        metrics: Iterable[RegressionMetric],
        context: EvaluationContext,
    ) -> dict[MetricIdentity, float]:
        """Compute every metric against the shared context, returning identity → value.

        Any failure propagates; a result is either complete or not produced.
        """
        results: dict[MetricIdentity, float] = {}
        for metric in metrics:
            results[metric.identity] = self.compute_one(metric, context)
        return results


# ── Global default registry ──

_default_registry: MetricsRegistry | None = None


def get_default_registry() -> MetricsRegistry:
    """Get the global default registry, creating and populating it on first call."""
    global _default_registry
    if _default_registry is None:
        _default_registry = MetricsRegistry()
        _register_builtins(_default_registry)
    return _default_registry


def _register_builtins(registry: MetricsRegistry) -> None:
    """Register all built-in metrics."""
    from regression_eval.metrics.builtins import (
        compute_explained_variance,
        compute_mae,
        compute_r2,
        compute_rmse,
    )

    registry.register(MetricKind.R2, compute_r2)
    registry.register(MetricKind.RMSE, compute_rmse)
    registry.register(MetricKind.MAE, compute_mae)
    registry.register(MetricKind.EV, compute_explained_variance)
