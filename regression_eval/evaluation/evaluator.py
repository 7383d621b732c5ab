"""Regression evaluator: builds the metric set for a model and scores prediction batches."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence

from regression_eval.config.runtime import EvaluatorSettings
from regression_eval.contracts import Predictor
from regression_eval.entities.prediction import OutputDimension, PredictionRecord, records_from_arrays
from regression_eval.errors import EvaluationError
from regression_eval.evaluation.result import EvaluationResult
from regression_eval.metrics.context import DegeneratePolicy, EvaluationContext
from regression_eval.metrics.registry import MetricsRegistry, RegressionMetric, get_default_registry
from regression_eval.metrics.target import MetricTarget
from regression_eval.schemas.provenance import EvaluationProvenance

logger = logging.getLogger(__name__)

DomainSource = Predictor | Sequence[OutputDimension | str] | None


class RegressionEvaluator:
    """Evaluates multi-output regression predictions.

    For a domain of d output dimensions the evaluator scores every registered
    metric kind once per dimension plus once as a macro average, giving
    4 × (d + 1) scores with the built-in kinds. Each call builds exactly one
    EvaluationContext and every metric reads from it.

    Attributes:
        use_example_weights: Weight examples by PredictionRecord.weight. Fixed
            for the lifetime of the evaluator.
        degenerate: Scores used for R2 / explained variance on constant targets.
        registry: Metric kind → function table.
        max_workers: Thread count for scoring metrics; 1 scores serially.
    """

    def __init__(
        self,
        use_example_weights: bool = False,
        degenerate: DegeneratePolicy | None = None,
        registry: MetricsRegistry | None = None,
        max_workers: int = 1,
    ) -> None:
        self.use_example_weights = use_example_weights
        self.degenerate = degenerate or DegeneratePolicy()
        self.registry = registry or get_default_registry()
        self.max_workers = max(1, max_workers)

        # Metric sets per output domain, reused across evaluate() calls
        self._metrics_cache: dict[tuple[OutputDimension, ...], frozenset[RegressionMetric]] = {}

    @classmethod
    def from_settings(cls, settings: EvaluatorSettings | None = None) -> "RegressionEvaluator":
        """Build an evaluator from settings (read from the environment when omitted).

        Also applies `settings.log_level` to the regression_eval logger.
        """
        settings = settings or EvaluatorSettings.from_env()
        settings.configure_logging()
        return cls(
            use_example_weights=settings.use_example_weights,
            degenerate=settings.degenerate_policy(),
            max_workers=settings.max_workers,
        )

    # ── Metric set ──

    def create_metrics(self, domain: Sequence[OutputDimension | str]) -> frozenset[RegressionMetric]:
        """One metric per (kind, target): a target per dimension plus the macro average."""
        dims = tuple(OutputDimension.coerce(d) for d in domain)
        cached = self._metrics_cache.get(dims)
        if cached is not None:
            return cached

        targets = [MetricTarget.for_dimension(d) for d in dims] + [MetricTarget.macro()]
        metrics = frozenset(
            RegressionMetric(kind=kind, target=target)
            for kind in self.registry.available()
            for target in targets
        )
        self._metrics_cache[dims] = metrics
        logger.debug("Created %d metrics for domain %s", len(metrics), [d.name for d in dims])
        return metrics

    def clear_cache(self) -> None:
        """Drop cached metric sets. Call this after registering new metric kinds."""
        self._metrics_cache.clear()

    # ── Evaluation ──

    def create_context(
        self,
        records: Sequence[PredictionRecord],
        domain: Sequence[OutputDimension | str] | None = None,
    ) -> EvaluationContext:
        return EvaluationContext.build(
            records,
            domain=domain,
            use_example_weights=self.use_example_weights,
            degenerate=self.degenerate,
        )

    def evaluate(
        self,
        model: DomainSource,
        records: Sequence[PredictionRecord],
        provenance: Any = None,
    ) -> EvaluationResult:
        """Score a prediction batch.

        Args:
            model: A Predictor, an ordered sequence of output dimensions, or
                None to name dimensions DIM-0, DIM-1, ... from the records.
            records: One PredictionRecord per evaluated example.
            provenance: Opaque token stored unchanged on the result.

        Returns:
            EvaluationResult holding every metric in the domain's metric set.

        Raises:
            EmptyBatchError: `records` is empty.
            DimensionMismatchError: records disagree with each other or with the domain.
        """
        domain = _resolve_domain(model)
        try:
            context = self.create_context(records, domain)
        except EvaluationError as exc:
            logger.warning("evaluation aborted: %s", exc)
            raise

        metrics = _ordered(self.create_metrics(context.domain), context.domain, self.registry)
        if self.max_workers > 1 and len(metrics) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                values = list(pool.map(lambda m: self.registry.compute_one(m, context), metrics))
        else:
            values = [self.registry.compute_one(m, context) for m in metrics]
        scores = {metric.identity: value for metric, value in zip(metrics, values)}

        metadata = EvaluationProvenance(
            evaluator=type(self).__name__,
            use_example_weights=self.use_example_weights,
            num_examples=context.num_examples,
            dimensions=[d.name for d in context.domain],
            metric_count=len(scores),
        )
        logger.info(
            "Evaluated %d metrics over %d examples and %d dimensions",
            len(scores), context.num_examples, context.num_dimensions,
        )
        return EvaluationResult(scores, context.domain, metadata=metadata, provenance=provenance)

    def evaluate_arrays(
        self,
        y_true: Any,
        y_pred: Any,
        sample_weight: Any = None,
        model: DomainSource = None,
        provenance: Any = None,
    ) -> EvaluationResult:
        """Score array-likes shaped (n_examples,) or (n_examples, n_outputs)."""
        records = records_from_arrays(y_true, y_pred, sample_weight)
        return self.evaluate(model, records, provenance=provenance)


def _resolve_domain(model: DomainSource) -> Sequence[OutputDimension | str] | None:
    if model is None:
        return None
    if isinstance(model, Predictor):
        return model.output_domain
    if isinstance(model, (str, OutputDimension)):
        return [model]
    return model


def _ordered(
    metrics: frozenset[RegressionMetric],
    domain: tuple[OutputDimension, ...],
    registry: MetricsRegistry,
) -> list[RegressionMetric]:
    kind_rank = {kind: i for i, kind in enumerate(registry.available())}
    dim_rank = {d: i for i, d in enumerate(domain)}

    def key(metric: RegressionMetric) -> tuple[int, int]:
        target = metric.target
        position = len(domain) if target.is_macro else dim_rank.get(target.dimension, len(domain))
        return kind_rank.get(str(metric.kind), len(kind_rank)), position

    return sorted(metrics, key=key)
