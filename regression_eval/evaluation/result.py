"""Evaluation result: read-only scores keyed by metric identity."""
from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterator

from regression_eval.entities.prediction import OutputDimension
from regression_eval.errors import InvalidTargetError
from regression_eval.metrics.registry import MetricIdentity, MetricKind
from regression_eval.metrics.target import MetricTarget
from regression_eval.schemas.provenance import EvaluationProvenance


class EvaluationResult(Mapping[MetricIdentity, float]):
    """Scores from one evaluation call.

    Behaves as an immutable mapping MetricIdentity → float and adds lookups
    by (kind, dimension) and by kind for the macro average.

    Usage:
        result.score("rmse", "price")
        result.macro("r2")
        result.r2()            # macro
        result.r2("price")     # one dimension
    """

    def __init__(
        self,
        scores: Mapping[MetricIdentity, float],
        domain: tuple[OutputDimension, ...],
        metadata: EvaluationProvenance,
        provenance: Any = None,
    ) -> None:
        self._scores = MappingProxyType(dict(scores))
        self._domain = tuple(domain)
        self._metadata = metadata
        self._provenance = provenance

    # ── Mapping protocol ──

    def __getitem__(self, identity: MetricIdentity) -> float:
        return self._scores[identity]

    def __iter__(self) -> Iterator[MetricIdentity]:
        return iter(self._scores)

    def __len__(self) -> int:
        return len(self._scores)

    def __repr__(self) -> str:
        return f"EvaluationResult({len(self)} scores, domain={[d.name for d in self._domain]})"

    # ── Properties ──

    @property
    def domain(self) -> tuple[OutputDimension, ...]:
        return self._domain

    @property
    def metadata(self) -> EvaluationProvenance:
        return self._metadata

    @property
    def provenance(self) -> Any:
        """The caller's provenance token, exactly as passed to evaluate()."""
        return self._provenance

    @property
    def num_examples(self) -> int:
        return self._metadata.num_examples

    # ── Lookups ──

    def identities(self) -> tuple[MetricIdentity, ...]:
        """Every computed identity, kinds in order of first appearance, dimensions in domain order, macro last."""
        kinds: list[str] = []
        for identity in self._scores:
            if identity.kind not in kinds:
                kinds.append(identity.kind)
        targets = [MetricTarget.for_dimension(d) for d in self._domain] + [MetricTarget.macro()]
        ordered = [
            MetricIdentity(kind=kind, target=target)
            for kind in kinds
            for target in targets
            if MetricIdentity(kind=kind, target=target) in self._scores
        ]
        seen = set(ordered)
        ordered.extend(i for i in self._scores if i not in seen)
        return tuple(ordered)

    def score(self, kind: str, target: MetricTarget | OutputDimension | str) -> float:
        """Score for `kind` at a dimension (OutputDimension or name) or at an explicit MetricTarget."""
        if not isinstance(target, MetricTarget):
            target = MetricTarget.for_dimension(target)
        if target.dimension is not None and target.dimension not in self._domain:
            raise InvalidTargetError(
                f"dimension {target.dimension.name!r} is not in the evaluated domain "
                f"{[d.name for d in self._domain]}"
            )
        identity = MetricIdentity(kind=str(kind), target=target)
        if identity not in self._scores:
            raise KeyError(f"metric {str(identity)!r} was not computed")
        return self._scores[identity]

    def macro(self, kind: str) -> float:
        """Macro-averaged score for `kind`."""
        return self.score(kind, MetricTarget.macro())

    def per_dimension(self, kind: str) -> dict[OutputDimension, float]:
        """Scores for `kind` on every dimension, in domain order."""
        return {d: self.score(kind, d) for d in self._domain}

    def _score_or_macro(self, kind: str, dimension: OutputDimension | str | None) -> float:
        if dimension is None:
            return self.macro(kind)
        return self.score(kind, dimension)

    def r2(self, dimension: OutputDimension | str | None = None) -> float:
        return self._score_or_macro(MetricKind.R2, dimension)

    def rmse(self, dimension: OutputDimension | str | None = None) -> float:
        return self._score_or_macro(MetricKind.RMSE, dimension)

    def mae(self, dimension: OutputDimension | str | None = None) -> float:
        return self._score_or_macro(MetricKind.MAE, dimension)

    def explained_variance(self, dimension: OutputDimension | str | None = None) -> float:
        return self._score_or_macro(MetricKind.EV, dimension)

    def as_flat_dict(self) -> dict[str, float]:
        """String-keyed copy ("<kind>/<dimension>", "<kind>/macro") for reporting layers."""
        return {str(identity): self._scores[identity] for identity in self.identities()}
