from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class EvaluationProvenance(BaseModel):
    """How an evaluation result was produced: evaluator, weighting mode and batch shape.

    Attached to every EvaluationResult as `metadata`. Callers that track
    provenance elsewhere pass their own token through `provenance` instead.
    """

    evaluator: str
    use_example_weights: bool
    num_examples: int = Field(ge=1)
    dimensions: list[str] = Field(default_factory=list)
    metric_count: int = Field(default=0, ge=0)
    evaluated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(extra="allow", frozen=True)
