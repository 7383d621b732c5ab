"""Errors raised while building an evaluation context or resolving targets.

Degenerate numerics (zero variance, zero total weight) are never raised;
they come back from the metric functions as defined float values.
"""
from __future__ import annotations


class EvaluationError(Exception):
    """Base class for structural evaluation failures."""


class EmptyBatchError(EvaluationError, ValueError):
    """The prediction batch holds no records."""


class DimensionMismatchError(EvaluationError, ValueError):
    """Records in a batch disagree on the number of output dimensions."""


class InvalidTargetError(EvaluationError, KeyError):
    """A metric target names a dimension the context does not contain."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0]) if self.args else ""
