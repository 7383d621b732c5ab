"""Tests for EvaluationResult lookups and read-only behaviour."""
from __future__ import annotations

import unittest

from pydantic import ValidationError

from regression_eval.entities.prediction import OutputDimension, PredictionRecord
from regression_eval.errors import InvalidTargetError
from regression_eval.evaluation.evaluator import RegressionEvaluator
from regression_eval.evaluation.result import EvaluationResult
from regression_eval.metrics.registry import MetricIdentity, MetricKind
from regression_eval.metrics.target import MetricTarget
from regression_eval.schemas.provenance import EvaluationProvenance


def _result() -> EvaluationResult:
    records = [
        PredictionRecord(actual=(1.0, 10.0), predicted=(1.5, 12.0)),
        PredictionRecord(actual=(2.0, 20.0), predicted=(2.0, 18.0)),
        PredictionRecord(actual=(3.0, 30.0), predicted=(2.0, 31.0)),
    ]
    return RegressionEvaluator().evaluate(["a", "b"], records, provenance={"run": "r-1"})


class TestLookups(unittest.TestCase):
    def setUp(self):
        self.result = _result()

    def test_score_by_dimension_name_and_instance(self):
        self.assertEqual(self.result.score("rmse", "a"), self.result.score(MetricKind.RMSE, OutputDimension("a")))

    def test_score_by_target(self):
        self.assertEqual(
            self.result.score(MetricKind.MAE, MetricTarget.macro()),
            self.result.macro(MetricKind.MAE),
        )

    def test_score_matches_mapping_access(self):
        identity = MetricIdentity(MetricKind.R2, MetricTarget.for_dimension("b"))
        self.assertEqual(self.result[identity], self.result.score("r2", "b"))

    def test_named_accessors(self):
        self.assertEqual(self.result.r2("a"), self.result.score("r2", "a"))
        self.assertEqual(self.result.rmse(), self.result.macro("rmse"))
        self.assertEqual(self.result.mae("b"), self.result.score("mae", "b"))
        self.assertEqual(self.result.explained_variance(), self.result.macro("ev"))

    def test_mae_values(self):
        self.assertAlmostEqual(self.result.mae("a"), 0.5)
        self.assertAlmostEqual(self.result.mae("b"), 5.0 / 3.0)
        self.assertAlmostEqual(self.result.mae(), (0.5 + 5.0 / 3.0) / 2)

    def test_per_dimension_in_domain_order(self):
        per_dim = self.result.per_dimension("mae")
        self.assertEqual(list(per_dim), [OutputDimension("a"), OutputDimension("b")])

    def test_unknown_dimension(self):
        with self.assertRaises(InvalidTargetError):
            self.result.score("r2", "c")
        with self.assertRaises(InvalidTargetError):
            self.result.r2("c")

    def test_unknown_kind(self):
        with self.assertRaises(KeyError):
            self.result.score("max_error", "a")


class TestEnumeration(unittest.TestCase):
    def test_identities_are_complete_and_ordered(self):
        result = _result()
        identities = result.identities()
        self.assertEqual(len(identities), 12)
        self.assertEqual(set(identities), set(result))
        self.assertEqual(
            [str(i) for i in identities[:3]],
            ["r2/a", "r2/b", "r2/macro"],
        )

    def test_flat_dict(self):
        flat = _result().as_flat_dict()
        self.assertEqual(len(flat), 12)
        self.assertIn("rmse/a", flat)
        self.assertIn("ev/macro", flat)
        self.assertEqual(list(flat)[-1], "ev/macro")

    def test_len_and_iteration(self):
        result = _result()
        self.assertEqual(len(result), 12)
        self.assertEqual(len(list(iter(result))), 12)


class TestReadOnly(unittest.TestCase):
    def test_no_item_assignment(self):
        result = _result()
        identity = next(iter(result))
        with self.assertRaises(TypeError):
            result[identity] = 0.0

    def test_source_dict_not_aliased(self):
        identity = MetricIdentity(MetricKind.R2, MetricTarget.macro())
        scores = {identity: 0.5}
        metadata = EvaluationProvenance(evaluator="test", use_example_weights=False, num_examples=1)
        result = EvaluationResult(scores, (OutputDimension("a"),), metadata=metadata)
        scores[identity] = 0.9
        self.assertEqual(result[identity], 0.5)

    def test_metadata_is_frozen(self):
        result = _result()
        with self.assertRaises(ValidationError):
            result.metadata.num_examples = 10

    def test_provenance_and_metadata(self):
        result = _result()
        self.assertEqual(result.provenance, {"run": "r-1"})
        self.assertEqual(result.metadata.metric_count, 12)
        self.assertIsNotNone(result.metadata.evaluated_at.tzinfo)

    def test_repr(self):
        self.assertIn("12 scores", repr(_result()))


if __name__ == "__main__":
    unittest.main()
