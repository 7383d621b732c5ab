from regression_eval.evaluation.evaluator import RegressionEvaluator
from regression_eval.evaluation.result import EvaluationResult

__all__ = ["EvaluationResult", "RegressionEvaluator"]
