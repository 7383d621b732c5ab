from regression_eval.config.runtime import EvaluatorSettings

__all__ = ["EvaluatorSettings"]
