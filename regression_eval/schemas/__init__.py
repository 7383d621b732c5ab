from regression_eval.schemas.provenance import EvaluationProvenance

__all__ = ["EvaluationProvenance"]
