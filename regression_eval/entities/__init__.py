from regression_eval.entities.prediction import (
    DEFAULT_DIMENSION_PREFIX,
    OutputDimension,
    PredictionRecord,
    default_domain,
    records_from_arrays,
)

__all__ = [
    "DEFAULT_DIMENSION_PREFIX",
    "OutputDimension",
    "PredictionRecord",
    "default_domain",
    "records_from_arrays",
]
