from __future__ import annotations

from dataclasses import dataclass
import os

from regression_eval.metrics.context import DegeneratePolicy
from regression_eval.utils.logging_config import set_package_level, setup_logging

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EvaluatorSettings:
    use_example_weights: bool = False
    degenerate_perfect_fit: float = 0.0
    degenerate_imperfect_fit: float = float("-inf")
    max_workers: int = 1
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EvaluatorSettings":
        return cls(
            use_example_weights=os.getenv("REGRESSION_EVAL_USE_EXAMPLE_WEIGHTS", "false").strip().lower() in _TRUTHY,
            degenerate_perfect_fit=float(os.getenv("REGRESSION_EVAL_DEGENERATE_PERFECT_FIT", "0.0")),
            degenerate_imperfect_fit=float(os.getenv("REGRESSION_EVAL_DEGENERATE_IMPERFECT_FIT", "-inf")),
            max_workers=max(1, int(os.getenv("REGRESSION_EVAL_MAX_WORKERS", "1"))),
            log_level=os.getenv("REGRESSION_EVAL_LOG_LEVEL", "INFO").upper(),
        )

    def degenerate_policy(self) -> DegeneratePolicy:
        return DegeneratePolicy(
            perfect_fit=self.degenerate_perfect_fit,
            imperfect_fit=self.degenerate_imperfect_fit,
        )

    def configure_logging(self, install_handler: bool = False) -> None:
        """Apply `log_level` to the regression_eval logger.

        With `install_handler` a root stdout handler is installed as well.
        """
        if install_handler:
            setup_logging(self.log_level)
        else:
            set_package_level(self.log_level)
