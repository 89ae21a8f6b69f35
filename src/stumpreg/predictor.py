"""Per-bucket outputs of a fitted regression stump."""
from __future__ import annotations
from enum import Enum
from typing import List
import numpy as np
from .accumulator import WeightAccumulator
from .scorer import MIN_BUCKET_WEIGHT


class UpdateRule(Enum):
    """Weight update rules a boosting driver may apply after a round."""
    NORMAL = "normal"
    PROP = "prop"


def _safe_div(a: float, b: float, default: float = 0.0) -> float:
    return a / b if b != 0.0 else default


class PredictionModel:
    """Weighted mean of each bucket.

    A bucket with no weight predicts the mean over all three buckets, so every
    output is finite.  If the accumulator is completely empty that mean is
    taken to be 0.
    """

    def predict(self, acc: WeightAccumulator, epsilon: float = 0.0,
                optional: bool = False) -> List[np.ndarray]:
        overall = _safe_div(float(acc.dist.sum()), float(acc.wt.sum()))
        result = []
        for i in range(3):
            if acc.wt[i] > MIN_BUCKET_WEIGHT:
                value = float(acc.dist[i] / acc.wt[i])
            else:
                value = overall
            result.append(np.array([value], dtype=float))
        return result

    __call__ = predict

    def update_rule(self) -> UpdateRule:
        return UpdateRule.NORMAL
