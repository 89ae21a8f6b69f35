"""Weak learner strategies.

A strategy pairs the accumulator, scorer and prediction model that implement
one training rule.  It is picked once per training run and handed to the
sweep; nothing dispatches on it per example.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict
from .accumulator import WeightAccumulator
from .predictor import PredictionModel, UpdateRule
from .scorer import SplitScorer


class LearnerKind(Enum):
    REGRESSION = "regression"


@dataclass(frozen=True)
class WeakLearner:
    kind: LearnerKind
    make_accumulator: Callable[[int], WeightAccumulator]
    scorer: SplitScorer
    predictor: PredictionModel

    def new_accumulator(self, n_labels: int = 1) -> WeightAccumulator:
        return self.make_accumulator(n_labels)

    @property
    def update_rule(self) -> UpdateRule:
        return self.predictor.update_rule()


_STRATEGIES: Dict[LearnerKind, WeakLearner] = {
    LearnerKind.REGRESSION: WeakLearner(
        kind=LearnerKind.REGRESSION,
        make_accumulator=WeightAccumulator,
        scorer=SplitScorer(),
        predictor=PredictionModel(),
    ),
}


def get_strategy(kind: "LearnerKind | str") -> WeakLearner:
    """Look up a strategy by kind or by name (e.g. ``"regression"``)."""
    if isinstance(kind, LearnerKind):
        return _STRATEGIES[kind]
    try:
        return _STRATEGIES[LearnerKind(str(kind).lower())]
    except ValueError:
        known = ", ".join(k.value for k in LearnerKind)
        raise ValueError(f"Unknown weak learner {kind!r}; expected one of: {known}") from None
