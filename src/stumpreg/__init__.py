# stumpreg/__init__.py
"""
stumpreg: weak-learner core for boosted regression decision stumps.

Exports:
    - WeightAccumulator, Bucket, RegressionLabel, ArrayWeightSource
    - SplitScorer
    - PredictionModel, UpdateRule
    - WeakLearner, get_strategy
    - sweep_feature, StumpSplit
    - StumpRegressor
"""
from .accumulator import (ArrayWeightSource, Bucket, Label, NotARegressionProblem,
                          RegressionLabel, WeightAccumulator, WeightSource)
from .scorer import SplitScorer
from .predictor import PredictionModel, UpdateRule
from .strategy import LearnerKind, WeakLearner, get_strategy
from .search import StumpSplit, sweep_feature
from .stump import StumpRegressor

__all__ = [
    "ArrayWeightSource", "Bucket", "Label", "NotARegressionProblem",
    "RegressionLabel", "WeightAccumulator", "WeightSource",
    "SplitScorer", "PredictionModel", "UpdateRule",
    "LearnerKind", "WeakLearner", "get_strategy",
    "StumpSplit", "sweep_feature", "StumpRegressor",
]
__version__ = "0.1.0"
