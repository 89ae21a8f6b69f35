"""Regression decision stump with a scikit-learn–style API."""
from __future__ import annotations
from typing import Any, List, Optional
import logging
import numpy as np
from sklearn.base import BaseEstimator, RegressorMixin
from sklearn.utils.validation import check_is_fitted
from .accumulator import Bucket
from .scorer import SplitScorer
from .search import StumpSplit, bucket_of, sweep_feature
from .strategy import get_strategy

logger = logging.getLogger(__name__)

# ----------------------------- Helpers -----------------------------

def _isnan_scalar(v: Any) -> bool:
    if v is None:
        return True
    try:
        return bool(np.isnan(v))
    except TypeError:
        return False


def _as_float_matrix(X) -> np.ndarray:
    X = np.asarray(X, dtype=object)
    if X.ndim != 2:
        raise ValueError("X must be 2-dimensional")
    out = np.empty(X.shape, dtype=float)
    for idx, v in np.ndenumerate(X):
        out[idx] = np.nan if _isnan_scalar(v) else float(v)
    return out

# ----------------------------- Regressor -----------------------------

class StumpRegressor(RegressorMixin, BaseEstimator):
    r"""
    StumpRegressor(epsilon=0.0, optional=False, strategy="regression",
                   feature_names=None, verbose=0)

    A one-level regression tree: the weak learner of a boosted regression
    ensemble.

    **Core behavior**

    - **Split criterion**: weighted residual SSE summed over the TRUE, FALSE
      and MISSING buckets (lower is better). Thresholds are midpoints between
      distinct sorted values; every feature is swept once.
    - **Missing values**: NaN/None values form their own bucket with its own
      prediction.
    - **Ties**: the first feature (lowest index) and the lowest threshold
      reaching the best score are kept.
    - **Empty buckets** predict the weighted mean of all examples.

    Parameters
    ----------
    epsilon : float, default=0.0
        Smoothing parameter forwarded to the prediction model.
    optional : bool, default=False
        Missing-value handling flag forwarded to the scorer and prediction
        model.
    strategy : str, default="regression"
        Weak learner to use; only ``"regression"`` is available.
    feature_names : sequence of str, optional
        Column names used in textual exports.
    verbose : int, default=0
        Log per-feature results at INFO instead of DEBUG when > 0.

    Attributes
    ----------
    split_ : StumpSplit
        Winning split.
    feature_index_ : int
    threshold_ : float
    score_ : float
    values_ : ndarray of shape (3,)
        Predictions for the TRUE, FALSE and MISSING buckets.
    n_features_in_ : int
    """

    def __init__(self, epsilon: float = 0.0, optional: bool = False,
                 strategy: str = "regression",
                 feature_names: Optional[List[str]] = None, verbose: int = 0):
        self.epsilon = epsilon
        self.optional = optional
        self.strategy = strategy
        self.feature_names = feature_names
        self.verbose = verbose

    # ----------------------------- Public API -----------------------------

    def fit(self, X, y, sample_weight: Optional[np.ndarray] = None):
        Xf = _as_float_matrix(X)
        y = np.asarray(y, dtype=float)
        n, m = Xf.shape
        if y.shape[0] != n:
            raise ValueError("X and y must have the same number of rows")
        if sample_weight is None:
            w = np.ones(n, dtype=float)
        else:
            w = np.asarray(sample_weight, dtype=float).copy()
            if w.shape[0] != n:
                raise ValueError("sample_weight must have same length as y")
            if (w < 0).any():
                raise ValueError("sample_weight must be non-negative")
        if self.feature_names is not None and len(self.feature_names) != m:
            raise ValueError("feature_names length must match X.shape[1]")

        learner = get_strategy(self.strategy)
        scorer = learner.scorer
        level = logging.INFO if self.verbose > 0 else logging.DEBUG

        best: Optional[StumpSplit] = None
        z_best = SplitScorer.WORST
        for j in range(m):
            split = sweep_feature(Xf[:, j], y, w, learner, feature_index=j,
                                  z_best=z_best, epsilon=float(self.epsilon),
                                  optional=bool(self.optional))
            if split is None:
                continue
            logger.log(level, "feature %s: threshold=%.6g score=%.6g",
                       self._feature_name(j), split.threshold, split.score)
            if best is None or scorer.better(split.score, z_best):
                best = split
                z_best = split.score

        if best is None:
            raise ValueError("No feature produced a split; is X empty?")

        self.split_ = best
        self.feature_index_ = best.feature_index
        self.threshold_ = best.threshold
        self.score_ = best.score
        self.values_ = best.values
        self.update_rule_ = learner.update_rule
        self.n_features_in_ = m
        logger.log(level, "best stump: %s", self.export_rules()[0])
        return self

    def predict(self, X):
        return self.values_[self.apply(X)]

    def apply(self, X) -> np.ndarray:
        """Bucket index (0=TRUE, 1=FALSE, 2=MISSING) of each row."""
        check_is_fitted(self, "split_")
        Xf = _as_float_matrix(X)
        if Xf.shape[1] != self.n_features_in_:
            raise ValueError(f"X has {Xf.shape[1]} features, expected {self.n_features_in_}")
        return bucket_of(Xf[:, self.feature_index_], self.threshold_)

    # ----------------------------- Pretty / Rules -----------------------------

    def _feature_name(self, j: int, feature_names: Optional[List[str]] = None) -> str:
        fn = feature_names if feature_names is not None else self.feature_names
        return fn[j] if (fn is not None and 0 <= j < len(fn)) else f"X[{j}]"

    def export_rules(self, feature_names: Optional[List[str]] = None) -> List[str]:
        """
        Export the three rules of the fitted stump.

        Returns
        -------
        list[str]
            One ``"<condition> => value=<prediction> (N=<weight>)"`` string per
            bucket, in TRUE, FALSE, MISSING order.

        Raises
        ------
        ValueError
            If the model has not been fitted.
        """
        check_is_fitted(self, "split_")
        name = self._feature_name(self.feature_index_, feature_names)
        acc = self.split_.accumulator
        conds = {
            Bucket.TRUE: f"{name} <= {self.threshold_:.6g}",
            Bucket.FALSE: f"{name} > {self.threshold_:.6g}",
            Bucket.MISSING: f"{name} MISSING",
        }
        return [f"{conds[b]} => value={self.values_[b]:.6g} (N={acc.wt[b]:.2f})"
                for b in Bucket]

    def predict_rule(self, X, feature_names: Optional[List[str]] = None) -> List[str]:
        """Condition that decides the prediction of each row."""
        rules = [r.split(" => ")[0] for r in self.export_rules(feature_names)]
        return [rules[b] for b in self.apply(X)]

    def print_tree(self, feature_names: Optional[List[str]] = None) -> None:
        check_is_fitted(self, "split_")
        name = self._feature_name(self.feature_index_, feature_names)
        print(f"if {name} is missing:")
        print(f"  Predict {self.values_[Bucket.MISSING]:.4f}")
        print(f"elif {name} <= {self.threshold_:.6g}:")
        print(f"  Predict {self.values_[Bucket.TRUE]:.4f}")
        print("else:")
        print(f"  Predict {self.values_[Bucket.FALSE]:.4f}")
