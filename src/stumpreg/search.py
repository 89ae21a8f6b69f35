"""Sorted sweep over one feature's candidate thresholds.

Known values are sorted once; every example starts in the FALSE bucket and is
transferred to TRUE as the threshold moves past it, so each candidate is
scored from the running sums in O(1).  Examples with a missing value stay in
the MISSING bucket for the whole sweep.

A stump sends ``x <= threshold`` to TRUE, ``x > threshold`` to FALSE and
missing values to MISSING.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import logging
import numpy as np
from .accumulator import ArrayWeightSource, Bucket, WeightAccumulator
from .scorer import MIN_BUCKET_WEIGHT, SplitScorer
from .strategy import WeakLearner, get_strategy

logger = logging.getLogger(__name__)


@dataclass
class StumpSplit:
    feature_index: int
    threshold: float
    score: float
    accumulator: WeightAccumulator
    predictions: List[np.ndarray]

    @property
    def values(self) -> np.ndarray:
        """Predictions as a flat ``(3,)`` array in bucket order."""
        return np.array([p[0] for p in self.predictions], dtype=float)


def bucket_of(x: np.ndarray, threshold: float) -> np.ndarray:
    """Bucket index of each value of ``x`` for the given threshold."""
    x = np.asarray(x, dtype=float)
    out = np.where(x <= threshold, int(Bucket.TRUE), int(Bucket.FALSE))
    out[np.isnan(x)] = int(Bucket.MISSING)
    return out


def _midpoint(v: float, v_next: float) -> float:
    """Threshold with ``v <= t < v_next``; halves are added separately to avoid overflow."""
    mid = 0.5 * v + 0.5 * v_next
    return mid if mid < v_next else v


def _clip_drifted(acc: WeightAccumulator, bucket: int) -> None:
    if acc.wt[bucket] <= MIN_BUCKET_WEIGHT:
        acc.clip(bucket)


def sweep_feature(x, y, w, strategy: Optional[WeakLearner] = None, *,
                  feature_index: int = 0, z_best: float = SplitScorer.WORST,
                  epsilon: float = 0.0, optional: bool = False) -> Optional[StumpSplit]:
    """Find the best threshold on one feature.

    Parameters
    ----------
    x : array-like of shape (n_samples,)
        Feature values; NaN (or None) marks a missing value.
    y : array-like of shape (n_samples,)
        Regression targets.
    w : array-like of shape (n_samples,)
        Example weights for this boosting round.
    strategy : WeakLearner, optional
        Defaults to the regression strategy.
    feature_index : int, default=0
        Recorded on the returned split.
    z_best : float
        Best score found so far on other features.  The feature is skipped
        when its missing-value residual alone cannot beat it.
    epsilon, optional
        Passed through to the prediction model.

    Returns
    -------
    StumpSplit or None
        ``None`` when the feature was pruned.  If no threshold separates the
        known values the split has ``threshold=-inf`` (everything known goes
        to FALSE).
    """
    strategy = strategy if strategy is not None else get_strategy("regression")
    scorer = strategy.scorer
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    weights = ArrayWeightSource(w)
    if not (x.shape[0] == y.shape[0] == len(weights)):
        raise ValueError("x, y and w must have the same length")

    acc = strategy.new_accumulator(1)
    missing_mask = np.isnan(x)
    for i in np.flatnonzero(missing_mask):
        acc.add(y[i], Bucket.MISSING, weights.seek(i))

    known = np.flatnonzero(~missing_mask)
    order = known[np.argsort(x[known], kind="mergesort")]
    for i in order:
        acc.add(y[i], Bucket.FALSE, weights.seek(i))

    missing = scorer.missing(acc, optional)
    if not scorer.can_beat(acc, missing, z_best):
        logger.debug("feature %d pruned: missing residual %.6g vs best %.6g",
                     feature_index, missing, z_best)
        return None

    best_z = scorer.non_missing(acc, missing)
    best_thr = -np.inf
    best_acc = acc.copy()

    n_known = order.shape[0]
    for pos in range(n_known - 1):
        i = order[pos]
        acc.transfer(y[i], Bucket.FALSE, Bucket.TRUE, weights.seek(i))
        v, v_next = x[i], x[order[pos + 1]]
        if v == v_next:
            continue
        _clip_drifted(acc, Bucket.FALSE)
        z = scorer.non_missing(acc, missing)
        if scorer.better(z, best_z):
            best_z = z
            best_thr = _midpoint(v, v_next)
            best_acc = acc.copy()

    logger.debug("feature %d: threshold=%.6g score=%.6g", feature_index, best_thr, best_z)
    return StumpSplit(
        feature_index=feature_index,
        threshold=float(best_thr),
        score=float(best_z),
        accumulator=best_acc,
        predictions=strategy.predictor.predict(best_acc, epsilon, optional),
    )
