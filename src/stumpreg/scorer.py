"""Split score (Z formula) for regression stumps.

The score of a split is the residual weighted SSE summed over its buckets,

    Z = sum_b ( sqr[b] - dist[b]**2 / wt[b] )

taken over the buckets that carry weight.  Lower is better; a perfect split
leaves no residual.
"""
from __future__ import annotations
from .accumulator import Bucket, WeightAccumulator

# Buckets with no more weight than this are treated as empty.
MIN_BUCKET_WEIGHT = 1e-20


def _bucket_sse(acc: WeightAccumulator, bucket: int) -> float:
    return float(acc.sqr[bucket] - (acc.dist[bucket] * acc.dist[bucket]) / acc.wt[bucket])


class SplitScorer:
    """Stateless scorer for a :class:`WeightAccumulator` snapshot."""

    WORST = 1e100    # seed for "best so far"
    NONE = -1.0      # score could not be computed
    PERFECT = 0.0    # no residual

    @staticmethod
    def equal(z1: float, z2: float) -> bool:
        return z1 == z2

    @staticmethod
    def better(z1: float, z2: float) -> bool:
        return z1 != SplitScorer.NONE and z1 < z2

    def missing(self, acc: WeightAccumulator, optional: bool = False) -> float:
        """Residual of the MISSING bucket, constant while a feature is swept."""
        if acc.wt[Bucket.MISSING] > MIN_BUCKET_WEIGHT:
            return _bucket_sse(acc, Bucket.MISSING)
        return 0.0

    def non_missing(self, acc: WeightAccumulator, missing: float) -> float:
        result = missing
        for b in (Bucket.TRUE, Bucket.FALSE):
            if acc.wt[b] > MIN_BUCKET_WEIGHT:
                result += _bucket_sse(acc, b)
        return result

    def non_missing_presence(self, acc: WeightAccumulator, missing: float) -> float:
        return self.non_missing(acc, missing)

    def score(self, acc: WeightAccumulator) -> float:
        return self.non_missing(acc, self.missing(acc))

    __call__ = score

    def can_beat(self, acc: WeightAccumulator, missing: float, z_best: float) -> bool:
        """Whether a split with this missing residual could still beat ``z_best``.

        The TRUE/FALSE residuals are never negative, so once the missing part
        alone exceeds the best score (with 0.01% slack) nothing can win.
        """
        return missing <= z_best * 1.0001
