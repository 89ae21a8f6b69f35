"""Weighted statistics for the regression stump sweep.

A :class:`WeightAccumulator` keeps, for each of the three buckets of a
candidate split (``TRUE``, ``FALSE`` and ``MISSING``), the running sums

- ``dist``: sum of value * weight
- ``sqr``:  sum of weight * value**2
- ``wt``:   sum of weight

which are enough to get the weighted mean and the weighted SSE of a bucket
without revisiting its examples.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from numbers import Real
from typing import Any, Protocol, runtime_checkable
import numpy as np


class NotARegressionProblem(ValueError):
    """Raised when the accumulator is built for more than one label."""


class Bucket(IntEnum):
    TRUE = 0
    FALSE = 1
    MISSING = 2


# ----------------------------- Labels / weights -----------------------------

@runtime_checkable
class Label(Protocol):
    def value(self) -> float: ...


@dataclass(frozen=True)
class RegressionLabel:
    target: float

    def value(self) -> float:
        return self.target


def _label_value(label: Any) -> float:
    if isinstance(label, Real):
        return float(label)
    return float(label.value())


@runtime_checkable
class WeightSource(Protocol):
    """Read access to the current example's boosting weight."""

    def current(self) -> float: ...

    def advance(self, n: int = 1) -> None: ...


class ArrayWeightSource:
    """Cursor over a 1-d array of per-example weights.

    Parameters
    ----------
    weights : array-like of shape (n_samples,)
        Example weights for the current boosting round.
    position : int, default=0
        Initial cursor position.
    """

    def __init__(self, weights, position: int = 0):
        self.weights = np.asarray(weights, dtype=float)
        if self.weights.ndim != 1:
            raise ValueError("weights must be a 1-d array")
        self.position = int(position)

    def current(self) -> float:
        return float(self.weights[self.position])

    def advance(self, n: int = 1) -> None:
        self.position += int(n)

    def seek(self, position: int) -> "ArrayWeightSource":
        self.position = int(position)
        return self

    def __len__(self) -> int:
        return int(self.weights.shape[0])


# ----------------------------- Accumulator -----------------------------

class WeightAccumulator:
    """Per-bucket weighted sums for one feature's split search.

    Only scalar regression targets are supported, so ``n_labels`` must be 1.
    The ``advance`` argument of :meth:`add` and :meth:`transfer` is the stride
    between the weights of successive labels in the weight source; with one
    label it is never used and the source is left where it is.
    """

    def __init__(self, n_labels: int = 1):
        if n_labels != 1:
            raise NotARegressionProblem(
                "WeightAccumulator(): not a regression problem "
                f"(got {n_labels} labels, expected 1)")
        self.dist = np.zeros(3, dtype=float)
        self.sqr = np.zeros(3, dtype=float)
        self.wt = np.zeros(3, dtype=float)

    @property
    def n_labels(self) -> int:
        return 1

    def _contribution(self, label, weights: WeightSource, scale: float):
        f = _label_value(label)
        w = weights.current() * scale
        fw = f * w
        return fw, f * fw, w

    def add(self, label, bucket: int, weights: WeightSource,
            advance: int = 1, scale: float = 1.0) -> None:
        """Add one example's weight to ``bucket``."""
        fw, ffw, w = self._contribution(label, weights, scale)
        self.dist[bucket] += fw
        self.sqr[bucket] += ffw
        self.wt[bucket] += w

    def transfer(self, label, from_bucket: int, to_bucket: int,
                 weights: WeightSource, advance: int = 1,
                 scale: float = 1.0) -> None:
        """Move one example's weight from ``from_bucket`` to ``to_bucket``.

        The contribution is the same one :meth:`add` would have made, so a
        transfer back with identical arguments undoes it (up to rounding).
        """
        fw, ffw, w = self._contribution(label, weights, scale)
        self.dist[from_bucket] -= fw
        self.sqr[from_bucket] -= ffw
        self.wt[from_bucket] -= w
        self.dist[to_bucket] += fw
        self.sqr[to_bucket] += ffw
        self.wt[to_bucket] += w

    def transfer_from(self, from_bucket: int, to_bucket: int,
                      other: "WeightAccumulator") -> None:
        raise NotImplementedError("WeightAccumulator.transfer_from() not implemented")

    def clip(self, bucket: int) -> None:
        """Floor the sums of ``bucket`` at zero.

        Repeated add/subtract sequences can leave a bucket slightly negative.
        """
        self.dist[bucket] = max(self.dist[bucket], 0.0)
        self.sqr[bucket] = max(self.sqr[bucket], 0.0)
        self.wt[bucket] = max(self.wt[bucket], 0.0)

    def swap_buckets(self, b1: int, b2: int) -> None:
        for arr in (self.dist, self.sqr, self.wt):
            arr[b1], arr[b2] = arr[b2], arr[b1]

    def swap(self, other: "WeightAccumulator") -> None:
        self.dist, other.dist = other.dist, self.dist
        self.sqr, other.sqr = other.sqr, self.sqr
        self.wt, other.wt = other.wt, self.wt

    def copy(self) -> "WeightAccumulator":
        out = WeightAccumulator(self.n_labels)
        out.dist[:] = self.dist
        out.sqr[:] = self.sqr
        out.wt[:] = self.wt
        return out

    def total_weight(self) -> float:
        return float(self.wt.sum())

    def __repr__(self) -> str:
        parts = ", ".join(
            f"{b.name}=(dist={self.dist[b]:.6g}, sqr={self.sqr[b]:.6g}, wt={self.wt[b]:.6g})"
            for b in Bucket)
        return f"WeightAccumulator({parts})"
