"""
Mutable factor store of the updating regression.

RegressionState holds the compressed orthogonal reduction of every
observation seen so far (Gentleman's square-root-free form, as used by
Miller's Algorithm AS274):

    X'X = R' diag(d) R,    R unit upper triangular

with the projections of y kept alongside. Its size depends only on the
number of regressors, never on the number of observations.

Field meanings (p = nvars):
    d[i]      residual sum of squares of column i after columns 0..i-1
              are partialled out; always >= 0
    r         strictly upper part of R, packed row-major, p(p-1)/2 entries
    rhs[i]    projection of y on column i after columns 0..i-1
    tol[i]    singularity tolerance of column i (refreshed by tolset)
    rss[i]    residual sum of squares using positions 0..i (refreshed by ss)
    vorder[i] original variable index held in position i
    lindep[i] column i was found linearly dependent on earlier columns
    sserr     residual sum of squares of the full model

The kernels in _reduction, _solve, _reorder and _diagnostics operate on
this object directly; it has no behaviour of its own beyond clear().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystreamreg.core.compute.linalg.packed import PackedUpperTriangular
from pystreamreg.core.compute.summation import GuardedSum, GuardedSumOfSquares


@dataclass
class RegressionState:
    """
    The single mutable entity of the regression engine.

    Build with RegressionState.empty(nvars, epsilon, has_intercept).
    """
    nvars: int
    epsilon: float
    has_intercept: bool
    d: NDArray[np.floating[Any]]
    r: PackedUpperTriangular
    rhs: NDArray[np.floating[Any]]
    tol: NDArray[np.floating[Any]]
    rss: NDArray[np.floating[Any]]
    vorder: NDArray[np.intp]
    lindep: NDArray[np.bool_]
    nobs: int = 0
    sserr: float = 0.0
    sum_y: GuardedSum = field(default_factory=GuardedSum)
    sum_y_squared: GuardedSumOfSquares = field(default_factory=GuardedSumOfSquares)

    @classmethod
    def empty(cls, nvars: int, epsilon: float, has_intercept: bool) -> RegressionState:
        return cls(
            nvars=nvars,
            epsilon=epsilon,
            has_intercept=has_intercept,
            d=np.zeros(nvars, dtype=np.float64),
            r=PackedUpperTriangular(nvars),
            rhs=np.zeros(nvars, dtype=np.float64),
            tol=np.zeros(nvars, dtype=np.float64),
            rss=np.zeros(nvars, dtype=np.float64),
            vorder=np.arange(nvars, dtype=np.intp),
            lindep=np.zeros(nvars, dtype=np.bool_),
        )

    @property
    def sumy(self) -> float:
        return self.sum_y.result

    @property
    def sumsqy(self) -> float:
        return self.sum_y_squared.result

    def clear(self) -> None:
        """Reset to the empty model, keeping nvars, epsilon and intercept."""
        self.d.fill(0.0)
        self.r.fill(0.0)
        self.rhs.fill(0.0)
        self.tol.fill(0.0)
        self.rss.fill(0.0)
        self.vorder[:] = np.arange(self.nvars)
        self.lindep.fill(False)
        self.nobs = 0
        self.sserr = 0.0
        self.sum_y.reset()
        self.sum_y_squared.reset()

    def is_canonical_order(self, k: int | None = None) -> bool:
        """True if the first k positions hold variables 0..k-1 in order."""
        k = self.nvars if k is None else k
        return bool(np.array_equal(self.vorder[:k], np.arange(k)))
