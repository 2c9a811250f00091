"""
Updating reduction and singularity management.

include() folds one weighted observation into the factor store with a
sequence of square-root-free plane rotations, O(p²) per observation and
independent of how many observations came before (Gentleman, 1974;
Miller, AS274).

tolset() and singcheck() run before every solve: the first derives a
tolerance per column from the current factor, the second zeroes
rounding noise in R, flags columns that are linear combinations of
earlier ones and re-absorbs what is left of them into later columns.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystreamreg.core.compute.summation import smart_add
from pystreamreg.regression._rotation import absorb
from pystreamreg.regression.state import RegressionState


def include(
    state: RegressionState,
    x: NDArray[np.floating[Any]],
    weight: float,
    y: float,
) -> None:
    """
    Fold one observation into d, r, rhs and sserr.

    The y totals (sumy, sumsqy) and nobs are left alone: they count caller
    observations only and are updated by include_observation. Rows that
    singcheck re-absorbs through here therefore do not count a second
    time in the y totals.

    Args:
        state: Factor store, mutated in place
        x: Regressor values in current position order, length nvars.
           Not modified; a working copy is reduced.
        weight: Observation weight
        y: Response value
    """
    nvars = state.nvars
    d = state.d
    rhs = state.rhs
    r = state.r
    work = np.array(x, dtype=np.float64)
    w = float(weight)
    y = float(y)

    for i in range(nvars):
        if w == 0.0:
            return
        xi = float(work[i])
        if xi == 0.0:
            continue

        di = float(d[i])
        w_prev = w
        step = absorb(di, w, xi)
        w = step.weight
        d[i] = step.d_new

        row = r.row(i)
        for offset in range(nvars - i - 1):
            k = i + 1 + offset
            xk = float(work[k])
            rik = float(row[offset])
            work[k] = smart_add(xk, -xi * rik)
            if step.direct:
                row[offset] = xk / xi
            else:
                row[offset] = smart_add(di * rik, (w_prev * xi) * xk) / step.d_new

        yk = y
        y = smart_add(yk, -xi * float(rhs[i]))
        if step.direct:
            rhs[i] = yk / xi
        else:
            rhs[i] = smart_add(di * float(rhs[i]), (w_prev * xi) * yk) / step.d_new

    state.sserr = smart_add(state.sserr, w * y * y)


def include_observation(
    state: RegressionState,
    x: NDArray[np.floating[Any]],
    y: float,
) -> None:
    """
    Add one caller observation: prepend the constant if the model has an
    intercept, update the y accumulators, count it, and fold it in.

    x is in original variable order; it is permuted into the current
    position order when regressors have been reordered.
    """
    if state.has_intercept:
        row = np.empty(state.nvars, dtype=np.float64)
        row[0] = 1.0
        row[1:] = x
    else:
        row = np.array(x, dtype=np.float64)
    if not state.is_canonical_order():
        row = row[state.vorder]
    state.sum_y.increment(y)
    state.sum_y_squared.increment(y)
    include(state, row, 1.0, y)
    state.nobs += 1


def column_tolerances(state: RegressionState) -> NDArray[np.floating[Any]]:
    """
    Per-column tolerances of the current factor, without storing them.

    tol[c] = epsilon * (sqrt(d[c]) + sum_{row < c} |r[row, c]| * sqrt(d[row]))
    """
    sqrt_d = np.sqrt(state.d)
    r = state.r
    tol = np.empty(state.nvars, dtype=np.float64)
    for col in range(state.nvars):
        total = float(sqrt_d[col])
        for row in range(col):
            total += abs(r.get(row, col)) * float(sqrt_d[row])
        tol[col] = state.epsilon * total
    return tol


def tolset(state: RegressionState) -> None:
    """Recompute state.tol; stale as soon as another observation is included."""
    state.tol[:] = column_tolerances(state)


def singcheck(state: RegressionState) -> None:
    """
    Detect and neutralise linearly dependent columns.

    Requires fresh tolerances (call tolset first). For each column:
    entries of R whose scaled size is below the column tolerance are set
    to zero; if the column's own scaled diagonal is below tolerance it is
    flagged in lindep. A dependent column that is not last is removed from
    the factor and its row is resubmitted through include() with its
    diagonal as weight, so its correlation with later columns is kept.
    A dependent last column adds its remaining d * rhs² to sserr.
    """
    nvars = state.nvars
    d = state.d
    rhs = state.rhs
    r = state.r
    sqrt_d = np.sqrt(d)

    for col in range(nvars):
        limit = float(state.tol[col])
        for row in range(col):
            if abs(r.get(row, col)) * float(sqrt_d[row]) < limit:
                r.set(row, col, 0.0)

        state.lindep[col] = False
        # a column that never received any weight is dependent too
        if sqrt_d[col] < limit or d[col] == 0.0:
            state.lindep[col] = True
            if col < nvars - 1:
                x = np.zeros(nvars, dtype=np.float64)
                dependent_row = r.row(col)
                x[col + 1:] = dependent_row
                dependent_row.fill(0.0)
                y = float(rhs[col])
                weight = float(d[col])
                d[col] = 0.0
                rhs[col] = 0.0
                include(state, x, weight, y)
            else:
                state.sserr += float(d[col]) * float(rhs[col]) ** 2
