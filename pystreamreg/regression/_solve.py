"""
Solving from the factor store.

    regcf    back-substitution for the coefficients of the leading k columns
    inverse  inverse of the unit upper triangular R on the leading k columns
    cov      packed covariance of those coefficients
    ss       residual sums of squares of every nested leading-column model

All four read the reduction as it stands; they never touch raw data.
tolset() and singcheck() must have run first.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystreamreg.core.compute.linalg.packed import (
    PackedUpperTriangular,
    packed_symmetric_size,
    symmetric_index,
)
from pystreamreg.core.compute.summation import smart_add
from pystreamreg.core.exceptions import ModelSpecificationError
from pystreamreg.regression.state import RegressionState


def _check_nreq(state: RegressionState, nreq: int) -> None:
    if nreq < 1:
        raise ModelSpecificationError(
            f"number of regressors must be at least 1, got {nreq}",
            expected=1,
            actual=nreq,
        )
    if nreq > state.nvars:
        raise ModelSpecificationError(
            f"too many regressors requested: {nreq}, model has {state.nvars}",
            expected=state.nvars,
            actual=nreq,
        )


def regcf(state: RegressionState, nreq: int) -> NDArray[np.floating[Any]]:
    """
    Coefficients of the regression on positions 0..nreq-1.

    Columns whose scaled diagonal is below tolerance get coefficient 0 and
    their diagonal is forced to 0. Columns flagged in lindep are reported
    as NaN.

    Raises:
        ModelSpecificationError: If nreq < 1 or nreq > nvars
    """
    _check_nreq(state, nreq)
    d = state.d
    r = state.r
    beta = np.zeros(nreq, dtype=np.float64)

    for i in range(nreq - 1, -1, -1):
        if np.sqrt(d[i]) < state.tol[i]:
            beta[i] = 0.0
            d[i] = 0.0
            continue
        total = float(state.rhs[i])
        row = r.row(i)
        for j in range(i + 1, nreq):
            total = smart_add(total, -float(row[j - i - 1]) * float(beta[j]))
        beta[i] = total

    beta[state.lindep[:nreq]] = np.nan
    return beta


def inverse(state: RegressionState, nreq: int) -> PackedUpperTriangular:
    """
    Strict upper triangle of R⁻¹ restricted to positions 0..nreq-1.

    Rows of dependent columns are left NaN; dependent columns are skipped
    in the recurrence, which is the inverse of R with those rows and
    columns deleted.
    """
    r = state.r
    lindep = state.lindep
    rinv = PackedUpperTriangular(nreq, fill=np.nan)

    for row in range(nreq - 2, -1, -1):
        if lindep[row]:
            continue
        for col in range(nreq - 1, row, -1):
            total = -r.get(row, col)
            for m in range(row + 1, col):
                if not lindep[m]:
                    total -= r.get(row, m) * rinv.get(m, col)
            rinv.set(row, col, total)
    return rinv


def cov(state: RegressionState, nreq: int) -> NDArray[np.floating[Any]] | None:
    """
    Packed symmetric covariance of the leading nreq coefficients.

    cov = var * R⁻¹ diag(1/d) R⁻ᵀ with var = rss[nreq-1] / (nobs - rank),
    rank counting the non-dependent columns among the leading nreq.
    Entries involving a dependent column are NaN.

    Returns:
        Packed covariance (symmetric_index layout), or None when there are
        not more observations than regressors. Requires ss() first.
    """
    if state.nobs <= nreq:
        return None

    lindep = state.lindep
    d = state.d
    rank = int(np.count_nonzero(~lindep[:nreq]))
    var = float(state.rss[nreq - 1]) / (state.nobs - rank)
    rinv = inverse(state, nreq)
    covmat = np.full(packed_symmetric_size(nreq), np.nan, dtype=np.float64)

    with np.errstate(divide='ignore', invalid='ignore'):
        for row in range(nreq):
            if lindep[row]:
                continue
            for col in range(row, nreq):
                if lindep[col]:
                    continue
                if row == col:
                    total = 1.0 / d[col]
                else:
                    total = rinv.get(row, col) / d[col]
                for m in range(col + 1, nreq):
                    if not lindep[m]:
                        total += rinv.get(row, m) * rinv.get(col, m) / d[m]
                covmat[symmetric_index(col, row)] = total * var
    return covmat


def ss(state: RegressionState) -> None:
    """
    Fill rss[k] with the residual sum of squares of the model on
    positions 0..k, walking from the full model (sserr) backwards.
    """
    d = state.d
    rhs = state.rhs
    total = state.sserr
    state.rss[state.nvars - 1] = total
    for i in range(state.nvars - 1, 0, -1):
        total += float(d[i]) * float(rhs[i]) ** 2
        state.rss[i - 1] = total
