"""
Diagnostics read straight from the factor store.

Neither function changes d, r or rhs. Both work in the current position
order of the regressors (see RegressionState.vorder).
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystreamreg.core.compute.summation import smart_add
from pystreamreg.regression._reduction import column_tolerances
from pystreamreg.regression.state import RegressionState


def partial_correlations(state: RegressionState, in_: int) -> NDArray[np.floating[Any]] | None:
    """
    Partial correlations of the variables in positions in_..nvars-1, with
    each other and with y, after removing positions 0..in_-1.

    With an intercept in position 0, in_ = 1 gives ordinary (centered)
    Pearson correlations; in_ = 0 gives uncentered ones. in_ = -1 is
    accepted and treated as 0.

    Returns:
        For m = nvars - in_: m*(m-1)/2 pairwise values, entry (a, b) with
        a < b (relative to in_) at (b-1)*b/2 + a, followed by m
        correlations with y. Entries of a variable with no residual
        variation are NaN. None if in_ is outside [-1, nvars).
    """
    nvars = state.nvars
    if in_ < -1 or in_ >= nvars:
        return None
    in_ = max(in_, 0)
    m = nvars - in_

    R = state.r.to_dense()[in_:, in_:]
    weights = state.d[in_:]
    rhs = state.rhs[in_:]

    cross = R.T @ (weights[:, None] * R)
    cross_y = R.T @ (weights * rhs)
    sumyy = state.sserr + float(np.sum(weights * rhs * rhs))

    with np.errstate(divide='ignore', invalid='ignore'):
        diag = np.diag(cross)
        scale = np.where(diag > 0.0, 1.0 / np.sqrt(diag), np.nan)
        y_scale = 1.0 / np.sqrt(sumyy) if sumyy > 0.0 else np.nan
        corr = cross * np.outer(scale, scale)
        corr_y = cross_y * scale * y_scale

    out = np.empty(m * (m + 1) // 2, dtype=np.float64)
    n_pairs = m * (m - 1) // 2
    out[:n_pairs] = corr[np.tril_indices(m, k=-1)]
    out[n_pairs:] = corr_y
    return out


def hat_diagonal(state: RegressionState, row_data: ArrayLike) -> float:
    """
    Leverage x'(X'X)⁻¹x of a new row against the data seen so far.

    row_data holds the regressors without the constant, in original
    variable order like include_observation; the constant is prepended
    when the model has an intercept and the row is then permuted into
    position order. Columns below tolerance are skipped.

    A row shorter than the model covers the first variables only and is
    evaluated against the leading positions, which must hold exactly
    those variables.

    Returns:
        The hat value, or NaN if the row is longer than the model or a
        shorter row's variables are not in the leading positions
    """
    xrow = np.asarray(row_data, dtype=np.float64).ravel()
    if state.has_intercept:
        xrow = np.concatenate(([1.0], xrow))
    size = xrow.shape[0]
    if size > state.nvars:
        return float('nan')
    positions = state.vorder[:size]
    if size > 0 and int(positions.max()) >= size:
        return float('nan')
    xrow = xrow[positions]

    tol = column_tolerances(state)
    d = state.d
    r = state.r
    work = np.zeros(xrow.shape[0], dtype=np.float64)
    hii = 0.0
    for col in range(xrow.shape[0]):
        if d[col] == 0.0 or np.sqrt(d[col]) < tol[col]:
            continue
        total = float(xrow[col])
        for row in range(col):
            total = smart_add(total, -float(work[row]) * r.get(row, col))
        work[col] = total
        hii = smart_add(hii, total * total / float(d[col]))
    return hii
