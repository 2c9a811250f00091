"""
Reordering the variables of an existing reduction.

The reduction solves nested models on leading positions only, so a
subset regression needs its variables brought to the front. vmove()
does that with exchanges of adjacent positions, each a plane rotation of
the two rows involved, keeping the factor a valid reduction of the same
data (Miller, AS274, VMOVE / REORDR). No observation is replayed.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from pystreamreg.core.exceptions import ModelSpecificationError
from pystreamreg.regression._reduction import tolset
from pystreamreg.regression._rotation import Exchange, classify_exchange, rotation
from pystreamreg.regression._solve import ss
from pystreamreg.regression.state import RegressionState


def _exchange(state: RegressionState, m: int) -> None:
    """Interchange the variables in positions m and m + 1."""
    d = state.d
    rhs = state.rhs
    r = state.r
    mp1 = m + 1

    d1 = float(d[m])
    d2 = float(d[mp1])
    x = r.get(m, mp1)
    if abs(x) * np.sqrt(d1) < state.tol[mp1]:
        x = 0.0

    row_m = r.row(m)
    tail_m = row_m[1:]
    row_mp1 = r.row(mp1)

    case = classify_exchange(d1, d2, x, state.epsilon)
    if case is Exchange.SWAP:
        d[m], d[mp1] = d2, d1
        row_m[0] = 0.0
        held = tail_m.copy()
        tail_m[:] = row_mp1
        row_mp1[:] = held
        rhs[m], rhs[mp1] = rhs[mp1], rhs[m]
    elif case is Exchange.ELIMINATE:
        d[m] = d1 * x * x
        row_m[0] = 1.0 / x
        tail_m /= x
        rhs[m] /= x
    elif case is Exchange.ROTATE:
        rot = rotation(d1, d2, x)
        d[m], d[mp1] = rot.d1, rot.d2
        row_m[0] = rot.sbar
        old_m = tail_m.copy()
        old_mp1 = row_mp1.copy()
        tail_m[:] = rot.cbar * old_mp1 + rot.sbar * old_m
        row_mp1[:] = old_m - x * old_mp1
        y = float(rhs[m])
        rhs[m] = rot.cbar * rhs[mp1] + rot.sbar * y
        rhs[mp1] = y - x * rhs[mp1]

    # rows above m see the two columns in swapped order
    for row in range(m):
        upper = r.get(row, m)
        r.set(row, m, r.get(row, mp1))
        r.set(row, mp1, upper)

    state.vorder[m], state.vorder[mp1] = state.vorder[mp1], state.vorder[m]
    state.tol[m], state.tol[mp1] = state.tol[mp1], state.tol[m]
    state.rss[m] = state.rss[mp1] + d[mp1] * rhs[mp1] ** 2


def vmove(state: RegressionState, from_: int, to: int) -> None:
    """
    Move the variable in position from_ to position to.

    Variables in between shift one place towards from_. d, r, rhs, tol,
    rss and vorder are updated together.
    """
    if from_ == to:
        return
    for position in (from_, to):
        if not 0 <= position < state.nvars:
            raise ModelSpecificationError(
                f"position {position} outside [0, {state.nvars})",
                expected=state.nvars - 1,
                actual=position,
            )
    tolset(state)
    ss(state)

    if from_ < to:
        positions = range(from_, to)
    else:
        positions = range(from_ - 1, to - 1, -1)
    for m in positions:
        _exchange(state, m)


def reorder_regressors(
    state: RegressionState,
    variables: Sequence[int],
    position: int = 0,
) -> None:
    """
    Bring the listed original variables into consecutive positions
    starting at position, keeping the relative order of everything else.
    Variables already sitting before position are not moved.

    Raises:
        ModelSpecificationError: If position is outside [0, nvars), or the
            list is empty or cannot fit after position
    """
    if position < 0 or position >= state.nvars:
        raise ModelSpecificationError(
            f"position {position} outside [0, {state.nvars})",
            expected=state.nvars - 1,
            actual=position,
        )
    count = len(variables)
    if count < 1 or count > state.nvars - position:
        raise ModelSpecificationError(
            f"cannot place {count} regressors from position {position} "
            f"in a model of {state.nvars}",
            expected=state.nvars - position,
            actual=count,
        )
    wanted = {int(v) for v in variables}
    target = position
    for i in range(position, state.nvars):
        if int(state.vorder[i]) in wanted:
            if i > target:
                vmove(state, i, target)
            target += 1
            if target >= position + count:
                break
