"""
Square-root-free plane rotations and their near-zero-pivot cases.

Both the observation update (include) and the adjacent-variable exchange
(vmove) apply Gentleman's square-root-free Givens rotation to a pair of
rows with diagonal weights. Each has degenerate cases when a weight or
the coupling term is effectively zero; those decisions are made here so
they can be tested in isolation.
"""

from __future__ import annotations

import enum
from typing import NamedTuple

from pystreamreg.core.compute.summation import smart_add
from pystreamreg.core.compute.tolerances import MACHINE_EPSILON


class Absorption(NamedTuple):
    """Outcome of folding a weighted coordinate into one diagonal."""
    d_new: float
    weight: float
    direct: bool  # old diagonal was zero: row values are assigned, not blended


def absorb(d_old: float, weight: float, xi: float) -> Absorption:
    """
    Fold weight * xi² into the diagonal d_old.

    Returns the new diagonal and the weight left for later columns. When
    d_old is zero the whole weight is absorbed by this column.
    """
    wxi = weight * xi
    if d_old != 0.0:
        d_new = smart_add(d_old, wxi * xi)
        if abs(wxi * xi / d_old) > MACHINE_EPSILON:
            weight = (d_old * weight) / d_new
        return Absorption(d_new, weight, False)
    return Absorption(wxi * xi, 0.0, True)


class Exchange(enum.Enum):
    """How two adjacent positions of the reduction are interchanged."""
    SKIP = 'skip'            # both diagonals negligible, only bookkeeping moves
    SWAP = 'swap'            # columns uncoupled: swap rows directly
    ELIMINATE = 'eliminate'  # second column fully explained by the first
    ROTATE = 'rotate'        # genuine plane rotation


def classify_exchange(d1: float, d2: float, x: float, epsilon: float) -> Exchange:
    """
    Pick the exchange case for positions (m, m+1).

    Args:
        d1, d2: Diagonals at m and m+1
        x: Coupling r[m, m+1], already zeroed if below tolerance
        epsilon: Model tolerance
    """
    if not (d1 > epsilon or d2 > epsilon):
        return Exchange.SKIP
    if d1 < epsilon or abs(x) < epsilon:
        return Exchange.SWAP
    if d2 < epsilon:
        return Exchange.ELIMINATE
    return Exchange.ROTATE


class Rotation(NamedTuple):
    d1: float
    d2: float
    cbar: float
    sbar: float


def rotation(d1: float, d2: float, x: float) -> Rotation:
    """
    Square-root-free rotation that brings column m+1 ahead of column m.

    New diagonals and the (cbar, sbar) pair used to mix the two rows.
    """
    d1_new = d2 + d1 * x * x
    cbar = d2 / d1_new
    sbar = x * d1 / d1_new
    return Rotation(d1_new, d1 * cbar, cbar, sbar)
