"""Penalty shapes applied to one-sided residuals.

A residual ``r`` is satisfied when ``r <= 0``. How the solver turns
violated residuals into an objective is its own choice; terms only use
:func:`penalize` to report the same number the solver optimizes.
"""

from enum import Enum

import numpy as np


class PenaltyType(Enum):
    """Penalty applied to each residual.

    HINGE : ``max(0, r)``
    ABS : ``|r|``
    SQUARED : ``max(0, r) ** 2``
    """

    HINGE = 'hinge'
    ABS = 'abs'
    SQUARED = 'squared'


def penalize(residuals, penalty_type=PenaltyType.HINGE):
    """Apply a penalty shape elementwise.

    Parameters
    ----------
    residuals : array-like
        Residual values.
    penalty_type : PenaltyType or str
        Penalty shape, or its string value such as ``'hinge'``.

    Returns
    -------
    numpy.ndarray
        Non-negative penalties with the shape of ``residuals``.
    """
    penalty_type = PenaltyType(penalty_type)
    r = np.asarray(residuals, dtype=np.float64)
    if penalty_type is PenaltyType.HINGE:
        return np.maximum(r, 0.0)
    if penalty_type is PenaltyType.ABS:
        return np.abs(r)
    return np.maximum(r, 0.0) ** 2


__all__ = [
    'PenaltyType',
    'penalize',
]
