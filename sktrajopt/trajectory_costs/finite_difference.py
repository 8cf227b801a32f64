"""Finite-difference estimates of joint velocity, acceleration and jerk.

Samples are treated as unit spaced; scaling by the timestep is left to
the coefficients and targets of the terms. A stencil for a timestep of
the requested range may read samples outside the range but never
outside the trajectory.

Velocity and acceleration have no estimate at a timestep whose central
stencil leaves the trajectory (the last timestep for velocity, the first
and last for acceleration); those timesteps are skipped. Jerk switches
to the one-sided third difference within two samples of either end.

=============  ==========================  ===========================
order          stencil at step i           at trajectory ends
=============  ==========================  ===========================
position       x(i)                        -
velocity       x(i+1) - x(i)               skipped
acceleration   x(i+1) - 2x(i) + x(i-1)     skipped
jerk           (x(i+2) - 2x(i+1)           forward / backward 3rd diff
               + 2x(i-1) - x(i-2)) / 2
=============  ==========================  ===========================
"""

from enum import IntEnum
from functools import lru_cache

import numpy as np

from sktrajopt.exceptions import InvalidRangeError
from sktrajopt.modeling.expr import AffExpr


class KinematicOrder(IntEnum):
    """Derivative order estimated by a term."""

    POSITION = 0
    VELOCITY = 1
    ACCELERATION = 2
    JERK = 3

    @property
    def min_span(self):
        """Minimum number of timesteps a step range must cover."""
        return _MIN_SPAN[self]


_MIN_SPAN = {
    KinematicOrder.POSITION: 1,
    KinematicOrder.VELOCITY: 2,
    KinematicOrder.ACCELERATION: 3,
    KinematicOrder.JERK: 5,
}

# (offsets, weights) relative to the step being estimated.
_CENTRAL = {
    KinematicOrder.POSITION: ((0,), (1.0,)),
    KinematicOrder.VELOCITY: ((0, 1), (-1.0, 1.0)),
    KinematicOrder.ACCELERATION: ((-1, 0, 1), (1.0, -2.0, 1.0)),
    KinematicOrder.JERK: ((-2, -1, 1, 2), (-0.5, 1.0, -1.0, 0.5)),
}
_JERK_FORWARD = ((0, 1, 2, 3), (-1.0, 3.0, -3.0, 1.0))
_JERK_BACKWARD = ((-3, -2, -1, 0), (-1.0, 3.0, -3.0, 1.0))


def _inside(step, offsets, n_steps):
    return step + offsets[0] >= 0 and step + offsets[-1] <= n_steps - 1


def stencil_at(order, step, n_steps):
    """Select the stencil used at one timestep.

    Parameters
    ----------
    order : KinematicOrder
        Derivative order.
    step : int
        Timestep being estimated.
    n_steps : int
        Number of timesteps in the trajectory.

    Returns
    -------
    tuple or None
        ``(offsets, weights)`` relative to ``step``, or ``None`` when the
        order has no estimate at this timestep.

    Raises
    ------
    InvalidRangeError
        If the trajectory is too short for a jerk estimate.
    """
    order = KinematicOrder(order)
    offsets, weights = _CENTRAL[order]
    if _inside(step, offsets, n_steps):
        return offsets, weights
    if order is not KinematicOrder.JERK:
        return None
    offsets, weights = _JERK_FORWARD if step < 2 else _JERK_BACKWARD
    if not _inside(step, offsets, n_steps):
        raise InvalidRangeError(
            "a trajectory of {} timesteps is too short for a jerk "
            "estimate at step {}".format(n_steps, step), step, step)
    return offsets, weights


def estimated_steps(order, n_steps, first_step, last_step):
    """Timesteps of a range that carry an estimate.

    Returns
    -------
    tuple[int]
        Steps of ``[first_step, last_step]`` in increasing order.
    """
    return tuple(
        step for step in range(first_step, last_step + 1)
        if stencil_at(order, step, n_steps) is not None)


@lru_cache(maxsize=256)
def difference_matrix(order, n_steps, first_step, last_step):
    """Linear map from samples to estimates over a step range.

    Parameters
    ----------
    order : KinematicOrder
        Derivative order.
    n_steps : int
        Number of timesteps in the trajectory.
    first_step, last_step : int
        Inclusive step range.

    Returns
    -------
    numpy.ndarray
        Read-only matrix ``D`` of shape ``(len(steps), n_steps)``, where
        ``steps = estimated_steps(order, n_steps, first_step, last_step)``;
        row ``k`` holds the stencil of ``steps[k]``.
    """
    steps = estimated_steps(order, n_steps, first_step, last_step)
    D = np.zeros((len(steps), n_steps))
    for k, step in enumerate(steps):
        offsets, weights = stencil_at(order, step, n_steps)
        for offset, weight in zip(offsets, weights):
            D[k, step + offset] += weight
    D.setflags(write=False)
    return D


def estimate(positions, order, first_step, last_step):
    """Numeric estimates from sampled positions.

    Parameters
    ----------
    positions : numpy.ndarray
        Samples of shape ``(n_steps, n_joints)``.
    order : KinematicOrder
        Derivative order.
    first_step, last_step : int
        Inclusive step range.

    Returns
    -------
    numpy.ndarray
        Estimates of shape ``(len(steps), n_joints)``, one row per step
        of :func:`estimated_steps`.
    """
    positions = np.asarray(positions, dtype=np.float64)
    D = difference_matrix(
        KinematicOrder(order), positions.shape[0], first_step, last_step)
    return D.dot(positions)


def estimate_exprs(traj, order, first_step, last_step):
    """Symbolic estimates over a trajectory grid.

    Uses the same stencils as :func:`estimate`, so evaluating the
    returned expressions reproduces the numeric estimates exactly.

    Parameters
    ----------
    traj : VarArray
        Trajectory grid.
    order : KinematicOrder
        Derivative order.
    first_step, last_step : int
        Inclusive step range.

    Returns
    -------
    list[list[AffExpr]]
        ``exprs[k][j]`` estimates joint ``j`` at the ``k``-th step of
        :func:`estimated_steps`.
    """
    D = difference_matrix(
        KinematicOrder(order), traj.n_steps, first_step, last_step)
    exprs = []
    for row in D:
        cols = np.flatnonzero(row)
        weights = row[cols]
        exprs.append([
            AffExpr(0.0, weights, [traj[t, j] for t in cols])
            for j in range(traj.n_joints)])
    return exprs


__all__ = [
    'KinematicOrder',
    'difference_matrix',
    'estimate',
    'estimate_exprs',
    'estimated_steps',
    'stencil_at',
]
