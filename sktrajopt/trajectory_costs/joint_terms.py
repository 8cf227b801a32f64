"""Joint-space smoothness terms with a fixed kinematic order.

Each class only pins the ``order`` of one of the generic roles in
:mod:`sktrajopt.trajectory_costs.terms`.
"""

from sktrajopt.trajectory_costs.finite_difference import KinematicOrder
from sktrajopt.trajectory_costs.terms import EqualityConstraint
from sktrajopt.trajectory_costs.terms import EqualityCost
from sktrajopt.trajectory_costs.terms import InequalityConstraint
from sktrajopt.trajectory_costs.terms import ToleranceBandCost


class JointPosCost(EqualityCost):
    """Squared deviation of joint positions from target values."""

    order = KinematicOrder.POSITION


class JointVelEqCost(EqualityCost):
    """Squared deviation of joint velocity from a target."""

    order = KinematicOrder.VELOCITY


class JointVelIneqCost(ToleranceBandCost):
    """Joint velocity tolerance band, as raw residuals."""

    order = KinematicOrder.VELOCITY


class JointVelEqConstraint(EqualityConstraint):
    order = KinematicOrder.VELOCITY


class JointVelIneqConstraint(InequalityConstraint):
    order = KinematicOrder.VELOCITY


class JointAccEqCost(EqualityCost):
    """Squared deviation of joint acceleration from a target."""

    order = KinematicOrder.ACCELERATION


class JointAccIneqCost(ToleranceBandCost):
    """Joint acceleration tolerance band, as raw residuals."""

    order = KinematicOrder.ACCELERATION


class JointAccEqConstraint(EqualityConstraint):
    order = KinematicOrder.ACCELERATION


class JointAccIneqConstraint(InequalityConstraint):
    order = KinematicOrder.ACCELERATION


class JointJerkEqCost(EqualityCost):
    """Squared deviation of joint jerk from a target.

    Jerk uses the five-point central third difference; within two
    samples of either end of the trajectory the forward or backward
    third difference is used instead.
    """

    order = KinematicOrder.JERK


class JointJerkIneqCost(ToleranceBandCost):
    """Joint jerk tolerance band, as raw residuals."""

    order = KinematicOrder.JERK


class JointJerkEqConstraint(EqualityConstraint):
    order = KinematicOrder.JERK


class JointJerkIneqConstraint(InequalityConstraint):
    order = KinematicOrder.JERK


TERM_TYPES = {
    'joint_pos_cost': JointPosCost,
    'joint_vel_eq_cost': JointVelEqCost,
    'joint_vel_ineq_cost': JointVelIneqCost,
    'joint_vel_eq_constraint': JointVelEqConstraint,
    'joint_vel_ineq_constraint': JointVelIneqConstraint,
    'joint_acc_eq_cost': JointAccEqCost,
    'joint_acc_ineq_cost': JointAccIneqCost,
    'joint_acc_eq_constraint': JointAccEqConstraint,
    'joint_acc_ineq_constraint': JointAccIneqConstraint,
    'joint_jerk_eq_cost': JointJerkEqCost,
    'joint_jerk_ineq_cost': JointJerkIneqCost,
    'joint_jerk_eq_constraint': JointJerkEqConstraint,
    'joint_jerk_ineq_constraint': JointJerkIneqConstraint,
}


def create_term(term_type, traj, **params):
    """Create a joint term from its configuration key.

    Parameters
    ----------
    term_type : str
        Key of :data:`TERM_TYPES`, e.g. ``'joint_vel_eq_cost'``.
    traj : VarArray
        Trajectory grid.
    **params
        Constructor keyword arguments (``coeffs``, ``targets``,
        ``first_step``, ``last_step``, and for band terms
        ``upper_tols``, ``lower_tols``).

    Returns
    -------
    KinematicTerm
        The constructed term.

    Examples
    --------
    >>> traj = VarArray.contiguous(10, 7)
    >>> term = create_term('joint_vel_eq_cost', traj,
    ...                    coeffs=[1.0] * 7, targets=[0.0] * 7,
    ...                    first_step=0, last_step=9)
    """
    if term_type not in TERM_TYPES:
        raise ValueError(
            "Unknown term type: {}. Available: {}".format(
                term_type, ', '.join(sorted(TERM_TYPES))))
    return TERM_TYPES[term_type](traj, **params)


__all__ = [
    'JointAccEqConstraint',
    'JointAccEqCost',
    'JointAccIneqConstraint',
    'JointAccIneqCost',
    'JointJerkEqConstraint',
    'JointJerkEqCost',
    'JointJerkIneqConstraint',
    'JointJerkIneqCost',
    'JointPosCost',
    'JointVelEqConstraint',
    'JointVelEqCost',
    'JointVelIneqConstraint',
    'JointVelIneqCost',
    'TERM_TYPES',
    'create_term',
]
