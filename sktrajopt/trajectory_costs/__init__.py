"""Kinematic smoothness costs and constraints for trajectory optimization.

Usage:
    from sktrajopt.modeling import VarArray
    from sktrajopt.trajectory_costs import JointVelEqCost

    traj = VarArray.contiguous(n_steps=20, n_joints=7)
    cost = JointVelEqCost(traj, coeffs=[1.0] * 7, targets=[0.0] * 7,
                          first_step=0, last_step=18)
    quad = cost.convex(x)   # exact QuadExpr, handed to the QP
    cost.value(x)           # numeric value at x
"""

from sktrajopt.trajectory_costs.finite_difference import difference_matrix
from sktrajopt.trajectory_costs.finite_difference import estimate
from sktrajopt.trajectory_costs.finite_difference import estimate_exprs
from sktrajopt.trajectory_costs.finite_difference import estimated_steps
from sktrajopt.trajectory_costs.finite_difference import KinematicOrder
from sktrajopt.trajectory_costs.joint_terms import create_term
from sktrajopt.trajectory_costs.joint_terms import JointAccEqConstraint
from sktrajopt.trajectory_costs.joint_terms import JointAccEqCost
from sktrajopt.trajectory_costs.joint_terms import JointAccIneqConstraint
from sktrajopt.trajectory_costs.joint_terms import JointAccIneqCost
from sktrajopt.trajectory_costs.joint_terms import JointJerkEqConstraint
from sktrajopt.trajectory_costs.joint_terms import JointJerkEqCost
from sktrajopt.trajectory_costs.joint_terms import JointJerkIneqConstraint
from sktrajopt.trajectory_costs.joint_terms import JointJerkIneqCost
from sktrajopt.trajectory_costs.joint_terms import JointPosCost
from sktrajopt.trajectory_costs.joint_terms import JointVelEqConstraint
from sktrajopt.trajectory_costs.joint_terms import JointVelEqCost
from sktrajopt.trajectory_costs.joint_terms import JointVelIneqConstraint
from sktrajopt.trajectory_costs.joint_terms import JointVelIneqCost
from sktrajopt.trajectory_costs.joint_terms import TERM_TYPES
from sktrajopt.trajectory_costs.terms import EqualityConstraint
from sktrajopt.trajectory_costs.terms import EqualityCost
from sktrajopt.trajectory_costs.terms import InequalityConstraint
from sktrajopt.trajectory_costs.terms import KinematicTerm
from sktrajopt.trajectory_costs.terms import make_term
from sktrajopt.trajectory_costs.terms import TermRole
from sktrajopt.trajectory_costs.terms import ToleranceBandCost
from sktrajopt.trajectory_costs.terms import validate_step_range


__all__ = [
    'EqualityConstraint',
    'EqualityCost',
    'InequalityConstraint',
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
    'KinematicOrder',
    'KinematicTerm',
    'TERM_TYPES',
    'TermRole',
    'ToleranceBandCost',
    'create_term',
    'difference_matrix',
    'estimate',
    'estimate_exprs',
    'estimated_steps',
    'make_term',
    'validate_step_range',
]
