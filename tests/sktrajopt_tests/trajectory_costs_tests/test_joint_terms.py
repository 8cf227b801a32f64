import unittest

import numpy as np
from numpy import testing

from sktrajopt.exceptions import InvalidRangeError
from sktrajopt.modeling import ConstraintType
from sktrajopt.modeling import Var
from sktrajopt.modeling import VarArray
from sktrajopt.trajectory_costs import create_term
from sktrajopt.trajectory_costs import JointAccIneqConstraint
from sktrajopt.trajectory_costs import JointJerkEqCost
from sktrajopt.trajectory_costs import JointPosCost
from sktrajopt.trajectory_costs import JointVelEqConstraint
from sktrajopt.trajectory_costs import JointVelEqCost
from sktrajopt.trajectory_costs import JointVelIneqCost
from sktrajopt.trajectory_costs import KinematicOrder
from sktrajopt.trajectory_costs import TERM_TYPES


class TestJointTerms(unittest.TestCase):

    def test_fixed_orders(self):
        traj = VarArray.contiguous(6, 2)
        args = ([1.0, 1.0], [0.0, 0.0])
        self.assertEqual(JointPosCost(traj, *args).order,
                         KinematicOrder.POSITION)
        self.assertEqual(JointVelEqCost(traj, *args).order,
                         KinematicOrder.VELOCITY)
        self.assertEqual(JointJerkEqCost(traj, *args).order,
                         KinematicOrder.JERK)
        con = JointAccIneqConstraint(traj, *args, [0.5, 0.5], [0.5, 0.5])
        self.assertEqual(con.order, KinematicOrder.ACCELERATION)
        self.assertEqual(con.constraint_type, ConstraintType.INEQ)

    def test_name(self):
        traj = VarArray.contiguous(4, 1)
        self.assertEqual(JointVelEqCost(traj, [1.0], [0.0]).name,
                         'JointVelEqCost')
        self.assertEqual(
            JointVelEqCost(traj, [1.0], [0.0], name='smooth').name, 'smooth')

    def test_single_step_position(self):
        traj = VarArray([Var(1), Var(3)])
        cost = JointPosCost(traj, [1.0, 1.0], [0.5, -0.5])
        x = np.array([9.0, 1.5, 9.0, 0.5])
        self.assertAlmostEqual(cost.value(x), 1.0 + 1.0)
        self.assertAlmostEqual(cost.convex(x).value(x), cost.value(x))

    def test_single_step_velocity_fails(self):
        traj = VarArray([Var(0), Var(1)])
        with self.assertRaises(InvalidRangeError):
            JointVelEqCost(traj, [1.0, 1.0], [0.0, 0.0])

    def test_to_dict(self):
        traj = VarArray.contiguous(5, 1)
        cost = JointVelIneqCost(traj, [2.0], [0.0], [0.1], [0.2],
                                first_step=1, last_step=3)
        d = cost.to_dict()
        self.assertEqual(d['type'], 'JointVelIneqCost')
        self.assertEqual(d['order'], 'velocity')
        self.assertEqual((d['first_step'], d['last_step']), (1, 3))
        self.assertEqual(d['upper_tols'], [0.1])
        self.assertEqual(d['lower_tols'], [0.2])
        self.assertEqual(d['penalty_type'], 'hinge')

    def test_range_is_captured(self):
        traj = VarArray.contiguous(6, 1)
        first, last = 1, 4
        con = JointVelEqConstraint(traj, [1.0], [1.0], first, last)
        first, last = 0, 5
        self.assertEqual((con.first_step, con.last_step), (1, 4))
        self.assertEqual(len(con.convex(None)), 4)


class TestCreateTerm(unittest.TestCase):

    def test_every_type(self):
        traj = VarArray.contiguous(7, 2)
        rng = np.random.RandomState(12)
        x = rng.randn(14)
        for term_type, cls in TERM_TYPES.items():
            params = {'coeffs': [1.0, 0.5], 'targets': [0.1, -0.1]}
            if 'ineq' in term_type:
                params['upper_tols'] = [0.2, 0.2]
                params['lower_tols'] = [0.3, 0.1]
            term = create_term(term_type, traj, **params)
            self.assertIsInstance(term, cls)
            expr = term.convex(x)
            if isinstance(expr, tuple):
                values = np.array([e.value(x) for e in expr])
                if term_type.endswith('_cost'):
                    testing.assert_almost_equal(values, term.residuals(x))
                else:
                    testing.assert_almost_equal(values, term.value(x))
            else:
                self.assertAlmostEqual(expr.value(x), term.value(x))

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            create_term('joint_snap_cost', VarArray.contiguous(3, 1),
                        coeffs=[1.0], targets=[0.0])
