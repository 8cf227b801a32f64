import unittest

import numpy as np
from numpy import testing

from sktrajopt.exceptions import DimensionMismatchError
from sktrajopt.modeling import Var
from sktrajopt.modeling import VarArray


class TestVar(unittest.TestCase):

    def test_equality_by_index(self):
        self.assertEqual(Var(3, 'a'), Var(3, 'b'))
        self.assertNotEqual(Var(3), Var(4))
        self.assertEqual(len({Var(1), Var(1), Var(2)}), 2)

    def test_name(self):
        self.assertEqual(Var(7).name, 'x7')
        self.assertEqual(Var(7, 'q[0,1]').name, 'q[0,1]')

    def test_invalid_index(self):
        with self.assertRaises(ValueError):
            Var(-1)
        with self.assertRaises(TypeError):
            Var(1.5)

    def test_value(self):
        self.assertEqual(Var(2).value(np.array([0.0, 1.0, 4.0])), 4.0)


class TestVarArray(unittest.TestCase):

    def test_contiguous(self):
        traj = VarArray.contiguous(4, 3, offset=5)
        self.assertEqual(traj.shape, (4, 3))
        self.assertEqual(traj.n_steps, 4)
        self.assertEqual(traj.n_joints, 3)
        self.assertEqual(traj[2, 1].index, 5 + 2 * 3 + 1)
        self.assertEqual(traj.max_index, 5 + 11)
        testing.assert_equal(traj.indices[0], [5, 6, 7])

    def test_values(self):
        traj = VarArray.contiguous(3, 2)
        x = np.arange(6, dtype=float)
        testing.assert_equal(traj.values(x), [[0, 1], [2, 3], [4, 5]])

    def test_one_dimensional_is_single_step(self):
        traj = VarArray([Var(4), Var(2), Var(9)])
        self.assertEqual(traj.shape, (1, 3))
        testing.assert_equal(traj.indices, [[4, 2, 9]])

    def test_read_only(self):
        traj = VarArray.contiguous(2, 2)
        with self.assertRaises(ValueError):
            traj.indices[0, 0] = 10

    def test_invalid_shapes(self):
        with self.assertRaises(DimensionMismatchError):
            VarArray([])
        with self.assertRaises(DimensionMismatchError):
            VarArray([[Var(0), Var(1)], [Var(2)]])
        with self.assertRaises(DimensionMismatchError):
            VarArray.contiguous(0, 3)
        with self.assertRaises(TypeError):
            VarArray([[Var(0), 1]])
