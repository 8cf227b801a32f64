"""Decision variable handles and trajectory grids."""

from numbers import Integral

import numpy as np

from sktrajopt.exceptions import DimensionMismatchError


class Var(object):
    """Handle to one scalar in the solver's flat variable vector.

    Parameters
    ----------
    index : int
        Position of the variable in the flat vector.
    name : str, optional
        Name used in ``repr`` only.
    """

    __slots__ = ('_index', '_name')

    def __init__(self, index, name=None):
        if not isinstance(index, Integral) or isinstance(index, bool):
            raise TypeError(
                "variable index must be an integer, got {!r}".format(index))
        if index < 0:
            raise ValueError(
                "variable index must be non-negative, got {}".format(index))
        self._index = int(index)
        self._name = name

    @property
    def index(self):
        return self._index

    @property
    def name(self):
        if self._name is None:
            return 'x{}'.format(self._index)
        return self._name

    def value(self, x):
        return float(x[self._index])

    def __eq__(self, other):
        if not isinstance(other, Var):
            return NotImplemented
        return self._index == other._index

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((Var, self._index))

    def __repr__(self):
        return 'Var({}, {!r})'.format(self._index, self.name)

    # Arithmetic produces expressions; imported lazily to avoid a cycle.
    def _as_affexpr(self):
        from sktrajopt.modeling.expr import AffExpr
        return AffExpr.from_var(self)

    def __add__(self, other):
        return self._as_affexpr() + other

    def __radd__(self, other):
        return self._as_affexpr() + other

    def __sub__(self, other):
        return self._as_affexpr() - other

    def __rsub__(self, other):
        return (-self._as_affexpr()) + other

    def __neg__(self):
        return -self._as_affexpr()

    def __mul__(self, other):
        return self._as_affexpr() * other

    def __rmul__(self, other):
        return self._as_affexpr() * other


class VarArray(object):
    """Trajectory grid of decision variables.

    Rows are timesteps and columns are joints. The grid only references
    variables owned by the surrounding problem.

    Parameters
    ----------
    variables : array-like of Var
        Either a 2-D ``(n_steps, n_joints)`` arrangement, or a 1-D
        sequence which is treated as a single timestep.
    """

    def __init__(self, variables):
        if isinstance(variables, VarArray):
            grid = variables._vars
        else:
            rows = list(variables)
            if len(rows) > 0 and isinstance(rows[0], Var):
                rows = [rows]
            rows = [list(row) for row in rows]
            widths = set(len(row) for row in rows)
            if len(rows) == 0 or widths == {0}:
                raise DimensionMismatchError(
                    "trajectory grid must contain at least one variable")
            if len(widths) != 1:
                raise DimensionMismatchError(
                    "all timesteps must have the same number of joints, "
                    "got row lengths {}".format(sorted(widths)))
            grid = np.empty((len(rows), widths.pop()), dtype=object)
            for i, row in enumerate(rows):
                for j, var in enumerate(row):
                    if not isinstance(var, Var):
                        raise TypeError(
                            "grid entries must be Var, got {!r}".format(var))
                    grid[i, j] = var
        grid.setflags(write=False)
        self._vars = grid
        indices = np.array(
            [[v.index for v in row] for row in grid], dtype=np.int64)
        indices.setflags(write=False)
        self._indices = indices

    @classmethod
    def contiguous(cls, n_steps, n_joints, offset=0, name='q'):
        """Create a row-major grid over ``n_steps * n_joints`` variables.

        Parameters
        ----------
        n_steps : int
            Number of timesteps.
        n_joints : int
            Number of joints.
        offset : int
            Flat index of the first variable.
        name : str
            Prefix for the variable names.

        Returns
        -------
        VarArray
            Grid with ``grid[t, j].index == offset + t * n_joints + j``.
        """
        if n_steps < 1 or n_joints < 1:
            raise DimensionMismatchError(
                "grid shape must be positive, got ({}, {})".format(
                    n_steps, n_joints))
        return cls([
            [Var(offset + t * n_joints + j, '{}[{},{}]'.format(name, t, j))
             for j in range(n_joints)]
            for t in range(n_steps)])

    @property
    def shape(self):
        return self._vars.shape

    @property
    def n_steps(self):
        return self._vars.shape[0]

    @property
    def n_joints(self):
        return self._vars.shape[1]

    @property
    def indices(self):
        """Flat indices of the grid, shape ``(n_steps, n_joints)``."""
        return self._indices

    @property
    def max_index(self):
        return int(self._indices.max())

    def __getitem__(self, key):
        return self._vars[key]

    def __len__(self):
        return self.n_steps

    def __iter__(self):
        return iter(self._vars)

    def values(self, x):
        """Gather the grid values out of a flat vector.

        Parameters
        ----------
        x : numpy.ndarray
            Flat candidate vector.

        Returns
        -------
        numpy.ndarray
            Values of shape ``(n_steps, n_joints)``.
        """
        return np.asarray(x, dtype=np.float64)[self._indices]

    def __repr__(self):
        return 'VarArray(n_steps={}, n_joints={})'.format(
            self.n_steps, self.n_joints)
