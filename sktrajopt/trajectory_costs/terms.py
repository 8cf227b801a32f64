"""Generic kinematic costs and constraints over a trajectory grid.

Each term estimates one kinematic quantity (see
:class:`~sktrajopt.trajectory_costs.finite_difference.KinematicOrder`)
for every timestep of a step range and every joint, and exposes it in
one of four roles:

- :class:`EqualityCost`: weighted sum of squared deviations from a
  target, stored as an exact :class:`~sktrajopt.modeling.QuadExpr`.
- :class:`ToleranceBandCost`: raw upper/lower residuals of a tolerance
  band around a target; the solver chooses the penalty shape and
  weights it per joint with the coefficients.
- :class:`EqualityConstraint`: raw deviations from the target, driven
  to zero.
- :class:`InequalityConstraint`: tolerance-band residuals driven to
  non-positive values.

All stored vectors are read-only and expressions are built once at
construction, so evaluation never changes a term.
"""

from enum import Enum
from logging import getLogger
from numbers import Integral

import numpy as np

from sktrajopt.exceptions import CandidateDimensionError
from sktrajopt.exceptions import DimensionMismatchError
from sktrajopt.exceptions import FormulationError
from sktrajopt.exceptions import InvalidRangeError
from sktrajopt.modeling.base import Cost
from sktrajopt.modeling.base import EqConstraint
from sktrajopt.modeling.base import IneqConstraint
from sktrajopt.modeling.expr import expr_square
from sktrajopt.modeling.expr import quad_sum
from sktrajopt.modeling.penalty import penalize
from sktrajopt.modeling.penalty import PenaltyType
from sktrajopt.modeling.variables import VarArray
from sktrajopt.trajectory_costs.finite_difference import difference_matrix
from sktrajopt.trajectory_costs.finite_difference import estimate_exprs
from sktrajopt.trajectory_costs.finite_difference import estimated_steps
from sktrajopt.trajectory_costs.finite_difference import KinematicOrder


logger = getLogger(__name__)


class TermRole(Enum):
    """How a kinematic estimate enters the optimization problem."""

    EQUALITY_COST = 'equality_cost'
    TOLERANCE_BAND_COST = 'tolerance_band_cost'
    EQUALITY_CONSTRAINT = 'equality_constraint'
    INEQUALITY_CONSTRAINT = 'inequality_constraint'


def validate_step_range(order, n_steps, first_step, last_step):
    """Check a step range against a trajectory and a derivative order.

    Parameters
    ----------
    order : KinematicOrder
        Derivative order of the term.
    n_steps : int
        Number of timesteps in the trajectory.
    first_step : int
        First timestep of the range.
    last_step : int or None
        Last timestep of the range (inclusive). ``None`` selects the last
        timestep of the trajectory.

    Returns
    -------
    tuple[int, int]
        Validated ``(first_step, last_step)``.

    Raises
    ------
    InvalidRangeError
        If the range is not integral, lies outside the trajectory, is
        reversed, or covers fewer than ``order.min_span`` timesteps.
    """
    order = KinematicOrder(order)
    if last_step is None:
        last_step = n_steps - 1
    for label, step in (('first_step', first_step), ('last_step', last_step)):
        if not isinstance(step, Integral) or isinstance(step, bool):
            raise InvalidRangeError(
                "{} must be an integer, got {!r}".format(label, step),
                first_step, last_step)
    first_step, last_step = int(first_step), int(last_step)
    if first_step > last_step:
        raise InvalidRangeError(
            "first_step {} is after last_step {}".format(
                first_step, last_step),
            first_step, last_step)
    if first_step < 0 or last_step > n_steps - 1:
        raise InvalidRangeError(
            "step range [{}, {}] is outside the trajectory [0, {}]".format(
                first_step, last_step, n_steps - 1),
            first_step, last_step)
    span = last_step - first_step + 1
    if span < order.min_span:
        raise InvalidRangeError(
            "{} terms need at least {} timesteps in range, "
            "[{}, {}] covers {}".format(
                order.name.lower(), order.min_span,
                first_step, last_step, span),
            first_step, last_step)
    return first_step, last_step


def _joint_vector(values, n_joints, label):
    arr = np.array(values, dtype=np.float64)
    if arr.ndim != 1 or arr.shape[0] != n_joints:
        raise DimensionMismatchError(
            "{} must have one entry per joint ({}), got shape {}".format(
                label, n_joints, arr.shape))
    arr.setflags(write=False)
    return arr


class KinematicTerm(object):
    """State and evaluation shared by every kinematic term.

    Parameters
    ----------
    traj : VarArray or array-like of Var
        Trajectory grid, rows are timesteps and columns are joints.
    coeffs : array-like
        Per-joint weights.
    targets : array-like
        Per-joint target values of the estimated quantity.
    first_step : int
        First timestep the term applies to.
    last_step : int or None
        Last timestep the term applies to (inclusive). ``None`` selects
        the last timestep.
    order : KinematicOrder or int, optional
        Estimated quantity. Required unless the class fixes it.
    name : str, optional
        Name for reporting. Defaults to the class name.
    """

    order = None

    def __init__(self, traj, coeffs, targets, first_step=0, last_step=None,
                 order=None, name=None):
        if order is None:
            order = type(self).order
        if order is None:
            raise TypeError(
                "{} requires an order".format(type(self).__name__))
        self.order = KinematicOrder(order)
        self.traj = traj if isinstance(traj, VarArray) else VarArray(traj)
        self.first_step, self.last_step = validate_step_range(
            self.order, self.traj.n_steps, first_step, last_step)
        self.coeffs = _joint_vector(coeffs, self.n_joints, 'coeffs')
        self.targets = _joint_vector(targets, self.n_joints, 'targets')
        self.steps = estimated_steps(
            self.order, self.traj.n_steps, self.first_step, self.last_step)
        self._diff = difference_matrix(
            self.order, self.traj.n_steps, self.first_step, self.last_step)
        super(KinematicTerm, self).__init__(name=name)

    @property
    def n_joints(self):
        return self.traj.n_joints

    @property
    def n_samples(self):
        """Number of timesteps in the step range that carry an estimate."""
        return len(self.steps)

    def _estimate_exprs(self):
        return estimate_exprs(
            self.traj, self.order, self.first_step, self.last_step)

    def _check_candidate(self, x):
        x = np.asarray(x, dtype=np.float64)
        if x.ndim != 1:
            raise CandidateDimensionError(
                "{}: candidate must be a flat vector, got shape {}".format(
                    self.name, x.shape))
        if x.shape[0] <= self.traj.max_index:
            raise CandidateDimensionError(
                "{}: candidate has {} entries but the trajectory references "
                "index {}".format(self.name, x.shape[0], self.traj.max_index))
        return x

    def estimates(self, x):
        """Finite-difference estimates at a candidate point.

        Parameters
        ----------
        x : array-like
            Flat candidate vector.

        Returns
        -------
        numpy.ndarray
            Estimates of shape ``(n_samples, n_joints)``.
        """
        x = self._check_candidate(x)
        return self._diff.dot(x[self.traj.indices])

    def convex(self, x, model=None):
        """Return the stored expression.

        The expression is already exact in the decision variables, so
        ``x`` and ``model`` are not used.
        """
        return self._expr

    def get_vars(self):
        """Distinct variables touched by the expression, ordered by index."""
        exprs = self._expr if isinstance(self._expr, tuple) else (self._expr,)
        variables = set()
        for e in exprs:
            variables.update(e.get_vars())
        return sorted(variables, key=lambda v: v.index)

    def to_dict(self):
        """Export the term configuration."""
        return {
            'type': type(self).__name__,
            'name': self.name,
            'order': self.order.name.lower(),
            'first_step': self.first_step,
            'last_step': self.last_step,
            'coeffs': self.coeffs.tolist(),
            'targets': self.targets.tolist(),
        }

    def _log_built(self, n_exprs):
        logger.debug(
            '%s: %s over steps [%d, %d] for %d joints, %d expression terms',
            self.name, self.order.name.lower(), self.first_step,
            self.last_step, self.n_joints, n_exprs)

    def __repr__(self):
        return '{}(name={!r}, order={}, steps=[{}, {}], n_joints={})'.format(
            type(self).__name__, self.name, self.order.name,
            self.first_step, self.last_step, self.n_joints)


class _ToleranceBandMixin(object):
    """Upper/lower tolerance residuals around the targets."""

    def _init_band(self, upper_tols, lower_tols):
        self.upper_tols = _joint_vector(upper_tols, self.n_joints, 'upper_tols')
        self.lower_tols = _joint_vector(lower_tols, self.n_joints, 'lower_tols')
        if np.any(self.upper_tols < 0) or np.any(self.lower_tols < 0):
            logger.warning(
                '%s: negative tolerance (upper %s, lower %s) shrinks the '
                'band below the target', self.name,
                self.upper_tols.tolist(), self.lower_tols.tolist())
        upper = self.targets + self.upper_tols
        lower = self.targets - self.lower_tols
        upper.setflags(write=False)
        lower.setflags(write=False)
        self.upper_bounds = upper
        self.lower_bounds = lower

    def _band_exprs(self):
        exprs = []
        for row in self._estimate_exprs():
            for j, e in enumerate(row):
                exprs.append(e - float(self.upper_bounds[j]))
                exprs.append(float(self.lower_bounds[j]) - e)
        return tuple(exprs)

    def residuals(self, x):
        """Band residuals at a candidate point.

        Returns
        -------
        numpy.ndarray
            ``estimate - upper_bound`` and ``lower_bound - estimate``
            interleaved per step and joint, length
            ``2 * n_samples * n_joints``. Entries are non-positive
            inside the band.
        """
        est = self.estimates(x)
        upper = est - self.upper_bounds
        lower = self.lower_bounds - est
        return np.stack([upper, lower], axis=-1).reshape(-1)

    def _band_dict(self):
        return {
            'upper_tols': self.upper_tols.tolist(),
            'lower_tols': self.lower_tols.tolist(),
        }


class EqualityCost(KinematicTerm, Cost):
    """Sum of squared deviations of an estimate from its target.

    ``value(x) = sum_{step, joint} coeffs[joint] *
    (estimate(x)[step, joint] - targets[joint]) ** 2``
    """

    def __init__(self, traj, coeffs, targets, first_step=0, last_step=None,
                 order=None, name=None):
        super(EqualityCost, self).__init__(
            traj, coeffs, targets, first_step, last_step,
            order=order, name=name)
        squares = []
        for row in self._estimate_exprs():
            for j, e in enumerate(row):
                err = e - float(self.targets[j])
                squares.append(expr_square(err) * float(self.coeffs[j]))
        self._expr = quad_sum(squares)
        self._log_built(len(squares))

    def value(self, x):
        err = self.estimates(x) - self.targets
        return float(np.sum(self.coeffs * err ** 2))


class ToleranceBandCost(_ToleranceBandMixin, KinematicTerm, Cost):
    """Tolerance band around a target, emitted as raw residuals.

    `convex` returns the affine residuals unpenalized. `value` applies
    ``penalty_type`` and weights each joint by its coefficient, so that
    reported costs match the objective the solver builds from those
    residuals::

        value(x) = sum_{step, joint} coeffs[joint] *
            (penalty(upper[step, joint]) + penalty(lower[step, joint]))

    Parameters
    ----------
    traj, coeffs, targets, first_step, last_step, order, name
        See :class:`KinematicTerm`. Coefficients must be non-negative.
    upper_tols, lower_tols : array-like
        Per-joint distances from the target to the upper and lower edge
        of the band. Expected to be non-negative.
    penalty_type : PenaltyType or str
        Penalty the consuming solver applies to the residuals.
    """

    def __init__(self, traj, coeffs, targets, upper_tols, lower_tols,
                 first_step=0, last_step=None, order=None,
                 penalty_type=PenaltyType.HINGE, name=None):
        super(ToleranceBandCost, self).__init__(
            traj, coeffs, targets, first_step, last_step,
            order=order, name=name)
        if np.any(self.coeffs < 0):
            raise FormulationError(
                "{}: coefficients weight a penalty and must be "
                "non-negative, got {}".format(self.name, self.coeffs.tolist()))
        self.penalty_type = PenaltyType(penalty_type)
        self._init_band(upper_tols, lower_tols)
        self._expr = self._band_exprs()
        self._log_built(len(self._expr))

    def value(self, x):
        penalties = penalize(self.residuals(x), self.penalty_type)
        penalties = penalties.reshape(-1, self.n_joints, 2)
        return float(np.sum(self.coeffs[:, None] * penalties))

    def to_dict(self):
        d = super(ToleranceBandCost, self).to_dict()
        d.update(self._band_dict())
        d['penalty_type'] = self.penalty_type.value
        return d


class EqualityConstraint(KinematicTerm, EqConstraint):
    """Estimate pinned to its target at every step in range.

    ``value(x) = estimate(x) - targets`` flattened per step and joint;
    the point is feasible when every entry is zero. The coefficients
    are kept for the solver's merit weighting and never scale the
    residuals.
    """

    def __init__(self, traj, coeffs, targets, first_step=0, last_step=None,
                 order=None, name=None):
        super(EqualityConstraint, self).__init__(
            traj, coeffs, targets, first_step, last_step,
            order=order, name=name)
        exprs = []
        for row in self._estimate_exprs():
            for j, e in enumerate(row):
                exprs.append(e - float(self.targets[j]))
        self._expr = tuple(exprs)
        self._log_built(len(self._expr))

    def value(self, x):
        return (self.estimates(x) - self.targets).reshape(-1)


class InequalityConstraint(_ToleranceBandMixin, KinematicTerm, IneqConstraint):
    """Estimate kept inside a tolerance band at every step in range.

    ``value(x)`` returns the band residuals of
    :class:`ToleranceBandCost`; the point is feasible when every entry
    is non-positive. As for :class:`EqualityConstraint`, the
    coefficients do not scale the residuals.
    """

    def __init__(self, traj, coeffs, targets, upper_tols, lower_tols,
                 first_step=0, last_step=None, order=None, name=None):
        super(InequalityConstraint, self).__init__(
            traj, coeffs, targets, first_step, last_step,
            order=order, name=name)
        self._init_band(upper_tols, lower_tols)
        self._expr = self._band_exprs()
        self._log_built(len(self._expr))

    def value(self, x):
        return self.residuals(x)

    def to_dict(self):
        d = super(InequalityConstraint, self).to_dict()
        d.update(self._band_dict())
        return d


_ROLE_CLASSES = {
    TermRole.EQUALITY_COST: EqualityCost,
    TermRole.TOLERANCE_BAND_COST: ToleranceBandCost,
    TermRole.EQUALITY_CONSTRAINT: EqualityConstraint,
    TermRole.INEQUALITY_CONSTRAINT: InequalityConstraint,
}


def make_term(order, role, traj, **params):
    """Create a term from an order tag and a role tag.

    Parameters
    ----------
    order : KinematicOrder or int
        Estimated quantity.
    role : TermRole or str
        Role of the term, e.g. ``'equality_cost'``.
    traj : VarArray
        Trajectory grid.
    **params
        Remaining constructor keyword arguments of the role class
        (``coeffs``, ``targets``, ...). ``order`` is taken from the
        first argument only.

    Returns
    -------
    KinematicTerm
        The constructed term.
    """
    if 'order' in params:
        raise TypeError(
            "make_term takes the order as its first argument, "
            "not as a keyword")
    cls = _ROLE_CLASSES[TermRole(role)]
    return cls(traj, order=order, **params)


__all__ = [
    'EqualityConstraint',
    'EqualityCost',
    'InequalityConstraint',
    'KinematicTerm',
    'TermRole',
    'ToleranceBandCost',
    'make_term',
    'validate_step_range',
]
