"""Base interfaces for costs and constraints handed to an SQP solver."""

from abc import ABC
from abc import abstractmethod
from enum import Enum

import numpy as np


class ConstraintType(Enum):
    """Whether a constraint is driven to zero or to non-positive values."""

    EQ = 'eq'
    INEQ = 'ineq'


class Cost(ABC):
    """Abstract cost term.

    Subclasses must implement `convex` and `value`.
    """

    def __init__(self, name=None):
        """Initialize cost.

        Parameters
        ----------
        name : str, optional
            Name for reporting. Defaults to the class name.
        """
        self.name = name or type(self).__name__

    @abstractmethod
    def convex(self, x, model=None):
        """Return a convex model of the cost around ``x``.

        Parameters
        ----------
        x : numpy.ndarray
            Current iterate (flat variable vector).
        model : object, optional
            Solver model handle.

        Returns
        -------
        QuadExpr or tuple[AffExpr]
            Convex expression of the cost.
        """
        pass

    @abstractmethod
    def value(self, x):
        """Evaluate the cost at ``x``.

        Returns
        -------
        float
            Cost value.
        """
        pass

    def get_vars(self):
        return []


class Constraint(ABC):
    """Abstract constraint term.

    Subclasses must implement `convex`, `value` and set
    `constraint_type`.
    """

    constraint_type = None

    def __init__(self, name=None):
        self.name = name or type(self).__name__

    @abstractmethod
    def convex(self, x, model=None):
        """Return affine models of the constraint functions around ``x``.

        Returns
        -------
        tuple[AffExpr]
            One expression per constraint function.
        """
        pass

    @abstractmethod
    def value(self, x):
        """Evaluate the constraint functions at ``x``.

        Returns
        -------
        numpy.ndarray
            One value per constraint function.
        """
        pass

    def violations(self, x):
        """Per-function violation.

        Absolute value for equality constraints, positive part for
        inequality constraints.

        Returns
        -------
        numpy.ndarray
            Non-negative violations.
        """
        values = np.asarray(self.value(x), dtype=np.float64)
        if self.constraint_type is ConstraintType.EQ:
            return np.abs(values)
        return np.maximum(values, 0.0)

    def violation(self, x):
        """Sum of violations; zero exactly when ``x`` is feasible."""
        return float(np.sum(self.violations(x)))

    def get_vars(self):
        return []


class EqConstraint(Constraint):
    """Constraint ``value(x) == 0``."""

    constraint_type = ConstraintType.EQ


class IneqConstraint(Constraint):
    """Constraint ``value(x) <= 0``."""

    constraint_type = ConstraintType.INEQ


__all__ = [
    'ConstraintType',
    'Constraint',
    'Cost',
    'EqConstraint',
    'IneqConstraint',
]
