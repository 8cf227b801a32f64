"""Variables, expressions and term interfaces shared with the solver."""

from sktrajopt.modeling.base import Constraint
from sktrajopt.modeling.base import ConstraintType
from sktrajopt.modeling.base import Cost
from sktrajopt.modeling.base import EqConstraint
from sktrajopt.modeling.base import IneqConstraint
from sktrajopt.modeling.expr import AffExpr
from sktrajopt.modeling.expr import affexprs_to_matrix
from sktrajopt.modeling.expr import expr_square
from sktrajopt.modeling.expr import exprs_value
from sktrajopt.modeling.expr import quad_sum
from sktrajopt.modeling.expr import QuadExpr
from sktrajopt.modeling.expr import quadexpr_to_matrices
from sktrajopt.modeling.penalty import penalize
from sktrajopt.modeling.penalty import PenaltyType
from sktrajopt.modeling.variables import Var
from sktrajopt.modeling.variables import VarArray


__all__ = [
    'AffExpr',
    'Constraint',
    'ConstraintType',
    'Cost',
    'EqConstraint',
    'IneqConstraint',
    'PenaltyType',
    'QuadExpr',
    'Var',
    'VarArray',
    'affexprs_to_matrix',
    'expr_square',
    'exprs_value',
    'penalize',
    'quad_sum',
    'quadexpr_to_matrices',
]
