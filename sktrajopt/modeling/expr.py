"""Affine and quadratic expressions over decision variables.

Expressions are immutable: every operator returns a new object. They
are what the terms hand to the solver, either directly or in the
sparse matrix form produced by :func:`affexprs_to_matrix` and
:func:`quadexpr_to_matrices`.
"""

from numbers import Number

import numpy as np
import scipy.sparse

from sktrajopt.modeling.variables import Var


def _frozen(values, dtype):
    arr = np.array(values, dtype=dtype).reshape(-1)
    arr.setflags(write=False)
    return arr


def _index_array(variables):
    return np.array([v.index for v in variables], dtype=np.int64)


class AffExpr(object):
    """Affine expression ``constant + sum_i coeffs[i] * vars[i]``.

    Parameters
    ----------
    constant : float
        Constant offset.
    coeffs : sequence of float
        Coefficients, one per variable.
    vars : sequence of Var
        Variables. The same variable may appear more than once; see
        :meth:`simplify`.
    """

    __slots__ = ('constant', 'coeffs', 'vars', '_indices')

    def __init__(self, constant=0.0, coeffs=(), vars=()):
        vars = tuple(vars)
        coeffs = _frozen(coeffs, np.float64)
        if len(coeffs) != len(vars):
            raise ValueError(
                "got {} coefficients for {} variables".format(
                    len(coeffs), len(vars)))
        self.constant = float(constant)
        self.coeffs = coeffs
        self.vars = vars
        self._indices = _index_array(vars)

    @classmethod
    def from_var(cls, var, coeff=1.0):
        return cls(0.0, [coeff], [var])

    def value(self, x):
        x = np.asarray(x, dtype=np.float64)
        return self.constant + float(np.dot(self.coeffs, x[self._indices]))

    def get_vars(self):
        return _distinct_vars(self.vars)

    def simplify(self):
        """Merge repeated variables and drop zero coefficients.

        Returns
        -------
        AffExpr
            Equivalent expression with each variable at most once,
            ordered by index.
        """
        merged = {}
        for coeff, var in zip(self.coeffs, self.vars):
            merged[var] = merged.get(var, 0.0) + coeff
        keep = sorted(
            (var for var, coeff in merged.items() if coeff != 0.0),
            key=lambda v: v.index)
        return AffExpr(self.constant, [merged[v] for v in keep], keep)

    def __len__(self):
        return len(self.vars)

    def __add__(self, other):
        if isinstance(other, QuadExpr):
            return other + self
        if isinstance(other, Var):
            other = AffExpr.from_var(other)
        if isinstance(other, AffExpr):
            return AffExpr(
                self.constant + other.constant,
                np.concatenate([self.coeffs, other.coeffs]),
                self.vars + other.vars)
        if isinstance(other, Number):
            return AffExpr(self.constant + other, self.coeffs, self.vars)
        return NotImplemented

    def __radd__(self, other):
        return self.__add__(other)

    def __neg__(self):
        return AffExpr(-self.constant, -self.coeffs, self.vars)

    def __sub__(self, other):
        if isinstance(other, (Var, AffExpr, QuadExpr, Number)):
            return self + (-other)
        return NotImplemented

    def __rsub__(self, other):
        return (-self).__add__(other)

    def __mul__(self, other):
        if isinstance(other, Number):
            return AffExpr(
                self.constant * other, self.coeffs * other, self.vars)
        return NotImplemented

    def __rmul__(self, other):
        return self.__mul__(other)

    def __repr__(self):
        terms = ['{:g}'.format(self.constant)]
        terms.extend('{:g}*{}'.format(c, v.name)
                     for c, v in zip(self.coeffs, self.vars))
        return 'AffExpr({})'.format(' + '.join(terms))


class QuadExpr(object):
    """Quadratic expression ``affexpr + sum_i coeffs[i] * v1[i] * v2[i]``.

    Parameters
    ----------
    affexpr : AffExpr, optional
        Affine part.
    coeffs : sequence of float
        Coefficients of the bilinear terms.
    vars1, vars2 : sequence of Var
        Left and right factors of each bilinear term.
    """

    __slots__ = ('affexpr', 'coeffs', 'vars1', 'vars2', '_idx1', '_idx2')

    def __init__(self, affexpr=None, coeffs=(), vars1=(), vars2=()):
        vars1 = tuple(vars1)
        vars2 = tuple(vars2)
        coeffs = _frozen(coeffs, np.float64)
        if not (len(coeffs) == len(vars1) == len(vars2)):
            raise ValueError(
                "quadratic terms have mismatched lengths: "
                "{} coeffs, {} left vars, {} right vars".format(
                    len(coeffs), len(vars1), len(vars2)))
        self.affexpr = AffExpr() if affexpr is None else affexpr
        self.coeffs = coeffs
        self.vars1 = vars1
        self.vars2 = vars2
        self._idx1 = _index_array(vars1)
        self._idx2 = _index_array(vars2)

    def value(self, x):
        x = np.asarray(x, dtype=np.float64)
        quad = np.dot(self.coeffs, x[self._idx1] * x[self._idx2])
        return self.affexpr.value(x) + float(quad)

    def get_vars(self):
        return _distinct_vars(self.affexpr.vars + self.vars1 + self.vars2)

    def __add__(self, other):
        if isinstance(other, QuadExpr):
            return QuadExpr(
                self.affexpr + other.affexpr,
                np.concatenate([self.coeffs, other.coeffs]),
                self.vars1 + other.vars1,
                self.vars2 + other.vars2)
        if isinstance(other, (Var, AffExpr, Number)):
            return QuadExpr(
                self.affexpr + other, self.coeffs, self.vars1, self.vars2)
        return NotImplemented

    def __radd__(self, other):
        return self.__add__(other)

    def __neg__(self):
        return self * -1.0

    def __sub__(self, other):
        if isinstance(other, (Var, AffExpr, QuadExpr, Number)):
            return self + (-other)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Number):
            return QuadExpr(
                self.affexpr * other, self.coeffs * other,
                self.vars1, self.vars2)
        return NotImplemented

    def __rmul__(self, other):
        return self.__mul__(other)

    def __repr__(self):
        return 'QuadExpr({!r}, {} quadratic terms)'.format(
            self.affexpr, len(self.coeffs))


def _distinct_vars(variables):
    return sorted(set(variables), key=lambda v: v.index)


def expr_square(affexpr):
    """Expand the square of an affine expression.

    Parameters
    ----------
    affexpr : AffExpr or Var
        Expression ``c + a^T v``.

    Returns
    -------
    QuadExpr
        ``c^2 + 2 c a^T v + sum_ij a_i a_j v_i v_j``.
    """
    if isinstance(affexpr, Var):
        affexpr = AffExpr.from_var(affexpr)
    aff = affexpr.simplify()
    c = aff.constant
    n = len(aff.vars)
    linear = AffExpr(c * c, 2.0 * c * aff.coeffs, aff.vars)
    if n == 0:
        return QuadExpr(linear)
    rows, cols = np.triu_indices(n)
    coeffs = aff.coeffs[rows] * aff.coeffs[cols]
    coeffs = np.where(rows == cols, coeffs, 2.0 * coeffs)
    vars1 = [aff.vars[i] for i in rows]
    vars2 = [aff.vars[j] for j in cols]
    return QuadExpr(linear, coeffs, vars1, vars2)


def quad_sum(exprs):
    """Sum quadratic expressions in one pass.

    Parameters
    ----------
    exprs : sequence of QuadExpr
        Expressions to add.

    Returns
    -------
    QuadExpr
        The sum; an empty sequence gives the zero expression.
    """
    exprs = list(exprs)
    if len(exprs) == 0:
        return QuadExpr()
    affs = [e.affexpr for e in exprs]
    affexpr = AffExpr(
        sum(a.constant for a in affs),
        np.concatenate([a.coeffs for a in affs]),
        [v for a in affs for v in a.vars])
    return QuadExpr(
        affexpr,
        np.concatenate([e.coeffs for e in exprs]),
        [v for e in exprs for v in e.vars1],
        [v for e in exprs for v in e.vars2])


def exprs_value(exprs, x):
    """Evaluate a sequence of expressions at ``x``.

    Returns
    -------
    numpy.ndarray
        One value per expression.
    """
    return np.array([e.value(x) for e in exprs], dtype=np.float64)


def affexprs_to_matrix(exprs, n_vars):
    """Stack affine expressions into ``A @ x + b``.

    Parameters
    ----------
    exprs : sequence of AffExpr
        Rows of the affine map.
    n_vars : int
        Length of the flat variable vector.

    Returns
    -------
    A : scipy.sparse.csr_matrix
        Matrix of shape ``(len(exprs), n_vars)``. Repeated variables in
        one row are summed.
    b : numpy.ndarray
        Constants, shape ``(len(exprs),)``.
    """
    rows, cols, data = [], [], []
    for i, e in enumerate(exprs):
        rows.append(np.full(len(e.vars), i, dtype=np.int64))
        cols.append(e._indices)
        data.append(e.coeffs)
    b = np.array([e.constant for e in exprs], dtype=np.float64)
    if len(rows) == 0:
        return scipy.sparse.csr_matrix((0, n_vars)), b
    cols = np.concatenate(cols)
    _check_width(cols, n_vars)
    A = scipy.sparse.coo_matrix(
        (np.concatenate(data), (np.concatenate(rows), cols)),
        shape=(len(exprs), n_vars)).tocsr()
    return A, b


def quadexpr_to_matrices(expr, n_vars):
    """Convert a quadratic expression to ``0.5 x^T P x + q^T x + c``.

    Parameters
    ----------
    expr : QuadExpr or AffExpr
        Expression to convert.
    n_vars : int
        Length of the flat variable vector.

    Returns
    -------
    P : scipy.sparse.csr_matrix
        Symmetric matrix of shape ``(n_vars, n_vars)``.
    q : numpy.ndarray
        Linear coefficients, shape ``(n_vars,)``.
    c : float
        Constant term.
    """
    if isinstance(expr, AffExpr):
        expr = QuadExpr(expr)
    aff = expr.affexpr
    _check_width(aff._indices, n_vars)
    _check_width(expr._idx1, n_vars)
    _check_width(expr._idx2, n_vars)
    q = np.zeros(n_vars)
    np.add.at(q, aff._indices, aff.coeffs)
    # c * v1 * v2 contributes c to both P[v1, v2] and P[v2, v1].
    rows = np.concatenate([expr._idx1, expr._idx2])
    cols = np.concatenate([expr._idx2, expr._idx1])
    data = np.concatenate([expr.coeffs, expr.coeffs])
    P = scipy.sparse.coo_matrix(
        (data, (rows, cols)), shape=(n_vars, n_vars)).tocsr()
    return P, q, aff.constant


def _check_width(indices, n_vars):
    if len(indices) > 0 and indices.max() >= n_vars:
        raise ValueError(
            "expression references variable {} but only {} variables "
            "were requested".format(int(indices.max()), n_vars))


__all__ = [
    'AffExpr',
    'QuadExpr',
    'affexprs_to_matrix',
    'expr_square',
    'exprs_value',
    'quad_sum',
    'quadexpr_to_matrices',
]
