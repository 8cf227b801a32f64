"""Exceptions raised while building and evaluating trajectory terms.

Construction-time problems derive from :class:`FormulationError`; a term
that failed to construct must never be registered with a problem.
Evaluation-time problems mean the calling solver loop passed a candidate
vector that does not fit the variables, and are raised as
:class:`CandidateDimensionError`.
"""


class FormulationError(ValueError):
    """Base class for invalid term configuration."""


class DimensionMismatchError(FormulationError):
    """A per-joint vector or the trajectory grid has the wrong shape."""


class InvalidRangeError(FormulationError):
    """A step range lies outside the trajectory or is too short.

    Attributes
    ----------
    first_step : int
        Requested first step.
    last_step : int
        Requested last step.
    """

    def __init__(self, message, first_step=None, last_step=None):
        super(InvalidRangeError, self).__init__(message)
        self.first_step = first_step
        self.last_step = last_step


class CandidateDimensionError(ValueError):
    """A candidate solution vector cannot be indexed by a term."""


__all__ = [
    'CandidateDimensionError',
    'DimensionMismatchError',
    'FormulationError',
    'InvalidRangeError',
]
