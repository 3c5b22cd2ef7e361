# SymKernel - Exceptions
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Exception hierarchy for SymKernel.

Total operations (simplify, substitute) never raise; undefined mathematical
forms become the ``Undefined`` expression leaf instead. The errors below are
raised by algebraic routines whose callers need to branch (polynomial kernel,
matrix algebra, solvers). Every error carries a ``kind`` tag so it can be
handled as a tagged value.
"""

from __future__ import annotations
from typing import Any, Optional, Sequence


class SymKernelError(Exception):
    """Base class for all SymKernel exceptions."""

    kind = 'error'


class NotAPolynomial(SymKernelError):
    """Raised when an expression cannot be read as a polynomial in the given variables."""

    kind = 'not_a_polynomial'

    def __init__(
        self,
        expression: Any,
        variables: Sequence[Any] = (),
        reason: Optional[str] = None,
    ):
        names = ', '.join(str(v) for v in variables)
        message = f"{expression!r} is not a polynomial in ({names})"
        if reason:
            message += f": {reason}"
        suggestion = _suggestion_for_reason(reason)
        if suggestion:
            message += f"\n  Suggestion: {suggestion}"
        super().__init__(message)
        self.expression = expression
        self.variables = tuple(variables)
        self.reason = reason


class DivisionByZero(SymKernelError):
    """Raised when an exact division has a zero divisor."""

    kind = 'division_by_zero'

    def __init__(self, operation: str = 'division'):
        super().__init__(f"Division by zero in {operation}")
        self.operation = operation


class SingularMatrix(SymKernelError):
    """Raised when a matrix that must be invertible is singular."""

    kind = 'singular_matrix'

    def __init__(self, operation: str = 'inverse'):
        super().__init__(f"Matrix is singular ({operation})")
        self.operation = operation


class DomainError(SymKernelError):
    """Raised when a value lies outside the domain of an operation."""

    kind = 'domain_error'

    def __init__(self, operation: str, value: Any, reason: str):
        super().__init__(f"{operation}({value!r}): {reason}")
        self.operation = operation
        self.value = value
        self.reason = reason


class ConvergenceFailed(SymKernelError):
    """Raised (or reported) when an iterative algorithm does not converge."""

    kind = 'convergence_failed'

    def __init__(self, reason: str):
        super().__init__(f"Convergence failed: {reason}")
        self.reason = reason


class MaxIterationsExceeded(SymKernelError):
    """Raised when an algorithm reaches its configured iteration bound."""

    kind = 'max_iterations_exceeded'

    def __init__(self, operation: str, limit: int):
        super().__init__(
            f"{operation} exceeded the maximum of {limit} iterations"
            f"\n  Suggestion: raise Config.max_iterations or simplify the input."
        )
        self.operation = operation
        self.limit = limit


class DimensionMismatch(SymKernelError):
    """Raised when matrix or vector shapes are incompatible."""

    kind = 'dimension_mismatch'

    def __init__(self, operation: str, expected: Any, actual: Any):
        super().__init__(f"{operation}: expected dimensions {expected}, got {actual}")
        self.operation = operation
        self.expected = expected
        self.actual = actual


class VariableCountError(SymKernelError):
    """Raised when an operation receives the wrong number of variables."""

    kind = 'variable_count'

    def __init__(self, operation: str, expected: Any, actual: int):
        super().__init__(f"{operation}: expected {expected} variable(s), got {actual}")
        self.operation = operation
        self.expected = expected
        self.actual = actual


def _suggestion_for_reason(reason: Optional[str]) -> Optional[str]:
    """Get a helpful suggestion for a polynomial conversion failure."""
    if not reason:
        return None
    suggestions = {
        'negative exponent': "Multiply through by the denominator, or use cancel()/together() first.",
        'fractional exponent': "Substitute a new variable for the radical before converting.",
        'transcendental': "Only +, *, and non-negative integer powers of the variables are polynomial.",
        'symbolic coefficient': "Add the parameter symbols to the variable list.",
        'symbolic exponent': "Exponents must be literal non-negative integers.",
    }
    for key, text in suggestions.items():
        if key in reason:
            return text
    return None
