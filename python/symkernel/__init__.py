# SymKernel
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
SymKernel - a symbolic computer-algebra core.

Expressions are immutable trees with structural equality. The simplifier
brings them to a canonical form, so two expressions are mathematically
equal (within the rules it knows) exactly when their simplified forms are
equal. On top of that sit exact polynomial algorithms (modular GCD,
resultants, Groebner bases, factorization, partial fractions), symbolic
differentiation and integration, equation solving and matrix operations.

Example:
    >>> import symkernel as sk
    >>> x = sk.symbol('x')
    >>> sk.simplify(2*x + 3*x + x)
    6*x
    >>> sk.derivative(x**2 + 3*x + 1, x)
    (3 + 2*x)
    >>> sk.integrate(sk.sin(x), x)
    -cos(x)

Key Features:
    - Exact rationals and arbitrary-size integers, floats only when asked
    - Typed symbols: matrix and operator symbols do not commute
    - Total simplification: undefined forms become ``undefined``, never raise
    - Algebraic routines raise tagged ``SymKernelError`` subclasses
"""

import logging

__version__ = "0.1.0"

# Numbers and symbols
from .number import Number
from .symbol import Symbol, SymbolType

# Expression types and constructors
from .expr import (
    Expr,
    Const,
    Variable,
    MathConstant,
    ConstantKind,
    Undefined,
    Boolean,
    Add,
    Mul,
    Pow,
    Function,
    Matrix,
    MatrixStorage,
    Complex,
    FiniteSet,
    Interval,
    Piecewise,
    Relation,
    RelationKind,
    Derivative,
    Integral,
    DefiniteIntegral,
    Limit,
    Sum,
    Product,
    number,
    integer,
    rational,
    float_,
    symbol,
    symbols,
    matrix_symbol,
    operator_symbol,
    quaternion_symbol,
    add,
    mul,
    pow_,
    neg,
    sub,
    div,
    function,
    matrix,
    sparse_matrix,
    symmetric_matrix,
    diagonal_matrix,
    identity_matrix,
    complex_,
    finite_set,
    interval,
    piecewise,
    relation,
    eq,
    derivative_of,
    integral_of,
    definite_integral_of,
    limit_of,
    sum_of,
    product_of,
    pi,
    E,
    I,
    oo,
    neg_oo,
    undefined,
    sin,
    cos,
    tan,
    cot,
    sec,
    csc,
    asin,
    acos,
    atan,
    sinh,
    cosh,
    tanh,
    exp,
    ln,
    log,
    sqrt,
    abs_,
    sign,
    gamma,
    factorial,
    erf,
)

# Configuration
from .config import Config, GcdConfig, IntegrationConfig, MonomialOrder

# Function registry
from .functions import FunctionProperties, Parity, REGISTRY, get_properties, register_function

# Simplification
from .simplify import simplify
from .expand import expand
from .cache import clear_cache, cache_info

# Substitution and evaluation
from .substitution import substitute, replace, evaluate, evalf, EvalContext

# Polynomials
from .poly import coefficients, degree, leading_coefficient, polynomial_div
from .gcd import polynomial_gcd, polynomial_lcm, content, primitive_part
from .resultant import polynomial_resultant, discriminant
from .groebner import groebner_basis, groebner_reduce
from .factor import factor, factor_polynomial
from .ratfunc import cancel, together, numer_denom
from .partial_fractions import PartialTerm, apart_terms, partial_fraction

# Calculus
from .derivative import (
    derivative,
    partial_derivative,
    gradient,
    jacobian,
    hessian,
    leibniz_derivative,
    faa_di_bruno,
)
from .integrate import integrate, definite_integral
from .pde import LaplaceSolution, solve_laplace_2d

# Solving and matrices
from .solve import solve, solve_linear_system
from .matrices import (
    matrix_add,
    matrix_sub,
    matrix_mul,
    scalar_mul,
    transpose,
    trace,
    determinant,
    inverse,
    commutator,
    to_dense,
    to_numpy,
)

# Exceptions
from .exceptions import (
    SymKernelError,
    NotAPolynomial,
    DivisionByZero,
    SingularMatrix,
    DomainError,
    ConvergenceFailed,
    MaxIterationsExceeded,
    DimensionMismatch,
    VariableCountError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Numbers and symbols
    "Number",
    "Symbol",
    "SymbolType",
    # Expression types
    "Expr",
    "Const",
    "Variable",
    "MathConstant",
    "ConstantKind",
    "Undefined",
    "Boolean",
    "Add",
    "Mul",
    "Pow",
    "Function",
    "Matrix",
    "MatrixStorage",
    "Complex",
    "FiniteSet",
    "Interval",
    "Piecewise",
    "Relation",
    "RelationKind",
    "Derivative",
    "Integral",
    "DefiniteIntegral",
    "Limit",
    "Sum",
    "Product",
    # Constructors
    "number",
    "integer",
    "rational",
    "float_",
    "symbol",
    "symbols",
    "matrix_symbol",
    "operator_symbol",
    "quaternion_symbol",
    "add",
    "mul",
    "pow_",
    "neg",
    "sub",
    "div",
    "function",
    "matrix",
    "sparse_matrix",
    "symmetric_matrix",
    "diagonal_matrix",
    "identity_matrix",
    "complex_",
    "finite_set",
    "interval",
    "piecewise",
    "relation",
    "eq",
    "derivative_of",
    "integral_of",
    "definite_integral_of",
    "limit_of",
    "sum_of",
    "product_of",
    # Constants
    "pi",
    "E",
    "I",
    "oo",
    "neg_oo",
    "undefined",
    # Functions
    "sin",
    "cos",
    "tan",
    "cot",
    "sec",
    "csc",
    "asin",
    "acos",
    "atan",
    "sinh",
    "cosh",
    "tanh",
    "exp",
    "ln",
    "log",
    "sqrt",
    "abs_",
    "sign",
    "gamma",
    "factorial",
    "erf",
    # Configuration
    "Config",
    "GcdConfig",
    "IntegrationConfig",
    "MonomialOrder",
    # Function registry
    "FunctionProperties",
    "Parity",
    "REGISTRY",
    "get_properties",
    "register_function",
    # Simplification
    "simplify",
    "expand",
    "clear_cache",
    "cache_info",
    # Substitution and evaluation
    "substitute",
    "replace",
    "evaluate",
    "evalf",
    "EvalContext",
    # Polynomials
    "coefficients",
    "degree",
    "leading_coefficient",
    "polynomial_div",
    "polynomial_gcd",
    "polynomial_lcm",
    "content",
    "primitive_part",
    "polynomial_resultant",
    "discriminant",
    "groebner_basis",
    "groebner_reduce",
    "factor",
    "factor_polynomial",
    "cancel",
    "together",
    "numer_denom",
    "PartialTerm",
    "apart_terms",
    "partial_fraction",
    # Calculus
    "derivative",
    "partial_derivative",
    "gradient",
    "jacobian",
    "hessian",
    "leibniz_derivative",
    "faa_di_bruno",
    "integrate",
    "definite_integral",
    "LaplaceSolution",
    "solve_laplace_2d",
    # Solving and matrices
    "solve",
    "solve_linear_system",
    "matrix_add",
    "matrix_sub",
    "matrix_mul",
    "scalar_mul",
    "transpose",
    "trace",
    "determinant",
    "inverse",
    "commutator",
    "to_dense",
    "to_numpy",
    # Exceptions
    "SymKernelError",
    "NotAPolynomial",
    "DivisionByZero",
    "SingularMatrix",
    "DomainError",
    "ConvergenceFailed",
    "MaxIterationsExceeded",
    "DimensionMismatch",
    "VariableCountError",
]
