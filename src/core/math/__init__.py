"""
Core math modules для decimal-stats

Арифметика произвольной точности и статистические/финансовые формулы поверх неё.
"""

# Errors
from src.core.math.errors import (
    DecimalStatsError,
    DivisionByZeroError,
    DomainError,
    EmptyInputError,
    InsufficientDataError,
    InvalidOperandError,
    InvalidScaleError,
    LengthMismatchError,
)

# Decimal Arithmetic Primitives
from src.core.math.decimal_arithmetic import (
    GUARD_DIGITS,
    Numeric,
    # Scale
    resolve_scale,
    working_scale,
    # Operands
    is_numeric,
    normalize,
    to_decimal,
    # Primitives
    add,
    compare,
    div,
    mul,
    pow,
    sqrt,
    sub,
    # Collections
    count_numeric,
    keyed_items,
    sum_numeric,
)

# Statistics
from src.core.math.statistics import (
    avg,
    correl,
    correlation,
    covar,
    covariance,
    mean,
    median,
    sos,
    stddev,
    stdev,
    sumxy,
    variance,
)

# Financial
from src.core.math.financial import (
    npv,
    pct,
    pct_change,
    pct_change_array,
    pv,
    weighted_avg,
)

__all__ = [
    # Errors
    "DecimalStatsError",
    "DivisionByZeroError",
    "DomainError",
    "EmptyInputError",
    "InsufficientDataError",
    "InvalidOperandError",
    "InvalidScaleError",
    "LengthMismatchError",
    # Decimal Arithmetic — Constants & Types
    "GUARD_DIGITS",
    "Numeric",
    # Decimal Arithmetic — Scale
    "resolve_scale",
    "working_scale",
    # Decimal Arithmetic — Operands
    "is_numeric",
    "normalize",
    "to_decimal",
    # Decimal Arithmetic — Primitives
    "add",
    "compare",
    "div",
    "mul",
    "pow",
    "sqrt",
    "sub",
    # Decimal Arithmetic — Collections
    "count_numeric",
    "keyed_items",
    "sum_numeric",
    # Statistics
    "mean",
    "median",
    "sumxy",
    "sos",
    "variance",
    "stddev",
    "covariance",
    "correlation",
    # Statistics — Aliases
    "avg",
    "covar",
    "stdev",
    "correl",
    # Financial
    "pv",
    "npv",
    "weighted_avg",
    "pct",
    "pct_change",
    "pct_change_array",
]
