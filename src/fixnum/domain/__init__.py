"""
Domain models and value objects.

Contains the FixedPoint value type family, its backing integer layouts,
newtype wrappers and the typed errors of every fixnum operation.
"""

from src.fixnum.domain.errors import (
    AbsentValueRejected,
    FixedPointError,
    IntegerOverflow,
    InvalidFormat,
    PrecisionOverflow,
    UnsupportedToken,
)
from src.fixnum.domain.layout import Layout
from src.fixnum.domain.fixed_point import (
    DECIMAL_CONTEXT_PRECISION,
    FLOAT_ROUNDING,
    FixedPoint,
    FixedPointNewType,
    Fp64,
    Fp128,
    fixed_point_type,
)

__all__ = [
    # Errors
    "FixedPointError",
    "InvalidFormat",
    "PrecisionOverflow",
    "IntegerOverflow",
    "UnsupportedToken",
    "AbsentValueRejected",
    # Layout
    "Layout",
    # FixedPoint
    "DECIMAL_CONTEXT_PRECISION",
    "FLOAT_ROUNDING",
    "FixedPoint",
    "FixedPointNewType",
    "Fp64",
    "Fp128",
    "fixed_point_type",
]
