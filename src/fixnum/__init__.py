"""
fixnum — десятичные числа фиксированной точности

Точное финансовое представление value × 10^precision в целом фиксированной
ширины, с каноническим текстовым кодеком и wire-адаптерами.

Порядок импорта важен: domain загружается до codec.
"""

# Domain
from src.fixnum.domain import (
    AbsentValueRejected,
    FixedPoint,
    FixedPointError,
    FixedPointNewType,
    Fp64,
    Fp128,
    IntegerOverflow,
    InvalidFormat,
    Layout,
    PrecisionOverflow,
    UnsupportedToken,
    fixed_point_type,
)

# Codecs
from src.fixnum.codec import (
    DecoderConfig,
    FlexibleDecoder,
    decode,
    encode,
    format_bits,
    parse_bits,
)

# Named Representation Adapters
from src.fixnum.codec.adapters import (
    ADAPTERS,
    FLOAT,
    FLOAT_OPTION,
    REPR,
    REPR_OPTION,
    STR,
    STR_OPTION,
    Adapter,
    get_adapter,
)

__all__ = [
    # Domain — Errors
    "FixedPointError",
    "InvalidFormat",
    "PrecisionOverflow",
    "IntegerOverflow",
    "UnsupportedToken",
    "AbsentValueRejected",
    # Domain — Types
    "Layout",
    "FixedPoint",
    "FixedPointNewType",
    "Fp64",
    "Fp128",
    "fixed_point_type",
    # Codecs
    "format_bits",
    "parse_bits",
    "DecoderConfig",
    "FlexibleDecoder",
    "decode",
    "encode",
    # Adapters
    "Adapter",
    "ADAPTERS",
    "REPR",
    "STR",
    "FLOAT",
    "REPR_OPTION",
    "STR_OPTION",
    "FLOAT_OPTION",
    "get_adapter",
]
