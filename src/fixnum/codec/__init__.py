"""
Codec modules для fixnum

Decimal Text Codec и Flexible Numeric Decoder. Named Representation
Adapters импортируются из src.fixnum.codec.adapters.
"""

# Decimal Text Codec
from src.fixnum.codec.text import (
    DECIMAL_POINT,
    format_bits,
    parse_bits,
    split_decimal,
)

# Flexible Numeric Decoder
from src.fixnum.codec.flexible import (
    DEFAULT_DECODER,
    DEFAULT_DECODER_CONFIG,
    STRICT_DECODER_CONFIG,
    DecoderConfig,
    FlexibleDecoder,
    decode,
    encode,
    shortest_decimal_string,
)

__all__ = [
    # Decimal Text Codec
    "DECIMAL_POINT",
    "format_bits",
    "parse_bits",
    "split_decimal",
    # Flexible Numeric Decoder — Config
    "DEFAULT_DECODER_CONFIG",
    "STRICT_DECODER_CONFIG",
    "DecoderConfig",
    # Flexible Numeric Decoder — Decoder
    "DEFAULT_DECODER",
    "FlexibleDecoder",
    "decode",
    "encode",
    "shortest_decimal_string",
]
