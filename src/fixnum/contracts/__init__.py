"""
Contract Validation Module

JSON Schema контракты wire-форм адаптеров FixedPoint.
"""

from .validators import (
    SchemaLoader,
    WireContractValidator,
    validate_wire_value,
    wire_schema,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "WireContractValidator",
    # Functions
    "validate_wire_value",
    "wire_schema",
]
