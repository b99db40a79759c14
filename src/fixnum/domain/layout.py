"""
Layout — Backing integer для FixedPoint

Scaled integer representation: FixedPoint хранит bits = value × 10^precision
в целом фиксированной ширины. Layout задаёт ширину и знаковость этого целого
и является единственным местом, где проверяется диапазон.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Значение вне [min_value, max_value] никогда не усекается и не
   заворачивается — только IntegerOverflow
2. Знаковые layouts используют two's complement, беззнаковые — натуральное
   двоичное представление
"""

from enum import Enum

from src.fixnum.domain.errors import IntegerOverflow


class Layout(str, Enum):
    """Ширина и знаковость backing integer."""

    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"

    @property
    def bits(self) -> int:
        return int(self.value[1:])

    @property
    def signed(self) -> bool:
        return self.value.startswith("i")

    @property
    def byte_size(self) -> int:
        return self.bits // 8

    @property
    def min_value(self) -> int:
        if self.signed:
            return -(1 << (self.bits - 1))
        return 0

    @property
    def max_value(self) -> int:
        if self.signed:
            return (1 << (self.bits - 1)) - 1
        return (1 << self.bits) - 1

    @property
    def max_digits(self) -> int:
        """Число десятичных цифр наибольшего по модулю значения."""
        return len(str(max(self.max_value, -self.min_value)))

    @property
    def max_precision(self) -> int:
        """
        Наибольший precision, при котором 10^precision помещается в layout.

        Examples:
            >>> Layout.I64.max_precision
            18
            >>> Layout.U64.max_precision
            19
        """
        return len(str(self.max_value)) - 1

    def contains(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value

    def check(self, value: int) -> int:
        """
        Проверка диапазона.

        Args:
            value: Целое (обычно bits)

        Returns:
            value без изменений

        Raises:
            IntegerOverflow: если value вне [min_value, max_value]
        """
        if value > self.max_value:
            raise IntegerOverflow(value, self.value, f"above maximum {self.max_value}")
        if value < self.min_value:
            raise IntegerOverflow(value, self.value, f"below minimum {self.min_value}")
        return value
