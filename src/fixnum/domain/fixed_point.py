"""
FixedPoint — Десятичное число фиксированной точности

Семейство immutable value-типов, параметризованных (layout, precision):
- layout: ширина и знаковость backing integer (Layout)
- precision: фиксированное число дробных десятичных цифр
- bits: backing integer, равный value × 10^precision

Конкретные типы создаются фабрикой fixed_point_type(layout, precision)
(кэшируется: одна пара → один класс) или объявляются номинально:

    class Price(FixedPoint, layout=Layout.I64, precision=9):
        pass

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. bits однозначно определяет значение, потерь точности нет
2. Равенство — структурное равенство bits в пределах одного типа;
   значения разных типов никогда не равны (нет неявного расширения)
3. bits вне диапазона layout → IntegerOverflow, никогда усечение/wrap
4. Экземпляры frozen — мутация невозможна

Пути создания:
    T.of("10.042") / T.of(42)   — десятичный литерал
    T.parse(text)               — разбор строки
    T.from_int(n)               — целое число
    T.from_float(x)             — double (с потерями, округление half-even)
    T.from_decimal(d)           — decimal.Decimal (точно)
    T.from_bits(n) / T(n)       — raw bits
    T.from_bytes(data)          — raw bytes (two's complement)
"""

import logging
import types
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from functools import lru_cache
from typing import Any, ClassVar, Final, Literal

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from src.fixnum.codec.flexible import decode as flexible_decode
from src.fixnum.codec.flexible import shortest_decimal_string
from src.fixnum.codec.text import format_bits, parse_bits
from src.fixnum.contracts.validators import wire_schema
from src.fixnum.domain.errors import IntegerOverflow, InvalidFormat, PrecisionOverflow
from src.fixnum.domain.layout import Layout

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Точность контекста decimal: с запасом больше max_digits самого широкого layout
DECIMAL_CONTEXT_PRECISION: Final[int] = 100

# Округление единственного lossy-пути (from_float)
FLOAT_ROUNDING: Final[str] = ROUND_HALF_EVEN

ByteOrder = Literal["big", "little"]


# =============================================================================
# FIXED POINT
# =============================================================================


@dataclass(frozen=True, repr=False)
class FixedPoint:
    """
    Абстрактная база семейства FixedPoint.

    Не инстанцируется напрямую: layout и precision задаются подклассом.
    """

    bits: int

    layout: ClassVar[Layout]
    precision: ClassVar[int]
    scale: ClassVar[int]

    def __init_subclass__(
        cls,
        layout: Layout | str | None = None,
        precision: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)

        if layout is None and precision is None:
            # Наследуем параметры родителя (подкласс конкретного типа)
            return
        if layout is None or precision is None:
            raise TypeError(f"{cls.__name__}: both layout and precision are required")

        layout = Layout(layout)
        if isinstance(precision, bool) or not isinstance(precision, int):
            raise TypeError(f"{cls.__name__}: precision must be int, got {precision!r}")
        if not 1 <= precision <= layout.max_precision:
            raise ValueError(
                f"{cls.__name__}: precision must be in [1, {layout.max_precision}] "
                f"for {layout.value}, got {precision}"
            )

        cls.layout = layout
        cls.precision = precision
        cls.scale = 10**precision

    def __post_init__(self) -> None:
        cls = type(self)
        if not hasattr(cls, "precision"):
            raise TypeError(
                f"{cls.__name__} has no layout/precision, use fixed_point_type() "
                f"or subclass with layout= and precision="
            )
        if isinstance(self.bits, bool) or not isinstance(self.bits, int):
            raise TypeError(f"bits must be int, got {type(self.bits).__name__}")
        cls.layout.check(self.bits)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_bits(cls, bits: int) -> "FixedPoint":
        """Значение из raw bits (value × 10^precision)."""
        return cls(bits)

    @classmethod
    def parse(cls, text: str) -> "FixedPoint":
        """
        Разбор десятичной строки.

        Raises:
            InvalidFormat: строка вне грамматики
            PrecisionOverflow: дробных цифр больше precision
            IntegerOverflow: значение вне диапазона layout
        """
        return cls(parse_bits(text, cls.layout, cls.precision))

    @classmethod
    def from_int(cls, value: int) -> "FixedPoint":
        """Точное целое значение (без дробной части)."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected int, got {type(value).__name__}")
        return cls(cls.layout.check(value * cls.scale))

    @classmethod
    def of(cls, literal: str | int) -> "FixedPoint":
        """
        Десятичный литерал: строка или целое.

        Float не принимается — для него есть явный lossy from_float.

        Examples:
            >>> str(Fp64.of("10.042"))
            '10.042'
            >>> str(Fp64.of(42))
            '42.0'
        """
        if isinstance(literal, str):
            return cls.parse(literal)
        if isinstance(literal, int) and not isinstance(literal, bool):
            return cls.from_int(literal)
        raise TypeError(
            f"decimal literal must be str or int, got {type(literal).__name__}"
        )

    @classmethod
    def from_decimal(cls, value: Decimal) -> "FixedPoint":
        """
        Точное преобразование decimal.Decimal.

        Политика та же, что у parse: дробных цифр (включая хвостовые нули)
        не больше precision, Decimal("1.0000000000") для precision 9
        отклоняется. Вычисление целочисленное и не зависит от контекста
        decimal.

        Raises:
            InvalidFormat: NaN/Infinity
            PrecisionOverflow: дробных цифр больше precision
            IntegerOverflow: значение вне диапазона layout
        """
        if not value.is_finite():
            raise InvalidFormat(str(value), "non-finite decimal")

        sign, digits, exponent = value.as_tuple()
        if -exponent > cls.precision:
            raise PrecisionOverflow(str(value), cls.precision, -exponent)
        if not value:
            return cls(0)
        cls._check_magnitude(value)

        magnitude = int("".join(map(str, digits))) * 10 ** (exponent + cls.precision)
        return cls(cls.layout.check(-magnitude if sign else magnitude))

    @classmethod
    def from_float(cls, value: float) -> "FixedPoint":
        """
        Преобразование double с потерями.

        Берётся кратчайшая десятичная строка, round-trip'ящаяся в value,
        и округляется до precision (half-even). Точен для десятичных
        литералов до ~15 значащих цифр.

        Raises:
            InvalidFormat: NaN/Inf
            IntegerOverflow: значение вне диапазона layout
        """
        exact = Decimal(shortest_decimal_string(value))
        cls._check_magnitude(exact)
        with localcontext() as ctx:
            ctx.prec = DECIMAL_CONTEXT_PRECISION
            rounded = exact.quantize(Decimal(1).scaleb(-cls.precision), rounding=FLOAT_ROUNDING)
        return cls.from_decimal(rounded)

    @classmethod
    def _check_magnitude(cls, value: Decimal) -> None:
        # Порядок числа ограничивает размер int() до проверки диапазона
        if value and value.adjusted() + 1 + cls.precision > cls.layout.max_digits:
            raise IntegerOverflow(value, cls.layout.value, "too many integer digits")

    @classmethod
    def from_bytes(cls, data: bytes, byteorder: ByteOrder = "big") -> "FixedPoint":
        """Значение из raw bytes фиксированной ширины layout."""
        if len(data) != cls.layout.byte_size:
            raise ValueError(
                f"{cls.layout.value} requires {cls.layout.byte_size} bytes, got {len(data)}"
            )
        return cls(int.from_bytes(data, byteorder, signed=cls.layout.signed))

    # -------------------------------------------------------------------------
    # Constants
    # -------------------------------------------------------------------------

    @classmethod
    def zero(cls) -> "FixedPoint":
        return cls(0)

    @classmethod
    def one(cls) -> "FixedPoint":
        return cls(cls.scale)

    @classmethod
    def epsilon(cls) -> "FixedPoint":
        """Наименьший положительный шаг: 10^-precision."""
        return cls(1)

    @classmethod
    def min_value(cls) -> "FixedPoint":
        return cls(cls.layout.min_value)

    @classmethod
    def max_value(cls) -> "FixedPoint":
        return cls(cls.layout.max_value)

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def into_bits(self) -> int:
        return self.bits

    def to_bytes(self, byteorder: ByteOrder = "big") -> bytes:
        layout = type(self).layout
        return self.bits.to_bytes(layout.byte_size, byteorder, signed=layout.signed)

    def to_decimal(self) -> Decimal:
        return Decimal(str(self))

    def to_float(self) -> float:
        # int / int в Python корректно округляется до ближайшего double
        return self.bits / type(self).scale

    def __float__(self) -> float:
        return self.to_float()

    def __str__(self) -> str:
        return format_bits(self.bits, type(self).precision)

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self}')"

    # -------------------------------------------------------------------------
    # Pydantic
    # -------------------------------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        Поле без адаптера: Flexible Numeric Decoder на входе,
        каноническая строка в JSON на выходе.
        """
        return core_schema.no_info_plain_validator_function(
            lambda token: flexible_decode(cls, token),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, info_arg=False, when_used="json"
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, _core_schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return wire_schema(cls, "flexible", embedded=True)


# =============================================================================
# TYPE FACTORY
# =============================================================================


def fixed_point_type(layout: Layout | str, precision: int) -> type[FixedPoint]:
    """
    Конкретный тип FixedPoint для пары (layout, precision).

    Одна и та же пара всегда возвращает один и тот же класс, поэтому
    значения из разных вызовов фабрики сравнимы между собой.

    Args:
        layout: Layout или его строковое имя ("i64")
        precision: Число дробных цифр, 1..layout.max_precision

    Returns:
        Подкласс FixedPoint

    Examples:
        >>> fixed_point_type(Layout.I64, 9).__name__
        'FixedPointI64P9'
    """
    # Ключ кэша — Layout, а не строка: "i64" и Layout.I64 дают один класс
    return _cached_fixed_point_type(Layout(layout), precision)


@lru_cache(maxsize=None)
def _cached_fixed_point_type(layout: Layout, precision: int) -> type[FixedPoint]:
    name = f"FixedPoint{layout.name}P{precision}"
    fp_type = types.new_class(
        name,
        (FixedPoint,),
        {"layout": layout, "precision": precision},
        lambda ns: ns.update({"__module__": __name__}),
    )
    logger.debug("Created fixed point type %s", name)
    return fp_type


Fp64 = fixed_point_type(Layout.I64, 9)
Fp128 = fixed_point_type(Layout.I128, 18)


# =============================================================================
# NEWTYPE WRAPPERS
# =============================================================================


@dataclass(frozen=True, repr=False)
class FixedPointNewType:
    """
    База для тривиальных обёрток над одним FixedPoint.

        class Amount(FixedPointNewType, inner=Fp64):
            pass

    Обёртки принимаются адаптерами и кодеком по умолчанию наравне с
    внутренним типом и дают побайтно тот же wire output.
    """

    value: FixedPoint

    inner: ClassVar[type[FixedPoint]]

    def __init_subclass__(cls, inner: type[FixedPoint] | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if inner is None:
            return
        if not (isinstance(inner, type) and issubclass(inner, FixedPoint)):
            raise TypeError(f"{cls.__name__}: inner must be a FixedPoint type, got {inner!r}")
        if not hasattr(inner, "precision"):
            raise TypeError(f"{cls.__name__}: inner type {inner.__name__} is abstract")
        cls.inner = inner

    def __post_init__(self) -> None:
        cls = type(self)
        if not hasattr(cls, "inner"):
            raise TypeError(f"{cls.__name__} has no inner type, subclass with inner=")
        if type(self.value) is not cls.inner:
            raise TypeError(
                f"{cls.__name__} wraps {cls.inner.__name__}, got {type(self.value).__name__}"
            )

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        def validate(token: Any) -> "FixedPointNewType":
            if isinstance(token, cls):
                return token
            return cls(flexible_decode(cls.inner, token))

        return core_schema.no_info_plain_validator_function(
            validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, info_arg=False, when_used="json"
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, _core_schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return wire_schema(cls.inner, "flexible", embedded=True)
