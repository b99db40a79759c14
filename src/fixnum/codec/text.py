"""
Decimal Text Codec — format/parse для scaled integer

Преобразование между bits (value × 10^precision) и десятичной строкой.

Каноническая форма (format):
    ["-"] digit+ "." digit{1,precision}
    - целая часть без ведущих нулей (кроме одиночного "0")
    - дробная часть без хвостовых нулей, но минимум одна цифра

Принимаемая форма (parse) — надмножество канонической:
    [+-]? digit* ("." digit+)?
    - пустая целая часть перед точкой означает 0 (".5")
    - отсутствующая дробная часть означает 0 ("42")
    - дробная часть короче precision дополняется нулями справа

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. format тотален и никогда не падает
2. parse никогда не округляет: лишние дробные цифры → PrecisionOverflow
3. parse(format(x)) == x для всех представимых x
4. Стоимость parse ограничена числом цифр layout (~40 для 128 бит)
"""

from typing import Final

from src.fixnum.domain.errors import IntegerOverflow, InvalidFormat, PrecisionOverflow
from src.fixnum.domain.layout import Layout

# ASCII-цифры; str.isdigit() принимает также не-ASCII цифры Unicode
DIGITS: Final[frozenset[str]] = frozenset("0123456789")

SIGNS: Final[frozenset[str]] = frozenset("+-")

DECIMAL_POINT: Final[str] = "."


# =============================================================================
# FORMAT
# =============================================================================


def format_bits(bits: int, precision: int) -> str:
    """
    Каноническая десятичная строка для bits.

    Args:
        bits: Backing integer (value × 10^precision)
        precision: Число дробных цифр (>= 1)

    Returns:
        Каноническая DecimalString

    Examples:
        >>> format_bits(0, 9)
        '0.0'
        >>> format_bits(10_042_000_000, 9)
        '10.042'
        >>> format_bits(-1, 9)
        '-0.000000001'
    """
    sign = "-" if bits < 0 else ""
    integer_part, fraction = divmod(abs(bits), 10**precision)
    fraction_digits = f"{fraction:0{precision}d}".rstrip("0") or "0"
    return f"{sign}{integer_part}{DECIMAL_POINT}{fraction_digits}"


# =============================================================================
# PARSE
# =============================================================================


def _is_digit_run(run: str) -> bool:
    return all(char in DIGITS for char in run)


def split_decimal(text: str) -> tuple[bool, str, str]:
    """
    Синтаксический разбор десятичной строки без учёта precision.

    Args:
        text: Входная строка

    Returns:
        (negative, integer_digits, fraction_digits)

    Raises:
        InvalidFormat: если строка не соответствует грамматике
    """
    if not isinstance(text, str):
        raise InvalidFormat(text, f"expected str, got {type(text).__name__}")
    if not text:
        raise InvalidFormat(text, "empty input")

    body = text
    negative = False
    if body[0] in SIGNS:
        negative = body[0] == "-"
        body = body[1:]

    integer_digits, point, fraction_digits = body.partition(DECIMAL_POINT)

    if point and not fraction_digits:
        raise InvalidFormat(text, "missing digits after decimal point")
    if not integer_digits and not fraction_digits:
        raise InvalidFormat(text, "no digits")
    if not _is_digit_run(integer_digits):
        raise InvalidFormat(text, "unexpected character in integer part")
    if not _is_digit_run(fraction_digits):
        raise InvalidFormat(text, "unexpected character in fractional part")

    return negative, integer_digits, fraction_digits


def parse_bits(text: str, layout: Layout, precision: int) -> int:
    """
    Разбор десятичной строки в bits.

    Алгоритм:
        1. Синтаксический разбор (split_decimal)
        2. len(fraction) > precision → PrecisionOverflow
        3. fraction дополняется нулями до precision
        4. magnitude = int(integer + fraction), знак по "-"
        5. Проверка диапазона layout → IntegerOverflow

    Args:
        text: Десятичная строка
        layout: Backing integer
        precision: Число дробных цифр

    Returns:
        bits = value × 10^precision

    Raises:
        InvalidFormat: строка вне грамматики
        PrecisionOverflow: дробных цифр больше precision
        IntegerOverflow: значение вне диапазона layout

    Examples:
        >>> parse_bits("10.042", Layout.I64, 9)
        10042000000
        >>> parse_bits(".5", Layout.I64, 9)
        500000000
    """
    negative, integer_digits, fraction_digits = split_decimal(text)

    if len(fraction_digits) > precision:
        raise PrecisionOverflow(text, precision, len(fraction_digits))

    # Длина значащих цифр ограничивает стоимость int() до проверки диапазона
    significant = integer_digits.lstrip("0")
    if len(significant) + precision > layout.max_digits:
        raise IntegerOverflow(text, layout.value, "too many integer digits")

    magnitude = int(integer_digits + fraction_digits.ljust(precision, "0"))
    bits = -magnitude if negative else magnitude
    return layout.check(bits)
