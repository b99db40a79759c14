"""
Ошибки fixnum — типизированные отказы кодеков

Каждая ошибка описывает дефект входных данных вызывающего кода, а не
временный сбой: ошибки не перехватываются и не повторяются внутри библиотеки.

Все ошибки наследуют ValueError, поэтому pydantic превращает их
в ValidationError при валидации моделей.

Иерархия:
- FixedPointError
  - InvalidFormat        : текст не соответствует грамматике
  - PrecisionOverflow    : дробных цифр больше, чем precision
  - IntegerOverflow      : значение вне диапазона backing integer
  - UnsupportedToken     : форма токена не поддерживается
  - AbsentValueRejected  : None через не-option адаптер
"""

from typing import Any, Callable, Dict, Final, Optional

# Целые длиннее этого числа бит не выводятся целиком
# (int → str ограничен sys.get_int_max_str_digits)
MAX_RENDERED_BITS: Final[int] = 1024


def describe_value(value: Any, render: Callable[[Any], str] = str) -> str:
    """
    Текстовое представление значения для сообщений об ошибках.

    Огромные целые заменяются описанием их ширины.

    Examples:
        >>> describe_value(10**5000)
        '<16610-bit int>'
    """
    if isinstance(value, int) and not isinstance(value, bool):
        bit_length = value.bit_length()
        if bit_length > MAX_RENDERED_BITS:
            sign = "-" if value < 0 else ""
            return f"<{sign}{bit_length}-bit int>"
    return render(value)


# =============================================================================
# BASE
# =============================================================================


class FixedPointError(ValueError):
    """Базовая ошибка всех операций fixnum."""

    error_code: str = "FIXED_POINT_ERROR"

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.detail = detail or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "detail": self.detail,
        }


# =============================================================================
# TEXT CODEC
# =============================================================================


class InvalidFormat(FixedPointError):
    """Текст не соответствует грамматике десятичного числа."""

    error_code = "INVALID_FORMAT"

    def __init__(self, text: Any, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(
            message=f"Invalid decimal {describe_value(text, repr)}: {reason}",
            detail={"text": describe_value(text, repr), "reason": reason},
        )


class PrecisionOverflow(FixedPointError):
    """Дробная часть длиннее precision — округление при разборе запрещено."""

    error_code = "PRECISION_OVERFLOW"

    def __init__(self, text: str, precision: int, fraction_digits: int) -> None:
        self.text = text
        self.precision = precision
        self.fraction_digits = fraction_digits
        super().__init__(
            message=(
                f"Decimal {text!r} has {fraction_digits} fractional digits, "
                f"precision is {precision}"
            ),
            detail={
                "text": text,
                "precision": precision,
                "fraction_digits": fraction_digits,
            },
        )


class IntegerOverflow(FixedPointError):
    """Масштабированное значение не помещается в backing integer."""

    error_code = "INTEGER_OVERFLOW"

    def __init__(self, value: Any, layout: str, reason: str = "out of range") -> None:
        self.value = value
        self.layout = layout
        super().__init__(
            message=f"Value {describe_value(value)} does not fit {layout}: {reason}",
            detail={"value": describe_value(value), "layout": layout, "reason": reason},
        )


# =============================================================================
# STRUCTURED DECODE
# =============================================================================


class UnsupportedToken(FixedPointError):
    """Структурированный токен несовместимой формы (object/array/bool/...)."""

    error_code = "UNSUPPORTED_TOKEN"

    def __init__(self, token: Any, expected: str) -> None:
        self.token_type = type(token).__name__
        self.expected = expected
        super().__init__(
            message=f"Unsupported token of type {self.token_type}, expected {expected}",
            detail={"token_type": self.token_type, "expected": expected},
        )


class AbsentValueRejected(FixedPointError):
    """Не-option адаптер получил маркер отсутствия значения (None)."""

    error_code = "ABSENT_VALUE_REJECTED"

    def __init__(self, adapter: str) -> None:
        self.adapter = adapter
        super().__init__(
            message=f"Adapter {adapter!r} does not accept an absent value, use {adapter}_option",
            detail={"adapter": adapter},
        )
