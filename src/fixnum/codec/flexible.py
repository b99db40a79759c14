"""
Flexible Numeric Decoder — декодирование разнородных токенов

Принимает структурированное значение (результат json.loads, поле pydantic,
атрибут XML) одной из форм и возвращает точное значение FixedPoint:

- str     → parse (Decimal Text Codec)
- int     → точная величина × 10^precision, IntegerOverflow при выходе за layout
- float   → кратчайшая десятичная строка, дающая тот же double, → parse
- Decimal → точное преобразование (from_decimal)
- прочее (None, bool, dict, list, bytes) → UnsupportedToken

Почему не float × 10^precision: 42.1 в double равно 42.10000000000000142...,
и умножение возвращает двоичные артефакты. repr(float) в Python даёт кратчайшую
строку, которая round-trip'ится в тот же double ("42.1"), поэтому обычные
десятичные литералы после float-кодирования декодируются точно.

Граница потерь: double различает ~15-17 значащих цифр; больше цифр из float
восстановить невозможно.

Обратное направление (encode) всегда выдаёт каноническую DecimalString.
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Final

from src.fixnum.domain.errors import FixedPointError, InvalidFormat, UnsupportedToken

if TYPE_CHECKING:
    from src.fixnum.domain.fixed_point import FixedPoint

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class DecoderConfig:
    """Конфигурация FlexibleDecoder.

    Каждый флаг разрешает одну форму токена. Запрещённая форма
    отклоняется как UnsupportedToken.
    """

    accept_str: bool = True
    accept_int: bool = True
    accept_float: bool = True
    accept_decimal: bool = True

    @property
    def expected(self) -> str:
        """Описание разрешённых форм для сообщений об ошибках."""
        shapes = [
            name
            for name, enabled in (
                ("str", self.accept_str),
                ("int", self.accept_int),
                ("float", self.accept_float),
                ("Decimal", self.accept_decimal),
            )
            if enabled
        ]
        return " | ".join(shapes) or "nothing"


DEFAULT_DECODER_CONFIG: Final[DecoderConfig] = DecoderConfig()

# Строгий режим: только строки (точный и человекочитаемый wire format)
STRICT_DECODER_CONFIG: Final[DecoderConfig] = DecoderConfig(
    accept_int=False,
    accept_float=False,
    accept_decimal=False,
)


# =============================================================================
# FLOAT → DECIMAL STRING
# =============================================================================


def shortest_decimal_string(value: float) -> str:
    """
    Кратчайшая позиционная десятичная строка, round-trip'ящаяся в value.

    repr(float) гарантирует кратчайшую round-trip строку, но может
    использовать экспоненту ("1e-05", "1.5e+20"); экспонента разворачивается
    в позиционную запись через Decimal без потери цифр.

    Args:
        value: Конечный double

    Returns:
        Десятичная строка, принимаемая parse

    Raises:
        InvalidFormat: если value NaN или Inf

    Examples:
        >>> shortest_decimal_string(42.1)
        '42.1'
        >>> shortest_decimal_string(1e-05)
        '0.00001'
    """
    if not math.isfinite(value):
        raise InvalidFormat(value, "non-finite float")

    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


# =============================================================================
# DECODER
# =============================================================================


class FlexibleDecoder:
    """Декодер токенов str/int/float/Decimal в FixedPoint.

    Порядок проверок:
    1. Экземпляр целевого типа → без изменений
    2. None/bool → UnsupportedToken (bool является подклассом int)
    3. Форма токена → соответствующий путь, если разрешена конфигурацией
    """

    def __init__(self, config: DecoderConfig | None = None):
        self.config = config or DEFAULT_DECODER_CONFIG

    def decode(self, fp_type: "type[FixedPoint]", token: Any) -> "FixedPoint":
        """
        Декодирование токена в fp_type.

        Raises:
            InvalidFormat, PrecisionOverflow, IntegerOverflow: ошибки значения
            UnsupportedToken: форма токена не поддерживается
        """
        if isinstance(token, fp_type):
            return token

        try:
            return self._decode_token(fp_type, token)
        except FixedPointError as exc:
            logger.debug(
                "Rejected %s token for %s: %s", type(token).__name__, fp_type.__name__, exc
            )
            raise

    def _decode_token(self, fp_type: "type[FixedPoint]", token: Any) -> "FixedPoint":
        config = self.config

        if token is None or isinstance(token, bool):
            raise UnsupportedToken(token, config.expected)
        if isinstance(token, str) and config.accept_str:
            return fp_type.parse(token)
        if isinstance(token, int) and config.accept_int:
            return fp_type.from_int(token)
        if isinstance(token, float) and config.accept_float:
            return fp_type.parse(shortest_decimal_string(token))
        if isinstance(token, Decimal) and config.accept_decimal:
            return fp_type.from_decimal(token)

        raise UnsupportedToken(token, config.expected)

    def encode(self, value: "FixedPoint") -> str:
        """Каноническая DecimalString (никогда int или float)."""
        return str(value)


DEFAULT_DECODER: Final[FlexibleDecoder] = FlexibleDecoder()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def decode(fp_type: "type[FixedPoint]", token: Any) -> "FixedPoint":
    """Декодирование токена декодером по умолчанию."""
    return DEFAULT_DECODER.decode(fp_type, token)


def encode(value: "FixedPoint") -> str:
    """Каноническая строка значения."""
    return DEFAULT_DECODER.encode(value)
