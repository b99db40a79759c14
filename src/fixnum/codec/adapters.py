"""
Named Representation Adapters — стратегии кодирования поля

Шесть независимо выбираемых стратегий encode/decode для поля FixedPoint:

| Адаптер      | Wire-форма        | Точность                          |
|--------------|-------------------|-----------------------------------|
| repr         | backing integer   | точно, не человекочитаемо         |
| str          | DecimalString     | точно, encode всегда канонический |
| float        | double            | с потерями (best-effort)          |
| *_option     | base или null     | как base; None ↔ отсутствие       |

Использование без фреймворка:
    REPR.encode(value)            → int
    STR.decode(Fp64, "10.042")    → Fp64

Использование с pydantic (Annotated-метаданные):
    class Sample(BaseModel):
        repr: Annotated[Fp64, REPR]
        str: Annotated[Optional[Amount], STR_OPTION]

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. decode(encode(x)) == x для repr/str; для float — только при ≤15
   значащих цифрах. Decode не округляет: значение у границы layout
   (Fp64.max_value() → 9223372036.854776) даёт IntegerOverflow, лишние
   цифры double (16-17 значащих) дают PrecisionOverflow
2. None через *_option не вызывает базовый decode/encode
3. None через не-option адаптер → AbsentValueRejected
4. Обёртка FixedPointNewType кодируется побайтно так же, как её значение
"""

import logging
import types
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Final, Union, get_args, get_origin

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from src.fixnum.codec.flexible import shortest_decimal_string
from src.fixnum.contracts.validators import OPTION_SUFFIX, wire_schema
from src.fixnum.domain.errors import AbsentValueRejected, FixedPointError, UnsupportedToken
from src.fixnum.domain.fixed_point import FixedPoint, FixedPointNewType

logger = logging.getLogger(__name__)

# Ключ метаданных core schema, в котором адаптер передаёт свою JSON Schema
WIRE_SCHEMA_METADATA_KEY: Final[str] = "fixnum_wire_schema"

Target = Union[type[FixedPoint], type[FixedPointNewType]]


# =============================================================================
# TARGET RESOLUTION
# =============================================================================


def resolve_target(target: Target) -> tuple[type[FixedPoint], Callable[[FixedPoint], Any]]:
    """
    Внутренний тип FixedPoint и функция обёртки для целевого типа.

    Args:
        target: Конкретный тип FixedPoint или подкласс FixedPointNewType

    Returns:
        (fp_type, wrap)

    Raises:
        TypeError: если target не является ни тем, ни другим
    """
    if isinstance(target, type) and issubclass(target, FixedPoint):
        return target, lambda value: value
    if isinstance(target, type) and issubclass(target, FixedPointNewType):
        return target.inner, target
    raise TypeError(f"Expected a FixedPoint or FixedPointNewType type, got {target!r}")


def unwrap(value: Any) -> Any:
    """Значение FixedPoint из обёртки; прочие значения без изменений."""
    if isinstance(value, FixedPointNewType):
        return value.value
    return value


def _split_optional(source_type: Any) -> tuple[Any, bool]:
    """(inner, is_optional) для Optional[X] / X | None."""
    if get_origin(source_type) in (Union, types.UnionType):
        args = get_args(source_type)
        inner = [arg for arg in args if arg is not type(None)]
        if len(inner) == 1 and len(args) == 2:
            return inner[0], True
        raise TypeError(f"Unsupported union for fixed point adapter: {source_type!r}")
    return source_type, False


# =============================================================================
# BASE ENCODERS / DECODERS
# =============================================================================


def _encode_repr(value: FixedPoint) -> int:
    return value.into_bits()


def _decode_repr(fp_type: type[FixedPoint], token: Any) -> FixedPoint:
    if isinstance(token, int) and not isinstance(token, bool):
        return fp_type.from_bits(token)
    raise UnsupportedToken(token, "int")


def _encode_str(value: FixedPoint) -> str:
    return str(value)


def _decode_str(fp_type: type[FixedPoint], token: Any) -> FixedPoint:
    if isinstance(token, str):
        return fp_type.parse(token)
    raise UnsupportedToken(token, "str")


def _encode_float(value: FixedPoint) -> float:
    return value.to_float()


def _decode_float(fp_type: type[FixedPoint], token: Any) -> FixedPoint:
    # Без округления: IntegerOverflow/PrecisionOverflow, если double
    # не укладывается точно в (layout, precision)
    if isinstance(token, float):
        return fp_type.parse(shortest_decimal_string(token))
    # Целое число на месте double (например, 0 вместо 0.0) точно
    if isinstance(token, int) and not isinstance(token, bool):
        return fp_type.from_int(token)
    raise UnsupportedToken(token, "float | int")


# =============================================================================
# ADAPTER
# =============================================================================


@dataclass(frozen=True)
class Adapter:
    """
    Именованная стратегия encode/decode поля FixedPoint.

    Экземпляры также являются pydantic-метаданными для Annotated.
    """

    name: str
    encode_value: Callable[[FixedPoint], Any]
    decode_token: Callable[[type[FixedPoint], Any], FixedPoint]
    lossy: bool = False
    optional: bool = False

    @property
    def base_name(self) -> str:
        return self.name.removesuffix(OPTION_SUFFIX)

    def option(self) -> "Adapter":
        """Option-вариант адаптера (None ↔ отсутствие значения)."""
        if self.optional:
            return self
        return replace(self, name=f"{self.name}{OPTION_SUFFIX}", optional=True)

    def encode(self, value: Any) -> Any:
        """
        Wire-значение для FixedPoint, обёртки или None.

        Raises:
            AbsentValueRejected: None через не-option адаптер
        """
        if value is None:
            if self.optional:
                return None
            raise AbsentValueRejected(self.name)
        return self.encode_value(unwrap(value))

    def decode(self, target: Target, token: Any) -> Any:
        """
        Значение target из wire-токена.

        Экземпляры target (и внутреннего типа) принимаются без изменений.

        Raises:
            AbsentValueRejected: None через не-option адаптер
            UnsupportedToken: форма токена не соответствует адаптеру
            InvalidFormat, PrecisionOverflow, IntegerOverflow: ошибки значения
        """
        if token is None:
            if self.optional:
                return None
            raise AbsentValueRejected(self.name)

        fp_type, wrap = resolve_target(target)
        if isinstance(token, target):
            return token
        if isinstance(token, fp_type):
            return wrap(token)

        try:
            return wrap(self.decode_token(fp_type, token))
        except FixedPointError as exc:
            logger.debug("Adapter %s rejected token for %s: %s", self.name, fp_type.__name__, exc)
            raise

    # -------------------------------------------------------------------------
    # Pydantic
    # -------------------------------------------------------------------------

    def __get_pydantic_core_schema__(
        self, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        target, is_optional = _split_optional(source_type)
        if is_optional and not self.optional:
            raise TypeError(
                f"Adapter {self.name!r} does not accept Optional fields, "
                f"use {self.name}{OPTION_SUFFIX}"
            )
        fp_type, _ = resolve_target(target)

        def validate(token: Any) -> Any:
            return self.decode(target, token)

        return core_schema.no_info_plain_validator_function(
            validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                self.encode, info_arg=False, when_used="json"
            ),
            metadata={
                WIRE_SCHEMA_METADATA_KEY: wire_schema(fp_type, self.name, embedded=True)
            },
        )

    def __get_pydantic_json_schema__(
        self, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return dict(schema["metadata"][WIRE_SCHEMA_METADATA_KEY])


# =============================================================================
# NAMED ADAPTERS
# =============================================================================

REPR: Final[Adapter] = Adapter("repr", _encode_repr, _decode_repr)
STR: Final[Adapter] = Adapter("str", _encode_str, _decode_str)
FLOAT: Final[Adapter] = Adapter("float", _encode_float, _decode_float, lossy=True)

REPR_OPTION: Final[Adapter] = REPR.option()
STR_OPTION: Final[Adapter] = STR.option()
FLOAT_OPTION: Final[Adapter] = FLOAT.option()

ADAPTERS: Final[Dict[str, Adapter]] = {
    adapter.name: adapter
    for adapter in (REPR, STR, FLOAT, REPR_OPTION, STR_OPTION, FLOAT_OPTION)
}


def get_adapter(name: str) -> Adapter:
    """
    Адаптер по wire-идентификатору.

    Args:
        name: 'repr' | 'str' | 'float' | 'repr_option' | 'str_option' | 'float_option'

    Raises:
        ValueError: Неизвестное имя адаптера
    """
    try:
        return ADAPTERS[name]
    except KeyError:
        raise ValueError(f"Unknown adapter: {name!r}, expected one of {sorted(ADAPTERS)}")
