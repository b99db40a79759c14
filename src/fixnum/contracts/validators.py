"""
Wire Contract Validators

JSON Schema контракты wire-формы каждого адаптера FixedPoint.
Использует библиотеку jsonschema (Draft 2020-12).

Базовые схемы (contracts/schema/):
- repr.json     — backing integer
- str.json      — каноническая DecimalString
- float.json    — double
- flexible.json — формы, принимаемые Flexible Numeric Decoder

Базовые схемы не зависят от типа; wire_schema() специализирует их
под конкретный (layout, precision):
- repr: minimum/maximum диапазона layout
- str: дробная часть {1,precision}, без знака для беззнаковых layouts
- flexible: дробная часть {1,precision}
- *_option: anyOf [base, null]
"""

import copy
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Final

import jsonschema
from jsonschema import Draft202012Validator

if TYPE_CHECKING:
    from src.fixnum.domain.fixed_point import FixedPoint


OPTION_SUFFIX: Final[str] = "_option"

BASE_SCHEMAS: Final[tuple[str, ...]] = ("repr", "str", "float", "flexible")


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик базовых JSON Schema файлов.

    Схемы лежат в contracts/schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'repr')

        Returns:
            Загруженная схема как dict (общий экземпляр из кэша, не изменять)

        Raises:
            FileNotFoundError: Если файл схемы не найден
            json.JSONDecodeError: Если файл не является валидным JSON
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# SPECIALIZATION
# =============================================================================


def _fraction_quantifier(precision: int) -> str:
    return f"{{1,{precision}}}"


def _specialize(schema: Dict[str, Any], base: str, fp_type: "type[FixedPoint]") -> None:
    layout = fp_type.layout
    precision = fp_type.precision

    if base == "repr":
        schema["minimum"] = layout.min_value
        schema["maximum"] = layout.max_value
    elif base == "str":
        sign = "-?" if layout.signed else ""
        # Последняя дробная цифра ненулевая, либо дробная часть ровно "0"
        schema["pattern"] = (
            f"^{sign}(0|[1-9][0-9]*)\\.([0-9]{{0,{precision - 1}}}[1-9]|0)$"
        )
    elif base == "flexible":
        schema["anyOf"][0]["pattern"] = (
            f"^[+-]?([0-9]*\\.[0-9]{_fraction_quantifier(precision)}|[0-9]+)$"
        )


def wire_schema(
    fp_type: "type[FixedPoint]", adapter_name: str, embedded: bool = False
) -> Dict[str, Any]:
    """
    JSON Schema wire-формы адаптера для конкретного типа.

    Args:
        fp_type: Конкретный тип FixedPoint
        adapter_name: 'repr' | 'str' | 'float' | 'flexible' (+ '_option')
        embedded: Без '$schema' (для встраивания в схему модели)

    Returns:
        Новый dict (можно изменять)

    Raises:
        ValueError: Неизвестное имя адаптера
    """
    base = adapter_name.removesuffix(OPTION_SUFFIX)
    if base not in BASE_SCHEMAS:
        raise ValueError(f"Unknown adapter: {adapter_name!r}")

    schema = copy.deepcopy(_SCHEMA_LOADER.load_schema(base))
    schema.pop("$id", None)
    meta = schema.pop("$schema", None)
    _specialize(schema, base, fp_type)

    if adapter_name.endswith(OPTION_SUFFIX):
        schema = {"anyOf": [schema, {"type": "null"}]}

    if meta and not embedded:
        schema = {"$schema": meta, **schema}
    return schema


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class WireContractValidator:
    """
    Валидатор wire-значений одного адаптера для одного типа.

    Инкапсулирует логику валидации данных против специализированной схемы.
    """

    def __init__(self, fp_type: "type[FixedPoint]", adapter_name: str):
        """
        Инициализация валидатора.

        Args:
            fp_type: Конкретный тип FixedPoint
            adapter_name: Имя адаптера ('repr', 'str_option', ...)
        """
        self.fp_type = fp_type
        self.adapter_name = adapter_name
        self.schema = wire_schema(fp_type, adapter_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, value: Any) -> None:
        """
        Raises:
            ValidationError: Если значение не соответствует схеме
        """
        self.validator.validate(value)

    def is_valid(self, value: Any) -> bool:
        return self.validator.is_valid(value)

    def iter_errors(self, value: Any):
        return self.validator.iter_errors(value)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_wire_value(fp_type: "type[FixedPoint]", adapter_name: str, value: Any) -> None:
    """
    Валидация одного wire-значения.

    Raises:
        ValidationError: Если значение не соответствует схеме
    """
    WireContractValidator(fp_type, adapter_name).validate(value)
