"""
Тесты для FixedPoint — value type и его пути создания

Проверяет:
1. Scaled integer representation: from_bits/into_bits
2. Равенство, hash, immutability (frozen)
3. Неприводимость разных (layout, precision)
4. Пути создания: of, parse, from_int, from_float, from_decimal, from_bytes
5. Фабрику типов и номинальные подклассы
6. FixedPointNewType обёртки
"""

import dataclasses
from decimal import Decimal

import pytest

from src.fixnum.domain import (
    FixedPoint,
    FixedPointNewType,
    Fp64,
    Fp128,
    IntegerOverflow,
    InvalidFormat,
    Layout,
    PrecisionOverflow,
    fixed_point_type,
)


class Amount(FixedPointNewType, inner=Fp64):
    pass


class Price(FixedPoint, layout=Layout.I64, precision=2):
    pass


# =============================================================================
# ТЕСТЫ: Scaled integer representation
# =============================================================================


class TestBits:
    """Тесты from_bits/into_bits"""

    @pytest.mark.parametrize(
        "bits",
        [0, 1, -1, 10**9, Layout.I64.max_value, Layout.I64.min_value],
    )
    def test_round_trip(self, bits: int) -> None:
        """from_bits(into_bits(x)) == x"""
        value = Fp64.from_bits(bits)
        assert value.into_bits() == bits
        assert Fp64.from_bits(value.into_bits()) == value

    def test_bits_represent_scaled_value(self) -> None:
        assert Fp64.of("10.042").into_bits() == 10_042_000_000
        assert Fp128.of("1").into_bits() == 10**18

    def test_out_of_range_bits_rejected(self) -> None:
        """Конструирование вне диапазона не заворачивает значение"""
        with pytest.raises(IntegerOverflow):
            Fp64.from_bits(Layout.I64.max_value + 1)

    def test_non_integer_bits_rejected(self) -> None:
        with pytest.raises(TypeError):
            Fp64.from_bits(1.5)
        with pytest.raises(TypeError):
            Fp64.from_bits(True)


class TestBytes:
    """Тесты raw bit layout"""

    def test_signed_twos_complement(self) -> None:
        value = Fp64.of("-1")
        assert value.to_bytes() == (-(10**9)).to_bytes(8, "big", signed=True)
        assert Fp64.from_bytes(value.to_bytes()) == value

    def test_little_endian(self) -> None:
        value = Fp128.max_value()
        data = value.to_bytes("little")
        assert len(data) == 16
        assert Fp128.from_bytes(data, "little") == value

    def test_unsigned_layout(self) -> None:
        fp_type = fixed_point_type(Layout.U16, 2)
        value = fp_type.max_value()
        assert value.to_bytes() == b"\xff\xff"
        assert fp_type.from_bytes(b"\xff\xff") == value

    def test_wrong_length_rejected(self) -> None:
        with pytest.raises(ValueError, match="requires 8 bytes"):
            Fp64.from_bytes(b"\x00\x01")


# =============================================================================
# ТЕСТЫ: Equality
# =============================================================================


class TestEquality:
    """Тесты структурного равенства"""

    def test_equal_iff_bits_equal(self) -> None:
        assert Fp64.of("1.5") == Fp64.from_bits(1_500_000_000)
        assert Fp64.of("1.5") != Fp64.of("1.500000001")

    def test_different_types_never_equal(self) -> None:
        """Нет неявного расширения между (layout, precision)"""
        assert Fp64.of("1") != Fp128.of("1")
        assert Fp64.of("1") != Price.of("1")
        assert Fp64.of("0") != 0

    def test_hash_consistent_with_equality(self) -> None:
        values = {Fp64.of("1"), Fp64.from_bits(10**9), Fp64.of("1.0")}
        assert len(values) == 1

    def test_frozen(self) -> None:
        value = Fp64.of("1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            value.bits = 5


# =============================================================================
# ТЕСТЫ: Construction
# =============================================================================


class TestConstruction:
    """Тесты путей создания"""

    def test_of_accepts_str_and_int(self) -> None:
        assert Fp64.of("42") == Fp64.of(42)
        assert str(Fp64.of(-7)) == "-7.0"

    def test_of_rejects_float(self) -> None:
        """Float требует явного lossy from_float"""
        with pytest.raises(TypeError, match="decimal literal"):
            Fp64.of(1.5)

    def test_from_int_overflow(self) -> None:
        assert Fp64.from_int(9_223_372_036).into_bits() == 9_223_372_036_000_000_000
        with pytest.raises(IntegerOverflow):
            Fp64.from_int(9_223_372_037)

    def test_from_decimal_exact(self) -> None:
        assert Fp64.from_decimal(Decimal("10.0420")) == Fp64.of("10.042")
        assert Fp64.from_decimal(Decimal("-0")) == Fp64.zero()
        assert Fp64.from_decimal(Decimal("1E+3")) == Fp64.of(1000)

    def test_from_decimal_rejects_excess_digits(self) -> None:
        with pytest.raises(PrecisionOverflow):
            Fp64.from_decimal(Decimal("0.0000000001"))

    def test_from_decimal_long_fraction_not_rounded(self) -> None:
        """Цифры за пределами точности контекста decimal не теряются"""
        value = Decimal("1." + "0" * 120 + "1")
        with pytest.raises(PrecisionOverflow) as exc_info:
            Fp64.from_decimal(value)
        assert exc_info.value.fraction_digits == 121

    def test_from_decimal_trailing_zeros_match_parse(self) -> None:
        """Decimal и строка с теми же цифрами обрабатываются одинаково"""
        with pytest.raises(PrecisionOverflow):
            Fp64.from_decimal(Decimal("1.0000000000"))
        with pytest.raises(PrecisionOverflow):
            Fp64.parse("1.0000000000")
        assert Fp64.from_decimal(Decimal("1.000000000")) == Fp64.parse("1.000000000")

    def test_from_decimal_zero_any_exponent(self) -> None:
        assert Fp64.from_decimal(Decimal("0E+999999")) == Fp64.zero()

    def test_huge_integer_typed_error(self) -> None:
        """Целое длиннее лимита int → str даёт IntegerOverflow, а не ValueError"""
        with pytest.raises(IntegerOverflow, match="bit int"):
            Fp64.from_bits(10**5000)
        with pytest.raises(IntegerOverflow):
            Fp64.from_int(-(10**5000))

    def test_from_decimal_rejects_non_finite(self) -> None:
        with pytest.raises(InvalidFormat):
            Fp64.from_decimal(Decimal("NaN"))
        with pytest.raises(InvalidFormat):
            Fp64.from_decimal(Decimal("-Infinity"))

    def test_from_decimal_huge_exponent(self) -> None:
        with pytest.raises(IntegerOverflow):
            Fp64.from_decimal(Decimal("1E+999999"))

    def test_to_decimal_exact(self) -> None:
        assert Fp128.max_value().to_decimal() == Decimal("170141183460469231731.687303715884105727")

    def test_from_float_decimal_literal(self) -> None:
        """Кратчайшая десятичная форма double, без двоичных артефактов"""
        assert Fp64.from_float(42.1) == Fp64.of("42.1")
        assert Fp64.from_float(-0.1234) == Fp64.of("-0.1234")
        assert Fp64.from_float(1e-05) == Fp64.of("0.00001")

    def test_from_float_rounds_half_even(self) -> None:
        """Единственный путь с округлением"""
        assert Fp64.from_float(0.1234567891234) == Fp64.of("0.123456789")
        assert Fp64.from_float(2.5e-09) == Fp64.from_bits(2)
        assert Fp64.from_float(3.5e-09) == Fp64.from_bits(4)

    def test_from_float_rejects_non_finite(self) -> None:
        with pytest.raises(InvalidFormat):
            Fp64.from_float(float("nan"))
        with pytest.raises(InvalidFormat):
            Fp64.from_float(float("inf"))

    def test_from_float_overflow(self) -> None:
        with pytest.raises(IntegerOverflow):
            Fp64.from_float(1e300)

    def test_to_float_correctly_rounded(self) -> None:
        assert float(Fp64.of("1.1")) == 1.1
        assert Fp64.of("-10.042").to_float() == -10.042
        assert float(Fp64.zero()) == 0.0


class TestConstants:
    """Тесты констант типа"""

    def test_constants(self) -> None:
        assert str(Fp64.zero()) == "0.0"
        assert str(Fp64.one()) == "1.0"
        assert str(Fp64.epsilon()) == "0.000000001"
        assert str(Fp64.max_value()) == "9223372036.854775807"
        assert str(Fp64.min_value()) == "-9223372036.854775808"

    def test_repr(self) -> None:
        assert repr(Fp64.of("10.042")) == "FixedPointI64P9('10.042')"


# =============================================================================
# ТЕСТЫ: Type factory
# =============================================================================


class TestTypeFactory:
    """Тесты fixed_point_type и номинальных подклассов"""

    def test_same_pair_same_class(self) -> None:
        assert fixed_point_type(Layout.I64, 9) is Fp64
        assert fixed_point_type("i64", 9) is Fp64
        assert fixed_point_type(Layout.I128, 18) is Fp128

    def test_type_parameters(self) -> None:
        fp_type = fixed_point_type(Layout.I32, 4)
        assert fp_type.layout is Layout.I32
        assert fp_type.precision == 4
        assert fp_type.scale == 10_000
        assert fp_type.__name__ == "FixedPointI32P4"

    @pytest.mark.parametrize(
        "layout, precision",
        [(Layout.I16, 5), (Layout.I64, 19), (Layout.I64, 0), (Layout.U128, 39)],
    )
    def test_precision_out_of_range(self, layout: Layout, precision: int) -> None:
        with pytest.raises(ValueError, match="precision must be in"):
            fixed_point_type(layout, precision)

    def test_abstract_base_not_instantiable(self) -> None:
        with pytest.raises(TypeError, match="no layout/precision"):
            FixedPoint(1)

    def test_partial_parameters_rejected(self) -> None:
        with pytest.raises(TypeError, match="both layout and precision"):

            class Broken(FixedPoint, layout=Layout.I64):
                pass

    def test_nominal_subclass(self) -> None:
        assert Price.layout is Layout.I64
        assert str(Price.of("19.99")) == "19.99"
        with pytest.raises(PrecisionOverflow):
            Price.parse("19.999")


# =============================================================================
# ТЕСТЫ: NewType wrappers
# =============================================================================


class TestNewType:
    """Тесты FixedPointNewType"""

    def test_wraps_inner_value(self) -> None:
        amount = Amount(Fp64.of("1.02"))
        assert amount.value == Fp64.of("1.02")
        assert str(amount) == "1.02"
        assert repr(amount) == "Amount(FixedPointI64P9('1.02'))"

    def test_equality(self) -> None:
        assert Amount(Fp64.of("1")) == Amount(Fp64.of("1"))
        assert Amount(Fp64.of("1")) != Fp64.of("1")

    def test_wrong_inner_type_rejected(self) -> None:
        with pytest.raises(TypeError, match="wraps FixedPointI64P9"):
            Amount(Fp128.of("1"))

    def test_inner_must_be_concrete(self) -> None:
        with pytest.raises(TypeError, match="abstract"):

            class Broken(FixedPointNewType, inner=FixedPoint):
                pass
