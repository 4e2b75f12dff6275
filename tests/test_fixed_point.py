"""Tests for WAD conversion and integer helpers."""

from decimal import Decimal

import pytest

from simpleswap.core.fixed_point import (
    MAX_AMOUNT,
    WAD,
    format_wad,
    from_wad,
    isqrt,
    mul_div,
    require_amount,
    to_wad,
)


class TestToWad:
    def test_whole_and_fractional_amounts(self):
        assert to_wad("1") == WAD
        assert to_wad(100) == 100 * WAD
        assert to_wad("18.181818181818181818") == 18181818181818181818
        assert to_wad(Decimal("0.000000000000000001")) == 1

    def test_large_amount_keeps_every_digit(self):
        # Beyond the default 28-digit Decimal context
        assert to_wad("123456789012345678901.123456789012345678") == (
            123456789012345678901123456789012345678
        )

    def test_rejects_sub_wad_precision(self):
        with pytest.raises(ValueError, match="fractional digits"):
            to_wad("0.0000000000000000001")

    @pytest.mark.parametrize("bad", ["-1", "abc", "NaN", "Infinity", True])
    def test_rejects_invalid_amounts(self, bad):
        with pytest.raises(ValueError):
            to_wad(bad)


class TestFromWadAndFormat:
    def test_from_wad_is_exact(self):
        assert from_wad(18181818181818181818) == Decimal("18.181818181818181818")
        assert from_wad(2 * WAD) == Decimal(2)

    def test_format_trims_trailing_zeros(self):
        assert format_wad(2 * WAD) == "2"
        assert format_wad(WAD // 2) == "0.5"
        assert format_wad(141421356237309504880) == "141.42135623730950488"
        assert format_wad(1) == "0.000000000000000001"


class TestIntegerHelpers:
    def test_mul_div_floors(self):
        assert mul_div(10, 200, 110) == 18
        assert mul_div(MAX_AMOUNT, MAX_AMOUNT, MAX_AMOUNT) == MAX_AMOUNT

    def test_mul_div_zero_denominator(self):
        with pytest.raises(ZeroDivisionError):
            mul_div(1, 1, 0)

    def test_isqrt_floors(self):
        assert isqrt(20000) == 141
        assert isqrt(100 * WAD * 200 * WAD) == 141421356237309504880

    def test_require_amount(self):
        assert require_amount("x", 0) == 0
        with pytest.raises(TypeError):
            require_amount("x", 1.5)
        with pytest.raises(TypeError):
            require_amount("x", False)
        with pytest.raises(ValueError):
            require_amount("x", -1)
