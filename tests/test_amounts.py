"""
금액 변환 테스트
"""
from decimal import Decimal

import pytest

from txverify.amounts import DEFAULT_TOLERANCE, amounts_match, parse_quantity, to_base_units, to_decimal, to_decimal_amount


def test_to_decimal_scales_by_decimals():
    assert to_decimal(10_004_000_000_000_000_000, 18) == Decimal("10.004")
    assert to_decimal(10_000_000, 6) == Decimal("10")
    assert to_decimal(5, 0) == Decimal(5)


def test_base_unit_round_trip_for_all_common_decimals():
    for decimals in range(0, 19):
        for raw in (0, 1, 999, 10 ** decimals, 123456789012345678901234567890):
            assert to_base_units(to_decimal(raw, decimals), decimals) == raw


@pytest.mark.parametrize("decimals", range(0, 19))
@pytest.mark.parametrize("amount", ["10.004", "0.5", "1234.56789", "0.000001"])
def test_amount_survives_base_unit_round_trip(amount, decimals):
    # 단위 미만은 반올림되므로 오차는 허용 오차와 반 단위 중 큰 값 이내
    half_unit = Decimal(1).scaleb(-decimals) / 2
    tolerance = max(DEFAULT_TOLERANCE, half_unit)
    restored = to_decimal(to_base_units(amount, decimals), decimals)
    assert amounts_match(restored, amount, tolerance)


def test_round_trip_within_default_tolerance_when_units_are_fine_enough():
    for decimals in range(2, 19):
        for amount in ("10.004", "0.5", "99.999"):
            assert amounts_match(to_decimal(to_base_units(amount, decimals), decimals), amount)


def test_fractional_amount_with_zero_decimals_rounds_to_whole_unit():
    assert to_decimal(to_base_units("10.004", 0), 0) == Decimal(10)
    assert to_decimal(to_base_units("0.5", 0), 0) == Decimal(1)


def test_uint256_max_is_exact():
    raw = 2 ** 256 - 1
    amount = to_decimal(raw, 18)
    assert to_base_units(amount, 18) == raw
    assert str(amount).replace(".", "").lstrip("0") == str(raw)


def test_to_base_units_rounds_half_up():
    assert to_base_units("1.0000005", 6) == 1_000_001
    assert to_base_units("1.0000004", 6) == 1_000_000


def test_negative_decimals_rejected():
    with pytest.raises(ValueError):
        to_decimal(1, -1)
    with pytest.raises(ValueError):
        to_base_units("1", -1)


@pytest.mark.parametrize("value,expected", [
    ("0x0", 0),
    ("0x", 0),
    ("0x1b4", 436),
    ("0X1B4", 436),
    ("12345", 12345),
    (42, 42),
])
def test_parse_quantity(value, expected):
    assert parse_quantity(value) == expected


@pytest.mark.parametrize("value", [None, "", "  ", "0xzz", "abc", True, 1.5])
def test_parse_quantity_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_quantity(value)


def test_to_decimal_amount_accepts_float_through_string():
    assert to_decimal_amount(10.004) == Decimal("10.004")
    assert to_decimal_amount(" 7 ") == Decimal(7)
    with pytest.raises(ValueError):
        to_decimal_amount("ten")
    with pytest.raises(ValueError):
        to_decimal_amount(None)


def test_amounts_match_uses_inclusive_tolerance():
    assert amounts_match(Decimal("10.004"), Decimal("10"))
    assert amounts_match(Decimal("10.01"), Decimal("10"))
    assert not amounts_match(Decimal("10.011"), Decimal("10"))
    assert not amounts_match(Decimal("10.004"), Decimal("10.5"))
    assert amounts_match(Decimal("9.995"), "10")


def test_amounts_match_custom_tolerance_and_missing_values():
    assert amounts_match("100.4", "100", tolerance="0.5")
    assert not amounts_match("100.4", "100", tolerance="0")
    assert not amounts_match(None, "1")
    assert not amounts_match("1", None)
