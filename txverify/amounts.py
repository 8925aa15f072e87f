"""
금액 변환 유틸리티

기본 단위(wei, sun 등) 정수와 Decimal 금액 사이를 변환한다.
부동소수점은 사용하지 않는다.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

DEFAULT_TOLERANCE = Decimal("0.01")

# uint256 최대값(78자리)도 잘리지 않는 정밀도
_PRECISION = 120

Number = Union[int, str, Decimal, float]


def to_decimal_amount(value: Number) -> Decimal:
    """입력 금액을 Decimal로 변환 (float은 문자열을 거쳐 변환)"""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e


def parse_quantity(value) -> int:
    """0x 접두사 16진수 문자열, 10진수 문자열, 정수를 정수로 변환"""
    if isinstance(value, bool):
        raise ValueError(f"Invalid quantity: {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid quantity: {value!r}")
    text = value.strip()
    if text.lower().startswith("0x"):
        digits = text[2:]
        return int(digits, 16) if digits else 0
    return int(text, 10)


def to_decimal(base_units: int, decimals: int) -> Decimal:
    """기본 단위 정수 -> 사람이 읽는 금액"""
    if decimals < 0:
        raise ValueError("decimals must be >= 0")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(int(base_units)).scaleb(-decimals)


def to_base_units(amount: Number, decimals: int) -> int:
    """사람이 읽는 금액 -> 기본 단위 정수 (단위 미만은 반올림)"""
    if decimals < 0:
        raise ValueError("decimals must be >= 0")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        scaled = to_decimal_amount(amount).scaleb(decimals)
        return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def amounts_match(actual: Number, expected: Number, tolerance: Number = DEFAULT_TOLERANCE) -> bool:
    """|actual - expected| <= tolerance"""
    if actual is None or expected is None:
        return False
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        delta = abs(to_decimal_amount(actual) - to_decimal_amount(expected))
        return delta <= to_decimal_amount(tolerance)
