"""
Full Math - 오버플로우 없는 곱셈/나눗셈

(a * b) / denominator를 중간 정밀도 손실 없이 계산합니다.
Python 정수는 임의 정밀도이므로 a * b는 넘치지 않으며,
결과가 uint256 폭을 넘는지만 검사합니다.

References:
- Uniswap V3 Core: contracts/libraries/FullMath.sol
"""

from ..constants import UINT256_MAX
from ..errors import DivisionByZero, Overflow


def mul_div(a: int, b: int, denominator: int, round_up: bool = False) -> int:
    """floor(a * b / denominator), round_up이면 ceil

    Args:
        a: 피승수 (uint256)
        b: 승수 (uint256)
        denominator: 제수
        round_up: True면 나머지가 있을 때 1 올림

    Returns:
        몫 (uint256)

    Raises:
        DivisionByZero: denominator == 0
        Overflow: 몫이 uint256을 초과
    """
    if a < 0 or b < 0 or denominator < 0:
        raise ValueError(f"부호 없는 정수만 허용됩니다: a={a}, b={b}, denominator={denominator}")
    if denominator == 0:
        raise DivisionByZero("mul_div: denominator가 0입니다")

    quotient, remainder = divmod(a * b, denominator)
    if round_up and remainder > 0:
        quotient += 1

    if quotient > UINT256_MAX:
        raise Overflow(f"mul_div 결과가 uint256을 초과합니다: {quotient}")
    return quotient


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """(a * b) / denominator 올림"""
    return mul_div(a, b, denominator, round_up=True)


def div_rounding_up(numerator: int, denominator: int) -> int:
    """numerator / denominator 올림"""
    if denominator == 0:
        raise DivisionByZero("div_rounding_up: denominator가 0입니다")
    quotient, remainder = divmod(numerator, denominator)
    return quotient + (1 if remainder > 0 else 0)
