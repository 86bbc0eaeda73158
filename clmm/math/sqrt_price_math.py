"""
Sqrt Price Math - sqrtPriceX96 관련 계산

가격은 sqrtPriceX96 형식으로 저장됩니다.
sqrtPriceX96 = sqrt(price) * 2^96

토큰 수량 ↔ 가격 변화량 공식과, 부호 있는 수량을 더하거나 뺀 뒤의
다음 가격 공식을 제공합니다.

반올림 규칙:
    풀이 받는 수량은 올림 (과소 청구 방지)
    풀이 지급하는 수량은 내림 (과다 지급 방지)

References:
- Uniswap V3 Core: contracts/libraries/SqrtPriceMath.sol
"""

from math import isqrt

from ..constants import MIN_SQRT_RATIO, Q96, RESOLUTION, UINT160_MAX
from ..errors import (
    AmountExceedsAvailableLiquidity,
    DivisionByZero,
    InsufficientLiquidity,
    Overflow,
    PriceOutOfRange,
)
from .full_math import div_rounding_up, mul_div


def encode_sqrt_ratio_x96(amount1: int, amount0: int) -> int:
    """token1/token0 비율을 sqrtPriceX96으로 인코딩

    sqrtPriceX96 = isqrt((amount1 << 192) / amount0)

    Args:
        amount1: 분자 (token1 수량)
        amount0: 분모 (token0 수량)

    Returns:
        sqrtPriceX96 (내림)
    """
    if amount0 == 0:
        raise DivisionByZero("encode_sqrt_ratio_x96: amount0가 0입니다")
    if amount1 < 0 or amount0 < 0:
        raise ValueError(f"수량은 음수일 수 없습니다: {amount1}/{amount0}")
    return isqrt((amount1 << 192) // amount0)


def get_amount0_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool
) -> int:
    """두 가격 사이의 amount0 변화량

    공식: Δx = L * 2^96 * (√P_b - √P_a) / (√P_b * √P_a)

    √P_b로 먼저 나누고(반올림 적용) 다시 √P_a로 나눕니다(반올림 적용).

    Args:
        sqrt_ratio_a_x96: sqrtPriceX96 경계 하나
        sqrt_ratio_b_x96: sqrtPriceX96 경계 다른 하나
        liquidity: 유동성
        round_up: True면 올림, False면 내림

    Returns:
        amount0 (token0 수량, 최소 단위)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    if sqrt_ratio_a_x96 <= 0:
        raise PriceOutOfRange(f"sqrtPriceX96은 양수여야 합니다: {sqrt_ratio_a_x96}")

    numerator1 = liquidity << RESOLUTION
    numerator2 = sqrt_ratio_b_x96 - sqrt_ratio_a_x96

    if round_up:
        return div_rounding_up(
            mul_div(numerator1, numerator2, sqrt_ratio_b_x96, round_up=True),
            sqrt_ratio_a_x96
        )
    return mul_div(numerator1, numerator2, sqrt_ratio_b_x96) // sqrt_ratio_a_x96


def get_amount1_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool
) -> int:
    """두 가격 사이의 amount1 변화량

    공식: Δy = L * (√P_b - √P_a) / 2^96

    Args:
        sqrt_ratio_a_x96: sqrtPriceX96 경계 하나
        sqrt_ratio_b_x96: sqrtPriceX96 경계 다른 하나
        liquidity: 유동성
        round_up: True면 올림, False면 내림

    Returns:
        amount1 (token1 수량, 최소 단위)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    return mul_div(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96, round_up=round_up)


def get_next_sqrt_price_from_amount0_rounding_up(
    sqrt_price_x96: int,
    liquidity: int,
    amount: int,
    add: bool
) -> int:
    """amount0를 더하거나 뺀 뒤의 sqrtPriceX96 (올림)

    공식: √P' = L * √P / (L ± Δx * √P)

    Args:
        sqrt_price_x96: 현재 sqrtPriceX96
        liquidity: 유동성
        amount: amount0 변화량
        add: True면 추가, False면 제거

    Returns:
        새로운 sqrtPriceX96

    Raises:
        AmountExceedsAvailableLiquidity: 제거량이 가상 reserve 이상
    """
    # amount == 0이면 반올림 때문에 가격이 바뀌지 않도록 그대로 반환
    if amount == 0:
        return sqrt_price_x96

    numerator1 = liquidity << RESOLUTION
    product = amount * sqrt_price_x96

    if add:
        return mul_div(numerator1, sqrt_price_x96, numerator1 + product, round_up=True)

    if product >= numerator1:
        raise AmountExceedsAvailableLiquidity(
            f"token0 출력량이 가용 유동성을 초과합니다: amount={amount}, liquidity={liquidity}"
        )
    result = mul_div(numerator1, sqrt_price_x96, numerator1 - product, round_up=True)
    if result > UINT160_MAX:
        raise Overflow(f"sqrtPriceX96이 uint160을 초과합니다: {result}")
    return result


def get_next_sqrt_price_from_amount1_rounding_down(
    sqrt_price_x96: int,
    liquidity: int,
    amount: int,
    add: bool
) -> int:
    """amount1을 더하거나 뺀 뒤의 sqrtPriceX96 (내림)

    공식: √P' = √P ± Δy / L

    Args:
        sqrt_price_x96: 현재 sqrtPriceX96
        liquidity: 유동성
        amount: amount1 변화량
        add: True면 추가, False면 제거

    Returns:
        새로운 sqrtPriceX96

    Raises:
        AmountExceedsAvailableLiquidity: 제거량이 가상 reserve 이상
    """
    if add:
        result = sqrt_price_x96 + mul_div(amount, Q96, liquidity)
        if result > UINT160_MAX:
            raise Overflow(f"sqrtPriceX96이 uint160을 초과합니다: {result}")
        return result

    quotient = mul_div(amount, Q96, liquidity, round_up=True)
    if sqrt_price_x96 <= quotient:
        raise AmountExceedsAvailableLiquidity(
            f"token1 출력량이 가용 유동성을 초과합니다: amount={amount}, liquidity={liquidity}"
        )
    return sqrt_price_x96 - quotient


def get_next_sqrt_price_from_input(
    sqrt_price_x96: int,
    liquidity: int,
    amount_in: int,
    zero_for_one: bool
) -> int:
    """입력량을 반영한 다음 sqrtPriceX96

    zero_for_one이면 token0 입력(가격 하락, 올림),
    아니면 token1 입력(가격 상승, 내림). 어느 쪽이든 목표 가격을
    넘어서지 않습니다.

    Args:
        sqrt_price_x96: 현재 sqrtPriceX96
        liquidity: 유동성
        amount_in: 입력량
        zero_for_one: 스왑 방향

    Returns:
        새로운 sqrtPriceX96

    Raises:
        InsufficientLiquidity: liquidity == 0 이고 amount_in > 0
    """
    if sqrt_price_x96 <= 0:
        raise PriceOutOfRange(f"sqrtPriceX96은 양수여야 합니다: {sqrt_price_x96}")
    if amount_in == 0:
        return sqrt_price_x96
    if liquidity == 0:
        raise InsufficientLiquidity(f"유동성 0에 입력할 수 없습니다: amount_in={amount_in}")

    if zero_for_one:
        return get_next_sqrt_price_from_amount0_rounding_up(sqrt_price_x96, liquidity, amount_in, True)
    return get_next_sqrt_price_from_amount1_rounding_down(sqrt_price_x96, liquidity, amount_in, True)


def get_next_sqrt_price_from_output(
    sqrt_price_x96: int,
    liquidity: int,
    amount_out: int,
    zero_for_one: bool
) -> int:
    """출력량을 반영한 다음 sqrtPriceX96

    zero_for_one이면 token1 출력(가격 하락, 내림),
    아니면 token0 출력(가격 상승, 올림).

    Args:
        sqrt_price_x96: 현재 sqrtPriceX96
        liquidity: 유동성
        amount_out: 출력량
        zero_for_one: 스왑 방향

    Returns:
        새로운 sqrtPriceX96

    Raises:
        AmountExceedsAvailableLiquidity: 가격이 0 이하 또는 MIN_SQRT_RATIO 미만이 되어야
            출력량을 채울 수 있는 경우
    """
    if sqrt_price_x96 <= 0:
        raise PriceOutOfRange(f"sqrtPriceX96은 양수여야 합니다: {sqrt_price_x96}")
    if amount_out == 0:
        return sqrt_price_x96
    if liquidity == 0:
        raise AmountExceedsAvailableLiquidity(f"유동성 0에서 출력할 수 없습니다: amount_out={amount_out}")

    if zero_for_one:
        result = get_next_sqrt_price_from_amount1_rounding_down(sqrt_price_x96, liquidity, amount_out, False)
    else:
        result = get_next_sqrt_price_from_amount0_rounding_up(sqrt_price_x96, liquidity, amount_out, False)

    if result < MIN_SQRT_RATIO:
        raise AmountExceedsAvailableLiquidity(
            f"출력 후 sqrtPriceX96이 최소값 미만입니다: {result} (최소: {MIN_SQRT_RATIO})"
        )
    return result
