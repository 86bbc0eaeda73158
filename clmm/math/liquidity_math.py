"""
Liquidity Math - 유동성 계산

특정 가격 범위에서 토큰 수량으로 민트 가능한 최대 유동성 계산,
그리고 부호 있는 유동성 변화 적용.

References:
- Uniswap V3 Core: contracts/libraries/LiquidityMath.sol
- Uniswap V3 Periphery: contracts/libraries/LiquidityAmounts.sol

핵심 공식:
    L = Δy / (√P_upper - √P_lower)  # token1 기준
    L = Δx * √P_lower * √P_upper / (√P_upper - √P_lower)  # token0 기준
"""

from ..constants import Q96, UINT128_MAX
from ..errors import InsufficientLiquidity, Overflow


def max_liquidity_for_amount0_imprecise(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int
) -> int:
    """amount0에서 유동성 계산 (라우터와 같은 부정확한 순서)

    √P_a * √P_b / 2^96을 먼저 내림한 뒤 amount0를 곱합니다.
    온체인 라우터가 실제로 민트하는 유동성과 일치합니다.

    Args:
        sqrt_ratio_a_x96: 하한 sqrtPriceX96
        sqrt_ratio_b_x96: 상한 sqrtPriceX96
        amount0: token0 수량

    Returns:
        유동성
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    # Guard against division by zero (identical sqrt prices)
    if sqrt_ratio_b_x96 <= sqrt_ratio_a_x96:
        return 0

    intermediate = sqrt_ratio_a_x96 * sqrt_ratio_b_x96 // Q96
    return amount0 * intermediate // (sqrt_ratio_b_x96 - sqrt_ratio_a_x96)


def max_liquidity_for_amount0_precise(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int
) -> int:
    """amount0에서 유동성 계산 (전체 정밀도)

    공식: L = Δx * √P_a * √P_b / (2^96 * (√P_b - √P_a))
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    if sqrt_ratio_b_x96 <= sqrt_ratio_a_x96:
        return 0

    numerator = amount0 * sqrt_ratio_a_x96 * sqrt_ratio_b_x96
    denominator = Q96 * (sqrt_ratio_b_x96 - sqrt_ratio_a_x96)
    return numerator // denominator


def max_liquidity_for_amount1(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount1: int
) -> int:
    """amount1에서 유동성 계산

    공식: L = Δy * 2^96 / (√P_b - √P_a)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    if sqrt_ratio_b_x96 <= sqrt_ratio_a_x96:
        return 0

    return amount1 * Q96 // (sqrt_ratio_b_x96 - sqrt_ratio_a_x96)


def max_liquidity_for_amounts(
    sqrt_ratio_current_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int,
    amount1: int,
    use_full_precision: bool
) -> int:
    """토큰 수량에서 민트 가능한 최대 유동성

    가격이 범위 안이면 두 단측 추정치 중 작은 값을 택합니다.

    Args:
        sqrt_ratio_current_x96: 현재 sqrtPriceX96
        sqrt_ratio_a_x96: 하한 sqrtPriceX96
        sqrt_ratio_b_x96: 상한 sqrtPriceX96
        amount0: token0 수량
        amount1: token1 수량
        use_full_precision: False면 라우터와 같은 부정확한 token0 공식 사용

    Returns:
        유동성 (두 제약 조건 중 작은 값)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    liquidity_for_amount0 = (
        max_liquidity_for_amount0_precise if use_full_precision
        else max_liquidity_for_amount0_imprecise
    )

    if sqrt_ratio_current_x96 <= sqrt_ratio_a_x96:
        # 가격이 범위 아래: token0만 사용
        return liquidity_for_amount0(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount0)

    elif sqrt_ratio_current_x96 < sqrt_ratio_b_x96:
        # 가격이 범위 내: 양쪽 토큰 사용, 작은 값 반환
        liquidity0 = liquidity_for_amount0(sqrt_ratio_current_x96, sqrt_ratio_b_x96, amount0)
        liquidity1 = max_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_current_x96, amount1)
        return min(liquidity0, liquidity1)

    else:
        # 가격이 범위 위: token1만 사용
        return max_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount1)


def add_delta(liquidity: int, delta: int) -> int:
    """유동성에 부호 있는 변화량 적용

    Args:
        liquidity: 현재 유동성 (uint128)
        delta: 변화량 (int128)

    Returns:
        새 유동성

    Raises:
        InsufficientLiquidity: 결과가 음수
        Overflow: 결과가 uint128 초과
    """
    result = liquidity + delta
    if result < 0:
        raise InsufficientLiquidity(f"유동성이 음수가 됩니다: {liquidity} + ({delta})")
    if result > UINT128_MAX:
        raise Overflow(f"유동성이 uint128을 초과합니다: {result}")
    return result
