"""
Tick Math - Tick ↔ sqrtPriceX96 변환

틱 인덱스와 Q64.96 sqrtPrice 사이의 전단사 변환. 온체인 컨트랙트와
동일한 정밀도로 정수 연산만 사용합니다.

References:
- Uniswap V3 Core: contracts/libraries/TickMath.sol

핵심 공식:
    sqrtPriceX96 = sqrt(1.0001^tick) * 2^96
    tick = floor(log_sqrt(1.0001)(sqrtPriceX96 / 2^96))
"""

from ..constants import (
    MIN_TICK,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MAX_SQRT_RATIO,
    FEE_TIERS,
    TICK_SPACINGS,
    UINT256_MAX,
)
from ..errors import (
    InvalidFeeTier,
    InvalidTickSpacing,
    PriceOutOfRange,
    TickAboveMaximum,
    TickBelowMinimum,
)


# |tick|의 각 비트 i에 대응하는 1/sqrt(1.0001)^(2^i) (Q128.128)
_RATIO_FACTORS = (
    0xfffcb933bd6fad37aa2d162d1a594001,
    0xfff97272373d413259a46990580e213a,
    0xfff2e50f5f656932ef12357cf3c7fdcc,
    0xffe5caca7e10e4e61c3624eaa0941cd0,
    0xffcb9843d60f6159c9db58835c926644,
    0xff973b41fa98c081472e6896dfb254c0,
    0xff2ea16466c96a3843ec78b326b52861,
    0xfe5dee046a99a2a811c461f1969c3053,
    0xfcbe86c7900a88aedcffc83b479aa3a4,
    0xf987a7253ac413176f2b074cf7815e54,
    0xf3392b0822b70005940c7a398e4b70f3,
    0xe7159475a2c29b7443b29c7fa6e889d9,
    0xd097f3bdfd2022b8845ad8f792aa5825,
    0xa9f746462d870fdf8a65dc1f90e061e5,
    0x70d869a156d2a1b890bb3df62baf32f7,
    0x31be135f97d08fd981231505542fcfa6,
    0x9aa508b5b7a84e1c677de54f3e99bc9,
    0x5d6af8dedb81196699c329225ee604,
    0x2216e584f5fa1ea926041bedfe98,
    0x48a170391f7dc42444e8fa2,
)

# log_sqrt(1.0001)(2) * 2^64, 그리고 tick 추정 오차 보정값 (Q128.128)
_LOG_SQRT10001_MULTIPLIER = 255738958999603826347141
_TICK_LOW_ERROR = 3402992956809132418596140100660247210
_TICK_HIGH_ERROR = 291339464771989622907027621153398088495


def check_tick(tick: int) -> None:
    """틱이 [MIN_TICK, MAX_TICK] 범위인지 검사

    Raises:
        TickBelowMinimum: tick < MIN_TICK
        TickAboveMaximum: tick > MAX_TICK
    """
    if tick < MIN_TICK:
        raise TickBelowMinimum(f"틱이 최소값보다 작습니다: {tick} (최소: {MIN_TICK})")
    if tick > MAX_TICK:
        raise TickAboveMaximum(f"틱이 최대값보다 큽니다: {tick} (최대: {MAX_TICK})")


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """틱에서 sqrtPriceX96 계산

    |tick|의 비트마다 미리 계산된 보정 계수를 곱해 1.0001^(-|tick|/2)를
    Q128.128로 구하고, 양수 틱이면 역수를 취합니다. Q64.96으로 내릴 때
    나머지가 있으면 1을 올려 틱 경계 가격을 과소평가하지 않습니다.

    Args:
        tick: 틱 인덱스 (-887272 ~ 887272)

    Returns:
        sqrtPriceX96 (Q64.96 형식)

    Raises:
        TickOutOfRange: 틱이 유효 범위를 벗어난 경우
    """
    check_tick(tick)

    abs_tick = abs(tick)

    ratio = 1 << 128
    for bit, factor in enumerate(_RATIO_FACTORS):
        if abs_tick & (1 << bit):
            ratio = (ratio * factor) >> 128

    if tick > 0:
        ratio = UINT256_MAX // ratio

    # Q128.128 -> Q64.96
    return (ratio >> 32) + (1 if ratio % (1 << 32) != 0 else 0)


def get_tick_at_sqrt_ratio(sqrt_price_x96: int) -> int:
    """sqrtPriceX96에서 틱 계산

    get_sqrt_ratio_at_tick(tick) <= sqrt_price_x96 인 가장 큰 틱을 반환합니다.

    Args:
        sqrt_price_x96: sqrtPriceX96 (Q64.96 형식)

    Returns:
        틱 인덱스

    Raises:
        PriceOutOfRange: sqrtPriceX96이 [MIN_SQRT_RATIO, MAX_SQRT_RATIO) 밖인 경우
    """
    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise PriceOutOfRange(
            f"sqrtPriceX96이 유효 범위를 벗어났습니다: {sqrt_price_x96} "
            f"(범위: {MIN_SQRT_RATIO} ~ {MAX_SQRT_RATIO - 1})"
        )

    ratio = sqrt_price_x96 << 32
    msb = ratio.bit_length() - 1

    if msb >= 128:
        r = ratio >> (msb - 127)
    else:
        r = ratio << (127 - msb)

    log_2 = (msb - 128) << 64

    # 소수부 14비트를 제곱 반복으로 추출
    for i in range(14):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << (63 - i)
        r >>= f

    log_sqrt10001 = log_2 * _LOG_SQRT10001_MULTIPLIER

    tick_low = (log_sqrt10001 - _TICK_LOW_ERROR) >> 128
    tick_high = (log_sqrt10001 + _TICK_HIGH_ERROR) >> 128

    if tick_low == tick_high:
        return tick_low

    if get_sqrt_ratio_at_tick(tick_high) <= sqrt_price_x96:
        return tick_high
    return tick_low


def nearest_usable_tick(tick: int, tick_spacing: int) -> int:
    """틱을 가장 가까운 유효 틱(틱 간격의 배수)으로 반올림

    정확히 중간이면 올림합니다. 결과가 틱 범위를 벗어나면
    한 간격 안쪽으로 되돌립니다.

    Args:
        tick: 반올림할 틱
        tick_spacing: 틱 간격 (예: 60)

    Returns:
        [MIN_TICK, MAX_TICK] 안의 가장 가까운 유효 틱
    """
    if tick_spacing <= 0:
        raise InvalidTickSpacing(f"틱 간격은 양수여야 합니다: {tick_spacing}")
    check_tick(tick)

    lower = (tick // tick_spacing) * tick_spacing
    upper = lower + tick_spacing
    rounded = upper if tick - lower >= upper - tick else lower

    if rounded < MIN_TICK:
        return rounded + tick_spacing
    if rounded > MAX_TICK:
        return rounded - tick_spacing
    return rounded


def get_tick_spacing_for_fee(fee_tier: int) -> int:
    """수수료 티어에 해당하는 틱 간격 반환

    Args:
        fee_tier: 수수료 티어 (1, 5, 30, 100)

    Returns:
        틱 간격
    """
    if fee_tier not in FEE_TIERS:
        raise InvalidFeeTier(f"지원하지 않는 수수료 티어: {fee_tier}")
    return TICK_SPACINGS[fee_tier]
