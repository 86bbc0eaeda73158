"""
CLMM 상수 정의

온체인 수준 정밀도를 위한 상수들:
- Q96: sqrt price 인코딩에 사용 (2^96)
- FEE_TIERS: 지원되는 수수료 티어
- TICK_SPACINGS: 각 수수료 티어별 틱 간격
- MIN/MAX_TICK, MIN/MAX_SQRT_RATIO: 틱/가격 범위
"""

from enum import IntEnum
from typing import Dict

# Fixed-point 인코딩 상수
Q96: int = 2 ** 96
Q192: int = 2 ** 192
RESOLUTION: int = 96


class FeeAmount(IntEnum):
    """수수료 티어 (1/100 bip 단위, 분모 10^6)"""
    LOWEST = 1
    LOW = 5
    MEDIUM = 30
    HIGH = 100


# 수수료 티어 (분모 MAX_FEE = 10^6)
FEE_TIERS: Dict[int, str] = {
    FeeAmount.LOWEST: "0.0001%",
    FeeAmount.LOW: "0.0005%",
    FeeAmount.MEDIUM: "0.003%",
    FeeAmount.HIGH: "0.01%",
}

# 각 수수료 티어별 틱 간격
TICK_SPACINGS: Dict[int, int] = {
    FeeAmount.LOWEST: 1,
    FeeAmount.LOW: 10,
    FeeAmount.MEDIUM: 60,
    FeeAmount.HIGH: 200,
}

# 수수료 분모
MAX_FEE: int = 10 ** 6

# 풀 생성 시 최소 시드 유동성
MIN_LIQUIDITY: int = 100000

# 틱 범위 상수
MIN_TICK: int = -887272
MAX_TICK: int = 887272

# getSqrtRatioAtTick(MIN_TICK), getSqrtRatioAtTick(MAX_TICK)
MIN_SQRT_RATIO: int = 4295128739
MAX_SQRT_RATIO: int = 1461446703485210103287273052203988822378723970342

# 틱 비트맵 한 word의 비트 수
WORD_SIZE: int = 256

# 정수 폭
UINT256_MAX: int = 2 ** 256 - 1
UINT160_MAX: int = 2 ** 160 - 1
UINT128_MAX: int = 2 ** 128 - 1
