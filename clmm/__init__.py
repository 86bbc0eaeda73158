"""
Concentrated Liquidity Pricing Engine

온체인 수준 정밀도로 집중화된 유동성 AMM의 가격/수량을 계산하는 라이브러리.
틱 ↔ 가격 변환, 단일 스왑 스텝, 틱 비트맵 탐색, 포지션 수량과 슬리피지 한도.
풀 상태는 읽기 전용 스냅샷이며 어떤 연산도 상태를 변경하지 않습니다.
"""

__version__ = "0.1.0"
__author__ = "Zekiya"

from .constants import (
    Q96,
    FeeAmount,
    FEE_TIERS,
    TICK_SPACINGS,
    MIN_TICK,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MAX_SQRT_RATIO,
)
from .data import PoolState, Position, TickInfo, TickListDataProvider, TokenAmounts
from .errors import CLMMError
