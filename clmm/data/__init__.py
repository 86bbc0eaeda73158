"""
Data layer for CLMM

틱 레지스트리, 풀 스냅샷, 포지션 및 데이터 타입 정의
"""

from .types import TickInfo, TokenAmounts, NextTick
from .tick_provider import TickDataProvider, NoTickDataProvider, TickListDataProvider
from .pool import PoolState
from .position import Position, amounts_for_liquidity
