"""
Pool State - 풀 스냅샷

현재 가격, 활성 유동성, 현재 틱, 틱 레지스트리를 묶는 읽기 전용 스냅샷.
코어의 어떤 연산도 풀 상태를 변경하지 않으며, 호출자가 계산된 변화량을
외부에서 적용합니다.
"""

import logging
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Iterable, Optional, Union

from .. import config
from ..constants import MAX_SQRT_RATIO, MAX_TICK, Q192
from ..errors import InsufficientSeedLiquidity, PriceOutOfRange
from ..math.liquidity_math import add_delta
from ..math.tick_math import get_sqrt_ratio_at_tick, get_tick_at_sqrt_ratio, get_tick_spacing_for_fee
from .tick_provider import NoTickDataProvider, TickDataProvider, TickListDataProvider
from .types import TickLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolState:
    """풀 스냅샷 (Global State)

    - token0, token1: 토큰 식별자 (불투명 값)
    - fee: 수수료 티어 (1, 5, 30, 100)
    - sqrt_ratio_x96: 현재 √가격 (Q96 인코딩)
    - liquidity: 현재 가격에서 활성화된 총 유동성 (L)
    - tick_current: 현재 틱 인덱스 (i_c)
    - ticks: 틱 레지스트리
    """
    token0: str
    token1: str
    fee: int
    sqrt_ratio_x96: int
    liquidity: int
    tick_current: int
    ticks: TickDataProvider = field(default_factory=NoTickDataProvider, compare=False)

    def __post_init__(self):
        get_tick_spacing_for_fee(self.fee)

        if self.liquidity < 0:
            raise ValueError(f"유동성은 음수일 수 없습니다: {self.liquidity}")

        # get_sqrt_ratio_at_tick(tick) <= sqrt_ratio < get_sqrt_ratio_at_tick(tick + 1)
        lower = get_sqrt_ratio_at_tick(self.tick_current)
        upper = get_sqrt_ratio_at_tick(self.tick_current + 1) if self.tick_current < MAX_TICK else MAX_SQRT_RATIO
        if not lower <= self.sqrt_ratio_x96 < upper:
            raise PriceOutOfRange(
                f"sqrtPriceX96 {self.sqrt_ratio_x96}이 틱 {self.tick_current}의 가격 구간 "
                f"[{lower}, {upper}) 밖입니다"
            )

    @classmethod
    def from_snapshot(
        cls,
        token0: str,
        token1: str,
        fee: int,
        sqrt_ratio_x96: int,
        liquidity: int,
        tick_current: Optional[int] = None,
        ticks: Union[TickDataProvider, Iterable[TickLike], None] = None
    ) -> "PoolState":
        """외부에서 읽어 온 스냅샷으로 풀 생성

        Args:
            tick_current: None이면 sqrt_ratio_x96에서 계산
            ticks: TickDataProvider 또는 (tick, net, gross) 목록. None이면 틱 데이터 없음
        """
        if tick_current is None:
            tick_current = get_tick_at_sqrt_ratio(sqrt_ratio_x96)

        if ticks is None:
            provider: TickDataProvider = NoTickDataProvider()
        elif isinstance(ticks, TickDataProvider):
            provider = ticks
        else:
            provider = TickListDataProvider(ticks, get_tick_spacing_for_fee(fee))

        return cls(
            token0=token0,
            token1=token1,
            fee=fee,
            sqrt_ratio_x96=sqrt_ratio_x96,
            liquidity=liquidity,
            tick_current=tick_current,
            ticks=provider,
        )

    @classmethod
    def create(
        cls,
        token0: str,
        token1: str,
        fee: int,
        sqrt_ratio_x96: int,
        seed_liquidity: int,
        ticks: Union[TickDataProvider, Iterable[TickLike], None] = None
    ) -> "PoolState":
        """새 풀 생성 (시드 유동성 최소값 검사)

        Raises:
            InsufficientSeedLiquidity: seed_liquidity < config.settings.MIN_SEED_LIQUIDITY
        """
        if seed_liquidity < config.settings.MIN_SEED_LIQUIDITY:
            raise InsufficientSeedLiquidity(
                f"시드 유동성이 최소값보다 작습니다: {seed_liquidity} (최소: {config.settings.MIN_SEED_LIQUIDITY})"
            )
        pool = cls.from_snapshot(token0, token1, fee, sqrt_ratio_x96, seed_liquidity, ticks=ticks)
        logger.debug(
            "pool created: %s/%s fee=%d tick=%d liquidity=%d",
            token0, token1, fee, pool.tick_current, seed_liquidity
        )
        return pool

    @property
    def tick_spacing(self) -> int:
        return get_tick_spacing_for_fee(self.fee)

    @property
    def token0_price(self) -> Fraction:
        """token0 1단위의 token1 가격 (정확한 유리수)"""
        return Fraction(self.sqrt_ratio_x96 * self.sqrt_ratio_x96, Q192)

    @property
    def token1_price(self) -> Fraction:
        """token1 1단위의 token0 가격 (정확한 유리수)"""
        return Fraction(Q192, self.sqrt_ratio_x96 * self.sqrt_ratio_x96)

    def involves_token(self, token: str) -> bool:
        return token == self.token0 or token == self.token1

    def with_price(self, sqrt_ratio_x96: int) -> "PoolState":
        """같은 풀을 다른 가격으로 본 가상 스냅샷 (유동성 0, 틱 데이터 없음)"""
        return PoolState(
            token0=self.token0,
            token1=self.token1,
            fee=self.fee,
            sqrt_ratio_x96=sqrt_ratio_x96,
            liquidity=0,
            tick_current=get_tick_at_sqrt_ratio(sqrt_ratio_x96),
        )

    def liquidity_after_cross(self, tick: int, zero_for_one: bool) -> int:
        """틱을 넘은 뒤의 활성 유동성 (상태 변경 없음)

        왼쪽으로 넘을 때(zero_for_one) liquidity_net의 부호를 뒤집습니다.
        """
        liquidity_net = self.ticks.get_tick(tick).liquidity_net
        if zero_for_one:
            liquidity_net = -liquidity_net
        return add_delta(self.liquidity, liquidity_net)
