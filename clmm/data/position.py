"""
Position - 포지션 토큰 수량 계산

(tick_lower, tick_upper, liquidity) 포지션이 풀 스냅샷에서 필요로 하거나
돌려받는 token0/token1 수량을 계산합니다. 포지션은 풀을 변경하지 않는
값 객체입니다.

반올림:
    mint: 올림 (호출자가 최소 이만큼 넣어야 함)
    burn: 내림 (호출자가 최대 이만큼 받음)

슬리피지 한도 계산은 세 단계입니다.
    1. 현재 가격에서 명목 수량 계산
    2. 명목 수량으로 실제 민트될 유동성을 역산 (두 단측 추정치 중 작은 값)
    3. 가격을 ±허용치만큼 옮긴 가상 풀에서 역산한 유동성으로 수량 재계산
수량과 유동성은 반올림 때문에 선형 역변환이 되지 않으므로 2단계가 필요합니다.

References:
- Uniswap V3 SDK: src/entities/position.ts
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Optional, Tuple, Union

from .. import config
from ..constants import MAX_SQRT_RATIO, MIN_SQRT_RATIO, UINT128_MAX, UINT256_MAX
from ..errors import InvalidSlippageTolerance, InvalidTickRange, InvalidTickSpacing, Overflow
from ..math.liquidity_math import max_liquidity_for_amounts
from ..math.sqrt_price_math import encode_sqrt_ratio_x96, get_amount0_delta, get_amount1_delta
from ..math.tick_math import check_tick, get_sqrt_ratio_at_tick
from .pool import PoolState
from .types import TokenAmounts

logger = logging.getLogger(__name__)

SlippageTolerance = Union[Fraction, Decimal, int, str]


def _to_tolerance(value: Optional[SlippageTolerance]) -> Fraction:
    """슬리피지 허용치를 [0, 1] 범위의 Fraction으로 변환 (float 불가)"""
    if value is None:
        value = config.settings.DEFAULT_SLIPPAGE_TOLERANCE
    if isinstance(value, float):
        raise InvalidSlippageTolerance(
            f"float 허용치는 사용할 수 없습니다: {value!r} (Fraction, Decimal 또는 문자열 사용)"
        )
    try:
        tolerance = Fraction(value)
    except (TypeError, ValueError) as e:
        raise InvalidSlippageTolerance(f"슬리피지 허용치를 해석할 수 없습니다: {value!r}") from e

    if tolerance < 0 or tolerance > 1:
        raise InvalidSlippageTolerance(f"슬리피지 허용치는 0 이상 1 이하여야 합니다: {tolerance}")
    return tolerance


@dataclass(frozen=True)
class Position:
    """유동성 포지션

    - pool: 풀 스냅샷
    - tick_lower: 하한 틱 (i_l)
    - tick_upper: 상한 틱 (i_u)
    - liquidity: 포지션 유동성 (l)
    """
    pool: PoolState
    tick_lower: int
    tick_upper: int
    liquidity: int

    def __post_init__(self):
        if self.tick_lower >= self.tick_upper:
            raise InvalidTickRange(
                f"tick_lower는 tick_upper보다 작아야 합니다: {self.tick_lower} >= {self.tick_upper}"
            )
        check_tick(self.tick_lower)
        check_tick(self.tick_upper)

        spacing = self.pool.tick_spacing
        for name, tick in (("tick_lower", self.tick_lower), ("tick_upper", self.tick_upper)):
            if tick % spacing != 0:
                raise InvalidTickSpacing(f"{name} {tick}가 틱 간격 {spacing}의 배수가 아닙니다")

        if self.liquidity < 0:
            raise ValueError(f"유동성은 음수일 수 없습니다: {self.liquidity}")
        if self.liquidity > UINT128_MAX:
            raise Overflow(f"유동성이 uint128을 초과합니다: {self.liquidity}")

    @property
    def sqrt_ratio_lower_x96(self) -> int:
        return get_sqrt_ratio_at_tick(self.tick_lower)

    @property
    def sqrt_ratio_upper_x96(self) -> int:
        return get_sqrt_ratio_at_tick(self.tick_upper)

    def _amounts_at(self, pool: PoolState, liquidity: int, round_up: bool) -> TokenAmounts:
        """주어진 풀 가격과 유동성에서의 토큰 수량

        풀의 현재 틱이 범위 아래면 token0만, 범위 위면 token1만,
        범위 안이면 양쪽 모두.
        """
        sqrt_lower = self.sqrt_ratio_lower_x96
        sqrt_upper = self.sqrt_ratio_upper_x96

        if pool.tick_current < self.tick_lower:
            return TokenAmounts(
                amount0=get_amount0_delta(sqrt_lower, sqrt_upper, liquidity, round_up),
                amount1=0,
            )
        if pool.tick_current < self.tick_upper:
            return TokenAmounts(
                amount0=get_amount0_delta(pool.sqrt_ratio_x96, sqrt_upper, liquidity, round_up),
                amount1=get_amount1_delta(sqrt_lower, pool.sqrt_ratio_x96, liquidity, round_up),
            )
        return TokenAmounts(
            amount0=0,
            amount1=get_amount1_delta(sqrt_lower, sqrt_upper, liquidity, round_up),
        )

    def amounts_for_liquidity(self, round_up: bool = False) -> TokenAmounts:
        """현재 풀 가격에서 포지션 유동성에 해당하는 토큰 수량"""
        return self._amounts_at(self.pool, self.liquidity, round_up)

    @property
    def amount0(self) -> int:
        """현재 보유 token0 (내림)"""
        return self.amounts_for_liquidity(round_up=False).amount0

    @property
    def amount1(self) -> int:
        """현재 보유 token1 (내림)"""
        return self.amounts_for_liquidity(round_up=False).amount1

    @property
    def mint_amounts(self) -> TokenAmounts:
        """포지션을 민트하는 데 필요한 최소 수량 (올림)"""
        return self.amounts_for_liquidity(round_up=True)

    @property
    def burn_amounts(self) -> TokenAmounts:
        """포지션을 소각하면 받는 최대 수량 (내림)"""
        return self.amounts_for_liquidity(round_up=False)

    def ratios_after_slippage(self, slippage_tolerance: Optional[SlippageTolerance] = None) -> Tuple[int, int]:
        """현재 가격을 ±허용치만큼 옮긴 sqrtPriceX96 (lower, upper)

        price = sqrtP^2 / 2^192을 정확한 유리수로 두고
        price * (1 - tol), price * (1 + tol)을 다시 인코딩합니다.
        결과는 (MIN_SQRT_RATIO, MAX_SQRT_RATIO) 안으로 제한됩니다.
        """
        tolerance = _to_tolerance(slippage_tolerance)
        price = self.pool.token0_price

        price_lower = price * (1 - tolerance)
        price_upper = price * (1 + tolerance)

        sqrt_ratio_lower = encode_sqrt_ratio_x96(price_lower.numerator, price_lower.denominator)
        if sqrt_ratio_lower <= MIN_SQRT_RATIO:
            sqrt_ratio_lower = MIN_SQRT_RATIO + 1

        sqrt_ratio_upper = encode_sqrt_ratio_x96(price_upper.numerator, price_upper.denominator)
        if sqrt_ratio_upper >= MAX_SQRT_RATIO:
            sqrt_ratio_upper = MAX_SQRT_RATIO - 1

        logger.debug(
            "slippage bounds: tolerance=%s sqrt_lower=%d sqrt_upper=%d",
            tolerance, sqrt_ratio_lower, sqrt_ratio_upper
        )
        return sqrt_ratio_lower, sqrt_ratio_upper

    def _amounts_with_slippage(self, slippage_tolerance: Optional[SlippageTolerance], round_up: bool) -> TokenAmounts:
        sqrt_ratio_lower, sqrt_ratio_upper = self.ratios_after_slippage(slippage_tolerance)
        pool_lower = self.pool.with_price(sqrt_ratio_lower)
        pool_upper = self.pool.with_price(sqrt_ratio_upper)

        # 라우터가 실제로 민트/소각할 유동성 역산
        nominal = self.amounts_for_liquidity(round_up)
        liquidity = max_liquidity_for_amounts(
            self.pool.sqrt_ratio_x96,
            self.sqrt_ratio_lower_x96,
            self.sqrt_ratio_upper_x96,
            nominal.amount0,
            nominal.amount1,
            use_full_precision=False,
        )

        # amount0는 높은 가격에서, amount1은 낮은 가격에서 가장 작음
        amount0 = self._amounts_at(pool_upper, liquidity, round_up).amount0
        amount1 = self._amounts_at(pool_lower, liquidity, round_up).amount1
        return TokenAmounts(amount0=amount0, amount1=amount1)

    def mint_amounts_with_slippage(self, slippage_tolerance: Optional[SlippageTolerance] = None) -> TokenAmounts:
        """슬리피지 허용치 안에서 민트에 필요한 최소 수량 (올림)

        Args:
            slippage_tolerance: 허용치 (예: Fraction(5, 10000)). None이면 설정 기본값

        Returns:
            TokenAmounts(amount0, amount1)
        """
        return self._amounts_with_slippage(slippage_tolerance, round_up=True)

    def burn_amounts_with_slippage(self, slippage_tolerance: Optional[SlippageTolerance] = None) -> TokenAmounts:
        """슬리피지 허용치 안에서 소각 시 보장되는 최소 수량 (내림)

        같은 포지션과 허용치의 mint_amounts_with_slippage 이하입니다.
        """
        return self._amounts_with_slippage(slippage_tolerance, round_up=False)

    @classmethod
    def from_amounts(
        cls,
        pool: PoolState,
        tick_lower: int,
        tick_upper: int,
        amount0: int,
        amount1: int,
        use_full_precision: bool = True
    ) -> "Position":
        """토큰 수량으로 민트 가능한 최대 유동성의 포지션"""
        liquidity = max_liquidity_for_amounts(
            pool.sqrt_ratio_x96,
            get_sqrt_ratio_at_tick(tick_lower),
            get_sqrt_ratio_at_tick(tick_upper),
            amount0,
            amount1,
            use_full_precision,
        )
        return cls(pool=pool, tick_lower=tick_lower, tick_upper=tick_upper, liquidity=liquidity)

    @classmethod
    def from_amount0(
        cls,
        pool: PoolState,
        tick_lower: int,
        tick_upper: int,
        amount0: int,
        use_full_precision: bool = True
    ) -> "Position":
        """token0 수량만으로 민트 가능한 최대 유동성의 포지션"""
        return cls.from_amounts(pool, tick_lower, tick_upper, amount0, UINT256_MAX, use_full_precision)

    @classmethod
    def from_amount1(cls, pool: PoolState, tick_lower: int, tick_upper: int, amount1: int) -> "Position":
        """token1 수량만으로 민트 가능한 최대 유동성의 포지션 (항상 전체 정밀도)"""
        return cls.from_amounts(pool, tick_lower, tick_upper, UINT256_MAX, amount1, use_full_precision=True)


def amounts_for_liquidity(
    pool: PoolState,
    tick_lower: int,
    tick_upper: int,
    liquidity: int,
    round_up: bool = False
) -> TokenAmounts:
    """풀 스냅샷에서 (tick_lower, tick_upper, liquidity)에 해당하는 토큰 수량

    Raises:
        InvalidTickRange: tick_lower >= tick_upper
        InvalidTickSpacing: 틱이 풀 틱 간격의 배수가 아님
        TickBelowMinimum, TickAboveMaximum: 틱 범위 초과
    """
    position = Position(pool=pool, tick_lower=tick_lower, tick_upper=tick_upper, liquidity=liquidity)
    return position.amounts_for_liquidity(round_up)
