"""
Swap Math - 단일 스왑 스텝 계산

현재 가격에서 목표 가격(다음 틱 경계 또는 가격 제한)까지 한 구간의 스왑을
계산합니다. 여러 틱을 넘는 스왑은 외부 라우팅 루프가 이 함수를 틱마다
반복 호출합니다.

References:
- Uniswap V3 Core: contracts/libraries/SwapMath.sol

부호 규칙:
    amount_remaining >= 0: exact input (남은 입력량)
    amount_remaining < 0: exact output (-남은 출력량)
"""

import logging
from typing import NamedTuple

from ..constants import MAX_FEE
from ..errors import InvalidFeeTier
from .full_math import mul_div, mul_div_rounding_up
from .sqrt_price_math import (
    get_amount0_delta,
    get_amount1_delta,
    get_next_sqrt_price_from_input,
    get_next_sqrt_price_from_output,
)

logger = logging.getLogger(__name__)


class SwapStepResult(NamedTuple):
    """스왑 스텝 결과"""
    sqrt_ratio_next_x96: int  # 스텝 후 가격
    amount_in: int  # 입력량 (수수료 제외)
    amount_out: int  # 출력량
    fee_amount: int  # 수수료


def compute_swap_step(
    sqrt_ratio_current_x96: int,
    sqrt_ratio_target_x96: int,
    liquidity: int,
    amount_remaining: int,
    fee_pips: int
) -> SwapStepResult:
    """한 스텝의 스왑 결과 계산

    방향은 가격 비교로 정합니다 (current >= target 이면 zero_for_one).
    다음 가격을 정한 뒤 amount_in/amount_out은 실제 가격 이동으로 다시
    계산하므로 반환값은 항상 반환 가격과 일치합니다.

    Args:
        sqrt_ratio_current_x96: 현재 sqrtPriceX96
        sqrt_ratio_target_x96: 목표 sqrtPriceX96 (넘어가지 않음)
        liquidity: 활성 유동성
        amount_remaining: 남은 입력량(>= 0) 또는 -남은 출력량(< 0)
        fee_pips: 수수료 (1/100 bip, 분모 10^6)

    Returns:
        SwapStepResult(sqrt_ratio_next_x96, amount_in, amount_out, fee_amount)
    """
    if fee_pips < 0 or fee_pips >= MAX_FEE:
        raise InvalidFeeTier(f"수수료는 0 이상 {MAX_FEE} 미만이어야 합니다: {fee_pips}")

    zero_for_one = sqrt_ratio_current_x96 >= sqrt_ratio_target_x96
    exact_in = amount_remaining >= 0

    amount_in = 0
    amount_out = 0

    if exact_in:
        # 수수료 선공제
        amount_remaining_less_fee = mul_div(amount_remaining, MAX_FEE - fee_pips, MAX_FEE)
        if zero_for_one:
            amount_in = get_amount0_delta(sqrt_ratio_target_x96, sqrt_ratio_current_x96, liquidity, True)
        else:
            amount_in = get_amount1_delta(sqrt_ratio_current_x96, sqrt_ratio_target_x96, liquidity, True)

        if amount_remaining_less_fee >= amount_in:
            sqrt_ratio_next_x96 = sqrt_ratio_target_x96
        else:
            sqrt_ratio_next_x96 = get_next_sqrt_price_from_input(
                sqrt_ratio_current_x96,
                liquidity,
                amount_remaining_less_fee,
                zero_for_one
            )
    else:
        if zero_for_one:
            amount_out = get_amount1_delta(sqrt_ratio_target_x96, sqrt_ratio_current_x96, liquidity, False)
        else:
            amount_out = get_amount0_delta(sqrt_ratio_current_x96, sqrt_ratio_target_x96, liquidity, False)

        if -amount_remaining >= amount_out:
            sqrt_ratio_next_x96 = sqrt_ratio_target_x96
        else:
            sqrt_ratio_next_x96 = get_next_sqrt_price_from_output(
                sqrt_ratio_current_x96,
                liquidity,
                -amount_remaining,
                zero_for_one
            )

    reached_target = sqrt_ratio_next_x96 == sqrt_ratio_target_x96

    # 실제 가격 이동으로 입출력량 재계산
    if zero_for_one:
        if not (reached_target and exact_in):
            amount_in = get_amount0_delta(sqrt_ratio_next_x96, sqrt_ratio_current_x96, liquidity, True)
        if not (reached_target and not exact_in):
            amount_out = get_amount1_delta(sqrt_ratio_next_x96, sqrt_ratio_current_x96, liquidity, False)
    else:
        if not (reached_target and exact_in):
            amount_in = get_amount1_delta(sqrt_ratio_current_x96, sqrt_ratio_next_x96, liquidity, True)
        if not (reached_target and not exact_in):
            amount_out = get_amount0_delta(sqrt_ratio_current_x96, sqrt_ratio_next_x96, liquidity, False)

    # exact output은 요청량을 넘지 않음
    if not exact_in and amount_out > -amount_remaining:
        amount_out = -amount_remaining

    if exact_in and not reached_target:
        # 목표에 못 미쳤으면 남은 입력 전부가 수수료
        fee_amount = amount_remaining - amount_in
    else:
        fee_amount = mul_div_rounding_up(amount_in, fee_pips, MAX_FEE - fee_pips)

    logger.debug(
        "swap step: zero_for_one=%s exact_in=%s reached_target=%s amount_in=%d amount_out=%d fee=%d",
        zero_for_one, exact_in, reached_target, amount_in, amount_out, fee_amount
    )

    return SwapStepResult(
        sqrt_ratio_next_x96=sqrt_ratio_next_x96,
        amount_in=amount_in,
        amount_out=amount_out,
        fee_amount=fee_amount
    )
