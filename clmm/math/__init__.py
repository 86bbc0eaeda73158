"""
Math layer for CLMM

온체인 수준 정밀도의 수학 함수들:
- full_math: 오버플로우 없는 곱셈/나눗셈
- tick_math: Tick ↔ sqrtPriceX96 변환
- sqrt_price_math: 가격 이동과 토큰 변화량
- liquidity_math: 유동성 계산
- swap_math: 단일 스왑 스텝
"""

from .full_math import (
    mul_div,
    mul_div_rounding_up,
    div_rounding_up,
)
from .tick_math import (
    check_tick,
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    nearest_usable_tick,
    get_tick_spacing_for_fee,
)
from .sqrt_price_math import (
    encode_sqrt_ratio_x96,
    get_amount0_delta,
    get_amount1_delta,
    get_next_sqrt_price_from_input,
    get_next_sqrt_price_from_output,
)
from .liquidity_math import (
    max_liquidity_for_amount0_imprecise,
    max_liquidity_for_amount0_precise,
    max_liquidity_for_amount1,
    max_liquidity_for_amounts,
    add_delta,
)
from .swap_math import (
    SwapStepResult,
    compute_swap_step,
)
