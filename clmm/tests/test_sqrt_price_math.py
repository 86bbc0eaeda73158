"""
Sqrt Price Math 테스트

가격 이동과 토큰 변화량 계산을 온체인 테스트 벡터와 비교합니다.
"""

import pytest
from hypothesis import given, strategies as st, settings

from ..math.sqrt_price_math import (
    encode_sqrt_ratio_x96,
    get_amount0_delta,
    get_amount1_delta,
    get_next_sqrt_price_from_input,
    get_next_sqrt_price_from_output,
)
from ..constants import MIN_SQRT_RATIO, MAX_SQRT_RATIO, Q96, UINT256_MAX
from ..errors import (
    AmountExceedsAvailableLiquidity,
    DivisionByZero,
    InsufficientLiquidity,
    PriceOutOfRange,
)

E18 = 10 ** 18
# price = 256 (sqrtPrice = 16)
PRICE_256 = 20282409603651670423947251286016


class TestEncodeSqrtRatio:
    """encode_sqrt_ratio_x96 테스트"""

    def test_one_to_one(self):
        assert encode_sqrt_ratio_x96(1, 1) == Q96

    def test_hundred_to_one(self):
        assert encode_sqrt_ratio_x96(100, 1) == 792281625142643375935439503360

    def test_one_to_hundred(self):
        assert encode_sqrt_ratio_x96(1, 100) == 7922816251426433759354395033

    def test_usdc_weth_style(self):
        """6자리/18자리 소수 토큰 비율"""
        assert encode_sqrt_ratio_x96(100 * 10 ** 6, 100 * E18) == 79228162514264337593543

    def test_zero_denominator(self):
        with pytest.raises(DivisionByZero):
            encode_sqrt_ratio_x96(1, 0)


class TestGetNextSqrtPriceFromInput:
    """get_next_sqrt_price_from_input 테스트"""

    def test_zero_price(self):
        with pytest.raises(PriceOutOfRange):
            get_next_sqrt_price_from_input(0, 1, E18 // 10, False)

    def test_zero_liquidity(self):
        with pytest.raises(InsufficientLiquidity):
            get_next_sqrt_price_from_input(1, 0, E18 // 10, True)

    def test_zero_amount_returns_input_price(self):
        """입력량 0이면 가격 그대로"""
        assert get_next_sqrt_price_from_input(Q96, E18, 0, True) == Q96
        assert get_next_sqrt_price_from_input(Q96, E18, 0, False) == Q96

    def test_token1_input(self):
        """token1 0.1개 입력 (가격 상승)"""
        result = get_next_sqrt_price_from_input(Q96, E18, E18 // 10, False)
        assert result == 87150978765690771352898345369

    def test_token0_input(self):
        """token0 0.1개 입력 (가격 하락)"""
        result = get_next_sqrt_price_from_input(Q96, E18, E18 // 10, True)
        assert result == 72025602285694852357767227579

    def test_token0_input_gt_uint96(self):
        """입력량이 2^96보다 큰 경우"""
        result = get_next_sqrt_price_from_input(Q96, 10 * E18, 2 ** 100, True)
        assert result == 624999999995069620

    def test_token0_input_huge(self):
        """입력량이 매우 크면 최소 가격 1로 수렴"""
        result = get_next_sqrt_price_from_input(Q96, 1, UINT256_MAX // 2, True)
        assert result == 1


class TestGetNextSqrtPriceFromOutput:
    """get_next_sqrt_price_from_output 테스트"""

    def test_zero_price(self):
        with pytest.raises(PriceOutOfRange):
            get_next_sqrt_price_from_output(0, 1, E18 // 10, False)

    def test_zero_liquidity(self):
        with pytest.raises(AmountExceedsAvailableLiquidity):
            get_next_sqrt_price_from_output(1, 0, E18 // 10, True)

    def test_output_equals_virtual_reserves_of_token0(self):
        """token0 가상 reserve(4)만큼 출력은 불가"""
        with pytest.raises(AmountExceedsAvailableLiquidity):
            get_next_sqrt_price_from_output(PRICE_256, 1024, 4, False)

    def test_output_greater_than_virtual_reserves_of_token0(self):
        with pytest.raises(AmountExceedsAvailableLiquidity):
            get_next_sqrt_price_from_output(PRICE_256, 1024, 5, False)

    def test_output_equals_virtual_reserves_of_token1(self):
        """token1 가상 reserve(262144)만큼 출력은 불가"""
        with pytest.raises(AmountExceedsAvailableLiquidity):
            get_next_sqrt_price_from_output(PRICE_256, 1024, 262144, True)

    def test_output_greater_than_virtual_reserves_of_token1(self):
        with pytest.raises(AmountExceedsAvailableLiquidity):
            get_next_sqrt_price_from_output(PRICE_256, 1024, 262145, True)

    def test_output_just_less_than_virtual_reserves_of_token1(self):
        """token1 reserve 직전까지는 출력 가능"""
        result = get_next_sqrt_price_from_output(PRICE_256, 1024, 262143, True)
        assert result == 77371252455336267181195264

    def test_output_below_min_sqrt_ratio(self):
        """결과 가격이 MIN_SQRT_RATIO 아래면 출력 불가"""
        with pytest.raises(AmountExceedsAvailableLiquidity):
            get_next_sqrt_price_from_output(MIN_SQRT_RATIO + 1, Q96, 2, True)

    def test_zero_amount_returns_input_price(self):
        assert get_next_sqrt_price_from_output(Q96, E18, 0, True) == Q96
        assert get_next_sqrt_price_from_output(Q96, E18, 0, False) == Q96

    def test_token1_output(self):
        """token1 0.1개 출력 (가격 하락)"""
        result = get_next_sqrt_price_from_output(Q96, E18, E18 // 10, True)
        assert result == 71305346262837903834189555302

    def test_token0_output(self):
        """token0 0.1개 출력 (가격 상승)"""
        result = get_next_sqrt_price_from_output(Q96, E18, E18 // 10, False)
        assert result == 88031291682515930659493278152


class TestGetAmountDeltas:
    """get_amount0_delta, get_amount1_delta 테스트"""

    def test_amount0_zero_liquidity(self):
        assert get_amount0_delta(Q96, encode_sqrt_ratio_x96(2, 1), 0, True) == 0

    def test_amount0_equal_prices(self):
        assert get_amount0_delta(Q96, Q96, E18, True) == 0

    def test_amount0_rounding(self):
        """price 1 → 1.21 구간의 amount0 (올림/내림)"""
        sqrt_b = encode_sqrt_ratio_x96(121, 100)
        assert get_amount0_delta(Q96, sqrt_b, E18, True) == 90909090909090910
        assert get_amount0_delta(Q96, sqrt_b, E18, False) == 90909090909090909

    def test_amount1_rounding(self):
        """price 1 → 1.21 구간의 amount1 (올림/내림)"""
        sqrt_b = encode_sqrt_ratio_x96(121, 100)
        assert get_amount1_delta(Q96, sqrt_b, E18, True) == 100000000000000000
        assert get_amount1_delta(Q96, sqrt_b, E18, False) == 99999999999999999

    def test_amount1_zero_liquidity(self):
        assert get_amount1_delta(Q96, encode_sqrt_ratio_x96(2, 1), 0, True) == 0

    def test_swap_order(self):
        """sqrt 순서가 바뀌어도 결과 동일"""
        sqrt_b = encode_sqrt_ratio_x96(121, 100)
        assert get_amount0_delta(sqrt_b, Q96, E18, True) == get_amount0_delta(Q96, sqrt_b, E18, True)
        assert get_amount1_delta(sqrt_b, Q96, E18, False) == get_amount1_delta(Q96, sqrt_b, E18, False)

    def test_zero_price(self):
        with pytest.raises(PriceOutOfRange):
            get_amount0_delta(0, Q96, E18, False)

    @given(
        a=st.integers(min_value=MIN_SQRT_RATIO, max_value=MAX_SQRT_RATIO - 1),
        b=st.integers(min_value=MIN_SQRT_RATIO, max_value=MAX_SQRT_RATIO - 1),
        liquidity=st.integers(min_value=0, max_value=2 ** 128 - 1),
    )
    @settings(max_examples=200)
    def test_round_up_within_one(self, a, b, liquidity):
        """올림 결과는 내림 결과 이상이고 차이는 최대 1"""
        down0 = get_amount0_delta(a, b, liquidity, False)
        up0 = get_amount0_delta(a, b, liquidity, True)
        assert 0 <= up0 - down0 <= 1

        down1 = get_amount1_delta(a, b, liquidity, False)
        up1 = get_amount1_delta(a, b, liquidity, True)
        assert 0 <= up1 - down1 <= 1


class TestSwapComputation:
    """입력량 → 가격 → 입력량 일관성"""

    def test_sqrt_p_times_sqrt_q_overflows(self):
        """매우 큰 가격에서도 올림 amount0가 계산됨"""
        sqrt_p = 1025574284609383690408304870162715216695788925244
        liquidity = 50015962439936049619261659728067971248
        sqrt_q = get_next_sqrt_price_from_input(sqrt_p, liquidity, 406, True)
        assert sqrt_q == 1025574284609383582644711336373707553698163132913

        amount0_delta = get_amount0_delta(sqrt_q, sqrt_p, liquidity, True)
        assert amount0_delta == 406


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
