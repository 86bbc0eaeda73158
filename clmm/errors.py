"""
CLMM 오류 정의

모든 오류는 CLMMError를 상속하며, 가장 가까운 내장 예외도 함께 상속합니다.
오류는 발생 지점에서 즉시 raise되며 내부에서 재시도하지 않습니다.
"""


class CLMMError(Exception):
    """CLMM 코어 오류"""
    pass


class InvalidTickRange(CLMMError, ValueError):
    """tick_lower >= tick_upper"""
    pass


class InvalidTickSpacing(CLMMError, ValueError):
    """틱이 틱 간격의 배수가 아님"""
    pass


class TickOutOfRange(CLMMError, ValueError):
    """틱이 [MIN_TICK, MAX_TICK] 범위를 벗어남"""
    pass


class TickBelowMinimum(TickOutOfRange):
    """틱 < MIN_TICK"""
    pass


class TickAboveMaximum(TickOutOfRange):
    """틱 > MAX_TICK"""
    pass


class PriceOutOfRange(CLMMError, ValueError):
    """sqrtPriceX96이 유효 범위를 벗어남"""
    pass


class DivisionByZero(CLMMError, ZeroDivisionError):
    """분모가 0"""
    pass


class Overflow(CLMMError, OverflowError):
    """결과가 표현 가능한 정수 폭을 초과"""
    pass


class InsufficientLiquidity(CLMMError, ValueError):
    """유동성 부족 (0 유동성에 입력, 또는 음수 유동성)"""
    pass


class AmountExceedsAvailableLiquidity(CLMMError, ValueError):
    """요청한 출력량을 현재 유동성으로 충족할 수 없음"""
    pass


class TickNotFound(CLMMError, LookupError):
    """레지스트리에 해당 틱이 없음"""
    pass


class InvalidFeeTier(CLMMError, ValueError):
    """지원하지 않는 수수료"""
    pass


class InvalidTickList(CLMMError, ValueError):
    """틱 목록이 정렬되지 않았거나 net 유동성 합이 0이 아님"""
    pass


class InvalidSlippageTolerance(CLMMError, ValueError):
    """슬리피지 허용치가 [0, 1] 범위 밖이거나 float"""
    pass


class InsufficientSeedLiquidity(CLMMError, ValueError):
    """풀 생성 시 시드 유동성이 최소값 미만"""
    pass
