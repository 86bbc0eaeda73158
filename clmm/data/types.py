"""
CLMM 데이터 타입 정의

틱 데이터 소스가 넘겨주는 레코드와, 여러 값을 함께 반환하는 결과 타입.
모든 숫자 필드는 온체인 정밀도를 위해 int 타입 사용.
"""

from dataclasses import dataclass
from typing import NamedTuple, Union, Tuple, Mapping, Any

from ..errors import InvalidTickList
from ..math.tick_math import check_tick


@dataclass(frozen=True)
class TickInfo:
    """Tick-Indexed State

    - index: 틱 인덱스
    - liquidity_net: 틱 크로싱 시 유동성 변화량 (ΔL, 왼쪽→오른쪽 기준)
    - liquidity_gross: 해당 틱을 경계로 하는 총 유동성 (0이면 미초기화)
    """
    index: int
    liquidity_net: int
    liquidity_gross: int

    def __post_init__(self):
        check_tick(self.index)
        if self.liquidity_gross < 0:
            raise ValueError(f"liquidity_gross는 음수일 수 없습니다: {self.liquidity_gross}")
        if abs(self.liquidity_net) > self.liquidity_gross:
            raise InvalidTickList(
                f"틱 {self.index}의 |liquidity_net| {abs(self.liquidity_net)}이 liquidity_gross {self.liquidity_gross}보다 큽니다"
            )

    @property
    def initialized(self) -> bool:
        return self.liquidity_gross > 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TickInfo":
        return cls(
            index=int(data["tickIdx"]),
            liquidity_net=int(data.get("liquidityNet", 0)),
            liquidity_gross=int(data.get("liquidityGross", 0)),
        )

    @classmethod
    def coerce(cls, value: "TickLike") -> "TickInfo":
        """TickInfo, (tick, net, gross) 튜플, 또는 subgraph 형식 dict를 TickInfo로 변환"""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        index, liquidity_net, liquidity_gross = value
        return cls(index=int(index), liquidity_net=int(liquidity_net), liquidity_gross=int(liquidity_gross))


TickLike = Union[TickInfo, Tuple[int, int, int], Mapping[str, Any]]


class TokenAmounts(NamedTuple):
    """token0/token1 수량 쌍 (최소 단위)"""
    amount0: int
    amount1: int


class NextTick(NamedTuple):
    """다음 초기화 틱 탐색 결과"""
    tick: int  # 찾은 틱 또는 word 경계
    initialized: bool  # False면 word 경계 (다음 word부터 다시 탐색)
