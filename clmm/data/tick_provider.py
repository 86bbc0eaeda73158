"""
Tick Data Provider - 틱 레지스트리

초기화된 틱(liquidity_gross > 0)만 저장하는 희소 레지스트리와,
스왑이 넘을 다음 틱 경계를 찾는 비트맵 기반 검색.

틱 공간은 tick // tick_spacing으로 압축한 뒤 256비트 word 단위로
나뉩니다. 한 번의 검색은 하나의 word 안에서만 이루어지며, 찾지 못하면
word 경계를 initialized=False로 반환합니다.

References:
- Uniswap V3 Core: contracts/libraries/TickBitmap.sol
- Uniswap V3 SDK: src/utils/tickList.ts, src/entities/tickListDataProvider.ts

사용법:
    provider = TickListDataProvider([(-60, 10**18, 10**18), (60, -10**18, 10**18)], 60)
    info = provider.get_tick(-60)
    tick, initialized = provider.next_initialized_tick_within_one_word(0, True, 60)
"""

import logging
from abc import ABC, abstractmethod
from bisect import bisect_right
from typing import Dict, Iterable, List, Tuple

from ..constants import WORD_SIZE
from ..errors import InvalidTickList, InvalidTickSpacing, TickNotFound
from .types import NextTick, TickInfo, TickLike

logger = logging.getLogger(__name__)


class TickDataProvider(ABC):
    """틱 데이터 소스 인터페이스

    스왑 스텝 호출자가 사용하는 두 가지 조회만 요구합니다.
    """

    @abstractmethod
    def get_tick(self, tick: int) -> TickInfo:
        """정확히 해당 인덱스의 틱 정보 반환 (없으면 TickNotFound)"""

    @abstractmethod
    def next_initialized_tick_within_one_word(self, tick: int, lte: bool, tick_spacing: int) -> NextTick:
        """한 word 안에서 다음 초기화 틱 또는 word 경계 반환"""


class NoTickDataProvider(TickDataProvider):
    """틱 데이터 없이 만든 풀의 기본 provider. 모든 조회가 실패합니다."""

    def get_tick(self, tick: int) -> TickInfo:
        raise TickNotFound(f"틱 데이터가 없습니다: {tick}")

    def next_initialized_tick_within_one_word(self, tick: int, lte: bool, tick_spacing: int) -> NextTick:
        raise TickNotFound(f"틱 데이터가 없습니다: {tick}")


def _position(compressed: int) -> Tuple[int, int]:
    """압축 틱 → (word 위치, word 내 비트 위치)"""
    return divmod(compressed, WORD_SIZE)


def _most_significant_bit(x: int) -> int:
    return x.bit_length() - 1


def _least_significant_bit(x: int) -> int:
    return (x & -x).bit_length() - 1


class TickListDataProvider(TickDataProvider):
    """메모리 내 정렬 배열 + 비트맵 기반 틱 레지스트리

    생성 후에는 변경되지 않습니다.
    """

    def __init__(self, ticks: Iterable[TickLike], tick_spacing: int):
        """
        Args:
            ticks: 틱 인덱스 오름차순의 (tick, liquidity_net, liquidity_gross) 목록
            tick_spacing: 풀의 틱 간격

        Raises:
            InvalidTickSpacing: 틱 간격이 양수가 아니거나 틱이 간격의 배수가 아님
            InvalidTickList: 정렬/중복/net 합 조건 위반
        """
        tick_list = [TickInfo.coerce(t) for t in ticks]
        self.validate_list(tick_list, tick_spacing)

        self.tick_spacing = tick_spacing
        # liquidity_gross == 0 인 틱은 레지스트리에 없음
        self._ticks: List[TickInfo] = [t for t in tick_list if t.initialized]
        self._indices: List[int] = [t.index for t in self._ticks]
        self._by_index: Dict[int, TickInfo] = {t.index: t for t in self._ticks}

        self._bitmap: Dict[int, int] = {}
        for t in self._ticks:
            word_pos, bit_pos = _position(t.index // tick_spacing)
            self._bitmap[word_pos] = self._bitmap.get(word_pos, 0) | (1 << bit_pos)

        logger.debug(
            "tick registry built: %d ticks in %d words (spacing=%d)",
            len(self._ticks), len(self._bitmap), tick_spacing
        )

    @staticmethod
    def validate_list(ticks: List[TickInfo], tick_spacing: int) -> None:
        """틱 목록 검증

        - 틱 간격은 양수
        - 모든 틱은 틱 간격의 배수
        - 인덱스 순으로 엄격히 증가
        - liquidity_net 합은 0
        - 각 틱의 |liquidity_net| <= liquidity_gross (TickInfo 생성 시 검사)
        """
        if tick_spacing <= 0:
            raise InvalidTickSpacing(f"틱 간격은 양수여야 합니다: {tick_spacing}")

        for t in ticks:
            if t.index % tick_spacing != 0:
                raise InvalidTickSpacing(f"틱 {t.index}가 틱 간격 {tick_spacing}의 배수가 아닙니다")

        for prev, cur in zip(ticks, ticks[1:]):
            if prev.index >= cur.index:
                raise InvalidTickList(f"틱 목록이 정렬되지 않았습니다: {prev.index} >= {cur.index}")

        net = sum(t.liquidity_net for t in ticks)
        if net != 0:
            raise InvalidTickList(f"liquidity_net 합이 0이 아닙니다: {net}")

    def __len__(self) -> int:
        return len(self._ticks)

    @property
    def ticks(self) -> List[TickInfo]:
        return list(self._ticks)

    def get_tick(self, tick: int) -> TickInfo:
        """해당 인덱스의 틱 정보 (보간 없음)

        Raises:
            TickNotFound: 초기화된 틱이 없는 경우
        """
        try:
            return self._by_index[tick]
        except KeyError:
            raise TickNotFound(f"초기화된 틱이 없습니다: {tick}") from None

    def is_below_smallest(self, tick: int) -> bool:
        if not self._ticks:
            raise TickNotFound("레지스트리가 비어 있습니다")
        return tick < self._indices[0]

    def is_at_or_above_largest(self, tick: int) -> bool:
        if not self._ticks:
            raise TickNotFound("레지스트리가 비어 있습니다")
        return tick >= self._indices[-1]

    def next_initialized_tick(self, tick: int, lte: bool) -> TickInfo:
        """word 제한 없이 다음 초기화 틱 탐색

        lte면 tick 이하의 가장 큰 틱, 아니면 tick 초과의 가장 작은 틱.

        Raises:
            TickNotFound: 해당 방향에 초기화된 틱이 없는 경우
        """
        if lte:
            if self.is_below_smallest(tick):
                raise TickNotFound(f"{tick} 이하의 초기화된 틱이 없습니다")
            return self._ticks[bisect_right(self._indices, tick) - 1]

        if self.is_at_or_above_largest(tick):
            raise TickNotFound(f"{tick} 초과의 초기화된 틱이 없습니다")
        return self._ticks[bisect_right(self._indices, tick)]

    def next_initialized_tick_within_one_word(self, tick: int, lte: bool, tick_spacing: int) -> NextTick:
        """한 word 안에서 다음 초기화 틱 탐색

        lte면 tick을 포함하는 word에서 tick 이하로, 아니면 tick 다음
        압축 틱을 포함하는 word에서 위로 탐색합니다. 찾지 못하면 word
        경계를 initialized=False로 반환하므로, 호출자는 그 경계에서
        다시 호출해 다음 word를 탐색합니다.

        Args:
            tick: 시작 틱
            lte: True면 왼쪽(가격 하락) 방향
            tick_spacing: 틱 간격 (레지스트리 간격과 같아야 함)

        Returns:
            NextTick(tick, initialized)
        """
        if tick_spacing != self.tick_spacing:
            raise InvalidTickSpacing(
                f"레지스트리 틱 간격({self.tick_spacing})과 다릅니다: {tick_spacing}"
            )

        compressed = tick // tick_spacing

        if lte:
            word_pos, bit_pos = _position(compressed)
            # bit_pos 이하의 모든 비트
            mask = (1 << (bit_pos + 1)) - 1
            masked = self._bitmap.get(word_pos, 0) & mask

            if masked:
                next_tick = (compressed - (bit_pos - _most_significant_bit(masked))) * tick_spacing
                return NextTick(next_tick, True)
            return NextTick((compressed - bit_pos) * tick_spacing, False)

        word_pos, bit_pos = _position(compressed + 1)
        # bit_pos 이상의 모든 비트
        mask = ~((1 << bit_pos) - 1)
        masked = self._bitmap.get(word_pos, 0) & mask

        if masked:
            next_tick = (compressed + 1 + (_least_significant_bit(masked) - bit_pos)) * tick_spacing
            return NextTick(next_tick, True)
        return NextTick((compressed + 1 + (WORD_SIZE - 1 - bit_pos)) * tick_spacing, False)
