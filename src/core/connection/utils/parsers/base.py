"""파서 공통 Base 클래스 및 유틸리티.

Strategy Pattern으로 각 거래소 메시지를 표준 OrderBookDTO로 변환합니다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import orjson

from src.core.dto.io.orderbook import OrderBookDTO, PriceLevelDTO
from src.core.types import RawLevel, RawMessage


def decode_embedded(value: Any) -> Any:
    """문자열로 한 번 더 인코딩된 JSON 필드를 풀어냅니다.

    일부 거래소(OKX/Bybit)는 data 필드를 JSON 문자열로 보내는 경우가 있습니다.

    Raises:
        orjson.JSONDecodeError: 문자열이지만 JSON이 아닐 때
    """
    if isinstance(value, (str, bytes)):
        return orjson.loads(value)
    return value


def parse_levels(
    raw_levels: Any, max_levels: int, *, descending: bool
) -> list[PriceLevelDTO]:
    """[price, quantity, ...] 배열 리스트 → 가격순 PriceLevelDTO 리스트 (상위 max_levels개).

    - 문자열/숫자 모두 float로 변환
    - 전체를 가격순 정렬한 뒤 상한 적용 (bids: 내림차순, asks: 오름차순)
    - 수량 0 레벨도 그대로 통과 (델타 적용은 하지 않음)

    Args:
        raw_levels: 거래소 원본 호가 배열
        max_levels: 측면당 최대 레벨 수
        descending: True면 내림차순 (bids)

    Raises:
        TypeError: 배열 형태가 아닐 때
        ValueError / IndexError: 숫자 변환 실패 또는 요소 부족
    """
    if not isinstance(raw_levels, list):
        raise TypeError(f"levels must be a list, got {type(raw_levels).__name__}")

    levels = [_parse_level(item) for item in raw_levels]
    levels.sort(key=lambda level: level.price, reverse=descending)
    return levels[:max_levels]


def _parse_level(item: RawLevel) -> PriceLevelDTO:
    if not isinstance(item, (list, tuple)):
        raise TypeError(f"level must be an array, got {type(item).__name__}")
    # 배열의 [0], [1]만 사용 (price, quantity)
    price = float(item[0])
    quantity = float(item[1])
    return PriceLevelDTO(price=price, quantity=quantity)


class OrderbookParser(ABC):
    """Orderbook 파서 인터페이스.

    can_parse가 False면 호가 메시지가 아닌 것(구독 ACK, 하트비트, 다른 채널)이고,
    parse에서 발생하는 예외는 envelope/숫자 형식 오류(MalformedMessage)입니다.
    """

    @abstractmethod
    def can_parse(self, message: RawMessage) -> bool:
        """호가 메시지 여부 판단.

        Args:
            message: 원본 메시지

        Returns:
            호가 메시지면 True
        """
        pass

    @abstractmethod
    def parse(
        self, message: RawMessage, *, max_levels: int, received_at_ms: int
    ) -> OrderBookDTO:
        """메시지를 표준 포맷으로 변환.

        Args:
            message: 원본 메시지
            max_levels: 측면당 최대 레벨 수
            received_at_ms: 수신 시각 (메시지 ts 부재 시 사용)

        Returns:
            표준화된 orderbook (Pydantic DTO)
        """
        pass
