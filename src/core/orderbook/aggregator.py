"""호가창 집계 (정렬 → 절단 → 누적 → 깊이 비율).

순수 함수이며 입력 DTO를 변경하지 않고 새 DTO를 반환합니다.
"""

from __future__ import annotations

from src.config.settings import orderbook_settings
from src.core.dto.io.orderbook import OrderBookDTO, PriceLevelDTO


def _cumulate(levels: list[PriceLevelDTO]) -> tuple[list[PriceLevelDTO], float]:
    """정렬된 레벨에 누적 수량을 채우고 최종 누적값을 함께 반환"""
    running = 0.0
    cumulated: list[PriceLevelDTO] = []
    for level in levels:
        running += level.quantity
        cumulated.append(level.model_copy(update={"cumulative_quantity": running}))
    return cumulated, running


def _with_depth(levels: list[PriceLevelDTO], max_total: float) -> list[PriceLevelDTO]:
    result: list[PriceLevelDTO] = []
    for level in levels:
        cumulative = level.cumulative_quantity or 0.0
        percentage = cumulative / max_total * 100 if max_total > 0 and cumulative else 0.0
        result.append(level.model_copy(update={"depth_percentage": min(percentage, 100.0)}))
    return result


def aggregate(book: OrderBookDTO, display_levels: int | None = None) -> OrderBookDTO:
    """표시용 호가창 생성.

    1. bids 가격 내림차순, asks 가격 오름차순 정렬
    2. 각 측 상위 display_levels(기본 15)개로 절단
    3. 정렬 방향 누적 수량 계산
    4. depth_percentage = 누적 / max(매수 총합, 매도 총합) * 100

    양측이 모두 비어 있으면 입력을 그대로 반환합니다.
    이미 집계된 입력에 대해 멱등입니다.

    Args:
        book: 정규화된 호가창
        display_levels: 측별 최대 레벨 수 (미지정 시 BOOK_DISPLAY_LEVELS)

    Returns:
        집계된 새 OrderBookDTO
    """
    if book.is_empty:
        return book

    limit = display_levels if display_levels is not None else orderbook_settings.display_levels

    bids = sorted(book.bids, key=lambda level: level.price, reverse=True)[:limit]
    asks = sorted(book.asks, key=lambda level: level.price)[:limit]

    bids, bid_total = _cumulate(bids)
    asks, ask_total = _cumulate(asks)

    # 양측 공통 분모 → 매수/매도 막대가 같은 스케일
    max_total = max(bid_total, ask_total)

    return book.model_copy(
        update={
            "bids": _with_depth(bids, max_total),
            "asks": _with_depth(asks, max_total),
        }
    )
