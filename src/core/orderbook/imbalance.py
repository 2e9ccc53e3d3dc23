from __future__ import annotations

from src.core.dto.internal.orderbook import ImbalanceDomain
from src.core.dto.io.orderbook import OrderBookDTO


def compute_imbalance(book: OrderBookDTO) -> ImbalanceDomain | None:
    """매수/매도 물량 불균형 및 최우선 호가 압력 계산.

    어느 한쪽이라도 비어 있으면 None을 반환합니다.

    Examples:
        >>> book = OrderBookDTO(
        ...     bids=[PriceLevelDTO(price=100, quantity=3)],
        ...     asks=[PriceLevelDTO(price=101, quantity=1)],
        ... )
        >>> compute_imbalance(book).direction
        'buy'
    """
    if not book.bids or not book.asks:
        return None

    bid_volume = sum(level.quantity for level in book.bids)
    ask_volume = sum(level.quantity for level in book.asks)
    total_volume = bid_volume + ask_volume

    if total_volume > 0:
        bid_percentage = bid_volume / total_volume * 100
        ask_percentage = ask_volume / total_volume * 100
    else:
        bid_percentage = ask_percentage = 50.0

    volume_ratio = bid_volume / ask_volume if ask_volume > 0 else float("inf")

    # 정렬 여부와 무관하게 가격 기준 최우선 호가 선택
    top_bid = max(book.bids, key=lambda level: level.price)
    top_ask = min(book.asks, key=lambda level: level.price)
    top_level_ratio = top_bid.quantity / (top_ask.quantity or 1)

    return ImbalanceDomain(
        bid_volume=bid_volume,
        ask_volume=ask_volume,
        bid_percentage=bid_percentage,
        ask_percentage=ask_percentage,
        volume_ratio=volume_ratio,
        imbalance_percentage=abs((bid_percentage - 50) * 2),
        direction="buy" if bid_percentage >= ask_percentage else "sell",
        top_level_ratio=top_level_ratio,
        pressure_direction="up" if top_level_ratio > 1 else "down",
        pressure_strength=min(abs(1 - top_level_ratio) * 10, 100.0),
    )
