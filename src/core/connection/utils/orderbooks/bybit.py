"""Bybit Orderbook 파서 (Exchange B)."""

from __future__ import annotations

from src.core.connection.utils.parsers.base import (
    OrderbookParser,
    decode_embedded,
    parse_levels,
)
from src.core.connection.utils.timestamp import resolve_timestamp_ms
from src.core.dto.io.orderbook import OrderBookDTO
from src.core.types import RawMessage


class BybitOrderbookParser(OrderbookParser):
    """Bybit v5 `orderbook.{depth}.{symbol}` 토픽 파서.

    특징:
    - {"topic": "orderbook.50.BTCUSDT", "type": "snapshot"|"delta", "ts": 1672304484978,
       "data": {"s": "BTCUSDT", "b": [...], "a": [...], "u": 18521288, "seq": 7961638724}}
    - 배열 구조: ["price", "qty"] (문자열)
    - delta 메시지도 스냅샷과 동일하게 그대로 변환 (수량 0 레벨 포함)
    """

    def can_parse(self, message: RawMessage) -> bool:
        topic = message.get("topic", "")
        return isinstance(topic, str) and "orderbook" in topic and "data" in message

    def parse(
        self, message: RawMessage, *, max_levels: int, received_at_ms: int
    ) -> OrderBookDTO:
        data = decode_embedded(message["data"])
        if not isinstance(data, dict):
            raise TypeError("Bybit data must be an object")
        if "b" not in data or "a" not in data:
            raise KeyError("Bybit book payload missing b/a")

        # 타임스탬프: data.ts 우선, 없으면 envelope ts
        raw_ts = data.get("ts", message.get("ts"))
        return OrderBookDTO(
            bids=parse_levels(data["b"], max_levels, descending=True),
            asks=parse_levels(data["a"], max_levels, descending=False),
            observed_at_ms=resolve_timestamp_ms(raw_ts, received_at_ms),
        )
