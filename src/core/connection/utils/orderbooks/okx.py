"""OKX Orderbook 파서 (Exchange A)."""

from __future__ import annotations

from src.core.connection.utils.parsers.base import (
    OrderbookParser,
    decode_embedded,
    parse_levels,
)
from src.core.connection.utils.timestamp import resolve_timestamp_ms
from src.core.dto.io.orderbook import OrderBookDTO
from src.core.types import RawMessage


class OKXOrderbookParser(OrderbookParser):
    """OKX v5 `books` 채널 파서.

    특징:
    - {"arg": {"channel": "books", "instId": "BTC-USDT"}, "data": [{"asks": [...], "bids": [...], "ts": "..."}]}
    - 배열 구조: ["price", "size", "0", "13"] (4개 요소, price/size만 사용)
    - data가 JSON 문자열로 한 번 더 감싸져 오는 경우도 허용
    - 구독 ACK({"event": "subscribe", ...})에는 data가 없음
    """

    def can_parse(self, message: RawMessage) -> bool:
        arg = message.get("arg")
        if isinstance(arg, dict):
            channel = arg.get("channel", "")
            if not isinstance(channel, str) or not channel.startswith("books"):
                return False
        return isinstance(message.get("data"), (list, str)) and "event" not in message

    def parse(
        self, message: RawMessage, *, max_levels: int, received_at_ms: int
    ) -> OrderBookDTO:
        data = decode_embedded(message["data"])
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            raise ValueError("OKX data must be a non-empty list of book objects")

        first_data = data[0]
        if "bids" not in first_data or "asks" not in first_data:
            raise KeyError("OKX book payload missing bids/asks")

        return OrderBookDTO(
            bids=parse_levels(first_data["bids"], max_levels, descending=True),
            asks=parse_levels(first_data["asks"], max_levels, descending=False),
            # 타임스탬프: data[0].ts (문자열 ms)
            observed_at_ms=resolve_timestamp_ms(first_data.get("ts"), received_at_ms),
        )
