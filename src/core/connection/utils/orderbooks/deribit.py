"""Deribit Orderbook 파서 (Exchange C, JSON-RPC)."""

from __future__ import annotations

from src.core.connection.utils.parsers.base import OrderbookParser, parse_levels
from src.core.connection.utils.timestamp import resolve_timestamp_ms
from src.core.dto.io.orderbook import OrderBookDTO
from src.core.types import RawMessage


class DeribitOrderbookParser(OrderbookParser):
    """Deribit `book.{instrument}.none.{depth}.{interval}` 채널 파서.

    특징:
    - {"jsonrpc": "2.0", "method": "subscription",
       "params": {"channel": "book.BTC-PERPETUAL.none.20.100ms",
                  "data": {"timestamp": ..., "bids": [[price, amount]], "asks": [...]}}}
    - 가격/수량이 이미 숫자 (문자열 인코딩 아님)
    - 구독 응답({"id": 1, "result": [...]})과 하트비트에는 params.data가 없음
    """

    def can_parse(self, message: RawMessage) -> bool:
        params = message.get("params")
        if not isinstance(params, dict) or "data" not in params:
            return False
        channel = params.get("channel")
        return channel is None or (isinstance(channel, str) and channel.startswith("book."))

    def parse(
        self, message: RawMessage, *, max_levels: int, received_at_ms: int
    ) -> OrderBookDTO:
        data = message["params"]["data"]
        if not isinstance(data, dict):
            raise TypeError("Deribit params.data must be an object")

        return OrderBookDTO(
            bids=parse_levels(data["bids"], max_levels, descending=True),
            asks=parse_levels(data["asks"], max_levels, descending=False),
            observed_at_ms=resolve_timestamp_ms(data.get("timestamp"), received_at_ms),
        )
