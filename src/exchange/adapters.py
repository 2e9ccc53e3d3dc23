"""거래소별 정적 어댑터 정의 (엔드포인트, 구독 envelope, 파서, 심볼 카탈로그)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from src.core.connection.utils.orderbooks import (
    BybitOrderbookParser,
    DeribitOrderbookParser,
    OKXOrderbookParser,
)
from src.core.connection.utils.parsers import OrderbookParser
from src.core.types import ExchangeId, SubscriptionPayload


@dataclass(slots=True, frozen=True, eq=False, repr=False, match_args=False, kw_only=True)
class ExchangeAdapter:
    """거래소 어댑터 (불변, 초기화 이후 읽기 전용).

    url: 고정 퍼블릭 웹소켓 엔드포인트
    max_depth: 거래소 문서상 측면당 레벨 수 (구독 채널 기준)
    symbols: 고정 심볼 카탈로그 (첫 번째가 기본 심볼)
    subscription: 심볼 → 구독 요청 페이로드
    parser: 원본 메시지 → OrderBookDTO
    """

    exchange: ExchangeId
    url: str
    max_depth: int
    symbols: tuple[str, ...]
    subscription: Callable[[str], SubscriptionPayload]
    parser: OrderbookParser

    @property
    def default_symbol(self) -> str:
        return self.symbols[0]


def _okx_subscription(symbol: str) -> SubscriptionPayload:
    return {"op": "subscribe", "args": [{"channel": "books", "instId": symbol}]}


def _bybit_subscription(symbol: str) -> SubscriptionPayload:
    return {"op": "subscribe", "args": [f"orderbook.50.{symbol}"]}


def _deribit_subscription(symbol: str) -> SubscriptionPayload:
    return {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "public/subscribe",
        "params": {"channels": [f"book.{symbol}.none.20.100ms"]},
    }


OKX_ADAPTER = ExchangeAdapter(
    exchange=ExchangeId.OKX,
    url="wss://ws.okx.com:8443/ws/v5/public",
    max_depth=400,
    symbols=("BTC-USDT", "ETH-USDT", "SOL-USDT", "XRP-USDT", "DOGE-USDT"),
    subscription=_okx_subscription,
    parser=OKXOrderbookParser(),
)

BYBIT_ADAPTER = ExchangeAdapter(
    exchange=ExchangeId.BYBIT,
    url="wss://stream.bybit.com/v5/public/spot",
    max_depth=50,
    symbols=("BTCUSDT", "ETHUSDT", "SOLUSDT", "XRPUSDT", "DOGEUSDT"),
    subscription=_bybit_subscription,
    parser=BybitOrderbookParser(),
)

DERIBIT_ADAPTER = ExchangeAdapter(
    exchange=ExchangeId.DERIBIT,
    url="wss://www.deribit.com/ws/api/v2",
    max_depth=20,
    symbols=("BTC-PERPETUAL", "ETH-PERPETUAL"),
    subscription=_deribit_subscription,
    parser=DeribitOrderbookParser(),
)

# 거래소 식별자 → 어댑터 (닫힌 집합, 완전 매핑)
ADAPTER_MAP: dict[ExchangeId, ExchangeAdapter] = {
    ExchangeId.OKX: OKX_ADAPTER,
    ExchangeId.BYBIT: BYBIT_ADAPTER,
    ExchangeId.DERIBIT: DERIBIT_ADAPTER,
}
