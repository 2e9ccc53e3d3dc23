"""거래소별 Orderbook 파서 모음."""

from src.core.connection.utils.orderbooks.bybit import BybitOrderbookParser
from src.core.connection.utils.orderbooks.deribit import DeribitOrderbookParser
from src.core.connection.utils.orderbooks.okx import OKXOrderbookParser

__all__ = [
    "BybitOrderbookParser",
    "DeribitOrderbookParser",
    "OKXOrderbookParser",
]
