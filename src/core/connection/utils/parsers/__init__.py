"""파서 공통 모듈.

OrderBook 파서의 공통 인터페이스와 유틸리티를 제공합니다.
"""

from src.core.connection.utils.parsers.base import (
    OrderbookParser,
    decode_embedded,
    parse_levels,
)

__all__ = [
    "OrderbookParser",
    "decode_embedded",
    "parse_levels",
]
