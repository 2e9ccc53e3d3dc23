"""
Exchange Adapter Registry

거래소 식별자를 키로 하는 순수 함수 집합입니다.
- endpoint: 고정 엔드포인트 URL
- build_subscription: 거래소 고유 envelope의 구독 요청
- normalize: 원본 메시지 → OrderBookDTO | None (절대 예외를 던지지 않음)
- available_symbols / default_symbol: 고정 심볼 카탈로그
"""

from __future__ import annotations

from typing import Any

import orjson

from src.common.exceptions.exception_rule import MALFORMED_MESSAGE_ERRORS
from src.common.logger import PipelineLogger
from src.config.settings import orderbook_settings
from src.core.connection.utils.timestamp import now_ms
from src.core.dto.io.orderbook import OrderBookDTO
from src.core.types import ErrorKind, ExchangeId, SubscriptionPayload
from src.exchange.adapters import ADAPTER_MAP, ExchangeAdapter

logger = PipelineLogger.get_logger("exchange_registry", "exchange")

_SAMPLE_LIMIT = 200


def get_adapter(exchange: ExchangeId | str) -> ExchangeAdapter:
    """거래소 어댑터 조회

    Raises:
        ValueError: 지원하지 않는 거래소
    """
    return ADAPTER_MAP[ExchangeId(exchange)]


def endpoint(exchange: ExchangeId | str) -> str:
    return get_adapter(exchange).url


def build_subscription(exchange: ExchangeId | str, symbol: str) -> SubscriptionPayload:
    """거래소 고유 envelope의 구독 요청 페이로드 생성"""
    return get_adapter(exchange).subscription(symbol)


def encode_subscription(exchange: ExchangeId | str, symbol: str) -> str:
    """구독 요청 JSON 직렬화 (orjson 사용)"""
    return orjson.dumps(build_subscription(exchange, symbol)).decode("utf-8")


def available_symbols(exchange: ExchangeId | str) -> list[str]:
    return list(get_adapter(exchange).symbols)


def default_symbol(exchange: ExchangeId | str) -> str:
    return get_adapter(exchange).default_symbol


def level_cap(exchange: ExchangeId | str, max_levels: int | None = None) -> int:
    """거래소 문서상 깊이와 설정 상한 중 작은 값"""
    limit = max_levels if max_levels is not None else orderbook_settings.max_levels_per_side
    return min(get_adapter(exchange).max_depth, limit)


def normalize(
    exchange: ExchangeId | str,
    raw_message: Any,
    *,
    received_at_ms: int | None = None,
    max_levels: int | None = None,
) -> OrderBookDTO | None:
    """원본 메시지를 정규화 호가창으로 변환합니다.

    Args:
        exchange: 거래소 식별자
        raw_message: 디코딩된 dict 또는 JSON 텍스트/바이트 프레임
        received_at_ms: 수신 시각 (메시지 ts 부재 시 사용, 기본: 현재 시각)
        max_levels: 측면당 최대 레벨 (기본: 설정값과 거래소 깊이 중 작은 값)

    Returns:
        OrderBookDTO, 또는 호가 메시지가 아니거나 형식 오류면 None
    """
    adapter = get_adapter(exchange)
    received = received_at_ms if received_at_ms is not None else now_ms()

    try:
        message = (
            orjson.loads(raw_message) if isinstance(raw_message, (str, bytes)) else raw_message
        )
    except orjson.JSONDecodeError as e:
        logger.warning(
            f"{adapter.exchange}: JSON 디코딩 실패 - {e}",
            extra={
                "kind": ErrorKind.MALFORMED_MESSAGE.value,
                "sample": str(raw_message)[:_SAMPLE_LIMIT],
            },
        )
        return None

    if not isinstance(message, dict) or not adapter.parser.can_parse(message):
        # 구독 ACK, 하트비트, 다른 채널
        logger.debug(f"{adapter.exchange}: 호가 메시지 아님 - 건너뜀")
        return None

    try:
        return adapter.parser.parse(
            message,
            max_levels=level_cap(adapter.exchange, max_levels),
            received_at_ms=received,
        )
    except MALFORMED_MESSAGE_ERRORS as e:
        logger.warning(
            f"{adapter.exchange}: 호가 메시지 형식 오류 ({type(e).__name__}) - {e}",
            extra={
                "kind": ErrorKind.MALFORMED_MESSAGE.value,
                "sample": str(message)[:_SAMPLE_LIMIT],
            },
        )
        return None
