from __future__ import annotations

from enum import StrEnum
from typing import Any, TypeAlias, assert_never

# 공통 타입/별칭을 한곳에 모읍니다.
# - 코어 계층 어디서나 재사용 가능한 최소 단위만 정의합니다.
# - 거래소 집합은 고정이므로 열린 문자열 대신 Enum으로 닫아 둡니다.


class ExchangeId(StrEnum):
    """지원 거래소 식별자 (고정 집합)."""

    OKX = "okx"
    BYBIT = "bybit"
    DERIBIT = "deribit"


class OrderType(StrEnum):
    """주문 유형"""

    MARKET = "market"
    LIMIT = "limit"


class OrderSide(StrEnum):
    """주문 방향"""

    BUY = "buy"
    SELL = "sell"


class DelayOption(StrEnum):
    """시뮬레이션 지연 옵션.

    `seconds`로 실제 지연 시간(초)을 얻습니다. IMMEDIATE는 0입니다.
    """

    IMMEDIATE = "immediate"
    FIVE_SECONDS = "5s"
    TEN_SECONDS = "10s"
    THIRTY_SECONDS = "30s"

    @property
    def seconds(self) -> int:
        match self:
            case DelayOption.IMMEDIATE:
                return 0
            case DelayOption.FIVE_SECONDS:
                return 5
            case DelayOption.TEN_SECONDS:
                return 10
            case DelayOption.THIRTY_SECONDS:
                return 30
            case _:
                assert_never(self)


class ConnectionStatus(StrEnum):
    """피드 연결 상태 Enum.

    Reconnecting의 시도 횟수는 ConnectionStateDomain.attempt에 함께 보관합니다.
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    SUBSCRIBED = "subscribed"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"


def connection_status_format(status: ConnectionStatus, attempt: int = 0) -> str:
    """상태 로깅 포맷터: Enum 분기 완전탐색 보장."""
    match status:
        case ConnectionStatus.IDLE | ConnectionStatus.CONNECTING | ConnectionStatus.SUBSCRIBED:
            return status.value
        case ConnectionStatus.RECONNECTING:
            return f"{status.value}({attempt})"
        case ConnectionStatus.CLOSED:
            return status.value
        case _:
            assert_never(status)


# 원본 거래소 메시지 (JSON 디코딩 직후의 형태)
RawMessage: TypeAlias = dict[str, Any]
# 구독 요청 페이로드 (거래소별 envelope)
SubscriptionPayload: TypeAlias = dict[str, Any]
# [price, quantity, ...] 형태의 원본 호가 배열
RawLevel: TypeAlias = list[Any] | tuple[Any, ...]
