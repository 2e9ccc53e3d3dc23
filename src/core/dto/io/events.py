"""피드 경계 이벤트 DTO 모듈"""

from __future__ import annotations

from pydantic import Field

from src.core.dto.io._base import ExchangeContextModel
from src.core.types import ErrorKind


class TransportErrorEvent(ExchangeContextModel):
    """전송 계층 오류 이벤트 (on_error 콜백 인자).

    이 이벤트 자체는 연결 상태를 바꾸지 않습니다. 뒤따르는 close가 재연결을 유발합니다.
    """

    kind: ErrorKind = ErrorKind.TRANSPORT_ERROR
    attempt: int = Field(0, ge=0, description="발생 시점의 재연결 시도 횟수")
    error_type: str = Field(..., description="예외 클래스 이름")
    message: str = Field("", description="예외 메시지")
    occurred_at_ms: int = Field(..., gt=0, description="발생 시각 (Unix milliseconds)")
