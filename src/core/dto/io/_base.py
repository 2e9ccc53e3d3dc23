"""I/O 경계 DTO 기반 클래스 및 공통 ConfigDict 모듈

Pydantic v2 설정을 한곳에 모아 코드 중복을 최소화합니다.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from src.core.types import ExchangeId

# ========================================
# ConfigDict 최적화 (전역 설정)
# ========================================

OPTIMIZED_CONFIG = ConfigDict(
    # 런타임 검증
    # Enum은 값이 아닌 멤버로 보관 (DelayOption.seconds 등 멤버 메서드 사용)
    use_enum_values=False,
    extra="forbid",  # 알 수 없는 필드 금지
    validate_default=True,  # 기본값도 검증
    str_strip_whitespace=True,  # 문자열 자동 트림
    # 불변성 (해시 가능, 안전)
    frozen=True,
    arbitrary_types_allowed=False,
)


# ========================================
# 베이스 클래스
# ========================================


class BaseIOModelDTO(BaseModel):
    """I/O 경계용 공통 Pydantic v2 베이스 모델.

    특징:
    - 불변 객체 (frozen=True)
    - 알 수 없는 필드 금지 (extra="forbid")
    - 문자열 자동 트림 (str_strip_whitespace=True)
    """

    model_config = OPTIMIZED_CONFIG


class ExchangeContextModel(BaseIOModelDTO):
    """거래소 컨텍스트 재사용 믹스인 (exchange, symbol).

    (거래소, 심볼) 한 쌍에 종속된 모든 DTO의 공통 컨텍스트입니다.
    """

    exchange: ExchangeId = Field(..., description="거래소 (okx, bybit, deribit)")
    symbol: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="거래소 고유 표기법의 심볼 (BTC-USDT, BTCUSDT, BTC-PERPETUAL)",
    )
