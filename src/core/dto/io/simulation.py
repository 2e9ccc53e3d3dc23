"""주문 체결 시뮬레이션 I/O DTO 모듈"""

from __future__ import annotations

from typing import Self

from pydantic import Field, model_validator

from src.core.dto.io._base import BaseIOModelDTO, ExchangeContextModel
from src.core.types import DelayOption, OrderSide, OrderType


class OrderSpecDTO(ExchangeContextModel):
    """시뮬레이션 주문 명세 DTO.

    검증 규칙:
    - quantity > 0
    - order_type == LIMIT 이면 limit_price 필수 (> 0)
    - order_type == MARKET 이면 limit_price 금지

    시뮬레이터는 검증된 명세를 전제로 하며, 검증 실패는 생성 시점에
    pydantic ValidationError로 호출자에게 드러납니다.
    """

    order_type: OrderType = Field(..., description="주문 유형 (market, limit)")
    side: OrderSide = Field(..., description="주문 방향 (buy, sell)")
    limit_price: float | None = Field(None, gt=0.0, description="지정가 (limit 전용)")
    quantity: float = Field(..., gt=0.0, description="주문 수량")
    delay: DelayOption = Field(DelayOption.IMMEDIATE, description="시뮬레이션 지연")

    @model_validator(mode="after")
    def _check_limit_price(self) -> Self:
        if self.order_type is OrderType.LIMIT and self.limit_price is None:
            raise ValueError("limit order requires limit_price")
        if self.order_type is OrderType.MARKET and self.limit_price is not None:
            raise ValueError("market order must not carry limit_price")
        return self


class SimulationResultDTO(BaseIOModelDTO):
    """시뮬레이션 결과 DTO (불변, 요청마다 새로 생성).

    - fill_percentage / market_impact_percentage: [0, 100]
    - slippage_percentage: >= 0 (상한 없음)
    - active=False 는 빈 호가창에 대한 0값 비활성 결과
    """

    spec: OrderSpecDTO
    fill_percentage: float = Field(..., ge=0.0, le=100.0)
    market_impact_percentage: float = Field(..., ge=0.0, le=100.0)
    slippage_percentage: float = Field(..., ge=0.0)
    estimated_time_to_fill: str | None = Field(None, description="예상 체결 시간 라벨")
    active: bool = True
    filled_quantity: float = Field(0.0, ge=0.0)
    average_price: float | None = Field(None, ge=0.0, description="체결분 평균가")
