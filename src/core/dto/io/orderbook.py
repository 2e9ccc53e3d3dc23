"""정규화 Orderbook DTO 모듈

모든 거래소의 호가 데이터를 동일한 형식으로 표현합니다.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from src.core.dto.io._base import OPTIMIZED_CONFIG


class PriceLevelDTO(BaseModel):
    """호가 레벨 DTO (price, quantity).

    특징:
    - 불변 객체 (frozen=True)
    - float 가격/수량 (거래소 문자열은 파서에서 변환)
    - cumulative_quantity / depth_percentage는 집계 단계에서만 채워짐

    Example:
        >>> level = PriceLevelDTO(price=100.5, quantity=2.0)
    """

    price: float = Field(..., ge=0.0, allow_inf_nan=False, description="호가 가격")
    quantity: float = Field(
        ..., ge=0.0, allow_inf_nan=False, description="호가 수량 (0이면 델타 프로토콜의 레벨 삭제)"
    )
    cumulative_quantity: float | None = Field(
        None, ge=0.0, description="정렬 방향 누적 수량"
    )
    depth_percentage: float | None = Field(
        None, ge=0.0, le=100.0, description="양측 공통 최대 누적 대비 비율 (0~100)"
    )

    model_config = OPTIMIZED_CONFIG


class OrderBookDTO(BaseModel):
    """정규화된 Orderbook DTO.

    정렬 규칙 (집계 이후):
    - bids: 가격 내림차순 (최우선 매수호가가 첫 번째)
    - asks: 가격 오름차순 (최우선 매도호가가 첫 번째)

    교차 호가(best bid >= best ask)는 데이터 품질 상태로 취급하며 거부하지 않습니다.

    Example:
        >>> book = OrderBookDTO(
        ...     bids=[PriceLevelDTO(price=100.5, quantity=2.0)],
        ...     asks=[PriceLevelDTO(price=101.0, quantity=3.0)],
        ...     observed_at_ms=1730336862000,
        ... )
    """

    bids: list[PriceLevelDTO] = Field(default_factory=list, description="매수 호가 리스트")
    asks: list[PriceLevelDTO] = Field(default_factory=list, description="매도 호가 리스트")
    observed_at_ms: int = Field(
        0, ge=0, description="관측 시각 (Unix milliseconds, 메시지 ts 또는 수신 시각)"
    )

    model_config = OPTIMIZED_CONFIG

    @property
    def is_empty(self) -> bool:
        return not self.bids and not self.asks

    @property
    def best_bid(self) -> PriceLevelDTO | None:
        return self.bids[0] if self.bids else None

    @property
    def best_ask(self) -> PriceLevelDTO | None:
        return self.asks[0] if self.asks else None

    @property
    def mid_price(self) -> float | None:
        """양측이 모두 있을 때만 중간가 반환"""
        if self.best_bid is None or self.best_ask is None:
            return None
        return (self.best_bid.price + self.best_ask.price) / 2.0

    @property
    def spread(self) -> float | None:
        if self.best_bid is None or self.best_ask is None:
            return None
        return self.best_ask.price - self.best_bid.price

    @property
    def is_crossed(self) -> bool:
        spread = self.spread
        return spread is not None and spread <= 0
