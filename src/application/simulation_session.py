"""
주문 시뮬레이션 세션

주문 초안(draft)을 보관/갱신하고, 호가창에 대해 시뮬레이션한 결과를
지연 옵션만큼 유지합니다. 초안 검증은 OrderSpecDTO 생성 시점에 수행됩니다.
"""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass
from typing import Any, Callable

from src.common.logger import PipelineLogger
from src.core.dto.io.orderbook import OrderBookDTO
from src.core.dto.io.simulation import OrderSpecDTO, SimulationResultDTO
from src.core.simulation.simulator import simulate
from src.core.types import DelayOption, ExchangeId, OrderSide, OrderType
from src.exchange.registry import default_symbol

logger = PipelineLogger.get_logger("simulation_session", "app")


@dataclass(slots=True, frozen=True, kw_only=True)
class OrderDraft:
    """검증 전 주문 초안 (지정가 주문도 가격 없이 존재할 수 있음)"""

    exchange: ExchangeId = ExchangeId.OKX
    symbol: str = "BTC-USDT"
    order_type: OrderType = OrderType.LIMIT
    side: OrderSide = OrderSide.BUY
    limit_price: float | None = None
    quantity: float = 1.0
    delay: DelayOption = DelayOption.IMMEDIATE

    def to_spec(self) -> OrderSpecDTO:
        """검증된 주문 명세로 변환 (실패 시 pydantic ValidationError)"""
        return OrderSpecDTO(
            exchange=self.exchange,
            symbol=self.symbol,
            order_type=self.order_type,
            side=self.side,
            limit_price=self.limit_price,
            quantity=self.quantity,
            delay=self.delay,
        )


class SimulationSession:
    """주문 초안 + 최근 시뮬레이션 결과 관리

    Args:
        clock: 단조 시계 (초). 결과 만료 판정에 사용
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._draft = OrderDraft()
        self._result: SimulationResultDTO | None = None
        self._expires_at: float | None = None

    @property
    def draft(self) -> OrderDraft:
        return self._draft

    @property
    def result(self) -> SimulationResultDTO | None:
        """유효한 최근 결과 (지연 경과 시 None)"""
        if self._expires_at is not None and self._clock() >= self._expires_at:
            logger.debug("simulation result expired")
            self.reset()
        return self._result

    def update(self, **changes: Any) -> OrderDraft:
        """초안 갱신.

        - 시장가로 전환하면 지정가를 비움
        - 거래소가 바뀌면 심볼을 해당 거래소 기본 심볼로 재설정
        """
        previous = self._draft
        if "exchange" in changes:
            changes["exchange"] = ExchangeId(changes["exchange"])
        if changes.get("order_type") is not None:
            changes["order_type"] = OrderType(changes["order_type"])
            if changes["order_type"] is OrderType.MARKET:
                changes["limit_price"] = None

        updated = dataclasses.replace(previous, **changes)
        if updated.exchange is not previous.exchange:
            updated = dataclasses.replace(updated, symbol=default_symbol(updated.exchange))

        self._draft = updated
        return updated

    def simulate(self, book: OrderBookDTO) -> SimulationResultDTO | None:
        """현재 초안으로 시뮬레이션.

        어느 한쪽 호가가 비어 있으면 아무것도 하지 않고 None을 반환합니다.
        초안이 유효하지 않으면 ValidationError가 호출자에게 전파됩니다.
        """
        if not book.bids or not book.asks:
            return None

        spec = self._draft.to_spec()
        result = simulate(spec, book)
        self._result = result

        seconds = spec.delay.seconds
        self._expires_at = self._clock() + seconds if seconds > 0 else None
        logger.info(
            f"simulated {spec.side.value} {spec.order_type.value} {spec.quantity} "
            f"{spec.exchange.value}|{spec.symbol}: fill={result.fill_percentage:.1f}% "
            f"impact={result.market_impact_percentage:.1f}% "
            f"slippage={result.slippage_percentage:.2f}%"
        )
        return result

    def reset(self) -> None:
        """결과 초기화"""
        self._result = None
        self._expires_at = None

    def reset_spec(self) -> None:
        """초안을 기본값으로 되돌림"""
        self._draft = OrderDraft()
