"""주문 체결 시뮬레이터.

정규화된 호가창과 주문 명세만으로 체결률/슬리피지/시장 충격을 추정하는
순수 함수 모음입니다. 네트워크, 타이머, 공유 상태가 없으며 예외를 던지지 않습니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import assert_never

from src.core.dto.io.orderbook import OrderBookDTO, PriceLevelDTO
from src.core.dto.io.simulation import OrderSpecDTO, SimulationResultDTO
from src.core.types import DelayOption, OrderSide, OrderType

IMMEDIATE_LABEL = "Immediate"
PARTIAL_FILL_LABEL = "Partial fill"
UNLIKELY_LABEL = "Unlikely to fill"

# 지정가 주문은 호가를 공격적으로 건너지 않으므로 시장가 대비 충격 상한을 낮게 둠
LIMIT_RESTING_IMPACT_SCALE = 50.0
LIMIT_FILLED_IMPACT_SCALE = 75.0


@dataclass(slots=True, frozen=True)
class _Consumption:
    """레벨 소진 결과 (내부 전용)"""

    filled_quantity: float
    total_value: float
    levels_touched: int


def _clamp_percentage(value: float) -> float:
    return min(max(value, 0.0), 100.0)


def _consumed_side(book: OrderBookDTO, side: OrderSide) -> list[PriceLevelDTO]:
    """매수는 asks, 매도는 bids를 최우선 호가부터 소진"""
    match side:
        case OrderSide.BUY:
            return book.asks
        case OrderSide.SELL:
            return book.bids
        case _:
            assert_never(side)


def _resting_side(book: OrderBookDTO, side: OrderSide) -> list[PriceLevelDTO]:
    """지정가 주문이 대기하게 될 같은 방향 측"""
    match side:
        case OrderSide.BUY:
            return book.bids
        case OrderSide.SELL:
            return book.asks
        case _:
            assert_never(side)


def _consume(levels: list[PriceLevelDTO], quantity: float) -> _Consumption:
    remaining = quantity
    total_value = 0.0
    touched = 0
    for level in levels:
        if remaining <= 0:
            break
        fill = min(remaining, level.quantity)
        total_value += fill * level.price
        remaining -= fill
        touched += 1
    return _Consumption(
        filled_quantity=quantity - remaining, total_value=total_value, levels_touched=touched
    )


def _directional_slippage(side: OrderSide, average_price: float, reference_price: float) -> float:
    """기준가 대비 불리한 방향 괴리율(%), 0 하한"""
    if reference_price <= 0:
        return 0.0
    if side is OrderSide.BUY:
        slippage = (average_price - reference_price) / reference_price * 100
    else:
        slippage = (reference_price - average_price) / reference_price * 100
    return max(0.0, slippage)


def _queue_position(levels: list[PriceLevelDTO], side: OrderSide, limit_price: float) -> int:
    """지정가가 처음으로 앞서게 되는 레벨 인덱스 (없으면 0)"""
    for index, level in enumerate(levels):
        if side is OrderSide.BUY and limit_price > level.price:
            return index
        if side is OrderSide.SELL and limit_price < level.price:
            return index
    return 0


def estimate_time_to_fill(delay: DelayOption, fill_percentage: float) -> str:
    """지연 옵션과 체결률로 예상 체결 시간 라벨 산출.

    Examples:
        >>> estimate_time_to_fill(DelayOption.IMMEDIATE, 100)
        'Immediate'
        >>> estimate_time_to_fill(DelayOption.TEN_SECONDS, 80)
        '>10s'
        >>> estimate_time_to_fill(DelayOption.THIRTY_SECONDS, 0)
        'Unlikely to fill'
    """
    if delay is DelayOption.IMMEDIATE:
        return IMMEDIATE_LABEL if fill_percentage >= 100 else PARTIAL_FILL_LABEL

    seconds = delay.seconds
    if fill_percentage >= 100:
        return f"~{seconds}s"
    if fill_percentage > 75:
        return f">{seconds}s"
    if fill_percentage > 50:
        return f">>{seconds}s"
    if fill_percentage > 0:
        return f">>>{seconds}s"
    return UNLIKELY_LABEL


def inactive_result(spec: OrderSpecDTO) -> SimulationResultDTO:
    """빈 호가창에 대한 0값 비활성 결과"""
    return SimulationResultDTO(
        spec=spec,
        fill_percentage=0.0,
        market_impact_percentage=0.0,
        slippage_percentage=0.0,
        estimated_time_to_fill=None,
        active=False,
    )


def _simulate_market(spec: OrderSpecDTO, book: OrderBookDTO) -> SimulationResultDTO:
    levels = _consumed_side(book, spec.side)
    best_price = levels[0].price
    consumed = _consume(levels, spec.quantity)

    fill_percentage = consumed.filled_quantity / spec.quantity * 100
    average_price = (
        consumed.total_value / consumed.filled_quantity if consumed.filled_quantity > 0 else None
    )
    slippage = (
        _directional_slippage(spec.side, average_price, best_price)
        if average_price is not None
        else 0.0
    )
    market_impact = consumed.levels_touched / len(levels) * 100

    return SimulationResultDTO(
        spec=spec,
        fill_percentage=_clamp_percentage(fill_percentage),
        market_impact_percentage=_clamp_percentage(market_impact),
        slippage_percentage=slippage,
        estimated_time_to_fill=IMMEDIATE_LABEL,
        filled_quantity=consumed.filled_quantity,
        average_price=average_price,
    )


def _simulate_limit(spec: OrderSpecDTO, book: OrderBookDTO) -> SimulationResultDTO:
    limit_price = spec.limit_price
    assert limit_price is not None  # OrderSpecDTO 검증으로 보장

    levels = _consumed_side(book, spec.side)
    if spec.side is OrderSide.BUY:
        fillable = [level for level in levels if level.price <= limit_price]
    else:
        fillable = [level for level in levels if level.price >= limit_price]

    consumed = _consume(fillable, spec.quantity)
    fill_percentage = consumed.filled_quantity / spec.quantity * 100

    if fill_percentage < 100:
        resting = _resting_side(book, spec.side)
        position = _queue_position(resting, spec.side, limit_price)
        market_impact = (1 - position / len(resting)) * LIMIT_RESTING_IMPACT_SCALE
    else:
        market_impact = len(fillable) / len(levels) * LIMIT_FILLED_IMPACT_SCALE

    # 미체결이면 분모 1로 대체 → 평균가 0, 슬리피지는 0 하한에 걸림
    average_price = consumed.total_value / (consumed.filled_quantity or 1)
    slippage = _directional_slippage(spec.side, average_price, limit_price)

    return SimulationResultDTO(
        spec=spec,
        fill_percentage=_clamp_percentage(fill_percentage),
        market_impact_percentage=_clamp_percentage(market_impact),
        slippage_percentage=slippage,
        estimated_time_to_fill=estimate_time_to_fill(spec.delay, fill_percentage),
        filled_quantity=consumed.filled_quantity,
        average_price=average_price if consumed.filled_quantity > 0 else None,
    )


def simulate(spec: OrderSpecDTO, book: OrderBookDTO) -> SimulationResultDTO:
    """주문 명세를 호가창에 대해 시뮬레이션.

    어느 한쪽 호가라도 비어 있으면 비활성 0값 결과를 반환하고,
    그 외 모든 입력은 유효한 결과를 생성합니다 (예외 없음).

    Args:
        spec: 검증된 주문 명세
        book: 정규화(가급적 집계)된 호가창

    Returns:
        새 SimulationResultDTO

    Examples:
        >>> # asks [(100, 1), (101, 2)] 에 시장가 매수 2 → 평균 100.5, 슬리피지 0.5%
    """
    if not book.bids or not book.asks:
        return inactive_result(spec)

    match spec.order_type:
        case OrderType.MARKET:
            return _simulate_market(spec, book)
        case OrderType.LIMIT:
            return _simulate_limit(spec, book)
        case _:
            assert_never(spec.order_type)
