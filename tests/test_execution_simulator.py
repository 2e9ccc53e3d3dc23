from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.core.dto.io.orderbook import OrderBookDTO
from src.core.simulation.simulator import estimate_time_to_fill, simulate
from src.core.types import DelayOption
from tests.factory_builders import build_book, build_order_spec


# ---------------------------------------------------------------------------
# market orders
# ---------------------------------------------------------------------------


def test_market_buy_walks_asks_and_reports_slippage() -> None:
    book = build_book(bids=[(99.0, 1.0)], asks=[(100.0, 1.0), (101.0, 2.0)])
    spec = build_order_spec(side="buy", quantity=2.0)

    result = simulate(spec, book)

    assert result.active is True
    assert result.fill_percentage == 100.0
    assert result.average_price == pytest.approx(100.5)
    assert result.slippage_percentage == pytest.approx(0.5)
    assert result.market_impact_percentage == pytest.approx(100.0)
    assert result.estimated_time_to_fill == "Immediate"
    assert result.spec == spec


def test_market_sell_walks_bids() -> None:
    book = build_book(bids=[(100.0, 1.0), (98.0, 1.0), (97.0, 5.0)], asks=[(101.0, 1.0)])
    spec = build_order_spec(side="sell", quantity=2.0)

    result = simulate(spec, book)

    assert result.fill_percentage == 100.0
    assert result.average_price == pytest.approx(99.0)
    assert result.slippage_percentage == pytest.approx(1.0)
    assert result.market_impact_percentage == pytest.approx(2 / 3 * 100)


def test_market_order_partial_fill_when_book_exhausted() -> None:
    book = build_book(asks=[(100.0, 1.0), (101.0, 1.0)])
    spec = build_order_spec(quantity=4.0)

    result = simulate(spec, book)

    assert result.fill_percentage == pytest.approx(50.0)
    assert result.filled_quantity == pytest.approx(2.0)
    assert result.market_impact_percentage == 100.0


def test_market_order_within_best_level_has_no_slippage() -> None:
    book = build_book(asks=[(100.0, 10.0), (101.0, 1.0)])

    result = simulate(build_order_spec(quantity=3.0), book)

    assert result.fill_percentage == 100.0
    assert result.slippage_percentage == 0.0
    assert result.market_impact_percentage == pytest.approx(50.0)


# ---------------------------------------------------------------------------
# limit orders
# ---------------------------------------------------------------------------


def test_limit_buy_below_best_ask_does_not_fill() -> None:
    book = build_book(bids=[(99.5, 1.0), (98.0, 1.0)], asks=[(100.0, 1.0), (101.0, 1.0)])
    spec = build_order_spec(order_type="limit", limit_price=99.0, quantity=1.0)

    result = simulate(spec, book)

    assert result.fill_percentage == 0.0
    assert result.slippage_percentage == 0.0
    assert result.average_price is None
    # 99.0은 bids[1] (98.0) 앞에 위치 → position 1 / depth 2
    assert result.market_impact_percentage == pytest.approx(25.0)
    assert 0.0 <= result.market_impact_percentage <= 100.0
    assert result.estimated_time_to_fill == "Partial fill"


def test_limit_buy_without_better_bid_uses_front_position() -> None:
    book = build_book(bids=[(99.5, 1.0)], asks=[(100.0, 1.0)])
    spec = build_order_spec(order_type="limit", limit_price=99.5, quantity=1.0)

    result = simulate(spec, book)

    assert result.fill_percentage == 0.0
    assert result.market_impact_percentage == pytest.approx(50.0)


def test_limit_buy_fully_filled_within_limit() -> None:
    book = build_book(asks=[(100.0, 1.0), (100.5, 1.0), (102.0, 5.0)])
    spec = build_order_spec(order_type="limit", limit_price=101.0, quantity=2.0)

    result = simulate(spec, book)

    assert result.fill_percentage == 100.0
    # 체결 가능 레벨 2 / 전체 3 * 75
    assert result.market_impact_percentage == pytest.approx(50.0)
    # 평균 100.25 는 지정가 101 보다 유리 → 0 하한
    assert result.slippage_percentage == 0.0
    assert result.average_price == pytest.approx(100.25)


def test_limit_sell_partial_fill() -> None:
    book = build_book(bids=[(101.0, 1.0), (100.0, 1.0), (99.0, 1.0)], asks=[(102.0, 1.0)])
    spec = build_order_spec(
        order_type="limit", side="sell", limit_price=100.0, quantity=4.0, delay="10s"
    )

    result = simulate(spec, book)

    assert result.fill_percentage == pytest.approx(50.0)
    # 매도 지정가 100 은 asks[0] (102) 앞 → position 0
    assert result.market_impact_percentage == pytest.approx(50.0)
    assert result.estimated_time_to_fill == ">>>10s"


# ---------------------------------------------------------------------------
# degenerate input / labels
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("empty_side", ["bids", "asks"])
def test_empty_side_returns_inactive_zero_result(empty_side: str) -> None:
    book = build_book(**{empty_side: []})
    spec = build_order_spec()

    result = simulate(spec, book)

    assert result.active is False
    assert result.fill_percentage == 0.0
    assert result.market_impact_percentage == 0.0
    assert result.slippage_percentage == 0.0


def test_empty_book_returns_inactive_result() -> None:
    assert simulate(build_order_spec(), OrderBookDTO()).active is False


@pytest.mark.parametrize(
    ("delay", "fill", "label"),
    [
        (DelayOption.IMMEDIATE, 100.0, "Immediate"),
        (DelayOption.IMMEDIATE, 40.0, "Partial fill"),
        (DelayOption.FIVE_SECONDS, 100.0, "~5s"),
        (DelayOption.TEN_SECONDS, 80.0, ">10s"),
        (DelayOption.THIRTY_SECONDS, 75.0, ">>30s"),
        (DelayOption.THIRTY_SECONDS, 50.0, ">>>30s"),
        (DelayOption.FIVE_SECONDS, 0.0, "Unlikely to fill"),
    ],
)
def test_time_to_fill_labels(delay: DelayOption, fill: float, label: str) -> None:
    assert estimate_time_to_fill(delay, fill) == label


# ---------------------------------------------------------------------------
# order spec validation (caller side)
# ---------------------------------------------------------------------------


def test_limit_spec_requires_price() -> None:
    with pytest.raises(ValidationError):
        build_order_spec(order_type="limit")


def test_market_spec_rejects_price() -> None:
    with pytest.raises(ValidationError):
        build_order_spec(order_type="market", limit_price=100.0)


@pytest.mark.parametrize("quantity", [0.0, -1.0])
def test_spec_requires_positive_quantity(quantity: float) -> None:
    with pytest.raises(ValidationError):
        build_order_spec(quantity=quantity)
