from __future__ import annotations

import math

import pytest

from src.core.orderbook.imbalance import compute_imbalance
from tests.factory_builders import build_book


def test_buy_side_dominant() -> None:
    book = build_book(bids=[(99.0, 3.0), (98.0, 3.0)], asks=[(100.0, 1.0), (101.0, 1.0)])

    metrics = compute_imbalance(book)

    assert metrics is not None
    assert metrics.bid_volume == 6.0
    assert metrics.ask_volume == 2.0
    assert metrics.bid_percentage == pytest.approx(75.0)
    assert metrics.ask_percentage == pytest.approx(25.0)
    assert metrics.volume_ratio == pytest.approx(3.0)
    assert metrics.imbalance_percentage == pytest.approx(50.0)
    assert metrics.direction == "buy"


def test_top_level_pressure() -> None:
    book = build_book(bids=[(99.0, 1.0), (99.5, 2.0)], asks=[(100.0, 4.0), (100.5, 1.0)])

    metrics = compute_imbalance(book)

    assert metrics is not None
    # 최우선 매수 99.5(2.0) / 최우선 매도 100.0(4.0)
    assert metrics.top_level_ratio == pytest.approx(0.5)
    assert metrics.pressure_direction == "down"
    assert metrics.pressure_strength == pytest.approx(5.0)


def test_pressure_strength_capped() -> None:
    book = build_book(bids=[(99.0, 500.0)], asks=[(100.0, 1.0)])

    metrics = compute_imbalance(book)

    assert metrics is not None
    assert metrics.pressure_direction == "up"
    assert metrics.pressure_strength == 100.0


def test_balanced_zero_volume_book() -> None:
    book = build_book(bids=[(99.0, 0.0)], asks=[(100.0, 0.0)])

    metrics = compute_imbalance(book)

    assert metrics is not None
    assert metrics.bid_percentage == 50.0
    assert metrics.ask_percentage == 50.0
    assert metrics.imbalance_percentage == 0.0
    assert metrics.direction == "buy"
    assert math.isinf(metrics.volume_ratio)
    # 최우선 매도 수량 0 → 분모 1
    assert metrics.top_level_ratio == 0.0


def test_one_sided_book_has_no_metrics() -> None:
    assert compute_imbalance(build_book(asks=[])) is None
    assert compute_imbalance(build_book(bids=[])) is None
