from __future__ import annotations

from typing import Any, Callable

from src.application.book_stream import (
    CONNECTION_ERROR_MESSAGE,
    EXHAUSTED_MESSAGE,
    OrderBookStream,
)
from src.core.dto.io.events import TransportErrorEvent
from src.core.dto.io.orderbook import OrderBookDTO
from src.core.dto.io.target import SubscriptionTargetDTO
from tests.factory_builders import build_book, build_target


class _FakeManager:
    """FeedConnectionManager 대역 (콜백을 직접 호출)"""

    def __init__(self) -> None:
        self.connected_targets: list[SubscriptionTargetDTO] = []
        self.disconnects = 0
        self.on_update: Callable[[OrderBookDTO], None] | None = None
        self.on_error: Callable[[TransportErrorEvent], None] | None = None
        self.on_exhausted: Callable[[SubscriptionTargetDTO], None] | None = None
        self.open = False

    def connect(
        self,
        target: SubscriptionTargetDTO,
        on_update: Any,
        on_error: Any = None,
        on_exhausted: Any = None,
    ) -> None:
        self.connected_targets.append(target)
        self.on_update = on_update
        self.on_error = on_error
        self.on_exhausted = on_exhausted
        self.open = True

    def disconnect(self) -> None:
        self.disconnects += 1
        self.open = False

    def is_connected(self) -> bool:
        return self.open

    async def wait_closed(self) -> None:
        return None


def _started_stream() -> tuple[OrderBookStream, _FakeManager]:
    manager = _FakeManager()
    stream = OrderBookStream(manager)  # type: ignore[arg-type]
    stream.start(build_target())
    return stream, manager


def test_accepted_update_is_aggregated_and_published() -> None:
    stream, manager = _started_stream()
    published: list[OrderBookDTO] = []
    stream.subscribe(published.append)

    assert manager.on_update is not None
    manager.on_update(build_book(bids=[(99.0, 1.0), (99.5, 1.0)], observed_at_ms=10))

    assert [level.price for level in stream.book.bids] == [99.5, 99.0]
    assert stream.book.bids[-1].cumulative_quantity == 2.0
    assert published == [stream.book]
    assert stream.is_connected() is True


def test_stale_or_equal_timestamp_is_dropped() -> None:
    stream, manager = _started_stream()
    published: list[OrderBookDTO] = []
    stream.subscribe(published.append)
    assert manager.on_update is not None

    manager.on_update(build_book(observed_at_ms=100))
    manager.on_update(build_book(asks=[(150.0, 1.0)], observed_at_ms=100))
    manager.on_update(build_book(asks=[(150.0, 1.0)], observed_at_ms=90))

    assert len(published) == 1
    assert stream.book.asks[0].price == 100.0


def test_unsubscribe_stops_notifications() -> None:
    stream, manager = _started_stream()
    published: list[OrderBookDTO] = []
    unsubscribe = stream.subscribe(published.append)
    unsubscribe()
    assert manager.on_update is not None

    manager.on_update(build_book())

    assert published == []


def test_listener_error_is_isolated() -> None:
    stream, manager = _started_stream()
    published: list[OrderBookDTO] = []

    def broken(book: OrderBookDTO) -> None:
        raise RuntimeError("render failed")

    stream.subscribe(broken)
    stream.subscribe(published.append)
    assert manager.on_update is not None

    manager.on_update(build_book())

    assert len(published) == 1


def test_switch_resets_book_and_timestamp() -> None:
    stream, manager = _started_stream()
    assert manager.on_update is not None
    manager.on_update(build_book(observed_at_ms=500))

    bybit = build_target(exchange="bybit", symbol="BTCUSDT")
    stream.switch(bybit)

    assert stream.target == bybit
    assert stream.book.is_empty
    assert manager.connected_targets[-1] == bybit
    # 새 대상은 더 작은 타임스탬프도 수용
    manager.on_update(build_book(observed_at_ms=5))
    assert stream.book.observed_at_ms == 5


def test_error_and_exhaustion_surface_messages() -> None:
    stream, manager = _started_stream()
    assert manager.on_error is not None and manager.on_exhausted is not None
    target = build_target()

    manager.on_error(
        TransportErrorEvent(
            exchange=target.exchange,
            symbol=target.symbol,
            error_type="OSError",
            message="reset by peer",
            occurred_at_ms=1,
        )
    )
    assert stream.last_error == CONNECTION_ERROR_MESSAGE

    manager.on_exhausted(target)
    assert stream.exhausted is True
    assert stream.last_error == EXHAUSTED_MESSAGE

    assert stream.retry() is True
    assert stream.exhausted is False
    assert stream.last_error is None
    assert len(manager.connected_targets) == 2


def test_update_clears_previous_error() -> None:
    stream, manager = _started_stream()
    target = build_target()
    assert manager.on_error is not None and manager.on_update is not None
    manager.on_error(
        TransportErrorEvent(
            exchange=target.exchange,
            symbol=target.symbol,
            error_type="OSError",
            occurred_at_ms=1,
        )
    )

    manager.on_update(build_book())

    assert stream.last_error is None


def test_stop_disconnects() -> None:
    stream, manager = _started_stream()

    stream.stop()

    assert manager.disconnects == 1
    assert stream.target is None
    assert stream.is_connected() is False
    assert stream.retry() is False
