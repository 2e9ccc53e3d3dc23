"""
실시간 호가창 스트림 서비스

FeedConnectionManager 위에서 소비자 측 상태(최신 집계 호가창, 연결 여부,
마지막 오류)를 유지합니다. 오래된 타임스탬프의 갱신은 여기서 버립니다.
"""

from __future__ import annotations

from typing import Callable, TypeAlias

from src.common.logger import PipelineLogger
from src.core.connection.feed_manager import FeedConnectionManager
from src.core.dto.io.events import TransportErrorEvent
from src.core.dto.io.orderbook import OrderBookDTO
from src.core.dto.io.target import SubscriptionTargetDTO
from src.core.orderbook.aggregator import aggregate

BookListener: TypeAlias = Callable[[OrderBookDTO], None]
logger = PipelineLogger.get_logger("book_stream", "app")

CONNECTION_ERROR_MESSAGE = "Connection error. Attempting to reconnect..."
EXHAUSTED_MESSAGE = "Connection lost. Reconnection attempts exhausted."


class OrderBookStream:
    """단일 대상 실시간 호가창 스트림

    - 수신 갱신은 observed_at_ms가 직전 수용값보다 커야 수용
    - 수용된 갱신은 aggregate 후 최신 호가창으로 보관, 리스너에 순서대로 전달
    - 대상 전환 시 이전 대상의 상태/콜백은 모두 폐기
    """

    def __init__(
        self,
        manager: FeedConnectionManager | None = None,
        *,
        display_levels: int | None = None,
    ) -> None:
        self._manager = manager or FeedConnectionManager()
        self._display_levels = display_levels
        self._listeners: list[BookListener] = []

        self._target: SubscriptionTargetDTO | None = None
        self._book = OrderBookDTO()
        self._last_observed_ms = 0
        self._last_error: str | None = None
        self._exhausted = False

    @property
    def target(self) -> SubscriptionTargetDTO | None:
        return self._target

    @property
    def book(self) -> OrderBookDTO:
        """최신 집계 호가창 (수신 전에는 빈 호가창)"""
        return self._book

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def is_connected(self) -> bool:
        return self._manager.is_connected()

    def subscribe(self, listener: BookListener) -> Callable[[], None]:
        """리스너 등록. 반환값을 호출하면 등록 해제됩니다."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def start(self, target: SubscriptionTargetDTO) -> None:
        """대상 스트림 시작 (기존 스트림은 먼저 정리됨)"""
        self.reset()
        self._target = target
        self._last_error = None
        self._exhausted = False
        logger.info(f"stream start: {target.to_key()}")
        self._manager.connect(
            target,
            self._handle_update,
            on_error=self._handle_error,
            on_exhausted=self._handle_exhausted,
        )

    def switch(self, target: SubscriptionTargetDTO) -> None:
        """대상 전환 (동일 대상이면 재연결)"""
        previous = self._target.to_key() if self._target else None
        logger.info(f"stream switch: {previous} -> {target.to_key()}")
        self.start(target)

    def retry(self) -> bool:
        """재연결 한도 초과 후 수동 재시도"""
        if self._target is None:
            return False
        self.start(self._target)
        return True

    def stop(self) -> None:
        """스트림 종료 (멱등)"""
        self._manager.disconnect()
        self._target = None

    def reset(self) -> None:
        """최신 호가창/타임스탬프 초기화"""
        self._book = OrderBookDTO()
        self._last_observed_ms = 0

    async def wait_closed(self) -> None:
        await self._manager.wait_closed()

    def _handle_update(self, book: OrderBookDTO) -> None:
        if book.observed_at_ms <= self._last_observed_ms:
            logger.debug(
                f"stale update dropped: {book.observed_at_ms} <= {self._last_observed_ms}"
            )
            return

        self._last_observed_ms = book.observed_at_ms
        self._last_error = None
        self._book = aggregate(book, self._display_levels)

        for listener in list(self._listeners):
            try:
                listener(self._book)
            except Exception as e:
                logger.error(f"book listener failed: {e}", exc_info=True)

    def _handle_error(self, event: TransportErrorEvent) -> None:
        self._last_error = CONNECTION_ERROR_MESSAGE
        logger.warning(
            f"transport error on {event.exchange.value}|{event.symbol}: "
            f"{event.error_type} {event.message}"
        )

    def _handle_exhausted(self, target: SubscriptionTargetDTO) -> None:
        self._exhausted = True
        self._last_error = EXHAUSTED_MESSAGE
        logger.error(f"stream exhausted: {target.to_key()}")
