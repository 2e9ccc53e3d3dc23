from __future__ import annotations

import asyncio
import contextlib
from contextlib import AbstractAsyncContextManager
from typing import Any, Awaitable, Callable, TypeAlias

import websockets
from websockets.protocol import State

from src.common.events import ConnectionExhaustedEvent, EventBus
from src.common.exceptions.exception_rule import SOCKET_EXCEPTIONS
from src.common.logger import PipelineLogger
from src.config.settings import websocket_settings
from src.core.connection.services.backoff import compute_next_backoff
from src.core.connection.utils.timestamp import now_ms
from src.core.dto.internal.common import ConnectionPolicyDomain, ConnectionStateDomain
from src.core.dto.io.events import TransportErrorEvent
from src.core.dto.io.orderbook import OrderBookDTO
from src.core.dto.io.target import SubscriptionTargetDTO
from src.core.types import ConnectionStatus, ErrorKind
from src.exchange.registry import encode_subscription, endpoint, normalize

logger = PipelineLogger.get_logger("feed_manager", "connection")

Connector: TypeAlias = Callable[[str], AbstractAsyncContextManager[Any]]
Sleeper: TypeAlias = Callable[[float], Awaitable[None]]
UpdateCallback: TypeAlias = Callable[[OrderBookDTO], None]
ErrorCallback: TypeAlias = Callable[[TransportErrorEvent], None]
ExhaustedCallback: TypeAlias = Callable[[SubscriptionTargetDTO], None]


def policy_from_settings() -> ConnectionPolicyDomain:
    """WS_ 환경변수 기반 재연결 정책 생성"""
    return ConnectionPolicyDomain(
        max_attempts=websocket_settings.reconnect_max_attempts,
        base_delay_ms=websocket_settings.reconnect_base_delay_ms,
        max_delay_ms=websocket_settings.reconnect_max_delay_ms,
    )


def default_connector(url: str) -> AbstractAsyncContextManager[Any]:
    """websockets 클라이언트 연결 (async context manager)"""
    return websockets.connect(
        url,
        open_timeout=websocket_settings.open_timeout,
        ping_interval=websocket_settings.ping_interval or None,
    )


class FeedConnectionManager:
    """단일 구독 대상의 스트리밍 연결 관리자

    상태 전이:
        Idle → Connecting → Subscribed → (Closed | Reconnecting(n))
        Reconnecting(n) → Connecting (백오프 후)
        Reconnecting(max) 이후 실패 → Closed(exhausted)

    보장:
    - 대상당 살아있는 소켓은 최대 1개 (connect는 기존 연결을 먼저 정리)
    - 콜백은 수신 순서대로, 한 번에 하나씩 호출
    - disconnect()/connect() 반환 이후 이전 대상의 콜백은 호출되지 않음

    connect()는 실행 중인 이벤트 루프 안에서 호출해야 합니다.
    """

    def __init__(
        self,
        policy: ConnectionPolicyDomain | None = None,
        *,
        connector: Connector | None = None,
        sleep: Sleeper | None = None,
    ) -> None:
        """
        Args:
            policy: 재연결 정책 (기본: WS_ 설정)
            connector: url → async context manager (기본: websockets.connect)
            sleep: 백오프 대기 함수 (기본: asyncio.sleep)
        """
        self.policy = policy or policy_from_settings()
        self._connector = connector or default_connector
        self._sleep = sleep or asyncio.sleep

        self._state = ConnectionStateDomain()
        self._target: SubscriptionTargetDTO | None = None
        self._on_update: UpdateCallback | None = None
        self._on_error: ErrorCallback | None = None
        self._on_exhausted: ExhaustedCallback | None = None

        self._websocket: Any = None
        self._task: asyncio.Task[None] | None = None
        self._backoff_task: asyncio.Task[None] | None = None
        # connect/disconnect마다 증가, 이전 세대의 콜백/상태 갱신을 무효화
        self._generation = 0
        self._last_error: str | None = None

    # ------------------------------------------------------------------
    # 공개 API
    # ------------------------------------------------------------------

    @property
    def state(self) -> ConnectionStateDomain:
        return self._state

    @property
    def target(self) -> SubscriptionTargetDTO | None:
        return self._target

    def connect(
        self,
        target: SubscriptionTargetDTO,
        on_update: UpdateCallback,
        on_error: ErrorCallback | None = None,
        on_exhausted: ExhaustedCallback | None = None,
    ) -> None:
        """대상 피드 연결 시작 (멱등 재진입점).

        기존 연결(같은 대상 포함)을 먼저 정리한 뒤 Connecting으로 전이합니다.
        """
        self._teardown()
        self._generation += 1
        generation = self._generation

        self._target = target
        self._on_update = on_update
        self._on_error = on_error
        self._on_exhausted = on_exhausted
        self._last_error = None
        self._state = ConnectionStateDomain(status=ConnectionStatus.CONNECTING)

        self._task = asyncio.get_running_loop().create_task(
            self._run(generation, target), name=f"feed:{target.to_key()}"
        )

    def retry(self) -> bool:
        """재연결 한도 초과 후 수동 재시도 (같은 대상/콜백으로 connect 재호출)."""
        if self._target is None or self._on_update is None:
            return False
        self.connect(self._target, self._on_update, self._on_error, self._on_exhausted)
        return True

    def disconnect(self) -> None:
        """연결 종료 (멱등).

        백오프 타이머와 수신 태스크를 동기적으로 취소하고 콜백을 해제합니다.
        소켓은 취소된 태스크가 context manager를 빠져나오며 닫힙니다.
        """
        if self._target is not None:
            logger.info(f"{self._target.to_key()}: disconnect requested")
        self._teardown()
        self._generation += 1
        self._target = None
        self._on_update = None
        self._on_error = None
        self._on_exhausted = None
        self._state = ConnectionStateDomain(status=ConnectionStatus.CLOSED)

    def is_connected(self) -> bool:
        """전송 계층이 존재하고 OPEN 상태일 때만 True"""
        websocket = self._websocket
        return websocket is not None and getattr(websocket, "state", None) is State.OPEN

    async def wait_closed(self) -> None:
        """현재(또는 마지막) 연결 태스크가 끝날 때까지 대기."""
        task = self._task
        if task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task

    # ------------------------------------------------------------------
    # 내부 구현
    # ------------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _set_state(
        self, generation: int, status: ConnectionStatus, attempt: int = 0, exhausted: bool = False
    ) -> None:
        if not self._is_current(generation):
            return
        self._state = ConnectionStateDomain(status=status, attempt=attempt, exhausted=exhausted)

    def _teardown(self) -> None:
        if self._backoff_task is not None and not self._backoff_task.done():
            self._backoff_task.cancel()
        self._backoff_task = None

        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._websocket = None

    async def _run(self, generation: int, target: SubscriptionTargetDTO) -> None:
        """연결 → 구독 → 수신 루프. 끊김 시 백오프 후 재접속합니다."""
        url = endpoint(target.exchange)
        key = target.to_key()
        attempt = 0

        while self._is_current(generation):
            self._set_state(generation, ConnectionStatus.CONNECTING, attempt)
            logger.info(f"{key}: 연결 시도 중... {url}")
            try:
                async with self._connector(url) as websocket:
                    if not self._is_current(generation):
                        break

                    self._websocket = websocket
                    await websocket.send(encode_subscription(target.exchange, target.symbol))
                    # 구독 전송 완료 → 시도 횟수 리셋
                    attempt = 0
                    self._set_state(generation, ConnectionStatus.SUBSCRIBED)
                    logger.info(f"{key}: 연결 및 구독 완료")

                    async for frame in websocket:
                        if not self._is_current(generation):
                            return
                        self._dispatch(generation, target, frame)

                logger.info(f"{key}: 서버가 연결을 종료했습니다.")
            except asyncio.CancelledError:
                logger.info(f"{key}: 연결 작업이 취소되었습니다.")
                raise
            except SOCKET_EXCEPTIONS as e:
                if not self._is_current(generation):
                    break
                logger.warning(f"{key}: 연결이 끊겼습니다. 이유: {type(e).__name__} {e}")
                self._emit_error(generation, target, e, attempt)
            except Exception as e:
                if not self._is_current(generation):
                    break
                logger.error(
                    f"{key}: unexpected error in connection loop - {e}", exc_info=True
                )
                self._emit_error(generation, target, e, attempt)
            finally:
                if self._is_current(generation):
                    self._websocket = None

            if not self._is_current(generation):
                break

            if attempt >= self.policy.max_attempts:
                self._exhaust(generation, target, attempt)
                break

            attempt += 1
            delay = compute_next_backoff(self.policy, attempt)
            self._set_state(generation, ConnectionStatus.RECONNECTING, attempt)
            logger.info(f"{key}: {delay:.2f}s 후 재접속 (attempt={attempt})")

            backoff = asyncio.create_task(self._sleep(delay))
            self._backoff_task = backoff
            try:
                await backoff
            finally:
                # 다음 세대가 저장한 핸들은 유지
                if self._backoff_task is backoff:
                    self._backoff_task = None

    def _dispatch(self, generation: int, target: SubscriptionTargetDTO, frame: Any) -> None:
        """수신 프레임 정규화 후 on_update 호출 (None이면 무시)"""
        book = normalize(target.exchange, frame, received_at_ms=now_ms())
        if book is None or not self._is_current(generation):
            return
        callback = self._on_update
        if callback is None:
            return
        try:
            callback(book)
        except Exception as e:
            logger.error(f"{target.to_key()}: on_update 콜백 실패 - {e}", exc_info=True)

    def _emit_error(
        self,
        generation: int,
        target: SubscriptionTargetDTO,
        err: BaseException,
        attempt: int,
    ) -> None:
        self._last_error = f"{type(err).__name__}: {err}"
        callback = self._on_error
        if callback is None or not self._is_current(generation):
            return
        event = TransportErrorEvent(
            exchange=target.exchange,
            symbol=target.symbol,
            attempt=attempt,
            error_type=type(err).__name__,
            message=str(err),
            occurred_at_ms=now_ms(),
        )
        try:
            callback(event)
        except Exception as e:
            logger.error(f"{target.to_key()}: on_error 콜백 실패 - {e}", exc_info=True)

    def _exhaust(self, generation: int, target: SubscriptionTargetDTO, attempt: int) -> None:
        logger.error(
            f"{target.to_key()}: 재연결 한도({self.policy.max_attempts}) 초과 종료",
            extra={"kind": ErrorKind.CONNECTION_EXHAUSTED.value, "last_error": self._last_error},
        )
        self._set_state(generation, ConnectionStatus.CLOSED, attempt, exhausted=True)

        EventBus.emit(
            ConnectionExhaustedEvent(target=target, attempts=attempt, last_error=self._last_error)
        )
        callback = self._on_exhausted
        if callback is None:
            return
        try:
            callback(target)
        except Exception as e:
            logger.error(f"{target.to_key()}: on_exhausted 콜백 실패 - {e}", exc_info=True)
