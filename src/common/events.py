"""이벤트 정의 및 Event Bus (EDA 패턴)

모든 레이어가 순환 import 없이 이벤트를 발행할 수 있도록 지원합니다.
이벤트는 순수 데이터 객체로, 의존성이 없습니다.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from src.common.logger import PipelineLogger
from src.core.dto.io.target import SubscriptionTargetDTO

logger = PipelineLogger.get_logger("event_bus", "common")


@dataclass(frozen=True, slots=True)
class ConnectionExhaustedEvent:
    """재연결 한도 초과 이벤트 (순수 데이터)

    isConnected()가 계속 False인 것과 별개로, 관심 있는 소비자가
    수동 재시도 UI 등을 띄울 수 있도록 발행됩니다.
    """

    target: SubscriptionTargetDTO
    attempts: int
    last_error: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)


class EventBus:
    """전역 이벤트 버스 (의존성 없음)

    특징:
    - 타입 기반 핸들러 등록
    - 동기/비동기 핸들러 모두 지원 (코루틴은 태스크로 예약)
    - 핸들러 예외는 로깅 후 격리
    """

    _handlers: dict[type, list[Callable[[Any], Any]]] = {}
    _tasks: set[asyncio.Task[Any]] = set()

    @classmethod
    def emit(cls, event: Any) -> None:
        """이벤트 발행

        Args:
            event: 발행할 이벤트 객체
        """
        event_type = type(event)
        for handler in cls._handlers.get(event_type, []):
            try:
                result = handler(event)
                if asyncio.iscoroutine(result):
                    task = asyncio.get_running_loop().create_task(result)
                    cls._tasks.add(task)
                    task.add_done_callback(cls._on_task_done)
            except Exception as e:
                logger.error(
                    f"Event handler failed: {e}",
                    exc_info=True,
                    extra={
                        "event_type": event_type.__name__,
                        "handler": getattr(handler, "__name__", repr(handler)),
                    },
                )

    @classmethod
    def _on_task_done(cls, task: asyncio.Task[Any]) -> None:
        cls._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"Async event handler failed: {exc}",
                exc_info=exc,
                extra={"task": task.get_name()},
            )

    @classmethod
    def on(cls, event_type: type, handler: Callable[[Any], Any]) -> None:
        """핸들러 등록

        Args:
            event_type: 이벤트 타입 (클래스)
            handler: 핸들러 함수 (def 또는 async def)
        """
        cls._handlers.setdefault(event_type, []).append(handler)

    @classmethod
    def clear(cls) -> None:
        """모든 핸들러 제거 (테스트용)"""
        cls._handlers.clear()


__all__ = ["ConnectionExhaustedEvent", "EventBus"]
