from __future__ import annotations

import logging
import queue
import sys
from datetime import datetime
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from src.config.settings import logging_settings

# 메시지 뒤에 key=value로 덧붙이는 컨텍스트 필드 (출력 순서 고정)
CONTEXT_FIELDS: tuple[str, ...] = (
    "kind",
    "exchange",
    "symbol",
    "event_type",
    "handler",
    "task",
    "last_error",
    "sample",
)


class ContextFormatter(logging.Formatter):
    """`[component]` 접두어 + 레코드에 실린 컨텍스트 필드를 덧붙이는 포맷터

    컨텍스트는 traceback보다 앞, 메시지 줄 끝에 붙습니다.
    """

    def formatMessage(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "component"):
            record.component = "main"
        line = super().formatMessage(record)
        context = " ".join(
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        )
        return f"{line} | {context}" if context else line


class PipelineLogger:
    """
    피드/시뮬레이션 파이프라인용 로깅 시스템
    큐 기반 비동기 출력, 컴포넌트별 로깅, 선택적 파일 로테이션 제공
    """

    _instances: dict[tuple[str, str | None], PipelineLogger] = {}

    @classmethod
    def get_logger(cls, name: str, component: str | None = None, **kwargs) -> PipelineLogger:
        """
        (name, component) 단위로 로거를 재사용하는 팩토리 메서드.
        kwargs가 주어지면 설정이 다를 수 있으므로 새 인스턴스를 만들어 교체합니다.
        """
        key = (name, component)
        cached = cls._instances.get(key)
        if cached is not None and not kwargs:
            return cached
        if cached is not None:
            cached.close()
        instance = cls(name, component, **kwargs)
        cls._instances[key] = instance
        return instance

    def __init__(
        self,
        name: str,
        component: str | None = None,
        level: int | str | None = None,
        log_to_file: bool | None = None,
        log_to_console: bool = True,
        log_dir: str | None = None,
        rotation: str = "midnight",
    ):
        """
        로거 초기화

        Args:
            name: 로거 이름
            component: 컴포넌트 이름 (connection, exchange, orderbook, app ...)
            level: 로깅 레벨 (미지정 시 LOG_LEVEL)
            log_to_file: 파일에 로깅 여부 (미지정 시 LOG_TO_FILE)
            log_to_console: 콘솔에 로깅 여부
            log_dir: 로그 디렉토리 (미지정 시 LOG_DIR)
            rotation: 로그 로테이션 주기
        """
        self.name = name
        self.component = component
        self.level = level if level is not None else logging_settings.level.upper()
        self.log_to_file = logging_settings.to_file if log_to_file is None else log_to_file
        self.log_to_console = log_to_console
        self.log_dir = log_dir or logging_settings.dir
        self.rotation = rotation

        # 무제한 버퍼로 설정해 queue.Full 예외 방지
        self.log_queue: queue.Queue = queue.Queue()

        self._setup_logger()

    def _setup_logger(self) -> None:
        """
        로거, 핸들러, 포맷터 설정
        """
        self.logger_name = f"{self.name}.{self.component}" if self.component else self.name
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(self.level)

        # 같은 이름으로 재생성될 때 핸들러 중복 방지
        if self.logger.hasHandlers():
            self.logger.handlers.clear()

        self.formatter = ContextFormatter(
            "%(asctime)s %(levelname)s %(name)s [%(component)s] %(message)s"
        )

        handlers: list[logging.Handler] = []

        if self.log_to_console:
            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(self.formatter)
            handlers.append(console)

        if self.log_to_file:
            log_filename = self._get_log_filename()
            # 디렉터리만 생성하고 파일 생성은 핸들러에 위임
            Path(log_filename).parent.mkdir(parents=True, exist_ok=True)

            file_handler = TimedRotatingFileHandler(
                filename=log_filename,
                when=self.rotation,
                backupCount=7,
            )
            file_handler.setFormatter(self.formatter)
            handlers.append(file_handler)

        self.queue_handler = QueueHandler(self.log_queue)
        self.logger.addHandler(self.queue_handler)

        self.listener = QueueListener(self.log_queue, *handlers, respect_handler_level=True)
        self.listener.start()

    def _get_log_filename(self) -> str:
        today = datetime.now().strftime("%Y-%m-%d")
        component_part = f"{self.component}/" if self.component else ""
        return f"{self.log_dir}/{component_part}{self.name}_{today}.log"

    def _process_message(self, level: int, msg: str, extra: dict[str, Any] | None = None) -> None:
        """
        메시지 처리 및 로깅
        """
        log_extra: dict[str, Any] = {"component": self.component or "main"}

        exc_info_param = None
        if extra:
            exc_info_param = extra.pop("exc_info", None)

            # 'extra' 키가 있으면 그 내용을 풀어서 병합
            nested_extra = extra.pop("extra", None)
            if isinstance(nested_extra, dict):
                log_extra.update(nested_extra)
            log_extra.update(extra)

        self.logger.log(level, msg, exc_info=exc_info_param, extra=log_extra)

    def debug(self, msg: str, **kwargs) -> None:
        self._process_message(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs) -> None:
        self._process_message(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs) -> None:
        self._process_message(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs) -> None:
        self._process_message(logging.ERROR, msg, kwargs)

    def close(self) -> None:
        """
        리소스 정리
        """
        self.listener.stop()
