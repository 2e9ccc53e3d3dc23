"""통합 Settings 모듈 - 환경변수 기반

이 모듈의 역할:
    1. 코드에 합리적인 기본값 제공
    2. 환경변수로 오버라이드 (우선순위 높음)
    3. 타입 안전성 보장 (Pydantic 자동 검증)

설정 우선순위:
    1. 환경변수 (최우선) - export WS_RECONNECT_MAX_ATTEMPTS=...
    2. .env 파일 - config/.env
    3. 코드 기본값 (settings.py 내부)

사용 예시:
    # 기본값 사용
    python main.py --exchange okx --symbol BTC-USDT

    # 재연결 정책 오버라이드
    export WS_RECONNECT_MAX_ATTEMPTS=10
    export WS_RECONNECT_MAX_DELAY_MS=60000
    python main.py --exchange bybit --symbol BTCUSDT
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 설정 파일 경로
config_dir = Path(__file__).parent.parent.parent / "config"


def env_settings(prefix: str) -> SettingsConfigDict:
    """.env + 환경변수 통합 설정

    Args:
        prefix: 환경변수 접두사 (예: WS_, BOOK_)

    Returns:
        Pydantic 설정 딕셔너리
    """
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=config_dir / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# ========================================
# 통합 Settings (.env + 환경변수)
# ========================================


class AppSettings(BaseSettings):
    """애플리케이션 일반 설정

    환경변수 오버라이드:
        APP_ENVIRONMENT: 실행 환경 (dev, prod, test) (기본: dev)
        APP_DEBUG: 디버그 모드 (기본: false)
    """

    environment: str = "dev"
    debug: bool = False

    model_config = env_settings("APP_")


class LoggingSettings(BaseSettings):
    """로깅 설정

    환경변수 오버라이드:
        LOG_LEVEL: 로깅 레벨 (기본: INFO)
        LOG_TO_FILE: 파일 로깅 여부 (기본: false)
        LOG_DIR: 로그 디렉토리 (기본: logs)
    """

    level: str = "INFO"
    to_file: bool = False
    dir: str = "logs"

    model_config = env_settings("LOG_")


class WebsocketSettings(BaseSettings):
    """WebSocket 재연결 설정 (환경변수 기반)

    환경변수 오버라이드 (지연은 밀리초, 타임아웃은 초 단위):
        WS_RECONNECT_MAX_ATTEMPTS: 재연결 최대 시도 횟수 (기본: 5회)
        WS_RECONNECT_BASE_DELAY_MS: 백오프 기본 지연 (기본: 1000ms)
        WS_RECONNECT_MAX_DELAY_MS: 백오프 최대 지연 (기본: 30000ms)
        WS_OPEN_TIMEOUT: 연결 수립 타임아웃 (기본: 10초)
        WS_PING_INTERVAL: 프레임 ping 간격, 0이면 비활성 (기본: 20초)
    """

    reconnect_max_attempts: int = Field(5, ge=0)
    reconnect_base_delay_ms: int = Field(1000, gt=0)
    reconnect_max_delay_ms: int = Field(30000, gt=0)
    open_timeout: float = Field(10.0, gt=0)
    ping_interval: float = Field(20.0, ge=0)

    model_config = env_settings("WS_")


class OrderbookSettings(BaseSettings):
    """호가창 정규화/집계 설정

    환경변수 오버라이드:
        BOOK_MAX_LEVELS_PER_SIDE: 정규화 시 측면당 최대 레벨 (기본: 50)
        BOOK_DISPLAY_LEVELS: 집계 시 측면당 표시 레벨 (기본: 15)
    """

    max_levels_per_side: int = Field(50, gt=0)
    display_levels: int = Field(15, gt=0)

    model_config = env_settings("BOOK_")


# ========================================
# 설정 인스턴스 (싱글톤)
# ========================================

app_settings = AppSettings()
logging_settings = LoggingSettings()
websocket_settings = WebsocketSettings()
orderbook_settings = OrderbookSettings()
