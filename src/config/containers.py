"""
Dependency Injection Containers

애플리케이션 의존성을 관리하는 DI 컨테이너를 정의합니다.

아키텍처:
- FeedContainer: 재연결 정책 + FeedConnectionManager 팩토리 + Settings 주입
- ApplicationContainer: 최상위 컨테이너 (OrderBookStream, SimulationSession)

주요 패턴:
- Object Provider: settings.py 싱글톤 주입 (DI)
- Factory Provider: 대상마다 독립된 연결 관리자 생성
- Singleton Provider: 프로세스당 하나의 스트림/세션

Usage:
    container = ApplicationContainer()
    stream = container.book_stream()
    max_attempts = container.feed.websocket_config().reconnect_max_attempts
"""

import asyncio

from dependency_injector import containers, providers

from src.application.book_stream import OrderBookStream
from src.application.simulation_session import SimulationSession
from src.config.settings import (
    app_settings,
    logging_settings,
    orderbook_settings,
    websocket_settings,
)
from src.core.connection.feed_manager import FeedConnectionManager, default_connector
from src.core.dto.internal.common import ConnectionPolicyDomain


# ========================================
# 1. Feed Container (연결 레이어)
# ========================================
class FeedContainer(containers.DeclarativeContainer):
    """피드 연결 컨테이너

    - 재연결 정책은 WS_ 설정에서 생성
    - connector/sleep은 테스트에서 override 가능
    """

    # ===== Settings 주입 (DI) =====
    websocket_config = providers.Object(websocket_settings)

    policy = providers.Factory(
        ConnectionPolicyDomain,
        max_attempts=websocket_config.provided.reconnect_max_attempts,
        base_delay_ms=websocket_config.provided.reconnect_base_delay_ms,
        max_delay_ms=websocket_config.provided.reconnect_max_delay_ms,
    )

    connector = providers.Object(default_connector)
    sleep = providers.Object(asyncio.sleep)

    feed_manager = providers.Factory(
        FeedConnectionManager,
        policy=policy,
        connector=connector,
        sleep=sleep,
    )


# ========================================
# 2. Application Container (최상위)
# ========================================
class ApplicationContainer(containers.DeclarativeContainer):
    """애플리케이션 최상위 컨테이너

    Features:
    - 설정 싱글톤 노출
    - OrderBookStream / SimulationSession 의존성 자동 주입
    """

    # ===== Settings 주입 (DI) =====
    app_config = providers.Object(app_settings)
    logging_config = providers.Object(logging_settings)
    orderbook_config = providers.Object(orderbook_settings)

    # ===== 하위 컨테이너 포함 =====
    feed = providers.Container(FeedContainer)

    # ===== Application Services =====
    book_stream = providers.Singleton(
        OrderBookStream,
        manager=feed.feed_manager,
        display_levels=orderbook_config.provided.display_levels,
    )

    simulation_session = providers.Singleton(SimulationSession)
