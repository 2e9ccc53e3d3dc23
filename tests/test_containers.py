from __future__ import annotations

from dependency_injector import providers

from src.application.book_stream import OrderBookStream
from src.application.simulation_session import SimulationSession
from src.config.containers import ApplicationContainer
from src.core.connection.feed_manager import FeedConnectionManager


def test_feed_manager_factory_uses_websocket_settings() -> None:
    container = ApplicationContainer()

    manager = container.feed.feed_manager()

    assert isinstance(manager, FeedConnectionManager)
    ws = container.feed.websocket_config()
    assert manager.policy.max_attempts == ws.reconnect_max_attempts
    assert manager.policy.base_delay_ms == ws.reconnect_base_delay_ms
    assert manager.policy.max_delay_ms == ws.reconnect_max_delay_ms


def test_feed_manager_factory_returns_independent_instances() -> None:
    container = ApplicationContainer()

    assert container.feed.feed_manager() is not container.feed.feed_manager()


def test_application_services_are_singletons() -> None:
    container = ApplicationContainer()

    stream = container.book_stream()
    session = container.simulation_session()

    assert isinstance(stream, OrderBookStream)
    assert isinstance(session, SimulationSession)
    assert container.book_stream() is stream
    assert container.simulation_session() is session


def test_sleep_override() -> None:
    container = ApplicationContainer()

    async def _no_sleep(delay: float) -> None:
        return None

    with container.feed.sleep.override(providers.Object(_no_sleep)):
        manager = container.feed.feed_manager()

    assert manager._sleep is _no_sleep
