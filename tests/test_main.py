from __future__ import annotations

import pytest

from main import Application, build_parser
from src.core.types import OrderType
from tests.factory_builders import build_book


def _application(*argv: str) -> Application:
    app = Application(build_parser().parse_args(list(argv)))
    app._configure_session(app._resolve_target())
    return app


def test_every_accepted_book_is_simulated_with_immediate_delay() -> None:
    app = _application("--exchange", "okx", "--simulate-type", "market", "--delay", "immediate")

    app._on_book(build_book(asks=[(100.0, 5.0)], observed_at_ms=1))
    first = app.session.result
    app._on_book(build_book(asks=[(105.0, 5.0)], observed_at_ms=2))
    second = app.session.result

    assert first is not None and second is not None
    assert first.average_price == pytest.approx(100.0)
    assert second.average_price == pytest.approx(105.0)


def test_new_book_supersedes_delayed_result() -> None:
    app = _application("--simulate-type", "market", "--delay", "30s")

    app._on_book(build_book(asks=[(100.0, 5.0)], observed_at_ms=1))
    app._on_book(build_book(asks=[(101.0, 5.0)], observed_at_ms=2))

    assert app.session.result is not None
    assert app.session.result.average_price == pytest.approx(101.0)


def test_without_simulate_type_no_simulation_runs() -> None:
    app = _application("--exchange", "bybit")

    app._on_book(build_book())

    assert app.session.result is None


def test_limit_arguments_configure_session_draft() -> None:
    app = _application(
        "--exchange", "deribit", "--simulate-type", "limit", "--price", "65000", "--quantity", "2"
    )

    assert app.session.draft.order_type is OrderType.LIMIT
    assert app.session.draft.symbol == "BTC-PERPETUAL"
    assert app.session.draft.limit_price == 65000.0
    assert app.session.draft.quantity == 2.0
