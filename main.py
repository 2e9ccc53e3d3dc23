"""애플리케이션 진입점 (DI Container 기반)

암호화폐 거래소 호가창 스트림 + 주문 체결 시뮬레이터
- 선택한 거래소/심볼의 호가창을 웹소켓으로 수신
- 집계된 최우선 호가와 불균형 지표를 로깅
- (선택) 갱신마다 주문 시뮬레이션 결과를 로깅

Usage:
    python main.py --exchange okx --symbol BTC-USDT
    python main.py --exchange bybit --simulate-type market --simulate-side sell --quantity 0.5
    python main.py --exchange deribit --simulate-type limit --price 65000 --delay 5s --duration 60
"""

import argparse
import asyncio
import contextlib

from pydantic import ValidationError

from src.common.events import ConnectionExhaustedEvent, EventBus
from src.common.logger import PipelineLogger
from src.common.number_format import format_price, format_quantity, format_timestamp
from src.config.containers import ApplicationContainer
from src.core.dto.io.orderbook import OrderBookDTO
from src.core.dto.io.target import SubscriptionTargetDTO
from src.core.orderbook.imbalance import compute_imbalance
from src.core.types import DelayOption, ExchangeId, OrderSide, OrderType
from src.exchange.registry import available_symbols, default_symbol

logger = PipelineLogger.get_logger("main", "app")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Order book stream & execution simulator")
    parser.add_argument(
        "--exchange",
        choices=[e.value for e in ExchangeId],
        default=ExchangeId.OKX.value,
        help="거래소",
    )
    parser.add_argument("--symbol", default=None, help="심볼 (미지정 시 거래소 기본 심볼)")
    parser.add_argument(
        "--simulate-type",
        choices=[t.value for t in OrderType],
        default=None,
        help="지정 시 갱신마다 주문 시뮬레이션 수행",
    )
    parser.add_argument(
        "--simulate-side", choices=[s.value for s in OrderSide], default=OrderSide.BUY.value
    )
    parser.add_argument("--quantity", type=float, default=1.0)
    parser.add_argument("--price", type=float, default=None, help="지정가 (limit 전용)")
    parser.add_argument(
        "--delay", choices=[d.value for d in DelayOption], default=DelayOption.IMMEDIATE.value
    )
    parser.add_argument(
        "--duration", type=float, default=None, help="실행 시간(초), 미지정 시 무기한"
    )
    return parser


class Application:
    """애플리케이션 메인 클래스

    책임:
    - DI Container 관리
    - Event Bus 리스너 등록
    - 스트림 실행 및 Graceful Shutdown
    """

    def __init__(self, args: argparse.Namespace) -> None:
        self.args = args
        self.container = ApplicationContainer()
        self.stream = self.container.book_stream()
        self.session = self.container.simulation_session()
        self._stop = asyncio.Event()

    def _resolve_target(self) -> SubscriptionTargetDTO:
        exchange = ExchangeId(self.args.exchange)
        symbol = self.args.symbol or default_symbol(exchange)
        if symbol not in available_symbols(exchange):
            logger.warning(f"{symbol}은(는) {exchange.value} 기본 카탈로그에 없는 심볼입니다")
        return SubscriptionTargetDTO(exchange=exchange, symbol=symbol)

    def _configure_session(self, target: SubscriptionTargetDTO) -> None:
        if self.args.simulate_type is None:
            return
        self.session.update(
            exchange=target.exchange,
            order_type=self.args.simulate_type,
            side=OrderSide(self.args.simulate_side),
            quantity=self.args.quantity,
            delay=DelayOption(self.args.delay),
        )
        # 거래소 변경 시 심볼이 기본값으로 재설정되므로 마지막에 반영
        self.session.update(symbol=target.symbol, limit_price=self.args.price)
        # 초안 검증 (실패 시 ValidationError)
        self.session.draft.to_spec()

    def _setup_event_bus(self) -> None:
        """재연결 한도 초과 시 애플리케이션 종료"""

        def handle_exhausted(event: ConnectionExhaustedEvent) -> None:
            logger.error(
                f"{event.target.to_key()} 재연결 {event.attempts}회 실패, 종료합니다",
                extra={"last_error": event.last_error},
            )
            self._stop.set()

        EventBus.on(ConnectionExhaustedEvent, handle_exhausted)

    def _on_book(self, book: OrderBookDTO) -> None:
        best_bid, best_ask = book.best_bid, book.best_ask
        if best_bid is None or best_ask is None:
            return

        spread = book.spread or 0.0
        message = (
            f"[{format_timestamp(book.observed_at_ms)}] "
            f"bid {format_price(best_bid.price)} x {format_quantity(best_bid.quantity, 4)} | "
            f"ask {format_price(best_ask.price)} x {format_quantity(best_ask.quantity, 4)} | "
            f"spread {format_price(spread)}"
        )
        imbalance = compute_imbalance(book)
        if imbalance is not None:
            message += (
                f" | {imbalance.direction} pressure {imbalance.imbalance_percentage:.0f}%"
                f" (ratio {imbalance.volume_ratio:.2f}x)"
            )
        if book.is_crossed:
            message += " | CROSSED"
        logger.info(message)

        if self.args.simulate_type is not None:
            # 갱신마다 새 결과로 대체
            result = self.session.simulate(book)
            if result is not None:
                logger.info(
                    f"simulation: fill {result.fill_percentage:.1f}% "
                    f"impact {result.market_impact_percentage:.1f}% "
                    f"slippage {result.slippage_percentage:.2f}% "
                    f"eta {result.estimated_time_to_fill}"
                )

    async def run(self) -> None:
        target = self._resolve_target()
        self._configure_session(target)
        self._setup_event_bus()

        self.stream.subscribe(self._on_book)
        self.stream.start(target)
        logger.info(f"스트림 시작: {target.to_key()}")

        if self.args.duration is None:
            await self._stop.wait()
            return
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(self._stop.wait(), timeout=self.args.duration)

    async def shutdown(self) -> None:
        logger.info("정리 작업 시작...")
        self.stream.stop()
        await self.stream.wait_closed()
        EventBus.clear()
        logger.info("✅ 프로그램 종료 완료")


async def main(args: argparse.Namespace) -> None:
    """메인 실행 함수"""
    app = Application(args)
    try:
        await app.run()
    finally:
        await app.shutdown()


if __name__ == "__main__":
    parser = build_parser()
    cli_args = parser.parse_args()
    try:
        asyncio.run(main(cli_args))
    except ValidationError as e:
        parser.error(f"invalid order: {e.errors()[0]['msg']}")
    except KeyboardInterrupt:
        print("\n프로그램이 종료되었습니다.")
