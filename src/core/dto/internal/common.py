from __future__ import annotations

from dataclasses import dataclass

from src.core.types import ConnectionStatus, connection_status_format


@dataclass(slots=True, frozen=True, eq=True, repr=False, match_args=False, kw_only=True)
class ConnectionPolicyDomain:
    """웹소켓 재연결/백오프 정책(도메인).

    - delay = min(base_delay_ms * multiplier**attempt, max_delay_ms)
    - attempt는 지연 계산 전에 증가하므로 첫 재시도는 base*2 (2초)부터 시작
    - max_attempts회 재시도가 모두 실패하면 더 이상 자동 재연결하지 않음
    """

    max_attempts: int = 5
    base_delay_ms: int = 1000
    max_delay_ms: int = 30000
    backoff_multiplier: float = 2.0
    jitter: float = 0.0  # +/- 비율 (기본 0: 결정적 지연)


@dataclass(slots=True, frozen=True, eq=True, repr=False, match_args=False, kw_only=True)
class ConnectionStateDomain:
    """피드 연결 상태 값 객체.

    Reconnecting(n)은 status=RECONNECTING, attempt=n 으로 표현합니다.
    매니저만 이 값을 교체(불변 객체 재생성)합니다.
    """

    status: ConnectionStatus = ConnectionStatus.IDLE
    attempt: int = 0
    exhausted: bool = False

    def __repr__(self) -> str:
        return f"ConnectionState({connection_status_format(self.status, self.attempt)})"
