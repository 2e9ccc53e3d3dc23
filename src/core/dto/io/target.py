from __future__ import annotations

from src.core.dto.io._base import ExchangeContextModel


class SubscriptionTargetDTO(ExchangeContextModel):
    """구독 대상(Target) DTO.

    - 살아있는 피드 하나를 정확히 식별합니다 (exchange, symbol).
    - 소비자가 거래소/심볼을 선택할 때 생성되고, 대상 전환/종료 시 폐기됩니다.
    """

    def to_key(self) -> str:
        """대상을 로깅/레지스트리 키로 변환 (exchange|symbol 형식)"""
        return f"{self.exchange.value}|{self.symbol}"
