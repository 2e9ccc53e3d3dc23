"""오더북 내부 도메인 모델.

내부 처리용 불변 도메인 객체 (dataclass 기반).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(slots=True, frozen=True, eq=True, repr=True, match_args=False, kw_only=True)
class ImbalanceDomain:
    """호가 불균형 지표 도메인.

    특징:
    - 불변 객체 (frozen=True)
    - 슬롯 최적화 (slots=True)
    - Pydantic 검증 없음 (계산 결과 전달용)

    용도:
    - 매수/매도 물량 비중, 최우선 호가 압력 표시
    """

    bid_volume: float
    ask_volume: float
    bid_percentage: float
    ask_percentage: float
    volume_ratio: float  # bid_volume / ask_volume (ask_volume == 0 이면 inf)
    imbalance_percentage: float
    direction: Literal["buy", "sell"]
    top_level_ratio: float
    pressure_direction: Literal["up", "down"]
    pressure_strength: float
