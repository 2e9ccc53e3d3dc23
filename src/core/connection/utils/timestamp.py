"""타임스탬프 생성/해석 유틸리티."""

from __future__ import annotations

import math
import time
from typing import Any


def now_ms() -> int:
    """현재 시각 (UTC Unix timestamp, milliseconds)."""
    return time.time_ns() // 1_000_000


def resolve_timestamp_ms(value: Any, fallback_ms: int) -> int:
    """메시지 타임스탬프 필드를 ms 정수로 해석, 없거나 해석 불가면 fallback.

    Args:
        value: 거래소 메시지의 ts 값 (int, float, 숫자 문자열, None)
        fallback_ms: 수신 시각 (ms)

    Examples:
        >>> resolve_timestamp_ms("1730336862000", 1)
        1730336862000
        >>> resolve_timestamp_ms(None, 42)
        42
    """
    if isinstance(value, bool) or value is None:
        return fallback_ms
    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value <= 0:
            return fallback_ms
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return fallback_ms
