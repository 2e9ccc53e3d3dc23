"""숫자 표시 포맷 유틸리티 (가격 정밀도 사다리, 수량 그룹핑)."""

from __future__ import annotations

from datetime import datetime


def format_price(value: float) -> str:
    """가격 크기에 따라 소수 자릿수를 달리해 포맷.

    Args:
        value: 가격

    Returns:
        고정 소수점 문자열

    Examples:
        >>> format_price(0.00005883)
        '0.00005883'
        >>> format_price(0.5)
        '0.500000'
        >>> format_price(42.1)
        '42.1000'
        >>> format_price(2500.456)
        '2500.46'
        >>> format_price(67250.7)
        '67251'
    """
    if value < 0.01:
        return f"{value:.8f}"
    if value < 1:
        return f"{value:.6f}"
    if value < 100:
        return f"{value:.4f}"
    if value < 10000:
        return f"{value:.2f}"
    return f"{value:.0f}"


def format_quantity(value: float, max_fraction: int = 2) -> str:
    """천 단위 구분 + 최대 소수 자릿수 포맷 (불필요한 0 제거).

    Examples:
        >>> format_quantity(1234.5678)
        '1,234.57'
        >>> format_quantity(3.0)
        '3'
        >>> format_quantity(0.123456, max_fraction=4)
        '0.1235'
    """
    formatted = f"{value:,.{max_fraction}f}"
    # 소수부의 trailing zeros만 제거
    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")
    return formatted


def format_timestamp(timestamp_ms: int) -> str:
    """Unix milliseconds → 로컬 시각 (HH:MM:SS)"""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%H:%M:%S")
