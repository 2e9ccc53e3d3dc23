from __future__ import annotations

import random

from src.core.dto.internal.common import ConnectionPolicyDomain


def compute_backoff_ms(policy: ConnectionPolicyDomain, attempt: int) -> int:
    """지수 백오프 지연(ms) 계산 (지터 제외).

    Args:
        policy: 백오프 파라미터가 담긴 정책 객체
        attempt: 이미 증가된 재시도 번호 (1부터 시작)

    Returns:
        min(base * multiplier**attempt, max) 밀리초

    Examples:
        >>> [compute_backoff_ms(ConnectionPolicyDomain(), n) for n in range(1, 6)]
        [2000, 4000, 8000, 16000, 30000]
    """
    raw = policy.base_delay_ms * (policy.backoff_multiplier**attempt)
    return int(min(raw, policy.max_delay_ms))


def compute_next_backoff(policy: ConnectionPolicyDomain, attempt: int) -> float:
    """다음 재연결 대기 시간(초) 계산 (+지터).

    Args:
        policy: 백오프 파라미터가 담긴 정책 객체
        attempt: 이미 증가된 재시도 번호 (1부터 시작)

    Returns:
        다음 대기 시간(초)
    """
    base = compute_backoff_ms(policy, attempt) / 1000.0
    if policy.jitter <= 0:
        return base
    jitter_range = base * policy.jitter
    jitter = random.uniform(-jitter_range, jitter_range)
    return max(0.0, base + jitter)
