from __future__ import annotations

import pytest

from src.core.connection.services.backoff import compute_backoff_ms, compute_next_backoff
from tests.factory_builders import build_connection_policy_domain


def test_backoff_sequence_for_five_retries() -> None:
    policy = build_connection_policy_domain()

    delays = [compute_backoff_ms(policy, attempt) for attempt in range(1, 6)]

    assert delays == [2000, 4000, 8000, 16000, 30000]


def test_backoff_is_capped() -> None:
    policy = build_connection_policy_domain(max_delay_ms=5000)

    assert compute_backoff_ms(policy, 10) == 5000


def test_next_backoff_in_seconds_without_jitter() -> None:
    policy = build_connection_policy_domain()

    assert compute_next_backoff(policy, 1) == 2.0
    assert compute_next_backoff(policy, 5) == 30.0


def test_jitter_stays_within_range() -> None:
    policy = build_connection_policy_domain(jitter=0.1)

    for _ in range(50):
        assert compute_next_backoff(policy, 2) == pytest.approx(4.0, abs=0.4)
