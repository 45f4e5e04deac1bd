"""
Tests for client/retry.py - RetryPolicy validation and delay schedule.
"""

from __future__ import annotations

import random

import pytest
from pydantic import ValidationError

from wow_ah_client.client.retry import RetryPolicy


class TestValidation:
    def test_defaults_are_bounded(self):
        policy = RetryPolicy()
        assert policy.max_retries is not None
        assert policy.unbounded is False

    def test_none_means_unbounded(self):
        policy = RetryPolicy(max_retries=None)
        assert policy.unbounded
        assert policy.allows_retry(10_000_000)

    def test_invalid_strategy(self):
        with pytest.raises(ValidationError):
            RetryPolicy(strategy="random")

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            RetryPolicy(base_seconds=-1.0)
        with pytest.raises(ValidationError):
            RetryPolicy(max_retries=-1)

    def test_frozen(self):
        policy = RetryPolicy()
        with pytest.raises(ValidationError):
            policy.max_retries = 3  # type: ignore[misc]


class TestAllowsRetry:
    def test_ceiling(self):
        policy = RetryPolicy(max_retries=2)
        assert policy.allows_retry(0)
        assert policy.allows_retry(1)
        assert not policy.allows_retry(2)

    def test_zero_retries(self):
        assert not RetryPolicy(max_retries=0).allows_retry(0)


class TestDelayFor:
    def test_exponential(self):
        policy = RetryPolicy(strategy="exponential", base_seconds=0.5, jitter=False)
        assert [policy.delay_for(n) for n in (1, 2, 3, 4)] == [0.5, 1.0, 2.0, 4.0]

    def test_linear(self):
        policy = RetryPolicy(strategy="linear", base_seconds=2.0, jitter=False)
        assert [policy.delay_for(n) for n in (1, 2, 3)] == [2.0, 4.0, 6.0]

    def test_fixed(self):
        policy = RetryPolicy(strategy="fixed", base_seconds=3.0, jitter=False)
        assert {policy.delay_for(n) for n in range(1, 10)} == {3.0}

    def test_capped_at_max(self):
        policy = RetryPolicy(base_seconds=1.0, max_seconds=10.0, jitter=False)
        assert policy.delay_for(20) == 10.0

    def test_huge_retry_count_does_not_overflow(self):
        policy = RetryPolicy(base_seconds=1.0, max_seconds=30.0, jitter=False, max_retries=None)
        assert policy.delay_for(10_000) == 30.0

    def test_jitter_within_bounds(self):
        policy = RetryPolicy(strategy="fixed", base_seconds=4.0, max_seconds=100.0, jitter=True)
        rng = random.Random(42)
        delays = [policy.delay_for(1, rng) for _ in range(200)]
        assert all(3.0 <= d <= 5.0 for d in delays)
        assert len(set(delays)) > 1

    def test_jitter_never_exceeds_cap(self):
        policy = RetryPolicy(base_seconds=10.0, max_seconds=10.0, jitter=True)
        rng = random.Random(7)
        assert all(policy.delay_for(3, rng) <= 10.0 for _ in range(100))

    def test_non_positive_retry_index(self):
        assert RetryPolicy().delay_for(0) == 0.0
