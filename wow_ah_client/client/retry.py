"""
Retry backoff policy.

Delay schedule for the n-th retry (1-based):

  exponential - base * 2^(n-1)
  linear      - base * n
  fixed       - base

capped at ``max_seconds`` and, when ``jitter`` is on, scaled by a random
factor in [0.75, 1.25].

``max_retries = None`` means "retry transient failures forever", the
behaviour of the original blocking client.  Any integer bounds the number of
retries after the first attempt (0 = try once).
"""

from __future__ import annotations

import random
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

VALID_BACKOFF_STRATEGIES = frozenset({"exponential", "linear", "fixed"})

JITTER_FRACTION = 0.25


class RetryPolicy(BaseModel):
    """Backoff and retry-ceiling settings for the request executor.

    Attributes:
        strategy:     "exponential", "linear" or "fixed".
        base_seconds: Delay before the first retry.
        max_seconds:  Upper cap on any single delay.
        jitter:       Add ±25% random jitter to each delay.
        max_retries:  Retries allowed after the first attempt; ``None`` = unbounded.
    """

    model_config = ConfigDict(frozen=True)

    strategy:     str             = "exponential"
    base_seconds: float           = 0.5
    max_seconds:  float           = 60.0
    jitter:       bool            = True
    max_retries:  Optional[int]   = 8

    @field_validator("strategy")
    @classmethod
    def valid_strategy(cls, v: str) -> str:
        if v not in VALID_BACKOFF_STRATEGIES:
            raise ValueError(
                f"RetryPolicy.strategy must be one of {sorted(VALID_BACKOFF_STRATEGIES)}, got '{v}'."
            )
        return v

    @field_validator("base_seconds", "max_seconds")
    @classmethod
    def non_negative_seconds(cls, v: float) -> float:
        if v < 0.0:
            raise ValueError(f"Delay seconds must be >= 0.0, got {v}.")
        return v

    @field_validator("max_retries")
    @classmethod
    def non_negative_retries(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError(f"max_retries must be >= 0 or None, got {v}.")
        return v

    @property
    def unbounded(self) -> bool:
        return self.max_retries is None

    def allows_retry(self, retries_done: int) -> bool:
        """True if another retry is permitted after ``retries_done`` retries."""
        return self.max_retries is None or retries_done < self.max_retries

    def delay_for(self, retry: int, rng: Optional[random.Random] = None) -> float:
        """Seconds to wait before the ``retry``-th retry (1-based)."""
        if retry < 1:
            return 0.0
        if self.strategy == "exponential":
            # Clamp the exponent so huge retry counts under an unbounded
            # policy cannot overflow.
            delay = self.base_seconds * (2 ** min(retry - 1, 32))
        elif self.strategy == "linear":
            delay = self.base_seconds * retry
        else:
            delay = self.base_seconds
        delay = min(delay, self.max_seconds)
        if self.jitter and delay > 0:
            factor = (rng or random).uniform(1.0 - JITTER_FRACTION, 1.0 + JITTER_FRACTION)
            delay = min(delay * factor, self.max_seconds)
        return delay
