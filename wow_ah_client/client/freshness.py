"""
Auction snapshot freshness gate.

The auction status call is cheap and returns the snapshot's ``lastModified``;
the listings download is large.  The gate decides whether the download is
worth paying for given the caller's cutoff (usually the ``lastModified`` of
the snapshot it already holds).

  last_modified <= cutoff → SKIP     (nothing new; equal counts as unchanged)
  last_modified >  cutoff → PROCEED
"""

from __future__ import annotations

from enum import Enum


class FreshnessDecision(str, Enum):
    """Outcome of the freshness gate."""

    SKIP    = "skip"
    PROCEED = "proceed"


def check_freshness(last_modified: int, cutoff: int) -> FreshnessDecision:
    """Return SKIP iff ``last_modified`` has not advanced past ``cutoff``."""
    if last_modified <= cutoff:
        return FreshnessDecision.SKIP
    return FreshnessDecision.PROCEED


def should_fetch(last_modified: int, cutoff: int) -> bool:
    return check_freshness(last_modified, cutoff) is FreshnessDecision.PROCEED
