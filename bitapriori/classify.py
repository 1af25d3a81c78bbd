"""Closed and maximal views of a set of frequent itemsets.

Support equality is exact: every support is ``count / n_transactions`` with
the same denominator, so equal counts give bit-identical floats.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .itemset import FrequentItemSet
from .monitor import ExecutionMonitor, default_monitor

logger = logging.getLogger(__name__)


def closed_itemsets(
    itemsets: Sequence[FrequentItemSet],
    monitor: ExecutionMonitor | None = None,
) -> list[FrequentItemSet]:
    """Keep the itemsets that have no proper superset of equal support.

    Sets the ``closed`` flag of every input itemset.  The result is ordered
    by ascending support, then ascending length.
    """
    monitor = default_monitor(monitor)
    ordered = sorted(itemsets, key=lambda s: (s.support, len(s)))
    for s in ordered:
        s.closed = True

    n = len(ordered)
    for i, current in enumerate(ordered):
        monitor.check_canceled()
        for j in range(i + 1, n):
            other = ordered[j]
            if other.support != current.support:
                # sorted ascending: no later itemset can have equal support
                break
            if current.is_proper_subset(other):
                current.closed = False
                break
        if i % 256 == 0:
            monitor.set_progress(i / n, f"deriving closed itemsets... {i}/{n}")

    result = [s for s in ordered if s.closed]
    logger.debug("%d of %d itemsets are closed", len(result), n)
    return result


def maximal_itemsets(
    closed: Sequence[FrequentItemSet],
    monitor: ExecutionMonitor | None = None,
) -> list[FrequentItemSet]:
    """Keep the closed itemsets that are no proper subset of another closed itemset."""
    monitor = default_monitor(monitor)
    result = []
    for s in closed:
        monitor.check_canceled()
        if not any(s.is_proper_subset(other) for other in closed):
            result.append(s)
    logger.debug("%d of %d closed itemsets are maximal", len(result), len(closed))
    return result
