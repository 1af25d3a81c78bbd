"""Per-item supports and the compacted frequent-item id space."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from .monitor import ExecutionMonitor, default_monitor

if TYPE_CHECKING:
    from .bitvectors import BitTransactionSet

logger = logging.getLogger(__name__)

#: Forward-map value of items that are infrequent or always frequent.
UNMAPPED = -1


def min_support_count(min_support: float, n_transactions: int) -> int:
    """Smallest count ``c >= 1`` with ``c / n_transactions >= min_support``.

    >>> min_support_count(0.5, 4)
    2
    >>> min_support_count(0.0, 10)
    1
    """
    if n_transactions <= 0:
        return 1
    count = max(1, math.ceil(min_support * n_transactions))
    while count > 1 and (count - 1) / n_transactions >= min_support:
        count -= 1
    while count / n_transactions < min_support:
        count += 1
    return count


class ItemSupportIndex:
    """Item occurrence counts plus the dense renumbering of the frequent items.

    Frequent items that occur in *every* transaction are kept apart in
    :attr:`always_frequent` and receive no compacted id.  Compacted ids
    follow ascending original ids.
    """

    def __init__(self, counts: np.ndarray, n_transactions: int, min_support: float) -> None:
        self.counts = np.asarray(counts, dtype=np.int64)
        self.counts.setflags(write=False)
        self.n_transactions = int(n_transactions)
        self.min_support = float(min_support)
        self.min_count = min_support_count(min_support, n_transactions)

        frequent = self.counts >= self.min_count
        if self.n_transactions > 0:
            always = frequent & (self.counts == self.n_transactions)
        else:
            always = np.zeros_like(frequent)

        self._frequent_items = np.flatnonzero(frequent)
        self._always_frequent = [int(i) for i in np.flatnonzero(always)]

        self._backward = np.flatnonzero(frequent & ~always)
        self._forward = np.full(len(self.counts), UNMAPPED, dtype=np.int64)
        self._forward[self._backward] = np.arange(len(self._backward))

        logger.debug(
            "%d of %d items frequent (min count %d), %d always frequent",
            len(self._frequent_items),
            len(self.counts),
            self.min_count,
            len(self._always_frequent),
        )

    @classmethod
    def build(
        cls,
        transactions: BitTransactionSet,
        min_support: float,
        monitor: ExecutionMonitor | None = None,
    ) -> ItemSupportIndex:
        """Count every item with a single pass over the transactions."""
        monitor = default_monitor(monitor)
        n = len(transactions)
        counts = np.zeros(transactions.width, dtype=np.int64)
        for tid in range(n):
            monitor.check_canceled()
            counts[transactions.set_bits(tid)] += 1
            if tid % 1024 == 0:
                monitor.set_progress(tid / n, f"counting items... {tid}")
        monitor.set_progress(1.0, "item supports counted")
        return cls(counts, n, min_support)

    @property
    def n_frequent(self) -> int:
        """Number of frequent items that are not always frequent."""
        return int(len(self._backward))

    @property
    def frequent_items(self) -> list[int]:
        """All frequent original item ids, always-frequent ones included."""
        return [int(i) for i in self._frequent_items]

    @property
    def always_frequent(self) -> list[int]:
        return list(self._always_frequent)

    @property
    def backward(self) -> np.ndarray:
        return self._backward

    def is_frequent(self, item: int) -> bool:
        return bool(self.counts[item] >= self.min_count)

    def is_always_frequent(self, item: int) -> bool:
        return item in self._always_frequent

    def compacted(self, item: int) -> int:
        """Compacted id of an original item, or :data:`UNMAPPED`."""
        return int(self._forward[item])

    def original(self, compacted_id: int) -> int:
        return int(self._backward[compacted_id])

    def compact(self, items: np.ndarray) -> np.ndarray:
        """Map ascending original ids to ascending compacted ids, dropping unmapped ones."""
        mapped = self._forward[items]
        return mapped[mapped != UNMAPPED]

    def support(self, item: int) -> float:
        return float(self.counts[item]) / self.n_transactions

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(n_items={len(self.counts)}, n_frequent={self.n_frequent}, "
            f"always_frequent={self._always_frequent})"
        )
