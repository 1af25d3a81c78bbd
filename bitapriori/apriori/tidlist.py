"""Depth-first (Eclat-style) Apriori over transaction-id sets.

Each itemset carries the boolean mask of the transactions containing all of
its items.  Extending an itemset intersects that mask with the new item's
mask, so a candidate's support is the population count of the
intersection and can only shrink along a branch.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from ..itemset import FrequentItemSet
from ..monitor import ExecutionMonitor
from ..support_index import ItemSupportIndex
from ._base import AprioriAlgorithm

if TYPE_CHECKING:
    from ..bitvectors import BitTransactionSet

logger = logging.getLogger(__name__)


class TIDNode:
    """A node of the itemset tree; owns its children."""

    __slots__ = ("itemset", "children")

    def __init__(self, itemset: FrequentItemSet) -> None:
        self.itemset = itemset
        self.children: list[TIDNode] = []


class TIDListApriori(AprioriAlgorithm):
    """Depth-first Apriori with transaction-id set intersection.

    Preferable for many items over comparatively few transactions: memory
    grows with the transactions, not with the items.  Closed itemsets are
    collected while the search unwinds instead of in a separate pass.
    """

    def __init__(self, n_items: int, n_transactions: int) -> None:
        super().__init__(n_items, n_transactions)
        self._root: TIDNode | None = None
        self._items: list[int] = []
        self._item_masks: dict[int, np.ndarray] = {}
        self._free: list[FrequentItemSet] = []
        self._closed: list[FrequentItemSet] = []
        self._repository: dict[int, list[FrequentItemSet]] = {}
        self._counts: dict[frozenset[int], int] = {}

    @property
    def root(self) -> TIDNode:
        self._check_fitted("accessing the itemset tree")
        assert self._root is not None
        return self._root

    def _mine(self, transactions: BitTransactionSet, monitor: ExecutionMonitor) -> None:
        assert self.min_support is not None
        n = len(transactions)

        scan = monitor.create_sub_progress(0.1)
        tid_lists: list[list[int]] = [[] for _ in range(transactions.width)]
        for tid in range(n):
            monitor.check_canceled()
            for item in transactions.set_bits(tid):
                tid_lists[item].append(tid)
            if tid % 1024 == 0:
                scan.set_progress(tid / n, f"collecting transaction ids... {tid}")

        index = ItemSupportIndex(np.array([len(t) for t in tid_lists], dtype=np.int64), n, self.min_support)
        self._index = index
        self._min_count = index.min_count

        always = set(index.always_frequent)
        self._items = [item for item in index.frequent_items if item not in always]
        self._item_masks = {}
        for item in self._items:
            mask = np.zeros(n, dtype=bool)
            mask[tid_lists[item]] = True
            self._item_masks[item] = mask

        self._free = []
        self._closed = []
        self._repository = {}
        self._counts = {}

        self._root = TIDNode(FrequentItemSet("root", (), 1.0, transaction_mask=np.ones(n, dtype=bool)))
        self._search = monitor.create_sub_progress(0.9)
        self._expand(self._root, 0, n, monitor)
        logger.debug("%d frequent itemsets, %d closed", len(self._free), len(self._closed))

    def _expand(self, node: TIDNode, floor: int, count: int, monitor: ExecutionMonitor) -> None:
        assert self.max_length is not None
        parent = node.itemset
        is_root = node is self._root

        if len(parent) < self.max_length:
            for k in range(floor, len(self._items)):
                monitor.check_canceled()
                if is_root:
                    self._search.set_progress(k / len(self._items), f"expanding item {k + 1}/{len(self._items)}...")

                item = self._items[k]
                assert parent.transaction_mask is not None
                mask = parent.transaction_mask & self._item_masks[item]
                child_count = int(np.count_nonzero(mask))
                if child_count < self._min_count:
                    continue

                itemset = FrequentItemSet(
                    self._ids.next(),
                    parent.items + (item,),
                    child_count / self.n_transactions,
                    transaction_mask=mask,
                )
                child = TIDNode(itemset)
                node.children.append(child)
                self._free.append(itemset)
                self._counts[itemset.key] = child_count
                self._expand(child, k + 1, child_count, monitor)

        if not is_root:
            self._register_closed(parent, count)

    def _register_closed(self, itemset: FrequentItemSet, count: int) -> None:
        """Add ``itemset`` unless a registered proper superset has equal support.

        Supersets are always registered first: the search completes a
        node only after its subtree and its lexicographically smaller
        siblings.  Equal support means equal count, hence the bucketing.
        """
        bucket = self._repository.setdefault(count, [])
        for other in bucket:
            if itemset.is_proper_subset(other):
                return
        itemset.closed = True
        bucket.append(itemset)
        self._closed.append(itemset)

    def _free_itemsets(self) -> list[FrequentItemSet]:
        return self._free

    def _closed_itemsets(self, monitor: ExecutionMonitor) -> list[FrequentItemSet]:
        return self._closed

    def _count(self, items: Sequence[int]) -> int | None:
        return self._counts.get(frozenset(items))
