"""Breadth-first Apriori over a prefix tree of counter arrays.

The tree is keyed by compacted item id.  A node reached by compacted id
``p`` holds one counter for every id in ``[p + 1, F)``; the root holds one
for every id in ``[0, F)``.  Level ``L`` of the build counts the itemsets of
``L + 1`` items, then creates children only where an extension can still
be frequent, so no explicit candidate sets are ever generated.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from ..classify import closed_itemsets
from ..itemset import FrequentItemSet
from ..monitor import ExecutionMonitor
from ..support_index import UNMAPPED, ItemSupportIndex
from ._base import AprioriAlgorithm

if TYPE_CHECKING:
    from ..bitvectors import BitTransactionSet

logger = logging.getLogger(__name__)

ROOT = 0


class PrefixTree:
    """Arena of prefix-tree nodes; nodes refer to each other by index.

    Node ``0`` is the root and represents the empty itemset.
    """

    def __init__(self, n_frequent: int) -> None:
        self.n_frequent = n_frequent
        self.counters: list[np.ndarray] = []
        self.children: list[dict[int, int]] = []
        self.parent: list[int] = []
        self.prefix: list[int] = []
        self.levels: list[list[int]] = []
        self.add_node(-1, -1)

    def __len__(self) -> int:
        return len(self.counters)

    def add_node(self, parent: int, prefix: int) -> int:
        """Create the child of ``parent`` reached by compacted id ``prefix``."""
        node = len(self.counters)
        depth = 0 if parent < 0 else self.depth(parent) + 1
        self.counters.append(np.zeros(self.n_frequent - (prefix + 1), dtype=np.int64))
        self.children.append({})
        self.parent.append(parent)
        self.prefix.append(prefix)
        if depth == len(self.levels):
            self.levels.append([])
        self.levels[depth].append(node)
        if parent >= 0:
            self.children[parent][prefix] = node
        return node

    def depth(self, node: int) -> int:
        d = 0
        while self.parent[node] >= 0:
            node = self.parent[node]
            d += 1
        return d

    def start(self, node: int) -> int:
        """Smallest compacted id counted at ``node``."""
        return self.prefix[node] + 1

    def count(self, node: int, item: int) -> int | None:
        offset = item - self.start(node)
        counter = self.counters[node]
        if offset < 0 or offset >= len(counter):
            return None
        return int(counter[offset])


class ArrayApriori(AprioriAlgorithm):
    """Level-wise Apriori on a compacted prefix tree.

    Preferable when the number of items is small compared to the number of
    transactions: memory grows with the items, not with the transactions.
    """

    def __init__(self, n_items: int, n_transactions: int) -> None:
        super().__init__(n_items, n_transactions)
        self._tree: PrefixTree | None = None
        self._free: list[FrequentItemSet] = []
        self._closed: list[FrequentItemSet] | None = None

    @property
    def tree(self) -> PrefixTree:
        self._check_fitted("accessing the prefix tree")
        assert self._tree is not None
        return self._tree

    def _mine(self, transactions: BitTransactionSet, monitor: ExecutionMonitor) -> None:
        assert self.min_support is not None and self.max_length is not None
        index = ItemSupportIndex.build(transactions, self.min_support, monitor.create_sub_progress(0.1))
        self._index = index
        self._min_count = index.min_count
        self._tree = PrefixTree(index.n_frequent)
        self._closed = None

        encoded = []
        for tid in range(len(transactions)):
            monitor.check_canceled()
            items = index.compact(transactions.set_bits(tid))
            if len(items):
                encoded.append(items)

        build = monitor.create_sub_progress(0.8)
        if index.n_frequent > 0:
            level = 0
            while True:
                build.set_progress(level / self.max_length, f"counting itemsets of length {level + 1}...")
                self._count_level(level, encoded, monitor)
                if level + 1 >= self.max_length:
                    break
                created = self._create_children(level, monitor)
                logger.debug("level %d: %d nodes created", level, created)
                if created == 0:
                    break
                level += 1

        self._free = self._extract()
        monitor.create_sub_progress(0.1).set_progress(1.0, f"{len(self._free)} frequent itemsets")

    # ------------------------------------------------------------------
    # Tree construction
    # ------------------------------------------------------------------

    def _count_level(self, level: int, encoded: list[np.ndarray], monitor: ExecutionMonitor) -> None:
        for items in encoded:
            monitor.check_canceled()
            if len(items) > level:
                self._count_transaction(ROOT, items, 0, 0, level)

    def _count_transaction(self, node: int, items: np.ndarray, pos: int, depth: int, level: int) -> None:
        tree = self._tree
        assert tree is not None
        if depth == level:
            # items[pos:] all follow this node's prefix
            tree.counters[node][items[pos:] - tree.start(node)] += 1
            return

        children = tree.children[node]
        if not children:
            return
        for k in range(pos, len(items) - (level - depth)):
            child = children.get(int(items[k]))
            if child is not None:
                self._count_transaction(child, items, k + 1, depth + 1, level)

    def _create_children(self, level: int, monitor: ExecutionMonitor) -> int:
        tree = self._tree
        assert tree is not None
        last = tree.n_frequent - 1
        created = 0
        for node in list(tree.levels[level]):
            monitor.check_canceled()
            start = tree.start(node)
            parent = tree.parent[node]
            for offset in np.flatnonzero(tree.counters[node] >= self._min_count):
                item = start + int(offset)
                if item >= last:
                    continue
                if parent >= 0 and not self._can_extend(parent, item):
                    continue
                tree.add_node(node, item)
                created += 1
        return created

    def _can_extend(self, parent: int, item: int) -> bool:
        """Whether ``prefix(parent) + {item}`` has at least one frequent continuation.

        Every extension of ``prefix(node) + {item}`` contains such a
        continuation, so without one the child is never created.
        """
        tree = self._tree
        assert tree is not None
        sibling = tree.children[parent].get(item)
        if sibling is None:
            return False
        return bool((tree.counters[sibling] >= self._min_count).any())

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def _extract(self) -> list[FrequentItemSet]:
        tree = self._tree
        index = self._index
        assert tree is not None and index is not None
        n = self.n_transactions
        result: list[FrequentItemSet] = []

        def visit(node: int, prefix_items: list[int]) -> None:
            counter = tree.counters[node]
            start = tree.start(node)
            children = tree.children[node]
            for offset in np.flatnonzero(counter >= self._min_count):
                item = start + int(offset)
                items = prefix_items + [index.original(item)]
                result.append(FrequentItemSet(self._ids.next(), items, int(counter[offset]) / n))
                child = children.get(item)
                if child is not None:
                    visit(child, items)

        visit(ROOT, [])
        return result

    def _free_itemsets(self) -> list[FrequentItemSet]:
        return self._free

    def _closed_itemsets(self, monitor: ExecutionMonitor) -> list[FrequentItemSet]:
        if self._closed is None:
            self._closed = closed_itemsets(self._free, monitor)
        return self._closed

    def _count(self, items: Sequence[int]) -> int | None:
        """Descend along the sorted compacted ids and read the last counter."""
        tree = self._tree
        index = self._index
        assert tree is not None and index is not None
        if not items:
            return None
        compacted = sorted(index.compacted(i) for i in items)
        if compacted[0] == UNMAPPED:
            return None

        node = ROOT
        for item in compacted[:-1]:
            child = tree.children[node].get(item)
            if child is None:
                return None
            node = child
        return tree.count(node, compacted[-1])
