"""Shared base class for the array and transaction-id Apriori strategies."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .._validation import check_max_length, check_min_confidence, check_min_support, check_shape
from ..classify import maximal_itemsets
from ..itemset import AssociationRule, FrequentItemSet, ItemSetIdGenerator, ItemSetType, ItemSetTypeLike
from ..monitor import ExecutionMonitor, default_monitor
from ..rules import RuleDeriver

if TYPE_CHECKING:
    from ..bitvectors import BitTransactionSet
    from ..support_index import ItemSupportIndex

logger = logging.getLogger(__name__)


class AprioriAlgorithm(ABC):
    """Abstract base class for frequent-itemset strategies.

    Subclasses implement :meth:`_mine`, :meth:`_free_itemsets`,
    :meth:`_closed_itemsets` and :meth:`_count` over their own search
    structure; validation, result typing, always-frequent handling and rule
    derivation are shared.

    Parameters
    ----------
    n_items:
        Number of distinct items, i.e. the bit width of every transaction.
    n_transactions:
        Number of transactions the miner will be run on.
    """

    def __init__(self, n_items: int, n_transactions: int) -> None:
        self.n_items = int(n_items)
        self.n_transactions = int(n_transactions)

        self.min_support: float | None = None
        self.max_length: int | None = None
        self.itemset_type = ItemSetType.FREE

        self._index: ItemSupportIndex | None = None
        self._ids = ItemSetIdGenerator()
        self._always_frequent_sets: list[FrequentItemSet] = []
        self._fitted = False

    # ------------------------------------------------------------------
    # Abstract interface: subclasses provide the search structure
    # ------------------------------------------------------------------

    @abstractmethod
    def _mine(self, transactions: BitTransactionSet, monitor: ExecutionMonitor) -> None:
        """Build the search structure; must set ``self._index``."""
        ...

    @abstractmethod
    def _free_itemsets(self) -> list[FrequentItemSet]:
        """Every frequent itemset of the compacted item space."""
        ...

    @abstractmethod
    def _closed_itemsets(self, monitor: ExecutionMonitor) -> list[FrequentItemSet]:
        ...

    @abstractmethod
    def _count(self, items: Sequence[int]) -> int | None:
        """Absolute support count of an itemset, read from the search structure."""
        ...

    # ------------------------------------------------------------------
    # Mining
    # ------------------------------------------------------------------

    def find_frequent_itemsets(
        self,
        transactions: BitTransactionSet,
        min_support: float,
        max_length: int,
        itemset_type: ItemSetTypeLike = ItemSetType.FREE,
        monitor: ExecutionMonitor | None = None,
    ) -> AprioriAlgorithm:
        """Find all itemsets with support ``>= min_support`` and at most ``max_length`` items.

        Raises
        ------
        InvalidConfiguration
            If a parameter is out of range or the transactions do not match
            the configured number of items / transactions.
        MiningCancelled
            If ``monitor`` was cancelled during the run.
        """
        min_support = check_min_support(min_support)
        max_length = check_max_length(max_length)
        itemset_type = ItemSetType.parse(itemset_type)
        check_shape(transactions, self.n_items, self.n_transactions)
        monitor = default_monitor(monitor)

        self._fitted = False
        self.min_support = min_support
        self.max_length = max_length
        self.itemset_type = itemset_type
        self._ids = ItemSetIdGenerator()

        logger.debug(
            "%s: mining %d transactions over %d items (min_support=%s, max_length=%d)",
            type(self).__name__,
            self.n_transactions,
            self.n_items,
            min_support,
            max_length,
        )
        monitor.begin(f"mining with {type(self).__name__}...")
        self._mine(transactions, monitor)

        assert self._index is not None
        self._always_frequent_sets = [
            FrequentItemSet(self._ids.next(), [item], 1.0, closed=True) for item in self._index.always_frequent
        ]
        self._fitted = True
        monitor.set_progress(1.0, "frequent itemsets found")
        return self

    def _check_fitted(self, what: str) -> None:
        if not self._fitted:
            raise RuntimeError(f"Call find_frequent_itemsets() before {what}.")

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    @property
    def support_index(self) -> ItemSupportIndex:
        self._check_fitted("accessing support_index")
        assert self._index is not None
        return self._index

    @property
    def always_frequent_items(self) -> list[int]:
        """Original ids of the items present in every transaction."""
        return self.support_index.always_frequent

    def get_frequent_itemsets(
        self,
        itemset_type: ItemSetTypeLike | None = None,
        monitor: ExecutionMonitor | None = None,
    ) -> list[FrequentItemSet]:
        """Return the frequent itemsets of the requested type.

        Defaults to the type passed to :meth:`find_frequent_itemsets`.
        Always-frequent items are appended as singletons with support 1.0.
        """
        self._check_fitted("get_frequent_itemsets()")
        itemset_type = self.itemset_type if itemset_type is None else ItemSetType.parse(itemset_type)
        monitor = default_monitor(monitor)

        if itemset_type is ItemSetType.FREE:
            result = list(self._free_itemsets())
        elif itemset_type is ItemSetType.CLOSED:
            result = list(self._closed_itemsets(monitor))
        else:
            result = maximal_itemsets(self._closed_itemsets(monitor), monitor)
        return result + self._always_frequent_sets

    def get_association_rules(
        self,
        min_confidence: float,
        monitor: ExecutionMonitor | None = None,
    ) -> list[AssociationRule]:
        """Rules with one consequent item and confidence ``>= min_confidence``."""
        self._check_fitted("get_association_rules()")
        min_confidence = check_min_confidence(min_confidence)
        monitor = default_monitor(monitor)

        deriver = RuleDeriver(self._count, self.n_transactions, ItemSetIdGenerator("rule-item"))
        return deriver.derive(
            self._closed_itemsets(monitor),
            self.always_frequent_items,
            min_confidence,
            monitor,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"n_items={self.n_items}, "
            f"n_transactions={self.n_transactions}, "
            f"fitted={self._fitted})"
        )
