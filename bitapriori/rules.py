"""Association rules with a single-item consequent."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Callable, Optional

from .exceptions import InternalInconsistency
from .itemset import AssociationRule, FrequentItemSet, ItemSetIdGenerator
from .monitor import ExecutionMonitor, default_monitor

logger = logging.getLogger(__name__)

#: Returns the absolute support count of an itemset (original item ids), or
#: ``None`` when the search structure holds no count for it.
CountLookup = Callable[[Sequence[int]], Optional[int]]


class RuleDeriver:
    """Turns closed itemsets into rules ``S \\ {i} -> {i}``.

    Supports are never recounted from the transactions: every count comes
    from ``count_lookup``, which reads the miner's own search structure.
    """

    def __init__(
        self,
        count_lookup: CountLookup,
        n_transactions: int,
        id_generator: ItemSetIdGenerator | None = None,
    ) -> None:
        self._count = count_lookup
        self.n_transactions = n_transactions
        self._ids = id_generator if id_generator is not None else ItemSetIdGenerator("rule-item")

    def _lookup(self, items: Sequence[int]) -> int:
        count = self._count(items)
        if count is None or count <= 0:
            raise InternalInconsistency(f"No support recorded for frequent itemset {sorted(items)}")
        return count

    def always_frequent_rules(self, always_frequent: Sequence[int]) -> list[AssociationRule]:
        """``others -> {x}`` for every always-frequent item ``x``, confidence 1.

        A lone always-frequent item yields no rule (its antecedent would be empty).
        """
        rules = []
        for x in always_frequent:
            others = [a for a in always_frequent if a != x]
            if not others:
                continue
            antecedent = FrequentItemSet(self._ids.next(), others, 1.0, closed=True)
            consequent = FrequentItemSet(self._ids.next(), [x], 1.0, closed=True)
            rules.append(AssociationRule(antecedent, consequent, 1.0, 1.0, 1.0, lift=1.0))
        return rules

    def derive(
        self,
        closed: Sequence[FrequentItemSet],
        always_frequent: Sequence[int],
        min_confidence: float,
        monitor: ExecutionMonitor | None = None,
    ) -> list[AssociationRule]:
        monitor = default_monitor(monitor)
        rules = self.always_frequent_rules(always_frequent)

        n = self.n_transactions
        candidates = [s for s in closed if len(s) > 1]
        for k, itemset in enumerate(candidates):
            monitor.check_canceled()
            count = self._lookup(itemset.items)
            for item in itemset.items:
                rest = [i for i in itemset.items if i != item]
                rest_count = self._lookup(rest)
                confidence = count / rest_count
                if confidence < min_confidence:
                    continue
                item_count = self._lookup([item])
                antecedent = FrequentItemSet(self._ids.next(), rest, rest_count / n)
                consequent = FrequentItemSet(self._ids.next(), [item], item_count / n)
                rules.append(
                    AssociationRule(
                        antecedent,
                        consequent,
                        antecedent_support=antecedent.support,
                        support=itemset.support,
                        confidence=confidence,
                        lift=confidence / consequent.support,
                    )
                )
            if k % 256 == 0:
                monitor.set_progress(k / len(candidates), f"deriving rules... {k}/{len(candidates)}")

        monitor.set_progress(1.0, f"{len(rules)} association rules")
        logger.debug("%d rules from %d closed itemsets", len(rules), len(candidates))
        return rules
