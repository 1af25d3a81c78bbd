"""Frequent itemsets, association rules and the result-type enumeration."""

from __future__ import annotations

import enum
import itertools
from collections.abc import Iterable
from typing import TYPE_CHECKING, Union

from .exceptions import InvalidConfiguration

if TYPE_CHECKING:
    import numpy as np


class ItemSetType(enum.Enum):
    """Which frequent itemsets a result should contain."""

    FREE = "free"
    CLOSED = "closed"
    MAXIMAL = "maximal"

    @classmethod
    def parse(cls, value: ItemSetType | str) -> ItemSetType:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidConfiguration(
                f"`itemset_type` must be one of 'free', 'closed' or 'maximal'. Got {value!r}."
            ) from None


ItemSetTypeLike = Union[ItemSetType, str]


class ItemSetIdGenerator:
    """Hands out ids for the itemsets of one mining run.

    >>> ids = ItemSetIdGenerator()
    >>> ids.next(), ids.next()
    ('itemset0', 'itemset1')
    """

    def __init__(self, prefix: str = "itemset") -> None:
        self.prefix = prefix
        self._counter = itertools.count()

    def next(self) -> str:
        return f"{self.prefix}{next(self._counter)}"


class FrequentItemSet:
    """An itemset together with its support.

    ``items`` keeps discovery order and holds original item ids. Support and
    items are fixed at creation; ``closed`` is set once by the classifier.
    ``transaction_mask`` is only populated by the transaction-id strategy.
    """

    __slots__ = ("id", "_items", "_key", "support", "closed", "transaction_mask")

    def __init__(
        self,
        id: str,
        items: Iterable[int] = (),
        support: float = 0.0,
        closed: bool = False,
        transaction_mask: np.ndarray | None = None,
    ) -> None:
        self.id = id
        self._items = tuple(int(i) for i in items)
        self._key = frozenset(self._items)
        self.support = float(support)
        self.closed = closed
        self.transaction_mask = transaction_mask

    @property
    def items(self) -> tuple[int, ...]:
        return self._items

    @property
    def key(self) -> frozenset[int]:
        """Order-insensitive identity of the itemset."""
        return self._key

    @property
    def transaction_ids(self) -> np.ndarray | None:
        """Indices of the transactions containing every item, if tracked."""
        if self.transaction_mask is None:
            return None
        import numpy as np

        return np.flatnonzero(self.transaction_mask)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._key

    def is_subset(self, other: FrequentItemSet) -> bool:
        return self._key <= other._key

    def is_proper_subset(self, other: FrequentItemSet) -> bool:
        return self._key < other._key

    def __repr__(self) -> str:
        return f"FrequentItemSet(id={self.id!r}, items={list(self._items)}, support={self.support!r}, closed={self.closed})"


class AssociationRule:
    """``antecedent -> consequent`` with its quality measures.

    ``support`` is the support of antecedent and consequent together,
    ``antecedent_support`` the raw support of the antecedent alone.
    """

    __slots__ = ("antecedent", "consequent", "antecedent_support", "support", "confidence", "lift")

    def __init__(
        self,
        antecedent: FrequentItemSet,
        consequent: FrequentItemSet,
        antecedent_support: float,
        support: float,
        confidence: float,
        lift: float | None = None,
    ) -> None:
        self.antecedent = antecedent
        self.consequent = consequent
        self.antecedent_support = antecedent_support
        self.support = support
        self.confidence = confidence
        self.lift = lift

    @property
    def consequent_support(self) -> float:
        return self.consequent.support

    def __setattr__(self, name: str, value: object) -> None:
        if hasattr(self, name):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        return (
            f"AssociationRule({list(self.antecedent.items)} -> {list(self.consequent.items)}, "
            f"support={self.support:.4f}, confidence={self.confidence:.4f}, lift={self.lift})"
        )
