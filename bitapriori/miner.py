from __future__ import annotations

import time
from collections.abc import Hashable, Sequence
from typing import TYPE_CHECKING, Any

from ._core import build_itemset_frame, build_rule_frame
from ._validation import check_min_confidence
from .apriori import AprioriAlgorithm, get_apriori_algorithm
from .apriori.factory import DataStructureLike
from .bitvectors import BitTransactionSet, as_transaction_set
from .itemset import AssociationRule, FrequentItemSet, ItemSetType, ItemSetTypeLike
from .monitor import ExecutionMonitor

if TYPE_CHECKING:
    import pandas as pd
    from typing_extensions import Self

DEFAULT_MIN_SUPPORT = 0.9
DEFAULT_MAX_ITEMSET_LENGTH = 10
DEFAULT_CONFIDENCE = 0.8


class Apriori:
    """Frequent itemset and association rule miner over bit-vector transactions.

    Parameters
    ----------
    data : BitTransactionSet, numpy.ndarray, scipy sparse matrix, DataFrame or list
        The transactions.  DataFrames and arrays are one-hot encoded
        (one column per item); a list holds one item collection per
        transaction.
    item_names : list, optional
        Names of the items if ``data`` is a raw array or sparse matrix.
    min_support : float, default=0.9
        Minimum fraction of transactions an itemset must occur in, ``[0, 1]``.
    max_len : int, default=10
        Maximum number of items per itemset.
    itemset_type : {'free', 'closed', 'maximal'}, default='free'
        Which frequent itemsets :meth:`mine` returns.
    method : {'auto', 'array', 'tidlist'}, default='auto'
        Search structure.  ``'auto'`` decides from the number of items and
        transactions.
    use_colnames : bool, default=False
        If True, output item names instead of item indices.
    null_values : bool, default=False
        If True, missing values in pandas DataFrames count as absent items.
    monitor : ExecutionMonitor, optional
        Cancellation and progress capability shared by all runs.
    verbose : int, default=0
        If > 0, print progress details to standard output.

    Examples
    --------
    >>> model = Apriori(
    ...     [["bread", "milk"], ["bread", "butter"], ["bread", "milk", "butter"]],
    ...     min_support=0.6,
    ...     use_colnames=True,
    ... )
    >>> model.mine()  # doctest: +SKIP
    """

    def __init__(
        self,
        data: BitTransactionSet | Any,
        item_names: Sequence[Hashable] | None = None,
        min_support: float = DEFAULT_MIN_SUPPORT,
        max_len: int = DEFAULT_MAX_ITEMSET_LENGTH,
        itemset_type: ItemSetTypeLike = ItemSetType.FREE,
        method: DataStructureLike = "auto",
        use_colnames: bool = False,
        null_values: bool = False,
        monitor: ExecutionMonitor | None = None,
        verbose: int = 0,
    ) -> None:
        self.transactions = as_transaction_set(data, item_names=item_names, null_values=null_values)
        self.min_support = min_support
        self.max_len = max_len
        self.itemset_type = itemset_type
        self.method = method
        self.use_colnames = use_colnames
        self.monitor = monitor
        self.verbose = verbose

        self.algorithm_: AprioriAlgorithm | None = None
        self._rules_cache: dict[tuple[float, bool], pd.DataFrame] = {}

    @classmethod
    def from_transactions(
        cls,
        data: Any,
        transaction_col: str | None = None,
        item_col: str | None = None,
        verbose: int = 0,
        **kwargs: Any,
    ) -> Self:
        """Load long-format ``(transaction id, item)`` data.

        Parameters
        ----------
        data
            Pandas / Polars DataFrame or pyarrow Table with a transaction
            column and an item column, or a list of item collections.
        transaction_col
            Name of the transaction column.  Defaults to the first column.
        item_col
            Name of the item column.  Defaults to the second column.
        **kwargs
            Mining parameters stored on the miner (e.g. ``min_support``).
        """
        ts = BitTransactionSet.from_transactions(data, transaction_col, item_col, verbose=verbose)
        return cls(ts, verbose=verbose, **kwargs)

    @classmethod
    def from_items(cls, transactions: Sequence[Sequence[Hashable] | None], **kwargs: Any) -> Self:
        """Shorthand for ``Apriori(BitTransactionSet.from_items(transactions), ...)``."""
        return cls(BitTransactionSet.from_items(transactions), **kwargs)

    @property
    def item_names(self) -> list[Hashable]:
        """Item names, ``"item<i>"`` for unnamed items."""
        return [self.transactions.item_name(i) for i in range(self.transactions.width)]

    def _monitor(self) -> ExecutionMonitor:
        return self.monitor if self.monitor is not None else ExecutionMonitor(verbose=self.verbose)

    def fit(self, **kwargs: Any) -> Self:
        """Run the search; keyword arguments override the stored parameters."""
        min_support = kwargs.get("min_support", self.min_support)
        max_len = kwargs.get("max_len", self.max_len)
        itemset_type = kwargs.get("itemset_type", self.itemset_type)
        method = kwargs.get("method", self.method)

        ts = self.transactions
        algorithm = get_apriori_algorithm(method, ts.width, len(ts))
        t0 = 0.0
        if self.verbose:
            print(f"[{time.strftime('%X')}] Mining with {type(algorithm).__name__} (min_support={min_support}, max_len={max_len})...")
            t0 = time.perf_counter()

        algorithm.find_frequent_itemsets(ts, min_support, max_len, itemset_type, self._monitor())

        if self.verbose:
            print(f"[{time.strftime('%X')}] Mining completed in {time.perf_counter() - t0:.2f}s.")

        self.algorithm_ = algorithm
        self._rules_cache = {}
        return self

    def _fitted_algorithm(self) -> AprioriAlgorithm:
        if self.algorithm_ is None:
            self.fit()
        assert self.algorithm_ is not None
        return self.algorithm_

    def mine(self, **kwargs: Any) -> pd.DataFrame:
        """Execute the search and return the frequent itemsets.

        Returns
        -------
        pandas.DataFrame
            DataFrame with two columns:
            - `support`: the support score.
            - `itemsets`: list of items (indices or column names).
        """
        use_colnames = kwargs.pop("use_colnames", self.use_colnames)
        self.fit(**kwargs)
        return build_itemset_frame(
            self.frequent_itemsets(),
            len(self.transactions),
            self.item_names,
            use_colnames,
        )

    def frequent_itemsets(self, itemset_type: ItemSetTypeLike | None = None) -> list[FrequentItemSet]:
        """The frequent itemsets of the last run as objects (mining first if needed)."""
        return self._fitted_algorithm().get_frequent_itemsets(itemset_type, self._monitor())

    def rules(self, min_confidence: float | None = None) -> list[AssociationRule]:
        """The association rules of the last run as objects (mining first if needed)."""
        confidence = DEFAULT_CONFIDENCE if min_confidence is None else min_confidence
        return self._fitted_algorithm().get_association_rules(confidence, self._monitor())

    def association_rules(self, min_confidence: float | None = None, use_colnames: bool | None = None) -> pd.DataFrame:
        """Association rules with a single consequent item.

        Parameters
        ----------
        min_confidence : float, optional
            Minimum confidence in ``[0, 1]``; defaults to 0.8.
        use_colnames : bool, optional
            Overrides the miner's ``use_colnames`` setting.

        Returns
        -------
        pandas.DataFrame
            Columns ``antecedents``, ``consequents``, ``antecedent support``,
            ``consequent support``, ``support``, ``confidence`` and ``lift``.
        """
        confidence = check_min_confidence(DEFAULT_CONFIDENCE if min_confidence is None else min_confidence)
        use_colnames = self.use_colnames if use_colnames is None else use_colnames
        self._fitted_algorithm()

        key = (confidence, bool(use_colnames))
        if key not in self._rules_cache:
            self._rules_cache[key] = build_rule_frame(self.rules(confidence), self.item_names, use_colnames)
        return self._rules_cache[key].copy()


    def __repr__(self) -> str:
        fitted = self.algorithm_ is not None
        return (
            f"{type(self).__name__}("
            f"min_support={self.min_support}, "
            f"max_len={self.max_len}, "
            f"fitted={fitted})"
        )


def apriori(
    data: BitTransactionSet | Any,
    min_support: float = DEFAULT_MIN_SUPPORT,
    max_len: int = DEFAULT_MAX_ITEMSET_LENGTH,
    itemset_type: ItemSetTypeLike = ItemSetType.FREE,
    method: DataStructureLike = "auto",
    use_colnames: bool = False,
    item_names: Sequence[Hashable] | None = None,
    null_values: bool = False,
    monitor: ExecutionMonitor | None = None,
    verbose: int = 0,
) -> pd.DataFrame:
    """Find frequent itemsets with the Apriori strategies.

    This module-level function relies on the :class:`Apriori` class.
    """
    return Apriori(
        data,
        item_names=item_names,
        min_support=min_support,
        max_len=max_len,
        itemset_type=itemset_type,
        method=method,
        use_colnames=use_colnames,
        null_values=null_values,
        monitor=monitor,
        verbose=verbose,
    ).mine()


def association_rules(
    data: BitTransactionSet | Any,
    min_support: float = DEFAULT_MIN_SUPPORT,
    max_len: int = DEFAULT_MAX_ITEMSET_LENGTH,
    min_confidence: float = DEFAULT_CONFIDENCE,
    method: DataStructureLike = "auto",
    use_colnames: bool = False,
    item_names: Sequence[Hashable] | None = None,
    null_values: bool = False,
    monitor: ExecutionMonitor | None = None,
    verbose: int = 0,
) -> pd.DataFrame:
    """Mine the transactions and derive association rules in one call."""
    check_min_confidence(min_confidence)
    return Apriori(
        data,
        item_names=item_names,
        min_support=min_support,
        max_len=max_len,
        method=method,
        use_colnames=use_colnames,
        null_values=null_values,
        monitor=monitor,
        verbose=verbose,
    ).association_rules(min_confidence)
