from __future__ import annotations

import typing
from collections.abc import Hashable, Sequence
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import pandas as pd

    from .itemset import AssociationRule, FrequentItemSet

RULE_COLUMNS = [
    "antecedents",
    "consequents",
    "antecedent support",
    "consequent support",
    "support",
    "confidence",
    "lift",
]


def build_itemset_frame(
    itemsets: Sequence[FrequentItemSet],
    n_transactions: int,
    item_names: Sequence[Hashable],
    use_colnames: bool,
) -> pd.DataFrame:
    """``support`` / ``itemsets`` DataFrame backed by an Arrow list column."""
    import pandas as pd
    import pyarrow as pa

    if len(itemsets) == 0:
        empty = pd.DataFrame(columns=["support", "itemsets"])  # type: ignore[arg-type]
        empty.attrs["num_itemsets"] = n_transactions
        return empty

    supports = np.array([s.support for s in itemsets], dtype=np.float64)
    lengths = [len(s) for s in itemsets]
    offsets_arr = np.concatenate([[0], np.cumsum(lengths)]).astype(np.int32)
    items_arr = np.fromiter((i for s in itemsets for i in s.items), dtype=np.int32, count=int(offsets_arr[-1]))

    if use_colnames:
        col_array = pa.array([str(name) for name in item_names])
        items_pa = col_array.take(pa.array(items_arr, type=pa.int32()))
        item_type = col_array.type
    else:
        items_pa = pa.array(items_arr, type=pa.int32())
        item_type = pa.int32()

    offsets_pa = pa.array(offsets_arr, type=pa.int32())
    list_arr = pa.ListArray.from_arrays(offsets_pa, items_pa)

    result = pd.DataFrame(
        {
            "support": supports,
            "itemsets": pd.Series(list_arr, dtype=pd.ArrowDtype(pa.list_(item_type))),
        }
    )
    result.attrs["num_itemsets"] = n_transactions
    return typing.cast("pd.DataFrame", result)


def build_rule_frame(
    rules: Sequence[AssociationRule],
    item_names: Sequence[Hashable],
    use_colnames: bool,
) -> pd.DataFrame:
    import pandas as pd

    if len(rules) == 0:
        return pd.DataFrame(columns=pd.Index(RULE_COLUMNS))

    if use_colnames:

        def _labels(items: Sequence[int]) -> tuple:
            return tuple(str(item_names[i]) for i in items)
    else:

        def _labels(items: Sequence[int]) -> tuple:
            return tuple(int(i) for i in items)

    return pd.DataFrame(
        {
            "antecedents": [_labels(r.antecedent.items) for r in rules],
            "consequents": [_labels(r.consequent.items) for r in rules],
            "antecedent support": [r.antecedent_support for r in rules],
            "consequent support": [r.consequent_support for r in rules],
            "support": [r.support for r in rules],
            "confidence": [r.confidence for r in rules],
            "lift": [np.nan if r.lift is None else r.lift for r in rules],
        },
        columns=RULE_COLUMNS,
    )
