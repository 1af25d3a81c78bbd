"""Input validation – eager checks run before any scanning begins."""

from __future__ import annotations

import numbers
import warnings
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from .exceptions import InvalidConfiguration

if TYPE_CHECKING:
    from .bitvectors import BitTransactionSet


def check_min_support(min_support: float) -> float:
    if isinstance(min_support, bool) or not isinstance(min_support, numbers.Real):
        raise InvalidConfiguration(f"`min_support` must be a number. Got {min_support!r}.")
    if not 0.0 <= float(min_support) <= 1.0:
        raise InvalidConfiguration(
            f"`min_support` must be a number within the interval `[0, 1]`. Got {min_support}."
        )
    return float(min_support)


def check_max_length(max_length: int) -> int:
    if isinstance(max_length, bool) or not isinstance(max_length, numbers.Integral):
        raise InvalidConfiguration(f"`max_len` must be a positive integer. Got {max_length!r}.")
    if max_length <= 0:
        raise InvalidConfiguration(f"`max_len` must be a positive integer. Got {max_length}.")
    return int(max_length)


def check_min_confidence(min_confidence: float) -> float:
    if isinstance(min_confidence, bool) or not isinstance(min_confidence, numbers.Real):
        raise InvalidConfiguration(f"`min_confidence` must be a number. Got {min_confidence!r}.")
    if not 0.0 <= float(min_confidence) <= 1.0:
        raise InvalidConfiguration(
            f"`min_confidence` must be a number within the interval `[0, 1]`. Got {min_confidence}."
        )
    return float(min_confidence)


def check_shape(transactions: BitTransactionSet, n_items: int, n_transactions: int) -> None:
    """The transaction set must match the domain the miner was built for."""
    if transactions.width != n_items:
        raise InvalidConfiguration(
            f"The miner was configured for {n_items} items but the transactions "
            f"are encoded with {transactions.width} bits."
        )
    if len(transactions) != n_transactions:
        raise InvalidConfiguration(
            f"The miner was configured for {n_transactions} transactions but got {len(transactions)}."
        )


def valid_input_check(df: pd.DataFrame, null_values: bool = False) -> None:
    """Validate a one-hot / boolean DataFrame before encoding it as bit vectors.

    Parameters
    ----------
    df:
        Input DataFrame.  Allowed values: 0/1 or True/False (and NaN if
        ``null_values=True``).
    null_values:
        Whether NaN values are allowed in *df*; they count as absent items.
    """
    if df is None or df.size == 0:
        return

    if hasattr(df, "sparse"):
        if not isinstance(df.columns[0], str) and df.columns[0] != 0:
            raise ValueError(
                "Due to current limitations in Pandas, "
                "if the sparse format has integer column names, "
                "please make sure they either start "
                "with `0` or cast them as string column names: "
                "`df.columns = [str(i) for i in df.columns]`."
            )

    # Fast path: all bool columns
    if df.dtypes.apply(pd.api.types.is_bool_dtype).all():
        return

    warnings.warn(
        "DataFrames with non-bool types result in worse computational "
        "performance and their support might be discontinued in the future. "
        "Please use a DataFrame with bool type",
        DeprecationWarning,
        stacklevel=3,
    )

    has_nans = pd.isna(df).any().any()
    if not null_values and has_nans:
        raise ValueError("NaN values are not permitted in the DataFrame when null_values=False.")

    if hasattr(df, "sparse"):
        values = df.sparse.to_coo().tocoo().data
    else:
        values = df.to_numpy(dtype=float, na_value=np.nan)

    if null_values:
        idxs = np.where((values != 1) & (values != 0) & (~np.isnan(values)))
    else:
        idxs = np.where((values != 1) & (values != 0))

    if len(idxs[0]) > 0:
        val = values[tuple(loc[0] for loc in idxs)]
        if null_values:
            s = "The allowed values for a DataFrame are True, False, 0, 1, NaN. Found value %s" % (val,)
        else:
            s = "The allowed values for a DataFrame are True, False, 0, 1. Found value %s" % (val,)
        raise ValueError(s)
