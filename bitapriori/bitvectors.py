"""Transactions encoded as fixed-width bit vectors.

One row per transaction, one bit position per item.  Every constructor
returns a read-only :class:`BitTransactionSet`; the miners never modify it.
"""

from __future__ import annotations

import time
import typing
from collections.abc import Hashable, Iterable, Sequence
from typing import Any

import numpy as np

from ._compat import frame_kind, to_pandas


class BitTransactionSet:
    """An ordered, immutable sequence of equal-width bit vectors.

    Parameters
    ----------
    bits : array-like of shape (n_transactions, width)
        Boolean or 0/1 matrix.  Row ``t`` bit ``i`` is set when item ``i``
        occurs in transaction ``t``.
    item_names : sequence, optional
        One name per bit position.

    Examples
    --------
    >>> ts = BitTransactionSet.from_bitstrings(["110", "110", "101", "111"])
    >>> len(ts), ts.width
    (4, 3)
    >>> ts.next_set_bit(2, 1)
    2
    """

    def __init__(self, bits: Any, item_names: Sequence[Hashable] | None = None) -> None:
        arr = np.asarray(bits)
        if arr.ndim == 1 and arr.size == 0:
            arr = arr.reshape(0, 0)
        if arr.ndim != 2:
            raise ValueError(f"Expected a 2-D matrix of bits, got an array with {arr.ndim} dimension(s).")
        if arr.dtype != np.bool_:
            if arr.size and not np.isin(arr, (0, 1)).all():
                bad = arr[~np.isin(arr, (0, 1))].flat[0].item()
                raise ValueError(f"Bit vectors may only contain 0/1 or True/False. Found value {bad!r}.")
            arr = arr.astype(bool)

        self._bits = np.array(arr, dtype=bool, order="C")
        self._bits.setflags(write=False)

        if item_names is not None:
            item_names = list(item_names)
            if len(item_names) != self._bits.shape[1]:
                raise ValueError(
                    f"Got {len(item_names)} item names for bit vectors of width {self._bits.shape[1]}."
                )
        self._item_names: list[Hashable] | None = item_names
        self._set_bits: list[np.ndarray] | None = None

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_dense(cls, array: Any, item_names: Sequence[Hashable] | None = None) -> BitTransactionSet:
        """Build from a dense 0/1 or boolean 2-D array."""
        return cls(array, item_names=item_names)

    @classmethod
    def from_bitstrings(cls, bitstrings: Iterable[str]) -> BitTransactionSet:
        """Build from strings such as ``"0110"``; character ``i`` is item ``i``.

        Shorter strings are padded with zeros up to the longest one.
        """
        rows = [s.strip() for s in bitstrings]
        width = max((len(r) for r in rows), default=0)
        bits = np.zeros((len(rows), width), dtype=bool)
        for t, row in enumerate(rows):
            for i, ch in enumerate(row):
                if ch == "1":
                    bits[t, i] = True
                elif ch != "0":
                    raise ValueError(f"Bit string {row!r} of transaction {t} contains {ch!r}; only '0' and '1' are allowed.")
        return cls(bits)

    @classmethod
    def from_sparse(cls, matrix: Any, item_names: Sequence[Hashable] | None = None) -> BitTransactionSet:
        """Build from a ``scipy.sparse`` matrix; explicit zeros are ignored."""
        csr = matrix.tocsr()
        csr.eliminate_zeros()
        bits = np.zeros(csr.shape, dtype=bool)
        indptr, indices = csr.indptr, csr.indices
        for t in range(csr.shape[0]):
            bits[t, indices[indptr[t] : indptr[t + 1]]] = True
        return cls(bits, item_names=item_names)

    @classmethod
    def from_frame(cls, df: Any, null_values: bool = False) -> BitTransactionSet:
        """Build from a one-hot pandas / polars DataFrame or pyarrow Table.

        Column names become item names.  With ``null_values=True`` missing
        values count as absent items.
        """
        import pandas as pd

        from ._validation import valid_input_check

        df = to_pandas(df)
        if not isinstance(df, pd.DataFrame):
            raise TypeError(f"Expected a pandas/polars DataFrame or pyarrow Table, got {type(df)}")

        valid_input_check(df, null_values)
        names = list(df.columns)

        if hasattr(df, "sparse") and len(df.columns) and all(
            isinstance(dtype, pd.SparseDtype) for dtype in df.dtypes
        ):
            return cls.from_sparse(df.sparse.to_coo(), item_names=names)

        values = df.to_numpy(dtype=float, na_value=0.0) if null_values else df.to_numpy()
        return cls(np.asarray(values) != 0, item_names=names)

    @classmethod
    def from_items(
        cls,
        transactions: Iterable[Iterable[Hashable] | None],
        verbose: int = 0,
    ) -> BitTransactionSet:
        """Build from collection-valued transactions, e.g. ``[["bread", "milk"], ["milk"]]``.

        Item ids follow the order in which items are first seen; the items
        themselves become the item names.  ``None`` entries (missing
        transactions) are skipped.
        """
        t0 = 0.0
        if verbose:
            print(f"[{time.strftime('%X')}] Extracting unique items from collections...")
            t0 = time.perf_counter()

        rows = [list(txn) for txn in transactions if txn is not None]
        item_to_idx: dict[Hashable, int] = {}
        for txn in rows:
            for item in txn:
                if item not in item_to_idx:
                    item_to_idx[item] = len(item_to_idx)

        bits = np.zeros((len(rows), len(item_to_idx)), dtype=bool)
        for t, txn in enumerate(rows):
            for item in txn:
                bits[t, item_to_idx[item]] = True

        if verbose:
            print(
                f"[{time.strftime('%X')}] Encoded {len(rows):,} transactions over "
                f"{len(item_to_idx):,} items in {time.perf_counter() - t0:.2f}s."
            )
        return cls(bits, item_names=list(item_to_idx))

    @classmethod
    def from_transactions(
        cls,
        data: Any,
        transaction_col: str | None = None,
        item_col: str | None = None,
        verbose: int = 0,
    ) -> BitTransactionSet:
        """Build from long-format ``(transaction id, item)`` rows.

        Parameters
        ----------
        data
            Pandas / Polars DataFrame or pyarrow Table with (at least) two
            columns.  A list of item collections is forwarded to
            :meth:`from_items`.
        transaction_col
            Column that identifies transactions.  Defaults to the first column.
        item_col
            Column holding the items.  Defaults to the second column.
        """
        import pandas as pd
        from scipy import sparse as sp

        if isinstance(data, (list, tuple)):
            return cls.from_items(data, verbose=verbose)

        df = to_pandas(data)
        if not isinstance(df, pd.DataFrame):
            raise TypeError(f"Expected a Pandas/Polars DataFrame, PyArrow Table or list of lists, got {type(data)}")

        t0 = 0.0
        if verbose:
            print(f"[{time.strftime('%X')}] Encoding long-format DataFrame (shape={df.shape})...")
            t0 = time.perf_counter()

        cols = list(df.columns)
        if len(cols) < 2:
            raise ValueError(f"DataFrame must have at least 2 columns (transaction id + item), got {len(cols)}: {cols}")

        txn_col = transaction_col or cols[0]
        itm_col = item_col or cols[1]
        if txn_col not in df.columns:
            raise ValueError(f"Transaction column '{txn_col}' not found. Available columns: {cols}")
        if itm_col not in df.columns:
            raise ValueError(f"Item column '{itm_col}' not found. Available columns: {cols}")

        df = df.dropna(subset=[txn_col, itm_col])
        txn_codes, _txn_uniques = pd.factorize(df[txn_col], sort=False)
        item_codes, item_uniques = pd.factorize(df[itm_col], sort=True)

        n_txn = int(txn_codes.max()) + 1 if len(txn_codes) else 0
        n_items = len(item_uniques)

        data_arr = np.ones(len(txn_codes), dtype=np.int8)
        csr = sp.csr_matrix(
            (data_arr, (txn_codes.astype(np.int64), item_codes.astype(np.int64))),
            shape=(n_txn, n_items),
        )

        if verbose:
            print(f"[{time.strftime('%X')}] Encoding completed in {time.perf_counter() - t0:.2f}s.")

        return cls.from_sparse(csr, item_names=list(item_uniques))

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return int(self._bits.shape[0])

    @property
    def n_transactions(self) -> int:
        return len(self)

    @property
    def width(self) -> int:
        return int(self._bits.shape[1])

    @property
    def bits(self) -> np.ndarray:
        """The underlying read-only boolean matrix."""
        return self._bits

    @property
    def item_names(self) -> list[Hashable] | None:
        return None if self._item_names is None else list(self._item_names)

    def item_name(self, item: int) -> Hashable:
        if self._item_names is not None and 0 <= item < len(self._item_names):
            return self._item_names[item]
        return f"item{item}"

    def set_bits(self, tid: int) -> np.ndarray:
        """Ascending positions of the items in transaction ``tid``."""
        if self._set_bits is None:
            self._set_bits = [np.flatnonzero(row) for row in self._bits]
        return self._set_bits[tid]

    def next_set_bit(self, tid: int, from_index: int = 0) -> int:
        """First set position ``>= from_index`` in transaction ``tid``, or ``-1``."""
        positions = self.set_bits(tid)
        k = int(np.searchsorted(positions, from_index))
        return int(positions[k]) if k < len(positions) else -1

    def cardinality(self, tid: int) -> int:
        return int(len(self.set_bits(tid)))

    def column(self, item: int) -> np.ndarray:
        """Boolean mask of the transactions containing ``item``."""
        return self._bits[:, item]

    def density(self) -> float:
        if self._bits.size == 0:
            return 0.0
        return float(self._bits.mean())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n_transactions={len(self)}, width={self.width})"


def as_transaction_set(
    data: Any,
    item_names: Sequence[Hashable] | None = None,
    null_values: bool = False,
) -> BitTransactionSet:
    """Coerce any supported input into a :class:`BitTransactionSet`.

    Accepts a transaction set, a dense array, a ``scipy.sparse`` matrix, a
    one-hot pandas / polars DataFrame or pyarrow Table, or a list of item
    collections.
    """
    if isinstance(data, BitTransactionSet):
        return data

    kind = frame_kind(data)
    if kind in ("pandas", "polars", "pyarrow"):
        ts = BitTransactionSet.from_frame(data, null_values=null_values)
        if item_names is not None:
            ts = BitTransactionSet(ts.bits, item_names=item_names)
        return ts
    if kind == "numpy":
        return BitTransactionSet.from_dense(data, item_names=item_names)
    if kind == "scipy":
        return BitTransactionSet.from_sparse(data, item_names=item_names)
    if isinstance(data, (list, tuple)):
        if data and all(isinstance(row, str) for row in data):
            return BitTransactionSet.from_bitstrings(typing.cast("list[str]", data))
        return BitTransactionSet.from_items(data)

    raise TypeError(
        "Expected a BitTransactionSet, numpy array, scipy sparse matrix, "
        f"pandas/polars DataFrame, pyarrow Table or list of transactions, got {type(data)}"
    )
