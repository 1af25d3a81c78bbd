from __future__ import annotations

import enum
import logging
from typing import Union

from ..exceptions import InvalidConfiguration
from ._base import AprioriAlgorithm
from .array import ArrayApriori
from .tidlist import TIDListApriori

logger = logging.getLogger(__name__)


class AlgorithmDataStructure(enum.Enum):
    """The search structure a strategy is built on."""

    ARRAY = "array"
    TIDLIST = "tidlist"


DataStructureLike = Union[AlgorithmDataStructure, str]

_ALGORITHMS: dict[AlgorithmDataStructure, type[AprioriAlgorithm]] = {
    AlgorithmDataStructure.ARRAY: ArrayApriori,
    AlgorithmDataStructure.TIDLIST: TIDListApriori,
}


def _estimate_tidset_memory(n_transactions: int) -> int:
    """Bytes of one packed transaction-id set."""
    return (n_transactions + 7) // 8


def _estimate_counter_memory(n_items: int) -> int:
    """Bytes of one prefix-tree counter row."""
    return 8 * n_items


def select_data_structure(n_items: int, n_transactions: int) -> AlgorithmDataStructure:
    """Pick the structure with the smaller per-itemset footprint.

    Only the expected sizes are consulted, never the data itself.
    """
    if _estimate_tidset_memory(n_transactions) < _estimate_counter_memory(n_items):
        chosen = AlgorithmDataStructure.TIDLIST
    else:
        chosen = AlgorithmDataStructure.ARRAY
    logger.debug("Auto-selected %s for %d items x %d transactions", chosen.value, n_items, n_transactions)
    return chosen


def parse_data_structure(
    structure: DataStructureLike,
    n_items: int,
    n_transactions: int,
) -> AlgorithmDataStructure:
    if isinstance(structure, AlgorithmDataStructure):
        return structure
    name = str(structure).lower()
    if name == "auto":
        return select_data_structure(n_items, n_transactions)
    try:
        return AlgorithmDataStructure(name)
    except ValueError:
        raise InvalidConfiguration(
            f"`method` must be 'array', 'tidlist', or 'auto'. Got: {structure}"
        ) from None


def get_apriori_algorithm(
    structure: DataStructureLike,
    n_items: int,
    n_transactions: int,
) -> AprioriAlgorithm:
    """Create the strategy for ``structure`` bound to the given database size.

    >>> get_apriori_algorithm("array", n_items=3, n_transactions=4)
    ArrayApriori(n_items=3, n_transactions=4, fitted=False)
    """
    if n_items < 0 or n_transactions < 0:
        raise InvalidConfiguration(
            f"Item and transaction counts must not be negative. Got {n_items} and {n_transactions}."
        )
    chosen = parse_data_structure(structure, n_items, n_transactions)
    return _ALGORITHMS[chosen](n_items, n_transactions)
