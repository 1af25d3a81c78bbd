from ._base import AprioriAlgorithm
from .array import ArrayApriori, PrefixTree
from .factory import (
    AlgorithmDataStructure,
    get_apriori_algorithm,
    parse_data_structure,
    select_data_structure,
)
from .tidlist import TIDListApriori, TIDNode

__all__ = [
    "AprioriAlgorithm",
    "ArrayApriori",
    "TIDListApriori",
    "PrefixTree",
    "TIDNode",
    "AlgorithmDataStructure",
    "get_apriori_algorithm",
    "parse_data_structure",
    "select_data_structure",
]
