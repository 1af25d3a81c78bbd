from .apriori import (
    AlgorithmDataStructure,
    AprioriAlgorithm,
    ArrayApriori,
    TIDListApriori,
    get_apriori_algorithm,
    select_data_structure,
)
from .bitvectors import BitTransactionSet
from .classify import closed_itemsets, maximal_itemsets
from .exceptions import InternalInconsistency, InvalidConfiguration, MiningCancelled, MiningError
from .itemset import AssociationRule, FrequentItemSet, ItemSetIdGenerator, ItemSetType
from .miner import (
    DEFAULT_CONFIDENCE,
    DEFAULT_MAX_ITEMSET_LENGTH,
    DEFAULT_MIN_SUPPORT,
    Apriori,
    apriori,
    association_rules,
)
from .monitor import ExecutionMonitor
from .rules import RuleDeriver
from .support_index import ItemSupportIndex

__all__ = [
    "apriori",
    "association_rules",
    "Apriori",
    "BitTransactionSet",
    "ItemSupportIndex",
    "AprioriAlgorithm",
    "ArrayApriori",
    "TIDListApriori",
    "AlgorithmDataStructure",
    "get_apriori_algorithm",
    "select_data_structure",
    "closed_itemsets",
    "maximal_itemsets",
    "RuleDeriver",
    "FrequentItemSet",
    "AssociationRule",
    "ItemSetType",
    "ItemSetIdGenerator",
    "ExecutionMonitor",
    "MiningError",
    "MiningCancelled",
    "InvalidConfiguration",
    "InternalInconsistency",
    "DEFAULT_MIN_SUPPORT",
    "DEFAULT_MAX_ITEMSET_LENGTH",
    "DEFAULT_CONFIDENCE",
]
