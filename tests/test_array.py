"""ArrayApriori tests – shared behaviour plus prefix-tree construction details."""

from __future__ import annotations

import unittest

import numpy as np
from test_apriori_base import (
    AprioriTestEdgeCases,
    AprioriTestErrors,
    AprioriTestEx1,
    AprioriTestScenario,
    run,
    supports,
)

from bitapriori.apriori import ArrayApriori, PrefixTree
from bitapriori.apriori.array import ROOT


class TestScenario(unittest.TestCase, AprioriTestScenario):
    def setUp(self) -> None:
        AprioriTestScenario.setUp(self, "array")


class TestEx1(unittest.TestCase, AprioriTestEx1):
    def setUp(self) -> None:
        AprioriTestEx1.setUp(self, "array")


class TestEdgeCases(unittest.TestCase, AprioriTestEdgeCases):
    def setUp(self) -> None:
        AprioriTestEdgeCases.setUp(self, "array")


class TestErrors(unittest.TestCase, AprioriTestErrors):
    def setUp(self) -> None:
        AprioriTestErrors.setUp(self, "array")


# ---------------------------------------------------------------------------
# Prefix tree
# ---------------------------------------------------------------------------

# a, b, c frequent; {a, b} frequent but {b, c} is not, so {a, b} has no
# frequent continuation and gets no node.
PRUNED = ["110", "110", "101", "011"]

# every pair and the triple frequent at min_support 0.4
DENSE = ["111", "111", "110", "011", "101"]


def test_prefix_tree_layout() -> None:
    tree = PrefixTree(4)
    assert len(tree) == 1
    assert len(tree.counters[ROOT]) == 4
    assert tree.start(ROOT) == 0

    node = tree.add_node(ROOT, 1)
    assert tree.children[ROOT] == {1: node}
    assert tree.depth(node) == 1
    assert tree.start(node) == 2
    assert len(tree.counters[node]) == 2
    assert tree.levels == [[ROOT], [node]]


def test_prefix_tree_count_out_of_range() -> None:
    tree = PrefixTree(3)
    node = tree.add_node(ROOT, 0)
    tree.counters[node][:] = [5, 7]
    assert tree.count(node, 1) == 5
    assert tree.count(node, 2) == 7
    assert tree.count(node, 0) is None
    assert tree.count(node, 3) is None


def test_root_level_only_with_max_length_one() -> None:
    algo = run("array", DENSE, 0.4, max_length=1)
    assert len(algo.tree) == 1
    assert [len(s) for s in algo.get_frequent_itemsets()] == [1, 1, 1]


def test_no_node_below_max_depth() -> None:
    algo = run("array", DENSE, 0.4, max_length=2)
    tree = algo.tree
    assert len(tree.levels) == 2
    assert len(tree) == 3
    assert max(len(s) for s in algo.get_frequent_itemsets()) == 2


def test_triple_found_through_extension() -> None:
    algo = run("array", DENSE, 0.4, max_length=3)
    result = supports(algo.get_frequent_itemsets())
    assert result[frozenset([0, 1, 2])] == 0.4
    assert len(algo.tree) == 4
    assert len(result) == 7


def test_no_child_without_frequent_continuation() -> None:
    algo = run("array", PRUNED, 0.5)
    tree = algo.tree
    node_a = tree.children[ROOT][0]
    assert tree.count(node_a, 1) == 2
    assert tree.children[node_a] == {}
    assert len(tree) == 3
    assert supports(algo.get_frequent_itemsets()) == {
        frozenset([0]): 0.75,
        frozenset([0, 1]): 0.5,
        frozenset([1]): 0.75,
        frozenset([2]): 0.5,
    }


def test_last_item_never_gets_a_node() -> None:
    algo = run("array", DENSE, 0.4)
    last = algo.support_index.n_frequent - 1
    for children in algo.tree.children:
        assert last not in children


def test_counters_skip_always_frequent_items() -> None:
    algo = run("array", ["110", "110", "101", "111"], 0.5)
    assert len(algo.tree.counters[ROOT]) == 2
    assert list(algo.tree.counters[ROOT]) == [3, 2]


def test_count_lookup() -> None:
    algo = run("array", DENSE, 0.4)
    assert algo._count([0, 1]) == 3
    assert algo._count([2, 0]) == 3
    assert algo._count([0, 1, 2]) == 2
    assert algo._count([]) is None


def test_count_lookup_misses_unmapped_item() -> None:
    algo = run("array", ["110", "110", "101", "111"], 0.5)
    assert algo._count([0]) is None
    assert algo._count([1]) == 3


def test_closed_cached() -> None:
    algo = run("array", DENSE, 0.4)
    first = algo.get_frequent_itemsets("closed")
    second = algo.get_frequent_itemsets("closed")
    assert [s.id for s in first] == [s.id for s in second]


def test_encoded_transactions_are_sorted() -> None:
    rng = np.random.default_rng(7)
    bits = rng.random((30, 8)) < 0.5
    algo = run("array", bits, 0.2, max_length=3)
    for s in algo.get_frequent_itemsets():
        assert list(s.items) == sorted(s.items)


def test_repr() -> None:
    assert repr(ArrayApriori(3, 4)) == "ArrayApriori(n_items=3, n_transactions=4, fitted=False)"
