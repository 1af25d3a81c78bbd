from __future__ import annotations

import pytest

from bitapriori import ExecutionMonitor, FrequentItemSet, MiningCancelled, closed_itemsets, maximal_itemsets


def fis(items, count, n=10):
    return FrequentItemSet(f"s{sorted(items)}", items, count / n)


def keys(itemsets):
    return {s.key for s in itemsets}


def test_subset_with_equal_support_not_closed() -> None:
    a, ab, b = fis([1], 6), fis([1, 2], 6), fis([2], 7)
    result = closed_itemsets([a, ab, b])
    assert keys(result) == {frozenset([1, 2]), frozenset([2])}
    assert a.closed is False
    assert ab.closed is True
    assert b.closed is True


def test_equal_support_without_containment_stays_closed() -> None:
    result = closed_itemsets([fis([1], 5), fis([2], 5), fis([3, 4], 5)])
    assert len(result) == 3


def test_order_is_support_then_length() -> None:
    result = closed_itemsets([fis([1], 9), fis([2, 3], 4), fis([4], 4), fis([5], 6)])
    assert [s.items for s in result] == [(4,), (2, 3), (5,), (1,)]


def test_support_compared_exactly() -> None:
    # 0.1 + 0.2 != 0.3 in binary floating point
    a = FrequentItemSet("a", [1], 0.1 + 0.2)
    ab = FrequentItemSet("ab", [1, 2], 0.3)
    assert len(closed_itemsets([a, ab])) == 2


def test_closed_of_nothing() -> None:
    assert closed_itemsets([]) == []
    assert maximal_itemsets([]) == []


def test_maximal() -> None:
    closed = closed_itemsets([fis([1], 8), fis([1, 2], 6), fis([3], 4), fis([1, 2, 4], 3)])
    result = maximal_itemsets(closed)
    assert keys(result) == {frozenset([3]), frozenset([1, 2, 4])}


def test_maximal_subset_of_closed() -> None:
    itemsets = [fis([1], 8), fis([2], 8), fis([1, 2], 7), fis([1, 3], 5), fis([3], 5), fis([2, 3], 2)]
    closed = closed_itemsets(itemsets)
    maximal = maximal_itemsets(closed)
    assert keys(maximal) <= keys(closed) <= keys(itemsets)
    assert frozenset([3]) not in keys(closed)


def test_cancellation() -> None:
    monitor = ExecutionMonitor()
    monitor.cancel()
    with pytest.raises(MiningCancelled):
        closed_itemsets([fis([1], 1)], monitor)
    with pytest.raises(MiningCancelled):
        maximal_itemsets([fis([1], 1)], monitor)
