"""DataFrame-level API: apriori(), association_rules() and the Apriori miner."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from scipy.sparse import csr_matrix

from bitapriori import (
    DEFAULT_CONFIDENCE,
    DEFAULT_MAX_ITEMSET_LENGTH,
    DEFAULT_MIN_SUPPORT,
    Apriori,
    ArrayApriori,
    BitTransactionSet,
    ExecutionMonitor,
    InvalidConfiguration,
    MiningCancelled,
    TIDListApriori,
    apriori,
    association_rules,
)
from bitapriori._core import RULE_COLUMNS

COLS = [
    "Apple",
    "Corn",
    "Dill",
    "Eggs",
    "Ice cream",
    "Kidney Beans",
    "Milk",
    "Nutmeg",
    "Onion",
    "Unicorn",
    "Yogurt",
]


@pytest.fixture
def grocery_df(grocery_bits: np.ndarray) -> pd.DataFrame:
    return pd.DataFrame(grocery_bits, columns=COLS).astype(bool)


def as_rows(df: pd.DataFrame) -> list[tuple[tuple, float]]:
    return sorted((tuple(sorted(items)), support) for items, support in zip(df["itemsets"], df["support"]))


def test_defaults() -> None:
    assert (DEFAULT_MIN_SUPPORT, DEFAULT_MAX_ITEMSET_LENGTH, DEFAULT_CONFIDENCE) == (0.9, 10, 0.8)
    model = Apriori(np.ones((2, 2), dtype=bool))
    assert model.min_support == 0.9
    assert model.max_len == 10


def test_apriori_frame(grocery_df: pd.DataFrame, structure: str) -> None:
    res = apriori(grocery_df, min_support=0.6, method=structure)
    assert list(res.columns) == ["support", "itemsets"]
    assert isinstance(res["itemsets"].dtype, pd.ArrowDtype)
    assert res.attrs["num_itemsets"] == 5
    assert as_rows(res) == [
        ((3,), 0.8),
        ((3, 8), 0.6),
        ((5,), 1.0),
        ((6,), 0.6),
        ((8,), 0.6),
        ((10,), 0.6),
    ]


def test_apriori_colnames(grocery_df: pd.DataFrame, structure: str) -> None:
    res = apriori(grocery_df, min_support=0.6, use_colnames=True, method=structure)
    assert as_rows(res) == [
        (("Eggs",), 0.8),
        (("Eggs", "Onion"), 0.6),
        (("Kidney Beans",), 1.0),
        (("Milk",), 0.6),
        (("Onion",), 0.6),
        (("Yogurt",), 0.6),
    ]


def test_apriori_itemset_types(grocery_df: pd.DataFrame) -> None:
    closed = apriori(grocery_df, min_support=0.6, itemset_type="closed", use_colnames=True)
    maximal = apriori(grocery_df, min_support=0.6, itemset_type="maximal", use_colnames=True)
    assert len(closed) == 5
    assert [items for items, _ in as_rows(maximal)] == [
        ("Eggs", "Onion"),
        ("Kidney Beans",),
        ("Milk",),
        ("Yogurt",),
    ]


def test_scenario_default_names() -> None:
    res = apriori(["110", "110", "101", "111"], min_support=0.5, max_len=3, use_colnames=True)
    assert as_rows(res) == [(("item0",), 1.0), (("item1",), 0.75), (("item2",), 0.5)]


def test_empty_result(grocery_df: pd.DataFrame) -> None:
    res = apriori(grocery_df.iloc[:, :3], min_support=0.9)
    assert res.shape == (0, 2)
    assert list(res.columns) == ["support", "itemsets"]


def test_input_containers(grocery_bits: np.ndarray) -> None:
    expected = as_rows(apriori(grocery_bits, min_support=0.6))
    assert as_rows(apriori(csr_matrix(grocery_bits), min_support=0.6)) == expected
    assert as_rows(apriori(BitTransactionSet.from_dense(grocery_bits), min_support=0.6)) == expected
    named = apriori(grocery_bits, min_support=0.6, item_names=COLS, use_colnames=True)
    assert ("Eggs", "Onion") in [items for items, _ in as_rows(named)]


def test_wrong_values(grocery_bits: np.ndarray) -> None:
    df = pd.DataFrame(grocery_bits, columns=COLS)
    df.iloc[3, 3] = 2
    with pytest.warns(DeprecationWarning):
        with pytest.raises(ValueError, match="The allowed values for a DataFrame are True, False, 0, 1. Found value 2"):
            apriori(df)


def test_invalid_parameters(grocery_df: pd.DataFrame) -> None:
    with pytest.raises(InvalidConfiguration):
        apriori(grocery_df, min_support=0.0 - 1)
    with pytest.raises(InvalidConfiguration):
        apriori(grocery_df, max_len=0)
    with pytest.raises(InvalidConfiguration):
        apriori(grocery_df, method="bitmap")
    with pytest.raises(InvalidConfiguration):
        association_rules(grocery_df, min_confidence=1.5)


def test_association_rules_frame(grocery_df: pd.DataFrame, structure: str) -> None:
    rules = association_rules(grocery_df, min_support=0.6, min_confidence=0.7, method=structure, use_colnames=True)
    assert list(rules.columns) == RULE_COLUMNS
    assert len(rules) == 2
    row = rules[rules["antecedents"].apply(lambda a: a == ("Onion",))].iloc[0]
    assert row["consequents"] == ("Eggs",)
    assert row["antecedent support"] == 0.6
    assert row["consequent support"] == 0.8
    assert row["support"] == 0.6
    assert row["confidence"] == 1.0
    assert row["lift"] == pytest.approx(1.25)


def test_association_rules_ids(grocery_df: pd.DataFrame) -> None:
    rules = association_rules(grocery_df, min_support=0.6)
    assert rules["antecedents"].tolist() == [(8,)]
    assert rules["consequents"].tolist() == [(3,)]


def test_association_rules_empty(grocery_df: pd.DataFrame) -> None:
    rules = association_rules(grocery_df, min_support=0.9)
    assert rules.empty
    assert list(rules.columns) == RULE_COLUMNS


def test_always_frequent_rule_frame() -> None:
    rules = association_rules(["111", "110", "110"], min_support=1.0, use_colnames=True)
    assert sorted(zip(rules["antecedents"], rules["consequents"])) == [
        (("item0",), ("item1",)),
        (("item1",), ("item0",)),
    ]
    assert (rules["lift"] == 1.0).all()


def test_miner_reuse(grocery_df: pd.DataFrame) -> None:
    model = Apriori(grocery_df, min_support=0.6, use_colnames=True)
    assert model.algorithm_ is None
    first = model.mine()
    assert model.algorithm_ is not None

    lower = model.mine(min_support=0.4)
    assert len(lower) > len(first)
    # overrides do not change the stored parameters
    assert model.min_support == 0.6


def test_miner_rules_cached(grocery_df: pd.DataFrame) -> None:
    model = Apriori(grocery_df, min_support=0.6)
    first = model.association_rules(0.7)
    first.loc[0, "confidence"] = -1.0
    second = model.association_rules(0.7)
    assert (second["confidence"] >= 0).all()
    assert len(model._rules_cache) == 1

    model.mine()
    assert model._rules_cache == {}


def test_miner_mines_on_demand(grocery_df: pd.DataFrame) -> None:
    model = Apriori(grocery_df, min_support=0.6)
    rules = model.rules(0.8)
    assert len(rules) == 1
    assert model.algorithm_ is not None
    itemsets = model.frequent_itemsets("maximal")
    assert len(itemsets) == 4


def test_miner_method(grocery_df: pd.DataFrame) -> None:
    assert isinstance(Apriori(grocery_df, method="array").fit().algorithm_, ArrayApriori)
    assert isinstance(Apriori(grocery_df, method="tidlist").fit().algorithm_, TIDListApriori)


def test_from_items() -> None:
    model = Apriori.from_items(
        [["bread", "milk"], ["bread", "butter"], ["bread", "milk", "butter"]],
        min_support=0.6,
        use_colnames=True,
    )
    assert model.item_names == ["bread", "milk", "butter"]
    assert as_rows(model.mine()) == [
        (("bread",), 1.0),
        (("butter",), pytest.approx(2 / 3)),
        (("milk",), pytest.approx(2 / 3)),
    ]


def test_from_transactions() -> None:
    df = pd.DataFrame({"order": [1, 1, 2, 2, 3], "item": ["a", "b", "a", "b", "a"]})
    model = Apriori.from_transactions(df, min_support=0.5, use_colnames=True)
    assert as_rows(model.mine()) == [(("a",), 1.0), (("b",), pytest.approx(2 / 3))]


def test_verbose(grocery_df: pd.DataFrame, capsys: pytest.CaptureFixture[str]) -> None:
    Apriori(grocery_df, min_support=0.6, verbose=1).mine()
    out = capsys.readouterr().out
    assert "Mining with" in out
    assert "Mining completed" in out


def test_monitor_cancels(grocery_df: pd.DataFrame) -> None:
    monitor = ExecutionMonitor()
    monitor.cancel()
    model = Apriori(grocery_df, min_support=0.6, monitor=monitor)
    with pytest.raises(MiningCancelled):
        model.mine()
    assert model.algorithm_ is None


def test_repr(grocery_df: pd.DataFrame) -> None:
    model = Apriori(grocery_df, min_support=0.6)
    assert repr(model) == "Apriori(min_support=0.6, max_len=10, fitted=False)"


def test_polars_input(grocery_df: pd.DataFrame) -> None:
    pl = pytest.importorskip("polars")
    pytest.importorskip("pyarrow")
    res = apriori(pl.from_pandas(grocery_df), min_support=0.6, use_colnames=True)
    assert ("Eggs", "Onion") in [items for items, _ in as_rows(res)]
