from bisect import bisect_right

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from minikit.rmqtree import RmqTree

keys_strategy = st.lists(st.integers(0, 200), max_size=80)
pairs_strategy = st.lists(
    st.tuples(st.integers(0, 100), st.integers(-50, 50)), max_size=80
)


def _pair_tree():
    return RmqTree(key=lambda t: t[0], min_key=lambda t: (t[1], t[0]))


def _first_by_key(pairs):
    seen = {}
    for k, v in pairs:
        seen.setdefault(k, (k, v))
    return seen


def _brute_rmq(stored, lo, hi):
    candidates = [it for k, it in stored.items() if lo <= k <= hi]
    if not candidates:
        return None
    return min(candidates, key=lambda t: (t[1], t[0]))


def test_worked_example_order():
    tree = RmqTree()
    for ch in "MNOLKQOPHIA":
        tree.insert(ch)
    assert "".join(tree) == "AHIKLMNOPQ"
    assert len(tree) == 10


def test_duplicate_insert_returns_existing():
    tree = RmqTree(key=lambda t: t[0])
    first = (5, "first")
    stored, _ = tree.insert(first)
    assert stored is first
    again, rank = tree.insert((5, "second"))
    assert again is first
    assert rank == 1
    assert len(tree) == 1


def test_empty_tree():
    tree = RmqTree()
    assert len(tree) == 0
    assert list(tree) == []
    assert tree.find(3) == (None, 0)
    assert tree.interval(3) == (None, None)
    assert tree.rmq(0, 10) is None
    assert tree.erase(3) == (None, 0)
    assert tree.erase_first() is None


@given(keys_strategy)
def test_iteration_matches_sorted(keys):
    tree = RmqTree()
    for k in keys:
        tree.insert(k)
    expected = sorted(set(keys))
    assert list(tree) == expected
    assert list(reversed(tree)) == expected[::-1]
    assert len(tree) == len(expected)


@given(keys_strategy, st.integers(-5, 205))
def test_find_and_interval(keys, probe):
    tree = RmqTree()
    for k in keys:
        tree.insert(k)
    ordered = sorted(set(keys))
    found, rank = tree.find(probe)
    assert found == (probe if probe in ordered else None)
    if found is not None:
        assert rank == bisect_right(ordered, probe)
    lower, upper = tree.interval(probe)
    below = [x for x in ordered if x <= probe]
    above = [x for x in ordered if x >= probe]
    assert lower == (below[-1] if below else None)
    assert upper == (above[0] if above else None)


@given(keys_strategy, st.integers(-5, 205))
def test_iter_from(keys, probe):
    tree = RmqTree()
    for k in keys:
        tree.insert(k)
    assert list(tree.iter_from(probe)) == sorted(x for x in set(keys) if x >= probe)


@settings(max_examples=150)
@given(pairs_strategy, st.integers(-5, 105), st.integers(-5, 105))
def test_rmq_matches_brute_force(pairs, lo, hi):
    tree = _pair_tree()
    for pair in pairs:
        tree.insert(pair)
    stored = _first_by_key(pairs)
    assert tree.rmq((lo, 0), (hi, 0)) == _brute_rmq(stored, lo, hi)


@settings(max_examples=150)
@given(pairs_strategy, st.lists(st.integers(0, 100), max_size=60), st.data())
def test_erase_keeps_order_and_minimum(pairs, removals, data):
    tree = _pair_tree()
    for pair in pairs:
        tree.insert(pair)
    stored = _first_by_key(pairs)
    for k in removals:
        expected_item = stored.get(k)
        expected_rank = sum(1 for x in stored if x <= k) if expected_item else 0
        removed, rank = tree.erase((k, 0))
        assert removed == expected_item
        assert rank == expected_rank
        stored.pop(k, None)
        assert len(tree) == len(stored)
    assert list(tree) == [stored[k] for k in sorted(stored)]
    lo = data.draw(st.integers(-5, 105))
    hi = data.draw(st.integers(-5, 105))
    assert tree.rmq((lo, 0), (hi, 0)) == _brute_rmq(stored, lo, hi)
    for k in sorted(stored):
        assert tree.find((k, 0))[1] == sum(1 for x in stored if x <= k)


@given(keys_strategy)
def test_erase_first_drains_in_order(keys):
    tree = RmqTree()
    for k in keys:
        tree.insert(k)
    drained = []
    while len(tree):
        drained.append(tree.erase_first())
    assert drained == sorted(set(keys))
    assert tree.erase_first() is None


@given(pairs_strategy, pairs_strategy)
def test_reinsert_after_erase(first, second):
    tree = _pair_tree()
    for pair in first:
        tree.insert(pair)
    for k in {k for k, _ in first}:
        tree.erase((k, 0))
    assert len(tree) == 0
    for pair in second:
        tree.insert(pair)
    stored = _first_by_key(second)
    assert list(tree) == [stored[k] for k in sorted(stored)]
    assert tree.rmq((0, 0), (100, 0)) == _brute_rmq(stored, 0, 100)


@pytest.mark.parametrize("lo, hi", [(10, 3), (50, 49)])
def test_rmq_reversed_interval_is_empty(lo, hi):
    tree = _pair_tree()
    for k in range(0, 60, 3):
        tree.insert((k, -k))
    assert tree.rmq((lo, 0), (hi, 0)) is None


def test_rmq_single_point():
    tree = _pair_tree()
    for k in range(20):
        tree.insert((k, (k * 7) % 11))
    for k in range(20):
        assert tree.rmq((k, 0), (k, 0)) == (k, (k * 7) % 11)