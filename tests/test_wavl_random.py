import math
import random
import time

import pytest

from wavltree import DuplicateKeyError
from wavltree import WAVLTree
from wavltree._testutils import RotationCounter
from wavltree._testutils import make_tree


MAGIC = 10
TREE_MAX_SIZE = random.randint(MAGIC * 10, MAGIC * 50)
INTEGER_MAX = random.randint(MAGIC * 50, MAGIC * 10_000)


def check_against(tree, expected):
    keys = sorted(expected)

    assert tree.is_balanced()
    assert tree.size() == len(expected)
    assert tree.keys_to_array() == keys
    assert tree.values_to_array() == [expected[key] for key in keys]

    if keys:
        assert tree.min() == expected[keys[0]]
        assert tree.max() == expected[keys[-1]]
        assert tree.root_rank() <= 2 * math.log2(len(keys) + 1)
    else:
        assert tree.is_empty()
        assert tree.min() is None
        assert tree.max() is None


def test_sorted_random_trees_of_positive_integers():
    for _ in range(MAGIC):
        # given
        expected = dict()
        tree = WAVLTree(debug=False)
        for i in range(TREE_MAX_SIZE):
            key = random.randint(0, INTEGER_MAX)
            value = 'v{}'.format(key)
            if key in expected:
                with pytest.raises(DuplicateKeyError):
                    tree.insert(key, value)
            else:
                tree.insert(key, value)
                expected[key] = value
        # then
        check_against(tree, expected)
        for key, value in expected.items():
            assert tree.search(key) == value


def test_sorted_random_trees_of_integers():
    for _ in range(MAGIC):
        # given
        expected = dict()
        tree = WAVLTree(debug=False)
        for i in range(TREE_MAX_SIZE):
            key = random.randint(-INTEGER_MAX, INTEGER_MAX)
            if key not in expected:
                tree.insert(key, key)
                expected[key] = key
        # then
        check_against(tree, expected)


@pytest.mark.parametrize('order', ['ascending', 'descending', 'shuffled'])
def test_insert_then_delete_everything(order):
    keys = list(range(TREE_MAX_SIZE))
    if order == 'descending':
        keys.reverse()
    elif order == 'shuffled':
        random.shuffle(keys)

    tree = make_tree(keys)
    expected = dict.fromkeys(keys)
    for key in keys:
        expected[key] = key
    check_against(tree, expected)

    doomed = list(keys)
    random.shuffle(doomed)
    for key in doomed:
        tree.delete(key)
        del expected[key]
        assert tree.search(key) is None
        assert tree.size() == len(expected)

    check_against(tree, expected)


def test_mixed_operations():
    # every step is validated by the debug tree
    for _ in range(3):
        expected = dict()
        tree = WAVLTree(debug=True)

        for i in range(TREE_MAX_SIZE * 2):
            key = random.randint(0, TREE_MAX_SIZE)

            if random.random() < 0.6:
                if key in expected:
                    with pytest.raises(DuplicateKeyError):
                        tree.insert(key, i)
                else:
                    assert tree.insert(key, i) >= 0
                    expected[key] = i
            else:
                if key in expected:
                    assert tree.delete(key) >= 0
                    del expected[key]
                else:
                    with pytest.raises(KeyError):
                        tree.delete(key)

            assert tree.size() == len(expected)
            assert tree.search(key) == expected.get(key)

        check_against(tree, expected)


def test_select_matches_in_order_values():
    keys = random.sample(range(-INTEGER_MAX, INTEGER_MAX), TREE_MAX_SIZE)
    tree = make_tree(keys, debug=False)
    values = tree.values_to_array()

    for i in range(1, len(keys) + 1):
        assert tree.select(i) == values[i - 1]

    for key in random.sample(keys, len(keys) // 2):
        tree.delete(key)
    values = tree.values_to_array()

    for i in range(1, tree.size() + 1):
        assert tree.select(i) == values[i - 1]

    with pytest.raises(IndexError):
        tree.select(tree.size() + 1)


def test_successor_walk():
    keys = random.sample(range(INTEGER_MAX), TREE_MAX_SIZE)
    tree = make_tree(keys, debug=False)
    ordered = sorted(keys)

    walked = [ordered[0]]
    item = tree.successor(ordered[0])
    while item is not None:
        walked.append(item[0])
        item = tree.successor(item[0])
    assert walked == ordered

    walked = [ordered[-1]]
    item = tree.predecessor(ordered[-1])
    while item is not None:
        walked.append(item[0])
        item = tree.predecessor(item[0])
    assert walked == ordered[::-1]


def test_insert_rotates_at_most_once():
    keys = random.sample(range(INTEGER_MAX), TREE_MAX_SIZE)
    tree = WAVLTree()

    with RotationCounter() as counter:
        for key in keys:
            tree.insert(key, key)
            # a double rotation is one rotation event made of two steps
            assert counter.reset() <= 2

    assert tree.is_balanced()


def test_delete_rotates_at_most_once():
    keys = random.sample(range(INTEGER_MAX), TREE_MAX_SIZE)
    tree = make_tree(keys, debug=False)
    random.shuffle(keys)

    with RotationCounter() as counter:
        for key in keys:
            tree.delete(key)
            assert counter.reset() <= 2

    assert tree.is_empty()


def test_rotation_counters_do_not_nest():
    with RotationCounter():
        with pytest.raises(RuntimeError):
            with RotationCounter():
                pass

    # the original method is back in place
    tree = make_tree([1, 2, 3])
    assert tree.is_balanced()


@pytest.mark.parametrize('order', ['ascending', 'descending', 'shuffled'])
def test_rebalancing_is_amortized_constant(order):
    size = 2000
    keys = list(range(size))
    if order == 'descending':
        keys.reverse()
    elif order == 'shuffled':
        random.shuffle(keys)

    tree = WAVLTree()
    total = 0
    for key in keys:
        total += tree.insert(key, key)
    assert total <= 8 * size

    random.shuffle(keys)
    total = 0
    for key in keys:
        total += tree.delete(key)
    assert total <= 8 * size


def test_faster_than_naive():

    def make_wavl_tree(values):
        out = WAVLTree()
        for value in values:
            if value not in out:
                out.insert(value, value)
        return out

    def make_naive(values):
        out = dict()
        for value in values:
            out[value] = value
            out = sorted(out.items())
            out = dict(out)
        return out

    values = [random.randint(-INTEGER_MAX, INTEGER_MAX) for _ in range(2000)]

    start = time.perf_counter()
    make_wavl_tree(values)
    wavl_timing = time.perf_counter() - start

    start = time.perf_counter()
    make_naive(values)
    naive_timing = time.perf_counter() - start

    assert wavl_timing < naive_timing
