import timeit

import sortedcontainers

import wavltree


def tree_from(items):
    t = wavltree.WAVLTree()
    for k, v in items:
        t.insert(k, v)
    return t


def tree_set(t, k, v):
    if k in t:
        t.delete(k)
    t.insert(k, v)
    return t


def tree_select(t, i):
    return t.select(i + 1)


def dict_set(m, k, v):
    m[k] = v
    return m


def dict_select(m, i):
    # What a plain dict has to do to answer an order statistic.
    return m[sorted(m)[i]]


def sorted_dict_select(m, i):
    return m.peekitem(i)[1]


implementations = (
    (
        'WAVLTree',
        tree_from,
        tree_set,
        tree_select,
    ),
    (
        'SortedDict',
        sortedcontainers.SortedDict,
        dict_set,
        sorted_dict_select,
    ),
    (
        'dict',
        dict,
        dict_set,
        dict_select,
    ),
)


# This test does not care about dataset size so it's handled separately.
print('Create empty:')
for iname, map, *_ in implementations:
    timer = timeit.Timer('map(())', globals={'map': map})
    loop_count, seconds = timer.autorange()
    print('\t%s:\t%.2g' % (iname, seconds / loop_count))


tests = (
    ("Create", "map((i, i) for i in range(data_size))", "pass"),

    (
        "Random set to",
        "for i in values: m = set(m, i, -i)",
        """
m = map((i, i) for i in range(data_size))

values = list(range(data_size))
import random
random.seed(42)
random.shuffle(values)
values = values[:1000]
        """,
    ),

    (
        "Random select from",
        "for i in positions: select(m, i)",
        """
m = map((i, i) for i in range(data_size))

import random
random.seed(42)
positions = [random.randrange(data_size) for _ in range(100)]
        """,
    ),

    (
        "Iterate keys from",
        "for k in m: pass",
        "m = map((i, i) for i in range(data_size))",
    ),

    (
        "Iterate values from",
        "for k in m.values(): pass",
        "m = map((i, i) for i in range(data_size))",
    ),

    (
        "Iterate items from",
        "for k in m.items(): pass",
        "m = map((i, i) for i in range(data_size))",
    ),

)
for test_name, test, test_setup in tests:
    for dname, dsize in (('small', 10), ('medium', 2000), ('large', 100_000)):
        print(test_name, dname, ':')

        for iname, map, set, select in implementations:
            timer = timeit.Timer(
                test,
                setup=test_setup,
                globals={
                    'map': map,
                    'set': set,
                    'select': select,
                    'data_name': dname,
                    'data_size': dsize,
                },
            )
            loop_count, seconds = timer.autorange()
            print('\t%s:\t%.2g' % (iname, seconds / loop_count))
