import collections.abc
import enum
import logging
import os
import reprlib

from .node import EXTERNAL
from .node import Node
from .node import Side


__all__ = ('WAVLTree', 'DuplicateKeyError')


logger = logging.getLogger(__name__)


# Set DEBUG_WAVLTREE=1 to validate the whole tree after every insert
# and delete.  Individual trees can override this with `debug=`.
DEBUG = os.environ.get('DEBUG_WAVLTREE') == '1'


_NOT_SET = object()


class DuplicateKeyError(KeyError):
    pass


class InsertCase(enum.Enum):
    # the parent of the promoted node absorbed the promotion
    ABSORBED = 0
    # (0,1) at the parent: promote it and move up
    PROMOTE = 1
    # (0,2), inner child of the promoted node at difference 2
    ROTATE = 2
    # (0,2), inner child of the promoted node at difference 1
    DOUBLE_ROTATE = 3


def _check_key(key):
    if not isinstance(key, int) or isinstance(key, bool):
        raise TypeError(
            'WAVLTree keys must be integers, got {!r}'.format(
                type(key).__name__))


def _insert_case(x):
    # `x` has just been promoted and has a parent.
    z = x.parent
    d = x.side()

    if z.rank_diff(d) != 0:
        return InsertCase.ABSORBED
    if z.rank_diff(d.opposite) == 1:
        return InsertCase.PROMOTE
    if x.rank_diff(d.opposite) == 2:
        return InsertCase.ROTATE
    return InsertCase.DOUBLE_ROTATE


def _rebalance_insert(x):
    ops = 0

    while x.parent is not None:
        case = _insert_case(x)

        if case is InsertCase.ABSORBED:
            break

        z = x.parent

        if case is InsertCase.PROMOTE:
            z.promote()
            ops += 1
            x = z
            continue

        if case is InsertCase.ROTATE:
            x.rotate_up()
            z.demote()
            ops += 2
        else:
            y = x.child(x.side().opposite)
            y.rotate_up()
            y.rotate_up()
            y.promote()
            x.demote()
            z.demote()
            ops += 5
        break

    return ops


def _node_iter(node):
    if node.left.internal:
        yield from _node_iter(node.left)

    yield node

    if node.right.internal:
        yield from _node_iter(node.right)


def _node_is_balanced(node):
    if not node.internal:
        return node.rank == -1 and node.size == 0

    if node.is_leaf() and node.rank != 0:
        return False

    for diff in node.rank_diffs():
        if diff not in (1, 2):
            return False

    if node.size != node.left.size + node.right.size + 1:
        return False

    for side in Side:
        child = node.child(side)
        if child.internal and child.parent is not node:
            return False

    return _node_is_balanced(node.left) and _node_is_balanced(node.right)


class GenWrapper:

    def __init__(self, count, gen):
        self.__count = count
        self.__gen = gen

    def __len__(self):
        return self.__count

    def __iter__(self):
        return self

    def __next__(self):
        return next(self.__gen)


class WAVLTree:

    def __init__(self, key=_NOT_SET, value=None, *, debug=None):
        self.__root = EXTERNAL
        self.__min = EXTERNAL
        self.__max = EXTERNAL
        self.__debug = DEBUG if debug is None else debug

        if key is not _NOT_SET:
            self.insert(key, value)

    def __len__(self):
        return self.__root.size

    def __eq__(self, other):
        if not isinstance(other, WAVLTree):
            return NotImplemented

        if len(self) != len(other):
            return False

        for (key, val), (okey, oval) in zip(self.items(), other.items()):
            if key != okey or val != oval:
                return False

        return True

    __hash__ = None

    def size(self):
        return self.__root.size

    def is_empty(self):
        return not self.__root.internal

    def root_rank(self):
        return self.__root.rank

    def __find(self, key):
        # The node holding `key`, or the node that would become its
        # parent.  The tree must not be empty.
        node = self.__root
        while True:
            if key < node.key:
                nxt = node.left
            elif node.key < key:
                nxt = node.right
            else:
                return node

            if not nxt.internal:
                return node
            node = nxt

    def __lookup(self, key):
        _check_key(key)

        if not self.__root.internal:
            return None

        if key < self.__min.key or self.__max.key < key:
            return None

        node = self.__find(key)
        if node.key == key:
            return node
        return None

    def __reanchor(self):
        root = self.__root
        while root.parent is not None:
            root = root.parent
        self.__root = root

    def __validate(self):
        if not self.is_balanced():
            logger.debug('invalid tree:\n%s', self.__dump__())
            raise AssertionError('WAVL tree invariants do not hold')

    def search(self, key):
        node = self.__lookup(key)
        if node is None:
            return None
        return node.value

    def get(self, key, default=None):
        node = self.__lookup(key)
        if node is None:
            return default
        return node.value

    def __getitem__(self, key):
        node = self.__lookup(key)
        if node is None:
            raise KeyError(key)
        return node.value

    def __contains__(self, key):
        return self.__lookup(key) is not None

    def insert(self, key, value):
        """Insert `key` with `value`.

        Returns the number of promotions, demotions and rotations done
        to rebalance the tree.  Raises DuplicateKeyError, leaving the
        tree untouched, if `key` is already present.
        """
        _check_key(key)
        new = Node(key, value)

        if not self.__root.internal:
            self.__root = self.__min = self.__max = new
            return 0

        parent = self.__find(key)
        if parent.key == key:
            raise DuplicateKeyError(key)

        if key < parent.key:
            parent.set_child(Side.LEFT, new)
        else:
            parent.set_child(Side.RIGHT, new)

        if key < self.__min.key:
            self.__min = new
        if self.__max.key < key:
            self.__max = new

        ops = 0
        if parent.rank_diffs() != (1, 1):
            # `parent` was a leaf; the new child sits at difference 0.
            parent.promote()
            ops = 1 + _rebalance_insert(parent)

        new.update_size_to_top()
        self.__reanchor()

        if self.__debug:
            self.__validate()
        return ops

    def __unlink(self, node):
        # Remove a leaf or unary node; returns the node to rebalance
        # from, or None when `node` was the root.
        if node.left.internal:
            child = node.left
        else:
            child = node.right

        parent = node.parent
        if parent is None:
            self.__root = child
            if child.internal:
                child.parent = None
            return None

        parent.set_child(node.side(), child)
        return parent

    def __unlink_binary(self, node):
        # Move the successor into the place of `node`, then take the
        # successor out of its old place.  Nodes are relinked rather
        # than having their keys and values copied, so the cached
        # min/max nodes stay valid.
        succ = node.right.extreme(Side.LEFT)

        if succ.parent is node:
            start = succ
        else:
            start = succ.parent
            start.set_child(Side.LEFT, succ.right)
            succ.set_child(Side.RIGHT, node.right)

        succ.set_child(Side.LEFT, node.left)
        succ.rank = node.rank

        parent = node.parent
        if parent is None:
            succ.parent = None
            self.__root = succ
        else:
            parent.set_child(node.side(), succ)

        return start

    def delete(self, key):
        """Delete `key` from the tree.

        Returns the number of promotions, demotions and rotations done
        to rebalance the tree.  Raises KeyError, leaving the tree
        untouched, if `key` is not present.
        """
        node = self.__lookup(key)
        if node is None:
            raise KeyError(key)

        if node is self.__min and node is self.__max:
            self.__min = self.__max = EXTERNAL
        elif node is self.__min:
            self.__min = node.successor()
        elif node is self.__max:
            self.__max = node.predecessor()

        if node.left.internal and node.right.internal:
            start = self.__unlink_binary(node)
        else:
            start = self.__unlink(node)

        node.left = node.right = EXTERNAL
        node.parent = None

        ops = 0
        if start is not None:
            start.update_size_to_top()
            ops = start.rebalance_after_delete()
            self.__reanchor()

        if self.__debug:
            self.__validate()
        return ops

    def min(self):
        if not self.__min.internal:
            return None
        return self.__min.value

    def max(self):
        if not self.__max.internal:
            return None
        return self.__max.value

    def min_key(self):
        return self.__min.key

    def max_key(self):
        return self.__max.key

    def select(self, i):
        """Return the value of the i-th smallest key, counting from 1."""
        if not 1 <= i <= self.__root.size:
            raise IndexError('select index out of range')

        i -= 1
        node = self.__root
        while True:
            left = node.left.size
            if i == left:
                return node.value
            if i < left:
                node = node.left
            else:
                i -= left + 1
                node = node.right

    def successor(self, key):
        node = self.__lookup(key)
        if node is None:
            raise KeyError(key)

        nxt = node.successor()
        if nxt is None:
            return None
        return nxt.key, nxt.value

    def predecessor(self, key):
        node = self.__lookup(key)
        if node is None:
            raise KeyError(key)

        prev = node.predecessor()
        if prev is None:
            return None
        return prev.key, prev.value

    def __nodes(self):
        if self.__root.internal:
            yield from _node_iter(self.__root)

    def keys_to_array(self):
        return [node.key for node in self.__nodes()]

    def values_to_array(self):
        return [node.value for node in self.__nodes()]

    def __iter__(self):
        for node in self.__nodes():
            yield node.key

    def keys(self):
        return GenWrapper(
            self.__root.size, (node.key for node in self.__nodes()))

    def values(self):
        return GenWrapper(
            self.__root.size, (node.value for node in self.__nodes()))

    def items(self):
        return GenWrapper(
            self.__root.size,
            ((node.key, node.value) for node in self.__nodes()))

    def is_balanced(self):
        """Check every structural invariant of the tree."""
        root = self.__root

        if not root.internal:
            return self.__min is EXTERNAL and self.__max is EXTERNAL

        if root.parent is not None or not _node_is_balanced(root):
            return False

        prev = None
        for node in _node_iter(root):
            if prev is not None and not prev.key < node.key:
                return False
            prev = node

        return (
            self.__min is root.extreme(Side.LEFT)
            and self.__max is root.extreme(Side.RIGHT)
        )

    @classmethod
    def __class_getitem__(cls, item):
        return cls

    @reprlib.recursive_repr("{...}")
    def __repr__(self):
        items = []
        for key, val in self.items():
            items.append("{!r}: {!r}".format(key, val))
        return '<wavltree.WAVLTree({{{}}}) at 0x{:0x}>'.format(
            ', '.join(items), id(self))

    def __dump__(self):  # pragma: no cover
        buf = []
        if self.__root.internal:
            self.__root.dump(buf, 0)
        return '\n'.join(buf)


collections.abc.Mapping.register(WAVLTree)
