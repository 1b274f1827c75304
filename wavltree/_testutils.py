from .node import Node
from .node import Side
from .tree import WAVLTree


_rotate_up = Node.rotate_up


def make_tree(keys, *, debug=True):
    tree = WAVLTree(debug=debug)
    for key in keys:
        tree.insert(key, key)
    return tree


def make_node(key, rank, left=None, right=None):
    # Hand-built subtrees for exercising the node-level operations;
    # sizes are computed, ranks are taken as given.
    node = Node(key, key)
    node.rank = rank
    if left is not None:
        node.set_child(Side.LEFT, left)
    if right is not None:
        node.set_child(Side.RIGHT, right)
    node.update_size()
    return node


class RotationCounter:
    """Count Node.rotate_up() calls made inside the `with` block."""

    def __init__(self):
        self.count = 0

    def reset(self):
        count = self.count
        self.count = 0
        return count

    def __enter__(self):
        if Node.rotate_up is not _rotate_up:
            raise RuntimeError('cannot nest rotation counters')

        counter = self

        def rotate_up(node):
            counter.count += 1
            return _rotate_up(node)

        Node.rotate_up = rotate_up
        return self

    def __exit__(self, *exc):
        Node.rotate_up = _rotate_up
