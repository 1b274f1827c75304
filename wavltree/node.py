import enum
import logging


__all__ = ('Side', 'DeleteCase', 'Node', 'EXTERNAL')


logger = logging.getLogger(__name__)


#
# Nodes of a WAVL tree (Haeupler, Sen & Tarjan, "Rank-Balanced Trees")
#
# ref: https://sidsen.azurewebsites.net/papers/rb-trees-talg.pdf
#
# Every node carries a rank.  The rank difference of a child is its
# parent's rank minus its own; missing children are represented by the
# EXTERNAL node of rank -1.  In a valid tree every rank difference is
# 1 or 2 and every leaf has rank 0.
#


class Side(enum.Enum):
    LEFT = 0
    RIGHT = 1

    @property
    def opposite(self):
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


class DeleteCase(enum.Enum):
    # rank rule holds, nothing to do
    VALID = 0
    # (2,2) leaf: demote and move up
    LEAF_22 = 1
    # (3,2): demote and move up
    DEMOTE = 2
    # (3,1) with a (2,2) sibling: demote both and move up
    DOUBLE_DEMOTE = 3
    # (3,1), sibling's outer difference is 1: single rotation
    ROTATE = 4
    # (3,1), sibling's outer difference is 2: double rotation
    DOUBLE_ROTATE = 5


class _External:
    """The absent subtree.

    There is exactly one instance, EXTERNAL.  It has no children and its
    rank and size are fixed; any attempt to change them fails.
    """

    __slots__ = ()

    internal = False
    rank = -1
    size = 0
    key = None
    value = None

    def __repr__(self):
        return '<EXTERNAL>'


EXTERNAL = _External()


class Node:

    __slots__ = ('key', 'value', 'rank', 'size', 'left', 'right', 'parent')

    internal = True

    def __init__(self, key, value):
        self.key = key
        self.value = value
        self.rank = 0
        self.size = 1
        self.left = EXTERNAL
        self.right = EXTERNAL
        self.parent = None

    def __repr__(self):
        return '<Node key:{!r} rank:{} size:{}>'.format(
            self.key, self.rank, self.size)

    def child(self, side):
        if side is Side.LEFT:
            return self.left
        return self.right

    def set_child(self, side, node):
        if side is Side.LEFT:
            self.left = node
        else:
            self.right = node
        if node.internal:
            node.parent = self

    def side(self):
        # Which child of its parent this node is; the node must not
        # be a root.
        if self.parent.left is self:
            return Side.LEFT
        return Side.RIGHT

    def is_leaf(self):
        return not self.left.internal and not self.right.internal

    def rank_diff(self, side):
        return self.rank - self.child(side).rank

    def rank_diffs(self):
        return self.rank - self.left.rank, self.rank - self.right.rank

    def promote(self):
        self.rank += 1

    def demote(self):
        self.rank -= 1

    def update_size(self):
        self.size = self.left.size + self.right.size + 1

    def update_size_to_top(self):
        node = self
        while node is not None:
            node.update_size()
            node = node.parent

    def extreme(self, side):
        node = self
        while node.child(side).internal:
            node = node.child(side)
        return node

    def _step(self, side):
        # The neighbour in direction `side`: the nearest node of the
        # `side` subtree if there is one, otherwise the first ancestor
        # reached from its opposite side.
        near = self.child(side)
        if near.internal:
            return near.extreme(side.opposite)

        node = self
        while node.parent is not None and node.side() is side:
            node = node.parent
        return node.parent

    def successor(self):
        return self._step(Side.RIGHT)

    def predecessor(self):
        return self._step(Side.LEFT)

    def rotate_up(self):
        """Rotate this node above its parent.

        The parent becomes a child of this node on the opposite side,
        and the inner subtree of this node moves under the old parent.
        Subtree sizes are fixed up; ranks are left to the caller.  When
        the old parent was a root, this node ends up with no parent and
        the owner of the tree has to adopt it as the new root.
        """
        x = self
        z = x.parent
        d = x.side()
        top = z.parent

        if top is None:
            x.parent = None
        else:
            top.set_child(z.side(), x)

        z.set_child(d, x.child(d.opposite))
        x.set_child(d.opposite, z)

        z.update_size()
        x.update_size()

        logger.debug('rotated %r above %r', x.key, z.key)
        return x

    def classify_delete(self):
        l, r = self.rank_diffs()

        if (l, r) in ((1, 1), (1, 2), (2, 1)):
            return DeleteCase.VALID

        if (l, r) == (2, 2):
            if self.is_leaf():
                return DeleteCase.LEAF_22
            return DeleteCase.VALID

        far = Side.LEFT if l == 3 else Side.RIGHT
        near = far.opposite
        assert self.rank_diff(far) == 3, (l, r)

        if self.rank_diff(near) == 2:
            return DeleteCase.DEMOTE

        sibling = self.child(near)
        if sibling.rank_diffs() == (2, 2):
            return DeleteCase.DOUBLE_DEMOTE
        if sibling.rank_diff(near) == 1:
            return DeleteCase.ROTATE
        return DeleteCase.DOUBLE_ROTATE

    def rebalance_after_delete(self):
        """Restore the rank rule after this node lost rank below it.

        Walks up while the violation is pushed to the parent by
        demotions; a rotation case always ends the walk.  Returns the
        number of promotions, demotions and rotations performed.
        """
        ops = 0
        x = self

        while x is not None:
            case = x.classify_delete()

            if case is DeleteCase.VALID:
                break

            if case is DeleteCase.LEAF_22 or case is DeleteCase.DEMOTE:
                x.demote()
                ops += 1
                x = x.parent
                continue

            far = Side.LEFT if x.rank_diff(Side.LEFT) == 3 else Side.RIGHT
            near = far.opposite
            c = x.child(near)

            if case is DeleteCase.DOUBLE_DEMOTE:
                x.demote()
                c.demote()
                ops += 2
                x = x.parent
                continue

            if case is DeleteCase.ROTATE:
                c.rotate_up()
                c.promote()
                x.demote()
                if x.is_leaf() and x.rank_diffs() == (2, 2):
                    x.demote()
                ops += 3
                break

            # DeleteCase.DOUBLE_ROTATE
            g = c.child(far)
            x.demote()
            x.demote()
            c.demote()
            g.promote()
            g.promote()
            g.rotate_up()
            g.rotate_up()
            ops += 5
            break

        return ops

    def dump(self, buf, level):  # pragma: no cover
        pad = '    ' * (level + 1)
        buf.append('{}Node(key={!r} rank={} size={} id={:0x}): {!r}'.format(
            pad, self.key, self.rank, self.size, id(self), self.value))

        for side in Side:
            child = self.child(side)
            if child.internal:
                buf.append('{}{}:'.format(pad, side.name))
                child.dump(buf, level + 1)
