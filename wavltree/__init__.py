# flake8: noqa

from .tree import WAVLTree
from .tree import DuplicateKeyError

from ._protocols import TreeKeys as TreeKeys
from ._protocols import TreeValues as TreeValues
from ._protocols import TreeItems as TreeItems

from ._version import __version__

__all__ = 'WAVLTree', 'DuplicateKeyError'
