from typing import Iterator
from typing import Protocol
from typing import Tuple
from typing import TypeVar

T = TypeVar('T')
VT = TypeVar('VT')
VT_co = TypeVar('VT_co', covariant=True)


class TreeKeys(Protocol):
    def __len__(self) -> int: ...
    def __iter__(self) -> Iterator[int]: ...
    def __next__(self) -> int: ...


class TreeValues(Protocol[VT_co]):
    def __len__(self) -> int: ...
    def __iter__(self) -> Iterator[VT_co]: ...
    def __next__(self) -> VT_co: ...


class TreeItems(Protocol[VT_co]):
    def __len__(self) -> int: ...
    def __iter__(self) -> Iterator[Tuple[int, VT_co]]: ...
    def __next__(self) -> Tuple[int, VT_co]: ...
