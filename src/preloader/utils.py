import os
from pathlib import Path
from typing import Generic, Hashable, Iterable, Iterator, TypeVar, Union

_T = TypeVar("_T", bound=Hashable)


def expanded_path(path: Union[str, Path]) -> Path:
    """
    Expands environment variables, user tilde, and normalizes path separators
    in a given path.

    :param path: The path to expand.
    :return: The expanded and normalized path as a Path object.
    """
    if isinstance(path, Path):
        path = str(path)

    # Expand environment variables and user (~)
    return Path(os.path.expandvars(os.path.expanduser(path)))


class OrderedSet(Generic[_T]):
    """
    Insertion-ordered set. Adding an existing item keeps its first position.
    """

    def __init__(self, items: Iterable[_T] = ()):
        self._items: dict[_T, None] = {}
        for item in items:
            self.add(item)

    def add(self, item: _T) -> bool:
        """Add an item; return True if it was not present before."""
        if item in self._items:
            return False
        self._items[item] = None
        return True

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[_T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._items)!r})"

    def to_list(self) -> list[_T]:
        return list(self._items)
