"""
Ordered, case-insensitively deduplicated collection of source file paths.
"""

from typing import Iterable, Iterator, List, Set, Tuple


class OrderedFileSet:
    """Keeps source paths in the order the user assembled them.

    The list holds the order; the set holds case-folded keys so duplicates
    are detected in constant time. Both are always mutated together.
    """

    def __init__(self, paths: Iterable[str] = ()):
        self._ordered_paths: List[str] = []
        self._keys: Set[str] = set()
        self.add(paths)

    @staticmethod
    def _key(path: str) -> str:
        return path.casefold()

    def add(self, paths: Iterable[str]) -> None:
        """Append each path not already present; duplicates are skipped."""
        for path in paths:
            key = self._key(path)
            if key in self._keys:
                continue
            self._keys.add(key)
            self._ordered_paths.append(path)

    def remove(self, paths: Iterable[str]) -> None:
        """Remove every entry matching one of the given paths."""
        doomed = {self._key(path) for path in paths} & self._keys
        if not doomed:
            return

        self._ordered_paths = [
            path for path in self._ordered_paths if self._key(path) not in doomed
        ]
        self._keys -= doomed

    def clear(self) -> None:
        self._ordered_paths.clear()
        self._keys.clear()

    def move(self, index: int, delta: int) -> int:
        """Move the entry at ``index`` by ``delta`` positions.

        Moves that start or end outside the list are rejected, not clamped.
        Returns the entry's index after the call.
        """
        count = len(self._ordered_paths)
        if not 0 <= index < count:
            return index

        target = index + delta
        if not 0 <= target < count:
            return index

        path = self._ordered_paths.pop(index)
        self._ordered_paths.insert(target, path)
        return target

    def snapshot(self) -> Tuple[str, ...]:
        """Current order as an immutable copy."""
        return tuple(self._ordered_paths)

    def __len__(self) -> int:
        return len(self._ordered_paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self._key(path) in self._keys

    def __repr__(self) -> str:
        return f"OrderedFileSet({self._ordered_paths!r})"
