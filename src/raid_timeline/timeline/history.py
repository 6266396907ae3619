"""Bounded undo/redo history over immutable mechanic snapshots."""

from typing import Generic, TypeVar

from ..constants import HISTORY_LIMIT

T = TypeVar("T")


class History(Generic[T]):
    """
    Linear undo history.

    Entries are immutable values, so the history only stores references.
    Pushing after an undo discards the redo branch; once ``limit`` entries
    are stored the oldest ones are dropped.
    """

    def __init__(self, initial: T, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError(f"History limit must be at least 1 (got {limit})")
        self.limit = limit
        self._entries: tuple[T, ...] = (initial,)
        self._index = 0

    @property
    def current(self) -> T:
        return self._entries[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def push(self, entry: T) -> T:
        entries = self._entries[: self._index + 1] + (entry,)
        self._entries = entries[-self.limit :]
        self._index = len(self._entries) - 1
        return entry

    def undo(self) -> T:
        if self.can_undo:
            self._index -= 1
        return self.current

    def redo(self) -> T:
        if self.can_redo:
            self._index += 1
        return self.current

    def __len__(self) -> int:
        return len(self._entries)
