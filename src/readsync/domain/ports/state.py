"""Ports for item state side effects."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from readsync.domain.model import Item


@runtime_checkable
class NewItemCounter(Protocol):
    """Global count of unseen items shown in the feed list."""

    def get(self) -> int: ...

    def set(self, value: int) -> None: ...


@runtime_checkable
class ReadStateMutator(Protocol):
    def set_read_state(self, item: Item, read: bool, *, notify: bool = True) -> None: ...
