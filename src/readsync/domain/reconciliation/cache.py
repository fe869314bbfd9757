"""Pass-scoped mapping from remote identifiers to local surrogate keys."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class IdentifierCache:
    """Remote id -> local surrogate key, grown while the item set is scanned.

    ``visited`` counts the leading positions of the item set that have already
    been inspected. Items without a remote id are counted there but never enter
    the mapping, so ``visited`` is at least ``len(self)``.
    """

    _keys: dict[str, int] = field(default_factory=dict[str, int])
    visited: int = 0

    def lookup(self, remote_id: str) -> int | None:
        return self._keys.get(remote_id)

    def insert(self, remote_id: str, local_key: int) -> None:
        self._keys[remote_id] = local_key

    def size(self) -> int:
        return len(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, remote_id: object) -> bool:
        return remote_id in self._keys
