"""Read remote identifier and read state from Atom entries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from .contracts import EntryState
from .errors import MissingIdentifierError

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

READ_LABEL: Final[str] = "read"


def local_name(tag: object) -> str:
    """Return ``tag`` without its ``{namespace}`` prefix.

    Comments and processing instructions have non-string tags and yield ``""``.
    """

    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def extract_entry_state(entry: Element) -> EntryState:
    """Return the remote id and read flag carried by ``entry``.

    The id is the unmodified text of the first ``id`` child; a blank id counts as
    missing. The entry is read when any ``category`` child has ``label="read"``;
    other labels (starred, liked, ...) are not synchronized.
    """

    remote_id: str | None = None
    is_read = False
    for child in entry:
        name = local_name(child.tag)
        if name == "id" and remote_id is None:
            remote_id = "".join(child.itertext())
        elif name == "category" and child.get("label") == READ_LABEL:
            is_read = True

    if remote_id is None or not remote_id.strip():
        raise MissingIdentifierError("Remote entry has no id")
    return EntryState(remote_id=remote_id, is_read=is_read)
